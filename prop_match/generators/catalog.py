"""Synthetic Costa del Sol property catalogs.

Locations come from a small gazetteer of real urbanizations and suburbs.
A configurable share of records gets the kind of noise seen in listing
feeds (lost accents, casing, punctuation, typos, missing tiers) so that
grouping has near-duplicates to merge.
"""

from __future__ import annotations

from typing import Iterator

from prop_match.generators.base import BaseGenerator
from prop_match.models.base import Coordinates
from prop_match.models.enums import ListingType, PropertyType
from prop_match.models.property import PropertyRecord

# city -> (centre, suburbs, urbanizations)
GAZETTEER: dict[str, tuple[tuple[float, float], list[str], list[str]]] = {
    "Marbella": (
        (36.5101, -4.8825),
        ["Nueva Andalucía", "Puerto Banús", "Golden Mile", "San Pedro de Alcántara", "Elviria"],
        ["Los Naranjos", "Aloha", "La Quinta", "Sierra Blanca", "Marbella Club", "Las Brisas"],
    ),
    "Estepona": (
        (36.4276, -5.1463),
        ["El Padrón", "Cancelada", "Selwo"],
        ["El Paraíso", "Valle Romano", "Atalaya Park"],
    ),
    "Benahavís": (
        (36.5233, -5.0461),
        ["La Zagaleta", "El Madroñal"],
        ["Los Arqueros", "La Heredia", "Monte Halcones"],
    ),
    "Mijas": (
        (36.5957, -4.6373),
        ["La Cala de Mijas", "Calahonda", "Riviera del Sol"],
        ["El Chaparral", "La Cala Golf", "Calanova"],
    ),
    "Fuengirola": (
        (36.5398, -4.6247),
        ["Los Boliches", "Torreblanca", "Carvajal"],
        [],
    ),
}

FEATURES = [
    "Pool",
    "Garden",
    "Sea Views",
    "Mountain Views",
    "Terrace",
    "Garage",
    "Air Conditioning",
    "Gated Community",
    "Gym",
    "Lift",
    "Storage Room",
    "Fireplace",
]

PROPERTY_TYPES = [PropertyType.APARTMENT, PropertyType.VILLA, PropertyType.TOWNHOUSE, PropertyType.PENTHOUSE]
PROPERTY_TYPE_WEIGHTS = [0.45, 0.25, 0.2, 0.1]

LISTING_TYPES = [ListingType.SALE, ListingType.LONG_TERM, ListingType.SHORT_TERM]
LISTING_TYPE_WEIGHTS = [0.7, 0.2, 0.1]

# Sale price per m2 by property type (EUR)
PRICE_PER_SQM = {
    PropertyType.APARTMENT: (2500, 6000),
    PropertyType.VILLA: (3500, 9000),
    PropertyType.TOWNHOUSE: (2500, 5000),
    PropertyType.PENTHOUSE: (3500, 8000),
}

BUILD_AREA = {
    PropertyType.APARTMENT: (45, 160),
    PropertyType.VILLA: (180, 900),
    PropertyType.TOWNHOUSE: (90, 250),
    PropertyType.PENTHOUSE: (80, 300),
}

_ACCENTS = str.maketrans("áéíóúñüÁÉÍÓÚÑÜ", "aeiounuAEIOUNU")


class CatalogGenerator(BaseGenerator):
    """Generate synthetic catalog properties.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    noise_rate : float
        Probability that a record's location text is perturbed.
    coordinate_rate : float
        Probability that a record already has coordinates.
    cities : list[str] | None
        Restrict generation to these gazetteer cities.
    """

    def __init__(
        self,
        seed: int | None = None,
        noise_rate: float = 0.3,
        coordinate_rate: float = 0.4,
        cities: list[str] | None = None,
    ) -> None:
        super().__init__(seed)
        self.noise_rate = noise_rate
        self.coordinate_rate = coordinate_rate
        self.cities = cities or list(GAZETTEER)
        self._counter = 0

    def generate(self) -> PropertyRecord:
        """Generate a single property."""
        return self._generate_one()

    def generate_batch(self, count: int) -> Iterator[PropertyRecord]:
        """Generate ``count`` properties lazily."""
        for _ in range(count):
            yield self._generate_one()

    def generate_catalog(self, count: int) -> list[PropertyRecord]:
        return list(self.generate_batch(count))

    def _generate_one(self) -> PropertyRecord:
        self._counter += 1
        rnd = self.random

        city = rnd.choice(self.cities)
        (lat, lng), suburbs, urbanizations = GAZETTEER[city]

        # Not every listing knows its urbanization or suburb
        suburb = rnd.choice(suburbs) if suburbs and rnd.random() < 0.75 else None
        urbanization = rnd.choice(urbanizations) if urbanizations and rnd.random() < 0.5 else None

        if rnd.random() < self.noise_rate:
            urbanization = self.add_noise(urbanization)
            suburb = self.add_noise(suburb)
            city = self.add_noise(city) if rnd.random() < 0.3 else city

        coordinates = None
        if rnd.random() < self.coordinate_rate:
            coordinates = Coordinates(
                latitude=round(lat + rnd.uniform(-0.03, 0.03), 6),
                longitude=round(lng + rnd.uniform(-0.03, 0.03), 6),
            )

        property_type = rnd.choices(PROPERTY_TYPES, weights=PROPERTY_TYPE_WEIGHTS, k=1)[0]
        listing_type = rnd.choices(LISTING_TYPES, weights=LISTING_TYPE_WEIGHTS, k=1)[0]
        low, high = BUILD_AREA[property_type]
        build_area = float(rnd.randint(low, high))
        bedrooms = max(1, min(8, int(build_area // 45)))

        low, high = PRICE_PER_SQM[property_type]
        sale_price = round(build_area * rnd.uniform(low, high), -3)
        prices: dict[str, float] = {}
        if listing_type == ListingType.SALE:
            prices["sale_price"] = sale_price
        elif listing_type == ListingType.LONG_TERM:
            prices["monthly_price"] = round(sale_price * 0.004, -1)
        else:
            prices["weekly_price"] = round(sale_price * 0.002, -1)

        return PropertyRecord(
            property_id=self.fake.uuid4(),
            reference=f"R{self._counter:07d}",
            urbanization=urbanization,
            suburb=suburb,
            city=city,
            address=self.fake.street_address() if rnd.random() < 0.6 else None,
            coordinates=coordinates,
            build_area=build_area,
            plot_area=float(rnd.randint(400, 3000)) if property_type == PropertyType.VILLA else None,
            bedrooms=bedrooms,
            bathrooms=max(1, bedrooms - rnd.randint(0, 1)),
            features=tuple(rnd.sample(FEATURES, k=rnd.randint(0, 5))),
            property_type=property_type.value,
            listing_type=listing_type,
            **prices,
        )

    def add_noise(self, name: str | None) -> str | None:
        """Perturb a location name the way listing feeds do."""
        if not name:
            return name
        rnd = self.random
        kind = rnd.choice(("accents", "case", "punctuation", "typo", "whitespace"))
        if kind == "accents":
            return name.translate(_ACCENTS)
        if kind == "case":
            return name.lower() if rnd.random() < 0.5 else name.upper()
        if kind == "punctuation":
            return name + rnd.choice((".", ",", " -", "!"))
        if kind == "typo" and len(name) > 4:
            i = rnd.randrange(1, len(name) - 1)
            return name[:i] + name[i + 1 :]
        return f"  {name}  "
