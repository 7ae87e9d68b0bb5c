"""Models for comparable-property matching."""

from dataclasses import dataclass
from datetime import datetime

from prop_match.exceptions import ValidationFailure
from prop_match.models.base import Coordinates
from prop_match.models.enums import DistanceMethod, ListingType, MarketPositionLabel, Volatility
from prop_match.models.property import PropertyRecord

# Sale listings above this price use the wider luxury price window
LUXURY_SALE_PRICE = 1_000_000

_PRICE_WINDOWS: dict[ListingType, tuple[float, float]] = {
    ListingType.SALE: (0.5, 1.5),
    ListingType.LONG_TERM: (0.6, 1.4),
    ListingType.SHORT_TERM: (0.4, 1.6),
}
_LUXURY_SALE_WINDOW = (0.2, 1.8)


@dataclass(frozen=True)
class SearchCriteria:
    """Read-only projection of a subject property used to search comparables."""

    reference: str
    coordinates: Coordinates | None
    urbanization: str | None
    suburb: str | None
    city: str | None
    property_type: str | None
    build_area: float | None
    bedrooms: int | None
    bathrooms: int | None
    price: float | None
    features: tuple[str, ...]
    listing_type: ListingType
    radius_km: float = 10.0
    min_price: float | None = None
    max_price: float | None = None

    @classmethod
    def from_record(cls, record: PropertyRecord, radius_km: float = 10.0) -> "SearchCriteria":
        """Project a property record into search criteria."""
        price = record.price
        min_price = max_price = None
        if price:
            low, high = _PRICE_WINDOWS[record.listing_type]
            if record.listing_type == ListingType.SALE and price > LUXURY_SALE_PRICE:
                low, high = _LUXURY_SALE_WINDOW
            min_price, max_price = price * low, price * high

        return cls(
            reference=record.reference,
            coordinates=record.coordinates,
            urbanization=record.urbanization,
            suburb=record.suburb,
            city=record.city,
            property_type=record.property_type,
            build_area=record.build_area,
            bedrooms=record.bedrooms,
            bathrooms=record.bathrooms,
            price=price,
            features=record.features,
            listing_type=record.listing_type,
            radius_km=radius_km,
            min_price=min_price,
            max_price=max_price,
        )

    @property
    def has_location(self) -> bool:
        return bool(self.urbanization or self.suburb or self.city)

    @property
    def has_property_data(self) -> bool:
        return bool(self.property_type) and bool(self.build_area or self.bedrooms is not None or self.price)

    def validation_reason(self) -> str | None:
        """Return why the criteria are unusable, or ``None`` when valid."""
        if self.coordinates is None and not self.has_location:
            return "Insufficient property data: no coordinates and no location name"
        if not self.property_type:
            return "Insufficient property data: property type is missing"
        if not self.has_property_data:
            return "Insufficient property data: need build area, bedrooms or price"
        return None

    def is_valid(self) -> bool:
        return self.validation_reason() is None

    def validate(self) -> None:
        """Raise ``ValidationFailure`` when the criteria cannot be searched."""
        reason = self.validation_reason()
        if reason:
            raise ValidationFailure(reason)


@dataclass(frozen=True)
class SimilarityScore:
    """Component distances and their percentage transforms for one candidate.

    ``total_score`` is lower-is-better; every ``*_percent`` is higher-is-better
    and lies in [0, 100].
    """

    distance_km: float
    size_delta: float
    price_delta: float
    bedroom_delta: int
    feature_score: int
    distance_percent: int
    size_percent: int
    price_percent: int
    bedroom_percent: int
    overall_percent: int
    total_score: float
    distance_method: DistanceMethod


@dataclass(frozen=True)
class ScoredComparable:
    """A candidate property enriched with its similarity score."""

    record: PropertyRecord
    score: SimilarityScore


@dataclass(frozen=True)
class PriceSummary:
    """Summary statistics over the retained comparables."""

    count: int
    average_price: float
    median_price: float
    min_price: float
    max_price: float
    average_match_percent: int
    average_price_per_sqm: float = 0


@dataclass(frozen=True)
class PriceDistribution:
    """Histogram of comparable prices with the subject's bucket."""

    histogram: tuple[int, ...]
    subject_bucket: int
    bucket_size: float
    min_price: float
    max_price: float


@dataclass(frozen=True)
class MarketPosition:
    """Where the subject price sits among comparable prices."""

    percentile: int
    vs_average: float | None
    vs_median: float | None
    label: MarketPositionLabel | None
    volatility: Volatility
    distribution: PriceDistribution | None = None
    insights: tuple[str, ...] = ()


@dataclass(frozen=True)
class ComparableResult:
    """Ranked, capped list of comparables for one subject property.

    Frozen because cache hits hand the same instance to every caller.
    """

    comparables: tuple[ScoredComparable, ...] = ()
    summary: PriceSummary | None = None
    market_position: MarketPosition | None = None
    message: str = ""
    criteria: SearchCriteria | None = None
    total_found: int = 0
    error: str | None = None
    cached_at: datetime | None = None

    @property
    def is_empty(self) -> bool:
        return not self.comparables
