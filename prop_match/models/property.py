"""Property record model as loaded from the catalog."""

import math
from dataclasses import dataclass, field

from prop_match.models.base import Coordinates, round_half_up
from prop_match.models.enums import ListingType


@dataclass(frozen=True)
class PropertyRecord:
    """A catalog property in canonical shape.

    Instances are produced by ``prop_match.ingest.record_from_row`` and are
    immutable for the duration of a matching or grouping pass.
    """

    property_id: str
    reference: str = ""
    urbanization: str | None = None
    suburb: str | None = None
    city: str | None = None
    address: str | None = None
    coordinates: Coordinates | None = None
    build_area: float | None = None  # Square meters
    plot_area: float | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    sale_price: float | None = None
    monthly_price: float | None = None
    weekly_price: float | None = None
    features: tuple[str, ...] = field(default_factory=tuple)
    property_type: str | None = None
    listing_type: ListingType = ListingType.SALE

    @property
    def price(self) -> float | None:
        """Price matching the listing type, else the first one available."""
        by_type = {
            ListingType.SALE: self.sale_price,
            ListingType.LONG_TERM: self.monthly_price,
            ListingType.SHORT_TERM: self.weekly_price,
        }[self.listing_type]
        if by_type:
            return by_type
        return self.sale_price or self.monthly_price or self.weekly_price

    @property
    def has_coordinates(self) -> bool:
        return self.coordinates is not None

    @property
    def price_per_sqm(self) -> float | None:
        price = self.price
        if price and self.build_area and self.build_area > 0:
            per_sqm = price / self.build_area
            if math.isfinite(per_sqm):
                return round_half_up(per_sqm)
        return None
