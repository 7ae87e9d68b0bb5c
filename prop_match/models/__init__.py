"""Domain models for property matching and location grouping."""

from prop_match.models.base import Coordinates, round_half_up
from prop_match.models.enums import (
    PROPERTY_TYPE_CODES,
    DistanceMethod,
    ListingType,
    LocationTier,
    MarketPositionLabel,
    PropertyType,
    Volatility,
)
from prop_match.models.grouping import (
    UNKNOWN_KEY,
    CostAnalysis,
    GeocodingQueueEntry,
    GroupDistribution,
    GroupingAnalysis,
    GroupSummary,
    LocationGroup,
)
from prop_match.models.matching import (
    ComparableResult,
    MarketPosition,
    PriceDistribution,
    PriceSummary,
    ScoredComparable,
    SearchCriteria,
    SimilarityScore,
)
from prop_match.models.property import PropertyRecord

__all__ = [
    "PROPERTY_TYPE_CODES",
    "UNKNOWN_KEY",
    "ComparableResult",
    "Coordinates",
    "CostAnalysis",
    "DistanceMethod",
    "GeocodingQueueEntry",
    "GroupDistribution",
    "GroupSummary",
    "GroupingAnalysis",
    "ListingType",
    "LocationGroup",
    "LocationTier",
    "MarketPosition",
    "MarketPositionLabel",
    "PriceDistribution",
    "PriceSummary",
    "PropertyRecord",
    "PropertyType",
    "ScoredComparable",
    "SearchCriteria",
    "SimilarityScore",
    "Volatility",
    "round_half_up",
]
