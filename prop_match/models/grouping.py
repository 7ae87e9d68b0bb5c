"""Models for location grouping and geocoding planning."""

from dataclasses import dataclass, field

from prop_match.models.enums import LocationTier
from prop_match.models.property import PropertyRecord

UNKNOWN_KEY = "unknown"


@dataclass
class LocationGroup:
    """A canonical location shared by one or more catalog properties."""

    key: str
    members: list[PropertyRecord]
    representative: PropertyRecord
    tier: LocationTier
    urbanization_key: str = ""
    suburb_key: str = ""
    city_key: str = ""
    merged_from: list[str] = field(default_factory=list)

    @property
    def property_ids(self) -> list[str]:
        return [m.property_id for m in self.members]

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def primary_name(self) -> str:
        """Most specific normalized name (urbanization > suburb > city)."""
        return self.urbanization_key or self.suburb_key or self.city_key

    def display_location(self) -> str:
        rep = self.representative
        parts = [p for p in (rep.urbanization, rep.suburb, rep.city) if p]
        return ", ".join(parts) or "Unknown location"


@dataclass(frozen=True)
class GeocodingQueueEntry:
    """One external geocoding request covering a whole location group."""

    group_key: str
    property_ids: tuple[str, ...]
    query: str
    priority: int
    tier: LocationTier
    representative_reference: str = ""

    @property
    def property_count(self) -> int:
        return len(self.property_ids)


@dataclass(frozen=True)
class CostAnalysis:
    """Geocoding cost before and after grouping."""

    unit_price: float
    original_cost: float
    optimized_cost: float
    savings: float
    percentage: float


@dataclass(frozen=True)
class GroupDistribution:
    singletons: int
    multi_property: int
    largest_group: int
    average_size: float


@dataclass(frozen=True)
class GroupSummary:
    key: str
    property_count: int
    location: str
    tier: LocationTier
    representative: str


@dataclass
class GroupingAnalysis:
    """Cost and coverage report for one grouping run."""

    total_properties: int
    total_groups: int
    cost: CostAnalysis
    distribution: GroupDistribution
    top_groups: list[GroupSummary] = field(default_factory=list)
    fuzzy_merges: int = 0
    folded_singletons: int = 0
