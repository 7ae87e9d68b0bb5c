"""prop-match: comparable-property matching and location deduplication."""

from prop_match.config import PropMatchConfig
from prop_match.exceptions import (
    ComputationFaultError,
    ConfigurationError,
    DataMalformedError,
    DependencyDegradedError,
    PropMatchError,
    ValidationFailure,
)
from prop_match.ingest import record_from_row, records_from_rows
from prop_match.location import (
    GeocodingPlan,
    GroupOptimizer,
    LocationGrouper,
    normalize,
    plan_geocoding,
)
from prop_match.matching import ComparableMatcher, ResultCache, SimilarityScorer
from prop_match.models import (
    ComparableResult,
    GeocodingQueueEntry,
    LocationGroup,
    PropertyRecord,
    SearchCriteria,
    SimilarityScore,
)
from prop_match.store import CatalogStore

__version__ = "0.1.0"

__all__ = [
    "CatalogStore",
    "ComparableMatcher",
    "ComparableResult",
    "ComputationFaultError",
    "ConfigurationError",
    "DataMalformedError",
    "DependencyDegradedError",
    "GeocodingPlan",
    "GeocodingQueueEntry",
    "GroupOptimizer",
    "LocationGroup",
    "LocationGrouper",
    "PropMatchConfig",
    "PropMatchError",
    "PropertyRecord",
    "ResultCache",
    "SearchCriteria",
    "SimilarityScore",
    "SimilarityScorer",
    "ValidationFailure",
    "normalize",
    "plan_geocoding",
    "record_from_row",
    "records_from_rows",
]
