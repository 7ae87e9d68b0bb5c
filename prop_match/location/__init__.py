"""Location normalization, grouping and geocoding planning."""

from prop_match.location.grouper import (
    LocationGrouper,
    completeness_score,
    merge_groups,
    select_representative,
)
from prop_match.location.normalizer import (
    STOPWORDS,
    fold_diacritics,
    location_key,
    location_tier,
    normalize,
    tier_keys,
)
from prop_match.location.optimizer import (
    GroupOptimizer,
    cost_analysis,
    geocoding_priority,
    geocoding_query,
)
from prop_match.location.planner import GeocodingPlan, plan_geocoding
from prop_match.location.similarity import (
    InProcessTrigramSimilarity,
    PostgresTrigramSimilarity,
    TrigramSimilarity,
    build_trigram_backend,
    levenshtein_distance,
    trigrams,
)

__all__ = [
    "STOPWORDS",
    "GeocodingPlan",
    "GroupOptimizer",
    "InProcessTrigramSimilarity",
    "LocationGrouper",
    "PostgresTrigramSimilarity",
    "TrigramSimilarity",
    "build_trigram_backend",
    "completeness_score",
    "cost_analysis",
    "fold_diacritics",
    "geocoding_priority",
    "geocoding_query",
    "levenshtein_distance",
    "location_key",
    "location_tier",
    "merge_groups",
    "normalize",
    "plan_geocoding",
    "select_representative",
    "tier_keys",
    "trigrams",
]
