"""Comparable-property matching."""

from prop_match.matching.cache import CacheStats, ResultCache
from prop_match.matching.geo import EARTH_RADIUS_KM, haversine_km, hierarchy_distance
from prop_match.matching.market import (
    market_position,
    median,
    percentile,
    price_distribution,
    summarize,
    volatility,
)
from prop_match.matching.matcher import CatalogQuery, ComparableMatcher
from prop_match.matching.scorer import (
    SimilarityScorer,
    jaccard_similarity,
    match_percent,
    relative_delta,
)

__all__ = [
    "EARTH_RADIUS_KM",
    "CacheStats",
    "CatalogQuery",
    "ComparableMatcher",
    "ResultCache",
    "SimilarityScorer",
    "haversine_km",
    "hierarchy_distance",
    "jaccard_similarity",
    "market_position",
    "match_percent",
    "median",
    "percentile",
    "price_distribution",
    "relative_delta",
    "summarize",
    "volatility",
]
