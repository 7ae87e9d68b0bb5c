"""Multi-factor similarity between a subject property and a candidate."""

from __future__ import annotations

import math
from typing import Iterable

from prop_match.config import ScoringConfig
from prop_match.matching.geo import haversine_km, hierarchy_distance
from prop_match.models.base import round_half_up
from prop_match.models.enums import DistanceMethod
from prop_match.models.matching import SearchCriteria, SimilarityScore
from prop_match.models.property import PropertyRecord


def relative_delta(subject: float | None, candidate: float | None) -> float:
    """``|candidate - subject| / subject``, or 0 when either side is unknown or not finite."""
    if not subject or candidate is None or subject <= 0:
        return 0.0
    delta = abs(candidate - subject) / subject
    return delta if math.isfinite(delta) else 0.0


def match_percent(value: float) -> int:
    """Map a non-negative difference to 0-100 where 0 difference is 100.

    A non-finite difference maps to 0.
    """
    if not math.isfinite(value):
        return 0
    return int(round_half_up(100 / (1 + max(0.0, value))))


def jaccard_similarity(a: Iterable[str], b: Iterable[str]) -> int:
    """Jaccard index of two tag collections as a 0-100 integer.

    Tags are compared case-folded. Two empty collections are identical (100);
    one empty collection shares nothing (0).
    """
    set_a = {tag.strip().casefold() for tag in a if tag and tag.strip()}
    set_b = {tag.strip().casefold() for tag in b if tag and tag.strip()}
    if not set_a and not set_b:
        return 100
    if not set_a or not set_b:
        return 0
    return int(round_half_up(len(set_a & set_b) / len(set_a | set_b) * 100))


class SimilarityScorer:
    """Score candidates against search criteria.

    The composite ``total_score`` adds distance in kilometers to unit-less
    relative deltas, each multiplied by its weight. Lower is better.

    Parameters
    ----------
    config : ScoringConfig | None
        Weights and hierarchy fallback distances.
    """

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self.config = config or ScoringConfig()

    def distance(self, criteria: SearchCriteria, candidate: PropertyRecord) -> tuple[float, DistanceMethod]:
        if criteria.coordinates is not None and candidate.coordinates is not None:
            km = haversine_km(criteria.coordinates, candidate.coordinates, self.config.earth_radius_km)
            return km, DistanceMethod.HAVERSINE
        km = hierarchy_distance(
            (criteria.urbanization, criteria.suburb, criteria.city),
            (candidate.urbanization, candidate.suburb, candidate.city),
            self.config,
        )
        return km, DistanceMethod.HIERARCHY

    def score(self, criteria: SearchCriteria, candidate: PropertyRecord) -> SimilarityScore:
        weights = self.config.weights

        distance_km, method = self.distance(criteria, candidate)
        size_delta = relative_delta(criteria.build_area, candidate.build_area)
        price_delta = relative_delta(criteria.price, candidate.price)
        if criteria.bedrooms is not None and candidate.bedrooms is not None:
            bedroom_delta = abs(candidate.bedrooms - criteria.bedrooms)
        else:
            bedroom_delta = 0

        total = (
            weights.distance * distance_km
            + weights.size * size_delta
            + weights.price * price_delta
            + weights.bedrooms * bedroom_delta
        )

        return SimilarityScore(
            distance_km=distance_km,
            size_delta=size_delta,
            price_delta=price_delta,
            bedroom_delta=bedroom_delta,
            feature_score=jaccard_similarity(criteria.features, candidate.features),
            distance_percent=match_percent(distance_km),
            size_percent=match_percent(size_delta),
            price_percent=match_percent(price_delta),
            bedroom_percent=100 if bedroom_delta == 0 else match_percent(bedroom_delta),
            overall_percent=match_percent(total),
            total_score=total,
            distance_method=method,
        )
