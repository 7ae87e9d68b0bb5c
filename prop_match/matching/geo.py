"""Distance between properties: great-circle or location-hierarchy proxy."""

from __future__ import annotations

import math

from prop_match.config import ScoringConfig
from prop_match.location.normalizer import normalize
from prop_match.models.base import Coordinates

EARTH_RADIUS_KM = 6371.0


def haversine_km(a: Coordinates, b: Coordinates, radius_km: float = EARTH_RADIUS_KM) -> float:
    """Great-circle distance in kilometers.

    >>> haversine_km(Coordinates(36.5, -4.88), Coordinates(36.5, -4.88))
    0.0
    """
    lat1, lon1 = math.radians(a.latitude), math.radians(a.longitude)
    lat2, lon2 = math.radians(b.latitude), math.radians(b.longitude)
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * radius_km * math.asin(min(1.0, math.sqrt(h)))


def hierarchy_distance(
    subject: tuple[str | None, str | None, str | None],
    candidate: tuple[str | None, str | None, str | None],
    config: ScoringConfig | None = None,
) -> float:
    """Kilometer-equivalent distance from shared location names.

    Both arguments are ``(urbanization, suburb, city)``. Names are compared
    after normalization; the most specific shared tier wins.
    """
    config = config or ScoringConfig()
    distances = (config.urbanization_match_km, config.suburb_match_km, config.city_match_km)
    for subject_name, candidate_name, km in zip(subject, candidate, distances):
        key = normalize(subject_name)
        if key and key == normalize(candidate_name):
            return km
    return config.no_match_km
