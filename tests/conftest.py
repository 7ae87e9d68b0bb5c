"""Pytest configuration and fixtures."""

from typing import Any, Callable

import pytest

from prop_match.models import Coordinates, ListingType, PropertyRecord


class CountingTrigram:
    """In-memory trigram stub that returns fixed scores and counts calls."""

    def __init__(self, scores: dict[tuple[str, str], float] | None = None, fail: bool = False) -> None:
        self.scores = scores or {}
        self.fail = fail
        self.calls = 0

    def similarity(self, a: str, b: str) -> float:
        from prop_match.exceptions import DependencyDegradedError

        self.calls += 1
        if self.fail:
            raise DependencyDegradedError("pg_trgm unavailable")
        return self.scores.get((a, b), self.scores.get((b, a), 0.0))


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def make_record() -> Callable[..., PropertyRecord]:
    """Factory for property records with sensible sale-listing defaults."""
    counter = {"n": 0}

    def _make(**overrides: Any) -> PropertyRecord:
        counter["n"] += 1
        n = counter["n"]
        lat_lng = overrides.pop("coords", None)
        values: dict[str, Any] = {
            "property_id": f"prop-{n:03d}",
            "reference": f"R{n:05d}",
            "city": "Marbella",
            "property_type": "apartment",
            "build_area": 100.0,
            "bedrooms": 2,
            "sale_price": 500_000.0,
            "listing_type": ListingType.SALE,
        }
        if lat_lng is not None:
            values["coordinates"] = Coordinates(*lat_lng)
        values.update(overrides)
        return PropertyRecord(**values)

    return _make


@pytest.fixture
def counting_trigram() -> type[CountingTrigram]:
    """The stub trigram class, for tests that need custom scores."""
    return CountingTrigram
