"""Base models shared across the matching and grouping domains."""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal


@dataclass(frozen=True)
class Coordinates:
    """WGS84 coordinate pair in decimal degrees."""

    latitude: float
    longitude: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves away from zero (``round`` rounds halves to even).

    >>> round_half_up(2.5)
    3.0
    >>> round_half_up(12.25, 1)
    12.3
    """
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))
