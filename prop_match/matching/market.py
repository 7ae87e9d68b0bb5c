"""Price statistics for a set of comparables."""

from __future__ import annotations

import math
import statistics
from typing import Sequence

from prop_match.models.base import round_half_up
from prop_match.models.enums import MarketPositionLabel, Volatility
from prop_match.models.matching import (
    MarketPosition,
    PriceDistribution,
    PriceSummary,
    ScoredComparable,
)

HISTOGRAM_BUCKETS = 8
ROBUST_SAMPLE_SIZE = 10


def _has_price(comparable: ScoredComparable) -> bool:
    price = comparable.record.price
    return bool(price) and math.isfinite(price)


def median(values: Sequence[float]) -> float:
    """Median; the mean of the middle pair is rounded to a whole number."""
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return round_half_up((ordered[mid - 1] + ordered[mid]) / 2)
    return ordered[mid]


def percentile(value: float | None, values: Sequence[float]) -> int:
    """Percentage of ``values`` at or below ``value``; 50 when undefined."""
    if not value or not values:
        return 50
    rank = sum(1 for v in values if v <= value)
    return int(round_half_up(rank / len(values) * 100))


def volatility(prices: Sequence[float]) -> Volatility:
    """Classify price dispersion by coefficient of variation."""
    if len(prices) < 3:
        return Volatility.INSUFFICIENT_DATA
    mean = statistics.fmean(prices)
    if mean <= 0:
        return Volatility.INSUFFICIENT_DATA
    cv = statistics.pstdev(prices) / mean
    if cv < 0.15:
        return Volatility.LOW
    if cv < 0.30:
        return Volatility.MODERATE
    return Volatility.HIGH


def price_distribution(prices: Sequence[float], subject_price: float | None) -> PriceDistribution | None:
    """Equal-width histogram of prices and the subject's bucket (-1 if unknown)."""
    if not prices:
        return None
    low, high = min(prices), max(prices)
    bucket_size = (high - low) / HISTOGRAM_BUCKETS

    def bucket_of(price: float) -> int:
        if bucket_size == 0:
            return 0
        return max(0, min(math.floor((price - low) / bucket_size), HISTOGRAM_BUCKETS - 1))

    histogram = [0] * HISTOGRAM_BUCKETS
    for price in prices:
        histogram[bucket_of(price)] += 1

    return PriceDistribution(
        histogram=tuple(histogram),
        subject_bucket=bucket_of(subject_price) if subject_price else -1,
        bucket_size=round_half_up(bucket_size),
        min_price=round_half_up(low),
        max_price=round_half_up(high),
    )


def summarize(comparables: Sequence[ScoredComparable]) -> PriceSummary | None:
    """Summary over the comparables that carry a price."""
    priced = [c for c in comparables if _has_price(c)]
    if not priced:
        return None
    prices = [c.record.price for c in priced]
    per_sqm = [c.record.price_per_sqm for c in priced if c.record.price_per_sqm]
    return PriceSummary(
        count=len(comparables),
        average_price=round_half_up(statistics.fmean(prices)),
        median_price=median(prices),
        min_price=min(prices),
        max_price=max(prices),
        average_match_percent=int(
            round_half_up(statistics.fmean(c.score.overall_percent for c in comparables))
        ),
        average_price_per_sqm=round_half_up(statistics.fmean(per_sqm)) if per_sqm else 0,
    )


def _insights(
    vs_median: float | None,
    pct: int,
    sample_size: int,
    per_sqm_ratio: float | None,
) -> tuple[str, ...]:
    insights = []
    if vs_median is not None:
        if vs_median > 1.2:
            insights.append(
                f"Property is priced {round_half_up((vs_median - 1) * 100):.0f}% above market median"
            )
        elif vs_median < 0.8:
            insights.append(
                f"Property is priced {round_half_up((1 - vs_median) * 100):.0f}% below market median"
            )
        else:
            insights.append("Property is competitively priced within the median market range")

    if pct >= 80:
        insights.append(f"Property ranks in the top {100 - pct}% of comparable properties by price")
    elif pct <= 20:
        insights.append(f"Property ranks in the bottom {pct}% of comparable properties by price")

    if sample_size >= ROBUST_SAMPLE_SIZE:
        insights.append(f"Analysis based on robust sample of {sample_size} comparable properties")
    else:
        insights.append(f"Limited market data: analysis based on {sample_size} properties")

    if per_sqm_ratio is not None:
        if per_sqm_ratio > 1.15:
            insights.append(f"Price per m² is {round_half_up((per_sqm_ratio - 1) * 100):.0f}% above market average")
        elif per_sqm_ratio < 0.85:
            insights.append(f"Price per m² is {round_half_up((1 - per_sqm_ratio) * 100):.0f}% below market average")
    return tuple(insights)


def market_position(
    subject_price: float | None,
    subject_price_per_sqm: float | None,
    comparables: Sequence[ScoredComparable],
) -> MarketPosition:
    """Where the subject price sits among comparable prices."""
    prices = [c.record.price for c in comparables if _has_price(c)]
    pct = percentile(subject_price, prices)

    vs_average = vs_median = None
    label = None
    if subject_price and prices:
        average = statistics.fmean(prices)
        mid = median(prices)
        vs_average = subject_price / average
        vs_median = subject_price / mid
        label = MarketPositionLabel.ABOVE_MARKET if subject_price > mid else MarketPositionLabel.BELOW_MARKET

    per_sqm = [c.record.price_per_sqm for c in comparables if c.record.price_per_sqm]
    per_sqm_ratio = None
    if subject_price_per_sqm and per_sqm:
        per_sqm_ratio = subject_price_per_sqm / median(per_sqm)

    return MarketPosition(
        percentile=pct,
        vs_average=vs_average,
        vs_median=vs_median,
        label=label,
        volatility=volatility(prices),
        distribution=price_distribution(prices, subject_price),
        insights=_insights(vs_median, pct, len(comparables), per_sqm_ratio),
    )
