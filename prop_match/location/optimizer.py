"""Post-process location groups into a geocoding plan."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Sequence

from prop_match.config import GeocodingConfig
from prop_match.models.base import round_half_up
from prop_match.models.enums import LocationTier
from prop_match.models.grouping import (
    CostAnalysis,
    GeocodingQueueEntry,
    GroupDistribution,
    GroupingAnalysis,
    GroupSummary,
    LocationGroup,
)

logger = logging.getLogger(__name__)


def geocoding_priority(group: LocationGroup) -> int:
    """Queue priority: bigger groups and richer representatives go first."""
    rep = group.representative
    priority = group.size
    if rep.urbanization:
        priority += 10
    if rep.address:
        priority += 5
    if rep.has_coordinates:
        priority += 20
    return priority


def geocoding_query(group: LocationGroup, country: str = "Spain") -> str:
    """Address string sent to the geocoder for a whole group."""
    rep = group.representative
    parts = [rep.urbanization, rep.suburb, rep.address, rep.city, country]
    return ", ".join(p.strip() for p in parts if p and p.strip())


def cost_analysis(total_properties: int, total_groups: int, unit_price: float) -> CostAnalysis:
    original = total_properties * unit_price
    optimized = total_groups * unit_price
    savings = original - optimized
    percentage = round_half_up(savings / original * 100, 1) if original else 0.0
    return CostAnalysis(
        unit_price=unit_price,
        original_cost=original,
        optimized_cost=optimized,
        savings=savings,
        percentage=percentage,
    )


class GroupOptimizer:
    """Fold weak singletons, then derive the geocoding queue and cost report.

    Parameters
    ----------
    config : GeocodingConfig | None
        Unit price, country suffix and folding threshold.
    """

    def __init__(self, config: GeocodingConfig | None = None) -> None:
        self.config = config or GeocodingConfig()

    def optimize(
        self, groups: Sequence[LocationGroup], fuzzy_merges: int = 0
    ) -> tuple[list[LocationGroup], GroupingAnalysis]:
        """Fold city-level singletons into large same-city groups.

        A group with one member and tier ``CITY`` or lower is appended to the
        largest tier-3 group of the same city holding more than
        ``fold_min_group_size`` members. The input groups are not mutated.

        Returns
        -------
        tuple[list[LocationGroup], GroupingAnalysis]
            The final groups, in input order, and the analysis of that result.
        """
        targets: dict[str, int] = {}
        for i, group in enumerate(groups):
            if group.tier != LocationTier.CITY or not group.city_key:
                continue
            if group.size <= self.config.fold_min_group_size:
                continue
            current = targets.get(group.city_key)
            if current is None or group.size > groups[current].size:
                targets[group.city_key] = i

        folded: dict[int, list[LocationGroup]] = {}
        kept: list[int] = []
        for i, group in enumerate(groups):
            target = targets.get(group.city_key) if group.city_key else None
            if group.size == 1 and group.tier >= LocationTier.CITY and target is not None and target != i:
                folded.setdefault(target, []).append(group)
                logger.debug("Folding singleton %r into %r", group.key, groups[target].key)
            else:
                kept.append(i)

        final: list[LocationGroup] = []
        for i in kept:
            group = groups[i]
            extra = folded.get(i)
            if extra:
                group = replace(
                    group,
                    members=group.members + [m for g in extra for m in g.members],
                    merged_from=(group.merged_from or [group.key]) + [g.key for g in extra],
                )
            final.append(group)

        folded_count = sum(len(v) for v in folded.values())
        logger.info("Optimization complete: %d -> %d groups", len(groups), len(final))

        analysis = self.analyze(final, fuzzy_merges=fuzzy_merges, folded_singletons=folded_count)
        return final, analysis

    def analyze(
        self,
        groups: Sequence[LocationGroup],
        fuzzy_merges: int = 0,
        folded_singletons: int = 0,
    ) -> GroupingAnalysis:
        total_properties = sum(g.size for g in groups)
        total_groups = len(groups)
        singletons = sum(1 for g in groups if g.size == 1)
        sizes = sorted((g.size for g in groups), reverse=True)

        distribution = GroupDistribution(
            singletons=singletons,
            multi_property=total_groups - singletons,
            largest_group=sizes[0] if sizes else 0,
            average_size=round_half_up(total_properties / total_groups, 1) if total_groups else 0.0,
        )

        by_size = sorted(groups, key=lambda g: g.size, reverse=True)
        top_groups = [
            GroupSummary(
                key=g.key,
                property_count=g.size,
                location=g.display_location(),
                tier=g.tier,
                representative=g.representative.reference or g.representative.property_id,
            )
            for g in by_size[: self.config.top_groups]
        ]

        return GroupingAnalysis(
            total_properties=total_properties,
            total_groups=total_groups,
            cost=cost_analysis(total_properties, total_groups, self.config.unit_price),
            distribution=distribution,
            top_groups=top_groups,
            fuzzy_merges=fuzzy_merges,
            folded_singletons=folded_singletons,
        )

    def build_queue(self, groups: Sequence[LocationGroup]) -> list[GeocodingQueueEntry]:
        """Geocoding requests, highest priority first (ties by group key)."""
        entries = [
            GeocodingQueueEntry(
                group_key=g.key,
                property_ids=tuple(g.property_ids),
                query=geocoding_query(g, self.config.country),
                priority=geocoding_priority(g),
                tier=g.tier,
                representative_reference=g.representative.reference,
            )
            for g in groups
        ]
        entries.sort(key=lambda e: (-e.priority, e.group_key))
        return entries
