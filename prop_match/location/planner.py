"""One-call geocoding planning over a catalog snapshot."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from prop_match.config import PropMatchConfig
from prop_match.location.grouper import LocationGrouper
from prop_match.location.optimizer import GroupOptimizer
from prop_match.location.similarity import TrigramSimilarity, build_trigram_backend
from prop_match.models.grouping import GeocodingQueueEntry, GroupingAnalysis, LocationGroup
from prop_match.models.property import PropertyRecord

logger = logging.getLogger(__name__)


@dataclass
class GeocodingPlan:
    """Final groups, their geocoding queue and the cost report."""

    groups: list[LocationGroup]
    queue: list[GeocodingQueueEntry]
    analysis: GroupingAnalysis
    trigram_degraded: bool = False
    notes: list[str] = field(default_factory=list)


def plan_geocoding(
    catalog: Iterable[PropertyRecord],
    config: PropMatchConfig | None = None,
    trigram: TrigramSimilarity | None = None,
) -> GeocodingPlan:
    """Group the catalog, fold singletons and build the geocoding queue.

    Parameters
    ----------
    catalog : Iterable[PropertyRecord]
        All active properties.
    config : PropMatchConfig | None
        Grouping and geocoding settings.
    trigram : TrigramSimilarity | None
        Trigram backend override; defaults to ``config.grouping.trigram_backend``.
    """
    config = config or PropMatchConfig()
    if trigram is None:
        trigram = build_trigram_backend(config.grouping, config.postgres)

    grouper = LocationGrouper(config.grouping, trigram)
    optimizer = GroupOptimizer(config.geocoding)

    merged = grouper.group(catalog)
    groups, analysis = optimizer.optimize(merged, fuzzy_merges=grouper.fuzzy_merges)
    queue = optimizer.build_queue(groups)

    notes = []
    if grouper.trigram_degraded:
        notes.append("Trigram similarity unavailable; merged on edit distance only")

    logger.info(
        "Geocoding plan: %d properties in %d requests (saves %.1f%%)",
        analysis.total_properties,
        len(queue),
        analysis.cost.percentage,
    )
    return GeocodingPlan(
        groups=groups,
        queue=queue,
        analysis=analysis,
        trigram_degraded=grouper.trigram_degraded,
        notes=notes,
    )
