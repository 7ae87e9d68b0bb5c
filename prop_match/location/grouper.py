"""Partition a property catalog into canonical location groups.

Grouping runs in two passes:

1. **Bucketing** - every property gets a hierarchical key built from its
   normalized urbanization, suburb and city; identical keys share a bucket.
2. **Fuzzy merge** - inside each city, buckets of the same tier whose primary
   names are near-duplicates (trigram similarity or short edit distance) are
   collapsed. Cities never interact, so each one is merged by its own worker.

The output is always a partition of the input: each property id appears in
exactly one group.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, Sequence

from prop_match.config import GroupingConfig
from prop_match.exceptions import DependencyDegradedError
from prop_match.location.normalizer import fold_diacritics, location_key, location_tier, tier_keys
from prop_match.location.similarity import (
    TrigramSimilarity,
    build_trigram_backend,
    levenshtein_distance,
)
from prop_match.models.grouping import LocationGroup
from prop_match.models.property import PropertyRecord

logger = logging.getLogger(__name__)


def completeness_score(record: PropertyRecord) -> int:
    """Score how complete a record's location data is."""
    score = 0
    if record.urbanization:
        score += 4
    if record.address:
        score += 3
    if record.suburb:
        score += 2
    if record.city:
        score += 1
    if record.has_coordinates:
        score += 2
    return score


def select_representative(members: Sequence[PropertyRecord]) -> PropertyRecord:
    """Most complete member; the first one seen wins ties."""
    best = members[0]
    best_score = completeness_score(best)
    for candidate in members[1:]:
        score = completeness_score(candidate)
        if score > best_score:
            best, best_score = candidate, score
    return best


def merge_groups(groups: Sequence[LocationGroup]) -> LocationGroup:
    """Union groups into the first one, recording the absorbed keys."""
    first = groups[0]
    if len(groups) == 1:
        return first

    members = [m for g in groups for m in g.members]
    provenance: list[str] = []
    for g in groups:
        provenance.extend(g.merged_from or [g.key])

    return LocationGroup(
        key=first.key,
        members=members,
        representative=select_representative(members),
        tier=min(g.tier for g in groups),
        urbanization_key=first.urbanization_key,
        suburb_key=first.suburb_key,
        city_key=first.city_key,
        merged_from=provenance,
    )


class _PartitionMerger:
    """Fuzzy-merge the buckets of one city. Holds no state shared with other cities."""

    def __init__(self, config: GroupingConfig, trigram: TrigramSimilarity) -> None:
        self.config = config
        self.trigram = trigram
        self.merges = 0
        self.degraded = False

    def _trigram_similarity(self, a: str, b: str) -> float:
        if self.degraded:
            return 0.0
        try:
            return self.trigram.similarity(fold_diacritics(a), fold_diacritics(b))
        except DependencyDegradedError as e:
            logger.warning("Trigram similarity unavailable, continuing with edit distance only: %s", e)
            self.degraded = True
            return 0.0

    def should_merge(self, a: LocationGroup, b: LocationGroup) -> bool:
        if a.tier != b.tier:
            return False
        if not a.city_key or a.city_key != b.city_key:
            return False

        name_a, name_b = a.primary_name, b.primary_name
        if not name_a or not name_b:
            return False

        similarity = self._trigram_similarity(name_a, name_b)
        if similarity >= self.config.trigram_threshold:
            logger.debug("High similarity: %r <-> %r (%.1f%%)", name_a, name_b, similarity * 100)
            return True

        limit = self.config.short_name_length
        if len(name_a) <= limit or len(name_b) <= limit:
            distance = levenshtein_distance(name_a, name_b)
            if distance <= self.config.levenshtein_max:
                logger.debug("Close distance: %r <-> %r (distance: %d)", name_a, name_b, distance)
                return True

        return False

    def run(self, groups: Sequence[LocationGroup]) -> list[LocationGroup]:
        absorbed = [False] * len(groups)
        merged: list[LocationGroup] = []

        for i, current in enumerate(groups):
            if absorbed[i]:
                continue
            targets = [current]
            for j in range(i + 1, len(groups)):
                if absorbed[j]:
                    continue
                if self.should_merge(current, groups[j]):
                    targets.append(groups[j])
                    absorbed[j] = True
                    self.merges += 1
            absorbed[i] = True
            merged.append(merge_groups(targets))

        return merged


class LocationGrouper:
    """Group catalog properties by canonical location.

    Parameters
    ----------
    config : GroupingConfig | None
        Thresholds and worker count.
    trigram : TrigramSimilarity | None
        Trigram backend. Defaults to the one selected by ``config``.
    """

    def __init__(
        self,
        config: GroupingConfig | None = None,
        trigram: TrigramSimilarity | None = None,
    ) -> None:
        self.config = config or GroupingConfig()
        self.trigram = trigram or build_trigram_backend(self.config)
        self.fuzzy_merges = 0
        self.trigram_degraded = False

    def group(self, catalog: Iterable[PropertyRecord]) -> list[LocationGroup]:
        """Bucket then fuzzy-merge the whole catalog."""
        buckets = self.bucket(catalog)
        return self.merge(buckets)

    def bucket(self, catalog: Iterable[PropertyRecord]) -> list[LocationGroup]:
        """Initial grouping by exact normalized location key."""
        buckets: dict[str, LocationGroup] = {}
        seen_ids: set[str] = set()
        total = 0

        for record in catalog:
            if record.property_id in seen_ids:
                logger.warning(
                    "Duplicate property id %s in catalog, keeping first",
                    record.property_id,
                    extra={"property_id": record.property_id},
                )
                continue
            seen_ids.add(record.property_id)
            total += 1

            try:
                urb, sub, city = tier_keys(record)
            except Exception:
                logger.exception("Cannot normalize location of property %s, filing as unknown", record.property_id)
                urb = sub = city = ""

            key = location_key(urb, sub, city)
            group = buckets.get(key)
            if group is None:
                buckets[key] = LocationGroup(
                    key=key,
                    members=[record],
                    representative=record,
                    tier=location_tier(urb, sub, city),
                    urbanization_key=urb,
                    suburb_key=sub,
                    city_key=city,
                )
            else:
                group.members.append(record)

        for group in buckets.values():
            group.representative = select_representative(group.members)

        logger.info("Bucketed %d properties into %d location groups", total, len(buckets))
        return list(buckets.values())

    def merge(self, buckets: Sequence[LocationGroup]) -> list[LocationGroup]:
        """Fuzzy-merge buckets city by city."""
        order = {g.key: i for i, g in enumerate(buckets)}
        partitions: dict[str, list[LocationGroup]] = {}
        result: list[LocationGroup] = []

        for group in buckets:
            if group.city_key:
                partitions.setdefault(group.city_key, []).append(group)
            else:
                result.append(group)

        self.fuzzy_merges = 0
        self.trigram_degraded = False

        workers = max(1, min(self.config.max_workers, len(partitions)))
        if workers == 1:
            for city, groups in partitions.items():
                result.extend(self._merge_city(city, groups))
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = {
                    executor.submit(self._run_partition, city, groups): city
                    for city, groups in partitions.items()
                }
                for future in as_completed(futures):
                    merged, merges, degraded = future.result()
                    result.extend(merged)
                    self.fuzzy_merges += merges
                    self.trigram_degraded = self.trigram_degraded or degraded

        result.sort(key=lambda g: order[g.key])
        logger.info(
            "Fuzzy deduplication complete: %d -> %d groups (%d merges)",
            len(buckets),
            len(result),
            self.fuzzy_merges,
        )
        return result

    def _merge_city(self, city: str, groups: list[LocationGroup]) -> list[LocationGroup]:
        merged, merges, degraded = self._run_partition(city, groups)
        self.fuzzy_merges += merges
        self.trigram_degraded = self.trigram_degraded or degraded
        return merged

    def _run_partition(
        self, city: str, groups: list[LocationGroup]
    ) -> tuple[list[LocationGroup], int, bool]:
        if len(groups) < 2:
            return list(groups), 0, False
        merger = _PartitionMerger(self.config, self.trigram)
        try:
            merged = merger.run(groups)
        except Exception:
            logger.exception(
                "Fuzzy merge failed for city %r, keeping its buckets unmerged", city, extra={"city": city}
            )
            return list(groups), 0, merger.degraded
        return merged, merger.merges, merger.degraded
