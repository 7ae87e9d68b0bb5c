"""Find and rank comparable properties for a subject property."""

from __future__ import annotations

import hashlib
import json
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Protocol, Sequence, Union

from prop_match.config import PropMatchConfig
from prop_match.exceptions import ComputationFaultError, DataMalformedError, ValidationFailure
from prop_match.ingest.mapper import record_from_row
from prop_match.matching.cache import CacheStats, ResultCache
from prop_match.matching.market import market_position, summarize
from prop_match.matching.scorer import SimilarityScorer
from prop_match.models.matching import ComparableResult, ScoredComparable, SearchCriteria
from prop_match.models.property import PropertyRecord

logger = logging.getLogger(__name__)

Candidate = Union[PropertyRecord, Mapping[str, Any]]


class CatalogQuery(Protocol):
    """Source of candidate properties for a search."""

    def find_similar(self, criteria: SearchCriteria) -> Sequence[PropertyRecord]: ...


def _as_record(item: Candidate) -> PropertyRecord:
    if isinstance(item, PropertyRecord):
        return item
    return record_from_row(item)


class ComparableMatcher:
    """Score a candidate pool against a subject and keep the best matches.

    Results are cached per (session, reference, price, bedrooms, build area)
    for the configured TTL. The matcher never raises: invalid subjects and
    internal failures both come back as empty ``ComparableResult`` objects,
    the latter with ``error`` set.

    Parameters
    ----------
    config : PropMatchConfig | None
        Scoring, cache and result-size settings.
    scorer : SimilarityScorer | None
        Scorer to use; injectable for tests.
    cache : ResultCache | None
        Result cache; a fresh one per matcher by default.
    catalog : CatalogQuery | None
        Candidate source used when ``find_comparables`` gets no pool.
    """

    def __init__(
        self,
        config: PropMatchConfig | None = None,
        scorer: SimilarityScorer | None = None,
        cache: ResultCache[ComparableResult] | None = None,
        catalog: CatalogQuery | None = None,
    ) -> None:
        self.config = config or PropMatchConfig()
        self.scorer = scorer or SimilarityScorer(self.config.scoring)
        self.cache = cache or ResultCache(
            ttl_seconds=self.config.cache.ttl_seconds,
            max_size=self.config.cache.max_size,
        )
        self.catalog = catalog

    @staticmethod
    def fingerprint(session_id: str, criteria: SearchCriteria) -> str:
        payload = json.dumps(
            [session_id, criteria.reference, criteria.price, criteria.bedrooms, criteria.build_area],
            default=str,
        )
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()

    def find_comparables(
        self,
        session_id: str,
        subject: Candidate,
        candidate_pool: Iterable[Candidate] | None = None,
    ) -> ComparableResult:
        """Ranked comparables for ``subject``.

        Parameters
        ----------
        session_id : str
            Caller session; part of the cache key.
        subject : PropertyRecord | Mapping
            The property being valued. Raw rows are mapped on the fly.
        candidate_pool : Iterable | None
            Candidates to score. When omitted the injected catalog is queried.

        Returns
        -------
        ComparableResult
            At most ``max_results`` comparables sorted by ascending total score.
        """
        try:
            record = _as_record(subject)
            criteria = SearchCriteria.from_record(record, radius_km=self.config.matcher.search_radius_km)

            try:
                criteria.validate()
            except ValidationFailure as e:
                logger.info("Skipping comparable search for %s: %s", criteria.reference or record.property_id, e)
                return ComparableResult(message=str(e), criteria=criteria)

            key = self.fingerprint(session_id, criteria)
            result, hit = self.cache.get_or_compute(key, lambda: self._search(criteria, candidate_pool))
            if hit:
                logger.debug("Using cached comparables for %s", criteria.reference)
            return result
        except Exception as e:
            logger.exception("Comparable search failed", extra={"session_id": session_id})
            return ComparableResult(message="Comparable analysis failed", error=str(e))

    def _candidates(
        self, criteria: SearchCriteria, candidate_pool: Iterable[Candidate] | None
    ) -> Iterable[Candidate]:
        if candidate_pool is not None:
            return candidate_pool
        if self.catalog is None:
            logger.warning("No candidate pool and no catalog configured; nothing to compare")
            return ()
        return self.catalog.find_similar(criteria)

    def _search(
        self, criteria: SearchCriteria, candidate_pool: Iterable[Candidate] | None
    ) -> ComparableResult:
        scored: list[ScoredComparable] = []
        for item in self._candidates(criteria, candidate_pool):
            try:
                candidate = _as_record(item)
            except DataMalformedError as e:
                logger.warning("Skipping unusable candidate: %s", e)
                continue
            except Exception as e:
                fault = ComputationFaultError(f"Cannot map candidate: {e}")
                logger.warning("Skipping unusable candidate: %s", fault, exc_info=True)
                continue
            if criteria.reference and candidate.reference == criteria.reference:
                continue
            try:
                score = self.scorer.score(criteria, candidate)
            except Exception as e:
                fault = ComputationFaultError(f"Scoring failed: {e}", record_id=candidate.property_id)
                logger.warning(
                    "Skipping candidate %s: %s",
                    fault.record_id,
                    fault,
                    exc_info=True,
                    extra={"property_id": fault.record_id},
                )
                continue
            scored.append(ScoredComparable(record=candidate, score=score))

        scored.sort(key=lambda c: (c.score.total_score, c.record.property_id))
        top = scored[: self.config.matcher.max_results]

        subject_per_sqm = None
        if criteria.price and criteria.build_area:
            subject_per_sqm = criteria.price / criteria.build_area

        summary = summarize(top)
        position = market_position(criteria.price, subject_per_sqm, top) if top else None

        logger.info(
            "Found %d comparables for %s (%d candidates scored)",
            len(top),
            criteria.reference,
            len(scored),
        )
        return ComparableResult(
            comparables=tuple(top),
            summary=summary,
            market_position=position,
            message=self._message(top, len(scored), summary),
            criteria=criteria,
            total_found=len(scored),
            cached_at=datetime.now(timezone.utc),
        )

    @staticmethod
    def _message(top: Sequence[ScoredComparable], total: int, summary: Any) -> str:
        if not top:
            return "No comparable properties found"
        message = f"Found {len(top)} comparable properties"
        if total > len(top):
            message += f" (best of {total})"
        if summary is not None:
            message += f". Median price: €{summary.median_price:,.0f}"
        return message

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("Comparable cache cleared")

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()
