"""String-similarity capabilities used by the location grouper.

Trigram similarity is abstracted behind ``TrigramSimilarity`` with two
implementations: an in-process port of PostgreSQL ``pg_trgm`` semantics and a
backend that asks the database itself. Edit distance comes from rapidfuzz.
"""

from __future__ import annotations

import logging
import re
import threading
from functools import lru_cache
from typing import Any, Protocol, runtime_checkable

import psycopg
from rapidfuzz.distance import Levenshtein

from prop_match.config import TRIGRAM_BACKENDS, GroupingConfig, PostgresConfig
from prop_match.exceptions import ConfigurationError, DependencyDegradedError

logger = logging.getLogger(__name__)

_WORD_SPLIT_RE = re.compile(r"[^\w]+|_")


@runtime_checkable
class TrigramSimilarity(Protocol):
    """Return a 0-1 similarity between two normalized strings."""

    def similarity(self, a: str, b: str) -> float: ...


@lru_cache(maxsize=65536)
def trigrams(text: str) -> frozenset[str]:
    """Trigram set of ``text`` as ``pg_trgm`` computes it.

    Each alphanumeric word is lowercased and padded with two leading blanks
    and one trailing blank before being cut into 3-character windows.
    """
    grams: set[str] = set()
    for word in _WORD_SPLIT_RE.split(text.lower()):
        if not word:
            continue
        padded = f"  {word} "
        for i in range(len(padded) - 2):
            grams.add(padded[i : i + 3])
    return frozenset(grams)


class InProcessTrigramSimilarity:
    """Pure-Python trigram similarity, no database required."""

    def similarity(self, a: str, b: str) -> float:
        grams_a = trigrams(a)
        grams_b = trigrams(b)
        if not grams_a or not grams_b:
            return 0.0
        common = len(grams_a & grams_b)
        return common / (len(grams_a) + len(grams_b) - common)


class PostgresTrigramSimilarity:
    """Trigram similarity computed by ``pg_trgm`` in PostgreSQL.

    The connection is opened lazily and shared; queries are serialized with a
    lock so that grouping workers can use one instance. Any database failure
    is raised as ``DependencyDegradedError``.

    Parameters
    ----------
    config : PostgresConfig | None
        Connection settings, used when ``connection`` is not given.
    connection : Any
        An already-open psycopg connection.
    """

    QUERY = "SELECT similarity(%s, %s)"

    def __init__(
        self,
        config: PostgresConfig | None = None,
        connection: Any = None,
    ) -> None:
        self._config = config or PostgresConfig()
        self._conn = connection
        self._lock = threading.Lock()

    def _connection(self) -> Any:
        if self._conn is None:
            try:
                self._conn = psycopg.connect(self._config.connection_string, autocommit=True)
            except psycopg.Error as e:
                raise DependencyDegradedError(f"Cannot connect to PostgreSQL: {e}") from e
        return self._conn

    def similarity(self, a: str, b: str) -> float:
        with self._lock:
            conn = self._connection()
            try:
                with conn.cursor() as cur:
                    cur.execute(self.QUERY, (a, b))
                    row = cur.fetchone()
            except psycopg.Error as e:
                raise DependencyDegradedError(f"Trigram similarity query failed: {e}") from e
        if not row or row[0] is None:
            return 0.0
        return float(row[0])

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum number of single-character edits turning ``a`` into ``b``."""
    return Levenshtein.distance(a, b)


def build_trigram_backend(
    config: GroupingConfig | None = None,
    postgres: PostgresConfig | None = None,
) -> TrigramSimilarity:
    """Select the trigram backend named in the grouping configuration.

    Raises
    ------
    ConfigurationError
        If the backend name is not one of ``TRIGRAM_BACKENDS``.
    """
    config = config or GroupingConfig()
    backend = config.trigram_backend.lower()
    if backend not in TRIGRAM_BACKENDS:
        raise ConfigurationError(
            f"Unknown trigram backend {config.trigram_backend!r}; "
            f"expected one of {', '.join(TRIGRAM_BACKENDS)}"
        )
    if backend == "postgres":
        logger.info("Using PostgreSQL pg_trgm for trigram similarity")
        return PostgresTrigramSimilarity(config=postgres)
    return InProcessTrigramSimilarity()
