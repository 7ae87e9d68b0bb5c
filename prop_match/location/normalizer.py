"""Canonical keys for free-text location names.

``normalize`` keeps diacritics so that keys stay readable and faithful to
the source; ``fold_diacritics`` is only used where near-duplicates must
compare equal (trigram similarity).
"""

from __future__ import annotations

import re
import unicodedata

from prop_match.models.enums import LocationTier
from prop_match.models.property import PropertyRecord

# Spanish determiners and conjunctions that carry no location information
STOPWORDS: frozenset[str] = frozenset({"el", "la", "los", "las", "de", "del", "y"})

_NOISE_RE = re.compile(r"[^\w\s-]")
_STOPWORD_RE = re.compile(r"\b(?:" + "|".join(sorted(STOPWORDS)) + r")\b")
_SPACE_RE = re.compile(r"\s+")


def normalize(text: str | None) -> str:
    """Return the canonical key for a location name.

    Lowercases, drops punctuation other than hyphens, removes stopwords and
    collapses whitespace. ``None`` and empty input give ``""``.

    Examples
    --------
    >>> normalize("  Nueva Andalucía ")
    'nueva andalucía'
    >>> normalize("La Cala de Mijas")
    'cala mijas'
    """
    if not text:
        return ""
    key = _SPACE_RE.sub(" ", text.lower().strip())
    key = _NOISE_RE.sub("", key)
    key = _STOPWORD_RE.sub("", key)
    return _SPACE_RE.sub(" ", key).strip()


def fold_diacritics(text: str) -> str:
    """Strip combining marks: ``"andalucía"`` -> ``"andalucia"``, ``"ñ"`` -> ``"n"``."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def tier_keys(record: PropertyRecord) -> tuple[str, str, str]:
    """Normalized (urbanization, suburb, city) keys of a record."""
    return normalize(record.urbanization), normalize(record.suburb), normalize(record.city)


def location_tier(urbanization_key: str, suburb_key: str, city_key: str) -> LocationTier:
    """Highest specificity tier present among the keys."""
    if urbanization_key:
        return LocationTier.URBANIZATION
    if suburb_key:
        return LocationTier.SUBURB
    if city_key:
        return LocationTier.CITY
    return LocationTier.UNKNOWN


def location_key(urbanization_key: str, suburb_key: str, city_key: str) -> str:
    """Bucket key, e.g. ``urb:<k>||sub:<k>||city:<k>``; ``unknown`` when empty."""
    parts = []
    if urbanization_key:
        parts.append(f"urb:{urbanization_key}")
    if suburb_key:
        parts.append(f"sub:{suburb_key}")
    if city_key:
        parts.append(f"city:{city_key}")
    return "||".join(parts) or "unknown"
