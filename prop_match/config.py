"""Configuration management for prop-match."""

from dataclasses import dataclass, field
from typing import Any

TRIGRAM_BACKENDS = ("memory", "postgres")


@dataclass(frozen=True)
class ScoringWeights:
    """Weights of the composite similarity score (lower total = better).

    Distance enters in kilometers while the other terms are unit-less
    fractions; the defaults reproduce the production ranking.
    """

    distance: float = 0.4
    size: float = 0.3
    price: float = 0.2
    bedrooms: float = 0.1


@dataclass
class ScoringConfig:
    """Similarity scoring configuration."""

    weights: ScoringWeights = field(default_factory=ScoringWeights)
    earth_radius_km: float = 6371.0
    urbanization_match_km: float = 1.0
    suburb_match_km: float = 5.0
    city_match_km: float = 15.0
    no_match_km: float = 50.0


@dataclass
class CacheConfig:
    """Comparable result cache configuration."""

    ttl_seconds: float = 1800.0
    max_size: int = 100


@dataclass
class MatcherConfig:
    """Comparable matcher configuration."""

    max_results: int = 12
    search_radius_km: float = 10.0


@dataclass
class GroupingConfig:
    """Location grouping configuration."""

    trigram_threshold: float = 0.9
    levenshtein_max: int = 3
    short_name_length: int = 15
    max_workers: int = 4
    trigram_backend: str = "memory"


@dataclass
class GeocodingConfig:
    """Geocoding queue and cost analysis configuration."""

    unit_price: float = 0.005  # USD per request
    country: str = "Spain"
    fold_min_group_size: int = 5
    top_groups: int = 10


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration (trigram backend)."""

    host: str = "localhost"
    port: int = 5432
    database: str = "properties"
    user: str = "postgres"
    password: str = "postgres"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class PropMatchConfig:
    """Main configuration for prop-match."""

    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    matcher: MatcherConfig = field(default_factory=MatcherConfig)
    grouping: GroupingConfig = field(default_factory=GroupingConfig)
    geocoding: GeocodingConfig = field(default_factory=GeocodingConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    log_level: str = "INFO"
    log_format: str = "standard"

    def to_dict(self) -> dict[str, Any]:
        """Flatten the settings that matter for a run into a dict (for logging)."""
        return {
            "cache_ttl_seconds": self.cache.ttl_seconds,
            "cache_max_size": self.cache.max_size,
            "max_results": self.matcher.max_results,
            "search_radius_km": self.matcher.search_radius_km,
            "trigram_backend": self.grouping.trigram_backend,
            "trigram_threshold": self.grouping.trigram_threshold,
            "levenshtein_max": self.grouping.levenshtein_max,
            "max_workers": self.grouping.max_workers,
            "unit_price": self.geocoding.unit_price,
        }

    @classmethod
    def from_env(cls) -> "PropMatchConfig":
        """Create config from environment variables."""
        import os

        cache = CacheConfig(
            ttl_seconds=float(os.getenv("PROP_MATCH_CACHE_TTL", "1800")),
            max_size=int(os.getenv("PROP_MATCH_CACHE_SIZE", "100")),
        )

        matcher = MatcherConfig(
            max_results=int(os.getenv("PROP_MATCH_MAX_RESULTS", "12")),
            search_radius_km=float(os.getenv("PROP_MATCH_RADIUS_KM", "10")),
        )

        grouping = GroupingConfig(
            trigram_threshold=float(os.getenv("PROP_MATCH_TRIGRAM_THRESHOLD", "0.9")),
            levenshtein_max=int(os.getenv("PROP_MATCH_LEVENSHTEIN_MAX", "3")),
            max_workers=int(os.getenv("PROP_MATCH_WORKERS", "4")),
            trigram_backend=os.getenv("PROP_MATCH_TRIGRAM_BACKEND", "memory").lower(),
        )

        geocoding = GeocodingConfig(
            unit_price=float(os.getenv("PROP_MATCH_GEOCODING_UNIT_PRICE", "0.005")),
            country=os.getenv("PROP_MATCH_GEOCODING_COUNTRY", "Spain"),
        )

        postgres = PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=int(os.getenv("POSTGRES_PORT", "5432")),
            database=os.getenv("POSTGRES_DB", "properties"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
        )

        return cls(
            cache=cache,
            matcher=matcher,
            grouping=grouping,
            geocoding=geocoding,
            postgres=postgres,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
