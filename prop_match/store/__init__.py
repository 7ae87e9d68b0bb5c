"""In-memory data stores."""

from prop_match.store.catalog import CatalogStore

__all__ = ["CatalogStore"]
