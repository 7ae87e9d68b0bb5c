"""Synthetic data generators."""

from prop_match.generators.base import BaseGenerator
from prop_match.generators.catalog import GAZETTEER, CatalogGenerator

__all__ = ["GAZETTEER", "BaseGenerator", "CatalogGenerator"]
