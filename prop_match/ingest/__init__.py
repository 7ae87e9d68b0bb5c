"""Ingestion: raw catalog rows to canonical property records."""

from prop_match.ingest.mapper import (
    detect_listing_type,
    parse_coordinates,
    parse_features,
    parse_property_type,
    record_from_row,
    records_from_rows,
)

__all__ = [
    "detect_listing_type",
    "parse_coordinates",
    "parse_features",
    "parse_property_type",
    "record_from_row",
    "records_from_rows",
]
