"""Tests for mapping raw catalog rows to property records."""

import logging

import pytest

from prop_match.exceptions import DataMalformedError
from prop_match.ingest import (
    detect_listing_type,
    parse_coordinates,
    parse_features,
    parse_property_type,
    record_from_row,
    records_from_rows,
)
from prop_match.models import Coordinates, ListingType


class TestParseFeatures:
    """Tests for parse_features."""

    def test_list_passthrough(self) -> None:
        assert parse_features(["Pool", " Garden ", "", None]) == ("Pool", "Garden")

    def test_json_string(self) -> None:
        assert parse_features('["Pool", "Sea Views"]') == ("Pool", "Sea Views")

    def test_empty(self) -> None:
        assert parse_features(None) == ()
        assert parse_features("") == ()

    def test_invalid_json_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="prop_match.ingest.mapper"):
            assert parse_features("{not json", ref="R1") == ()

        assert "R1" in caplog.text

    def test_wrong_type_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="prop_match.ingest.mapper"):
            assert parse_features('{"pool": true}', ref="R2") == ()

        assert "expected a feature list" in caplog.text


class TestParseCoordinates:
    """Tests for parse_coordinates."""

    def test_long_names(self) -> None:
        assert parse_coordinates({"latitude": "36.5", "longitude": "-4.88"}) == Coordinates(36.5, -4.88)

    def test_short_names(self) -> None:
        assert parse_coordinates({"lat": 36.5, "lng": -4.88}) == Coordinates(36.5, -4.88)

    def test_zero_pair_is_missing(self) -> None:
        assert parse_coordinates({"lat": 0, "lng": 0}) is None

    def test_out_of_range_is_missing(self) -> None:
        assert parse_coordinates({"lat": 136.5, "lng": -4.88}) is None

    def test_partial_is_missing(self) -> None:
        assert parse_coordinates({"lat": 36.5}) is None


class TestParsePropertyType:
    """Tests for parse_property_type."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0, "apartment"), ("1", "villa"), (9, "country-house"), ("Penthouse", "penthouse"), (None, None), (42, None)],
    )
    def test_values(self, value, expected) -> None:
        assert parse_property_type(value) == expected


class TestDetectListingType:
    """Tests for detect_listing_type."""

    def test_explicit(self) -> None:
        assert detect_listing_type({"listing_type": "Long_Term"}) is ListingType.LONG_TERM

    def test_flags(self) -> None:
        assert detect_listing_type({"is_short_term": True}) is ListingType.SHORT_TERM

    def test_price_fields(self) -> None:
        assert detect_listing_type({"monthly_price": 1500}) is ListingType.LONG_TERM
        assert detect_listing_type({"weekly_price_from": 700}) is ListingType.SHORT_TERM

    def test_generic_price_heuristic(self) -> None:
        assert detect_listing_type({"price": 350_000}) is ListingType.SALE
        assert detect_listing_type({"price": 1_800}) is ListingType.LONG_TERM
        assert detect_listing_type({"price": 300}) is ListingType.SHORT_TERM

    def test_default_sale(self) -> None:
        assert detect_listing_type({}) is ListingType.SALE


class TestRecordFromRow:
    """Tests for record_from_row."""

    def test_aliases_resolved(self) -> None:
        row = {
            "id": 17,
            "reference": "R3456",
            "urbanization_name": "Los Naranjos",
            "suburb": "Nueva Andalucía",
            "city": "Marbella",
            "lat": "36.50",
            "lng": "-4.96",
            "build_size": "180",
            "plot_size": 900,
            "bedrooms": "4",
            "bathrooms": 3.0,
            "price": 1_250_000,
            "features": '["Pool", "Garden"]',
            "propertyType": 1,
        }

        record = record_from_row(row)

        assert record.property_id == "17"
        assert record.reference == "R3456"
        assert record.urbanization == "Los Naranjos"
        assert record.coordinates == Coordinates(36.5, -4.96)
        assert record.build_area == 180.0
        assert record.plot_area == 900.0
        assert record.bedrooms == 4
        assert record.bathrooms == 3
        assert record.sale_price == 1_250_000
        assert record.listing_type is ListingType.SALE
        assert record.features == ("Pool", "Garden")
        assert record.property_type == "villa"

    def test_generic_rental_price(self) -> None:
        record = record_from_row({"reference": "R1", "price": 2_000})

        assert record.property_id == "R1"
        assert record.listing_type is ListingType.LONG_TERM
        assert record.monthly_price == 2_000
        assert record.sale_price is None

    def test_blank_text_is_none(self) -> None:
        record = record_from_row({"id": "a", "suburb": "   ", "city": " Mijas "})

        assert record.suburb is None
        assert record.city == "Mijas"

    def test_unparseable_number_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="prop_match.ingest.mapper"):
            record = record_from_row({"id": "a", "bedrooms": "three"})

        assert record.bedrooms is None
        assert "bedrooms" in caplog.text

    @pytest.mark.parametrize("value", ["nan", "NaN", "inf", "-inf", float("nan")])
    def test_non_finite_number_dropped(self, value, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="prop_match.ingest.mapper"):
            record = record_from_row({"id": "a", "bedrooms": value, "build_size": value, "price": value})

        assert record.bedrooms is None
        assert record.build_area is None
        assert record.price is None
        assert "non-finite" in caplog.text

    def test_missing_identity(self) -> None:
        with pytest.raises(DataMalformedError):
            record_from_row({"city": "Marbella"})


class TestRecordsFromRows:
    """Tests for records_from_rows."""

    def test_skips_malformed(self, caplog: pytest.LogCaptureFixture) -> None:
        rows = [{"id": "a"}, {"city": "Marbella"}, {"id": "b"}]

        with caplog.at_level(logging.WARNING, logger="prop_match.ingest.mapper"):
            records = list(records_from_rows(rows))

        assert [r.property_id for r in records] == ["a", "b"]
        assert "row 1" in caplog.text

    def test_non_finite_row_does_not_stop_ingest(self) -> None:
        rows = [{"id": "a"}, {"id": "b", "bedrooms": "nan", "build_size": "inf"}, {"id": "c"}]

        records = list(records_from_rows(rows))

        assert [r.property_id for r in records] == ["a", "b", "c"]
        assert records[1].bedrooms is None
        assert records[1].build_area is None
