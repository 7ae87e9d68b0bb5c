"""Tests for the data model."""

import dataclasses
from datetime import datetime, timezone

import pytest

from prop_match.exceptions import ValidationFailure
from prop_match.models import (
    PROPERTY_TYPE_CODES,
    ComparableResult,
    Coordinates,
    GeocodingQueueEntry,
    ListingType,
    LocationGroup,
    LocationTier,
    PropertyRecord,
    PropertyType,
    SearchCriteria,
    round_half_up,
)


class TestPropertyRecord:
    """Tests for PropertyRecord."""

    def test_frozen(self) -> None:
        record = PropertyRecord(property_id="p1")
        with pytest.raises(AttributeError):
            record.city = "Marbella"  # type: ignore[misc]

    def test_price_follows_listing_type(self) -> None:
        """Test the listing-type price wins over other prices."""
        record = PropertyRecord(
            property_id="p1",
            sale_price=400_000,
            monthly_price=1_800,
            listing_type=ListingType.LONG_TERM,
        )

        assert record.price == 1_800

    def test_price_falls_back_to_first_available(self) -> None:
        record = PropertyRecord(property_id="p1", weekly_price=900, listing_type=ListingType.SALE)

        assert record.price == 900

    def test_price_none_without_prices(self) -> None:
        assert PropertyRecord(property_id="p1").price is None

    def test_price_per_sqm(self) -> None:
        record = PropertyRecord(property_id="p1", sale_price=500_000, build_area=120)

        assert record.price_per_sqm == 4167

    def test_price_per_sqm_rounds_half_up(self) -> None:
        record = PropertyRecord(property_id="p1", sale_price=250_250, build_area=100)

        assert record.price_per_sqm == 2503

    def test_price_per_sqm_needs_area(self) -> None:
        assert PropertyRecord(property_id="p1", sale_price=500_000).price_per_sqm is None

    def test_has_coordinates(self) -> None:
        assert PropertyRecord(property_id="p1", coordinates=Coordinates(36.5, -4.9)).has_coordinates
        assert not PropertyRecord(property_id="p2").has_coordinates


class TestSearchCriteria:
    """Tests for SearchCriteria."""

    def test_from_record_sale_window(self, make_record) -> None:
        criteria = SearchCriteria.from_record(make_record(sale_price=500_000))

        assert criteria.min_price == 250_000
        assert criteria.max_price == 750_000
        assert criteria.radius_km == 10.0

    def test_from_record_luxury_window(self, make_record) -> None:
        criteria = SearchCriteria.from_record(make_record(sale_price=2_000_000))

        assert criteria.min_price == pytest.approx(400_000)
        assert criteria.max_price == pytest.approx(3_600_000)

    def test_from_record_rental_windows(self, make_record) -> None:
        long_term = SearchCriteria.from_record(
            make_record(sale_price=None, monthly_price=2_000, listing_type=ListingType.LONG_TERM)
        )
        short_term = SearchCriteria.from_record(
            make_record(sale_price=None, weekly_price=1_000, listing_type=ListingType.SHORT_TERM)
        )

        assert (long_term.min_price, long_term.max_price) == (pytest.approx(1_200), pytest.approx(2_800))
        assert (short_term.min_price, short_term.max_price) == (pytest.approx(400), pytest.approx(1_600))

    def test_no_price_no_window(self, make_record) -> None:
        criteria = SearchCriteria.from_record(make_record(sale_price=None))

        assert criteria.min_price is None
        assert criteria.max_price is None

    def test_valid_with_city_only(self, make_record) -> None:
        assert SearchCriteria.from_record(make_record()).is_valid()

    def test_valid_with_coordinates_only(self, make_record) -> None:
        record = make_record(city=None, coords=(36.5, -4.88))

        assert SearchCriteria.from_record(record).is_valid()

    def test_invalid_without_location(self, make_record) -> None:
        criteria = SearchCriteria.from_record(make_record(city=None))

        assert not criteria.is_valid()
        assert "no coordinates and no location" in criteria.validation_reason()

    def test_invalid_without_type(self, make_record) -> None:
        criteria = SearchCriteria.from_record(make_record(property_type=None))

        assert not criteria.is_valid()
        assert "property type" in criteria.validation_reason()

    def test_invalid_without_size_bedrooms_or_price(self, make_record) -> None:
        criteria = SearchCriteria.from_record(make_record(build_area=None, bedrooms=None, sale_price=None))

        assert not criteria.is_valid()
        assert criteria.validation_reason().startswith("Insufficient property data")

    def test_zero_bedrooms_counts_as_property_data(self, make_record) -> None:
        studio = make_record(build_area=None, bedrooms=0, sale_price=None)

        assert SearchCriteria.from_record(studio).is_valid()

    def test_validate_raises(self, make_record) -> None:
        criteria = SearchCriteria.from_record(make_record(property_type=None))

        with pytest.raises(ValidationFailure, match="property type"):
            criteria.validate()

        SearchCriteria.from_record(make_record()).validate()


class TestGroupingModels:
    """Tests for LocationGroup and GeocodingQueueEntry."""

    def test_location_group_properties(self, make_record) -> None:
        a = make_record(urbanization="Los Naranjos", suburb="Nueva Andalucía")
        b = make_record()
        group = LocationGroup(
            key="urb:los naranjos||sub:nueva andalucía||city:marbella",
            members=[a, b],
            representative=a,
            tier=LocationTier.URBANIZATION,
            urbanization_key="los naranjos",
            suburb_key="nueva andalucía",
            city_key="marbella",
        )

        assert group.size == 2
        assert group.property_ids == [a.property_id, b.property_id]
        assert group.primary_name == "los naranjos"
        assert group.display_location() == "Los Naranjos, Nueva Andalucía, Marbella"

    def test_display_location_unknown(self) -> None:
        record = PropertyRecord(property_id="p1")
        group = LocationGroup(key="unknown", members=[record], representative=record, tier=LocationTier.UNKNOWN)

        assert group.display_location() == "Unknown location"
        assert group.primary_name == ""

    def test_queue_entry_count(self) -> None:
        entry = GeocodingQueueEntry(
            group_key="city:marbella",
            property_ids=("a", "b", "c"),
            query="Marbella, Spain",
            priority=3,
            tier=LocationTier.CITY,
        )

        assert entry.property_count == 3


class TestEnumsAndHelpers:
    """Tests for enums and rounding."""

    def test_property_type_codes(self) -> None:
        assert PROPERTY_TYPE_CODES[0] is PropertyType.APARTMENT
        assert PROPERTY_TYPE_CODES[9] is PropertyType.COUNTRY_HOUSE
        assert len(PROPERTY_TYPE_CODES) == 10

    def test_tier_ordering(self) -> None:
        assert LocationTier.URBANIZATION < LocationTier.SUBURB < LocationTier.CITY < LocationTier.UNKNOWN

    def test_round_half_up(self) -> None:
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(12.25, 1) == 12.3
        assert round_half_up(66.666, 1) == 66.7

    def test_comparable_result_frozen(self) -> None:
        result = ComparableResult(message="nothing")

        with pytest.raises(dataclasses.FrozenInstanceError):
            result.message = "changed"

    def test_comparable_result_empty(self) -> None:
        result = ComparableResult(message="nothing", cached_at=datetime.now(timezone.utc))

        assert result.is_empty
        assert result.error is None
