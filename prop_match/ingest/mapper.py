"""Map raw catalog rows onto the canonical ``PropertyRecord`` shape.

Listing feeds, the property database and session payloads name the same
fields differently (``lat``/``latitude``, ``build_size``/``build_area``, numeric
property-type codes, JSON-encoded feature lists...). All of those aliases are
resolved here, once, so that scoring and grouping only ever see one shape.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Iterable, Iterator, Mapping

from prop_match.exceptions import DataMalformedError
from prop_match.models.base import Coordinates
from prop_match.models.enums import PROPERTY_TYPE_CODES, ListingType
from prop_match.models.property import PropertyRecord

logger = logging.getLogger(__name__)

LATITUDE_FIELDS = ("latitude", "lat")
LONGITUDE_FIELDS = ("longitude", "lng", "lon")
BUILD_AREA_FIELDS = ("build_size", "build_square_meters", "build_area", "buildArea", "size")
PLOT_AREA_FIELDS = ("plot_size", "plot_area", "plotArea")
PROPERTY_TYPE_FIELDS = ("property_type", "propertyType", "type")
URBANIZATION_FIELDS = ("urbanization", "urbanization_name")
MONTHLY_PRICE_FIELDS = ("monthly_price", "rent_price")
WEEKLY_PRICE_FIELDS = ("weekly_price_from", "weekly_price_to", "weekly_price")


def _first(row: Mapping[str, Any], names: Iterable[str]) -> Any:
    for name in names:
        value = row.get(name)
        if value is not None and value != "":
            return value
    return None


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _to_float(value: Any, field_name: str, ref: str) -> float | None:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning("Property %s: cannot parse %s=%r as a number", ref, field_name, value)
        return None
    if not math.isfinite(number):
        logger.warning("Property %s: ignoring non-finite %s=%r", ref, field_name, value)
        return None
    return number


def _to_int(value: Any, field_name: str, ref: str) -> int | None:
    number = _to_float(value, field_name, ref)
    if number is None:
        return None
    try:
        return int(number)
    except (OverflowError, ValueError):
        logger.warning("Property %s: cannot parse %s=%r as an integer", ref, field_name, value)
        return None


def parse_features(value: Any, ref: str = "") -> tuple[str, ...]:
    """Parse a feature list that may arrive as a list or a JSON string.

    Unparseable input is logged and replaced with an empty tuple.
    """
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            logger.warning("Property %s: features are not valid JSON, using empty list", ref)
            return ()
    if isinstance(value, (list, tuple)):
        return tuple(str(tag).strip() for tag in value if tag is not None and str(tag).strip())
    logger.warning(
        "Property %s: expected a feature list, got %s; using empty list",
        ref,
        type(value).__name__,
    )
    return ()


def parse_coordinates(row: Mapping[str, Any], ref: str = "") -> Coordinates | None:
    """Extract a coordinate pair; (0, 0) and out-of-range values count as missing."""
    lat = _to_float(_first(row, LATITUDE_FIELDS), "latitude", ref)
    lng = _to_float(_first(row, LONGITUDE_FIELDS), "longitude", ref)
    if lat is None or lng is None:
        return None
    if lat == 0 and lng == 0:
        return None
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        logger.warning("Property %s: coordinates (%s, %s) out of range, ignoring", ref, lat, lng)
        return None
    return Coordinates(latitude=lat, longitude=lng)


def parse_property_type(value: Any) -> str | None:
    """Canonicalise a property type: numeric feed codes map to names."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int) or (isinstance(value, str) and value.strip().isdigit()):
        code = int(value)
        mapped = PROPERTY_TYPE_CODES.get(code)
        return mapped.value if mapped else None
    return str(value).strip().lower() or None


def detect_listing_type(row: Mapping[str, Any]) -> ListingType:
    """Detect the listing type from flags, then price fields, then price size."""
    explicit = row.get("listing_type")
    if isinstance(explicit, ListingType):
        return explicit
    if isinstance(explicit, str):
        try:
            return ListingType(explicit.strip().lower())
        except ValueError:
            pass

    if row.get("is_sale") is True:
        return ListingType.SALE
    if row.get("is_long_term") is True:
        return ListingType.LONG_TERM
    if row.get("is_short_term") is True:
        return ListingType.SHORT_TERM

    def positive(*names: str) -> bool:
        for name in names:
            try:
                if float(row.get(name) or 0) > 0:
                    return True
            except (TypeError, ValueError):
                continue
        return False

    if positive("sale_price"):
        return ListingType.SALE
    if positive(*MONTHLY_PRICE_FIELDS):
        return ListingType.LONG_TERM
    if positive(*WEEKLY_PRICE_FIELDS):
        return ListingType.SHORT_TERM

    try:
        price = float(row.get("price") or 0)
    except (TypeError, ValueError):
        price = 0
    if price > 100_000:
        return ListingType.SALE
    if 500 < price < 20_000:
        return ListingType.LONG_TERM
    if 0 < price < 500:
        return ListingType.SHORT_TERM
    return ListingType.SALE


def record_from_row(row: Mapping[str, Any]) -> PropertyRecord:
    """Build a ``PropertyRecord`` from a raw row.

    Raises
    ------
    DataMalformedError
        If the row has neither an id nor a reference.
    """
    raw_id = _first(row, ("id", "property_id"))
    reference = _text(row.get("reference")) or ""
    if raw_id is None and not reference:
        raise DataMalformedError("Row has neither an id nor a reference")
    property_id = str(raw_id) if raw_id is not None else reference
    ref = reference or property_id

    listing_type = detect_listing_type(row)
    generic_price = _to_float(row.get("price"), "price", ref)

    sale_price = _to_float(row.get("sale_price"), "sale_price", ref)
    monthly_price = _to_float(_first(row, MONTHLY_PRICE_FIELDS), "monthly_price", ref)
    weekly_price = _to_float(_first(row, WEEKLY_PRICE_FIELDS), "weekly_price", ref)
    if generic_price:
        if listing_type == ListingType.SALE and not sale_price:
            sale_price = generic_price
        elif listing_type == ListingType.LONG_TERM and not monthly_price:
            monthly_price = generic_price
        elif listing_type == ListingType.SHORT_TERM and not weekly_price:
            weekly_price = generic_price

    return PropertyRecord(
        property_id=property_id,
        reference=reference,
        urbanization=_text(_first(row, URBANIZATION_FIELDS)),
        suburb=_text(row.get("suburb")),
        city=_text(row.get("city")),
        address=_text(row.get("address")),
        coordinates=parse_coordinates(row, ref),
        build_area=_to_float(_first(row, BUILD_AREA_FIELDS), "build_area", ref),
        plot_area=_to_float(_first(row, PLOT_AREA_FIELDS), "plot_area", ref),
        bedrooms=_to_int(row.get("bedrooms"), "bedrooms", ref),
        bathrooms=_to_int(row.get("bathrooms"), "bathrooms", ref),
        sale_price=sale_price,
        monthly_price=monthly_price,
        weekly_price=weekly_price,
        features=parse_features(row.get("features"), ref),
        property_type=parse_property_type(_first(row, PROPERTY_TYPE_FIELDS)),
        listing_type=listing_type,
    )


def records_from_rows(rows: Iterable[Mapping[str, Any]]) -> Iterator[PropertyRecord]:
    """Map rows lazily, skipping (and logging) rows that cannot be identified."""
    for index, row in enumerate(rows):
        try:
            yield record_from_row(row)
        except DataMalformedError as e:
            logger.warning("Skipping catalog row %d: %s", index, e)
