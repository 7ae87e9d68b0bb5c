"""Enumeration types for property records."""

from enum import Enum


class ListingType(str, Enum):
    SALE = "sale"
    LONG_TERM = "long_term"
    SHORT_TERM = "short_term"


class PropertyType(str, Enum):
    APARTMENT = "apartment"
    VILLA = "villa"
    TOWNHOUSE = "townhouse"
    PENTHOUSE = "penthouse"
    PLOT = "plot"
    COMMERCIAL = "commercial"
    OFFICE = "office"
    GARAGE = "garage"
    WAREHOUSE = "warehouse"
    COUNTRY_HOUSE = "country-house"


# Numeric codes used by the listing feed
PROPERTY_TYPE_CODES: dict[int, PropertyType] = {
    0: PropertyType.APARTMENT,
    1: PropertyType.VILLA,
    2: PropertyType.TOWNHOUSE,
    3: PropertyType.PENTHOUSE,
    4: PropertyType.PLOT,
    5: PropertyType.COMMERCIAL,
    6: PropertyType.OFFICE,
    7: PropertyType.GARAGE,
    8: PropertyType.WAREHOUSE,
    9: PropertyType.COUNTRY_HOUSE,
}


class DistanceMethod(str, Enum):
    HAVERSINE = "haversine"
    HIERARCHY = "hierarchy"


class LocationTier(int, Enum):
    URBANIZATION = 1
    SUBURB = 2
    CITY = 3
    UNKNOWN = 4


class MarketPositionLabel(str, Enum):
    ABOVE_MARKET = "above_market"
    BELOW_MARKET = "below_market"


class Volatility(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    INSUFFICIENT_DATA = "insufficient_data"
