"""In-memory property catalog answering comparable-candidate queries."""

from dataclasses import dataclass, field
from typing import Iterable

from prop_match.exceptions import DataMalformedError
from prop_match.location.normalizer import normalize
from prop_match.matching.geo import haversine_km
from prop_match.models.matching import SearchCriteria
from prop_match.models.property import PropertyRecord


@dataclass
class CatalogStore:
    """In-memory store of active properties with a city index."""

    properties: dict[str, PropertyRecord] = field(default_factory=dict)

    # Relationship indexes
    _city_index: dict[str, list[str]] = field(default_factory=dict)

    def add_property(self, record: PropertyRecord) -> None:
        """Add a property to the store."""
        if record.property_id in self.properties:
            raise DataMalformedError(f"Property {record.property_id} already in catalog")
        self.properties[record.property_id] = record
        city = normalize(record.city)
        if city:
            self._city_index.setdefault(city, []).append(record.property_id)

    def add_many(self, records: Iterable[PropertyRecord]) -> int:
        """Add records, returning how many were stored."""
        count = 0
        for record in records:
            self.add_property(record)
            count += 1
        return count

    def get(self, property_id: str) -> PropertyRecord | None:
        return self.properties.get(property_id)

    def all(self) -> list[PropertyRecord]:
        """Catalog snapshot in insertion order."""
        return list(self.properties.values())

    def get_city_properties(self, city: str) -> list[PropertyRecord]:
        ids = self._city_index.get(normalize(city), [])
        return [self.properties[pid] for pid in ids]

    def find_similar(self, criteria: SearchCriteria) -> list[PropertyRecord]:
        """Candidates for a comparable search.

        Properties within ``radius_km`` when the subject has coordinates (those
        without coordinates are matched on city), otherwise properties in the
        subject's city. Type, listing type and price window must match; the
        subject itself is excluded.
        """
        city = normalize(criteria.city)
        if criteria.coordinates is not None:
            pool = self.all()
        elif city:
            pool = self.get_city_properties(city)
        else:
            return []

        matches = []
        for record in pool:
            if criteria.reference and record.reference == criteria.reference:
                continue
            if criteria.property_type and record.property_type != criteria.property_type:
                continue
            if record.listing_type != criteria.listing_type:
                continue
            price = record.price
            if criteria.min_price is not None and (price is None or price < criteria.min_price):
                continue
            if criteria.max_price is not None and (price is None or price > criteria.max_price):
                continue
            if criteria.coordinates is not None and record.coordinates is not None:
                if haversine_km(criteria.coordinates, record.coordinates) > criteria.radius_km:
                    continue
            elif not city or normalize(record.city) != city:
                continue
            matches.append(record)
        return matches

    def summary(self) -> dict[str, int]:
        """Return summary counts of the catalog."""
        return {
            "properties": len(self.properties),
            "cities": len(self._city_index),
            "with_coordinates": sum(1 for p in self.properties.values() if p.has_coordinates),
        }
