"""Tests for synthetic catalog generation."""

from prop_match.generators import GAZETTEER, CatalogGenerator
from prop_match.models import ListingType, PropertyRecord


class TestCatalogGenerator:
    """Tests for CatalogGenerator."""

    def test_generate_single(self, seed: int) -> None:
        record = CatalogGenerator(seed=seed).generate()

        assert isinstance(record, PropertyRecord)
        assert record.property_id
        assert record.reference == "R0000001"
        assert record.property_type in {"apartment", "villa", "townhouse", "penthouse"}
        assert record.price and record.price > 0

    def test_reproducible(self, seed: int) -> None:
        first = CatalogGenerator(seed=seed).generate_catalog(50)
        second = CatalogGenerator(seed=seed).generate_catalog(50)

        assert first == second

    def test_batch_is_lazy(self, seed: int) -> None:
        batch = CatalogGenerator(seed=seed).generate_batch(5)

        assert not isinstance(batch, list)
        assert len(list(batch)) == 5

    def test_unique_ids(self, seed: int) -> None:
        catalog = CatalogGenerator(seed=seed).generate_catalog(200)

        assert len({r.property_id for r in catalog}) == 200

    def test_price_matches_listing_type(self, seed: int) -> None:
        for record in CatalogGenerator(seed=seed).generate_catalog(100):
            if record.listing_type is ListingType.SALE:
                assert record.sale_price
            elif record.listing_type is ListingType.LONG_TERM:
                assert record.monthly_price
            else:
                assert record.weekly_price

    def test_without_noise_locations_from_gazetteer(self, seed: int) -> None:
        catalog = CatalogGenerator(seed=seed, noise_rate=0.0).generate_catalog(100)

        for record in catalog:
            _, suburbs, urbanizations = GAZETTEER[record.city]
            assert record.suburb is None or record.suburb in suburbs
            assert record.urbanization is None or record.urbanization in urbanizations

    def test_city_restriction(self, seed: int) -> None:
        catalog = CatalogGenerator(seed=seed, noise_rate=0.0, cities=["Mijas"]).generate_catalog(20)

        assert {r.city for r in catalog} == {"Mijas"}

    def test_coordinate_rate(self, seed: int) -> None:
        none = CatalogGenerator(seed=seed, coordinate_rate=0.0).generate_catalog(30)
        all_ = CatalogGenerator(seed=seed, coordinate_rate=1.0).generate_catalog(30)

        assert not any(r.has_coordinates for r in none)
        assert all(r.has_coordinates for r in all_)


class TestAddNoise:
    """Tests for location noise."""

    def test_none_passthrough(self, seed: int) -> None:
        assert CatalogGenerator(seed=seed).add_noise(None) is None

    def test_noise_changes_name(self, seed: int) -> None:
        gen = CatalogGenerator(seed=seed)

        variants = {gen.add_noise("Nueva Andalucía") for _ in range(50)}

        assert len(variants) > 1
        assert "Nueva Andalucia" in variants
