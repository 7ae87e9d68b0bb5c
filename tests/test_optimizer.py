"""Tests for GroupOptimizer and the geocoding planner."""

import pytest

from prop_match.config import GeocodingConfig, GroupingConfig, PropMatchConfig
from prop_match.generators import CatalogGenerator
from prop_match.location import GroupOptimizer, plan_geocoding
from prop_match.location.grouper import select_representative
from prop_match.location.optimizer import cost_analysis, geocoding_priority, geocoding_query
from prop_match.models import LocationGroup, LocationTier


@pytest.fixture
def make_group(make_record):
    """Build a group of ``size`` members sharing one location."""

    def _make(size: int = 1, tier: LocationTier = LocationTier.CITY, city: str = "Marbella", key: str | None = None, **fields):
        members = [make_record(city=city, **fields) for _ in range(size)]
        city_key = city.lower() if city else ""
        return LocationGroup(
            key=key or (f"city:{city_key}" if city_key else "unknown"),
            members=members,
            representative=select_representative(members),
            tier=tier,
            city_key=city_key,
        )

    return _make


class TestSingletonFolding:
    """Tests for optimize."""

    def test_city_singletons_fold_into_large_city_group(self, make_group) -> None:
        """Two Marbella singletons join the 8-member Marbella group."""
        large = make_group(8)
        single_a = make_group(1)
        single_b = make_group(1)

        final, analysis = GroupOptimizer().optimize([single_a, large, single_b])

        assert len(final) == 1
        assert final[0].size == 10
        assert set(final[0].property_ids) >= set(single_a.property_ids + single_b.property_ids)
        assert analysis.folded_singletons == 2
        assert analysis.total_properties == 10

    def test_input_not_mutated(self, make_group) -> None:
        large = make_group(8)

        GroupOptimizer().optimize([large, make_group(1)])

        assert large.size == 8
        assert large.merged_from == []

    def test_folded_keys_recorded(self, make_group) -> None:
        large = make_group(6, key="city:marbella")
        single = make_group(1, key="city:marbella-centro")

        final, _ = GroupOptimizer().optimize([large, single])

        assert final[0].merged_from == ["city:marbella", "city:marbella-centro"]

    def test_target_needs_more_than_five_members(self, make_group) -> None:
        final, analysis = GroupOptimizer().optimize([make_group(5), make_group(1)])

        assert len(final) == 2
        assert analysis.folded_singletons == 0

    def test_other_city_not_folded(self, make_group) -> None:
        final, _ = GroupOptimizer().optimize([make_group(8), make_group(1, city="Mijas")])

        assert [g.size for g in final] == [8, 1]

    def test_specific_singletons_not_folded(self, make_group) -> None:
        suburb = make_group(1, tier=LocationTier.SUBURB, key="sub:elviria||city:marbella", suburb="Elviria")

        final, _ = GroupOptimizer().optimize([make_group(8), suburb])

        assert len(final) == 2

    def test_unknown_singleton_stays(self, make_group) -> None:
        final, _ = GroupOptimizer().optimize([make_group(8), make_group(1, tier=LocationTier.UNKNOWN, city=None)])

        assert len(final) == 2

    def test_largest_target_chosen(self, make_group) -> None:
        small = make_group(6)
        big = make_group(9)

        final, _ = GroupOptimizer().optimize([small, make_group(1), big])

        assert [g.size for g in final] == [6, 10]


class TestQueue:
    """Tests for priority, query and ordering."""

    def test_priority(self, make_group) -> None:
        group = make_group(3, urbanization="Aloha", address="Calle Sol 1", coords=(36.5, -4.9))

        assert geocoding_priority(group) == 3 + 10 + 5 + 20

    def test_priority_plain(self, make_group) -> None:
        assert geocoding_priority(make_group(4)) == 4

    def test_query(self, make_group) -> None:
        group = make_group(1, urbanization="Los Naranjos", suburb="Nueva Andalucía", address="Calle Sol 1")

        assert geocoding_query(group) == "Los Naranjos, Nueva Andalucía, Calle Sol 1, Marbella, Spain"
        assert geocoding_query(group, country="España").endswith("Marbella, España")

    def test_sorted_by_priority_then_key(self, make_group) -> None:
        groups = [
            make_group(2, key="city:b"),
            make_group(1, key="city:z", coords=(36.5, -4.9)),
            make_group(2, key="city:a"),
        ]

        queue = GroupOptimizer().build_queue(groups)

        assert [e.group_key for e in queue] == ["city:z", "city:a", "city:b"]
        assert [e.priority for e in queue] == [21, 2, 2]

    def test_entry_fields(self, make_group) -> None:
        group = make_group(2)

        entry = GroupOptimizer(GeocodingConfig(country="Spain")).build_queue([group])[0]

        assert entry.property_ids == tuple(group.property_ids)
        assert entry.tier is LocationTier.CITY
        assert entry.query == "Marbella, Spain"
        assert entry.representative_reference == group.representative.reference


class TestAnalysis:
    """Tests for cost and distribution reporting."""

    def test_cost_analysis(self) -> None:
        cost = cost_analysis(100, 25, 0.005)

        assert cost.original_cost == pytest.approx(0.5)
        assert cost.optimized_cost == pytest.approx(0.125)
        assert cost.savings == pytest.approx(0.375)
        assert cost.percentage == 75.0

    def test_cost_analysis_empty(self) -> None:
        cost = cost_analysis(0, 0, 0.005)

        assert cost.savings == 0
        assert cost.percentage == 0.0

    def test_distribution_and_top_groups(self, make_group) -> None:
        groups = [make_group(1, city=f"Town {i}") for i in range(12)] + [make_group(7, city="Mijas")]

        analysis = GroupOptimizer().analyze(groups)

        assert analysis.total_properties == 19
        assert analysis.distribution.singletons == 12
        assert analysis.distribution.multi_property == 1
        assert analysis.distribution.largest_group == 7
        assert analysis.distribution.average_size == 1.5
        assert len(analysis.top_groups) == 10
        assert analysis.top_groups[0].property_count == 7
        assert analysis.top_groups[0].location == "Mijas"

    def test_empty_analysis(self) -> None:
        analysis = GroupOptimizer().analyze([])

        assert analysis.total_groups == 0
        assert analysis.distribution.largest_group == 0
        assert analysis.distribution.average_size == 0.0


class TestPlanGeocoding:
    """Tests for the one-call planner."""

    def test_plan_over_generated_catalog(self, seed: int) -> None:
        catalog = CatalogGenerator(seed=seed).generate_catalog(300)

        plan = plan_geocoding(catalog)

        ids = [pid for g in plan.groups for pid in g.property_ids]
        assert sorted(ids) == sorted(r.property_id for r in catalog)
        assert len(plan.queue) == len(plan.groups) == plan.analysis.total_groups
        assert plan.analysis.total_properties == 300
        assert plan.analysis.cost.percentage > 0
        priorities = [e.priority for e in plan.queue]
        assert priorities == sorted(priorities, reverse=True)
        assert not plan.trigram_degraded

    def test_degraded_plan_noted(self, make_record, counting_trigram) -> None:
        catalog = [make_record(suburb="Elviria"), make_record(suburb="Elvirya")]

        plan = plan_geocoding(catalog, trigram=counting_trigram(fail=True))

        assert plan.trigram_degraded
        assert plan.notes
        assert len(plan.groups) == 1

    def test_config_passed_through(self, make_record) -> None:
        config = PropMatchConfig(
            grouping=GroupingConfig(max_workers=1),
            geocoding=GeocodingConfig(unit_price=0.01, country="Portugal"),
        )

        plan = plan_geocoding([make_record()], config)

        assert plan.analysis.cost.unit_price == 0.01
        assert plan.queue[0].query.endswith("Portugal")
