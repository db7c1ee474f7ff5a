"""Unit tests for material filtering."""

import itertools

import pytest

from models.filters import DEFAULT_FILTERS, FilterState
from models.material import Material
from services.filter_service import (
    DEFAULT_PREDICATE_ORDER,
    apply_filters,
    has_active_filters,
)


@pytest.fixture
def catalogue():
    return [
        Material(id=1, name="Cross-Laminated Timber", category="Timber", lis=20, ris=72, total_carbon=42, cost=120),
        Material(id=2, name="Steel Beam", category="Metals", lis=155, ris=22, total_carbon=310, cost=85),
        Material(id=3, name="Hempcrete", category="Insulation", lis=6, ris=81, total_carbon=12, cost=95),
        Material(id=4, name="Glulam", category="Timber", lis=25, ris=50, total_carbon=None, cost=1500),
        Material(id=5, name="Unscored Block", category="Masonry"),
    ]


def _ids(materials):
    return [m.id for m in materials]


class TestPredicates:

    def test_default_filters_keep_everything(self, catalogue):
        # Steel's LIS of 155 is above the default LIS ceiling
        assert _ids(apply_filters(catalogue)) == [1, 3, 4, 5]

    def test_search_is_case_insensitive_on_name_or_category(self, catalogue):
        assert _ids(apply_filters(catalogue, FilterState(search="TIMBER", lis_range=(0, 200)))) == [1, 4]
        assert _ids(apply_filters(catalogue, FilterState(search="crete"))) == [3]

    def test_categories(self, catalogue):
        state = FilterState(categories=["Insulation", "Masonry"])
        assert _ids(apply_filters(catalogue, state)) == [3, 5]

    def test_missing_scores_count_as_zero(self, catalogue):
        state = FilterState(ris_range=(10, 100))
        assert 5 not in _ids(apply_filters(catalogue, state))

    def test_carbon_ceiling_keeps_unknown_carbon(self, catalogue):
        state = FilterState(carbon_max=40)
        assert _ids(apply_filters(catalogue, state)) == [3, 4, 5]

    def test_open_ended_cost_range(self, catalogue):
        assert 4 in _ids(apply_filters(catalogue, FilterState(cost_range=(100, 1000))))
        assert 4 not in _ids(apply_filters(catalogue, FilterState(cost_range=(100, 999))))

    def test_cost_floor(self, catalogue):
        state = FilterState(cost_range=(100, 1000))
        assert _ids(apply_filters(catalogue, state)) == [1, 4]

    def test_regenerative_only(self, catalogue):
        state = FilterState(regenerative_only=True)
        # 72-20=52 and 81-6=75 pass; 50-25=25 does not
        assert _ids(apply_filters(catalogue, state)) == [1, 3]

    def test_camel_case_state(self, catalogue):
        state = FilterState.model_validate({"regenerativeOnly": True, "carbonMax": 20})
        assert _ids(apply_filters(catalogue, state)) == [3]


class TestFilterProperties:

    @pytest.fixture
    def busy_state(self):
        return FilterState(
            search="e",
            ris_range=(20, 100),
            lis_range=(0, 160),
            carbon_max=400,
            cost_range=(50, 1000),
        )

    def test_idempotent(self, catalogue, busy_state):
        once = apply_filters(catalogue, busy_state)
        twice = apply_filters(once, busy_state)
        assert twice == once

    def test_order_independent(self, catalogue, busy_state):
        expected = apply_filters(catalogue, busy_state)
        for order in itertools.permutations(DEFAULT_PREDICATE_ORDER):
            assert apply_filters(catalogue, busy_state, predicate_order=order) == expected

    def test_order_must_name_every_predicate(self, catalogue):
        with pytest.raises(ValueError):
            apply_filters(catalogue, DEFAULT_FILTERS, predicate_order=["search", "category"])


class TestFilterState:

    def test_ranges_must_be_ordered(self):
        with pytest.raises(ValueError):
            FilterState(ris_range=(80, 20))

    def test_has_active_filters(self):
        assert not has_active_filters(DEFAULT_FILTERS)
        assert has_active_filters(FilterState(search="clay"))
        assert has_active_filters(FilterState(cost_range=(0, 500)))
        assert has_active_filters(FilterState(regenerative_only=True))
