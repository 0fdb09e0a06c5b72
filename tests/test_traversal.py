"""Tests for accessible traversal."""

import pytest

from dazzletreeview.core import (
    get_accessible_range,
    get_descendants,
    get_last_accessible,
    get_next_accessible,
    get_previous_accessible,
    is_accessible,
    iter_accessible,
)


ALL_BRANCHES = {"Fruits", "Citrus", "Vegetables", "Leafy"}


class TestSampleTree:
    """Navigation over A(B, C(D))."""

    def test_collapsed_tree_shows_top_level_only(self, sample_index):
        assert list(iter_accessible(sample_index, set())) == ["A"]
        assert get_next_accessible(sample_index, "A", set()) is None

    def test_next_steps_into_expanded_branches(self, sample_index):
        expanded = {"A", "C"}
        assert get_next_accessible(sample_index, "A", expanded) == "B"
        assert get_next_accessible(sample_index, "B", expanded) == "C"
        assert get_next_accessible(sample_index, "C", expanded) == "D"
        assert get_next_accessible(sample_index, "D", expanded) is None

    def test_next_from_root_is_first_node(self, sample_index):
        assert get_next_accessible(sample_index, "root", set()) == "A"

    def test_collapsed_branch_is_skipped(self, sample_index):
        assert get_next_accessible(sample_index, "C", {"A"}) is None

    def test_previous(self, sample_index):
        expanded = {"A", "C"}
        assert get_previous_accessible(sample_index, "D", expanded) == "C"
        assert get_previous_accessible(sample_index, "C", expanded) == "B"
        assert get_previous_accessible(sample_index, "B", expanded) == "A"
        assert get_previous_accessible(sample_index, "A", expanded) is None

    def test_last_accessible(self, sample_index):
        assert get_last_accessible(sample_index, "root", {"A", "C"}) == "D"
        assert get_last_accessible(sample_index, "root", {"A"}) == "C"
        assert get_last_accessible(sample_index, "root", set()) == "A"

    def test_is_accessible(self, sample_index):
        assert is_accessible(sample_index, "A", set())
        assert not is_accessible(sample_index, "D", {"C"})
        assert is_accessible(sample_index, "D", {"A", "C"})


class TestInversePairing:
    """next(previous(id)) == id wherever both steps exist."""

    @pytest.mark.parametrize("expanded", [
        set(),
        {"Fruits"},
        {"Fruits", "Citrus"},
        {"Vegetables", "Leafy"},
        ALL_BRANCHES,
        {"Citrus", "Leafy"},
    ])
    def test_next_inverts_previous(self, food_index, expanded):
        for node_id in iter_accessible(food_index, expanded):
            previous = get_previous_accessible(food_index, node_id, expanded)
            if previous is not None:
                assert get_next_accessible(food_index, previous, expanded) == node_id
            following = get_next_accessible(food_index, node_id, expanded)
            if following is not None:
                assert get_previous_accessible(food_index, following, expanded) == node_id

    def test_full_walk_order(self, food_index):
        assert list(iter_accessible(food_index, ALL_BRANCHES)) == [
            "Fruits", "Apple", "Banana", "Citrus", "Lemon", "Orange",
            "Vegetables", "Carrot", "Leafy", "Kale", "Grains",
        ]


class TestDescendants:

    def test_ignores_expansion(self, food_index):
        assert get_descendants(food_index, "Vegetables") == ["Carrot", "Leafy", "Kale"]

    def test_excluded_subtrees_are_skipped(self, food_index):
        assert get_descendants(food_index, "Fruits", {"Citrus"}) == ["Apple", "Banana"]

    def test_leaf_has_none(self, food_index):
        assert get_descendants(food_index, "Apple") == []


class TestAccessibleRange:

    def test_forward(self, food_index):
        assert get_accessible_range(food_index, {"Fruits"}, "Apple", "Vegetables") == [
            "Apple", "Banana", "Citrus", "Vegetables",
        ]

    def test_backward_is_still_display_order(self, food_index):
        assert get_accessible_range(food_index, {"Fruits"}, "Vegetables", "Banana") == [
            "Banana", "Citrus", "Vegetables",
        ]

    def test_single_node(self, food_index):
        assert get_accessible_range(food_index, set(), "Grains", "Grains") == ["Grains"]

    def test_hidden_endpoint_returns_start(self, food_index):
        assert get_accessible_range(food_index, set(), "Fruits", "Lemon") == ["Fruits"]
