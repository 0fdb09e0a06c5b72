"""Tests for controlled-set reconciliation and data-swap transitions."""

import pytest

from dazzletreeview.config import TreeViewConfig
from dazzletreeview.core import ActionType, TreeViewState, tree_reducer
from dazzletreeview.reconcile import Reconciler, data_changed_action, loaded_selection_actions


def _apply(state, actions):
    for action in actions:
        state = tree_reducer(state, action)
    return state


@pytest.fixture
def multi():
    return TreeViewConfig(multi_select=True)


class TestSelection:

    def test_uncontrolled_does_nothing(self, sample_index, multi):
        assert Reconciler().reconcile_selection(sample_index, TreeViewState(), multi, None) == []

    def test_new_set_replaces_selection(self, sample_index, multi):
        actions = Reconciler().reconcile_selection(sample_index, TreeViewState(), multi, ["B"])
        assert [(a.type, a.ids) for a in actions] == [(ActionType.CONTROLLED_SELECT_MANY, ("B",))]

    def test_same_set_twice_is_idempotent(self, sample_index, multi):
        reconciler = Reconciler()
        state = _apply(TreeViewState(), reconciler.reconcile_selection(sample_index, TreeViewState(), multi, ["B", "D"]))
        assert reconciler.reconcile_selection(sample_index, state, multi, ["D", "B"]) == []
        assert state.selected_ids == {"B", "D"}

    def test_unknown_ids_are_ignored(self, sample_index, multi):
        actions = Reconciler().reconcile_selection(sample_index, TreeViewState(), multi, ["ghost", "root", "C"])
        assert actions[0].ids == ("C",)

    def test_single_select_keeps_last(self, sample_index):
        config = TreeViewConfig()
        actions = Reconciler().reconcile_selection(sample_index, TreeViewState(), config, ["B", "C"])
        assert _apply(TreeViewState(), actions).selected_ids == {"C"}

    def test_propagation_covers_subtrees(self, sample_index):
        config = TreeViewConfig.checkbox_tree()
        actions = Reconciler().reconcile_selection(sample_index, TreeViewState(), config, ["C"])
        assert [a.type for a in actions] == [
            ActionType.CONTROLLED_SELECT_MANY,
            ActionType.CHANGE_SELECT_MANY,
        ]
        assert actions[1].ids == ("C", "D")
        assert _apply(TreeViewState(), actions).selected_ids == {"C", "D"}

    def test_releasing_control_resets_memory(self, sample_index, multi):
        reconciler = Reconciler()
        reconciler.reconcile_selection(sample_index, TreeViewState(), multi, ["B"])
        reconciler.reconcile_selection(sample_index, TreeViewState(), multi, None)
        assert reconciler.previous_selected is None


class TestExpansion:

    def test_initial_controlled_set_is_remembered(self):
        assert Reconciler(["A", "C"]).previous_expanded == {"A", "C"}
        assert Reconciler().previous_expanded is None
        assert Reconciler().previous_selected is None

    def test_nested_id_expands_with_parent(self, sample_index, multi):
        reconciler = Reconciler(controlled_expanded_ids=[])
        actions = reconciler.reconcile_expansion(sample_index, TreeViewState(), multi, ["C"])
        assert [(a.type, a.ids) for a in actions] == [(ActionType.EXPAND_MANY, ("C", "A"))]

    def test_top_level_id_keeps_focus(self, sample_index, multi):
        reconciler = Reconciler(controlled_expanded_ids=[])
        state = TreeViewState(tabbable_id="A")
        actions = reconciler.reconcile_expansion(sample_index, state, multi, ["A"])
        assert len(actions) == 1
        assert actions[0].type is ActionType.EXPAND
        assert actions[0].keep_focus

    def test_removed_id_collapses(self, sample_index, multi):
        reconciler = Reconciler(controlled_expanded_ids=["A", "C"])
        state = TreeViewState(expanded_ids={"A", "C"})
        actions = reconciler.reconcile_expansion(sample_index, state, multi, ["A"])
        assert [(a.type, a.ids) for a in actions] == [(ActionType.COLLAPSE_MANY, ("C",))]

    def test_collapse_propagates_to_descendants(self, sample_index):
        config = TreeViewConfig(propagate_collapse=True)
        reconciler = Reconciler(controlled_expanded_ids=["A", "C"])
        state = TreeViewState(expanded_ids={"A", "C"})
        state = _apply(state, reconciler.reconcile_expansion(sample_index, state, config, []))
        assert state.expanded_ids == frozenset()

    def test_repeated_set_is_idempotent(self, sample_index, multi):
        reconciler = Reconciler(controlled_expanded_ids=[])
        state = _apply(TreeViewState(), reconciler.reconcile_expansion(sample_index, TreeViewState(), multi, ["C"]))
        assert reconciler.reconcile_expansion(sample_index, state, multi, ["C"]) == []

    def test_leaves_are_ignored(self, sample_index, multi):
        reconciler = Reconciler(controlled_expanded_ids=[])
        assert reconciler.reconcile_expansion(sample_index, TreeViewState(), multi, ["B"]) == []


class TestDataSwap:

    def test_vanished_anchors_fall_back(self, sample_index):
        state = TreeViewState(tabbable_id="gone", last_user_select="gone",
                              last_interacted_with="gone", last_manually_toggled="B")
        action = data_changed_action(sample_index, state)
        assert action.type is ActionType.UPDATE_TREE_STATE_WHEN_DATA_CHANGED
        assert action.tabbable_id == "A"
        assert action.last_user_select == "A"
        assert action.last_interacted_with is None
        assert action.last_manually_toggled == "B"
        assert action.valid_ids == {"A", "B", "C", "D"}

    def test_loaded_children_inherit_selection(self, sample_index):
        config = TreeViewConfig.checkbox_tree()
        state = TreeViewState(selected_ids={"A"}, expanded_ids={"A"})
        actions = loaded_selection_actions(sample_index, state, config)
        assert [(a.type, a.ids) for a in actions] == [
            (ActionType.CHANGE_SELECT_MANY, ("A", "B", "C", "D")),
        ]

    def test_loaded_selection_needs_togglable_propagation(self, sample_index, multi):
        state = TreeViewState(selected_ids={"A"}, expanded_ids={"A"})
        assert loaded_selection_actions(sample_index, state, multi) == []
