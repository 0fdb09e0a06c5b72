"""Tests for click interpretation."""

from dazzletreeview import ClickAction, ClickEvent, initialize


class TestNodeClick:

    def test_plain_click_selects(self, sample_nodes):
        view = initialize(sample_nodes, default_expanded_ids=["A"])
        view.handle_node_click("B")
        assert view.state.selected_ids == {"B"}
        assert view.state.tabbable_id == "B"
        assert view.state.last_user_select == "B"

    def test_ctrl_click_adds_in_multi_select(self, sample_nodes):
        view = initialize(sample_nodes, multi_select=True, default_expanded_ids=["A"])
        view.handle_node_click("B")
        view.handle_node_click(ClickEvent("C", ctrl=True))
        assert view.state.selected_ids == {"B", "C"}

    def test_shift_click_replaces_with_range(self, food_nodes):
        view = initialize(food_nodes, multi_select=True, default_expanded_ids=["Fruits"])
        view.handle_node_click("Carrot")
        view.handle_node_click("Apple")
        view.handle_node_click("Vegetables", shift=True)
        assert view.state.selected_ids == {"Apple", "Banana", "Citrus", "Vegetables"}
        assert view.state.tabbable_id == "Vegetables"
        # The range anchor stays on the last plain click
        assert view.state.last_user_select == "Apple"

    def test_shift_click_in_single_select_is_plain(self, sample_nodes):
        view = initialize(sample_nodes, default_expanded_ids=["A"])
        view.handle_node_click("C", shift=True)
        assert view.state.selected_ids == {"C"}

    def test_focus_click_action(self, sample_nodes):
        view = initialize(sample_nodes, click_action=ClickAction.FOCUS, default_expanded_ids=["A"])
        view.handle_node_click("C")
        assert view.state.selected_ids == frozenset()
        assert view.state.tabbable_id == "C"

    def test_ctrl_click_selects_even_with_focus_action(self, sample_nodes):
        view = initialize(sample_nodes, click_action="focus", default_expanded_ids=["A"])
        view.handle_node_click("C", ctrl=True)
        assert view.state.selected_ids == {"C"}

    def test_exclusive_select(self, sample_nodes):
        view = initialize(sample_nodes, multi_select=True, click_action="exclusive_select",
                          default_expanded_ids=["A"])
        view.handle_node_click("B")
        view.handle_node_click("C")
        assert view.state.selected_ids == {"C"}

    def test_disabled_and_root_are_ignored(self, sample_nodes):
        view = initialize(sample_nodes, default_disabled_ids=["A"])
        before = view.state
        view.handle_node_click("A")
        view.handle_node_click("root")
        view.handle_node_click("ghost")
        assert view.state is before

    def test_click_with_downward_propagation(self, sample_nodes):
        view = initialize(sample_nodes, multi_select=True, propagate_select=True,
                          togglable_select=True)
        view.handle_node_click("A")
        assert view.state.selected_ids == {"A", "B", "C", "D"}
        view.handle_node_click("A")
        assert view.state.selected_ids == frozenset()


class TestExpandClick:

    def test_toggles(self, sample_nodes):
        view = initialize(sample_nodes)
        view.handle_expand_click("A")
        assert view.state.expanded_ids == {"A"}
        view.handle_expand_click("A")
        assert view.state.expanded_ids == frozenset()

    def test_modified_clicks_and_leaves_are_ignored(self, sample_nodes):
        view = initialize(sample_nodes)
        view.handle_expand_click("A", ctrl=True)
        view.handle_expand_click("A", shift=True)
        view.handle_expand_click("B")
        assert view.state.expanded_ids == frozenset()

    def test_collapse_propagates(self, sample_nodes):
        view = initialize(sample_nodes, propagate_collapse=True, default_expanded_ids=["A", "C"])
        view.handle_expand_click("A")
        assert view.state.expanded_ids == frozenset()

    def test_disabled_branch_still_expands(self, sample_nodes):
        view = initialize(sample_nodes, default_disabled_ids=["A"])
        view.handle_expand_click("A")
        assert view.state.expanded_ids == {"A"}
