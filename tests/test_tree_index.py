"""Tests for TreeIndex construction, validation and lookups."""

import pytest

from dazzletreeview.core import Node, TreeIndex, flatten_tree
from dazzletreeview.exceptions import (
    CorruptTreeError,
    DuplicateNodeIdError,
    MissingChildError,
    MissingParentError,
    MultipleRootsError,
    NoRootError,
    ParentMismatchError,
    TreeCycleError,
    TreeDataError,
    UnknownNodeError,
)


class TestValidation:
    """Structural problems are rejected when the index is built."""

    def test_duplicate_id(self):
        nodes = [
            Node("root", "", children=("A",)),
            Node("A", "A", parent="root"),
            Node("A", "A again", parent="root"),
        ]
        with pytest.raises(DuplicateNodeIdError) as excinfo:
            TreeIndex(nodes)
        assert excinfo.value.node_id == "A"

    def test_no_root(self):
        nodes = [Node("A", "A", parent="B"), Node("B", "B", parent="A")]
        with pytest.raises(NoRootError):
            TreeIndex(nodes)

    def test_empty_data_has_no_root(self):
        with pytest.raises(NoRootError):
            TreeIndex([])

    def test_multiple_roots(self):
        nodes = [Node("r1", ""), Node("r2", "")]
        with pytest.raises(MultipleRootsError) as excinfo:
            TreeIndex(nodes)
        assert excinfo.value.root_ids == ["r1", "r2"]

    def test_missing_child(self):
        nodes = [Node("root", "", children=("A", "ghost")), Node("A", "A", parent="root")]
        with pytest.raises(MissingChildError) as excinfo:
            TreeIndex(nodes)
        assert excinfo.value.child_id == "ghost"

    def test_missing_parent(self):
        nodes = [Node("root", "", children=()), Node("A", "A", parent="ghost")]
        with pytest.raises(MissingParentError) as excinfo:
            TreeIndex(nodes)
        assert excinfo.value.parent_id == "ghost"

    def test_parent_not_listing_child(self):
        nodes = [Node("root", "", children=()), Node("A", "A", parent="root")]
        with pytest.raises(ParentMismatchError):
            TreeIndex(nodes)

    def test_child_listed_by_two_parents(self):
        nodes = [
            Node("root", "", children=("A", "B")),
            Node("A", "A", parent="root", children=("C",)),
            Node("B", "B", parent="root", children=("C",)),
            Node("C", "C", parent="A"),
        ]
        with pytest.raises(ParentMismatchError):
            TreeIndex(nodes)

    def test_detached_cycle(self):
        nodes = [
            Node("root", ""),
            Node("X", "X", parent="Y", children=("Y",)),
            Node("Y", "Y", parent="X", children=("X",)),
        ]
        with pytest.raises(TreeCycleError) as excinfo:
            TreeIndex(nodes)
        assert set(excinfo.value.unreachable_ids) == {"X", "Y"}

    def test_all_data_errors_share_a_base(self):
        with pytest.raises(TreeDataError):
            TreeIndex([Node("r1", ""), Node("r2", "")])


class TestLookups:
    """Lookups over the reference tree A(B, C(D))."""

    def test_basic_properties(self, sample_index):
        assert sample_index.root_id == "root"
        assert sample_index.top_level_ids == ("A",)
        assert sample_index.first_id == "A"
        assert sample_index.node_ids == ["A", "B", "C", "D"]
        assert len(sample_index) == 5
        assert "D" in sample_index
        assert "Z" not in sample_index

    def test_iteration_keeps_data_order(self, sample_index):
        assert [node.id for node in sample_index] == ["root", "A", "B", "C", "D"]

    def test_get_unknown_raises(self, sample_index):
        with pytest.raises(UnknownNodeError):
            sample_index.get("Z")
        assert sample_index.find("Z") is None

    def test_unknown_node_error_is_a_key_error(self, sample_index):
        with pytest.raises(KeyError):
            sample_index.get("Z")

    def test_parent_and_position(self, sample_index):
        assert sample_index.parent_of("root") is None
        assert sample_index.parent_of("D") == "C"
        assert sample_index.position_of("B") == 0
        assert sample_index.position_of("C") == 1

    def test_levels(self, sample_index):
        assert sample_index.level_of("root") == 0
        assert sample_index.level_of("A") == 1
        assert sample_index.level_of("D") == 3

    def test_ancestors_exclude_root(self, sample_index):
        assert list(sample_index.ancestors_of("D")) == ["C", "A"]
        assert list(sample_index.ancestors_of("A")) == []

    def test_branch_flags(self):
        nodes = [
            Node("root", "", children=("lazy", "leaf")),
            Node("lazy", "Lazy", parent="root", is_branch=True),
            Node("leaf", "Leaf", parent="root"),
        ]
        index = TreeIndex(nodes)
        assert index.is_branch("lazy")
        assert not index.is_branch("leaf")

    def test_descendants_pre_order(self, food_index):
        assert food_index.descendants("Fruits") == ("Apple", "Banana", "Citrus", "Lemon", "Orange")
        assert food_index.descendants("Grains") == ()

    def test_descendants_are_memoised(self, food_index):
        first = food_index.descendants("Vegetables")
        assert food_index.descendants("Vegetables") is first
        assert len(food_index._descendants_cache) == 1

    def test_mappings_are_accepted(self):
        index = TreeIndex([
            {"id": 0, "name": "", "children": [1], "parent": None},
            {"id": 1, "name": "Lazy", "parent": 0, "isBranch": True},
        ])
        assert index.is_branch(1)

    def test_corrupted_parent_link_is_reported(self, sample_index):
        sample_index._nodes["D"] = Node("D", "D", parent="gone")
        with pytest.raises(CorruptTreeError) as excinfo:
            sample_index.parent_of("D")
        assert excinfo.value.node_id == "D"


class TestFlattenTree:

    def test_pre_order_ids(self):
        nodes = flatten_tree({"name": "", "children": [
            {"name": "Fruits", "children": [{"name": "Apple"}, {"name": "Pear"}]},
            {"name": "Nuts", "isBranch": True},
        ]})
        assert [(n.id, n.name, n.parent) for n in nodes] == [
            (0, "", None), (1, "Fruits", 0), (2, "Apple", 1), (3, "Pear", 1), (4, "Nuts", 0),
        ]
        assert nodes[1].children == (2, 3)
        assert nodes[4].branch

    def test_flattened_tree_is_valid(self):
        index = TreeIndex(flatten_tree({"name": "", "children": [{"name": "A"}]}))
        assert index.first_id == 1
