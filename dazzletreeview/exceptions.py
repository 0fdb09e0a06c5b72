"""Exception hierarchy for DazzleTreeView.

Construction-time problems with the tree data are fatal and raised as
subclasses of TreeDataError. Runtime corruption discovered while walking
the tree is reported separately as CorruptTreeError so callers never
confuse it with the ordinary "no further node" result (None).
"""

from typing import Any


class TreeViewError(Exception):
    """Base class for all DazzleTreeView errors."""
    pass


class TreeDataError(TreeViewError):
    """Raised when tree data fails validation at construction time."""
    pass


class DuplicateNodeIdError(TreeDataError):
    """Two nodes share the same id."""

    def __init__(self, node_id: Any):
        self.node_id = node_id
        super().__init__(f"Duplicate node id: {node_id!r}")


class NoRootError(TreeDataError):
    """No node has a null parent."""

    def __init__(self):
        super().__init__("Tree data has no root node (a node with parent=None)")


class MultipleRootsError(TreeDataError):
    """More than one node has a null parent."""

    def __init__(self, root_ids):
        self.root_ids = list(root_ids)
        super().__init__(
            f"Tree data has {len(self.root_ids)} root nodes, expected exactly one: "
            f"{self.root_ids!r}"
        )


class MissingParentError(TreeDataError):
    """A node declares a parent that does not exist."""

    def __init__(self, node_id: Any, parent_id: Any):
        self.node_id = node_id
        self.parent_id = parent_id
        super().__init__(
            f"Node {node_id!r} declares parent {parent_id!r} which is not in the tree"
        )


class MissingChildError(TreeDataError):
    """A node lists a child id that does not exist."""

    def __init__(self, node_id: Any, child_id: Any):
        self.node_id = node_id
        self.child_id = child_id
        super().__init__(
            f"Node {node_id!r} lists child {child_id!r} which is not in the tree"
        )


class ParentMismatchError(TreeDataError):
    """Parent and children fields disagree about a relationship."""

    def __init__(self, node_id: Any, declared_parent: Any, listed_by: Any):
        self.node_id = node_id
        self.declared_parent = declared_parent
        self.listed_by = listed_by
        super().__init__(
            f"Node {node_id!r} declares parent {declared_parent!r} "
            f"but is listed as a child of {listed_by!r}"
        )


class TreeCycleError(TreeDataError):
    """Some nodes are not reachable from the root (cycle or detached island)."""

    def __init__(self, unreachable_ids):
        self.unreachable_ids = list(unreachable_ids)
        super().__init__(
            f"Tree data contains a cycle or disconnected nodes: {self.unreachable_ids!r}"
        )


class CorruptTreeError(TreeViewError):
    """A non-root node has no parent during traversal."""

    def __init__(self, node_id: Any):
        self.node_id = node_id
        super().__init__(f"Parent of non-root node {node_id!r} is missing")


class UnknownNodeError(TreeViewError, KeyError):
    """Lookup of an id that is not part of the current tree."""

    def __init__(self, node_id: Any):
        self.node_id = node_id
        super().__init__(f"Unknown node id: {node_id!r}")

    def __str__(self) -> str:
        return self.args[0]


class ConfigurationError(TreeViewError):
    """Raised when a TreeViewConfig is inconsistent."""
    pass


class UnknownActionError(TreeViewError):
    """Raised by the reducer for an action type it does not handle."""
    pass


class PropagationLoopError(TreeViewError):
    """Raised when the settle loop fails to converge."""
    pass
