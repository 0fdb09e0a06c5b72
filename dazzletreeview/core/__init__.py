"""Core state engine for DazzleTreeView.

Everything in this package is pure: the tree index, traversal functions,
the state snapshot, the reducer and the propagation algorithms. Nothing
here calls observers or holds mutable state.
"""

from .node import Node, NodeId, flatten_tree
from .index import TreeIndex
from .traverser import (
    get_next_accessible,
    get_previous_accessible,
    get_last_accessible,
    get_descendants,
    get_accessible_range,
    iter_accessible,
    is_accessible,
)
from .actions import Action, ActionType, NON_SELECTION_ACTIONS
from .state import TreeViewState, initial_state
from .reducer import tree_reducer
from .propagation import (
    SelectionStatus,
    PropagationResult,
    propagated_ids,
    propagate_select_change,
    upward_candidates,
    upward_actions,
    get_on_select_action,
    is_branch_not_selected_and_has_only_selected_child,
    select_value_for,
)

__all__ = [
    "Node",
    "NodeId",
    "flatten_tree",
    "TreeIndex",
    "get_next_accessible",
    "get_previous_accessible",
    "get_last_accessible",
    "get_descendants",
    "get_accessible_range",
    "iter_accessible",
    "is_accessible",
    "Action",
    "ActionType",
    "NON_SELECTION_ACTIONS",
    "TreeViewState",
    "initial_state",
    "tree_reducer",
    "SelectionStatus",
    "PropagationResult",
    "propagated_ids",
    "propagate_select_change",
    "upward_candidates",
    "upward_actions",
    "get_on_select_action",
    "is_branch_not_selected_and_has_only_selected_child",
    "select_value_for",
]
