"""Actions understood by the tree reducer.

An Action is an immutable description of one transition. The reducer is
the only place that interprets it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .node import NodeId


class ActionType(Enum):
    """Transition kinds."""
    SELECT = "SELECT"
    DESELECT = "DESELECT"
    TOGGLE_SELECT = "TOGGLE_SELECT"
    CHANGE_SELECT_MANY = "CHANGE_SELECT_MANY"
    EXCLUSIVE_CHANGE_SELECT_MANY = "EXCLUSIVE_CHANGE_SELECT_MANY"
    HALF_SELECT = "HALF_SELECT"
    EXPAND = "EXPAND"
    COLLAPSE = "COLLAPSE"
    TOGGLE = "TOGGLE"
    EXPAND_MANY = "EXPAND_MANY"
    COLLAPSE_MANY = "COLLAPSE_MANY"
    FOCUS = "FOCUS"
    BLUR = "BLUR"
    DISABLE = "DISABLE"
    ENABLE = "ENABLE"
    CONTROLLED_SELECT_MANY = "CONTROLLED_SELECT_MANY"
    UPDATE_TREE_STATE_WHEN_DATA_CHANGED = "UPDATE_TREE_STATE_WHEN_DATA_CHANGED"
    CLEAR_LAST_MANUALLY_TOGGLED = "CLEAR_LAST_MANUALLY_TOGGLED"


# Transitions that never trigger a re-evaluation of ancestors
NON_SELECTION_ACTIONS = frozenset({
    ActionType.FOCUS,
    ActionType.COLLAPSE,
    ActionType.EXPAND,
    ActionType.TOGGLE,
})


@dataclass(frozen=True)
class Action:
    """One dispatched transition.

    Attributes:
        type: Transition kind
        id: Target node for single-node transitions
        ids: Targets for bulk transitions
        select: Target value for CHANGE_SELECT_MANY
        multi_select: Whether the selection may hold several ids
        keep_focus: Leave tabbable_id unchanged
        not_user_action: Leave last_user_select unchanged (propagation-origin)
        last_interacted_with: Id of the node the user actually acted on
        last_manually_toggled: Id of the node the user toggled directly
        tabbable_id: New focus anchor (data-change re-anchoring)
        last_user_select: New range anchor (data-change re-anchoring)
        valid_ids: Ids of the new tree, used to prune stale ids on data change
    """

    type: ActionType
    id: Optional[NodeId] = None
    ids: Tuple[NodeId, ...] = ()
    select: bool = True
    multi_select: bool = False
    keep_focus: bool = False
    not_user_action: bool = False
    last_interacted_with: Optional[NodeId] = None
    last_manually_toggled: Optional[NodeId] = None
    tabbable_id: Optional[NodeId] = None
    last_user_select: Optional[NodeId] = None
    valid_ids: Optional[frozenset] = None

    def __post_init__(self):
        if isinstance(self.type, str):
            object.__setattr__(self, 'type', ActionType(self.type))
        if not isinstance(self.ids, tuple):
            object.__setattr__(self, 'ids', tuple(self.ids))
        if self.valid_ids is not None and not isinstance(self.valid_ids, frozenset):
            object.__setattr__(self, 'valid_ids', frozenset(self.valid_ids))

    def __repr__(self) -> str:
        parts = [self.type.name]
        if self.id is not None:
            parts.append(f"id={self.id!r}")
        if self.ids:
            parts.append(f"ids={list(self.ids)!r}")
        if self.type in (ActionType.CHANGE_SELECT_MANY, ActionType.EXCLUSIVE_CHANGE_SELECT_MANY):
            parts.append(f"select={self.select}")
        return f"Action({', '.join(parts)})"

