"""Selection propagation for DazzleTreeView.

Downward propagation applies a node's selection value to its whole
subtree (minus disabled subtrees). Upward propagation aggregates the
children of each ancestor into a tri-state status:

    ALL selected        -> select the ancestor
    SOME selected/half  -> half-select the ancestor
    NONE selected       -> deselect the ancestor

The upward walk stops at the first ancestor whose computed status already
matches its current status. Since the tree is finite and acyclic, every
walk terminates, and a consistent tree produces no work at all.
"""

from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Dict, Iterable, List, Tuple

from .actions import Action, ActionType, NON_SELECTION_ACTIONS
from .index import TreeIndex
from .node import NodeId
from .state import TreeViewState
from .traverser import get_descendants
from .._common.config import AllDisabledPolicy


class SelectionStatus(Enum):
    """Tri-state selection of a node."""
    ALL = "all"
    SOME = "some"
    NONE = "none"


@dataclass(frozen=True)
class PropagationResult:
    """Ancestors whose status must change, in discovery order."""
    every: Tuple[NodeId, ...] = ()
    some: Tuple[NodeId, ...] = ()
    none: Tuple[NodeId, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.every or self.some or self.none)


def propagated_ids(index: TreeIndex,
                   ids: Iterable[NodeId],
                   disabled_ids: AbstractSet[NodeId]) -> List[NodeId]:
    """Return the ids plus the enabled descendants of every branch among them.

    Order is preserved and duplicates are dropped, so the last id of the
    result is the deepest last node of the last input subtree.
    """
    result: Dict[NodeId, None] = {}
    for node_id in ids:
        result[node_id] = None
        if index.is_branch(node_id):
            for descendant in get_descendants(index, node_id, disabled_ids):
                result[descendant] = None
    return list(result)


def _status(node_id: NodeId,
            pending: Dict[NodeId, SelectionStatus],
            selected_ids: AbstractSet[NodeId],
            half_selected_ids: AbstractSet[NodeId]) -> SelectionStatus:
    if node_id in pending:
        return pending[node_id]
    if node_id in selected_ids:
        return SelectionStatus.ALL
    if node_id in half_selected_ids:
        return SelectionStatus.SOME
    return SelectionStatus.NONE


def _aggregate(statuses: List[SelectionStatus]) -> SelectionStatus:
    if all(status is SelectionStatus.ALL for status in statuses):
        return SelectionStatus.ALL
    if all(status is SelectionStatus.NONE for status in statuses):
        return SelectionStatus.NONE
    return SelectionStatus.SOME


def propagate_select_change(index: TreeIndex,
                            changed_ids: Iterable[NodeId],
                            selected_ids: AbstractSet[NodeId],
                            disabled_ids: AbstractSet[NodeId],
                            half_selected_ids: AbstractSet[NodeId],
                            policy: AllDisabledPolicy = AllDisabledPolicy.INCLUDE_DISABLED
                            ) -> PropagationResult:
    """Compute ancestor status changes caused by a set of changed nodes.

    Each changed id's ancestor chain is walked upwards. Decisions made
    earlier in the same pass count as the decided ancestor's status when
    its own parent is classified.

    Args:
        index: Tree index
        changed_ids: Ids whose selection just changed (unknown ids are ignored)
        selected_ids: Current selection
        disabled_ids: Disabled ids, excluded from classification
        half_selected_ids: Current half-selection
        policy: What to do when every child of an ancestor is disabled

    Returns:
        PropagationResult with the ancestors to select, half-select, deselect
    """
    pending: Dict[NodeId, SelectionStatus] = {}

    for changed in changed_ids:
        if changed not in index or index.is_root(changed):
            continue
        current = changed
        while True:
            parent = index.parent_of(current)
            if parent is None or index.is_root(parent):
                break

            children = index.children_of(parent)
            considered = [child for child in children if child not in disabled_ids]
            if not considered:
                if policy is AllDisabledPolicy.SKIP:
                    break
                considered = list(children)

            computed = _aggregate(
                [_status(child, pending, selected_ids, half_selected_ids) for child in considered]
            )
            if computed is _status(parent, pending, selected_ids, half_selected_ids):
                break

            # Re-deciding an ancestor moves it to the end of the order
            pending.pop(parent, None)
            pending[parent] = computed
            current = parent

    return PropagationResult(
        every=tuple(i for i, s in pending.items() if s is SelectionStatus.ALL),
        some=tuple(i for i, s in pending.items() if s is SelectionStatus.SOME),
        none=tuple(i for i, s in pending.items() if s is SelectionStatus.NONE),
    )


def upward_candidates(index: TreeIndex,
                      state: TreeViewState,
                      toggled_ids: Iterable[NodeId]) -> List[NodeId]:
    """Ids whose ancestors need re-evaluation after a transition.

    The toggled ids, plus the node the user last interacted with unless
    the last transition was a pure focus/expansion change. Ids no longer
    in the tree are dropped.
    """
    candidates: Dict[NodeId, None] = dict.fromkeys(toggled_ids)
    if (state.last_interacted_with is not None
            and state.last_action not in NON_SELECTION_ACTIONS):
        candidates[state.last_interacted_with] = None
    return [node_id for node_id in candidates if node_id in index and not index.is_root(node_id)]


def is_branch_not_selected_and_has_only_selected_child(index: TreeIndex,
                                                       node_id: NodeId,
                                                       selected_ids: AbstractSet[NodeId]) -> bool:
    """True for an unselected branch whose single child is selected.

    In single-select mode this is the one case where a parent may be
    selected alongside its child.
    """
    node = index.get(node_id)
    return (
        node.branch
        and node_id not in selected_ids
        and len(node.children) == 1
        and node.children[0] in selected_ids
    )


def upward_actions(index: TreeIndex,
                   state: TreeViewState,
                   result: PropagationResult,
                   multi_select: bool) -> List[Action]:
    """Turn a propagation result into the minimal list of actions.

    Ancestors already in the target status are skipped. Every action
    keeps focus, is marked as not user-originated and carries the user's
    ``last_interacted_with`` so focus tracking follows the real target.
    """
    actions: List[Action] = []
    origin = state.last_interacted_with

    for node_id in result.every:
        if node_id not in state.selected_ids:
            actions.append(Action(
                ActionType.SELECT,
                id=node_id,
                multi_select=multi_select or is_branch_not_selected_and_has_only_selected_child(
                    index, node_id, state.selected_ids
                ),
                keep_focus=True,
                not_user_action=True,
                last_interacted_with=origin,
            ))

    for node_id in result.some:
        if node_id not in state.half_selected_ids:
            actions.append(Action(
                ActionType.HALF_SELECT,
                id=node_id,
                keep_focus=True,
                not_user_action=True,
                last_interacted_with=origin,
            ))

    for node_id in result.none:
        if node_id in state.selected_ids or node_id in state.half_selected_ids:
            actions.append(Action(
                ActionType.DESELECT,
                id=node_id,
                multi_select=multi_select,
                keep_focus=True,
                not_user_action=True,
                last_interacted_with=origin,
            ))

    return actions


def get_on_select_action(index: TreeIndex,
                         node_id: NodeId,
                         selected_ids: AbstractSet[NodeId],
                         disabled_ids: AbstractSet[NodeId]) -> ActionType:
    """Pick the transition for a togglable select on ``node_id``.

    An unselected branch whose enabled children are all selected (its
    disabled children keep it from being fully selected) is deselected,
    clearing the group. Everything else toggles.
    """
    node = index.get(node_id)
    if node.branch and node_id not in selected_ids:
        enabled = [child for child in node.children if child not in disabled_ids]
        if enabled and len(enabled) < len(node.children) and all(
            child in selected_ids for child in enabled
        ):
            return ActionType.DESELECT
    return ActionType.TOGGLE_SELECT


def select_value_for(action_type: ActionType,
                     node_id: NodeId,
                     selected_ids: AbstractSet[NodeId]) -> bool:
    """Selection value a togglable/select action leaves on ``node_id``."""
    if action_type is ActionType.SELECT:
        return True
    if action_type is ActionType.DESELECT:
        return False
    return node_id not in selected_ids
