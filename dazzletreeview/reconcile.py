"""Reconciliation of caller-owned (controlled) id sets with engine state.

A controlled set is diffed against the PREVIOUS value the caller passed,
not only against the engine's own state. Diffing against internal state
alone would make every echo of the engine's own writes look like a new
request; remembering what the caller last said makes repeated updates
with the same set a no-op.

Also home to the data-swap transitions: re-anchoring focus when the tree
data is replaced and pushing selection into freshly loaded children.
"""

import logging
from typing import AbstractSet, Iterable, List, Optional

from .core.actions import Action, ActionType
from .core.index import TreeIndex
from .core.node import NodeId
from .core.propagation import propagated_ids
from .core.state import TreeViewState
from ._common.config import TreeViewConfig

logger = logging.getLogger(__name__)


def _known_ids(index: TreeIndex, ids: Iterable[NodeId]) -> List[NodeId]:
    """Ids present in the tree (root excluded), first occurrence order."""
    seen = {}
    for node_id in ids:
        if node_id in index and not index.is_root(node_id):
            seen[node_id] = None
    return list(seen)


def _in_data_order(index: TreeIndex, ids: AbstractSet[NodeId]) -> List[NodeId]:
    return [node_id for node_id in index.node_ids if node_id in ids]


class Reconciler:
    """Turns controlled selection/expansion sets into minimal actions.

    The reconciler only reads state and returns actions; the TreeView
    dispatches them.

    Example:
        reconciler = Reconciler(controlled_expanded_ids=[1])
        actions = reconciler.reconcile_expansion(index, state, config, [1, 4])
        # -> [Action(EXPAND_MANY, ids=[4, 3])] when node 4 sits under node 3
    """

    def __init__(self, controlled_expanded_ids: Optional[Iterable[NodeId]] = None):
        # Selection starts "unseen" so the first pass can push subtree
        # propagation for the initial controlled ids.
        self._previous_selected: Optional[frozenset] = None
        self._previous_expanded: Optional[frozenset] = (
            frozenset(controlled_expanded_ids) if controlled_expanded_ids is not None else None
        )

    @property
    def previous_selected(self) -> Optional[frozenset]:
        return self._previous_selected

    @property
    def previous_expanded(self) -> Optional[frozenset]:
        return self._previous_expanded

    def reconcile_selection(self,
                            index: TreeIndex,
                            state: TreeViewState,
                            config: TreeViewConfig,
                            controlled: Optional[Iterable[NodeId]]) -> List[Action]:
        """Actions needed to make internal selection follow the caller.

        Args:
            index: Current tree index
            state: Current snapshot
            config: Tree configuration
            controlled: Caller's selection, or None when uncontrolled

        Returns:
            List of actions (empty when nothing changed since the last call)
        """
        if controlled is None:
            self._previous_selected = None
            return []

        ordered = _known_ids(index, controlled)
        current = frozenset(ordered)
        if self._previous_selected is not None and current == self._previous_selected:
            return []
        self._previous_selected = current

        actions: List[Action] = []
        target = current if config.multi_select or not ordered else frozenset(ordered[-1:])
        if target != state.selected_ids or current != state.controlled_ids:
            actions.append(Action(
                ActionType.CONTROLLED_SELECT_MANY,
                ids=ordered,
                multi_select=config.multi_select,
                last_interacted_with=state.last_interacted_with,
            ))

        if config.effective_propagate_select:
            covered = set(target)
            for node_id in ordered:
                if node_id in state.disabled_ids:
                    continue
                scope = propagated_ids(index, [node_id], state.disabled_ids)
                if all(member in covered for member in scope):
                    continue
                actions.append(Action(
                    ActionType.CHANGE_SELECT_MANY,
                    ids=scope,
                    select=True,
                    multi_select=config.multi_select,
                    last_interacted_with=node_id,
                ))
                covered.update(scope)

        if actions:
            logger.debug("Controlled selection produced %d action(s)", len(actions))
        return actions

    def reconcile_expansion(self,
                            index: TreeIndex,
                            state: TreeViewState,
                            config: TreeViewConfig,
                            controlled: Optional[Iterable[NodeId]]) -> List[Action]:
        """Actions needed to make internal expansion follow the caller.

        Ids that left the controlled set are collapsed (with their
        descendants when ``propagate_collapse`` is on). Ids that joined it
        are expanded together with their parent so they become visible.
        """
        if controlled is None:
            self._previous_expanded = None
            return []

        ordered = _known_ids(index, controlled)
        current = frozenset(ordered)
        previous = self._previous_expanded
        if previous is None:
            previous = state.expanded_ids
        self._previous_expanded = current

        to_collapse = previous - current
        to_expand = [node_id for node_id in ordered if node_id not in previous]

        actions: List[Action] = []
        for node_id in _in_data_order(index, to_collapse):
            if not index.is_branch(node_id):
                continue
            ids = [node_id]
            if config.propagate_collapse:
                ids.extend(index.descendants(node_id))
            if any(member in state.expanded_ids for member in ids):
                actions.append(Action(
                    ActionType.COLLAPSE_MANY,
                    ids=ids,
                    last_interacted_with=node_id,
                ))

        for node_id in to_expand:
            if not index.is_branch(node_id):
                continue
            parent = index.parent_of(node_id)
            if parent is not None and not index.is_root(parent):
                ids = [node_id, parent]
                if all(member in state.expanded_ids for member in ids):
                    continue
                actions.append(Action(
                    ActionType.EXPAND_MANY,
                    ids=ids,
                    last_interacted_with=node_id,
                ))
            elif node_id not in state.expanded_ids:
                actions.append(Action(
                    ActionType.EXPAND,
                    id=node_id,
                    keep_focus=True,
                    last_interacted_with=node_id,
                ))

        if actions:
            logger.debug("Controlled expansion produced %d action(s)", len(actions))
        return actions


def data_changed_action(index: TreeIndex, state: TreeViewState) -> Action:
    """Re-anchor state after the tree data has been replaced.

    References to ids that survived are kept; vanished focus and range
    anchors fall back to the first top-level node, vanished interaction
    markers are cleared, and id sets are pruned to live ids.
    """
    first = index.first_id

    def _alive(node_id: Optional[NodeId]) -> bool:
        return node_id is not None and node_id in index and not index.is_root(node_id)

    return Action(
        ActionType.UPDATE_TREE_STATE_WHEN_DATA_CHANGED,
        tabbable_id=state.tabbable_id if _alive(state.tabbable_id) else first,
        last_interacted_with=state.last_interacted_with if _alive(state.last_interacted_with) else None,
        last_manually_toggled=state.last_manually_toggled if _alive(state.last_manually_toggled) else None,
        last_user_select=state.last_user_select if _alive(state.last_user_select) else first,
        valid_ids=frozenset(index.node_ids),
    )


def loaded_selection_actions(index: TreeIndex,
                             state: TreeViewState,
                             config: TreeViewConfig) -> List[Action]:
    """Push selection of expanded, selected branches into new children.

    After lazily loaded children arrive (a data swap), a selected branch
    should carry its selection into them. Only applies to togglable
    selection with downward propagation.
    """
    if not (config.togglable_select and config.effective_propagate_select):
        return []

    actions: List[Action] = []
    for node_id in _in_data_order(index, state.expanded_ids & state.selected_ids):
        scope = propagated_ids(index, [node_id], state.disabled_ids)
        if all(member in state.selected_ids for member in scope):
            continue
        actions.append(Action(
            ActionType.CHANGE_SELECT_MANY,
            ids=scope,
            select=True,
            multi_select=config.multi_select,
            last_interacted_with=node_id,
        ))
    return actions
