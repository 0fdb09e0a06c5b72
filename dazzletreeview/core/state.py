"""Immutable tree interaction state.

A TreeViewState is never mutated. Every transition builds a new snapshot
with dataclasses.replace, so anything holding an old snapshot keeps a
self-consistent view of selection and expansion.
"""

from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterable, Optional

from .actions import ActionType
from .index import TreeIndex
from .node import NodeId
from .._common.config import TreeViewConfig


@dataclass(frozen=True)
class TreeViewState:
    """Snapshot of selection, expansion and focus for one tree."""

    selected_ids: FrozenSet[NodeId] = frozenset()
    expanded_ids: FrozenSet[NodeId] = frozenset()
    disabled_ids: FrozenSet[NodeId] = frozenset()
    half_selected_ids: FrozenSet[NodeId] = frozenset()
    controlled_ids: FrozenSet[NodeId] = frozenset()
    tabbable_id: Optional[NodeId] = None
    is_focused: bool = False
    last_user_select: Optional[NodeId] = None
    last_interacted_with: Optional[NodeId] = None
    last_manually_toggled: Optional[NodeId] = None
    last_action: Optional[ActionType] = field(default=None, compare=False)

    def evolve(self, **changes) -> 'TreeViewState':
        """Return a copy with the given fields replaced."""
        for name in ('selected_ids', 'expanded_ids', 'disabled_ids',
                     'half_selected_ids', 'controlled_ids'):
            if name in changes and not isinstance(changes[name], frozenset):
                changes[name] = frozenset(changes[name])
        return replace(self, **changes)

    def is_selected(self, node_id: NodeId) -> bool:
        return node_id in self.selected_ids

    def is_half_selected(self, node_id: NodeId) -> bool:
        return node_id in self.half_selected_ids

    def is_expanded(self, node_id: NodeId) -> bool:
        return node_id in self.expanded_ids

    def is_disabled(self, node_id: NodeId) -> bool:
        return node_id in self.disabled_ids


def _known(index: TreeIndex, ids: Iterable[NodeId]) -> FrozenSet[NodeId]:
    return frozenset(node_id for node_id in ids if node_id in index and not index.is_root(node_id))


def initial_state(index: TreeIndex, config: TreeViewConfig) -> TreeViewState:
    """Build the first snapshot from defaults and controlled sets.

    Controlled sets win over defaults. Ids that are not part of the tree
    (or name the synthetic root) are dropped.
    """
    if config.controlled_selected_ids is not None:
        selected_source = list(config.controlled_selected_ids)
    else:
        selected_source = list(config.default_selected_ids)
    selected_source = [i for i in selected_source if i in index and not index.is_root(i)]
    if not config.multi_select and len(selected_source) > 1:
        selected_source = selected_source[-1:]

    if config.controlled_expanded_ids is not None:
        expanded_source = config.controlled_expanded_ids
    else:
        expanded_source = config.default_expanded_ids

    first = index.first_id
    return TreeViewState(
        selected_ids=_known(index, selected_source),
        expanded_ids=_known(index, expanded_source),
        disabled_ids=_known(index, config.default_disabled_ids),
        half_selected_ids=frozenset(),
        controlled_ids=_known(index, config.controlled_selected_ids or ()),
        tabbable_id=first,
        is_focused=False,
        last_user_select=first,
        last_interacted_with=None,
        last_manually_toggled=None,
    )
