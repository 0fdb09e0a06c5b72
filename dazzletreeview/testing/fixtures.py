"""Test fixtures for DazzleTreeView consumers.

Small builders for trees whose ids are readable names, and a recorder
that captures every notification a TreeView emits. Both are part of the
public API so projects that embed a TreeView can test against it.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..core.node import Node, NodeId
from ..events import EventKind


def build_tree(structure: Mapping[str, Any],
               root_id: NodeId = "root",
               branch_ids: Iterable[NodeId] = ()) -> List[Node]:
    """Build a flat node list from a nested mapping of names.

    Each key is both the id and the name of a node; its value is the
    mapping of its children (empty for a leaf). The synthetic root is
    added automatically.

    Args:
        structure: Nested ``{name: {child: {...}}}`` mapping
        root_id: Id of the synthetic root
        branch_ids: Ids flagged as branches even without children

    Example:
        >>> nodes = build_tree({"A": {"B": {}, "C": {"D": {}}}})
        >>> [node.id for node in nodes]
        ['root', 'A', 'B', 'C', 'D']
    """
    branches = set(branch_ids)
    nodes: List[Node] = []

    def _add(node_id: NodeId, parent: Optional[NodeId], children: Mapping[str, Any]) -> None:
        nodes.append(Node(
            id=node_id,
            name="" if parent is None else str(node_id),
            children=tuple(children),
            parent=parent,
            is_branch=node_id in branches,
        ))
        for child_id, grandchildren in children.items():
            _add(child_id, node_id, grandchildren or {})

    _add(root_id, None, structure)
    return nodes


def sample_tree() -> List[Node]:
    """The reference tree ``A(B, C(D))``."""
    return build_tree({"A": {"B": {}, "C": {"D": {}}}})


class EventRecorder:
    """Records every notification of a TreeView in delivery order.

    Example:
        recorder = EventRecorder()
        recorder.attach(view)
        view.handle_key_down(" ")
        assert recorder.ids(EventKind.SELECT) == ["A"]
    """

    def __init__(self):
        self.events: List[Tuple[EventKind, Any]] = []
        self._unsubscribers = []

    def attach(self, view) -> 'EventRecorder':
        """Subscribe to every event kind of ``view``."""
        for kind in EventKind:
            self._unsubscribers.append(view.subscribe(kind, self._recorder_for(kind)))
        return self

    def detach(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def handlers(self) -> Dict[str, Any]:
        """Keyword arguments wiring this recorder into ``initialize``."""
        return {
            'on_select': self._recorder_for(EventKind.SELECT),
            'on_node_select': self._recorder_for(EventKind.NODE_SELECT),
            'on_expand': self._recorder_for(EventKind.EXPAND),
            'on_load_data': self._recorder_for(EventKind.LOAD_DATA),
            'on_blur': self._recorder_for(EventKind.BLUR),
        }

    def _recorder_for(self, kind: EventKind):
        def _record(payload: Any) -> None:
            self.events.append((kind, payload))
        return _record

    def of(self, kind: EventKind) -> List[Any]:
        """Payloads of one kind."""
        return [payload for event_kind, payload in self.events if event_kind is kind]

    def ids(self, kind: EventKind) -> List[NodeId]:
        """Element ids of one kind of payload, in delivery order."""
        return [payload.element.id for payload in self.of(kind)]

    def clear(self) -> None:
        self.events.clear()

    def __len__(self) -> int:
        return len(self.events)
