"""Notification payloads and the observer registry.

The TreeView computes old-vs-new snapshot diffs and hands one payload per
changed node to every registered observer of that kind. Observers are
plain callables; the registry does not depend on any UI framework's
update scheduling.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .core.node import Node
from .core.state import TreeViewState
from .error_policies import FailFastPolicy, HandlerErrorPolicy


class EventKind(Enum):
    """Observable notifications."""
    SELECT = "select"            # Selection of a node changed
    NODE_SELECT = "node_select"  # The user toggled a node directly
    EXPAND = "expand"            # Expansion of a node changed
    LOAD_DATA = "load_data"      # A node entered the expanded set
    BLUR = "blur"                # Focus left the whole tree


@dataclass(frozen=True)
class SelectEvent:
    element: Node
    is_branch: bool
    is_expanded: bool
    is_selected: bool
    is_disabled: bool
    is_half_selected: bool
    state: TreeViewState


@dataclass(frozen=True)
class NodeSelectEvent:
    element: Node
    is_selected: bool
    is_branch: bool
    state: TreeViewState


@dataclass(frozen=True)
class ExpandEvent:
    element: Node
    is_expanded: bool
    is_selected: bool
    is_disabled: bool
    is_half_selected: bool
    state: TreeViewState


@dataclass(frozen=True)
class LoadDataEvent:
    """Request to load the children of a freshly expanded node.

    Whatever the handler returns (a future, a coroutine, None) is handed
    back untouched; the engine never awaits it. Loaded data comes back
    through ``TreeView.set_data``.
    """
    element: Node
    is_expanded: bool
    is_selected: bool
    is_disabled: bool
    is_half_selected: bool
    state: TreeViewState


@dataclass(frozen=True)
class BlurEvent:
    state: TreeViewState
    dispatch: Callable


Observer = Callable[[Any], Any]


class ObserverRegistry:
    """Holds observers per EventKind and delivers payloads to them.

    Example:
        registry = ObserverRegistry()
        unsubscribe = registry.subscribe(EventKind.SELECT, print)
        registry.emit(EventKind.SELECT, payload)
        unsubscribe()
    """

    def __init__(self, policy: Optional[HandlerErrorPolicy] = None):
        self._observers: Dict[EventKind, List[Observer]] = {kind: [] for kind in EventKind}
        self._policy = policy or FailFastPolicy()

    @property
    def policy(self) -> HandlerErrorPolicy:
        return self._policy

    @policy.setter
    def policy(self, policy: HandlerErrorPolicy) -> None:
        self._policy = policy

    def subscribe(self, kind: EventKind, handler: Observer) -> Callable[[], None]:
        """Register an observer and return a function that removes it."""
        kind = EventKind(kind)
        self._observers[kind].append(handler)

        def _unsubscribe() -> None:
            self.unsubscribe(kind, handler)

        return _unsubscribe

    def unsubscribe(self, kind: EventKind, handler: Observer) -> None:
        observers = self._observers[EventKind(kind)]
        if handler in observers:
            observers.remove(handler)

    def has_observers(self, kind: EventKind) -> bool:
        return bool(self._observers[EventKind(kind)])

    def emit(self, kind: EventKind, payload: Any) -> List[Any]:
        """Deliver a payload to every observer of a kind.

        Returns:
            Handler results in registration order
        """
        results = []
        # Copy so handlers may unsubscribe while being notified
        for handler in list(self._observers[kind]):
            try:
                results.append(handler(payload))
            except Exception as error:
                results.append(self._policy.handle(error, kind, handler, payload))
        return results
