"""High-level API for DazzleTreeView.

``initialize`` builds a TreeView: the single owner of a tree's state.
Every input (an action, a key press, a click, new controlled sets, new
tree data) goes through the same cycle:

    input -> actions -> reducer -> new snapshot -> observers

After the actions of one input are applied, the view "settles": it diffs
the last notified snapshot against the current one, notifies observers,
asks for lazy loads and runs upward selection propagation. Propagation
(and observers) may dispatch more actions, so settling repeats until a
cycle leaves the snapshot unchanged.
"""

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Iterable, List, Optional, Union

from .core.actions import Action, ActionType
from .core.index import NodeInput, TreeIndex
from .core.node import Node, NodeId
from .core.propagation import propagate_select_change, upward_actions, upward_candidates
from .core.reducer import tree_reducer
from .core.state import TreeViewState, initial_state
from .core.traverser import is_accessible, iter_accessible
from ._common.config import TreeViewConfig
from .error_policies import HandlerErrorPolicy
from .events import (
    BlurEvent,
    EventKind,
    ExpandEvent,
    LoadDataEvent,
    NodeSelectEvent,
    ObserverRegistry,
    SelectEvent,
)
from .exceptions import ConfigurationError, PropagationLoopError
from .keyboard import KeyEvent, handle_key_down
from .pointer import ClickEvent, handle_expand_click, handle_node_click
from .reconcile import Reconciler, data_changed_action, loaded_selection_actions

logger = logging.getLogger(__name__)

_UNSET = object()


@dataclass(frozen=True)
class NodeProps:
    """Everything a rendering layer needs to draw one node."""
    id: NodeId
    name: str
    level: int
    position_in_set: int
    set_size: int
    is_branch: bool
    is_expanded: bool
    is_selected: bool
    is_half_selected: bool
    is_disabled: bool
    is_tabbable: bool
    is_focused: bool
    is_accessible: bool


class TreeView:
    """Stateful handle around the pure tree engine.

    Example:
        view = initialize(nodes, multi_select=True, propagate_select=True)
        view.subscribe(EventKind.SELECT, lambda event: print(event.element.name))
        view.handle_key_down(KeyEvent(" "))
        view.state.selected_ids
    """

    def __init__(self,
                 nodes: Iterable[NodeInput],
                 config: Optional[TreeViewConfig] = None,
                 *,
                 on_select: Optional[Callable[[SelectEvent], Any]] = None,
                 on_node_select: Optional[Callable[[NodeSelectEvent], Any]] = None,
                 on_expand: Optional[Callable[[ExpandEvent], Any]] = None,
                 on_load_data: Optional[Callable[[LoadDataEvent], Any]] = None,
                 on_blur: Optional[Callable[[BlurEvent], Any]] = None,
                 error_policy: Optional[HandlerErrorPolicy] = None):
        """Validate data and config, build the first snapshot and settle it.

        Observers passed here see the initial selection and expansion as
        changes (and get load requests for initially expanded nodes).

        Raises:
            TreeDataError: If the node list is structurally invalid
            ConfigurationError: If the configuration is inconsistent
        """
        self._config = config or TreeViewConfig()
        config_errors = self._config.validate()
        if config_errors:
            raise ConfigurationError(f"Invalid configuration: {'; '.join(config_errors)}")

        self._index = TreeIndex(nodes)
        self._state = initial_state(self._index, self._config)
        self._baseline = TreeViewState()
        self._settling = False

        self._observers = ObserverRegistry(error_policy)
        for kind, handler in (
            (EventKind.SELECT, on_select),
            (EventKind.NODE_SELECT, on_node_select),
            (EventKind.EXPAND, on_expand),
            (EventKind.LOAD_DATA, on_load_data),
            (EventKind.BLUR, on_blur),
        ):
            if handler is not None:
                self._observers.subscribe(kind, handler)

        self._controlled_selected = self._config.controlled_selected_ids
        self._controlled_expanded = self._config.controlled_expanded_ids
        self._reconciler = Reconciler(controlled_expanded_ids=self._controlled_expanded)

        logger.debug("TreeView initialised with %d nodes", len(self._index))
        self.dispatch_many(self._reconcile())

    # Accessors

    @property
    def state(self) -> TreeViewState:
        return self._state

    def current_state(self) -> TreeViewState:
        return self._state

    @property
    def index(self) -> TreeIndex:
        return self._index

    @property
    def config(self) -> TreeViewConfig:
        return self._config

    @property
    def observers(self) -> ObserverRegistry:
        return self._observers

    def subscribe(self, kind: Union[EventKind, str], handler: Callable[[Any], Any]) -> Callable[[], None]:
        """Register an observer; returns a function that unregisters it."""
        return self._observers.subscribe(EventKind(kind), handler)

    def get_node(self, node_id: NodeId) -> Node:
        return self._index.get(node_id)

    def accessible_ids(self) -> List[NodeId]:
        """Ids of every node currently reachable by keyboard, in display order."""
        return list(iter_accessible(self._index, self._state.expanded_ids))

    def node_props(self, node_id: NodeId) -> NodeProps:
        """Capability view of one node for a rendering layer."""
        node = self._index.get(node_id)
        state = self._state
        parent = self._index.parent_of(node_id)
        siblings = self._index.children_of(parent) if parent is not None else (node_id,)
        return NodeProps(
            id=node_id,
            name=node.name,
            level=self._index.level_of(node_id),
            position_in_set=self._index.position_of(node_id) + 1,
            set_size=len(siblings),
            is_branch=node.branch,
            is_expanded=node.branch and node_id in state.expanded_ids,
            is_selected=node_id in state.selected_ids,
            is_half_selected=node_id in state.half_selected_ids,
            is_disabled=node_id in state.disabled_ids,
            is_tabbable=node_id == state.tabbable_id,
            is_focused=state.is_focused and node_id == state.tabbable_id,
            is_accessible=is_accessible(self._index, node_id, state.expanded_ids),
        )

    # Dispatch

    def dispatch(self, action: Action) -> TreeViewState:
        """Apply one action, settle, and return the resulting snapshot."""
        return self.dispatch_many([action])

    def dispatch_many(self, actions: Iterable[Action]) -> TreeViewState:
        """Apply several actions as one batch, then settle once.

        Called from inside an observer, the actions are applied and the
        outer settle loop picks up their effects.
        """
        for action in actions:
            logger.debug("dispatch %r", action)
            self._state = tree_reducer(self._state, action)
        if not self._settling:
            self._settle()
        return self._state

    # Inputs

    def handle_key_down(self,
                        event: Union[KeyEvent, str],
                        shift: bool = False,
                        ctrl: bool = False) -> TreeViewState:
        """Interpret a decoded key press."""
        if not isinstance(event, KeyEvent):
            event = KeyEvent(event, shift=shift, ctrl=ctrl)
        return self.dispatch_many(handle_key_down(self._index, self._state, self._config, event))

    def handle_node_click(self,
                          event: Union[ClickEvent, NodeId],
                          shift: bool = False,
                          ctrl: bool = False) -> TreeViewState:
        """Interpret a decoded click on a node."""
        if not isinstance(event, ClickEvent):
            event = ClickEvent(event, shift=shift, ctrl=ctrl)
        return self.dispatch_many(handle_node_click(self._index, self._state, self._config, event))

    def handle_expand_click(self,
                            event: Union[ClickEvent, NodeId],
                            shift: bool = False,
                            ctrl: bool = False) -> TreeViewState:
        """Interpret a decoded click on a node's expand control."""
        if not isinstance(event, ClickEvent):
            event = ClickEvent(event, shift=shift, ctrl=ctrl)
        return self.dispatch_many(handle_expand_click(self._index, self._state, self._config, event))

    def update(self,
               controlled_selected_ids: Any = _UNSET,
               controlled_expanded_ids: Any = _UNSET) -> TreeViewState:
        """Pass new controlled sets; omitted arguments keep their last value.

        ``None`` hands the corresponding state back to the engine.
        """
        if controlled_selected_ids is not _UNSET:
            self._controlled_selected = (
                list(controlled_selected_ids) if controlled_selected_ids is not None else None
            )
        if controlled_expanded_ids is not _UNSET:
            self._controlled_expanded = (
                list(controlled_expanded_ids) if controlled_expanded_ids is not None else None
            )
        return self.dispatch_many(self._reconcile())

    def set_data(self, nodes: Iterable[NodeInput]) -> TreeViewState:
        """Replace the tree data (for example after a lazy load).

        The new data is validated before anything changes. State that
        refers to surviving ids is kept; the rest is re-anchored.
        """
        index = TreeIndex(nodes)
        self._index = index
        logger.info("Tree data replaced: %d nodes", len(index))

        self.dispatch_many([data_changed_action(index, self._state)])
        actions = []
        if self._observers.has_observers(EventKind.LOAD_DATA):
            actions.extend(loaded_selection_actions(index, self._state, self._config))
        actions.extend(self._reconcile())
        return self.dispatch_many(actions)

    def focus_out(self, next_id: Optional[NodeId] = None) -> TreeViewState:
        """Report that keyboard focus is moving away from the current node.

        Moving to another node of this tree is not a blur. Otherwise the
        blur observers run first (with the pre-blur state) and then the
        tree is marked unfocused.
        """
        if next_id is not None and next_id in self._index:
            return self._state
        self._observers.emit(EventKind.BLUR, BlurEvent(state=self._state, dispatch=self.dispatch))
        return self.dispatch(Action(ActionType.BLUR))

    # Settling

    def _reconcile(self) -> List[Action]:
        actions = self._reconciler.reconcile_selection(
            self._index, self._state, self._config, self._controlled_selected
        )
        actions.extend(self._reconciler.reconcile_expansion(
            self._index, self._state, self._config, self._controlled_expanded
        ))
        return actions

    def _settle(self) -> None:
        limit = self._config.max_settle_cycles or 2 * len(self._index) + 10
        cycles = 0
        self._settling = True
        try:
            # Observers may dispatch too, so run until nothing changed since the last cycle
            while self._state is not self._baseline:
                if cycles == limit:
                    raise PropagationLoopError(f"State did not settle within {limit} cycles")
                cycles += 1
                previous, current = self._baseline, self._state
                self._baseline = current
                toggled = self._ordered(current.selected_ids ^ previous.selected_ids)
                actions = self._follow_up(current, toggled)
                try:
                    self._notify(previous, current, toggled)
                finally:
                    # Follow-up transitions apply even when an observer raises
                    for action in actions:
                        logger.debug("dispatch %r", action)
                        self._state = tree_reducer(self._state, action)
        finally:
            self._settling = False
        if cycles > 1:
            logger.debug("Settled after %d cycles", cycles)

    def _ordered(self, ids) -> List[NodeId]:
        """Ids still in the tree, in data order."""
        return [node_id for node_id in self._index.node_ids if node_id in ids]

    def _manual_toggle(self, current: TreeViewState, toggled: List[NodeId]) -> Optional[NodeId]:
        manual = current.last_manually_toggled
        if manual is not None and toggled and manual in self._index:
            return manual
        return None

    def _follow_up(self, current: TreeViewState, toggled: List[NodeId]) -> List[Action]:
        """Actions the cycle applies after notifying observers."""
        index = self._index
        actions: List[Action] = []

        if self._manual_toggle(current, toggled) is not None:
            actions.append(Action(
                ActionType.CLEAR_LAST_MANUALLY_TOGGLED,
                last_interacted_with=current.last_interacted_with,
            ))

        if self._config.propagate_select_upwards:
            result = propagate_select_change(
                index,
                upward_candidates(index, current, toggled),
                current.selected_ids,
                current.disabled_ids,
                current.half_selected_ids,
                self._config.all_disabled_policy,
            )
            actions.extend(upward_actions(index, current, result, self._config.multi_select))

        return actions

    def _notify(self, previous: TreeViewState, current: TreeViewState, toggled: List[NodeId]) -> None:
        index = self._index

        for node_id in toggled:
            is_branch = index.is_branch(node_id)
            self._observers.emit(EventKind.SELECT, SelectEvent(
                element=index.get(node_id),
                is_branch=is_branch,
                is_expanded=is_branch and node_id in current.expanded_ids,
                is_selected=node_id in current.selected_ids,
                is_disabled=node_id in current.disabled_ids,
                is_half_selected=is_branch and node_id in current.half_selected_ids,
                state=current,
            ))

        manual = self._manual_toggle(current, toggled)
        if manual is not None:
            self._observers.emit(EventKind.NODE_SELECT, NodeSelectEvent(
                element=index.get(manual),
                is_selected=manual in current.selected_ids,
                is_branch=index.is_branch(manual),
                state=current,
            ))

        for node_id in self._ordered(current.expanded_ids ^ previous.expanded_ids):
            self._observers.emit(EventKind.EXPAND, ExpandEvent(
                element=index.get(node_id),
                is_expanded=node_id in current.expanded_ids,
                is_selected=node_id in current.selected_ids,
                is_disabled=node_id in current.disabled_ids,
                is_half_selected=node_id in current.half_selected_ids,
                state=current,
            ))

        for node_id in self._ordered(current.expanded_ids - previous.expanded_ids):
            # Fire and forget: the result is never awaited or inspected
            self._observers.emit(EventKind.LOAD_DATA, LoadDataEvent(
                element=index.get(node_id),
                is_expanded=True,
                is_selected=node_id in current.selected_ids,
                is_disabled=node_id in current.disabled_ids,
                is_half_selected=node_id in current.half_selected_ids,
                state=current,
            ))


def initialize(nodes: Iterable[NodeInput],
               config: Optional[TreeViewConfig] = None,
               **kwargs) -> TreeView:
    """Create a TreeView.

    Keyword arguments naming TreeViewConfig fields override the config;
    ``on_select``, ``on_node_select``, ``on_expand``, ``on_load_data``,
    ``on_blur`` and ``error_policy`` are passed to the TreeView.

    Example:
        >>> view = initialize(flatten_tree(data), multi_select=True,
        ...                   on_select=lambda event: print(event.element.name))

    Raises:
        ConfigurationError: For unknown keyword arguments or invalid config
        TreeDataError: For invalid tree data
    """
    handler_names = ('on_select', 'on_node_select', 'on_expand', 'on_load_data',
                     'on_blur', 'error_policy')
    handlers = {name: kwargs.pop(name) for name in handler_names if name in kwargs}

    config = config or TreeViewConfig()
    if kwargs:
        known = {f.name for f in fields(TreeViewConfig)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration options: {', '.join(unknown)}")
        config = replace(config, **kwargs)

    return TreeView(nodes, config, **handlers)
