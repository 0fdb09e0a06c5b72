"""Keyboard command interpreter.

Maps an already decoded key event (key name plus shift/ctrl modifiers)
and the current state to the list of actions to dispatch. The interpreter
never mutates anything; an empty list means the key does nothing here
(for example an arrow key at the edge of the tree).

Key names follow the DOM ``KeyboardEvent.key`` convention.
"""

from dataclasses import dataclass
from typing import List

from .core.actions import Action, ActionType
from .core.index import TreeIndex
from .core.propagation import get_on_select_action, propagated_ids, select_value_for
from .core.state import TreeViewState
from .core.traverser import (
    get_accessible_range,
    get_last_accessible,
    get_next_accessible,
    get_previous_accessible,
)
from ._common.config import ClickAction, TreeViewConfig


class Keys:
    """Key names the interpreter reacts to."""
    ARROW_DOWN = "ArrowDown"
    ARROW_UP = "ArrowUp"
    ARROW_LEFT = "ArrowLeft"
    ARROW_RIGHT = "ArrowRight"
    HOME = "Home"
    END = "End"
    ENTER = "Enter"
    SPACE = " "
    SPACEBAR = "Spacebar"  # Legacy name for the space key
    ASTERISK = "*"


SELECT_KEYS = frozenset({Keys.ENTER, Keys.SPACE, Keys.SPACEBAR})


@dataclass(frozen=True)
class KeyEvent:
    """A decoded key press."""
    key: str
    shift: bool = False
    ctrl: bool = False


def _focus(node_id, origin=None) -> Action:
    return Action(
        ActionType.FOCUS,
        id=node_id,
        last_interacted_with=node_id if origin is None else origin,
    )


def handle_key_down(index: TreeIndex,
                    state: TreeViewState,
                    config: TreeViewConfig,
                    event: KeyEvent) -> List[Action]:
    """Translate a key press into actions.

    Args:
        index: Current tree index
        state: Current snapshot (its tabbable_id is the focused node)
        config: Tree configuration
        event: Decoded key press

    Returns:
        Actions to dispatch in order (possibly empty)
    """
    node_id = state.tabbable_id
    if node_id is None or node_id not in index:
        return []

    if event.ctrl:
        return _handle_ctrl(index, state, config, event)

    if event.shift and event.key in (Keys.ARROW_UP, Keys.ARROW_DOWN):
        return _handle_shift_arrow(index, state, config, event)

    handler = _KEY_HANDLERS.get(event.key)
    if handler is not None:
        return handler(index, state, config)
    if event.key in SELECT_KEYS:
        return _handle_select(index, state, config)
    if len(event.key) == 1:
        return _handle_type_ahead(index, state, event.key)
    return []


def _handle_ctrl(index, state, config, event) -> List[Action]:
    if config.click_action is ClickAction.FOCUS:
        return []
    node_id = state.tabbable_id

    if event.key.lower() == "a":
        ids = [i for i in index.node_ids if i not in state.disabled_ids]
        selected_enabled = [i for i in state.selected_ids if i not in state.disabled_ids]
        return [Action(
            ActionType.CHANGE_SELECT_MANY,
            ids=ids,
            select=len(selected_enabled) != len(ids),
            multi_select=config.multi_select,
            last_interacted_with=node_id,
        )]

    if event.shift and event.key in (Keys.HOME, Keys.END):
        if event.key == Keys.HOME:
            target = index.first_id
        else:
            target = get_last_accessible(index, index.root_id, state.expanded_ids)
        selection = [
            i for i in get_accessible_range(index, state.expanded_ids, node_id, target)
            if i not in state.disabled_ids
        ]
        if config.effective_propagate_select:
            selection = propagated_ids(index, selection, state.disabled_ids)
        return [
            Action(
                ActionType.CHANGE_SELECT_MANY,
                ids=selection,
                select=True,
                multi_select=config.multi_select,
                last_interacted_with=target,
            ),
            _focus(target),
        ]

    return []


def _handle_shift_arrow(index, state, config, event) -> List[Action]:
    if event.key == Keys.ARROW_UP:
        target = get_previous_accessible(index, state.tabbable_id, state.expanded_ids)
    else:
        target = get_next_accessible(index, state.tabbable_id, state.expanded_ids)
    if target is None or target in state.disabled_ids:
        return []

    actions = []
    if config.click_action is not ClickAction.FOCUS:
        ids = [target]
        if config.effective_propagate_select:
            ids = propagated_ids(index, ids, state.disabled_ids)
        actions.append(Action(
            ActionType.CHANGE_SELECT_MANY,
            ids=ids,
            select=True,
            multi_select=config.multi_select,
            last_interacted_with=target,
            last_manually_toggled=target,
        ))
    actions.append(_focus(target))
    return actions


def _arrow_down(index, state, config) -> List[Action]:
    target = get_next_accessible(index, state.tabbable_id, state.expanded_ids)
    return [_focus(target)] if target is not None else []


def _arrow_up(index, state, config) -> List[Action]:
    target = get_previous_accessible(index, state.tabbable_id, state.expanded_ids)
    return [_focus(target)] if target is not None else []


def _arrow_left(index, state, config) -> List[Action]:
    node_id = state.tabbable_id
    if index.is_branch(node_id) and node_id in state.expanded_ids:
        if config.propagate_collapse:
            return [Action(
                ActionType.COLLAPSE_MANY,
                ids=[node_id, *index.descendants(node_id)],
                last_interacted_with=node_id,
            )]
        return [Action(ActionType.COLLAPSE, id=node_id, last_interacted_with=node_id)]

    parent = index.parent_of(node_id)
    if index.is_root(parent):
        return []
    return [_focus(parent)]


def _arrow_right(index, state, config) -> List[Action]:
    node_id = state.tabbable_id
    if not index.is_branch(node_id):
        return []
    if node_id in state.expanded_ids:
        children = index.children_of(node_id)
        return [_focus(children[0])] if children else []
    return [Action(ActionType.EXPAND, id=node_id, last_interacted_with=node_id)]


def _home(index, state, config) -> List[Action]:
    return [_focus(index.first_id)]


def _end(index, state, config) -> List[Action]:
    target = get_last_accessible(index, index.root_id, state.expanded_ids)
    return [_focus(target)] if target is not None else []


def _expand_siblings(index, state, config) -> List[Action]:
    node_id = state.tabbable_id
    parent = index.parent_of(node_id)
    branches = [i for i in index.children_of(parent) if index.is_branch(i)]
    if not branches:
        return []
    return [Action(ActionType.EXPAND_MANY, ids=branches, last_interacted_with=node_id)]


def _handle_select(index, state, config) -> List[Action]:
    if config.click_action is ClickAction.FOCUS:
        return []
    node_id = state.tabbable_id
    actions: List[Action] = []

    if node_id not in state.disabled_ids:
        multi_select = config.multi_select and config.click_action is not ClickAction.EXCLUSIVE_SELECT
        if config.togglable_select:
            action_type = get_on_select_action(index, node_id, state.selected_ids, state.disabled_ids)
        else:
            action_type = ActionType.SELECT
        actions.append(Action(
            action_type,
            id=node_id,
            multi_select=multi_select,
            last_interacted_with=node_id,
            last_manually_toggled=node_id,
        ))
        if config.effective_propagate_select:
            actions.append(Action(
                ActionType.CHANGE_SELECT_MANY,
                ids=propagated_ids(index, [node_id], state.disabled_ids),
                select=select_value_for(action_type, node_id, state.selected_ids),
                multi_select=multi_select,
                last_interacted_with=node_id,
                last_manually_toggled=node_id,
            ))

    if config.expand_on_keyboard_select and index.is_branch(node_id):
        actions.append(Action(ActionType.TOGGLE, id=node_id, last_interacted_with=node_id))
    return actions


def _handle_type_ahead(index, state, key: str) -> List[Action]:
    node_id = state.tabbable_id
    needle = key.lower()
    current = get_next_accessible(index, node_id, state.expanded_ids)
    # Every accessible node is visited at most once before wrapping back
    for _ in range(len(index) + 1):
        if current == node_id:
            break
        if current is None:
            current = index.first_id
            continue
        if index.get(current).name.lower().startswith(needle):
            return [_focus(current, origin=node_id)]
        current = get_next_accessible(index, current, state.expanded_ids)
    return []


_KEY_HANDLERS = {
    Keys.ARROW_DOWN: _arrow_down,
    Keys.ARROW_UP: _arrow_up,
    Keys.ARROW_LEFT: _arrow_left,
    Keys.ARROW_RIGHT: _arrow_right,
    Keys.HOME: _home,
    Keys.END: _end,
    Keys.ASTERISK: _expand_siblings,
}
