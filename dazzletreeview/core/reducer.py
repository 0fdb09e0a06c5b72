"""Pure transition function for tree state.

``tree_reducer(state, action)`` returns a new TreeViewState and never
touches its input. Each ActionType has one handler in ``_HANDLERS``.

Rules shared by all handlers:
- ``last_action`` is set to the action type
- selection handlers keep ``selected_ids`` and ``half_selected_ids`` disjoint
- ``keep_focus`` leaves ``tabbable_id`` alone and ``not_user_action``
  leaves ``last_user_select`` alone, so propagation-origin transitions do
  not steal focus or move the range anchor
"""

from typing import Callable, Dict, FrozenSet, Iterable

from .actions import Action, ActionType
from .node import NodeId
from .state import TreeViewState
from ..exceptions import UnknownActionError

Handler = Callable[[TreeViewState, Action], TreeViewState]


def _enabled(state: TreeViewState, ids: Iterable[NodeId]) -> list:
    return [node_id for node_id in ids if node_id not in state.disabled_ids]


def _focus_fields(state: TreeViewState, action: Action) -> dict:
    """Focus/anchor bookkeeping common to single-node selection changes."""
    if action.keep_focus:
        fields = {'tabbable_id': state.tabbable_id, 'is_focused': state.is_focused}
    else:
        fields = {'tabbable_id': action.id, 'is_focused': True}
    fields['last_user_select'] = state.last_user_select if action.not_user_action else action.id
    return fields


def _interaction_fields(action: Action) -> dict:
    return {
        'last_action': action.type,
        'last_interacted_with': action.last_interacted_with,
        'last_manually_toggled': action.last_manually_toggled,
    }


# Selection

def _select(state: TreeViewState, action: Action) -> TreeViewState:
    if action.id in state.disabled_ids:
        return state
    if action.multi_select:
        selected = state.selected_ids | {action.id}
    else:
        selected = frozenset({action.id})
    return state.evolve(
        selected_ids=selected,
        half_selected_ids=state.half_selected_ids - {action.id},
        **_focus_fields(state, action),
        **_interaction_fields(action),
    )


def _deselect(state: TreeViewState, action: Action) -> TreeViewState:
    if action.id in state.disabled_ids:
        return state
    return state.evolve(
        selected_ids=state.selected_ids - {action.id},
        half_selected_ids=state.half_selected_ids - {action.id},
        **_focus_fields(state, action),
        **_interaction_fields(action),
    )


def _toggle_select(state: TreeViewState, action: Action) -> TreeViewState:
    if action.id in state.disabled_ids:
        return state
    if action.id in state.selected_ids:
        selected = state.selected_ids - {action.id}
    elif action.multi_select:
        selected = state.selected_ids | {action.id}
    else:
        selected = frozenset({action.id})
    return state.evolve(
        selected_ids=selected,
        half_selected_ids=state.half_selected_ids - {action.id},
        **_focus_fields(state, action),
        **_interaction_fields(action),
    )


def _change_select_many(state: TreeViewState, action: Action) -> TreeViewState:
    ids = _enabled(state, action.ids)
    half = state.half_selected_ids
    if action.select:
        if action.multi_select:
            selected = state.selected_ids | frozenset(ids)
        elif ids:
            # Single selection: last write wins
            selected = frozenset({ids[-1]})
        else:
            selected = state.selected_ids
    else:
        selected = state.selected_ids - frozenset(ids)
        half = half - frozenset(ids)
    return state.evolve(
        selected_ids=selected,
        half_selected_ids=half - selected,
        **_interaction_fields(action),
    )


def _exclusive_change_select_many(state: TreeViewState, action: Action) -> TreeViewState:
    ids = _enabled(state, action.ids)
    if not action.multi_select and ids:
        ids = ids[-1:]
    selected: FrozenSet[NodeId] = frozenset(ids) if action.select else frozenset()
    return state.evolve(
        selected_ids=selected,
        half_selected_ids=state.half_selected_ids - selected,
        is_focused=True,
        **_interaction_fields(action),
    )


def _half_select(state: TreeViewState, action: Action) -> TreeViewState:
    if action.id in state.disabled_ids:
        return state
    return state.evolve(
        selected_ids=state.selected_ids - {action.id},
        half_selected_ids=state.half_selected_ids | {action.id},
        last_action=action.type,
        last_interacted_with=action.last_interacted_with,
    )


def _controlled_select_many(state: TreeViewState, action: Action) -> TreeViewState:
    ids = list(action.ids)
    if not action.multi_select and ids:
        ids = ids[-1:]
    selected = frozenset(ids)
    return state.evolve(
        selected_ids=selected,
        half_selected_ids=state.half_selected_ids - selected,
        controlled_ids=frozenset(action.ids),
        last_action=action.type,
        last_interacted_with=action.last_interacted_with,
    )


# Expansion

def _expansion(state: TreeViewState, action: Action, expanded: FrozenSet[NodeId]) -> TreeViewState:
    if action.keep_focus:
        tabbable, focused = state.tabbable_id, state.is_focused
    else:
        tabbable, focused = action.id, True
    return state.evolve(
        expanded_ids=expanded,
        tabbable_id=tabbable,
        is_focused=focused,
        last_action=action.type,
        last_interacted_with=action.last_interacted_with,
    )


def _expand(state: TreeViewState, action: Action) -> TreeViewState:
    return _expansion(state, action, state.expanded_ids | {action.id})


def _collapse(state: TreeViewState, action: Action) -> TreeViewState:
    return _expansion(state, action, state.expanded_ids - {action.id})


def _toggle(state: TreeViewState, action: Action) -> TreeViewState:
    expanded = state.expanded_ids ^ {action.id}
    return _expansion(state, action, expanded)


def _expand_many(state: TreeViewState, action: Action) -> TreeViewState:
    return state.evolve(
        expanded_ids=state.expanded_ids | frozenset(action.ids),
        last_action=action.type,
        last_interacted_with=action.last_interacted_with,
    )


def _collapse_many(state: TreeViewState, action: Action) -> TreeViewState:
    return state.evolve(
        expanded_ids=state.expanded_ids - frozenset(action.ids),
        last_action=action.type,
        last_interacted_with=action.last_interacted_with,
    )


# Focus

def _focus(state: TreeViewState, action: Action) -> TreeViewState:
    return state.evolve(
        tabbable_id=action.id,
        is_focused=True,
        last_action=action.type,
        last_interacted_with=action.last_interacted_with,
    )


def _blur(state: TreeViewState, action: Action) -> TreeViewState:
    return state.evolve(is_focused=False, last_action=action.type)


# Disabled set

def _targets(action: Action) -> FrozenSet[NodeId]:
    ids = set(action.ids)
    if action.id is not None:
        ids.add(action.id)
    return frozenset(ids)


def _disable(state: TreeViewState, action: Action) -> TreeViewState:
    return state.evolve(disabled_ids=state.disabled_ids | _targets(action), last_action=action.type)


def _enable(state: TreeViewState, action: Action) -> TreeViewState:
    return state.evolve(disabled_ids=state.disabled_ids - _targets(action), last_action=action.type)


# Bookkeeping

def _update_when_data_changed(state: TreeViewState, action: Action) -> TreeViewState:
    changes = dict(
        tabbable_id=action.tabbable_id,
        last_interacted_with=action.last_interacted_with,
        last_manually_toggled=action.last_manually_toggled,
        last_user_select=action.last_user_select,
        last_action=action.type,
    )
    if action.valid_ids is not None:
        live = action.valid_ids
        changes.update(
            selected_ids=state.selected_ids & live,
            expanded_ids=state.expanded_ids & live,
            disabled_ids=state.disabled_ids & live,
            half_selected_ids=state.half_selected_ids & live,
            controlled_ids=state.controlled_ids & live,
        )
    return state.evolve(**changes)


def _clear_last_manually_toggled(state: TreeViewState, action: Action) -> TreeViewState:
    return state.evolve(last_manually_toggled=None, last_action=action.type)


_HANDLERS: Dict[ActionType, Handler] = {
    ActionType.SELECT: _select,
    ActionType.DESELECT: _deselect,
    ActionType.TOGGLE_SELECT: _toggle_select,
    ActionType.CHANGE_SELECT_MANY: _change_select_many,
    ActionType.EXCLUSIVE_CHANGE_SELECT_MANY: _exclusive_change_select_many,
    ActionType.HALF_SELECT: _half_select,
    ActionType.CONTROLLED_SELECT_MANY: _controlled_select_many,
    ActionType.EXPAND: _expand,
    ActionType.COLLAPSE: _collapse,
    ActionType.TOGGLE: _toggle,
    ActionType.EXPAND_MANY: _expand_many,
    ActionType.COLLAPSE_MANY: _collapse_many,
    ActionType.FOCUS: _focus,
    ActionType.BLUR: _blur,
    ActionType.DISABLE: _disable,
    ActionType.ENABLE: _enable,
    ActionType.UPDATE_TREE_STATE_WHEN_DATA_CHANGED: _update_when_data_changed,
    ActionType.CLEAR_LAST_MANUALLY_TOGGLED: _clear_last_manually_toggled,
}


def tree_reducer(state: TreeViewState, action: Action) -> TreeViewState:
    """Apply one action to a state snapshot.

    Args:
        state: Current snapshot (left untouched)
        action: Transition to apply

    Returns:
        The new snapshot

    Raises:
        UnknownActionError: If the action type has no handler
    """
    handler = _HANDLERS.get(getattr(action, 'type', None))
    if handler is None:
        raise UnknownActionError(f"Unknown action: {action!r}")
    return handler(state, action)
