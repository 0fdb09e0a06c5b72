"""Pointer command interpreter.

Counterpart of the keyboard interpreter for decoded clicks: a click on
the node itself (selection/focus) and a click on its expand control.
Raw mouse event capture and hit-testing belong to the rendering layer.
"""

from dataclasses import dataclass
from typing import List

from .core.actions import Action, ActionType
from .core.index import TreeIndex
from .core.node import NodeId
from .core.propagation import get_on_select_action, propagated_ids, select_value_for
from .core.state import TreeViewState
from .core.traverser import get_accessible_range
from ._common.config import ClickAction, TreeViewConfig


@dataclass(frozen=True)
class ClickEvent:
    """A decoded click on a node."""
    id: NodeId
    shift: bool = False
    ctrl: bool = False


def handle_node_click(index: TreeIndex,
                      state: TreeViewState,
                      config: TreeViewConfig,
                      event: ClickEvent) -> List[Action]:
    """Translate a click on a node into actions.

    - shift (multi-select only): replace the selection with the accessible
      range between the last user-selected node and the clicked one
    - ctrl, or click action SELECT: select / toggle the node, spreading
      to its subtree when downward propagation is on
    - click action EXCLUSIVE_SELECT: the node becomes the only selection
    - click action FOCUS: focus only

    Disabled nodes ignore clicks.
    """
    node_id = event.id
    if node_id not in index or index.is_root(node_id) or node_id in state.disabled_ids:
        return []

    click_action = config.click_action

    if event.shift and config.multi_select and click_action is not ClickAction.FOCUS:
        anchor = state.last_user_select
        if anchor is None or anchor not in index or index.is_root(anchor):
            anchor = node_id
        ids = [
            i for i in get_accessible_range(index, state.expanded_ids, anchor, node_id)
            if i not in state.disabled_ids
        ]
        if config.effective_propagate_select:
            ids = propagated_ids(index, ids, state.disabled_ids)
        return [
            Action(
                ActionType.EXCLUSIVE_CHANGE_SELECT_MANY,
                ids=ids,
                select=True,
                multi_select=True,
                last_interacted_with=node_id,
            ),
            Action(ActionType.FOCUS, id=node_id, last_interacted_with=node_id),
        ]

    if event.ctrl or click_action is ClickAction.SELECT:
        if config.togglable_select:
            action_type = get_on_select_action(index, node_id, state.selected_ids, state.disabled_ids)
        else:
            action_type = ActionType.SELECT
        actions = [Action(
            action_type,
            id=node_id,
            multi_select=config.multi_select,
            last_interacted_with=node_id,
            last_manually_toggled=node_id,
        )]
        if config.effective_propagate_select:
            actions.append(Action(
                ActionType.CHANGE_SELECT_MANY,
                ids=propagated_ids(index, [node_id], state.disabled_ids),
                select=select_value_for(action_type, node_id, state.selected_ids),
                multi_select=config.multi_select,
                last_interacted_with=node_id,
                last_manually_toggled=node_id,
            ))
        return actions

    if click_action is ClickAction.EXCLUSIVE_SELECT:
        action_type = ActionType.TOGGLE_SELECT if config.togglable_select else ActionType.SELECT
        return [Action(
            action_type,
            id=node_id,
            multi_select=False,
            last_interacted_with=node_id,
            last_manually_toggled=node_id,
        )]

    return [Action(ActionType.FOCUS, id=node_id, last_interacted_with=node_id)]


def handle_expand_click(index: TreeIndex,
                        state: TreeViewState,
                        config: TreeViewConfig,
                        event: ClickEvent) -> List[Action]:
    """Translate a click on a node's expand control into actions.

    Modified clicks are reserved for selection and ignored here.
    """
    node_id = event.id
    if event.ctrl or event.shift:
        return []
    if node_id not in index or index.is_root(node_id) or not index.is_branch(node_id):
        return []

    collapsing = node_id in state.expanded_ids
    if collapsing and config.propagate_collapse:
        return [Action(
            ActionType.COLLAPSE_MANY,
            ids=[node_id, *index.descendants(node_id)],
            last_interacted_with=node_id,
        )]
    return [Action(ActionType.TOGGLE, id=node_id, last_interacted_with=node_id)]
