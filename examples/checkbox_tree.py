#!/usr/bin/env python3
"""
Nested checklist example for DazzleTreeView.

This example demonstrates:
- Building a tree from nested data with flatten_tree
- Tri-state selection (select a group, half-select its parent)
- Keyboard navigation and selection notifications
- Rendering from NodeProps
"""

import logging
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from dazzletreeview import EventKind, Keys, TreeViewConfig, flatten_tree, initialize

GROCERIES = {
    "name": "",
    "children": [
        {"name": "Fruits", "children": [
            {"name": "Apple"},
            {"name": "Banana"},
            {"name": "Citrus", "children": [{"name": "Lemon"}, {"name": "Orange"}]},
        ]},
        {"name": "Vegetables", "children": [{"name": "Carrot"}, {"name": "Kale"}]},
        {"name": "Grains"},
    ],
}

MARKS = {True: "[x]", False: "[ ]", "half": "[-]"}


def render(view):
    """Print the visible part of the tree."""
    for node_id in view.accessible_ids():
        props = view.node_props(node_id)
        mark = MARKS["half"] if props.is_half_selected else MARKS[props.is_selected]
        cursor = ">" if props.is_tabbable else " "
        arrow = ("v" if props.is_expanded else ">") if props.is_branch else " "
        print(f"{cursor} {'  ' * (props.level - 1)}{arrow} {mark} {props.name}")
    print("-" * 40)


def main():
    """Walk through a short keyboard session."""
    if "-v" in sys.argv:
        logging.basicConfig(level=logging.DEBUG)

    view = initialize(flatten_tree(GROCERIES), TreeViewConfig.checkbox_tree())
    view.subscribe(
        EventKind.NODE_SELECT,
        lambda event: print(f"user {'checked' if event.is_selected else 'unchecked'} {event.element.name}"),
    )

    render(view)
    for key in (Keys.ARROW_RIGHT, Keys.ARROW_DOWN, Keys.ARROW_DOWN, Keys.ARROW_DOWN,
                Keys.ARROW_RIGHT, Keys.ARROW_DOWN, Keys.SPACE):
        view.handle_key_down(key)
    render(view)

    view.handle_key_down(Keys.ARROW_DOWN)
    view.handle_key_down(Keys.SPACE)
    render(view)


if __name__ == "__main__":
    main()
