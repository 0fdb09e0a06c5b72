"""Configuration system for DazzleTreeView.

This module defines how users describe the behaviour of a tree view:
how selection spreads through the tree, what a click does, and which
id sets are owned by the caller (controlled) rather than the engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Optional


class ClickAction(Enum):
    """What a click (or Enter/Space) does to a node."""
    SELECT = "select"                      # Select, honouring multi_select
    EXCLUSIVE_SELECT = "exclusive_select"  # Always replace the selection
    FOCUS = "focus"                        # Only move focus, never select


class AllDisabledPolicy(Enum):
    """How upward propagation treats a branch whose children are all disabled.

    The tri-state classification normally ignores disabled children. When
    nothing but disabled children remain, the result is a policy choice.
    """
    INCLUDE_DISABLED = "include_disabled"  # Classify using the disabled children
    SKIP = "skip"                          # Leave the branch untouched


def _as_ids(ids: Optional[Iterable[Any]]) -> Optional[List[Any]]:
    if ids is None:
        return None
    return list(ids)


@dataclass
class TreeViewConfig:
    """Complete configuration for a tree view.

    Default/controlled id collections may be any iterable; they are
    normalised to lists on construction. ``None`` for a controlled
    collection means the engine owns that state.
    """

    # Selection behaviour
    multi_select: bool = False
    propagate_select: bool = False          # Downward, ignored without multi_select
    propagate_select_upwards: bool = False
    togglable_select: bool = False
    click_action: ClickAction = ClickAction.SELECT

    # Expansion behaviour
    propagate_collapse: bool = False
    expand_on_keyboard_select: bool = False

    # Uncontrolled initial sets
    default_expanded_ids: List[Any] = field(default_factory=list)
    default_selected_ids: List[Any] = field(default_factory=list)
    default_disabled_ids: List[Any] = field(default_factory=list)

    # Externally owned sets, reconciled on every update()
    controlled_selected_ids: Optional[List[Any]] = None
    controlled_expanded_ids: Optional[List[Any]] = None

    # Upward propagation policy for all-disabled children
    all_disabled_policy: AllDisabledPolicy = AllDisabledPolicy.INCLUDE_DISABLED

    # Safety net for the settle loop (None = derived from tree size)
    max_settle_cycles: Optional[int] = None

    def __post_init__(self):
        self.default_expanded_ids = _as_ids(self.default_expanded_ids) or []
        self.default_selected_ids = _as_ids(self.default_selected_ids) or []
        self.default_disabled_ids = _as_ids(self.default_disabled_ids) or []
        self.controlled_selected_ids = _as_ids(self.controlled_selected_ids)
        self.controlled_expanded_ids = _as_ids(self.controlled_expanded_ids)
        if isinstance(self.click_action, str):
            self.click_action = ClickAction(self.click_action)
        if isinstance(self.all_disabled_policy, str):
            self.all_disabled_policy = AllDisabledPolicy(self.all_disabled_policy)

    @property
    def effective_propagate_select(self) -> bool:
        """Downward propagation only applies when multi-select is enabled."""
        return self.propagate_select and self.multi_select

    # Convenience constructors for common configurations

    @classmethod
    def checkbox_tree(cls, **kwargs) -> 'TreeViewConfig':
        """Create config for a nested checklist.

        Multi-select with selection propagating both down to descendants
        and up to ancestors, and togglable selection.

        Returns:
            TreeViewConfig for a checkbox tree
        """
        options = dict(
            multi_select=True,
            propagate_select=True,
            propagate_select_upwards=True,
            togglable_select=True,
        )
        options.update(kwargs)
        return cls(**options)

    @classmethod
    def single_select(cls, **kwargs) -> 'TreeViewConfig':
        """Create config for a file-browser style single selection.

        Returns:
            TreeViewConfig with one selected node at a time
        """
        options = dict(
            multi_select=False,
            propagate_collapse=True,
        )
        options.update(kwargs)
        return cls(**options)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not isinstance(self.click_action, ClickAction):
            errors.append(f"click_action must be a ClickAction, got {self.click_action!r}")

        if not isinstance(self.all_disabled_policy, AllDisabledPolicy):
            errors.append(
                f"all_disabled_policy must be an AllDisabledPolicy, got {self.all_disabled_policy!r}"
            )

        if self.max_settle_cycles is not None and self.max_settle_cycles <= 0:
            errors.append("max_settle_cycles must be positive")

        return errors
