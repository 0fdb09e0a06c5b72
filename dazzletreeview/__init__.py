"""DazzleTreeView - headless state engine for accessible tree widgets.

DazzleTreeView owns everything about a tree view except drawing it:
selection (single, multi, tri-state with propagation), expansion,
keyboard focus, disabled nodes, controlled (caller-owned) id sets and
change notifications.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from dazzletreeview import initialize, flatten_tree, TreeViewConfig

    view = initialize(
        flatten_tree(data),
        TreeViewConfig.checkbox_tree(),
        on_select=lambda event: print(event.element.name, event.is_selected),
    )
    view.handle_key_down(" ")
━━━━━━━━━━━━━━━━━━━━━━━━━━

The pure pieces (TreeIndex, traversal functions, tree_reducer,
propagation) live in ``dazzletreeview.core`` and can be used without a
TreeView.
"""

__version__ = "0.1.0"

from .api import TreeView, NodeProps, initialize
from .config import TreeViewConfig, ClickAction, AllDisabledPolicy
from .core import (
    Action,
    ActionType,
    Node,
    TreeIndex,
    TreeViewState,
    flatten_tree,
    tree_reducer,
)
from .events import (
    EventKind,
    SelectEvent,
    NodeSelectEvent,
    ExpandEvent,
    LoadDataEvent,
    BlurEvent,
    ObserverRegistry,
)
from .error_policies import (
    HandlerErrorPolicy,
    FailFastPolicy,
    ContinueOnErrorsPolicy,
    CollectErrorsPolicy,
    ThresholdPolicy,
)
from .exceptions import (
    TreeViewError,
    TreeDataError,
    DuplicateNodeIdError,
    NoRootError,
    MultipleRootsError,
    MissingParentError,
    MissingChildError,
    ParentMismatchError,
    TreeCycleError,
    CorruptTreeError,
    UnknownNodeError,
    ConfigurationError,
    UnknownActionError,
    PropagationLoopError,
)
from .keyboard import KeyEvent, Keys
from .pointer import ClickEvent

__all__ = [
    "__version__",
    # Handle
    "TreeView",
    "NodeProps",
    "initialize",
    # Configuration
    "TreeViewConfig",
    "ClickAction",
    "AllDisabledPolicy",
    # Core
    "Action",
    "ActionType",
    "Node",
    "TreeIndex",
    "TreeViewState",
    "flatten_tree",
    "tree_reducer",
    # Inputs
    "KeyEvent",
    "Keys",
    "ClickEvent",
    # Notifications
    "EventKind",
    "SelectEvent",
    "NodeSelectEvent",
    "ExpandEvent",
    "LoadDataEvent",
    "BlurEvent",
    "ObserverRegistry",
    # Observer error policies
    "HandlerErrorPolicy",
    "FailFastPolicy",
    "ContinueOnErrorsPolicy",
    "CollectErrorsPolicy",
    "ThresholdPolicy",
    # Errors
    "TreeViewError",
    "TreeDataError",
    "DuplicateNodeIdError",
    "NoRootError",
    "MultipleRootsError",
    "MissingParentError",
    "MissingChildError",
    "ParentMismatchError",
    "TreeCycleError",
    "CorruptTreeError",
    "UnknownNodeError",
    "ConfigurationError",
    "UnknownActionError",
    "PropagationLoopError",
]
