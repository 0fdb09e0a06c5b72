"""Common components shared across DazzleTreeView modules.

This internal package contains configuration that every layer reads
(core, interpreters, the TreeView handle). It should NOT be imported
directly by users.

Important: This package must NEVER import from core or api to avoid
circular dependencies.
"""

from .config import (
    TreeViewConfig,
    ClickAction,
    AllDisabledPolicy,
)

__all__ = [
    'TreeViewConfig',
    'ClickAction',
    'AllDisabledPolicy',
]
