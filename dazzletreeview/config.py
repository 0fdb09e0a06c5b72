"""Configuration re-export.

Configuration lives in the _common package; this module is the public
import location.
"""

from ._common.config import (
    TreeViewConfig,
    ClickAction,
    AllDisabledPolicy,
)

__all__ = [
    'TreeViewConfig',
    'ClickAction',
    'AllDisabledPolicy',
]
