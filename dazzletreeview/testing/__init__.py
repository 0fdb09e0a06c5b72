"""Testing utilities for DazzleTreeView consumers."""

from .fixtures import EventRecorder, build_tree, sample_tree

__all__ = ['EventRecorder', 'build_tree', 'sample_tree']
