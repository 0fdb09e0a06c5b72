"""Shared fixtures for the DazzleTreeView test suite."""

import pytest

from dazzletreeview.core import TreeIndex
from dazzletreeview.testing import EventRecorder, build_tree, sample_tree


FOOD = {
    "Fruits": {
        "Apple": {},
        "Banana": {},
        "Citrus": {"Lemon": {}, "Orange": {}},
    },
    "Vegetables": {
        "Carrot": {},
        "Leafy": {"Kale": {}},
    },
    "Grains": {},
}


@pytest.fixture
def sample_nodes():
    """Nodes of A(B, C(D)) under a synthetic root."""
    return sample_tree()


@pytest.fixture
def sample_index(sample_nodes):
    return TreeIndex(sample_nodes)


@pytest.fixture
def food_nodes():
    """Three-level tree used for traversal properties."""
    return build_tree(FOOD)


@pytest.fixture
def food_index(food_nodes):
    return TreeIndex(food_nodes)


@pytest.fixture
def recorder():
    return EventRecorder()
