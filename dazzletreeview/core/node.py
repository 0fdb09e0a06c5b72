"""Node model for DazzleTreeView.

A Node is a plain data record. Parent and child links are held as ids,
never as object references, so a tree is just a flat table keyed by id.
Navigation over that table is the job of TreeIndex and the traversal
functions.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

NodeId = Any


@dataclass(frozen=True)
class Node:
    """A single entry of a flat tree.

    Attributes:
        id: Unique, hashable identifier within the tree
        name: Display name (also used for type-ahead)
        children: Ordered ids of direct children
        parent: Id of the parent node, None only for the root
        is_branch: True if the node is a branch even without loaded children
        metadata: Arbitrary caller data carried through untouched
    """

    id: NodeId
    name: str
    children: Tuple[NodeId, ...] = ()
    parent: Optional[NodeId] = None
    is_branch: bool = False
    metadata: Optional[Mapping[str, Any]] = field(default=None, compare=False)

    def __post_init__(self):
        # Accept lists from callers but store an immutable tuple
        if not isinstance(self.children, tuple):
            object.__setattr__(self, 'children', tuple(self.children))

    @property
    def has_children(self) -> bool:
        return len(self.children) > 0

    @property
    def branch(self) -> bool:
        """A node is a branch if it says so or if it has children."""
        return self.is_branch or self.has_children

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Node':
        """Build a node from a mapping using either naming convention.

        Accepts ``is_branch`` or ``isBranch`` so data produced for other
        tree widgets can be fed in unchanged.
        """
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            children=tuple(data.get('children') or ()),
            parent=data.get('parent'),
            is_branch=bool(data.get('is_branch', data.get('isBranch', False))),
            metadata=data.get('metadata'),
        )

    def __repr__(self) -> str:
        return f"Node(id={self.id!r}, name={self.name!r})"


def flatten_tree(tree: Mapping[str, Any]) -> List[Node]:
    """Flatten a nested ``{"name": ..., "children": [...]}`` mapping.

    Ids are assigned in pre-order starting at 0 for the root, so the
    root comes first and every parent precedes its children.

    Args:
        tree: Nested mapping; the top-level mapping becomes the root

    Returns:
        List of Node objects including the root

    Example:
        >>> nodes = flatten_tree({"name": "", "children": [
        ...     {"name": "Fruits", "children": [{"name": "Apple"}]},
        ... ]})
        >>> [(n.id, n.name, n.parent) for n in nodes]
        [(0, '', None), (1, 'Fruits', 0), (2, 'Apple', 1)]
    """
    records: Dict[int, Dict[str, Any]] = {}
    counter = 0

    def _flatten(entry: Mapping[str, Any], parent: Optional[int]) -> int:
        nonlocal counter
        node_id = counter
        counter += 1
        record = {
            'id': node_id,
            'name': entry.get('name', ''),
            'parent': parent,
            'children': [],
            'is_branch': bool(entry.get('is_branch', entry.get('isBranch', False))),
            'metadata': entry.get('metadata'),
        }
        records[node_id] = record
        for child in entry.get('children') or ():
            record['children'].append(_flatten(child, node_id))
        return node_id

    _flatten(tree, None)
    return [Node.from_dict(records[node_id]) for node_id in sorted(records)]
