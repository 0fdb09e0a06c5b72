"""Tree index for DazzleTreeView.

The TreeIndex is the arena that everything else navigates through. It is
built once per tree snapshot from a flat, ordered node list, validates
the structure (unique ids, one root, consistent parent/child links, no
cycles) and then answers lookups in O(1).

An index is immutable after construction, which lets it memoise
descendant sets safely.
"""

import logging
import operator
from collections import deque
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union, Mapping, Any

from cachetools import LRUCache, cachedmethod

from .node import Node, NodeId
from ..exceptions import (
    CorruptTreeError,
    DuplicateNodeIdError,
    MissingChildError,
    MissingParentError,
    MultipleRootsError,
    NoRootError,
    ParentMismatchError,
    TreeCycleError,
    UnknownNodeError,
)

logger = logging.getLogger(__name__)

NodeInput = Union[Node, Mapping[str, Any]]


class TreeIndex:
    """Validated lookup table over a flat tree.

    Example:
        index = TreeIndex([
            Node(0, "", children=(1,)),
            Node(1, "A", parent=0),
        ])
        index.get(1).name          # "A"
        index.parent_of(1)         # 0
        index.top_level_ids        # (1,)

    Raises:
        TreeDataError: Subclass describing the first structural problem found
    """

    def __init__(self, nodes: Iterable[NodeInput], descendant_cache_size: int = 1024):
        """Build and validate the index.

        Args:
            nodes: Nodes (or mappings accepted by Node.from_dict), root included
            descendant_cache_size: Entries kept by the descendant memo
        """
        self._nodes: Dict[NodeId, Node] = {}
        self._order: List[NodeId] = []
        for entry in nodes:
            node = entry if isinstance(entry, Node) else Node.from_dict(entry)
            if node.id in self._nodes:
                raise DuplicateNodeIdError(node.id)
            self._nodes[node.id] = node
            self._order.append(node.id)

        self._root_id = self._find_root()
        self._positions: Dict[NodeId, int] = {}
        self._validate_links()
        self._validate_reachable()

        self._descendants_cache = LRUCache(maxsize=descendant_cache_size)
        logger.debug("Indexed %d nodes (root=%r)", len(self._nodes), self._root_id)

    # Validation

    def _find_root(self) -> NodeId:
        roots = [node_id for node_id in self._order if self._nodes[node_id].parent is None]
        if not roots:
            raise NoRootError()
        if len(roots) > 1:
            raise MultipleRootsError(roots)
        return roots[0]

    def _validate_links(self) -> None:
        listed_by: Dict[NodeId, NodeId] = {}
        for node_id in self._order:
            node = self._nodes[node_id]
            for position, child_id in enumerate(node.children):
                if child_id not in self._nodes:
                    raise MissingChildError(node_id, child_id)
                if child_id in listed_by:
                    raise ParentMismatchError(child_id, self._nodes[child_id].parent, node_id)
                listed_by[child_id] = node_id
                self._positions[child_id] = position

        for node_id in self._order:
            node = self._nodes[node_id]
            if node.parent is None:
                continue
            if node.parent not in self._nodes:
                raise MissingParentError(node_id, node.parent)
            if listed_by.get(node_id) != node.parent:
                raise ParentMismatchError(node_id, node.parent, listed_by.get(node_id))

    def _validate_reachable(self) -> None:
        seen = {self._root_id}
        queue = deque([self._root_id])
        while queue:
            current = queue.popleft()
            for child_id in self._nodes[current].children:
                if child_id in seen:
                    raise TreeCycleError([child_id])
                seen.add(child_id)
                queue.append(child_id)

        if len(seen) != len(self._nodes):
            raise TreeCycleError([node_id for node_id in self._order if node_id not in seen])

    # Lookups

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        for node_id in self._order:
            yield self._nodes[node_id]

    def get(self, node_id: NodeId) -> Node:
        """Return the node for an id.

        Raises:
            UnknownNodeError: If the id is not in this tree
        """
        try:
            return self._nodes[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def find(self, node_id: NodeId) -> Optional[Node]:
        """Return the node for an id, or None if it is not in this tree."""
        return self._nodes.get(node_id)

    @property
    def root_id(self) -> NodeId:
        return self._root_id

    @property
    def root(self) -> Node:
        return self._nodes[self._root_id]

    @property
    def top_level_ids(self) -> Tuple[NodeId, ...]:
        return self.root.children

    @property
    def first_id(self) -> Optional[NodeId]:
        """First top-level node, the default focus target."""
        top = self.root.children
        return top[0] if top else None

    @property
    def node_ids(self) -> List[NodeId]:
        """All ids except the synthetic root, in data order."""
        return [node_id for node_id in self._order if node_id != self._root_id]

    def is_root(self, node_id: NodeId) -> bool:
        return node_id == self._root_id

    def is_branch(self, node_id: NodeId) -> bool:
        return self.get(node_id).branch

    def children_of(self, node_id: NodeId) -> Tuple[NodeId, ...]:
        return self.get(node_id).children

    def parent_of(self, node_id: NodeId) -> Optional[NodeId]:
        """Return the parent id, or None for the root.

        Raises:
            CorruptTreeError: If a non-root node has no resolvable parent
        """
        node = self.get(node_id)
        if node_id == self._root_id:
            return None
        if node.parent is None or node.parent not in self._nodes:
            raise CorruptTreeError(node_id)
        return node.parent

    def position_of(self, node_id: NodeId) -> int:
        """Index of a node within its parent's children (0 for the root)."""
        return self._positions.get(node_id, 0)

    def level_of(self, node_id: NodeId) -> int:
        """Depth where top-level nodes are level 1 and the root is 0."""
        level = 0
        current = node_id
        while current != self._root_id:
            current = self.parent_of(current)
            level += 1
        return level

    def ancestors_of(self, node_id: NodeId) -> Iterator[NodeId]:
        """Yield ancestor ids from the parent upwards, excluding the root."""
        current = self.parent_of(node_id)
        while current is not None and current != self._root_id:
            yield current
            current = self.parent_of(current)

    @cachedmethod(operator.attrgetter('_descendants_cache'))
    def descendants(self, node_id: NodeId) -> Tuple[NodeId, ...]:
        """All descendant ids of a node in pre-order, ignoring expansion."""
        result: List[NodeId] = []
        stack = list(reversed(self.get(node_id).children))
        while stack:
            current = stack.pop()
            result.append(current)
            stack.extend(reversed(self._nodes[current].children))
        return tuple(result)

    def __repr__(self) -> str:
        return f"TreeIndex(nodes={len(self._nodes)}, root={self._root_id!r})"
