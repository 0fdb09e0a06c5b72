"""Accessible traversal for DazzleTreeView.

"Accessible" nodes are the ones a user can reach with the keyboard: the
top-level nodes plus the children of every expanded branch whose own
ancestors are expanded. Collapsed branches are opaque, their subtrees are
never visited.

All functions here are pure and work from a TreeIndex plus the current
set of expanded ids. "No further node" is reported as None; structural
corruption is raised as CorruptTreeError by the index.
"""

from typing import AbstractSet, Collection, Iterator, List, Optional, Tuple

from .index import TreeIndex
from .node import NodeId


def _is_open(index: TreeIndex, node_id: NodeId, expanded_ids: AbstractSet[NodeId]) -> bool:
    """True if the node shows its children."""
    node = index.get(node_id)
    return node.branch and node_id in expanded_ids and node.has_children


def get_next_accessible(index: TreeIndex,
                        node_id: NodeId,
                        expanded_ids: AbstractSet[NodeId]) -> Optional[NodeId]:
    """Return the accessible node that follows ``node_id``.

    An open branch steps into its first child. Otherwise the walk climbs
    the ancestor chain looking for the next sibling at each level.

    Returns:
        Next node id, or None at the end of the tree
    """
    if index.is_root(node_id):
        return index.first_id

    if _is_open(index, node_id, expanded_ids):
        return index.children_of(node_id)[0]

    current = node_id
    while not index.is_root(current):
        parent = index.parent_of(current)
        siblings = index.children_of(parent)
        position = index.position_of(current)
        if position + 1 < len(siblings):
            return siblings[position + 1]
        current = parent
    return None


def get_last_accessible(index: TreeIndex,
                        node_id: NodeId,
                        expanded_ids: AbstractSet[NodeId]) -> Optional[NodeId]:
    """Return the deepest last-child chain starting at ``node_id``.

    Passing the root id yields the last accessible node of the whole tree.
    """
    if index.is_root(node_id):
        top = index.top_level_ids
        if not top:
            return None
        current = top[-1]
    else:
        current = node_id

    while _is_open(index, current, expanded_ids):
        current = index.children_of(current)[-1]
    return current


def get_previous_accessible(index: TreeIndex,
                            node_id: NodeId,
                            expanded_ids: AbstractSet[NodeId]) -> Optional[NodeId]:
    """Return the accessible node that precedes ``node_id``.

    With a previous sibling this is that sibling's last accessible
    descendant; otherwise it is the parent.

    Returns:
        Previous node id, or None at the first top-level node
    """
    if index.is_root(node_id):
        return None

    parent = index.parent_of(node_id)
    position = index.position_of(node_id)
    if position > 0:
        previous_sibling = index.children_of(parent)[position - 1]
        return get_last_accessible(index, previous_sibling, expanded_ids)

    if index.is_root(parent):
        return None
    return parent


def get_descendants(index: TreeIndex,
                    node_id: NodeId,
                    excluded: Collection[NodeId] = ()) -> List[NodeId]:
    """Return every descendant of ``node_id`` in pre-order.

    Expansion state is ignored. Subtrees rooted at an excluded id are
    skipped entirely (the excluded node and everything below it).
    """
    if not excluded:
        return list(index.descendants(node_id))

    result: List[NodeId] = []
    stack = [child for child in reversed(index.children_of(node_id)) if child not in excluded]
    while stack:
        current = stack.pop()
        result.append(current)
        stack.extend(
            child for child in reversed(index.children_of(current)) if child not in excluded
        )
    return result


def _walk(index: TreeIndex,
          expanded_ids: AbstractSet[NodeId],
          start: NodeId,
          stop: NodeId) -> Tuple[List[NodeId], bool]:
    """Walk forward from start; report whether stop was reached."""
    visited = [start]
    current: Optional[NodeId] = start
    limit = len(index)
    while current != stop and len(visited) <= limit:
        current = get_next_accessible(index, current, expanded_ids)
        if current is None:
            return visited, False
        visited.append(current)
    return visited, current == stop


def get_accessible_range(index: TreeIndex,
                         expanded_ids: AbstractSet[NodeId],
                         from_id: NodeId,
                         to_id: NodeId) -> List[NodeId]:
    """Return the contiguous accessible ids between two nodes, inclusive.

    The result is in display order whichever argument comes first. The
    order is decided by walking forward from ``from_id``; if ``to_id`` is
    never reached the walk is repeated from ``to_id``. Ids are never
    compared with each other.

    If neither node can reach the other (one of them is hidden inside a
    collapsed branch) only ``from_id`` is returned.
    """
    forward, reached = _walk(index, expanded_ids, from_id, to_id)
    if reached:
        return forward

    backward, reached = _walk(index, expanded_ids, to_id, from_id)
    if reached:
        return backward

    return [from_id]


def iter_accessible(index: TreeIndex,
                    expanded_ids: AbstractSet[NodeId]) -> Iterator[NodeId]:
    """Yield every accessible node in display order."""
    current = index.first_id
    while current is not None:
        yield current
        current = get_next_accessible(index, current, expanded_ids)


def is_accessible(index: TreeIndex,
                  node_id: NodeId,
                  expanded_ids: AbstractSet[NodeId]) -> bool:
    """True if every ancestor of the node is expanded."""
    if index.is_root(node_id):
        return False
    return all(ancestor in expanded_ids for ancestor in index.ancestors_of(node_id))
