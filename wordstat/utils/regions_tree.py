"""Pure operations on a region forest.

Every function takes the forest it works on and never mutates it. Traversals
use an explicit stack so tree depth is not bound by the recursion limit.
"""
from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from ..models.regions import FlatIndexEntry, RegionNode


def iter_nodes(forest: Sequence[RegionNode]) -> Iterator[Tuple[RegionNode, Optional[int]]]:
    """Yield ``(node, parent_id)`` in depth-first pre-order, siblings left to right."""
    stack: List[Tuple[RegionNode, Optional[int]]] = [(node, None) for node in reversed(forest)]
    while stack:
        node, parent_id = stack.pop()
        yield node, parent_id
        if node.children:
            stack.extend((child, node.id) for child in reversed(node.children))


def flatten_tree(forest: Sequence[RegionNode]) -> Dict[int, FlatIndexEntry]:
    return {node.id: FlatIndexEntry(label=node.label, parent_id=parent_id) for node, parent_id in iter_nodes(forest)}


def project_to_depth(forest: Sequence[RegionNode], max_depth: int) -> List[RegionNode]:
    """Copy ``forest`` keeping ``max_depth`` levels, roots being level 1.

    Nodes on the last kept level get ``children=None``; leaves above it keep
    an empty list.
    """
    if max_depth < 1:
        return []
    projected: List[RegionNode] = []
    stack: List[Tuple[RegionNode, int, List[RegionNode]]] = [(node, 1, projected) for node in reversed(forest)]
    while stack:
        node, depth, siblings = stack.pop()
        if depth >= max_depth:
            siblings.append(RegionNode(id=node.id, label=node.label, children=None))
            continue
        copy = RegionNode(id=node.id, label=node.label, children=[])
        siblings.append(copy)
        for child in reversed(node.children or []):
            stack.append((child, depth + 1, copy.children))
    return projected


def find_node(forest: Sequence[RegionNode], region_id: int) -> Optional[RegionNode]:
    for node, _ in iter_nodes(forest):
        if node.id == region_id:
            return node
    return None


def descendant_ids(forest: Sequence[RegionNode], region_id: int) -> Set[int]:
    """Return ``region_id`` plus every id below it.

    An id missing from the forest yields just ``{region_id}``.
    """
    node = find_node(forest, region_id)
    if node is None:
        return {region_id}
    return {region_id} | {child.id for child, _ in iter_nodes(node.children or [])}


def expand_filter(forest: Sequence[RegionNode], region_ids: Iterable[int]) -> Set[int]:
    allowed: Set[int] = set()
    for region_id in region_ids:
        allowed |= descendant_ids(forest, region_id)
    return allowed
