from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence

from ..models.regions import FlatIndexEntry, RegionalDistribution, RegionNode, RegionRow
from ..utils.regions_tree import expand_filter

TOP_BY_AFFINITY = 5


def region_label(flat_index: Dict[int, FlatIndexEntry], region_id: int) -> str:
    entry = flat_index.get(region_id)
    if entry is None or not entry.label:
        return f"Unknown ({region_id})"
    return entry.label


def enrich(
    rows: Sequence[RegionRow],
    forest: Sequence[RegionNode],
    flat_index: Dict[int, FlatIndexEntry],
    filter_ids: Optional[Iterable[int]] = None,
    limit: int = 20,
) -> RegionalDistribution:
    """Filter rows to the requested subtrees, name them, and rank them.

    ``ranked`` is ordered by count and cut to ``limit``; ``top_by_affinity``
    is ordered by affinity index over the whole filtered set and cut to
    ``TOP_BY_AFFINITY``. Both sorts are stable, so ties keep response order.
    Rows whose id is missing from the tree are kept under a placeholder name.
    """
    if limit < 1:
        raise ValueError("limit must be at least 1")

    filter_list = list(filter_ids or [])
    selected: List[RegionRow] = list(rows)
    if filter_list:
        allowed = expand_filter(forest, filter_list)
        selected = [row for row in selected if row.region_id in allowed]

    named = [replace(row, region_name=region_label(flat_index, row.region_id)) for row in selected]
    ranked = sorted(named, key=lambda row: row.count, reverse=True)[:limit]
    top_by_affinity = sorted(named, key=lambda row: row.affinity_index, reverse=True)[:TOP_BY_AFFINITY]
    return RegionalDistribution(
        ranked=ranked,
        top_by_affinity=top_by_affinity,
        matched=len(named),
        filtered=bool(filter_list),
    )
