from __future__ import annotations

from typing import Any, List

from ..models.regions import DynamicsPoint, RegionNode, RegionRow
from .base import WordstatClientError


class PayloadError(WordstatClientError):
    """Raised when a Wordstat response does not have the expected shape."""


def _region_id(value: Any) -> int:
    # Tree ids arrive as numeric strings ("225"), data rows as ints.
    if isinstance(value, bool):
        raise PayloadError(f"Invalid region id: {value!r}")
    try:
        return int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise PayloadError(f"Invalid region id: {value!r}") from exc


def transform_regions_tree(data: Any) -> List[RegionNode]:
    if not isinstance(data, list):
        raise PayloadError("Regions tree must be a list of nodes")
    roots: List[RegionNode] = []
    stack: List[tuple[dict[str, Any], List[RegionNode]]] = [(raw, roots) for raw in reversed(data)]
    while stack:
        raw, siblings = stack.pop()
        if not isinstance(raw, dict):
            raise PayloadError("Regions tree node must be an object")
        node = RegionNode(id=_region_id(raw.get("value")), label=str(raw.get("label", "")), children=[])
        siblings.append(node)
        for child in reversed(raw.get("children") or []):
            stack.append((child, node.children))
    return roots


def transform_region_rows(data: Any) -> List[RegionRow]:
    block = data.get("regions", []) if isinstance(data, dict) else data
    if not isinstance(block, list):
        raise PayloadError("Regions distribution must be a list")
    rows: List[RegionRow] = []
    for entry in block:
        if not isinstance(entry, dict):
            raise PayloadError("Regions distribution row must be an object")
        try:
            count = int(entry.get("count", 0))
            share = float(entry.get("share", 0.0))
            affinity = float(entry.get("affinityIndex", 0.0))
        except (TypeError, ValueError) as exc:
            raise PayloadError(f"Invalid regions distribution row: {entry!r}") from exc
        rows.append(
            RegionRow(
                region_id=_region_id(entry.get("regionId")),
                count=count,
                share=share,
                affinity_index=affinity,
            )
        )
    return rows


def _entries(data: Any, key: str) -> List[dict[str, Any]]:
    if not isinstance(data, dict):
        raise PayloadError(f"Expected an object holding {key!r}")
    block = data.get(key) or []
    if not isinstance(block, list):
        raise PayloadError(f"{key!r} must be a list")
    for entry in block:
        if not isinstance(entry, dict):
            raise PayloadError(f"{key!r} entry must be an object")
    return block


def transform_dynamics(data: Any) -> List[DynamicsPoint]:
    points: List[DynamicsPoint] = []
    for entry in _entries(data, "dynamics"):
        share = entry.get("share")
        try:
            points.append(
                DynamicsPoint(
                    date=str(entry.get("date", "")),
                    count=int(entry.get("count", 0)),
                    share=float(share) if share is not None else None,
                )
            )
        except (TypeError, ValueError) as exc:
            raise PayloadError(f"Invalid dynamics point: {entry!r}") from exc
    return points


def _phrase_counts(data: Any, key: str) -> List[dict[str, Any]]:
    counts = []
    for item in _entries(data, key):
        try:
            counts.append({"phrase": str(item.get("phrase", "")), "count": int(item.get("count", 0))})
        except (TypeError, ValueError) as exc:
            raise PayloadError(f"Invalid {key} entry: {item!r}") from exc
    return counts


def transform_top_requests(data: Any) -> dict[str, Any]:
    return {
        "top_requests": _phrase_counts(data, "topRequests"),
        "associations": _phrase_counts(data, "associations"),
    }
