from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class RegionNode:
    """One entry of the region taxonomy.

    ``children`` is an empty list for a leaf of the full tree and ``None`` for a
    node whose subtree was cut off by a depth projection.
    """

    id: int
    label: str
    children: Optional[List["RegionNode"]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FlatIndexEntry:
    label: str
    parent_id: Optional[int]


@dataclass(frozen=True)
class RegionRow:
    region_id: int
    count: int
    share: float
    affinity_index: float
    region_name: Optional[str] = None


@dataclass
class RegionalDistribution:
    ranked: List[RegionRow]
    top_by_affinity: List[RegionRow]
    matched: int
    filtered: bool


@dataclass
class RegionChildren:
    region_id: int
    label: str
    children: List[RegionNode]

    @property
    def is_leaf(self) -> bool:
        return not self.children


@dataclass
class DynamicsPoint:
    date: str
    count: int
    share: Optional[float] = None


@dataclass
class DynamicsResult:
    phrase: str
    period: str
    from_date: str
    to_date: str
    points: List[DynamicsPoint]
    trend_percent: Optional[float]
