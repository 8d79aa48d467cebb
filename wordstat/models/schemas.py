from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Device = Literal["desktop", "phone", "tablet"]
Period = Literal["daily", "weekly", "monthly"]


class BaseSchema(BaseModel):
    """Base schema with attribute extraction enabled."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class SystemHealth(BaseSchema):
    status: str
    components: Dict[str, str] = Field(default_factory=dict)


class RegionNodeOut(BaseSchema):
    id: int
    label: str
    children: Optional[List["RegionNodeOut"]] = None


class RegionsTreeResponse(BaseSchema):
    depth: int
    regions: List[RegionNodeOut]


class RegionChildrenResponse(BaseSchema):
    region_id: int
    label: str
    depth: int
    is_leaf: bool
    children: List[RegionNodeOut] = Field(default_factory=list)


class RegionRowOut(BaseSchema):
    region_id: int = Field(serialization_alias="regionId")
    region_name: str = Field(serialization_alias="regionName")
    count: int
    share: float
    affinity_index: float = Field(serialization_alias="affinityIndex")


class DistributionRequest(BaseSchema):
    phrase: str = Field(min_length=1)
    regions: Optional[List[int]] = None
    devices: Optional[List[Device]] = None
    limit: int = Field(default=20, ge=1, le=50)


class DistributionResponse(BaseSchema):
    phrase: str
    filtered: bool
    matched: int
    ranked: List[RegionRowOut]
    top_by_affinity: List[RegionRowOut] = Field(serialization_alias="topByAffinity")


class TopRequestsRequest(BaseSchema):
    phrase: str = Field(min_length=1)
    regions: Optional[List[int]] = None
    devices: Optional[List[Device]] = None


class PhraseCount(BaseSchema):
    phrase: str
    count: int


class TopRequestsResponse(BaseSchema):
    phrase: str
    top_requests: List[PhraseCount] = Field(serialization_alias="topRequests")
    associations: List[PhraseCount] = Field(default_factory=list)


class DynamicsRequest(BaseSchema):
    phrase: str = Field(min_length=1)
    period: Period = "monthly"
    from_date: Optional[str] = Field(default=None, alias="fromDate", pattern=r"^\d{4}-\d{2}-\d{2}$")
    to_date: Optional[str] = Field(default=None, alias="toDate", pattern=r"^\d{4}-\d{2}-\d{2}$")
    regions: Optional[List[int]] = None
    devices: Optional[List[Device]] = None


class DynamicsPointOut(BaseSchema):
    date: str
    count: int
    share: Optional[float] = None


class DynamicsResponse(BaseSchema):
    phrase: str
    period: Period
    from_date: str = Field(serialization_alias="fromDate")
    to_date: str = Field(serialization_alias="toDate")
    trend_percent: Optional[float] = Field(default=None, serialization_alias="trendPercent")
    dynamics: List[DynamicsPointOut]


class ErrorResponse(BaseSchema):
    error_code: str
    message: str
