from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, Query

from ..config import get_settings
from ..models.regions import RegionalDistribution
from ..models.schemas import (
    DistributionRequest,
    DistributionResponse,
    ErrorResponse,
    RegionChildrenResponse,
    RegionNodeOut,
    RegionRowOut,
    RegionsTreeResponse,
)
from ..services.wordstat_service import WordstatService
from .deps import UPSTREAM_ERROR_RESPONSES, get_service

router = APIRouter(prefix="/api/v1/regions", tags=["regions"], responses=UPSTREAM_ERROR_RESPONSES)
settings = get_settings()


@router.get("/tree", response_model=RegionsTreeResponse)
async def regions_tree(
    depth: int = Query(settings.regions_tree_default_depth, ge=1, le=5),
    service: WordstatService = Depends(get_service),
) -> RegionsTreeResponse:
    projected = await service.get_regions_projection(depth)
    return RegionsTreeResponse(
        depth=depth,
        regions=[RegionNodeOut.model_validate(node.to_dict()) for node in projected],
    )


@router.get(
    "/{region_id}/children",
    response_model=RegionChildrenResponse,
    responses={404: {"model": ErrorResponse, "description": "Region is not in the tree"}},
)
async def region_children(
    region_id: int,
    depth: int = Query(settings.region_children_default_depth, ge=1, le=3),
    service: WordstatService = Depends(get_service),
) -> RegionChildrenResponse:
    result = await service.get_region_children(region_id, depth)
    return RegionChildrenResponse(
        region_id=result.region_id,
        label=result.label,
        depth=depth,
        is_leaf=result.is_leaf,
        children=[RegionNodeOut.model_validate(node.to_dict()) for node in result.children],
    )


def _distribution_out(phrase: str, result: RegionalDistribution) -> DistributionResponse:
    return DistributionResponse(
        phrase=phrase,
        filtered=result.filtered,
        matched=result.matched,
        ranked=[RegionRowOut.model_validate(asdict(row)) for row in result.ranked],
        top_by_affinity=[RegionRowOut.model_validate(asdict(row)) for row in result.top_by_affinity],
    )


@router.post("/distribution", response_model=DistributionResponse)
async def regional_distribution(
    payload: DistributionRequest,
    service: WordstatService = Depends(get_service),
) -> DistributionResponse:
    result = await service.get_enriched_regional_distribution(
        payload.phrase,
        filter_ids=payload.regions,
        devices=payload.devices,
        limit=payload.limit,
    )
    return _distribution_out(payload.phrase, result)
