from __future__ import annotations

from fastapi import APIRouter, Depends

from ..models.schemas import (
    DynamicsPointOut,
    DynamicsRequest,
    DynamicsResponse,
    PhraseCount,
    TopRequestsRequest,
    TopRequestsResponse,
)
from ..services.wordstat_service import WordstatService
from .deps import UPSTREAM_ERROR_RESPONSES, get_service

router = APIRouter(prefix="/api/v1", tags=["search"], responses=UPSTREAM_ERROR_RESPONSES)


@router.post("/top-requests", response_model=TopRequestsResponse)
async def top_requests(
    payload: TopRequestsRequest,
    service: WordstatService = Depends(get_service),
) -> TopRequestsResponse:
    data = await service.top_requests(payload.phrase, regions=payload.regions, devices=payload.devices)
    return TopRequestsResponse(
        phrase=payload.phrase,
        top_requests=[PhraseCount(**item) for item in data["top_requests"]],
        associations=[PhraseCount(**item) for item in data["associations"]],
    )


@router.post("/dynamics", response_model=DynamicsResponse)
async def dynamics(
    payload: DynamicsRequest,
    service: WordstatService = Depends(get_service),
) -> DynamicsResponse:
    result = await service.dynamics(
        payload.phrase,
        period=payload.period,
        from_date=payload.from_date,
        to_date=payload.to_date,
        regions=payload.regions,
        devices=payload.devices,
    )
    return DynamicsResponse(
        phrase=result.phrase,
        period=result.period,
        from_date=result.from_date,
        to_date=result.to_date,
        trend_percent=result.trend_percent,
        dynamics=[DynamicsPointOut(date=point.date, count=point.count, share=point.share) for point in result.points],
    )
