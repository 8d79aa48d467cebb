from __future__ import annotations

from fastapi import APIRouter, Depends

from ..models.schemas import SystemHealth
from ..services.wordstat_service import WordstatService
from .deps import get_service

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/health", response_model=SystemHealth)
async def health(service: WordstatService = Depends(get_service)) -> SystemHealth:
    components = {
        "token": "configured" if service.client.token else "missing",
        "regions_tree": "cached" if service.tree_cache.fetched else "not_fetched",
    }
    return SystemHealth(status="ok", components=components)
