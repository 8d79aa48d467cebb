from __future__ import annotations

import asyncio
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Sequence

import httpx

from ..api_clients.base import WordstatClient
from ..api_clients.transformers import transform_dynamics, transform_region_rows, transform_top_requests
from ..cache import RegionsTreeCache
from ..config import Settings
from ..logging_config import logger
from ..models.regions import DynamicsResult, RegionalDistribution, RegionChildren, RegionNode
from ..utils.dates import PERIODS, resolve_period_bounds, trend_percent
from ..utils.rate_limiter import RateLimiter
from ..utils.regions_tree import find_node, project_to_depth
from .enrichment import enrich

DEVICES = ("desktop", "phone", "tablet")

# Quota units charged by Wordstat per call; the regions tree is free.
QUOTA_COST = {
    "/v1/getRegionsTree": 0,
    "/v1/topRequests": 1,
    "/v1/dynamics": 2,
    "/v1/regions": 2,
}


class RegionNotFoundError(LookupError):
    def __init__(self, region_id: int) -> None:
        super().__init__(f"Region {region_id} not found")
        self.region_id = region_id


def _request_body(phrase: str, **filters: Any) -> Dict[str, Any]:
    if not phrase or not phrase.strip():
        raise ValueError("phrase must not be empty")
    body: Dict[str, Any] = {"phrase": phrase}
    for key, value in filters.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            if not value:
                continue
            value = list(value)
        body[key] = value
    return body


def _check_devices(devices: Optional[Sequence[str]]) -> None:
    unknown = [device for device in devices or [] if device not in DEVICES]
    if unknown:
        raise ValueError(f"Unsupported device types: {', '.join(unknown)}")


class WordstatService:
    """Operations over the Wordstat API for one process.

    Owns the rate limiter, the HTTP client and the regions tree cache; build
    one per session and share it with every caller.
    """

    def __init__(
        self,
        client: WordstatClient,
        tree_cache: RegionsTreeCache | None = None,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.client = client
        self.tree_cache = tree_cache or RegionsTreeCache(client)
        self._today = today

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "WordstatService":
        limiter = RateLimiter(max_calls=settings.rate_limit_per_second, per_seconds=1.0)
        client = WordstatClient(
            settings.yandex_wordstat_token,
            limiter,
            base_url=settings.wordstat_base_url,
            timeout=settings.request_timeout_seconds,
            transport=transport,
        )
        return cls(client)

    async def _call(self, endpoint: str, body: Dict[str, Any]) -> Any:
        logger.info("wordstat.request", endpoint=endpoint, quota_units=QUOTA_COST.get(endpoint))
        return await self.client.call(endpoint, body)

    async def get_regions_projection(self, depth: int = 3) -> List[RegionNode]:
        tree = await self.tree_cache.get_tree()
        return project_to_depth(tree, depth)

    async def get_region_children(self, region_id: int, depth: int = 2) -> RegionChildren:
        tree = await self.tree_cache.get_tree()
        node = find_node(tree, region_id)
        if node is None:
            logger.info("regions_tree.not_found", region_id=region_id)
            raise RegionNotFoundError(region_id)
        return RegionChildren(
            region_id=node.id,
            label=node.label,
            children=project_to_depth(node.children or [], depth),
        )

    async def get_enriched_regional_distribution(
        self,
        phrase: str,
        filter_ids: Optional[Sequence[int]] = None,
        devices: Optional[Sequence[str]] = None,
        limit: int = 20,
    ) -> RegionalDistribution:
        _check_devices(devices)
        # Wordstat ignores a regions filter on this endpoint, so filtering happens after the fetch.
        body = _request_body(phrase, devices=devices)
        payload, tree = await asyncio.gather(
            self._call("/v1/regions", body),
            self.tree_cache.get_tree(),
            return_exceptions=True,
        )
        # Both fetches are awaited to completion; the distribution error wins over the tree error.
        for outcome in (payload, tree):
            if isinstance(outcome, BaseException):
                raise outcome
        flat_index = await self.tree_cache.get_flat_index()
        result = enrich(transform_region_rows(payload), tree, flat_index, filter_ids=filter_ids, limit=limit)
        logger.info(
            "regions.enriched",
            phrase=phrase,
            matched=result.matched,
            returned=len(result.ranked),
            filtered=result.filtered,
        )
        return result

    async def top_requests(
        self,
        phrase: str,
        regions: Optional[Sequence[int]] = None,
        devices: Optional[Sequence[str]] = None,
    ) -> Dict[str, Any]:
        _check_devices(devices)
        body = _request_body(phrase, regions=regions, devices=devices)
        payload = await self._call("/v1/topRequests", body)
        return transform_top_requests(payload)

    async def dynamics(
        self,
        phrase: str,
        period: str = "monthly",
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        regions: Optional[Sequence[int]] = None,
        devices: Optional[Sequence[str]] = None,
    ) -> DynamicsResult:
        if period not in PERIODS:
            raise ValueError(f"Unsupported period: {period}")
        _check_devices(devices)
        start, end = resolve_period_bounds(period, from_date, to_date, self._today())
        body = _request_body(
            phrase,
            period=period,
            fromDate=start,
            toDate=end,
            regions=regions,
            devices=devices,
        )
        points = transform_dynamics(await self._call("/v1/dynamics", body))
        trend = trend_percent(points[0].count, points[-1].count) if len(points) >= 2 else None
        return DynamicsResult(
            phrase=phrase,
            period=period,
            from_date=start,
            to_date=end,
            points=points,
            trend_percent=trend,
        )
