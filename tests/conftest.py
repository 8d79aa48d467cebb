from __future__ import annotations

import asyncio
import json
from datetime import date
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from wordstat.api_clients.base import WordstatClient
from wordstat.api_clients.transformers import transform_regions_tree, transform_region_rows
from wordstat.app import create_app
from wordstat.models.regions import RegionNode, RegionRow
from wordstat.services.wordstat_service import WordstatService
from wordstat.utils.rate_limiter import RateLimiter

REGIONS_TREE = [
    {
        "value": "225",
        "label": "Russia",
        "children": [
            {
                "value": "3",
                "label": "Central Federal District",
                "children": [
                    {
                        "value": "1",
                        "label": "Moscow and Moscow Oblast",
                        "children": [{"value": "213", "label": "Moscow"}],
                    },
                    {"value": "10174", "label": "Tula Oblast", "children": []},
                ],
            },
            {
                "value": "17",
                "label": "Northwestern Federal District",
                "children": [{"value": "2", "label": "Saint Petersburg"}],
            },
        ],
    },
    {"value": "149", "label": "Belarus"},
]

REGIONS_DISTRIBUTION = {
    "regions": [
        {"regionId": 213, "count": 5000, "share": 40.0, "affinityIndex": 120.0},
        {"regionId": 2, "count": 2500, "share": 20.0, "affinityIndex": 150.0},
        {"regionId": 10174, "count": 300, "share": 2.4, "affinityIndex": 80.0},
        {"regionId": 149, "count": 700, "share": 5.6, "affinityIndex": 95.0},
        {"regionId": 999, "count": 50, "share": 0.4, "affinityIndex": 300.0},
    ]
}


class FakeClock:
    """Monotonic clock whose sleep advances time instead of waiting."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay
        await asyncio.sleep(0)


class FakeWordstatAPI:
    """Stand-in for api.wordstat.yandex.net served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.requests: list[tuple[str, Any]] = []
        self.unreachable = False
        self.responses: dict[str, httpx.Response] = {
            "/v1/getRegionsTree": httpx.Response(200, json=REGIONS_TREE),
            "/v1/regions": httpx.Response(200, json=REGIONS_DISTRIBUTION),
            "/v1/topRequests": httpx.Response(
                200,
                json={
                    "topRequests": [{"phrase": "buy phone", "count": 1200}],
                    "associations": [{"phrase": "phone case", "count": 300}],
                },
            ),
            "/v1/dynamics": httpx.Response(
                200,
                json={
                    "dynamics": [
                        {"date": "2026-07-01", "count": 100, "share": 0.01},
                        {"date": "2026-08-01", "count": 120, "share": 0.012},
                        {"date": "2026-09-01", "count": 150, "share": 0.015},
                    ]
                },
            ),
        }

    def calls_to(self, endpoint: str) -> list[Any]:
        return [body for path, body in self.requests if path == endpoint]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        if self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.url.path, body))
        await asyncio.sleep(0)
        response = self.responses.get(request.url.path)
        if response is None:
            return httpx.Response(404, text="unknown endpoint")
        return httpx.Response(response.status_code, content=response.content, headers=response.headers)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture()
def forest() -> list[RegionNode]:
    return transform_regions_tree(REGIONS_TREE)


@pytest.fixture()
def distribution_rows() -> list[RegionRow]:
    return transform_region_rows(REGIONS_DISTRIBUTION)


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def fake_api() -> FakeWordstatAPI:
    return FakeWordstatAPI()


@pytest.fixture()
def wordstat_client(fake_api: FakeWordstatAPI, fake_clock: FakeClock) -> WordstatClient:
    limiter = RateLimiter(max_calls=10, per_seconds=1.0, clock=fake_clock, sleep=fake_clock.sleep)
    return WordstatClient("test-token", limiter, transport=fake_api.transport())


@pytest.fixture()
def service(wordstat_client: WordstatClient) -> WordstatService:
    return WordstatService(wordstat_client, today=lambda: date(2026, 10, 18))


@pytest.fixture()
def client(service: WordstatService) -> TestClient:
    return TestClient(create_app(service))
