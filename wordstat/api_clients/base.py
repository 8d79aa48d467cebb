from __future__ import annotations

import math
from typing import Any

import httpx

from ..logging_config import logger
from ..utils.rate_limiter import RateLimiter


class WordstatClientError(Exception):
    pass


class MissingTokenError(WordstatClientError):
    def __init__(self) -> None:
        super().__init__(
            "YANDEX_WORDSTAT_TOKEN environment variable is required to call the Wordstat API"
        )


class TransportError(WordstatClientError):
    """No response was received from the remote API."""


class RemoteError(WordstatClientError):
    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"Wordstat API error ({status}): {body}")
        self.status = status
        self.body = body


class RateLimitedError(RemoteError):
    def __init__(self, body: str, retry_after: float | None = None) -> None:
        super().__init__(429, body)
        self.retry_after = retry_after
        hint = f"{retry_after:g} seconds" if retry_after is not None else "unknown"
        self.args = (f"Rate limit exceeded. Retry after {hint}. {body}".strip(),)


class QuotaExceededError(RemoteError):
    def __init__(self, body: str) -> None:
        super().__init__(503, body)
        self.args = (f"Service unavailable (quota exceeded). {body}".strip(),)


def parse_retry_after(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    return seconds if math.isfinite(seconds) and seconds >= 0 else None


class WordstatClient:
    """POSTs JSON to the Wordstat API, one rate-limiter admission per call."""

    def __init__(
        self,
        token: str | None,
        limiter: RateLimiter,
        *,
        base_url: str = "https://api.wordstat.yandex.net",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.token = token
        self.base_url = base_url.rstrip("/")
        self._limiter = limiter
        self._timeout = timeout
        self._transport = transport

    async def call(self, endpoint: str, body: dict[str, Any] | None = None) -> Any:
        if not self.token:
            raise MissingTokenError()
        await self._limiter.admit()
        response = await self._post(endpoint, body)
        if response.is_success:
            try:
                return response.json()
            except ValueError as exc:
                logger.warning("wordstat.invalid_json", endpoint=endpoint, status=response.status_code)
                raise RemoteError(response.status_code, response.text) from exc
        raise self._error_for(endpoint, response)

    async def _post(self, endpoint: str, body: dict[str, Any] | None) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self._timeout, transport=self._transport
        ) as client:
            try:
                return await client.post(endpoint, json=body, headers=self._headers())
            except httpx.TransportError as exc:
                logger.warning("wordstat.transport_error", endpoint=endpoint, error=str(exc))
                raise TransportError(f"Wordstat API unreachable ({endpoint}): {exc}") from exc

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json; charset=utf-8",
            "Authorization": f"Bearer {self.token}",
        }

    def _error_for(self, endpoint: str, response: httpx.Response) -> RemoteError:
        status = response.status_code
        body = response.text
        if status == 429:
            retry_after = parse_retry_after(response.headers.get("Retry-After"))
            logger.warning("wordstat.rate_limited", endpoint=endpoint, retry_after=retry_after)
            return RateLimitedError(body, retry_after=retry_after)
        if status == 503:
            logger.warning("wordstat.quota_exceeded", endpoint=endpoint)
            return QuotaExceededError(body)
        logger.warning("wordstat.remote_error", endpoint=endpoint, status=status)
        return RemoteError(status, body)
