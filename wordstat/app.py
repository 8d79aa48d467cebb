from __future__ import annotations

import math

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api_clients.base import (
    MissingTokenError,
    QuotaExceededError,
    RateLimitedError,
    RemoteError,
    TransportError,
    WordstatClientError,
)
from .config import get_settings
from .logging_config import logger, setup_logging
from .routes import health, regions, search
from .services.wordstat_service import RegionNotFoundError, WordstatService

settings = get_settings()
setup_logging(settings.log_level, service=settings.app_name)


def _error(status_code: int, error_code: str, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error_code": error_code, "message": message},
        headers=headers,
    )


def _client_error_response(exc: WordstatClientError) -> JSONResponse:
    if isinstance(exc, RateLimitedError):
        headers = None
        if exc.retry_after is not None:
            headers = {"Retry-After": str(math.ceil(exc.retry_after))}
        return _error(429, "RATE_LIMITED", str(exc), headers)
    if isinstance(exc, QuotaExceededError):
        return _error(503, "QUOTA_EXCEEDED", str(exc))
    if isinstance(exc, RemoteError):
        return _error(502, "REMOTE_ERROR", str(exc))
    if isinstance(exc, TransportError):
        return _error(504, "TRANSPORT_ERROR", str(exc))
    if isinstance(exc, MissingTokenError):
        return _error(500, "MISSING_TOKEN", str(exc))
    return _error(502, "INVALID_RESPONSE", str(exc))


def create_app(service: WordstatService | None = None) -> FastAPI:
    app = FastAPI(title=settings.app_name, version="1.0.0")
    app.state.wordstat_service = service or WordstatService.from_settings(settings)

    @app.exception_handler(WordstatClientError)
    async def wordstat_error_handler(request: Request, exc: WordstatClientError) -> JSONResponse:
        logger.warning("wordstat.error", path=str(request.url), error_type=type(exc).__name__, reason=str(exc))
        return _client_error_response(exc)

    @app.exception_handler(RegionNotFoundError)
    async def region_not_found_handler(request: Request, exc: RegionNotFoundError) -> JSONResponse:
        return _error(404, "REGION_NOT_FOUND", str(exc))

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:  # pragma: no cover - wiring
        logger.warning("value.error", path=str(request.url), reason=str(exc))
        return _error(400, "VALUE_ERROR", str(exc))

    app.include_router(health.router)
    app.include_router(regions.router)
    app.include_router(search.router)
    logger.info("app.start", rate_limit_per_second=settings.rate_limit_per_second)
    return app


app = create_app()
