from __future__ import annotations

from typing import Any, Dict, Union

from fastapi import Request

from ..models.schemas import ErrorResponse
from ..services.wordstat_service import WordstatService

# Error bodies produced by the app-level exception handlers for Wordstat calls.
UPSTREAM_ERROR_RESPONSES: Dict[Union[int, str], Dict[str, Any]] = {
    429: {"model": ErrorResponse, "description": "Wordstat rate limit hit"},
    500: {"model": ErrorResponse, "description": "Wordstat token is not configured"},
    502: {"model": ErrorResponse, "description": "Wordstat returned an error or a malformed payload"},
    503: {"model": ErrorResponse, "description": "Wordstat quota exhausted"},
    504: {"model": ErrorResponse, "description": "Wordstat unreachable"},
}


def get_service(request: Request) -> WordstatService:
    return request.app.state.wordstat_service
