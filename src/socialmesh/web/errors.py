# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Exception handlers rendering errors as ``{"error": {...}}`` JSON bodies."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

import structlog
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

from socialmesh.kernel.exceptions import (
    BusinessException,
    ConfigurationException,
    ConflictException,
    ForbiddenException,
    ResourceNotFoundException,
    SecurityException,
    SocialMeshException,
    UnauthorizedException,
    ValidationException,
)

logger = structlog.get_logger("socialmesh.web")

# most specific first; the first isinstance match decides
STATUS_BY_EXCEPTION: tuple[tuple[type[SocialMeshException], int], ...] = (
    (ValidationException, 422),
    (ResourceNotFoundException, 404),
    (ConflictException, 409),
    (BusinessException, 400),
    (UnauthorizedException, 401),
    (ForbiddenException, 403),
    (SecurityException, 401),
    (ConfigurationException, 500),
)


def status_for(exc: SocialMeshException) -> int:
    return next((status for exc_type, status in STATUS_BY_EXCEPTION if isinstance(exc, exc_type)), 500)


def error_response(
    request: Request,
    status: int,
    message: str,
    code: str,
    context: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the error envelope.

    ``transaction_id`` matches the ``X-Transaction-Id`` response header when
    the request went through the filter chain.
    """
    error: dict[str, Any] = {
        "message": message,
        "code": code,
        "status": status,
        "path": request.url.path,
        "transaction_id": getattr(request.state, "transaction_id", None) or str(uuid.uuid4()),
        "timestamp": datetime.now(UTC).isoformat(),
    }
    if context:
        error["context"] = context
    if status == 401:
        headers = {"WWW-Authenticate": "Bearer", **(headers or {})}
    return JSONResponse({"error": error}, status_code=status, headers=headers)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map SocialMesh exceptions to their status; anything else is a logged 500."""
    if isinstance(exc, SocialMeshException):
        return error_response(
            request, status_for(exc), str(exc), exc.code or type(exc).__name__, context=exc.context
        )

    logger.exception("unhandled_exception", method=request.method, path=request.url.path, error_type=type(exc).__name__)
    return error_response(request, 500, "Internal server error", "INTERNAL_ERROR")


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Starlette's own errors (unknown route, wrong method) in the same envelope."""
    assert isinstance(exc, HTTPException)
    return error_response(
        request, exc.status_code, str(exc.detail), f"HTTP_{exc.status_code}", headers=exc.headers
    )
