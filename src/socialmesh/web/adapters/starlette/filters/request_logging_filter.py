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
"""Request logging filter: one structured event per request."""

from __future__ import annotations

import time
from typing import Any, cast

import structlog
from starlette.requests import Request
from starlette.responses import Response

from socialmesh.container.ordering import HIGHEST_PRECEDENCE, order
from socialmesh.web.filters import OncePerRequestFilter
from socialmesh.web.ports.filter import CallNext

logger = structlog.get_logger("socialmesh.web")


@order(HIGHEST_PRECEDENCE + 200)
class RequestLoggingFilter(OncePerRequestFilter):
    """Logs ``http_request`` with method, path, origin, principal, status and duration.

    The principal is read once the rest of the chain has run, so it reflects
    what the JWT validator established; requests answered before it (or
    anonymously) log ``principal=None``.  Server errors log at warning level,
    and an exception raised by a later filter logs ``http_request_failed``.
    """

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        started = time.perf_counter()
        try:
            response = cast(Response, await call_next(request))
        except Exception as exc:
            logger.error("http_request_failed", error_type=type(exc).__name__, **_fields(request, started))
            raise

        log = logger.warning if response.status_code >= 500 else logger.info
        log("http_request", status_code=response.status_code, **_fields(request, started))
        return response


def _fields(request: Request, started: float) -> dict[str, Any]:
    context = getattr(request.state, "security_context", None)
    return {
        "method": request.method,
        "path": request.url.path,
        "origin": request.headers.get("origin"),
        "principal": context.principal if context is not None else None,
        "duration_ms": round((time.perf_counter() - started) * 1000, 2),
    }
