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
"""JwtTokenValidator: reads the bearer token and populates the SecurityContext."""

from __future__ import annotations

from typing import cast

import structlog
from starlette.requests import Request
from starlette.responses import Response

from socialmesh.kernel.exceptions import InvalidTokenException
from socialmesh.security.context import SecurityContext
from socialmesh.security.jwt import JwtProvider
from socialmesh.web.filters import OncePerRequestFilter
from socialmesh.web.ports.filter import CallNext

logger = structlog.get_logger("socialmesh.security")

BEARER_PREFIX = "Bearer "


class JwtTokenValidator(OncePerRequestFilter):
    """Populates ``request.state.security_context`` from the bearer token.

    A missing header or a token that fails validation leaves the request
    anonymous; the authorization rules decide whether that is acceptable
    for the path.  The ``Bearer`` scheme is matched case-sensitively.

    Args:
        jwt_provider: Validates tokens and builds the context.
        header_name: Header carrying the token (default: ``Authorization``).
    """

    def __init__(
        self,
        jwt_provider: JwtProvider,
        header_name: str = "Authorization",
    ) -> None:
        self._jwt_provider = jwt_provider
        self._header_name = header_name

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        header = request.headers.get(self._header_name, "")
        security_context = SecurityContext.anonymous()

        if header.startswith(BEARER_PREFIX):
            token = header[len(BEARER_PREFIX):].strip()
            try:
                security_context = self._jwt_provider.to_security_context(token)
            except InvalidTokenException as exc:
                logger.debug("invalid_jwt_token", path=request.url.path, reason=exc.code)

        request.state.security_context = security_context
        return cast(Response, await call_next(request))
