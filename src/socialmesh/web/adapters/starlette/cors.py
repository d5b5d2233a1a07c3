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
"""CorsMiddleware: applies the CORS configuration resolved for each request path."""

from __future__ import annotations

from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send

from socialmesh.web.cors import CORSConfig, CorsConfigurationSource


class CorsMiddleware:
    """Pure ASGI middleware that resolves a :class:`CORSConfig` per request.

    The configuration comes from a :class:`CorsConfigurationSource`; header
    handling (preflight answers, origin echoing, ``Vary``) is delegated to
    Starlette's ``CORSMiddleware``, one instance per distinct configuration.
    Requests whose path has no configuration pass through untouched.

    Installed outside the security filter chain so preflight requests are
    answered before authorization and error responses still carry the
    CORS headers a browser needs to read them.
    """

    def __init__(self, app: ASGIApp, source: CorsConfigurationSource) -> None:
        self.app = app
        self._source = source
        self._delegates: dict[CORSConfig, CORSMiddleware] = {}

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        config = self._source.get_cors_configuration(scope["path"])
        if config is None:
            await self.app(scope, receive, send)
            return

        await self._delegate_for(config)(scope, receive, send)

    def _delegate_for(self, config: CORSConfig) -> CORSMiddleware:
        delegate = self._delegates.get(config)
        if delegate is None:
            delegate = CORSMiddleware(
                self.app,
                allow_origins=list(config.allowed_origins),
                allow_methods=list(config.allowed_methods),
                allow_headers=list(config.allowed_headers),
                allow_credentials=config.allow_credentials,
                expose_headers=list(config.exposed_headers),
                max_age=config.max_age,
            )
            self._delegates[config] = delegate
        return delegate
