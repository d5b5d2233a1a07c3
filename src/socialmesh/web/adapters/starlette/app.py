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
"""SocialMesh web application factory built on Starlette."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.middleware import Middleware
from starlette.routing import BaseRoute

from socialmesh.container.ordering import sorted_by_order
from socialmesh.kernel.exceptions import SocialMeshException
from socialmesh.web.adapters.starlette.cors import CorsMiddleware
from socialmesh.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from socialmesh.web.adapters.starlette.filters import RequestLoggingFilter, TransactionIdFilter
from socialmesh.web.cors import CompositeCorsConfigurationSource, CorsConfigurationSource
from socialmesh.web.errors import global_exception_handler, http_exception_handler
from socialmesh.web.ports.filter import WebFilter

if TYPE_CHECKING:
    from socialmesh.security.http_security import SecurityFilterChain


def create_app(
    title: str = "SocialMesh",
    debug: bool = False,
    security: SecurityFilterChain | None = None,
    cors: CorsConfigurationSource | None = None,
    routes: Sequence[BaseRoute] = (),
    filters: Sequence[WebFilter] = (),
    lifespan: Any = None,
) -> Starlette:
    """Create a Starlette application wrapped in the SocialMesh request pipeline.

    Request flow, outermost first:

    - CORS: the security chain's CORS source, then the MVC-level ``cors``
      mappings (first configuration found wins)
    - WebFilter chain: transaction id, request logging and any extra
      ``filters`` sorted by ``@order``, followed by the security chain's
      filters in the order :meth:`HttpSecurity.build` assembled them
    - Route handlers, with structured JSON error responses
    """
    chain: list[WebFilter] = sorted_by_order([TransactionIdFilter(), RequestLoggingFilter(), *filters])
    if security is not None:
        chain.extend(security.filters)

    cors_sources = [s for s in (security.cors_source if security else None, cors) if s is not None]

    middleware: list[Middleware] = []
    if cors_sources:
        middleware.append(Middleware(CorsMiddleware, source=CompositeCorsConfigurationSource(*cors_sources)))
    middleware.append(Middleware(WebFilterChainMiddleware, filters=chain))

    app = Starlette(
        debug=debug,
        middleware=middleware,
        routes=list(routes),
        lifespan=lifespan,
    )

    app.state.title = title
    app.state.security_chain = security

    app.add_exception_handler(SocialMeshException, global_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    return app
