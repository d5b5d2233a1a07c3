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
"""WebFilterChainMiddleware: runs the WebFilter chain around the Starlette router."""

from __future__ import annotations

from collections.abc import Sequence
from typing import cast

from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from socialmesh.web.errors import global_exception_handler
from socialmesh.web.ports.filter import CallNext, WebFilter


class WebFilterChainMiddleware:
    """Pure ASGI middleware executing :class:`WebFilter` instances in sequence.

    The chain is composed once, at construction.  Per request, each filter
    is skipped when its ``should_not_filter()`` says so; otherwise it gets
    the request and a ``call_next`` for the remainder of the chain.  A
    filter that answers without calling ``call_next`` stops the request
    there, which is how the security filters reject it.

    The routed app's response is buffered so filters can inspect it and
    add headers before it is sent.  An exception escaping the app becomes
    the 500 error envelope here, so it still passes back through the
    filters and the CORS layer.
    """

    def __init__(self, app: ASGIApp, filters: Sequence[WebFilter] = ()) -> None:
        self.app = app
        self._filters = tuple(filters)
        chain: CallNext = self._call_app
        for web_filter in reversed(self._filters):
            chain = _link(web_filter, chain)
        self._chain = chain

    @property
    def filters(self) -> tuple[WebFilter, ...]:
        return self._filters

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response = cast(Response, await self._chain(Request(scope, receive, send)))
        await response(scope, receive, send)

    async def _call_app(self, request: Request) -> Response:
        recorder = _ResponseRecorder()
        try:
            await self.app(request.scope, request.receive, recorder)
        except Exception as exc:
            return await global_exception_handler(request, exc)
        return recorder.to_response()


class _ResponseRecorder:
    """ASGI ``send`` callable that buffers one HTTP response."""

    def __init__(self) -> None:
        self.status = 200
        self.headers: list[tuple[bytes, bytes]] = []
        self.body = bytearray()

    async def __call__(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            self.status = message["status"]
            self.headers = list(message.get("headers", []))
        elif message["type"] == "http.response.body":
            self.body += message.get("body", b"")

    def to_response(self) -> Response:
        response = Response(content=bytes(self.body), status_code=self.status)
        response.raw_headers[:] = self.headers
        return response


def _link(web_filter: WebFilter, next_call: CallNext) -> CallNext:
    async def call(request: Request) -> Response:
        if web_filter.should_not_filter(request):
            return cast(Response, await next_call(request))
        return cast(Response, await web_filter.do_filter(request, next_call))

    return call
