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
"""Transaction ID filter: correlates log lines and responses with X-Transaction-Id."""

from __future__ import annotations

import re
import uuid
from typing import cast

import structlog
from starlette.requests import Request
from starlette.responses import Response

from socialmesh.container.ordering import HIGHEST_PRECEDENCE, order
from socialmesh.web.filters import OncePerRequestFilter
from socialmesh.web.ports.filter import CallNext

TRANSACTION_ID_HEADER = "X-Transaction-Id"

# accepted inbound ids; anything else is replaced so clients cannot forge log lines
_VALID_ID = re.compile(r"[A-Za-z0-9._:-]{1,128}")


@order(HIGHEST_PRECEDENCE + 100)
class TransactionIdFilter(OncePerRequestFilter):
    """Reuses the caller's ``X-Transaction-Id`` when well formed, otherwise mints a UUID.

    The id is stored on ``request.state.transaction_id``, bound into
    structlog's context variables for the rest of the request, and echoed
    on every response, including security rejections.
    """

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        inbound = request.headers.get(TRANSACTION_ID_HEADER, "")
        tx_id = inbound if _VALID_ID.fullmatch(inbound) else str(uuid.uuid4())
        request.state.transaction_id = tx_id

        with structlog.contextvars.bound_contextvars(transaction_id=tx_id):
            response = cast(Response, await call_next(request))
        response.headers[TRANSACTION_ID_HEADER] = tx_id
        return response
