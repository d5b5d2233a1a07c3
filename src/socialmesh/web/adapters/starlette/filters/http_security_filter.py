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
"""HttpSecurityFilter: applies the ordered URL authorization rules to each request.

Sits last in the security chain, after :class:`JwtTokenValidator` has set
``request.state.security_context``.  The first rule matching the method
and path decides; a request no rule matches is let through.  Rejections
are ``application/problem+json`` bodies (RFC 7807).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import cast

import structlog
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from socialmesh.security.context import SecurityContext
from socialmesh.security.http_security import AccessRuleType, SecurityRule
from socialmesh.web.filters import OncePerRequestFilter
from socialmesh.web.ports.filter import CallNext

logger = structlog.get_logger("socialmesh.security")

PROBLEM_JSON = "application/problem+json"


def problem(status: int, title: str, detail: str, instance: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        {"type": "about:blank", "title": title, "status": status, "detail": detail, "instance": instance},
        status_code=status,
        media_type=PROBLEM_JSON,
        headers=headers,
    )


class HttpSecurityFilter(OncePerRequestFilter):
    """Enforces :class:`SecurityRule` instances in declaration order.

    Built by :meth:`HttpSecurity.build`; the rules are fixed for the life of
    the application.
    """

    def __init__(self, rules: Sequence[SecurityRule]) -> None:
        self._rules = tuple(rules)

    @property
    def rules(self) -> list[SecurityRule]:
        return list(self._rules)

    def rule_for(self, method: str, path: str) -> SecurityRule | None:
        """The first rule matching *method* and *path*, if any."""
        return next((rule for rule in self._rules if rule.matches(method, path)), None)

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        method, path = request.method, request.url.path
        rule = self.rule_for(method, path)
        if rule is not None:
            context: SecurityContext = getattr(request.state, "security_context", SecurityContext.anonymous())
            rejection = self._check(rule, context, method, path)
            if rejection is not None:
                return rejection
        return cast(Response, await call_next(request))

    @staticmethod
    def _check(rule: SecurityRule, context: SecurityContext, method: str, path: str) -> Response | None:
        access = rule.rule
        if access.rule_type is AccessRuleType.PERMIT_ALL:
            return None

        if access.rule_type is AccessRuleType.DENY_ALL:
            logger.info("access_denied", method=method, path=path, rule=rule.describe())
            return problem(403, "Forbidden", "Access to this resource is denied.", path)

        if not context.is_authenticated:
            logger.info("unauthenticated_request", method=method, path=path, rule=rule.describe())
            return problem(
                401,
                "Unauthorized",
                "A valid bearer token is required to access this resource.",
                path,
                headers={"WWW-Authenticate": "Bearer"},
            )

        if access.rule_type is AccessRuleType.HAS_AUTHORITY:
            required = [cast(str, access.value)]
            granted = context.has_authority(required[0])
        elif access.rule_type is AccessRuleType.HAS_ANY_AUTHORITY:
            required = list(cast(tuple[str, ...], access.value))
            granted = context.has_any_authority(required)
        else:
            return None

        if granted:
            return None
        logger.info("access_denied", method=method, path=path, principal=context.principal, required=required)
        return problem(403, "Forbidden", f"Requires one of the authorities {required}.", path)
