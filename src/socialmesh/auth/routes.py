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
"""HTTP endpoints for sign-up, sign-in, and the current user's profile."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from socialmesh.auth.models import SigninRequest, SignupRequest, UserProfile
from socialmesh.auth.service import AuthService
from socialmesh.kernel.exceptions import UnauthorizedException, ValidationException
from socialmesh.security.context import SecurityContext

M = TypeVar("M", bound=BaseModel)


async def _parse_body(request: Request, model: type[M]) -> M:
    try:
        payload: Any = await request.json()
    except ValueError as exc:  # JSONDecodeError and UnicodeDecodeError
        raise ValidationException("Request body must be valid JSON", code="MALFORMED_JSON") from exc
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        errors = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        raise ValidationException("Request validation failed", code="VALIDATION_FAILED", context={"errors": errors}) from exc


def auth_routes(service: AuthService) -> list[Route]:
    """Build the auth routes bound to *service*."""

    async def signup(request: Request) -> JSONResponse:
        body = await _parse_body(request, SignupRequest)
        response = service.register(body)
        return JSONResponse(response.model_dump(by_alias=True), status_code=201)

    async def signin(request: Request) -> JSONResponse:
        body = await _parse_body(request, SigninRequest)
        response = service.authenticate(body)
        return JSONResponse(response.model_dump(by_alias=True))

    async def profile(request: Request) -> JSONResponse:
        context: SecurityContext = getattr(request.state, "security_context", SecurityContext.anonymous())
        if context.principal is None:
            raise UnauthorizedException("Authentication is required", code="UNAUTHENTICATED")
        account = service.current_account(context.principal)
        return JSONResponse(UserProfile.from_account(account).model_dump(by_alias=True))

    return [
        Route("/auth/signup", signup, methods=["POST"]),
        Route("/auth/signin", signin, methods=["POST"]),
        Route("/api/users/profile", profile, methods=["GET"]),
    ]
