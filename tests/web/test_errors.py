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
"""Tests for the global exception handlers and the error envelope."""

from __future__ import annotations

import pytest
from starlette.requests import Request
from starlette.routing import Route
from starlette.testclient import TestClient

from socialmesh.kernel.exceptions import (
    BadCredentialsException,
    BusinessException,
    ConflictException,
    ForbiddenException,
    InvalidTokenException,
    ResourceNotFoundException,
    SocialMeshException,
    ValidationException,
)
from socialmesh.web.adapters.starlette import create_app

_RAISES = {
    "validation": ValidationException("bad input", code="VALIDATION_FAILED", context={"field": "email"}),
    "missing": ResourceNotFoundException("no such user", code="USER_NOT_FOUND"),
    "conflict": ConflictException("email taken", code="EMAIL_TAKEN"),
    "credentials": BadCredentialsException("Invalid username or password", code="BAD_CREDENTIALS"),
    "token": InvalidTokenException("Token has expired", code="TOKEN_EXPIRED"),
    "forbidden": ForbiddenException("nope"),
    "business": BusinessException("rule broken"),
    "generic": SocialMeshException("oops"),
    "crash": RuntimeError("boom"),
}


async def _raise(request: Request):
    raise _RAISES[request.path_params["kind"]]


@pytest.fixture
def client() -> TestClient:
    app = create_app(routes=[Route("/raise/{kind}", _raise, methods=["GET"])])
    return TestClient(app, raise_server_exceptions=False)


class TestGlobalExceptionHandler:
    @pytest.mark.parametrize(
        ("kind", "status"),
        [
            ("validation", 422),
            ("missing", 404),
            ("conflict", 409),
            ("credentials", 401),
            ("token", 401),
            ("forbidden", 403),
            ("business", 400),
            ("generic", 500),
        ],
    )
    def test_status_mapping(self, client, kind, status):
        resp = client.get(f"/raise/{kind}")
        assert resp.status_code == status
        assert resp.json()["error"]["status"] == status

    def test_envelope_fields(self, client):
        resp = client.get("/raise/conflict", headers={"X-Transaction-Id": "tx-42"})
        error = resp.json()["error"]

        assert error["message"] == "email taken"
        assert error["code"] == "EMAIL_TAKEN"
        assert error["transaction_id"] == "tx-42"
        assert error["path"] == "/raise/conflict"
        assert error["timestamp"]

    def test_context_included(self, client):
        error = client.get("/raise/validation").json()["error"]
        assert error["context"] == {"field": "email"}

    def test_default_codes(self, client):
        assert client.get("/raise/forbidden").json()["error"]["code"] == "FORBIDDEN"
        assert client.get("/raise/business").json()["error"]["code"] == "BusinessException"

    def test_unauthorized_advertises_bearer(self, client):
        resp = client.get("/raise/credentials")
        assert resp.headers["www-authenticate"] == "Bearer"

    def test_unhandled_exception_hidden(self, client):
        resp = client.get("/raise/crash")
        assert resp.status_code == 500
        error = resp.json()["error"]
        assert error["code"] == "INTERNAL_ERROR"
        assert "boom" not in error["message"]


class TestHttpExceptionHandler:
    def test_unknown_route(self, client):
        resp = client.get("/no/such/route")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "HTTP_404"

    def test_method_not_allowed(self, client):
        resp = client.post("/raise/conflict")
        assert resp.status_code == 405
        assert resp.json()["error"]["code"] == "HTTP_405"
