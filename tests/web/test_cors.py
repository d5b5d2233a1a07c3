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
"""Tests for CORS configuration, sources, registry, and the per-path CORS middleware."""

from __future__ import annotations

import dataclasses

import pytest
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from socialmesh.web.adapters.starlette.cors import CorsMiddleware
from socialmesh.web.cors import (
    CompositeCorsConfigurationSource,
    CORSConfig,
    CorsConfigurationSource,
    CorsRegistry,
    UrlBasedCorsConfigurationSource,
)

ALLOWED_ORIGIN = "http://localhost:3000"

API_POLICY = CORSConfig(
    allowed_origins=(ALLOWED_ORIGIN, "https://zosh-social.vercel.app"),
    allowed_methods=("GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"),
    allowed_headers=("Origin", "Content-Type", "Accept", "Authorization"),
    exposed_headers=("Authorization",),
    allow_credentials=True,
    max_age=3600,
)


class TestCORSConfig:
    def test_defaults(self):
        config = CORSConfig()
        assert config.allowed_origins == ("*",)
        assert config.allowed_methods == ("GET",)
        assert config.allowed_headers == ("*",)
        assert config.allow_credentials is False
        assert config.exposed_headers == ()
        assert config.max_age == 600

    def test_lists_normalized_to_tuples(self):
        config = CORSConfig(allowed_origins=["http://a.test"], allowed_methods=["get", "post"])  # type: ignore[arg-type]
        assert config.allowed_origins == ("http://a.test",)
        assert config.allowed_methods == ("GET", "POST")

    def test_frozen_and_hashable(self):
        config = CORSConfig(allowed_origins=("http://a.test",))
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.max_age = 1  # type: ignore[misc]
        assert hash(config) == hash(CORSConfig(allowed_origins=("http://a.test",)))

    def test_credentials_with_wildcard_origin_rejected(self):
        with pytest.raises(ValueError):
            CORSConfig(allowed_origins=("*",), allow_credentials=True)

    def test_is_origin_allowed(self):
        assert API_POLICY.is_origin_allowed(ALLOWED_ORIGIN) is True
        assert API_POLICY.is_origin_allowed("https://evil.example") is False
        assert API_POLICY.is_origin_allowed(None) is False
        assert CORSConfig().is_origin_allowed("https://anyone.example") is True


class TestConfigurationSources:
    def test_url_based_first_match_wins(self):
        narrow = CORSConfig(allowed_origins=("http://narrow.test",))
        wide = CORSConfig(allowed_origins=("http://wide.test",))
        source = UrlBasedCorsConfigurationSource()
        source.register("/api/**", narrow)
        source.register("/**", wide)

        assert source.get_cors_configuration("/api/posts") is narrow
        assert source.get_cors_configuration("/auth/signin") is wide
        assert [p for p, _ in source.mappings] == ["/api/**", "/**"]

    def test_url_based_no_match(self):
        source = UrlBasedCorsConfigurationSource()
        source.register("/api/**", API_POLICY)
        assert source.get_cors_configuration("/auth/signin") is None

    def test_composite_prefers_earlier_source(self):
        security = UrlBasedCorsConfigurationSource()
        security.register("/**", API_POLICY)
        mvc = UrlBasedCorsConfigurationSource()
        mvc.register("/**", CORSConfig())

        composite = CompositeCorsConfigurationSource(security, mvc)
        assert composite.get_cors_configuration("/anything") is API_POLICY

    def test_composite_falls_through(self):
        security = UrlBasedCorsConfigurationSource()
        security.register("/api/**", API_POLICY)
        mvc = UrlBasedCorsConfigurationSource()
        fallback = CORSConfig()
        mvc.register("/**", fallback)

        composite = CompositeCorsConfigurationSource(security, mvc)
        assert composite.get_cors_configuration("/public") is fallback

    def test_sources_satisfy_protocol(self):
        assert isinstance(UrlBasedCorsConfigurationSource(), CorsConfigurationSource)
        assert isinstance(CompositeCorsConfigurationSource(), CorsConfigurationSource)


class TestCorsRegistry:
    def test_mapping_defaults(self):
        registry = CorsRegistry()
        registry.add_mapping("/**")
        config = registry.build_source().get_cors_configuration("/x")

        assert config == CORSConfig(
            allowed_origins=("*",),
            allowed_methods=("GET", "HEAD", "POST"),
            allowed_headers=("*",),
            max_age=1800,
        )

    def test_fluent_mapping(self):
        registry = CorsRegistry()
        registry.add_mapping("/**") \
            .allowed_origins(ALLOWED_ORIGIN) \
            .allowed_methods("GET", "PATCH") \
            .allowed_headers("*") \
            .exposed_headers("Authorization") \
            .allow_credentials(True) \
            .max_age(3600)

        config = registry.build_source().get_cors_configuration("/api/posts")
        assert config == CORSConfig(
            allowed_origins=(ALLOWED_ORIGIN,),
            allowed_methods=("GET", "PATCH"),
            allowed_headers=("*",),
            exposed_headers=("Authorization",),
            allow_credentials=True,
            max_age=3600,
        )


def _make_client() -> TestClient:
    async def echo(request: Request) -> JSONResponse:
        return JSONResponse({"path": request.url.path})

    source = UrlBasedCorsConfigurationSource()
    source.register("/api/**", API_POLICY)
    app = Starlette(
        routes=[Route("/api/posts", echo, methods=["GET"]), Route("/internal", echo)],
        middleware=[Middleware(CorsMiddleware, source=source)],
    )
    return TestClient(app)


class TestCorsMiddleware:
    def test_preflight_from_allowed_origin(self):
        client = _make_client()
        resp = client.options(
            "/api/posts",
            headers={
                "Origin": ALLOWED_ORIGIN,
                "Access-Control-Request-Method": "PATCH",
                "Access-Control-Request-Headers": "Authorization, Content-Type",
            },
        )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == ALLOWED_ORIGIN
        assert "PATCH" in resp.headers["access-control-allow-methods"]
        assert resp.headers["access-control-allow-credentials"] == "true"
        assert resp.headers["access-control-max-age"] == "3600"

    def test_preflight_from_disallowed_origin(self):
        client = _make_client()
        resp = client.options(
            "/api/posts",
            headers={"Origin": "https://evil.example", "Access-Control-Request-Method": "GET"},
        )
        assert resp.status_code == 400
        assert "access-control-allow-origin" not in resp.headers

    def test_preflight_with_unlisted_header_rejected(self):
        client = _make_client()
        resp = client.options(
            "/api/posts",
            headers={
                "Origin": ALLOWED_ORIGIN,
                "Access-Control-Request-Method": "GET",
                "Access-Control-Request-Headers": "X-Not-Allowed",
            },
        )
        assert resp.status_code == 400

    def test_simple_request_from_allowed_origin(self):
        client = _make_client()
        resp = client.get("/api/posts", headers={"Origin": ALLOWED_ORIGIN})
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == ALLOWED_ORIGIN
        assert resp.headers["access-control-expose-headers"] == "Authorization"

    def test_simple_request_from_disallowed_origin(self):
        client = _make_client()
        resp = client.get("/api/posts", headers={"Origin": "https://evil.example"})
        assert resp.status_code == 200
        assert "access-control-allow-origin" not in resp.headers

    def test_path_without_configuration_passes_through(self):
        client = _make_client()
        resp = client.get("/internal", headers={"Origin": ALLOWED_ORIGIN})
        assert resp.status_code == 200
        assert "access-control-allow-origin" not in resp.headers
