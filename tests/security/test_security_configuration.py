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
"""Tests for the default security wiring built from configuration properties."""

from __future__ import annotations

import pytest

from socialmesh.config.properties import CorsProperties, JwtProperties, PasswordProperties, SecurityProperties
from socialmesh.core.config import Config
from socialmesh.kernel.exceptions import ConfigurationException
from socialmesh.security.configuration import (
    authorize_requests,
    cors_configuration_source,
    jwt_provider as build_jwt_provider,
    password_encoder,
    security_filter_chain,
    web_cors_mappings,
)
from socialmesh.security.http_security import AccessRuleType, HttpSecurity, SessionCreationPolicy
from socialmesh.web.adapters.starlette.filters import HttpSecurityFilter, JwtTokenValidator
from socialmesh.web.cors import CorsRegistry

DEFAULT_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:4000",
    "http://localhost:4200",
    "https://zosh-social.vercel.app",
    "https://socialmediaapp-nikhil.netlify.app",
)


@pytest.fixture
def cors_properties() -> CorsProperties:
    return Config.defaults().bind(CorsProperties)


class TestAuthorizeRequests:
    def test_default_rule_table(self):
        http = authorize_requests(HttpSecurity(), SecurityProperties())
        assert [(r.describe(), r.rule.rule_type) for r in http.rules] == [
            ("OPTIONS /**", AccessRuleType.PERMIT_ALL),
            ("/auth/**", AccessRuleType.PERMIT_ALL),
            ("/api/**", AccessRuleType.AUTHENTICATED),
            ("any request", AccessRuleType.PERMIT_ALL),
        ]

    @pytest.mark.parametrize(
        ("policy", "expected"),
        [("authenticated", AccessRuleType.AUTHENTICATED), ("deny-all", AccessRuleType.DENY_ALL)],
    )
    def test_catch_all_policy(self, policy, expected):
        http = authorize_requests(HttpSecurity(), SecurityProperties(any_request=policy))
        assert http.rules[-1].rule.rule_type is expected

    def test_unknown_catch_all_policy(self):
        with pytest.raises(ConfigurationException) as exc_info:
            authorize_requests(HttpSecurity(), SecurityProperties(any_request="allow-everything"))
        assert exc_info.value.code == "INVALID_SECURITY_POLICY"

    def test_custom_paths(self):
        http = authorize_requests(HttpSecurity(), SecurityProperties(auth_path="/login/**", api_path="/v1/**"))
        assert [r.describe() for r in http.rules][1:3] == ["/login/**", "/v1/**"]


class TestSecurityFilterChain:
    def test_chain_wiring(self, jwt_provider, cors_properties):
        source = cors_configuration_source(cors_properties)
        chain = security_filter_chain(HttpSecurity(), SecurityProperties(), jwt_provider, source)

        assert chain.session_policy is SessionCreationPolicy.STATELESS
        assert chain.cors_source is source
        assert len(chain.rules) == 4
        assert [type(f) for f in chain.filters] == [JwtTokenValidator, HttpSecurityFilter]


class TestCorsWiring:
    def test_security_level_source(self, cors_properties):
        config = cors_configuration_source(cors_properties).get_cors_configuration("/api/posts")

        assert config is not None
        assert config.allowed_origins == DEFAULT_ORIGINS
        assert config.allowed_methods == ("GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH")
        assert "Authorization" in config.allowed_headers
        assert "X-Requested-With" in config.allowed_headers
        assert config.exposed_headers == (
            "Authorization",
            "Access-Control-Allow-Origin",
            "Access-Control-Allow-Credentials",
        )
        assert config.allow_credentials is True
        assert config.max_age == 3600

    def test_mvc_mapping_allows_any_header(self, cors_properties):
        source = web_cors_mappings(CorsRegistry(), cors_properties).build_source()
        config = source.get_cors_configuration("/")

        assert config is not None
        assert config.allowed_headers == ("*",)
        assert config.allowed_origins == DEFAULT_ORIGINS
        assert config.max_age == 3600


class TestCollaborators:
    def test_password_encoder_rounds(self):
        assert password_encoder(PasswordProperties(rounds=4)).rounds == 4

    def test_jwt_provider_requires_secret(self):
        with pytest.raises(ConfigurationException):
            build_jwt_provider(JwtProperties())

    def test_jwt_provider_from_properties(self):
        provider = build_jwt_provider(JwtProperties(secret="s" * 40, expiration=60, issuer="socialmesh"))
        claims = provider.decode(provider.generate_token("ada@example.com"))
        assert claims["exp"] - claims["iat"] == 60
        assert claims["iss"] == "socialmesh"
