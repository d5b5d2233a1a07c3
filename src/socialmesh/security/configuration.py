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
"""Default security wiring for the SocialMesh backend.

Each function builds one collaborator from bound configuration properties:

- :func:`security_filter_chain`: stateless chain, ordered URL rules, JWT
  validation ahead of authorization, security-level CORS source
- :func:`authorize_requests`: the ordered URL rules alone
- :func:`cors_configuration_source`: the security-level CORS policy
- :func:`web_cors_mappings`: the MVC-level ``/**`` CORS mapping
- :func:`password_encoder` and :func:`jwt_provider`
"""

from __future__ import annotations

import structlog

from socialmesh.config.properties.security import JwtProperties, PasswordProperties, SecurityProperties
from socialmesh.config.properties.web import CorsProperties
from socialmesh.kernel.exceptions import ConfigurationException
from socialmesh.security.http_security import HttpSecurity, SecurityFilterChain, SessionCreationPolicy
from socialmesh.security.jwt import JwtProvider
from socialmesh.security.password import BcryptPasswordEncoder
from socialmesh.web.adapters.starlette.filters.http_security_filter import HttpSecurityFilter
from socialmesh.web.adapters.starlette.filters.jwt_token_validator import JwtTokenValidator
from socialmesh.web.cors import CORSConfig, CorsConfigurationSource, CorsRegistry, UrlBasedCorsConfigurationSource

logger = structlog.get_logger("socialmesh.security")

ANY_REQUEST_POLICIES = ("permit-all", "authenticated", "deny-all")


def security_filter_chain(
    http: HttpSecurity,
    properties: SecurityProperties,
    jwt_provider: JwtProvider,
    cors_source: CorsConfigurationSource,
    token_header: str = "Authorization",
) -> SecurityFilterChain:
    """Configure *http* for the application and build the chain.

    Stateless sessions, the rules from :func:`authorize_requests`, the JWT
    validator ahead of the authorization filter, and *cors_source*.
    """
    http.session_management(SessionCreationPolicy.STATELESS)
    authorize_requests(http, properties)
    http.add_filter_before(JwtTokenValidator(jwt_provider, header_name=token_header), HttpSecurityFilter)
    http.cors(cors_source)
    return http.build()


def authorize_requests(http: HttpSecurity, properties: SecurityProperties) -> HttpSecurity:
    """Register the application's ordered URL rules on *http*.

    Rules, first match wins:

    1. ``OPTIONS /**``: permit (preflight)
    2. ``auth_path``: permit (sign-up / sign-in)
    3. ``api_path``: authenticated
    4. any other request: ``properties.any_request``

    Raises:
        ConfigurationException: If ``any_request`` is not a known policy.
    """
    if properties.any_request not in ANY_REQUEST_POLICIES:
        raise ConfigurationException(
            f"Unknown any-request policy '{properties.any_request}'; expected one of {ANY_REQUEST_POLICIES}",
            code="INVALID_SECURITY_POLICY",
        )

    rules = (
        http.authorize_requests()
        .request_matchers("/**", method="OPTIONS").permit_all()
        .request_matchers(properties.auth_path).permit_all()
        .request_matchers(properties.api_path).authenticated()
    )
    catch_all = rules.any_request()
    if properties.any_request == "authenticated":
        catch_all.authenticated()
    elif properties.any_request == "deny-all":
        catch_all.deny_all()
    else:
        catch_all.permit_all()
        logger.warning(
            "permissive_catch_all_rule",
            detail="requests outside the auth and api paths are permitted without authentication",
            setting="socialmesh.security.any-request",
        )
    return http


def cors_configuration_source(properties: CorsProperties) -> UrlBasedCorsConfigurationSource:
    """Security-level CORS policy applied to every path."""
    source = UrlBasedCorsConfigurationSource()
    source.register(
        "/**",
        CORSConfig(
            allowed_origins=tuple(properties.allowed_origins),
            allowed_methods=tuple(properties.allowed_methods),
            allowed_headers=tuple(properties.allowed_headers),
            allow_credentials=properties.allow_credentials,
            exposed_headers=tuple(properties.exposed_headers),
            max_age=properties.max_age,
        ),
    )
    return source


def web_cors_mappings(registry: CorsRegistry, properties: CorsProperties) -> CorsRegistry:
    """MVC-level ``/**`` mapping; consulted only where the security source has no answer."""
    registry.add_mapping("/**") \
        .allowed_origins(*properties.allowed_origins) \
        .allowed_methods(*properties.allowed_methods) \
        .allowed_headers(*properties.mapping_allowed_headers) \
        .exposed_headers(*properties.exposed_headers) \
        .allow_credentials(properties.allow_credentials) \
        .max_age(properties.max_age)
    return registry


def password_encoder(properties: PasswordProperties) -> BcryptPasswordEncoder:
    return BcryptPasswordEncoder(rounds=properties.rounds)


def jwt_provider(properties: JwtProperties) -> JwtProvider:
    return JwtProvider(
        secret=properties.secret,
        algorithm=properties.algorithm,
        expiration_seconds=properties.expiration,
        issuer=properties.issuer or None,
    )
