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
"""Application entry point: builds the configured SocialMesh ASGI app.

Run with ``socialmesh run`` or directly through uvicorn's factory mode::

    uvicorn socialmesh.main:create_application --factory
"""

from __future__ import annotations

import os
from pathlib import Path

import structlog
from starlette.applications import Starlette

from socialmesh.auth import AuthService, InMemoryUserRepository, UserRepository, auth_routes
from socialmesh.config.properties import (
    CorsProperties,
    JwtProperties,
    PasswordProperties,
    SecurityProperties,
    WebProperties,
)
from socialmesh.core.config import Config
from socialmesh.logging import StructlogAdapter
from socialmesh.security.configuration import (
    cors_configuration_source,
    jwt_provider,
    password_encoder,
    security_filter_chain,
    web_cors_mappings,
)
from socialmesh.security.http_security import HttpSecurity
from socialmesh.web.adapters.starlette import create_app
from socialmesh.web.cors import CorsRegistry

PROFILES_ENV = "SOCIALMESH_PROFILES_ACTIVE"
CONFIG_DIR_ENV = "SOCIALMESH_CONFIG_DIR"


def active_profiles() -> list[str]:
    """Profiles named in ``SOCIALMESH_PROFILES_ACTIVE`` (comma-separated)."""
    return [p.strip() for p in os.environ.get(PROFILES_ENV, "").split(",") if p.strip()]


def load_config(base_dir: str | Path | None = None) -> Config:
    """Load configuration from *base_dir* (default: ``SOCIALMESH_CONFIG_DIR`` or the cwd)."""
    base = Path(base_dir or os.environ.get(CONFIG_DIR_ENV) or Path.cwd())
    return Config.from_sources(base, active_profiles=active_profiles())


def create_application(
    config: Config | None = None,
    user_repository: UserRepository | None = None,
) -> Starlette:
    """Wire configuration, logging, security, and routes into an ASGI app."""
    config = config or load_config()

    StructlogAdapter().configure(config)
    logger = structlog.get_logger("socialmesh")

    web_props = config.bind(WebProperties)
    cors_props = config.bind(CorsProperties)
    security_props = config.bind(SecurityProperties)
    jwt_props = config.bind(JwtProperties)

    provider = jwt_provider(jwt_props)
    chain = security_filter_chain(
        HttpSecurity(),
        security_props,
        provider,
        cors_configuration_source(cors_props),
        token_header=jwt_props.header,
    )
    mappings = web_cors_mappings(CorsRegistry(), cors_props)

    service = AuthService(
        user_repository if user_repository is not None else InMemoryUserRepository(),
        password_encoder(config.bind(PasswordProperties)),
        provider,
    )

    app = create_app(
        title=str(config.get("socialmesh.app.name", "socialmesh")),
        debug=web_props.debug,
        security=chain,
        cors=mappings.build_source(),
        routes=auth_routes(service),
    )
    logger.info(
        "application_configured",
        sources=config.loaded_sources,
        rules=[f"{r.describe()} -> {r.rule.rule_type.name}" for r in chain.rules],
        allowed_origins=cors_props.allowed_origins,
    )
    return app
