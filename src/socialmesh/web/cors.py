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
"""CORS configuration, per-path configuration sources, and the mapping registry."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from socialmesh.security.http_security import path_matches


@dataclass(frozen=True)
class CORSConfig:
    """Configuration for Cross-Origin Resource Sharing.

    Mirrors Spring's CorsConfiguration.  Sequences are stored as tuples so
    the configuration is immutable and hashable.
    """

    allowed_origins: tuple[str, ...] = ("*",)
    allowed_methods: tuple[str, ...] = ("GET",)
    allowed_headers: tuple[str, ...] = ("*",)
    allow_credentials: bool = False
    exposed_headers: tuple[str, ...] = ()
    max_age: int = 600  # seconds

    def __post_init__(self) -> None:
        for name in ("allowed_origins", "allowed_methods", "allowed_headers", "exposed_headers"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        object.__setattr__(self, "allowed_methods", tuple(m.upper() for m in self.allowed_methods))
        if self.allow_credentials and "*" in self.allowed_origins:
            raise ValueError("allow_credentials cannot be combined with a '*' origin; list the origins explicitly")

    def is_origin_allowed(self, origin: str | None) -> bool:
        if not origin:
            return False
        return "*" in self.allowed_origins or origin in self.allowed_origins


@runtime_checkable
class CorsConfigurationSource(Protocol):
    """Supplies the CORS configuration for a request path, or ``None``."""

    def get_cors_configuration(self, path: str) -> CORSConfig | None: ...


class UrlBasedCorsConfigurationSource:
    """Maps Ant-style path patterns to configurations; first registered match wins."""

    def __init__(self) -> None:
        self._mappings: list[tuple[str, CORSConfig]] = []

    @property
    def mappings(self) -> list[tuple[str, CORSConfig]]:
        return list(self._mappings)

    def register(self, pattern: str, config: CORSConfig) -> None:
        self._mappings.append((pattern, config))

    def get_cors_configuration(self, path: str) -> CORSConfig | None:
        for pattern, config in self._mappings:
            if path_matches(pattern, path):
                return config
        return None


class CompositeCorsConfigurationSource:
    """Consults several sources in order and returns the first configuration found."""

    def __init__(self, *sources: CorsConfigurationSource) -> None:
        self._sources = list(sources)

    def get_cors_configuration(self, path: str) -> CORSConfig | None:
        for source in self._sources:
            config = source.get_cors_configuration(path)
            if config is not None:
                return config
        return None


@dataclass
class CorsRegistration:
    """Fluent builder for one MVC-level CORS mapping.

    Defaults follow Spring's ``CorsRegistration``: any origin, simple
    methods, any header, 30 minute max-age.
    """

    pattern: str
    _origins: list[str] = field(default_factory=lambda: ["*"])
    _methods: list[str] = field(default_factory=lambda: ["GET", "HEAD", "POST"])
    _headers: list[str] = field(default_factory=lambda: ["*"])
    _exposed: list[str] = field(default_factory=list)
    _credentials: bool = False
    _max_age: int = 1800

    def allowed_origins(self, *origins: str) -> CorsRegistration:
        self._origins = list(origins)
        return self

    def allowed_methods(self, *methods: str) -> CorsRegistration:
        self._methods = list(methods)
        return self

    def allowed_headers(self, *headers: str) -> CorsRegistration:
        self._headers = list(headers)
        return self

    def exposed_headers(self, *headers: str) -> CorsRegistration:
        self._exposed = list(headers)
        return self

    def allow_credentials(self, allow: bool) -> CorsRegistration:
        self._credentials = allow
        return self

    def max_age(self, seconds: int) -> CorsRegistration:
        self._max_age = seconds
        return self

    def to_config(self) -> CORSConfig:
        return CORSConfig(
            allowed_origins=tuple(self._origins),
            allowed_methods=tuple(self._methods),
            allowed_headers=tuple(self._headers),
            allow_credentials=self._credentials,
            exposed_headers=tuple(self._exposed),
            max_age=self._max_age,
        )


class CorsRegistry:
    """Collects MVC-level CORS mappings.

    Usage::

        registry = CorsRegistry()
        registry.add_mapping("/**") \\
            .allowed_origins("http://localhost:3000") \\
            .allowed_methods("GET", "POST") \\
            .allow_credentials(True)
        source = registry.build_source()
    """

    def __init__(self) -> None:
        self._registrations: list[CorsRegistration] = []

    def add_mapping(self, pattern: str) -> CorsRegistration:
        registration = CorsRegistration(pattern=pattern)
        self._registrations.append(registration)
        return registration

    def build_source(self) -> UrlBasedCorsConfigurationSource:
        source = UrlBasedCorsConfigurationSource()
        for registration in self._registrations:
            source.register(registration.pattern, registration.to_config())
        return source

