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
"""URL-level security DSL: builder for the request security filter chain.

Provides a Spring-inspired ``HttpSecurity`` builder that collects ordered
URL authorization rules, the authentication filters that run ahead of them,
the CORS configuration source, and the session policy, then builds a
:class:`SecurityFilterChain` the web application installs.

Usage::

    http = HttpSecurity()
    http.session_management(SessionCreationPolicy.STATELESS)
    http.authorize_requests() \\
        .request_matchers("/**", method="OPTIONS").permit_all() \\
        .request_matchers("/auth/**").permit_all() \\
        .request_matchers("/api/**").authenticated() \\
        .any_request().permit_all()
    http.add_filter_before(JwtTokenValidator(jwt_provider), HttpSecurityFilter)
    http.cors(cors_source)

    chain = http.build()

Path patterns are Ant-style: ``**`` spans any number of segments, ``*``
matches within one segment and ``?`` matches a single character.  A pattern
ending in ``/**`` also matches its base path.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

from socialmesh.kernel.exceptions import ConfigurationException

if TYPE_CHECKING:
    from socialmesh.web.cors import CorsConfigurationSource
    from socialmesh.web.ports.filter import WebFilter


# ---------------------------------------------------------------------------
# Path matching
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=256)
def _compile_pattern(pattern: str) -> re.Pattern[str]:
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("/**", i):
            parts.append("(?:/.*)?")
            i += 3
        elif pattern.startswith("**", i):
            parts.append(".*")
            i += 2
        elif pattern[i] == "*":
            parts.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            parts.append("[^/]")
            i += 1
        else:
            parts.append(re.escape(pattern[i]))
            i += 1
    return re.compile("".join(parts))


def path_matches(pattern: str, path: str) -> bool:
    """Return ``True`` if *path* matches the Ant-style *pattern*."""
    return _compile_pattern(pattern).fullmatch(path) is not None


# ---------------------------------------------------------------------------
# Access rule model
# ---------------------------------------------------------------------------


class SessionCreationPolicy(Enum):
    """How the chain treats server-side session state."""

    STATELESS = auto()


class AccessRuleType(Enum):
    """The kind of access check to perform on a matched request."""

    PERMIT_ALL = auto()
    DENY_ALL = auto()
    AUTHENTICATED = auto()
    HAS_AUTHORITY = auto()
    HAS_ANY_AUTHORITY = auto()


@dataclass(frozen=True)
class AccessRule:
    """A single authorization rule applied to one or more URL patterns.

    Attributes:
        rule_type: The kind of check to perform.
        value: The authority name or tuple of authority names, depending on
            ``rule_type``.  ``None`` for PERMIT_ALL, DENY_ALL and AUTHENTICATED.
    """

    rule_type: AccessRuleType
    value: str | tuple[str, ...] | None = None


@dataclass(frozen=True)
class SecurityRule:
    """A pairing of a request matcher and the access rule that guards it.

    Attributes:
        patterns: Ant-style path patterns.  Empty means "any request".
        rule: The access rule to enforce when the matcher hits.
        method: HTTP method the rule is restricted to, or ``None`` for all.
    """

    patterns: tuple[str, ...]
    rule: AccessRule
    method: str | None = None

    def matches(self, method: str, path: str) -> bool:
        if self.method is not None and method.upper() != self.method:
            return False
        if not self.patterns:
            return True
        return any(path_matches(p, path) for p in self.patterns)

    def describe(self) -> str:
        """Human-readable matcher, e.g. ``OPTIONS /**`` or ``any request``."""
        target = ", ".join(self.patterns) if self.patterns else "any request"
        return f"{self.method} {target}" if self.method else target


# ---------------------------------------------------------------------------
# Builder DSL
# ---------------------------------------------------------------------------


class _RequestMatcherBuilder:
    """Intermediate builder returned by ``authorize_requests().request_matchers(...)``."""

    def __init__(
        self,
        registry: _AuthorizeRequestsBuilder,
        patterns: tuple[str, ...],
        method: str | None,
    ) -> None:
        self._registry = registry
        self._patterns = patterns
        self._method = method

    def _add(self, rule: AccessRule) -> _AuthorizeRequestsBuilder:
        self._registry._add_rule(SecurityRule(patterns=self._patterns, rule=rule, method=self._method))
        return self._registry

    def permit_all(self) -> _AuthorizeRequestsBuilder:
        """Allow all requests matching the current matcher."""
        return self._add(AccessRule(AccessRuleType.PERMIT_ALL))

    def deny_all(self) -> _AuthorizeRequestsBuilder:
        """Deny all requests matching the current matcher."""
        return self._add(AccessRule(AccessRuleType.DENY_ALL))

    def authenticated(self) -> _AuthorizeRequestsBuilder:
        """Require an authenticated principal for the current matcher."""
        return self._add(AccessRule(AccessRuleType.AUTHENTICATED))

    def has_authority(self, authority: str) -> _AuthorizeRequestsBuilder:
        """Require the principal to hold *authority*."""
        return self._add(AccessRule(AccessRuleType.HAS_AUTHORITY, authority))

    def has_any_authority(self, authorities: list[str]) -> _AuthorizeRequestsBuilder:
        """Require the principal to hold at least one of *authorities*."""
        return self._add(AccessRule(AccessRuleType.HAS_ANY_AUTHORITY, tuple(authorities)))


class _AuthorizeRequestsBuilder:
    """Fluent builder for accumulating ordered authorization rules.

    Returned by :meth:`HttpSecurity.authorize_requests`.
    """

    def __init__(self, security: HttpSecurity) -> None:
        self._security = security

    def request_matchers(self, *patterns: str, method: str | None = None) -> _RequestMatcherBuilder:
        """Begin a rule for one or more path patterns, optionally limited to *method*.

        Raises:
            ConfigurationException: If no pattern is given.
        """
        if not patterns:
            raise ConfigurationException("request_matchers() needs at least one path pattern")
        return _RequestMatcherBuilder(self, tuple(patterns), method.upper() if method else None)

    def any_request(self) -> _RequestMatcherBuilder:
        """Begin the catch-all rule.  It must be the **last** rule."""
        return _RequestMatcherBuilder(self, (), None)

    def _add_rule(self, rule: SecurityRule) -> None:
        rules = self._security._rules
        if rules and not rules[-1].patterns and rules[-1].method is None:
            raise ConfigurationException(
                f"Rule '{rule.describe()}' is unreachable: any_request() must be the last rule"
            )
        rules.append(rule)


# ---------------------------------------------------------------------------
# Built chain
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SecurityFilterChain:
    """The assembled security configuration installed by the web application.

    Attributes:
        filters: Security filters in execution order (authentication first,
            the authorization filter last).
        rules: The ordered authorization rules.
        cors_source: Where per-request CORS configuration comes from.
        session_policy: Session handling; always stateless.
    """

    filters: tuple[Any, ...]
    rules: tuple[SecurityRule, ...]
    cors_source: CorsConfigurationSource | None = None
    session_policy: SessionCreationPolicy = SessionCreationPolicy.STATELESS


# ---------------------------------------------------------------------------
# Top-level builder
# ---------------------------------------------------------------------------


@dataclass
class HttpSecurity:
    """Request security configuration builder."""

    _rules: list[SecurityRule] = field(default_factory=list)
    _filters: list[Any] = field(default_factory=list)
    _filters_before: list[tuple[Any, type]] = field(default_factory=list)
    _cors_source: CorsConfigurationSource | None = None
    _session_policy: SessionCreationPolicy = SessionCreationPolicy.STATELESS

    @property
    def rules(self) -> list[SecurityRule]:
        """Return the accumulated security rules (read-only snapshot)."""
        return list(self._rules)

    def session_management(self, policy: SessionCreationPolicy) -> HttpSecurity:
        """Set the session policy.  Only STATELESS is supported."""
        if policy is not SessionCreationPolicy.STATELESS:
            raise ConfigurationException(f"Unsupported session policy: {policy}")
        self._session_policy = policy
        return self

    def authorize_requests(self) -> _AuthorizeRequestsBuilder:
        """Start defining ordered authorization rules."""
        return _AuthorizeRequestsBuilder(self)

    def cors(self, source: CorsConfigurationSource) -> HttpSecurity:
        """Use *source* for cross-origin configuration."""
        self._cors_source = source
        return self

    def add_filter(self, web_filter: WebFilter) -> HttpSecurity:
        """Append *web_filter* ahead of the authorization filter."""
        self._filters.append(web_filter)
        return self

    def add_filter_before(self, web_filter: WebFilter, before: type) -> HttpSecurity:
        """Insert *web_filter* immediately before the first filter of type *before*."""
        self._filters_before.append((web_filter, before))
        return self

    def build(self) -> SecurityFilterChain:
        """Assemble the :class:`SecurityFilterChain`.

        The authorization filter built from the rules always closes the
        chain; filters registered with :meth:`add_filter_before` are placed
        ahead of their anchor type.

        Raises:
            ConfigurationException: If an anchor type is not in the chain.
        """
        from socialmesh.web.adapters.starlette.filters.http_security_filter import HttpSecurityFilter

        rules = tuple(self._rules)
        filters: list[Any] = [*self._filters, HttpSecurityFilter(rules=rules)]

        for web_filter, before in self._filters_before:
            index = next((i for i, f in enumerate(filters) if isinstance(f, before)), None)
            if index is None:
                raise ConfigurationException(
                    f"Cannot add {type(web_filter).__name__} before {before.__name__}: "
                    f"no {before.__name__} in the security chain"
                )
            filters.insert(index, web_filter)

        return SecurityFilterChain(
            filters=tuple(filters),
            rules=rules,
            cors_source=self._cors_source,
            session_policy=self._session_policy,
        )
