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
"""Security context for request-scoped authentication and authorization."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SecurityContext:
    """Who is making the current request, and what they may do.

    Populated from the bearer token by :class:`JwtTokenValidator` and read by
    the URL authorization rules and route handlers via
    ``request.state.security_context``.
    """

    principal: str | None = None
    authorities: list[str] = field(default_factory=list)
    attributes: dict[str, str] = field(default_factory=dict)

    @property
    def is_authenticated(self) -> bool:
        """Whether a principal was established for this request."""
        return self.principal is not None

    def has_authority(self, authority: str) -> bool:
        return authority in self.authorities

    def has_any_authority(self, authorities: list[str]) -> bool:
        return bool(set(self.authorities) & set(authorities))

    @classmethod
    def anonymous(cls) -> SecurityContext:
        """The context of a request that presented no valid token."""
        return cls()
