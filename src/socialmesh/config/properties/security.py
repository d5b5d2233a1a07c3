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
"""Security subsystem configuration properties."""

from __future__ import annotations

from dataclasses import dataclass

from socialmesh.core.config import config_properties


@config_properties(prefix="socialmesh.security")
@dataclass
class SecurityProperties:
    """URL rule settings (socialmesh.security.*).

    ``any_request`` decides the catch-all rule: ``permit-all``,
    ``authenticated`` or ``deny-all``.
    """

    auth_path: str = "/auth/**"
    api_path: str = "/api/**"
    any_request: str = "permit-all"


@config_properties(prefix="socialmesh.security.jwt")
@dataclass
class JwtProperties:
    """Bearer token settings (socialmesh.security.jwt.*)."""

    secret: str = ""
    algorithm: str = "HS256"
    expiration: int = 86400  # seconds
    header: str = "Authorization"
    issuer: str | None = None


@config_properties(prefix="socialmesh.security.password")
@dataclass
class PasswordProperties:
    """Password hashing settings (socialmesh.security.password.*)."""

    rounds: int = 10
