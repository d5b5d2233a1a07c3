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
"""Web subsystem configuration properties."""

from __future__ import annotations

from dataclasses import dataclass, field

from socialmesh.core.config import config_properties


@config_properties(prefix="socialmesh.web")
@dataclass
class WebProperties:
    """Configuration for the web subsystem (socialmesh.web.*)."""

    host: str = "0.0.0.0"
    port: int = 5454
    debug: bool = False


@config_properties(prefix="socialmesh.web.cors")
@dataclass
class CorsProperties:
    """Cross-origin policy (socialmesh.web.cors.*).

    ``allowed_headers`` applies to the security-level policy and
    ``mapping_allowed_headers`` to the ``/**`` MVC-level mapping.
    """

    allowed_origins: list[str] = field(default_factory=list)
    allowed_methods: list[str] = field(default_factory=lambda: ["GET"])
    allowed_headers: list[str] = field(default_factory=lambda: ["*"])
    mapping_allowed_headers: list[str] = field(default_factory=lambda: ["*"])
    exposed_headers: list[str] = field(default_factory=list)
    allow_credentials: bool = False
    max_age: int = 600
