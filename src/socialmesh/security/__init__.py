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
"""SocialMesh Security: authentication, URL authorization, and password encoding."""

from socialmesh.security.context import SecurityContext
from socialmesh.security.http_security import (
    AccessRule,
    AccessRuleType,
    HttpSecurity,
    SecurityFilterChain,
    SecurityRule,
    SessionCreationPolicy,
    path_matches,
)
from socialmesh.security.jwt import JwtProvider
from socialmesh.security.password import BcryptPasswordEncoder, PasswordEncoder

__all__ = [
    "AccessRule",
    "AccessRuleType",
    "BcryptPasswordEncoder",
    "HttpSecurity",
    "JwtProvider",
    "PasswordEncoder",
    "SecurityContext",
    "SecurityFilterChain",
    "SecurityRule",
    "SessionCreationPolicy",
    "path_matches",
]
