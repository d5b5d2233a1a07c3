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
"""OncePerRequestFilter: WebFilter base class scoped by Ant-style path patterns."""

from __future__ import annotations

import abc
from collections.abc import Sequence
from typing import Any

from socialmesh.security.http_security import path_matches
from socialmesh.web.ports.filter import CallNext


class OncePerRequestFilter(abc.ABC):
    """Base class for filters in the request chain.

    Subclasses implement :meth:`do_filter` and may narrow where they run:

    Attributes:
        url_patterns: Paths the filter applies to, in the same Ant syntax
            as the authorization rules (``/api/**``).  Empty means every path.
        exclude_patterns: Paths skipped even when ``url_patterns`` matches.
    """

    url_patterns: Sequence[str] = ()
    exclude_patterns: Sequence[str] = ()

    def should_not_filter(self, request: Any) -> bool:
        path: str = request.url.path
        if self.url_patterns and not any(path_matches(p, path) for p in self.url_patterns):
            return True
        return any(path_matches(p, path) for p in self.exclude_patterns)

    @abc.abstractmethod
    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        """Handle *request*; ``await call_next(request)`` to continue down the chain."""
