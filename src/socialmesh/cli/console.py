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
"""Rich console and styles shared by the CLI commands."""

from __future__ import annotations

from rich.console import Console
from rich.theme import Theme

SOCIALMESH_THEME = Theme({
    "info": "cyan",
    "error": "bold red",
    "socialmesh": "bold magenta",
    "dim": "dim",
    # access levels in the rules table
    "permit-all": "green",
    "authenticated": "yellow",
    "has-authority": "yellow",
    "has-any-authority": "yellow",
    "deny-all": "bold red",
})

console = Console(theme=SOCIALMESH_THEME)


def print_banner() -> None:
    from socialmesh import __version__

    console.print(f"[socialmesh]SocialMesh[/socialmesh] [dim]security layer v{__version__}[/dim]\n")


def print_error(message: object) -> None:
    """Print *message* in the error style; markup inside it is not interpreted."""
    console.print(str(message), style="error", markup=False)
