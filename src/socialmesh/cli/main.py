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
"""SocialMesh CLI: serve the application and inspect its security setup."""

from __future__ import annotations

import click

from socialmesh.cli.console import print_banner


class SocialMeshCLI(click.Group):
    """Click group that shows the SocialMesh banner on help."""

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        print_banner()
        super().format_help(ctx, formatter)


@click.group(cls=SocialMeshCLI)
@click.version_option(package_name="socialmesh")
def cli() -> None:
    """SocialMesh backend command-line tools."""


from socialmesh.cli.run import run_command  # noqa: E402
from socialmesh.cli.security import encode_password_command, issue_token_command, rules_command  # noqa: E402

cli.add_command(run_command, name="run")
cli.add_command(encode_password_command, name="encode-password")
cli.add_command(issue_token_command, name="issue-token")
cli.add_command(rules_command, name="rules")
