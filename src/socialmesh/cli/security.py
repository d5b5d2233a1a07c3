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
"""Security helper commands: password hashing, token issuing, rule listing."""

from __future__ import annotations

import click
from rich.table import Table
from rich.text import Text

from socialmesh.cli.console import console, print_error
from socialmesh.config.properties import CorsProperties, JwtProperties, PasswordProperties, SecurityProperties
from socialmesh.kernel.exceptions import ConfigurationException
from socialmesh.main import load_config
from socialmesh.security.configuration import authorize_requests, jwt_provider
from socialmesh.security.http_security import HttpSecurity
from socialmesh.security.password import BcryptPasswordEncoder

_config_dir_option = click.option(
    "--config-dir",
    default=None,
    type=click.Path(file_okay=False, exists=True),
    help="Directory holding socialmesh.yaml (default: current directory).",
)


@click.command()
@click.argument("password")
@click.option("--rounds", default=None, type=int, help="bcrypt cost factor (default: socialmesh.security.password.rounds).")
@_config_dir_option
def encode_password_command(password: str, rounds: int | None, config_dir: str | None) -> None:
    """Print the bcrypt hash of PASSWORD."""
    if rounds is None:
        rounds = load_config(config_dir).bind(PasswordProperties).rounds
    try:
        encoder = BcryptPasswordEncoder(rounds=rounds)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--rounds") from None
    click.echo(encoder.hash(password))


@click.command()
@click.argument("email")
@click.option("--authority", "authorities", multiple=True, default=("ROLE_USER",), show_default=True,
              help="Authority to grant; repeatable.")
@_config_dir_option
def issue_token_command(email: str, authorities: tuple[str, ...], config_dir: str | None) -> None:
    """Print a signed bearer token for EMAIL using the configured JWT secret."""
    try:
        provider = jwt_provider(load_config(config_dir).bind(JwtProperties))
    except ConfigurationException as exc:
        print_error(exc)
        raise SystemExit(1) from None
    click.echo(provider.generate_token(email, authorities))


@click.command()
@_config_dir_option
def rules_command(config_dir: str | None) -> None:
    """Show the authorization rules and CORS policy in effect."""
    config = load_config(config_dir)
    try:
        http = authorize_requests(HttpSecurity(), config.bind(SecurityProperties))
    except ConfigurationException as exc:
        print_error(exc)
        raise SystemExit(1) from None

    rules_table = Table(title="Authorization rules (first match wins)", border_style="dim")
    rules_table.add_column("#", style="dim")
    rules_table.add_column("Matcher", style="info")
    rules_table.add_column("Access")
    for index, rule in enumerate(http.rules, start=1):
        access = rule.rule.rule_type.name.lower().replace("_", "-")
        rules_table.add_row(str(index), rule.describe(), Text(access, style=access))
    console.print(rules_table)

    cors = config.bind(CorsProperties)
    cors_table = Table(title="CORS policy", show_header=False, border_style="dim")
    cors_table.add_column("Setting", style="info")
    cors_table.add_column("Value")
    cors_table.add_row("Allowed origins", "\n".join(cors.allowed_origins))
    cors_table.add_row("Allowed methods", ", ".join(cors.allowed_methods))
    cors_table.add_row("Allowed headers", ", ".join(cors.allowed_headers))
    cors_table.add_row("Exposed headers", ", ".join(cors.exposed_headers))
    cors_table.add_row("Allow credentials", str(cors.allow_credentials).lower())
    cors_table.add_row("Max age", f"{cors.max_age}s")
    console.print(cors_table)
