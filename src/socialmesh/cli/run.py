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
"""'socialmesh run': start the application under uvicorn."""

from __future__ import annotations

import os

import click

from socialmesh.cli.console import console, print_error
from socialmesh.config.properties import WebProperties
from socialmesh.kernel.exceptions import ConfigurationException
from socialmesh.main import CONFIG_DIR_ENV, load_config

APP_FACTORY = "socialmesh.main:create_application"


@click.command()
@click.option("--host", default=None, help="Bind address (default: socialmesh.web.host).")
@click.option("--port", default=None, type=int, help="Port number (default: socialmesh.web.port).")
@click.option("--reload", "use_reload", is_flag=True, help="Enable auto-reload for development.")
@click.option(
    "--config-dir",
    default=None,
    type=click.Path(file_okay=False, exists=True),
    help="Directory holding socialmesh.yaml (default: current directory).",
)
def run_command(host: str | None, port: int | None, use_reload: bool, config_dir: str | None) -> None:
    """Start the SocialMesh application server."""
    import uvicorn

    if config_dir is not None:
        # read by create_application inside the (possibly reloaded) server process
        os.environ[CONFIG_DIR_ENV] = config_dir

    try:
        web = load_config(config_dir).bind(WebProperties)
    except ConfigurationException as exc:
        print_error(exc)
        raise SystemExit(1) from None

    host = host or web.host
    port = port or web.port
    console.print(f"[info]Starting SocialMesh on[/info] http://{host}:{port}")

    uvicorn.run(
        APP_FACTORY,
        factory=True,
        host=host,
        port=port,
        reload=use_reload,
        log_level="debug" if web.debug else "info",
    )
