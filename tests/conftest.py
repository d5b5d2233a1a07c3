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
"""Shared fixtures for the SocialMesh test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from socialmesh.core.config import Config
from socialmesh.security.jwt import JwtProvider

TEST_SECRET = "test-secret-key-minimum-32-chars!"

_SECRET_ENV_VARS = ("SOCIALMESH_JWT_SECRET", "SOCIALMESH_SECURITY_JWT_SECRET", "SOCIALMESH_PROFILES_ACTIVE")


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _SECRET_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def jwt_provider() -> JwtProvider:
    return JwtProvider(secret=TEST_SECRET)


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """A project directory whose socialmesh.yaml sets a test secret and cheap bcrypt rounds."""
    (tmp_path / "socialmesh.yaml").write_text(
        "socialmesh:\n"
        "  security:\n"
        "    password:\n"
        "      rounds: 4\n"
        "    jwt:\n"
        f"      secret: {TEST_SECRET}\n"
    )
    return tmp_path


@pytest.fixture
def app_config(config_dir: Path) -> Config:
    return Config.from_sources(config_dir)
