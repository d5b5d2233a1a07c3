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
"""Tests for Config loading, environment overrides, placeholders, and property binding."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from socialmesh.config.properties import CorsProperties, JwtProperties, SecurityProperties, WebProperties
from socialmesh.core.config import Config, config_properties, env_key_for
from socialmesh.kernel.exceptions import ConfigurationException


@config_properties(prefix="socialmesh.feed")
@dataclass
class FeedProperties:
    page_size: int = 20
    ratio: float = 0.5
    enabled: bool = False
    sources: list[str] = field(default_factory=list)


class TestConfigGet:
    def test_get_nested_value(self):
        config = Config({"socialmesh": {"web": {"port": 8080}}})
        assert config.get("socialmesh.web.port") == 8080

    def test_get_with_default(self):
        assert Config({}).get("missing.key", "default") == "default"

    def test_false_values_returned(self):
        config = Config({"socialmesh": {"web": {"debug": False}}})
        assert config.get("socialmesh.web.debug", True) is False

    def test_env_var_override(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SOCIALMESH_APP_NAME", "env-service")
        config = Config({"socialmesh": {"app": {"name": "file-service"}}})
        assert config.get("socialmesh.app.name") == "env-service"

    @pytest.mark.parametrize(
        ("key", "env"),
        [
            ("socialmesh.security.jwt.secret", "SOCIALMESH_SECURITY_JWT_SECRET"),
            ("socialmesh.web.cors.allowed-origins", "SOCIALMESH_WEB_CORS_ALLOWED_ORIGINS"),
            ("app.name", "SOCIALMESH_APP_NAME"),
        ],
    )
    def test_env_key_for(self, key, env):
        assert env_key_for(key) == env

    def test_get_section(self):
        config = Config({"socialmesh": {"web": {"host": "localhost", "port": 1}}})
        assert config.get_section("socialmesh.web") == {"host": "localhost", "port": 1}
        assert config.get_section("socialmesh.missing") == {}


class TestPlaceholders:
    def test_placeholder_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("FEED_HOST", "feeds.example")
        config = Config({"socialmesh": {"feed": {"url": "https://${FEED_HOST}/v1"}}})
        assert config.get("socialmesh.feed.url") == "https://feeds.example/v1"

    def test_placeholder_from_config(self):
        config = Config({"socialmesh": {"app": {"name": "mesh"}, "feed": {"title": "${socialmesh.app.name} feed"}}})
        assert config.get("socialmesh.feed.title") == "mesh feed"

    def test_placeholder_default(self):
        config = Config({"socialmesh": {"feed": {"url": "${FEED_URL_NOT_SET:http://localhost}"}}})
        assert config.get("socialmesh.feed.url") == "http://localhost"

    def test_empty_placeholder_default(self):
        config = Config({"socialmesh": {"feed": {"token": "${FEED_TOKEN_NOT_SET:}"}}})
        assert config.get("socialmesh.feed.token") == ""

    def test_unresolved_placeholder(self):
        config = Config({"socialmesh": {"feed": {"url": "${FEED_URL_NOT_SET}"}}})
        with pytest.raises(ConfigurationException) as exc_info:
            config.get("socialmesh.feed.url")
        assert exc_info.value.code == "UNRESOLVED_PLACEHOLDER"

    def test_circular_placeholder(self):
        config = Config({"a": "${b}", "b": "${a}"})
        with pytest.raises(ConfigurationException):
            config.get("a")


class TestSources:
    def test_packaged_defaults(self):
        config = Config.defaults()
        assert config.get("socialmesh.web.port") == 5454
        assert config.get("socialmesh.security.any-request") == "permit-all"
        assert "https://zosh-social.vercel.app" in config.get("socialmesh.web.cors.allowed-origins")

    def test_project_file_overrides_defaults(self, tmp_path: Path):
        (tmp_path / "socialmesh.yaml").write_text("socialmesh:\n  web:\n    port: 9090\n")
        config = Config.from_sources(tmp_path)

        assert config.get("socialmesh.web.port") == 9090
        assert config.get("socialmesh.web.host") == "0.0.0.0"
        assert config.loaded_sources[-1] == str(tmp_path / "socialmesh.yaml")

    def test_config_dir_and_toml(self, tmp_path: Path):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "socialmesh.toml").write_text('[socialmesh.app]\nname = "from-toml"\n')
        assert Config.from_sources(tmp_path).get("socialmesh.app.name") == "from-toml"

    def test_root_file_wins_over_config_dir(self, tmp_path: Path):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "socialmesh.yaml").write_text("socialmesh:\n  app:\n    name: inner\n")
        (tmp_path / "socialmesh.yaml").write_text("socialmesh:\n  app:\n    name: outer\n")
        assert Config.from_sources(tmp_path).get("socialmesh.app.name") == "outer"

    def test_profile_overlay(self, tmp_path: Path):
        (tmp_path / "socialmesh.yaml").write_text("socialmesh:\n  web:\n    port: 8080\n    host: localhost\n")
        (tmp_path / "socialmesh-dev.yaml").write_text("socialmesh:\n  web:\n    port: 9090\n    debug: true\n")

        config = Config.from_sources(tmp_path, active_profiles=["dev"])
        assert config.get("socialmesh.web.port") == 9090
        assert config.get("socialmesh.web.host") == "localhost"
        assert config.get("socialmesh.web.debug") is True

    def test_from_file_with_arbitrary_name(self, tmp_path: Path):
        path = tmp_path / "settings.yaml"
        path.write_text("socialmesh:\n  app:\n    name: custom\n")
        config = Config.from_file(path, load_defaults=False)
        assert config.get("socialmesh.app.name") == "custom"
        assert config.get("socialmesh.web.port") is None

    def test_missing_files_leave_defaults(self, tmp_path: Path):
        assert Config.from_sources(tmp_path).get("socialmesh.web.port") == 5454


class TestBind:
    def test_bind_kebab_and_snake_keys(self):
        config = Config({"socialmesh": {"feed": {"page-size": 50, "ratio": 0.25}}})
        props = config.bind(FeedProperties)
        assert props.page_size == 50
        assert props.ratio == 0.25

    def test_bind_uses_defaults(self):
        props = Config({}).bind(FeedProperties)
        assert props == FeedProperties()

    def test_env_values_coerced(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SOCIALMESH_FEED_PAGE_SIZE", "75")
        monkeypatch.setenv("SOCIALMESH_FEED_RATIO", "0.75")
        monkeypatch.setenv("SOCIALMESH_FEED_ENABLED", "true")
        monkeypatch.setenv("SOCIALMESH_FEED_SOURCES", "a, b,,c")

        props = Config({}).bind(FeedProperties)
        assert props.page_size == 75
        assert props.ratio == 0.75
        assert props.enabled is True
        assert props.sources == ["a", "b", "c"]

    def test_undecorated_class_rejected(self):
        @dataclass
        class Plain:
            x: int = 1

        with pytest.raises(ConfigurationException):
            Config({}).bind(Plain)

    def test_bind_packaged_defaults(self):
        config = Config.defaults()

        web = config.bind(WebProperties)
        assert (web.host, web.port, web.debug) == ("0.0.0.0", 5454, False)

        cors = config.bind(CorsProperties)
        assert cors.allow_credentials is True
        assert cors.max_age == 3600
        assert cors.mapping_allowed_headers == ["*"]

        security = config.bind(SecurityProperties)
        assert security.auth_path == "/auth/**"
        assert security.any_request == "permit-all"

        jwt = config.bind(JwtProperties)
        assert jwt.secret == ""
        assert jwt.issuer == "socialmesh"

    def test_jwt_secret_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SOCIALMESH_JWT_SECRET", "from-placeholder-env")
        assert Config.defaults().bind(JwtProperties).secret == "from-placeholder-env"

        monkeypatch.setenv("SOCIALMESH_SECURITY_JWT_SECRET", "from-direct-override")
        assert Config.defaults().bind(JwtProperties).secret == "from-direct-override"

    def test_cors_origins_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SOCIALMESH_WEB_CORS_ALLOWED_ORIGINS", "https://a.example,https://b.example")
        cors = Config.defaults().bind(CorsProperties)
        assert cors.allowed_origins == ["https://a.example", "https://b.example"]
