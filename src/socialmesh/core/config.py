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
"""Layered configuration: packaged defaults, project files, profiles, and the environment.

Keys are dotted paths (``socialmesh.security.jwt.secret``).  Values come
from, lowest priority first:

1. ``socialmesh-defaults.yaml`` shipped in :mod:`socialmesh.resources`
2. ``config/socialmesh.{yaml,toml}`` then ``socialmesh.{yaml,toml}``
3. profile overlays ``socialmesh-{profile}.{yaml,toml}`` in the same places
4. ``SOCIALMESH_*`` environment variables, consulted on every read

String values may embed ``${NAME}`` or ``${NAME:fallback}`` placeholders,
where ``NAME`` is an environment variable or another dotted key.
"""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import re
import tomllib
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any, TypeVar, get_args, get_origin, get_type_hints

import yaml  # type: ignore[import-untyped]

from socialmesh.kernel.exceptions import ConfigurationException

T = TypeVar("T")

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")
_PREFIX_ATTR = "__socialmesh_config_prefix__"
_ENV_PREFIX = "SOCIALMESH_"
_DEFAULTS_RESOURCE = "socialmesh-defaults.yaml"
_MAX_PLACEHOLDER_DEPTH = 10
_MISSING = object()


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Declare the configuration prefix a properties dataclass binds to.

    Usage::

        @config_properties(prefix="socialmesh.web")
        @dataclass
        class WebProperties:
            port: int = 5454

        web = config.bind(WebProperties)
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _PREFIX_ATTR, prefix)
        return cls

    return decorator


def env_key_for(key: str) -> str:
    """Return the environment variable that overrides *key*.

    ``socialmesh.security.jwt.secret`` -> ``SOCIALMESH_SECURITY_JWT_SECRET``
    """
    base = key.removeprefix("socialmesh.")
    return _ENV_PREFIX + base.upper().replace(".", "_").replace("-", "_")


def _lookup(data: Any, key: str) -> Any:
    for part in key.split("."):
        if not isinstance(data, dict) or data.get(part) is None:
            return _MISSING
        data = data[part]
    return data


def _merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _read_file(path: Path) -> dict[str, Any]:
    if path.suffix == ".toml":
        with open(path, "rb") as f:
            return tomllib.load(f)
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _project_files(base_dir: Path, stem: str) -> Iterator[Path]:
    for directory in (base_dir / "config", base_dir):
        for suffix in (".yaml", ".toml"):
            candidate = directory / f"{stem}{suffix}"
            if candidate.is_file():
                yield candidate


class Config:
    """Read-only view over merged configuration data.

    Build one with :meth:`from_sources` (a project directory),
    :meth:`from_file` (one explicit file) or :meth:`defaults`, or pass a
    plain dict for tests.
    """

    def __init__(self, data: dict[str, Any] | None = None, sources: list[str] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._sources: list[str] = sources or []

    @property
    def loaded_sources(self) -> list[str]:
        """Files merged into this configuration, lowest priority first."""
        return list(self._sources)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    # -- construction -------------------------------------------------------

    @classmethod
    def defaults(cls) -> Config:
        """Only the packaged defaults."""
        return cls(cls._packaged_defaults(), [f"{_DEFAULTS_RESOURCE} (packaged defaults)"])

    @classmethod
    def from_sources(
        cls,
        base_dir: str | Path,
        active_profiles: list[str] | None = None,
        load_defaults: bool = True,
    ) -> Config:
        """Merge every configuration file found for the project in *base_dir*."""
        base_dir = Path(base_dir)
        config = cls.defaults() if load_defaults else cls()

        for path in _project_files(base_dir, "socialmesh"):
            config._overlay(path)
        for profile in active_profiles or []:
            for path in _project_files(base_dir, f"socialmesh-{profile}"):
                config._overlay(path, f"profile: {profile}")
        return config

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        active_profiles: list[str] | None = None,
        load_defaults: bool = True,
    ) -> Config:
        """Load one file (plus its ``{stem}-{profile}`` siblings) over the defaults.

        A file named ``socialmesh.yaml`` or ``socialmesh.toml`` loads its whole
        project directory through :meth:`from_sources` instead.
        """
        path = Path(path)
        if path.stem == "socialmesh":
            return cls.from_sources(path.parent, active_profiles, load_defaults)

        config = cls.defaults() if load_defaults else cls()
        if path.is_file():
            config._overlay(path)
            for profile in active_profiles or []:
                sibling = path.with_name(f"{path.stem}-{profile}{path.suffix}")
                if sibling.is_file():
                    config._overlay(sibling, f"profile: {profile}")
        return config

    @staticmethod
    def _packaged_defaults() -> dict[str, Any]:
        resource = importlib.resources.files("socialmesh.resources").joinpath(_DEFAULTS_RESOURCE)
        return yaml.safe_load(resource.read_text(encoding="utf-8")) or {}

    def _overlay(self, path: Path, note: str | None = None) -> None:
        self._data = _merge(self._data, _read_file(path))
        self._sources.append(f"{path} ({note})" if note else str(path))

    # -- reading ------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """Value at dotted *key*; the matching ``SOCIALMESH_*`` variable wins.

        Raises:
            ConfigurationException: If a placeholder in the value cannot be resolved.
        """
        override = os.environ.get(env_key_for(key))
        if override is not None:
            return override

        value = _lookup(self._data, key)
        if value is _MISSING:
            return default
        if isinstance(value, str) and "${" in value:
            return self._resolve(value, depth=0)
        return value

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Raw mapping stored under *prefix*, or an empty dict."""
        section = _lookup(self._data, prefix)
        return section if isinstance(section, dict) else {}

    def _resolve(self, value: str, depth: int) -> str:
        if depth > _MAX_PLACEHOLDER_DEPTH:
            raise ConfigurationException(
                f"Placeholders in '{value}' nest too deeply; check for a circular reference",
                code="UNRESOLVED_PLACEHOLDER",
            )

        def substitute(match: re.Match[str]) -> str:
            name, has_fallback, fallback = match.group(1).partition(":")
            if name in os.environ:
                return os.environ[name]
            referenced = _lookup(self._data, name)
            if referenced is not _MISSING:
                text = str(referenced)
                return self._resolve(text, depth + 1) if "${" in text else text
            if has_fallback:
                return fallback
            raise ConfigurationException(
                f"Cannot resolve placeholder '${{{match.group(1)}}}': not found in environment or config",
                code="UNRESOLVED_PLACEHOLDER",
            )

        return _PLACEHOLDER_RE.sub(substitute, value)

    # -- binding ------------------------------------------------------------

    def bind(self, config_cls: type[T]) -> T:
        """Build a ``@config_properties`` dataclass from its section.

        Fields may be spelled kebab-case (``any-request``) or snake_case in
        the files.  Each field is read through :meth:`get`, so environment
        overrides and placeholders apply, and string values are coerced to
        the field's annotated type.

        Raises:
            ConfigurationException: If *config_cls* has no prefix, or a value
                cannot be converted.
        """
        prefix = getattr(config_cls, _PREFIX_ATTR, None)
        if prefix is None or not dataclasses.is_dataclass(config_cls):
            raise ConfigurationException(f"{config_cls.__name__} is not a @config_properties dataclass")

        section = self.get_section(prefix)
        hints = get_type_hints(config_cls)
        values: dict[str, Any] = {}
        for f in dataclasses.fields(config_cls):
            kebab = f.name.replace("_", "-")
            value = self.get(f"{prefix}.{kebab if kebab in section else f.name}")
            if value is None:
                continue
            try:
                values[f.name] = _coerce(value, hints.get(f.name))
            except ValueError as exc:
                raise ConfigurationException(
                    f"Invalid value {value!r} for '{prefix}.{kebab}': {exc}",
                    code="INVALID_PROPERTY",
                ) from exc
        return config_cls(**values)


def _coerce(value: Any, expected: Any) -> Any:
    """Convert string values (usually from the environment) to *expected*."""
    if not isinstance(value, str):
        return value
    if expected is bool:
        return value.strip().lower() in ("true", "1", "yes", "on")
    if expected in (int, float):
        return expected(value)
    if get_origin(expected) is list and get_args(expected) == (str,):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value
