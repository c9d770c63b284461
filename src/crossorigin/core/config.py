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
"""Configuration from YAML/TOML files and env vars, with dataclass binding."""

from __future__ import annotations

import dataclasses
import os
import re
import tomllib
import types
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, Union, get_args, get_origin, get_type_hints

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError

from crossorigin.kernel.exceptions import ConfigurationException

T = TypeVar("T")

ENV_PREFIX = "CROSSORIGIN_"

_ROOT_KEY = "crossorigin."

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")

_CONFIG_PROPERTIES_ATTR = "__crossorigin_config_prefix__"

_MAX_PLACEHOLDER_DEPTH = 10


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a class as bindable to a configuration prefix.

    Works with both dataclasses and Pydantic BaseModel subclasses.

    Usage:
        @config_properties(prefix="crossorigin.cors")
        @dataclass
        class CorsProperties:
            allowed_origins: list[str] = field(default_factory=list)
            max_age: int | None = None
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


def env_key_for(key: str) -> str:
    """Return the environment variable that overrides a dot-notation *key*.

    ``crossorigin.cors.max_age`` -> ``CROSSORIGIN_CORS_MAX_AGE``
    """
    base = key.removeprefix(_ROOT_KEY)
    return ENV_PREFIX + base.upper().replace(".", "_").replace("-", "_")


class Config:
    """Hierarchical configuration with dot-notation access and env var overrides.

    Priority (highest wins):
    1. Environment variables (CROSSORIGIN_SECTION_KEY format)
    2. Profile overlay files, then the base file / dict
    3. Dataclass defaults
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._loaded_sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        """Config file paths that were loaded, in merge order."""
        return list(self._loaded_sources)

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow copy of the raw configuration data."""
        return dict(self._data)

    @classmethod
    def from_file(cls, path: str | Path, active_profiles: list[str] | None = None) -> Config:
        """Load configuration from a YAML or TOML file.

        For each active profile, ``<stem>-<profile><suffix>`` next to *path*
        is merged on top when it exists.  A missing base file yields an
        empty configuration.
        """
        path = Path(path)
        data: dict[str, Any] = {}
        sources: list[str] = []

        if path.is_file():
            data = cls._load_config_data(path)
            sources.append(str(path))

        for profile in active_profiles or []:
            profile_path = path.parent / f"{path.stem}-{profile}{path.suffix}"
            if profile_path.is_file():
                data = cls._deep_merge(data, cls._load_config_data(profile_path))
                sources.append(f"{profile_path} (profile: {profile})")

        instance = cls(data)
        instance._loaded_sources = sources
        return instance

    @staticmethod
    def _load_config_data(path: Path) -> dict[str, Any]:
        try:
            if path.suffix == ".toml":
                with open(path, "rb") as f:
                    return tomllib.load(f) or {}
            with open(path) as f:
                return yaml.safe_load(f) or {}
        except (tomllib.TOMLDecodeError, yaml.YAMLError) as exc:
            raise ConfigurationException(
                f"Cannot parse configuration file '{path}': {exc}",
                code="CONFIG_PARSE_ERROR",
                context={"path": str(path)},
            ) from exc

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Recursively merge override into base, with override values winning."""
        merged = dict(base)
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = Config._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key, checking env vars first.

        String values containing ``${...}`` placeholders are resolved:
        - ``${ENV_VAR}`` from environment variables
        - ``${config.key}`` from other config values
        - ``${key:default}`` falls back to *default* when neither is found
        """
        env_val = os.environ.get(env_key_for(key))
        if env_val is not None:
            return env_val

        current = self._lookup(key)
        if current is None:
            return default

        if isinstance(current, str) and "${" in current:
            return self._resolve_placeholders(current)
        return current

    def _lookup(self, key: str) -> Any:
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            current = current.get(part)
            if current is None:
                return None
        return current

    def _resolve_placeholders(self, value: str, _depth: int = 0) -> str:
        if _depth > _MAX_PLACEHOLDER_DEPTH:
            raise ConfigurationException(
                f"Max recursion depth exceeded resolving placeholders in '{value}'",
                code="CONFIG_PLACEHOLDER_CYCLE",
            )

        def _replace(match: re.Match[str]) -> str:
            inner = match.group(1)
            ref_key, _, default_val = inner.partition(":")
            has_default = ":" in inner

            env_val = os.environ.get(ref_key)
            if env_val is not None:
                return env_val

            current = self._lookup(ref_key)
            if current is not None:
                resolved = str(current)
                if "${" in resolved:
                    resolved = self._resolve_placeholders(resolved, _depth + 1)
                return resolved

            if has_default:
                return default_val

            raise ConfigurationException(
                f"Cannot resolve placeholder '${{{inner}}}': not found in environment or config",
                code="CONFIG_PLACEHOLDER_UNRESOLVED",
                context={"placeholder": inner},
            )

        return _PLACEHOLDER_RE.sub(_replace, value)

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Get the raw mapping stored under *prefix* (no env overrides)."""
        current = self._lookup(prefix)
        return current if isinstance(current, dict) else {}

    def bind(self, config_cls: type[T]) -> T:
        """Bind configuration to a ``@config_properties`` dataclass or Pydantic model.

        Every field is read through :meth:`get`, so environment variables and
        placeholders apply to bound values as well.
        """
        prefix = getattr(config_cls, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ConfigurationException(
                f"{config_cls.__name__} is not decorated with @config_properties",
                code="CONFIG_NOT_BINDABLE",
            )

        if isinstance(config_cls, type) and issubclass(config_cls, BaseModel):
            data = {
                name: value
                for name in config_cls.model_fields
                if (value := self.get(f"{prefix}.{name}")) is not None
            }
            try:
                return config_cls.model_validate(data)  # type: ignore[return-value]
            except ValidationError as exc:
                raise ConfigurationException(
                    f"Configuration validation failed for '{config_cls.__name__}' (prefix='{prefix}'):\n{exc}",
                    code="CONFIG_VALIDATION_ERROR",
                    context={"prefix": prefix, "errors": exc.errors()},
                ) from exc

        hints = get_type_hints(config_cls)
        kwargs: dict[str, Any] = {}
        for f in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            value = self.get(f"{prefix}.{f.name}")
            if value is None:
                continue
            try:
                kwargs[f.name] = _coerce(value, hints.get(f.name))
            except ValueError as exc:
                raise ConfigurationException(
                    f"Invalid value {value!r} for '{prefix}.{f.name}': {exc}",
                    code="CONFIG_VALIDATION_ERROR",
                    context={"prefix": prefix, "field": f.name},
                ) from exc

        return config_cls(**kwargs)


def _coerce(value: Any, expected_type: Any) -> Any:
    """Coerce string values (env vars, placeholders) to the declared field type."""
    origin = get_origin(expected_type)
    if origin in (Union, types.UnionType):
        members = [arg for arg in get_args(expected_type) if arg is not type(None)]
        if len(members) == 1:
            return _coerce(value, members[0])
        return value

    if not isinstance(value, str):
        return value
    if expected_type is bool:
        return value.strip().lower() in ("true", "1", "yes")
    if expected_type is int:
        return int(value)
    if expected_type is float:
        return float(value)
    if expected_type is list or origin is list:
        return [part.strip() for part in value.split(",") if part.strip()]
    return value
