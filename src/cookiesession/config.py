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
"""Configuration with YAML/TOML files, env vars, and Pydantic binding."""

from __future__ import annotations

import os
import re
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, Literal, TypeVar, cast, get_origin

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, Field, ValidationError, field_validator

M = TypeVar("M", bound=BaseModel)

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")

_CONFIG_PROPERTIES_ATTR = "__cookiesession_config_prefix__"

_ENV_PREFIX = "COOKIESESSION_"


def config_properties(prefix: str) -> Callable[[type[M]], type[M]]:
    """Mark a class as bindable to a configuration prefix.

    Decorated Pydantic models are validated by :meth:`Config.bind`, so bad
    values fail fast at startup.

    Usage:
        @config_properties(prefix="cookiesession")
        class SessionProperties(BaseModel):
            rolling: bool = False
    """

    def decorator(cls: type[M]) -> type[M]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


class Config:
    """Hierarchical configuration with dot-notation access and env var overrides.

    Priority (highest wins):
    1. Environment variables (COOKIESESSION_SECTION_KEY format)
    2. Configuration dict / YAML file values
    3. Model defaults
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow copy of the raw configuration data."""
        return dict(self._data)

    @classmethod
    def from_file(cls, path: str | Path, active_profiles: list[str] | None = None) -> Config:
        """Load configuration from a YAML or TOML file plus profile overlays.

        ``session.yaml`` with profile ``dev`` also merges ``session-dev.yaml``
        from the same directory when it exists.
        """
        path = Path(path)
        data: dict[str, Any] = {}
        if path.exists():
            data = cls._load_config_data(path)
            for profile in active_profiles or []:
                profile_path = path.parent / f"{path.stem}-{profile}{path.suffix}"
                if profile_path.exists():
                    data = cls._deep_merge(data, cls._load_config_data(profile_path))
        return cls(data)

    @staticmethod
    def _load_config_data(path: Path) -> dict[str, Any]:
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                return tomllib.load(f) or {}
        with open(path) as f:
            return yaml.safe_load(f) or {}

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

        String values containing ``${...}`` placeholders are resolved from
        the environment, from other config keys, or from a ``:default``.
        """
        env_val = os.environ.get(_env_key(key))
        if env_val is not None:
            return env_val

        current = self._walk(key)
        if current is None:
            return default

        if isinstance(current, str) and "${" in current:
            return self._resolve_placeholders(current)

        return current

    def _walk(self, key: str) -> Any:
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            current = current.get(part)
            if current is None:
                return None
        return current

    def _resolve_placeholders(self, value: str, _depth: int = 0) -> str:
        """Resolve ``${...}`` placeholders, guarding against circular references."""
        if _depth > 10:
            raise ValueError(
                f"Max recursion depth exceeded resolving placeholders in '{value}'. Check for circular references."
            )

        def _replace(match: re.Match[str]) -> str:
            inner = match.group(1)
            if ":" in inner:
                ref_key, default_val = inner.split(":", 1)
            else:
                ref_key, default_val = inner, None

            env_val = os.environ.get(ref_key)
            if env_val is not None:
                return env_val

            current = self._walk(ref_key)
            if current is not None:
                resolved = str(current)
                if "${" in resolved:
                    resolved = self._resolve_placeholders(resolved, _depth + 1)
                return resolved

            if default_val is not None:
                return cast(str, default_val)

            raise ValueError(f"Cannot resolve placeholder '${{{inner}}}': not found in environment or config")

        return _PLACEHOLDER_RE.sub(_replace, value)

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Get all values under a prefix as a nested dict."""
        current = self._walk(prefix)
        return current if isinstance(current, dict) else {}

    def bind(self, config_cls: type[M]) -> M:
        """Bind configuration to a @config_properties Pydantic model.

        Placeholders in the section are resolved and ``COOKIESESSION_*``
        environment variables override the matching scalar or list fields
        before validation.
        """
        prefix = getattr(config_cls, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        section = self._resolve_section(self.get_section(prefix))
        _apply_env_overrides(section, config_cls, prefix)

        try:
            return config_cls.model_validate(section)
        except ValidationError as exc:
            raise ValueError(
                f"Configuration validation failed for '{config_cls.__name__}' (prefix='{prefix}'):\n{exc}"
            ) from exc

    def _resolve_section(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {k: self._resolve_section(v) for k, v in value.items()}
        if isinstance(value, list):
            return [self._resolve_section(v) for v in value]
        if isinstance(value, str) and "${" in value:
            return self._resolve_placeholders(value)
        return value


def _env_key(key: str) -> str:
    """``cookiesession.cookie.max-age`` -> ``COOKIESESSION_COOKIE_MAX_AGE``."""
    env_base = key.removeprefix("cookiesession.")
    return _ENV_PREFIX + env_base.upper().replace(".", "_").replace("-", "_")


def _apply_env_overrides(section: dict[str, Any], model_cls: type[BaseModel], prefix: str) -> None:
    for name, field in model_cls.model_fields.items():
        key = f"{prefix}.{name}"
        annotation = field.annotation
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            nested = section.get(name)
            if not isinstance(nested, dict):
                nested = {}
            _apply_env_overrides(nested, annotation, key)
            if nested:
                section[name] = nested
            continue
        if get_origin(annotation) is dict:
            continue
        env_val = os.environ.get(_env_key(key))
        if env_val is None:
            continue
        if get_origin(annotation) is list:
            section[name] = [item.strip() for item in env_val.split(",") if item.strip()]
        else:
            section[name] = env_val


class CookieProperties(BaseModel):
    """Attributes of the session cookie (cookiesession.cookie.*)."""

    name: str = "__session"
    secrets: list[str] = Field(default_factory=list)
    max_age: int | None = Field(default=None, ge=0)
    path: str = "/"
    domain: str | None = None
    secure: bool = False
    http_only: bool = False
    same_site: Literal["lax", "strict", "none"] | None = "lax"


class RedisProperties(BaseModel):
    url: str = "redis://localhost:6379/0"
    key_prefix: str = "cookiesession:session:"


@config_properties(prefix="cookiesession")
class SessionProperties(BaseModel):
    """Configuration for managed sessions (cookiesession.*)."""

    enabled: bool = True
    rolling: bool = False
    store: Literal["cookie", "memory", "redis"] = "cookie"
    cookie: CookieProperties = Field(default_factory=CookieProperties)
    redis: RedisProperties = Field(default_factory=RedisProperties)


@config_properties(prefix="cookiesession.logging")
class LoggingProperties(BaseModel):
    """Logging setup (cookiesession.logging.*).

    ``level`` maps logger names to levels; the ``root`` entry sets the
    default level.
    """

    level: dict[str, str] = Field(default_factory=lambda: {"root": "INFO"})
    format: Literal["console", "json"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _upper_levels(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {str(k): str(v).upper() for k, v in value.items()}
        return value

    @field_validator("format", mode="before")
    @classmethod
    def _lower_format(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @property
    def root_level(self) -> str:
        return self.level.get("root", "INFO")

    @property
    def module_levels(self) -> dict[str, str]:
        return {name: level for name, level in self.level.items() if name != "root"}
