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
"""Configuration with YAML/TOML files, env vars, and dataclass binding.

Lookup order for a dot-notation key (highest wins):

1. ``FLYHELMET_*`` environment variables, e.g. ``FLYHELMET_MODE`` for
   ``flyhelmet.mode``
2. values from the loaded files, with profile overlays merged on top
3. dataclass defaults, when binding
"""

from __future__ import annotations

import dataclasses
import os
import re
import tomllib
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any, TypeVar, get_type_hints

import yaml  # type: ignore[import-untyped]

T = TypeVar("T")

ENV_PREFIX = "FLYHELMET_"

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")
_MAX_PLACEHOLDER_DEPTH = 10
_CONFIG_PROPERTIES_ATTR = "__flyhelmet_config_prefix__"

_SCALAR_CONVERTERS: dict[type, Callable[[str], Any]] = {
    str: str,
    int: int,
    float: float,
    bool: lambda raw: raw.lower() in ("true", "1", "yes", "on"),
}


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a dataclass as bindable to a configuration prefix.

    Usage:
        @config_properties(prefix="flyhelmet")
        @dataclass
        class HelmetProperties:
            mode: str = "development"
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


def env_key(key: str) -> str:
    """Return the environment variable that overrides *key*."""
    name = key.removeprefix("flyhelmet.").upper().replace(".", "_").replace("-", "_")
    return ENV_PREFIX + name


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return *base* with *override* merged in; nested dicts merge, other values replace."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _read_file(path: Path) -> dict[str, Any]:
    if path.suffix == ".toml":
        with open(path, "rb") as f:
            return tomllib.load(f)
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _profile_paths(path: Path, profiles: list[str]) -> Iterator[tuple[str, Path]]:
    for profile in profiles:
        overlay = path.with_name(f"{path.stem}-{profile}{path.suffix}")
        if overlay.exists():
            yield profile, overlay


class Config:
    """Hierarchical configuration with dot-notation access and env var overrides."""

    def __init__(self, data: dict[str, Any] | None = None, sources: list[str] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._sources: list[str] = list(sources or [])

    @classmethod
    def from_file(cls, path: str | Path, active_profiles: list[str] | None = None) -> Config:
        """Load a YAML or TOML file plus profile overlays.

        For ``flyhelmet.yaml`` and profile ``prod`` the overlay
        ``flyhelmet-prod.yaml`` next to it is merged on top, if present.
        A missing base file yields an empty configuration.
        """
        path = Path(path)
        if not path.exists():
            return cls()

        data = _read_file(path)
        sources = [str(path)]
        for profile, overlay in _profile_paths(path, active_profiles or []):
            data = deep_merge(data, _read_file(overlay))
            sources.append(f"{overlay} (profile: {profile})")
        return cls(data, sources)

    @property
    def loaded_sources(self) -> list[str]:
        """Config files that were loaded, in merge order."""
        return list(self._sources)

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow copy of the raw configuration data."""
        return dict(self._data)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key, checking env vars first.

        String values may hold ``${NAME}`` or ``${NAME:default}``
        placeholders; ``NAME`` is looked up in the environment, then as a
        config key.
        """
        env_val = os.environ.get(env_key(key))
        if env_val is not None:
            return env_val

        value = self._lookup(key)
        if value is None:
            return default
        if isinstance(value, str):
            return self._expand(value, depth=0)
        return value

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Get the mapping stored under *prefix*, or an empty dict."""
        section = self._lookup(prefix)
        return section if isinstance(section, dict) else {}

    def bind(self, config_cls: type[T]) -> T:
        """Bind configuration to a ``@config_properties`` dataclass.

        Scalar fields (str, int, float, bool) go through :meth:`get`, so env
        vars override them and string values are converted. Other fields are
        taken from the section as-is.
        """
        prefix = getattr(config_cls, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        section = self.get_section(prefix)
        hints = get_type_hints(config_cls)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            expected = hints.get(field.name)
            if expected in _SCALAR_CONVERTERS:
                value = self.get(f"{prefix}.{field.name}")
                if isinstance(value, str):
                    value = _SCALAR_CONVERTERS[expected](value)
            else:
                value = section.get(field.name)
            if value is not None:
                kwargs[field.name] = value
        return config_cls(**kwargs)

    def _lookup(self, key: str) -> Any:
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict):
                return None
            node = node.get(part)
        return node

    def _expand(self, value: str, depth: int) -> str:
        if "${" not in value:
            return value
        if depth > _MAX_PLACEHOLDER_DEPTH:
            raise ValueError(f"Placeholders in '{value}' nest too deeply; check for circular references")

        def _replace(match: re.Match[str]) -> str:
            name, _, fallback = match.group(1).partition(":")
            env_val = os.environ.get(name)
            if env_val is not None:
                return env_val
            ref = self._lookup(name)
            if ref is not None:
                return self._expand(str(ref), depth + 1)
            if ":" in match.group(1):
                return fallback
            raise ValueError(f"Cannot resolve placeholder '${{{name}}}': not found in environment or config")

        return _PLACEHOLDER_RE.sub(_replace, value)
