# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Concrete configuration sources (defaults, TOML, pyproject)."""

from __future__ import annotations

import os
import re
import tomllib
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, MutableMapping
from pathlib import Path
from typing import Any, Final

from ..errors import ConfigError

DEFAULT_INCLUDE_KEY: Final[str] = "include"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "hookcfg"

EXPANDABLE_SETTINGS: Final[frozenset[str]] = frozenset({"git", "runner", "store_dir"})
EXPANDABLE_HOOK_FIELDS: Final[frozenset[str]] = frozenset({"extra_packages", "package"})

_ENV_VAR_PATTERN = re.compile(r"\$(\w+)|\$\{([^}]+)\}")


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` updated recursively with ``override``.

    Nested tables merge key by key; any other value in ``override`` wins.
    Keys keep the position they first appeared at.
    """

    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def expand_env(data: Mapping[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    """Expand ``$VAR`` and ``${VAR}`` references in path-like values of ``data``.

    Only the executable and store settings and each hook's package references
    are expanded. Hook entries, patterns and pass-through keys keep their
    ``$`` text so the hook's own shell and regex syntax reach the artifact.
    """

    result = dict(data)
    settings = result.get("settings")
    if isinstance(settings, Mapping):
        result["settings"] = _expand_keys(settings, EXPANDABLE_SETTINGS, env)
    hooks = result.get("hooks")
    if isinstance(hooks, Mapping):
        result["hooks"] = {
            hook_id: _expand_keys(hook, EXPANDABLE_HOOK_FIELDS, env) if isinstance(hook, Mapping) else hook
            for hook_id, hook in hooks.items()
        }
    return result


def _expand_keys(table: Mapping[str, Any], keys: frozenset[str], env: Mapping[str, str]) -> dict[str, Any]:
    return {key: _expand_env_value(value, env) if key in keys else value for key, value in table.items()}


def _expand_env_value(value: Any, env: Mapping[str, str]) -> Any:
    if isinstance(value, str):
        return _expand_env_string(value, env)
    if isinstance(value, Mapping):
        return {k: _expand_env_value(v, env) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env_value(v, env) for v in value]
    return value


def _expand_env_string(value: str, env: Mapping[str, str]) -> str:
    def _replace(match: re.Match[str]) -> str:
        key = match.group(1) or match.group(2)
        if key is None:
            return match.group(0)
        return env.get(key, match.group(0))

    return _ENV_VAR_PATTERN.sub(_replace, value)


class ConfigSource(ABC):
    """A named provider of raw configuration fragments."""

    name: str

    @abstractmethod
    def load(self) -> Mapping[str, Any]:
        """Return the raw configuration fragment, empty when absent."""


class DefaultConfigSource(ConfigSource):
    """Return the built-in defaults as a configuration fragment."""

    name = "defaults"

    def load(self) -> Mapping[str, Any]:
        return {}


class TomlConfigSource(ConfigSource):
    """Load configuration data from a TOML document with include support."""

    def __init__(
        self,
        path: Path,
        *,
        name: str | None = None,
        include_key: str = DEFAULT_INCLUDE_KEY,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._root_path = path
        self.name = name or str(path)
        self._include_key = include_key
        self._env = env if env is not None else os.environ

    @property
    def path(self) -> Path:
        return self._root_path

    def load(self) -> Mapping[str, Any]:
        return self._load(self._root_path, ())

    def _load(self, path: Path, stack: tuple[Path, ...]) -> Mapping[str, Any]:
        if not path.exists():
            if stack:
                raise ConfigError(f"Included configuration not found: {path}")
            return {}
        resolved = path.resolve()
        if resolved in stack:
            include_chain = " -> ".join(str(entry) for entry in (*stack, resolved))
            raise ConfigError(f"Circular include detected: {include_chain}")
        try:
            with resolved.open("rb") as handle:
                data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
        if not isinstance(data, MutableMapping):
            raise ConfigError(f"Configuration at {path} must be a table")
        document: dict[str, Any] = dict(data) if stack else self._select(dict(data))
        includes = document.pop(self._include_key, None)
        merged: dict[str, Any] = {}
        for include_path in self._coerce_includes(includes, resolved.parent):
            fragment = self._load(include_path, stack + (resolved,))
            merged = deep_merge(merged, fragment)
        merged = deep_merge(merged, document)
        return expand_env(merged, self._env)

    def _select(self, data: dict[str, Any]) -> dict[str, Any]:
        """Return the part of the top-level document holding hookcfg settings."""

        return data

    def _coerce_includes(self, raw: Any, base_dir: Path) -> Iterable[Path]:
        if raw is None:
            return []
        if isinstance(raw, (str, Path)):
            return [self._resolve_path(Path(raw), base_dir)]
        if isinstance(raw, list):
            return [self._resolve_path(Path(item), base_dir) for item in raw]
        raise ConfigError(f"Unsupported include declaration: {raw!r}")

    @staticmethod
    def _resolve_path(path: Path, base_dir: Path) -> Path:
        return path if path.is_absolute() else (base_dir / path)


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.hookcfg]`` within ``pyproject.toml``."""

    def __init__(self, path: Path, *, env: Mapping[str, str] | None = None) -> None:
        super().__init__(path, name=str(path), env=env)

    def _select(self, data: dict[str, Any]) -> dict[str, Any]:
        tool_section = data.get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY)
        if not isinstance(section, Mapping):
            return {}
        return dict(section)


__all__ = [
    "DEFAULT_INCLUDE_KEY",
    "EXPANDABLE_HOOK_FIELDS",
    "EXPANDABLE_SETTINGS",
    "ConfigSource",
    "DefaultConfigSource",
    "PyProjectConfigSource",
    "TomlConfigSource",
    "deep_merge",
    "expand_env",
]
