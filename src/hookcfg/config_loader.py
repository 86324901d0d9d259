# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Config loading utilities with layered precedence."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError
from .loaders import ConfigSource, DefaultConfigSource, PyProjectConfigSource, TomlConfigSource, deep_merge
from .models import HookConfig

PROJECT_CONFIG_NAME: Final[str] = "hookcfg.toml"
PYPROJECT_NAME: Final[str] = "pyproject.toml"


class ConfigLoadResult(BaseModel):
    """Container bundling a resolved config with the sources that shaped it."""

    model_config = ConfigDict(frozen=True)

    config: HookConfig
    sources: list[str] = Field(default_factory=list)


class ConfigLoader:
    """Apply layered configuration sources with predictable precedence."""

    def __init__(self, *, project_root: Path, sources: Sequence[ConfigSource]) -> None:
        if not sources:
            raise ValueError("at least one configuration source is required")
        self._sources = list(sources)
        self._project_root = project_root.resolve()

    @classmethod
    def for_root(cls, project_root: Path, *, project_config: Path | None = None) -> ConfigLoader:
        """Build a loader for ``project_root``.

        Without ``project_config`` the defaults are overlaid by
        ``[tool.hookcfg]`` in ``pyproject.toml`` and then by ``hookcfg.toml``.
        An explicit ``project_config`` replaces both project files.

        Raises:
            ConfigError: When ``project_config`` does not exist.
        """

        root = project_root.resolve()
        sources: list[ConfigSource] = [DefaultConfigSource()]
        if project_config is not None:
            if not project_config.exists():
                raise ConfigError(f"Configuration file not found: {project_config}")
            if project_config.name == PYPROJECT_NAME:
                sources.append(PyProjectConfigSource(project_config))
            else:
                sources.append(TomlConfigSource(project_config))
            return cls(project_root=root, sources=sources)

        pyproject = root / PYPROJECT_NAME
        if pyproject.exists():
            sources.append(PyProjectConfigSource(pyproject))
        project_file = root / PROJECT_CONFIG_NAME
        sources.append(TomlConfigSource(project_file, name=str(project_file)))
        return cls(project_root=root, sources=sources)

    def load(self) -> HookConfig:
        """Return the resolved configuration."""

        return self.load_with_trace().config

    def load_with_trace(self) -> ConfigLoadResult:
        """Return the resolved configuration and the sources that contributed.

        Raises:
            ConfigError: When the merged document fails validation.
        """

        merged: dict[str, Any] = {}
        contributed: list[str] = []
        for source in self._sources:
            if not (fragment := source.load()):
                continue
            merged = deep_merge(merged, fragment)
            contributed.append(source.name)
        config = build_config(merged)
        return ConfigLoadResult(config=self._anchor_paths(config), sources=contributed)

    def _anchor_paths(self, config: HookConfig) -> HookConfig:
        store_dir = config.settings.store_dir
        if store_dir is None or store_dir.is_absolute():
            return config
        settings = config.settings.model_copy(update={"store_dir": self._project_root / store_dir})
        return config.model_copy(update={"settings": settings})


def build_config(data: Mapping[str, Any]) -> HookConfig:
    """Validate raw mapping ``data`` into a :class:`HookConfig`.

    Raises:
        ConfigError: When validation fails.
    """

    try:
        return HookConfig.model_validate(dict(data))
    except ValidationError as exc:
        raise ConfigError(f"Invalid hook configuration:\n{exc}") from exc


def load_config(project_root: Path, *, project_config: Path | None = None) -> HookConfig:
    """Load configuration for ``project_root`` using the default tiered sources."""

    return ConfigLoader.for_root(project_root, project_config=project_config).load()


__all__ = [
    "PROJECT_CONFIG_NAME",
    "ConfigLoadResult",
    "ConfigLoader",
    "build_config",
    "load_config",
]
