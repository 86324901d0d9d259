# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typed hook registry models built from declarative configuration."""

from __future__ import annotations

import os
import shlex
from collections.abc import Iterable, Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, JsonValue, field_validator, model_validator

from .errors import ConfigError, DuplicateHookError
from .merge import MATCH_NOTHING, merge_excludes
from .stages import DEFAULT_STAGE, validate_stages

DEFAULT_CONFIG_FILE: Final[str] = ".pre-commit-config.yaml"
DEFAULT_RUNNER: Final[str] = "pre-commit"
DEFAULT_GIT: Final[str] = "git"

# Keys of the raw form computed from typed fields; ``extra`` may not shadow them.
_RESERVED_RAW_KEYS: Final[frozenset[str]] = frozenset({"id"})


def default_store_dir() -> Path:
    """Return the default artifact store under the user cache directory."""

    cache_home = os.environ.get("XDG_CACHE_HOME")
    base = Path(cache_home) if cache_home else Path.home() / ".cache"
    return base / "hookcfg" / "store"


class Invocation(BaseModel):
    """Executable plus arguments that a hook runs."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    command: str
    args: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _split_command_line(cls, value: Any) -> Any:
        if isinstance(value, str):
            parts = shlex.split(value)
            if not parts:
                raise ValueError("entry must not be empty")
            return {"command": parts[0], "args": parts[1:]}
        return value

    def argv(self) -> list[str]:
        """Return the invocation as an argument vector."""

        return [self.command, *self.args]


class HookDefinition(BaseModel):
    """A single hook declaration with its ordering and runtime metadata."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    enable: bool = False
    name: str | None = None
    description: str = ""
    entry: Invocation | None = None
    language: str = "system"
    files: str = ""
    types: list[str] = Field(default_factory=lambda: ["file"])
    types_or: list[str] = Field(default_factory=list)
    exclude_types: list[str] = Field(default_factory=list)
    pass_filenames: bool = True
    require_serial: bool = False
    always_run: bool = False
    fail_fast: bool = False
    verbose: bool = False
    stages: list[str] | None = None
    before: list[str] = Field(default_factory=list)
    after: list[str] = Field(default_factory=list)
    excludes: list[str] = Field(default_factory=list)
    package: str | None = None
    extra_packages: list[str] = Field(default_factory=list)
    extra: dict[str, JsonValue] = Field(default_factory=dict)

    @field_validator("id")
    @classmethod
    def _non_empty_id(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("hook id must not be empty")
        return value

    @model_validator(mode="after")
    def _check_stages_and_extra(self) -> HookDefinition:
        if self.stages is not None:
            validate_stages(self.stages, hook_id=self.id)
        shadowed = sorted(_RESERVED_RAW_KEYS.intersection(self.extra))
        if shadowed:
            raise ValueError(f"extra fields may not override {', '.join(shadowed)}")
        return self

    def effective_stages(self, default_stages: Sequence[str]) -> list[str]:
        """Return declared stages, falling back to ``default_stages``."""

        return list(self.stages) if self.stages is not None else list(default_stages)

    def raw_form(self, default_stages: Sequence[str]) -> dict[str, JsonValue]:
        """Return the document this hook contributes to the runner config.

        Args:
            default_stages: Global stages inherited when the hook declares none.

        Returns:
            dict[str, JsonValue]: Runner-facing hook entry.
        """

        document: dict[str, JsonValue] = {
            "id": self.id,
            "name": self.name or self.id,
            "description": self.description,
            "entry": shlex.quote(self.entry.command) if self.entry is not None else "",
            "language": self.language,
            "files": self.files,
            "types": list(self.types),
            "types_or": list(self.types_or),
            "exclude_types": list(self.exclude_types),
            "pass_filenames": self.pass_filenames,
            "require_serial": self.require_serial,
            "always_run": self.always_run,
            "fail_fast": self.fail_fast,
            "verbose": self.verbose,
            "stages": self.effective_stages(default_stages),
            "exclude": merge_excludes(self.excludes) or MATCH_NOTHING,
        }
        if self.entry is not None and self.entry.args:
            document["args"] = list(self.entry.args)
        document.update(self.extra)
        return document

    def packages(self) -> list[str]:
        """Return the hook's own package followed by its extra packages."""

        provided = [self.package] if self.package is not None else []
        return [*provided, *self.extra_packages]


class Settings(BaseModel):
    """Global options applied on top of individual hook declarations."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    excludes: list[str] = Field(default_factory=list)
    default_stages: list[str] = Field(default_factory=lambda: [DEFAULT_STAGE])
    add_gc_root: bool = True
    runner: str = DEFAULT_RUNNER
    git: str = DEFAULT_GIT
    config_file: str = DEFAULT_CONFIG_FILE
    store_dir: Path | None = None

    @field_validator("default_stages")
    @classmethod
    def _check_default_stages(cls, value: list[str]) -> list[str]:
        return validate_stages(value)

    @field_validator("config_file")
    @classmethod
    def _plain_file_name(cls, value: str) -> str:
        if not value or Path(value).name != value:
            raise ValueError("config_file must be a plain file name")
        return value

    def resolved_store_dir(self) -> Path:
        """Return the configured store directory or the user cache default."""

        return self.store_dir if self.store_dir is not None else default_store_dir()


class HookConfig(BaseModel):
    """Root configuration document: global settings plus hook declarations."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    settings: Settings = Field(default_factory=Settings)
    hooks: dict[str, HookDefinition] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _inject_hook_ids(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        hooks = data.get("hooks")
        if not isinstance(hooks, Mapping):
            return data
        injected: dict[str, Any] = {}
        for key, body in hooks.items():
            if isinstance(body, Mapping):
                declared = body.get("id", key)
                if declared != key:
                    raise ValueError(f"hook table {key!r} declares mismatching id {declared!r}")
                body = {**body, "id": key}
            injected[key] = body
        return {**data, "hooks": injected}

    def registry(self) -> HookRegistry:
        """Return a registry over the declared hooks in declaration order."""

        return HookRegistry(self.hooks.values())


class HookRegistry:
    """Ordered catalog of hook definitions keyed by unique id."""

    def __init__(self, hooks: Iterable[HookDefinition] = ()) -> None:
        self._hooks: dict[str, HookDefinition] = {}
        for hook in hooks:
            self.register(hook)

    def register(self, hook: HookDefinition) -> None:
        """Add ``hook`` to the registry.

        Raises:
            DuplicateHookError: Raised when the id is already registered.
        """

        if hook.id in self._hooks:
            raise DuplicateHookError(hook.id)
        self._hooks[hook.id] = hook

    def __iter__(self) -> Iterator[HookDefinition]:
        return iter(self._hooks.values())

    def __len__(self) -> int:
        return len(self._hooks)

    def __contains__(self, hook_id: object) -> bool:
        return hook_id in self._hooks

    def get(self, hook_id: str) -> HookDefinition:
        """Return the hook registered as ``hook_id``.

        Raises:
            ConfigError: Raised when no such hook exists.
        """

        try:
            return self._hooks[hook_id]
        except KeyError as exc:
            raise ConfigError(f"Unknown hook id: {hook_id!r}") from exc

    def ids(self) -> tuple[str, ...]:
        return tuple(self._hooks)

    def enabled(self) -> tuple[HookDefinition, ...]:
        """Return enabled hooks in registry order."""

        return tuple(hook for hook in self._hooks.values() if hook.enable)

    def enabled_packages(self) -> tuple[str, ...]:
        """Return packages of enabled hooks, deduplicated in registry order."""

        packages: list[str] = []
        for hook in self.enabled():
            for package in hook.packages():
                if package not in packages:
                    packages.append(package)
        return tuple(packages)


__all__ = [
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_GIT",
    "DEFAULT_RUNNER",
    "HookConfig",
    "HookDefinition",
    "HookRegistry",
    "Invocation",
    "JsonValue",
    "Settings",
    "default_store_dir",
]
