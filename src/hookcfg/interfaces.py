# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Protocols describing the external collaborators used by check and install."""

from __future__ import annotations

import subprocess  # nosec B404
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol


class GitLike(Protocol):
    """Subset of :class:`hookcfg.git.GitClient` used by the state machines."""

    def available(self) -> bool: ...

    def is_work_tree(self) -> bool: ...

    def toplevel(self) -> Path: ...

    def common_dir(self) -> Path: ...

    def get_config(self, key: str) -> str | None: ...

    def set_config(self, key: str, value: str) -> None: ...

    def init(self) -> None: ...

    def add_all(self) -> None: ...

    def commit(self, message: str) -> None: ...

    def diff(self, *, color: bool = True) -> str: ...


class RunnerLike(Protocol):
    """Subset of :class:`hookcfg.runner.HookRunner` used by the state machines."""

    def available(self) -> bool: ...

    def reference(self) -> str: ...

    def install(self, dispatch_name: str | None = None) -> None: ...

    def uninstall(self, dispatch_name: str) -> None: ...

    def run_all(self, *, manual: bool = False) -> subprocess.CompletedProcess[str]: ...


class GitFactory(Protocol):
    def __call__(self, executable: str, *, cwd: Path, env: Mapping[str, str] | None = None) -> GitLike: ...


class RunnerFactory(Protocol):
    def __call__(self, executable: str, *, cwd: Path, env: Mapping[str, str] | None = None) -> RunnerLike: ...


__all__ = ["GitFactory", "GitLike", "RunnerFactory", "RunnerLike"]
