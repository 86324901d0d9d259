# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Client for the external hook runner executable (``pre-commit``)."""

from __future__ import annotations

import subprocess  # nosec B404
from collections.abc import Mapping
from pathlib import Path

from .models import DEFAULT_RUNNER
from .process_utils import resolve_executable, run_command


class HookRunner:
    """Invoke the hook runner to register dispatch points and run hooks."""

    def __init__(
        self,
        executable: str = DEFAULT_RUNNER,
        *,
        cwd: Path,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.executable = executable
        self.cwd = cwd
        self.env = env

    def reference(self) -> str:
        """Return the resolved executable path, or the configured name."""

        return resolve_executable(self.executable, env=self.env) or self.executable

    def available(self) -> bool:
        return resolve_executable(self.executable, env=self.env) is not None

    def install(self, dispatch_name: str | None = None) -> None:
        """Register the runner for ``dispatch_name`` (the default stage when ``None``)."""

        args = ["install"] if dispatch_name is None else ["install", "-t", dispatch_name]
        run_command([self.executable, *args], cwd=self.cwd, env=self.env, capture_output=True)

    def uninstall(self, dispatch_name: str) -> None:
        run_command(
            [self.executable, "uninstall", "-t", dispatch_name],
            cwd=self.cwd,
            env=self.env,
            capture_output=True,
        )

    def run_all(self, *, manual: bool = False) -> subprocess.CompletedProcess[str]:
        """Run every hook against all files without raising on violations."""

        return run_command(
            [self.executable, *self.run_arguments(manual=manual)],
            cwd=self.cwd,
            env=self.env,
            check=False,
            capture_output=True,
        )

    @staticmethod
    def run_arguments(*, manual: bool) -> list[str]:
        if manual:
            return ["run", "--hook-stage", "manual", "--all-files"]
        return ["run", "--all-files"]


__all__ = ["HookRunner"]
