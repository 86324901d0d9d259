# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Thin client around the ``git`` executable."""

from __future__ import annotations

import subprocess  # nosec B404
from collections.abc import Mapping
from pathlib import Path
from typing import Final

from .models import DEFAULT_GIT
from .process_utils import SubprocessExecutionError, resolve_executable, run_command

BOOTSTRAP_EMAIL: Final[str] = "you@example.com"
BOOTSTRAP_NAME: Final[str] = "Your Name"
HOOKS_PATH_KEY: Final[str] = "core.hooksPath"
_CONFIG_UNSET_STATUS: Final[int] = 1


class GitClient:
    """Run git commands relative to a working directory."""

    def __init__(
        self,
        executable: str = DEFAULT_GIT,
        *,
        cwd: Path,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.executable = executable
        self.cwd = cwd
        self.env = env

    def available(self) -> bool:
        """Return whether the git executable can be resolved."""

        return resolve_executable(self.executable, env=self.env) is not None

    def run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
        return run_command(
            [self.executable, *args],
            cwd=self.cwd,
            env=self.env,
            check=check,
            capture_output=True,
        )

    def is_work_tree(self) -> bool:
        """Return whether ``cwd`` lies inside a git repository."""

        return self.run("rev-parse", "--git-dir", check=False).returncode == 0

    def toplevel(self) -> Path:
        return Path(self.run("rev-parse", "--show-toplevel").stdout.strip())

    def common_dir(self) -> Path:
        """Return the absolute git common directory (``.git`` for plain clones)."""

        completed = self.run("rev-parse", "--path-format=absolute", "--git-common-dir")
        return Path(completed.stdout.strip())

    def get_config(self, key: str) -> str | None:
        """Return the local value of ``key`` or ``None`` when unset."""

        completed = self.run("config", "--local", "--get", key, check=False)
        if completed.returncode == _CONFIG_UNSET_STATUS:
            return None
        if completed.returncode != 0:
            raise SubprocessExecutionError(
                [self.executable, "config", "--local", "--get", key],
                completed.returncode,
                completed.stdout,
                completed.stderr,
            )
        return completed.stdout.rstrip("\n")

    def set_config(self, key: str, value: str) -> None:
        self.run("config", "--local", key, value)

    def init(self) -> None:
        self.run("init", "-q")

    def add_all(self) -> None:
        self.run("add", ".")

    def commit(self, message: str) -> None:
        """Commit the index using a throwaway bootstrap identity."""

        self.run(
            "-c",
            f"user.email={BOOTSTRAP_EMAIL}",
            "-c",
            f"user.name={BOOTSTRAP_NAME}",
            "-c",
            "commit.gpgsign=false",
            "commit",
            "-q",
            "--allow-empty",
            "-m",
            message,
        )

    def diff(self, *, color: bool = True) -> str:
        flag = "--color=always" if color else "--no-color"
        return self.run("--no-pager", "diff", flag).stdout


__all__ = ["BOOTSTRAP_EMAIL", "BOOTSTRAP_NAME", "HOOKS_PATH_KEY", "GitClient"]
