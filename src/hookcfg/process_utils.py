# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import shutil

# Bandit: subprocess usage is intentional, we wrap git and hook runner
# execution with normalised argument lists and never use ``shell=True``.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from subprocess import CompletedProcess as _CompletedProcess  # nosec B404


class SubprocessExecutionError(RuntimeError):
    """Raised when a subprocess exits with a non-zero status while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        super().__init__(
            f"Command '{command[0]}' exited with status {returncode}. stderr: {stderr or '<none>'}",
        )
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def resolve_executable(name: str, *, env: Mapping[str, str] | None = None) -> str | None:
    """Return the absolute path of ``name`` or ``None`` when it cannot be found.

    Args:
        name: Executable name or path.
        env: Optional environment whose ``PATH`` is searched instead of the
            current process environment.
    """

    path = Path(name)
    if path.is_absolute():
        return str(path) if path.exists() else None
    search_path = env.get("PATH") if env is not None else None
    return shutil.which(name, path=search_path)


def _normalize_args(args: Sequence[str], env: Mapping[str, str] | None) -> list[str]:
    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = resolve_executable(head, env=env)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    check: bool = True,
    capture_output: bool = False,
    text: bool = True,
) -> _CompletedProcess[str]:
    """Execute *args* after normalising the executable path.

    Raises:
        FileNotFoundError: When the executable cannot be resolved.
        SubprocessExecutionError: When ``check`` is set and the command fails.
    """

    normalized = _normalize_args(args, env)
    completed: _CompletedProcess[str] = subprocess.run(  # nosec B603
        normalized,
        cwd=str(cwd) if cwd is not None else None,
        env=dict(env) if env is not None else None,
        check=False,
        capture_output=capture_output,
        text=text,
    )

    if check and completed.returncode != 0:
        raise SubprocessExecutionError(
            normalized,
            completed.returncode,
            completed.stdout if isinstance(completed.stdout, str) else None,
            completed.stderr if isinstance(completed.stderr, str) else None,
        )

    return completed


__all__ = ["SubprocessExecutionError", "resolve_executable", "run_command"]
