# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run every enabled hook against a scratch copy of a project tree."""

from __future__ import annotations

import os
import shutil
import tempfile
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Final

from .artifact import Artifact
from .errors import CheckInfrastructureError
from .git import GitClient
from .interfaces import GitFactory, GitLike, RunnerFactory, RunnerLike
from .models import DEFAULT_CONFIG_FILE, DEFAULT_GIT, DEFAULT_RUNNER
from .process_utils import SubprocessExecutionError, resolve_executable
from .runner import HookRunner

BOOTSTRAP_COMMIT_MESSAGE: Final[str] = "init"
_SCRATCH_PREFIX: Final[str] = "hookcfg-check-"


class CheckState(StrEnum):
    """Phases of a single check run."""

    INIT = "init"
    PREPARED = "prepared"
    EXECUTED = "executed"
    REPORTED = "reported"


@dataclass(frozen=True, slots=True)
class CheckReport:
    """Aggregate result of running all hooks once."""

    exit_code: int
    diff: str
    output: str
    command: tuple[str, ...]
    states: tuple[CheckState, ...] = field(default_factory=tuple)

    @property
    def passed(self) -> bool:
        return self.exit_code == 0


def package_path_entries(packages: Iterable[str]) -> list[str]:
    """Return ``PATH`` entries exposing the executables of ``packages``.

    A package may be a prefix directory (its ``bin`` directory is used when
    present), an executable path, or an executable name looked up on ``PATH``.

    Raises:
        CheckInfrastructureError: When a package cannot be located.
    """

    entries: list[str] = []
    for package in packages:
        candidate = Path(package)
        if candidate.is_dir():
            bin_dir = candidate / "bin"
            entry = bin_dir if bin_dir.is_dir() else candidate
        elif candidate.is_absolute() and candidate.exists():
            entry = candidate.parent
        else:
            resolved = resolve_executable(package)
            if resolved is None:
                raise CheckInfrastructureError(f"Package {package!r} could not be found")
            entry = Path(resolved).parent
        if str(entry) not in entries:
            entries.append(str(entry))
    return entries


def build_check_env(
    home: Path,
    packages: Sequence[str],
    *,
    base: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Return the environment used inside the scratch tree."""

    env = dict(os.environ if base is None else base)
    path_entries = package_path_entries(packages)
    existing = env.get("PATH", "")
    env["PATH"] = os.pathsep.join([*path_entries, existing] if existing else path_entries)
    env["HOME"] = str(home)
    return env


class CheckRunner:
    """Drive one ``INIT -> PREPARED -> EXECUTED -> REPORTED`` check run."""

    def __init__(
        self,
        *,
        runner: str = DEFAULT_RUNNER,
        git: str = DEFAULT_GIT,
        config_file: str = DEFAULT_CONFIG_FILE,
        git_factory: GitFactory = GitClient,
        runner_factory: RunnerFactory = HookRunner,
        color: bool = True,
    ) -> None:
        self._runner = runner
        self._git = git
        self._config_file = config_file
        self._git_factory = git_factory
        self._runner_factory = runner_factory
        self._color = color

    def run(
        self,
        source: Path,
        artifact: Artifact,
        *,
        extra_packages: Sequence[str] = (),
        manual_only: bool = False,
    ) -> CheckReport:
        """Run all hooks against a private copy of ``source``.

        Args:
            source: Project tree to check; never modified.
            artifact: Materialized configuration linked as the active config.
            extra_packages: Packages whose executables must be on ``PATH``.
            manual_only: Run the ``manual`` hook stage instead of the default one.

        Returns:
            CheckReport: Runner exit code, captured output, and the diff of any
            files the hooks rewrote.

        Raises:
            CheckInfrastructureError: When the scratch tree cannot be prepared or
                the runner cannot be invoked.
        """

        if not source.is_dir():
            raise CheckInfrastructureError(f"Source tree not found: {source}")
        states: list[CheckState] = [CheckState.INIT]
        with tempfile.TemporaryDirectory(prefix=_SCRATCH_PREFIX) as scratch:
            tree = Path(scratch) / "src"
            self._stage_tree(source, tree)
            env = build_check_env(Path(scratch), extra_packages)
            git = self._git_factory(self._git, cwd=tree, env=env)
            runner = self._runner_factory(self._runner, cwd=tree, env=env)

            self._prepare(tree, artifact, git, runner)
            states.append(CheckState.PREPARED)

            try:
                completed = runner.run_all(manual=manual_only)
            except FileNotFoundError as exc:
                raise CheckInfrastructureError(str(exc)) from exc
            states.append(CheckState.EXECUTED)

            try:
                diff = git.diff(color=self._color)
            except (FileNotFoundError, SubprocessExecutionError) as exc:
                raise CheckInfrastructureError(f"Unable to diff the scratch tree: {exc}") from exc
            states.append(CheckState.REPORTED)

        output = (completed.stdout or "") + (completed.stderr or "")
        return CheckReport(
            exit_code=completed.returncode,
            diff=diff,
            output=output,
            command=(self._runner, *HookRunner.run_arguments(manual=manual_only)),
            states=tuple(states),
        )

    def _stage_tree(self, source: Path, tree: Path) -> None:
        try:
            shutil.copytree(source, tree, symlinks=True, ignore=shutil.ignore_patterns(".git"))
        except (OSError, shutil.Error) as exc:
            raise CheckInfrastructureError(f"Unable to stage {source} for checking: {exc}") from exc

    def _prepare(self, tree: Path, artifact: Artifact, git: GitLike, runner: RunnerLike) -> None:
        if not git.available():
            raise CheckInfrastructureError(f"Executable '{self._git}' was not found on PATH")
        if not runner.available():
            raise CheckInfrastructureError(f"Executable '{self._runner}' was not found on PATH")
        link = tree / self._config_file
        try:
            link.unlink(missing_ok=True)
            link.symlink_to(artifact.path)
            # The runner only works on committed trees; this history is throwaway.
            git.init()
            git.add_all()
            git.commit(BOOTSTRAP_COMMIT_MESSAGE)
        except (OSError, SubprocessExecutionError) as exc:
            raise CheckInfrastructureError(f"Unable to prepare the scratch tree: {exc}") from exc


__all__ = [
    "CheckReport",
    "CheckRunner",
    "CheckState",
    "build_check_env",
    "package_path_entries",
]
