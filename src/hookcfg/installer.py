# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Converge a git working copy onto the current configuration artifact.

Every invocation starts from ``CHECK_CURRENT`` and compares before writing, so
repeated runs with an unchanged configuration perform no mutations at all.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Final

from .artifact import Artifact, ArtifactStore, replace_symlink
from .errors import EnvironmentUnavailableError, InstallRefusedError
from .git import HOOKS_PATH_KEY
from .interfaces import GitLike, RunnerLike
from .logging import info, ok, warn
from .models import DEFAULT_CONFIG_FILE
from .stages import DEFAULT_STAGE, dispatch_name, dispatch_names, installable_stages

HOOKS_SUBDIR: Final[str] = "hooks"


class InstallState(StrEnum):
    """States visited by one installer invocation."""

    CHECK_CURRENT = "check-current"
    NOOP = "noop"
    DIVERGED = "diverged"
    LINKED = "linked"
    HOOKS_REGISTERED = "hooks-registered"
    DONE = "done"
    SKIPPED = "skipped"
    REFUSED = "refused"


@dataclass(slots=True)
class InstallReport:
    """Trace of the states an installer run visited and what it registered."""

    states: list[InstallState] = field(default_factory=list)
    link: Path | None = None
    registered: list[str] = field(default_factory=list)
    gc_root: Path | None = None
    message: str | None = None

    def enter(self, state: InstallState) -> None:
        self.states.append(state)

    @property
    def final(self) -> InstallState | None:
        return self.states[-1] if self.states else None

    @property
    def changed(self) -> bool:
        """Return ``True`` when the run mutated the working copy."""

        return self.final is InstallState.DONE


def refusal_message(config_file: str) -> str:
    """Return the remediation text shown when a hand-written config is in the way."""

    return "\n".join(
        (
            f"Refusing to install because of pre-existing {config_file}",
            f"    1. Translate {config_file} contents to hookcfg hook declarations",
            f"    2. remove {config_file}",
            f"    3. add {config_file} to .gitignore",
        ),
    )


def plan_dispatch(stages: Sequence[str]) -> list[str | None]:
    """Return dispatch names to register for the resolved install ``stages``.

    ``None`` stands for the runner's default registration, used when no stage
    is configured at all. ``manual`` never produces a registration.

    Raises:
        UnknownStageError: When a stage is not supported.
    """

    if not stages:
        return [None]
    planned: list[str | None] = []
    for stage in installable_stages(stages):
        name = dispatch_name(stage)
        if name not in planned:
            planned.append(name)
    return planned


def relative_hooks_path(common_dir: Path, toplevel: Path) -> str:
    """Return the ``core.hooksPath`` value for ``common_dir``.

    The path is relative to ``toplevel`` when the common dir lives inside the
    working copy and absolute otherwise, as with linked worktrees.
    """

    try:
        base = common_dir.relative_to(toplevel).as_posix()
    except ValueError:
        base = common_dir.as_posix()
    return f"{base}/{HOOKS_SUBDIR}"


def _restore_link(link: Path, previous: str | None) -> None:
    if previous is None:
        link.unlink(missing_ok=True)
    else:
        replace_symlink(link, previous)


class Installer:
    """Idempotent installer wiring an artifact and dispatch points into git."""

    def __init__(
        self,
        git: GitLike,
        runner: RunnerLike,
        *,
        store: ArtifactStore | None = None,
        config_file: str = DEFAULT_CONFIG_FILE,
        strict: bool = True,
        use_emoji: bool = True,
    ) -> None:
        self._git = git
        self._runner = runner
        self._store = store
        self._config_file = config_file
        self._strict = strict
        self._use_emoji = use_emoji

    def install(
        self,
        artifact: Artifact,
        stages: Sequence[str],
        *,
        add_gc_root: bool = True,
    ) -> InstallReport:
        """Converge the working copy onto ``artifact``.

        Args:
            artifact: Materialized configuration to link.
            stages: Resolved install stages (``manual`` may be included).
            add_gc_root: Register the link as a garbage-collection root.

        Returns:
            InstallReport: The visited states and registrations.

        Raises:
            InstallRefusedError: When a regular config file already exists at
                the link location, unless ``strict`` was disabled.
            UnknownStageError: When a stage cannot be dispatched.
        """

        report = InstallReport()
        try:
            self._preflight()
        except EnvironmentUnavailableError as exc:
            return self._skip(report, str(exc))

        toplevel = self._git.toplevel()
        link = toplevel / self._config_file
        report.link = link

        report.enter(InstallState.CHECK_CURRENT)
        if self._is_current(link, artifact):
            report.enter(InstallState.NOOP)
            return report

        report.enter(InstallState.DIVERGED)
        info(f"hookcfg: updating {toplevel} repo", use_emoji=self._use_emoji)
        if os.path.lexists(link) and not link.is_symlink():
            return self._refuse(report)
        planned = plan_dispatch(stages)

        previous = os.readlink(link) if link.is_symlink() else None
        replace_symlink(link, artifact.path)
        try:
            if add_gc_root and self._store is not None:
                report.gc_root = self._store.add_gc_root(link)
            report.enter(InstallState.LINKED)

            self._register(planned, report)
            report.enter(InstallState.HOOKS_REGISTERED)

            hooks_path = relative_hooks_path(self._git.common_dir(), toplevel)
            self._git.set_config(HOOKS_PATH_KEY, hooks_path)
        except Exception:
            # A half-registered install must not look current on the next run.
            _restore_link(link, previous)
            raise
        report.enter(InstallState.DONE)
        ok(f"Installed hooks for {', '.join(report.registered) or 'no stages'}", use_emoji=self._use_emoji)
        return report

    def _preflight(self) -> None:
        if not self._git.available():
            raise EnvironmentUnavailableError("git command not found; skipping installation.")
        if not self._git.is_work_tree():
            raise EnvironmentUnavailableError(".git not found; skipping installation.")
        if not self._runner.available():
            raise EnvironmentUnavailableError("hook runner not found on PATH; skipping installation.")

    def _is_current(self, link: Path, artifact: Artifact) -> bool:
        return link.is_symlink() and os.readlink(link) == str(artifact.path)

    def _register(self, planned: Sequence[str | None], report: InstallReport) -> None:
        # The runner's own install bookkeeping is not convergent, so start clean.
        self._git.set_config(HOOKS_PATH_KEY, "")
        for name in dispatch_names():
            self._runner.uninstall(name)
        for name in planned:
            self._runner.install(name)
            report.registered.append(name or DEFAULT_STAGE)

    def _skip(self, report: InstallReport, reason: str) -> InstallReport:
        warn(f"hookcfg: {reason}", use_emoji=self._use_emoji)
        report.message = reason
        report.enter(InstallState.SKIPPED)
        return report

    def _refuse(self, report: InstallReport) -> InstallReport:
        message = refusal_message(self._config_file)
        report.message = message
        report.enter(InstallState.REFUSED)
        if self._strict:
            raise InstallRefusedError(message)
        warn(f"hookcfg: WARNING: {message}", use_emoji=self._use_emoji)
        return report


__all__ = [
    "InstallReport",
    "InstallState",
    "Installer",
    "plan_dispatch",
    "refusal_message",
    "relative_hooks_path",
]
