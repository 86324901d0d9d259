# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the evaluation, check, and install layers."""

from __future__ import annotations

from collections.abc import Iterable, Sequence


class HookConfigError(Exception):
    """Base class for all errors raised by hookcfg."""


class ConfigError(HookConfigError):
    """Raised when configuration input is invalid."""


class DuplicateHookError(ConfigError):
    """Raised when two hook definitions share the same identifier."""

    def __init__(self, hook_id: str) -> None:
        super().__init__(f"Duplicate hook id: {hook_id!r}")
        self.hook_id = hook_id


class UnknownStageError(ConfigError):
    """Raised when a stage name is not part of the supported stage catalog."""

    def __init__(self, stage: str, *, hook_id: str | None = None) -> None:
        where = f" (declared by hook {hook_id!r})" if hook_id else ""
        super().__init__(
            f"Either {stage!r} is not a valid stage or hookcfg doesn't yet support it{where}.",
        )
        self.stage = stage
        self.hook_id = hook_id


class CycleError(ConfigError):
    """Raised when ``before``/``after`` constraints form a cycle."""

    def __init__(self, hook_ids: Iterable[str]) -> None:
        self.hook_ids: tuple[str, ...] = tuple(hook_ids)
        super().__init__(
            "Hook ordering constraints form a cycle between: " + ", ".join(self.hook_ids),
        )


class AssertionsFailedError(ConfigError):
    """Raised when one or more configuration assertions do not hold.

    Every failed assertion is reported at once so that operators can fix the
    whole configuration in a single pass.
    """

    def __init__(self, messages: Sequence[str]) -> None:
        self.messages: tuple[str, ...] = tuple(messages)
        super().__init__(format_failed_assertions(self.messages))


class InstallRefusedError(HookConfigError):
    """Raised when a hand-authored config file blocks installation."""


class EnvironmentUnavailableError(HookConfigError):
    """Raised when git is missing or the directory is not a working copy."""


class CheckInfrastructureError(HookConfigError):
    """Raised when the check run cannot even invoke the hook runner."""


def format_failed_assertions(messages: Sequence[str]) -> str:
    """Return the operator-facing report for failed assertion ``messages``.

    Multi-line messages are indented beneath their bullet.
    """

    bullets = ["- " + "\n  ".join(message.splitlines() or [""]) for message in messages]
    return "Failed assertions:\n" + "\n".join(bullets)


__all__ = [
    "AssertionsFailedError",
    "CheckInfrastructureError",
    "ConfigError",
    "CycleError",
    "DuplicateHookError",
    "EnvironmentUnavailableError",
    "HookConfigError",
    "InstallRefusedError",
    "UnknownStageError",
    "format_failed_assertions",
]
