# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging and errors)."""

from __future__ import annotations

from dataclasses import dataclass

import typer

from ..logging import fail as core_fail
from ..logging import info as core_info
from ..logging import ok as core_ok
from ..logging import warn as core_warn


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around project logging helpers respecting CLI emoji settings."""

    use_emoji: bool

    def fail(self, message: str) -> None:
        core_fail(message, use_emoji=self.use_emoji)

    def warn(self, message: str) -> None:
        core_warn(message, use_emoji=self.use_emoji)

    def ok(self, message: str) -> None:
        core_ok(message, use_emoji=self.use_emoji)

    def info(self, message: str) -> None:
        core_info(message, use_emoji=self.use_emoji)

    def echo(self, message: str, *, nl: bool = True) -> None:
        """Write ``message`` to stdout using Typer's echo helper."""

        typer.echo(message, nl=nl)


def build_cli_logger(*, emoji: bool) -> CLILogger:
    """Return a ``CLILogger`` configured for the provided emoji preference."""

    return CLILogger(use_emoji=emoji)


__all__ = ["CLIError", "CLILogger", "build_cli_logger"]
