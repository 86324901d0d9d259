# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rich console provisioning for the logging helpers."""

from __future__ import annotations

import sys
from functools import cache

from rich.console import Console


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@cache
def _console(color: bool, emoji: bool, tty: bool) -> Console:
    colored = color and tty
    return Console(
        color_system="auto" if colored else None,
        force_terminal=tty,
        no_color=not colored,
        emoji=emoji,
        soft_wrap=True,
        highlight=False,
    )


def get_console(*, color: bool, emoji: bool) -> Console:
    """Return a shared console for the ``color`` and ``emoji`` preferences."""

    return _console(color, emoji, detect_tty())


__all__ = ["detect_tty", "get_console"]
