# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Option declarations shared by hookcfg commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

ROOT_OPTION = Annotated[
    Path,
    typer.Option("--root", "-r", help="Project root (defaults to the current directory)."),
]
CONFIG_OPTION = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Explicit hookcfg.toml or pyproject.toml to read."),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]


@dataclass(slots=True)
class ProjectOptions:
    """Normalized options identifying the project and its configuration."""

    root: Path
    config: Path | None
    emoji: bool

    @classmethod
    def from_cli(cls, root: Path, config: Path | None, *, emoji: bool) -> ProjectOptions:
        return cls(
            root=root.resolve(),
            config=config.resolve() if config is not None else None,
            emoji=emoji,
        )


__all__ = ["CONFIG_OPTION", "EMOJI_OPTION", "ROOT_OPTION", "ProjectOptions"]
