# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands."""

from __future__ import annotations

import typer

from .check import check_command
from .generate import generate_command, packages_command, show_command, stages_command
from .install import install_command

app = typer.Typer(
    name="hookcfg",
    help="Declarative git hook configuration.",
    no_args_is_help=True,
    add_completion=False,
)

app.command("show")(show_command)
app.command("generate")(generate_command)
app.command("check")(check_command)
app.command("install")(install_command)
app.command("packages")(packages_command)
app.command("stages")(stages_command)


def main() -> None:
    """Run the hookcfg CLI."""

    app()


__all__ = ["app", "main"]
