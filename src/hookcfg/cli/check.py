# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Implementation of the ``hookcfg check`` command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..check import CheckRunner
from ..errors import CheckInfrastructureError
from ..runner import HookRunner
from .options import CONFIG_OPTION, EMOJI_OPTION, ROOT_OPTION, ProjectOptions
from .services import evaluate_project, materialize_project
from .shared import CLIError, build_cli_logger

SOURCE_OPTION = Annotated[
    Path | None,
    typer.Option("--source", "-s", help="Tree to check (defaults to the project root)."),
]
COLOR_OPTION = Annotated[
    bool,
    typer.Option("--color/--no-color", help="Colourize the diff of modified files."),
]


def check_command(
    root: ROOT_OPTION = Path("."),
    config: CONFIG_OPTION = None,
    source: SOURCE_OPTION = None,
    color: COLOR_OPTION = True,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Run every enabled hook against a scratch copy of the project."""

    options = ProjectOptions.from_cli(root, config, emoji=emoji)
    logger = build_cli_logger(emoji=options.emoji)
    try:
        project = evaluate_project(options, logger=logger)
        artifact = materialize_project(project, options, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc

    settings = project.config.settings
    runner = CheckRunner(
        runner=settings.runner,
        git=settings.git,
        config_file=settings.config_file,
        color=color,
    )
    manual = project.evaluation.manual_only
    logger.info(f"Running: $ {' '.join((settings.runner, *HookRunner.run_arguments(manual=manual)))}")
    try:
        report = runner.run(
            (source or options.root).resolve(),
            artifact,
            extra_packages=project.evaluation.enabled_packages,
            manual_only=manual,
        )
    except CheckInfrastructureError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=1) from exc

    if report.output:
        logger.echo(report.output, nl=False)
    if report.diff:
        logger.echo(report.diff, nl=False)
    if report.passed:
        logger.ok("All hooks passed.")
    else:
        logger.fail(f"Hooks reported violations (exit code {report.exit_code}).")
    raise typer.Exit(code=report.exit_code)


__all__ = ["check_command"]
