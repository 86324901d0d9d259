# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Commands that evaluate configuration without touching a working copy."""

from __future__ import annotations

from pathlib import Path

import typer

from .options import CONFIG_OPTION, EMOJI_OPTION, ROOT_OPTION, ProjectOptions
from .services import evaluate_project, materialize_project
from .shared import CLIError, build_cli_logger


def show_command(
    root: ROOT_OPTION = Path("."),
    config: CONFIG_OPTION = None,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Print the normalized runner configuration without writing anything."""

    options = ProjectOptions.from_cli(root, config, emoji=emoji)
    logger = build_cli_logger(emoji=options.emoji)
    try:
        project = evaluate_project(options, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc
    logger.echo(project.evaluation.config.to_json(), nl=False)
    raise typer.Exit(code=0)


def generate_command(
    root: ROOT_OPTION = Path("."),
    config: CONFIG_OPTION = None,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Materialize the configuration artifact and print its path."""

    options = ProjectOptions.from_cli(root, config, emoji=emoji)
    logger = build_cli_logger(emoji=options.emoji)
    try:
        project = evaluate_project(options, logger=logger)
        artifact = materialize_project(project, options, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc
    logger.echo(str(artifact.path))
    raise typer.Exit(code=0)


def packages_command(
    root: ROOT_OPTION = Path("."),
    config: CONFIG_OPTION = None,
    emoji: EMOJI_OPTION = True,
) -> None:
    """List packages provided by enabled hooks, one per line."""

    options = ProjectOptions.from_cli(root, config, emoji=emoji)
    logger = build_cli_logger(emoji=options.emoji)
    try:
        project = evaluate_project(options, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc
    for package in project.evaluation.enabled_packages:
        logger.echo(package)
    raise typer.Exit(code=0)


def stages_command(
    root: ROOT_OPTION = Path("."),
    config: CONFIG_OPTION = None,
    emoji: EMOJI_OPTION = True,
) -> None:
    """List the resolved install stages, one per line."""

    options = ProjectOptions.from_cli(root, config, emoji=emoji)
    logger = build_cli_logger(emoji=options.emoji)
    try:
        project = evaluate_project(options, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc
    for stage in project.evaluation.install_stages:
        logger.echo(stage)
    raise typer.Exit(code=0)


__all__ = ["generate_command", "packages_command", "show_command", "stages_command"]
