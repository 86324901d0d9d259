# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Implementation of the ``hookcfg install`` command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..errors import HookConfigError
from ..git import GitClient
from ..installer import Installer, InstallState
from ..process_utils import SubprocessExecutionError
from ..runner import HookRunner
from .options import CONFIG_OPTION, EMOJI_OPTION, ROOT_OPTION, ProjectOptions
from .services import evaluate_project, materialize_project
from .shared import CLIError, build_cli_logger

STRICT_OPTION = Annotated[
    bool,
    typer.Option(
        "--strict/--no-strict",
        help="Fail when a hand-written config blocks installation; --no-strict only warns.",
    ),
]


def install_command(
    root: ROOT_OPTION = Path("."),
    config: CONFIG_OPTION = None,
    strict: STRICT_OPTION = True,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Link the generated config into the working copy and register git hooks."""

    options = ProjectOptions.from_cli(root, config, emoji=emoji)
    logger = build_cli_logger(emoji=options.emoji)
    try:
        project = evaluate_project(options, logger=logger)
        artifact = materialize_project(project, options, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc

    settings = project.config.settings
    installer = Installer(
        GitClient(settings.git, cwd=options.root),
        HookRunner(settings.runner, cwd=options.root),
        store=project.store(),
        config_file=settings.config_file,
        strict=strict,
        use_emoji=options.emoji,
    )
    try:
        report = installer.install(
            artifact,
            project.evaluation.install_stages,
            add_gc_root=settings.add_gc_root,
        )
    except (HookConfigError, FileNotFoundError) as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=1) from exc
    except SubprocessExecutionError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.returncode or 1) from exc

    if report.final is InstallState.NOOP:
        logger.ok("Hooks are already up to date.")
    raise typer.Exit(code=0)


__all__ = ["install_command"]
