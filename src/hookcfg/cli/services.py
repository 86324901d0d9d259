# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Evaluation and materialization steps shared by the CLI commands."""

from __future__ import annotations

from dataclasses import dataclass

from ..artifact import Artifact, ArtifactStore
from ..config_loader import load_config
from ..errors import HookConfigError
from ..evaluation import Evaluation, evaluate_config
from ..models import HookConfig
from ..runner import HookRunner
from .options import ProjectOptions
from .shared import CLIError, CLILogger


@dataclass(frozen=True, slots=True)
class EvaluatedProject:
    """Loaded configuration together with its evaluation."""

    config: HookConfig
    evaluation: Evaluation

    def store(self) -> ArtifactStore:
        return ArtifactStore(self.config.settings.resolved_store_dir())


def evaluate_project(options: ProjectOptions, *, logger: CLILogger) -> EvaluatedProject:
    """Load and evaluate the project configuration, emitting its warnings.

    Raises:
        CLIError: When loading or evaluation fails.
    """

    try:
        config = load_config(options.root, project_config=options.config)
        evaluation = evaluate_config(config)
    except HookConfigError as exc:
        logger.fail(str(exc))
        raise CLIError(str(exc)) from exc
    for message in evaluation.warnings:
        logger.warn(message)
    return EvaluatedProject(config=config, evaluation=evaluation)


def materialize_project(project: EvaluatedProject, options: ProjectOptions, *, logger: CLILogger) -> Artifact:
    """Write (or reuse) the artifact for ``project``.

    Raises:
        CLIError: When the store cannot be written.
    """

    settings = project.config.settings
    runner = HookRunner(settings.runner, cwd=options.root)
    try:
        return project.store().materialize(project.evaluation, runner=runner.reference())
    except OSError as exc:
        logger.fail(f"Unable to write artifact: {exc}")
        raise CLIError(str(exc)) from exc


__all__ = ["EvaluatedProject", "evaluate_project", "materialize_project"]
