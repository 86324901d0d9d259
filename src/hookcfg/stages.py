# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Registry of supported lifecycle stages and install-stage resolution."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Final

from .errors import UnknownStageError

if TYPE_CHECKING:
    from .models import HookDefinition

MANUAL_STAGE: Final[str] = "manual"
DEFAULT_STAGE: Final[str] = "pre-commit"

_SUPPORTED_STAGES: Final[tuple[str, ...]] = (
    "commit-msg",
    "post-checkout",
    "post-commit",
    "post-merge",
    "post-rewrite",
    "pre-commit",
    "pre-merge-commit",
    "pre-push",
    "pre-rebase",
    "prepare-commit-msg",
    "commit",
    "merge-commit",
    "push",
    MANUAL_STAGE,
)

# Legacy stage names whose git hook carries a ``pre-`` prefix.
_PREFIXED_ALIASES: Final[frozenset[str]] = frozenset({"commit", "merge-commit", "push"})


def available_stages() -> tuple[str, ...]:
    """Return every stage name recognised by the resolver.

    Returns:
        tuple[str, ...]: Supported stage identifiers, ``manual`` included.
    """

    return _SUPPORTED_STAGES


def is_supported(stage: str) -> bool:
    """Return whether ``stage`` identifies a supported stage."""

    return stage in _SUPPORTED_STAGES


def validate_stages(stages: Iterable[str], *, hook_id: str | None = None) -> list[str]:
    """Return ``stages`` as a list after checking each name is supported.

    Args:
        stages: Stage names supplied by a hook or the global settings.
        hook_id: Optional hook identifier used to enrich error messages.

    Returns:
        list[str]: The validated stage names in their original order.

    Raises:
        UnknownStageError: Raised for the first unsupported stage name.
    """

    validated: list[str] = []
    for stage in stages:
        if stage not in _SUPPORTED_STAGES:
            raise UnknownStageError(stage, hook_id=hook_id)
        validated.append(stage)
    return validated


def dispatch_name(stage: str) -> str | None:
    """Return the git hook name used to register ``stage``.

    Args:
        stage: Supported stage name.

    Returns:
        str | None: The git hook name, or ``None`` for the ``manual`` stage
        which is never wired into git.

    Raises:
        UnknownStageError: Raised when ``stage`` is not supported.
    """

    if stage == MANUAL_STAGE:
        return None
    if stage in _PREFIXED_ALIASES:
        return f"pre-{stage}"
    if stage in _SUPPORTED_STAGES:
        return stage
    raise UnknownStageError(stage)


def dispatch_names() -> tuple[str, ...]:
    """Return every git hook name a supported stage may register, deduplicated."""

    names: list[str] = []
    for stage in _SUPPORTED_STAGES:
        name = dispatch_name(stage)
        if name is not None and name not in names:
            names.append(name)
    return tuple(names)


def resolve_install_stages(
    hooks: Iterable[HookDefinition],
    default_stages: Sequence[str],
) -> tuple[str, ...]:
    """Return the union of stages declared by ``hooks``.

    Hooks without explicit stages inherit ``default_stages``. The union keeps
    first-seen order so repeated evaluations produce the same tuple.

    Raises:
        UnknownStageError: Raised when any hook or default stage is unsupported.
    """

    ordered: list[str] = []
    for hook in hooks:
        for stage in validate_stages(hook.effective_stages(default_stages), hook_id=hook.id):
            if stage not in ordered:
                ordered.append(stage)
    return tuple(ordered)


def installable_stages(stages: Iterable[str]) -> tuple[str, ...]:
    """Return ``stages`` without ``manual``, which is never installed."""

    return tuple(stage for stage in stages if stage != MANUAL_STAGE)


def is_manual_only(stages: Sequence[str]) -> bool:
    """Return ``True`` when ``manual`` is the only configured install stage."""

    return list(stages) == [MANUAL_STAGE]


__all__ = [
    "DEFAULT_STAGE",
    "MANUAL_STAGE",
    "available_stages",
    "dispatch_name",
    "dispatch_names",
    "installable_stages",
    "is_manual_only",
    "is_supported",
    "resolve_install_stages",
    "validate_stages",
]
