# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Fold ordered hooks and global settings into one normalized runner config."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final

if TYPE_CHECKING:
    from .models import HookDefinition

LOCAL_REPO: Final[str] = "local"
# Regex that matches no path; used for hooks without exclude patterns.
MATCH_NOTHING: Final[str] = "^$"


def merge_excludes(patterns: Sequence[str]) -> str | None:
    """Join exclude ``patterns`` into a single alternation.

    Args:
        patterns: Regular expressions in the runner's dialect.

    Returns:
        str | None: ``None`` when no patterns are given, otherwise
        ``"(p1|p2|...)"`` with every pattern inserted verbatim and in order.
    """

    if not patterns:
        return None
    return "(" + "|".join(patterns) + ")"


@dataclass(frozen=True, slots=True)
class NormalizedConfig:
    """Runner configuration document with optional keys kept optional."""

    hooks: tuple[Mapping[str, Any], ...]
    exclude: str | None = None
    default_stages: tuple[str, ...] = field(default_factory=tuple)

    @property
    def repos(self) -> list[dict[str, Any]]:
        return [{"repo": LOCAL_REPO, "hooks": [dict(hook) for hook in self.hooks]}]

    def to_document(self) -> dict[str, Any]:
        """Return the configuration as a plain mapping.

        ``exclude`` and ``default_stages`` are omitted entirely when unset;
        their presence is meaningful to the runner.
        """

        document: dict[str, Any] = {"repos": self.repos}
        if self.exclude is not None:
            document["exclude"] = self.exclude
        if self.default_stages:
            document["default_stages"] = list(self.default_stages)
        return document

    def to_json(self) -> str:
        """Return a byte-stable JSON rendering of :meth:`to_document`."""

        return json.dumps(self.to_document(), indent=2, sort_keys=True, ensure_ascii=False) + "\n"


def merge(
    ordered_hooks: Sequence[HookDefinition],
    excludes: Sequence[str],
    default_stages: Sequence[str],
) -> NormalizedConfig:
    """Build the normalized configuration for ``ordered_hooks``.

    Args:
        ordered_hooks: Enabled hooks in execution order.
        excludes: Global exclude patterns.
        default_stages: Global default stages.

    Returns:
        NormalizedConfig: Document whose hook list preserves ``ordered_hooks``.
    """

    return NormalizedConfig(
        hooks=tuple(hook.raw_form(default_stages) for hook in ordered_hooks),
        exclude=merge_excludes(excludes),
        default_stages=tuple(default_stages),
    )


__all__ = ["LOCAL_REPO", "MATCH_NOTHING", "NormalizedConfig", "merge", "merge_excludes"]
