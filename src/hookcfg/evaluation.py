# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Evaluate a hook registry into an ordered, merged, stage-resolved result."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .errors import AssertionsFailedError
from .merge import NormalizedConfig, merge
from .models import HookConfig, HookDefinition, HookRegistry, Settings
from .ordering import sort_hooks
from .stages import installable_stages, is_manual_only, resolve_install_stages


@dataclass(frozen=True, slots=True)
class Assertion:
    """A named condition that must hold before an artifact is produced."""

    assertion: bool
    message: str


@dataclass(frozen=True, slots=True)
class Evaluation:
    """Everything derived from one pass over the registry and settings."""

    settings: Settings
    hooks: tuple[HookDefinition, ...]
    config: NormalizedConfig
    install_stages: tuple[str, ...]
    enabled_packages: tuple[str, ...]
    warnings: tuple[str, ...]

    @property
    def order(self) -> tuple[str, ...]:
        """Return hook ids in execution order."""

        return tuple(hook.id for hook in self.hooks)

    @property
    def manual_only(self) -> bool:
        """Return ``True`` when the check run must use the manual stage."""

        return is_manual_only(self.install_stages)

    @property
    def dispatch_stages(self) -> tuple[str, ...]:
        """Return install stages that are wired into git, ``manual`` removed."""

        return installable_stages(self.install_stages)


def collect_assertions(registry: HookRegistry) -> list[Assertion]:
    """Return the built-in assertions for ``registry``."""

    assertions: list[Assertion] = []
    for hook in registry.enabled():
        assertions.append(
            Assertion(
                assertion=hook.entry is not None,
                message=f"The hook {hook.id!r} is enabled but does not define an `entry` to run.",
            ),
        )
    return assertions


def collect_warnings(registry: HookRegistry, settings: Settings) -> list[str]:
    """Return non-fatal configuration warnings for ``registry``.

    Ordering constraints that name hooks absent from the registry are
    tolerated by the ordering engine but reported here.
    """

    warnings: list[str] = []
    for hook in registry:
        for relation, targets in (("before", hook.before), ("after", hook.after)):
            for target in targets:
                if target not in registry:
                    warnings.append(
                        f"The hook {hook.id!r} is ordered {relation} unknown hook {target!r}; "
                        "the constraint is ignored.",
                    )
    for hook in registry.enabled():
        if not hook.effective_stages(settings.default_stages):
            warnings.append(f"The hook {hook.id!r} is enabled but has no stages, so it never runs.")
    return warnings


def failed_assertion_messages(assertions: Iterable[Assertion]) -> list[str]:
    return [item.message for item in assertions if not item.assertion]


def evaluate(
    registry: HookRegistry,
    settings: Settings,
    *,
    assertions: Sequence[Assertion] = (),
) -> Evaluation:
    """Evaluate ``registry`` under ``settings``.

    Args:
        registry: Declared hooks in registry order.
        settings: Global options.
        assertions: Additional caller-supplied assertions checked alongside
            the built-in ones.

    Returns:
        Evaluation: Ordered hooks, normalized config, and resolved stages.

    Raises:
        AssertionsFailedError: When any assertion fails; every failure is listed.
        UnknownStageError: When a stage name is not supported.
        CycleError: When ordering constraints are cyclic.
    """

    failures = failed_assertion_messages([*collect_assertions(registry), *assertions])
    if failures:
        raise AssertionsFailedError(failures)

    enabled = registry.enabled()
    install_stages = resolve_install_stages(enabled, settings.default_stages)
    ordered = sort_hooks(enabled)
    config = merge(ordered, settings.excludes, settings.default_stages)
    return Evaluation(
        settings=settings,
        hooks=ordered,
        config=config,
        install_stages=install_stages,
        enabled_packages=registry.enabled_packages(),
        warnings=tuple(collect_warnings(registry, settings)),
    )


def evaluate_config(config: HookConfig, *, assertions: Sequence[Assertion] = ()) -> Evaluation:
    """Evaluate a loaded :class:`HookConfig`."""

    return evaluate(config.registry(), config.settings, assertions=assertions)


__all__ = [
    "Assertion",
    "Evaluation",
    "collect_assertions",
    "collect_warnings",
    "evaluate",
    "evaluate_config",
    "failed_assertion_messages",
]
