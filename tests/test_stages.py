# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for stage catalog and install-stage resolution."""

from __future__ import annotations

import pytest

from hookcfg.errors import UnknownStageError
from hookcfg.models import HookDefinition
from hookcfg.stages import (
    MANUAL_STAGE,
    available_stages,
    dispatch_name,
    dispatch_names,
    installable_stages,
    is_manual_only,
    is_supported,
    resolve_install_stages,
    validate_stages,
)


@pytest.mark.parametrize(
    ("stage", "expected"),
    [
        ("commit", "pre-commit"),
        ("merge-commit", "pre-merge-commit"),
        ("push", "pre-push"),
        ("pre-commit", "pre-commit"),
        ("commit-msg", "commit-msg"),
        ("manual", None),
    ],
)
def test_dispatch_name_translation(stage: str, expected: str | None) -> None:
    assert dispatch_name(stage) == expected


def test_dispatch_name_rejects_unknown_stage() -> None:
    with pytest.raises(UnknownStageError, match="bogus"):
        dispatch_name("bogus")


def test_dispatch_names_exclude_manual_and_duplicates() -> None:
    names = dispatch_names()
    assert MANUAL_STAGE not in names
    assert len(names) == len(set(names))
    assert {"pre-commit", "pre-push", "pre-merge-commit"} <= set(names)


def test_catalog_membership() -> None:
    assert is_supported("manual")
    assert not is_supported("pre-deploy")
    assert "prepare-commit-msg" in available_stages()


def test_validate_stages_names_the_hook() -> None:
    with pytest.raises(UnknownStageError) as excinfo:
        validate_stages(["pre-commit", "pre-deploy"], hook_id="fmt")
    assert excinfo.value.stage == "pre-deploy"
    assert "fmt" in str(excinfo.value)


def test_resolve_install_stages_union_keeps_first_seen_order(make_hook) -> None:
    hooks = [
        make_hook("a", stages=["pre-push"]),
        make_hook("b"),
        make_hook("c", stages=["pre-commit", "manual"]),
    ]
    assert resolve_install_stages(hooks, ["pre-commit"]) == ("pre-push", "pre-commit", "manual")


def test_resolve_install_stages_validates_defaults(make_hook) -> None:
    with pytest.raises(UnknownStageError):
        resolve_install_stages([make_hook("a")], ["nope"])


def test_resolve_install_stages_rejects_unvalidated_hook() -> None:
    hook = HookDefinition.model_construct(id="raw", enable=True, stages=["whenever"])
    with pytest.raises(UnknownStageError, match="raw"):
        resolve_install_stages([hook], [])


def test_manual_is_never_installable() -> None:
    assert installable_stages(["manual", "pre-push"]) == ("pre-push",)
    assert is_manual_only(["manual"])
    assert not is_manual_only(["manual", "pre-commit"])
    assert not is_manual_only([])
