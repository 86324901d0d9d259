# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the evaluation pipeline."""

from __future__ import annotations

import pytest

from hookcfg.errors import AssertionsFailedError, CycleError, format_failed_assertions
from hookcfg.evaluation import Assertion, evaluate
from hookcfg.models import HookDefinition, HookRegistry, Settings


def test_only_enabled_hooks_are_ordered(make_hook) -> None:
    registry = HookRegistry([make_hook("A"), make_hook("off", enable=False, before=["A"]), make_hook("B", after=["A"])])
    evaluation = evaluate(registry, Settings())
    assert evaluation.order == ("A", "B")


def test_example_document_without_excludes(make_hook) -> None:
    evaluation = evaluate(HookRegistry([make_hook("A")]), Settings(excludes=[], default_stages=["pre-commit"]))
    document = evaluation.config.to_document()
    assert "exclude" not in document
    assert document["default_stages"] == ["pre-commit"]


def test_cycle_surfaces_from_evaluation(make_hook) -> None:
    registry = HookRegistry([make_hook("A", before=["B"]), make_hook("B", before=["A"])])
    with pytest.raises(CycleError):
        evaluate(registry, Settings())


def test_all_failed_assertions_are_reported_at_once() -> None:
    registry = HookRegistry(
        [
            HookDefinition(id="first", enable=True),
            HookDefinition(id="second", enable=True),
            HookDefinition(id="disabled"),
        ],
    )
    extra = [Assertion(assertion=False, message="custom failure\nwith detail"), Assertion(True, "fine")]
    with pytest.raises(AssertionsFailedError) as excinfo:
        evaluate(registry, Settings(), assertions=extra)
    messages = excinfo.value.messages
    assert len(messages) == 3
    assert "'first'" in messages[0]
    assert "'second'" in messages[1]
    assert str(excinfo.value).startswith("Failed assertions:\n- ")
    assert "- custom failure\n  with detail" in str(excinfo.value)


def test_format_failed_assertions() -> None:
    assert format_failed_assertions(["a", "b\nc"]) == "Failed assertions:\n- a\n- b\n  c"


def test_dangling_references_become_warnings(make_hook) -> None:
    registry = HookRegistry([make_hook("A", after=["ghost"])])
    evaluation = evaluate(registry, Settings())
    assert evaluation.order == ("A",)
    assert any("ghost" in warning for warning in evaluation.warnings)


def test_references_to_disabled_hooks_are_silent(make_hook) -> None:
    registry = HookRegistry([make_hook("A", after=["off"]), make_hook("off", enable=False)])
    assert evaluate(registry, Settings()).warnings == ()


def test_hook_without_stages_warns(make_hook) -> None:
    evaluation = evaluate(HookRegistry([make_hook("A")]), Settings(default_stages=[]))
    assert evaluation.install_stages == ()
    assert any("never runs" in warning for warning in evaluation.warnings)


def test_install_stages_and_manual_mode(make_hook) -> None:
    manual = evaluate(HookRegistry([make_hook("A", stages=["manual"])]), Settings())
    assert manual.install_stages == ("manual",)
    assert manual.manual_only
    assert manual.dispatch_stages == ()

    mixed = evaluate(HookRegistry([make_hook("A", stages=["manual"]), make_hook("B")]), Settings())
    assert mixed.install_stages == ("manual", "pre-commit")
    assert not mixed.manual_only
    assert mixed.dispatch_stages == ("pre-commit",)


def test_enabled_packages_are_collected(make_hook) -> None:
    registry = HookRegistry([make_hook("A", package="/p/a"), make_hook("B", enable=False, package="/p/b")])
    assert evaluate(registry, Settings()).enabled_packages == ("/p/a",)
