# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the normalized configuration merge."""

from __future__ import annotations

import json

from hookcfg.merge import MATCH_NOTHING, merge, merge_excludes


def test_merge_excludes_empty_is_none() -> None:
    assert merge_excludes([]) is None


def test_merge_excludes_joins_verbatim_in_order() -> None:
    assert merge_excludes(["a", "b"]) == "(a|b)"
    assert merge_excludes(["b", "a"]) == "(b|a)"
    assert merge_excludes([r"^vendor/.*\.py$"]) == r"(^vendor/.*\.py$)"


def test_exclude_key_omitted_without_excludes(make_hook) -> None:
    document = merge([make_hook("fmt")], [], ["pre-commit"]).to_document()
    assert "exclude" not in document
    assert document["default_stages"] == ["pre-commit"]


def test_exclude_key_present_with_excludes(make_hook) -> None:
    document = merge([make_hook("fmt")], ["a", "b"], []).to_document()
    assert document["exclude"] == "(a|b)"
    assert "default_stages" not in document


def test_hooks_keep_given_order(make_hook) -> None:
    hooks = [make_hook("second"), make_hook("first")]
    document = merge(hooks, [], []).to_document()
    assert document["repos"] == [
        {"repo": "local", "hooks": [hooks[0].raw_form([]), hooks[1].raw_form([])]},
    ]
    assert [hook["id"] for hook in document["repos"][0]["hooks"]] == ["second", "first"]


def test_hook_raw_form_inherits_default_stages(make_hook) -> None:
    document = merge([make_hook("fmt"), make_hook("push-only", stages=["pre-push"])], [], ["pre-commit"]).to_document()
    hooks = document["repos"][0]["hooks"]
    assert hooks[0]["stages"] == ["pre-commit"]
    assert hooks[1]["stages"] == ["pre-push"]


def test_hook_without_excludes_matches_nothing(make_hook) -> None:
    raw = make_hook("fmt").raw_form([])
    assert raw["exclude"] == MATCH_NOTHING
    assert make_hook("fmt", excludes=["x", "y"]).raw_form([])["exclude"] == "(x|y)"


def test_to_json_is_byte_identical_across_calls(make_hook) -> None:
    hooks = [make_hook("fmt", excludes=["gen/"]), make_hook("lint", after=["fmt"])]
    first = merge(hooks, ["build/"], ["pre-commit"]).to_json()
    second = merge(hooks, ["build/"], ["pre-commit"]).to_json()
    assert first == second
    assert json.loads(first)["exclude"] == "(build/)"
    assert first.endswith("\n")
