# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

import pytest

from hookcfg.artifact import ArtifactStore
from hookcfg.evaluation import evaluate
from hookcfg.models import HookDefinition, HookRegistry, Settings


class FakeGit:
    """In-memory stand-in for :class:`hookcfg.git.GitClient`."""

    def __init__(self, toplevel: Path, *, common_dir: Path | None = None) -> None:
        self.toplevel_path = toplevel
        self.common_dir_path = common_dir or toplevel / ".git"
        self.is_available = True
        self.in_work_tree = True
        self.config: dict[str, str] = {}
        self.calls: list[tuple[str, ...]] = []
        self.diff_text = ""
        self.cwd: Path | None = None
        self.env: Mapping[str, str] | None = None

    def available(self) -> bool:
        return self.is_available

    def is_work_tree(self) -> bool:
        return self.in_work_tree

    def toplevel(self) -> Path:
        return self.toplevel_path

    def common_dir(self) -> Path:
        return self.common_dir_path

    def get_config(self, key: str) -> str | None:
        return self.config.get(key)

    def set_config(self, key: str, value: str) -> None:
        self.calls.append(("config", key, value))
        self.config[key] = value

    def init(self) -> None:
        self.calls.append(("init",))

    def add_all(self) -> None:
        self.calls.append(("add",))

    def commit(self, message: str) -> None:
        self.calls.append(("commit", message))

    def diff(self, *, color: bool = True) -> str:
        self.calls.append(("diff",))
        return self.diff_text


class FakeRunner:
    """In-memory stand-in for :class:`hookcfg.runner.HookRunner`."""

    def __init__(self, *, returncode: int = 0, output: str = "") -> None:
        self.is_available = True
        self.returncode = returncode
        self.output = output
        self.calls: list[tuple[str, ...]] = []
        self.on_run: Callable[[Path], None] | None = None
        self.cwd: Path | None = None
        self.env: Mapping[str, str] | None = None

    def available(self) -> bool:
        return self.is_available

    def reference(self) -> str:
        return "/opt/fake/bin/pre-commit"

    def install(self, dispatch_name: str | None = None) -> None:
        self.calls.append(("install", dispatch_name or ""))

    def uninstall(self, dispatch_name: str) -> None:
        self.calls.append(("uninstall", dispatch_name))

    def run_all(self, *, manual: bool = False) -> subprocess.CompletedProcess[str]:
        self.calls.append(("run", "manual" if manual else "default"))
        if self.on_run is not None and self.cwd is not None:
            self.on_run(self.cwd)
        return subprocess.CompletedProcess(args=["pre-commit"], returncode=self.returncode, stdout=self.output, stderr="")


@pytest.fixture
def make_hook() -> Callable[..., HookDefinition]:
    """Return a factory building enabled hooks with a default entry."""

    def _make(hook_id: str, **overrides: Any) -> HookDefinition:
        data: dict[str, Any] = {"id": hook_id, "enable": True, "entry": {"command": hook_id}}
        data.update(overrides)
        return HookDefinition.model_validate(data)

    return _make


@pytest.fixture
def store(tmp_path: Path) -> ArtifactStore:
    return ArtifactStore(tmp_path / "store")


@pytest.fixture
def materialize(store: ArtifactStore, make_hook: Callable[..., HookDefinition]):
    """Return a helper materializing an artifact for the given hooks."""

    def _materialize(*hooks: HookDefinition, settings: Settings | None = None, runner: str = "pre-commit"):
        registry = HookRegistry(hooks or (make_hook("fmt"),))
        evaluation = evaluate(registry, settings or Settings())
        return store.materialize(evaluation, runner=runner)

    return _materialize


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def fake_git_factory() -> Callable[[Path], FakeGit]:
    return FakeGit
