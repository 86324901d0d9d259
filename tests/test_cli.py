# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI tests for hookcfg commands."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

from hookcfg.check import CheckReport, CheckRunner, CheckState
from hookcfg.cli.app import app

CONFIG = """
[settings]
store_dir = ".store"
default_stages = ["pre-commit"]

[hooks.fmt]
enable = true
entry = "black"
package = "/opt/black"

[hooks.lint]
enable = true
entry = "ruff check"
after = ["fmt"]
stages = ["pre-push"]
extra_packages = ["/opt/ruff"]

[hooks.off]
entry = "nope"
"""


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "hookcfg.toml").write_text(CONFIG, encoding="utf-8")
    return tmp_path


def test_show_prints_normalized_document(project: Path) -> None:
    result = CliRunner().invoke(app, ["show", "--root", str(project), "--no-emoji"])
    assert result.exit_code == 0, result.stdout
    document = json.loads(result.stdout)
    assert [hook["id"] for hook in document["repos"][0]["hooks"]] == ["fmt", "lint"]
    assert "exclude" not in document
    assert not (project / ".store").exists()


def test_generate_materializes_artifact(project: Path) -> None:
    result = CliRunner().invoke(app, ["generate", "--root", str(project), "--no-emoji"])
    assert result.exit_code == 0, result.stdout
    path = Path(result.stdout.strip().splitlines()[-1])
    assert path.exists()
    assert path.parent == (project / ".store").resolve()
    assert path.read_text(encoding="utf-8").startswith("# DO NOT MODIFY")


def test_stages_and_packages(project: Path) -> None:
    runner = CliRunner()
    stages = runner.invoke(app, ["stages", "--root", str(project), "--no-emoji"])
    packages = runner.invoke(app, ["packages", "--root", str(project), "--no-emoji"])
    assert stages.stdout.split() == ["pre-commit", "pre-push"]
    assert packages.stdout.split() == ["/opt/black", "/opt/ruff"]


def test_cycle_exits_non_zero_with_names(tmp_path: Path) -> None:
    (tmp_path / "hookcfg.toml").write_text(
        '[hooks.a]\nenable = true\nentry = "a"\nbefore = ["b"]\n'
        '[hooks.b]\nenable = true\nentry = "b"\nbefore = ["a"]\n',
        encoding="utf-8",
    )
    result = CliRunner().invoke(app, ["generate", "--root", str(tmp_path), "--no-emoji"])
    assert result.exit_code == 1
    assert "cycle between: a, b" in result.stdout


def test_failed_assertions_block_generation(tmp_path: Path) -> None:
    (tmp_path / "hookcfg.toml").write_text(
        '[settings]\nstore_dir = "store"\n[hooks.a]\nenable = true\n[hooks.b]\nenable = true\n',
        encoding="utf-8",
    )
    result = CliRunner().invoke(app, ["generate", "--root", str(tmp_path), "--no-emoji"])
    assert result.exit_code == 1
    assert "Failed assertions" in result.stdout
    assert "'a'" in result.stdout and "'b'" in result.stdout
    assert not (tmp_path / "store").exists()


def test_check_propagates_exit_code_and_diff(project: Path, monkeypatch) -> None:
    calls: list[dict[str, object]] = []

    def fake_run(self, source, artifact, *, extra_packages=(), manual_only=False):
        calls.append({"source": source, "packages": tuple(extra_packages), "manual": manual_only})
        return CheckReport(
            exit_code=3,
            diff="+fixed\n",
            output="fmt....Failed\n",
            command=("pre-commit", "run", "--all-files"),
            states=tuple(CheckState),
        )

    monkeypatch.setattr(CheckRunner, "run", fake_run)
    result = CliRunner().invoke(app, ["check", "--root", str(project), "--no-emoji"])

    assert result.exit_code == 3
    assert "+fixed" in result.stdout
    assert "Running: $ pre-commit run --all-files" in result.stdout
    assert calls == [{"source": project.resolve(), "packages": ("/opt/black", "/opt/ruff"), "manual": False}]


def test_install_converges_then_noops(project: Path, monkeypatch, fake_git_factory, fake_runner) -> None:
    git = fake_git_factory(project.resolve())
    monkeypatch.setattr("hookcfg.cli.install.GitClient", lambda executable, *, cwd: git)
    monkeypatch.setattr("hookcfg.cli.install.HookRunner", lambda executable, *, cwd: fake_runner)
    runner = CliRunner()

    first = runner.invoke(app, ["install", "--root", str(project), "--no-emoji"])
    assert first.exit_code == 0, first.stdout
    link = project / ".pre-commit-config.yaml"
    assert link.is_symlink()
    assert ("install", "pre-push") in fake_runner.calls

    fake_runner.calls.clear()
    git.calls.clear()
    second = runner.invoke(app, ["install", "--root", str(project), "--no-emoji"])
    assert second.exit_code == 0
    assert "already up to date" in second.stdout
    assert fake_runner.calls == []
    assert git.calls == []
    assert os.readlink(link).startswith(str((project / ".store").resolve()))


def test_install_refuses_hand_written_config(project: Path, monkeypatch, fake_git_factory, fake_runner) -> None:
    (project / ".pre-commit-config.yaml").write_text("repos: []\n", encoding="utf-8")
    git = fake_git_factory(project.resolve())
    monkeypatch.setattr("hookcfg.cli.install.GitClient", lambda executable, *, cwd: git)
    monkeypatch.setattr("hookcfg.cli.install.HookRunner", lambda executable, *, cwd: fake_runner)

    result = CliRunner().invoke(app, ["install", "--root", str(project), "--no-emoji"])

    assert result.exit_code == 1
    assert "Refusing to install" in result.stdout
    assert (project / ".pre-commit-config.yaml").read_text(encoding="utf-8") == "repos: []\n"

    lenient = CliRunner().invoke(app, ["install", "--root", str(project), "--no-strict", "--no-emoji"])

    assert lenient.exit_code == 0
    assert "Refusing to install" in lenient.stdout
    assert fake_runner.calls == []
