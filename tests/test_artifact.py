# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the content-addressed artifact store."""

from __future__ import annotations

import os
import stat
from pathlib import Path

from hookcfg.artifact import PROVENANCE_HEADER, ArtifactStore, read_artifact
from hookcfg.models import Settings


def test_materialize_writes_header_and_document(materialize) -> None:
    artifact = materialize()
    text = artifact.path.read_text(encoding="utf-8")
    assert text.startswith(PROVENANCE_HEADER)
    assert "# DO NOT MODIFY" in text
    assert read_artifact(artifact.path) == artifact.document
    assert artifact.path.name == f"{artifact.digest}-pre-commit-config.json"


def test_artifact_is_read_only(materialize) -> None:
    mode = materialize().path.stat().st_mode
    assert not mode & (stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH)


def test_same_inputs_reuse_the_same_artifact(materialize, make_hook) -> None:
    first = materialize(make_hook("fmt"))
    mtime = first.path.stat().st_mtime_ns
    second = materialize(make_hook("fmt"))
    assert first.path == second.path
    assert second.path.stat().st_mtime_ns == mtime


def test_identity_tracks_hooks_settings_and_runner(materialize, make_hook) -> None:
    base = materialize(make_hook("fmt")).digest
    assert materialize(make_hook("fmt", files=r"\.py$")).digest != base
    assert materialize(make_hook("fmt"), settings=Settings(excludes=["gen/"])).digest != base
    assert materialize(make_hook("fmt"), runner="/other/pre-commit").digest != base
    assert materialize(make_hook("fmt"), settings=Settings(add_gc_root=False)).digest == base


def test_store_leaves_no_temporary_files(materialize, store: ArtifactStore) -> None:
    materialize()
    assert [path.name for path in store.root.iterdir() if path.name.startswith(".tmp-")] == []


def test_gc_root_registration_is_idempotent(materialize, store: ArtifactStore, tmp_path: Path) -> None:
    artifact = materialize()
    link = tmp_path / "wc" / ".pre-commit-config.yaml"
    link.parent.mkdir()
    link.symlink_to(artifact.path)

    entry = store.add_gc_root(link)
    mtime = os.lstat(entry).st_mtime_ns
    assert store.add_gc_root(link) == entry
    assert os.lstat(entry).st_mtime_ns == mtime
    assert store.live_roots() == [artifact.path]


def test_live_roots_ignore_removed_links(materialize, store: ArtifactStore, tmp_path: Path) -> None:
    artifact = materialize()
    link = tmp_path / "link"
    link.symlink_to(artifact.path)
    store.add_gc_root(link)
    link.unlink()
    assert store.live_roots() == []
