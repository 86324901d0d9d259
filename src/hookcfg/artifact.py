# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Content-addressed storage for materialized runner configuration files."""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from .evaluation import Evaluation

ARTIFACT_SUFFIX: Final[str] = "pre-commit-config.json"
GC_ROOTS_DIR: Final[str] = "gcroots"
PROVENANCE_HEADER: Final[str] = "# DO NOT MODIFY\n# This file was generated by hookcfg\n"
_HASH_ENCODING: Final[str] = "utf-8"
_READ_ONLY: Final[int] = 0o444


@dataclass(frozen=True, slots=True)
class Artifact:
    """Immutable configuration file identified by the digest of its inputs."""

    path: Path
    digest: str
    document: dict[str, Any]


def artifact_digest(evaluation: Evaluation, *, runner: str) -> str:
    """Return the identity of the artifact produced for ``evaluation``.

    The digest covers every enabled hook definition, the merge settings, and
    the runner reference so that swapping the runner invalidates the artifact.
    """

    payload = {
        "hooks": [hook.model_dump(mode="json") for hook in evaluation.hooks],
        "excludes": list(evaluation.settings.excludes),
        "default_stages": list(evaluation.settings.default_stages),
        "runner": runner,
    }
    serialized = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(serialized.encode(_HASH_ENCODING)).hexdigest()


def render_artifact(evaluation: Evaluation) -> str:
    """Return the artifact text: provenance header followed by JSON."""

    return PROVENANCE_HEADER + evaluation.config.to_json()


def read_artifact(path: Path) -> dict[str, Any]:
    """Parse an artifact written by :class:`ArtifactStore` back into a mapping."""

    lines = path.read_text(encoding=_HASH_ENCODING).splitlines()
    body = "\n".join(line for line in lines if not line.startswith("#"))
    document = json.loads(body)
    if not isinstance(document, dict):
        raise ValueError(f"Artifact at {path} does not hold a mapping")
    return document


class ArtifactStore:
    """Directory of immutable artifacts plus indirect garbage-collection roots."""

    def __init__(self, root: Path) -> None:
        self._root = root.absolute()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def gc_roots_dir(self) -> Path:
        return self._root / GC_ROOTS_DIR

    def path_for(self, digest: str) -> Path:
        return self._root / f"{digest}-{ARTIFACT_SUFFIX}"

    def contains(self, path: Path) -> bool:
        """Return whether ``path`` names an artifact inside this store."""

        try:
            path.relative_to(self._root)
        except ValueError:
            return False
        return path.name.endswith(ARTIFACT_SUFFIX)

    def materialize(self, evaluation: Evaluation, *, runner: str) -> Artifact:
        """Write the artifact for ``evaluation`` unless it already exists.

        Args:
            evaluation: Evaluated configuration to persist.
            runner: Reference to the runner executable included in the identity.

        Returns:
            Artifact: Descriptor of the stored file.
        """

        digest = artifact_digest(evaluation, runner=runner)
        path = self.path_for(digest)
        if not path.exists():
            self._write_atomically(path, render_artifact(evaluation))
        return Artifact(path=path, digest=digest, document=evaluation.config.to_document())

    def _write_atomically(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        handle = tempfile.NamedTemporaryFile(
            "w",
            encoding=_HASH_ENCODING,
            dir=path.parent,
            prefix=".tmp-",
            delete=False,
        )
        try:
            with handle:
                handle.write(content)
            os.chmod(handle.name, _READ_ONLY)
            os.replace(handle.name, path)
        except OSError:
            Path(handle.name).unlink(missing_ok=True)
            raise

    def root_name(self, link: Path) -> str:
        digest = hashlib.sha256(str(link.absolute()).encode(_HASH_ENCODING)).hexdigest()
        return digest[:32]

    def add_gc_root(self, link: Path) -> Path:
        """Register ``link`` as an indirect root keeping its target alive.

        Args:
            link: Symlink (typically in a working copy) pointing at an artifact.

        Returns:
            Path: The root entry inside the store.
        """

        entry = self.gc_roots_dir / self.root_name(link)
        target = str(link.absolute())
        if entry.is_symlink() and os.readlink(entry) == target:
            return entry
        self.gc_roots_dir.mkdir(parents=True, exist_ok=True)
        replace_symlink(entry, target)
        return entry

    def live_roots(self) -> list[Path]:
        """Return artifacts reachable from registered roots, sorted by path."""

        if not self.gc_roots_dir.is_dir():
            return []
        live: set[Path] = set()
        for entry in self.gc_roots_dir.iterdir():
            link = Path(os.readlink(entry)) if entry.is_symlink() else None
            if link is None or not link.is_symlink():
                continue
            target = Path(os.readlink(link))
            if self.contains(target) and target.exists():
                live.add(target)
        return sorted(live)


def replace_symlink(link: Path, target: str | Path) -> None:
    """Atomically point ``link`` at ``target``, replacing any existing link."""

    staging = link.with_name(f".{link.name}.hookcfg-tmp")
    staging.unlink(missing_ok=True)
    staging.symlink_to(target)
    os.replace(staging, link)


__all__ = [
    "ARTIFACT_SUFFIX",
    "PROVENANCE_HEADER",
    "Artifact",
    "ArtifactStore",
    "artifact_digest",
    "read_artifact",
    "render_artifact",
    "replace_symlink",
]
