"""Shared pytest fixtures for the shipyard test suite."""

from __future__ import annotations

# Disable Rich colors and force wide terminal BEFORE any imports
# Rich checks these at import time
import os

os.environ["NO_COLOR"] = "1"
os.environ["TERM"] = "dumb"
os.environ["FORCE_COLOR"] = "0"
os.environ["COLUMNS"] = "200"  # Prevent text wrapping in CLI output

import io
import tarfile
import zipfile
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

import pytest

from shipyard.config.models import ProjectConfig
from shipyard.context import ReleaseContext, new_context
from shipyard.git.client import GitInfo

# pylint: disable=redefined-outer-name

#: Files produced by the fake ``git archive``.
SNAPSHOT_FILES: dict[str, bytes] = {
    "README.md": b"# demo\n",
    "main.go": b"package main\n",
    "internal/app.go": b"package internal\n",
}

FAKE_COMMIT = "a1b2c3d4e5f60718293a4b5c6d7e8f9012345678"


class FakeGitClient:
    """GitClient double writing a small, deterministic snapshot."""

    def __init__(self, info: GitInfo | None = None) -> None:
        self.calls: list[tuple[str, str, str]] = []
        self._info = info or GitInfo(
            full_commit=FAKE_COMMIT,
            short_commit=FAKE_COMMIT[:7],
            current_tag="v1.2.3",
            previous_tag="v1.2.2",
            branch="main",
            url="https://example.com/demo.git",
        )

    def info(self) -> GitInfo:
        return self._info

    def archive(self, output: str, commit: str, prefix: str = "") -> None:
        self.calls.append((output, commit, prefix))
        if output.endswith(".zip"):
            with zipfile.ZipFile(output, "w") as zf:
                for name, data in SNAPSHOT_FILES.items():
                    zf.writestr(prefix + name, data)
            return
        mode = "w" if output.endswith(".tar") else "w:gz"
        with tarfile.open(output, mode, format=tarfile.PAX_FORMAT, pax_headers={"comment": commit}) as tf:
            for name, data in SNAPSHOT_FILES.items():
                info = tarfile.TarInfo(prefix + name)
                info.size = len(data)
                info.mode = 0o644
                tf.addfile(info, io.BytesIO(data))


@pytest.fixture
def fake_git() -> FakeGitClient:
    """Return a fake git client."""
    return FakeGitClient()


@pytest.fixture
def make_ctx(tmp_path: Path) -> Callable[..., ReleaseContext]:
    """Build release contexts writing to a temporary dist directory."""

    def _make(
        config: ProjectConfig | None = None,
        *,
        version: str = "1.2.3",
        env: Mapping[str, str] | None = None,
        git: GitInfo | None = None,
        **kwargs: Any,
    ) -> ReleaseContext:
        project = config or ProjectConfig(project_name="blah")
        if project.dist == "dist":
            project.dist = str(tmp_path / "dist")
        if not project.parallelism:
            project.parallelism = 4
        return new_context(project, version=version, env=dict(env or {}), git=git, **kwargs)

    return _make


def list_archive(path: str | Path) -> list[str]:
    """Return the sorted member names of a zip or tar archive."""
    path = str(path)
    if path.endswith(".zip"):
        with zipfile.ZipFile(path) as zf:
            return sorted(zf.namelist())
    with tarfile.open(path) as tf:
        return sorted(m.name for m in tf.getmembers())


@pytest.fixture
def archive_names() -> Callable[[str | Path], list[str]]:
    """Expose :func:`list_archive` to tests."""
    return list_archive
