"""Tests for the CLI application.

These tests drive the Typer app through ``CliRunner``; git is replaced by the
``FakeGitClient`` from conftest.
"""

from __future__ import annotations

import importlib
import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

from shipyard import meta
from shipyard.cli.app import app

# pylint: disable=redefined-outer-name

# Mark all tests in this module as CLI tests
# Run with: pytest -m cli
pytestmark = pytest.mark.cli

runner = CliRunner()

SOURCE_ONLY = """\
project_name: demo
source:
  enabled: true
  format: zip
  prefix_template: "{{ project_name }}-{{ version }}/"
"""

WITH_TARGETS = """\
project_name: demo
uploads:
  - name: prod
    target: https://repo.example.com/files/
    username: deployer
  - name: staging
    target: https://staging.example.com/
    skip: true
artifactories:
  - name: production
    target: https://artifacts.example.com/repo/
    mode: binary
"""


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from an empty project directory with a clean environment."""
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith(("UPLOAD_", "ARTIFACTORY_")):
            monkeypatch.delenv(key)
    return tmp_path


@pytest.fixture
def fake_git_cls(monkeypatch: pytest.MonkeyPatch, fake_git: object) -> object:
    """Make the release command use the fake git client."""
    release_module = importlib.import_module("shipyard.cli.commands.release")
    monkeypatch.setattr(release_module, "GitClient", lambda: fake_git)
    return fake_git


def test_app_help() -> None:
    """--help lists the commands."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "check" in result.stdout
    assert "release" in result.stdout


def test_app_version() -> None:
    """--version prints the version and exits."""
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert meta.__version__ in result.stdout


class TestCheck:
    """Tests for the check command."""

    def test_missing_config(self, project: Path) -> None:
        """A missing configuration is reported."""
        result = runner.invoke(app, ["check"])
        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_source_only(self, project: Path) -> None:
        """A configuration without targets is valid."""
        (project / ".shipyard.yml").write_text(SOURCE_ONLY, encoding="utf-8")
        result = runner.invoke(app, ["check"])
        assert result.exit_code == 0, result.stdout
        assert "Source archive: enabled (zip" in result.stdout
        assert "No upload targets configured" in result.stdout
        assert "Configuration OK" in result.stdout

    def test_missing_secret(self, project: Path) -> None:
        """A user without secret is flagged; the skipped target is not."""
        config = project / "release.yml"
        config.write_text(WITH_TARGETS, encoding="utf-8")
        result = runner.invoke(app, ["check", "--config", str(config)])
        assert result.exit_code == 1
        assert "UPLOAD_PROD_SECRET" in result.stdout
        assert "skipped" in result.stdout
        assert "1 target(s) misconfigured" in result.stdout

    def test_all_targets_valid(self, project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Targets pass once credentials are present."""
        monkeypatch.setenv("UPLOAD_PROD_SECRET", "s3cret")
        config = project / "release.yml"
        config.write_text(WITH_TARGETS, encoding="utf-8")
        result = runner.invoke(app, ["check", "-c", str(config)])
        assert result.exit_code == 0, result.stdout
        assert "Configuration OK" in result.stdout

    def test_invalid_yaml(self, project: Path) -> None:
        """Malformed YAML is an error."""
        config = project / "release.yml"
        config.write_text("uploads: [unclosed\n", encoding="utf-8")
        result = runner.invoke(app, ["check", "-c", str(config)])
        assert result.exit_code == 1
        assert "invalid YAML" in result.stdout


class TestRelease:
    """Tests for the release command."""

    def test_release_source_archive(self, project: Path, fake_git_cls: object) -> None:
        """The source archive is written under dist."""
        (project / ".shipyard.yml").write_text(SOURCE_ONLY, encoding="utf-8")
        result = runner.invoke(app, ["release"])
        assert result.exit_code == 0, result.stdout
        assert "Releasing demo 1.2.3" in result.stdout
        assert "Release complete" in result.stdout
        assert (project / "dist" / "demo-1.2.3.zip").is_file()

    def test_explicit_version(self, project: Path, fake_git_cls: object) -> None:
        """--version overrides the tag-derived version."""
        (project / ".shipyard.yml").write_text(SOURCE_ONLY, encoding="utf-8")
        result = runner.invoke(app, ["release", "--version", "9.9.9"])
        assert result.exit_code == 0, result.stdout
        assert (project / "dist" / "demo-9.9.9.zip").is_file()

    def test_dry_run(self, project: Path, fake_git_cls: object) -> None:
        """A dry run produces nothing."""
        (project / ".shipyard.yml").write_text(SOURCE_ONLY, encoding="utf-8")
        result = runner.invoke(app, ["release", "--dry-run"])
        assert result.exit_code == 0, result.stdout
        assert "dry run" in result.stdout
        assert "Dry run complete" in result.stdout
        assert not (project / "dist").exists()

    def test_failure(self, project: Path, fake_git_cls: object) -> None:
        """A failing stage exits with code 1 and shows the results so far."""
        (project / ".shipyard.yml").write_text(SOURCE_ONLY + WITH_TARGETS.split("\n", 1)[1], encoding="utf-8")
        result = runner.invoke(app, ["release"])
        assert result.exit_code == 1
        assert "failed" in result.stdout
        assert "UPLOAD_PROD_SECRET" in result.stdout
