"""Release context shared by every pipeline stage.

One :class:`ReleaseContext` exists per invocation. The pipeline runner owns
it and passes it by reference to each stage; stages communicate through its
artifact registry and, for defaults, through its configuration tree.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from shipyard.artifact.registry import ArtifactRegistry
from shipyard.config.exceptions import ConfigFormatError
from shipyard.config.models import ProjectConfig

if TYPE_CHECKING:
    from shipyard.git.client import GitInfo

logger = logging.getLogger(__name__)


class Env(Mapping[str, str]):
    """Read-only view of the environment snapshot.

    Mutation goes through :class:`ReleaseContext` (``set_env``,
    ``unset_env``, ``override_env``) so that changes are explicit.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, str] | None = None) -> None:
        """Initialize Env from a mapping (copied)."""
        self._data: dict[str, str] = dict(data or {})

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Env({len(self._data)} variables)"


@dataclass(slots=True)
class ReleaseContext:
    """Process-scoped state for one release.

    Attributes:
        config: Parsed project configuration.
        version: Semantic version without a leading ``v``.
        tag: Git tag being released.
        git: Version-control metadata.
        artifacts: Registry of produced artifacts.
        dist: Output directory.
        parallelism: Maximum concurrent tasks inside a stage.
        date: Release timestamp (UTC), fixed at creation.
        dry_run: Whether stages should avoid side effects.
        skip_notes: Stage label to skip reason, filled by the runner.

    Examples:
        >>> ctx = ReleaseContext(config=ProjectConfig(project_name="demo"), version="1.2.3", tag="v1.2.3")
        >>> ctx.project_name
        'demo'
    """

    config: ProjectConfig
    version: str = ""
    tag: str = ""
    git: GitInfo | None = None
    artifacts: ArtifactRegistry = field(default_factory=ArtifactRegistry)
    dist: str = "dist"
    parallelism: int = 1
    date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    dry_run: bool = False
    skip_notes: dict[str, str] = field(default_factory=dict)
    _env: Env = field(default_factory=Env)

    @property
    def project_name(self) -> str:
        """Project name from the configuration."""
        return self.config.project_name

    @property
    def env(self) -> Env:
        """Read-only environment snapshot."""
        return self._env

    def set_env(self, key: str, value: str) -> None:
        """Override a single environment variable."""
        self._env = Env({**self._env, key: value})

    def unset_env(self, key: str) -> None:
        """Remove an environment variable from the snapshot (no-op if absent)."""
        self._env = Env({k: v for k, v in self._env.items() if k != key})

    def override_env(self, values: Mapping[str, str]) -> None:
        """Override several environment variables at once."""
        self._env = Env({**self._env, **values})


def parse_env_entries(entries: list[str]) -> dict[str, str]:
    """Parse ``KEY=VALUE`` entries from the configuration.

    Args:
        entries: Raw entries, e.g. ``["FOO=bar"]``.

    Returns:
        Parsed mapping (later entries win).

    Raises:
        ConfigFormatError: If an entry has no ``=`` or an empty key.

    Examples:
        >>> parse_env_entries(["A=1", "B=x=y"])
        {'A': '1', 'B': 'x=y'}
    """
    result: dict[str, str] = {}
    for entry in entries:
        key, sep, value = entry.partition("=")
        if not sep or not key:
            raise ConfigFormatError(f"invalid entry {entry!r} (expected KEY=VALUE)", key="env")
        result[key] = value
    return result


def new_context(
    config: ProjectConfig,
    *,
    version: str = "",
    tag: str = "",
    env: Mapping[str, str] | None = None,
    git: GitInfo | None = None,
    dry_run: bool = False,
) -> ReleaseContext:
    """Build the release context for one invocation.

    The environment snapshot is ``env`` (or ``os.environ`` when omitted),
    overlaid with the configuration's ``env`` entries.

    Args:
        config: Parsed project configuration.
        version: Version being released. Derived from ``tag`` when empty.
        tag: Tag being released. Falls back to ``git.current_tag``.
        env: Environment snapshot (defaults to the process environment).
        git: Version-control metadata.
        dry_run: Whether stages should avoid side effects.

    Returns:
        A fresh ReleaseContext.
    """
    snapshot = dict(os.environ if env is None else env)
    snapshot.update(parse_env_entries(config.env))

    resolved_tag = tag or (git.current_tag if git is not None else "")
    resolved_version = version or resolved_tag.removeprefix("v")
    parallelism = config.parallelism if config.parallelism > 0 else (os.cpu_count() or 1)

    ctx = ReleaseContext(
        config=config,
        version=resolved_version,
        tag=resolved_tag,
        git=git,
        dist=config.dist,
        parallelism=parallelism,
        dry_run=dry_run,
        _env=Env(snapshot),
    )
    logger.debug(
        "Release context ready: project=%s version=%s tag=%s parallelism=%d",
        ctx.project_name,
        ctx.version,
        ctx.tag,
        ctx.parallelism,
    )
    return ctx


__all__ = [
    "Env",
    "ReleaseContext",
    "new_context",
    "parse_env_entries",
]
