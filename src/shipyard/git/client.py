"""Thin wrapper over the ``git`` executable.

Only the handful of commands the release needs are exposed: collecting
commit/tag metadata and producing a snapshot archive with ``git archive``.
Stages receive a :class:`GitClient` through their constructor so tests can
substitute a double.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass

from shipyard.git.exceptions import GitError
from shipyard.logging import TRACE_LEVEL

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GitInfo:
    """Version-control metadata captured at the start of a release.

    Attributes:
        full_commit: Full commit SHA being released.
        short_commit: Abbreviated SHA.
        current_tag: Tag pointing at ``full_commit``.
        previous_tag: Previous tag, if any.
        branch: Current branch name.
        url: Remote ``origin`` URL.
        dirty: Whether the working tree has uncommitted changes.
    """

    full_commit: str = ""
    short_commit: str = ""
    current_tag: str = ""
    previous_tag: str = ""
    branch: str = ""
    url: str = ""
    dirty: bool = False

    @property
    def commit(self) -> str:
        """Alias of ``full_commit``."""
        return self.full_commit


class GitClient:
    """Run git commands in a repository.

    Args:
        cwd: Repository directory (defaults to the working directory).
        executable: Git executable name or path.

    Examples:
        >>> git = GitClient()
        >>> info = git.info()  # doctest: +SKIP
        >>> git.archive("dist/src.tar.gz", info.full_commit, prefix="src/")  # doctest: +SKIP
    """

    def __init__(self, cwd: str | None = None, executable: str = "git") -> None:
        """Initialize GitClient."""
        self._cwd = cwd
        self._executable = executable

    def run(self, *args: str) -> str:
        """Run a git command and return its stripped stdout.

        Raises:
            GitError: If git exits with a non-zero status or is missing.
        """
        cmd = [self._executable, "-c", "log.showSignature=false", *args]
        logger.log(TRACE_LEVEL, "Running %s", " ".join(cmd))
        try:
            proc = subprocess.run(  # noqa: S603
                cmd,
                cwd=self._cwd,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise GitError(list(args), str(exc)) from exc
        if proc.returncode != 0:
            raise GitError(list(args), proc.stderr)
        return proc.stdout.strip()

    def archive(self, output: str, commit: str, prefix: str = "") -> None:
        """Write a clean snapshot of ``commit`` to ``output``.

        The format is inferred by git from the output extension
        (zip, tar, tgz, tar.gz).

        Args:
            output: Destination file path.
            commit: Commit-ish to archive.
            prefix: Path prefix applied to every entry.
        """
        args = ["archive", "-o", output]
        if prefix:
            args += ["--prefix", prefix]
        args.append(commit)
        self.run(*args)

    def info(self) -> GitInfo:
        """Collect commit, tag and branch metadata for HEAD."""
        full_commit = self.run("show", "--format=%H", "HEAD", "--quiet")
        short_commit = self.run("show", "--format=%h", "HEAD", "--quiet")
        current_tag = self._optional("describe", "--tags", "--abbrev=0", "--exact-match", "HEAD")
        previous_tag = ""
        if current_tag:
            previous_tag = self._optional("describe", "--tags", "--abbrev=0", f"{current_tag}^")
        branch = self._optional("rev-parse", "--abbrev-ref", "HEAD")
        url = self._optional("ls-remote", "--get-url")
        dirty = bool(self._optional("status", "--porcelain"))
        return GitInfo(
            full_commit=full_commit,
            short_commit=short_commit,
            current_tag=current_tag,
            previous_tag=previous_tag,
            branch=branch,
            url=url,
            dirty=dirty,
        )

    def _optional(self, *args: str) -> str:
        try:
            return self.run(*args)
        except GitError as exc:
            logger.debug("Ignoring git failure: %s", exc)
            return ""


__all__ = [
    "GitClient",
    "GitInfo",
]
