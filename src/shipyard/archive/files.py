"""Resolution of extra archive files.

Turns the configured ``src`` globs into concrete ``(source, destination)``
pairs, applying the ``dst`` folder, ``strip_parent`` and metadata overrides.
"""

from __future__ import annotations

import glob
import logging
import os
import posixpath
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from shipyard.archive.exceptions import ArchiveError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from shipyard.config.models import ArchiveFile
    from shipyard.template.engine import TemplateEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolvedFile:
    """A file on disk and where it lands inside an archive.

    Attributes:
        source: Filesystem path.
        destination: Entry name relative to the archive prefix.
        mode: Mode override, or None to keep the on-disk mode.
        mtime: Modification time override, or None.
    """

    source: str
    destination: str
    mode: int | None = None
    mtime: datetime | None = None


def eval_files(engine: TemplateEngine, files: Iterable[ArchiveFile]) -> list[ResolvedFile]:
    """Expand extra file entries into resolved files.

    Matches are sorted per glob. When two entries produce the same
    destination, the first one wins and the others are dropped.

    Args:
        engine: Template engine for ``src``, ``dst`` and ``info.mtime``.
        files: Configured extra files.

    Returns:
        Resolved files, unique by destination.

    Raises:
        ArchiveError: If a glob matches nothing or an mtime is invalid.
        TemplateError: If a template cannot be resolved.
    """
    result: list[ResolvedFile] = []
    seen: set[str] = set()
    for entry in files:
        pattern = engine.resolve(entry.src)
        dst = engine.resolve(entry.dst)
        mtime = _parse_mtime(engine.resolve(entry.info.mtime)) if entry.info.mtime else None

        matches = sorted(m for m in glob.glob(pattern, recursive=True) if os.path.isfile(m))
        if not matches:
            raise ArchiveError("no files matched", path=pattern)

        for match in matches:
            name = os.path.basename(match) if entry.strip_parent else match
            destination = posixpath.normpath(posixpath.join(dst, name.replace(os.sep, "/")))
            if destination in seen:
                logger.debug("Ignoring %s: %s already added", match, destination)
                continue
            seen.add(destination)
            result.append(ResolvedFile(source=match, destination=destination, mode=entry.info.mode, mtime=mtime))
    return result


def _parse_mtime(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ArchiveError("invalid mtime", path=value) from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


__all__ = [
    "ResolvedFile",
    "eval_files",
]
