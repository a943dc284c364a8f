"""Source archive stage.

Snapshots the repository at the released commit with ``git archive`` and
optionally appends extra files to the result.
"""

from __future__ import annotations

import logging
import os
import shutil
from typing import TYPE_CHECKING

from shipyard.archive.copy import copy_archive
from shipyard.archive.files import eval_files
from shipyard.artifact.models import Artifact, ArtifactExtras, ArtifactType
from shipyard.config.models import SOURCE_FORMATS
from shipyard.git.client import GitClient
from shipyard.pipeline.exceptions import PipelineConfigError
from shipyard.template.engine import TemplateEngine

if TYPE_CHECKING:
    from shipyard.context import ReleaseContext

logger = logging.getLogger(__name__)

#: Format used when none is configured.
DEFAULT_FORMAT = "tar.gz"

#: Archive base name used when none is configured.
DEFAULT_NAME_TEMPLATE = "{{ project_name }}-{{ version }}"


class SourceArchiveStage:
    """Create the source archive and register it as an artifact.

    Args:
        git: Git client used to produce the snapshot.
    """

    def __init__(self, git: GitClient | None = None) -> None:
        """Initialize SourceArchiveStage."""
        self._git = git or GitClient()

    def __str__(self) -> str:
        return "creating source archive"

    def skip(self, ctx: ReleaseContext) -> bool:
        """Skip unless source archives are enabled."""
        return not ctx.config.source.enabled

    def default(self, ctx: ReleaseContext) -> None:
        """Default the format to tar.gz and the name to ``project-version``."""
        source = ctx.config.source
        if not source.format:
            source.format = DEFAULT_FORMAT
        if not source.name_template:
            source.name_template = DEFAULT_NAME_TEMPLATE

    def run(self, ctx: ReleaseContext) -> None:
        """Write ``<dist>/<name>.<format>`` and register it.

        Raises:
            PipelineConfigError: If the format is not supported.
            TemplateError: If the name or prefix template fails.
            GitError: If ``git archive`` fails.
            ArchiveError: If extra files cannot be appended.
        """
        source = ctx.config.source
        fmt = source.format
        if fmt not in SOURCE_FORMATS:
            raise PipelineConfigError(f"invalid source archive format: {fmt}")

        engine = TemplateEngine(ctx)
        filename = f"{engine.resolve(source.name_template)}.{fmt}"
        path = os.path.join(ctx.dist, filename)
        prefix = engine.resolve(source.prefix_template) if source.prefix_template else ""
        commit = ctx.git.full_commit if ctx.git and ctx.git.full_commit else "HEAD"

        logger.info("Creating source archive %s", path)
        os.makedirs(ctx.dist, exist_ok=True)
        self._git.archive(path, commit, prefix=prefix)

        if source.files:
            _append_extra_files(ctx, engine, path, fmt, prefix)

        ctx.artifacts.add(
            Artifact(
                name=filename,
                path=path,
                type=ArtifactType.UPLOADABLE_SOURCE_ARCHIVE,
                extra=ArtifactExtras(format=fmt),
            )
        )


def _append_extra_files(
    ctx: ReleaseContext,
    engine: TemplateEngine,
    path: str,
    fmt: str,
    prefix: str,
) -> None:
    backup = f"{path}.bkp"
    shutil.copyfile(path, backup)

    with open(backup, "rb") as src, open(path, "wb") as dst:
        writer = copy_archive(src, dst, fmt)
        files = eval_files(engine, ctx.config.source.files)
        for file in files:
            logger.debug("Adding %s to %s", file.source, path)
            writer.add(file, prefix=prefix)
        writer.close()

    os.remove(backup)
    logger.debug("Added %d extra file(s) to %s", len(files), path)


__all__ = [
    "DEFAULT_FORMAT",
    "DEFAULT_NAME_TEMPLATE",
    "SourceArchiveStage",
]
