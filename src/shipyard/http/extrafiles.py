"""Resolution of extra files published by upload targets."""

from __future__ import annotations

import glob
import logging
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from shipyard.config.models import ExtraFile
    from shipyard.template.engine import TemplateEngine

logger = logging.getLogger(__name__)


def find_extra_files(engine: TemplateEngine, extra_files: Iterable[ExtraFile]) -> dict[str, str]:
    """Map upload names to file paths for the configured extra files.

    Args:
        engine: Template engine for ``glob`` and ``name_template``.
        extra_files: Configured entries.

    Returns:
        Upload name to path, in discovery order. Later duplicates replace
        earlier ones.

    Raises:
        ValueError: If a ``name_template`` is set on a glob matching several files.
        TemplateError: If a template cannot be resolved.
    """
    result: dict[str, str] = {}
    for extra in extra_files:
        pattern = engine.resolve(extra.glob)
        matches = sorted(m for m in glob.glob(pattern, recursive=True) if os.path.isfile(m))
        if not matches:
            logger.warning("No extra file matched %s", pattern)
            continue
        if extra.name_template and len(matches) > 1:
            raise ValueError(f"extra file {pattern!r} matches {len(matches)} files but sets a name template")
        for path in matches:
            name = engine.resolve(extra.name_template) if extra.name_template else os.path.basename(path)
            if name in result:
                logger.debug("Extra file %s overrides %s", path, result[name])
            result[name] = path
    return result


__all__ = [
    "find_extra_files",
]
