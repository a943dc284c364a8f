"""Archive helpers for shipyard.

Rewrites a zip or tar archive entry by entry so extra files can be appended
after ``git archive`` has produced it.
"""

from shipyard.archive.copy import (
    ArchiveWriter,
    TarArchiveWriter,
    ZipArchiveWriter,
    copy_archive,
    new_writer,
)
from shipyard.archive.exceptions import ArchiveError
from shipyard.archive.files import ResolvedFile, eval_files

__all__ = [
    "ArchiveError",
    "ArchiveWriter",
    "ResolvedFile",
    "TarArchiveWriter",
    "ZipArchiveWriter",
    "copy_archive",
    "eval_files",
    "new_writer",
]
