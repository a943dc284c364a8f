"""Streaming rewrite of zip and tar archives.

``git archive`` produces a finished archive. To append extra files, the
stage backs it up, truncates the original, and copies every entry of the
backup into a fresh writer returned by :func:`copy_archive`. New files are
then added with :meth:`ArchiveWriter.add` before a single ``close``.

Examples:
    >>> with open("src.tar.gz.bkp", "rb") as src, open("src.tar.gz", "wb") as dst:  # doctest: +SKIP
    ...     writer = copy_archive(src, dst, "tar.gz")
    ...     writer.add(ResolvedFile("README.md", "README.md"), prefix="demo/")
    ...     writer.close()
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
import tarfile
import zipfile
from typing import IO, TYPE_CHECKING, Protocol

from shipyard.archive.exceptions import ArchiveError

if TYPE_CHECKING:
    from shipyard.archive.files import ResolvedFile

logger = logging.getLogger(__name__)

_TAR_MODES = {
    "tar": "",
    "tgz": "gz",
    "tar.gz": "gz",
}


class ArchiveWriter(Protocol):
    """Writer accepting new entries on top of a copied archive."""

    def add(self, file: ResolvedFile, prefix: str = "") -> None:
        """Add a file under ``prefix + file.destination``."""
        ...

    def close(self) -> None:
        """Finish the archive (idempotent)."""
        ...


class ZipArchiveWriter:
    """Zip implementation of :class:`ArchiveWriter`."""

    def __init__(self, target: IO[bytes]) -> None:
        """Initialize ZipArchiveWriter over a writable binary file."""
        self._zip = zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED)
        self._names: set[str] = set()
        self._closed = False

    def copy_from(self, source: IO[bytes]) -> None:
        """Copy every entry of a zip archive, keeping its metadata."""
        try:
            with zipfile.ZipFile(source) as zin:
                for info in zin.infolist():
                    if info.is_dir():
                        self._zip.writestr(info, b"")
                    else:
                        with zin.open(info) as src, self._zip.open(info, "w") as dst:
                            shutil.copyfileobj(src, dst)
                    self._names.add(info.filename.rstrip("/"))
        except zipfile.BadZipFile as exc:
            raise ArchiveError(f"invalid zip archive ({exc})") from exc

    def add(self, file: ResolvedFile, prefix: str = "") -> None:
        """Add a file to the zip archive."""
        name = _entry_name(prefix, file.destination)
        if name in self._names:
            raise ArchiveError("file already exists in archive", path=name)

        info = zipfile.ZipInfo.from_file(file.source, arcname=name)
        info.compress_type = zipfile.ZIP_DEFLATED
        if file.mode is not None:
            info.external_attr = (stat.S_IFREG | file.mode) << 16
        if file.mtime is not None:
            info.date_time = file.mtime.timetuple()[:6]

        with open(file.source, "rb") as src, self._zip.open(info, "w") as dst:
            shutil.copyfileobj(src, dst)
        self._names.add(name)
        logger.debug("Added %s to zip archive", name)

    def close(self) -> None:
        """Write the central directory."""
        if not self._closed:
            self._closed = True
            self._zip.close()


class TarArchiveWriter:
    """Tar (optionally gzip-compressed) implementation of :class:`ArchiveWriter`."""

    def __init__(self, target: IO[bytes], compression: str = "") -> None:
        """Initialize TarArchiveWriter.

        Args:
            target: Writable binary file.
            compression: ``""`` for plain tar, ``"gz"`` for gzip.
        """
        self._target = target
        self._compression = compression
        self._tar: tarfile.TarFile | None = None
        self._names: set[str] = set()
        self._closed = False

    def copy_from(self, source: IO[bytes]) -> None:
        """Copy every member of a tar archive, keeping its global PAX headers."""
        try:
            with tarfile.open(fileobj=source, mode=f"r:{self._compression}") as tin:
                out = self._open(dict(tin.pax_headers))
                for member in tin:
                    if member.isreg():
                        out.addfile(member, tin.extractfile(member))
                    else:
                        out.addfile(member)
                    self._names.add(member.name.rstrip("/"))
        except tarfile.TarError as exc:
            raise ArchiveError(f"invalid tar archive ({exc})") from exc

    def add(self, file: ResolvedFile, prefix: str = "") -> None:
        """Add a file to the tar archive."""
        name = _entry_name(prefix, file.destination)
        if name in self._names:
            raise ArchiveError("file already exists in archive", path=name)

        out = self._open({})
        info = out.gettarinfo(file.source, arcname=name)
        if file.mode is not None:
            info.mode = file.mode
        if file.mtime is not None:
            info.mtime = int(file.mtime.timestamp())
        with open(file.source, "rb") as src:
            out.addfile(info, src)
        self._names.add(name)
        logger.debug("Added %s to tar archive", name)

    def close(self) -> None:
        """Write the end-of-archive marker and flush compression."""
        if not self._closed:
            self._closed = True
            self._open({}).close()

    def _open(self, pax_headers: dict[str, str]) -> tarfile.TarFile:
        if self._tar is None:
            self._tar = tarfile.open(
                fileobj=self._target,
                mode=f"w:{self._compression}",
                format=tarfile.PAX_FORMAT,
                pax_headers=pax_headers,
            )
        return self._tar


def new_writer(target: IO[bytes], fmt: str) -> ZipArchiveWriter | TarArchiveWriter:
    """Create an empty writer for ``fmt``.

    Raises:
        ArchiveError: If the format is not supported.
    """
    if fmt == "zip":
        return ZipArchiveWriter(target)
    if fmt in _TAR_MODES:
        return TarArchiveWriter(target, _TAR_MODES[fmt])
    raise ArchiveError("unsupported archive format", path=fmt)


def copy_archive(source: IO[bytes], target: IO[bytes], fmt: str) -> ArchiveWriter:
    """Copy every entry of ``source`` into a new writer over ``target``.

    Args:
        source: Readable archive (the backup).
        target: Truncated destination file.
        fmt: One of ``zip``, ``tar``, ``tgz``, ``tar.gz``.

    Returns:
        An open writer. The caller adds files and closes it exactly once.

    Raises:
        ArchiveError: If the format is unknown or the source is unreadable.
    """
    writer = new_writer(target, fmt)
    writer.copy_from(source)
    return writer


def _entry_name(prefix: str, destination: str) -> str:
    name = f"{prefix}{destination}" if not prefix or prefix.endswith("/") else f"{prefix}/{destination}"
    return name.replace(os.sep, "/").rstrip("/")


__all__ = [
    "ArchiveWriter",
    "TarArchiveWriter",
    "ZipArchiveWriter",
    "copy_archive",
    "new_writer",
]
