"""Typed project configuration consumed by the release stages.

These dataclasses are mutable: each stage's ``default`` hook
fills unset fields in place, and must leave explicit user values alone.

- ArchiveFileInfo: Ownership/mode/mtime overrides for an archived file
- ArchiveFile: An extra file (glob) added to the source archive
- SourceConfig: Source archive settings
- ExtraFile: An extra file (glob) published by an upload target
- UploadConfig: One publish destination
- ProjectConfig: Root of the parsed configuration tree
"""

from __future__ import annotations

from dataclasses import dataclass, field

#: Upload mode admitting archives, source archives and linux packages.
MODE_ARCHIVE = "archive"

#: Upload mode admitting uploadable binaries only.
MODE_BINARY = "binary"

#: All recognized upload modes.
UPLOAD_MODES = frozenset({MODE_ARCHIVE, MODE_BINARY})

#: Recognized source archive formats.
SOURCE_FORMATS = ("zip", "tar", "tgz", "tar.gz")


@dataclass(slots=True)
class ArchiveFileInfo:
    """Metadata overrides applied to an extra archive entry.

    Attributes:
        mode: File mode bits (e.g. ``0o644``). None keeps the on-disk mode.
        mtime: RFC 3339 timestamp or template. None keeps the on-disk mtime.
    """

    mode: int | None = None
    mtime: str | None = None


@dataclass(slots=True)
class ArchiveFile:
    """An extra file to add to an archive.

    Attributes:
        src: Glob (template) matching files on disk.
        dst: Destination folder inside the archive (template).
        strip_parent: Keep only the base name of matched files.
        info: Metadata overrides.
    """

    src: str
    dst: str = ""
    strip_parent: bool = False
    info: ArchiveFileInfo = field(default_factory=ArchiveFileInfo)


@dataclass(slots=True)
class SourceConfig:
    """Source archive settings.

    Attributes:
        enabled: Whether the source archive stage runs.
        format: One of zip, tar, tgz, tar.gz.
        name_template: Archive base name (without extension).
        prefix_template: Path prefix applied to every entry.
        files: Extra files appended to the git snapshot.
    """

    enabled: bool = False
    format: str = ""
    name_template: str = ""
    prefix_template: str = ""
    files: list[ArchiveFile] = field(default_factory=list)


@dataclass(slots=True)
class ExtraFile:
    """An extra file published alongside (or instead of) registry artifacts.

    Attributes:
        glob: Glob (template) matching files on disk.
        name_template: Optional upload name (template). Defaults to the base name.
    """

    glob: str
    name_template: str = ""


@dataclass(slots=True)
class UploadConfig:
    """One publish destination.

    Attributes:
        name: Target name, also used to derive credential variable names.
        target: Destination URL template.
        method: HTTP method (default PUT).
        username: Explicit username. Falls back to ``<KIND>_<NAME>_USERNAME``.
        mode: ``archive`` or ``binary``.
        checksum: Also upload checksum sidecars.
        signature: Also upload signature and certificate sidecars.
        meta: Also upload metadata sidecars.
        exts: Extension/format allow-list (empty means no filter).
        ids: Artifact group allow-list (empty means no filter).
        custom_headers: Header name to value template.
        trusted_certificates: PEM bundle restricting TLS trust.
        client_x509_cert: Client certificate path for mutual TLS.
        client_x509_key: Client key path for mutual TLS.
        checksum_header: Header receiving the SHA-256 of the body.
        extra_files_only: Ignore the registry and only upload extra files.
        extra_files: Extra files to upload.
        skip: Literal bool or templated boolean expression.
        timeout: Request timeout in seconds (None uses the httpx default).
    """

    name: str = ""
    target: str = ""
    method: str = ""
    username: str = ""
    mode: str = ""
    checksum: bool = False
    signature: bool = False
    meta: bool = False
    exts: list[str] = field(default_factory=list)
    ids: list[str] = field(default_factory=list)
    custom_headers: dict[str, str] = field(default_factory=dict)
    trusted_certificates: str = ""
    client_x509_cert: str = ""
    client_x509_key: str = ""
    checksum_header: str = ""
    extra_files_only: bool = False
    extra_files: list[ExtraFile] = field(default_factory=list)
    skip: bool | str = False
    timeout: float | None = None


@dataclass(slots=True)
class ProjectConfig:
    """Root of the parsed configuration tree.

    Attributes:
        project_name: Project name exposed to templates.
        dist: Output directory for produced artifacts.
        env: Extra ``KEY=VALUE`` entries layered over the process environment.
        parallelism: Maximum concurrent tasks within a stage (0 means auto).
        source: Source archive settings.
        uploads: Generic HTTP upload targets.
        artifactories: Artifactory upload targets.

    Examples:
        >>> config = ProjectConfig(project_name="demo")
        >>> config.dist
        'dist'
    """

    project_name: str = ""
    dist: str = "dist"
    env: list[str] = field(default_factory=list)
    parallelism: int = 0
    source: SourceConfig = field(default_factory=SourceConfig)
    uploads: list[UploadConfig] = field(default_factory=list)
    artifactories: list[UploadConfig] = field(default_factory=list)


__all__ = [
    "MODE_ARCHIVE",
    "MODE_BINARY",
    "SOURCE_FORMATS",
    "UPLOAD_MODES",
    "ArchiveFile",
    "ArchiveFileInfo",
    "ExtraFile",
    "ProjectConfig",
    "SourceConfig",
    "UploadConfig",
]
