"""Data models for the shipyard.artifact module.

- ArtifactType: Closed enumeration of artifact kinds
- ArtifactExtras: Typed metadata attached to an artifact
- Artifact: Frozen record describing one produced file
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import PurePath
from types import MappingProxyType
from typing import Any


class ArtifactType(str, Enum):
    """Kind of artifact produced during a release.

    Attributes:
        BINARY: A raw built binary (never uploaded directly).
        UPLOADABLE_BINARY: A binary meant to be published as-is.
        UPLOADABLE_ARCHIVE: An archive bundling binaries and files.
        UPLOADABLE_SOURCE_ARCHIVE: A snapshot archive of the repository.
        UPLOADABLE_FILE: An arbitrary extra file selected by glob.
        LINUX_PACKAGE: A deb/rpm/apk package.
        DOCKER_IMAGE: A container image reference.
        CHECKSUM: A checksum file.
        SIGNATURE: A detached signature.
        CERTIFICATE: A signing certificate.
        METADATA: A metadata document (e.g. SBOM, metadata.json).
    """

    BINARY = "binary"
    UPLOADABLE_BINARY = "uploadable-binary"
    UPLOADABLE_ARCHIVE = "uploadable-archive"
    UPLOADABLE_SOURCE_ARCHIVE = "uploadable-source-archive"
    UPLOADABLE_FILE = "uploadable-file"
    LINUX_PACKAGE = "linux-package"
    DOCKER_IMAGE = "docker-image"
    CHECKSUM = "checksum"
    SIGNATURE = "signature"
    CERTIFICATE = "certificate"
    METADATA = "metadata"


#: Types that accompany a primary artifact through a shared group id.
SIDECAR_TYPES = frozenset(
    {
        ArtifactType.CHECKSUM,
        ArtifactType.SIGNATURE,
        ArtifactType.CERTIFICATE,
        ArtifactType.METADATA,
    }
)


@dataclass(frozen=True, slots=True)
class ArtifactExtras:
    """Typed metadata attached to an artifact.

    Known keys are explicit attributes. Anything else lives in ``custom``,
    which is frozen on construction.

    Attributes:
        id: Owning group identifier (the producing config's id).
        format: Archive format, e.g. ``tar.gz``.
        ext: File extension including the leading dot, e.g. ``.deb``.
        binaries: Names of binaries bundled in the artifact.
        custom: Free-form extra key/value pairs.

    Examples:
        >>> extras = ArtifactExtras(id="cli", format="zip", custom={"Replaces": "old"})
        >>> extras.get("format")
        'zip'
        >>> extras.get("Replaces")
        'old'
        >>> extras.get("missing", "fallback")
        'fallback'
    """

    id: str | None = None
    format: str | None = None
    ext: str | None = None
    binaries: tuple[str, ...] = ()
    custom: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        """Freeze the custom mapping."""
        object.__setattr__(self, "custom", MappingProxyType(dict(self.custom)))

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a typed field or a custom key.

        Args:
            key: Field name or custom key.
            default: Value returned when the key is unset.

        Returns:
            The stored value, or ``default``.
        """
        if key in _TYPED_EXTRA_KEYS:
            value = getattr(self, key)
            return default if value in (None, ()) else value
        return self.custom.get(key, default)


_TYPED_EXTRA_KEYS = frozenset(f.name for f in fields(ArtifactExtras) if f.name != "custom")


@dataclass(frozen=True, slots=True)
class Artifact:
    """A typed, named reference to a produced file.

    The file itself is never loaded here: consumers open ``path`` lazily
    when they need the bytes.

    Attributes:
        name: Display (and upload) name.
        path: Filesystem path.
        type: Artifact kind.
        goos: Target operating system, if any.
        goarch: Target architecture, if any.
        extra: Typed metadata.

    Examples:
        >>> a = Artifact(name="app.tar.gz", path="dist/app.tar.gz", type=ArtifactType.UPLOADABLE_ARCHIVE)
        >>> a.ext
        '.gz'
    """

    name: str
    path: str
    type: ArtifactType
    goos: str | None = None
    goarch: str | None = None
    extra: ArtifactExtras = field(default_factory=ArtifactExtras)

    @property
    def id(self) -> str | None:
        """Owning group identifier."""
        return self.extra.id

    @property
    def ext(self) -> str:
        """Recorded extension, or the suffix of ``name`` when none is recorded."""
        return self.extra.ext or PurePath(self.name).suffix


__all__ = [
    "SIDECAR_TYPES",
    "Artifact",
    "ArtifactExtras",
    "ArtifactType",
]
