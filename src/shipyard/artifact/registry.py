"""Thread-safe, append-only artifact registry."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from shipyard.artifact.filters import Filter
    from shipyard.artifact.models import Artifact

logger = logging.getLogger(__name__)


class ArtifactRegistry:
    """Ordered collection of every artifact produced during a run.

    Producers may call :meth:`add` concurrently. Readers get snapshots from
    :meth:`filter` and :meth:`list`, so iterating a result never observes
    later insertions. There is no removal: artifacts are facts about the run.

    Examples:
        >>> from shipyard.artifact.models import Artifact, ArtifactType
        >>> from shipyard.artifact.filters import by_type
        >>> registry = ArtifactRegistry()
        >>> registry.add(Artifact(name="a.deb", path="a.deb", type=ArtifactType.LINUX_PACKAGE))
        >>> [a.name for a in registry.filter(by_type(ArtifactType.LINUX_PACKAGE))]
        ['a.deb']
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._items: list[Artifact] = []
        self._lock = threading.Lock()

    def add(self, artifact: Artifact) -> None:
        """Append an artifact.

        Args:
            artifact: The artifact to register.
        """
        with self._lock:
            self._items.append(artifact)
        logger.debug(
            "Added artifact name=%s type=%s path=%s",
            artifact.name,
            artifact.type.value,
            artifact.path,
        )

    def list(self) -> list[Artifact]:
        """Return a snapshot of every artifact, in insertion order."""
        with self._lock:
            return list(self._items)

    def filter(self, predicate: Filter) -> list[Artifact]:
        """Return a snapshot of the artifacts matching ``predicate``.

        Args:
            predicate: Artifact filter (see :mod:`shipyard.artifact.filters`).

        Returns:
            A new list, independent of the registry.
        """
        return [a for a in self.list() if predicate(a)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[Artifact]:
        return iter(self.list())


__all__ = [
    "ArtifactRegistry",
]
