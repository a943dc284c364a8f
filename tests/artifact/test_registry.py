"""Tests for the shipyard.artifact.registry module."""

from __future__ import annotations

import threading

from shipyard.artifact.filters import by_type
from shipyard.artifact.models import Artifact, ArtifactType
from shipyard.artifact.registry import ArtifactRegistry


def _artifact(name: str, type_: ArtifactType = ArtifactType.UPLOADABLE_ARCHIVE) -> Artifact:
    return Artifact(name=name, path=f"dist/{name}", type=type_)


class TestArtifactRegistry:
    """Tests for ArtifactRegistry."""

    def test_add_and_list(self) -> None:
        """Artifacts are listed in insertion order."""
        registry = ArtifactRegistry()
        registry.add(_artifact("a.tar.gz"))
        registry.add(_artifact("b.tar.gz"))
        assert [a.name for a in registry.list()] == ["a.tar.gz", "b.tar.gz"]
        assert len(registry) == 2

    def test_list_is_a_snapshot(self) -> None:
        """Mutating the returned list does not affect the registry."""
        registry = ArtifactRegistry()
        registry.add(_artifact("a.tar.gz"))
        snapshot = registry.list()
        snapshot.clear()
        assert len(registry) == 1

    def test_filter(self) -> None:
        """Filter returns the matching artifacts only."""
        registry = ArtifactRegistry()
        registry.add(_artifact("a.tar.gz"))
        registry.add(_artifact("a.deb", ArtifactType.LINUX_PACKAGE))
        result = registry.filter(by_type(ArtifactType.LINUX_PACKAGE))
        assert [a.name for a in result] == ["a.deb"]

    def test_iteration(self) -> None:
        """The registry is iterable."""
        registry = ArtifactRegistry()
        registry.add(_artifact("a.zip"))
        assert [a.name for a in registry] == ["a.zip"]

    def test_concurrent_adds(self) -> None:
        """Adds from many threads are all kept."""
        registry = ArtifactRegistry()

        def _worker(offset: int) -> None:
            for i in range(100):
                registry.add(_artifact(f"{offset}-{i}.zip"))

        threads = [threading.Thread(target=_worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len(registry) == 800
