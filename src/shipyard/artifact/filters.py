"""Composable artifact predicates.

Filters are plain callables ``(Artifact) -> bool``. Combine them with
:func:`and_` and :func:`or_` before handing them to
:meth:`ArtifactRegistry.filter`.

Examples:
    >>> from shipyard.artifact.models import Artifact, ArtifactType
    >>> keep = and_(by_type(ArtifactType.LINUX_PACKAGE), by_ext("deb"))
    >>> keep(Artifact(name="a.deb", path="a.deb", type=ArtifactType.LINUX_PACKAGE))
    True
"""

from __future__ import annotations

from collections.abc import Callable

from shipyard.artifact.models import Artifact, ArtifactType

Filter = Callable[[Artifact], bool]


def by_type(*types: ArtifactType) -> Filter:
    """Match artifacts whose type is one of ``types``."""
    wanted = frozenset(types)
    return lambda a: a.type in wanted


def by_ids(*ids: str) -> Filter:
    """Match artifacts tagged with one of the given group ids.

    Artifacts without a group id never match. The source archive carries
    none, so an upload target listing ids does not receive it.
    """
    wanted = frozenset(ids)
    return lambda a: a.id is not None and a.id in wanted


def by_ext(*exts: str) -> Filter:
    """Match artifacts by recorded extension or recorded format.

    The leading dot is optional on both sides, so ``"deb"`` matches an
    artifact recorded with ext ``".deb"`` and ``"tar.gz"`` matches format
    ``"tar.gz"``.
    """
    wanted = frozenset(_normalize_ext(e) for e in exts)

    def _match(a: Artifact) -> bool:
        candidates = (a.extra.ext, a.extra.format)
        return any(c and _normalize_ext(c) in wanted for c in candidates)

    return _match


def and_(*filters: Filter) -> Filter:
    """Match when every filter matches (an empty list matches everything)."""
    return lambda a: all(f(a) for f in filters)


def or_(*filters: Filter) -> Filter:
    """Match when at least one filter matches (an empty list matches nothing)."""
    return lambda a: any(f(a) for f in filters)


def _normalize_ext(ext: str) -> str:
    return ext.lstrip(".").lower()


__all__ = [
    "Filter",
    "and_",
    "by_ext",
    "by_ids",
    "by_type",
    "or_",
]
