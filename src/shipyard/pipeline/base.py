"""Protocol implemented by every release stage.

A stage is a standalone unit with three hooks:

- ``skip``: whether the stage has nothing to do for this release
- ``default``: fill unset configuration fields (idempotent)
- ``run``: do the work, raising on failure (or :class:`SkipError`)

Its ``__str__`` is the human-readable label used in logs and errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from shipyard.context import ReleaseContext


@runtime_checkable
class Stage(Protocol):
    """Protocol defining the interface for pipeline stages.

    Examples:
        >>> class Hello:
        ...     def __str__(self) -> str:
        ...         return "saying hello"
        ...     def skip(self, ctx) -> bool:
        ...         return False
        ...     def default(self, ctx) -> None:
        ...         pass
        ...     def run(self, ctx) -> None:
        ...         print("hello")
        >>> isinstance(Hello(), Stage)
        True
    """

    def skip(self, ctx: ReleaseContext) -> bool:
        """Return True when the stage should not run at all."""
        ...

    def default(self, ctx: ReleaseContext) -> None:
        """Fill unset configuration fields without touching explicit values."""
        ...

    def run(self, ctx: ReleaseContext) -> None:
        """Execute the stage.

        Raises:
            SkipError: The stage intentionally did nothing (non-fatal).
            Exception: Any other error aborts the pipeline.
        """
        ...


__all__ = [
    "Stage",
]
