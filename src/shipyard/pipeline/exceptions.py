"""Specialized exceptions raised by the shipyard.pipeline module.

Exception hierarchy::

    ShipyardError
        PipelineError (base for all pipeline errors)
            PipelineConfigError (invalid stage configuration, also ValueError)
            SkipError (intentional non-execution, non-fatal)
            StageError (fatal stage failure, wraps the cause)

Skips are told apart from failures with :func:`is_skip`, which checks the
exception type (following the ``__cause__`` chain) and never the message.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shipyard.config.exceptions import ShipyardError

if TYPE_CHECKING:
    from shipyard.pipeline.models import StageResult


class PipelineError(ShipyardError):
    """Base exception for all pipeline module errors."""


class PipelineConfigError(PipelineError, ValueError):
    """A stage's configuration is invalid.

    Raised before any file or network activity when a required field is
    missing or an enumerated value is not recognized.
    """


class SkipError(PipelineError):
    """A unit of work intentionally did not run.

    This is not a failure: the runner records it and moves on.

    Attributes:
        reason: Why the work was skipped.
    """

    def __init__(self, reason: str) -> None:
        """Initialize SkipError.

        Args:
            reason: Why the work was skipped.
        """
        super().__init__(reason)
        self.reason = reason


class StageError(PipelineError):
    """A stage failed and the pipeline was aborted.

    Attributes:
        stage: Label of the failing stage.
        reason: Description of the underlying failure.
        results: Stage results collected before the abort.
    """

    def __init__(
        self,
        stage: str,
        reason: str,
        *,
        results: list[StageResult] | None = None,
    ) -> None:
        """Initialize StageError.

        Args:
            stage: Label of the failing stage.
            reason: Description of the underlying failure.
            results: Stage results collected before the abort.
        """
        super().__init__(f"{stage}: {reason}")
        self.stage = stage
        self.reason = reason
        self.results = results or []


def is_skip(error: BaseException | None) -> bool:
    """Tell whether an error is a skip signal.

    Args:
        error: Any exception (or None).

    Returns:
        True if ``error`` or one of its causes is a :class:`SkipError`.

    Examples:
        >>> is_skip(SkipError("nothing to do"))
        True
        >>> is_skip(RuntimeError("boom"))
        False
    """
    seen: set[int] = set()
    while error is not None and id(error) not in seen:
        if isinstance(error, SkipError):
            return True
        seen.add(id(error))
        error = error.__cause__
    return False


class SkipMemento:
    """Collect skip reasons and report them as a single :class:`SkipError`.

    Examples:
        >>> memento = SkipMemento()
        >>> memento.remember(SkipError("upload a is disabled"))
        >>> memento.remember(SkipError("upload b is disabled"))
        >>> memento.check()
        Traceback (most recent call last):
        ...
        shipyard.pipeline.exceptions.SkipError: upload a is disabled, upload b is disabled
    """

    def __init__(self) -> None:
        """Initialize an empty memento."""
        self._reasons: list[str] = []

    def remember(self, error: SkipError) -> None:
        """Record a skip (duplicate reasons are kept once)."""
        if error.reason not in self._reasons:
            self._reasons.append(error.reason)

    @property
    def reasons(self) -> list[str]:
        """Recorded reasons, in order."""
        return list(self._reasons)

    def check(self) -> None:
        """Raise the aggregate skip, if anything was remembered.

        Raises:
            SkipError: Combining every remembered reason.
        """
        if self._reasons:
            raise SkipError(", ".join(self._reasons))


__all__ = [
    "PipelineConfigError",
    "PipelineError",
    "SkipError",
    "SkipMemento",
    "StageError",
    "is_skip",
]
