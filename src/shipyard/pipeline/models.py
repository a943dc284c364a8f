"""Data models for the shipyard.pipeline module.

- StageStatus: Enum for stage outcome (success, skipped, failed)
- StageResult: Result of a single stage
- PipelineResult: Aggregate result of a pipeline run
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class StageStatus(str, Enum):
    """Outcome of a pipeline stage.

    Attributes:
        SUCCESS: Stage ran to completion.
        SKIPPED: Stage was skipped (``skip`` hook, skip signal or dry run).
        FAILED: Stage raised a fatal error.
    """

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(slots=True)
class StageResult:
    """Result of a single stage.

    Attributes:
        name: Stage label.
        status: Outcome.
        duration: Execution time in seconds.
        reason: Skip reason or error message.

    Examples:
        >>> StageResult(name="archiving sources", status=StageStatus.SUCCESS).status
        <StageStatus.SUCCESS: 'success'>
    """

    name: str
    status: StageStatus
    duration: float = 0.0
    reason: str | None = None


@dataclass(slots=True)
class PipelineResult:
    """Aggregate result of a pipeline run.

    Attributes:
        results: Ordered stage results.
        duration: Total duration in seconds.

    Examples:
        >>> PipelineResult().success
        True
    """

    results: list[StageResult] = field(default_factory=list)
    duration: float = 0.0

    @property
    def success(self) -> bool:
        """True if no stage failed."""
        return all(r.status != StageStatus.FAILED for r in self.results)

    @property
    def skipped_stages(self) -> list[StageResult]:
        """Stages that were skipped."""
        return [r for r in self.results if r.status == StageStatus.SKIPPED]

    @property
    def failed_stages(self) -> list[StageResult]:
        """Stages that failed."""
        return [r for r in self.results if r.status == StageStatus.FAILED]


__all__ = [
    "PipelineResult",
    "StageResult",
    "StageStatus",
]
