"""Pipeline runner for sequential stage execution.

Provides the ``PipelineRunner`` class that drives release stages in order
over a shared :class:`~shipyard.context.ReleaseContext`, telling skips from
failures.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from shipyard.pipeline.exceptions import SkipError, StageError, is_skip
from shipyard.pipeline.models import PipelineResult, StageResult, StageStatus

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shipyard.context import ReleaseContext
    from shipyard.pipeline.base import Stage

logger = logging.getLogger(__name__)


class PipelineRunner:
    """Execute release stages one after the other.

    For each stage the runner:

    1. asks ``skip(ctx)``; a skipped stage gets neither ``default`` nor ``run``;
    2. calls ``default(ctx)``;
    3. calls ``run(ctx)`` (unless in dry-run mode).

    A :class:`SkipError` from ``run`` is recorded and the pipeline goes on.
    Any other exception aborts the remaining stages with a
    :class:`StageError` naming the stage, chained to the original error.

    Args:
        stages: Ordered stages.

    Examples:
        >>> from shipyard.stages import SourceArchiveStage, UploadStage
        >>> runner = PipelineRunner([SourceArchiveStage(), UploadStage()])
        >>> result = runner.run(ctx)  # doctest: +SKIP
    """

    def __init__(self, stages: Sequence[Stage]) -> None:
        """Initialize PipelineRunner.

        Args:
            stages: Ordered stages to execute.
        """
        self._stages = tuple(stages)

    @property
    def stages(self) -> tuple[Stage, ...]:
        """Return the configured stages."""
        return self._stages

    def run(self, ctx: ReleaseContext, *, dry_run: bool = False) -> PipelineResult:
        """Execute the pipeline.

        Args:
            ctx: Release context, shared by every stage.
            dry_run: Apply defaults but do not call ``run``. Also enabled by
                ``ctx.dry_run``.

        Returns:
            PipelineResult with one result per stage.

        Raises:
            StageError: If a stage fails with anything other than a skip.
        """
        dry_run = dry_run or ctx.dry_run
        pipeline_result = PipelineResult()
        start = time.monotonic()

        logger.info(
            "Pipeline started (%d stages%s)",
            len(self._stages),
            ", dry_run=True" if dry_run else "",
        )

        for stage in self._stages:
            label = str(stage)
            stage_start = time.monotonic()
            try:
                result = self._run_stage(stage, label, ctx, dry_run)
            except Exception as exc:
                if is_skip(exc):
                    reason = _skip_reason(exc)
                    ctx.skip_notes[label] = reason
                    logger.info("Stage '%s' skipped: %s", label, reason)
                    result = StageResult(name=label, status=StageStatus.SKIPPED, reason=reason)
                else:
                    duration = time.monotonic() - stage_start
                    pipeline_result.results.append(
                        StageResult(name=label, status=StageStatus.FAILED, duration=duration, reason=str(exc))
                    )
                    pipeline_result.duration = time.monotonic() - start
                    logger.error("Stage '%s' failed: %s", label, exc)
                    raise StageError(label, str(exc), results=pipeline_result.results) from exc

            result.duration = time.monotonic() - stage_start
            pipeline_result.results.append(result)
            logger.debug("Stage '%s' -> %s (%.3fs)", label, result.status.value, result.duration)

        pipeline_result.duration = time.monotonic() - start
        logger.info(
            "Pipeline completed in %.3fs (%d skipped)",
            pipeline_result.duration,
            len(pipeline_result.skipped_stages),
        )
        return pipeline_result

    def _run_stage(
        self,
        stage: Stage,
        label: str,
        ctx: ReleaseContext,
        dry_run: bool,
    ) -> StageResult:
        """Run one stage's hooks and return its (non-failed) result."""
        if stage.skip(ctx):
            reason = "disabled"
            ctx.skip_notes[label] = reason
            logger.info("Stage '%s' skipped: %s", label, reason)
            return StageResult(name=label, status=StageStatus.SKIPPED, reason=reason)

        stage.default(ctx)

        if dry_run:
            logger.info("[DRY RUN] Stage '%s'", label)
            return StageResult(name=label, status=StageStatus.SKIPPED, reason="dry run")

        logger.info("Stage '%s' running", label)
        stage.run(ctx)
        return StageResult(name=label, status=StageStatus.SUCCESS)


def apply_defaults(stages: Sequence[Stage], ctx: ReleaseContext) -> None:
    """Call ``default`` on every stage that is not skipped.

    Safe to call more than once: ``default`` hooks are idempotent.

    Args:
        stages: Stages to prepare.
        ctx: Release context.
    """
    for stage in stages:
        if stage.skip(ctx):
            continue
        logger.debug("Applying defaults for '%s'", stage)
        stage.default(ctx)


def _skip_reason(error: BaseException) -> str:
    current: BaseException | None = error
    while current is not None:
        if isinstance(current, SkipError):
            return current.reason
        current = current.__cause__
    return str(error)


__all__ = [
    "PipelineRunner",
    "apply_defaults",
]
