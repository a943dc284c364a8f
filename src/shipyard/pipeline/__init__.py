"""Release pipeline orchestration for shipyard.

Stages run strictly one after the other over a shared release context.
Each stage may be skipped, has its defaults applied, then runs; a skip
signal is recorded while any other error aborts the pipeline.

Examples:
    >>> from shipyard.pipeline import PipelineRunner
    >>> from shipyard.stages import SourceArchiveStage, UploadStage
    >>> runner = PipelineRunner([SourceArchiveStage(), UploadStage()])
    >>> result = runner.run(ctx)  # doctest: +SKIP
"""

from shipyard.pipeline.base import Stage
from shipyard.pipeline.exceptions import (
    PipelineConfigError,
    PipelineError,
    SkipError,
    SkipMemento,
    StageError,
    is_skip,
)
from shipyard.pipeline.models import PipelineResult, StageResult, StageStatus
from shipyard.pipeline.runner import PipelineRunner, apply_defaults

__all__ = [
    "PipelineConfigError",
    "PipelineError",
    "PipelineResult",
    "PipelineRunner",
    "SkipError",
    "SkipMemento",
    "Stage",
    "StageError",
    "StageResult",
    "StageStatus",
    "apply_defaults",
    "is_skip",
]
