"""Tests for the shipyard.pipeline.models module."""

from __future__ import annotations

from shipyard.pipeline.models import PipelineResult, StageResult, StageStatus


class TestStageStatus:
    """Tests for StageStatus."""

    def test_values(self) -> None:
        """Statuses serialize to lowercase strings."""
        assert StageStatus.SUCCESS.value == "success"
        assert StageStatus.SKIPPED.value == "skipped"
        assert StageStatus.FAILED.value == "failed"


class TestPipelineResult:
    """Tests for PipelineResult."""

    def test_success_without_failures(self) -> None:
        """Skipped stages do not make the pipeline fail."""
        result = PipelineResult(
            results=[
                StageResult("a", StageStatus.SUCCESS),
                StageResult("b", StageStatus.SKIPPED, reason="disabled"),
            ]
        )
        assert result.success is True
        assert [r.name for r in result.skipped_stages] == ["b"]
        assert result.failed_stages == []

    def test_failure(self) -> None:
        """A failed stage makes the pipeline unsuccessful."""
        result = PipelineResult(results=[StageResult("a", StageStatus.FAILED, reason="boom")])
        assert result.success is False
        assert [r.name for r in result.failed_stages] == ["a"]
