"""Pipeline orchestrator. Runs stages in dependency order over a fresh context."""

from __future__ import annotations

import logging
import time

from chartcore.engine.context import PipelineContext
from chartcore.engine.registry import StageKind, StageRegistry, StageSpec, get_registry, register_stages
from chartcore.models.board import BoardState
from chartcore.models.responses import ChartOutput

logger = logging.getLogger(__name__)


class Pipeline:
    """Orchestrates the stage pipeline."""

    def __init__(self, registry: StageRegistry | None = None) -> None:
        if registry is None:
            register_stages()
            registry = get_registry()
        self.registry = registry

    def run(self, ctx: PipelineContext, until: str | None = None) -> PipelineContext:
        """Run every registered stage, or only stage ``until`` and its upstream stages."""
        start = time.perf_counter()
        ordered = self.registry.resolve_order(until)

        logger.info("Pipeline: %d stages queued%s", len(ordered), f" (up to {until})" if until else "")

        for spec in ordered:
            self._run_spec(ctx, spec)

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Pipeline complete: %d/%d stages in %.1fms",
            len(ctx.completed_stages),
            len(ordered),
            total,
        )
        return ctx

    def run_stage(self, ctx: PipelineContext, kind: StageKind) -> PipelineContext:
        """Run only the stages of one kind; upstream outputs must already be on ``ctx``."""
        for spec in self.registry.get_kind(kind):
            self._run_spec(ctx, spec)
        return ctx

    def _run_spec(self, ctx: PipelineContext, spec: StageSpec) -> None:
        blocked = [d for d in spec.dependencies if d in ctx.errors or d in ctx.skipped_stages]
        if blocked:
            ctx.skipped_stages.add(spec.id)
            logger.warning("  %s skipped: upstream %s did not complete", spec.id, ", ".join(blocked))
            return

        t0 = time.perf_counter()
        try:
            spec.fn(ctx)
            ctx.completed_stages.add(spec.id)
            elapsed = (time.perf_counter() - t0) * 1000
            logger.debug("  %s completed in %.2fms", spec.id, elapsed)
        except Exception as e:
            ctx.errors[spec.id] = str(e)
            logger.warning("  %s FAILED: %s", spec.id, e)


def create_pipeline(registry: StageRegistry | None = None) -> Pipeline:
    """Factory function for creating a pipeline instance."""
    return Pipeline(registry=registry)


def compute_chart(board: BoardState, pipeline: Pipeline | None = None, until: str | None = None) -> ChartOutput:
    """Run the pipeline on a validated board and collect the stage outputs.

    With ``until``, only that stage and its upstream stages run; later outputs stay empty.
    """
    pipeline = pipeline or create_pipeline()
    start = time.perf_counter()
    ctx = pipeline.run(PipelineContext.from_board(board), until=until)
    elapsed = (time.perf_counter() - start) * 1000

    return ChartOutput(
        processed=ctx.processed,
        geometry=ctx.geometry,
        scene=ctx.scene,
        styles=ctx.styles,
        processing_time_ms=round(elapsed, 3),
        stages_completed=len(ctx.completed_stages),
        stages_failed=len(ctx.errors),
        errors=dict(ctx.errors),
    )
