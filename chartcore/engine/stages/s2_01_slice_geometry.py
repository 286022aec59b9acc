"""S2.01 - Slice geometry.

Assigns each slice an angular span proportional to its percentage, resolves
per-slice radii and explode offsets, and builds the wedge path data.
"""

from __future__ import annotations

import logging

from chartcore.config import settings
from chartcore.engine.context import PipelineContext
from chartcore.engine.registry import StageKind, stage
from chartcore.models.chart_data import ProcessedPieData, ProcessedSlice
from chartcore.models.geometry import (
    GeometryOverrides,
    PieGeometryConfig,
    PieGeometryState,
    Point,
    SliceGeometry,
    Vector,
)
from chartcore.utils.geometry import allocate_spans, direction_vector, polar_to_cartesian, wedge_path

logger = logging.getLogger(__name__)


def order_slices(data: ProcessedPieData, config: PieGeometryConfig) -> list[ProcessedSlice]:
    """Apply ``config.sort_order``; ``none`` keeps the processed order."""
    if config.sort_order == "ascending":
        return sorted(data.slices, key=lambda s: s.raw_value)
    if config.sort_order == "descending":
        return sorted(data.slices, key=lambda s: s.raw_value, reverse=True)
    return list(data.slices)


def create_arc_path(
    center: Point,
    inner_radius: float,
    outer_radius: float,
    start_angle: float,
    end_angle: float,
    pad_angle: float = 0.0,
    precision: int | None = None,
) -> str:
    """Path data for one slice; empty when the padded span collapses to <= 0."""
    return wedge_path(
        center.as_tuple(),
        inner_radius,
        outer_radius,
        start_angle,
        end_angle,
        pad_angle,
        precision=settings.path_precision if precision is None else precision,
    )


def compute_pie_geometry(
    data: ProcessedPieData,
    config: PieGeometryConfig,
    overrides: GeometryOverrides,
) -> PieGeometryState:
    """Per-slice angles, radii, characteristic points and path data."""
    ordered = order_slices(data, config)
    spans = allocate_spans(
        [s.percentage / 100.0 for s in ordered],
        config.start_angle,
        config.end_angle,
    )

    slices: dict[str, SliceGeometry] = {}
    for processed, (start_angle, end_angle) in zip(ordered, spans):
        if processed.slice_id in slices:
            logger.warning(
                "Slice id %r is shared by %r and %r; keeping the later slice's geometry",
                processed.slice_id,
                slices[processed.slice_id].label,
                processed.label,
            )
        override = overrides.slices.get(processed.slice_id)
        mid_angle = start_angle + (end_angle - start_angle) / 2

        inner_radius = config.inner_radius
        outer_radius = config.outer_radius
        explode_amount = 0.0
        if override is not None:
            if override.inner_radius is not None:
                inner_radius = override.inner_radius
            if override.outer_radius is not None:
                outer_radius = override.outer_radius
            if override.outer_radius_offset is not None:
                outer_radius += override.outer_radius_offset
            if override.explode_amount is not None:
                explode_amount = override.explode_amount

        dx, dy = direction_vector(mid_angle, explode_amount)
        cx, cy = config.center.x + dx, config.center.y + dy

        centroid = polar_to_cartesian(cx, cy, (inner_radius + outer_radius) / 2, mid_angle)
        outer_edge = polar_to_cartesian(cx, cy, outer_radius, mid_angle)
        inner_edge = polar_to_cartesian(cx, cy, inner_radius, mid_angle)

        slices[processed.slice_id] = SliceGeometry(
            slice_id=processed.slice_id,
            label=processed.label,
            percentage=processed.percentage,
            raw_value=processed.raw_value,
            start_angle=start_angle,
            end_angle=end_angle,
            mid_angle=mid_angle,
            inner_radius=inner_radius,
            outer_radius=outer_radius,
            center=config.center,
            centroid=Point(x=centroid[0], y=centroid[1]),
            outer_edge_point=Point(x=outer_edge[0], y=outer_edge[1]),
            inner_edge_point=Point(x=inner_edge[0], y=inner_edge[1]),
            explode_offset=Vector(dx=dx, dy=dy),
            path_data=create_arc_path(
                Point(x=cx, y=cy),
                inner_radius,
                outer_radius,
                start_angle,
                end_angle,
                config.pad_angle,
            ),
        )

    empty = sum(1 for g in slices.values() if not g.path_data)
    logger.debug("Computed geometry for %d slices (%d collapsed by padding)", len(slices), empty)

    return PieGeometryState(
        config=config,
        slices=slices,
        annotations=list(overrides.annotations.values()),
        overrides=overrides,
    )


@stage(
    id="S2.01",
    kind=StageKind.GEOMETRY,
    dependencies=["S1.01"],
    description="Compute slice angles, radii, points and path data",
)
def slice_geometry(ctx: PipelineContext) -> None:
    ctx.geometry = compute_pie_geometry(ctx.processed, ctx.geometry_config, ctx.overrides)
