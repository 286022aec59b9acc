"""S3.01 - Label and leader-line placement.

One label per slice, anchored by mode:
  centroid  the slice centroid
  edge      the outer edge point at the mid angle
  outside   the mid-angle ray at outer radius + label radius offset, with a leader line
"""

from __future__ import annotations

import logging
import math

from chartcore.config import settings
from chartcore.engine.context import PipelineContext
from chartcore.engine.registry import StageKind, stage
from chartcore.engine.stages.s2_01_slice_geometry import compute_pie_geometry
from chartcore.models.chart_data import ProcessedPieData
from chartcore.models.geometry import (
    BoundingBox,
    GeometryOverrides,
    LabelAnchorMode,
    LabelGeometry,
    LabelSide,
    LeaderLineGeometry,
    PieGeometryConfig,
    PieGeometryState,
    Point,
    SliceGeometry,
    Vector,
)
from chartcore.utils.geometry import line_path, polar_to_cartesian

logger = logging.getLogger(__name__)

# Only the first label of each slice is generated.
PRIMARY_LABEL_INDEX = 0


def label_id_for(slice_id: str, label_index: int = PRIMARY_LABEL_INDEX) -> str:
    return f"{slice_id}-label-{label_index}"


def label_side(mid_angle: float) -> LabelSide:
    return "right" if math.cos(mid_angle) >= 0 else "left"


def estimate_label_box(
    text: str,
    anchor: Point,
    side: LabelSide,
    anchor_mode: LabelAnchorMode,
    font_size: float | None = None,
    char_width: float | None = None,
) -> BoundingBox:
    """Rough text extent (sans-serif heuristic) around the anchor.

    Outside labels grow away from the chart on their side; the others are
    centered on the anchor.
    """
    font_size = settings.label_font_size if font_size is None else font_size
    char_width = settings.label_char_width if char_width is None else char_width

    width = max(1.0, len(text) * font_size * char_width)
    height = font_size * 1.2
    if anchor_mode == "outside":
        x = anchor.x if side == "right" else anchor.x - width
    else:
        x = anchor.x - width / 2
    return BoundingBox(x=x, y=anchor.y - height / 2, width=width, height=height)


def _anchor_point(slice_geo: SliceGeometry, mode: LabelAnchorMode, config: PieGeometryConfig) -> Point:
    if mode == "centroid":
        return slice_geo.centroid
    if mode == "edge":
        return slice_geo.outer_edge_point
    center = slice_geo.effective_center
    x, y = polar_to_cartesian(
        center.x,
        center.y,
        slice_geo.outer_radius + config.label_radius_offset,
        slice_geo.mid_angle,
    )
    return Point(x=x, y=y)


def compute_label_geometry(
    slices: dict[str, SliceGeometry],
    config: PieGeometryConfig,
    overrides: GeometryOverrides,
) -> tuple[list[LabelGeometry], list[LeaderLineGeometry]]:
    """Labels for every slice and leader lines for the ones anchored outside."""
    labels: list[LabelGeometry] = []
    leader_lines: list[LeaderLineGeometry] = []

    for slice_id, slice_geo in slices.items():
        label_id = label_id_for(slice_id)
        override = overrides.labels.get(label_id)

        anchor_mode: LabelAnchorMode = config.label_anchor_mode
        offset = Vector()
        text = slice_geo.label
        manual = False
        if override is not None:
            anchor_mode = override.anchor_mode or anchor_mode
            offset = override.position_offset or offset
            if override.text is not None:
                text = override.text
            manual = bool(override.is_manually_positioned)

        base = _anchor_point(slice_geo, anchor_mode, config)
        anchor = Point(x=base.x + offset.dx, y=base.y + offset.dy)
        side = label_side(slice_geo.mid_angle)

        labels.append(
            LabelGeometry(
                slice_id=slice_id,
                label_index=PRIMARY_LABEL_INDEX,
                label_id=label_id,
                text=text,
                anchor_point=anchor,
                anchor_mode=anchor_mode,
                offset=offset,
                side=side,
                bounding_box=estimate_label_box(text, anchor, side, anchor_mode),
                is_manually_positioned=manual,
            )
        )

        if anchor_mode == "outside":
            start = slice_geo.outer_edge_point
            leader_lines.append(
                LeaderLineGeometry(
                    slice_id=slice_id,
                    label_index=PRIMARY_LABEL_INDEX,
                    start_point=start,
                    end_point=anchor,
                    path_data=line_path(start.as_tuple(), anchor.as_tuple(), settings.path_precision),
                )
            )

    logger.debug("Placed %d labels, %d leader lines", len(labels), len(leader_lines))
    return labels, leader_lines


def resolve_geometry(
    data: ProcessedPieData,
    config: PieGeometryConfig,
    overrides: GeometryOverrides,
) -> PieGeometryState:
    """Slice geometry plus labels and leader lines in one state."""
    state = compute_pie_geometry(data, config, overrides)
    labels, leader_lines = compute_label_geometry(state.slices, config, overrides)
    return state.model_copy(update={"labels": labels, "leader_lines": leader_lines})


@stage(
    id="S3.01",
    kind=StageKind.LABELS,
    dependencies=["S2.01"],
    description="Place labels and leader lines",
)
def label_placement(ctx: PipelineContext) -> None:
    labels, leader_lines = compute_label_geometry(ctx.geometry.slices, ctx.geometry_config, ctx.overrides)
    ctx.geometry = ctx.geometry.model_copy(update={"labels": labels, "leader_lines": leader_lines})
