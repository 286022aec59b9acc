"""Spatial records: geometry config, overrides, annotations and computed geometry.

Angles are radians measured from the positive x-axis; with y pointing down,
positive sweep is clockwise on screen.
"""

from __future__ import annotations

import math
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

LabelAnchorMode = Literal["centroid", "edge", "outside"]
LabelSide = Literal["left", "right"]
SortOrder = Literal["none", "ascending", "descending"]
AnnotationType = Literal["CIRCLE", "RECT", "TEXT", "ICON", "IMAGE"]


class Point(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


class Vector(BaseModel):
    model_config = ConfigDict(frozen=True)

    dx: float = 0.0
    dy: float = 0.0


class BoundingBox(BaseModel):
    x: float
    y: float
    width: float
    height: float


class PieGeometryConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    center: Point = Field(default_factory=Point)
    outer_radius: float = Field(default=150.0, ge=0)
    inner_radius: float = Field(default=0.0, ge=0)
    start_angle: float = -math.pi / 2  # 12 o'clock
    end_angle: float = math.pi * 1.5  # full turn
    pad_angle: float = Field(default=0.02, ge=0)
    # Accepted and persisted; rounded corners are drawn by the painter.
    corner_radius: float = Field(default=0.0, ge=0)
    label_anchor_mode: LabelAnchorMode = "outside"
    label_radius_offset: float = 30.0
    sort_order: SortOrder = "none"


DEFAULT_PIE_GEOMETRY_CONFIG = PieGeometryConfig()


class SliceGeometryOverride(BaseModel):
    model_config = ConfigDict(frozen=True)

    explode_amount: float | None = None
    inner_radius: float | None = Field(default=None, ge=0)
    outer_radius: float | None = Field(default=None, ge=0)
    # Added to the resolved outer radius
    outer_radius_offset: float | None = None


class LabelGeometryOverride(BaseModel):
    model_config = ConfigDict(frozen=True)

    position_offset: Vector | None = None
    anchor_mode: LabelAnchorMode | None = None
    is_manually_positioned: bool | None = None
    text: str | None = None


class Annotation(BaseModel):
    """Freeform board object positioned relative to the chart center."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: AnnotationType
    x: float = 0.0
    y: float = 0.0
    width: float | None = Field(default=None, ge=0)
    height: float | None = Field(default=None, ge=0)
    radius: float | None = Field(default=None, ge=0)
    text: str | None = None
    icon_name: str | None = None
    image_url: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class GeometryOverrides(BaseModel):
    """Caller-owned override maps keyed by stable id. Never mutated by the engine."""

    model_config = ConfigDict(frozen=True)

    slices: dict[str, SliceGeometryOverride] = Field(default_factory=dict)
    labels: dict[str, LabelGeometryOverride] = Field(default_factory=dict)
    annotations: dict[str, Annotation] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _annotation_keys_match_ids(self) -> GeometryOverrides:
        for key, anno in self.annotations.items():
            if key != anno.id:
                raise ValueError(f"annotation key {key!r} does not match annotation id {anno.id!r}")
        return self


class SliceGeometry(BaseModel):
    slice_id: str
    label: str = ""
    percentage: float = 0.0
    raw_value: float = 0.0
    start_angle: float
    end_angle: float
    mid_angle: float
    inner_radius: float
    outer_radius: float
    # Chart center, before explode
    center: Point
    centroid: Point
    outer_edge_point: Point
    inner_edge_point: Point
    explode_offset: Vector = Field(default_factory=Vector)
    path_data: str = ""

    @property
    def span(self) -> float:
        return self.end_angle - self.start_angle

    @property
    def effective_center(self) -> Point:
        return Point(x=self.center.x + self.explode_offset.dx, y=self.center.y + self.explode_offset.dy)


class LabelGeometry(BaseModel):
    slice_id: str
    label_index: int = 0
    label_id: str
    text: str = ""
    anchor_point: Point
    anchor_mode: LabelAnchorMode
    offset: Vector = Field(default_factory=Vector)
    side: LabelSide
    bounding_box: BoundingBox
    is_manually_positioned: bool = False


class LeaderLineGeometry(BaseModel):
    slice_id: str
    label_index: int = 0
    start_point: Point
    end_point: Point
    path_data: str


class PieGeometryState(BaseModel):
    """Everything the geometry and label stages produce, plus the inputs that produced it."""

    config: PieGeometryConfig
    slices: dict[str, SliceGeometry] = Field(default_factory=dict)
    labels: list[LabelGeometry] = Field(default_factory=list)
    leader_lines: list[LeaderLineGeometry] = Field(default_factory=list)
    annotations: list[Annotation] = Field(default_factory=list)
    overrides: GeometryOverrides = Field(default_factory=GeometryOverrides)
