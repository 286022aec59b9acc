"""Pipeline output model."""

from __future__ import annotations

from pydantic import BaseModel, Field

from chartcore.models.chart_data import ProcessedPieData
from chartcore.models.geometry import PieGeometryState
from chartcore.models.scene import SceneGraph
from chartcore.models.styles import ResolvedStyle


class ChartOutput(BaseModel):
    processed: ProcessedPieData | None = None
    geometry: PieGeometryState | None = None
    scene: SceneGraph | None = None
    styles: dict[str, ResolvedStyle] = Field(default_factory=dict)
    processing_time_ms: float = 0.0
    stages_completed: int = 0
    stages_failed: int = 0
    errors: dict[str, str] = Field(default_factory=dict)
