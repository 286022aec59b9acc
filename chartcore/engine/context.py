"""PipelineContext: per-run container threading inputs and stage outputs.

A fresh context is built for every run. Inputs are caller-owned and only read;
each stage stores a newly constructed output in its own slot.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from chartcore.models.chart_data import ChartData, ProcessedPieData, ProcessorConfig
from chartcore.models.geometry import (
    DEFAULT_PIE_GEOMETRY_CONFIG,
    GeometryOverrides,
    PieGeometryConfig,
    PieGeometryState,
)
from chartcore.models.scene import SceneGraph
from chartcore.models.styles import ChartTheme, ResolvedStyle


@dataclass
class PipelineContext:
    """Inputs and outputs of one pipeline run."""

    # --- Inputs (caller-owned, read-only) ---
    chart_data: ChartData = field(default_factory=ChartData)
    processor_config: ProcessorConfig = field(default_factory=ProcessorConfig)
    geometry_config: PieGeometryConfig = field(default_factory=lambda: DEFAULT_PIE_GEOMETRY_CONFIG)
    overrides: GeometryOverrides = field(default_factory=GeometryOverrides)
    theme: ChartTheme = field(default_factory=ChartTheme)

    # --- Stage outputs ---
    processed: ProcessedPieData | None = None
    geometry: PieGeometryState | None = None
    scene: SceneGraph | None = None
    styles: dict[str, ResolvedStyle] = field(default_factory=dict)

    # --- Pipeline metadata ---
    completed_stages: set[str] = field(default_factory=set)
    skipped_stages: set[str] = field(default_factory=set)
    errors: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_board(cls, board) -> PipelineContext:
        return cls(
            chart_data=board.raw_data,
            processor_config=board.processor,
            geometry_config=board.geometry_config,
            overrides=board.overrides,
            theme=board.theme,
        )

    @property
    def ok(self) -> bool:
        return not self.errors and not self.skipped_stages

    @property
    def num_slices(self) -> int:
        return len(self.processed.slices) if self.processed is not None else 0
