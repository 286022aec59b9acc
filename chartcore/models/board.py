"""Board state: every caller-owned input of one chart, in its persisted shape."""

from __future__ import annotations

import time

from pydantic import BaseModel, Field

from chartcore.models.chart_data import ChartData, ProcessorConfig
from chartcore.models.geometry import DEFAULT_PIE_GEOMETRY_CONFIG, GeometryOverrides, PieGeometryConfig
from chartcore.models.styles import ChartTheme

BOARD_FORMAT_VERSION = "1.0.0"


class BoardMetadata(BaseModel):
    version: str = BOARD_FORMAT_VERSION
    timestamp: float = Field(default_factory=time.time)


class BoardState(BaseModel):
    metadata: BoardMetadata | None = None
    raw_data: ChartData
    processor: ProcessorConfig = Field(default_factory=ProcessorConfig)
    geometry_config: PieGeometryConfig = DEFAULT_PIE_GEOMETRY_CONFIG
    overrides: GeometryOverrides = Field(default_factory=GeometryOverrides)
    theme: ChartTheme = Field(default_factory=ChartTheme)
