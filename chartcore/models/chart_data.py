"""Tabular chart input and the processed-slice output of the data stage."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

DimensionType = Literal["category", "number", "time"]

# sum | avg | min | max | count. Kept as a plain string: an unknown method is
# not a validation failure, the processor falls back to sum.
AggregationMethod = str

Scalar = str | int | float | None


class Dimension(BaseModel):
    id: str
    label: str = ""
    type: DimensionType = "category"
    format: str | None = None


class Measure(BaseModel):
    id: str
    label: str = ""
    type: Literal["number"] = "number"
    aggregation: AggregationMethod = "sum"


class Series(BaseModel):
    id: str
    label: str = ""
    type: DimensionType = "category"


class MappingConfig(BaseModel):
    """Which field ids play which chart role."""

    x: str | None = None
    y: str | None = None
    value: str | None = None
    series: str | None = None


class Meta(BaseModel):
    stacked: bool | None = None
    mapping: MappingConfig | None = None


class ChartData(BaseModel):
    """Chart-agnostic dataset: field descriptors plus flat rows."""

    dimensions: list[Dimension] = Field(default_factory=list)
    measures: list[Measure] = Field(default_factory=list)
    series: list[Series] = Field(default_factory=list)
    data: list[dict[str, Scalar]] = Field(default_factory=list)
    meta: Meta | None = None


class ProcessorConfig(BaseModel):
    """Optional field-mapping hint; each set field wins over the dataset's own."""

    category_field: str | None = None
    value_field: str | None = None
    aggregation: AggregationMethod | None = None


class ProcessedSlice(BaseModel):
    slice_id: str
    label: str
    raw_value: float
    percentage: float
    # Indices into ChartData.data; the rows stay owned by the dataset.
    original_row_indices: list[int] = Field(default_factory=list)


class ProcessedPieData(BaseModel):
    """Slices ordered by raw value, descending."""

    slices: list[ProcessedSlice] = Field(default_factory=list)
    total: float = 0.0
    category_field: str = "x"
    value_field: str = "value"
    aggregation: AggregationMethod = "sum"

    @property
    def slice_ids(self) -> list[str]:
        return [s.slice_id for s in self.slices]
