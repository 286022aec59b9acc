"""S1.01 - Data processing.

Raw rows -> grouped, aggregated, percentage-normalized slices with stable ids.
No angles, radii or paint here.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Sequence

import numpy as np

from chartcore.engine.context import PipelineContext
from chartcore.engine.registry import StageKind, stage
from chartcore.models.chart_data import ChartData, ProcessedPieData, ProcessedSlice, ProcessorConfig, Scalar

logger = logging.getLogger(__name__)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")

UNKNOWN_CATEGORY = "Unknown"
FALLBACK_CATEGORY_FIELD = "x"
FALLBACK_VALUE_FIELD = "value"


def generate_slice_id(label: str, index: int) -> str:
    """Stable slice id from the label: ``slice-<slug>``, or ``slice-<index>`` for blank labels.

    Labels that slug to the same text (``"A/B"`` and ``"A B"``) share an id.
    """
    if not label or not label.strip():
        return f"slice-{index}"
    slug = _NON_ALNUM_RE.sub("-", label.lower()).strip("-")
    return f"slice-{slug or index}"


def _sum(values: np.ndarray) -> float:
    return float(np.sum(values)) if values.size else 0.0


def _avg(values: np.ndarray) -> float:
    return float(np.mean(values)) if values.size else 0.0


def _min(values: np.ndarray) -> float:
    return float(np.min(values)) if values.size else 0.0


def _max(values: np.ndarray) -> float:
    return float(np.max(values)) if values.size else 0.0


def _count(values: np.ndarray) -> float:
    return float(values.size)


AGGREGATIONS: dict[str, Callable[[np.ndarray], float]] = {
    "sum": _sum,
    "avg": _avg,
    "min": _min,
    "max": _max,
    "count": _count,
}


def aggregate(values: Sequence[float], method: str) -> float:
    """Aggregate with ``method``; an unknown method falls back to sum."""
    fn = AGGREGATIONS.get(method, _sum)
    return fn(np.asarray(values, dtype=np.float64))


def compute_percentages(values: Sequence[float]) -> list[float]:
    """Percent of total per value. A zero total gives every value an equal share."""
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        return []
    total = float(np.sum(arr))
    if total == 0:
        return [100.0 / arr.size] * int(arr.size)
    return [float(v) for v in arr / total * 100.0]


def coerce_number(value: Scalar) -> float:
    """Numeric value of a cell; missing, non-numeric and non-finite cells count as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    return number if math.isfinite(number) else 0.0


def coerce_category(value: Scalar) -> str:
    if value is None:
        return UNKNOWN_CATEGORY
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def resolve_fields(chart_data: ChartData, config: ProcessorConfig) -> tuple[str, str, str]:
    """(category field, value field, aggregation method) after applying every fallback."""
    mapping = chart_data.meta.mapping if chart_data.meta and chart_data.meta.mapping else None

    category_field = (
        config.category_field
        or (mapping.x if mapping else None)
        or (chart_data.dimensions[0].id if chart_data.dimensions else None)
        or FALLBACK_CATEGORY_FIELD
    )
    value_field = (
        config.value_field
        or (mapping.value if mapping else None)
        or (chart_data.measures[0].id if chart_data.measures else None)
        or FALLBACK_VALUE_FIELD
    )

    measure = next((m for m in chart_data.measures if m.id == value_field), None)
    aggregation = config.aggregation or (measure.aggregation if measure else None) or "sum"
    return category_field, value_field, aggregation


def process_pie_data(chart_data: ChartData, config: ProcessorConfig | None = None) -> ProcessedPieData:
    """Group rows by category, aggregate, sort descending and normalize to percentages."""
    config = config or ProcessorConfig()
    category_field, value_field, aggregation = resolve_fields(chart_data, config)

    # dicts keep insertion order, so groups stay in encounter order
    groups: dict[str, tuple[list[float], list[int]]] = {}
    for index, row in enumerate(chart_data.data):
        label = coerce_category(row.get(category_field))
        values, indices = groups.setdefault(label, ([], []))
        values.append(coerce_number(row.get(value_field)))
        indices.append(index)

    raw = [
        (label, aggregate(values, aggregation), indices)
        for label, (values, indices) in groups.items()
    ]
    # list.sort is stable: equal values keep encounter order
    raw.sort(key=lambda item: item[1], reverse=True)

    percentages = compute_percentages([value for _, value, _ in raw])
    total = float(sum(value for _, value, _ in raw))

    slices = [
        ProcessedSlice(
            slice_id=generate_slice_id(label, i),
            label=label,
            raw_value=value,
            percentage=percentages[i],
            original_row_indices=indices,
        )
        for i, (label, value, indices) in enumerate(raw)
    ]

    logger.debug(
        "Processed %d rows into %d slices (%s of %s by %s)",
        len(chart_data.data),
        len(slices),
        aggregation,
        value_field,
        category_field,
    )

    return ProcessedPieData(
        slices=slices,
        total=total,
        category_field=category_field,
        value_field=value_field,
        aggregation=aggregation,
    )


def has_slice_structure_changed(old: ProcessedPieData, new: ProcessedPieData) -> bool:
    """True when the two outputs do not carry the same set of slice ids."""
    if len(old.slices) != len(new.slices):
        return True
    return set(old.slice_ids) != set(new.slice_ids)


@stage(
    id="S1.01",
    kind=StageKind.DATA,
    description="Group, aggregate and normalize rows into slices",
)
def data_processing(ctx: PipelineContext) -> None:
    ctx.processed = process_pie_data(ctx.chart_data, ctx.processor_config)
