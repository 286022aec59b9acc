"""Shared test fixtures."""

from __future__ import annotations

import math

import pytest

from chartcore.models.board import BoardState
from chartcore.models.chart_data import ChartData
from chartcore.models.geometry import PieGeometryConfig


def make_chart_data(pairs: list[tuple[object, object]], aggregation: str = "sum") -> ChartData:
    return ChartData.model_validate({
        "dimensions": [{"id": "category", "label": "Category", "type": "category"}],
        "measures": [{"id": "value", "label": "Value", "type": "number", "aggregation": aggregation}],
        "data": [{"category": c, "value": v} for c, v in pairs],
    })


ABC_PAIRS = [("A", 30), ("B", 30), ("C", 40)]

ZERO_PAIRS = [("North", 0), ("South", 0), ("East", 0), ("West", 0)]

# Same categories, several rows per group
REGION_ROWS = [
    ("North", 10),
    ("South", 5),
    ("North", 20),
    ("East", "7"),
    ("South", None),
    ("East", "n/a"),
]

POLAR_CORE_BOARD = {
    "raw_data": {
        "dimensions": [{"id": "category", "label": "Item", "type": "category"}],
        "measures": [{"id": "value", "label": "Value", "type": "number", "aggregation": "sum"}],
        "data": [
            {"category": "Item 01", "value": 29},
            {"category": "Item 02", "value": 17},
            {"category": "Item 03", "value": 27},
            {"category": "Item 04", "value": 14},
            {"category": "Item 05", "value": 13},
        ],
        "meta": {"mapping": {"x": "category", "value": "value"}},
    },
    "geometry_config": {
        "center": {"x": 0, "y": 0},
        "outer_radius": 160,
        "inner_radius": 60,
        "start_angle": -math.pi / 2,
        "end_angle": 3 * math.pi / 2,
        "pad_angle": 0,
        "corner_radius": 0,
        "label_anchor_mode": "outside",
        "label_radius_offset": 49,
        "sort_order": "none",
    },
    "overrides": {
        "slices": {
            "slice-item-01": {"outer_radius_offset": 40},
            "slice-item-04": {"outer_radius_offset": -20},
        },
        "labels": {
            "slice-item-01-label-0": {"text": "Netflix"},
        },
        "annotations": {
            "note-1": {"id": "note-1", "type": "TEXT", "x": 0, "y": 0, "text": "Streaming"},
        },
    },
    "theme": {
        "background_color": "#00042d",
        "primary_colors": ["#7bc9a4", "#55bda5", "#4d69b3", "#946cb3", "#fefefe"],
        "node_overrides": {
            "center-container": {"fill": "#0a1128"},
            "slice-item-01-arc": {"stroke_width": 0},
        },
        "node_transforms": {
            "slice-item-01-label-0": {"rotate": 1},
        },
    },
}


def full_circle_config(**kwargs) -> PieGeometryConfig:
    base = {
        "outer_radius": 100,
        "inner_radius": 0,
        "start_angle": -math.pi / 2,
        "end_angle": 3 * math.pi / 2,
        "pad_angle": 0,
    }
    base.update(kwargs)
    return PieGeometryConfig(**base)


@pytest.fixture
def abc_data() -> ChartData:
    return make_chart_data(ABC_PAIRS)


@pytest.fixture
def zero_data() -> ChartData:
    return make_chart_data(ZERO_PAIRS)


@pytest.fixture
def region_data() -> ChartData:
    return make_chart_data(REGION_ROWS)


@pytest.fixture
def polar_core_board() -> BoardState:
    return BoardState.model_validate(POLAR_CORE_BOARD)
