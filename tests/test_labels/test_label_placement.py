"""Tests for label and leader-line placement."""

from __future__ import annotations

import math

import pytest

from chartcore.engine.stages.s1_01_data_processing import process_pie_data
from chartcore.engine.stages.s2_01_slice_geometry import compute_pie_geometry
from chartcore.engine.stages.s3_01_label_placement import (
    compute_label_geometry,
    estimate_label_box,
    label_id_for,
    label_side,
    resolve_geometry,
)
from chartcore.models.geometry import (
    GeometryOverrides,
    LabelGeometryOverride,
    Point,
    SliceGeometryOverride,
    Vector,
)
from tests.conftest import full_circle_config, make_chart_data

HALVES = [("right", 50), ("left", 50)]


def _labels(pairs, overrides=None, **config):
    overrides = overrides or GeometryOverrides()
    cfg = full_circle_config(**config)
    state = compute_pie_geometry(process_pie_data(make_chart_data(pairs)), cfg, overrides)
    return compute_label_geometry(state.slices, cfg, overrides)


def test_one_label_per_slice():
    labels, _ = _labels([("a", 1), ("b", 2), ("c", 3)])
    assert [l.label_id for l in labels] == ["slice-c-label-0", "slice-b-label-0", "slice-a-label-0"]
    assert all(l.label_index == 0 for l in labels)
    assert label_id_for("slice-x") == "slice-x-label-0"


def test_outside_anchor_and_leader_line():
    labels, lines = _labels(HALVES, label_anchor_mode="outside", label_radius_offset=30)
    right = labels[0]

    assert right.anchor_mode == "outside"
    assert right.anchor_point.x == pytest.approx(130.0)
    assert right.anchor_point.y == pytest.approx(0.0)
    assert right.side == "right"

    assert len(lines) == 2
    line = lines[0]
    assert line.slice_id == "slice-right"
    assert line.start_point.x == pytest.approx(100.0)
    assert line.end_point.x == pytest.approx(130.0)
    assert line.path_data == "M 100 0 L 130 0"


def test_outside_anchor_follows_explode():
    overrides = GeometryOverrides(slices={"slice-right": SliceGeometryOverride(explode_amount=10)})
    labels, _ = _labels(HALVES, overrides=overrides, label_radius_offset=30)
    assert labels[0].anchor_point.x == pytest.approx(140.0)


def test_centroid_and_edge_modes_have_no_leader_lines():
    centroid_labels, centroid_lines = _labels(HALVES, label_anchor_mode="centroid")
    edge_labels, edge_lines = _labels(HALVES, label_anchor_mode="edge")

    assert centroid_lines == []
    assert edge_lines == []
    assert centroid_labels[0].anchor_point.x == pytest.approx(50.0)
    assert edge_labels[0].anchor_point.x == pytest.approx(100.0)


def test_label_override_wins():
    overrides = GeometryOverrides(labels={
        "slice-right-label-0": LabelGeometryOverride(
            anchor_mode="centroid",
            position_offset=Vector(dx=5, dy=-3),
            is_manually_positioned=True,
            text="Renamed",
        ),
    })
    labels, lines = _labels(HALVES, overrides=overrides, label_anchor_mode="outside")
    right, left = labels

    assert right.anchor_mode == "centroid"
    assert right.anchor_point.x == pytest.approx(55.0)
    assert right.anchor_point.y == pytest.approx(-3.0)
    assert right.offset == Vector(dx=5, dy=-3)
    assert right.is_manually_positioned is True
    assert right.text == "Renamed"

    assert left.text == "left"
    assert left.is_manually_positioned is False
    # only the label still anchored outside gets a leader line
    assert [l.slice_id for l in lines] == ["slice-left"]


def test_label_side():
    assert label_side(0.0) == "right"
    assert label_side(math.pi / 2) == "right"
    assert label_side(math.pi) == "left"
    assert label_side(-2.0) == "left"


def test_bounding_box_estimate():
    anchor = Point(x=100, y=50)
    right = estimate_label_box("abcd", anchor, "right", "outside", font_size=10, char_width=0.5)
    left = estimate_label_box("abcd", anchor, "left", "outside", font_size=10, char_width=0.5)
    centered = estimate_label_box("abcd", anchor, "right", "centroid", font_size=10, char_width=0.5)

    assert right.width == pytest.approx(20.0)
    assert right.height == pytest.approx(12.0)
    assert right.x == pytest.approx(100.0)
    assert left.x == pytest.approx(80.0)
    assert centered.x == pytest.approx(90.0)
    assert right.y == pytest.approx(44.0)


def test_resolve_geometry_bundles_labels(abc_data):
    state = resolve_geometry(process_pie_data(abc_data), full_circle_config(), GeometryOverrides())
    assert len(state.labels) == 3
    assert len(state.leader_lines) == 3
    assert len(state.slices) == 3
