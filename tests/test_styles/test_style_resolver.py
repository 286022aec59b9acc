"""Tests for the style resolution stage."""

from __future__ import annotations

from chartcore.engine.stages.s1_01_data_processing import process_pie_data
from chartcore.engine.stages.s3_01_label_placement import resolve_geometry
from chartcore.engine.stages.s4_01_scene_graph import resolve_scene_graph
from chartcore.engine.stages.s5_01_style_resolution import (
    DEFAULT_FONT_WEIGHT,
    STYLE_DEFAULTS,
    resolve_all_styles,
    resolve_node_style,
    slice_ordinals,
)
from chartcore.models.geometry import Annotation, GeometryOverrides
from chartcore.models.scene import AnnotationPayload, NodeType, SceneNode
from chartcore.models.styles import (
    ChartTheme,
    GradientFill,
    ImageFill,
    NodeStyle,
    ResolvedStyle,
    SolidFill,
    describe_fill,
)
from tests.conftest import ABC_PAIRS, full_circle_config, make_chart_data


def _styles(theme: ChartTheme, pairs=ABC_PAIRS, overrides=None, **config):
    geometry = resolve_geometry(
        process_pie_data(make_chart_data(pairs)),
        full_circle_config(**config),
        overrides or GeometryOverrides(),
    )
    scene = resolve_scene_graph(geometry, theme)
    return scene, resolve_all_styles(scene, theme)


def test_every_node_type_has_defaults():
    assert set(STYLE_DEFAULTS) == set(NodeType)


def test_arc_fill_rotates_through_palette():
    theme = ChartTheme(primary_colors=["#111111", "#222222"])
    _, styles = _styles(theme)

    # processed order: C, A, B
    assert styles["slice-c-arc"].fill == SolidFill(color="#111111")
    assert styles["slice-a-arc"].fill == SolidFill(color="#222222")
    assert styles["slice-b-arc"].fill == SolidFill(color="#111111")
    assert styles["slice-c-arc"].stroke == "#FFFFFF"
    assert styles["slice-c-arc"].stroke_width == 2


def test_slice_ordinals_follow_slice_order():
    scene, _ = _styles(ChartTheme())
    assert slice_ordinals(scene) == {"slice-c": 0, "slice-a": 1, "slice-b": 2}


def test_theme_override_wins_over_type_default():
    theme = ChartTheme(node_overrides={
        "slice-a-arc": NodeStyle(fill="#abcdef", stroke_width=0, stroke_dash_array="4 2"),
    })
    _, styles = _styles(theme)
    arc = styles["slice-a-arc"]

    assert arc.fill == SolidFill(color="#abcdef")
    assert arc.stroke_width == 0
    assert arc.stroke == "#FFFFFF"
    assert arc.stroke_dash_array == "4 2"


def test_missing_fields_are_coerced():
    _, styles = _styles(ChartTheme())
    arc = styles["slice-a-arc"]
    assert arc.stroke_dash_array == ""
    assert arc.font_weight == DEFAULT_FONT_WEIGHT
    assert arc.fill_opacity == 1
    assert arc.opacity == 1
    for style in styles.values():
        assert isinstance(style, ResolvedStyle)
        assert style.font_family
        assert style.text_anchor in ("start", "middle", "end")


def test_label_defaults():
    theme = ChartTheme()
    _, styles = _styles(theme)
    label = styles["slice-a-label-0"]
    assert label.font_weight == 600
    assert label.fill == SolidFill(color=theme.default_typography.font_color)
    assert label.font_size == theme.default_typography.font_size

    leader = styles["leader-line-slice-a-0"]
    assert leader.stroke == "#999999"
    assert leader.stroke_width == 1


def test_percentage_label_contrast():
    _, light = _styles(ChartTheme(background_color="#FFFFFF"))
    _, dark = _styles(ChartTheme(background_color="#00042d"))

    assert light["slice-a-pct"].font_color == "#000000"
    assert dark["slice-a-pct"].font_color == "#FFFFFF"
    assert light["slice-a-pct"].font_weight == 900
    assert light["slice-a-pct"].font_size == 12


def test_center_container_uses_background():
    _, styles = _styles(ChartTheme(background_color="#101010"), inner_radius=30)
    assert styles["center-container"].fill == SolidFill(color="#101010")


def test_gradient_override():
    gradient = {
        "type": "radial",
        "stops": [
            {"offset": 0, "color": "#ffffff"},
            {"offset": 1, "color": "#000000", "opacity": 0.5},
        ],
    }
    theme = ChartTheme.model_validate({"node_overrides": {"slice-c-arc": {"fill": gradient}}})
    _, styles = _styles(theme)
    fill = styles["slice-c-arc"].fill

    assert isinstance(fill, GradientFill)
    assert styles["slice-c-arc"].is_gradient
    assert fill.stops[1].opacity == 0.5
    assert describe_fill(fill) == "radial-gradient(#ffffff 0%, #000000 100%)"
    assert not styles["slice-a-arc"].is_gradient


def test_annotation_styles():
    overrides = GeometryOverrides(annotations={
        "c1": Annotation(id="c1", type="CIRCLE", radius=5),
        "i1": Annotation(id="i1", type="ICON", icon_name="star", width=16),
        "p1": Annotation(id="p1", type="IMAGE", image_url="https://example.com/a.png"),
    })
    _, styles = _styles(ChartTheme(), overrides=overrides)

    assert styles["c1"].fill == SolidFill(color="#E2E8F0")
    assert styles["c1"].stroke == "#94A3B8"
    assert styles["i1"].icon_name == "star"
    assert styles["i1"].icon_size == 16
    assert styles["p1"].fill == ImageFill(url="https://example.com/a.png")
    assert describe_fill(styles["p1"].fill) == "url(https://example.com/a.png)"


def test_resolve_single_node_without_override():
    node = SceneNode(id="x", type=NodeType.ICON, payload=AnnotationPayload())
    style = resolve_node_style(node, ChartTheme())
    assert style.icon_size == 24
    assert style.icon_name is None
    assert style.fill == SolidFill(color="none")


def test_every_scene_node_gets_a_style():
    scene, styles = _styles(ChartTheme(), inner_radius=20)
    assert set(styles) == set(scene.nodes)


def test_percentage_label_contrast_on_mid_grey():
    _, styles = _styles(ChartTheme(background_color="#999999"))
    assert styles["slice-a-pct"].font_color == "#000000"
