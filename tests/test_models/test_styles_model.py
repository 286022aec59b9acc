"""Tests for style and theme records."""

import pytest
from pydantic import ValidationError

from chartcore.models.styles import (
    DEFAULT_PALETTE,
    DEFAULT_THEME,
    ChartTheme,
    GradientFill,
    ImageFill,
    NodeStyle,
    SolidFill,
    describe_fill,
)


def test_string_fill_becomes_solid():
    assert NodeStyle(fill="#ff0000").fill == SolidFill(color="#ff0000")


def test_fill_variants_from_dicts():
    assert isinstance(NodeStyle.model_validate({"fill": {"type": "image", "url": "a.png"}}).fill, ImageFill)
    gradient = NodeStyle.model_validate(
        {"fill": {"type": "linear", "stops": [{"offset": 0, "color": "#000"}], "angle": 90}}
    ).fill
    assert isinstance(gradient, GradientFill)
    assert gradient.angle == 90


def test_describe_fill_rejects_unknown_variant():
    with pytest.raises(TypeError):
        describe_fill("#fff")


def test_theme_is_frozen():
    with pytest.raises(ValidationError):
        DEFAULT_THEME.background_color = "#000000"


def test_default_theme():
    assert ChartTheme().primary_colors == list(DEFAULT_PALETTE)
    assert len(DEFAULT_PALETTE) == 10


@pytest.mark.parametrize("field, value", [("opacity", -0.1), ("fill_opacity", 1.5), ("font_size", 0)])
def test_node_style_bounds(field, value):
    with pytest.raises(ValidationError):
        NodeStyle(**{field: value})
