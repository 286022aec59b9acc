"""S5.01 - Style resolution.

Per node: seed a base style from the node type's defaults, merge the theme's
override for that node id over it, then fill every still-missing field.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from chartcore.engine.context import PipelineContext
from chartcore.engine.registry import StageKind, stage
from chartcore.models.scene import NodeType, SceneGraph, SceneNode
from chartcore.models.styles import ChartTheme, ImageFill, ResolvedStyle
from chartcore.utils.colors import contrast_color

logger = logging.getLogger(__name__)

DEFAULT_FONT_WEIGHT = 400
DEFAULT_ICON_SIZE = 24.0

ARC_STROKE = "#FFFFFF"
LEADER_LINE_STROKE = "#999999"
SHAPE_FILL = "#E2E8F0"  # slate-200
SHAPE_STROKE = "#94A3B8"  # slate-400

StyleDefaults = Callable[[dict[str, Any], SceneNode, ChartTheme, int], None]


def _no_defaults(base: dict[str, Any], node: SceneNode, theme: ChartTheme, slice_index: int) -> None:
    pass


def _arc(base: dict[str, Any], node: SceneNode, theme: ChartTheme, slice_index: int) -> None:
    palette = theme.primary_colors
    base["fill"] = palette[slice_index % len(palette)]
    base["stroke"] = ARC_STROKE
    base["stroke_width"] = 2


def _percentage_label(base: dict[str, Any], node: SceneNode, theme: ChartTheme, slice_index: int) -> None:
    base["font_color"] = contrast_color(theme.background_color)
    base["font_size"] = 12
    base["font_weight"] = 900
    base["text_anchor"] = "middle"


def _label(base: dict[str, Any], node: SceneNode, theme: ChartTheme, slice_index: int) -> None:
    base["fill"] = theme.default_typography.font_color
    base["font_weight"] = 600


def _leader_line(base: dict[str, Any], node: SceneNode, theme: ChartTheme, slice_index: int) -> None:
    base["stroke"] = LEADER_LINE_STROKE
    base["stroke_width"] = 1


def _center_container(base: dict[str, Any], node: SceneNode, theme: ChartTheme, slice_index: int) -> None:
    base["fill"] = theme.background_color


def _shape(base: dict[str, Any], node: SceneNode, theme: ChartTheme, slice_index: int) -> None:
    base["fill"] = SHAPE_FILL
    base["stroke"] = SHAPE_STROKE
    base["stroke_width"] = 1


def _text(base: dict[str, Any], node: SceneNode, theme: ChartTheme, slice_index: int) -> None:
    base["fill"] = theme.default_typography.font_color
    base["text_anchor"] = "middle"


def _icon(base: dict[str, Any], node: SceneNode, theme: ChartTheme, slice_index: int) -> None:
    payload = node.payload
    base["icon_name"] = payload.icon_name if payload else None
    base["icon_size"] = (payload.width if payload and payload.width else None) or DEFAULT_ICON_SIZE
    base["icon_color"] = theme.default_typography.font_color


def _image(base: dict[str, Any], node: SceneNode, theme: ChartTheme, slice_index: int) -> None:
    if node.payload and node.payload.image_url:
        base["fill"] = ImageFill(url=node.payload.image_url)
    base["opacity"] = 1


# Every NodeType has an entry.
STYLE_DEFAULTS: dict[NodeType, StyleDefaults] = {
    NodeType.ROOT: _no_defaults,
    NodeType.RING: _no_defaults,
    NodeType.SLICE_GROUP: _no_defaults,
    NodeType.ARC: _arc,
    NodeType.PERCENTAGE_LABEL: _percentage_label,
    NodeType.LABEL_LAYER: _no_defaults,
    NodeType.LABEL: _label,
    NodeType.LEADER_LINE: _leader_line,
    NodeType.CENTER_CONTAINER: _center_container,
    NodeType.CENTER_CONTENT: _no_defaults,
    NodeType.ANNOTATION_ROOT: _no_defaults,
    NodeType.CIRCLE: _shape,
    NodeType.RECT: _shape,
    NodeType.TEXT: _text,
    NodeType.ICON: _icon,
    NodeType.IMAGE: _image,
}


def base_style(node: SceneNode, theme: ChartTheme, slice_index: int = 0) -> dict[str, Any]:
    """Theme typography plus the node type's defaults, as a partial style dict."""
    typography = theme.default_typography
    base: dict[str, Any] = {
        "fill": "none",
        "fill_opacity": 1,
        "stroke": "none",
        "stroke_width": 0,
        "opacity": 1,
        "font_family": typography.font_family,
        "font_size": typography.font_size,
        "font_weight": typography.font_weight,
        "font_color": typography.font_color,
        "text_anchor": typography.text_anchor or "middle",
    }
    STYLE_DEFAULTS[node.type](base, node, theme, slice_index)
    return base


def resolve_node_style(node: SceneNode, theme: ChartTheme, slice_index: int = 0) -> ResolvedStyle:
    """Fully populated style for one node; the theme override for its id always wins."""
    merged = base_style(node, theme, slice_index)
    override = theme.node_overrides.get(node.id)
    if override is not None:
        merged.update(override.model_dump(exclude_none=True))

    if merged.get("stroke_dash_array") is None:
        merged["stroke_dash_array"] = ""
    if merged.get("font_weight") is None:
        merged["font_weight"] = DEFAULT_FONT_WEIGHT
    return ResolvedStyle.model_validate(merged)


def slice_ordinals(scene: SceneGraph) -> dict[str, int]:
    """Position of each distinct data id, in lookup order, for palette rotation."""
    ordinals: dict[str, int] = {}
    for node in scene.nodes.values():
        if node.data_id is not None and node.data_id not in ordinals:
            ordinals[node.data_id] = len(ordinals)
    return ordinals


def resolve_all_styles(scene: SceneGraph, theme: ChartTheme) -> dict[str, ResolvedStyle]:
    ordinals = slice_ordinals(scene)
    styles = {
        node_id: resolve_node_style(node, theme, ordinals.get(node.data_id, 0) if node.data_id else 0)
        for node_id, node in scene.nodes.items()
    }
    logger.debug("Resolved %d styles (%d overridden)", len(styles), len(set(styles) & set(theme.node_overrides)))
    return styles


@stage(
    id="S5.01",
    kind=StageKind.STYLES,
    dependencies=["S4.01"],
    description="Resolve a complete style for every scene node",
)
def style_resolution(ctx: PipelineContext) -> None:
    ctx.styles = resolve_all_styles(ctx.scene, ctx.theme)
