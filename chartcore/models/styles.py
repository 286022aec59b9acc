"""Paint records: fills, typography, per-node style/transform overrides and the theme."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

TextAnchor = Literal["start", "middle", "end"]
FontWeight = str | int


class SolidFill(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["solid"] = "solid"
    color: str


class ColorStop(BaseModel):
    model_config = ConfigDict(frozen=True)

    offset: float = Field(ge=0, le=1)
    color: str
    opacity: float | None = Field(default=None, ge=0, le=1)


class GradientFill(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["linear", "radial"]
    stops: list[ColorStop] = Field(default_factory=list)
    angle: float | None = None  # linear
    cx: float | None = None  # radial
    cy: float | None = None
    r: float | None = None


class ImageFill(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["image"] = "image"
    url: str


def _coerce_fill(value: Any) -> Any:
    """A bare color string is shorthand for a solid fill."""
    if isinstance(value, str):
        return {"type": "solid", "color": value}
    return value


Fill = Annotated[Union[SolidFill, GradientFill, ImageFill], BeforeValidator(_coerce_fill)]


def describe_fill(fill: SolidFill | GradientFill | ImageFill) -> str:
    """Paint-server reference for a fill. Consumers branch on the variant the same way."""
    if isinstance(fill, SolidFill):
        return fill.color
    if isinstance(fill, GradientFill):
        stops = ", ".join(f"{s.color} {s.offset:.0%}" for s in fill.stops)
        return f"{fill.type}-gradient({stops})"
    if isinstance(fill, ImageFill):
        return f"url({fill.url})"
    raise TypeError(f"Unknown fill variant: {type(fill).__name__}")


class ShadowStyle(BaseModel):
    model_config = ConfigDict(frozen=True)

    color: str
    blur: float = Field(default=0.0, ge=0)
    offset_x: float = 0.0
    offset_y: float = 0.0


class Typography(BaseModel):
    model_config = ConfigDict(frozen=True)

    font_family: str = "Inter, system-ui, sans-serif"
    font_size: float = Field(default=14.0, gt=0)
    font_weight: FontWeight | None = None
    font_color: str = "#1e293b"
    text_anchor: TextAnchor | None = None


class NodeStyle(BaseModel):
    """Partial style; every set field wins over the node's computed default."""

    model_config = ConfigDict(frozen=True)

    fill: Fill | None = None
    fill_opacity: float | None = Field(default=None, ge=0, le=1)
    stroke: str | None = None
    stroke_width: float | None = Field(default=None, ge=0)
    stroke_dash_array: str | None = None
    opacity: float | None = Field(default=None, ge=0, le=1)
    shadow: ShadowStyle | None = None

    font_family: str | None = None
    font_size: float | None = Field(default=None, gt=0)
    font_weight: FontWeight | None = None
    font_color: str | None = None
    text_anchor: TextAnchor | None = None

    icon_name: str | None = None
    icon_size: float | None = Field(default=None, ge=0)
    icon_color: str | None = None


class NodeTransform(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float | None = None
    y: float | None = None
    scale: float | None = None
    rotate: float | None = None


class ResolvedStyle(BaseModel):
    """A style with every required field populated, safe to hand to a painter."""

    fill: Fill
    fill_opacity: float
    stroke: str
    stroke_width: float
    stroke_dash_array: str
    opacity: float
    shadow: ShadowStyle | None = None

    font_family: str
    font_size: float
    font_weight: FontWeight
    font_color: str
    text_anchor: TextAnchor

    icon_name: str | None = None
    icon_size: float | None = None
    icon_color: str | None = None

    @property
    def is_gradient(self) -> bool:
        return isinstance(self.fill, GradientFill)


DEFAULT_PALETTE = [
    "#4E79A7", "#F28E2B", "#E15759", "#76B7B2", "#59A14F",
    "#EDC948", "#B07AA1", "#FF9DA7", "#9C755F", "#BAB0AC",
]

DEFAULT_FONT_STACK = (
    'Inter, ui-sans-serif, system-ui, sans-serif, "Apple Color Emoji", '
    '"Segoe UI Emoji", "Segoe UI Symbol", "Noto Color Emoji"'
)


class ChartTheme(BaseModel):
    """Caller-owned theme. Override maps are keyed by scene node id."""

    model_config = ConfigDict(frozen=True)

    primary_colors: list[str] = Field(default_factory=lambda: list(DEFAULT_PALETTE), min_length=1)
    background_color: str = "#FFFFFF"
    default_typography: Typography = Field(
        default_factory=lambda: Typography(font_family=DEFAULT_FONT_STACK, font_size=14, font_color="#1e293b")
    )
    node_overrides: dict[str, NodeStyle] = Field(default_factory=dict)
    node_transforms: dict[str, NodeTransform] = Field(default_factory=dict)


DEFAULT_THEME = ChartTheme()
