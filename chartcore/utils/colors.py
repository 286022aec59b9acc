"""Color parsing and luminance helpers. No engine imports."""

from __future__ import annotations

import re

import numpy as np

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_RGB_RE = re.compile(r"^rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)", re.IGNORECASE)

_NAMED = {
    "white": (255, 255, 255),
    "black": (0, 0, 0),
    "transparent": (255, 255, 255),
}

# WCAG 2.x flare term added to both luminances of a contrast ratio.
_FLARE = 0.05


def parse_color(color: str) -> tuple[int, int, int] | None:
    """Parse ``#rgb``, ``#rrggbb``, ``#rrggbbaa``, ``rgb()``/``rgba()`` or a few names."""
    text = (color or "").strip()
    if not text:
        return None
    named = _NAMED.get(text.lower())
    if named:
        return named

    m = _HEX_RE.match(text)
    if m:
        digits = m.group(1)
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    m = _RGB_RE.match(text)
    if m:
        return tuple(min(255, int(float(v))) for v in m.groups())  # type: ignore[return-value]
    return None


def relative_luminance(color: str) -> float | None:
    """WCAG relative luminance in [0, 1], or None for an unparseable color."""
    rgb = parse_color(color)
    if rgb is None:
        return None
    channels = np.array(rgb, dtype=np.float64) / 255.0
    linear = np.where(
        channels <= 0.03928,
        channels / 12.92,
        ((channels + 0.055) / 1.055) ** 2.4,
    )
    return float(np.dot(linear, [0.2126, 0.7152, 0.0722]))


def contrast_ratio(first: str, second: str) -> float | None:
    """WCAG contrast ratio (1..21) between two colors, or None if either is unparseable."""
    a = relative_luminance(first)
    b = relative_luminance(second)
    if a is None or b is None:
        return None
    lighter, darker = max(a, b), min(a, b)
    return (lighter + _FLARE) / (darker + _FLARE)


def contrast_color(background: str, dark: str = "#000000", light: str = "#FFFFFF") -> str:
    """Whichever of ``dark``/``light`` has the higher contrast ratio against ``background``.

    Ties and unparseable backgrounds give ``dark``.
    """
    dark_ratio = contrast_ratio(background, dark)
    light_ratio = contrast_ratio(background, light)
    if dark_ratio is None or light_ratio is None:
        return dark
    return dark if dark_ratio >= light_ratio else light
