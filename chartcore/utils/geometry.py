"""Leaf-node polar geometry helpers. No engine imports."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

# Spans within this of a full turn are drawn as a closed circle.
FULL_CIRCLE_EPS = 1e-9


def polar_to_cartesian(cx: float, cy: float, radius: float, angle: float) -> tuple[float, float]:
    """x = cx + r*cos(theta), y = cy + r*sin(theta)."""
    return (cx + radius * math.cos(angle), cy + radius * math.sin(angle))


def direction_vector(angle: float, length: float) -> tuple[float, float]:
    """Vector of the given length along the ray at ``angle``."""
    return (math.cos(angle) * length, math.sin(angle) * length)


def allocate_spans(
    fractions: NDArray[np.float64] | list[float],
    start: float,
    end: float,
) -> list[tuple[float, float]]:
    """Split [start, end] into contiguous (start, end) pairs proportional to ``fractions``.

    A running cursor keeps neighbours sharing their boundary, and the last
    boundary is pinned to ``end``, so the spans tile the range exactly: the
    boundaries are bit-identical where slices meet and at both ends. Span widths
    are float differences of those boundaries, so adding the widths back up
    agrees with ``end - start`` only to rounding.
    """
    fractions = np.asarray(fractions, dtype=np.float64)
    total_range = end - start
    spans: list[tuple[float, float]] = []
    cursor = start
    n = len(fractions)
    for i, frac in enumerate(fractions):
        nxt = end if i == n - 1 else cursor + float(frac) * total_range
        spans.append((cursor, nxt))
        cursor = nxt
    return spans


def is_full_circle(span: float) -> bool:
    return span >= 2 * math.pi - FULL_CIRCLE_EPS


def fmt(value: float, precision: int = 3) -> str:
    """Format a coordinate compactly: fixed precision, trailing zeros trimmed."""
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return text


def point_str(point: tuple[float, float], precision: int = 3) -> str:
    return f"{fmt(point[0], precision)} {fmt(point[1], precision)}"


def arc_command(
    radius: float,
    end: tuple[float, float],
    large_arc: int,
    sweep: int,
    precision: int = 3,
) -> str:
    r = fmt(radius, precision)
    return f"A {r} {r} 0 {large_arc} {sweep} {point_str(end, precision)}"


def wedge_path(
    center: tuple[float, float],
    inner_radius: float,
    outer_radius: float,
    start_angle: float,
    end_angle: float,
    pad_angle: float = 0.0,
    precision: int = 3,
) -> str:
    """Path data for one pie wedge (inner radius 0) or donut ring segment.

    The pad angle shrinks the span by half on each side. A span that collapses
    to <= 0 yields an empty string.
    """
    a0 = start_angle + pad_angle / 2
    a1 = end_angle - pad_angle / 2
    span = a1 - a0
    if span <= 0:
        return ""

    cx, cy = center
    if is_full_circle(span):
        return _full_circle_path(center, inner_radius, outer_radius, a0, precision)

    large_arc = 1 if span > math.pi else 0
    p1 = polar_to_cartesian(cx, cy, outer_radius, a0)
    p2 = polar_to_cartesian(cx, cy, outer_radius, a1)

    if inner_radius <= 0:
        return " ".join([
            f"M {point_str(center, precision)}",
            f"L {point_str(p1, precision)}",
            arc_command(outer_radius, p2, large_arc, 1, precision),
            "Z",
        ])

    p3 = polar_to_cartesian(cx, cy, inner_radius, a1)
    p4 = polar_to_cartesian(cx, cy, inner_radius, a0)
    return " ".join([
        f"M {point_str(p1, precision)}",
        arc_command(outer_radius, p2, large_arc, 1, precision),
        f"L {point_str(p3, precision)}",
        arc_command(inner_radius, p4, large_arc, 0, precision),
        "Z",
    ])


def _full_circle_path(
    center: tuple[float, float],
    inner_radius: float,
    outer_radius: float,
    start: float,
    precision: int,
) -> str:
    """A full turn as two half-circle arcs; a single arc with coincident ends draws nothing."""
    cx, cy = center
    half = start + math.pi
    o0 = polar_to_cartesian(cx, cy, outer_radius, start)
    o1 = polar_to_cartesian(cx, cy, outer_radius, half)

    if inner_radius <= 0:
        return " ".join([
            f"M {point_str(center, precision)}",
            f"L {point_str(o0, precision)}",
            arc_command(outer_radius, o1, 0, 1, precision),
            arc_command(outer_radius, o0, 0, 1, precision),
            "Z",
        ])

    i0 = polar_to_cartesian(cx, cy, inner_radius, start)
    i1 = polar_to_cartesian(cx, cy, inner_radius, half)
    return " ".join([
        f"M {point_str(o0, precision)}",
        arc_command(outer_radius, o1, 0, 1, precision),
        arc_command(outer_radius, o0, 0, 1, precision),
        f"L {point_str(i0, precision)}",
        arc_command(inner_radius, i1, 0, 0, precision),
        arc_command(inner_radius, i0, 0, 0, precision),
        "Z",
    ])


def line_path(
    start: tuple[float, float],
    end: tuple[float, float],
    precision: int = 3,
) -> str:
    return f"M {point_str(start, precision)} L {point_str(end, precision)}"
