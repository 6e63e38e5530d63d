"""Baseline-centered area sparkline drawn with Pillow."""

from __future__ import annotations

from typing import Sequence

from PIL import Image, ImageDraw

from .models import SparklineStyle
from .normalize import NormalizationResult


Box = tuple[int, int, int, int]


def _rgb(color: str) -> tuple[int, int, int]:
    return tuple(int(color[i : i + 2], 16) for i in (1, 3, 5))  # type: ignore[return-value]


def _lerp(a: tuple[int, int, int], b: tuple[int, int, int], t: float) -> tuple[int, int, int]:
    return tuple(int(a[i] * (1 - t) + b[i] * t) for i in range(3))  # type: ignore[return-value]


def cardinal_spline(points: Sequence[tuple[float, float]], tension: float, steps: int) -> list[tuple[float, float]]:
    """Cardinal spline through `points` sampled as `steps` segments per span.

    Control points sit at tension/3 of the neighbour chord, which matches the
    usual Bezier form of a cardinal curve. Tension 0 yields straight lines.
    """
    n = len(points)
    if n < 3 or tension <= 0 or steps < 2:
        return [(float(x), float(y)) for x, y in points]

    k = tension / 3.0
    out: list[tuple[float, float]] = [(float(points[0][0]), float(points[0][1]))]
    for i in range(n - 1):
        p0 = points[max(i - 1, 0)]
        p1 = points[i]
        p2 = points[i + 1]
        p3 = points[min(i + 2, n - 1)]
        c1 = (p1[0] + k * (p2[0] - p0[0]), p1[1] + k * (p2[1] - p0[1]))
        c2 = (p2[0] - k * (p3[0] - p1[0]), p2[1] - k * (p3[1] - p1[1]))
        for s in range(1, steps + 1):
            t = s / steps
            u = 1 - t
            x = u * u * u * p1[0] + 3 * u * u * t * c1[0] + 3 * u * t * t * c2[0] + t * t * t * p2[0]
            y = u * u * u * p1[1] + 3 * u * u * t * c1[1] + 3 * u * t * t * c2[1] + t * t * t * p2[1]
            out.append((x, y))
    return out


def plot_coordinates(result: NormalizationResult, box: Box, padding: int = 0) -> list[tuple[float, float]]:
    """Pixel positions for normalized points: +1 at the top, 0 mid, -1 at the bottom."""
    points = result.points
    if len(points) < 2:
        return []
    x0, y0, x1, y1 = box
    left, top = x0 + padding, y0 + padding
    right, bottom = x1 - 1 - padding, y1 - 1 - padding
    span = points[-1][0] - points[0][0]
    if right <= left or bottom <= top or span <= 0:
        return []

    mid = (top + bottom) / 2.0
    half = (bottom - top) / 2.0
    dx = (right - left) / span
    first = points[0][0]
    return [(left + (x - first) * dx, mid - d * half) for x, d in points]


def _gradient(width: int, height: int, style: SparklineStyle) -> Image.Image:
    above_top, above_base = _rgb(style.above_top), _rgb(style.above_base)
    below_base, below_bottom = _rgb(style.below_base), _rgb(style.below_bottom)
    image = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    mid = (height - 1) / 2.0
    for y in range(height):
        if y <= mid:
            color = _lerp(above_top, above_base, y / max(mid, 1e-9))
        else:
            color = _lerp(below_base, below_bottom, (y - mid) / max(height - 1 - mid, 1e-9))
        draw.line((0, y, width - 1, y), fill=color + (style.alpha,))
    return image


def render_sparkline(image: Image.Image, box: Box, result: NormalizationResult, style: SparklineStyle | None = None) -> bool:
    """Fill the area between the curve and the baseline, then stroke the curve.

    Returns False (drawing nothing) when there is nothing plottable.
    """
    style = style or SparklineStyle()
    coords = plot_coordinates(result, box, style.padding)
    if not coords:
        return False

    x0, y0, x1, y1 = box
    top, bottom = y0 + style.padding, y1 - 1 - style.padding
    mid = (top + bottom) / 2.0
    curve = [
        (x, max(float(top), min(float(bottom), y)))
        for x, y in cardinal_spline(coords, style.curve_tension, style.curve_steps)
    ]

    mask = Image.new("L", image.size, 0)
    ImageDraw.Draw(mask).polygon(curve + [(curve[-1][0], mid), (curve[0][0], mid)], fill=255)
    gradient = Image.new("RGBA", image.size, (0, 0, 0, 0))
    gradient.paste(_gradient(x1 - x0, y1 - y0, style), (x0, y0))
    image.paste(gradient, (0, 0), mask)

    if style.line_width > 0:
        ImageDraw.Draw(image).line(curve, fill=_rgb(style.line) + (style.alpha,), width=max(1, round(style.line_width)))
    return True
