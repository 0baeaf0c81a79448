"""Geometric operations on glyph strokes.

This module provides the path utilities used by synthesis:
- Stroke flattening (quadratic curves to polylines)
- Arc-length resampling
- Affine point transforms (scale, rotate, translate)

All functions are pure and stateless.
"""

import math
from collections.abc import Callable

from handscribe.core._bezier import flatten_quadratic as _flatten_quadratic
from handscribe.domain import Point, Stroke

PointFn = Callable[[float, float], tuple[float, float]]


def flatten_stroke(stroke: Stroke, tolerance: float = 0.25) -> list[tuple[float, float]]:
    """Convert a stroke to a polyline.

    Args:
        stroke: Stroke with line and quadratic segments
        tolerance: Maximum distance from the true curve

    Returns:
        List of (x, y) vertices, starting at the stroke start

    Examples:
        >>> s = Stroke.polyline([(0.0, 0.0), (1.0, 0.0)])
        >>> flatten_stroke(s)
        [(0.0, 0.0), (1.0, 0.0)]
    """
    current = stroke.start
    vertices = [current.to_tuple()]

    for segment in stroke.segments():
        if len(segment) == 1:
            end = segment[0]
            vertices.append(end.to_tuple())
        else:
            control, end = segment
            curve = _flatten_quadratic([current, control, end], tolerance)
            vertices.extend(p.to_tuple() for p in curve[1:])
        current = end

    return vertices


def resample(vertices: list[tuple[float, float]], step: float) -> list[tuple[float, float]]:
    """Resample a polyline at a fixed arc-length step.

    Samples are placed every `step` units along the path. The first and last
    vertices are always kept, so a path shorter than `step` keeps its ends.

    Args:
        vertices: Polyline vertices
        step: Arc-length spacing between samples (> 0)

    Returns:
        Resampled vertices

    Raises:
        ValueError: If step is not positive
    """
    if step <= 0:
        raise ValueError(f"Resampling step must be positive, got {step}")
    if len(vertices) < 2:
        return list(vertices)

    samples = [vertices[0]]
    # Distance still to travel before the next sample
    remaining = step

    for (x0, y0), (x1, y1) in zip(vertices, vertices[1:], strict=False):
        seg_len = math.hypot(x1 - x0, y1 - y0)
        if seg_len == 0.0:
            continue
        travelled = 0.0
        while seg_len - travelled >= remaining:
            travelled += remaining
            t = travelled / seg_len
            samples.append((x0 + t * (x1 - x0), y0 + t * (y1 - y0)))
            remaining = step
        remaining -= seg_len - travelled

    last = vertices[-1]
    if samples[-1] != last:
        samples.append(last)
    return samples


def affine(
    rotation: float = 0.0,
    scale: float = 1.0,
    translate: tuple[float, float] = (0.0, 0.0),
) -> PointFn:
    """Build a point transform: scale, then rotate about the origin, then translate.

    Rotation is clockwise on screen for positive angles (y grows downward),
    so a positive slant leans the top of a glyph to the right.

    Args:
        rotation: Rotation in radians
        scale: Uniform scale factor
        translate: (dx, dy) applied last

    Returns:
        Function mapping (x, y) to transformed (x, y)
    """
    cos_r = math.cos(rotation)
    sin_r = math.sin(rotation)
    dx, dy = translate

    def apply(x: float, y: float) -> tuple[float, float]:
        sx = x * scale
        sy = y * scale
        return (sx * cos_r - sy * sin_r + dx, sx * sin_r + sy * cos_r + dy)

    return apply


def box_transform(
    left: float, top: float, width: float, height: float
) -> PointFn:
    """Map unit-box coordinates into a rectangle."""

    def apply(x: float, y: float) -> tuple[float, float]:
        return (left + x * width, top + y * height)

    return apply


def to_polyline_stroke(vertices: list[tuple[float, float]]) -> Stroke:
    """Build a stroke from polyline vertices."""
    return Stroke(tuple(Point(x, y) for x, y in vertices))
