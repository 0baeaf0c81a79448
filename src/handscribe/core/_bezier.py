"""Internal Bezier curve flattening.

This is an internal module containing helper functions for stroke geometry.
Not intended for public use.
"""

import math

from handscribe.domain import Point


def flatten_quadratic(points: list[Point], tolerance: float) -> list[Point]:
    """Flatten a quadratic Bezier curve using recursive subdivision.

    Args:
        points: List of 3 control points [p0, p1, p2]
        tolerance: Maximum distance from true curve

    Returns:
        List of on-curve points approximating the curve, endpoints included
    """
    p0, p1, p2 = points

    # Curve point at t=0.5
    curve_mid_x = 0.25 * p0.x + 0.5 * p1.x + 0.25 * p2.x
    curve_mid_y = 0.25 * p0.y + 0.5 * p1.y + 0.25 * p2.y

    # Chord midpoint
    chord_mid_x = (p0.x + p2.x) / 2
    chord_mid_y = (p0.y + p2.y) / 2

    distance = math.hypot(curve_mid_x - chord_mid_x, curve_mid_y - chord_mid_y)

    if distance <= tolerance:
        return [Point(p0.x, p0.y), Point(p2.x, p2.y)]

    # Subdivide at t=0.5
    mid = Point(curve_mid_x, curve_mid_y)
    left = flatten_quadratic(
        [p0, Point((p0.x + p1.x) / 2, (p0.y + p1.y) / 2), mid], tolerance
    )
    right = flatten_quadratic(
        [mid, Point((p1.x + p2.x) / 2, (p1.y + p2.y) / 2), p2], tolerance
    )

    # Combine, avoiding duplicate midpoint
    return left[:-1] + right
