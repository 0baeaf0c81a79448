"""Vector path types for glyph strokes.

A stroke is an open pen path stored the way TrueType stores outlines: a
sequence of points where on-curve points are joined by straight lines and a
single off-curve point between two on-curve points is a quadratic control
point.

- PointType: On-curve point or quadratic control point
- Point: A 2D point with curve metadata
- Stroke: An open path drawn with a single pen movement
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Protocol


class PointType(Enum):
    """Point type on a stroke.

    - ON_CURVE: Point the pen passes through
    - OFF_CURVE_QUAD: Quadratic Bezier control point
    """

    ON_CURVE = auto()
    OFF_CURVE_QUAD = auto()


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space with curve metadata.

    Attributes:
        x: X coordinate
        y: Y coordinate (grows downward, like image rows)
        point_type: Type of point (on-curve or control point)
    """

    x: float
    y: float
    point_type: PointType = PointType.ON_CURVE

    @property
    def on_curve(self) -> bool:
        """Check whether the pen passes through this point."""
        return self.point_type == PointType.ON_CURVE

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)

    def moved(self, x: float, y: float) -> "Point":
        """Return a point at new coordinates with the same type."""
        return Point(x, y, self.point_type)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with x, y, and type fields
        """
        return {"x": self.x, "y": self.y, "type": self.point_type.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x, y, and type fields

        Returns:
            Point instance
        """
        return cls(x=data["x"], y=data["y"], point_type=PointType(data["type"]))


class SegmentPen(Protocol):
    """Subset of the fontTools pen protocol used to replay strokes."""

    def moveTo(self, pt: tuple[float, float]) -> None: ...  # noqa: N802

    def lineTo(self, pt: tuple[float, float]) -> None: ...  # noqa: N802

    def qCurveTo(self, *points: tuple[float, float]) -> None: ...  # noqa: N802

    def endPath(self) -> None: ...  # noqa: N802


@dataclass(frozen=True)
class Stroke:
    """An open path drawn with one pen movement.

    Attributes:
        points: Points in drawing order. The first and last points are
            on-curve; control points never appear twice in a row.
    """

    points: tuple[Point, ...]

    def __post_init__(self) -> None:
        points = tuple(self.points)
        if not points:
            raise ValueError("Stroke needs at least one point")
        if not points[0].on_curve or not points[-1].on_curve:
            raise ValueError("Stroke must start and end on-curve")
        for prev, curr in zip(points, points[1:], strict=False):
            if not prev.on_curve and not curr.on_curve:
                raise ValueError("Consecutive control points are not supported")
        object.__setattr__(self, "points", points)

    @classmethod
    def polyline(cls, coords: list[tuple[float, float]]) -> "Stroke":
        """Build a straight-segment stroke from (x, y) pairs."""
        return cls(tuple(Point(x, y) for x, y in coords))

    @property
    def start(self) -> Point:
        """First point of the stroke."""
        return self.points[0]

    def segments(self) -> Iterator[tuple[Point, ...]]:
        """Iterate over drawing segments after the start point.

        Yields:
            (end,) for a line segment or (control, end) for a quadratic curve
        """
        pending: Point | None = None
        for point in self.points[1:]:
            if not point.on_curve:
                pending = point
                continue
            if pending is None:
                yield (point,)
            else:
                yield (pending, point)
                pending = None

    def map_points(self, fn: Callable[[float, float], tuple[float, float]]) -> "Stroke":
        """Apply a coordinate transform to every point.

        Affine transforms map quadratic control points exactly, so curves
        survive rotation, scaling and translation unchanged in shape.

        Args:
            fn: Function taking (x, y) and returning new (x, y)

        Returns:
            New stroke with transformed coordinates
        """
        return Stroke(tuple(p.moved(*fn(p.x, p.y)) for p in self.points))

    def bounding_box(self) -> tuple[float, float, float, float]:
        """Calculate bounding box of the stroke points (controls included).

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        xs = [p.x for p in self.points]
        ys = [p.y for p in self.points]
        return (min(xs), min(ys), max(xs), max(ys))

    def draw(self, pen: SegmentPen) -> None:
        """Replay the stroke onto a fontTools-style pen."""
        pen.moveTo(self.start.to_tuple())
        for segment in self.segments():
            if len(segment) == 1:
                pen.lineTo(segment[0].to_tuple())
            else:
                pen.qCurveTo(segment[0].to_tuple(), segment[1].to_tuple())
        pen.endPath()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {"points": [p.to_dict() for p in self.points]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Stroke":
        """Deserialize from dictionary."""
        return cls(tuple(Point.from_dict(p) for p in data["points"]))
