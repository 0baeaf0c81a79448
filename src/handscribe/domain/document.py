"""Rendered document types produced by synthesis.

A RenderedDocument is the backend-independent result of laying out text in a
style: an ordered list of placed glyphs, each carrying its transform and the
resolved stroke geometry in canvas coordinates. It can be consumed as a flat
draw-command stream or replayed onto any fontTools-style pen.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from handscribe.domain.path import SegmentPen, Stroke
from handscribe.domain.raster import Color


class GenerationStatus(str, Enum):
    """Outcome of a generate call."""

    RENDERED = "rendered"
    TRUNCATED = "truncated"
    SKIPPED = "skipped"


class DrawOp(str, Enum):
    """Drawing primitive understood by render backends."""

    MOVE_TO = "moveTo"
    LINE_TO = "lineTo"
    QUAD_TO = "quadraticCurveTo"
    STROKE = "stroke"


@dataclass(frozen=True, slots=True)
class DrawCommand:
    """One drawing primitive tagged with its pen settings.

    Attributes:
        op: Primitive to execute
        args: Coordinates (x, y) or (cx, cy, x, y); empty for STROKE
        color: Stroke color of the glyph instance
        stroke_width: Stroke width of the glyph instance
    """

    op: DrawOp
    args: tuple[float, ...]
    color: Color
    stroke_width: float


@dataclass(frozen=True, slots=True)
class GlyphTransform:
    """Per-instance variation applied to a glyph.

    Attributes:
        rotation: Rotation in radians about the glyph origin
        scale: Uniform scale factor about the glyph origin
        y_offset: Vertical displacement from the line position
        stroke_width: Resolved stroke width for this instance
    """

    rotation: float
    scale: float
    y_offset: float
    stroke_width: float


@dataclass(frozen=True)
class PlacedGlyph:
    """A glyph instance positioned on the canvas.

    Attributes:
        character: Character rendered
        origin_x: Cursor x where the glyph was placed
        origin_y: Line y plus the vertical variation offset
        rotation: Rotation in radians
        scale: Scale factor
        stroke_width: Stroke width override for this instance
        color: Ink color
        strokes: Resolved stroke geometry in canvas coordinates
    """

    character: str
    origin_x: float
    origin_y: float
    rotation: float
    scale: float
    stroke_width: float
    color: Color
    strokes: tuple[Stroke, ...]

    def draw_commands(self) -> Iterator[DrawCommand]:
        """Flatten the glyph geometry into draw commands.

        Yields:
            MOVE_TO / LINE_TO / QUAD_TO commands per stroke, each stroke
            terminated by STROKE
        """
        for stroke in self.strokes:
            yield self._command(DrawOp.MOVE_TO, stroke.start.to_tuple())
            for segment in stroke.segments():
                if len(segment) == 1:
                    yield self._command(DrawOp.LINE_TO, segment[0].to_tuple())
                else:
                    yield self._command(
                        DrawOp.QUAD_TO, segment[0].to_tuple() + segment[1].to_tuple()
                    )
            yield self._command(DrawOp.STROKE, ())

    def _command(self, op: DrawOp, args: tuple[float, ...]) -> DrawCommand:
        return DrawCommand(op=op, args=args, color=self.color, stroke_width=self.stroke_width)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "character": self.character,
            "origin_x": self.origin_x,
            "origin_y": self.origin_y,
            "rotation": self.rotation,
            "scale": self.scale,
            "stroke_width": self.stroke_width,
            "color": self.color.to_hex(),
            "strokes": [s.to_dict() for s in self.strokes],
        }


@dataclass(frozen=True)
class RenderedDocument:
    """Ordered glyph placements for one generate call.

    Attributes:
        width: Canvas width
        height: Canvas height
        glyphs: Placed glyphs in writing order
        status: RENDERED, TRUNCATED (ran out of page) or SKIPPED (no-op)
        seed: RNG seed that reproduces this document (None when skipped)
    """

    width: float
    height: float
    glyphs: tuple[PlacedGlyph, ...] = field(default_factory=tuple)
    status: GenerationStatus = GenerationStatus.RENDERED
    seed: int | None = None

    @classmethod
    def skipped(cls, width: float, height: float) -> "RenderedDocument":
        """Create the empty no-op result."""
        return cls(width=width, height=height, glyphs=(), status=GenerationStatus.SKIPPED)

    @property
    def is_skipped(self) -> bool:
        """Check whether generation performed no work."""
        return self.status == GenerationStatus.SKIPPED

    @property
    def is_truncated(self) -> bool:
        """Check whether text was cut off at the bottom margin."""
        return self.status == GenerationStatus.TRUNCATED

    def __len__(self) -> int:
        return len(self.glyphs)

    def draw_commands(self) -> Iterator[DrawCommand]:
        """Flatten the whole document into draw commands in writing order."""
        for glyph in self.glyphs:
            yield from glyph.draw_commands()

    def draw(self, pen: SegmentPen) -> None:
        """Replay every stroke onto a fontTools-style pen."""
        for glyph in self.glyphs:
            for stroke in glyph.strokes:
                stroke.draw(pen)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "width": self.width,
            "height": self.height,
            "status": self.status.value,
            "seed": self.seed,
            "glyphs": [g.to_dict() for g in self.glyphs],
        }
