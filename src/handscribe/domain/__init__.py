"""Domain models for handscribe.

This module contains the core domain models representing raster input, the
extracted style, stroke geometry and rendered output. All models are designed
to be:

- Immutable (frozen dataclasses, read-only pixel buffers)
- Serializable to plain dictionaries
- Independent of any image or rendering library beyond numpy

Key classes:
- RasterImage / BinaryMask: Pixel data entering the analysis pipeline
- StyleDescriptor: Numeric summary of a handwriting style
- CharacterBoundingBox: A segmented glyph run
- Point / Stroke: Vector pen paths
- PlacedGlyph / RenderedDocument: Synthesis output
"""

from handscribe.domain.document import (
    DrawCommand,
    DrawOp,
    GenerationStatus,
    GlyphTransform,
    PlacedGlyph,
    RenderedDocument,
)
from handscribe.domain.path import Point, PointType, SegmentPen, Stroke
from handscribe.domain.raster import BLACK, BinaryMask, Color, RasterImage
from handscribe.domain.style import (
    DEFAULT_STYLE,
    ENHANCED_DEFAULT_STYLE,
    CharacterBoundingBox,
    StyleDescriptor,
    default_style,
)

__all__: list[str] = [
    # Enums
    "DrawOp",
    "GenerationStatus",
    "PointType",
    # Raster types
    "BLACK",
    "BinaryMask",
    "Color",
    "RasterImage",
    # Style
    "DEFAULT_STYLE",
    "ENHANCED_DEFAULT_STYLE",
    "CharacterBoundingBox",
    "StyleDescriptor",
    "default_style",
    # Geometry
    "Point",
    "SegmentPen",
    "Stroke",
    # Output
    "DrawCommand",
    "GlyphTransform",
    "PlacedGlyph",
    "RenderedDocument",
]
