"""I/O layer for handscribe.

This module handles everything that touches files, keeping the analysis and
synthesis core free of I/O.

Key responsibilities:
- Decode sample images with Pillow
- Persist style descriptors as JSON
- Export rendered documents as SVG via fontTools pens

Key classes:
- ImageReader: Load images into RasterImage
- SVGWriter: Save RenderedDocument as SVG
"""

from handscribe.io.reader import ImageReader, load_image
from handscribe.io.style_store import load_style, save_style
from handscribe.io.writer import SVGWriter

__all__ = [
    "ImageReader",
    "SVGWriter",
    "load_image",
    "load_style",
    "save_style",
]
