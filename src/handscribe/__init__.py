"""Handscribe - Extract a handwriting style and write text in it.

Handscribe analyzes a raster sample of handwritten text into a compact numeric
style descriptor (ink color, stroke width, slant, glyph metrics and variation
statistics), then lays out arbitrary text as stochastically varied vector
strokes in that style.

Example:
    >>> from handscribe import analyze, generate
    >>> from handscribe.io import load_image
    >>> style = analyze(load_image("sample.png"))
    >>> document = generate(style, "Hello world", seed=42)

Or from the command line:
    $ handscribe analyze sample.png -o style.json
    $ handscribe generate "Hello world" --style style.json -o hello.svg
"""

from handscribe.core import analyze, generate

__version__ = "0.1.0"

__all__ = ["__version__", "analyze", "generate"]
