"""SVG export of rendered documents.

Each placed glyph becomes one stroked <path> element whose geometry is
produced by replaying the glyph strokes onto fontTools' SVGPathPen.
"""

from pathlib import Path

import structlog
from fontTools.pens.svgPathPen import SVGPathPen

from handscribe.domain import PlacedGlyph, RenderedDocument
from handscribe.exceptions import DocumentWriteError

logger = structlog.get_logger(__name__)


def _format_number(value: float) -> str:
    """Compact decimal for path data ('12.5', '3', '-0.25')."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


class SVGWriter:
    """Serializes RenderedDocument objects as SVG.

    Example:
        writer = SVGWriter(background="#ffffff")
        writer.write(document, Path("letter.svg"))
    """

    def __init__(self, background: str | None = "#ffffff") -> None:
        """Initialize the writer.

        Args:
            background: Page fill color, or None for a transparent page
        """
        self.background = background

    def glyph_path(self, glyph: PlacedGlyph) -> str:
        """Path data of one glyph."""
        pen = SVGPathPen(None, ntos=_format_number)
        for stroke in glyph.strokes:
            stroke.draw(pen)
        return pen.getCommands()

    def to_svg(self, document: RenderedDocument) -> str:
        """Render the document as an SVG string."""
        width = _format_number(document.width)
        height = _format_number(document.height)
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
            f'viewBox="0 0 {width} {height}">',
        ]
        if self.background:
            lines.append(f'  <rect width="100%" height="100%" fill="{self.background}"/>')

        lines.append(
            '  <g fill="none" stroke-linecap="round" stroke-linejoin="round">'
        )
        for glyph in document.glyphs:
            lines.append(
                f'    <path d="{self.glyph_path(glyph)}" '
                f'stroke="{glyph.color.to_hex()}" '
                f'stroke-width="{_format_number(glyph.stroke_width)}"/>'
            )
        lines.append("  </g>")
        lines.append("</svg>")
        return "\n".join(lines) + "\n"

    def write(self, document: RenderedDocument, output_path: Path) -> Path:
        """Write the document to a file.

        Args:
            document: Rendered document
            output_path: Destination .svg file

        Returns:
            Path written

        Raises:
            DocumentWriteError: If the file cannot be written
        """
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(self.to_svg(document), encoding="utf-8")
        except OSError as e:
            raise DocumentWriteError(str(output_path), str(e)) from e

        logger.info("Document written", path=str(output_path), glyphs=len(document.glyphs))
        return output_path
