"""Text layout and glyph placement.

The LayoutEngine flows text across the canvas word by word, wrapping at the
right margin and stopping at the bottom margin, and places every character
as a transformed copy of its catalog template:

1. Estimate the word width from per-class character widths
2. Wrap when the word does not fit (explicit newlines always wrap)
3. Break words that are wider than the remaining line
4. Draw the glyph transform and jitter from the VariationModel
5. Advance the cursor by the varied character width, then a varied space

All randomness comes from one random.Random seeded per call.
"""

import random
import time

import structlog

from handscribe.config import CanvasConfig, Fidelity, SynthesisConfig
from handscribe.core.geometry import affine
from handscribe.core.templates import GlyphCatalog, default_catalog
from handscribe.core.variation import VariationModel
from handscribe.domain import (
    GenerationStatus,
    PlacedGlyph,
    RenderedDocument,
    Stroke,
    StyleDescriptor,
)

logger = structlog.get_logger(__name__)

NARROW_CHARACTERS = frozenset("ilt")
WIDE_CHARACTERS = frozenset("mw")
DESCENDER_CHARACTERS = frozenset("fjpqy")

# Share of the advance covered by the glyph body; the rest is letter spacing
GLYPH_BOX_RATIO = 0.8

ENTRY_CONNECTOR_THRESHOLD = 0.3
EXIT_CONNECTOR_THRESHOLD = 0.4


def width_factor(char: str) -> float:
    """Relative width of a character class."""
    if char in NARROW_CHARACTERS:
        return 0.3
    if char in WIDE_CHARACTERS:
        return 1.4
    if char in DESCENDER_CHARACTERS:
        return 0.8
    return 1.0


class _Cursor:
    """Pen position on the page."""

    def __init__(self, canvas: CanvasConfig) -> None:
        self.x = canvas.margin_left
        self.y = canvas.margin_top


class LayoutEngine:
    """Lays out text in a handwriting style.

    The engine holds configuration and the template catalog; every render
    call creates its own RNG and cursor, so one engine may serve concurrent
    calls.
    """

    def __init__(
        self,
        config: SynthesisConfig | None = None,
        catalog: GlyphCatalog | None = None,
    ) -> None:
        self.config = config or SynthesisConfig()
        self.catalog = catalog or default_catalog()

    @property
    def canvas(self) -> CanvasConfig:
        return self.config.canvas

    def word_width(self, word: str, style: StyleDescriptor) -> float:
        """Estimated width of a word before variation."""
        total = sum(width_factor(c) for c in word) * style.character_width
        return total * self.config.variation.word_compression

    def render(
        self,
        style: StyleDescriptor | None,
        text: str,
        seed: int | None = None,
    ) -> RenderedDocument:
        """Render text into placed glyphs.

        Args:
            style: Style to write in; None skips generation
            text: Text to write; empty text skips generation
            seed: RNG seed; falls back to the configured seed, then to the clock

        Returns:
            RenderedDocument with status RENDERED, TRUNCATED or SKIPPED
        """
        canvas = self.canvas
        if style is None or not text:
            logger.info(
                "Generation skipped",
                reason="no style" if style is None else "empty text",
            )
            return RenderedDocument.skipped(canvas.width, canvas.height)

        if seed is None:
            seed = self.config.seed if self.config.seed is not None else time.time_ns()

        start = time.perf_counter()
        rng = random.Random(seed)
        variation = VariationModel(style, rng, self.config.fidelity, self.config.variation)
        line_height = canvas.line_height or style.line_spacing
        cursor = _Cursor(canvas)

        glyphs: list[PlacedGlyph] = []
        status = GenerationStatus.RENDERED

        def wrap() -> None:
            cursor.x = canvas.margin_left
            cursor.y += line_height * rng.uniform(*self.config.variation.line_height_range)

        def fits_vertically() -> bool:
            return cursor.y + variation.offset_limit <= canvas.bottom_limit

        if not fits_vertically():
            status = GenerationStatus.TRUNCATED

        for paragraph_index, paragraph in enumerate(text.splitlines()):
            if status == GenerationStatus.TRUNCATED:
                break
            if paragraph_index > 0:
                wrap()
                if not fits_vertically():
                    status = GenerationStatus.TRUNCATED
                    break

            for word in paragraph.split():
                if (
                    cursor.x + self.word_width(word, style) > canvas.right_limit
                    and cursor.x > canvas.margin_left
                ):
                    wrap()
                if not fits_vertically():
                    status = GenerationStatus.TRUNCATED
                    break

                for index, char in enumerate(word):
                    advance = width_factor(char) * style.character_width * variation.width_factor()
                    if cursor.x + advance > canvas.right_limit and cursor.x > canvas.margin_left:
                        wrap()
                        if not fits_vertically():
                            status = GenerationStatus.TRUNCATED
                            break

                    glyphs.append(
                        self._place(
                            char,
                            cursor.x,
                            cursor.y,
                            advance,
                            style,
                            variation,
                            first=index == 0,
                            last=index == len(word) - 1,
                        )
                    )
                    cursor.x += advance

                if status == GenerationStatus.TRUNCATED:
                    break
                cursor.x += style.space_width * rng.uniform(*self.config.variation.space_range)

        if status == GenerationStatus.TRUNCATED:
            logger.debug("Text truncated at bottom margin", placed=len(glyphs))

        logger.info(
            "Text generated",
            glyphs=len(glyphs),
            status=status.value,
            seed=seed,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return RenderedDocument(
            width=canvas.width,
            height=canvas.height,
            glyphs=tuple(glyphs),
            status=status,
            seed=seed,
        )

    def _place(
        self,
        char: str,
        x: float,
        y: float,
        advance: float,
        style: StyleDescriptor,
        variation: VariationModel,
        first: bool,
        last: bool,
    ) -> PlacedGlyph:
        """Resolve one glyph instance into canvas strokes."""
        box_width = advance * GLYPH_BOX_RATIO
        height = style.character_height

        strokes: tuple[Stroke, ...] = self.catalog.lookup(char).place(box_width, height)
        transform = variation.glyph_transform()
        strokes += self._connectors(char, box_width, height, variation.rng, first, last)
        strokes = variation.jitter(strokes)

        origin_y = y + transform.y_offset
        to_canvas = affine(transform.rotation, transform.scale, (x, origin_y + height))
        return PlacedGlyph(
            character=char,
            origin_x=x,
            origin_y=origin_y,
            rotation=transform.rotation,
            scale=transform.scale,
            stroke_width=transform.stroke_width,
            color=style.ink_color,
            strokes=tuple(s.map_points(to_canvas) for s in strokes),
        )

    def _connectors(
        self,
        char: str,
        box_width: float,
        height: float,
        rng: random.Random,
        first: bool,
        last: bool,
    ) -> tuple[Stroke, ...]:
        """Cursive entry/exit strokes for lowercase word boundaries (enhanced only)."""
        if (
            self.config.fidelity != Fidelity.ENHANCED
            or not self.config.variation.connector_strokes
            or not char.islower()
        ):
            return ()

        extra: tuple[Stroke, ...] = ()
        entry = self.catalog.entry_connector
        exit_ = self.catalog.exit_connector
        if first and entry is not None and rng.random() > ENTRY_CONNECTOR_THRESHOLD:
            extra += entry.place(box_width, height)
        if last and exit_ is not None and rng.random() > EXIT_CONNECTOR_THRESHOLD:
            extra += exit_.place(box_width, height)
        return extra


def generate(
    descriptor: StyleDescriptor | None,
    text: str,
    seed: int | None = None,
    *,
    config: SynthesisConfig | None = None,
    catalog: GlyphCatalog | None = None,
) -> RenderedDocument:
    """Render text in a handwriting style.

    Args:
        descriptor: Style to write in (None skips generation)
        text: Text to render
        seed: RNG seed for reproducible output (None = configured or time-derived)
        config: Synthesis configuration
        catalog: Template catalog (defaults to the built-in catalog)

    Returns:
        RenderedDocument
    """
    return LayoutEngine(config, catalog).render(descriptor, text, seed)
