"""Unit tests for text layout and glyph placement."""

import pytest

from handscribe.config import CanvasConfig, Fidelity, SynthesisConfig, VariationConfig
from handscribe.core.layout import LayoutEngine, generate, width_factor
from handscribe.core.templates import GlyphCatalog
from handscribe.domain import DEFAULT_STYLE, ENHANCED_DEFAULT_STYLE, GenerationStatus

STEADY_STYLE = DEFAULT_STYLE.with_changes(
    width_variation=0.0, baseline_variation=0.0, jitter=0.0, slant=0.0
)


def _engine(fidelity: Fidelity = Fidelity.ENHANCED, **canvas) -> LayoutEngine:
    config = SynthesisConfig(fidelity=fidelity, canvas=CanvasConfig(**canvas))
    return LayoutEngine(config)


class TestWidthFactor:
    """Tests for width_factor function."""

    @pytest.mark.parametrize(
        "char, expected",
        [("i", 0.3), ("l", 0.3), ("t", 0.3), ("m", 1.4), ("w", 1.4), ("p", 0.8), ("a", 1.0), ("M", 1.0)],
    )
    def test_classes(self, char, expected):
        """Test the per-character width classes."""
        assert width_factor(char) == expected

    def test_word_width(self):
        """Test the compressed word width estimate."""
        engine = LayoutEngine()
        # (1.0 + 0.3 + 1.4) * 20 * 0.9
        assert engine.word_width("aim", DEFAULT_STYLE) == pytest.approx(48.6)


class TestSkipped:
    """Tests for no-op generation."""

    def test_empty_text(self):
        """Test that empty text produces an empty skipped document."""
        doc = LayoutEngine().render(DEFAULT_STYLE, "", seed=1)
        assert doc.status == GenerationStatus.SKIPPED
        assert len(doc) == 0

    def test_missing_style(self):
        """Test that a missing style produces an empty skipped document."""
        doc = LayoutEngine().render(None, "hello", seed=1)
        assert doc.is_skipped
        assert doc.glyphs == ()

    def test_whitespace_only(self):
        """Test that whitespace renders an empty page."""
        doc = LayoutEngine().render(DEFAULT_STYLE, "  \n ", seed=1)
        assert doc.status == GenerationStatus.RENDERED
        assert len(doc) == 0


class TestReproducibility:
    """Tests for seeded generation."""

    def test_same_seed_same_document(self):
        """Test that a seed reproduces the document exactly."""
        a = generate(ENHANCED_DEFAULT_STYLE, "Hello, world", seed=42)
        b = generate(ENHANCED_DEFAULT_STYLE, "Hello, world", seed=42)
        assert a == b
        assert list(a.draw_commands()) == list(b.draw_commands())

    def test_different_seeds_differ(self):
        """Test that different seeds vary the output."""
        a = generate(ENHANCED_DEFAULT_STYLE, "Hello", seed=1)
        b = generate(ENHANCED_DEFAULT_STYLE, "Hello", seed=2)
        assert a != b

    def test_seed_recorded(self):
        """Test that the document records the seed that reproduces it."""
        assert generate(DEFAULT_STYLE, "hi", seed=9).seed == 9

    def test_configured_seed(self):
        """Test that the configured seed is used when none is passed."""
        engine = LayoutEngine(SynthesisConfig(seed=3))
        a = engine.render(DEFAULT_STYLE, "abc")
        b = engine.render(DEFAULT_STYLE, "abc")
        assert a.seed == 3
        assert a == b

    def test_time_seed(self):
        """Test that an unseeded call still records its seed."""
        doc = generate(DEFAULT_STYLE, "abc")
        assert isinstance(doc.seed, int)
        assert generate(DEFAULT_STYLE, "abc", seed=doc.seed) == doc

    def test_repeated_characters_vary(self):
        """Test that the same character is not rendered identically twice."""
        doc = generate(ENHANCED_DEFAULT_STYLE, "aa", seed=4)
        first, second = doc.glyphs
        assert first.rotation != second.rotation or first.scale != second.scale


class TestPlacement:
    """Tests for glyph positions."""

    def test_advance(self):
        """Test that glyphs advance by the character width."""
        doc = _engine(margin_left=0.0).render(STEADY_STYLE, "ab", seed=0)
        assert [g.origin_x for g in doc.glyphs] == [0.0, 20.0]

    def test_space_between_words(self):
        """Test that words are separated by a varied space."""
        doc = _engine(margin_left=0.0).render(STEADY_STYLE, "a b", seed=0)
        assert 28.0 <= doc.glyphs[1].origin_x <= 32.0

    def test_margins(self):
        """Test that the first glyph starts at the top-left margin."""
        doc = _engine().render(STEADY_STYLE, "a", seed=0)
        glyph = doc.glyphs[0]
        assert glyph.origin_x == 80.0
        assert glyph.origin_y == 80.0

    def test_glyph_properties(self):
        """Test that each glyph carries the style color and a varied width."""
        doc = generate(DEFAULT_STYLE, "abc", seed=0)
        for glyph in doc.glyphs:
            assert glyph.color == DEFAULT_STYLE.ink_color
            assert 1.6 <= glyph.stroke_width <= 2.4
            assert 0.9 <= glyph.scale <= 1.1
            assert glyph.strokes

    def test_strokes_near_origin(self):
        """Test that resolved strokes sit inside the glyph's line box."""
        doc = _engine(margin_left=0.0).render(STEADY_STYLE, "H", seed=0)
        glyph = doc.glyphs[0]
        for stroke in glyph.strokes:
            min_x, min_y, max_x, max_y = stroke.bounding_box()
            assert min_x >= -1.0
            assert max_x <= 20.0 * 1.1
            assert min_y >= glyph.origin_y - 4.0
            assert max_y <= glyph.origin_y + 30.0 * 1.1 + 1.0

    def test_newline_wraps(self):
        """Test that explicit newlines start a new line."""
        doc = _engine().render(STEADY_STYLE, "a\nb", seed=0)
        a, b = doc.glyphs
        assert b.origin_x == 80.0
        assert 80.0 <= b.origin_y - a.origin_y <= 80.0 * 1.15

    def test_line_height_from_style(self):
        """Test that an unset line height uses the style's line spacing."""
        doc = _engine(line_height=None).render(STEADY_STYLE, "a\nb", seed=0)
        a, b = doc.glyphs
        assert 40.0 <= b.origin_y - a.origin_y <= 40.0 * 1.15


class TestWrapping:
    """Tests for wrapping and truncation on small canvases."""

    def test_glyphs_within_bounds(self):
        """Test that no glyph origin leaves the drawing area."""
        canvas = dict(width=200.0, height=2000.0, margin_left=10.0, margin_right=10.0)
        engine = _engine(**canvas)
        doc = engine.render(ENHANCED_DEFAULT_STYLE, "the quick brown fox jumps over it " * 3, seed=5)
        assert doc.status == GenerationStatus.RENDERED
        for glyph in doc.glyphs:
            assert 10.0 <= glyph.origin_x <= 190.0
            assert glyph.origin_y <= engine.canvas.bottom_limit

    def test_multiple_lines(self):
        """Test that text wider than the canvas wraps onto several lines."""
        doc = _engine(width=200.0, margin_left=10.0, margin_right=10.0).render(
            STEADY_STYLE, "one two three four five six", seed=0
        )
        assert len({round(g.origin_y, 6) for g in doc.glyphs}) > 1

    def test_long_word_breaks(self):
        """Test that a word longer than the line is broken per character."""
        engine = _engine(width=120.0, margin_left=10.0, margin_right=10.0)
        doc = engine.render(STEADY_STYLE, "mmmmmmmmmm", seed=0)
        assert len(doc) == 10
        assert len({round(g.origin_y, 6) for g in doc.glyphs}) >= 3
        for glyph in doc.glyphs:
            assert glyph.origin_x + 28.0 <= 110.0 or glyph.origin_x == 10.0

    def test_truncation(self):
        """Test that text beyond the bottom margin is dropped."""
        engine = _engine(width=200.0, height=300.0)
        doc = engine.render(STEADY_STYLE, "lorem ipsum dolor sit amet " * 20, seed=0)
        assert doc.status == GenerationStatus.TRUNCATED
        assert 0 < len(doc) < len(("lorem ipsum dolor sit amet " * 20).replace(" ", ""))
        for glyph in doc.glyphs:
            assert glyph.origin_y <= engine.canvas.bottom_limit

    def test_no_room_at_all(self):
        """Test a page whose first line is already below the limit."""
        doc = _engine(height=100.0, margin_top=80.0, margin_bottom=19.0).render(
            DEFAULT_STYLE, "a", seed=0
        )
        assert doc.status == GenerationStatus.TRUNCATED
        assert len(doc) == 0


class TestConnectors:
    """Tests for cursive connector strokes."""

    def test_basic_has_no_connectors(self):
        """Test that basic fidelity draws templates only."""
        engine = _engine(Fidelity.BASIC)
        for seed in range(10):
            doc = engine.render(STEADY_STYLE, "x", seed=seed)
            assert len(doc.glyphs[0].strokes) == 2

    def test_enhanced_adds_connectors(self):
        """Test that enhanced fidelity sometimes adds entry and exit strokes."""
        engine = _engine(Fidelity.ENHANCED)
        counts = {len(engine.render(STEADY_STYLE, "x", seed=s).glyphs[0].strokes) for s in range(30)}
        assert max(counts) > 2
        assert counts <= {2, 3, 4}

    def test_connectors_only_lowercase(self):
        """Test that capitals never get connectors."""
        engine = _engine(Fidelity.ENHANCED)
        for seed in range(10):
            doc = engine.render(STEADY_STYLE, "X", seed=seed)
            assert len(doc.glyphs[0].strokes) == 2

    def test_connectors_disabled(self):
        """Test switching connectors off."""
        config = SynthesisConfig(variation=VariationConfig(connector_strokes=False))
        engine = LayoutEngine(config)
        for seed in range(10):
            assert len(engine.render(STEADY_STYLE, "x", seed=seed).glyphs[0].strokes) == 2


class TestCustomCatalog:
    """Tests for rendering with a caller-supplied catalog."""

    def test_fallback_template(self):
        """Test that characters missing from the catalog still render."""
        catalog = GlyphCatalog.from_specs({"x": ("M 0 0 L 1 1", 0.5, 1.0)})
        doc = generate(STEADY_STYLE, "xy", seed=0, catalog=catalog)
        assert [g.character for g in doc.glyphs] == ["x", "y"]
        assert all(g.strokes for g in doc.glyphs)
