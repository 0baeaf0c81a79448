"""Unit tests for style extraction.

Tests cover:
- Fallback descriptor for blank samples
- Character metrics (glyph size, spacing, recognized-text width blend)
- Segmentation-driven measurements on synthetic samples
- Edge cases (noise, tiny images, basic fidelity)
"""

import numpy as np
import pytest

from handscribe.config import AnalysisConfig, Fidelity
from handscribe.core.analyzer import StyleAnalyzer, analyze
from handscribe.domain import (
    DEFAULT_STYLE,
    BinaryMask,
    CharacterBoundingBox,
    Color,
    RasterImage,
    StyleDescriptor,
)


def _blank(height: int = 100, width: int = 100) -> RasterImage:
    return RasterImage(np.full((height, width, 3), 255, dtype=np.uint8))


def _written_sample() -> RasterImage:
    """Three lines of 12x20 blue-ink blobs, 100 px apart, odd lines indented."""
    pixels = np.full((300, 300, 3), 255, dtype=np.uint8)
    for line, top in enumerate((40, 140, 240)):
        for k in range(8):
            left = 20 + 15 * (line % 2) + 30 * k
            pixels[top : top + 20, left : left + 12] = (30, 30, 120)
    return RasterImage(pixels)


def _boxes(*xs: int, width: int = 20, height: int = 30) -> list[CharacterBoundingBox]:
    return [CharacterBoundingBox(x=x, y=0, width=width, height=height) for x in xs]


class TestBlankSample:
    """Tests for samples without ink."""

    def test_blank_gives_default_style(self):
        """Every estimator falls back, reproducing the basic default style."""
        assert analyze(_blank()) == DEFAULT_STYLE

    def test_fallbacks_reported(self):
        """The report lists every estimator that fell back."""
        report = StyleAnalyzer().analyze_detailed(_blank())
        assert report.degenerate
        assert "stroke_width" in report.fallbacks
        assert "character_width" in report.fallbacks
        assert "line_spacing" in report.fallbacks
        assert "jitter" in report.fallbacks
        assert "ink_color" in report.fallbacks
        assert "slant" in report.fallbacks
        assert report.lines == []
        assert report.boxes == []
        assert report.edge_count == 0

    def test_blank_page_color_and_slant(self):
        """A blank page reports its black ink and upright slant as fallbacks."""
        report = StyleAnalyzer().analyze_detailed(_blank(200, 200))
        assert report.descriptor.ink_color == Color(0, 0, 0)
        assert report.descriptor.slant == 0.0
        assert {"ink_color", "slant"} <= set(report.fallbacks)

    def test_measured_color_and_slant_not_reported(self):
        """Estimators that found a signal are not listed as fallbacks."""
        report = StyleAnalyzer().analyze_detailed(_written_sample())
        assert "ink_color" not in report.fallbacks
        assert "slant" not in report.fallbacks

    def test_single_pixel_image(self):
        """A 1x1 image is valid input."""
        style = analyze(_blank(1, 1))
        assert isinstance(style, StyleDescriptor)


class TestWrittenSample:
    """Tests on a synthetic three-line sample."""

    def test_ink_color(self):
        """The ink color is the blob color."""
        style = analyze(_written_sample())
        assert style.ink_color.distance(Color(30, 30, 120)) <= 5

    def test_line_spacing(self):
        """Line spacing is the distance between the blob rows."""
        report = StyleAnalyzer().analyze_detailed(_written_sample())
        assert len(report.lines) == 3
        assert report.descriptor.line_spacing == pytest.approx(100.0, abs=5.0)
        assert report.descriptor.baseline_variation == pytest.approx(0.0, abs=1.0)

    def test_boxes_found(self):
        """Glyph boxes are segmented on every line."""
        report = StyleAnalyzer().analyze_detailed(_written_sample())
        assert {box.line for box in report.boxes} == {0, 1, 2}
        assert all(box.width == 12 for box in report.boxes)

    def test_upright_blobs(self):
        """Upright blobs have little slant."""
        style = analyze(_written_sample())
        assert abs(style.slant) < 0.1

    def test_basic_fidelity(self):
        """The basic variants also produce a valid descriptor."""
        config = AnalysisConfig(fidelity=Fidelity.BASIC)
        style = analyze(_written_sample(), config=config)
        assert style.ink_color == Color(30, 30, 120)
        assert style.line_spacing == pytest.approx(100.0, abs=5.0)

    def test_noise_never_fails(self):
        """Random noise is analyzed without error."""
        rng = np.random.default_rng(7)
        pixels = rng.integers(0, 256, size=(80, 120, 3), dtype=np.uint8)
        style = analyze(RasterImage(pixels))
        assert style.stroke_width > 0
        assert 0.0 <= style.pressure <= 1.0
        assert 0.0 <= style.width_variation <= 0.3


class TestCharacterMetrics:
    """Tests for StyleAnalyzer.character_metrics."""

    @pytest.fixture
    def mask(self) -> BinaryMask:
        """Mask whose ink spans columns 10 to 210."""
        data = np.zeros((50, 300), dtype=bool)
        data[:, 10] = True
        data[:, 210] = True
        return BinaryMask(data)

    def test_central_box_size(self, mask):
        """Height and width are the median box dimensions."""
        boxes = _boxes(0, 30, 60) + [CharacterBoundingBox(x=90, y=0, width=40, height=90)]
        metrics = StyleAnalyzer().character_metrics(mask, boxes, [])
        assert metrics.character_height == 30.0
        assert metrics.character_width == 20.0

    def test_space_width(self, mask):
        """Space width is the median gap between neighbouring boxes."""
        metrics = StyleAnalyzer().character_metrics(mask, _boxes(0, 25, 55, 95), [])
        # gaps 5, 10, 20
        assert metrics.space_width == 10.0

    def test_gaps_across_lines_ignored(self, mask):
        """Gaps are only measured within a line."""
        boxes = [
            CharacterBoundingBox(x=0, y=0, width=20, height=30, line=0),
            CharacterBoundingBox(x=30, y=0, width=20, height=30, line=0),
            CharacterBoundingBox(x=52, y=100, width=20, height=30, line=1),
        ]
        metrics = StyleAnalyzer().character_metrics(mask, boxes, [])
        assert metrics.space_width == 10.0

    def test_space_fallback(self, mask):
        """Glyphs too far apart give the fixed gap fallback."""
        metrics = StyleAnalyzer().character_metrics(mask, _boxes(0, 200), [])
        assert metrics.space_width == 20.0
        assert "space_width" in metrics.fallbacks

    def test_single_glyph_line(self):
        """A line holding one glyph has no gap to measure."""
        mask = BinaryMask(np.zeros((40, 60), dtype=bool))
        boxes = [CharacterBoundingBox(x=10, y=5, width=14, height=25)]
        metrics = StyleAnalyzer().character_metrics(mask, boxes, [20])
        assert metrics.space_width == 20.0
        assert metrics.character_width == 14.0
        assert "space_width" in metrics.fallbacks

    def test_space_fallback_basic(self, mask):
        """At basic fidelity a missing gap is half the character width."""
        analyzer = StyleAnalyzer(AnalysisConfig(fidelity=Fidelity.BASIC))
        metrics = analyzer.character_metrics(mask, _boxes(0, 200, width=30), [])
        assert metrics.space_width == 15.0

    def test_line_spacing(self, mask):
        """Line spacing is the median line distance."""
        metrics = StyleAnalyzer().character_metrics(mask, [], [10, 50, 100, 140])
        assert metrics.line_spacing == 40.0

    def test_fallbacks(self, mask):
        """Missing segmentation uses the documented fallbacks."""
        metrics = StyleAnalyzer().character_metrics(mask, [], [])
        assert metrics.character_height == 30.0
        assert metrics.character_width == 20.0
        assert metrics.line_spacing == 40.0
        assert metrics.space_width == 10.0

    def test_recognized_text_blend(self, mask):
        """Recognized text blends ink extent per character into the width."""
        boxes = _boxes(0, 30, 60)
        metrics = StyleAnalyzer().character_metrics(mask, boxes, [], "abcde")
        # measured 20, extent 200 / 5 = 40, weight 0.5
        assert metrics.character_width == pytest.approx(30.0)

    def test_blend_weight(self, mask):
        """A zero weight keeps the measured width."""
        analyzer = StyleAnalyzer(AnalysisConfig(ocr_width_weight=0.0))
        metrics = analyzer.character_metrics(mask, _boxes(0, 30, 60), [], "abcde")
        assert metrics.character_width == 20.0

    def test_blank_text_ignored(self, mask):
        """Whitespace-only text does not change the width."""
        metrics = StyleAnalyzer().character_metrics(mask, _boxes(0, 30, 60), [], "   ")
        assert metrics.character_width == 20.0

    def test_recognized_text_through_analyze(self):
        """The text argument flows through analyze()."""
        sample = _written_sample()
        plain = analyze(sample)
        refined = analyze(sample, "abcdefgh")
        assert refined.character_width != plain.character_width


class TestBasicMetrics:
    """Tests for mean-based metrics at basic fidelity."""

    def test_mean_width(self):
        """Basic fidelity averages box widths."""
        analyzer = StyleAnalyzer(AnalysisConfig(fidelity=Fidelity.BASIC))
        mask = BinaryMask(np.zeros((10, 10), dtype=bool))
        boxes = [
            CharacterBoundingBox(x=0, y=0, width=10, height=30),
            CharacterBoundingBox(x=20, y=0, width=20, height=30),
            CharacterBoundingBox(x=50, y=0, width=60, height=30),
        ]
        assert analyzer.character_metrics(mask, boxes, []).character_width == 30.0
