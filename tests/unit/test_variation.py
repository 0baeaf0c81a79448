"""Unit tests for the per-glyph variation model."""

import math
import random

import pytest

from handscribe.config import Fidelity, VariationConfig
from handscribe.core.variation import VariationModel
from handscribe.domain import DEFAULT_STYLE, Point, PointType, Stroke


def _model(seed: int = 1, fidelity: Fidelity = Fidelity.ENHANCED, **style_changes) -> VariationModel:
    style = DEFAULT_STYLE.with_changes(**style_changes)
    return VariationModel(style, random.Random(seed), fidelity)


class TestGlyphTransform:
    """Tests for VariationModel.glyph_transform."""

    def test_ranges(self):
        """Test that every drawn transform stays within its band."""
        model = _model(slant=0.2, baseline_variation=4.0, stroke_width=3.0)
        for _ in range(200):
            t = model.glyph_transform()
            assert abs(t.rotation) <= 0.4
            assert 0.9 <= t.scale <= 1.1
            assert abs(t.y_offset) <= 3.0
            assert 2.4 <= t.stroke_width <= 3.6

    def test_rotation_limit_by_fidelity(self):
        """Test that enhanced fidelity doubles the rotation range."""
        assert _model(slant=0.1).rotation_limit == pytest.approx(0.2)
        assert _model(slant=0.1, fidelity=Fidelity.BASIC).rotation_limit == pytest.approx(0.1)
        assert _model(slant=-0.1).rotation_limit == pytest.approx(0.2)

    def test_zero_slant_no_rotation(self):
        """Test that an upright style never rotates glyphs."""
        model = _model(slant=0.0)
        assert all(model.glyph_transform().rotation == 0.0 for _ in range(20))

    def test_offset_limit(self):
        """Test the vertical offset band."""
        assert _model(baseline_variation=2.0).offset_limit == pytest.approx(1.5)

    def test_reproducible(self):
        """Test that equal seeds give equal transforms."""
        a = [_model(seed=5).glyph_transform() for _ in range(3)]
        b = [_model(seed=5).glyph_transform() for _ in range(3)]
        assert a == b


class TestWidthFactor:
    """Tests for VariationModel.width_factor."""

    def test_band(self):
        """Test that the factor stays within 1 +/- wv/2."""
        model = _model(width_variation=0.2)
        for _ in range(200):
            assert 0.9 <= model.width_factor() <= 1.1

    def test_no_variation(self):
        """Test that zero width variation gives exactly one."""
        model = _model(width_variation=0.0)
        assert model.width_factor() == 1.0


class TestJitter:
    """Tests for VariationModel.jitter."""

    @pytest.fixture
    def strokes(self) -> tuple[Stroke, ...]:
        """A line and a curve."""
        return (
            Stroke.polyline([(0.0, 0.0), (30.0, 0.0)]),
            Stroke((Point(0, 0), Point(10, 20, PointType.OFF_CURVE_QUAD), Point(20, 0))),
        )

    def test_zero_jitter_is_identity(self, strokes):
        """Test that no jitter leaves strokes untouched."""
        model = _model(jitter=0.0)
        assert model.jitter(strokes) == strokes

    def test_resampled_polylines(self, strokes):
        """Test that jittered strokes are dense polylines."""
        model = _model(jitter=0.5)
        result = model.jitter(strokes)
        assert len(result) == 2
        assert all(p.on_curve for s in result for p in s.points)
        # 30 units at a 1.5 step
        assert len(result[0].points) == 21

    def test_noise_scale(self, strokes):
        """Test that displacement stays small relative to the jitter."""
        model = _model(jitter=0.5)
        (line, _) = model.jitter(strokes)
        assert max(abs(p.y) for p in line.points) < 0.5 * 6

    def test_custom_step(self, strokes):
        """Test that the resampling step is configurable."""
        model = VariationModel(
            DEFAULT_STYLE, random.Random(0), config=VariationConfig(jitter_step=10.0)
        )
        (line, _) = model.jitter(strokes)
        assert len(line.points) == 4

    def test_invalid_range(self):
        """Test that inverted variation bands are rejected."""
        with pytest.raises(ValueError):
            VariationConfig(scale_range=(1.2, 0.8))
        assert math.isclose(VariationConfig().scale_range[0], 0.9)
