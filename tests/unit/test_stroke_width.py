"""Unit tests for stroke width estimation."""

import math

import numpy as np
import pytest

from handscribe.config import Fidelity
from handscribe.core.stroke_width import (
    FALLBACK_STROKE_WIDTH,
    StrokeWidthEstimator,
    chamfer_distance,
)
from handscribe.domain import BinaryMask


class TestChamferDistance:
    """Tests for the two-pass distance transform."""

    def test_background_is_zero(self):
        """Test that paper pixels have distance zero."""
        data = np.zeros((5, 5), dtype=bool)
        data[2, 2] = True
        dist = chamfer_distance(data)
        assert dist[0, 0] == 0.0
        assert dist[2, 2] == 1.0

    def test_block_center(self):
        """Test axis and diagonal steps inside a 3x3 block."""
        data = np.zeros((5, 5), dtype=bool)
        data[1:4, 1:4] = True
        dist = chamfer_distance(data)
        assert dist[1, 1] == 1.0
        assert dist[2, 2] == 2.0

    def test_diagonal_step(self):
        """Test that a diagonal step costs sqrt(2)."""
        data = np.ones((3, 3), dtype=bool)
        data[0, 0] = False
        dist = chamfer_distance(data)
        assert dist[1, 1] == pytest.approx(math.sqrt(2.0))
        assert dist[2, 2] == pytest.approx(2 * math.sqrt(2.0))

    def test_all_ink_is_infinite(self):
        """Test that ink with no background anywhere stays unreachable."""
        dist = chamfer_distance(np.ones((3, 4), dtype=bool))
        assert np.isinf(dist).all()


class TestStrokeWidthEstimator:
    """Tests for StrokeWidthEstimator class."""

    def test_empty_mask_fallback(self):
        """Test the fallback width for a mask without ink."""
        mask = BinaryMask(np.zeros((20, 20), dtype=bool))
        assert StrokeWidthEstimator().estimate(mask) == FALLBACK_STROKE_WIDTH
        assert StrokeWidthEstimator(Fidelity.BASIC).estimate(mask) == FALLBACK_STROKE_WIDTH

    @pytest.mark.parametrize("thickness", [4, 6, 8])
    def test_horizontal_band(self, thickness):
        """Test that a full-width band measures its own thickness."""
        data = np.zeros((40, 40), dtype=bool)
        data[10 : 10 + thickness, :] = True
        assert StrokeWidthEstimator().estimate(BinaryMask(data)) == float(thickness)

    def test_vertical_bars(self):
        """Test that vertical strokes measure their width."""
        data = np.zeros((40, 40), dtype=bool)
        data[:, 5:11] = True
        data[:, 25:31] = True
        assert StrokeWidthEstimator().estimate(BinaryMask(data)) == 6.0

    def test_all_ink_is_positive(self):
        """Test that a mask with no paper still yields a positive width."""
        mask = BinaryMask(np.ones((5, 5), dtype=bool))
        assert StrokeWidthEstimator().estimate(mask) > 0

    def test_basic_run_length(self):
        """Test the halved median run length at basic fidelity."""
        data = np.zeros((40, 40), dtype=bool)
        data[:, 5:11] = True
        data[:, 25:31] = True
        width = StrokeWidthEstimator(Fidelity.BASIC).estimate(BinaryMask(data))
        assert width == 3.0

    def test_basic_without_closed_runs(self):
        """Test the basic fallback when every run touches the right edge."""
        data = np.zeros((40, 40), dtype=bool)
        data[:, 30:] = True
        width = StrokeWidthEstimator(Fidelity.BASIC).estimate(BinaryMask(data))
        assert width == FALLBACK_STROKE_WIDTH
