"""Unit tests for ink/background classification."""

import numpy as np
import pytest

from handscribe.config import BinarizationConfig, Fidelity
from handscribe.core.binarize import Binarizer, binarize, box_mean
from handscribe.domain import BinaryMask, RasterImage


def _page(height: int = 40, width: int = 40, value: int = 255) -> np.ndarray:
    return np.full((height, width, 3), value, dtype=np.uint8)


class TestBoxMean:
    """Tests for the summed-area local mean."""

    def test_constant_input(self):
        """Test that a constant array is its own local mean."""
        values = np.full((7, 9), 42.0)
        assert np.allclose(box_mean(values, 3), 42.0)

    def test_matches_direct_mean(self):
        """Test against a directly computed clamped window mean."""
        rng = np.random.default_rng(0)
        values = rng.uniform(0, 255, size=(6, 8))
        means = box_mean(values, 5)
        for y in range(6):
            for x in range(8):
                window = values[max(0, y - 2) : y + 3, max(0, x - 2) : x + 3]
                assert means[y, x] == pytest.approx(window.mean())


class TestBinarizer:
    """Tests for Binarizer class."""

    def test_mask_matches_image_size(self):
        """Test that the mask has the image dimensions."""
        mask = Binarizer().binarize(RasterImage(_page(30, 50)))
        assert (mask.height, mask.width) == (30, 50)

    def test_blank_page_has_no_ink(self):
        """Test that a uniform page produces an empty mask."""
        mask = binarize(RasterImage(_page()))
        assert not mask.has_foreground()

    def test_dark_stroke_is_ink(self):
        """Test that a thin dark stroke on paper is detected exactly."""
        pixels = _page()
        pixels[10:30, 18:21] = 0
        mask = binarize(RasterImage(pixels))
        expected = np.zeros((40, 40), dtype=bool)
        expected[10:30, 18:21] = True
        assert mask == BinaryMask(expected)

    def test_idempotent_on_binary_image(self):
        """Test that binarizing a rendered mask returns the same mask."""
        pixels = _page()
        pixels[5:8, 5:35] = 0
        pixels[20:35, 12:14] = 0
        mask = binarize(RasterImage(pixels))
        assert binarize(mask.to_image()) == mask

    def test_basic_global_threshold(self):
        """Test the fixed luminance threshold used at basic fidelity."""
        pixels = _page()
        pixels[:, :20] = 150
        pixels[:, 20:] = 210
        mask = Binarizer(fidelity=Fidelity.BASIC).binarize(RasterImage(pixels))
        assert mask.data[:, :20].all()
        assert not mask.data[:, 20:].any()

    def test_adaptive_handles_uneven_lighting(self):
        """Test that a stroke on a darker background half is still separated."""
        pixels = _page()
        pixels[:, 20:] = 170
        pixels[10:30, 28:30] = 60
        mask = binarize(RasterImage(pixels))
        assert mask.data[10:30, 28:30].all()
        assert not mask.data[:, 32:].any()

    def test_config_validation(self):
        """Test that an even block size is rejected."""
        with pytest.raises(ValueError):
            BinarizationConfig(block_size=16)
