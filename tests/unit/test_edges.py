"""Unit tests for gradient edge detection."""

import numpy as np

from handscribe.config import EdgeConfig
from handscribe.core.edges import EdgeDetector
from handscribe.domain import BinaryMask


def _square_mask() -> BinaryMask:
    data = np.zeros((20, 20), dtype=bool)
    data[5:15, 5:15] = True
    return BinaryMask(data)


class TestEdgeDetector:
    """Tests for EdgeDetector class."""

    def test_shape(self):
        """Test that the edge map has the mask dimensions."""
        edges = EdgeDetector().detect(_square_mask())
        assert edges.shape == (20, 20)
        assert edges.dtype == bool

    def test_boundary_pixels_are_edges(self):
        """Test that both sides of an ink boundary are marked."""
        edges = EdgeDetector().detect(_square_mask())
        assert edges[10, 5]
        assert edges[10, 4]
        assert edges[5, 10]

    def test_flat_regions_are_not_edges(self):
        """Test that uniform ink and paper have no gradient."""
        edges = EdgeDetector().detect(_square_mask())
        assert not edges[10, 10]
        assert not edges[1, 1]

    def test_border_never_edge(self):
        """Test that the one-pixel border is not evaluated."""
        data = np.zeros((10, 10), dtype=bool)
        data[:, :5] = True
        edges = EdgeDetector().detect(BinaryMask(data))
        assert not edges[0].any()
        assert not edges[-1].any()
        assert not edges[:, 0].any()
        assert not edges[:, -1].any()
        assert edges[1:-1, 4].all()

    def test_tiny_mask(self):
        """Test that masks without an interior produce no edges."""
        data = np.ones((2, 5), dtype=bool)
        edges = EdgeDetector().detect(BinaryMask(data))
        assert edges.shape == (2, 5)
        assert not edges.any()

    def test_threshold(self):
        """Test that raising the threshold drops weak corner responses."""
        mask = _square_mask()
        loose = EdgeDetector(EdgeConfig(magnitude_threshold=0.5)).detect(mask)
        strict = EdgeDetector(EdgeConfig(magnitude_threshold=5.0)).detect(mask)
        assert strict.sum() < loose.sum()
