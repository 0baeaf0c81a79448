"""Gradient edge detection on binary masks."""

import numpy as np

from handscribe.config import EdgeConfig
from handscribe.domain import BinaryMask

# Sobel kernels, indexed [dy + 1][dx + 1]
SOBEL_X = np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]], dtype=np.float64)
SOBEL_Y = np.array([[-1, -2, -1], [0, 0, 0], [1, 2, 1]], dtype=np.float64)


class EdgeDetector:
    """Marks ink boundaries using the Sobel gradient magnitude.

    The mask is treated as a {0, 1} image. Only interior pixels are
    evaluated; the one-pixel border of the result is never an edge.
    """

    def __init__(self, config: EdgeConfig | None = None) -> None:
        self.config = config or EdgeConfig()

    def gradients(self, mask: BinaryMask) -> tuple[np.ndarray, np.ndarray]:
        """Compute horizontal and vertical gradients over the mask interior.

        Returns:
            (gx, gy) arrays of shape (height - 2, width - 2)
        """
        values = mask.data.astype(np.float64)
        h, w = values.shape
        gx = np.zeros((h - 2, w - 2))
        gy = np.zeros((h - 2, w - 2))
        for dy in range(3):
            for dx in range(3):
                window = values[dy : dy + h - 2, dx : dx + w - 2]
                gx += SOBEL_X[dy, dx] * window
                gy += SOBEL_Y[dy, dx] * window
        return gx, gy

    def detect(self, mask: BinaryMask) -> np.ndarray:
        """Compute the edge map.

        Args:
            mask: Ink mask

        Returns:
            bool array with the mask's shape; True marks an edge pixel
        """
        edges = np.zeros(mask.data.shape, dtype=bool)
        if mask.height < 3 or mask.width < 3:
            return edges

        gx, gy = self.gradients(mask)
        edges[1:-1, 1:-1] = np.hypot(gx, gy) > self.config.magnitude_threshold
        return edges
