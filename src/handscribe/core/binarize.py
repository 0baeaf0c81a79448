"""Ink/background classification.

Two variants selected by fidelity:
- Enhanced: adaptive thresholding against the local mean luminance
- Basic: a single global luminance threshold
"""

import numpy as np

from handscribe.config import BinarizationConfig, Fidelity
from handscribe.domain import BinaryMask, RasterImage


def box_mean(values: np.ndarray, block_size: int) -> np.ndarray:
    """Mean over a square window centred on each cell, clamped at the edges.

    Uses a summed-area table so the cost does not depend on the window size.
    Windows that cross the border shrink to the in-bounds part and are
    normalized by the number of cells they actually cover.

    Args:
        values: 2-D float array
        block_size: Window side (odd)

    Returns:
        Array of local means with the same shape as values
    """
    h, w = values.shape
    radius = block_size // 2

    integral = np.zeros((h + 1, w + 1), dtype=np.float64)
    integral[1:, 1:] = values.cumsum(axis=0).cumsum(axis=1)

    rows = np.arange(h)
    cols = np.arange(w)
    y0 = np.clip(rows - radius, 0, h)[:, None]
    y1 = np.clip(rows + radius + 1, 0, h)[:, None]
    x0 = np.clip(cols - radius, 0, w)[None, :]
    x1 = np.clip(cols + radius + 1, 0, w)[None, :]

    sums = integral[y1, x1] - integral[y0, x1] - integral[y1, x0] + integral[y0, x0]
    counts = (y1 - y0) * (x1 - x0)
    return sums / counts


class Binarizer:
    """Classifies every pixel of an image as ink or background."""

    def __init__(
        self,
        config: BinarizationConfig | None = None,
        fidelity: Fidelity = Fidelity.ENHANCED,
    ) -> None:
        self.config = config or BinarizationConfig()
        self.fidelity = fidelity

    def binarize(self, image: RasterImage) -> BinaryMask:
        """Produce the ink mask of an image.

        A pixel is ink when its luminance is below the local mean of its
        block_size window minus the configured constant. At basic fidelity the
        threshold is the fixed global_threshold instead.

        Args:
            image: Input image

        Returns:
            Mask with the same dimensions as the image
        """
        luminance = image.luminance()

        if self.fidelity == Fidelity.BASIC:
            return BinaryMask(luminance < self.config.global_threshold)

        threshold = box_mean(luminance, self.config.block_size) - self.config.constant
        return BinaryMask(luminance < threshold)


def binarize(
    image: RasterImage,
    config: BinarizationConfig | None = None,
    fidelity: Fidelity = Fidelity.ENHANCED,
) -> BinaryMask:
    """Convenience wrapper around Binarizer.binarize."""
    return Binarizer(config, fidelity).binarize(image)
