"""Stroke width estimation.

The enhanced estimator runs a two-pass 8-neighbour chamfer distance transform
over the ink and takes the mode of the doubled distances, i.e. the most
common local stroke diameter. The basic estimator measures horizontal ink runs
on sampled rows and halves their median.
"""

import math

import numpy as np
import structlog

from handscribe.config import Fidelity
from handscribe.domain import BinaryMask

logger = structlog.get_logger(__name__)

FALLBACK_STROKE_WIDTH = 2.0

_DIAGONAL = math.sqrt(2.0)
# Rows sampled by the basic estimator
_BASIC_ROW_STEP = 10


def _propagate_row(candidates: np.ndarray) -> np.ndarray:
    """Left-to-right pass d[x] = min(c[x], d[x-1] + 1) in closed form."""
    idx = np.arange(candidates.shape[0], dtype=np.float64)
    return np.minimum.accumulate(candidates - idx) + idx


def _from_previous_row(current: np.ndarray, previous: np.ndarray) -> np.ndarray:
    """Relax a row against its already-final neighbour row (up or down)."""
    result = np.minimum(current, previous + 1.0)
    result[1:] = np.minimum(result[1:], previous[:-1] + _DIAGONAL)
    result[:-1] = np.minimum(result[:-1], previous[1:] + _DIAGONAL)
    return result


def chamfer_distance(data: np.ndarray) -> np.ndarray:
    """Chamfer distance from every ink pixel to the nearest background pixel.

    Forward pass (top-down, left-to-right) uses the left, upper-left, upper
    and upper-right neighbours; the backward pass mirrors it. Axis steps cost
    1 and diagonal steps sqrt(2). Neighbours outside the grid are ignored.

    Args:
        data: 2-D bool array, True marks ink

    Returns:
        float array; 0 on background, inf for ink with no background anywhere
    """
    dist = np.where(data, np.inf, 0.0)
    h = dist.shape[0]

    for y in range(h):
        row = dist[y]
        if y > 0:
            row = _from_previous_row(row, dist[y - 1])
        dist[y] = _propagate_row(row)

    for y in range(h - 1, -1, -1):
        row = dist[y]
        if y < h - 1:
            row = _from_previous_row(row, dist[y + 1])
        dist[y] = _propagate_row(row[::-1])[::-1]

    return dist


class StrokeWidthEstimator:
    """Estimates the pen stroke width of an ink mask."""

    def __init__(self, fidelity: Fidelity = Fidelity.ENHANCED) -> None:
        self.fidelity = fidelity

    def estimate(self, mask: BinaryMask) -> float:
        """Estimate the stroke width.

        Args:
            mask: Ink mask

        Returns:
            Stroke width in pixels (> 0); 2.0 when the mask has no ink
        """
        if not mask.has_foreground():
            logger.debug("Stroke width fallback", estimator="stroke_width", reason="no ink")
            return FALLBACK_STROKE_WIDTH

        if self.fidelity == Fidelity.BASIC:
            return self._estimate_runs(mask)
        return self._estimate_distance(mask)

    def _estimate_distance(self, mask: BinaryMask) -> float:
        data = mask.data
        if data.all():
            # No background to measure against: treat the outside as paper
            data = np.pad(data, 1, constant_values=False)

        dist = chamfer_distance(data)
        buckets = np.rint(2.0 * dist[data]).astype(np.int64)
        histogram = np.bincount(buckets)
        # Ties resolve to the widest bucket
        mode = len(histogram) - 1 - int(np.argmax(histogram[::-1]))
        return float(mode) if mode > 0 else FALLBACK_STROKE_WIDTH

    def _estimate_runs(self, mask: BinaryMask) -> float:
        data = mask.data
        runs: list[int] = []
        for y in range(mask.height // 4, 3 * mask.height // 4, _BASIC_ROW_STEP):
            start = -1
            for x, ink in enumerate(data[y]):
                if ink and start == -1:
                    start = x
                elif not ink and start != -1:
                    runs.append(x - start)
                    start = -1

        if not runs:
            logger.debug("Stroke width fallback", estimator="stroke_width", reason="no closed runs")
            return FALLBACK_STROKE_WIDTH
        runs.sort()
        return float(runs[len(runs) // 2]) * 0.5
