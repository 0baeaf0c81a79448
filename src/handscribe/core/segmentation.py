"""Line and character segmentation of ink masks.

- LineSegmenter: Text line positions from the smoothed horizontal projection
- CharacterSegmenter: Glyph-run bounding boxes within each line band
"""

import numpy as np
import structlog

from handscribe.config import SegmentationConfig
from handscribe.domain import BinaryMask, CharacterBoundingBox

logger = structlog.get_logger(__name__)


def moving_average(values: np.ndarray, window: int) -> np.ndarray:
    """Centred moving average, with the window clamped at both ends.

    Args:
        values: 1-D array
        window: Window length (1 returns the values unchanged)

    Returns:
        float array of local means, same length as values
    """
    values = values.astype(np.float64)
    n = len(values)
    if window <= 1 or n == 0:
        return values

    radius = window // 2
    cumulative = np.concatenate(([0.0], np.cumsum(values)))
    idx = np.arange(n)
    lo = np.clip(idx - radius, 0, n)
    hi = np.clip(idx + radius + 1, 0, n)
    return (cumulative[hi] - cumulative[lo]) / (hi - lo)


def find_peaks(values: np.ndarray, radius: int, threshold: float) -> list[int]:
    """Find strict local maxima, treating flat tops as a single peak.

    A run of equal values is a peak when every value within `radius` outside
    the run is strictly lower and the value exceeds `threshold`. The peak
    position is the middle of the run.

    Args:
        values: 1-D array
        radius: Neighbourhood radius on each side of the run
        threshold: Minimum value for a peak

    Returns:
        Peak indices in ascending order
    """
    n = len(values)
    peaks: list[int] = []
    start = 0
    while start < n:
        end = start
        while end + 1 < n and values[end + 1] == values[start]:
            end += 1

        value = values[start]
        if value > threshold:
            left = values[max(0, start - radius) : start]
            right = values[end + 1 : end + 1 + radius]
            if np.all(left < value) and np.all(right < value):
                peaks.append((start + end) // 2)

        start = end + 1
    return peaks


class LineSegmenter:
    """Finds text line positions from the horizontal ink projection."""

    def __init__(self, config: SegmentationConfig | None = None) -> None:
        self.config = config or SegmentationConfig()

    def projection(self, mask: BinaryMask) -> np.ndarray:
        """Smoothed per-row ink count."""
        counts = mask.data.sum(axis=1)
        return moving_average(counts, self.config.smoothing_window)

    def find_lines(self, mask: BinaryMask) -> list[int]:
        """Detect text lines.

        Args:
            mask: Ink mask

        Returns:
            Row positions of the detected lines, ascending
        """
        threshold = self.config.line_threshold_ratio * mask.width
        lines = find_peaks(self.projection(mask), self.config.peak_radius, threshold)
        logger.debug("Lines detected", count=len(lines))
        return lines


class CharacterSegmenter:
    """Splits each text line band into glyph-run bounding boxes."""

    def __init__(self, config: SegmentationConfig | None = None) -> None:
        self.config = config or SegmentationConfig()

    def bands(self, mask: BinaryMask, lines: list[int]) -> list[tuple[int, int]]:
        """Row ranges [top, bottom) searched for each line.

        A band runs from one line position to the next; the last band is
        default_band_height rows tall, clipped to the mask.
        """
        result = []
        for i, top in enumerate(lines):
            if i + 1 < len(lines):
                bottom = lines[i + 1]
            else:
                bottom = top + self.config.default_band_height
            result.append((max(0, top), min(mask.height, bottom)))
        return result

    def segment(self, mask: BinaryMask, lines: list[int]) -> list[CharacterBoundingBox]:
        """Find glyph-run boxes.

        Args:
            mask: Ink mask
            lines: Line positions from LineSegmenter

        Returns:
            Boxes in reading order (line by line, left to right). Boxes whose
            width or height falls outside [min_dimension, max_dimension] are
            discarded.
        """
        boxes: list[CharacterBoundingBox] = []
        discarded = 0

        for line_index, (top, bottom) in enumerate(self.bands(mask, lines)):
            if bottom <= top:
                continue
            band = mask.data[top:bottom]
            inked = band.any(axis=0)

            for x0, x1 in self._column_runs(inked):
                rows = np.nonzero(band[:, x0:x1].any(axis=1))[0]
                y0 = top + int(rows[0])
                height = int(rows[-1] - rows[0]) + 1
                box = CharacterBoundingBox(
                    x=x0, y=y0, width=x1 - x0, height=height, line=line_index
                )
                if self._within_bounds(box):
                    boxes.append(box)
                else:
                    discarded += 1

        logger.debug("Characters segmented", boxes=len(boxes), discarded=discarded)
        return boxes

    def _within_bounds(self, box: CharacterBoundingBox) -> bool:
        lo = self.config.min_dimension
        hi = self.config.max_dimension
        return lo <= box.width <= hi and lo <= box.height <= hi

    @staticmethod
    def _column_runs(inked: np.ndarray) -> list[tuple[int, int]]:
        """Maximal runs of True as [start, end) pairs."""
        padded = np.concatenate(([False], inked, [False])).astype(np.int8)
        changes = np.diff(padded)
        starts = np.nonzero(changes == 1)[0]
        ends = np.nonzero(changes == -1)[0]
        return [(int(s), int(e)) for s, e in zip(starts, ends, strict=True)]
