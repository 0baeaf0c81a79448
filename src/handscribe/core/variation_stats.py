"""Variation statistics measured on a handwriting sample.

The four statistics describe how irregular the writing is:
- baseline_variation: dispersion of the line spacing
- jitter: share of isolated edge pixels (hand shake)
- pressure: typical row ink density relative to the densest row
- width_variation: relative dispersion of glyph widths

Robust statistics (median) are used at enhanced fidelity, plain means at
basic fidelity. Every statistic has a fallback for samples without signal.
"""

from collections.abc import Callable
from dataclasses import dataclass, field

import numpy as np
import structlog

from handscribe.config import Fidelity, VariationStatsConfig
from handscribe.domain import BinaryMask, CharacterBoundingBox
from handscribe.domain.style import MAX_WIDTH_VARIATION

logger = structlog.get_logger(__name__)

FALLBACK_BASELINE_VARIATION = 2.0
FALLBACK_JITTER = 0.5
FALLBACK_PRESSURE = 0.8
FALLBACK_WIDTH_VARIATION = 0.1


@dataclass(frozen=True)
class VariationStats:
    """Measured variation statistics.

    Attributes:
        baseline_variation: Line spacing dispersion in pixels
        jitter: Isolated edge fraction times jitter_factor
        pressure: Median to max row density ratio in [0, 1]
        width_variation: Relative width dispersion in [0, 0.3]
        fallbacks: Names of the statistics that used their fallback value
    """

    baseline_variation: float
    jitter: float
    pressure: float
    width_variation: float
    fallbacks: tuple[str, ...] = field(default_factory=tuple)


class VariationAnalyzer:
    """Measures writing irregularity from the intermediate analysis results."""

    def __init__(
        self,
        config: VariationStatsConfig | None = None,
        fidelity: Fidelity = Fidelity.ENHANCED,
    ) -> None:
        self.config = config or VariationStatsConfig()
        self.fidelity = fidelity

    @property
    def center(self) -> Callable[[np.ndarray], float]:
        """Central tendency for the current fidelity."""
        if self.fidelity == Fidelity.BASIC:
            return lambda values: float(np.mean(values))
        return lambda values: float(np.median(values))

    def analyze(
        self,
        mask: BinaryMask,
        edges: np.ndarray,
        boxes: list[CharacterBoundingBox],
        lines: list[int],
    ) -> VariationStats:
        """Compute all variation statistics.

        Args:
            mask: Ink mask
            edges: Edge map of the mask
            boxes: Segmented character boxes
            lines: Detected line positions

        Returns:
            VariationStats with fallbacks recorded
        """
        fallbacks: list[str] = []

        baseline = self.baseline_variation(lines)
        if baseline is None:
            fallbacks.append("baseline_variation")
            baseline = FALLBACK_BASELINE_VARIATION

        jitter = self.jitter(edges)
        if jitter is None:
            fallbacks.append("jitter")
            jitter = FALLBACK_JITTER

        pressure = self.pressure(mask)
        if pressure is None:
            fallbacks.append("pressure")
            pressure = FALLBACK_PRESSURE

        width_variation = self.width_variation(boxes)
        if width_variation is None:
            fallbacks.append("width_variation")
            width_variation = FALLBACK_WIDTH_VARIATION

        for name in fallbacks:
            logger.debug("Variation fallback", estimator=name, reason="insufficient samples")

        return VariationStats(
            baseline_variation=baseline,
            jitter=jitter,
            pressure=pressure,
            width_variation=width_variation,
            fallbacks=tuple(fallbacks),
        )

    def baseline_variation(self, lines: list[int]) -> float | None:
        """Deviation of the line spacings from their own central value.

        The enhanced variant is the median absolute deviation; the basic
        variant is the mean absolute deviation from the mean.
        """
        if len(lines) < 2:
            return None
        spacings = np.diff(np.asarray(lines, dtype=np.float64))
        center = self.center(spacings)
        return self.center(np.abs(spacings - center))

    def jitter(self, edges: np.ndarray) -> float | None:
        """Isolated edge fraction (fewer than 2 of 8 neighbours are edges)."""
        total = int(np.count_nonzero(edges))
        if total == 0:
            return None

        padded = np.pad(edges, 1, constant_values=False).astype(np.int16)
        h, w = edges.shape
        neighbours = np.zeros((h, w), dtype=np.int16)
        for dy in range(3):
            for dx in range(3):
                if dy == 1 and dx == 1:
                    continue
                neighbours += padded[dy : dy + h, dx : dx + w]

        isolated = int(np.count_nonzero(edges & (neighbours < 2)))
        return isolated / total * self.config.jitter_factor

    def pressure(self, mask: BinaryMask) -> float | None:
        """Typical sampled row density relative to the densest sampled row."""
        step = max(1, mask.height // self.config.pressure_samples)
        rows = mask.data[::step][: self.config.pressure_samples]
        densities = rows.sum(axis=1) / mask.width
        densities = densities[densities > 0]
        if len(densities) == 0:
            return None
        return min(1.0, self.center(densities) / float(densities.max()))

    def width_variation(self, boxes: list[CharacterBoundingBox]) -> float | None:
        """Relative deviation of glyph widths from their central width, capped."""
        if len(boxes) < 3:
            return None
        widths = np.array([b.width for b in boxes], dtype=np.float64)
        center = self.center(widths)
        relative = self.center(np.abs(widths - center)) / center
        return min(MAX_WIDTH_VARIATION, relative)
