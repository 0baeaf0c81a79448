"""Ink color estimation by clustering dark pixels."""

from collections import Counter
from dataclasses import dataclass

import numpy as np
import structlog

from handscribe.config import ColorConfig, Fidelity
from handscribe.domain import BLACK, Color, RasterImage

logger = structlog.get_logger(__name__)


@dataclass
class _Cluster:
    """Running-mean color cluster."""

    mean: np.ndarray
    count: int = 1

    def add(self, pixel: np.ndarray) -> None:
        self.count += 1
        self.mean += (pixel - self.mean) / self.count


class ColorClusterer:
    """Estimates the dominant ink color of a handwriting sample.

    Pixels are sampled at a fixed stride, dark pixels are grouped into
    running-mean clusters by Euclidean RGB distance, and the centroid of the
    most populated cluster is returned. At basic fidelity the most frequent
    exact dark color is returned instead.
    """

    def __init__(
        self,
        config: ColorConfig | None = None,
        fidelity: Fidelity = Fidelity.ENHANCED,
    ) -> None:
        self.config = config or ColorConfig()
        self.fidelity = fidelity

    def sample_dark_pixels(self, image: RasterImage) -> np.ndarray:
        """Sample up to sample_size pixels at a fixed stride, keeping dark ones.

        Args:
            image: Input image

        Returns:
            (n, 3) float array of candidate ink pixels in sampling order
        """
        flat = image.pixels.reshape(-1, 3)
        total = flat.shape[0]
        count = min(total, self.config.sample_size)
        step = total / count
        indices = (np.arange(count) * step).astype(np.int64)
        sampled = flat[indices]

        threshold = (
            self.config.basic_dark_threshold
            if self.fidelity == Fidelity.BASIC
            else self.config.dark_threshold
        )
        dark = np.all(sampled < threshold, axis=1)
        return sampled[dark].astype(np.float64)

    def estimate(self, image: RasterImage) -> Color:
        """Estimate the ink color.

        Args:
            image: Input image

        Returns:
            Dominant ink color, or black when no dark pixel was sampled
        """
        color = self.measure(image)
        if color is None:
            logger.debug("Color fallback", estimator="color", reason="no dark pixels")
            return BLACK
        return color

    def measure(self, image: RasterImage) -> Color | None:
        """Dominant ink color, or None when no dark pixel was sampled."""
        candidates = self.sample_dark_pixels(image)
        if len(candidates) == 0:
            return None

        if self.fidelity == Fidelity.BASIC:
            counts = Counter(tuple(int(c) for c in pixel) for pixel in candidates)
            (r, g, b), _ = counts.most_common(1)[0]
            return Color(r, g, b)

        clusters = self._cluster(candidates)
        best = max(clusters, key=lambda c: c.count)
        r, g, b = (int(round(v)) for v in best.mean)
        logger.debug(
            "Ink color clustered",
            clusters=len(clusters),
            samples=len(candidates),
            color=Color(r, g, b).to_hex(),
        )
        return Color(r, g, b)

    def _cluster(self, candidates: np.ndarray) -> list[_Cluster]:
        clusters: list[_Cluster] = []
        for pixel in candidates:
            if clusters:
                distances = [float(np.linalg.norm(pixel - c.mean)) for c in clusters]
                nearest = int(np.argmin(distances))
                if distances[nearest] < self.config.merge_threshold:
                    clusters[nearest].add(pixel)
                    continue
            clusters.append(_Cluster(mean=pixel.copy()))
        return clusters
