"""Writing slant estimation with a Hough transform over edge pixels."""

import math

import numpy as np
import structlog

from handscribe.config import HoughConfig

logger = structlog.get_logger(__name__)

FALLBACK_SLANT = 0.0


class SlantEstimator:
    """Estimates the dominant stroke slant of an edge map.

    Every edge pixel votes for the lines rho = x*cos(theta) + y*sin(theta)
    through it, theta stepping over [0, 180) degrees. Theta is the angle of
    the line normal, so near-vertical strokes vote around theta = 0 and a
    stroke leaning right (top towards +x, y growing downward) votes at a
    small positive theta. Angles above 90 degrees are folded into negative
    angles, and only angles within max_slant_degrees of vertical are
    considered.
    """

    def __init__(self, config: HoughConfig | None = None) -> None:
        self.config = config or HoughConfig()

    def thetas(self) -> np.ndarray:
        """Discretized theta values in degrees over [0, 180)."""
        return np.arange(0.0, 180.0, self.config.theta_step_degrees)

    def accumulate(self, edges: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Build the Hough accumulator.

        Args:
            edges: bool edge map

        Returns:
            (thetas in degrees, accumulator of shape (n_theta, n_rho)); rho
            bins have width 1 and are offset by the image diagonal
        """
        thetas = self.thetas()
        h, w = edges.shape
        diagonal = int(math.ceil(math.hypot(w, h)))
        n_rho = 2 * diagonal + 1

        ys, xs = np.nonzero(edges)
        accumulator = np.zeros((len(thetas), n_rho), dtype=np.int64)
        if len(xs) == 0:
            return thetas, accumulator

        xs = xs.astype(np.float64)
        ys = ys.astype(np.float64)
        for i, theta in enumerate(np.deg2rad(thetas)):
            rho = xs * math.cos(theta) + ys * math.sin(theta)
            bins = np.rint(rho).astype(np.int64) + diagonal
            accumulator[i] = np.bincount(bins, minlength=n_rho)
        return thetas, accumulator

    def estimate(self, edges: np.ndarray) -> float:
        """Estimate the slant angle.

        Args:
            edges: bool edge map

        Returns:
            Slant in radians, positive leaning right; 0.0 when no angle
            gathers more than vote_threshold votes in a single cell
        """
        slant = self.measure(edges)
        if slant is None:
            logger.debug("Slant fallback", estimator="slant", reason="no dominant angle")
            return FALLBACK_SLANT
        return slant

    def measure(self, edges: np.ndarray) -> float | None:
        """Vote-weighted dominant slant in radians, or None without a dominant angle."""
        thetas, accumulator = self.accumulate(edges)
        weights = accumulator.max(axis=1)

        signed = np.where(thetas > 90.0, thetas - 180.0, thetas)
        dominant = (weights > self.config.vote_threshold) & (
            np.abs(signed) <= self.config.max_slant_degrees
        )

        if not dominant.any():
            return None

        votes = weights[dominant].astype(np.float64)
        average = float(np.sum(signed[dominant] * votes) / np.sum(votes))
        return math.radians(average)
