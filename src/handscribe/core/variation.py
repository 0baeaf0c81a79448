"""Stochastic per-glyph variation.

The VariationModel turns a StyleDescriptor and an explicitly seeded RNG into
the transform of every glyph instance, so repeated characters never render
identically while a fixed seed still reproduces a document exactly.

Draw order per glyph is fixed: rotation, scale, vertical offset, stroke
width. Path jitter draws two Gaussian samples per resampled point.
"""

import random

from handscribe.config import Fidelity, VariationConfig
from handscribe.core.geometry import flatten_stroke, resample, to_polyline_stroke
from handscribe.domain import GlyphTransform, Stroke, StyleDescriptor


class VariationModel:
    """Generates per-glyph transforms from a style and an RNG.

    Attributes:
        style: Style driving the variation ranges
        rng: Random stream shared with the layout engine
        fidelity: Selects the rotation range
        config: Variation bands
    """

    def __init__(
        self,
        style: StyleDescriptor,
        rng: random.Random,
        fidelity: Fidelity = Fidelity.ENHANCED,
        config: VariationConfig | None = None,
    ) -> None:
        self.style = style
        self.rng = rng
        self.fidelity = fidelity
        self.config = config or VariationConfig()

    @property
    def rotation_limit(self) -> float:
        """Largest absolute rotation in radians."""
        factor = (
            self.config.enhanced_rotation_factor
            if self.fidelity == Fidelity.ENHANCED
            else self.config.basic_rotation_factor
        )
        return abs(factor * self.style.slant)

    @property
    def offset_limit(self) -> float:
        """Largest absolute vertical offset."""
        return self.style.baseline_variation * self.config.baseline_factor / 2

    def glyph_transform(self) -> GlyphTransform:
        """Draw the transform of the next glyph instance."""
        limit = self.rotation_limit
        rotation = self.rng.uniform(-limit, limit)
        scale = self.rng.uniform(*self.config.scale_range)
        offset = self.rng.uniform(-self.offset_limit, self.offset_limit)
        stroke_width = self.style.stroke_width * self.rng.uniform(*self.config.stroke_width_range)
        return GlyphTransform(
            rotation=rotation, scale=scale, y_offset=offset, stroke_width=stroke_width
        )

    def width_factor(self) -> float:
        """Per-character advance multiplier in [1 - wv/2, 1 + wv/2]."""
        wv = self.style.width_variation
        return 1.0 + self.rng.random() * wv - wv / 2

    def jitter(self, strokes: tuple[Stroke, ...]) -> tuple[Stroke, ...]:
        """Apply hand-shake noise to strokes.

        Each stroke is flattened, resampled every jitter_step units of arc
        length and every sample is displaced by Gaussian noise with standard
        deviation equal to the style's jitter. A jitter of zero returns the
        strokes untouched, curves included.

        Args:
            strokes: Strokes in glyph-local coordinates

        Returns:
            Jittered polyline strokes
        """
        sigma = self.style.jitter
        if sigma == 0:
            return strokes

        result = []
        for stroke in strokes:
            samples = resample(flatten_stroke(stroke), self.config.jitter_step)
            noisy = [
                (x + self.rng.gauss(0.0, sigma), y + self.rng.gauss(0.0, sigma))
                for x, y in samples
            ]
            result.append(to_polyline_stroke(noisy))
        return tuple(result)
