"""Style extraction from a handwriting sample.

This module composes the analysis estimators into one pure function from an
image to a StyleDescriptor:

1. Binarize the image and estimate the ink color
2. Detect edges, stroke width and slant
3. Segment lines and characters
4. Measure variation statistics
5. Assemble character metrics into the descriptor

Every estimator degrades to a documented fallback when the sample carries no
usable signal, so analysis of a structurally valid image never fails. The
fallbacks taken are recorded in the AnalysisReport.
"""

import time
from dataclasses import dataclass, field

import numpy as np
import structlog

from handscribe.config import AnalysisConfig, Fidelity
from handscribe.core.binarize import Binarizer
from handscribe.core.color import ColorClusterer
from handscribe.core.edges import EdgeDetector
from handscribe.core.segmentation import CharacterSegmenter, LineSegmenter
from handscribe.core.slant import FALLBACK_SLANT, SlantEstimator
from handscribe.core.stroke_width import StrokeWidthEstimator
from handscribe.core.variation_stats import VariationAnalyzer
from handscribe.domain import (
    BLACK,
    BinaryMask,
    CharacterBoundingBox,
    RasterImage,
    StyleDescriptor,
)

logger = structlog.get_logger(__name__)

FALLBACK_CHARACTER_HEIGHT = 30.0
FALLBACK_CHARACTER_WIDTH = 20.0
FALLBACK_LINE_SPACING = 40.0
FALLBACK_SPACE_WIDTH = 10.0
FALLBACK_GAP_WIDTH = 20.0


@dataclass(frozen=True)
class CharacterMetrics:
    """Glyph and spacing dimensions measured from segmentation.

    Attributes:
        character_height: Central box height
        character_width: Central box width, blended with recognized text
        space_width: Central gap between neighbouring boxes on a line
        line_spacing: Central distance between consecutive lines
        fallbacks: Names of the metrics that used their fallback value
    """

    character_height: float
    character_width: float
    space_width: float
    line_spacing: float
    fallbacks: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AnalysisReport:
    """Style descriptor together with the intermediate analysis results.

    Attributes:
        descriptor: Extracted style
        mask: Ink mask of the sample
        lines: Detected line positions
        boxes: Segmented character boxes
        edge_count: Number of edge pixels
        fallbacks: Estimators that returned their fallback value
        duration_ms: Analysis time
    """

    descriptor: StyleDescriptor
    mask: BinaryMask
    lines: list[int]
    boxes: list[CharacterBoundingBox]
    edge_count: int
    fallbacks: tuple[str, ...]
    duration_ms: float

    @property
    def degenerate(self) -> bool:
        """Check whether any estimator fell back to its default."""
        return len(self.fallbacks) > 0


class StyleAnalyzer:
    """Extracts a StyleDescriptor from a handwriting sample.

    The analyzer holds configuration only; each call is independent.

    Example:
        >>> analyzer = StyleAnalyzer()
        >>> style = analyzer.analyze(image)
    """

    def __init__(self, config: AnalysisConfig | None = None) -> None:
        self.config = config or AnalysisConfig()
        fidelity = self.config.fidelity

        self.binarizer = Binarizer(self.config.binarization, fidelity)
        self.color_clusterer = ColorClusterer(self.config.color, fidelity)
        self.edge_detector = EdgeDetector(self.config.edges)
        self.stroke_width_estimator = StrokeWidthEstimator(fidelity)
        self.slant_estimator = SlantEstimator(self.config.hough)
        self.line_segmenter = LineSegmenter(self.config.segmentation)
        self.character_segmenter = CharacterSegmenter(self.config.segmentation)
        self.variation_analyzer = VariationAnalyzer(self.config.variation, fidelity)

    @property
    def fidelity(self) -> Fidelity:
        return self.config.fidelity

    def analyze(self, image: RasterImage, recognized_text: str | None = None) -> StyleDescriptor:
        """Extract the style of a sample.

        Args:
            image: Decoded sample image
            recognized_text: Optional text recognized in the sample, used to
                refine the character width

        Returns:
            StyleDescriptor (never a failure for a valid image)
        """
        return self.analyze_detailed(image, recognized_text).descriptor

    def analyze_detailed(
        self, image: RasterImage, recognized_text: str | None = None
    ) -> AnalysisReport:
        """Extract the style of a sample and keep the intermediate results.

        Args:
            image: Decoded sample image
            recognized_text: Optional recognized text

        Returns:
            AnalysisReport with the descriptor, lines, boxes and fallbacks
        """
        start = time.perf_counter()
        fallbacks: list[str] = []

        mask = self.binarizer.binarize(image)
        ink_color = self.color_clusterer.measure(image)
        if ink_color is None:
            fallbacks.append("ink_color")
            ink_color = BLACK
        edges = self.edge_detector.detect(mask)

        if not mask.has_foreground():
            fallbacks.append("stroke_width")
        stroke_width = self.stroke_width_estimator.estimate(mask)

        slant = self.slant_estimator.measure(edges)
        if slant is None:
            fallbacks.append("slant")
            slant = FALLBACK_SLANT

        lines = self.line_segmenter.find_lines(mask)
        boxes = self.character_segmenter.segment(mask, lines)

        variation = self.variation_analyzer.analyze(mask, edges, boxes, lines)
        metrics = self.character_metrics(mask, boxes, lines, recognized_text)
        fallbacks.extend(metrics.fallbacks)
        fallbacks.extend(variation.fallbacks)

        descriptor = StyleDescriptor(
            ink_color=ink_color,
            stroke_width=float(stroke_width),
            slant=float(slant),
            character_height=metrics.character_height,
            character_width=metrics.character_width,
            space_width=metrics.space_width,
            line_spacing=metrics.line_spacing,
            baseline_variation=float(variation.baseline_variation),
            jitter=float(variation.jitter),
            pressure=float(min(1.0, max(0.0, variation.pressure))),
            width_variation=float(variation.width_variation),
        )

        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "Style analyzed",
            width=image.width,
            height=image.height,
            fidelity=self.fidelity.value,
            lines=len(lines),
            characters=len(boxes),
            ink_pixels=mask.foreground_count(),
            fallbacks=list(fallbacks),
            duration_ms=round(duration_ms, 2),
        )

        return AnalysisReport(
            descriptor=descriptor,
            mask=mask,
            lines=lines,
            boxes=boxes,
            edge_count=int(np.count_nonzero(edges)),
            fallbacks=tuple(fallbacks),
            duration_ms=duration_ms,
        )

    def character_metrics(
        self,
        mask: BinaryMask,
        boxes: list[CharacterBoundingBox],
        lines: list[int],
        recognized_text: str | None = None,
    ) -> CharacterMetrics:
        """Derive glyph size and spacing from segmentation results.

        Args:
            mask: Ink mask (used for the ink extent)
            boxes: Character boxes
            lines: Line positions
            recognized_text: Optional recognized text

        Returns:
            CharacterMetrics with fallbacks recorded
        """
        center = self._center
        fallbacks: list[str] = []

        if boxes:
            height = center([b.height for b in boxes])
            width = center([b.width for b in boxes])
        else:
            fallbacks.extend(["character_height", "character_width"])
            height = FALLBACK_CHARACTER_HEIGHT
            width = FALLBACK_CHARACTER_WIDTH

        if len(lines) >= 2:
            line_spacing = center(np.diff(lines).tolist())
        else:
            fallbacks.append("line_spacing")
            line_spacing = FALLBACK_LINE_SPACING

        gaps = self._gaps(boxes)
        if gaps:
            space_width = center(gaps)
        else:
            fallbacks.append("space_width")
            if not boxes:
                space_width = FALLBACK_SPACE_WIDTH
            elif self.fidelity == Fidelity.BASIC:
                space_width = width * 0.5
            else:
                space_width = FALLBACK_GAP_WIDTH

        if recognized_text and recognized_text.strip():
            extent = self._ink_extent(mask)
            if extent > 0:
                text_width = extent / len(recognized_text)
                weight = self.config.ocr_width_weight
                width = (1.0 - weight) * width + weight * text_width

        return CharacterMetrics(
            character_height=max(1.0, height),
            character_width=max(1.0, width),
            space_width=max(1.0, space_width),
            line_spacing=max(1.0, line_spacing),
            fallbacks=tuple(fallbacks),
        )

    def _center(self, values: list[float]) -> float:
        if self.fidelity == Fidelity.BASIC:
            return float(np.mean(values))
        return float(np.median(values))

    def _gaps(self, boxes: list[CharacterBoundingBox]) -> list[float]:
        """Gaps between consecutive boxes of the same line within (0, max_space_gap)."""
        limit = self.config.segmentation.max_space_gap
        gaps = []
        for prev, curr in zip(boxes, boxes[1:], strict=False):
            if prev.line != curr.line:
                continue
            gap = curr.x - prev.right
            if 0 < gap < limit:
                gaps.append(float(gap))
        return gaps

    @staticmethod
    def _ink_extent(mask: BinaryMask) -> float:
        """Horizontal distance between the leftmost and rightmost ink column."""
        columns = np.nonzero(mask.data.any(axis=0))[0]
        if len(columns) == 0:
            return 0.0
        return float(columns[-1] - columns[0])


def analyze(
    image: RasterImage,
    recognized_text: str | None = None,
    config: AnalysisConfig | None = None,
) -> StyleDescriptor:
    """Extract a StyleDescriptor from a sample image.

    Args:
        image: Decoded sample image
        recognized_text: Optional recognized text for width refinement
        config: Analysis configuration (defaults to enhanced fidelity)

    Returns:
        StyleDescriptor
    """
    return StyleAnalyzer(config).analyze(image, recognized_text)
