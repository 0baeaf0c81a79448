"""Core algorithms for handscribe.

This module contains the two pipelines:

- Analysis: binarization, ink color clustering, edge detection, stroke width
  (distance transform), slant (Hough transform), line and character
  segmentation, variation statistics
- Synthesis: glyph template catalog, stochastic variation model, layout

All services are designed to be:
- Stateless (configuration only; every call is independent)
- Pure (no I/O; randomness only from an explicitly seeded RNG)

Key functions:
- analyze: Extract a StyleDescriptor from a RasterImage
- generate: Render text in a style as a RenderedDocument

Key classes:
- StyleAnalyzer: Composes the analysis estimators
- GlyphCatalog: Character to template lookup with fallbacks
- VariationModel: Per-glyph stochastic transforms
- LayoutEngine: Text flow and glyph placement
"""

from handscribe.core.analyzer import AnalysisReport, CharacterMetrics, StyleAnalyzer, analyze
from handscribe.core.binarize import Binarizer, binarize, box_mean
from handscribe.core.color import ColorClusterer
from handscribe.core.edges import EdgeDetector
from handscribe.core.geometry import affine, flatten_stroke, resample
from handscribe.core.layout import LayoutEngine, generate, width_factor
from handscribe.core.segmentation import (
    CharacterSegmenter,
    LineSegmenter,
    find_peaks,
    moving_average,
)
from handscribe.core.slant import SlantEstimator
from handscribe.core.stroke_width import StrokeWidthEstimator, chamfer_distance
from handscribe.core.templates import (
    CharacterClass,
    GlyphCatalog,
    GlyphTemplate,
    character_class,
    default_catalog,
)
from handscribe.core.variation import VariationModel
from handscribe.core.variation_stats import VariationAnalyzer, VariationStats

__all__ = [
    # Analysis
    "AnalysisReport",
    "Binarizer",
    "CharacterMetrics",
    "CharacterSegmenter",
    "ColorClusterer",
    "EdgeDetector",
    "LineSegmenter",
    "SlantEstimator",
    "StrokeWidthEstimator",
    "StyleAnalyzer",
    "VariationAnalyzer",
    "VariationStats",
    "analyze",
    "binarize",
    "box_mean",
    "chamfer_distance",
    "find_peaks",
    "moving_average",
    # Synthesis
    "CharacterClass",
    "GlyphCatalog",
    "GlyphTemplate",
    "LayoutEngine",
    "VariationModel",
    "character_class",
    "default_catalog",
    "generate",
    "width_factor",
    # Geometry
    "affine",
    "flatten_stroke",
    "resample",
]
