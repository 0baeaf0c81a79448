"""Configuration management for handscribe.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- AnalysisConfig: Style extraction settings (thresholds, Hough, segmentation)
- SynthesisConfig: Layout and variation settings (canvas, ranges, seed)
- LoggingConfig: Logging settings
- HandscribeSettings: Main application settings
"""

from handscribe.config.settings import (
    AnalysisConfig,
    BinarizationConfig,
    CanvasConfig,
    ColorConfig,
    EdgeConfig,
    Fidelity,
    HandscribeSettings,
    HoughConfig,
    LoggingConfig,
    SegmentationConfig,
    SynthesisConfig,
    VariationConfig,
    VariationStatsConfig,
    get_default_settings,
)

__all__ = [
    "AnalysisConfig",
    "BinarizationConfig",
    "CanvasConfig",
    "ColorConfig",
    "EdgeConfig",
    "Fidelity",
    "HandscribeSettings",
    "HoughConfig",
    "LoggingConfig",
    "SegmentationConfig",
    "SynthesisConfig",
    "VariationConfig",
    "VariationStatsConfig",
    "get_default_settings",
]
