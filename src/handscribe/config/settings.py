"""Configuration settings for Handscribe."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator


class Fidelity(str, Enum):
    """Analysis and synthesis fidelity level."""

    BASIC = "basic"
    ENHANCED = "enhanced"


class BinarizationConfig(BaseModel):
    """Configuration for ink/background classification."""

    block_size: int = Field(
        default=15,
        ge=3,
        le=255,
        description="Side of the square window used for the local mean (odd)",
    )
    constant: float = Field(
        default=10.0,
        ge=0.0,
        le=128.0,
        description="Constant subtracted from the local mean luminance",
    )
    global_threshold: float = Field(
        default=200.0,
        ge=1.0,
        le=255.0,
        description="Fixed luminance threshold used at basic fidelity",
    )

    @field_validator("block_size")
    @classmethod
    def _block_size_is_odd(cls, value: int) -> int:
        if value % 2 == 0:
            raise ValueError("block_size must be odd")
        return value


class ColorConfig(BaseModel):
    """Configuration for ink color estimation."""

    sample_size: int = Field(
        default=10000,
        ge=1,
        description="Maximum number of pixels sampled at a fixed stride",
    )
    dark_threshold: int = Field(
        default=180,
        ge=1,
        le=256,
        description="Channels must all be below this value for a pixel to count as ink",
    )
    basic_dark_threshold: int = Field(
        default=200,
        ge=1,
        le=256,
        description="Darkness threshold used at basic fidelity",
    )
    merge_threshold: float = Field(
        default=50.0,
        gt=0.0,
        le=442.0,
        description="Euclidean RGB distance below which a pixel joins a cluster",
    )


class EdgeConfig(BaseModel):
    """Configuration for gradient edge detection."""

    magnitude_threshold: float = Field(
        default=2.0,
        ge=0.0,
        le=6.0,
        description="Sobel magnitude on the 0/1 mask above which a pixel is an edge",
    )


class HoughConfig(BaseModel):
    """Configuration for Hough-transform slant estimation."""

    vote_threshold: int = Field(
        default=10,
        ge=1,
        description="Votes a (rho, theta) cell must exceed for theta to be dominant",
    )
    theta_step_degrees: float = Field(
        default=1.0,
        gt=0.0,
        le=45.0,
        description="Discretization step of theta over [0, 180) degrees",
    )
    max_slant_degrees: float = Field(
        default=45.0,
        gt=0.0,
        le=90.0,
        description="Only orientations within this many degrees of vertical count as slant",
    )


class SegmentationConfig(BaseModel):
    """Configuration for line and character segmentation."""

    smoothing_window: int = Field(
        default=5,
        ge=1,
        le=101,
        description="Moving-average window applied to the horizontal projection",
    )
    peak_radius: int = Field(
        default=2,
        ge=1,
        le=100,
        description="Radius within which a line peak must be a strict maximum",
    )
    line_threshold_ratio: float = Field(
        default=0.01,
        gt=0.0,
        le=1.0,
        description="Minimum smoothed row count for a peak, as a fraction of mask width",
    )
    default_band_height: int = Field(
        default=50,
        ge=1,
        description="Band height used below the last detected line",
    )
    min_dimension: int = Field(
        default=4,
        ge=1,
        description="Smallest accepted character box width/height",
    )
    max_dimension: int = Field(
        default=99,
        ge=1,
        description="Largest accepted character box width/height",
    )
    max_space_gap: int = Field(
        default=50,
        ge=1,
        description="Gaps between neighbouring boxes at or above this are not letter spacing",
    )

    @model_validator(mode="after")
    def _dimensions_ordered(self) -> "SegmentationConfig":
        if self.min_dimension > self.max_dimension:
            raise ValueError("min_dimension must not exceed max_dimension")
        return self


class VariationStatsConfig(BaseModel):
    """Configuration for variation statistics extracted from a sample."""

    pressure_samples: int = Field(
        default=50,
        ge=1,
        description="Number of rows sampled for ink density",
    )
    jitter_factor: float = Field(
        default=2.0,
        ge=0.0,
        description="Scale applied to the isolated edge fraction",
    )


class AnalysisConfig(BaseModel):
    """Configuration for style extraction."""

    fidelity: Fidelity = Field(
        default=Fidelity.ENHANCED,
        description="Algorithm variant selected for each estimator",
    )
    ocr_width_weight: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Weight of the recognized-text width estimate in the character width blend",
    )
    binarization: BinarizationConfig = Field(default_factory=BinarizationConfig)
    color: ColorConfig = Field(default_factory=ColorConfig)
    edges: EdgeConfig = Field(default_factory=EdgeConfig)
    hough: HoughConfig = Field(default_factory=HoughConfig)
    segmentation: SegmentationConfig = Field(default_factory=SegmentationConfig)
    variation: VariationStatsConfig = Field(default_factory=VariationStatsConfig)


class CanvasConfig(BaseModel):
    """Page geometry for layout."""

    width: float = Field(default=1200.0, gt=0.0, description="Canvas width")
    height: float = Field(default=1600.0, gt=0.0, description="Canvas height")
    margin_left: float = Field(default=80.0, ge=0.0)
    margin_top: float = Field(default=80.0, ge=0.0)
    margin_right: float = Field(default=80.0, ge=0.0)
    margin_bottom: float = Field(default=80.0, ge=0.0)
    line_height: float | None = Field(
        default=80.0,
        gt=0.0,
        description="Base line height (None = use the style's line spacing)",
    )

    @model_validator(mode="after")
    def _drawing_area_positive(self) -> "CanvasConfig":
        if self.margin_left + self.margin_right >= self.width:
            raise ValueError("horizontal margins leave no drawing area")
        if self.margin_top + self.margin_bottom >= self.height:
            raise ValueError("vertical margins leave no drawing area")
        return self

    @property
    def right_limit(self) -> float:
        """X coordinate no glyph origin may exceed."""
        return self.width - self.margin_right

    @property
    def bottom_limit(self) -> float:
        """Y coordinate no glyph origin may exceed."""
        return self.height - self.margin_bottom


class VariationConfig(BaseModel):
    """Ranges for the per-glyph stochastic variation."""

    scale_range: tuple[float, float] = Field(
        default=(0.9, 1.1),
        description="Uniform scale factor band",
    )
    stroke_width_range: tuple[float, float] = Field(
        default=(0.8, 1.2),
        description="Stroke width multiplier band (pen pressure)",
    )
    line_height_range: tuple[float, float] = Field(
        default=(1.0, 1.15),
        description="Line height multiplier band applied on wrap",
    )
    space_range: tuple[float, float] = Field(
        default=(0.8, 1.2),
        description="Space width multiplier band applied after each word",
    )
    basic_rotation_factor: float = Field(default=1.0, ge=0.0)
    enhanced_rotation_factor: float = Field(default=2.0, ge=0.0)
    baseline_factor: float = Field(
        default=1.5,
        ge=0.0,
        description="Vertical offset band is baseline_variation * factor wide",
    )
    jitter_step: float = Field(
        default=1.5,
        gt=0.0,
        description="Arc-length step used when resampling a path for jitter",
    )
    word_compression: float = Field(
        default=0.9,
        gt=0.0,
        le=1.0,
        description="Factor applied to the estimated word width before wrapping",
    )
    connector_strokes: bool = Field(
        default=True,
        description="Add cursive entry/exit strokes to lowercase words (enhanced only)",
    )

    @field_validator(
        "scale_range", "stroke_width_range", "line_height_range", "space_range"
    )
    @classmethod
    def _range_ordered(cls, value: tuple[float, float]) -> tuple[float, float]:
        low, high = value
        if low <= 0.0 or low > high:
            raise ValueError("range must satisfy 0 < low <= high")
        return value


class SynthesisConfig(BaseModel):
    """Configuration for handwriting synthesis."""

    fidelity: Fidelity = Field(default=Fidelity.ENHANCED)
    seed: int | None = Field(
        default=None,
        description="RNG seed (None = time-derived)",
    )
    canvas: CanvasConfig = Field(default_factory=CanvasConfig)
    variation: VariationConfig = Field(default_factory=VariationConfig)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class HandscribeSettings(BaseModel):
    """Main application settings."""

    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    synthesis: SynthesisConfig = Field(default_factory=SynthesisConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> HandscribeSettings:
    """Get default application settings."""
    return HandscribeSettings()
