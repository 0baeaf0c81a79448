"""Raster types consumed by the analysis pipeline.

This module defines the pixel-level types:
- Color: An RGB ink color
- RasterImage: A decoded RGB pixel buffer (read-only)
- BinaryMask: An ink/background classification of a raster
"""

from dataclasses import dataclass
from typing import Any

import numpy as np

from handscribe.exceptions import InvalidInputError

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])


@dataclass(frozen=True, slots=True)
class Color:
    """An 8-bit RGB color.

    Attributes:
        r: Red channel (0-255)
        g: Green channel (0-255)
        b: Blue channel (0-255)
    """

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b):
            if not 0 <= channel <= 255:
                raise ValueError(f"Color channel out of range: {channel}")

    def to_tuple(self) -> tuple[int, int, int]:
        """Convert to an (r, g, b) tuple."""
        return (self.r, self.g, self.b)

    def to_hex(self) -> str:
        """Format as a CSS hex string, e.g. '#1a2b3c'."""
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        """Parse a '#rrggbb' string.

        Args:
            value: Hex color string, with or without leading '#'

        Returns:
            Color instance

        Raises:
            ValueError: If the string is not six hex digits
        """
        digits = value.lstrip("#")
        if len(digits) != 6:
            raise ValueError(f"Invalid hex color: {value!r}")
        return cls(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    def distance(self, other: "Color") -> float:
        """Euclidean distance in RGB space."""
        return float(
            np.sqrt(
                (self.r - other.r) ** 2 + (self.g - other.g) ** 2 + (self.b - other.b) ** 2
            )
        )


BLACK = Color(0, 0, 0)


@dataclass(frozen=True, eq=False)
class RasterImage:
    """A decoded image as an RGB pixel buffer.

    The buffer is copied on construction and marked read-only, so the image
    cannot be changed by the pipeline or by the caller afterwards.

    Attributes:
        pixels: uint8 array of shape (height, width, 3)
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        pixels = np.asarray(self.pixels)
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise InvalidInputError(
                f"Expected an (height, width, 3) pixel array, got shape {pixels.shape}"
            )
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise InvalidInputError(
                f"Image has zero size ({pixels.shape[1]}x{pixels.shape[0]})"
            )
        pixels = np.array(np.clip(pixels, 0, 255), dtype=np.uint8)
        pixels.setflags(write=False)
        object.__setattr__(self, "pixels", pixels)

    @classmethod
    def from_array(cls, array: Any) -> "RasterImage":
        """Build an image from a grayscale, RGB or RGBA array.

        Args:
            array: Array-like of shape (h, w), (h, w, 3) or (h, w, 4)

        Returns:
            RasterImage with alpha dropped and gray expanded to RGB

        Raises:
            InvalidInputError: If the array shape is not an image
        """
        data = np.asarray(array)
        if data.ndim == 2:
            data = np.repeat(data[:, :, np.newaxis], 3, axis=2)
        elif data.ndim == 3 and data.shape[2] == 4:
            data = data[:, :, :3]
        return cls(data)

    @property
    def width(self) -> int:
        """Image width in pixels."""
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        """Image height in pixels."""
        return int(self.pixels.shape[0])

    def pixel(self, x: int, y: int) -> Color:
        """Get the color at (x, y)."""
        r, g, b = self.pixels[y, x]
        return Color(int(r), int(g), int(b))

    def luminance(self) -> np.ndarray:
        """Per-pixel luminance as a float array of shape (height, width)."""
        return self.pixels.astype(np.float64) @ LUMA_WEIGHTS


@dataclass(frozen=True, eq=False)
class BinaryMask:
    """Ink/background classification of an image.

    Attributes:
        data: bool array of shape (height, width); True marks ink
    """

    data: np.ndarray

    def __post_init__(self) -> None:
        data = np.array(self.data, dtype=bool)
        if data.ndim != 2:
            raise InvalidInputError(f"Expected a 2-D mask, got shape {data.shape}")
        data.setflags(write=False)
        object.__setattr__(self, "data", data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BinaryMask):
            return NotImplemented
        return bool(np.array_equal(self.data, other.data))

    __hash__ = None  # type: ignore[assignment]

    @property
    def width(self) -> int:
        """Mask width in pixels."""
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        """Mask height in pixels."""
        return int(self.data.shape[0])

    def foreground_count(self) -> int:
        """Number of ink pixels."""
        return int(np.count_nonzero(self.data))

    def has_foreground(self) -> bool:
        """Check whether any pixel is ink."""
        return bool(self.data.any())

    def to_image(self) -> RasterImage:
        """Render the mask as a two-level image (ink black, background white)."""
        levels = np.where(self.data, 0, 255).astype(np.uint8)
        return RasterImage.from_array(levels)
