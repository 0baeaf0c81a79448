"""Style descriptor and segmentation records.

This module defines the numeric summary of a handwriting sample:
- StyleDescriptor: Immutable set of style parameters driving synthesis
- CharacterBoundingBox: A segmented glyph run in mask coordinates
- DEFAULT_STYLE / ENHANCED_DEFAULT_STYLE: Styles used without a valid sample
"""

import math
import numbers
from dataclasses import asdict, dataclass, fields, replace
from typing import Any

from handscribe.config.settings import Fidelity
from handscribe.domain.raster import BLACK, Color
from handscribe.exceptions import StyleError

MAX_WIDTH_VARIATION = 0.3


@dataclass(frozen=True, slots=True)
class StyleDescriptor:
    """Numeric description of a handwriting style.

    All lengths are in pixels of the analyzed sample, which synthesis treats
    as canvas units.

    Attributes:
        ink_color: Dominant ink color
        stroke_width: Pen stroke width (> 0)
        slant: Writing slant in radians (positive leans right)
        character_height: Typical glyph height (> 0)
        character_width: Typical glyph width (> 0)
        space_width: Typical gap between glyphs (> 0)
        line_spacing: Distance between consecutive lines (> 0)
        baseline_variation: Dispersion of line positions (>= 0)
        jitter: Hand shake amount (>= 0)
        pressure: Relative pen pressure in [0, 1]
        width_variation: Relative glyph width dispersion in [0, 0.3]
    """

    ink_color: Color = BLACK
    stroke_width: float = 2.0
    slant: float = 0.0
    character_height: float = 30.0
    character_width: float = 20.0
    space_width: float = 10.0
    line_spacing: float = 40.0
    baseline_variation: float = 2.0
    jitter: float = 0.5
    pressure: float = 0.8
    width_variation: float = 0.1

    def __post_init__(self) -> None:
        for f in fields(self):
            if f.name == "ink_color":
                continue
            value = getattr(self, f.name)
            if (
                isinstance(value, bool)
                or not isinstance(value, numbers.Real)
                or not math.isfinite(value)
            ):
                raise StyleError(f"{f.name} must be a finite number, got {value!r}")
            # numpy scalars included
            object.__setattr__(self, f.name, float(value))

        for name in (
            "stroke_width",
            "character_height",
            "character_width",
            "space_width",
            "line_spacing",
        ):
            if getattr(self, name) <= 0:
                raise StyleError(f"{name} must be positive, got {getattr(self, name)}")

        if self.baseline_variation < 0:
            raise StyleError("baseline_variation must be non-negative")
        if self.jitter < 0:
            raise StyleError("jitter must be non-negative")
        if not 0.0 <= self.pressure <= 1.0:
            raise StyleError(f"pressure must be in [0, 1], got {self.pressure}")
        if not 0.0 <= self.width_variation <= MAX_WIDTH_VARIATION:
            raise StyleError(
                f"width_variation must be in [0, {MAX_WIDTH_VARIATION}], "
                f"got {self.width_variation}"
            )

    def with_changes(self, **changes: Any) -> "StyleDescriptor":
        """Return a copy with the given fields replaced (validated again)."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary.

        Returns:
            Dictionary with the ink color as a hex string
        """
        data = asdict(self)
        data["ink_color"] = self.ink_color.to_hex()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StyleDescriptor":
        """Deserialize from dictionary.

        Missing fields take their default values; unknown keys are ignored.

        Args:
            data: Dictionary produced by to_dict()

        Returns:
            StyleDescriptor instance

        Raises:
            StyleError: If a value is malformed or out of range
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {k: v for k, v in data.items() if k in known}
        if "ink_color" in kwargs:
            try:
                kwargs["ink_color"] = Color.from_hex(str(kwargs["ink_color"]))
            except ValueError as e:
                raise StyleError(str(e)) from e
        for name, value in kwargs.items():
            if name != "ink_color" and isinstance(value, str):
                raise StyleError(f"{name} must be a number, got {value!r}")
        return cls(**kwargs)


DEFAULT_STYLE = StyleDescriptor()

ENHANCED_DEFAULT_STYLE = StyleDescriptor(
    ink_color=BLACK,
    stroke_width=2.5,
    slant=0.1,
    character_height=35.0,
    character_width=25.0,
    space_width=15.0,
    line_spacing=45.0,
    baseline_variation=2.5,
    jitter=0.8,
    pressure=0.9,
    width_variation=0.15,
)


def default_style(fidelity: Fidelity = Fidelity.BASIC) -> StyleDescriptor:
    """Get the style used when no valid sample is available.

    Args:
        fidelity: Fidelity level of the caller

    Returns:
        DEFAULT_STYLE for basic fidelity, ENHANCED_DEFAULT_STYLE otherwise
    """
    if fidelity == Fidelity.ENHANCED:
        return ENHANCED_DEFAULT_STYLE
    return DEFAULT_STYLE


@dataclass(frozen=True, slots=True)
class CharacterBoundingBox:
    """Bounding box of one segmented glyph run.

    Attributes:
        x: Left column (inclusive)
        y: Top row (inclusive)
        width: Width in pixels
        height: Height in pixels
        line: Index of the text line the box was found on
    """

    x: int
    y: int
    width: int
    height: int
    line: int = 0

    @property
    def right(self) -> int:
        """Column just past the right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Row just past the bottom edge."""
        return self.y + self.height
