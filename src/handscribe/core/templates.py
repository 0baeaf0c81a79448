"""Glyph template catalog.

Templates are single-line stroke skeletons written as SVG path data in a unit
box (x to the right, y downward). They are parsed once with fontTools' SVG
path parser into a RecordingPen and converted to Stroke objects.

Each template declares the vertical band it occupies as fractions of the
character height, measured down from the top of the line box:

- top 0.0 / bottom 1.0: capitals, digits and ascenders
- top 0.5 / bottom 1.0: x-height lowercase
- bottom 1.3: descenders

Lookup never fails: exact character, then character class, then a generic
curve.
"""

import unicodedata
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Any

from fontTools.pens.recordingPen import RecordingPen
from fontTools.svgLib.path import parse_path

from handscribe.core.geometry import box_transform
from handscribe.domain import Point, PointType, Stroke
from handscribe.exceptions import EmptyCatalogError


class CharacterClass(str, Enum):
    """Coarse character class used for template fallback."""

    LOWERCASE = "lowercase"
    UPPERCASE = "uppercase"
    DIGIT = "digit"
    PUNCTUATION = "punctuation"
    OTHER = "other"


def character_class(char: str) -> CharacterClass:
    """Classify a single character."""
    if char.islower():
        return CharacterClass.LOWERCASE
    if char.isupper():
        return CharacterClass.UPPERCASE
    if char.isdigit():
        return CharacterClass.DIGIT
    if unicodedata.category(char).startswith("P"):
        return CharacterClass.PUNCTUATION
    return CharacterClass.OTHER


def _recording_to_strokes(recording: list[tuple[str, tuple[Any, ...]]]) -> tuple[Stroke, ...]:
    """Convert RecordingPen commands to strokes.

    Quadratic runs with several control points are split at their implied
    on-curve midpoints, so every stroke alternates cleanly between on-curve
    and control points.

    Args:
        recording: Commands recorded by a RecordingPen

    Returns:
        Strokes in drawing order

    Raises:
        ValueError: If the path contains cubic curves
    """
    strokes: list[Stroke] = []
    current: list[Point] = []

    def flush() -> None:
        if current:
            strokes.append(Stroke(tuple(current)))
            current.clear()

    for command, args in recording:
        if command == "moveTo":
            flush()
            x, y = args[0]
            current.append(Point(x, y))

        elif command == "lineTo":
            x, y = args[0]
            current.append(Point(x, y))

        elif command == "qCurveTo":
            *controls, end = args
            for i, (cx, cy) in enumerate(controls):
                if i > 0:
                    px, py = controls[i - 1]
                    current.append(Point((px + cx) / 2, (py + cy) / 2))
                current.append(Point(cx, cy, PointType.OFF_CURVE_QUAD))
            current.append(Point(*end))

        elif command == "curveTo":
            raise ValueError("Cubic curves are not supported in glyph templates")

        elif command == "closePath":
            if current:
                current.append(current[0].moved(current[0].x, current[0].y))
            flush()

        elif command == "endPath":
            flush()

    flush()
    return tuple(strokes)


@dataclass(frozen=True)
class GlyphTemplate:
    """Normalized stroke skeleton of one character or character class.

    Attributes:
        key: Character or class name the template was registered under
        strokes: Strokes in unit-box coordinates
        top: Top of the glyph band as a fraction of character height
        bottom: Bottom of the glyph band as a fraction of character height
    """

    key: str
    strokes: tuple[Stroke, ...]
    top: float = 0.0
    bottom: float = 1.0

    def __post_init__(self) -> None:
        if not self.strokes:
            raise ValueError(f"Template {self.key!r} has no strokes")
        if self.bottom <= self.top:
            raise ValueError(f"Template {self.key!r} has an empty vertical band")

    @classmethod
    def from_svg(cls, key: str, path: str, top: float = 0.0, bottom: float = 1.0) -> "GlyphTemplate":
        """Parse a template from SVG path data (M, L and Q commands)."""
        pen = RecordingPen()
        parse_path(path, pen)
        return cls(key=key, strokes=_recording_to_strokes(pen.value), top=top, bottom=bottom)

    def place(self, box_width: float, character_height: float) -> tuple[Stroke, ...]:
        """Map the template into glyph-local coordinates.

        The local origin is the left end of the baseline. With y growing
        downward, everything above the baseline has negative y.

        Args:
            box_width: Horizontal extent of the glyph box
            character_height: Height from the top of the line box to the baseline

        Returns:
            Strokes in local coordinates
        """
        transform = box_transform(
            0.0,
            (self.top - 1.0) * character_height,
            box_width,
            (self.bottom - self.top) * character_height,
        )
        return tuple(stroke.map_points(transform) for stroke in self.strokes)


# (path, top, bottom)
_TemplateSpec = tuple[str, float, float]

_LOWERCASE: dict[str, _TemplateSpec] = {
    "a": ("M .8 .3 Q .5 0 .2 .3 Q 0 .7 .4 .95 Q .7 1 .8 .6 M .8 .1 L .8 1", 0.5, 1.0),
    "b": ("M .2 0 L .2 1 M .2 .65 Q .5 .4 .8 .65 Q .9 1 .5 1 Q .3 1 .2 .9", 0.0, 1.0),
    "c": ("M .8 .2 Q .5 0 .2 .3 Q 0 .7 .3 .95 Q .6 1 .8 .8", 0.5, 1.0),
    "d": ("M .8 0 L .8 1 M .8 .65 Q .5 .4 .2 .65 Q .1 1 .5 1 Q .7 1 .8 .9", 0.0, 1.0),
    "e": ("M .2 .5 L .8 .5 Q .8 .1 .5 .1 Q .1 .1 .15 .55 Q .2 1 .55 .95 Q .75 .92 .85 .8", 0.5, 1.0),
    "f": ("M .8 .1 Q .6 0 .5 .2 L .5 1 M .2 .45 L .8 .45", 0.0, 1.0),
    "g": ("M .8 .15 Q .5 0 .2 .2 Q 0 .5 .4 .6 Q .7 .6 .8 .35 M .8 .05 L .8 .8 Q .75 1 .45 1 Q .25 1 .2 .9", 0.5, 1.3),
    "h": ("M .2 0 L .2 1 M .2 .65 Q .5 .4 .75 .6 L .8 1", 0.0, 1.0),
    "i": ("M .5 .3 L .5 1 M .5 0 L .5 .08", 0.3, 1.0),
    "j": ("M .6 .25 L .6 .85 Q .6 1 .3 .95 M .6 .02 L .6 .1", 0.3, 1.3),
    "k": ("M .2 0 L .2 1 M .75 .45 L .2 .75 L .8 1", 0.0, 1.0),
    "l": ("M .5 0 L .5 .9 Q .5 1 .7 1", 0.0, 1.0),
    "m": ("M .1 1 L .1 .2 M .1 .35 Q .3 0 .5 .35 L .5 1 M .5 .35 Q .7 0 .9 .35 L .9 1", 0.5, 1.0),
    "n": ("M .2 1 L .2 .2 M .2 .4 Q .5 0 .8 .4 L .8 1", 0.5, 1.0),
    "o": ("M .5 0 Q .9 0 .9 .5 Q .9 1 .5 1 Q .1 1 .1 .5 Q .1 0 .5 0", 0.5, 1.0),
    "p": ("M .2 .05 L .2 1 M .2 .2 Q .5 0 .8 .3 Q .9 .6 .5 .6 Q .3 .6 .2 .5", 0.5, 1.3),
    "q": ("M .8 .05 L .8 1 M .8 .2 Q .5 0 .2 .3 Q .1 .6 .5 .6 Q .7 .6 .8 .5", 0.5, 1.3),
    "r": ("M .3 1 L .3 .1 M .3 .4 Q .5 0 .8 .15", 0.5, 1.0),
    "s": ("M .8 .15 Q .5 0 .25 .15 Q .1 .35 .5 .5 Q .9 .65 .75 .85 Q .5 1 .2 .85", 0.5, 1.0),
    "t": ("M .5 0 L .5 .85 Q .55 1 .8 .95 M .2 .35 L .8 .35", 0.2, 1.0),
    "u": ("M .2 0 L .2 .7 Q .3 1 .6 .95 Q .8 .9 .8 .6 M .8 0 L .8 1", 0.5, 1.0),
    "v": ("M .15 0 L .5 1 L .85 0", 0.5, 1.0),
    "w": ("M .05 0 L .28 1 L .5 .3 L .72 1 L .95 0", 0.5, 1.0),
    "x": ("M .15 0 L .85 1 M .85 0 L .15 1", 0.5, 1.0),
    "y": ("M .15 0 L .5 .6 M .85 0 L .4 .9 Q .3 1 .15 .95", 0.5, 1.3),
    "z": ("M .15 0 L .85 0 L .15 1 L .85 1", 0.5, 1.0),
}

_OVAL = "M .5 0 Q .9 0 .9 .5 Q .9 1 .5 1 Q .1 1 .1 .5 Q .1 0 .5 0"
_P_BOWL = "M .2 1 L .2 0 Q .85 0 .85 .27 Q .85 .55 .2 .55"

_UPPERCASE: dict[str, _TemplateSpec] = {
    "A": ("M .1 1 L .5 0 L .9 1 M .27 .6 L .73 .6", 0.0, 1.0),
    "B": ("M .2 1 L .2 0 Q .8 0 .8 .25 Q .8 .5 .2 .5 M .2 .5 Q .9 .5 .9 .75 Q .9 1 .2 1", 0.0, 1.0),
    "C": ("M .85 .15 Q .6 0 .4 .05 Q .1 .15 .1 .5 Q .1 .85 .4 .95 Q .6 1 .85 .85", 0.0, 1.0),
    "D": ("M .2 0 L .2 1 M .2 0 Q .9 0 .9 .5 Q .9 1 .2 1", 0.0, 1.0),
    "E": ("M .8 0 L .2 0 L .2 1 L .8 1 M .2 .5 L .7 .5", 0.0, 1.0),
    "F": ("M .8 0 L .2 0 L .2 1 M .2 .5 L .7 .5", 0.0, 1.0),
    "G": ("M .85 .15 Q .6 0 .4 .05 Q .1 .15 .1 .5 Q .1 .9 .45 .97 Q .8 1 .85 .6 L .55 .6", 0.0, 1.0),
    "H": ("M .2 0 L .2 1 M .8 0 L .8 1 M .2 .5 L .8 .5", 0.0, 1.0),
    "I": ("M .5 0 L .5 1 M .3 0 L .7 0 M .3 1 L .7 1", 0.0, 1.0),
    "J": ("M .7 0 L .7 .75 Q .7 1 .45 1 Q .2 1 .2 .75", 0.0, 1.0),
    "K": ("M .2 0 L .2 1 M .8 0 L .2 .6 M .4 .45 L .85 1", 0.0, 1.0),
    "L": ("M .2 0 L .2 1 L .8 1", 0.0, 1.0),
    "M": ("M .1 1 L .15 0 L .5 .6 L .85 0 L .9 1", 0.0, 1.0),
    "N": ("M .2 1 L .2 0 L .8 1 L .8 0", 0.0, 1.0),
    "O": (_OVAL, 0.0, 1.0),
    "P": (_P_BOWL, 0.0, 1.0),
    "Q": (_OVAL + " M .6 .75 L .9 1", 0.0, 1.0),
    "R": (_P_BOWL + " M .45 .55 L .85 1", 0.0, 1.0),
    "S": ("M .8 .12 Q .55 0 .3 .08 Q .1 .2 .25 .4 Q .5 .5 .75 .6 Q .9 .75 .75 .9 Q .5 1 .2 .88", 0.0, 1.0),
    "T": ("M .1 0 L .9 0 M .5 0 L .5 1", 0.0, 1.0),
    "U": ("M .2 0 L .2 .7 Q .2 1 .5 1 Q .8 1 .8 .7 L .8 0", 0.0, 1.0),
    "V": ("M .1 0 L .5 1 L .9 0", 0.0, 1.0),
    "W": ("M .05 0 L .27 1 L .5 .35 L .73 1 L .95 0", 0.0, 1.0),
    "X": ("M .15 0 L .85 1 M .85 0 L .15 1", 0.0, 1.0),
    "Y": ("M .1 0 L .5 .5 L .9 0 M .5 .5 L .5 1", 0.0, 1.0),
    "Z": ("M .15 0 L .85 0 L .15 1 L .85 1", 0.0, 1.0),
}

_DIGITS: dict[str, _TemplateSpec] = {
    "0": ("M .5 0 Q .85 0 .85 .5 Q .85 1 .5 1 Q .15 1 .15 .5 Q .15 0 .5 0", 0.0, 1.0),
    "1": ("M .3 .2 L .55 0 L .55 1", 0.0, 1.0),
    "2": ("M .2 .2 Q .4 0 .6 .05 Q .85 .15 .75 .4 L .2 1 L .85 1", 0.0, 1.0),
    "3": ("M .2 .1 Q .5 0 .7 .1 Q .85 .25 .65 .45 L .45 .48 Q .9 .55 .8 .8 Q .65 1 .2 .9", 0.0, 1.0),
    "4": ("M .7 1 L .7 0 L .15 .7 L .9 .7", 0.0, 1.0),
    "5": ("M .8 0 L .25 0 L .2 .45 Q .6 .35 .8 .6 Q .85 .95 .5 1 Q .3 1 .2 .9", 0.0, 1.0),
    "6": ("M .75 .05 Q .3 0 .2 .5 Q .15 1 .5 1 Q .85 1 .8 .7 Q .75 .45 .45 .5 Q .25 .55 .2 .7", 0.0, 1.0),
    "7": ("M .15 0 L .85 0 L .4 1", 0.0, 1.0),
    "8": (
        "M .5 .5 Q .15 .4 .2 .22 Q .3 0 .5 0 Q .7 0 .8 .22 Q .85 .4 .5 .5 "
        "Q .1 .6 .15 .8 Q .25 1 .5 1 Q .75 1 .85 .8 Q .9 .6 .5 .5",
        0.0,
        1.0,
    ),
    "9": ("M .8 .35 Q .75 .55 .5 .55 Q .15 .55 .2 .27 Q .25 0 .5 0 Q .85 0 .8 .35 L .7 1", 0.0, 1.0),
}

_PUNCTUATION: dict[str, _TemplateSpec] = {
    ".": ("M .5 .2 L .5 .8", 0.85, 1.0),
    ",": ("M .55 0 Q .6 .5 .3 1", 0.85, 1.2),
    "!": ("M .5 0 L .5 .7 M .5 .9 L .5 1", 0.0, 1.0),
    "?": ("M .2 .2 Q .3 0 .55 0 Q .85 .05 .8 .3 Q .7 .5 .5 .55 L .5 .75 M .5 .92 L .5 1", 0.0, 1.0),
    "'": ("M .5 0 L .45 1", 0.0, 0.3),
    '"': ("M .35 0 L .3 1 M .65 0 L .6 1", 0.0, 0.3),
    "-": ("M .1 .5 L .9 .5", 0.6, 0.7),
    ":": ("M .5 0 L .5 .12 M .5 .88 L .5 1", 0.5, 1.0),
    ";": ("M .5 0 L .5 .12 M .55 .7 Q .6 .85 .35 1", 0.5, 1.2),
    "(": ("M .7 0 Q .2 .5 .7 1", 0.0, 1.2),
    ")": ("M .3 0 Q .8 .5 .3 1", 0.0, 1.2),
    "/": ("M .85 0 L .15 1", 0.0, 1.0),
}

_CLASS_FALLBACKS: dict[CharacterClass, _TemplateSpec] = {
    CharacterClass.LOWERCASE: ("M .2 .9 Q .5 .1 .8 .9", 0.5, 1.0),
    CharacterClass.UPPERCASE: ("M .5 0 L .5 1", 0.0, 1.0),
    CharacterClass.DIGIT: ("M .1 .5 L .9 .5", 0.0, 1.0),
    CharacterClass.PUNCTUATION: ("M .5 .3 L .5 .7", 0.85, 1.0),
}

_GENERIC: _TemplateSpec = ("M .2 .8 Q .5 .2 .8 .8", 0.5, 1.0)

# Cursive connectors, in the unit box of an x-height glyph
_ENTRY: _TemplateSpec = ("M -.2 1 Q 0 .95 .2 .6", 0.5, 1.0)
_EXIT: _TemplateSpec = ("M .8 .9 Q .95 1 1.15 .8", 0.5, 1.0)


class GlyphCatalog:
    """Read-only mapping from characters to glyph templates.

    Lookup order is exact character, then character class, then the generic
    fallback, so lookup always returns a template.
    """

    def __init__(
        self,
        templates: Mapping[str, GlyphTemplate],
        class_templates: Mapping[CharacterClass, GlyphTemplate],
        fallback: GlyphTemplate,
        entry_connector: GlyphTemplate | None = None,
        exit_connector: GlyphTemplate | None = None,
    ) -> None:
        if not templates:
            raise EmptyCatalogError()
        self._templates = MappingProxyType(dict(templates))
        self._class_templates = MappingProxyType(dict(class_templates))
        self._fallback = fallback
        self.entry_connector = entry_connector
        self.exit_connector = exit_connector

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, char: object) -> bool:
        return char in self._templates

    def __iter__(self) -> Iterator[str]:
        return iter(self._templates)

    @property
    def fallback(self) -> GlyphTemplate:
        """Template used when neither the character nor its class is known."""
        return self._fallback

    def lookup(self, char: str) -> GlyphTemplate:
        """Get the template for a character.

        Args:
            char: Single character

        Returns:
            Exact template, class template or the generic fallback
        """
        template = self._templates.get(char)
        if template is not None:
            return template
        template = self._class_templates.get(character_class(char))
        if template is not None:
            return template
        return self._fallback

    @classmethod
    def from_specs(
        cls,
        specs: Mapping[str, _TemplateSpec],
        class_specs: Mapping[CharacterClass, _TemplateSpec] | None = None,
        fallback: _TemplateSpec = _GENERIC,
    ) -> "GlyphCatalog":
        """Build a catalog from (svg_path, top, bottom) specs.

        Raises:
            EmptyCatalogError: If specs is empty
        """
        templates = {
            char: GlyphTemplate.from_svg(char, path, top, bottom)
            for char, (path, top, bottom) in specs.items()
        }
        class_templates = {
            klass: GlyphTemplate.from_svg(klass.value, path, top, bottom)
            for klass, (path, top, bottom) in (class_specs or {}).items()
        }
        return cls(
            templates,
            class_templates,
            GlyphTemplate.from_svg("generic", *fallback),
            entry_connector=GlyphTemplate.from_svg("entry", *_ENTRY),
            exit_connector=GlyphTemplate.from_svg("exit", *_EXIT),
        )


@lru_cache(maxsize=1)
def default_catalog() -> GlyphCatalog:
    """Get the built-in catalog (letters, digits and common punctuation)."""
    specs = {**_LOWERCASE, **_UPPERCASE, **_DIGITS, **_PUNCTUATION}
    return GlyphCatalog.from_specs(specs, _CLASS_FALLBACKS)
