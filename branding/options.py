"""Parsing of the loosely-typed form options into a transform plan.

Enum-valued options are forgiving: anything unrecognised (wrong case, a typo,
or no value at all) quietly falls back to the documented default. Only the
size options can make a request fail.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from .errors import SIZE_BOTH_OR_NEITHER, SIZE_OUT_OF_RANGE, BadRequest

MIN_DIMENSION = 1
MAX_DIMENSION = 16384

_INT_RE = re.compile(r"[+-]?(0|[1-9][0-9]*)")


class _ParsableEnum(Enum):
    @classmethod
    def parse_or_default(cls, raw: Any):
        """Member whose value is ``raw``, or the default chosen by ``_missing_``."""
        return cls(raw)


class Color(_ParsableEnum):
    BLACK = "black"
    WHITE = "white"

    @classmethod
    def _missing_(cls, value):
        return cls.BLACK

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return (255, 255, 255) if self is Color.WHITE else (0, 0, 0)


class TextSize(_ParsableEnum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    @classmethod
    def _missing_(cls, value):
        return cls.MEDIUM

    @property
    def points(self) -> int:
        return {"small": 20, "medium": 30, "large": 40}[self.value]


class Anchor(_ParsableEnum):
    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"

    @classmethod
    def _missing_(cls, value):
        return cls.BOTTOM_RIGHT


def _present(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _parse_dimension(value: str) -> Optional[int]:
    value = value.strip()
    if not _INT_RE.fullmatch(value):
        return None
    number = int(value)
    if MIN_DIMENSION <= number <= MAX_DIMENSION:
        return number
    return None


def parse_size(width: Any, height: Any) -> Optional[Tuple[int, int]]:
    """Validate the optional ``width``/``height`` pair.

    Args:
        width: Raw form value for the width, or ``None``.
        height: Raw form value for the height, or ``None``.

    Returns:
        ``(width, height)`` when both are set, ``None`` when both are empty.

    Raises:
        BadRequest: If only one of them is set, or either is not an integer
            between 1 and 16384.
    """
    has_width, has_height = _present(width), _present(height)
    if has_width != has_height:
        raise BadRequest(SIZE_BOTH_OR_NEITHER)
    if not has_width:
        return None
    parsed_width = _parse_dimension(width)
    parsed_height = _parse_dimension(height)
    if parsed_width is None or parsed_height is None:
        raise BadRequest(SIZE_OUT_OF_RANGE)
    return parsed_width, parsed_height


@dataclass(frozen=True)
class TransformOptions:
    size: Optional[Tuple[int, int]] = None
    darken: bool = False
    text: Optional[str] = None
    text_color: Color = Color.BLACK
    text_size: TextSize = TextSize.MEDIUM
    logo_color: Color = Color.BLACK
    logo_position: Anchor = Anchor.BOTTOM_RIGHT

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "TransformOptions":
        text = form.get("text")
        return cls(
            size=parse_size(form.get("width"), form.get("height")),
            darken=form.get("darken") == "true",
            text=text if isinstance(text, str) and text != "" else None,
            text_color=Color.parse_or_default(form.get("textcolor")),
            text_size=TextSize.parse_or_default(form.get("textsize")),
            logo_color=Color.parse_or_default(form.get("logocolor")),
            logo_position=Anchor.parse_or_default(form.get("logoposition")),
        )
