from __future__ import annotations

from enum import Enum
import math
from typing import Literal, NamedTuple

from chartframe.errors import InvalidOptionError


Anchor = Literal["start", "middle", "end"]
AxisName = Literal["x", "y"]
LabelSide = Literal["left", "right", "bottom", "top"]
SpaceCategory = Literal["horizontal", "vertical", "diagonal"]

SIN45 = math.sin(math.radians(45.0))
VERTICAL_LABEL_SPACE = 1.2
HORIZONTAL_X_LABEL_SPACE = 1.5


class RotationStyle(str, Enum):
    HORIZONTAL = "horizontal"
    SLOPEUP = "slopeup"
    UPHILL = "uphill"
    STEEPUP = "steepup"
    UPWARD = "upward"
    BACKUP = "backup"
    LEFTWARD = "leftward"
    SLOPEDOWNHILL = "slopedownhill"
    DOWNHILL = "downhill"
    STEEPDOWN = "steepdown"
    DOWNWARD = "downward"
    BACKDOWN = "backdown"
    UPSIDEDOWN = "upsidedown"

    @property
    def angle(self) -> float:
        return _ANGLES[self]

    @property
    def category(self) -> SpaceCategory:
        a = abs(self.angle)
        if a in (0.0, 180.0):
            return "horizontal"
        if a == 90.0:
            return "vertical"
        return "diagonal"


_ANGLES: dict[RotationStyle, float] = {
    RotationStyle.HORIZONTAL: 0.0,
    RotationStyle.SLOPEUP: -30.0,
    RotationStyle.UPHILL: -45.0,
    RotationStyle.STEEPUP: -60.0,
    RotationStyle.UPWARD: -90.0,
    RotationStyle.BACKUP: -135.0,
    RotationStyle.LEFTWARD: -180.0,
    RotationStyle.SLOPEDOWNHILL: 30.0,
    RotationStyle.DOWNHILL: 45.0,
    RotationStyle.STEEPDOWN: 60.0,
    RotationStyle.DOWNWARD: 90.0,
    RotationStyle.BACKDOWN: 135.0,
    RotationStyle.UPSIDEDOWN: 180.0,
}


class LabelOffset(NamedTuple):
    """Label position relative to the outer end of a tick mark, in font sizes."""

    dx: float
    dy: float
    anchor: Anchor


def _pair(first: tuple[float, float, Anchor], second: tuple[float, float, Anchor]) -> tuple[LabelOffset, LabelOffset]:
    return LabelOffset(*first), LabelOffset(*second)


# (left, right) relative to the tick end; dy relative to the tick position.
_Y_OFFSETS: dict[RotationStyle, tuple[LabelOffset, LabelOffset]] = {
    RotationStyle.HORIZONTAL: _pair((-0.5, 0.2, "end"), (0.5, 0.2, "start")),
    RotationStyle.UPSIDEDOWN: _pair((-0.5, -0.1, "start"), (0.5, -0.1, "end")),
    RotationStyle.LEFTWARD: _pair((-0.5, -0.1, "start"), (0.5, -0.1, "end")),
    RotationStyle.SLOPEUP: _pair((-0.2, -0.2, "end"), (0.7, 0.2, "start")),
    RotationStyle.UPHILL: _pair((-0.2, -0.2, "end"), (0.7, 0.2, "start")),
    RotationStyle.STEEPUP: _pair((-0.5, -0.1, "middle"), (1.5, -0.1, "middle")),
    RotationStyle.UPWARD: _pair((-0.7, -0.1, "middle"), (1.5, -0.1, "middle")),
    RotationStyle.BACKUP: _pair((-0.7, 0.2, "start"), (0.2, -0.2, "end")),
    RotationStyle.SLOPEDOWNHILL: _pair((-0.7, 0.3, "end"), (0.1, -0.3, "start")),
    RotationStyle.DOWNHILL: _pair((-0.7, 0.3, "end"), (0.1, -0.3, "start")),
    RotationStyle.STEEPDOWN: _pair((-0.5, 0.3, "end"), (0.1, -0.3, "start")),
    RotationStyle.DOWNWARD: _pair((-1.2, -0.1, "middle"), (0.7, -0.1, "middle")),
    RotationStyle.BACKDOWN: _pair((-0.1, -0.3, "start"), (0.7, 0.3, "end")),
}

# (bottom, top); dx relative to the tick position, dy relative to the tick end.
_X_OFFSETS: dict[RotationStyle, tuple[LabelOffset, LabelOffset]] = {
    RotationStyle.HORIZONTAL: _pair((0.0, 1.3, "middle"), (0.0, -0.7, "middle")),
    RotationStyle.UPSIDEDOWN: _pair((0.0, 0.3, "middle"), (0.0, -1.1, "middle")),
    RotationStyle.LEFTWARD: _pair((0.0, 0.3, "middle"), (0.0, -1.1, "middle")),
    RotationStyle.SLOPEUP: _pair((0.5, SIN45, "end"), (0.5, -0.2, "start")),
    RotationStyle.UPHILL: _pair((0.5, SIN45, "end"), (0.5, -0.3, "start")),
    RotationStyle.STEEPUP: _pair((0.3, 0.6, "end"), (0.3, -0.4, "start")),
    RotationStyle.UPWARD: _pair((0.2, 0.6, "end"), (0.2, -0.5, "start")),
    RotationStyle.BACKUP: _pair((0.3, 0.7, "end"), (-0.5, -0.3, "start")),
    RotationStyle.SLOPEDOWNHILL: _pair((-0.3, 0.7, "start"), (-0.3, -0.3, "end")),
    RotationStyle.DOWNHILL: _pair((-0.3, 0.7, "start"), (-0.3, -0.3, "end")),
    RotationStyle.STEEPDOWN: _pair((-0.3, 0.5, "start"), (-0.3, -0.5, "end")),
    RotationStyle.DOWNWARD: _pair((-0.3, 0.5, "start"), (-0.3, -0.5, "end")),
    RotationStyle.BACKDOWN: _pair((0.3, 0.7, "start"), (0.3, -0.3, "end")),
}


def coerce_rotation(value: RotationStyle | str) -> RotationStyle:
    if isinstance(value, RotationStyle):
        return value
    try:
        return RotationStyle(str(value).strip().lower())
    except ValueError:
        raise InvalidOptionError(f"unknown label rotation: {value!r}") from None


def label_offset(rotation: RotationStyle, axis: AxisName, side: LabelSide) -> LabelOffset:
    if axis == "y":
        if side not in ("left", "right"):
            raise InvalidOptionError(f"y tick labels cannot sit on the {side} side")
        left, right = _Y_OFFSETS[rotation]
        return left if side == "left" else right
    if side not in ("bottom", "top"):
        raise InvalidOptionError(f"x tick labels cannot sit on the {side} side")
    bottom, top = _X_OFFSETS[rotation]
    return bottom if side == "bottom" else top


def label_space(rotation: RotationStyle, axis: AxisName, longest: float, font_size: float) -> float:
    """Space a column (y) or row (x) of tick value labels needs perpendicular to the axis."""
    category = rotation.category
    if category == "diagonal":
        return longest * SIN45
    if axis == "y":
        return longest if category == "horizontal" else font_size * VERTICAL_LABEL_SPACE
    return font_size * HORIZONTAL_X_LABEL_SPACE if category == "horizontal" else longest
