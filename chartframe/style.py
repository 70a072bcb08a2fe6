from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Literal

from chartframe.errors import InvalidOptionError
from chartframe.rotation import RotationStyle
from chartframe.scales import ScaleOptions
from chartframe.text import TextStyle


ValueLabelSide = Literal["none", "left", "right", "bottom", "top"]
TickPlacement = Literal["window", "axis"]
LegendPlacement = Literal["inside", "outside_right", "outside_left", "outside_top", "outside_bottom", "somewhere", "nowhere"]

_X_SIDES = ("none", "bottom", "top")
_Y_SIDES = ("none", "left", "right")
_PLACEMENTS = ("inside", "outside_right", "outside_left", "outside_top", "outside_bottom", "somewhere", "nowhere")


@dataclass(frozen=True)
class AxisStyle:
    label: str = ""
    label_on: bool = True
    label_font: TextStyle = field(default_factory=lambda: TextStyle(font_size=14.0))
    value_font: TextStyle = field(default_factory=TextStyle)
    label_rotation: RotationStyle = RotationStyle.HORIZONTAL
    value_labels_side: ValueLabelSide = "none"
    ticks_on: TickPlacement = "window"
    major_tick_length: float = 5.0
    minor_tick_length: float = 2.0
    minor_per_major: int = 4
    low_ticks: bool = True
    high_ticks: bool = False
    axis_line_on: bool = True
    major_grid: bool = False
    minor_grid: bool = False
    value_precision: int | None = None
    scale: ScaleOptions = field(default_factory=ScaleOptions)
    range: tuple[float, float] | None = None
    major_interval: float | None = None
    autoscale: bool = True

    def validate(self, axis: Literal["x", "y"]) -> None:
        sides = _X_SIDES if axis == "x" else _Y_SIDES
        if self.value_labels_side not in sides:
            raise InvalidOptionError(f"{axis} value labels must be on one of {sides}, got {self.value_labels_side!r}")
        if self.ticks_on not in ("window", "axis"):
            raise InvalidOptionError(f"ticks_on must be 'window' or 'axis', got {self.ticks_on!r}")
        if self.major_tick_length < 0 or self.minor_tick_length < 0:
            raise InvalidOptionError("tick lengths must be >= 0")
        if self.minor_per_major < 0:
            raise InvalidOptionError("minor_per_major must be >= 0")
        if self.major_interval is not None and not (math.isfinite(self.major_interval) and self.major_interval > 0):
            raise InvalidOptionError(f"{axis} major interval must be > 0")

    @property
    def tick_space(self) -> float:
        return max(self.major_tick_length, self.minor_tick_length)

    @property
    def shows_label(self) -> bool:
        return self.label_on and bool(self.label)


@dataclass(frozen=True)
class LegendEntry:
    title: str
    has_line: bool = True
    has_marker: bool = True


@dataclass(frozen=True)
class LegendStyle:
    on: bool = False
    placement: LegendPlacement = "outside_right"
    header: str = ""
    font: TextStyle = field(default_factory=TextStyle)
    lines: bool = True
    marker_size: float = 5.0
    position: tuple[float, float] | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.placement not in _PLACEMENTS:
            raise InvalidOptionError(f"unknown legend placement: {self.placement!r}")
        if self.placement == "somewhere" and self.position is None:
            raise InvalidOptionError("legend placement 'somewhere' needs a position")


@dataclass(frozen=True)
class PlotStyle:
    title: str = ""
    title_on: bool = True
    title_font: TextStyle = field(default_factory=lambda: TextStyle(font_size=16.0))
    border_width: float = 2.0
    border_margin: float = 3.0
    text_margin: float = 2.0
    x_axis: AxisStyle = field(default_factory=lambda: AxisStyle(value_labels_side="bottom"))
    y_axis: AxisStyle = field(default_factory=lambda: AxisStyle(value_labels_side="left"))
    legend: LegendStyle = field(default_factory=LegendStyle)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.border_width < 0 or self.border_margin < 0 or self.text_margin < 0:
            raise InvalidOptionError("border and text margins must be >= 0")
        self.x_axis.validate("x")
        self.y_axis.validate("y")
        self.legend.validate()

    @property
    def shows_title(self) -> bool:
        return self.title_on and bool(self.title)
