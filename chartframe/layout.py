from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
import logging
import math
from typing import Literal, Sequence

from chartframe.errors import DegenerateWindowError, InvalidOptionError
from chartframe.rotation import LabelSide, RotationStyle, label_offset, label_space
from chartframe.scales import AxisRange, AxisScale, format_ticks_for_axis
from chartframe.style import AxisStyle, LegendEntry, LegendStyle, PlotStyle
from chartframe.text import EstimatedTextMeasurer, TextMeasurer, TextStyle
from chartframe.transform import CoordinateTransform


LOGGER = logging.getLogger(__name__)

VALUE_LABEL_GAP = 0.5
X_END_LABEL_OVERHANG = 2.0
Y_END_LABEL_OVERHANG = 2.0
SMALL_OVERHANG = 0.5
LEGEND_LINE_HEIGHT = 1.5


class AxisPosition(str, Enum):
    BOTTOM = "bottom"
    TOP = "top"
    LEFT = "left"
    RIGHT = "right"
    CROSSES = "crosses"


@dataclass(frozen=True)
class PlotWindow:
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def center(self) -> tuple[float, float]:
        return ((self.left + self.right) / 2.0, (self.top + self.bottom) / 2.0)


@dataclass(frozen=True)
class Segment:
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True)
class TextPlacement:
    text: str
    x: float
    y: float
    anchor: Literal["start", "middle", "end"]
    rotation: float
    font_size: float


@dataclass(frozen=True)
class TickGeometry:
    value: float
    position: float
    major: bool
    mark: Segment | None
    label: TextPlacement | None = None
    grid: Segment | None = None


@dataclass(frozen=True)
class AxisGeometry:
    name: Literal["x", "y"]
    scale: AxisScale
    position: AxisPosition
    ticks_on: Literal["window", "axis"]
    line: Segment | None
    ticks: tuple[TickGeometry, ...]
    label: TextPlacement | None

    def major_ticks(self) -> tuple[TickGeometry, ...]:
        return tuple(t for t in self.ticks if t.major)

    def labels(self) -> tuple[TextPlacement, ...]:
        return tuple(t.label for t in self.ticks if t.label is not None)


@dataclass(frozen=True)
class LegendBox:
    x: float
    y: float
    width: float
    height: float
    placement: str
    header: TextPlacement | None
    entries: tuple[TextPlacement, ...]


@dataclass(frozen=True)
class Layout:
    canvas_width: float
    canvas_height: float
    window: PlotWindow
    transform: CoordinateTransform
    x_axis: AxisGeometry
    y_axis: AxisGeometry | None
    title: TextPlacement | None
    legend: LegendBox | None


@dataclass(frozen=True)
class _Box:
    left: float
    top: float
    right: float
    bottom: float


@dataclass(frozen=True)
class _AxisPlan:
    position: AxisPosition
    edge: AxisPosition
    label_side: LabelSide | None
    labels: tuple[str, ...]


class LayoutEngine:
    def __init__(self, measure: TextMeasurer | None = None) -> None:
        self._measure = measure if measure is not None else EstimatedTextMeasurer()

    def layout(
        self,
        width: float,
        height: float,
        x_scale: AxisScale,
        y_scale: AxisScale,
        style: PlotStyle,
        legend_entries: Sequence[LegendEntry] = (),
    ) -> Layout:
        if width <= 0 or height <= 0:
            raise InvalidOptionError("canvas width and height must be > 0")
        style.validate()

        box = self._border(width, height, style)
        box, title_baseline = self._reserve_title(box, style)
        box, x_label_baseline, y_label_baseline = self._reserve_axis_labels(box, style)
        box = self._reserve_end_label_overhang(box, style)
        box, legend_reserved = self._reserve_legend(box, style, legend_entries, width)

        x_plan = self._plan_axis("x", x_scale, style.x_axis, y_scale)
        y_plan = self._plan_axis("y", y_scale, style.y_axis, x_scale)
        box = self._reserve_value_labels(box, x_plan, y_plan, style)
        box = self._reserve_tick_marks(box, x_plan, y_plan, style)

        window = _window(width, height, box)
        transform = CoordinateTransform.from_window(
            left=window.left,
            top=window.top,
            right=window.right,
            bottom=window.bottom,
            x_range=x_scale.range,
            y_range=y_scale.range,
        )
        LOGGER.debug(
            "plot window left=%.2f top=%.2f right=%.2f bottom=%.2f",
            window.left,
            window.top,
            window.right,
            window.bottom,
        )

        x_axis = self._axis_geometry("x", x_scale, x_plan, y_plan, style.x_axis, style.y_axis, window, transform)
        y_axis = self._axis_geometry("y", y_scale, y_plan, x_plan, style.y_axis, style.x_axis, window, transform)
        x_axis = replace(x_axis, label=self._x_label(style.x_axis, window, x_label_baseline))
        y_axis = replace(y_axis, label=self._y_label(style.y_axis, window, y_label_baseline))

        legend = None
        if legend_reserved is not None:
            legend = self._place_legend(width, height, window, style.legend, legend_entries, legend_reserved)

        return Layout(
            canvas_width=float(width),
            canvas_height=float(height),
            window=window,
            transform=transform,
            x_axis=x_axis,
            y_axis=y_axis,
            title=_title(style, width, title_baseline),
            legend=legend,
        )

    def layout_1d(
        self,
        width: float,
        height: float,
        x_scale: AxisScale,
        style: PlotStyle,
        legend_entries: Sequence[LegendEntry] = (),
        *,
        axis_fraction: float = 0.5,
    ) -> Layout:
        """Lay out a plot with only an X axis, drawn across the plot window.

        ``axis_fraction`` is how far down the window the axis line sits: 0.5 is
        the middle, values near 1 leave room for labels that run upward. Data
        values map onto that line, so the transform sends y=0 to it. The
        Y axis style is ignored and no Y label or value space is reserved.
        """
        if width <= 0 or height <= 0:
            raise InvalidOptionError("canvas width and height must be > 0")
        if not (math.isfinite(axis_fraction) and 0.0 <= axis_fraction <= 1.0):
            raise InvalidOptionError(f"axis_fraction must be in [0, 1], got {axis_fraction!r}")
        style.validate()

        box = self._border(width, height, style)
        box, title_baseline = self._reserve_title(box, style)
        box, x_label_baseline, _ = self._reserve_axis_labels(box, style, with_y=False)
        box = self._reserve_end_label_overhang(box, style, with_y=False)
        box, legend_reserved = self._reserve_legend(box, style, legend_entries, width)

        window = _window(width, height, box)
        transform = CoordinateTransform.from_window(
            left=window.left,
            top=window.top,
            right=window.right,
            bottom=window.bottom,
            x_range=x_scale.range,
            y_range=AxisRange(axis_fraction - 1.0, axis_fraction),
        )
        LOGGER.debug("1-D plot window %s, axis line at y=%.2f", window, transform.y(0.0))

        axis = style.x_axis
        side = axis.value_labels_side
        labels: tuple[str, ...] = ()
        if side != "none":
            labels = tuple(format_ticks_for_axis(x_scale.major_values(), precision=axis.value_precision))
        x_plan = _AxisPlan(
            position=AxisPosition.CROSSES,
            edge=AxisPosition.CROSSES,
            label_side=None if side == "none" else side,
            labels=labels,
        )
        no_y = _AxisPlan(position=AxisPosition.LEFT, edge=AxisPosition.LEFT, label_side=None, labels=())
        x_axis = self._axis_geometry("x", x_scale, x_plan, no_y, axis, style.y_axis, window, transform)
        x_axis = replace(x_axis, label=self._x_label(axis, window, x_label_baseline))

        legend = None
        if legend_reserved is not None:
            legend = self._place_legend(width, height, window, style.legend, legend_entries, legend_reserved)

        return Layout(
            canvas_width=float(width),
            canvas_height=float(height),
            window=window,
            transform=transform,
            x_axis=x_axis,
            y_axis=None,
            title=_title(style, width, title_baseline),
            legend=legend,
        )

    def legend_size(self, legend: LegendStyle, entries: Sequence[LegendEntry]) -> tuple[float, float]:
        spacing = legend.font.font_size
        texts = [e.title for e in entries]
        if legend.header:
            texts.append(legend.header)
        longest = max((self._measure.width(t, legend.font) for t in texts), default=0.0)
        w = 2.0 * spacing + longest
        if legend.lines and any(e.has_line for e in entries):
            w += 1.5 * spacing
        if any(e.has_marker for e in entries):
            w += 1.5 * legend.marker_size
        h = 2.0 * spacing + len(entries) * spacing * LEGEND_LINE_HEIGHT
        if legend.header:
            h += 2.0 * legend.font.font_size
        return (w, h)

    @staticmethod
    def _border(width: float, height: float, style: PlotStyle) -> _Box:
        edge = style.border_width + style.border_margin
        return _Box(left=edge, top=edge, right=width - edge, bottom=height - edge)

    @staticmethod
    def _reserve_title(box: _Box, style: PlotStyle) -> tuple[_Box, float | None]:
        if not style.shows_title:
            return box, None
        fs = style.title_font.font_size
        band = fs * (style.text_margin + 0.5)
        baseline = box.top + fs * (0.5 * style.text_margin + 0.5)
        return replace(box, top=box.top + band), baseline

    @staticmethod
    def _reserve_axis_labels(box: _Box, style: PlotStyle, *, with_y: bool = True) -> tuple[_Box, float | None, float | None]:
        x_baseline = y_baseline = None
        if style.x_axis.shows_label:
            band = style.x_axis.label_font.font_size * style.text_margin
            x_baseline = box.bottom - 0.25 * band
            box = replace(box, bottom=box.bottom - band)
        if with_y and style.y_axis.shows_label:
            band = style.y_axis.label_font.font_size * style.text_margin
            y_baseline = box.left + 0.75 * band
            box = replace(box, left=box.left + band)
        return box, x_baseline, y_baseline

    @staticmethod
    def _reserve_end_label_overhang(box: _Box, style: PlotStyle, *, with_y: bool = True) -> _Box:
        x, y = style.x_axis, style.y_axis
        if x.value_labels_side != "none":
            factor = X_END_LABEL_OVERHANG if x.label_rotation.category == "horizontal" else SMALL_OVERHANG
            inset = max(factor * x.value_font.font_size, style.border_margin)
            box = replace(box, left=box.left + inset, right=box.right - inset)
        if with_y and y.value_labels_side != "none":
            factor = Y_END_LABEL_OVERHANG if y.label_rotation.category == "vertical" else SMALL_OVERHANG
            inset = max(factor * y.value_font.font_size, style.border_margin)
            box = replace(box, top=box.top + inset, bottom=box.bottom - inset)
        return box

    def _reserve_legend(
        self,
        box: _Box,
        style: PlotStyle,
        entries: Sequence[LegendEntry],
        width: float,
    ) -> tuple[_Box, tuple[float, float, float, float] | None]:
        legend = style.legend
        if not legend.on or legend.placement == "nowhere" or not (entries or legend.header):
            return box, None
        w, h = self.legend_size(legend, entries)
        gap = legend.font.font_size
        x = y = 0.0
        if legend.placement == "outside_right":
            x, y = box.right - w, box.top
            box = replace(box, right=box.right - w - gap)
        elif legend.placement == "outside_left":
            x, y = box.left, box.top
            box = replace(box, left=box.left + w + gap)
        elif legend.placement == "outside_top":
            x, y = (width - w) / 2.0, box.top
            box = replace(box, top=box.top + h + gap)
        elif legend.placement == "outside_bottom":
            x, y = (width - w) / 2.0, box.bottom - h
            box = replace(box, bottom=box.bottom - h - gap)
        return box, (x, y, w, h)

    def _plan_axis(self, name: Literal["x", "y"], scale: AxisScale, axis: AxisStyle, other: AxisScale) -> _AxisPlan:
        low_edge, high_edge = (AxisPosition.BOTTOM, AxisPosition.TOP) if name == "x" else (AxisPosition.LEFT, AxisPosition.RIGHT)
        if other.range.min >= 0.0:
            position = low_edge
        elif other.range.max <= 0.0:
            position = high_edge
        else:
            position = AxisPosition.CROSSES

        side = axis.value_labels_side
        if axis.ticks_on == "window":
            edge = AxisPosition(side) if side != "none" else (position if position != AxisPosition.CROSSES else low_edge)
        else:
            edge = position

        if side == "none":
            label_side: LabelSide | None = None
        elif edge == AxisPosition.CROSSES:
            label_side = side
        else:
            label_side = edge.value  # type: ignore[assignment]

        labels: tuple[str, ...] = ()
        if label_side is not None:
            labels = tuple(format_ticks_for_axis(scale.major_values(), precision=axis.value_precision))
        return _AxisPlan(position=position, edge=edge, label_side=label_side, labels=labels)

    def _reserve_value_labels(self, box: _Box, x_plan: _AxisPlan, y_plan: _AxisPlan, style: PlotStyle) -> _Box:
        for name, plan, axis in (("x", x_plan, style.x_axis), ("y", y_plan, style.y_axis)):
            if plan.label_side is None or plan.edge == AxisPosition.CROSSES or not plan.labels:
                continue
            space = self.value_label_space(name, axis.label_rotation, plan.labels, axis.value_font)
            space += VALUE_LABEL_GAP * axis.value_font.font_size
            box = _shrink(box, plan.edge, space)
        return box

    @staticmethod
    def _reserve_tick_marks(box: _Box, x_plan: _AxisPlan, y_plan: _AxisPlan, style: PlotStyle) -> _Box:
        for plan, axis in ((x_plan, style.x_axis), (y_plan, style.y_axis)):
            if plan.edge == AxisPosition.CROSSES:
                continue
            outward = axis.low_ticks if plan.edge in (AxisPosition.BOTTOM, AxisPosition.LEFT) else axis.high_ticks
            if outward:
                box = _shrink(box, plan.edge, axis.tick_space)
        return box

    def value_label_space(
        self,
        axis: Literal["x", "y"],
        rotation: RotationStyle,
        labels: Sequence[str],
        font: TextStyle,
    ) -> float:
        longest = max((self._measure.width(text, font) for text in labels), default=0.0)
        return label_space(rotation, axis, longest, font.font_size)

    def _axis_geometry(
        self,
        name: Literal["x", "y"],
        scale: AxisScale,
        plan: _AxisPlan,
        other_plan: _AxisPlan,
        axis: AxisStyle,
        other_axis: AxisStyle,
        window: PlotWindow,
        transform: CoordinateTransform,
    ) -> AxisGeometry:
        if name == "x":
            line_at = {AxisPosition.BOTTOM: window.bottom, AxisPosition.TOP: window.top}
            along = transform.x
            across_zero = transform.y(0.0)
        else:
            line_at = {AxisPosition.LEFT: window.left, AxisPosition.RIGHT: window.right}
            along = transform.y
            across_zero = transform.x(0.0)
        axis_at = line_at.get(plan.position, across_zero)
        tick_at = line_at.get(plan.edge, across_zero)

        line = None
        if axis.axis_line_on:
            line = _segment(name, axis_at, window)

        suppress_zero = (
            plan.edge == AxisPosition.CROSSES
            and other_plan.position == AxisPosition.CROSSES
            and other_axis.axis_line_on
        )
        low_len = axis.major_tick_length if axis.low_ticks else 0.0
        high_len = axis.major_tick_length if axis.high_ticks else 0.0
        fs = axis.value_font.font_size
        rotation = axis.label_rotation

        ticks: list[TickGeometry] = []
        for value, text in zip(scale.major_values().tolist(), plan.labels or _blank(scale), strict=False):
            pos = along(value)
            if not _within(name, pos, window):
                continue
            label = None
            if plan.label_side is not None and not (suppress_zero and value == 0.0):
                offset = label_offset(rotation, name, plan.label_side)
                if name == "x":
                    end = tick_at + low_len if plan.label_side == "bottom" else tick_at - high_len
                    lx, ly = pos + offset.dx * fs, end + offset.dy * fs
                else:
                    end = tick_at - low_len if plan.label_side == "left" else tick_at + high_len
                    lx, ly = end + offset.dx * fs, pos + offset.dy * fs
                label = TextPlacement(
                    text=text,
                    x=lx,
                    y=ly,
                    anchor=offset.anchor,
                    rotation=rotation.angle,
                    font_size=fs,
                )
            ticks.append(
                TickGeometry(
                    value=value,
                    position=pos,
                    major=True,
                    mark=_tick_mark(name, pos, tick_at, low_len, high_len),
                    label=label,
                    grid=_segment(name, pos, window, across=True) if axis.major_grid else None,
                )
            )

        if axis.minor_per_major > 0:
            low_minor = axis.minor_tick_length if axis.low_ticks else 0.0
            high_minor = axis.minor_tick_length if axis.high_ticks else 0.0
            for value in scale.minor_values(axis.minor_per_major).tolist():
                pos = along(value)
                if not _within(name, pos, window):
                    continue
                ticks.append(
                    TickGeometry(
                        value=value,
                        position=pos,
                        major=False,
                        mark=_tick_mark(name, pos, tick_at, low_minor, high_minor),
                        grid=_segment(name, pos, window, across=True) if axis.minor_grid else None,
                    )
                )
        ticks.sort(key=lambda t: t.value)

        return AxisGeometry(
            name=name,
            scale=scale,
            position=plan.position,
            ticks_on=axis.ticks_on,
            line=line,
            ticks=tuple(ticks),
            label=None,
        )

    @staticmethod
    def _x_label(axis: AxisStyle, window: PlotWindow, baseline: float | None) -> TextPlacement | None:
        if baseline is None:
            return None
        return TextPlacement(
            text=axis.label,
            x=window.center[0],
            y=baseline,
            anchor="middle",
            rotation=0.0,
            font_size=axis.label_font.font_size,
        )

    @staticmethod
    def _y_label(axis: AxisStyle, window: PlotWindow, baseline: float | None) -> TextPlacement | None:
        if baseline is None:
            return None
        return TextPlacement(
            text=axis.label,
            x=baseline,
            y=window.center[1],
            anchor="middle",
            rotation=RotationStyle.UPWARD.angle,
            font_size=axis.label_font.font_size,
        )

    def _place_legend(
        self,
        width: float,
        height: float,
        window: PlotWindow,
        legend: LegendStyle,
        entries: Sequence[LegendEntry],
        reserved: tuple[float, float, float, float],
    ) -> LegendBox:
        x, y, w, h = reserved
        fs = legend.font.font_size
        if legend.placement == "inside":
            x, y = window.left + fs, window.top + fs
        elif legend.placement == "somewhere":
            if legend.position is None:
                raise InvalidOptionError("legend placement 'somewhere' needs a position")
            x, y = legend.position
        if x < 0 or y < 0 or x + w > width or y + h > height:
            LOGGER.warning(
                "legend box (%.1f, %.1f, %.1f x %.1f) extends outside the %sx%s canvas",
                x,
                y,
                w,
                h,
                width,
                height,
            )

        text_x = x + fs
        if legend.lines and any(e.has_line for e in entries):
            text_x += 1.5 * fs
        if any(e.has_marker for e in entries):
            text_x += 1.5 * legend.marker_size
        row = y + fs
        header = None
        if legend.header:
            header = TextPlacement(text=legend.header, x=x + w / 2.0, y=row + fs, anchor="middle", rotation=0.0, font_size=fs)
            row += 2.0 * fs
        placed = []
        for entry in entries:
            row += fs * LEGEND_LINE_HEIGHT
            placed.append(TextPlacement(text=entry.title, x=text_x, y=row - 0.3 * fs, anchor="start", rotation=0.0, font_size=fs))
        return LegendBox(
            x=x,
            y=y,
            width=w,
            height=h,
            placement=legend.placement,
            header=header,
            entries=tuple(placed),
        )


def _window(width: float, height: float, box: _Box) -> PlotWindow:
    if box.right <= box.left or box.bottom <= box.top:
        raise DegenerateWindowError(
            f"no room left for the plot window in a {width}x{height} canvas "
            f"(left={box.left:.1f} right={box.right:.1f} top={box.top:.1f} bottom={box.bottom:.1f})"
        )
    return PlotWindow(left=box.left, top=box.top, right=box.right, bottom=box.bottom)


def _title(style: PlotStyle, width: float, baseline: float | None) -> TextPlacement | None:
    if not style.shows_title or baseline is None:
        return None
    return TextPlacement(
        text=style.title,
        x=width / 2.0,
        y=baseline,
        anchor="middle",
        rotation=0.0,
        font_size=style.title_font.font_size,
    )


def _shrink(box: _Box, edge: AxisPosition, amount: float) -> _Box:
    if edge == AxisPosition.BOTTOM:
        return replace(box, bottom=box.bottom - amount)
    if edge == AxisPosition.TOP:
        return replace(box, top=box.top + amount)
    if edge == AxisPosition.LEFT:
        return replace(box, left=box.left + amount)
    return replace(box, right=box.right - amount)


def _segment(name: str, at: float, window: PlotWindow, *, across: bool = False) -> Segment:
    horizontal = (name == "x") != across
    if horizontal:
        return Segment(window.left, at, window.right, at)
    return Segment(at, window.top, at, window.bottom)


def _tick_mark(name: str, pos: float, at: float, low: float, high: float) -> Segment | None:
    if low <= 0 and high <= 0:
        return None
    if name == "x":
        return Segment(pos, at - high, pos, at + low)
    return Segment(at - low, pos, at + high, pos)


def _within(name: str, pos: float, window: PlotWindow) -> bool:
    slack = 1e-6
    if name == "x":
        return window.left - slack <= pos <= window.right + slack
    return window.top - slack <= pos <= window.bottom + slack


def _blank(scale: AxisScale) -> list[str]:
    return [""] * scale.major_values().size
