from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging
import math
from typing import Any, Literal

import numpy as np

from chartframe import limits
from chartframe.adapters.normalize import SeriesData, normalize_1d, normalize_values, normalize_xy
from chartframe.errors import InvalidOptionError, PlotDataError
from chartframe.layout import Layout, LayoutEngine
from chartframe.limits import LimitScan
from chartframe.rotation import RotationStyle, coerce_rotation
from chartframe.scales import AxisRange, AxisScale, Autoscaled, explicit_scale, scale_scan
from chartframe.style import AxisStyle, LegendEntry, LegendPlacement, PlotStyle, TickPlacement
from chartframe.text import TextMeasurer, TextStyle


LOGGER = logging.getLogger(__name__)

DEFAULT_RANGE = (-10.0, 10.0)


@dataclass(frozen=True)
class Series:
    data: SeriesData
    title: str = ""
    x_uncertainty: np.ndarray | None = None
    y_uncertainty: np.ndarray | None = None
    line: bool = True
    marker: bool = True


@dataclass(frozen=True)
class SeriesGeometry:
    title: str
    x: tuple[float, ...]
    y: tuple[float, ...]
    excluded: int


@dataclass(frozen=True)
class ChartGeometry:
    layout: Layout
    series: tuple[SeriesGeometry, ...]
    x_autoscale: Autoscaled | None = None
    y_autoscale: Autoscaled | None = None


@dataclass
class Plot:
    width: int = 500
    height: int = 350
    style: PlotStyle = field(default_factory=PlotStyle)
    measure: TextMeasurer | None = None
    dimensions: Literal[1, 2] = 2
    axis_fraction: float = 0.5

    _series: list[Series] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be > 0")
        if self.dimensions not in (1, 2):
            raise InvalidOptionError(f"dimensions must be 1 or 2, got {self.dimensions!r}")
        self.set_axis_fraction(self.axis_fraction)

    def series(
        self,
        y: Any,
        *,
        x: Any = None,
        title: str = "",
        x_uncertainty: Any = None,
        y_uncertainty: Any = None,
        line: bool = True,
        marker: bool = True,
    ) -> "Plot":
        if self.dimensions == 1:
            raise InvalidOptionError("a 1-D plot takes values(), not x/y series")
        normalized = normalize_xy(y, x=x, source_name=title or None)
        self._series.append(
            Series(
                data=normalized,
                title=title,
                x_uncertainty=self._uncertainty(x_uncertainty, normalized.x, "x_uncertainty"),
                y_uncertainty=self._uncertainty(y_uncertainty, normalized.y, "y_uncertainty"),
                line=line,
                marker=marker,
            )
        )
        return self

    def values(self, values: Any, *, title: str = "", uncertainty: Any = None, marker: bool = True) -> "Plot":
        if self.dimensions != 1:
            raise InvalidOptionError("values() needs a 1-D plot; use series() for x/y data")
        normalized = normalize_1d(values, source_name=title or None)
        self._series.append(
            Series(
                data=normalized,
                title=title,
                x_uncertainty=self._uncertainty(uncertainty, normalized.x, "uncertainty"),
                line=False,
                marker=marker,
            )
        )
        return self

    def set_axis_fraction(self, fraction: float) -> "Plot":
        if not (math.isfinite(fraction) and 0.0 <= fraction <= 1.0):
            raise InvalidOptionError(f"axis_fraction must be in [0, 1], got {fraction!r}")
        self.axis_fraction = float(fraction)
        return self

    def clear_series(self) -> "Plot":
        self._series.clear()
        return self

    def set_title(self, title: str, *, font_size: float | None = None, on: bool = True) -> "Plot":
        font = self.style.title_font if font_size is None else replace(self.style.title_font, font_size=font_size)
        return self._restyle(title=title, title_on=on, title_font=font)

    def set_border(self, *, width: float | None = None, margin: float | None = None) -> "Plot":
        return self._restyle(
            border_width=self.style.border_width if width is None else width,
            border_margin=self.style.border_margin if margin is None else margin,
        )

    def set_ranges(self, *, x: tuple[float, float] | None = None, y: tuple[float, float] | None = None) -> "Plot":
        for name, value in (("x", x), ("y", y)):
            if value is not None:
                axis = AxisRange(float(value[0]), float(value[1]))
                self._axis(name, range=(axis.min, axis.max), autoscale=False)
        return self

    def set_major_intervals(self, *, x: float | None = None, y: float | None = None) -> "Plot":
        if x is not None and x <= 0:
            raise ValueError("x major interval must be > 0")
        if y is not None and y <= 0:
            raise ValueError("y major interval must be > 0")
        for name, value in (("x", x), ("y", y)):
            if value is not None:
                self._axis(name, major_interval=float(value))
        return self

    def set_min_ticks(self, *, x: int | None = None, y: int | None = None) -> "Plot":
        return self._scale_options(x=x, y=y, key="min_ticks")

    def set_tight(self, *, x: float | None = None, y: float | None = None) -> "Plot":
        return self._scale_options(x=x, y=y, key="tight")

    def set_steps(self, *, x: int | None = None, y: int | None = None) -> "Plot":
        return self._scale_options(x=x, y=y, key="steps")

    def set_include_zero(self, *, x: bool | None = None, y: bool | None = None) -> "Plot":
        return self._scale_options(x=x, y=y, key="origin")

    def set_autoscale(
        self,
        *,
        x: bool | None = None,
        y: bool | None = None,
        check_limits: bool | None = None,
        plus_minus: float | None = None,
    ) -> "Plot":
        for name, value in (("x", x), ("y", y)):
            if value is not None:
                self._axis(name, autoscale=value)
        if check_limits is not None:
            self._scale_options(x=check_limits, y=check_limits, key="check_limits")
        if plus_minus is not None:
            self._scale_options(x=plus_minus, y=plus_minus, key="plus_minus")
        return self

    def set_label_rotation(self, *, x: RotationStyle | str | None = None, y: RotationStyle | str | None = None) -> "Plot":
        for name, value in (("x", x), ("y", y)):
            if value is not None:
                self._axis(name, label_rotation=coerce_rotation(value))
        return self

    def set_value_label_sides(self, *, x: str | None = None, y: str | None = None) -> "Plot":
        for name, value in (("x", x), ("y", y)):
            if value is not None:
                self._axis(name, value_labels_side=value)
        return self

    def set_value_fonts(self, *, x: TextStyle | None = None, y: TextStyle | None = None) -> "Plot":
        for name, value in (("x", x), ("y", y)):
            if value is not None:
                self._axis(name, value_font=value)
        return self

    def set_value_precision(self, *, x: int | None = None, y: int | None = None) -> "Plot":
        for name, value in (("x", x), ("y", y)):
            if value is not None:
                self._axis(name, value_precision=value)
        return self

    def set_tick_placement(self, *, x: TickPlacement | None = None, y: TickPlacement | None = None) -> "Plot":
        for name, value in (("x", x), ("y", y)):
            if value is not None:
                self._axis(name, ticks_on=value)
        return self

    def set_tick_marks(
        self,
        axis: Literal["x", "y"],
        *,
        major_length: float | None = None,
        minor_length: float | None = None,
        minor_per_major: int | None = None,
        low: bool | None = None,
        high: bool | None = None,
    ) -> "Plot":
        current = self._axis_style(axis)
        return self._axis(
            axis,
            major_tick_length=current.major_tick_length if major_length is None else major_length,
            minor_tick_length=current.minor_tick_length if minor_length is None else minor_length,
            minor_per_major=current.minor_per_major if minor_per_major is None else minor_per_major,
            low_ticks=current.low_ticks if low is None else low,
            high_ticks=current.high_ticks if high is None else high,
        )

    def set_grid(self, axis: Literal["x", "y"], *, major: bool = True, minor: bool = False) -> "Plot":
        return self._axis(axis, major_grid=major, minor_grid=minor)

    def set_axis_lines(self, *, x: bool | None = None, y: bool | None = None) -> "Plot":
        for name, value in (("x", x), ("y", y)):
            if value is not None:
                self._axis(name, axis_line_on=value)
        return self

    def set_axis_labels(self, *, x: str | None = None, y: str | None = None, on: bool = True) -> "Plot":
        for name, value in (("x", x), ("y", y)):
            if value is not None:
                self._axis(name, label=value, label_on=on)
        return self

    def set_legend(
        self,
        *,
        on: bool = True,
        placement: LegendPlacement | None = None,
        header: str | None = None,
        position: tuple[float, float] | None = None,
    ) -> "Plot":
        legend = replace(
            self.style.legend,
            on=on,
            placement=self.style.legend.placement if placement is None else placement,
            header=self.style.legend.header if header is None else header,
            position=self.style.legend.position if position is None else position,
        )
        return self._restyle(legend=legend)

    def render(self) -> ChartGeometry:
        if self.dimensions == 1:
            return self._render_1d()
        style = self.style
        x_auto = y_auto = None
        if self._series and (style.x_axis.autoscale or style.y_axis.autoscale):
            x_found, y_found = self._scan_series()
            if style.x_axis.autoscale:
                x_auto = Autoscaled(scale=scale_scan(x_found, style.x_axis.scale), scan=x_found)
            if style.y_axis.autoscale:
                y_auto = Autoscaled(scale=scale_scan(y_found, style.y_axis.scale), scan=y_found)

        x_scale = self._resolve_scale(style.x_axis, x_auto)
        y_scale = self._resolve_scale(style.y_axis, y_auto)
        layout = LayoutEngine(self.measure).layout(self.width, self.height, x_scale, y_scale, style, self._legend_entries())
        return ChartGeometry(layout=layout, series=self._project(layout), x_autoscale=x_auto, y_autoscale=y_auto)

    def _render_1d(self) -> ChartGeometry:
        style = self.style
        x_auto = None
        if self._series and style.x_axis.autoscale:
            found = self._scan_values()
            x_auto = Autoscaled(scale=scale_scan(found, style.x_axis.scale), scan=found)
        x_scale = self._resolve_scale(style.x_axis, x_auto)
        layout = LayoutEngine(self.measure).layout_1d(
            self.width,
            self.height,
            x_scale,
            style,
            self._legend_entries(),
            axis_fraction=self.axis_fraction,
        )
        return ChartGeometry(layout=layout, series=self._project(layout), x_autoscale=x_auto)

    def _legend_entries(self) -> list[LegendEntry]:
        return [LegendEntry(title=s.title or f"series {i + 1}", has_line=s.line, has_marker=s.marker) for i, s in enumerate(self._series)]

    def _project(self, layout: Layout) -> tuple[SeriesGeometry, ...]:
        geometries = []
        for s in self._series:
            px, py = layout.transform.transform_points(s.data.x[s.data.mask], s.data.y[s.data.mask])
            geometries.append(
                SeriesGeometry(
                    title=s.title,
                    x=tuple(px.tolist()),
                    y=tuple(py.tolist()),
                    excluded=s.data.excluded_count,
                )
            )
        return tuple(geometries)

    def _scan_values(self) -> LimitScan:
        opts = self.style.x_axis.scale
        scans: list[LimitScan] = []
        for s in self._series:
            if s.data.usable_count < 2:
                LOGGER.debug("skipping series %r with %d usable values", s.title, s.data.usable_count)
                continue
            scans.append(
                limits.scan(
                    s.data.x,
                    check_limits=opts.check_limits,
                    uncertainties=s.x_uncertainty,
                    plus_minus=opts.plus_minus,
                )
            )
        return limits.combine(scans)

    def _scan_series(self) -> tuple[LimitScan, LimitScan]:
        x_scans: list[LimitScan] = []
        y_scans: list[LimitScan] = []
        for s in self._series:
            if s.data.usable_count < 2:
                LOGGER.debug("skipping series %r with %d usable points", s.title, s.data.usable_count)
                continue
            x_opts, y_opts = self.style.x_axis.scale, self.style.y_axis.scale
            x_found, y_found = limits.scan_pairs(
                s.data.x,
                s.data.y,
                x_uncertainty=s.x_uncertainty,
                y_uncertainty=s.y_uncertainty,
                plus_minus=max(x_opts.plus_minus, y_opts.plus_minus),
                check_limits=x_opts.check_limits or y_opts.check_limits,
            )
            x_scans.append(x_found)
            y_scans.append(y_found)
        return limits.combine(x_scans), limits.combine(y_scans)

    @staticmethod
    def _resolve_scale(axis: AxisStyle, auto: Autoscaled | None) -> AxisScale:
        if auto is not None:
            if axis.major_interval is None:
                return auto.scale
            return explicit_scale(auto.scale.range.min, auto.scale.range.max, axis.major_interval)
        lo, hi = axis.range if axis.range is not None else DEFAULT_RANGE
        return explicit_scale(lo, hi, axis.major_interval, min_ticks=axis.scale.min_ticks)

    def _scale_options(self, *, x: Any, y: Any, key: str) -> "Plot":
        for name, value in (("x", x), ("y", y)):
            if value is not None:
                current = self._axis_style(name)
                self._axis(name, scale=replace(current.scale, **{key: value}))
        return self

    def _axis_style(self, name: str) -> AxisStyle:
        if name == "x":
            return self.style.x_axis
        if name == "y":
            return self.style.y_axis
        raise InvalidOptionError(f"axis must be 'x' or 'y', got {name!r}")

    def _axis(self, name: str, **changes: Any) -> "Plot":
        updated = replace(self._axis_style(name), **changes)
        return self._restyle(**{f"{name}_axis": updated})

    def _restyle(self, **changes: Any) -> "Plot":
        self.style = replace(self.style, **changes)
        return self

    @staticmethod
    def _uncertainty(value: Any, like: np.ndarray, label: str) -> np.ndarray | None:
        if value is None:
            return None
        arr = normalize_values(value, label=label)
        if arr.shape != like.shape:
            raise PlotDataError(f"{label} length mismatch: {arr.size} != {like.size}")
        return arr
