from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
import logging
import math
import sys
from typing import Any, Iterable

import numpy as np

from chartframe import limits
from chartframe.errors import InvalidOptionError, InvalidRangeError
from chartframe.limits import LimitScan
from chartframe.rounding import expand_to_steps


LOGGER = logging.getLogger(__name__)

ALLOWED_STEPS = (0, 2, 5, 10)
ZERO_SNAP = 1e-14
DEGENERATE_ABSOLUTE = 1000.0 * sys.float_info.min
DEGENERATE_RELATIVE = 1000.0 * sys.float_info.epsilon
COLLAPSED_TICKS = 3


@dataclass(frozen=True)
class ScaleOptions:
    origin: bool = False
    tight: float = 0.0
    min_ticks: int = 6
    steps: int = 0
    check_limits: bool = True
    plus_minus: float = 3.0

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not (isinstance(self.tight, (int, float)) and 0.0 <= self.tight <= 1.0):
            raise InvalidOptionError(f"tight must be in [0, 1], got {self.tight!r}")
        if self.steps not in ALLOWED_STEPS:
            raise InvalidOptionError(f"steps must be one of {ALLOWED_STEPS}, got {self.steps!r}")
        if not isinstance(self.min_ticks, int) or self.min_ticks < 2:
            raise InvalidOptionError(f"min_ticks must be an int >= 2, got {self.min_ticks!r}")
        if not math.isfinite(self.plus_minus) or self.plus_minus < 0:
            raise InvalidOptionError(f"plus_minus must be finite and >= 0, got {self.plus_minus!r}")


@dataclass(frozen=True)
class AxisRange:
    min: float
    max: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.min) and math.isfinite(self.max)):
            raise InvalidRangeError(f"axis range must be finite, got ({self.min!r}, {self.max!r})")
        if self.min >= self.max:
            raise InvalidRangeError(f"axis range min must be < max, got ({self.min!r}, {self.max!r})")

    @property
    def span(self) -> float:
        return self.max - self.min

    def contains(self, value: float, *, slack: float = 0.0) -> bool:
        return self.min - slack <= value <= self.max + slack


@dataclass(frozen=True)
class TickPlan:
    interval: float
    count: int
    includes_origin: bool
    collapsed: bool = False


@dataclass(frozen=True)
class AxisScale:
    range: AxisRange
    ticks: TickPlan

    def as_tuple(self) -> tuple[float, float, float, int]:
        return (self.range.min, self.range.max, self.ticks.interval, self.ticks.count)

    def major_values(self) -> np.ndarray:
        return major_tick_values(self.range, self.ticks.interval)

    def minor_values(self, per_major: int) -> np.ndarray:
        return minor_tick_values(self.range, self.ticks.interval, per_major)


@dataclass(frozen=True)
class Autoscaled:
    scale: AxisScale
    scan: LimitScan = field(compare=False)


def scale_axis(min_value: float, max_value: float, options: ScaleOptions | None = None) -> AxisScale:
    opts = options if options is not None else ScaleOptions()
    opts.validate()
    lo = float(min_value)
    hi = float(max_value)
    if not (math.isfinite(lo) and math.isfinite(hi)):
        raise InvalidRangeError(f"cannot scale non-finite range ({lo!r}, {hi!r})")
    if lo >= hi:
        raise InvalidRangeError(f"cannot scale range with min >= max ({lo!r}, {hi!r})")

    if opts.steps:
        lo, hi = expand_to_steps(lo, hi, opts.steps)
    if opts.origin:
        lo = min(lo, 0.0)
        hi = max(hi, 0.0)
    if not math.isfinite(hi - lo):
        raise InvalidRangeError(f"range ({lo!r}, {hi!r}) is too wide to scale")
    if _is_degenerate(lo, hi):
        return collapsed_scale((lo + hi) / 2.0)

    interval = 10.0 ** math.ceil(math.log10((hi - lo) / 10.0))
    top = math.ceil(_tick_quotient(hi, interval))
    if _tick_value(top, interval) < hi:
        top += 1
    bottom = top
    while True:
        bottom -= 1
        if _tick_value(bottom, interval) <= lo:
            break

    while top - bottom + 1 < opts.min_ticks:
        interval /= 2.0
        top *= 2
        bottom *= 2
        if opts.steps == 0:
            while _tick_value(bottom + 1, interval) <= lo:
                bottom += 1
            while _tick_value(top - 1, interval) >= hi:
                top -= 1

    if opts.tight > 0:
        for _ in range(2):
            if top - bottom > 1 and hi < _tick_value(top - 1, interval) + interval * opts.tight:
                top -= 1
            if top - bottom > 1 and lo > _tick_value(bottom + 1, interval) - interval * opts.tight:
                bottom += 1

    axis = AxisRange(_snap_zero(_tick_value(bottom, interval), interval), _snap_zero(_tick_value(top, interval), interval))
    return AxisScale(
        range=axis,
        ticks=TickPlan(interval=interval, count=top - bottom + 1, includes_origin=bottom <= 0 <= top),
    )


def collapsed_scale(center: float) -> AxisScale:
    if not math.isfinite(center):
        raise InvalidRangeError(f"cannot collapse around non-finite value {center!r}")
    half = max(1.0, abs(center) * 1e-12)
    LOGGER.debug("collapsing degenerate range around %r", center)
    axis = AxisRange(center - half, center + half)
    return AxisScale(
        range=axis,
        ticks=TickPlan(
            interval=half,
            count=COLLAPSED_TICKS,
            includes_origin=axis.min <= 0.0 <= axis.max,
            collapsed=True,
        ),
    )


def explicit_scale(min_value: float, max_value: float, interval: float | None = None, *, min_ticks: int = 6) -> AxisScale:
    axis = AxisRange(float(min_value), float(max_value))
    if interval is None:
        interval = scale_axis(axis.min, axis.max, ScaleOptions(min_ticks=min_ticks)).ticks.interval
    elif not (math.isfinite(interval) and interval > 0):
        raise InvalidOptionError(f"major interval must be > 0, got {interval!r}")
    count = int(major_tick_values(axis, interval).size)
    return AxisScale(range=axis, ticks=TickPlan(interval=float(interval), count=count, includes_origin=axis.contains(0.0)))


def autoscale(
    values: Any,
    options: ScaleOptions | None = None,
    *,
    uncertainties: Any = None,
) -> Autoscaled:
    opts = options if options is not None else ScaleOptions()
    found = limits.scan(
        values,
        check_limits=opts.check_limits,
        uncertainties=uncertainties,
        plus_minus=opts.plus_minus,
    )
    return Autoscaled(scale=scale_scan(found, opts), scan=found)


def autoscale_all(containers: Iterable[Any], options: ScaleOptions | None = None) -> Autoscaled:
    opts = options if options is not None else ScaleOptions()
    found = limits.combine([limits.scan(values, check_limits=opts.check_limits) for values in containers])
    return Autoscaled(scale=scale_scan(found, opts), scan=found)


def autoscale_pairs(
    x: Any,
    y: Any,
    x_options: ScaleOptions | None = None,
    y_options: ScaleOptions | None = None,
    *,
    x_uncertainty: Any = None,
    y_uncertainty: Any = None,
) -> tuple[Autoscaled, Autoscaled]:
    x_opts = x_options if x_options is not None else ScaleOptions()
    y_opts = y_options if y_options is not None else ScaleOptions()
    x_scan, y_scan = limits.scan_pairs(
        x,
        y,
        x_uncertainty=x_uncertainty,
        y_uncertainty=y_uncertainty,
        plus_minus=max(x_opts.plus_minus, y_opts.plus_minus),
        check_limits=x_opts.check_limits or y_opts.check_limits,
    )
    return (
        Autoscaled(scale=scale_scan(x_scan, x_opts), scan=x_scan),
        Autoscaled(scale=scale_scan(y_scan, y_opts), scan=y_scan),
    )


def major_tick_values(axis: AxisRange, interval: float) -> np.ndarray:
    if not (math.isfinite(interval) and interval > 0):
        raise InvalidOptionError(f"tick interval must be > 0, got {interval!r}")
    slack = interval * 1e-9
    first = math.ceil((axis.min - slack) / interval)
    last = math.floor((axis.max + slack) / interval)
    return np.asarray([_tick_value(i, interval) for i in range(first, last + 1)], dtype=np.float64)


def minor_tick_values(axis: AxisRange, interval: float, per_major: int) -> np.ndarray:
    if per_major <= 0:
        return np.asarray([], dtype=np.float64)
    sub = interval / (per_major + 1)
    slack = sub * 1e-9
    first = math.ceil((axis.min - slack) / sub)
    last = math.floor((axis.max + slack) / sub)
    out = [_tick_value(i, sub) for i in range(first, last + 1) if i % (per_major + 1) != 0]
    return np.asarray(out, dtype=np.float64)


def format_tick(value: float, *, step: float | None = None, precision: int | None = None) -> str:
    if not np.isfinite(value):
        return str(value)
    if step is not None and np.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    abs_v = abs(value)
    if abs_v != 0 and (abs_v >= 1e6 or (step is not None and abs(step) < 1e-4) or abs_v < 1e-6):
        digits = 4 if precision is None else max(0, precision - 1)
        return strip_exponent(f"{value:.{digits}e}")

    decimals = _decimals_from_step(step) if step is not None else 6
    if precision is not None:
        decimals = min(decimals, precision)
    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def format_ticks_for_axis(ticks: np.ndarray, *, precision: int | None = None) -> list[str]:
    if ticks.size == 0:
        return []
    if ticks.size == 1:
        return [format_tick(float(ticks[0]), precision=precision)]
    step = float(abs(ticks[1] - ticks[0]))
    return [format_tick(float(v), step=step, precision=precision) for v in ticks]


def strip_exponent(text: str) -> str:
    mantissa, sep, exponent = text.partition("e")
    if not sep:
        return text
    if "." in mantissa:
        mantissa = mantissa.rstrip("0").rstrip(".")
    sign = "-" if exponent.startswith("-") else ""
    digits = exponent.lstrip("+-").lstrip("0")
    if not digits:
        return mantissa
    return f"{mantissa}e{sign}{digits}"


def scale_scan(found: LimitScan, options: ScaleOptions) -> AxisScale:
    if found.min == found.max:
        return collapsed_scale(found.min)
    return scale_axis(found.min, found.max, options)


def _is_degenerate(lo: float, hi: float) -> bool:
    diff = hi - lo
    if diff < DEGENERATE_ABSOLUTE:
        return True
    return diff <= DEGENERATE_RELATIVE * abs(lo) and diff <= DEGENERATE_RELATIVE * abs(hi)


def _reciprocal(interval: float) -> int | None:
    if interval < 1.0:
        inverse = round(1.0 / interval)
        if inverse > 0 and abs(inverse * interval - 1.0) < 1e-12:
            return inverse
    return None


def _tick_value(index: int, interval: float) -> float:
    inverse = _reciprocal(interval)
    if inverse is not None:
        return index / inverse
    return index * interval


def _tick_quotient(value: float, interval: float) -> float:
    inverse = _reciprocal(interval)
    q = value * inverse if inverse is not None else value / interval
    # exact multiples land on their own index
    nearest = round(q)
    if abs(q - nearest) <= 1e-9 * max(1.0, abs(q)):
        return float(nearest)
    return q


def _snap_zero(value: float, interval: float) -> float:
    if abs(value) < ZERO_SNAP and abs(value) < 0.5 * interval:
        return 0.0
    return value


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not np.isfinite(step):
        return 6
    d = Decimal(str(step)).normalize()
    exp = d.as_tuple().exponent
    decimals = max(0, -int(exp))
    return min(12, decimals)
