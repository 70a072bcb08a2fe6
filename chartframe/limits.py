from __future__ import annotations

from dataclasses import dataclass
import logging
import math
import sys
from typing import Any

import numpy as np

from chartframe.errors import NoUsableDataError, PlotDataError


LOGGER = logging.getLogger(__name__)

LIMIT_MARGIN = 4.0
TOO_LARGE = sys.float_info.max / LIMIT_MARGIN
TOO_SMALL = sys.float_info.min


@dataclass(frozen=True)
class LimitScan:
    min: float
    max: float
    usable_count: int
    nan_count: int = 0
    infinite_count: int = 0
    out_of_range_count: int = 0

    @property
    def excluded_count(self) -> int:
        return self.nan_count + self.infinite_count + self.out_of_range_count

    @property
    def span(self) -> float:
        return self.max - self.min


def is_limit(value: float) -> bool:
    v = float(value)
    if not math.isfinite(v):
        return True
    a = abs(v)
    return a > TOO_LARGE or 0.0 < a <= TOO_SMALL


def limit_mask(values: np.ndarray) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    with np.errstate(invalid="ignore"):
        a = np.abs(arr)
        return ~np.isfinite(arr) | (a > TOO_LARGE) | ((a > 0.0) & (a <= TOO_SMALL))


def scan(
    values: Any,
    *,
    check_limits: bool = True,
    uncertainties: Any = None,
    plus_minus: float = 3.0,
) -> LimitScan:
    arr = _as_1d(values, label="values")
    band = _uncertainty(uncertainties, arr, "uncertainties")
    if not check_limits and band is None:
        return _trusted_scan(arr)

    mask = limit_mask(arr) if check_limits else np.zeros(arr.shape, dtype=bool)
    _require_usable(int(np.count_nonzero(~mask)), total=arr.size)
    result = _banded_scan(arr, ~mask, mask, band, plus_minus)
    if not check_limits:
        _warn_non_finite(result.min, result.max)
    if result.excluded_count:
        LOGGER.debug(
            "excluded %d limit values from autoscale; nan=%d infinite=%d out_of_range=%d",
            result.excluded_count,
            result.nan_count,
            result.infinite_count,
            result.out_of_range_count,
        )
    return result


def scan_pairs(
    x: Any,
    y: Any,
    *,
    x_uncertainty: Any = None,
    y_uncertainty: Any = None,
    plus_minus: float = 3.0,
    check_limits: bool = True,
) -> tuple[LimitScan, LimitScan]:
    """Scan (x, y) pairs together; a pair is dropped when either member is a limit."""
    x_arr = _as_1d(x, label="x")
    y_arr = _as_1d(y, label="y")
    if x_arr.shape != y_arr.shape:
        raise PlotDataError(f"x and y length mismatch: {x_arr.size} != {y_arr.size}")
    if plus_minus < 0 or not math.isfinite(plus_minus):
        raise PlotDataError("plus_minus must be finite and >= 0")

    if check_limits:
        x_bad = limit_mask(x_arr)
        y_bad = limit_mask(y_arr)
        keep = ~(x_bad | y_bad)
    else:
        x_bad = y_bad = np.zeros(x_arr.shape, dtype=bool)
        keep = np.ones(x_arr.shape, dtype=bool)
    _require_usable(int(np.count_nonzero(keep)), total=x_arr.size)

    x_scan = _banded_scan(x_arr, keep, x_bad, _uncertainty(x_uncertainty, x_arr, "x_uncertainty"), plus_minus)
    y_scan = _banded_scan(y_arr, keep, y_bad, _uncertainty(y_uncertainty, y_arr, "y_uncertainty"), plus_minus)
    if not check_limits:
        _warn_non_finite(x_scan.min, x_scan.max)
        _warn_non_finite(y_scan.min, y_scan.max)
    excluded = x_arr.size - int(np.count_nonzero(keep))
    if excluded:
        LOGGER.debug("excluded %d of %d points with a limit coordinate", excluded, x_arr.size)
    return x_scan, y_scan


def combine(scans: list[LimitScan]) -> LimitScan:
    if not scans:
        raise NoUsableDataError("no data series to autoscale")
    return LimitScan(
        min=min(s.min for s in scans),
        max=max(s.max for s in scans),
        usable_count=sum(s.usable_count for s in scans),
        nan_count=sum(s.nan_count for s in scans),
        infinite_count=sum(s.infinite_count for s in scans),
        out_of_range_count=sum(s.out_of_range_count for s in scans),
    )


def _trusted_scan(arr: np.ndarray) -> LimitScan:
    _require_usable(arr.size, total=arr.size)
    lo = float(np.min(arr))
    hi = float(np.max(arr))
    _warn_non_finite(lo, hi)
    return LimitScan(min=lo, max=hi, usable_count=int(arr.size))


def _warn_non_finite(lo: float, hi: float) -> None:
    if not (math.isfinite(lo) and math.isfinite(hi)):
        LOGGER.warning("unchecked scan produced non-finite bounds (%r, %r)", lo, hi)


def _banded_scan(
    arr: np.ndarray,
    keep: np.ndarray,
    bad: np.ndarray,
    uncertainty: np.ndarray | None,
    plus_minus: float,
) -> LimitScan:
    values = arr[keep]
    if uncertainty is None:
        lo_vals = hi_vals = values
    else:
        band = uncertainty[keep] * plus_minus
        lo_vals = values - band
        hi_vals = values + band
    nan = np.isnan(arr)
    inf = np.isinf(arr)
    return LimitScan(
        min=float(np.min(lo_vals)),
        max=float(np.max(hi_vals)),
        usable_count=int(values.size),
        nan_count=int(np.count_nonzero(nan & ~keep)),
        infinite_count=int(np.count_nonzero(inf & ~keep)),
        out_of_range_count=int(np.count_nonzero(bad & ~nan & ~inf)),
    )


def _uncertainty(value: Any, like: np.ndarray, label: str) -> np.ndarray | None:
    if value is None:
        return None
    arr = _as_1d(value, label=label)
    if arr.shape != like.shape:
        raise PlotDataError(f"{label} length mismatch: {arr.size} != {like.size}")
    arr = np.abs(arr)
    arr[~np.isfinite(arr)] = 0.0
    return arr


def _require_usable(count: int, *, total: int) -> None:
    if count == 0:
        raise NoUsableDataError(f"no usable values among {total} samples")
    if count < 2:
        raise NoUsableDataError(f"only one usable value among {total} samples; need at least two")


def _as_1d(values: Any, *, label: str) -> np.ndarray:
    try:
        arr = np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise PlotDataError(f"{label} contains non-numeric values") from exc
    if arr.ndim != 1:
        raise PlotDataError(f"{label} must be 1-D")
    return arr
