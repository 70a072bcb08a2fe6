from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from chartframe.errors import PlotDataError
from chartframe.limits import limit_mask


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


@dataclass(frozen=True)
class SeriesData:
    """Float64 coordinates and the mask of points with no limit-value coordinate."""

    x: np.ndarray
    y: np.ndarray
    mask: np.ndarray
    source_name: str | None = None

    @property
    def usable_count(self) -> int:
        return int(np.count_nonzero(self.mask))

    @property
    def excluded_count(self) -> int:
        return int(self.mask.size) - self.usable_count


def normalize_xy(y: Any, *, x: Any = None, source_name: str | None = None) -> SeriesData:
    y_arr = _non_empty(normalize_values(y, label="y"), "y")
    x_arr = np.arange(y_arr.size, dtype=np.float64) if x is None else normalize_values(x, label="x")
    if x_arr.shape != y_arr.shape:
        raise PlotDataError(f"x and y length mismatch: {x_arr.size} != {y_arr.size}")
    mask = ~(limit_mask(x_arr) | limit_mask(y_arr))
    return SeriesData(x=x_arr, y=y_arr, mask=mask, source_name=source_name)


def normalize_1d(values: Any, *, source_name: str | None = None) -> SeriesData:
    # 1-D values live on the x axis; y is the axis line itself
    x_arr = _non_empty(normalize_values(values, label="values"), "values")
    return SeriesData(x=x_arr, y=np.zeros_like(x_arr), mask=~limit_mask(x_arr), source_name=source_name)


def normalize_values(values: Any, *, label: str = "values") -> np.ndarray:
    if torch is not None and isinstance(values, torch.Tensor):
        return _one_d(values.detach().cpu().to(torch.float64).numpy(), label)
    if pd is not None and isinstance(values, pd.DataFrame):
        return normalize_values(_only_numeric_column(values, label), label=label)
    if pd is not None and isinstance(values, pd.Series):
        return _as_float(values.to_numpy(), label)
    if isinstance(values, np.ndarray):
        return _as_float(_one_d(values, label), label)
    if isinstance(values, Sequence) and not isinstance(values, (str, bytes, bytearray)):
        return _as_float(np.asarray(values, dtype=object), label)
    raise PlotDataError(f"unsupported {label} input type: {type(values)!r}")


def _only_numeric_column(frame: Any, label: str) -> Any:
    columns = [c for c in frame.columns if pd.api.types.is_numeric_dtype(frame[c])]
    if len(columns) != 1:
        raise PlotDataError(f"{label} DataFrame must hold exactly one numeric column, found {len(columns)}")
    return frame[columns[0]]


def _one_d(arr: np.ndarray, label: str) -> np.ndarray:
    if arr.ndim != 1:
        raise PlotDataError(f"{label} must be 1-D, got shape {arr.shape}")
    return arr


def _non_empty(arr: np.ndarray, label: str) -> np.ndarray:
    if arr.size == 0:
        raise PlotDataError(f"empty {label} series")
    return arr


def _as_float(arr: np.ndarray, label: str) -> np.ndarray:
    if arr.dtype.kind in "iufb":
        return arr.astype(np.float64, copy=False)
    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        if raw is None:
            out[i] = np.nan
            continue
        try:
            # Decimal, Fraction and numpy scalars all convert through float()
            out[i] = float(raw)
        except (TypeError, ValueError) as exc:
            raise PlotDataError(f"{label} contains non-numeric value at index {i}: {raw!r}") from exc
    return out
