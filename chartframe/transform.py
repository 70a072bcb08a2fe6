from __future__ import annotations

from dataclasses import dataclass
import math
import sys

import numpy as np

from chartframe.errors import ScalingError
from chartframe.scales import AxisRange


@dataclass(frozen=True)
class AxisMap:
    scale: float
    shift: float

    def __call__(self, value: float) -> float:
        return value * self.scale + self.shift

    def apply(self, values: np.ndarray) -> np.ndarray:
        return np.asarray(values, dtype=np.float64) * self.scale + self.shift

    def inverse(self, position: float) -> float:
        return (position - self.shift) / self.scale

    def validate(self, axis: str) -> None:
        if not _is_normal(self.scale):
            raise ScalingError(f"{axis} scale {self.scale!r} is not a normal number")
        if not math.isfinite(self.shift) or (self.shift != 0.0 and abs(self.shift) < sys.float_info.min):
            raise ScalingError(f"{axis} shift {self.shift!r} is not a usable number")


@dataclass(frozen=True)
class CoordinateTransform:
    x: AxisMap
    y: AxisMap

    @classmethod
    def from_window(
        cls,
        *,
        left: float,
        top: float,
        right: float,
        bottom: float,
        x_range: AxisRange,
        y_range: AxisRange,
    ) -> "CoordinateTransform":
        x_scale = (right - left) / (x_range.max - x_range.min)
        y_scale = -(bottom - top) / (y_range.max - y_range.min)
        transform = cls(
            x=AxisMap(scale=x_scale, shift=left - x_range.min * x_scale),
            y=AxisMap(scale=y_scale, shift=top - y_range.max * y_scale),
        )
        transform.x.validate("x")
        transform.y.validate("y")
        return transform

    def transform_point(self, x: float, y: float) -> tuple[float, float]:
        return (self.x(x), self.y(y))

    def transform_points(self, x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        return self.x.apply(x), self.y.apply(y)

    def to_data(self, px: float, py: float) -> tuple[float, float]:
        return (self.x.inverse(px), self.y.inverse(py))


def _is_normal(value: float) -> bool:
    return math.isfinite(value) and abs(value) >= sys.float_info.min
