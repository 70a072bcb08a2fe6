from __future__ import annotations

import math
import sys
from typing import Callable

from chartframe.errors import ScalingError


ZERO_THRESHOLD = 100.0 * sys.float_info.min

DECIMAL_MANTISSAS = (1.0, 2.0, 5.0)
SEMI_DECIMAL_MANTISSAS = (1.0, 5.0)
BINARY_MANTISSAS = (1.0, 2.0, 4.0, 6.0, 8.0)


def roundup10(value: float) -> float:
    return _round(value, DECIMAL_MANTISSAS, up=True)


def rounddown10(value: float) -> float:
    return _round(value, DECIMAL_MANTISSAS, up=False)


def roundup5(value: float) -> float:
    return _round(value, SEMI_DECIMAL_MANTISSAS, up=True)


def rounddown5(value: float) -> float:
    return _round(value, SEMI_DECIMAL_MANTISSAS, up=False)


def roundup2(value: float) -> float:
    return _round(value, BINARY_MANTISSAS, up=True)


def rounddown2(value: float) -> float:
    return _round(value, BINARY_MANTISSAS, up=False)


ROUNDERS: dict[int, tuple[Callable[[float], float], Callable[[float], float]]] = {
    2: (rounddown2, roundup2),
    5: (rounddown5, roundup5),
    10: (rounddown10, roundup10),
}


def expand_to_steps(min_value: float, max_value: float, steps: int) -> tuple[float, float]:
    try:
        down, up = ROUNDERS[steps]
    except KeyError:
        raise ValueError(f"unsupported steps value: {steps!r}") from None
    return down(min_value), up(max_value)


def _round(value: float, mantissas: tuple[float, ...], *, up: bool) -> float:
    v = float(value)
    if not math.isfinite(v):
        raise ScalingError(f"cannot round non-finite value {v!r}")
    if abs(v) < ZERO_THRESHOLD:
        return 0.0
    if v < 0:
        return -_round(-v, mantissas, up=not up)

    order = math.floor(math.log10(v))
    candidates = [c for k in range(order - 1, order + 2) for c in _decade(k, mantissas)]
    if up:
        picked = [c for c in candidates if c >= v]
        if not picked:
            raise ScalingError(f"cannot round {v!r} up within float range")
        return min(picked)
    return max(c for c in candidates if c <= v)


def _decade(k: int, mantissas: tuple[float, ...]) -> list[float]:
    if k > sys.float_info.max_10_exp:
        return []
    out = []
    for m in mantissas:
        c = m * float(10**k) if k >= 0 else m / float(10**-k)
        if math.isfinite(c):
            out.append(c)
    return out
