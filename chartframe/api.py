from __future__ import annotations

from chartframe.plot import Plot
from chartframe.text import TextMeasurer


DEFAULT_WIDTH = 500
DEFAULT_ASPECT_RATIO = 10.0 / 7.0
DEFAULT_1D_ASPECT_RATIO = 5.0 / 2.0


def plot(
    width: int | None = None,
    height: int | None = None,
    *,
    aspect_ratio: float = DEFAULT_ASPECT_RATIO,
    measure: TextMeasurer | None = None,
) -> Plot:
    width, height = _canvas_size(width, height, aspect_ratio)
    return Plot(width=width, height=height, measure=measure)


def plot_1d(
    width: int | None = None,
    height: int | None = None,
    *,
    aspect_ratio: float = DEFAULT_1D_ASPECT_RATIO,
    axis_fraction: float = 0.5,
    measure: TextMeasurer | None = None,
) -> Plot:
    width, height = _canvas_size(width, height, aspect_ratio)
    return Plot(width=width, height=height, measure=measure, dimensions=1, axis_fraction=axis_fraction)


def _canvas_size(width: int | None, height: int | None, aspect_ratio: float) -> tuple[int, int]:
    if aspect_ratio <= 0:
        raise ValueError("aspect_ratio must be > 0")
    if width is None and height is None:
        width = DEFAULT_WIDTH
    if width is None and height is not None:
        if height <= 0:
            raise ValueError("height must be > 0")
        width = max(1, int(round(height * aspect_ratio)))
    elif width is not None and height is None:
        if width <= 0:
            raise ValueError("width must be > 0")
        height = max(1, int(round(width / aspect_ratio)))
    assert width is not None and height is not None
    return width, height
