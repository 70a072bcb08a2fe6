from chartframe.api import plot, plot_1d
from chartframe.errors import (
    DegenerateWindowError,
    InvalidOptionError,
    InvalidRangeError,
    NoUsableDataError,
    PlotDataError,
    PlotError,
    ScalingError,
)
from chartframe.layout import AxisPosition, Layout, LayoutEngine, PlotWindow
from chartframe.limits import LimitScan, is_limit, scan
from chartframe.plot import ChartGeometry, Plot
from chartframe.rotation import RotationStyle
from chartframe.scales import AxisRange, AxisScale, ScaleOptions, TickPlan, autoscale, scale_axis
from chartframe.style import AxisStyle, LegendStyle, PlotStyle
from chartframe.text import PillowTextMeasurer, TextStyle
from chartframe.transform import CoordinateTransform

__all__ = [
    "AxisPosition",
    "AxisRange",
    "AxisScale",
    "AxisStyle",
    "ChartGeometry",
    "CoordinateTransform",
    "DegenerateWindowError",
    "InvalidOptionError",
    "InvalidRangeError",
    "Layout",
    "LayoutEngine",
    "LegendStyle",
    "LimitScan",
    "NoUsableDataError",
    "PillowTextMeasurer",
    "Plot",
    "PlotDataError",
    "PlotError",
    "PlotStyle",
    "PlotWindow",
    "RotationStyle",
    "ScaleOptions",
    "ScalingError",
    "TextStyle",
    "TickPlan",
    "autoscale",
    "is_limit",
    "plot",
    "plot_1d",
    "scale_axis",
    "scan",
]
