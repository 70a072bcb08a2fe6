from __future__ import annotations


class PlotError(Exception):
    """Base class for chart scaling and layout failures."""


class PlotDataError(PlotError, ValueError):
    pass


class InvalidRangeError(PlotDataError):
    pass


class InvalidOptionError(PlotError, ValueError):
    pass


class NoUsableDataError(PlotDataError):
    pass


class DegenerateWindowError(PlotError):
    """Raised when decorations leave no room for the plot window."""


class ScalingError(PlotError, ArithmeticError):
    pass
