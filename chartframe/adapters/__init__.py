from chartframe.adapters.normalize import SeriesData, normalize_1d, normalize_values, normalize_xy

__all__ = ["SeriesData", "normalize_1d", "normalize_values", "normalize_xy"]
