from __future__ import annotations

from decimal import Decimal
import importlib.util
import math
import unittest

import numpy as np

from chartframe import plot, plot_1d
from chartframe.adapters.normalize import normalize_xy
from chartframe.errors import InvalidOptionError, InvalidRangeError, NoUsableDataError, PlotDataError
from chartframe.layout import AxisPosition
from chartframe.plot import Plot
from chartframe.rotation import RotationStyle


class PlotBuilderTests(unittest.TestCase):
    def test_factory_derives_missing_dimension(self) -> None:
        fig = plot(width=700)
        self.assertEqual((fig.width, fig.height), (700, 490))
        self.assertEqual(plot(height=350).width, 500)
        with self.assertRaises(ValueError):
            plot(width=0, height=10)

    def test_setters_chain(self) -> None:
        p = Plot(400, 300)
        self.assertIs(p.set_title("t").set_min_ticks(x=4).set_tight(y=0.5).set_steps(x=10), p)
        self.assertEqual(p.style.title, "t")
        self.assertEqual(p.style.x_axis.scale.min_ticks, 4)
        self.assertEqual(p.style.y_axis.scale.tight, 0.5)
        self.assertEqual(p.style.x_axis.scale.steps, 10)

    def test_invalid_settings_raise(self) -> None:
        p = Plot(400, 300)
        with self.assertRaises(InvalidOptionError):
            p.set_tight(x=2.0)
        with self.assertRaises(InvalidOptionError):
            p.set_steps(y=3)
        with self.assertRaises(InvalidOptionError):
            p.set_value_label_sides(x="left")
        with self.assertRaises(InvalidOptionError):
            p.set_label_rotation(y="sideways")
        with self.assertRaises(ValueError):
            p.set_major_intervals(x=0.0)
        self.assertEqual(p.style.x_axis.scale.tight, 0.0)

    def test_render_autoscales_from_series(self) -> None:
        chart = Plot(400, 300).series([0.2, 1.1, 4.2, 3.3, 5.4, 6.5, math.inf], title="volts").render()
        self.assertEqual(chart.y_autoscale.scale.as_tuple(), (0.0, 7.0, 1.0, 8))
        self.assertEqual(chart.x_autoscale.scale.as_tuple(), (0.0, 5.0, 1.0, 6))
        self.assertEqual(chart.series[0].excluded, 1)
        self.assertEqual(len(chart.series[0].x), 6)
        window = chart.layout.window
        for px, py in zip(chart.series[0].x, chart.series[0].y, strict=True):
            self.assertGreaterEqual(px, window.left - 1e-9)
            self.assertLessEqual(px, window.right + 1e-9)
            self.assertGreaterEqual(py, window.top - 1e-9)
            self.assertLessEqual(py, window.bottom + 1e-9)

    def test_explicit_ranges_skip_autoscale(self) -> None:
        chart = Plot(400, 300).series([1.0, 2.0, 3.0]).set_ranges(x=(0.0, 10.0)).render()
        self.assertIsNone(chart.x_autoscale)
        self.assertEqual(chart.layout.x_axis.scale.ticks.interval, 1.0)
        self.assertEqual(chart.layout.x_axis.scale.ticks.count, 11)
        with self.assertRaises(InvalidRangeError):
            Plot(400, 300).set_ranges(y=(3.0, 1.0))

    def test_major_interval_overrides_autoscaled_interval(self) -> None:
        chart = Plot(400, 300).series([0.0, 10.0], x=[0.0, 10.0]).set_major_intervals(y=2.5).render()
        self.assertEqual(chart.layout.y_axis.scale.ticks.interval, 2.5)
        self.assertEqual(chart.layout.y_axis.scale.ticks.count, 5)

    def test_multiple_series_share_axes(self) -> None:
        chart = (
            Plot(400, 300)
            .series([1.0, 2.0], x=[0.0, 1.0], title="a")
            .series([8.5, 3.0], x=[2.0, 3.0], title="b")
            .set_legend(placement="outside_right")
            .render()
        )
        self.assertEqual(chart.y_autoscale.scale.as_tuple(), (1.0, 9.0, 1.0, 9))
        self.assertEqual(chart.y_autoscale.scan.usable_count, 4)
        self.assertEqual([e.text for e in chart.layout.legend.entries], ["a", "b"])

    def test_uncertainty_widens_autoscale(self) -> None:
        chart = (
            Plot(400, 300)
            .series([1.0, 4.0], x=[0.0, 1.0], y_uncertainty=[0.5, 0.5])
            .set_autoscale(plus_minus=2.0)
            .render()
        )
        self.assertEqual((chart.y_autoscale.scan.min, chart.y_autoscale.scan.max), (0.0, 5.0))

    def test_all_equal_series_collapses(self) -> None:
        chart = Plot(400, 300).series([3.0, 3.0, 3.0]).render()
        self.assertTrue(chart.y_autoscale.scale.ticks.collapsed)
        self.assertEqual(chart.layout.y_axis.scale.range.min, 2.0)

    def test_series_without_usable_points_raises(self) -> None:
        with self.assertRaises(NoUsableDataError):
            Plot(400, 300).series([math.nan, math.nan, 1.0]).render()

    def test_no_series_uses_default_ranges(self) -> None:
        chart = Plot(400, 300).render()
        self.assertEqual((chart.layout.x_axis.scale.range.min, chart.layout.x_axis.scale.range.max), (-10.0, 10.0))
        self.assertEqual(chart.layout.x_axis.position, AxisPosition.CROSSES)
        self.assertEqual(chart.series, ())

    def test_label_rotation_by_name(self) -> None:
        p = Plot(400, 300).set_label_rotation(x="downward", y=RotationStyle.UPWARD)
        self.assertIs(p.style.x_axis.label_rotation, RotationStyle.DOWNWARD)
        labels = p.series([1.0, 2.0, 3.0]).render().layout.x_axis.labels()
        self.assertTrue(all(label.rotation == 90.0 for label in labels))


class OneDimensionalPlotTests(unittest.TestCase):
    def test_factory_uses_wide_canvas(self) -> None:
        p = plot_1d(width=500)
        self.assertEqual((p.width, p.height, p.dimensions), (500, 200, 1))

    def test_values_sit_on_the_axis_line(self) -> None:
        chart = Plot(400, 160, dimensions=1).values([1.0, 2.5, 4.0, math.nan], title="runs").render()
        self.assertIsNone(chart.y_autoscale)
        self.assertIsNone(chart.layout.y_axis)
        self.assertEqual(chart.x_autoscale.scale.as_tuple(), (1.0, 4.0, 0.5, 7))
        points = chart.series[0]
        self.assertEqual(points.excluded, 1)
        self.assertAlmostEqual(points.x[0], 25.0)
        self.assertAlmostEqual(points.x[-1], 375.0)
        for py in points.y:
            self.assertAlmostEqual(py, 80.0)
        self.assertAlmostEqual(chart.layout.x_axis.line.y1, 80.0)

    def test_uncertainty_widens_1d_autoscale(self) -> None:
        chart = Plot(400, 160, dimensions=1).values([1.0, 4.0], uncertainty=[0.5, 0.5]).set_autoscale(plus_minus=2.0).render()
        self.assertEqual((chart.x_autoscale.scan.min, chart.x_autoscale.scan.max), (0.0, 5.0))

    def test_series_kinds_match_dimensions(self) -> None:
        with self.assertRaises(InvalidOptionError):
            Plot(400, 160, dimensions=1).series([1.0, 2.0])
        with self.assertRaises(InvalidOptionError):
            Plot(400, 300).values([1.0, 2.0])
        with self.assertRaises(InvalidOptionError):
            Plot(400, 160, dimensions=1, axis_fraction=-0.1)


class NormalizeTests(unittest.TestCase):
    def test_normalize_decimal_and_mask(self) -> None:
        data = [Decimal("1.5"), Decimal("2.25"), None, Decimal("3.5")]
        series = normalize_xy(y=data)
        self.assertEqual(series.x.tolist(), [0.0, 1.0, 2.0, 3.0])
        self.assertTrue(np.array_equal(series.mask, np.asarray([True, True, False, True])))

    def test_normalize_masks_limit_values(self) -> None:
        series = normalize_xy(y=[1.0, math.inf, 1e308], x=[0.0, 1.0, 2.0])
        self.assertEqual(series.mask.tolist(), [True, False, False])
        self.assertEqual(series.usable_count, 1)

    def test_normalize_rejects_bad_input(self) -> None:
        with self.assertRaises(PlotDataError):
            normalize_xy(y=[1.0, 2.0], x=[1.0])
        with self.assertRaises(PlotDataError):
            normalize_xy(y="abc")
        with self.assertRaises(PlotDataError):
            normalize_xy(y=[])
        with self.assertRaises(PlotDataError):
            normalize_xy(y=["a", 1.0])

    @unittest.skipUnless(importlib.util.find_spec("torch"), "torch is not installed")
    def test_normalize_torch_tensor(self) -> None:
        import torch

        y = torch.tensor([1, 2, 3], dtype=torch.int64)
        series = normalize_xy(y=y)
        self.assertEqual(series.y.dtype, np.float64)
        self.assertEqual(series.y.tolist(), [1.0, 2.0, 3.0])

    def test_normalize_pandas_dataframe_single_numeric_column(self) -> None:
        try:
            import pandas as pd
        except Exception:
            self.skipTest("pandas is not installed")

        df = pd.DataFrame({"value": [1, 2, 3], "name": ["a", "b", "c"]})
        series = normalize_xy(y=df)
        self.assertEqual(series.y.tolist(), [1.0, 2.0, 3.0])
        with self.assertRaises(PlotDataError):
            normalize_xy(y=pd.DataFrame({"a": [1, 2], "b": [3, 4]}))


if __name__ == "__main__":
    unittest.main()
