from __future__ import annotations

import unittest

import numpy as np

from chartframe.errors import ScalingError
from chartframe.scales import AxisRange
from chartframe.transform import CoordinateTransform


class CoordinateTransformTests(unittest.TestCase):
    def _transform(self) -> CoordinateTransform:
        return CoordinateTransform.from_window(
            left=10.0,
            top=20.0,
            right=110.0,
            bottom=220.0,
            x_range=AxisRange(0.0, 10.0),
            y_range=AxisRange(-1.0, 1.0),
        )

    def test_range_corners_map_to_window_corners(self) -> None:
        t = self._transform()
        self.assertEqual(t.transform_point(0.0, 1.0), (10.0, 20.0))
        self.assertEqual(t.transform_point(10.0, -1.0), (110.0, 220.0))
        self.assertEqual(t.transform_point(5.0, 0.0), (60.0, 120.0))

    def test_y_is_inverted(self) -> None:
        t = self._transform()
        self.assertLess(t.y.scale, 0.0)
        self.assertGreater(t.x.scale, 0.0)

    def test_vectorized_and_inverse(self) -> None:
        t = self._transform()
        px, py = t.transform_points(np.asarray([0.0, 10.0]), np.asarray([-1.0, 1.0]))
        self.assertEqual(px.tolist(), [10.0, 110.0])
        self.assertEqual(py.tolist(), [220.0, 20.0])
        self.assertEqual(t.to_data(60.0, 120.0), (5.0, 0.0))

    def test_zero_shift_is_allowed(self) -> None:
        t = CoordinateTransform.from_window(
            left=0.0,
            top=0.0,
            right=100.0,
            bottom=100.0,
            x_range=AxisRange(0.0, 10.0),
            y_range=AxisRange(-10.0, 0.0),
        )
        self.assertEqual(t.x.shift, 0.0)
        self.assertEqual(t.y.shift, 0.0)

    def test_non_normal_scale_raises(self) -> None:
        with self.assertRaises(ScalingError):
            CoordinateTransform.from_window(
                left=0.0,
                top=0.0,
                right=100.0,
                bottom=100.0,
                x_range=AxisRange(-1e308, 1e308),
                y_range=AxisRange(0.0, 1.0),
            )


if __name__ == "__main__":
    unittest.main()
