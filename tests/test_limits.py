from __future__ import annotations

import math
import sys
import unittest

import numpy as np

from chartframe.errors import NoUsableDataError, PlotDataError
from chartframe.limits import combine, is_limit, limit_mask, scan, scan_pairs


class LimitFilterTests(unittest.TestCase):
    def test_is_limit_flags_sentinels(self) -> None:
        self.assertTrue(is_limit(math.nan))
        self.assertTrue(is_limit(math.inf))
        self.assertTrue(is_limit(-math.inf))
        self.assertTrue(is_limit(sys.float_info.max))
        self.assertTrue(is_limit(-1e308))
        self.assertTrue(is_limit(5e-324))
        self.assertFalse(is_limit(0.0))
        self.assertFalse(is_limit(1e300))
        self.assertFalse(is_limit(-2.5))

    def test_limit_mask_matches_scalar_check(self) -> None:
        values = np.asarray([1.0, math.nan, math.inf, 1e308, 5e-324, 0.0, -3.0])
        self.assertEqual(limit_mask(values).tolist(), [is_limit(v) for v in values.tolist()])

    def test_scan_excludes_limits_and_counts_them(self) -> None:
        result = scan([0.2, 1.1, math.inf, math.nan, -math.inf, 1e308, 4.2])
        self.assertEqual(result.min, 0.2)
        self.assertEqual(result.max, 4.2)
        self.assertEqual(result.usable_count, 3)
        self.assertEqual(result.nan_count, 1)
        self.assertEqual(result.infinite_count, 2)
        self.assertEqual(result.out_of_range_count, 1)
        self.assertEqual(result.excluded_count, 4)

    def test_single_usable_value_raises(self) -> None:
        with self.assertRaises(NoUsableDataError):
            scan([1.0, math.nan, math.inf, -math.inf])

    def test_no_usable_values_raises(self) -> None:
        with self.assertRaisesRegex(NoUsableDataError, "no usable values"):
            scan([math.nan, math.nan])
        with self.assertRaises(NoUsableDataError):
            scan([])

    def test_trusted_scan_skips_limit_checks(self) -> None:
        result = scan(np.asarray([3.0, 1.0, 2.0]), check_limits=False)
        self.assertEqual((result.min, result.max, result.usable_count), (1.0, 3.0, 3))
        self.assertEqual(result.excluded_count, 0)

    def test_trusted_scan_warns_on_non_finite_bounds(self) -> None:
        with self.assertLogs("chartframe.limits", level="WARNING"):
            scan([1.0, math.inf], check_limits=False)

    def test_unchecked_banded_scan_warns_on_non_finite_bounds(self) -> None:
        with self.assertLogs("chartframe.limits", level="WARNING") as logs:
            result = scan([1.0, math.inf, 2.0], check_limits=False, uncertainties=[0.1, 0.1, 0.1])
        self.assertEqual(result.max, math.inf)
        self.assertIn("non-finite bounds", logs.output[0])

        with self.assertLogs("chartframe.limits", level="WARNING"):
            scan_pairs([1.0, 2.0, 3.0], [0.0, math.nan, 1.0], check_limits=False)

    def test_uncertainty_widens_bounds(self) -> None:
        result = scan([1.0, 2.0, 4.0], uncertainties=[0.1, 0.1, 0.1], plus_minus=2.0)
        self.assertAlmostEqual(result.min, 0.8)
        self.assertAlmostEqual(result.max, 4.2)

    def test_scan_pairs_drops_pair_when_either_member_is_limit(self) -> None:
        x_scan, y_scan = scan_pairs([0.0, 1.0, 2.0, 3.0], [1.0, math.nan, 3.0, 4.0])
        self.assertEqual((x_scan.min, x_scan.max, x_scan.usable_count), (0.0, 3.0, 3))
        self.assertEqual((y_scan.min, y_scan.max, y_scan.usable_count), (1.0, 4.0, 3))
        self.assertEqual(y_scan.nan_count, 1)

    def test_scan_pairs_folds_uncertainty(self) -> None:
        _, y_scan = scan_pairs([0.0, 1.0], [1.0, 4.0], y_uncertainty=[0.5, 0.5], plus_minus=2.0)
        self.assertEqual((y_scan.min, y_scan.max), (0.0, 5.0))

    def test_scan_pairs_rejects_length_mismatch(self) -> None:
        with self.assertRaises(PlotDataError):
            scan_pairs([1.0, 2.0], [1.0])

    def test_combine_merges_series(self) -> None:
        merged = combine([scan([1.0, 2.0]), scan([-4.0, 0.5, math.nan])])
        self.assertEqual((merged.min, merged.max), (-4.0, 2.0))
        self.assertEqual(merged.usable_count, 4)
        self.assertEqual(merged.nan_count, 1)
        with self.assertRaises(NoUsableDataError):
            combine([])

    def test_non_numeric_input_raises(self) -> None:
        with self.assertRaises(PlotDataError):
            scan(["a", "b"])


if __name__ == "__main__":
    unittest.main()
