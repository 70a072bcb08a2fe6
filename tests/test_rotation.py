from __future__ import annotations

import math
import unittest

from chartframe.errors import InvalidOptionError
from chartframe.rotation import LabelOffset, RotationStyle, coerce_rotation, label_offset, label_space
from chartframe.text import TextStyle, estimate_text_width


class RotationStyleTests(unittest.TestCase):
    def test_thirteen_distinct_angles(self) -> None:
        self.assertEqual(len(RotationStyle), 13)
        self.assertEqual(len({style.angle for style in RotationStyle}), 13)
        self.assertEqual(RotationStyle.HORIZONTAL.angle, 0.0)
        self.assertEqual(RotationStyle.UPWARD.angle, -90.0)
        self.assertEqual(RotationStyle.DOWNHILL.angle, 45.0)
        self.assertEqual(RotationStyle.UPSIDEDOWN.angle, 180.0)

    def test_space_categories(self) -> None:
        self.assertEqual(RotationStyle.LEFTWARD.category, "horizontal")
        self.assertEqual(RotationStyle.DOWNWARD.category, "vertical")
        self.assertEqual(RotationStyle.STEEPUP.category, "diagonal")
        self.assertEqual(RotationStyle.BACKDOWN.category, "diagonal")

    def test_horizontal_and_upward_label_space_differ(self) -> None:
        font = TextStyle(font_size=10.0)
        longest = estimate_text_width("-1000", font)
        horizontal = label_space(RotationStyle.HORIZONTAL, "y", longest, font.font_size)
        upward = label_space(RotationStyle.UPWARD, "y", longest, font.font_size)
        self.assertEqual(horizontal, 30.0)
        self.assertEqual(upward, 12.0)
        self.assertGreaterEqual(horizontal / upward, 2.0)

    def test_x_axis_space_is_transposed(self) -> None:
        self.assertEqual(label_space(RotationStyle.HORIZONTAL, "x", 30.0, 10.0), 15.0)
        self.assertEqual(label_space(RotationStyle.DOWNWARD, "x", 30.0, 10.0), 30.0)
        self.assertAlmostEqual(label_space(RotationStyle.UPHILL, "x", 30.0, 10.0), 30.0 * math.sin(math.radians(45)))
        self.assertAlmostEqual(label_space(RotationStyle.SLOPEDOWNHILL, "y", 30.0, 10.0), 30.0 * math.sin(math.radians(45)))

    def test_every_style_has_offsets_for_each_side(self) -> None:
        for style in RotationStyle:
            for axis, sides in (("y", ("left", "right")), ("x", ("bottom", "top"))):
                for side in sides:
                    with self.subTest(style=style, side=side):
                        offset = label_offset(style, axis, side)
                        self.assertIn(offset.anchor, ("start", "middle", "end"))

    def test_offsets_match_side(self) -> None:
        self.assertEqual(label_offset(RotationStyle.HORIZONTAL, "y", "left"), LabelOffset(-0.5, 0.2, "end"))
        self.assertEqual(label_offset(RotationStyle.HORIZONTAL, "y", "right"), LabelOffset(0.5, 0.2, "start"))
        self.assertEqual(label_offset(RotationStyle.HORIZONTAL, "x", "bottom"), LabelOffset(0.0, 1.3, "middle"))
        self.assertEqual(label_offset(RotationStyle.UPWARD, "x", "bottom").anchor, "end")
        self.assertEqual(label_offset(RotationStyle.UPWARD, "x", "top").anchor, "start")

    def test_wrong_side_for_axis_raises(self) -> None:
        with self.assertRaises(InvalidOptionError):
            label_offset(RotationStyle.HORIZONTAL, "y", "bottom")
        with self.assertRaises(InvalidOptionError):
            label_offset(RotationStyle.HORIZONTAL, "x", "left")

    def test_coerce_rotation_from_name(self) -> None:
        self.assertIs(coerce_rotation("Upward"), RotationStyle.UPWARD)
        self.assertIs(coerce_rotation(RotationStyle.BACKUP), RotationStyle.BACKUP)
        with self.assertRaises(InvalidOptionError):
            coerce_rotation("sideways")


if __name__ == "__main__":
    unittest.main()
