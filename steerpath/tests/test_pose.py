import math
import unittest

from steerpath.pose import TWO_PI, Pos, mod2pi, wrap_angle


class TestAngles(unittest.TestCase):
    def test_mod2pi_negative(self):
        self.assertAlmostEqual(mod2pi(-math.pi / 2), 3 * math.pi / 2)

    def test_mod2pi_full_turn_is_zero(self):
        self.assertEqual(0.0, mod2pi(TWO_PI))

    def test_mod2pi_tiny_negative_does_not_round_to_two_pi(self):
        result = mod2pi(-1e-17)
        self.assertGreaterEqual(result, 0.0)
        self.assertLess(result, TWO_PI)

    def test_wrap_angle_minus_pi_maps_to_pi(self):
        self.assertEqual(math.pi, wrap_angle(-math.pi))

    def test_wrap_angle_large(self):
        self.assertAlmostEqual(wrap_angle(5 * math.pi / 2), math.pi / 2)
        self.assertAlmostEqual(wrap_angle(-5 * math.pi / 2), -math.pi / 2)


class TestPos(unittest.TestCase):
    def test_translated(self):
        self.assertEqual(Pos(3.0, -1.0, 0.5), Pos(1.0, 1.0, 0.5).translated(2.0, -2.0))

    def test_rotated_quarter_turn(self):
        result = Pos(1.0, 0.0, 0.0).rotated(math.pi / 2)
        self.assertAlmostEqual(result.x, 0.0)
        self.assertAlmostEqual(result.y, 1.0)
        self.assertAlmostEqual(result.heading, math.pi / 2)

    def test_scaled_keeps_heading(self):
        self.assertEqual(Pos(2.0, 4.0, 1.0), Pos(1.0, 2.0, 1.0).scaled(2.0))

    def test_to_local(self):
        start = Pos(1.0, 1.0, math.pi / 4)
        local = start.to_local(Pos(-3.0, -3.0, -math.pi / 4))
        self.assertAlmostEqual(local.x, -4 * math.sqrt(2))
        self.assertAlmostEqual(local.y, 0.0)
        self.assertAlmostEqual(local.heading, -math.pi / 2)

    def test_local_round_trip(self):
        frames = [Pos(0.0, 0.0, 0.0), Pos(1.0, 1.0, math.pi / 4), Pos(-7.5, 3.2, -2.9), Pos(100.0, -40.0, 11.0)]
        poses = [Pos(0.0, 0.0, 0.0), Pos(-3.0, -3.0, -math.pi / 4), Pos(2.5, 8.1, 3.0)]
        for frame in frames:
            for pose in poses:
                result = frame.from_local(frame.to_local(pose))
                self.assertAlmostEqual(result.x, pose.x, delta=1e-10)
                self.assertAlmostEqual(result.y, pose.y, delta=1e-10)
                self.assertAlmostEqual(result.heading, pose.heading, delta=1e-10)

    def test_at(self):
        x, y = Pos(1.0, 2.0, math.pi / 2).at(3.0)
        self.assertAlmostEqual(x, 1.0)
        self.assertAlmostEqual(y, 5.0)

    def test_at_negative_distance_goes_behind(self):
        x, y = Pos(0.0, 0.0, 0.0).at(-2.0)
        self.assertAlmostEqual(x, -2.0)
        self.assertAlmostEqual(y, 0.0)

    def test_distance_to(self):
        self.assertAlmostEqual(Pos(0.0, 0.0, 0.0).distance_to(Pos(3.0, 4.0, 1.0)), 5.0)

    def test_heading_error_wraps(self):
        error = Pos(0.0, 0.0, 0.1).heading_error_to(Pos(0.0, 0.0, TWO_PI - 0.1))
        self.assertAlmostEqual(error, 0.2)

    def test_is_finite(self):
        self.assertTrue(Pos(0.0, 1.0, 2.0).is_finite())
        self.assertFalse(Pos(math.nan, 1.0, 2.0).is_finite())
        self.assertFalse(Pos(0.0, 1.0, math.inf).is_finite())


if __name__ == "__main__":
    unittest.main()
