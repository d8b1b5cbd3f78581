import math
import unittest

import matplotlib

matplotlib.use("Agg")

from steerpath import main  # noqa: E402
from steerpath.dubins import DubinsWord  # noqa: E402
from steerpath.pose import Pos  # noqa: E402


class TestDrive(unittest.TestCase):
    def test_straight(self):
        result = main.drive(Pos(0.0, 0.0, 0.0), 1.0, 0.0, 2.0)
        self.assertEqual(Pos(2.0, 0.0, 0.0), result)

    def test_negative_curvature_turns_left(self):
        # Quarter circle of radius 1
        result = main.drive(Pos(0.0, 0.0, 0.0), 1.0, -1.0, math.pi / 2)
        self.assertAlmostEqual(1.0, result.x)
        self.assertAlmostEqual(1.0, result.y)
        self.assertAlmostEqual(math.pi / 2, result.heading)

    def test_positive_curvature_turns_right(self):
        result = main.drive(Pos(0.0, 0.0, 0.0), 1.0, 1.0, math.pi / 2)
        self.assertAlmostEqual(1.0, result.x)
        self.assertAlmostEqual(-1.0, result.y)
        self.assertAlmostEqual(-math.pi / 2, result.heading)


class TestRun(unittest.TestCase):
    def test_demo_scenario(self):
        summary = main.run(show_plots=False)

        self.assertIsInstance(summary['dubins'].word, DubinsWord)
        self.assertLessEqual(summary['reeds_shepp'].length, summary['dubins'].length + 1e-9)

        tracking = summary['tracking']
        self.assertTrue(tracking['reached'])
        self.assertLess(tracking['final_pose'].distance_to(main.GOAL), main.GOAL_TOLERANCE)
        self.assertGreater(tracking['steps'], 0)

        quintic = summary['quintic']
        self.assertIsNotNone(quintic)
        self.assertGreater(quintic.duration, main.MIN_TIME)
        self.assertLessEqual(quintic.duration, main.MAX_TIME)


if __name__ == "__main__":
    unittest.main()
