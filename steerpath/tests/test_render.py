import math
import unittest

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from steerpath import render  # noqa: E402
from steerpath.dubins import solve_dubins  # noqa: E402
from steerpath.pose import Pos  # noqa: E402
from steerpath.quintic import QuinticPolynomial  # noqa: E402
from steerpath.reeds_shepp import solve_reeds_shepp  # noqa: E402


class TestRender(unittest.TestCase):
    def tearDown(self):
        plt.close("all")

    def test_curve_path_one_line_per_steering_run(self):
        path = solve_dubins(Pos(1.0, 1.0, math.pi / 4), Pos(-3.0, -3.0, -math.pi / 4), 1.0)
        ax = render.plot_curve_path(path, 0.1)
        self.assertEqual(3, len(ax.lines))
        self.assertEqual("LSL", ax.get_title())

    def test_reeds_shepp_path(self):
        path = solve_reeds_shepp(Pos(0.0, 0.0, 0.0), Pos(0.0, 1.0, 0.0), 1.0)
        ax = render.plot_curve_path(path, 0.1, title="parallel")
        self.assertGreaterEqual(len(ax.lines), 1)
        self.assertEqual("parallel", ax.get_title())

    def test_empty_samples(self):
        ax = render.plot_samples([])
        self.assertEqual(0, len(ax.lines))

    def test_trajectory(self):
        polynomial = QuinticPolynomial(((0.0, 0.0), (0.0, 0.0), (0.0, 0.0)), ((1.0, 2.0), (0.0, 0.0), (0.0, 0.0)), 2.0)
        axes = render.plot_trajectory(polynomial)
        self.assertEqual(3, len(axes))
        self.assertEqual(1, len(axes[1].lines))

    def test_tracking_overlay(self):
        path = solve_dubins(Pos(0.0, 0.0, 0.0), Pos(3.0, 0.0, 0.0), 1.0)
        trace = [Pos(0.0, 0.1, 0.0), Pos(1.0, 0.05, 0.0), Pos(2.0, 0.0, 0.0)]
        ax = render.plot_tracking(path.sample(0.5), trace)
        self.assertEqual("--", ax.lines[-1].get_linestyle())


if __name__ == "__main__":
    unittest.main()
