import math
import unittest

from steerpath.dubins import DubinsWord
from steerpath.errors import InvalidCurvature, PathPlanningError
from steerpath.paths import (
    EMPTY_ELEMENT,
    CurvePath,
    Gear,
    PathElement,
    Steering,
    pad,
    path_length,
    reflect,
    reverse_prefix,
    scale,
    timeflip,
)
from steerpath.pose import Pos

L, S, R = Steering.LEFT, Steering.STRAIGHT, Steering.RIGHT

PATH = (PathElement(1.0, L), PathElement(-2.0, S), PathElement(0.5, R), EMPTY_ELEMENT)


class TestPathElement(unittest.TestCase):
    def test_gear_from_sign(self):
        self.assertEqual(Gear.FORWARD, PathElement(1.0, L).gear)
        self.assertEqual(Gear.BACKWARD, PathElement(-1.0, L).gear)

    def test_distance_is_unsigned(self):
        self.assertEqual(2.0, PathElement(-2.0, S).distance)

    def test_empty(self):
        self.assertTrue(EMPTY_ELEMENT.is_empty())
        self.assertFalse(PathElement(0.0, S).is_empty())
        self.assertEqual("{ EMPTY }", repr(EMPTY_ELEMENT))


class TestTransforms(unittest.TestCase):
    def test_path_length(self):
        self.assertEqual(3.5, path_length(PATH))

    def test_timeflip_negates_params(self):
        result = timeflip(PATH)
        self.assertEqual([-1.0, 2.0, -0.5], [e.param for e in result[:3]])
        self.assertEqual([L, S, R], [e.steering for e in result[:3]])
        self.assertIs(EMPTY_ELEMENT, result[3])

    def test_reflect_swaps_turns(self):
        result = reflect(PATH)
        self.assertEqual([R, S, L, Steering.EMPTY], [e.steering for e in result])
        self.assertEqual([1.0, -2.0, 0.5, 0.0], [e.param for e in result])

    def test_transforms_are_involutions(self):
        self.assertEqual(PATH, timeflip(timeflip(PATH)))
        self.assertEqual(PATH, reflect(reflect(PATH)))

    def test_reverse_prefix(self):
        result = reverse_prefix(PATH, 3)
        self.assertEqual((PATH[2], PATH[1], PATH[0], PATH[3]), result)

    def test_reverse_prefix_zero_is_identity(self):
        self.assertEqual(PATH, reverse_prefix(PATH, 0))

    def test_pad(self):
        result = pad(PATH[:3], 5)
        self.assertEqual(5, len(result))
        self.assertEqual((EMPTY_ELEMENT, EMPTY_ELEMENT), result[3:])

    def test_pad_too_long(self):
        with self.assertRaises(ValueError):
            pad(PATH, 3)

    def test_scale_keeps_empty(self):
        result = scale(PATH, 2.0)
        self.assertEqual([2.0, -4.0, 1.0, 0.0], [e.param for e in result])
        self.assertIs(EMPTY_ELEMENT, result[3])


class TestCurvePath(unittest.TestCase):
    def _path(self, max_curvature):
        segments = (PathElement(1.0, L), PathElement(2.0, S), PathElement(0.5, L))
        return CurvePath(
            word=DubinsWord.LSL,
            start=Pos(0.0, 0.0, 0.0),
            end=Pos(0.0, 0.0, 0.0),
            local_end=Pos(0.0, 0.0, 0.0),
            segments=segments,
            max_curvature=max_curvature,
            length=path_length(segments),
        )

    def test_derived_properties(self):
        path = self._path(0.5)
        self.assertEqual(2.0, path.turning_radius)
        self.assertEqual(1.75, path.normalized_length)

    def test_invalid_curvature(self):
        for curvature in (0.0, -1.0, math.inf, math.nan):
            with self.assertRaises(InvalidCurvature):
                self._path(curvature)

    def test_invalid_curvature_is_a_value_error(self):
        with self.assertRaises(ValueError):
            self._path(0.0)
        with self.assertRaises(PathPlanningError):
            self._path(0.0)

    def test_active_segments_skip_empty(self):
        path = self._path(1.0)
        self.assertEqual(3, len(path.active_segments()))


if __name__ == "__main__":
    unittest.main()
