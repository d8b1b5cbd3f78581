"""
Path segments and solved curve paths shared by the Dubins and Reeds-Shepp solvers.

A segment is a signed arc length tagged with a steering kind. The sign encodes the gear: negative values are driven
in reverse (Reeds-Shepp only). Paths carry a fixed number of slots (3 for Dubins, 5 for Reeds-Shepp); unused slots
hold EMPTY_ELEMENT.

The transforms below are the ones described around the end of the Reeds-Shepp article: they map one word solution
onto its mirrored and time-reversed siblings, and are kept as pure functions over segment tuples.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from steerpath.errors import InvalidCurvature
from steerpath.pose import Pos


class Steering(Enum):
    LEFT = 1  # CCW, heading grows when driving forward
    RIGHT = -1
    STRAIGHT = 0
    EMPTY = None  # unused slot


class Gear(Enum):
    FORWARD = 1
    BACKWARD = -1


# Pre-computed mirror of the steering kinds
_STEERING_NEG = {
    Steering.LEFT: Steering.RIGHT,
    Steering.RIGHT: Steering.LEFT,
    Steering.STRAIGHT: Steering.STRAIGHT,
    Steering.EMPTY: Steering.EMPTY,
}


@dataclass(eq=True, frozen=True)
class PathElement:
    param: float  # signed arc length
    steering: Steering

    @property
    def gear(self) -> Gear:
        return Gear.BACKWARD if self.param < 0 else Gear.FORWARD

    @property
    def distance(self) -> float:
        return abs(self.param)

    def is_empty(self) -> bool:
        return self.steering is Steering.EMPTY

    def __repr__(self):
        if self.is_empty():
            return "{ EMPTY }"
        return f"{{ Steering: {self.steering.name}\tGear: {self.gear.name}\tdistance: {round(self.distance, 2)} }}"


EMPTY_ELEMENT = PathElement(0.0, Steering.EMPTY)

Segments = Tuple[PathElement, ...]


def path_length(path: Segments) -> float:
    """Total unsigned length; the minimization key of both solvers"""
    return sum(e.distance for e in path)


def timeflip(path: Segments) -> Segments:
    """Same geometry traversed with forward and backward swapped"""
    return tuple(PathElement(-e.param, e.steering) if not e.is_empty() else e for e in path)


def reflect(path: Segments) -> Segments:
    """Mirror image across the initial heading line: left and right swap"""
    return tuple(PathElement(e.param, _STEERING_NEG[e.steering]) for e in path)


def reverse_prefix(path: Segments, count: int) -> Segments:
    """Reverse the order of the first `count` segments, keep the rest in place"""
    return tuple(reversed(path[:count])) + tuple(path[count:])


def pad(path: Segments, slots: int) -> Segments:
    """Fill trailing slots with EMPTY_ELEMENT up to a fixed length"""
    if len(path) > slots:
        raise ValueError(f"Path of {len(path)} segments does not fit into {slots} slots")
    return tuple(path) + (EMPTY_ELEMENT,) * (slots - len(path))


def scale(path: Segments, factor: float) -> Segments:
    """Scale every arc length, e.g. to convert curvature-normalized units to meters"""
    return tuple(PathElement(e.param * factor, e.steering) if not e.is_empty() else e for e in path)


@dataclass(frozen=True)
class CurvePath:
    """
    A solved minimum-length path. Segment params are physical arc lengths (m), the family identifier is the
    solver-specific word enum.
    """
    word: Enum
    start: Pos
    end: Pos
    local_end: Pos  # end expressed in the start frame
    segments: Segments
    max_curvature: float  # 1/m
    length: float  # m, sum of the unsigned segment lengths

    def __post_init__(self):
        if not (self.max_curvature > 0 and math.isfinite(self.max_curvature)):
            raise InvalidCurvature(f"Maximum curvature must be positive, got {self.max_curvature}")

    @property
    def turning_radius(self) -> float:
        return 1.0 / self.max_curvature

    @property
    def normalized_length(self) -> float:
        """Length in units of the turning radius"""
        return self.length * self.max_curvature

    def active_segments(self) -> Segments:
        return tuple(e for e in self.segments if not e.is_empty())

    def sample(self, step_size: float = None):
        """Dense pose trace in the world frame, see sampler.sample_path"""
        from steerpath.sampler import DEFAULT_STEP_SIZE, sample_path
        return sample_path(self, DEFAULT_STEP_SIZE if step_size is None else step_size)

    def __repr__(self):
        segments = ", ".join(repr(e) for e in self.active_segments())
        return f"CurvePath({self.word.name}, length={self.length:.3f}, [{segments}])"
