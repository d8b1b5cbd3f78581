"""
Oriented 2D pose and the frame operations every planner builds on.

A pose is a position plus a heading (rad, 0 is along x-axis, CCW is positive). The heading is never normalized by
the type itself; the solvers wrap angles where their formulas require it.
"""

import math
from dataclasses import dataclass
from typing import Tuple

TWO_PI = 2 * math.pi


def mod2pi(angle: float) -> float:
    """Reduce an angle into [0, 2pi)"""
    angle = math.fmod(angle, TWO_PI)
    if angle < 0:
        angle += TWO_PI
    if angle >= TWO_PI:  # -1e-17 + 2pi rounds up to 2pi
        angle = 0.0
    return angle


def wrap_angle(angle: float) -> float:
    """Reduce an angle into (-pi, pi]"""
    angle = math.fmod(angle, TWO_PI)
    if angle > math.pi:
        angle -= TWO_PI
    elif angle <= -math.pi:
        angle += TWO_PI
    return angle


@dataclass(frozen=True)
class Pos:
    x: float  # m
    y: float  # m
    heading: float  # rad, 0 is along x-axis, CCW is positive

    def translated(self, dx: float, dy: float) -> 'Pos':
        return Pos(self.x + dx, self.y + dy, self.heading)

    def rotated(self, angle: float) -> 'Pos':
        """Rotate about the origin; the heading turns along with the position"""
        c, s = math.cos(angle), math.sin(angle)
        return Pos(c * self.x - s * self.y, s * self.x + c * self.y, self.heading + angle)

    def scaled(self, factor: float) -> 'Pos':
        """Scale the position only, headings are scale-free"""
        return Pos(self.x * factor, self.y * factor, self.heading)

    def to_local(self, other: 'Pos') -> 'Pos':
        """Express another pose in the frame where this pose is (0, 0, 0)"""
        return other.translated(-self.x, -self.y).rotated(-self.heading)

    def from_local(self, other: 'Pos') -> 'Pos':
        """Inverse of to_local: bring a pose expressed in this pose's frame back to the world frame"""
        return other.rotated(self.heading).translated(self.x, self.y)

    def at(self, distance: float) -> Tuple[float, float]:
        """Point `distance` ahead along the heading (behind for negative values)"""
        return (self.x + distance * math.cos(self.heading),
                self.y + distance * math.sin(self.heading))

    def distance_to(self, other: 'Pos') -> float:
        """Euclidean distance to another position"""
        return math.hypot(self.x - other.x, self.y - other.y)

    def heading_error_to(self, other: 'Pos') -> float:
        """Absolute heading error to another pose, in [0, pi]"""
        return abs(wrap_angle(self.heading - other.heading))

    def to_xy_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.heading)
