"""
Pure Pursuit steers toward the point where the path leaves a lookahead circle centered on the vehicle.

The goal is found by walking to the furthest path point still inside the circle and intersecting the path direction
from that point with the circle. The returned curvature is 1 / radius of the arc through the goal; negative means a
left turn. Any error means the curvature must not be trusted and the path should typically be regenerated.
"""

import logging
import math
from typing import Iterable, Tuple

import numpy as np

from steerpath.errors import InvalidCodePath, InvalidInput, InvalidPath, RobotTooFar, WrongOrientation
from steerpath.pose import Pos

logger = logging.getLogger(__name__)


def points_from_samples(samples: Iterable[Tuple[Pos, object]]) -> np.ndarray:
    """(N, 2) array of path points from sampler output"""
    return np.array([pose.to_xy_tuple() for pose, _ in samples], dtype=float).reshape(-1, 2)


def find_path_point(points: np.ndarray, position: np.ndarray, lookahead_sq: float) -> int:
    """Index of the furthest point along the path within the lookahead circle"""
    if len(points) < 2:
        raise InvalidPath(f"A path needs at least 2 points, got {len(points)}")

    d_sq = np.sum((points - position) ** 2, axis=1)
    inside = np.flatnonzero(d_sq < lookahead_sq)
    if inside.size == 0:
        # The plan no longer matches where the vehicle is
        raise RobotTooFar(f"No path point within {math.sqrt(lookahead_sq):.3f} m of {tuple(position)}")

    return int(inside[-1])


def find_path_intersection(
        segment_start: np.ndarray,
        direction: np.ndarray,
        position: np.ndarray,
        lookahead_sq: float,
) -> Tuple[float, np.ndarray]:
    """
    Standard ray/circle intersection. Since segment_start lies inside the circle there is exactly one intersection
    ahead of it (t > 0) and one behind it (t <= 0); anything else is a bug.

    Returns:
        (t, point) with point = segment_start + t * direction
    """
    oc = segment_start - position

    a = np.dot(direction, direction)
    b = 2.0 * np.dot(oc, direction)
    c = np.dot(oc, oc) - lookahead_sq

    disc = b * b - 4.0 * a * c
    if disc < 0:
        logger.error("No solutions found in pure pursuit, this is a bug.")
        raise InvalidCodePath("Path direction misses the lookahead circle")

    disc = math.sqrt(disc)
    t0, t1 = sorted(((-b - disc) / (2.0 * a), (-b + disc) / (2.0 * a)))

    if t0 > 0:
        logger.error("More than one intersection found in pure pursuit, this is a bug.")
        raise InvalidCodePath("Segment start is outside the lookahead circle")
    if t1 <= 0:
        logger.error("No positive intersections found in pure pursuit, this is a bug.")
        raise InvalidCodePath("No intersection ahead of the segment start")

    return t1, segment_start + t1 * direction


def get_curvature(points, pose: Pos, lookahead_sq: float) -> float:
    """
    Signed curvature (1/m) steering the vehicle at `pose` back onto the polyline `points`; negative is a left turn.

    Args:
        points: (N, 2) path points in the world frame, e.g. from points_from_samples
        pose: current vehicle pose
        lookahead_sq: squared lookahead distance (m^2)
    """
    if not lookahead_sq > 0:
        raise InvalidInput(f"Squared lookahead must be positive, got {lookahead_sq}")

    points = np.asarray(points, dtype=float).reshape(-1, 2)
    position = np.array(pose.to_xy_tuple())

    i = find_path_point(points, position, lookahead_sq)

    # Direction along the path; past the last point keep extending the final segment
    if i + 1 == len(points):
        direction = points[i] - points[i - 1]
    else:
        direction = points[i + 1] - points[i]
    if not np.any(direction):
        raise InvalidPath(f"Zero-length path segment at point {i}")

    _, goal = find_path_intersection(points[i], direction, position, lookahead_sq)

    # Transform into vehicle frame
    dx, dy = goal - position
    cos_t, sin_t = math.cos(pose.heading), math.sin(pose.heading)
    x_frame = cos_t * dx + sin_t * dy
    y_frame = -sin_t * dx + cos_t * dy

    if x_frame < 0:
        logger.warning("Pure pursuit, facing wrong way!")
        raise WrongOrientation(f"Goal point {tuple(goal)} is behind the vehicle at {pose}")

    # Pure Pursuit steering law (kappa = 2 * y_frame / L^2), sign flipped so that left turns are negative
    return 2.0 * -y_frame / lookahead_sq
