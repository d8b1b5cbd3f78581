"""
Curve sampler: turns a solved CurvePath into a dense, ordered list of (pose, steering) samples in the world frame.

Every segment is walked from the final sample of the previous one, in the path's local frame where the start is
(0, 0, 0). Points are emitted every `step_size` meters of arc length (backwards for reverse segments) and one final
point exactly on the segment boundary, so the trace never overshoots. The whole trace is then moved into the world
frame through the start pose.
"""

import math
from typing import List, Tuple

from steerpath.paths import CurvePath, PathElement, Steering
from steerpath.pose import Pos

EPSILON = 1e-9  # m, samples closer than this to the segment end are dropped in favor of the exact boundary point
DEFAULT_STEP_SIZE = 0.1  # m

Sample = Tuple[Pos, Steering]


def _advance(origin: Pos, element: PathElement, arc_length: float, turning_radius: float) -> Pos:
    """Pose after driving `arc_length` meters (signed) along the element, starting from origin"""
    if element.steering == Steering.STRAIGHT:
        x, y = origin.at(arc_length)
        return Pos(x, y, origin.heading)

    # Unit circle arc scaled by the turning radius; steering sign flips the turn
    angle = arc_length / turning_radius
    turn = element.steering.value
    local = Pos(
        turning_radius * math.sin(angle),
        turn * turning_radius * (1 - math.cos(angle)),
        turn * angle,
    )
    return origin.from_local(local)


def sample_local(path: CurvePath, step_size: float = DEFAULT_STEP_SIZE) -> List[Sample]:
    """Samples in the path's local frame (start at the origin facing +x)"""
    if not step_size > 0:
        raise ValueError(f"Step size must be positive, got {step_size}")

    elements = path.active_segments()
    first = elements[0].steering if elements else Steering.EMPTY
    samples: List[Sample] = [(Pos(0.0, 0.0, 0.0), first)]

    for element in elements:
        if element.distance < EPSILON:
            # Rounding residue of a zero-length arc would only duplicate the previous sample
            continue

        origin = samples[-1][0]
        step = math.copysign(step_size, element.param)
        count = 1
        while abs(count * step) < element.distance - EPSILON:
            samples.append((_advance(origin, element, count * step, path.turning_radius), element.steering))
            count += 1

        samples.append((_advance(origin, element, element.param, path.turning_radius), element.steering))

    return samples


def sample_path(path: CurvePath, step_size: float = DEFAULT_STEP_SIZE) -> List[Sample]:
    """Dense, deterministic pose trace of a path in the world frame"""
    return [(path.start.from_local(pose), steering) for pose, steering in sample_local(path, step_size)]
