"""
Dubins shortest paths: forward-only travel with a bounded turning radius.

The end pose is moved into the start frame and the problem is normalized by the maximum curvature, so every family
works with a unit turning radius. Each of the six families (three segments of turn/straight/turn) has a closed-form
solution derived from tangent-circle geometry; the shortest feasible family wins.

Notation follows Shkel & Lumelsky, "Classification of the Dubins set": alpha and beta are the start and end headings
measured from the start-to-end chord, d is the normalized chord length.
"""

import logging
import math
from enum import Enum
from typing import Callable, Dict, NamedTuple, Optional, Tuple

from steerpath.errors import InvalidCurvature, NaNInCalculation, PathNotFound
from steerpath.paths import CurvePath, PathElement, Steering, path_length, scale
from steerpath.pose import TWO_PI, Pos, mod2pi

logger = logging.getLogger(__name__)

L, S, R = Steering.LEFT, Steering.STRAIGHT, Steering.RIGHT

EPSILON = 1e-10  # tolerance on squared chords, arccos arguments and full-turn arcs


class DubinsWord(Enum):
    RSR = (R, S, R)
    RSL = (R, S, L)
    LSR = (L, S, R)
    LSL = (L, S, L)
    RLR = (R, L, R)
    LRL = (L, R, L)


class Geometry(NamedTuple):
    """Normalized boundary geometry shared by every family"""
    alpha: float
    beta: float
    d: float
    sa: float
    sb: float
    ca: float
    cb: float
    cab: float

    @classmethod
    def from_local_end(cls, local_end: Pos, max_curvature: float) -> 'Geometry':
        d = max_curvature * math.hypot(local_end.x, local_end.y)
        theta = mod2pi(math.atan2(local_end.y, local_end.x))
        alpha = mod2pi(-theta)
        beta = mod2pi(local_end.heading - theta)
        return cls(
            alpha=alpha,
            beta=beta,
            d=d,
            sa=math.sin(alpha),
            sb=math.sin(beta),
            ca=math.cos(alpha),
            cb=math.cos(beta),
            cab=math.cos(alpha - beta),
        )


Lengths = Tuple[float, float, float]


def _arc(angle: float) -> float:
    """mod2pi, with a full turn left over by rounding folded back to zero"""
    angle = mod2pi(angle)
    return 0.0 if TWO_PI - angle < EPSILON else angle


def _acos_arg(value: float) -> Optional[float]:
    if abs(value) > 1 + EPSILON:
        return None
    return max(-1.0, min(1.0, value))


def rsr(g: Geometry) -> Optional[Lengths]:
    p_sq = 2 + g.d * g.d - 2 * g.cab + 2 * g.d * (g.sb - g.sa)
    if p_sq < -EPSILON:
        return None
    vx, vy = g.d - g.sa + g.sb, g.ca - g.cb
    if math.hypot(vx, vy) < EPSILON:
        # Start and end circles coincide: a single right arc, the tangent direction is undefined
        return _arc(g.alpha - g.beta), 0.0, 0.0
    tmp = math.atan2(vy, vx)
    return _arc(g.alpha - tmp), math.sqrt(max(p_sq, 0.0)), _arc(tmp - g.beta)


def rsl(g: Geometry) -> Optional[Lengths]:
    p_sq = g.d * g.d - 2 + 2 * g.cab - 2 * g.d * (g.sa + g.sb)
    if p_sq < -EPSILON:
        return None
    p = math.sqrt(max(p_sq, 0.0))
    tmp = math.atan2(g.ca + g.cb, g.d - g.sa - g.sb) - math.atan2(2, p)
    return _arc(g.alpha - tmp), p, _arc(g.beta - tmp)


def lsr(g: Geometry) -> Optional[Lengths]:
    p_sq = -2 + g.d * g.d + 2 * g.cab + 2 * g.d * (g.sa + g.sb)
    if p_sq < -EPSILON:
        return None
    p = math.sqrt(max(p_sq, 0.0))
    tmp = math.atan2(-g.ca - g.cb, g.d + g.sa + g.sb) - math.atan2(-2, p)
    return _arc(tmp - g.alpha), p, _arc(tmp - mod2pi(g.beta))


def lsl(g: Geometry) -> Optional[Lengths]:
    p_sq = 2 + g.d * g.d - 2 * g.cab + 2 * g.d * (g.sa - g.sb)
    if p_sq < -EPSILON:
        return None
    vx, vy = g.d + g.sa - g.sb, g.cb - g.ca
    if math.hypot(vx, vy) < EPSILON:
        # Start and end circles coincide: a single left arc
        return _arc(g.beta - g.alpha), 0.0, 0.0
    tmp = math.atan2(vy, vx)
    return _arc(tmp - g.alpha), math.sqrt(max(p_sq, 0.0)), _arc(g.beta - tmp)


def rlr(g: Geometry) -> Optional[Lengths]:
    tmp = _acos_arg((6 - g.d * g.d + 2 * g.cab + 2 * g.d * (g.sa - g.sb)) / 8)
    if tmp is None:
        return None
    p = _arc(TWO_PI - math.acos(tmp))
    t = _arc(g.alpha - math.atan2(g.ca - g.cb, g.d - g.sa + g.sb) + p / 2)
    return t, p, _arc(g.alpha - g.beta - t + p)


def lrl(g: Geometry) -> Optional[Lengths]:
    tmp = _acos_arg((6 - g.d * g.d + 2 * g.cab + 2 * g.d * (g.sb - g.sa)) / 8)
    if tmp is None:
        return None
    p = _arc(TWO_PI - math.acos(tmp))
    t = _arc(-g.alpha - math.atan2(g.ca - g.cb, g.d + g.sa - g.sb) + p / 2)
    return t, p, _arc(mod2pi(g.beta) - g.alpha - t + mod2pi(p))


# Enumeration order is the tie-break order
FAMILIES: Dict[DubinsWord, Callable[[Geometry], Optional[Lengths]]] = {
    DubinsWord.RSR: rsr,
    DubinsWord.RSL: rsl,
    DubinsWord.LSR: lsr,
    DubinsWord.LSL: lsl,
    DubinsWord.RLR: rlr,
    DubinsWord.LRL: lrl,
}


def get_all_paths(geometry: Geometry) -> Dict[DubinsWord, Tuple[PathElement, ...]]:
    """Normalized segments of every feasible family, in enumeration order"""
    paths = {}
    for word, family in FAMILIES.items():
        lengths = family(geometry)
        if lengths is None:
            continue
        if any(math.isnan(v) for v in lengths):
            logger.debug(f"Dubins {word.name} produced NaN, skipped")
            continue
        paths[word] = tuple(PathElement(v, steering) for v, steering in zip(lengths, word.value))
    return paths


def solve_dubins(start: Pos, end: Pos, max_curvature: float) -> CurvePath:
    """Return the shortest forward-only path from start to end among the six Dubins families"""
    if math.isnan(max_curvature) or not start.is_finite() or not end.is_finite():
        raise NaNInCalculation(f"Non-finite Dubins input: {start}, {end}, curvature {max_curvature}")
    if not (0 < max_curvature < math.inf):
        raise InvalidCurvature(f"Maximum curvature must be positive, got {max_curvature}")

    local_end = start.to_local(end)
    geometry = Geometry.from_local_end(local_end, max_curvature)

    best_word, best_segments, best_length = None, None, math.inf
    for word, segments in get_all_paths(geometry).items():
        length = path_length(segments)
        if length < best_length:  # strict: the first family wins ties
            best_word, best_segments, best_length = word, segments, length

    if best_word is None:
        raise PathNotFound(f"No Dubins path from {start} to {end} with curvature {max_curvature}")

    logger.debug(f"Dubins {best_word.name} selected, normalized length {best_length:.4f}")

    segments = scale(best_segments, 1.0 / max_curvature)
    return CurvePath(
        word=best_word,
        start=start,
        end=end,
        local_end=local_end,
        segments=segments,
        max_curvature=max_curvature,
        length=path_length(segments),
    )
