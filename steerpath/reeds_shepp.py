"""
Implementation of the optimal path formulas given in the following paper:

OPTIMAL PATHS FOR A CAR THAT GOES BOTH FORWARDS AND BACKWARDS
J. A. REEDS AND L. A. SHEPP

notes: there are some typos in the formulas given in the paper;
some formulas have been adapted (cf https://ompl.kavrakilab.org/ReedsSheppStateSpace_8cpp_source.html)

The 9 words come from 8 formula functions (8.4 reuses 8.3 in the backward frame). Each takes the goal (x, y, phi)
in the curvature-normalized frame where the start is (0, 0, 0), angles in radians, and returns the corresponding
path (if it exists) as a tuple of PathElements (or an empty tuple). Params are signed:
positive is driving forward, negative is driving backward.

Notation in the paper: {L, R, S}{+, -}, e.g. L+R-L+ is left forward, right backward, left forward. A "|" marks a
cusp (gear change), "u" a pair of equal arcs.

Every word is evaluated under four symmetries of the goal (identity, timeflip, reflect and both), and three of them
additionally in the backward frame with the leading segments reversed, which covers all 48 words.
"""

import logging
import math
from enum import Enum
from typing import Callable, List, NamedTuple, Optional, Tuple

from steerpath.errors import InvalidCurvature, NaNInCalculation, PathNotFound
from steerpath.paths import (
    CurvePath,
    PathElement,
    Segments,
    Steering,
    pad,
    path_length,
    reflect,
    reverse_prefix,
    scale,
    timeflip,
)
from steerpath.pose import Pos, wrap_angle

logger = logging.getLogger(__name__)

SLOTS = 5
HALF_PI = math.pi / 2

LEFT, RIGHT, STRAIGHT = Steering.LEFT, Steering.RIGHT, Steering.STRAIGHT


def M(theta):
    """
    Return the angle phi = theta mod (2 pi) such that -pi < phi <= pi.
    """
    return wrap_angle(theta)


def R(x, y):
    """
    Return the polar coordinates (r, theta) of the point (x, y).
    """
    r = math.sqrt(x * x + y * y)
    theta = math.atan2(y, x)
    return r, theta


def tau_omega(u, v, xi, eta, phi):
    """
    First and last arc of the CC|CC and C|CC|C words given the two middle arcs u and v.
    """
    delta = M(u - v)
    a = math.sin(u) - math.sin(delta)
    b = math.cos(u) - math.cos(delta) - 1
    t1 = math.atan2(eta * a - xi * b, xi * a + eta * b)
    t2 = 2 * (math.cos(delta) - math.cos(v) - math.cos(u)) + 3
    tau = M(t1 + math.pi) if t2 < 0 else M(t1)
    omega = M(tau - u + v - phi)
    return tau, omega


def word1(x, y, phi) -> Segments:
    """
    Formula 8.1: CSC (same turns), L+S+L+
    """
    u, t = R(x - math.sin(phi), y - 1 + math.cos(phi))
    if t < 0:
        return ()
    v = M(phi - t)
    if v < 0:
        return ()

    return PathElement(t, LEFT), PathElement(u, STRAIGHT), PathElement(v, LEFT)


def word2(x, y, phi) -> Segments:
    """
    Formula 8.2: CSC (opposite turns), L+S+R+
    """
    rho, t1 = R(x + math.sin(phi), y - 1 - math.cos(phi))
    if rho * rho < 4:
        return ()

    u = math.sqrt(rho * rho - 4)
    t = M(t1 + math.atan2(2, u))
    v = M(t - phi)
    # OMPL also rejects t < 0 or v < 0 here (unoptimal paths?); left permissive on purpose

    return PathElement(t, LEFT), PathElement(u, STRAIGHT), PathElement(v, RIGHT)


def word3(x, y, phi) -> Segments:
    """
    Formula 8.3: C|C|C, L+R-L+ (8.4 C|CC and CC|C come from the backward frame)
    """
    xi = x - math.sin(phi)
    eta = y - 1 + math.cos(phi)
    rho, theta = R(xi, eta)

    # typo in paper: rho, not rho^2
    if rho > 4:
        return ()

    u = -2 * math.asin(rho / 4)
    t = M(theta + u / 2 + math.pi)
    v = M(phi - t + u)

    return PathElement(t, LEFT), PathElement(u, RIGHT), PathElement(v, LEFT)


def word4(x, y, phi) -> Segments:
    """
    Formula 8.7: CCu|CuC, L+R+L-R-
    """
    xi = x + math.sin(phi)
    eta = y - 1 - math.cos(phi)
    rho = (2 + math.sqrt(xi * xi + eta * eta)) / 4
    if rho > 1:
        return ()

    u = math.acos(rho)
    t, v = tau_omega(u, -u, xi, eta, phi)
    if t < 0 or v > 0:
        return ()

    return PathElement(t, LEFT), PathElement(u, RIGHT), PathElement(-u, LEFT), PathElement(v, RIGHT)


def word5(x, y, phi) -> Segments:
    """
    Formula 8.8: C|CuCu|C, L+R-L-R+
    """
    xi = x + math.sin(phi)
    eta = y - 1 - math.cos(phi)
    rho = (20 - xi * xi - eta * eta) / 16
    if not 0 <= rho < 1:
        return ()

    # acos of [0, 1) keeps u within [-pi/2, 0)
    u = -math.acos(rho)
    t, v = tau_omega(u, u, xi, eta, phi)

    return PathElement(t, LEFT), PathElement(u, RIGHT), PathElement(u, LEFT), PathElement(v, RIGHT)


def word6(x, y, phi) -> Segments:
    """
    Formula 8.9: C|C[pi/2]SC, L+R-S-L- (8.9 CSC[pi/2]|C comes from the backward frame)
    """
    xi = x - math.sin(phi)
    eta = y - 1 + math.cos(phi)
    rho, theta = R(xi, eta)
    if rho < 2:
        return ()

    r = math.sqrt(rho * rho - 4)
    u = 2 - r
    t = M(theta + math.atan2(r, -2))
    v = M(phi - HALF_PI - t)
    if t < 0 or u > 0 or v > 0:
        return ()

    return PathElement(t, LEFT), PathElement(-HALF_PI, RIGHT), PathElement(u, STRAIGHT), PathElement(v, LEFT)


def word7(x, y, phi) -> Segments:
    """
    Formula 8.10: C|C[pi/2]SC, L+R-S-R- (8.10 CSC[pi/2]|C comes from the backward frame)
    """
    xi = x + math.sin(phi)
    eta = y - 1 - math.cos(phi)
    rho, theta = R(-eta, xi)
    if rho < 2:
        return ()

    t = theta
    u = 2 - rho
    v = M(t + HALF_PI - phi)

    return PathElement(t, LEFT), PathElement(-HALF_PI, RIGHT), PathElement(u, STRAIGHT), PathElement(v, RIGHT)


def word8(x, y, phi) -> Segments:
    """
    Formula 8.11: C|C[pi/2]SC[pi/2]|C, L+R-S-L-R+
    """
    xi = x + math.sin(phi)
    eta = y - 1 - math.cos(phi)
    rho, _ = R(xi, eta)
    if rho < 2:
        return ()

    # typo in paper: u <= 0 rather than t <= 0
    u = 4 - math.sqrt(rho * rho - 4)
    if u > 0:
        return ()

    t = M(math.atan2((4 - u) * xi - 2 * eta, -2 * xi + (u - 4) * eta))
    v = M(t - phi)

    return (
        PathElement(t, LEFT),
        PathElement(-HALF_PI, RIGHT),
        PathElement(u, STRAIGHT),
        PathElement(-HALF_PI, LEFT),
        PathElement(v, RIGHT),
    )


class ReedsSheppWord(Enum):
    CSC_SAME = "8.1 L+S+L+"
    CSC_OPPOSITE = "8.2 L+S+R+"
    C_C_C = "8.3 L+R-L+"
    CC_C = "8.4 L-R-L+"
    CCU_CUC = "8.7 L+R+L-R-"
    C_CUCU_C = "8.8 L+R-L-R+"
    C_C2SC_SAME = "8.9 L+R-S-L-"
    CSC2_C_SAME = "8.9 L-S-R-L+"
    C_C2SC_OPPOSITE = "8.10 L+R-S-R-"
    CSC2_C_OPPOSITE = "8.10 R-S-R-L+"
    C_C2SC2_C = "8.11 L+R-S-L-R+"


class WordEntry(NamedTuple):
    word: ReedsSheppWord
    formula: Callable[[float, float, float], Segments]
    backward: bool  # evaluate in the backward frame
    reversed_prefix: int  # leading segments to reverse before the symmetry transforms


# Enumeration order is the tie-break order. The paper's second 8.4 word (L+R-L- in the forward frame) is
# identical to 8.3 and can never win a strict comparison, so only its backward-frame variant is listed.
WORDS: List[WordEntry] = [
    WordEntry(ReedsSheppWord.CSC_SAME, word1, False, 0),
    WordEntry(ReedsSheppWord.CSC_OPPOSITE, word2, False, 0),
    WordEntry(ReedsSheppWord.C_C_C, word3, False, 0),
    WordEntry(ReedsSheppWord.CC_C, word3, True, 3),
    WordEntry(ReedsSheppWord.CCU_CUC, word4, False, 0),
    WordEntry(ReedsSheppWord.C_CUCU_C, word5, False, 0),
    WordEntry(ReedsSheppWord.C_C2SC_SAME, word6, False, 0),
    WordEntry(ReedsSheppWord.CSC2_C_SAME, word6, True, 4),
    WordEntry(ReedsSheppWord.C_C2SC_OPPOSITE, word7, False, 0),
    WordEntry(ReedsSheppWord.CSC2_C_OPPOSITE, word7, True, 4),
    WordEntry(ReedsSheppWord.C_C2SC2_C, word8, False, 0),
]


def _is_valid(path: Segments) -> bool:
    return bool(path) and not any(math.isnan(e.param) for e in path)


def get_word_variants(x, y, phi, entry: WordEntry) -> List[Segments]:
    """
    All admissible candidates of one word: the formula under the four goal symmetries, each with the leading
    segments reversed (backward words) and the matching segment transform applied.
    """
    if entry.backward:
        x, y = x * math.cos(phi) + y * math.sin(phi), x * math.sin(phi) - y * math.cos(phi)

    variants = [
        (entry.formula(x, y, phi), lambda p: p),
        (entry.formula(-x, y, -phi), timeflip),
        (entry.formula(x, -y, -phi), reflect),
        (entry.formula(-x, -y, phi), lambda p: reflect(timeflip(p))),
    ]

    paths = []
    for path, transform in variants:
        if not _is_valid(path):
            if path:
                logger.debug(f"Reeds-Shepp {entry.word.name} produced NaN, skipped")
            continue
        paths.append(pad(transform(reverse_prefix(path, entry.reversed_prefix)), SLOTS))
    return paths


def get_all_paths(x, y, phi) -> List[Tuple[ReedsSheppWord, Segments]]:
    """
    Return a list of all the normalized paths to (x, y, phi) generated by the 8 formulas (9 words) and their variants
    """
    paths = []
    for entry in WORDS:
        for path in get_word_variants(x, y, phi, entry):
            paths.append((entry.word, path))
    return paths


def get_optimal_path(x, y, phi) -> Optional[Tuple[ReedsSheppWord, Segments]]:
    """
    Return the shortest normalized path among those that exist; the first candidate wins ties
    """
    paths = get_all_paths(x, y, phi)
    if not paths:
        return None
    return min(paths, key=lambda p: path_length(p[1]))


def solve_reeds_shepp(start: Pos, end: Pos, max_curvature: float) -> CurvePath:
    """Return the shortest forward/backward path from start to end"""
    if math.isnan(max_curvature) or not start.is_finite() or not end.is_finite():
        raise NaNInCalculation(f"Non-finite Reeds-Shepp input: {start}, {end}, curvature {max_curvature}")
    if not (0 < max_curvature < math.inf):
        raise InvalidCurvature(f"Maximum curvature must be positive, got {max_curvature}")

    local_end = start.to_local(end)
    goal = local_end.scaled(max_curvature)

    optimal = get_optimal_path(goal.x, goal.y, goal.heading)
    if optimal is None:
        raise PathNotFound(f"No Reeds-Shepp path from {start} to {end} with curvature {max_curvature}")

    word, normalized = optimal
    logger.debug(f"Reeds-Shepp {word.name} selected, normalized length {path_length(normalized):.4f}")

    segments = scale(normalized, 1.0 / max_curvature)
    return CurvePath(
        word=word,
        start=start,
        end=end,
        local_end=local_end,
        segments=segments,
        max_curvature=max_curvature,
        length=path_length(segments),
    )
