"""
Quintic polynomial trajectories between two (position, velocity, acceleration) boundary states in the plane.

The six coefficients per axis follow from the six boundary constraints in closed form, so evaluating the polynomial
at t = 0 and t = duration reproduces the boundary states. `find_optimal` scans durations to find the shortest one a
caller-supplied validator accepts (e.g. peak acceleration and jerk bounds).
"""

import logging
import math
from typing import Callable, Dict, Optional, Sequence, Tuple

import numpy as np
from numpy.polynomial import polynomial as P

from steerpath.errors import InvalidStartTime, InvalidTimeStep, OutOfRange, ValidPolynomialNotFound

logger = logging.getLogger(__name__)

VALIDATOR_DT = 0.1  # s, sampling period of bounds_validator

# position, velocity, acceleration; each an [x, y] vector
State = Tuple[Sequence[float], Sequence[float], Sequence[float]]
Validator = Callable[['QuinticPolynomial'], bool]


def get_coefficients(
        start: Tuple[float, float, float],
        end: Tuple[float, float, float],
        duration: float,
) -> Tuple[float, float, float, float, float, float]:
    """Coefficients c0..c5 of x(t) = sum(c_i * t^i) for one axis, from (x, v, a) at t = 0 and t = duration"""
    x0, v0, a0 = start
    x1, v1, a1 = end

    inverse_t1 = 1.0 / duration
    t1_sq = duration * duration
    inverse_t1_sq = 1.0 / t1_sq
    half_a0 = 0.5 * a0

    # Residuals of the quadratic part at the end point, scaled by powers of the duration
    j0 = (x1 - x0 - v0 * duration - half_a0 * t1_sq) * inverse_t1_sq * inverse_t1
    j1 = (v1 - v0 - a0 * duration) * inverse_t1_sq
    j2 = 0.5 * inverse_t1 * (a1 - a0)

    return (
        x0,
        v0,
        half_a0,
        10.0 * j0 - 4.0 * j1 + j2,
        (7.0 * j1 - 15.0 * j0 - 2.0 * j2) * inverse_t1,
        (j2 - 3.0 * j1 + 6.0 * j0) * inverse_t1_sq,
    )


def _axis(state: State, axis: int) -> Tuple[float, float, float]:
    return float(state[0][axis]), float(state[1][axis]), float(state[2][axis])


class QuinticPolynomial:
    def __init__(self, start: State, end: State, duration: float):
        # A zero duration has no closed-form solution (division by zero), so it is rejected along with negatives
        if not (duration > 0 and math.isfinite(duration)):
            raise InvalidStartTime(f"Duration must be positive and finite, got {duration}")

        self.start = tuple(np.array(v, dtype=float) for v in start)
        self.end = tuple(np.array(v, dtype=float) for v in end)
        self.duration = float(duration)

        cx = np.array(get_coefficients(_axis(start, 0), _axis(end, 0), duration))
        cy = np.array(get_coefficients(_axis(start, 1), _axis(end, 1), duration))
        self.coefficients = np.vstack([cx, cy])  # shape (2, 6), lowest order first
        self.coefficients.flags.writeable = False

        self._velocity = np.vstack([P.polyder(cx, 1), P.polyder(cy, 1)])
        self._acceleration = np.vstack([P.polyder(cx, 2), P.polyder(cy, 2)])
        self._jerk = np.vstack([P.polyder(cx, 3), P.polyder(cy, 3)])

    @property
    def max_t(self) -> float:
        return self.duration

    @staticmethod
    def _polyval(t, coefficients: np.ndarray) -> np.ndarray:
        """[x, y] for a scalar t, shape (2, N) for an array of times"""
        return np.array([P.polyval(t, coefficients[0]), P.polyval(t, coefficients[1])])

    def evaluate(self, t: float) -> np.ndarray:
        """Position at time t; t must lie within [0, duration]"""
        if t < 0 or t > self.duration:
            raise OutOfRange(f"t = {t} is outside [0, {self.duration}]")
        return self.evaluate_unchecked(t)

    def evaluate_unchecked(self, t) -> np.ndarray:
        return self._polyval(t, self.coefficients)

    def velocity(self, t) -> np.ndarray:
        return self._polyval(t, self._velocity)

    def acceleration(self, t) -> np.ndarray:
        return self._polyval(t, self._acceleration)

    def jerk(self, t) -> np.ndarray:
        return self._polyval(t, self._jerk)

    def sample(self, dt: float) -> Dict[str, np.ndarray]:
        """
        Sample the whole trajectory every dt seconds, the end point included.

        Returns:
            Dict with 'time' (N,), 'position', 'velocity', 'acceleration' (N, 2)
        """
        if not dt > 0:
            raise ValueError(f"dt must be positive, got {dt}")
        time = np.append(np.arange(0.0, self.duration, dt), self.duration)
        return {
            'time': time,
            'position': self.evaluate_unchecked(time).T,
            'velocity': self.velocity(time).T,
            'acceleration': self.acceleration(time).T,
        }

    def __repr__(self):
        return f"QuinticPolynomial(duration={self.duration:.3f})"


def find_optimal(
        start: State,
        end: State,
        validator: Validator,
        min_time: float,
        max_time: float,
        time_step: float,
) -> QuinticPolynomial:
    """
    Shortest duration in [max(min_time, time_step), max_time], on a time_step grid, whose trajectory passes the
    validator. The validator need not be monotonic in the duration, so every candidate is tried in order.
    """
    if time_step <= 0 or max_time < min_time or not math.isfinite(max_time):
        raise InvalidTimeStep(f"Invalid search: step {time_step}, range [{min_time}, {max_time}]")

    first = max(min_time, time_step)
    # Grid points up to max_time; the tolerance keeps a max_time that sits on the grid from rounding away
    steps = math.floor((max_time - first) / time_step + 1e-9)
    for count in range(steps + 1):
        t = min(first + count * time_step, max_time)  # no accumulated rounding
        polynomial = QuinticPolynomial(start, end, t)
        if validator(polynomial):
            logger.debug(f"Valid quintic found at t = {t:.3f} after {count + 1} candidates")
            return polynomial

    raise ValidPolynomialNotFound(f"No valid quintic in [{first}, {max_time}] with step {time_step}")


def bounds_validator(
        max_acceleration: float,
        max_jerk: float,
        dt: float = VALIDATOR_DT,
        max_velocity: Optional[float] = None,
) -> Validator:
    """
    Validator rejecting trajectories whose acceleration, jerk (and optionally speed) magnitude exceeds the bounds
    at any sample strictly inside (0, duration), sampled every dt.
    """

    def validate(polynomial: QuinticPolynomial) -> bool:
        time = np.arange(dt, polynomial.duration, dt)
        if time.size == 0:
            return True
        if np.any(np.linalg.norm(polynomial.acceleration(time), axis=0) > max_acceleration):
            return False
        if np.any(np.linalg.norm(polynomial.jerk(time), axis=0) > max_jerk):
            return False
        if max_velocity is not None and np.any(np.linalg.norm(polynomial.velocity(time), axis=0) > max_velocity):
            return False
        return True

    return validate
