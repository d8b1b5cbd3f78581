"""
Exceptions raised by the planners, the trajectory generator and the path tracker.
Every failure propagates to the caller; nothing is retried internally.
"""


class PathPlanningError(Exception):
    """Base class for the curve solvers"""


class PathNotFound(PathPlanningError):
    """No curve family admits a real solution for the given poses and curvature"""


class NaNInCalculation(PathPlanningError):
    """A NaN reached the solver (non-finite poses or curvature)"""


class InvalidCurvature(PathPlanningError, ValueError):
    """Maximum curvature must be positive and finite"""


class QuinticError(Exception):
    """Base class for the quintic trajectory generator"""


class OutOfRange(QuinticError):
    """Evaluation time outside [0, duration]"""


class InvalidStartTime(QuinticError):
    """Duration is not a positive, finite number"""


class InvalidTimeStep(QuinticError):
    """Search step is not positive or the search range is empty"""


class ValidPolynomialNotFound(QuinticError):
    """No duration in the search range satisfied the validator"""


class TrackingError(Exception):
    """Base class for the pure pursuit controller; the curvature must not be trusted"""


class RobotTooFar(TrackingError):
    """No path point within the lookahead circle; the plan is stale and should be regenerated"""


class WrongOrientation(TrackingError):
    """Goal point is behind the vehicle"""


class InvalidPath(TrackingError):
    """Path is too short or has a zero-length direction"""


class InvalidCodePath(TrackingError):
    """The single forward circle intersection invariant was violated; this is a bug"""


class InvalidInput(TrackingError):
    """Lookahead must be positive"""
