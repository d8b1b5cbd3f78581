"""
Demo scenario wiring every component: plan with Dubins and Reeds-Shepp, sample the forward path, follow it with pure
pursuit on a unicycle (replanning when the tracker gives up), and search the shortest bounded quintic trajectory.
"""

import logging
import math

from steerpath import render
from steerpath.dubins import solve_dubins
from steerpath.errors import PathPlanningError, QuinticError, RobotTooFar, TrackingError
from steerpath.pose import Pos
from steerpath.pursuit import get_curvature, points_from_samples
from steerpath.quintic import bounds_validator, find_optimal
from steerpath.reeds_shepp import solve_reeds_shepp

DEBUG = False
SHOW_PLOTS = False

logger = logging.getLogger(__name__)

# Modify this to set up the scenario
START = Pos(0.0, 0.0, 0.0)
GOAL = Pos(8.0, 4.0, math.pi / 2)
MAX_CURVATURE = 0.5  # 1/m, 2 m turning radius
STEP_SIZE = 0.1  # m, sampler spacing

# Tracking
SPEED = 1.0  # m/s
DT = 0.05  # s
LOOKAHEAD = 1.0  # m
GOAL_TOLERANCE = 0.25  # m
MAX_STEPS = 2000
MAX_REPLANS = 3

# Quintic search
QUINTIC_START = ((0.0, 0.0), (0.0, 0.0), (0.0, 0.0))  # position, velocity, acceleration
QUINTIC_END = ((10.0, 5.0), (0.0, 0.0), (0.0, 0.0))
MAX_ACCELERATION = 2.0  # m/s^2
MAX_JERK = 3.0  # m/s^3
MIN_TIME, MAX_TIME, TIME_STEP = 0.0, 20.0, 0.1  # s

EPSILON = 1e-9


def drive(pose: Pos, speed: float, curvature: float, delta_time: float) -> Pos:
    """Exact unicycle step; negative curvature turns left"""
    w = -speed * curvature
    th = pose.heading
    if abs(w) < EPSILON:  # Straight-line motion
        return Pos(pose.x + speed * math.cos(th) * delta_time, pose.y + speed * math.sin(th) * delta_time, th)

    th_new = th + w * delta_time
    new_x = pose.x + (speed / w) * (math.sin(th_new) - math.sin(th))
    new_y = pose.y + (speed / w) * (-math.cos(th_new) + math.cos(th))
    return Pos(new_x, new_y, th_new)


def track(start: Pos, goal: Pos):
    """
    Follow a Dubins plan from start to goal with pure pursuit, replanning from the current pose when the tracker
    refuses to produce a curvature.

    Returns:
        (reached, final pose, driven poses, samples of the last plan)
    """
    pose = start
    trace = [pose]
    lookahead_sq = LOOKAHEAD * LOOKAHEAD
    replans = 0

    samples = solve_dubins(pose, goal, MAX_CURVATURE).sample(STEP_SIZE)
    points = points_from_samples(samples)

    for _ in range(MAX_STEPS):
        if pose.distance_to(goal) < GOAL_TOLERANCE:
            return True, pose, trace, samples

        try:
            curvature = get_curvature(points, pose, lookahead_sq)
        except TrackingError as e:
            if replans >= MAX_REPLANS:
                logger.warning(f"Giving up after {replans} replans: {e!r}")
                break
            replans += 1
            if isinstance(e, RobotTooFar):
                logger.info(f"Off the plan at {pose}, replanning")
            else:
                logger.warning(f"Tracker refused at {pose}: {e!r}, replanning")
            samples = solve_dubins(pose, goal, MAX_CURVATURE).sample(STEP_SIZE)
            points = points_from_samples(samples)
            continue

        pose = drive(pose, SPEED, curvature, DT)
        trace.append(pose)

    return pose.distance_to(goal) < GOAL_TOLERANCE, pose, trace, samples


def run(show_plots=False):
    summary = {}

    try:
        dubins = solve_dubins(START, GOAL, MAX_CURVATURE)
        reeds_shepp = solve_reeds_shepp(START, GOAL, MAX_CURVATURE)
    except PathPlanningError as e:
        logger.error(f"Planning failed: {e!r}")
        raise
    logger.info(f"Dubins: {dubins}")
    logger.info(f"Reeds-Shepp: {reeds_shepp}")
    summary['dubins'] = dubins
    summary['reeds_shepp'] = reeds_shepp

    reached, final_pose, trace, samples = track(START, GOAL)
    logger.info(
        f"Tracking {'reached' if reached else 'did not reach'} the goal after {len(trace) - 1} steps, "
        f"final error {final_pose.distance_to(GOAL):.3f} m"
    )
    summary['tracking'] = {'reached': reached, 'final_pose': final_pose, 'steps': len(trace) - 1}

    validator = bounds_validator(MAX_ACCELERATION, MAX_JERK)
    try:
        quintic = find_optimal(QUINTIC_START, QUINTIC_END, validator, MIN_TIME, MAX_TIME, TIME_STEP)
        logger.info(f"Shortest bounded quintic: {quintic}")
    except QuinticError as e:
        logger.warning(f"No quintic trajectory: {e!r}")
        quintic = None
    summary['quintic'] = quintic

    if show_plots:
        render.plot_curve_path(dubins, STEP_SIZE, title=f"Dubins {dubins.word.name}")
        render.plot_curve_path(reeds_shepp, STEP_SIZE, title=f"Reeds-Shepp {reeds_shepp.word.name}")
        render.plot_tracking(samples, trace)
        if quintic is not None:
            render.plot_trajectory(quintic)
        render.show()

    return summary


def main():
    logging.basicConfig(level=logging.DEBUG if DEBUG else logging.INFO)
    logger.info("Starting steerpath demo")
    run(show_plots=SHOW_PLOTS)


if __name__ == "__main__":
    main()
