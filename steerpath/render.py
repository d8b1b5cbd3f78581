"""
Matplotlib diagnostics for planned paths, quintic trajectories and tracking runs.
Nothing here feeds back into the planners; every function draws onto a supplied (or new) axes and returns it.
"""

import matplotlib.pyplot as plt
import numpy as np

from steerpath.paths import Steering
from steerpath.pose import Pos

STEERING_COLORS = {
    Steering.LEFT: "tab:blue",
    Steering.RIGHT: "tab:red",
    Steering.STRAIGHT: "tab:gray",
    Steering.EMPTY: "black",
}


def _new_axes(ax):
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 8))
    return ax


def plot_pose(ax, pose: Pos, color="black", length=0.5, label=None):
    """Arrow along the heading"""
    dx, dy = length * np.cos(pose.heading), length * np.sin(pose.heading)
    ax.arrow(pose.x, pose.y, dx, dy, color=color, width=length * 0.04, length_includes_head=True, label=label)


def plot_samples(samples, ax=None, title=None, show_points=False):
    """
    Sampled path colored by steering: blue turns left, red turns right, gray is straight.

    Args:
        samples: sampler output, list of (Pos, Steering)
    """
    ax = _new_axes(ax)
    if not samples:
        return ax

    xy = np.array([pose.to_xy_tuple() for pose, _ in samples])
    steering = [s for _, s in samples]

    # One polyline per run of equal steering, sharing the boundary point with the previous run
    run_start = 0
    for i in range(1, len(samples) + 1):
        if i == len(samples) or steering[i] != steering[run_start]:
            run = xy[max(run_start - 1, 0):i]
            ax.plot(*run.T, color=STEERING_COLORS[steering[run_start]], linewidth=2)
            run_start = i

    if show_points:
        ax.scatter(*xy.T, s=6, color="black", zorder=3)

    ax.set_aspect("equal")
    ax.set_xlabel("x (m)")
    ax.set_ylabel("y (m)")
    if title:
        ax.set_title(title)
    return ax


def plot_curve_path(path, step_size=None, ax=None, title=None):
    """Samples of a solved path plus its start (green) and end (red) poses"""
    ax = plot_samples(path.sample(step_size), ax=ax, title=title or path.word.name)
    length = max(path.turning_radius, 0.5)
    plot_pose(ax, path.start, color="green", length=length)
    plot_pose(ax, path.end, color="red", length=length)
    return ax


def plot_trajectory(polynomial, dt=0.05, axes=None):
    """Path in the plane and speed, acceleration magnitude over time"""
    if axes is None:
        _, axes = plt.subplots(1, 3, figsize=(15, 4.5))
    ax_path, ax_speed, ax_accel = axes

    data = polynomial.sample(dt)
    ax_path.plot(*data['position'].T, color="tab:orange", linewidth=2)
    ax_path.scatter(*data['position'][[0, -1]].T, color=["green", "red"], zorder=3)
    ax_path.set_aspect("equal")
    ax_path.set_title("Path")

    ax_speed.plot(data['time'], np.linalg.norm(data['velocity'], axis=1))
    ax_speed.set_xlabel("t (s)")
    ax_speed.set_title("Speed (m/s)")

    ax_accel.plot(data['time'], np.linalg.norm(data['acceleration'], axis=1))
    ax_accel.set_xlabel("t (s)")
    ax_accel.set_title("Acceleration (m/s^2)")
    return axes


def plot_tracking(samples, trace, ax=None, title="Pure pursuit"):
    """Planned samples with the poses actually driven overlaid"""
    ax = plot_samples(samples, ax=ax, title=title)
    if trace:
        xy = np.array([pose.to_xy_tuple() for pose in trace])
        ax.plot(*xy.T, color="tab:green", linestyle="--", linewidth=1.5)
    return ax


def show():
    plt.tight_layout()
    plt.show()
