from __future__ import annotations

import math
from typing import Optional, Tuple

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Circle, Wedge

from costmap_obs.filters import obstacle_mask
from costmap_obs.observation import Observation


def plot_observation(
    obs: Observation,
    *,
    ax: Optional[plt.Axes] = None,
    title: Optional[str] = None,
    figsize: Tuple[int, int] = (6, 6),
    show_ranges: bool = True,
    show_fov: bool = True,
    marking_color: str = "tab:red",
    ignored_color: str = "tab:gray",
) -> plt.Axes:
    """
    Plot an observation top-down (x/y plane) on `ax`.

    Points that may mark obstacles are drawn in `marking_color`, the rest in
    `ignored_color`. Obstacle ranges are drawn as solid circles, raytrace
    ranges as dashed circles, and the field of view as a shaded wedge when
    ``fov > 0``.

    Args:
        obs: Observation to draw.
        ax: Matplotlib Axes to plot on. If None, creates a new figure.
        title: Optional title for the plot.
        figsize: Figure size used when creating a new figure.
        show_ranges: Draw obstacle/raytrace range circles.
        show_fov: Draw the field-of-view wedge.

    Returns:
        The Axes that was drawn on.
    """
    if ax is None:
        _, ax = plt.subplots(figsize=figsize)

    ox, oy = float(obs.origin[0]), float(obs.origin[1])
    mask = obstacle_mask(obs)
    cloud = obs.cloud
    if np.any(~mask):
        ax.scatter(cloud[~mask, 0], cloud[~mask, 1], s=6, c=ignored_color, label="ignored")
    if np.any(mask):
        ax.scatter(cloud[mask, 0], cloud[mask, 1], s=6, c=marking_color, label="marking")
    ax.plot([ox], [oy], marker="^", color="black", label="origin")

    if show_ranges:
        for radius in (obs.min_obstacle_range, obs.max_obstacle_range):
            if radius > 0.0:
                ax.add_patch(Circle((ox, oy), radius, fill=False, color=marking_color, lw=1.0))
        for radius in (obs.min_raytrace_range, obs.max_raytrace_range):
            if radius > 0.0:
                ax.add_patch(Circle((ox, oy), radius, fill=False, color="tab:blue", lw=1.0, ls="--"))

    if show_fov and obs.fov > 0.0:
        reach = max(obs.max_obstacle_range, obs.max_raytrace_range, 1.0)
        heading = math.degrees(obs.orientation_in_global_frame)
        half = 0.5 * math.degrees(obs.fov)
        ax.add_patch(Wedge((ox, oy), reach, heading - half, heading + half, alpha=0.15, color="tab:green"))

    ax.set_aspect("equal")
    ax.autoscale_view()
    if title:
        ax.set_title(title)
    ax.legend(loc="upper right", fontsize="small")
    return ax


def save_observation_plot(
    obs: Observation,
    *,
    save_path: str,
    figsize: Tuple[int, int] = (6, 6),
    title: Optional[str] = None,
) -> None:
    """Save a top-down plot of `obs` to a file (see ``plot_observation``)."""
    fig, ax = plt.subplots(figsize=figsize)
    plot_observation(obs, ax=ax, title=title)
    fig.tight_layout()
    fig.savefig(save_path, bbox_inches="tight")
    plt.close(fig)


__all__ = ["plot_observation", "save_observation_plot"]
