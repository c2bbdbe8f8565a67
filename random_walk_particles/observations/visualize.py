"""
observations/visualize.py

Watch the cloud breathe.

A minimal 3D viewer for the simulation. Not the real renderer,
just enough to see shape, motion, and color while tuning.
"""

from __future__ import annotations
from typing import Callable, Optional, TYPE_CHECKING
import numpy as np

from random_walk_particles.core.color import hsl_tuple

if TYPE_CHECKING:
    from random_walk_particles.environments.simulation import Simulation


class SwarmVisualizer:
    """
    Matplotlib scatter view of satellites and planets.

    Large swarms are drawn through a fixed random subset so
    frames stay responsive.
    """

    def __init__(
        self,
        sim: Simulation,
        figsize: tuple = (10, 10),
        max_points: int = 20_000,
        extent: float = 120.0,
        seed: Optional[int] = 0
    ):
        self.sim = sim
        self.figsize = figsize
        self.max_points = max_points
        self.extent = extent
        self._rng = np.random.default_rng(seed)

        # Lazy import matplotlib
        self._plt = None
        self._fig = None
        self._ax = None

    def _setup_plot(self):
        """Initialize matplotlib figure."""
        import matplotlib.pyplot as plt
        self._plt = plt

        self._fig = plt.figure(figsize=self.figsize)
        self._ax = self._fig.add_subplot(projection="3d")
        self._fig.patch.set_facecolor("#000000")

    def _subset(self, n: int) -> np.ndarray:
        if n <= self.max_points:
            return np.arange(n)
        return np.sort(self._rng.choice(n, size=self.max_points, replace=False))

    def render(self) -> None:
        """Draw the current frame."""
        if self._plt is None:
            self._setup_plot()

        ax = self._ax
        ax.clear()
        ax.set_facecolor("#000000")
        ax.set_axis_off()

        positions = self.sim.positions
        if len(positions) > 0:
            idx = self._subset(len(positions))
            colors = self.sim.rgb_colors[idx]
            ax.scatter(
                positions[idx, 0], positions[idx, 1], positions[idx, 2],
                c=colors, s=0.5, marker=".", depthshade=False
            )

        if self.sim.params.render_masses:
            centers = self.sim.center_positions
            ax.scatter(
                centers[:, 0], centers[:, 1], centers[:, 2],
                color=hsl_tuple(0.0, 0.0, 0.2),
                s=self.sim.params.mass_radii ** 2,
                edgecolors="white", linewidths=0.5
            )

        # Follow the planets' centroid
        middle = self.sim.center_positions.mean(axis=0)
        ax.set_xlim(middle[0] - self.extent, middle[0] + self.extent)
        ax.set_ylim(middle[1] - self.extent, middle[1] + self.extent)
        ax.set_zlim(middle[2] - self.extent, middle[2] + self.extent)

        ax.set_title(
            f"Frame: {self.sim.time} | Masses: {len(self.sim.planets)} | "
            f"Satellites: {len(positions)}",
            color="white", fontsize=12
        )

        self._plt.pause(0.001)

    def save_frame(self, path: str) -> None:
        """Save current frame to file."""
        if self._fig is not None:
            self._fig.savefig(path, dpi=150, facecolor=self._fig.get_facecolor())

    def close(self) -> None:
        """Close the visualization."""
        if self._plt is not None:
            self._plt.close(self._fig)


def animate_study(
    sim: Simulation,
    steps: int = 500,
    render_every: int = 1,
    save_path: Optional[str] = None,
    max_points: int = 20_000,
    frame_time: Optional[float] = None,
    on_step: Optional[Callable[[int], None]] = None
) -> None:
    """
    Run the simulation and draw it as it goes.

    frame_time: fixed seconds per frame instead of the sim's clock
    on_step: called with the frame index after each step
    """
    viz = SwarmVisualizer(sim, max_points=max_points)

    try:
        for step in range(steps):
            sim.step(None if frame_time is None else step * frame_time)
            if step % render_every == 0:
                viz.render()
            if on_step is not None:
                on_step(step)

        if save_path:
            viz.save_frame(save_path)

    finally:
        viz.close()
