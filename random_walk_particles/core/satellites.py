"""
core/satellites.py

The swarm. Many, weightless, obedient.

Every satellite feels every planet but belongs to exactly one.
Attraction pulls it toward all of them; a damped spring keeps it
near its home offset around its owner. Nothing here interacts
with anything else of its kind.

Stored column-wise: one (N, 3) array per quantity, updated in
bulk every tick.

Inspired by:
- Particle systems
- Spring-mass networks (without the network)
"""

from __future__ import annotations
from typing import List, Optional
import logging
import numpy as np

from .color import cycled_base_hue, hsl_to_rgb, speed_to_hsl
from .parameters import MAX_SATELLITES, SimulationParameters, clamp_count

logger = logging.getLogger(__name__)

# Starting value for the running max speed used by the color scale
INITIAL_RUNNING_MAX = 5.0

# EWMA weight kept from the previous running max
RUNNING_MAX_DECAY = 0.99


def sample_sphere(
    n: int,
    radius: float,
    rng: np.random.Generator
) -> np.ndarray:
    """
    n points on a sphere of the given radius, shape (n, 3).

    Polar angle drawn from [0, pi), azimuth from [0, 2*pi).
    """
    polar = rng.uniform(0.0, np.pi, size=n)
    azimuth = rng.uniform(0.0, 2.0 * np.pi, size=n)
    sin_polar = np.sin(polar)
    return radius * np.column_stack([
        sin_polar * np.cos(azimuth),
        sin_polar * np.sin(azimuth),
        np.cos(polar),
    ])


def attraction(
    positions: np.ndarray,
    centers: np.ndarray,
    mass: float,
    exponent: float
) -> np.ndarray:
    """
    Summed pull of every center on every particle, shape (N, 3).

    Each center contributes normalize(d) * mass / |d|^exponent with
    d = center - position. A particle sitting exactly on a center
    gets nothing from it.
    """
    acc = np.zeros_like(positions)
    for center in np.atleast_2d(centers):
        delta = center - positions
        dist = np.sqrt(np.einsum("ij,ij->i", delta, delta))

        nonzero = dist > 0
        d = dist[nonzero]
        # Normalize first; a folded power underflows on tiny distances
        direction = delta[nonzero] / d[:, None]
        acc[nonzero] += direction * (mass / d ** exponent)[:, None]
    return acc


def spring_force(
    positions: np.ndarray,
    velocities: np.ndarray,
    targets: np.ndarray,
    k_pos: float,
    k_vel: float
) -> np.ndarray:
    """Damped spring toward the targets."""
    return (targets - positions) * k_pos - velocities * k_vel


class SatelliteSwarm:
    """
    A particle cloud bound to one planet.

    Buffers (all (N, 3) float64):
    - offsets: rest position relative to the owner
    - positions, velocities
    - colors: HSL per particle

    Principles embodied:
    - Acceleration lives only inside update(); nothing carries over
    - Colors adapt to recent motion via a running max speed
    """

    def __init__(
        self,
        owner: int = 0,
        count: Optional[int] = None,
        params: Optional[SimulationParameters] = None,
        rng: Optional[np.random.Generator] = None,
        anchor: Optional[np.ndarray] = None
    ):
        self.owner = owner
        self.params = params or SimulationParameters()
        self.rng = rng if rng is not None else np.random.default_rng()

        # Last known position of the owning planet
        self.anchor = (
            np.asarray(anchor, dtype=np.float64).copy()
            if anchor is not None else np.zeros(3)
        )

        self.running_max = INITIAL_RUNNING_MAX
        self.time = 0

        n = count if count is not None else self.params.num_satellites
        self._allocate(clamp_count(n, MAX_SATELLITES))
        self.reset()

    def _allocate(self, n: int) -> None:
        self.offsets = np.zeros((n, 3))
        self.positions = np.zeros((n, 3))
        self.velocities = np.zeros((n, 3))
        self.colors = np.zeros((n, 3))

    # ==================== Lifecycle ====================

    def reset(self, center_positions: Optional[np.ndarray] = None) -> None:
        """
        Redraw every reference offset on the particle sphere.

        Particles start at their rest point, at rest.
        """
        if center_positions is not None:
            self.anchor = np.asarray(center_positions, dtype=np.float64)[self.owner].copy()

        offsets = sample_sphere(len(self), self.params.particle_radius, self.rng)
        self.place(offsets)

    def place(self, offsets: np.ndarray, anchor: Optional[np.ndarray] = None) -> None:
        """Put particles at explicit offsets around the anchor with zero velocity."""
        offsets = np.atleast_2d(np.asarray(offsets, dtype=np.float64))
        if anchor is not None:
            self.anchor = np.asarray(anchor, dtype=np.float64).copy()
        if len(offsets) != len(self):
            self._allocate(len(offsets))

        self.offsets[:] = offsets
        self.positions[:] = self.anchor + offsets
        self.velocities[:] = 0.0
        self.colors[:] = 0.0

    def resize(self, count: int, center_positions: Optional[np.ndarray] = None) -> int:
        """Reallocate for a new particle count and reseed. Returns the clamped count."""
        n = clamp_count(count, MAX_SATELLITES)
        self._allocate(n)
        self.reset(center_positions)
        logger.info(f"Swarm {self.owner} resized to {n} satellites")
        return n

    # ==================== Dynamics ====================

    def update(
        self,
        center_positions: np.ndarray,
        elapsed_time: float = 0.0,
        params: Optional[SimulationParameters] = None
    ) -> None:
        """
        Advance one tick.

        1. Attraction from all planets
        2. Spring toward owner + offset
        3. Semi-implicit Euler
        4. Recolor by speed
        5. Update running max speed
        """
        params = params or self.params
        centers = np.atleast_2d(np.asarray(center_positions, dtype=np.float64))
        self.anchor = centers[self.owner].copy()
        self.time += 1

        acc = attraction(self.positions, centers, params.mass, params.exponent)
        acc += spring_force(
            self.positions,
            self.velocities,
            self.anchor + self.offsets,
            params.k_pos,
            params.k_vel
        )

        self.velocities += acc
        self.positions += self.velocities

        speeds = np.sqrt(np.einsum("ij,ij->i", self.velocities, self.velocities))
        base_hue = cycled_base_hue(
            params.base_hue,
            params.cycle_color,
            params.hue_freq,
            elapsed_time,
            params.hue_phase
        )
        speed_to_hsl(speeds, self.running_max, base_hue, out=self.colors)

        max_speed = float(speeds.max()) if len(speeds) else 0.0
        self.running_max = (
            RUNNING_MAX_DECAY * self.running_max
            + (1.0 - RUNNING_MAX_DECAY) * max_speed
        )

    # ==================== Views ====================

    def rgb(self) -> np.ndarray:
        """Colors converted to RGB, shape (N, 3)."""
        return hsl_to_rgb(self.colors)

    def __len__(self) -> int:
        return len(self.positions)

    def __repr__(self) -> str:
        return (
            f"SatelliteSwarm(owner={self.owner}, "
            f"n={len(self)}, "
            f"running_max={self.running_max:.3f})"
        )


class SwarmCollection:
    """
    One swarm per planet, driven together.

    Swarms are independent; order of updates does not matter.
    """

    def __init__(
        self,
        params: Optional[SimulationParameters] = None,
        rng: Optional[np.random.Generator] = None,
        center_positions: Optional[np.ndarray] = None
    ):
        self.params = params or SimulationParameters()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.swarms: List[SatelliteSwarm] = []

        if center_positions is None:
            center_positions = np.zeros((self.params.num_masses, 3))
        self.rebuild(center_positions)

    def rebuild(self, center_positions: np.ndarray) -> None:
        """New swarms, one per planet position given."""
        centers = np.atleast_2d(np.asarray(center_positions, dtype=np.float64))
        self.swarms = [
            SatelliteSwarm(
                owner=i,
                count=self.params.num_satellites,
                params=self.params,
                rng=self.rng,
                anchor=centers[i]
            )
            for i in range(len(centers))
        ]
        logger.info(
            f"Built {len(self.swarms)} swarms of "
            f"{self.params.num_satellites} satellites"
        )

    def update(
        self,
        center_positions: np.ndarray,
        elapsed_time: float = 0.0,
        params: Optional[SimulationParameters] = None
    ) -> None:
        for swarm in self.swarms:
            swarm.update(center_positions, elapsed_time, params)

    def reset(self, center_positions: Optional[np.ndarray] = None) -> None:
        for swarm in self.swarms:
            swarm.reset(center_positions)

    def resize(self, count: int, center_positions: Optional[np.ndarray] = None) -> int:
        n = clamp_count(count, MAX_SATELLITES)
        for swarm in self.swarms:
            swarm.resize(n, center_positions)
        return n

    # ==================== Views ====================

    @property
    def positions(self) -> np.ndarray:
        """All particle positions, swarm by swarm."""
        if not self.swarms:
            return np.zeros((0, 3))
        return np.concatenate([s.positions for s in self.swarms])

    @property
    def colors(self) -> np.ndarray:
        """All particle colors (HSL), parallel to positions."""
        if not self.swarms:
            return np.zeros((0, 3))
        return np.concatenate([s.colors for s in self.swarms])

    def rgb(self) -> np.ndarray:
        return hsl_to_rgb(self.colors) if self.swarms else np.zeros((0, 3))

    def __len__(self) -> int:
        return len(self.swarms)

    def __iter__(self):
        return iter(self.swarms)

    def __repr__(self) -> str:
        total = sum(len(s) for s in self.swarms)
        return f"SwarmCollection(swarms={len(self.swarms)}, satellites={total})"
