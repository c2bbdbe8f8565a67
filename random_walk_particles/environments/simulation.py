"""
environments/simulation.py

The frame loop. Planets first, satellites second, then hand the
buffers to whoever is watching.

The Simulation owns the authoritative parameter record. A control
panel writes to it between ticks and every change takes effect on
the next tick. Count fields written directly are clamped and the
arrays rebuilt at the start of that tick; the setters below do the
same immediately.

Inspired by:
- Game loops
- Immediate-mode parameter panels
"""

from __future__ import annotations
from typing import Callable, Optional
import logging
import time

import numpy as np

from random_walk_particles.core.color import cycled_base_hue, wrap_hue
from random_walk_particles.core.noise import VectorNoiseProcess
from random_walk_particles.core.parameters import (
    MAX_MASSES,
    MAX_SATELLITES,
    SimulationParameters,
    clamp_count,
)
from random_walk_particles.core.planets import (
    MassCenterSystem,
    MotionScheme,
    parse_motion_scheme,
)
from random_walk_particles.core.satellites import SwarmCollection

logger = logging.getLogger(__name__)


class Clock:
    """Seconds since construction (or the last restart)."""

    def __init__(self, source: Callable[[], float] = time.monotonic):
        self._source = source
        self._start = source()

    def restart(self) -> None:
        self._start = self._source()

    def elapsed(self) -> float:
        return self._source() - self._start


class Simulation:
    """
    Planets plus one satellite swarm per planet.

    One call to step() is one frame:
    1. Advance the planets
    2. Snapshot their positions
    3. Update every swarm against the snapshot

    Principles embodied:
    - One owner for the parameters
    - Swarms only ever read planet positions
    """

    def __init__(
        self,
        params: Optional[SimulationParameters] = None,
        scheme: Optional[MotionScheme] = None,
        clock: Optional[Clock] = None,
        noise_factory: Optional[Callable[[], VectorNoiseProcess]] = None
    ):
        self.params = params or SimulationParameters()
        self.rng = np.random.default_rng(self.params.seed)
        self.clock = clock or Clock()

        # Unknown scheme names fail here, before anything is built
        self.scheme = scheme if scheme is not None else parse_motion_scheme(
            self.params.motion_scheme, self.params.shell_radius
        )

        self.planets = MassCenterSystem(
            count=self.params.num_masses,
            scheme=self.scheme,
            params=self.params,
            rng=self.rng,
            noise_factory=noise_factory,
        )
        self.swarms = SwarmCollection(
            params=self.params,
            rng=self.rng,
            center_positions=self.planets.positions,
        )
        self.time = 0

    # ==================== Frame Loop ====================

    def step(self, elapsed_time: Optional[float] = None) -> None:
        """Advance one frame."""
        if elapsed_time is None:
            elapsed_time = self.clock.elapsed()

        self._sync_counts()
        self.planets.advance(self.params)
        snapshot = self.planets.positions
        self.swarms.update(snapshot, elapsed_time, self.params)
        self.time += 1

    def _sync_counts(self) -> None:
        """Pick up counts the panel wrote straight into params."""
        p = self.params
        p.num_satellites = clamp_count(p.num_satellites, MAX_SATELLITES)
        p.num_masses = clamp_count(p.num_masses, MAX_MASSES)

        if p.num_masses != len(self.planets):
            logger.debug(f"Mass count changed to {p.num_masses}")
            self.reset()
        elif any(len(swarm) != p.num_satellites for swarm in self.swarms):
            self.swarms.resize(p.num_satellites, self.planets.positions)

    def run(self, steps: int) -> None:
        for _ in range(steps):
            self.step()

    # ==================== Commands ====================

    def reset(self) -> None:
        """
        Fresh initial conditions, same parameters.

        Planets, their noise, and every swarm are reseeded.
        """
        self.planets.reset(self.params.num_masses)
        self.swarms.rebuild(self.planets.positions)
        self.time = 0
        logger.info("Simulation reset")

    def set_num_masses(self, count) -> int:
        """Change the number of planets. Triggers a full reset."""
        self.params.num_masses = clamp_count(count, MAX_MASSES)
        self.reset()
        return self.params.num_masses

    def set_num_satellites(self, count) -> int:
        """Change satellites per planet, clamped to [1, MAX_SATELLITES]."""
        n = clamp_count(count, MAX_SATELLITES)
        self.params.num_satellites = n
        self.swarms.resize(n, self.planets.positions)
        return n

    def set_particle_radius(self, radius: float) -> None:
        """New reference sphere; offsets are redrawn."""
        self.params.particle_radius = float(radius)
        self.swarms.reset(self.planets.positions)

    def set_motion_scheme(self, name: str, shell_radius: Optional[float] = None) -> None:
        """Switch planet motion. Requires (and performs) a reset."""
        if shell_radius is not None:
            self.params.shell_radius = float(shell_radius)
        scheme = parse_motion_scheme(name, self.params.shell_radius)

        self.params.motion_scheme = name
        self.scheme = scheme
        self.planets.reset(self.params.num_masses, scheme=scheme)
        self.swarms.rebuild(self.planets.positions)
        self.time = 0
        logger.info(f"Motion scheme set to {name}")

    def set_cycle_color(self, enabled: bool, elapsed_time: Optional[float] = None) -> None:
        """
        Toggle hue cycling without a visible jump.

        On: the phase is chosen so the cosine term starts at its peak,
        which lands on the current base hue.
        Off: the hue currently shown becomes the new base hue.
        """
        t = self.clock.elapsed() if elapsed_time is None else elapsed_time
        p = self.params

        if enabled and not p.cycle_color:
            p.hue_phase = -p.hue_freq * t
        elif not enabled and p.cycle_color:
            p.base_hue = float(wrap_hue(
                cycled_base_hue(p.base_hue, True, p.hue_freq, t, p.hue_phase)
            ))
        p.cycle_color = bool(enabled)

    def set_base_hue(self, hue: float, elapsed_time: Optional[float] = None) -> None:
        """Pick a new base hue; while cycling, restart the sweep from it."""
        self.params.base_hue = float(wrap_hue(hue))
        if self.params.cycle_color:
            t = self.clock.elapsed() if elapsed_time is None else elapsed_time
            self.params.hue_phase = -self.params.hue_freq * t

    # ==================== Presentation ====================

    @property
    def center_positions(self) -> np.ndarray:
        return self.planets.positions

    @property
    def positions(self) -> np.ndarray:
        return self.swarms.positions

    @property
    def colors(self) -> np.ndarray:
        return self.swarms.colors

    @property
    def rgb_colors(self) -> np.ndarray:
        return self.swarms.rgb()

    def get_speeds(self) -> np.ndarray:
        """Speed of every satellite, parallel to positions."""
        if not len(self.swarms):
            return np.zeros(0)
        velocities = np.concatenate([s.velocities for s in self.swarms])
        return np.linalg.norm(velocities, axis=1)

    def __repr__(self) -> str:
        return (
            f"Simulation(masses={len(self.planets)}, "
            f"satellites={self.params.num_satellites}, "
            f"scheme={self.params.motion_scheme}, "
            f"time={self.time})"
        )
