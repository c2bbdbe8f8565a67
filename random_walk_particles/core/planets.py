"""
core/planets.py

The mass centers. Few, heavy, restless.

Each planet is driven by its own smoothed noise. It either
wanders freely through space or skates over the surface of a
sphere, diffusing in angle while its radius stays fixed.

Inspired by:
- Random walks
- Orbital shells
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, List, Optional, Union
import logging
import numpy as np

from .noise import VectorNoiseProcess
from .parameters import MAX_MASSES, SimulationParameters, clamp_count

logger = logging.getLogger(__name__)

# Half-width of the cube that free-walking planets start in
CARTESIAN_SPAWN_HALF_WIDTH = 50.0


# ==================== Motion Schemes ====================

@dataclass(frozen=True)
class Cartesian:
    """Unbounded 3D random walk: the noise vector is the step."""


@dataclass(frozen=True)
class SphericalShell:
    """Random walk in angle on a sphere of fixed radius."""
    radius: float = 50.0


MotionScheme = Union[Cartesian, SphericalShell]

SCHEME_NAMES = ("cartesian", "spherical-shell")


def parse_motion_scheme(name: str, shell_radius: float = 50.0) -> MotionScheme:
    """Turn a configuration name into a motion scheme."""
    if name == "cartesian":
        return Cartesian()
    if name == "spherical-shell":
        return SphericalShell(radius=shell_radius)
    raise ValueError(f"Unknown motion scheme: {name}")


def spherical_to_cartesian(r: float, theta: float, phi: float) -> np.ndarray:
    """
    Spherical angles to a Cartesian point.

    When floor(theta / pi) is odd, theta is negated and phi advanced
    by pi first. The physical point is unchanged; the angles are
    brought back to a consistent branch.
    """
    if int(np.floor(theta / np.pi)) % 2 == 1:
        theta = -theta
        phi = phi + np.pi

    sin_theta = np.sin(theta)
    return np.array([
        r * sin_theta * np.cos(phi),
        r * sin_theta * np.sin(phi),
        r * np.cos(theta),
    ])


# ==================== Mass Centers ====================

@dataclass
class MassCenter:
    """
    One planet.

    theta/phi are only meaningful in the shell scheme, where
    position is derived from them every tick.
    """
    id: int
    position: np.ndarray
    velocity: np.ndarray
    noise: VectorNoiseProcess
    mass: float = 0.01
    theta: float = 0.0
    phi: float = 0.0

    def __post_init__(self):
        self.position = np.asarray(self.position, dtype=np.float64)
        self.velocity = np.asarray(self.velocity, dtype=np.float64)


class MassCenterSystem:
    """
    Owns K planets and walks them forward one tick at a time.

    The motion scheme is fixed at construction. Switching schemes
    means building a new system (or calling reset with a new scheme).
    """

    def __init__(
        self,
        count: int = 2,
        scheme: Optional[MotionScheme] = None,
        params: Optional[SimulationParameters] = None,
        rng: Optional[np.random.Generator] = None,
        noise_factory: Optional[Callable[[], VectorNoiseProcess]] = None
    ):
        self.params = params or SimulationParameters()
        self.scheme = self._validate_scheme(scheme if scheme is not None else Cartesian())
        self.rng = rng if rng is not None else np.random.default_rng()
        self.noise_factory = noise_factory or (
            lambda: VectorNoiseProcess(self.params.noise_window, self.rng)
        )

        self.centers: List[MassCenter] = []
        self.time = 0
        self.reset(count)

    @staticmethod
    def _validate_scheme(scheme: MotionScheme) -> MotionScheme:
        if not isinstance(scheme, (Cartesian, SphericalShell)):
            raise ValueError(f"Unknown motion scheme: {scheme!r}")
        return scheme

    # ==================== Lifecycle ====================

    def reset(
        self,
        count: Optional[int] = None,
        scheme: Optional[MotionScheme] = None
    ) -> None:
        """
        Replace every planet with a freshly seeded one.

        New positions, new noise processes. The count is clamped
        to [1, MAX_MASSES].
        """
        if scheme is not None:
            self.scheme = self._validate_scheme(scheme)
        n = clamp_count(count if count is not None else len(self.centers), MAX_MASSES)

        self.centers = [self._spawn(i) for i in range(n)]
        self.time = 0
        logger.info(f"Reset {n} mass centers ({type(self.scheme).__name__})")

    def _spawn(self, index: int) -> MassCenter:
        noise = self.noise_factory()
        noise.reinitialize()

        if isinstance(self.scheme, SphericalShell):
            theta = self.rng.uniform(0.0, np.pi)
            phi = self.rng.uniform(0.0, 2.0 * np.pi)
            position = spherical_to_cartesian(self.scheme.radius, theta, phi)
        else:
            theta = 0.0
            phi = 0.0
            position = self.rng.uniform(
                -CARTESIAN_SPAWN_HALF_WIDTH,
                CARTESIAN_SPAWN_HALF_WIDTH,
                size=3
            )

        return MassCenter(
            id=index,
            position=position,
            velocity=np.zeros(3),
            noise=noise,
            mass=self.params.mass,
            theta=theta,
            phi=phi,
        )

    # ==================== Dynamics ====================

    def advance(self, params: Optional[SimulationParameters] = None) -> None:
        """One tick for every planet."""
        params = params or self.params
        self.time += 1

        if isinstance(self.scheme, Cartesian):
            for center in self.centers:
                self._step_cartesian(center)
        elif isinstance(self.scheme, SphericalShell):
            for center in self.centers:
                self._step_shell(center, self.scheme.radius, params.walk_speed)

    @staticmethod
    def _step_cartesian(center: MassCenter) -> None:
        step = center.noise.next()
        center.velocity = step
        center.position = center.position + step

    @staticmethod
    def _step_shell(center: MassCenter, radius: float, speed: float) -> None:
        noise = center.noise.next()
        center.velocity = np.array([0.0, speed * noise[1], speed * noise[2]])

        center.theta += center.velocity[1]
        center.phi += center.velocity[2]
        center.position = spherical_to_cartesian(radius, center.theta, center.phi)

    # ==================== Views ====================

    @property
    def positions(self) -> np.ndarray:
        """Snapshot of all planet positions, shape (K, 3)."""
        if not self.centers:
            return np.zeros((0, 3))
        return np.array([c.position for c in self.centers])

    def __len__(self) -> int:
        return len(self.centers)

    def __repr__(self) -> str:
        return (
            f"MassCenterSystem(n={len(self.centers)}, "
            f"scheme={self.scheme}, "
            f"time={self.time})"
        )
