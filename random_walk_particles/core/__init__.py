"""
Core components of the random-walk particle system.

- noise: Smoothed Gaussian noise (scalar and 3D)
- planets: Mass centers and their motion schemes
- satellites: The particle swarms and their force law
- parameters: The shared parameter block
- color: Speed to color mapping
"""

from .noise import NoiseProcess, VectorNoiseProcess
from .parameters import SimulationParameters, MAX_SATELLITES, MAX_MASSES, clamp_count
from .planets import (
    Cartesian,
    SphericalShell,
    MassCenter,
    MassCenterSystem,
    parse_motion_scheme,
    spherical_to_cartesian,
)
from .satellites import SatelliteSwarm, SwarmCollection

__all__ = [
    "NoiseProcess",
    "VectorNoiseProcess",
    "SimulationParameters",
    "MAX_SATELLITES",
    "MAX_MASSES",
    "clamp_count",
    "Cartesian",
    "SphericalShell",
    "MassCenter",
    "MassCenterSystem",
    "parse_motion_scheme",
    "spherical_to_cartesian",
    "SatelliteSwarm",
    "SwarmCollection",
]
