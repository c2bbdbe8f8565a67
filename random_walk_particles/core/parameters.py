"""
core/parameters.py

The knobs. One record, owned by whoever drives the simulation,
read by every component on every tick.

Counts are always valid: bad input is rounded and clamped,
never rejected, so there is always something to render.
"""

from __future__ import annotations
from dataclasses import dataclass, fields, asdict
from typing import Any, Dict, Optional
import logging
import math

logger = logging.getLogger(__name__)

MAX_SATELLITES = 200_000
MAX_MASSES = 10


def clamp_count(value: Any, ceiling: int, floor: int = 1) -> int:
    """
    Round a requested count and clamp it to [floor, ceiling].

    Non-finite input lands on the nearest bound (NaN on the floor).
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.debug(f"Count {value!r} is not numeric, using {floor}")
        return floor

    if math.isnan(number):
        return floor
    if math.isinf(number):
        return ceiling if number > 0 else floor

    count = int(round(number))
    clamped = max(floor, min(ceiling, count))
    if clamped != count:
        logger.debug(f"Count {value!r} clamped to {clamped}")
    return clamped


@dataclass
class SimulationParameters:
    """
    Shared parameter block for planets and satellites.

    Defaults give the classic two-planet look. Fields that change the
    size of the system (num_masses, num_satellites) are re-clamped by
    the Simulation, which rebuilds its arrays on the next tick.
    """
    # Planets
    num_masses: int = 2               # Number of mass centers
    mass: float = 0.01                # Attraction strength, shared by all centers
    exponent: float = 0.05            # Power on distance in the force law
    walk_speed: float = 0.01          # Angular step scale for the shell walk
    mass_radii: float = 10.0          # Display radius of the planet markers
    render_masses: bool = False       # Draw planet markers
    motion_scheme: str = "cartesian"  # "cartesian" or "spherical-shell"
    shell_radius: float = 50.0        # Radius of the shell walk
    noise_window: int = 10            # Moving-average window of the planet noise

    # Satellites
    num_satellites: int = 50_000      # Particles per planet
    particle_radius: float = 20.0     # Radius of the reference sphere
    k_pos: float = 0.003              # Spring stiffness (displacement)
    k_vel: float = 0.001              # Spring damping (velocity)

    # Color
    cycle_color: bool = False         # Cycle the base hue over time
    base_hue: float = 0.0             # Base hue in [0, 1)
    hue_freq: float = 0.05            # Frequency of the hue cycle
    hue_phase: float = 0.0            # Phase offset of the hue cycle

    # Randomness (None = fresh entropy)
    seed: Optional[int] = None

    def __post_init__(self):
        self.num_masses = clamp_count(self.num_masses, MAX_MASSES)
        self.num_satellites = clamp_count(self.num_satellites, MAX_SATELLITES)
        self.noise_window = clamp_count(self.noise_window, 10_000)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimulationParameters":
        """Build from a mapping; unknown keys are a configuration error."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown parameters: {sorted(unknown)}")
        return cls(**data)
