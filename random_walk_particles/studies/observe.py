"""
Study: Observe a Preset

Run: python -m random_walk_particles.studies.observe --preset restrained_volcano

Pick a parameter set, let it run, look at the numbers.
Does the cloud hold its shape? Does it boil over?
"""

from __future__ import annotations
import argparse
import logging
from typing import Dict, List, Optional

import numpy as np

from random_walk_particles.config import available_presets, load_preset
from random_walk_particles.environments.simulation import Simulation

logger = logging.getLogger(__name__)


def measure(sim: Simulation) -> Dict[str, float]:
    """Shape and motion statistics for the current frame."""
    spreads = []
    for swarm in sim.swarms:
        offsets = swarm.positions - swarm.anchor
        spreads.append(np.linalg.norm(offsets, axis=1).mean())

    speeds = sim.get_speeds()
    return {
        "spread": float(np.mean(spreads)) if spreads else 0.0,
        "mean_speed": float(speeds.mean()) if len(speeds) else 0.0,
        "max_speed": float(speeds.max()) if len(speeds) else 0.0,
        "running_max": float(np.mean([s.running_max for s in sim.swarms])),
    }


def run_study(
    preset: str = "default",
    steps: int = 500,
    animate: bool = False,
    num_masses: Optional[int] = None,
    num_satellites: Optional[int] = None,
    motion_scheme: Optional[str] = None,
    seed: Optional[int] = None,
    report_every: int = 100
) -> List[Dict[str, float]]:
    """
    Run one preset and report how the swarm behaves.

    Returns the metric history, one entry per reported step.
    """
    params = load_preset(
        preset,
        num_masses=num_masses,
        num_satellites=num_satellites,
        motion_scheme=motion_scheme,
        seed=seed,
    )
    sim = Simulation(params)

    print("=" * 50)
    print(f"Study: {preset}")
    print("=" * 50)
    print(f"Masses: {params.num_masses} ({params.motion_scheme})")
    print(f"Satellites per mass: {params.num_satellites}")
    print(f"mass={params.mass}, exponent={params.exponent}, "
          f"k_pos={params.k_pos}, k_vel={params.k_vel}")
    print(f"\nRunning {steps} steps...")

    history = []

    def record(step: int) -> None:
        if step % report_every == 0:
            history.append(_report(sim, step))

    if animate:
        from random_walk_particles.observations.visualize import animate_study
        animate_study(sim, steps, frame_time=1.0, on_step=record)
    else:
        for step in range(steps):
            sim.step(elapsed_time=float(step))
            record(step)

    final = measure(sim)
    history.append(final)

    print("\n" + "=" * 50)
    print("Observations")
    print("=" * 50)
    print(f"\nSpread around owner (reference radius {params.particle_radius}):")
    print(f"  Initial: {history[0]['spread']:.2f}")
    print(f"  Final: {final['spread']:.2f}")
    print(f"\nSpeed:")
    print(f"  Mean: {final['mean_speed']:.4f}")
    print(f"  Max: {final['max_speed']:.4f}")
    print(f"  Running max: {final['running_max']:.4f}")

    return history


def _report(sim: Simulation, step: int) -> Dict[str, float]:
    metrics = measure(sim)
    print(f"  Step {step}: spread={metrics['spread']:.2f}, "
          f"max_speed={metrics['max_speed']:.4f}")
    return metrics


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Random-walk particle study")
    parser.add_argument("--preset", default="default")
    parser.add_argument("--steps", type=int, default=500)
    parser.add_argument("--masses", type=int, default=None)
    parser.add_argument("--satellites", type=int, default=None)
    parser.add_argument(
        "--scheme",
        choices=["cartesian", "spherical-shell"],
        default=None,
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--animate", action="store_true")
    parser.add_argument("--list-presets", action="store_true")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if args.list_presets:
        for name in available_presets():
            print(name)
        return

    run_study(
        preset=args.preset,
        steps=args.steps,
        animate=args.animate,
        num_masses=args.masses,
        num_satellites=args.satellites,
        motion_scheme=args.scheme,
        seed=args.seed,
    )


if __name__ == "__main__":
    main()
