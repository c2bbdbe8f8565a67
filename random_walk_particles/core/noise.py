"""
core/noise.py

Smoothed Gaussian noise - the stochastic driver for the planets.

White noise jitters. Averaged noise wanders.
A sliding window of independent normal draws gives a gently
colored signal that still lives roughly inside [-1, 1].

Inspired by:
- Moving-average filters
- Brownian motion with inertia
"""

from __future__ import annotations
from typing import Optional
import numpy as np


def randn(rng: np.random.Generator) -> float:
    """
    Standard normal variate via the Box-Muller transform.

    Uniform draws are taken from (0, 1); an exact zero is redrawn
    so the logarithm never sees it.
    """
    u = 0.0
    v = 0.0
    while u == 0.0:
        u = rng.random()
    while v == 0.0:
        v = rng.random()
    return float(np.sqrt(-2.0 * np.log(u)) * np.cos(2.0 * np.pi * v))


class NoiseProcess:
    """
    One scalar of smoothed noise per call.

    Keeps a circular buffer of `window_size` standard-normal samples.
    Each call overwrites the oldest one and returns the scaled mean:

        sum / window_size * sqrt(window_size) / 3

    The sqrt restores unit variance lost to averaging; the /3 keeps
    typical outputs between -1 and 1. Larger windows are smoother.
    """

    def __init__(
        self,
        window_size: int = 10,
        rng: Optional[np.random.Generator] = None
    ):
        self.window_size = max(1, int(window_size))
        self.rng = rng if rng is not None else np.random.default_rng()

        self.samples = np.empty(self.window_size, dtype=np.float64)
        self.cursor = 0
        self.reinitialize()

    def reinitialize(self) -> None:
        """Refill every slot with a fresh draw and rewind the cursor."""
        for i in range(self.window_size):
            self.samples[i] = randn(self.rng)
        self.cursor = 0

    def next(self) -> float:
        """Draw one sample into the window and return the filtered value."""
        self.samples[self.cursor] = randn(self.rng)
        self.cursor = (self.cursor + 1) % self.window_size

        avg = self.samples.sum() / self.window_size
        return float(avg * np.sqrt(self.window_size) / 3.0)

    def __repr__(self) -> str:
        return f"NoiseProcess(window={self.window_size}, cursor={self.cursor})"


class VectorNoiseProcess:
    """
    Three independent noise processes, one per axis.

    No state is shared between axes, so the components of the
    output vector are uncorrelated.
    """

    def __init__(
        self,
        window_size: int = 10,
        rng: Optional[np.random.Generator] = None
    ):
        rng = rng if rng is not None else np.random.default_rng()
        self.x = NoiseProcess(window_size, rng)
        self.y = NoiseProcess(window_size, rng)
        self.z = NoiseProcess(window_size, rng)

    def reinitialize(self) -> None:
        self.x.reinitialize()
        self.y.reinitialize()
        self.z.reinitialize()

    def next(self) -> np.ndarray:
        return np.array([self.x.next(), self.y.next(), self.z.next()])

    def __repr__(self) -> str:
        return f"VectorNoiseProcess(window={self.x.window_size})"
