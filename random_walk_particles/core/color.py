"""
core/color.py

Speed becomes color.

Slow particles sit at the base hue, faster ones slide toward
the next hue band, the fastest wash out to white.
"""

from __future__ import annotations
from typing import Tuple
import numpy as np

# Width of the hue ramp between "slow" and "fast" (red -> yellow at hue 0)
HUE_TRANSITION_WIDTH = 0.16

# Headroom on the running max so few particles saturate
SPEED_HEADROOM = 1.1


def wrap_hue(hue):
    """Keep hue in [0, 1)."""
    wrapped = hue - np.floor(hue)
    # Tiny negative hues round up to exactly 1.0
    return np.where(wrapped >= 1.0, 0.0, wrapped)


def cycled_base_hue(
    base_hue: float,
    cycle: bool,
    hue_freq: float,
    elapsed_time: float,
    phase: float = 0.0
) -> float:
    """Base hue for this frame, optionally swept by a cosine."""
    if not cycle:
        return base_hue
    return base_hue + 0.5 + 0.5 * np.cos(hue_freq * elapsed_time + phase)


def speed_to_hsl(
    speeds: np.ndarray,
    running_max: float,
    base_hue: float,
    out: np.ndarray = None
) -> np.ndarray:
    """
    Map speeds to HSL colors, shape (N, 3).

    speed_scaled < 0.5: hue ramps across the transition band,
                        lightness 0.5
    otherwise:          hue fixed at the end of the band,
                        lightness = speed_scaled (capped at 1)
    """
    speeds = np.asarray(speeds, dtype=np.float64)
    denom = running_max * SPEED_HEADROOM
    if denom > 0:
        scaled = speeds / denom
    else:
        scaled = np.zeros_like(speeds)

    if out is None:
        out = np.empty((len(speeds), 3), dtype=np.float64)

    slow = scaled < 0.5
    out[:, 0] = np.where(
        slow,
        wrap_hue(base_hue + scaled * 2.0 * HUE_TRANSITION_WIDTH),
        wrap_hue(base_hue + HUE_TRANSITION_WIDTH)
    )
    out[:, 1] = 1.0
    out[:, 2] = np.where(slow, 0.5, np.minimum(scaled, 1.0))
    return out


def hsl_to_rgb(hsl: np.ndarray) -> np.ndarray:
    """Vectorized HSL -> RGB, all channels in [0, 1]."""
    hsl = np.atleast_2d(np.asarray(hsl, dtype=np.float64))
    h = hsl[:, 0]
    s = hsl[:, 1]
    l = hsl[:, 2]

    q = np.where(l <= 0.5, l * (1.0 + s), l + s - l * s)
    p = 2.0 * l - q

    rgb = np.empty_like(hsl)
    rgb[:, 0] = _hue_to_channel(p, q, h + 1.0 / 3.0)
    rgb[:, 1] = _hue_to_channel(p, q, h)
    rgb[:, 2] = _hue_to_channel(p, q, h - 1.0 / 3.0)
    return rgb


def _hue_to_channel(p: np.ndarray, q: np.ndarray, t: np.ndarray) -> np.ndarray:
    t = wrap_hue(t)
    return np.select(
        [t < 1.0 / 6.0, t < 0.5, t < 2.0 / 3.0],
        [p + (q - p) * 6.0 * t, q, p + (q - p) * 6.0 * (2.0 / 3.0 - t)],
        default=p
    )


def hsl_tuple(hue: float, saturation: float, lightness: float) -> Tuple[float, float, float]:
    """Single HSL triple to an RGB tuple."""
    r, g, b = hsl_to_rgb(np.array([[hue, saturation, lightness]]))[0]
    return float(r), float(g), float(b)
