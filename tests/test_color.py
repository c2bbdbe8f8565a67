"""
Tests for core/color.py

Speed to HSL mapping and HSL to RGB conversion.
"""

import numpy as np
import pytest

from random_walk_particles.core.color import (
    HUE_TRANSITION_WIDTH,
    cycled_base_hue,
    hsl_to_rgb,
    hsl_tuple,
    speed_to_hsl,
    wrap_hue,
)


class TestWrapHue:

    @pytest.mark.parametrize("hue,expected", [(0.0, 0.0), (1.0, 0.0), (1.25, 0.25), (-0.25, 0.75)])
    def test_wrap(self, hue, expected):
        assert wrap_hue(hue) == pytest.approx(expected)

    def test_tiny_negative_hue_stays_below_one(self):
        assert 0.0 <= wrap_hue(-1e-17) < 1.0
        hues = wrap_hue(np.array([-1e-17, -1e-300, 0.5]))
        assert np.all((hues >= 0.0) & (hues < 1.0))

    def test_speed_to_hsl_tiny_negative_base_hue(self):
        hsl = speed_to_hsl(np.array([0.0]), running_max=5.0, base_hue=-1e-17)
        assert 0.0 <= hsl[0, 0] < 1.0


class TestCycledBaseHue:

    def test_no_cycle_returns_base(self):
        assert cycled_base_hue(0.3, False, 1.0, 123.0) == 0.3

    def test_cycle_formula(self):
        value = cycled_base_hue(0.2, True, 0.5, 2.0, phase=0.1)
        assert value == pytest.approx(0.2 + 0.5 + 0.5 * np.cos(0.5 * 2.0 + 0.1))

    def test_matching_phase_lands_on_base_hue(self):
        t, freq = 7.0, 0.05
        value = cycled_base_hue(0.3, True, freq, t, phase=-freq * t)
        assert wrap_hue(value) == pytest.approx(0.3)


class TestSpeedToHsl:
    """Tests for the color law."""

    def test_zero_speed_is_half_lightness(self):
        hsl = speed_to_hsl(np.array([0.0]), running_max=5.0, base_hue=0.0)
        np.testing.assert_allclose(hsl, [[0.0, 1.0, 0.5]])

    def test_full_scale_is_white(self):
        speed = 5.0 * 1.1
        hsl = speed_to_hsl(np.array([speed]), running_max=5.0, base_hue=0.0)
        assert hsl[0, 0] == pytest.approx(HUE_TRANSITION_WIDTH)
        assert hsl[0, 2] == pytest.approx(1.0)

    def test_slow_band_ramps_hue(self):
        speed = 0.25 * 1.1 * 2.0
        hsl = speed_to_hsl(np.array([speed]), running_max=2.0, base_hue=0.1)
        assert hsl[0, 0] == pytest.approx(0.1 + 0.25 * 2.0 * HUE_TRANSITION_WIDTH)
        assert hsl[0, 2] == pytest.approx(0.5)

    def test_fast_band_lightness_tracks_speed(self):
        speed = 0.75 * 1.1
        hsl = speed_to_hsl(np.array([speed]), running_max=1.0, base_hue=0.0)
        assert hsl[0, 2] == pytest.approx(0.75)

    def test_lightness_capped(self):
        hsl = speed_to_hsl(np.array([100.0]), running_max=1.0, base_hue=0.0)
        assert hsl[0, 2] == 1.0

    def test_hue_wraps(self):
        hsl = speed_to_hsl(np.array([0.0, 50.0]), running_max=1.0, base_hue=0.95)
        assert hsl[0, 0] == pytest.approx(0.95)
        assert hsl[1, 0] == pytest.approx(0.95 + HUE_TRANSITION_WIDTH - 1.0)
        assert np.all((hsl[:, 0] >= 0.0) & (hsl[:, 0] < 1.0))

    def test_zero_running_max_is_safe(self):
        hsl = speed_to_hsl(np.array([0.0, 1.0]), running_max=0.0, base_hue=0.0)
        assert np.all(np.isfinite(hsl))
        np.testing.assert_allclose(hsl[:, 2], 0.5)

    def test_writes_into_buffer(self):
        out = np.zeros((2, 3))
        result = speed_to_hsl(np.array([0.0, 0.0]), 1.0, 0.0, out=out)
        assert result is out
        np.testing.assert_allclose(out[:, 2], 0.5)


class TestHslToRgb:

    @pytest.mark.parametrize("hsl,rgb", [
        ((0.0, 1.0, 0.5), (1.0, 0.0, 0.0)),
        ((1.0 / 3.0, 1.0, 0.5), (0.0, 1.0, 0.0)),
        ((2.0 / 3.0, 1.0, 0.5), (0.0, 0.0, 1.0)),
        ((1.0 / 6.0, 1.0, 0.5), (1.0, 1.0, 0.0)),
        ((0.3, 1.0, 1.0), (1.0, 1.0, 1.0)),
        ((0.3, 0.0, 0.2), (0.2, 0.2, 0.2)),
        ((0.0, 1.0, 0.0), (0.0, 0.0, 0.0)),
    ])
    def test_known_colors(self, hsl, rgb):
        np.testing.assert_allclose(hsl_to_rgb(np.array([hsl]))[0], rgb, atol=1e-12)

    def test_shape_preserved(self):
        hsl = np.random.default_rng(0).random((100, 3))
        rgb = hsl_to_rgb(hsl)
        assert rgb.shape == (100, 3)
        assert np.all((rgb >= 0.0) & (rgb <= 1.0))

    def test_hsl_tuple(self):
        assert hsl_tuple(0.0, 1.0, 0.5) == pytest.approx((1.0, 0.0, 0.0))
