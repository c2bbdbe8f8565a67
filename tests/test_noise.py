"""
Tests for core/noise.py

Smoothed Gaussian noise - Box-Muller draws, moving-average window.
"""

import numpy as np
import pytest

from random_walk_particles.core.noise import NoiseProcess, VectorNoiseProcess, randn


class ScriptedUniform:
    """Stands in for a Generator, replaying fixed uniform draws."""

    def __init__(self, values):
        self.values = list(values)

    def random(self):
        return self.values.pop(0)


class TestRandn:
    """Tests for the Box-Muller draw."""

    def test_known_value(self):
        rng = ScriptedUniform([0.25, 0.5])
        expected = np.sqrt(-2.0 * np.log(0.25)) * np.cos(np.pi)
        assert randn(rng) == pytest.approx(expected)

    def test_zero_uniforms_are_redrawn(self):
        rng = ScriptedUniform([0.0, 0.0, 0.25, 0.0, 0.5])
        value = randn(rng)
        assert np.isfinite(value)
        assert value == pytest.approx(-np.sqrt(-2.0 * np.log(0.25)))

    def test_standard_normal_moments(self):
        rng = np.random.default_rng(0)
        samples = np.array([randn(rng) for _ in range(20000)])
        assert samples.mean() == pytest.approx(0.0, abs=0.05)
        assert samples.std() == pytest.approx(1.0, abs=0.05)


class TestNoiseProcess:
    """Tests for scalar smoothed noise."""

    def test_initial_state(self):
        noise = NoiseProcess(10, np.random.default_rng(1))
        assert noise.window_size == 10
        assert noise.cursor == 0
        assert len(noise.samples) == 10
        assert np.all(np.isfinite(noise.samples))

    def test_window_clamped_to_one(self):
        noise = NoiseProcess(0, np.random.default_rng(1))
        assert noise.window_size == 1
        assert np.isfinite(noise.next())

    def test_cursor_wraps(self):
        noise = NoiseProcess(3, np.random.default_rng(1))
        for _ in range(4):
            noise.next()
        assert noise.cursor == 1

    def test_output_matches_formula(self):
        noise = NoiseProcess(5, np.random.default_rng(2))
        value = noise.next()
        expected = noise.samples.sum() / 5 * np.sqrt(5) / 3.0
        assert value == pytest.approx(expected)

    def test_next_overwrites_oldest_slot(self):
        noise = NoiseProcess(4, np.random.default_rng(3))
        before = noise.samples.copy()
        noise.next()
        assert noise.samples[0] != before[0]
        np.testing.assert_array_equal(noise.samples[1:], before[1:])

    @pytest.mark.parametrize("window", [1, 5, 10, 50])
    def test_std_approaches_one_third(self, window):
        noise = NoiseProcess(window, np.random.default_rng(42))
        values = np.array([noise.next() for _ in range(30000)])
        assert np.all(np.isfinite(values))
        assert values.std() == pytest.approx(1.0 / 3.0, abs=0.04)

    def test_reinitialize_replaces_all_samples(self):
        noise = NoiseProcess(10, np.random.default_rng(4))
        for _ in range(7):
            noise.next()
        before = noise.samples.copy()

        noise.reinitialize()

        assert noise.cursor == 0
        assert not np.any(np.isin(noise.samples, before))

    def test_reinitialize_then_next_never_sees_old_samples(self):
        noise = NoiseProcess(6, np.random.default_rng(5))
        before = noise.samples.copy()
        noise.reinitialize()
        for _ in range(12):
            noise.next()
            assert not np.any(np.isin(noise.samples, before))

    def test_seeded_processes_agree(self):
        a = NoiseProcess(8, np.random.default_rng(9))
        b = NoiseProcess(8, np.random.default_rng(9))
        assert [a.next() for _ in range(20)] == [b.next() for _ in range(20)]

    def test_larger_window_is_smoother(self):
        rough = NoiseProcess(1, np.random.default_rng(6))
        smooth = NoiseProcess(50, np.random.default_rng(6))
        rough_steps = np.diff([rough.next() for _ in range(5000)])
        smooth_steps = np.diff([smooth.next() for _ in range(5000)])
        assert np.abs(smooth_steps).mean() < np.abs(rough_steps).mean()

    def test_repr(self):
        assert "NoiseProcess" in repr(NoiseProcess(3))


class TestVectorNoiseProcess:
    """Tests for 3D noise."""

    def test_next_shape(self):
        noise = VectorNoiseProcess(10, np.random.default_rng(0))
        value = noise.next()
        assert value.shape == (3,)
        assert np.all(np.isfinite(value))

    def test_axes_are_independent_processes(self):
        noise = VectorNoiseProcess(10, np.random.default_rng(0))
        assert noise.x is not noise.y
        assert noise.y is not noise.z
        assert not np.array_equal(noise.x.samples, noise.y.samples)

    def test_axes_uncorrelated(self):
        noise = VectorNoiseProcess(5, np.random.default_rng(11))
        values = np.array([noise.next() for _ in range(20000)])
        corr = np.corrcoef(values.T)
        assert abs(corr[0, 1]) < 0.06
        assert abs(corr[0, 2]) < 0.06
        assert abs(corr[1, 2]) < 0.06

    def test_reinitialize_resets_all_axes(self):
        noise = VectorNoiseProcess(4, np.random.default_rng(1))
        for _ in range(3):
            noise.next()
        noise.reinitialize()
        assert noise.x.cursor == 0
        assert noise.y.cursor == 0
        assert noise.z.cursor == 0
