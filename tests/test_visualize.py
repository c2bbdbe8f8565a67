"""
Tests for observations/visualize.py

Rendered off-screen with the Agg backend.
"""

import pytest

matplotlib = pytest.importorskip("matplotlib")
matplotlib.use("Agg")

from random_walk_particles.core.parameters import SimulationParameters
from random_walk_particles.environments.simulation import Simulation
from random_walk_particles.observations.visualize import SwarmVisualizer, animate_study


@pytest.fixture
def sim():
    return Simulation(SimulationParameters(num_masses=2, num_satellites=200, seed=0, render_masses=True))


class TestSwarmVisualizer:

    def test_render_and_save(self, sim, tmp_path):
        viz = SwarmVisualizer(sim, max_points=100)
        try:
            sim.step(0.0)
            viz.render()
            path = tmp_path / "frame.png"
            viz.save_frame(str(path))
            assert path.exists()
        finally:
            viz.close()

    def test_subset_respects_budget(self, sim):
        viz = SwarmVisualizer(sim, max_points=50)
        idx = viz._subset(400)
        assert len(idx) == 50
        assert len(set(idx.tolist())) == 50
        assert len(viz._subset(10)) == 10

    def test_close_without_render(self, sim):
        SwarmVisualizer(sim).close()


def test_animate_study(sim, tmp_path):
    path = tmp_path / "last.png"
    animate_study(sim, steps=2, save_path=str(path), max_points=100)
    assert sim.time == 2
    assert path.exists()


def test_animate_study_reports_each_step(sim):
    seen = []
    animate_study(sim, steps=3, max_points=100, frame_time=1.0, on_step=seen.append)
    assert seen == [0, 1, 2]
    assert sim.time == 3


def test_animated_run_study_reports(capsys):
    from random_walk_particles.studies.observe import run_study

    history = run_study(
        preset="default",
        steps=3,
        animate=True,
        num_masses=1,
        num_satellites=20,
        seed=0,
        report_every=1,
    )
    assert "Observations" in capsys.readouterr().out
    # steps 0, 1, 2 plus the final measurement
    assert len(history) == 4
