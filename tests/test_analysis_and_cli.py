import matplotlib
matplotlib.use("Agg")

import numpy as np

from analysis.plots import plot_run
from analysis.snapshot import render_snapshot
from atomsim.scenarios import build_scenario
from atomsim.simulation import Simulation
from main import run_simulation_cli


def test_plot_run_writes_files(tmp_path):
    sim = Simulation(build_scenario("water", np.random.default_rng(0)), seed=0)
    sim.run(10)
    paths = plot_run(sim.metrics.get_plot_data(), str(tmp_path / "run"))
    assert len(paths) == 6
    for p in paths:
        assert (tmp_path / p.split("/")[-1]).exists()


def test_render_snapshot(tmp_path):
    state = build_scenario("salt", np.random.default_rng(0))
    out = render_snapshot(state, str(tmp_path / "snap"), show_field=True)
    assert out.endswith(".png")
    assert (tmp_path / "snap.png").exists()


def test_cli_headless_run(tmp_path, capsys):
    sim = run_simulation_cli([
        "--scenario", "dipole", "--steps", "5", "--seed", "1", "--photons", "1",
        "--field", "0", "0", "1", "--plot", str(tmp_path / "plots" / "run"), "--log-level", "WARNING",
    ])
    assert sim.state.frame == 5
    assert sim.state.magnetic_field[2] == 1.0
    assert (tmp_path / "plots" / "run_kinetic.png").exists()
    assert "phases:" in capsys.readouterr().out
