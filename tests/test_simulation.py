import logging
import time

import numpy as np
import pytest

from atomsim.atoms import Atom
from atomsim.bonds import Bond
from atomsim.registry import Registry
from atomsim.scenarios import build_scenario
from atomsim.simulation import Simulation, clamp_dt, step
from atomsim.state import SimulationState


def test_clamp_dt():
    assert clamp_dt(0.2) == pytest.approx(0.05)
    assert clamp_dt(0.01, 2.0) == pytest.approx(0.02)
    assert clamp_dt(1.0, 0.0) == 0.0


def test_empty_state_is_unchanged():
    state = SimulationState(temperature=4.0)
    new = step(state, 0.05, np.random.default_rng(0))
    assert new is not state
    assert new.atoms == [] and new.bonds == [] and new.photons == []
    assert new.frame == 0
    assert new.time == 0.0
    assert new.temperature == 4.0


def test_step_does_not_mutate_input():
    state = build_scenario("water", np.random.default_rng(0))
    before = [a.pos.copy() for a in state.atoms]
    new = step(state, 0.05, np.random.default_rng(1))
    for atom, pos in zip(state.atoms, before):
        assert np.array_equal(atom.pos, pos)
    assert new.frame == 1
    assert new.time == pytest.approx(0.05)
    assert [a.uid for a in new.atoms] == [a.uid for a in state.atoms]


def test_same_seed_same_trajectory():
    initial = build_scenario("water", np.random.default_rng(0))
    a = Simulation(initial, seed=42)
    b = Simulation(initial, seed=42)
    a.run(20)
    b.run(20)
    for x, y in zip(a.state.atoms, b.state.atoms):
        assert np.array_equal(x.pos, y.pos)


def test_stale_bonds_are_dropped():
    atom = Atom("H", pos=(0, 0, 0), mass=1.0, radius=0.5, max_bonds=1)
    state = SimulationState([atom], [Bond(atom.uid, "vanished")])
    new = step(state, 0.01, np.random.default_rng(0))
    assert new.bonds == []


def test_bonds_without_any_atoms_are_dropped():
    state = SimulationState([], [Bond("gone1", "gone2")])
    new = step(state, 0.05, np.random.default_rng(0))
    assert new.bonds == []
    assert new.frame == 0
    assert len(state.bonds) == 1


def test_valence_and_uniqueness_hold_over_a_run():
    sim = Simulation(build_scenario("salt", np.random.default_rng(0), temperature=1.0), seed=3)
    sim.spawn_molecule("water", (4.0, 0.0, 0.0))
    sim.spawn_atom("H", (5.0, 1.0, 0.0))
    sim.run(80)
    state = sim.state
    pairs = [b.pair for b in state.bonds]
    assert len(pairs) == len(set(pairs))
    registry = Registry(state.atoms, state.bonds)
    assert registry.rejected == []
    for atom in state.atoms:
        assert registry.bond_count(atom.uid) <= atom.max_bonds


def test_commands_apply_only_at_tick_boundary():
    sim = Simulation(build_scenario("dipole", np.random.default_rng(0)), seed=0)
    sim.set_temperature(5.0)
    assert sim.state.temperature == 3.0
    assert sim.pending_commands == 1
    sim.advance(0.05)
    assert sim.state.temperature == 5.0
    assert sim.pending_commands == 0


def test_rejected_command_is_logged_and_skipped(caplog):
    sim = Simulation(build_scenario("dipole", np.random.default_rng(0)), seed=0)
    with caplog.at_level(logging.WARNING):
        sim.set_temperature(-1.0)
        sim.set_time_scale(2.0)
        sim.advance(0.01)
    assert sim.state.temperature == 3.0
    assert sim.state.time_scale == 2.0
    assert sim.state.time == pytest.approx(0.02)
    assert "Rejected command set_temperature" in caplog.text


def test_pause_and_resume():
    sim = Simulation(build_scenario("dipole", np.random.default_rng(0)), seed=0)
    sim.pause()
    assert not sim.advance(0.05)
    assert sim.state.frame == 0
    sim.resume()
    assert sim.advance(0.05)
    assert sim.state.frame == 1


def test_opposite_charges_approach():
    sim = Simulation(build_scenario("dipole", np.random.default_rng(0), temperature=0.0), seed=0)
    sim.run(10)
    na, cl = sim.state.atoms
    assert np.linalg.norm(na.pos - cl.pos) < 6.0


def test_photon_breaks_bond_during_tick():
    a = Atom("H", pos=(-0.4, 0.0, 0.0), mass=1.0, radius=0.5, max_bonds=1)
    b = Atom("H", pos=(0.4, 0.0, 0.0), mass=1.0, radius=0.5, max_bonds=1)
    sim = Simulation(SimulationState([a, b], [Bond(a.uid, b.uid, rest_length=0.75)], temperature=0.0), seed=0)
    sim.fire_photon(origin=(-0.2, 0.0, 0.0), direction=(1.0, 0.0, 0.0))
    assert sim.advance(0.05)
    assert sim.last_report.struck == 1
    assert sim.state.bonds == []
    assert sim.state.photons == []


def test_snapshot_is_a_copy():
    sim = Simulation(build_scenario("dipole", np.random.default_rng(0)), seed=0)
    snap = sim.snapshot()
    snap.atoms[0].pos[0] = 99.0
    assert sim.state.atoms[0].pos[0] != 99.0
    assert set(sim.phases().values()) <= {"solid", "liquid", "gas", "plasma"}


def test_metrics_follow_committed_ticks():
    sim = Simulation(build_scenario("water", np.random.default_rng(0)), seed=0)
    assert sim.run(15) == 15
    assert sim.metrics.summary()["samples"] == 15
    assert len(sim.history()["time"]) == 15


def test_background_thread_accepts_commands():
    sim = Simulation(build_scenario("dipole", np.random.default_rng(0)), seed=0)
    sim.start(interval=0.001)
    sim.fire_photon()
    time.sleep(0.1)
    sim.stop()
    assert sim.state.frame > 0
    assert sim.pending_commands == 0
