import numpy as np
import pytest

from atomsim.atoms import Atom
from atomsim.bonds import (
    Bond,
    BondLifecycleEngine,
    dissociation_probability,
    effective_rest_length,
    rest_length_for,
)
from atomsim.registry import Registry


class NoDrawRng:
    """Fails the test if the engine draws a random number."""

    def random(self, *args, **kwargs):
        raise AssertionError("random number drawn")


class FixedRng:
    def __init__(self, value):
        self.value = value

    def random(self, *args, **kwargs):
        return self.value


def _pair(distance, **bond_kwargs):
    a = Atom("C", pos=(0.0, 0.0, 0.0), mass=12.0, radius=0.9, max_bonds=4)
    b = Atom("C", pos=(distance, 0.0, 0.0), mass=12.0, radius=0.9, max_bonds=4)
    bond = Bond(a.uid, b.uid, **bond_kwargs)
    return Registry([a, b], [bond]), bond


def test_bond_validation():
    with pytest.raises(ValueError):
        Bond("a", "a")
    with pytest.raises(ValueError):
        Bond("a", "b", order=4)
    with pytest.raises(ValueError):
        Bond("a", "b", bond_type="hydrogen")


def test_pair_is_unordered():
    assert Bond("x", "y").pair == Bond("y", "x").pair


def test_energy_and_stiffness():
    bond = Bond("a", "b", order=2, strength=1200.0)
    assert bond.bond_energy() == 2400.0
    assert bond.stiffness() == pytest.approx(1200.0 * 2 ** 1.2)


def test_rest_length_shortens_with_order():
    assert rest_length_for(2.0, 1) == pytest.approx(1.5)
    assert rest_length_for(2.0, 2) < rest_length_for(2.0, 1)
    assert rest_length_for(2.0, 3) < rest_length_for(2.0, 2)


def test_thermal_expansion():
    bond = Bond("a", "b", rest_length=2.0)
    assert effective_rest_length(bond, 10.0) == pytest.approx(2.1)
    assert effective_rest_length(bond, 0.0) == pytest.approx(2.0)


def test_dissociation_probability_threshold():
    bond = Bond("a", "b", strength=1200.0)
    # 150 * 6.4 == 0.8 * 1200
    assert dissociation_probability(bond, 6.0) == 0.0
    assert dissociation_probability(bond, 10.0) == pytest.approx((1500.0 - 960.0) * 5e-5)


def test_overstretched_bond_snaps_without_rng():
    registry, bond = _pair(2.5, rest_length=1.0)
    forces = np.zeros((2, 3))
    survivors, broken = BondLifecycleEngine().evaluate(registry, forces, 0.0, NoDrawRng())
    assert broken == 1
    assert survivors == []
    assert not registry.is_bonded(bond.atom1, bond.atom2)
    assert not np.any(forces)


def test_snap_threshold_includes_thermal_expansion():
    # at T = 10 the effective rest length is 1.05, so the snap threshold is 2.1
    # a strong bond keeps thermal dissociation out of the picture
    registry, _ = _pair(2.05, rest_length=1.0, strength=5000.0)
    survivors, broken = BondLifecycleEngine().evaluate(registry, np.zeros((2, 3)), 10.0, NoDrawRng())
    assert broken == 0
    assert len(survivors) == 1

    registry, _ = _pair(2.15, rest_length=1.0, strength=5000.0)
    survivors, broken = BondLifecycleEngine().evaluate(registry, np.zeros((2, 3)), 10.0, NoDrawRng())
    assert broken == 1
    assert survivors == []


def test_stretched_spring_pulls_atoms_together():
    registry, _ = _pair(1.5, rest_length=1.0, strength=1200.0)
    forces = np.zeros((2, 3))
    survivors, broken = BondLifecycleEngine().evaluate(registry, forces, 0.0, NoDrawRng())
    assert broken == 0
    assert len(survivors) == 1
    assert forces[0] == pytest.approx([600.0, 0.0, 0.0])
    assert forces[1] == pytest.approx([-600.0, 0.0, 0.0])


def test_hot_bond_dissociates_on_low_roll():
    registry, _ = _pair(1.0, rest_length=1.0)
    forces = np.zeros((2, 3))
    survivors, broken = BondLifecycleEngine().evaluate(registry, forces, 10.0, FixedRng(0.0))
    assert broken == 1
    assert survivors == []


def test_hot_bond_survives_high_roll():
    registry, _ = _pair(1.0, rest_length=1.0)
    forces = np.zeros((2, 3))
    survivors, broken = BondLifecycleEngine().evaluate(registry, forces, 10.0, FixedRng(0.99))
    assert broken == 0
    assert len(survivors) == 1
