import numpy as np
import pytest

from atomsim.atoms import Atom
from atomsim.bonds import Bond, BondLifecycleEngine
from atomsim.physics import (
    ForceIntegrator,
    coulomb_force,
    lorentz_force,
    potential_energy,
    vortex_force,
)
from atomsim.registry import Registry


def _ion(symbol, pos, charge):
    a = Atom.from_element(symbol, pos=pos, rng=np.random.default_rng(0))
    a.charge = charge
    return a


def test_coulomb_magnitude_matches_inverse_square():
    na = _ion("Na", (0.0, 0.0, 0.0), 1.0)
    cl = _ion("Cl", (2.0, 0.0, 0.0), -1.0)
    f = coulomb_force(na, cl)
    # 350 / 2^2, pulling Na towards Cl
    assert f == pytest.approx([87.5, 0.0, 0.0])
    assert coulomb_force(cl, na) == pytest.approx(-f)


def test_coulomb_like_charges_repel():
    a = _ion("Na", (0.0, 0.0, 0.0), 1.0)
    b = _ion("Na", (0.0, 5.0, 0.0), 1.0)
    assert coulomb_force(a, b)[1] == pytest.approx(-350.0 / 25.0)


def test_neutral_pair_has_no_coulomb_term():
    a = _ion("C", (0.0, 0.0, 0.0), 0.0)
    b = _ion("Na", (1.0, 0.0, 0.0), 1.0)
    assert not np.any(coulomb_force(a, b))


def test_lorentz_force_is_q_v_cross_b():
    a = _ion("Na", (0.0, 0.0, 0.0), 1.0)
    a.vel = np.array([1.0, 0.0, 0.0])
    f = lorentz_force(a, np.array([0.0, 0.0, 1.0]))
    assert f == pytest.approx([0.0, -2.0, 0.0])
    assert not np.any(lorentz_force(a, np.zeros(3)))


def test_vortex_pulls_inward_and_swirls():
    a = _ion("C", (5.0, 0.0, 0.0), 0.0)
    f = vortex_force(a, np.zeros(3))
    assert f == pytest.approx([-100.0, -20.0, 0.0])
    a.pos = np.array([0.5, 0.0, 0.0])
    assert not np.any(vortex_force(a, np.zeros(3)))


def test_pairs_closer_than_guard_distance_are_skipped():
    a = _ion("Na", (0.0, 0.0, 0.0), 1.0)
    b = _ion("Cl", (0.05, 0.0, 0.0), -1.0)
    forces = ForceIntegrator().compute(Registry([a, b]), 3.0, np.zeros(3))
    assert not np.any(forces)


def test_net_internal_force_is_zero():
    rng = np.random.default_rng(3)
    symbols = ["Na", "Cl", "O", "H", "H", "C", "N", "F"]
    atoms = []
    for i, s in enumerate(symbols):
        pos = (1.5 * (i % 3), 1.5 * (i // 3), 0.3 * i)
        atoms.append(Atom.from_element(s, pos=pos, vel=rng.normal(size=3), rng=rng))
    bonds = [
        Bond(atoms[2].uid, atoms[4].uid, rest_length=1.5),
        Bond(atoms[0].uid, atoms[1].uid, strength=800.0, rest_length=1.5, bond_type="ionic"),
    ]
    registry = Registry(atoms, bonds)
    forces = ForceIntegrator().compute(registry, 1.0, np.zeros(3))
    BondLifecycleEngine().evaluate(registry, forces, 1.0, rng)

    scale = max(1.0, float(np.abs(forces).max()))
    assert np.allclose(forces.sum(axis=0), 0.0, atol=1e-9 * scale)
    assert len(registry.bonds) == 2


def test_bonded_pairs_skip_lennard_jones():
    a = _ion("C", (0.0, 0.0, 0.0), 0.0)
    b = _ion("C", (1.0, 0.0, 0.0), 0.0)
    integrator = ForceIntegrator()
    # 60 is above both boiling points so cohesion is off as well
    assert not np.any(integrator.pair_force(a, b, bonded=True, temperature=60.0))
    assert np.any(integrator.pair_force(a, b, bonded=False, temperature=60.0))


def test_potential_energy_components():
    a = _ion("Na", (0.0, 0.0, 0.0), 1.0)
    b = _ion("Cl", (2.0, 0.0, 0.0), -1.0)
    pe = potential_energy(Registry([a, b]), 3.0)
    assert set(pe) == {"bond", "lj", "coulomb", "total"}
    assert pe["coulomb"] == pytest.approx(-175.0)
    assert pe["bond"] == 0.0
    assert pe["total"] == pytest.approx(pe["lj"] + pe["coulomb"])
