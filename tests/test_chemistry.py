import numpy as np
import pytest

from atomsim.atoms import Atom
from atomsim.chemistry import ChemistryEngine, classify_pair
from atomsim.registry import Registry


def _make(symbol, pos, charge=0.0):
    a = Atom.from_element(symbol, pos=pos, rng=np.random.default_rng(1))
    a.charge = charge
    return a


def test_cooldown_gates_formation():
    engine = ChemistryEngine()
    fires, cooldown = engine.tick(0.2, 0.05)
    assert not fires
    assert cooldown == pytest.approx(0.15)
    fires, cooldown = engine.tick(0.03, 0.05)
    assert fires
    assert cooldown == pytest.approx(0.2)


def test_ionic_bond_transfers_charge():
    na = _make("Na", (0.0, 0.0, 0.0))
    cl = _make("Cl", (1.5, 0.0, 0.0))
    registry = Registry([na, cl])
    formed = ChemistryEngine().form_bonds(registry, temperature=1.0)

    assert len(formed) == 1
    bond = formed[0]
    assert bond.bond_type == "ionic"
    assert bond.strength == 800.0
    assert bond.order == 1
    assert bond.rest_length == pytest.approx((1.1 + 1.0) * 0.75)
    assert na.charge == 1.0
    assert cl.charge == -1.0
    assert registry.is_bonded(na.uid, cl.uid)


def test_ionic_bond_needs_cold_pair():
    na = _make("Na", (0.0, 0.0, 0.0))
    cl = _make("Cl", (1.5, 0.0, 0.0))
    # mean melting point of Na and Cl is 2.7
    assert ChemistryEngine().form_bonds(Registry([na, cl]), temperature=3.0) == []


def test_covalent_bond_between_hydrogens():
    h1 = _make("H", (0.0, 0.0, 0.0))
    h2 = _make("H", (0.8, 0.0, 0.0))
    formed = ChemistryEngine().form_bonds(Registry([h1, h2]), temperature=0.5)
    assert [b.bond_type for b in formed] == ["covalent"]
    assert formed[0].strength == 1200.0


def test_pairs_out_of_range_do_not_bond():
    h1 = _make("H", (0.0, 0.0, 0.0))
    h2 = _make("H", (1.4, 0.0, 0.0))
    assert ChemistryEngine().form_bonds(Registry([h1, h2]), temperature=0.5) == []


def test_valence_capacity_holds_within_one_pass():
    o = _make("O", (0.0, 0.0, 0.0))
    hs = [_make("H", p) for p in ((1.2, 0.0, 0.0), (-1.2, 0.0, 0.0), (0.0, 1.2, 0.0))]
    registry = Registry([o] + hs)
    formed = ChemistryEngine().form_bonds(registry, temperature=0.2)

    assert len(formed) == 2
    assert registry.bond_count(o.uid) == 2
    for atom in registry.atoms:
        assert registry.bond_count(atom.uid) <= atom.max_bonds


def test_inert_atoms_never_bond():
    he = _make("He", (0.0, 0.0, 0.0))
    h = _make("H", (0.5, 0.0, 0.0))
    assert ChemistryEngine().form_bonds(Registry([he, h]), temperature=0.05) == []


def test_existing_bond_is_not_duplicated():
    h1 = _make("H", (0.0, 0.0, 0.0))
    h2 = _make("H", (0.8, 0.0, 0.0))
    registry = Registry([h1, h2])
    engine = ChemistryEngine()
    engine.form_bonds(registry, temperature=0.5)
    assert engine.form_bonds(registry, temperature=0.5) == []
    assert len(registry.bonds) == 1


def test_classify_pair():
    assert classify_pair(_make("Na", (0, 0, 0)), _make("Cl", (1, 0, 0))) == "ionic"
    assert classify_pair(_make("O", (0, 0, 0)), _make("H", (1, 0, 0))) == "polar covalent"
    assert classify_pair(_make("C", (0, 0, 0)), _make("H", (1, 0, 0))) == "nonpolar covalent"
