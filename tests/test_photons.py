import numpy as np
import pytest

from atomsim.atoms import Atom
from atomsim.bonds import Bond
from atomsim.photons import Photon, PhotonInteraction
from atomsim.registry import Registry


def _bonded_pair():
    a = Atom("H", pos=(-0.5, 0.0, 0.0), mass=1.0, radius=0.5, max_bonds=1)
    b = Atom("H", pos=(0.5, 0.0, 0.0), mass=1.0, radius=0.5, max_bonds=1)
    return Registry([a, b], [Bond(a.uid, b.uid, rest_length=0.75)])


def test_photon_breaks_bond_and_is_consumed():
    registry = _bonded_pair()
    forces = np.zeros((2, 3))
    photon = Photon((-0.1, 0.0, 0.0), (1.0, 0.0, 0.0), energy=5.0)

    surviving, struck = PhotonInteraction().resolve([photon], registry, forces, dt=0.01)

    assert struck == 1
    assert surviving == []
    assert registry.bonds == []
    # impulse 5 * 500 along (a1 - a2), opposite on a2
    assert forces[0] == pytest.approx([-2500.0, 0.0, 0.0])
    assert forces[1] == pytest.approx([2500.0, 0.0, 0.0])


def test_photon_breaks_at_most_one_bond():
    atoms = [Atom("H", pos=(x, 0.0, 0.0), mass=1.0, radius=0.5, max_bonds=2) for x in (-0.6, 0.0, 0.6)]
    bonds = [Bond(atoms[0].uid, atoms[1].uid), Bond(atoms[1].uid, atoms[2].uid)]
    registry = Registry(atoms, bonds)
    photon = Photon((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
    _, struck = PhotonInteraction().resolve([photon], registry, np.zeros((3, 3)), dt=0.0)
    assert struck == 1
    assert len(registry.bonds) == 1


def test_photon_advances_and_survives_when_nothing_is_hit():
    photon = Photon((0.0, 10.0, 0.0), (1.0, 0.0, 0.0))
    surviving, struck = PhotonInteraction().resolve([photon], _bonded_pair(), np.zeros((2, 3)), dt=0.1)
    assert struck == 0
    assert surviving == [photon]
    assert photon.pos == pytest.approx([1.5, 10.0, 0.0])


def test_photon_leaving_the_field_is_pruned():
    photon = Photon((59.9, 0.0, 0.0), (1.0, 0.0, 0.0))
    surviving, struck = PhotonInteraction().resolve([photon], Registry([]), np.zeros((0, 3)), dt=0.01)
    assert surviving == []
    assert struck == 0
