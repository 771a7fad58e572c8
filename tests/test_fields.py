import numpy as np
import pytest

from atomsim.atoms import Atom
from atomsim.fields import electric_field_at, field_grid, pair_interaction


def _charge(pos, q):
    return Atom("X", pos=pos, mass=1.0, radius=0.5, charge=q)


def test_point_charge_field():
    e = electric_field_at((2.0, 0.0, 0.0), [_charge((0.0, 0.0, 0.0), 1.0)])
    assert e == pytest.approx([87.5, 0.0, 0.0])


def test_field_skips_sources_too_close():
    assert not np.any(electric_field_at((0.1, 0.0, 0.0), [_charge((0.0, 0.0, 0.0), 1.0)]))


def test_field_grid_shape_and_zero_field():
    samples = field_grid([_charge((0.0, 0.0, 0.0), 0.0)], grid_size=4)
    assert len(samples) == 16
    for pos, direction, magnitude in samples:
        assert pos[2] == 0.0
        assert magnitude == 0.0
        assert not np.any(direction)


def test_field_grid_directions_are_unit_vectors():
    samples = field_grid([_charge((0.3, 0.3, 0.0), -1.0)], grid_size=5)
    for _, direction, magnitude in samples:
        if magnitude > 0.001:
            assert np.linalg.norm(direction) == pytest.approx(1.0)


def test_pair_interaction():
    info = pair_interaction(Atom.from_element("Na", pos=(0, 0, 0)), Atom.from_element("Cl", pos=(2, 0, 0)))
    assert info["distance"] == pytest.approx(2.0)
    assert info["coulomb"] == pytest.approx(87.5)
    assert info["character"] == "ionic"
    assert info["attractive"]


def test_default_grid_spans_the_container():
    samples = field_grid([])
    positions = np.array([s[0] for s in samples])
    assert len(samples) == 400
    assert positions[0] == pytest.approx([-25.0, -25.0, 0.0])
    assert positions[1] == pytest.approx([-25.0, -22.5, 0.0])
    assert positions[:, 0].max() == pytest.approx(22.5)
