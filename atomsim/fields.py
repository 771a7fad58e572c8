from __future__ import annotations
from typing import Dict, List, Tuple, Any
import logging

import numpy as np

from .atoms import Atom, as_vector
from .chemistry import classify_pair
from .physics import coulomb_force
from .constants import (
    CONTAINER_SIZE,
    FIELD_GRID_SIZE,
    FIELD_MIN_MAGNITUDE,
    FIELD_MIN_R2,
    K_COULOMB,
)

logger = logging.getLogger(__name__)

FieldSample = Tuple[np.ndarray, np.ndarray, float]


def electric_field_at(point, atoms: List[Atom], k: float = K_COULOMB) -> np.ndarray:
    """
    E = sum k q r_hat / r^2 over charged atoms, r pointing from the atom to
    `point`. Atoms with r^2 below FIELD_MIN_R2 are ignored.
    """
    point = as_vector(point)
    field = np.zeros(3)
    for atom in atoms:
        if atom.charge == 0:
            continue
        r = point - atom.pos
        r2 = float(np.dot(r, r))
        if r2 < FIELD_MIN_R2:
            continue
        field += (k * atom.charge / r2) * (r / np.sqrt(r2))
    return field


def field_grid(atoms: List[Atom], grid_size: int = FIELD_GRID_SIZE, z: float = 0.0,
               extent: float = CONTAINER_SIZE) -> List[FieldSample]:
    """
    Sample the electric field on a grid_size x grid_size lattice spanning
    [-extent, extent) in x and y at height z.

    Each sample is (position, unit direction, magnitude). Samples weaker than
    FIELD_MIN_MAGNITUDE get a zero direction.
    """
    step = (2.0 * extent) / grid_size
    samples: List[FieldSample] = []
    for ix in range(grid_size):
        for iy in range(grid_size):
            pos = np.array([-extent + ix * step, -extent + iy * step, z], dtype=float)
            e = electric_field_at(pos, atoms)
            mag = float(np.linalg.norm(e))
            direction = e / mag if mag > FIELD_MIN_MAGNITUDE else np.zeros(3)
            samples.append((pos, direction, mag))
    return samples


def pair_interaction(a: Atom, b: Atom) -> Dict[str, Any]:
    """Read-out for a selected pair of atoms."""
    distance = float(np.linalg.norm(a.pos - b.pos))
    return {
        "distance": distance,
        "coulomb": float(np.linalg.norm(coulomb_force(a, b))),
        "delta_en": abs(a.en - b.en),
        "character": classify_pair(a, b),
        "attractive": a.charge * b.charge < 0,
    }
