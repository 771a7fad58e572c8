"""
Molecule presets used as spawn templates.

Each template lists atom kinds with offsets from the spawn origin and the
bonds between them (by atom index). Rest lengths derive from the atomic
radii and bond order so presets start near equilibrium.
"""
from __future__ import annotations
from typing import Dict, List, Optional, Tuple, Any
import logging

import numpy as np

from .atoms import Atom, as_vector
from .bonds import Bond, rest_length_for
from .constants import BOND_STRENGTH_COVALENT, BOND_STRENGTH_IONIC

logger = logging.getLogger(__name__)

INITIAL_VELOCITY_SPREAD = 0.2

MOLECULE_TEMPLATES: Dict[str, Dict[str, Any]] = {
    "water": {
        "name": "Water (H2O)",
        "atoms": [("O", (0.0, 0.0, 0.0)), ("H", (0.6, 0.4, 0.0)), ("H", (-0.6, 0.4, 0.0))],
        "bonds": [(0, 1, "covalent", 1), (0, 2, "covalent", 1)],
    },
    "co2": {
        "name": "Carbon Dioxide (CO2)",
        "atoms": [("C", (0.0, 0.0, 0.0)), ("O", (0.9, 0.0, 0.0)), ("O", (-0.9, 0.0, 0.0))],
        "bonds": [(0, 1, "covalent", 2), (0, 2, "covalent", 2)],
    },
    "methane": {
        "name": "Methane (CH4)",
        "atoms": [
            ("C", (0.0, 0.0, 0.0)),
            ("H", (0.6, 0.6, 0.6)),
            ("H", (-0.6, -0.6, 0.6)),
            ("H", (-0.6, 0.6, -0.6)),
            ("H", (0.6, -0.6, -0.6)),
        ],
        "bonds": [(0, 1, "covalent", 1), (0, 2, "covalent", 1), (0, 3, "covalent", 1), (0, 4, "covalent", 1)],
    },
    "ethene": {
        "name": "Ethene (C2H4)",
        "atoms": [
            ("C", (-0.4, 0.0, 0.0)),
            ("C", (0.4, 0.0, 0.0)),
            ("H", (-0.9, 0.7, 0.0)),
            ("H", (-0.9, -0.7, 0.0)),
            ("H", (0.9, 0.7, 0.0)),
            ("H", (0.9, -0.7, 0.0)),
        ],
        "bonds": [
            (0, 1, "covalent", 2),
            (0, 2, "covalent", 1),
            (0, 3, "covalent", 1),
            (1, 4, "covalent", 1),
            (1, 5, "covalent", 1),
        ],
    },
    "nitrogen_gas": {
        "name": "Nitrogen (N2)",
        "atoms": [("N", (-0.35, 0.0, 0.0)), ("N", (0.35, 0.0, 0.0))],
        "bonds": [(0, 1, "covalent", 3)],
    },
    "salt": {
        "name": "Salt (NaCl)",
        "atoms": [
            ("Na", (0.0, 0.0, 0.0)),
            ("Cl", (1.6, 0.0, 0.0)),
            ("Na", (0.0, 1.6, 0.0)),
            ("Cl", (1.6, 1.6, 0.0)),
            ("Na", (1.6, 0.0, 1.6)),
            ("Cl", (0.0, 0.0, 1.6)),
        ],
        "bonds": [
            (0, 1, "ionic", 1),
            (2, 3, "ionic", 1),
            (4, 5, "ionic", 1),
        ],
    },
}


def template_names() -> List[str]:
    return sorted(MOLECULE_TEMPLATES.keys())


def create_molecule(key: str, origin, rng: Optional[np.random.Generator] = None) -> Tuple[List[Atom], List[Bond]]:
    """
    Instantiate a template at `origin`.

    Returns ([], []) for an unknown key.
    """
    template = MOLECULE_TEMPLATES.get(key)
    if template is None:
        logger.debug(f"Unknown molecule template {key!r}; nothing spawned")
        return [], []

    rng = rng if rng is not None else np.random.default_rng()
    origin = as_vector(origin)

    atoms: List[Atom] = []
    for symbol, offset in template["atoms"]:
        vel = (rng.random(3) - 0.5) * INITIAL_VELOCITY_SPREAD
        atoms.append(Atom.from_element(symbol, pos=origin + np.asarray(offset, dtype=float), vel=vel, rng=rng))

    bonds: List[Bond] = []
    for idx_a, idx_b, bond_type, order in template["bonds"]:
        a1 = atoms[idx_a]
        a2 = atoms[idx_b]
        if bond_type == "ionic":
            donor, acceptor = (a1, a2) if a1.en < a2.en else (a2, a1)
            donor.charge = 1.0
            acceptor.charge = -1.0
        bonds.append(Bond(
            a1.uid,
            a2.uid,
            order=order,
            strength=BOND_STRENGTH_IONIC if bond_type == "ionic" else BOND_STRENGTH_COVALENT,
            rest_length=rest_length_for(a1.radius + a2.radius, order),
            bond_type=bond_type,
        ))

    logger.debug(f"Created {template['name']}: {len(atoms)} atoms, {len(bonds)} bonds")
    return atoms, bonds
