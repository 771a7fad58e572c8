"""
Named initial conditions for headless runs.
"""
from __future__ import annotations
from typing import Callable, Dict, List, Optional
import logging

import numpy as np

from .atoms import Atom
from .state import SimulationState
from .templates import create_molecule
from .constants import DEFAULT_TEMPERATURE

logger = logging.getLogger(__name__)

DIPOLE_SEPARATION = 6.0


def _water(rng: np.random.Generator) -> SimulationState:
    atoms, bonds = [], []
    for origin in ((-4.0, 0.0, 0.0), (0.0, 3.0, 0.0), (4.0, 0.0, 0.0)):
        a, b = create_molecule("water", origin, rng)
        atoms.extend(a)
        bonds.extend(b)
    return SimulationState(atoms, bonds)


def _salt(rng: np.random.Generator) -> SimulationState:
    atoms, bonds = create_molecule("salt", (-0.8, -0.8, -0.8), rng)
    return SimulationState(atoms, bonds)


def _dipole(rng: np.random.Generator) -> SimulationState:
    half = DIPOLE_SEPARATION / 2.0
    na = Atom.from_element("Na", pos=(-half, 0.0, 0.0), rng=rng)
    cl = Atom.from_element("Cl", pos=(half, 0.0, 0.0), rng=rng)
    na.charge, cl.charge = 1.0, -1.0
    return SimulationState([na, cl])


def _empty(rng: np.random.Generator) -> SimulationState:
    return SimulationState()


SCENARIOS: Dict[str, Callable[[np.random.Generator], SimulationState]] = {
    "water": _water,
    "salt": _salt,
    "dipole": _dipole,
    "empty": _empty,
}


def scenario_names() -> List[str]:
    return sorted(SCENARIOS.keys())


def build_scenario(name: str, rng: Optional[np.random.Generator] = None,
                   temperature: float = DEFAULT_TEMPERATURE) -> SimulationState:
    """
    Build a named starting state.

    Raises
    ------
    ValueError
        If `name` is not a known scenario.
    """
    try:
        builder = SCENARIOS[name]
    except KeyError:
        raise ValueError(f"Unknown scenario {name!r}; choose from {scenario_names()}") from None
    state = builder(rng if rng is not None else np.random.default_rng())
    state.temperature = float(temperature)
    logger.info(f"Scenario {name!r} loaded: atoms={len(state.atoms)} bonds={len(state.bonds)}")
    return state
