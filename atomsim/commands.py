"""
External commands.

Every command is a pure function `state -> new state`; the input state is
never touched. Invalid arguments raise ValueError and leave nothing changed.
The Simulation driver queues these and applies them between ticks.
"""
from __future__ import annotations
from typing import Optional, Sequence
import logging

import numpy as np

from .atoms import Atom, as_vector
from .integrators import random_unit_vector
from .photons import Photon
from .state import SimulationState
from .templates import create_molecule
from .constants import (
    BLAST_IMPULSE,
    BLAST_RADIUS,
    CONTAINER_SIZE,
    EPSILON,
    LIGHTNING_HEAT,
    LIGHTNING_KICK,
    LIGHTNING_RADIUS,
    PHOTON_DEFAULT_ENERGY,
    PROXIMITY_LIMIT,
    SPAWN_MARGIN,
)

logger = logging.getLogger(__name__)

# fired photons without an explicit origin start on this plane, jittered in y/z
PHOTON_ORIGIN_X = -10.0
PHOTON_ORIGIN_SPREAD = 5.0


def _rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def resolve_spawn_point(state: SimulationState, position) -> np.ndarray:
    """
    Pull a requested drop point within PROXIMITY_LIMIT of the nearest atom,
    then clamp it inside the container with a small margin.
    """
    point = as_vector(position)
    if state.atoms:
        distances = [float(np.linalg.norm(point - a.pos)) for a in state.atoms]
        nearest = state.atoms[int(np.argmin(distances))]
        dist = min(distances)
        if dist > PROXIMITY_LIMIT:
            point = nearest.pos + (point - nearest.pos) / dist * PROXIMITY_LIMIT
    limit = CONTAINER_SIZE - SPAWN_MARGIN
    return np.clip(point, -limit, limit)


def spawn_atom(state: SimulationState, kind: str, position=(0.0, 0.0, 0.0),
               rng: Optional[np.random.Generator] = None) -> SimulationState:
    """Add one atom of `kind` at rest. Unknown kinds raise ValueError."""
    pos = resolve_spawn_point(state, position)
    atom = Atom.from_element(kind, pos=pos, rng=_rng(rng))
    new = state.copy()
    new.atoms.append(atom)
    logger.debug(f"Spawned {atom.symbol} ({atom.uid}) at {pos}")
    return new


def spawn_molecule(state: SimulationState, template_key: str, origin=(0.0, 0.0, 0.0),
                   rng: Optional[np.random.Generator] = None) -> SimulationState:
    """Instantiate a molecule preset. An unknown key leaves the state as it was."""
    atoms, bonds = create_molecule(template_key, resolve_spawn_point(state, origin), _rng(rng))
    new = state.copy()
    new.atoms.extend(atoms)
    new.bonds.extend(bonds)
    return new


def fire_photon(state: SimulationState, origin=None, direction=(1.0, 0.0, 0.0),
                energy: float = PHOTON_DEFAULT_ENERGY,
                rng: Optional[np.random.Generator] = None) -> SimulationState:
    """
    Add a photon travelling along `direction` (normalized).

    Without an origin the photon starts at x = -10 with a random y/z offset.
    """
    direction = as_vector(direction)
    norm = float(np.linalg.norm(direction))
    if norm < EPSILON:
        raise ValueError("Photon direction must be non-zero")
    if origin is None:
        jitter = (_rng(rng).random(2) - 0.5) * PHOTON_ORIGIN_SPREAD
        origin = (PHOTON_ORIGIN_X, jitter[0], jitter[1])
    photon = Photon(origin, direction / norm, energy=energy)
    new = state.copy()
    new.photons.append(photon)
    logger.debug(f"Fired {photon}")
    return new


def set_temperature(state: SimulationState, temperature: float) -> SimulationState:
    if temperature < 0:
        raise ValueError(f"Temperature must be >= 0, got {temperature}")
    return state.copy(temperature=float(temperature))


def set_magnetic_field(state: SimulationState, field: Sequence[float]) -> SimulationState:
    return state.copy(magnetic_field=as_vector(field))


def set_run_flag(state: SimulationState, running: bool) -> SimulationState:
    return state.copy(is_running=bool(running))


def set_time_scale(state: SimulationState, time_scale: float) -> SimulationState:
    if time_scale < 0:
        raise ValueError(f"Time scale must be >= 0, got {time_scale}")
    return state.copy(time_scale=float(time_scale))


def set_vortex(state: SimulationState, point=None) -> SimulationState:
    """Place (or with None, remove) the vortex attractor."""
    new = state.copy()
    new.vortex = as_vector(point) if point is not None else None
    return new


def ionize_atom(state: SimulationState, uid: str, delta: float = 1.0) -> SimulationState:
    """Shift one atom's charge by `delta`. Raises ValueError for an unknown uid."""
    new = state.copy()
    atom = new.atom_by_id(uid)
    if atom is None:
        raise ValueError(f"No atom with id {uid!r}")
    atom.charge += float(delta)
    return new


def lightning_strike(state: SimulationState, point,
                     rng: Optional[np.random.Generator] = None) -> SimulationState:
    """
    Atoms within LIGHTNING_RADIUS of `point` get a random kick, may gain a
    unit of charge and lose all their bonds; the system heats up slightly.
    """
    rng = _rng(rng)
    point = as_vector(point)
    new = state.copy(temperature=state.temperature + LIGHTNING_HEAT)
    struck = set()
    for atom in new.atoms:
        if np.linalg.norm(atom.pos - point) < LIGHTNING_RADIUS:
            struck.add(atom.uid)
            atom.vel += random_unit_vector(rng) * LIGHTNING_KICK
            if rng.random() > 0.5:
                atom.charge += 1.0
    new.bonds = [b for b in new.bonds if b.atom1 not in struck and b.atom2 not in struck]
    logger.debug(f"Lightning at {point}: {len(struck)} atoms hit, "
                 f"{len(state.bonds) - len(new.bonds)} bonds severed")
    return new


def blast(state: SimulationState, point) -> SimulationState:
    """Radial velocity impulse, strongest at the center and fading to zero at BLAST_RADIUS."""
    point = as_vector(point)
    new = state.copy()
    for atom in new.atoms:
        delta = atom.pos - point
        dist = float(np.linalg.norm(delta))
        if dist >= BLAST_RADIUS or dist < EPSILON:
            continue
        atom.vel += delta / dist * ((1.0 - dist / BLAST_RADIUS) * BLAST_IMPULSE)
    return new
