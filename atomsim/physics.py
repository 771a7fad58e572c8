from __future__ import annotations
from typing import List, Optional, Dict
import logging

import numpy as np

from .atoms import Atom
from .bonds import spring_energy
from .registry import Registry
from .constants import (
    COHESION_CUTOFF,
    COHESION_STRENGTH,
    EPSILON,
    K_COULOMB,
    LJ_EPSILON,
    LJ_SIGMA_SCALE,
    LORENTZ_SCALE,
    MIN_PAIR_DISTANCE,
    VORTEX_ATTRACTION,
    VORTEX_MIN_DISTANCE,
    VORTEX_SWIRL,
)

logger = logging.getLogger(__name__)


# -----------------------
# Force terms
# -----------------------
# Pair terms return the force on `a`; the force on `b` is the negation.

def lorentz_force(atom: Atom, field: np.ndarray, scale: float = LORENTZ_SCALE) -> np.ndarray:
    """F = q (v x B) * scale; zero for neutral atoms or a zero field."""
    if atom.charge == 0 or not np.any(field):
        return np.zeros(3)
    return np.cross(atom.vel, field) * (atom.charge * scale)


def lennard_jones_force(a: Atom, b: Atom,
                        epsilon: float = LJ_EPSILON,
                        sigma_scale: float = LJ_SIGMA_SCALE) -> np.ndarray:
    """
    12-6 Lennard-Jones force with sigma derived from the atomic radii:
    F = 24 eps / r * (2 (s/r)^12 - (s/r)^6) along unit(a - b)
    """
    delta = a.pos - b.pos
    r = float(np.linalg.norm(delta))
    if r < MIN_PAIR_DISTANCE:
        return np.zeros(3)
    sigma = (a.radius + b.radius) * sigma_scale
    sr6 = (sigma / r) ** 6
    mag = 24.0 * epsilon / r * (2.0 * sr6 * sr6 - sr6)
    return mag * (delta / r)


def coulomb_force(a: Atom, b: Atom, k: float = K_COULOMB) -> np.ndarray:
    """F = k q_a q_b / r^2 along unit(a - b); attractive for opposite charges."""
    if a.charge == 0 or b.charge == 0:
        return np.zeros(3)
    delta = a.pos - b.pos
    r = float(np.linalg.norm(delta))
    if r < MIN_PAIR_DISTANCE:
        return np.zeros(3)
    mag = k * a.charge * b.charge / (r * r)
    return mag * (delta / r)


def cohesion_force(a: Atom, b: Atom, temperature: float,
                   strength: float = COHESION_STRENGTH,
                   cutoff: float = COHESION_CUTOFF) -> np.ndarray:
    """
    Short-range condensed-phase attraction, active below the pair's mean
    boiling point and inside the cutoff.
    """
    mean_bp = 0.5 * (a.boiling_point + b.boiling_point)
    if temperature >= mean_bp:
        return np.zeros(3)
    delta = a.pos - b.pos
    r = float(np.linalg.norm(delta))
    if r < MIN_PAIR_DISTANCE or r >= cutoff:
        return np.zeros(3)
    return (-strength / (r * r)) * (delta / r)


def vortex_force(atom: Atom, center: np.ndarray) -> np.ndarray:
    """Inward pull plus a swirl in the xy-plane around `center`."""
    delta = center - atom.pos
    dist = float(np.linalg.norm(delta))
    if dist <= VORTEX_MIN_DISTANCE:
        return np.zeros(3)
    d = delta / dist
    tangent = np.array([-d[1], d[0], 0.0]) * VORTEX_SWIRL
    return d * VORTEX_ATTRACTION + tangent


# -----------------------
# ForceIntegrator
# -----------------------

class ForceIntegrator:
    """
    Computes the net non-bonded + external force on every atom.

    Typical usage:
        forces = ForceIntegrator().compute(registry, temperature, field)
        # forces[i] is the force on registry.atoms[i]
    """

    def __init__(self,
                 k_coulomb: float = K_COULOMB,
                 lj_epsilon: float = LJ_EPSILON,
                 lj_sigma_scale: float = LJ_SIGMA_SCALE,
                 lorentz_scale: float = LORENTZ_SCALE,
                 cohesion_strength: float = COHESION_STRENGTH,
                 cohesion_cutoff: float = COHESION_CUTOFF):
        self.k_coulomb = float(k_coulomb)
        self.lj_epsilon = float(lj_epsilon)
        self.lj_sigma_scale = float(lj_sigma_scale)
        self.lorentz_scale = float(lorentz_scale)
        self.cohesion_strength = float(cohesion_strength)
        self.cohesion_cutoff = float(cohesion_cutoff)

    def compute(self,
                registry: Registry,
                temperature: float,
                field: np.ndarray,
                vortex: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Returns a fresh (n, 3) force accumulator.

        Pairs closer than MIN_PAIR_DISTANCE are skipped entirely. Bonded
        pairs only feel Coulomb; their springs come from the bond engine.
        """
        atoms = registry.atoms
        n = len(atoms)
        forces = np.zeros((n, 3))

        field_on = bool(np.any(field))
        for i, a in enumerate(atoms):
            if field_on and a.charge != 0:
                forces[i] += lorentz_force(a, field, self.lorentz_scale)
            if vortex is not None:
                forces[i] += vortex_force(a, vortex)

        for i in range(n):
            a = atoms[i]
            for j in range(i + 1, n):
                b = atoms[j]
                f = self.pair_force(a, b, registry.is_bonded(a.uid, b.uid), temperature)
                forces[i] += f
                forces[j] -= f
        return forces

    def pair_force(self, a: Atom, b: Atom, bonded: bool, temperature: float) -> np.ndarray:
        """Sum of pair terms acting on `a`."""
        r = float(np.linalg.norm(a.pos - b.pos))
        if r < MIN_PAIR_DISTANCE:
            return np.zeros(3)
        f = coulomb_force(a, b, self.k_coulomb)
        if not bonded:
            f = f + lennard_jones_force(a, b, self.lj_epsilon, self.lj_sigma_scale)
            f = f + cohesion_force(a, b, temperature, self.cohesion_strength, self.cohesion_cutoff)
        return f


# -----------------------
# Energy diagnostics
# -----------------------

def kinetic_energy(atoms: List[Atom]) -> float:
    """Total kinetic energy of all atoms."""
    return float(sum(a.kinetic_energy() for a in atoms))


def potential_energy(registry: Registry, temperature: float) -> Dict[str, float]:
    """
    Approximate potential energy split into bonded springs, LJ and Coulomb.
    O(n^2); intended for diagnostics, not per-frame use on large systems.
    """
    atoms = registry.atoms
    pe_bond = 0.0
    for b in registry.bonds:
        a1 = registry.atom(b.atom1)
        a2 = registry.atom(b.atom2)
        pe_bond += spring_energy(b, float(np.linalg.norm(a2.pos - a1.pos)), temperature)

    pe_lj = 0.0
    pe_coul = 0.0
    for i, a in enumerate(atoms):
        for b in atoms[i + 1:]:
            r = float(np.linalg.norm(a.pos - b.pos))
            if r < MIN_PAIR_DISTANCE:
                continue
            if not registry.is_bonded(a.uid, b.uid):
                sigma = (a.radius + b.radius) * LJ_SIGMA_SCALE
                sr6 = (sigma / r) ** 6
                pe_lj += 4.0 * LJ_EPSILON * (sr6 * sr6 - sr6)
            if a.charge != 0 and b.charge != 0:
                pe_coul += K_COULOMB * a.charge * b.charge / (r + EPSILON)
    return {"bond": pe_bond, "lj": pe_lj, "coulomb": pe_coul, "total": pe_bond + pe_lj + pe_coul}
