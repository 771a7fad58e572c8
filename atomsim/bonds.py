from __future__ import annotations
from typing import Optional, Tuple, List
import logging

import numpy as np

from .constants import (
    BOND_BREAK_RATIO,
    BOND_REST_LENGTH_MULTIPLIERS,
    BOND_TYPES,
    DISSOCIATION_COEFF,
    DISSOCIATION_THRESHOLD,
    EPSILON,
    STIFFNESS_ORDER_EXPONENT,
    THERMAL_ENERGY_SCALE,
    THERMAL_EXPANSION_COEFF,
)
from .atoms import new_uid
from .registry import Registry, pair_key

logger = logging.getLogger(__name__)


# -----------------------
# Bond object
# -----------------------

class Bond:
    """
    A spring connection between two atoms, referenced by atom uid.
    """

    def __init__(self,
                 atom1: str,
                 atom2: str,
                 order: int = 1,
                 strength: float = 1200.0,
                 rest_length: float = 1.0,
                 bond_type: str = "covalent",
                 uid: Optional[str] = None):
        """
        Initialize a bond.

        Args:
            atom1 (str): uid of the first atom.
            atom2 (str): uid of the second atom.
            order (int): Bond order (1=single, 2=double, 3=triple).
            strength (float): Strength coefficient.
            rest_length (float): Static rest length.
            bond_type (str): "covalent", "ionic" or "metallic".
        """
        if atom1 == atom2:
            raise ValueError("Cannot bond an atom to itself")
        if order not in (1, 2, 3):
            raise ValueError(f"Bond order must be 1, 2 or 3, got {order}")
        if bond_type not in BOND_TYPES:
            raise ValueError(f"Unknown bond type: {bond_type!r}")

        self.uid: str = uid or new_uid("bond")
        self.atom1: str = atom1
        self.atom2: str = atom2
        self.order: int = int(order)
        self.strength: float = float(strength)
        self.rest_length: float = float(rest_length)
        self.bond_type: str = bond_type

    @property
    def pair(self) -> Tuple[str, str]:
        return pair_key(self.atom1, self.atom2)

    def bond_energy(self) -> float:
        return self.strength * self.order

    def stiffness(self) -> float:
        """Non-linear in order: a double bond is more than twice as rigid as a single."""
        return self.strength * self.order ** STIFFNESS_ORDER_EXPONENT

    def copy(self) -> "Bond":
        return Bond(self.atom1, self.atom2, self.order, self.strength,
                    self.rest_length, self.bond_type, uid=self.uid)

    def __repr__(self):
        return f"<Bond {self.atom1}-{self.atom2} {self.bond_type} order={self.order} rest_len={self.rest_length:.3f}>"


# -----------------------
# Utility functions
# -----------------------

def rest_length_for(radius_sum: float, order: int = 1) -> float:
    """Rest length from the sum of atomic radii; shorter for multiple bonds."""
    return radius_sum * BOND_REST_LENGTH_MULTIPLIERS[order]


def effective_rest_length(bond: Bond, temperature: float) -> float:
    """Rest length after thermal expansion."""
    return bond.rest_length * (1.0 + temperature * THERMAL_EXPANSION_COEFF)


def thermal_energy(temperature: float) -> float:
    return temperature * THERMAL_ENERGY_SCALE


def dissociation_probability(bond: Bond, temperature: float) -> float:
    """
    Per-tick breakage probability; zero until thermal energy exceeds
    DISSOCIATION_THRESHOLD of the bond energy, then linear in the excess.
    """
    excess = thermal_energy(temperature) - bond.bond_energy() * DISSOCIATION_THRESHOLD
    if excess <= 0.0:
        return 0.0
    return excess * DISSOCIATION_COEFF


def spring_force(bond: Bond, pos1: np.ndarray, pos2: np.ndarray, temperature: float) -> np.ndarray:
    """
    Hookean force on atom1 (atom2 receives the negation):
    F = stiffness * (r - r_eff) * unit(pos2 - pos1)
    """
    delta = pos2 - pos1
    dist = float(np.linalg.norm(delta))
    if dist < EPSILON:
        return np.zeros(3)
    displacement = dist - effective_rest_length(bond, temperature)
    return (bond.stiffness() * displacement / dist) * delta


# -----------------------
# Bond lifecycle
# -----------------------

class BondLifecycleEngine:
    """
    Evaluates existing bonds each tick.

    Stale references never reach it; the Registry drops them when built.
    Over-stretched bonds snap, hot bonds may dissociate, and surviving bonds
    contribute spring forces to the shared force accumulator.
    """

    def __init__(self, break_ratio: float = BOND_BREAK_RATIO):
        self.break_ratio = float(break_ratio)

    def should_snap(self, bond: Bond, distance: float, temperature: float) -> bool:
        return distance > effective_rest_length(bond, temperature) * self.break_ratio

    def evaluate(self,
                 registry: Registry,
                 forces: np.ndarray,
                 temperature: float,
                 rng: np.random.Generator) -> Tuple[List[Bond], int]:
        """
        Filter registry bonds in place and accumulate spring forces.

        Args:
            registry: Tick registry; broken bonds are removed from it.
            forces: (n, 3) accumulator indexed by registry slot.
            temperature: Global temperature.
            rng: Random source for thermal dissociation rolls.

        Returns:
            (surviving bonds, number of bonds broken this tick)
        """
        broken = 0
        for bond in registry.bonds:
            i = registry.slot(bond.atom1)
            j = registry.slot(bond.atom2)
            a1 = registry.atoms[i]
            a2 = registry.atoms[j]
            dist = float(np.linalg.norm(a2.pos - a1.pos))

            if self.should_snap(bond, dist, temperature):
                registry.remove_bond(bond)
                broken += 1
                logger.debug(f"Bond snapped: {bond.atom1}-{bond.atom2} at r={dist:.3f}")
                continue

            prob = dissociation_probability(bond, temperature)
            if prob > 0.0 and rng.random() < prob:
                registry.remove_bond(bond)
                broken += 1
                logger.debug(f"Bond dissociated: {bond.atom1}-{bond.atom2} p={prob:.4f}")
                continue

            f = spring_force(bond, a1.pos, a2.pos, temperature)
            forces[i] += f
            forces[j] -= f

        return registry.bonds, broken


def spring_energy(bond: Bond, distance: float, temperature: float) -> float:
    """Harmonic energy 0.5 * k * (r - r_eff)^2."""
    return 0.5 * bond.stiffness() * (distance - effective_rest_length(bond, temperature)) ** 2
