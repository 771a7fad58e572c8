from __future__ import annotations
from typing import List, Optional, Tuple
import logging

import numpy as np

from .atoms import Atom
from .bonds import Bond, rest_length_for
from .registry import Registry
from .constants import (
    BOND_FORM_RADIUS,
    BOND_STRENGTH_COVALENT,
    BOND_STRENGTH_IONIC,
    CHEMISTRY_INTERVAL,
    COVALENT_MELT_FACTOR,
    IONIC_EN_THRESHOLD,
    POLAR_EN_THRESHOLD,
)

logger = logging.getLogger(__name__)


def classify_pair(a: Atom, b: Atom) -> str:
    """Bond character from the electronegativity difference."""
    delta_en = abs(a.en - b.en)
    if delta_en > IONIC_EN_THRESHOLD:
        return "ionic"
    if delta_en > POLAR_EN_THRESHOLD:
        return "polar covalent"
    return "nonpolar covalent"


class ChemistryEngine:
    """
    Forms new bonds between nearby unbonded atoms on a fixed cooldown.

    Responsible for:
      - gating formation passes on CHEMISTRY_INTERVAL of simulated time
      - scanning unbonded pairs that have spare valence capacity
      - choosing ionic vs covalent from the electronegativity difference
        and the pair's mean melting point
      - assigning +1/-1 charges on ionic formation
    """

    def __init__(self,
                 interval: float = CHEMISTRY_INTERVAL,
                 form_radius: float = BOND_FORM_RADIUS,
                 ionic_threshold: float = IONIC_EN_THRESHOLD):
        self.interval = float(interval)
        self.form_radius = float(form_radius)
        self.ionic_threshold = float(ionic_threshold)

    def tick(self, cooldown: float, dt: float) -> Tuple[bool, float]:
        """
        Advance the cooldown timer by dt.

        Returns:
            (fires, new_cooldown): the timer is reset to `interval` when it fires.
        """
        cooldown -= dt
        if cooldown <= 0.0:
            return True, self.interval
        return False, cooldown

    def candidate_bond(self, a: Atom, b: Atom, registry: Registry, temperature: float) -> Optional[Bond]:
        """
        Decide whether a and b bond now. Returns the new Bond (not yet
        indexed) or None. Ionic formation mutates the pair's charges.
        """
        if a.max_bonds == 0 or b.max_bonds == 0:
            return None
        if registry.bond_count(a.uid) >= a.max_bonds or registry.bond_count(b.uid) >= b.max_bonds:
            return None
        if registry.is_bonded(a.uid, b.uid):
            return None

        radius_sum = a.radius + b.radius
        dist = float(np.linalg.norm(a.pos - b.pos))
        if dist >= radius_sum * self.form_radius:
            return None

        mean_mp = 0.5 * (a.melting_point + b.melting_point)
        delta_en = abs(a.en - b.en)
        if delta_en > self.ionic_threshold:
            if temperature >= mean_mp:
                return None
            donor, acceptor = (a, b) if a.en < b.en else (b, a)
            donor.charge = 1.0
            acceptor.charge = -1.0
            return Bond(a.uid, b.uid, order=1, strength=BOND_STRENGTH_IONIC,
                        rest_length=rest_length_for(radius_sum, 1), bond_type="ionic")
        if temperature < mean_mp * COVALENT_MELT_FACTOR:
            return Bond(a.uid, b.uid, order=1, strength=BOND_STRENGTH_COVALENT,
                        rest_length=rest_length_for(radius_sum, 1), bond_type="covalent")
        return None

    def form_bonds(self, registry: Registry, temperature: float) -> List[Bond]:
        """
        Scan all unordered pairs once and index every bond that forms.
        Counts include bonds formed earlier in the same pass, so valence
        capacity is never exceeded.
        """
        atoms = registry.atoms
        formed: List[Bond] = []
        for i in range(len(atoms)):
            a = atoms[i]
            for j in range(i + 1, len(atoms)):
                b = atoms[j]
                bond = self.candidate_bond(a, b, registry, temperature)
                if bond is None:
                    continue
                registry.add_bond(bond)
                formed.append(bond)
                logger.debug(f"Bond formed: {a.symbol}({a.uid})-{b.symbol}({b.uid}) {bond.bond_type}")
                if registry.bond_count(a.uid) >= a.max_bonds:
                    break
        return formed
