from __future__ import annotations
from typing import List, Optional, Tuple
import logging

import numpy as np

from .atoms import new_uid, as_vector
from .registry import Registry
from .constants import (
    EPSILON,
    PHOTON_DEFAULT_ENERGY,
    PHOTON_HIT_RADIUS,
    PHOTON_IMPULSE_SCALE,
    PHOTON_MAX_RADIUS,
    PHOTON_SPEED,
)

logger = logging.getLogger(__name__)


class Photon:
    """A moving energy packet that destroys the first bond it passes near."""

    def __init__(self, pos, vel, energy: float = PHOTON_DEFAULT_ENERGY, uid: Optional[str] = None):
        self.uid: str = uid or new_uid("photon")
        self.pos: np.ndarray = as_vector(pos)
        self.vel: np.ndarray = as_vector(vel)
        self.energy: float = float(energy)

    def copy(self) -> "Photon":
        return Photon(self.pos.copy(), self.vel.copy(), self.energy, uid=self.uid)

    def __repr__(self) -> str:
        return f"<Photon {self.uid} pos={self.pos} energy={self.energy}>"


class PhotonInteraction:
    """
    Advances photons and resolves photon-bond collisions.

    A photon within `hit_radius` of a bond midpoint removes that bond, pushes
    the two former endpoints apart along the bond axis, and is consumed.
    Photons farther than `max_radius` from the origin are pruned.
    """

    def __init__(self,
                 speed: float = PHOTON_SPEED,
                 hit_radius: float = PHOTON_HIT_RADIUS,
                 impulse_scale: float = PHOTON_IMPULSE_SCALE,
                 max_radius: float = PHOTON_MAX_RADIUS):
        self.speed = float(speed)
        self.hit_radius = float(hit_radius)
        self.impulse_scale = float(impulse_scale)
        self.max_radius = float(max_radius)

    def resolve(self,
                photons: List[Photon],
                registry: Registry,
                forces: np.ndarray,
                dt: float) -> Tuple[List[Photon], int]:
        """
        Mutates photon positions, removes struck bonds from the registry and
        adds split impulses to `forces`.

        Returns:
            (surviving photons, number of bonds struck)
        """
        surviving: List[Photon] = []
        struck = 0
        for p in photons:
            p.pos += p.vel * (dt * self.speed)
            if self._strike(p, registry, forces):
                struck += 1
                continue
            if np.linalg.norm(p.pos) < self.max_radius:
                surviving.append(p)
            else:
                logger.debug(f"Photon {p.uid} left the field at {p.pos}")
        return surviving, struck

    def _strike(self, photon: Photon, registry: Registry, forces: np.ndarray) -> bool:
        for bond in registry.bonds:
            i = registry.slot(bond.atom1)
            j = registry.slot(bond.atom2)
            a1 = registry.atoms[i]
            a2 = registry.atoms[j]
            center = 0.5 * (a1.pos + a2.pos)
            if np.linalg.norm(photon.pos - center) >= self.hit_radius:
                continue
            registry.remove_bond(bond)
            axis = a1.pos - a2.pos
            norm = float(np.linalg.norm(axis))
            if norm > EPSILON:
                impulse = axis / norm * (photon.energy * self.impulse_scale)
                forces[i] += impulse
                forces[j] -= impulse
            logger.debug(f"Photon {photon.uid} split bond {bond.atom1}-{bond.atom2}")
            return True
        return False
