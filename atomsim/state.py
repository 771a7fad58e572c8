from __future__ import annotations
from typing import List, Optional, Dict
import logging

import numpy as np

from .atoms import Atom, as_vector
from .bonds import Bond
from .photons import Photon
from .constants import CHEMISTRY_INTERVAL, DEFAULT_TEMPERATURE

logger = logging.getLogger(__name__)


class SimulationState:
    """
    Everything one tick reads and produces.

    The chemistry cooldown lives here too, so a tick depends only on the
    state, the delta time and the random source.
    """

    def __init__(self,
                 atoms: Optional[List[Atom]] = None,
                 bonds: Optional[List[Bond]] = None,
                 photons: Optional[List[Photon]] = None,
                 temperature: float = DEFAULT_TEMPERATURE,
                 magnetic_field=None,
                 is_running: bool = True,
                 time_scale: float = 1.0,
                 chemistry_cooldown: float = CHEMISTRY_INTERVAL,
                 vortex=None,
                 time: float = 0.0,
                 frame: int = 0):
        self.atoms: List[Atom] = list(atoms) if atoms is not None else []
        self.bonds: List[Bond] = list(bonds) if bonds is not None else []
        self.photons: List[Photon] = list(photons) if photons is not None else []
        self.temperature: float = float(temperature)
        self.magnetic_field: np.ndarray = as_vector(magnetic_field if magnetic_field is not None else np.zeros(3))
        self.is_running: bool = bool(is_running)
        self.time_scale: float = float(time_scale)
        self.chemistry_cooldown: float = float(chemistry_cooldown)
        self.vortex: Optional[np.ndarray] = as_vector(vortex) if vortex is not None else None
        self.time: float = float(time)
        self.frame: int = int(frame)

    def copy(self, **overrides) -> "SimulationState":
        """
        Deep copy of atoms, bonds and photons; scalar fields may be overridden.
        """
        fields = dict(
            atoms=[a.copy() for a in self.atoms],
            bonds=[b.copy() for b in self.bonds],
            photons=[p.copy() for p in self.photons],
            temperature=self.temperature,
            magnetic_field=self.magnetic_field.copy(),
            is_running=self.is_running,
            time_scale=self.time_scale,
            chemistry_cooldown=self.chemistry_cooldown,
            vortex=self.vortex.copy() if self.vortex is not None else None,
            time=self.time,
            frame=self.frame,
        )
        fields.update(overrides)
        return SimulationState(**fields)

    def atom_by_id(self, uid: str) -> Optional[Atom]:
        for a in self.atoms:
            if a.uid == uid:
                return a
        return None

    def phases(self) -> Dict[str, str]:
        """uid -> phase label at the current temperature."""
        return {a.uid: a.phase(self.temperature) for a in self.atoms}

    def net_charge(self) -> float:
        return float(sum(a.charge for a in self.atoms))

    def summary(self) -> str:
        """Return a short textual summary of the state."""
        return (f"SimulationState frame={self.frame} t={self.time:.3f} atoms={len(self.atoms)} "
                f"bonds={len(self.bonds)} photons={len(self.photons)} T={self.temperature} "
                f"running={self.is_running}")

    def __repr__(self) -> str:
        return f"<{self.summary()}>"
