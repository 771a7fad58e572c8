from __future__ import annotations
from typing import List, Optional, Dict, Tuple
import numpy as np
import logging

from .atoms import Atom, phase_regime
from .constants import (
    BOUNDARY_RESTITUTION,
    CONTAINER_SIZE,
    PHASE_REGIMES,
)

logger = logging.getLogger(__name__)


def random_unit_vector(rng: np.random.Generator) -> np.ndarray:
    """Direction of a uniform sample in the unit cube centered on the origin."""
    v = rng.random(3) - 0.5
    norm = np.linalg.norm(v)
    if norm == 0.0:
        return np.zeros(3)
    return v / norm


class Integrator:
    """
    Base class for numerical integrators.
    """

    def __init__(self, container_size: float = CONTAINER_SIZE,
                 restitution: float = BOUNDARY_RESTITUTION):
        self.container_size = float(container_size)
        self.restitution = float(restitution)

    def integrate(self, atoms: List[Atom], forces: np.ndarray, temperature: float,
                  dt: float, rng: np.random.Generator) -> None:
        """
        Update velocities and positions in place from the force accumulator.
        """
        raise NotImplementedError

    def reflect(self, atom: Atom) -> None:
        """Clamp to the container on each axis and reverse/dampen that velocity component."""
        limit = self.container_size
        for axis in range(3):
            if abs(atom.pos[axis]) > limit:
                atom.pos[axis] = np.sign(atom.pos[axis]) * limit
                atom.vel[axis] *= -self.restitution


class SemiImplicitEulerIntegrator(Integrator):
    """
    Damped semi-implicit Euler with phase-dependent thermal noise.

    Per atom:
      F += unit_noise * T * noise_scale
      v += F / m * dt ; v *= damping
      x += v * dt
    """

    def __init__(self, container_size: float = CONTAINER_SIZE,
                 restitution: float = BOUNDARY_RESTITUTION,
                 regimes: Optional[Dict[str, Tuple[float, float]]] = None):
        super().__init__(container_size, restitution)
        self.regimes = dict(regimes if regimes is not None else PHASE_REGIMES)

    def regime_for(self, atom: Atom, temperature: float) -> Tuple[float, float]:
        """(damping, noise_scale) for the atom's phase at this temperature."""
        return self.regimes[phase_regime(temperature, atom.melting_point, atom.boiling_point)]

    def integrate(self, atoms: List[Atom], forces: np.ndarray, temperature: float,
                  dt: float, rng: np.random.Generator) -> None:
        for atom, force in zip(atoms, forces):
            damping, noise_scale = self.regime_for(atom, temperature)
            total = force + random_unit_vector(rng) * (temperature * noise_scale)
            acc = total / atom.mass
            atom.vel += acc * dt
            atom.vel *= damping
            atom.pos += atom.vel * dt
            self.reflect(atom)


def create_integrator(integrator_type: str, container_size: float = CONTAINER_SIZE) -> Integrator:
    """
    Factory function to create an integrator instance.
    """
    if integrator_type.lower() in ("semi_implicit_euler", "euler"):
        return SemiImplicitEulerIntegrator(container_size)
    else:
        raise ValueError(f"Unknown integrator type: {integrator_type}")
