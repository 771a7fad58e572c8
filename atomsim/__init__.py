# atomsim/__init__.py
from .atoms import Atom
from .bonds import Bond, BondLifecycleEngine
from .chemistry import ChemistryEngine
from .physics import ForceIntegrator
from .photons import Photon, PhotonInteraction
from .registry import Registry
from .state import SimulationState
from .simulation import Simulation, step, clamp_dt
from .scenarios import build_scenario

__all__ = [
    "Atom", "Bond", "BondLifecycleEngine", "ChemistryEngine", "ForceIntegrator",
    "Photon", "PhotonInteraction", "Registry", "SimulationState",
    "Simulation", "step", "clamp_dt", "build_scenario",
]
