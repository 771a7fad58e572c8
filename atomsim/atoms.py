from __future__ import annotations
from typing import List, Optional
import uuid
import logging

import numpy as np

from .constants import PLASMA_TEMPERATURE
from .elements_data import get_element, canonical_symbol

logger = logging.getLogger(__name__)


def new_uid(prefix: str) -> str:
    """Short unique identifier, e.g. "Na_3f9c0a12"."""
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


def as_vector(value) -> np.ndarray:
    """Convert any 3-sequence to a float vector of shape (3,)."""
    arr = np.array(value, dtype=float).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"Expected a 3-vector, got shape {arr.shape}")
    return arr


# -----------------------
# Phase classification
# -----------------------

def classify_phase(temperature: float, melting_point: float, boiling_point: float) -> str:
    """
    Phase label for rendering / analytics: "solid", "liquid", "gas" or "plasma".
    """
    if temperature > PLASMA_TEMPERATURE:
        return "plasma"
    if temperature < melting_point:
        return "solid"
    if temperature > boiling_point:
        return "gas"
    return "liquid"


def phase_regime(temperature: float, melting_point: float, boiling_point: float) -> str:
    """Integration regime; same thresholds as classify_phase but without plasma."""
    if temperature < melting_point:
        return "solid"
    if temperature > boiling_point:
        return "gas"
    return "liquid"


# -----------------------
# Electrons (opaque to the physics core)
# -----------------------

class Electron:
    """Orbital descriptor consumed only by the rendering layer."""

    __slots__ = ("uid", "kind", "n", "orbital", "spin", "phase_offset", "axis")

    def __init__(self, uid: str, kind: str, n: int, orbital: str, spin: int,
                 phase_offset: float, axis: np.ndarray):
        self.uid = uid
        self.kind = kind
        self.n = n
        self.orbital = orbital
        self.spin = spin
        self.phase_offset = phase_offset
        self.axis = axis

    def __repr__(self) -> str:
        return f"<Electron {self.orbital} {self.kind} spin={self.spin:+d}>"


_P_AXES = {
    "x": np.array([1.0, 0.0, 0.0]),
    "y": np.array([0.0, 1.0, 0.0]),
    "z": np.array([0.0, 0.0, 1.0]),
}


def generate_electrons(symbol: str, rng: Optional[np.random.Generator] = None) -> List[Electron]:
    """
    Build one Electron per orbital entry of the element.

    n=1 electrons are core except for H and He. s-orbitals get a random axis,
    p-orbitals are pinned to their Cartesian axis.
    """
    rng = rng if rng is not None else np.random.default_rng()
    symbol = canonical_symbol(symbol)
    electrons: List[Electron] = []
    for i, orbital in enumerate(get_element(symbol).get("orbitals", [])):
        n = int(orbital[0])
        if "p" in orbital:
            axis = _P_AXES[orbital[-1]].copy()
        else:
            axis = rng.random(3) - 0.5
            norm = np.linalg.norm(axis)
            axis = axis / norm if norm > 0 else np.array([0.0, 1.0, 0.0])
        kind = "core" if n == 1 and symbol not in ("H", "He") else "valence"
        electrons.append(Electron(
            uid=new_uid("e"),
            kind=kind,
            n=n,
            orbital=orbital,
            spin=1 if i % 2 == 0 else -1,
            phase_offset=float(rng.random() * 2.0 * np.pi),
            axis=axis,
        ))
    return electrons


# -----------------------
# Atom
# -----------------------

class Atom:
    """
    Represents a single charged particle in the simulation.
    """

    def __init__(
        self,
        symbol: str,
        pos=None,
        vel=None,
        uid: Optional[str] = None,
        mass: float = 1.0,
        charge: float = 0.0,
        radius: float = 0.5,
        en: float = 0.0,
        max_bonds: int = 0,
        melting_point: float = 1.0,
        boiling_point: float = 2.0,
        valence_electrons: int = 0,
        atomic_number: int = 0,
        color: str = "#808080",
        electrons: Optional[List[Electron]] = None,
    ):
        """
        Initialize an Atom.

        Args:
            symbol (str): Element symbol, e.g. "H", "Na".
            pos: 3D position. Defaults to origin.
            vel: 3D velocity. Defaults to zero.
            uid (str, optional): Unique identifier. Auto-generated if None.
            mass (float): Must be > 0.
            charge (float): Net (integer-like) charge.
            radius (float): Atomic radius, must be > 0.
            en (float): Pauling electronegativity.
            max_bonds (int): Valence capacity, 0 for inert atoms.
            melting_point, boiling_point (float): Simulation-scale thresholds.
        """
        if mass <= 0:
            raise ValueError(f"Atom mass must be > 0, got {mass}")
        if radius <= 0:
            raise ValueError(f"Atom radius must be > 0, got {radius}")

        self.symbol: str = canonical_symbol(symbol)
        self.uid: str = uid or new_uid(self.symbol)
        self.pos: np.ndarray = as_vector(pos if pos is not None else np.zeros(3))
        self.vel: np.ndarray = as_vector(vel if vel is not None else np.zeros(3))
        self.mass: float = float(mass)
        self.charge: float = float(charge)
        self.radius: float = float(radius)
        self.en: float = float(en)
        self.max_bonds: int = int(max_bonds)
        self.melting_point: float = float(melting_point)
        self.boiling_point: float = float(boiling_point)
        self.valence_electrons: int = int(valence_electrons)
        self.atomic_number: int = int(atomic_number)
        self.color: str = color
        self.electrons: List[Electron] = electrons if electrons is not None else []

    @classmethod
    def from_element(cls, symbol: str, pos=None, vel=None, uid: Optional[str] = None,
                     rng: Optional[np.random.Generator] = None) -> "Atom":
        """Create an atom with catalog properties for `symbol`."""
        props = get_element(symbol)
        atom = cls(
            symbol,
            pos=pos,
            vel=vel,
            uid=uid,
            mass=props["mass"],
            charge=props.get("charge", 0),
            radius=props["radius"],
            en=props.get("electronegativity", 0.0),
            max_bonds=props.get("max_bonds", 0),
            melting_point=props.get("melting_point", 1.0),
            boiling_point=props.get("boiling_point", 2.0),
            valence_electrons=props.get("valence_electrons", 0),
            atomic_number=props.get("atomic_number", 0),
            color=props.get("color", "#808080"),
            electrons=generate_electrons(symbol, rng),
        )
        logger.debug(f"Created Atom {atom.uid}: {atom.symbol} at {atom.pos}, charge={atom.charge}")
        return atom

    def copy(self) -> "Atom":
        """Independent copy; electrons are shared since the core never mutates them."""
        clone = Atom.__new__(Atom)
        clone.__dict__.update(self.__dict__)
        clone.pos = self.pos.copy()
        clone.vel = self.vel.copy()
        return clone

    def phase(self, temperature: float) -> str:
        return classify_phase(temperature, self.melting_point, self.boiling_point)

    def kinetic_energy(self) -> float:
        """
        Returns:
            float: 0.5 * mass * |velocity|^2
        """
        return 0.5 * self.mass * float(np.dot(self.vel, self.vel))

    def __repr__(self) -> str:
        return (
            f"<Atom {self.uid} symbol={self.symbol} pos={self.pos} "
            f"vel={self.vel} charge={self.charge:+.0f}>"
        )
