from __future__ import annotations
from typing import Dict, List, Optional, Set, Tuple, Iterable, TYPE_CHECKING
import logging

if TYPE_CHECKING:
    from .atoms import Atom
    from .bonds import Bond

logger = logging.getLogger(__name__)


PairKey = Tuple[str, str]


def pair_key(uid_a: str, uid_b: str) -> PairKey:
    """Unordered pair key: the same for (a, b) and (b, a)."""
    return (uid_a, uid_b) if uid_a <= uid_b else (uid_b, uid_a)


class Registry:
    """
    Id-indexed view over one tick's atoms and bonds.

    Parameters
    ----------
    atoms : list of Atom
        The tick-local atom list; slot i is atoms[i].
    bonds : iterable of Bond, optional
        Bonds to index. Bonds whose endpoints are missing, duplicates of an
        already indexed pair, self-bonds and bonds that would overfill an
        atom's valence capacity are not indexed; they are reported through
        `rejected` so callers can drop them.

    Maintains:
      - atom uid -> dense slot index
      - unordered atom pair -> bond
      - slot -> incident bonds (adjacency)
    """

    def __init__(self, atoms: List["Atom"], bonds: Optional[Iterable["Bond"]] = None):
        self.atoms: List["Atom"] = atoms
        self._slot: Dict[str, int] = {a.uid: i for i, a in enumerate(atoms)}
        self._pairs: Dict[PairKey, "Bond"] = {}
        self._incident: List[List["Bond"]] = [[] for _ in atoms]
        self._order: List["Bond"] = []
        self.rejected: List["Bond"] = []
        for b in bonds or ():
            if self._can_index(b):
                self._index(b)
            else:
                self.rejected.append(b)
        if self.rejected:
            logger.debug(f"Registry dropped {len(self.rejected)} stale, duplicate or overfilled bonds")

    # -----------------------
    # Atom lookup
    # -----------------------
    def __len__(self) -> int:
        return len(self.atoms)

    def has_atom(self, uid: str) -> bool:
        return uid in self._slot

    def slot(self, uid: str) -> int:
        """Dense index of the atom; KeyError if absent."""
        return self._slot[uid]

    def atom(self, uid: str) -> Optional["Atom"]:
        i = self._slot.get(uid)
        return self.atoms[i] if i is not None else None

    # -----------------------
    # Bond adjacency
    # -----------------------
    @property
    def bonds(self) -> List["Bond"]:
        """Indexed bonds, in insertion order."""
        return list(self._order)

    def is_bonded(self, uid_a: str, uid_b: str) -> bool:
        return pair_key(uid_a, uid_b) in self._pairs

    def bond_between(self, uid_a: str, uid_b: str) -> Optional["Bond"]:
        return self._pairs.get(pair_key(uid_a, uid_b))

    def bond_count(self, uid: str) -> int:
        return len(self._incident[self._slot[uid]])

    def incident(self, uid: str) -> List["Bond"]:
        return list(self._incident[self._slot[uid]])

    def is_saturated(self, uid: str) -> bool:
        atom = self.atom(uid)
        return atom is not None and self.bond_count(uid) >= atom.max_bonds

    def add_bond(self, bond: "Bond") -> None:
        """
        Index a new bond.

        Raises
        ------
        ValueError
            If an endpoint is missing, the pair is already bonded, or either
            atom is at its valence capacity.
        """
        if not (self.has_atom(bond.atom1) and self.has_atom(bond.atom2)):
            raise ValueError(f"Bond {bond.uid} references a missing atom")
        if self.is_bonded(bond.atom1, bond.atom2):
            raise ValueError(f"Atoms {bond.atom1} and {bond.atom2} are already bonded")
        if self.is_saturated(bond.atom1) or self.is_saturated(bond.atom2):
            raise ValueError(f"Bond {bond.uid} would exceed a valence capacity")
        self._index(bond)

    def remove_bond(self, bond: "Bond") -> bool:
        """Remove a bond if indexed. Returns True if it was present."""
        key = bond.pair
        if self._pairs.get(key) is not bond:
            return False
        del self._pairs[key]
        self._order.remove(bond)
        for uid in key:
            self._incident[self._slot[uid]].remove(bond)
        return True

    def _can_index(self, bond: "Bond") -> bool:
        return (
            bond.atom1 != bond.atom2
            and self.has_atom(bond.atom1)
            and self.has_atom(bond.atom2)
            and bond.pair not in self._pairs
            and not self.is_saturated(bond.atom1)
            and not self.is_saturated(bond.atom2)
        )

    def _index(self, bond: "Bond") -> None:
        self._pairs[bond.pair] = bond
        self._order.append(bond)
        self._incident[self._slot[bond.atom1]].append(bond)
        self._incident[self._slot[bond.atom2]].append(bond)

    def bonded_pairs(self) -> Set[PairKey]:
        return set(self._pairs.keys())
