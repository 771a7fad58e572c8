from pathlib import Path
import json
import logging
from typing import Dict, Any, List, Tuple, Union

logger = logging.getLogger(__name__)


def _orbitals(n: int, sub: str, count: int) -> List[str]:
    """Orbital labels for `count` electrons in shell n, subshell s or p."""
    if sub == "s":
        return [f"{n}s"] * count
    axes = ("x", "y", "z")
    return [f"{n}p{axes[i % 3]}" for i in range(count)]


_K = _orbitals(1, "s", 2)
_L = _orbitals(2, "s", 2) + _orbitals(2, "p", 6)

# Temperatures are on the simulation scale (roughly 0-50), not Kelvin.
ELEMENT_DATA: Dict[str, Dict[str, Any]] = {
    "H": {
        "mass": 1.0, "charge": 1, "radius": 0.5, "color": "#FFFFFF", "atomic_number": 1,
        "valence_electrons": 1, "electronegativity": 2.20, "max_bonds": 1,
        "melting_point": 0.5, "boiling_point": 1.0,
        "orbitals": _orbitals(1, "s", 1),
    },
    "He": {
        "mass": 4.0, "charge": 0, "radius": 0.4, "color": "#FFC0CB", "atomic_number": 2,
        "valence_electrons": 2, "electronegativity": 0.0, "max_bonds": 0,
        "melting_point": 0.1, "boiling_point": 0.2,
        "orbitals": _orbitals(1, "s", 2),
    },
    "Li": {
        "mass": 7.0, "charge": 1, "radius": 1.2, "color": "#CC80FF", "atomic_number": 3,
        "valence_electrons": 1, "electronegativity": 0.98, "max_bonds": 1,
        "melting_point": 4.5, "boiling_point": 8.0,
        "orbitals": _K + _orbitals(2, "s", 1),
    },
    "Be": {
        "mass": 9.0, "charge": 2, "radius": 1.0, "color": "#C2FF00", "atomic_number": 4,
        "valence_electrons": 2, "electronegativity": 1.57, "max_bonds": 2,
        "melting_point": 6.0, "boiling_point": 9.0,
        "orbitals": _K + _orbitals(2, "s", 2),
    },
    "C": {
        "mass": 12.0, "charge": 0, "radius": 0.9, "color": "#909090", "atomic_number": 6,
        "valence_electrons": 4, "electronegativity": 2.55, "max_bonds": 4,
        "melting_point": 35.0, "boiling_point": 48.0,
        "orbitals": _K + _orbitals(2, "s", 2) + _orbitals(2, "p", 2),
    },
    "N": {
        "mass": 14.0, "charge": -3, "radius": 0.85, "color": "#3050F8", "atomic_number": 7,
        "valence_electrons": 5, "electronegativity": 3.04, "max_bonds": 4,
        "melting_point": 0.6, "boiling_point": 0.7,
        "orbitals": _K + _orbitals(2, "s", 2) + _orbitals(2, "p", 3),
    },
    "O": {
        "mass": 16.0, "charge": -2, "radius": 0.8, "color": "#FF4136", "atomic_number": 8,
        "valence_electrons": 6, "electronegativity": 3.44, "max_bonds": 2,
        "melting_point": 0.5, "boiling_point": 0.9,
        "orbitals": _K + _orbitals(2, "s", 2) + _orbitals(2, "p", 4),
    },
    "F": {
        "mass": 19.0, "charge": -1, "radius": 0.7, "color": "#90E050", "atomic_number": 9,
        "valence_electrons": 7, "electronegativity": 3.98, "max_bonds": 1,
        "melting_point": 0.5, "boiling_point": 0.8,
        "orbitals": _K + _orbitals(2, "s", 2) + _orbitals(2, "p", 5),
    },
    "Ne": {
        "mass": 20.0, "charge": 0, "radius": 0.6, "color": "#B3E3F5", "atomic_number": 10,
        "valence_electrons": 8, "electronegativity": 0.0, "max_bonds": 0,
        "melting_point": 0.2, "boiling_point": 0.3,
        "orbitals": _K + _L,
    },
    "Na": {
        "mass": 23.0, "charge": 1, "radius": 1.1, "color": "#AB78FF", "atomic_number": 11,
        "valence_electrons": 1, "electronegativity": 0.93, "max_bonds": 1,
        "melting_point": 3.7, "boiling_point": 8.8,
        "orbitals": _K + _L + _orbitals(3, "s", 1),
    },
    "P": {
        "mass": 31.0, "charge": -3, "radius": 1.1, "color": "#FF8000", "atomic_number": 15,
        "valence_electrons": 5, "electronegativity": 2.19, "max_bonds": 5,
        "melting_point": 3.1, "boiling_point": 5.5,
        "orbitals": _K + _L + _orbitals(3, "s", 2) + _orbitals(3, "p", 3),
    },
    "S": {
        "mass": 32.0, "charge": -2, "radius": 1.05, "color": "#FFFF30", "atomic_number": 16,
        "valence_electrons": 6, "electronegativity": 2.58, "max_bonds": 6,
        "melting_point": 3.8, "boiling_point": 7.0,
        "orbitals": _K + _L + _orbitals(3, "s", 2) + _orbitals(3, "p", 4),
    },
    "Cl": {
        "mass": 35.5, "charge": -1, "radius": 1.0, "color": "#1FF01F", "atomic_number": 17,
        "valence_electrons": 7, "electronegativity": 3.16, "max_bonds": 1,
        "melting_point": 1.7, "boiling_point": 2.4,
        "orbitals": _K + _L + _orbitals(3, "s", 2) + _orbitals(3, "p", 5),
    },
}

_REQUIRED_FIELDS: Tuple[str, ...] = ("mass", "radius")


def canonical_symbol(symbol: str) -> str:
    """Normalize an element symbol to catalog spelling ("cl" -> "Cl")."""
    return symbol.strip().capitalize()


def get_element(symbol: str) -> Dict[str, Any]:
    """
    Return element properties by symbol (case-insensitive).

    Raises
    ------
    ValueError
        If the symbol is not in the catalog.
    """
    key = canonical_symbol(symbol)
    try:
        return ELEMENT_DATA[key]
    except KeyError:
        raise ValueError(f"Unknown element kind: {symbol!r}") from None


def known_elements() -> List[str]:
    return sorted(ELEMENT_DATA.keys())


def load_elements(path: Union[Path, str]) -> Dict[str, Dict[str, Any]]:
    """
    Merge element definitions from a JSON file into ELEMENT_DATA.

    Supports either {"elements": [{"symbol": ..., ...}, ...]} or a mapping
    keyed by symbol. Entries overriding an existing element only replace the
    fields they define; new elements must define at least mass and radius.

    Returns
    -------
    Dict[str, Dict[str, Any]]
        The updated catalog.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as fh:
            raw = json.load(fh)
    except (OSError, json.JSONDecodeError):
        logger.exception(f"Failed to load element definitions from {path}")
        return ELEMENT_DATA

    entries: Dict[str, Dict[str, Any]] = {}
    if isinstance(raw, dict) and "elements" in raw:
        for el in raw["elements"]:
            if isinstance(el, dict) and "symbol" in el:
                entries[canonical_symbol(el["symbol"])] = {k: v for k, v in el.items() if k != "symbol"}
    elif isinstance(raw, dict):
        for k, v in raw.items():
            if isinstance(v, dict):
                entries[canonical_symbol(str(k))] = dict(v)

    loaded = 0
    for symbol, props in entries.items():
        if symbol in ELEMENT_DATA:
            ELEMENT_DATA[symbol].update(props)
            loaded += 1
            continue
        if any(field not in props for field in _REQUIRED_FIELDS):
            logger.warning(f"Skipping element {symbol}: missing one of {_REQUIRED_FIELDS}")
            continue
        defaults = {
            "charge": 0, "color": "#808080", "atomic_number": 0, "valence_electrons": 0,
            "electronegativity": 0.0, "max_bonds": 0, "melting_point": 1.0,
            "boiling_point": 2.0, "orbitals": [],
        }
        defaults.update(props)
        ELEMENT_DATA[symbol] = defaults
        loaded += 1

    logger.info(f"Loaded {loaded} element definitions from {path}")
    return ELEMENT_DATA
