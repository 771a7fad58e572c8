"""
Per-tick metrics for headless runs and plotting.
Records kinetic energy, bond/photon counts, temperature and net charge.
"""

from __future__ import annotations
from typing import Dict, Optional, Any
from collections import deque, Counter
import logging

import numpy as np

from .physics import kinetic_energy

logger = logging.getLogger(__name__)

PHASES = ("solid", "liquid", "gas", "plasma")


class TickMetrics:
    """
    Rolling history of observables, one sample per committed tick.
    """

    def __init__(self, max_history: int = 1000, smoothing_window: int = 5):
        """
        Args:
            max_history: Maximum number of samples kept per series
            smoothing_window: Window size for the smoothed kinetic energy series
        """
        self.max_history = max_history
        self.smoothing_window = smoothing_window

        self.time: deque[float] = deque(maxlen=max_history)
        self.kinetic: deque[float] = deque(maxlen=max_history)
        self.kinetic_smooth: deque[float] = deque(maxlen=max_history)
        self.bond_counts: deque[int] = deque(maxlen=max_history)
        self.photon_counts: deque[int] = deque(maxlen=max_history)
        self.temperature: deque[float] = deque(maxlen=max_history)
        self.net_charge: deque[float] = deque(maxlen=max_history)

        self.bonds_formed = 0
        self.bonds_broken = 0

    def update(self, state, formed: int = 0, broken: int = 0) -> None:
        """Append one sample taken from a committed SimulationState."""
        ke = kinetic_energy(state.atoms)
        self.time.append(state.time)
        self.kinetic.append(ke)
        self.kinetic_smooth.append(self._moving_average(self.kinetic_smooth, ke))
        self.bond_counts.append(len(state.bonds))
        self.photon_counts.append(len(state.photons))
        self.temperature.append(state.temperature)
        self.net_charge.append(state.net_charge())
        self.bonds_formed += formed
        self.bonds_broken += broken

    def _moving_average(self, history: deque, new_value: float) -> float:
        if self.smoothing_window <= 1:
            return new_value
        recent = list(history)[-(self.smoothing_window - 1):] + [new_value]
        return float(np.mean(recent))

    @staticmethod
    def phase_counts(state) -> Dict[str, int]:
        """Number of atoms in each phase at the state's temperature."""
        counts = Counter(a.phase(state.temperature) for a in state.atoms)
        return {p: counts.get(p, 0) for p in PHASES}

    def get_plot_data(self, max_points: Optional[int] = None) -> Dict[str, np.ndarray]:
        """Arrays keyed by series name, optionally truncated to the last `max_points`."""
        series = {
            "time": self.time,
            "kinetic": self.kinetic_smooth,
            "bonds": self.bond_counts,
            "photons": self.photon_counts,
            "temperature": self.temperature,
            "net_charge": self.net_charge,
        }
        out = {}
        for key, values in series.items():
            arr = np.array(list(values), dtype=float)
            if max_points and len(arr) > max_points:
                arr = arr[-max_points:]
            out[key] = arr
        return out

    def summary(self) -> Dict[str, Any]:
        if not self.time:
            return {"samples": 0, "bonds_formed": self.bonds_formed, "bonds_broken": self.bonds_broken}
        return {
            "samples": len(self.time),
            "time": self.time[-1],
            "kinetic": self.kinetic[-1],
            "mean_kinetic": float(np.mean(self.kinetic)),
            "bonds": self.bond_counts[-1],
            "photons": self.photon_counts[-1],
            "temperature": self.temperature[-1],
            "net_charge": self.net_charge[-1],
            "bonds_formed": self.bonds_formed,
            "bonds_broken": self.bonds_broken,
        }

    def reset(self) -> None:
        for series in (self.time, self.kinetic, self.kinetic_smooth, self.bond_counts,
                       self.photon_counts, self.temperature, self.net_charge):
            series.clear()
        self.bonds_formed = 0
        self.bonds_broken = 0
