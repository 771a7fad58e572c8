"""
Publication-grade plotting functions for simulation analysis.
Provides headless plotting with consistent styling and export to SVG/PNG formats.
"""

import matplotlib.pyplot as plt
import numpy as np
from typing import List, Dict, Union, Optional

ArrayLike = Union[List[float], np.ndarray]

# Set publication-grade defaults
plt.rcParams['font.family'] = 'serif'
plt.rcParams['font.size'] = 12
plt.rcParams['axes.labelsize'] = 14
plt.rcParams['axes.titlesize'] = 16
plt.rcParams['xtick.labelsize'] = 12
plt.rcParams['ytick.labelsize'] = 12
plt.rcParams['legend.fontsize'] = 12
plt.rcParams['figure.figsize'] = (8, 6)
plt.rcParams['figure.dpi'] = 100
plt.rcParams['savefig.dpi'] = 300
plt.rcParams['savefig.bbox'] = 'tight'
plt.rcParams['savefig.transparent'] = False
plt.rcParams['axes.facecolor'] = 'white'
plt.rcParams['figure.facecolor'] = 'white'


def _save(filename_prefix: str) -> List[str]:
    paths = [f'{filename_prefix}.svg', f'{filename_prefix}.png']
    plt.savefig(paths[0], format='svg')
    plt.savefig(paths[1], format='png')
    plt.close()
    return paths


def plot_kinetic_energy(time: ArrayLike,
                        energy: ArrayLike,
                        filename_prefix: str = 'kinetic_plot',
                        title: Optional[str] = None) -> List[str]:
    """
    Kinetic energy vs time plot.

    Parameters:
    -----------
    time : array-like
        Simulated time points
    energy : array-like
        Total kinetic energy per sample
    filename_prefix : str
        Prefix for output files (default: 'kinetic_plot')
    title : str, optional
        Plot title (default: 'Kinetic Energy vs Time')

    Returns the written file paths.
    """
    plt.figure(figsize=(8, 6))

    plt.plot(time, energy, 'b-', linewidth=2, alpha=0.8)

    plt.xlabel('Time (simulated s)')
    plt.ylabel('Kinetic Energy')
    plt.title(title or 'Kinetic Energy vs Time')

    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    return _save(filename_prefix)


def plot_counts(time: ArrayLike,
                counts: Dict[str, ArrayLike],
                filename_prefix: str = 'counts_plot',
                title: Optional[str] = None) -> List[str]:
    """
    Bond / photon counts vs time, one line per series.

    Parameters:
    -----------
    time : array-like
        Simulated time points
    counts : dict
        {series_name: count_array}
    """
    if not isinstance(counts, dict):
        raise ValueError("counts must be a dict of arrays")

    plt.figure(figsize=(8, 6))
    for name, count in counts.items():
        plt.step(time, count, where='post', label=name, linewidth=2, alpha=0.8)

    plt.xlabel('Time (simulated s)')
    plt.ylabel('Count')
    plt.title(title or 'Bonds and Photons vs Time')

    plt.legend()
    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    return _save(filename_prefix)


def plot_temperature_and_charge(time: ArrayLike,
                                temperature: ArrayLike,
                                net_charge: ArrayLike,
                                filename_prefix: str = 'thermal_plot',
                                title: Optional[str] = None) -> List[str]:
    """Temperature (left axis) and net charge (right axis) vs time."""
    fig, ax_t = plt.subplots(figsize=(8, 6))
    ax_q = ax_t.twinx()

    ax_t.plot(time, temperature, 'r-', linewidth=2, alpha=0.8)
    ax_q.plot(time, net_charge, 'g--', linewidth=1.5, alpha=0.8)

    ax_t.set_xlabel('Time (simulated s)')
    ax_t.set_ylabel('Temperature', color='r')
    ax_q.set_ylabel('Net Charge', color='g')
    ax_t.set_title(title or 'Temperature and Net Charge')

    ax_t.grid(True, alpha=0.3)
    fig.tight_layout()
    return _save(filename_prefix)


def plot_run(history: Dict[str, ArrayLike], filename_prefix: str) -> List[str]:
    """
    Write every standard plot for a run. `history` is the mapping produced by
    TickMetrics.get_plot_data().
    """
    t = history['time']
    paths = []
    paths += plot_kinetic_energy(t, history['kinetic'], f'{filename_prefix}_kinetic')
    paths += plot_counts(t, {'bonds': history['bonds'], 'photons': history['photons']},
                         f'{filename_prefix}_counts')
    paths += plot_temperature_and_charge(t, history['temperature'], history['net_charge'],
                                         f'{filename_prefix}_thermal')
    return paths
