"""
Static snapshot rendering for simulation states.
Projects atoms, bonds and photons onto the xy-plane, optionally over the
sampled electric field.
"""

import matplotlib.pyplot as plt
import numpy as np

from atomsim.constants import CONTAINER_SIZE
from atomsim.fields import field_grid

# Set rendering defaults
plt.rcParams['savefig.bbox'] = 'tight'
plt.rcParams['savefig.pad_inches'] = 0

BOND_COLORS = {"covalent": "#444444", "ionic": "#1f77b4", "metallic": "#b8860b"}


def render_snapshot(state, filename: str, format: str = 'png', show_field: bool = False) -> str:
    """
    Render a static snapshot of a SimulationState.

    Parameters:
    -----------
    state : SimulationState
        Committed state to draw
    filename : str
        Output filename (extension will be added if not present)
    format : str
        Output format ('png' or 'svg', default: 'png')
    show_field : bool
        Overlay the electric field direction sampled at z = 0

    Returns the written path.
    """
    if format not in ('png', 'svg'):
        raise ValueError(f"Unsupported format: {format}")

    fig, ax = plt.subplots(figsize=(8, 8))
    ax.set_aspect('equal')
    ax.set_xlim(-CONTAINER_SIZE, CONTAINER_SIZE)
    ax.set_ylim(-CONTAINER_SIZE, CONTAINER_SIZE)
    ax.set_title(f"t = {state.time:.2f}  T = {state.temperature:.1f}")

    if show_field and state.atoms:
        samples = field_grid(state.atoms)
        pos = np.array([s[0] for s in samples])
        direction = np.array([s[1] for s in samples])
        ax.quiver(pos[:, 0], pos[:, 1], direction[:, 0], direction[:, 1],
                  color='#bbbbbb', alpha=0.6, zorder=0)

    # Plot bonds first (behind atoms)
    by_id = {a.uid: a for a in state.atoms}
    for bond in state.bonds:
        a1 = by_id.get(bond.atom1)
        a2 = by_id.get(bond.atom2)
        if a1 is None or a2 is None:
            continue
        ax.plot([a1.pos[0], a2.pos[0]], [a1.pos[1], a2.pos[1]],
                color=BOND_COLORS.get(bond.bond_type, '#444444'),
                linewidth=1.5 * bond.order, zorder=1)

    for atom in state.atoms:
        ax.scatter(atom.pos[0], atom.pos[1], s=atom.radius * 200, c=atom.color,
                   edgecolors='black', linewidth=0.5, alpha=0.9, zorder=2)
        if atom.charge:
            ax.annotate(f"{atom.charge:+.0f}", (atom.pos[0], atom.pos[1]),
                        fontsize=7, ha='center', va='center', zorder=3)

    for photon in state.photons:
        ax.scatter(photon.pos[0], photon.pos[1], s=30, c='#ffd700', marker='*', zorder=4)

    if not filename.lower().endswith(f'.{format}'):
        filename = f'{filename}.{format}'
    plt.savefig(filename, format=format)
    plt.close(fig)
    return filename
