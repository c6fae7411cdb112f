"""
Visualization utilities.

- Medium snapshots (nanomachines, microtubules, molecules)
- Completion timelines
"""

from molcomsim.viz.network import (
    plot_molecule_positions,
    plot_completion_timeline,
    save_figure,
)

__all__ = [
    "plot_molecule_positions",
    "plot_completion_timeline",
    "save_figure",
]
