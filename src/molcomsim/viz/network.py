"""
Visualization of molecular network runs.

- Snapshot of the medium (x/y projection): nanomachines, tracks, molecules
- Completion timeline: which message got across when
"""

from __future__ import annotations
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.patches import Circle

from molcomsim.core.molecules import MoleculeKind

if TYPE_CHECKING:
    from molcomsim.core.simulation import CompletionEvent, Simulation


KIND_COLORS = {
    MoleculeKind.INFORMATION: "tab:blue",
    MoleculeKind.ACKNOWLEDGEMENT: "tab:orange",
}


def plot_molecule_positions(
    simulation: "Simulation",
    title: str | None = None,
    ax: Axes | None = None,
    figsize: tuple[float, float] = (8, 8),
    marker_size: float = 8.0,
) -> tuple[Figure, Axes]:
    """
    Plot the x/y projection of the current simulation state.

    Args:
        simulation: Simulation to draw
        title: Plot title (defaults to the current tick)
        ax: Existing axes (creates new if None)
        marker_size: Scatter size for molecules

    Returns:
        (fig, ax) tuple
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    for track in simulation.microtubules:
        ax.plot(
            [track.start.x, track.end.x], [track.start.y, track.end.y],
            color="gray", linewidth=max(1.0, 2 * track.radius), alpha=0.6, zorder=1,
        )

    for machine in simulation.nanomachines:
        color = "tab:green" if machine.is_transmitter else "tab:red"
        ax.add_patch(Circle(
            (machine.position.x, machine.position.y), machine.radius,
            facecolor=color, alpha=0.3, edgecolor=color, zorder=2,
        ))
        ax.annotate(str(machine.machine_id), (machine.position.x, machine.position.y),
                    ha="center", va="center", fontsize=9, zorder=3)

    for kind, color in KIND_COLORS.items():
        coords = np.array([
            (m.position.x, m.position.y) for m in simulation.molecules if m.kind is kind
        ])
        if len(coords) > 0:
            ax.scatter(coords[:, 0], coords[:, 1], s=marker_size, color=color,
                       label=kind.value, zorder=4)

    if title is None:
        title = f"Tick {simulation.current_tick}"
    ax.set_title(title)
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.set_aspect("equal")
    ax.autoscale_view()
    if simulation.molecules:
        ax.legend(loc="upper right")

    return fig, ax


def plot_completion_timeline(
    events: Sequence["CompletionEvent"],
    num_messages: int | None = None,
    title: str = "Message Completions",
    ax: Axes | None = None,
    figsize: tuple[float, float] = (8, 4),
) -> tuple[Figure, Axes]:
    """
    Step plot of completed message ids against tick.

    Args:
        events: Completion feed
        num_messages: If given, draw the target as a dashed line
        title: Plot title
        ax: Existing axes (creates new if None)

    Returns:
        (fig, ax) tuple
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    ticks = [e.tick for e in events]
    ids = [e.msg_id for e in events]
    if ticks:
        ax.step(ticks, ids, where="post", color="tab:blue", linewidth=2.0)
        ax.scatter(ticks, ids, color="tab:blue", zorder=3)

    if num_messages is not None:
        ax.axhline(num_messages, color="gray", linestyle="--", linewidth=1.0)

    ax.set_title(title)
    ax.set_xlabel("Tick")
    ax.set_ylabel("Message id")
    ax.grid(True, alpha=0.3)

    return fig, ax


def save_figure(fig: Figure, path: str | Path, dpi: int = 150, **kwargs) -> None:
    """Save figure to file."""
    fig.savefig(path, dpi=dpi, bbox_inches="tight", **kwargs)
