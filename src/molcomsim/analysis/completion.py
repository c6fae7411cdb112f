"""
Statistics derived from a run's completion feed.

The engine only records (msg_id, tick) pairs. Everything here is computed
afterwards and never fed back into the simulation.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

import numpy as np

if TYPE_CHECKING:
    from molcomsim.core.simulation import CompletionEvent, Simulation


@dataclass
class CompletionStats:
    """Delivery statistics for one run."""

    msg_ids: np.ndarray  # Completed ids, in completion order
    completion_ticks: np.ndarray  # Tick each of them completed on
    latencies: np.ndarray  # Ticks since the previous completion (first one: since tick 0)
    missing_ids: list[int]  # Ids in 1..num_messages that never completed
    total_ticks: int

    @property
    def num_completed(self) -> int:
        return len(self.msg_ids)

    @property
    def mean_latency(self) -> float:
        if len(self.latencies) == 0:
            return float("nan")
        return float(self.latencies.mean())

    @property
    def max_latency(self) -> int:
        if len(self.latencies) == 0:
            return 0
        return int(self.latencies.max())

    @property
    def throughput(self) -> float:
        """Completed messages per tick."""
        if self.total_ticks == 0:
            return 0.0
        return self.num_completed / self.total_ticks


def compute_completion_stats(
    events: Sequence["CompletionEvent"],
    num_messages: int,
    total_ticks: int,
) -> CompletionStats:
    """
    Compute delivery statistics from completion events.

    Args:
        events: Completion feed, in the order it was recorded
        num_messages: Number of messages the run tried to deliver
        total_ticks: Length of the run

    Returns:
        CompletionStats
    """
    msg_ids = np.array([e.msg_id for e in events], dtype=np.int64)
    ticks = np.array([e.tick for e in events], dtype=np.int64)
    latencies = np.diff(ticks, prepend=0) if len(ticks) else np.array([], dtype=np.int64)

    completed = set(msg_ids.tolist())
    missing = [i for i in range(1, num_messages + 1) if i not in completed]

    return CompletionStats(
        msg_ids=msg_ids,
        completion_ticks=ticks,
        latencies=latencies,
        missing_ids=missing,
        total_ticks=total_ticks,
    )


def summarize_run(simulation: "Simulation") -> CompletionStats:
    """Completion statistics for a (finished or running) simulation."""
    return compute_completion_stats(
        simulation.completions,
        simulation.config.num_messages,
        simulation.current_tick,
    )
