"""
Analysis layer: derived quantities for reporting and visualization.

IMPORTANT: This is NOT seen by the engine. One-way derivation only.

- CompletionStats: latency and throughput from the completion feed
- summarize_run: CompletionStats for a Simulation
"""

from molcomsim.analysis.completion import (
    CompletionStats,
    compute_completion_stats,
    summarize_run,
)

__all__ = [
    "CompletionStats",
    "compute_completion_stats",
    "summarize_run",
]
