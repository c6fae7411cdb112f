"""
Experiment harness: set up and run standard experiments.

- Layouts of nanomachines and microtubules
- Loading (config, layout) pairs from JSON
- Pre-built point-to-point scenario
"""

from molcomsim.experiments.layout import (
    NanomachineSpec,
    MicrotubuleSpec,
    Layout,
    build_simulation,
    layout_from_dict,
    load_experiment,
    point_to_point,
)

__all__ = [
    "NanomachineSpec",
    "MicrotubuleSpec",
    "Layout",
    "build_simulation",
    "layout_from_dict",
    "load_experiment",
    "point_to_point",
]
