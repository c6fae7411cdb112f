"""
Core engine primitives.

This layer knows NOTHING about file formats, reporting or plotting.
It only knows:
- Positions and distances
- Microtubules (fixed transport tracks)
- Movement controllers and the collision policy that switches them
- Molecules and the factories that release them
- Nanomachines with Transmitter / Receiver protocol roles
- The Simulation clock that steps everything in a fixed order
"""

from molcomsim.core.position import Position, distance
from molcomsim.core.config import ConfigurationError, SimulationConfig
from molcomsim.core.microtubule import Microtubule
from molcomsim.core.movement import (
    MoleculeMovementType,
    MovementController,
    DiffusiveMovement,
    ActiveTransportMovement,
    CollisionPolicy,
    IgnoreTracks,
    TrackCapture,
    TrackBound,
)
from molcomsim.core.molecules import (
    MoleculeKind,
    CommunicationStatus,
    Molecule,
    MoleculeParams,
    MoleculeCreator,
)
from molcomsim.core.nanomachine import (
    Nanomachine,
    Transmitter,
    Receiver,
    create_transmitter,
    create_receiver,
    create_intermediate_node,
)
from molcomsim.core.simulation import Simulation, CompletionEvent

__all__ = [
    "Position",
    "distance",
    "ConfigurationError",
    "SimulationConfig",
    "Microtubule",
    "MoleculeMovementType",
    "MovementController",
    "DiffusiveMovement",
    "ActiveTransportMovement",
    "CollisionPolicy",
    "IgnoreTracks",
    "TrackCapture",
    "TrackBound",
    "MoleculeKind",
    "CommunicationStatus",
    "Molecule",
    "MoleculeParams",
    "MoleculeCreator",
    "Nanomachine",
    "Transmitter",
    "Receiver",
    "create_transmitter",
    "create_receiver",
    "create_intermediate_node",
    "Simulation",
    "CompletionEvent",
]
