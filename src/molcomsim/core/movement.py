"""
Movement policies: how a molecule gets from one tick to the next.

Two movement controllers exist:
- DiffusiveMovement: random walk, one independent draw per axis
- ActiveTransportMovement: deterministic walk along a bound microtubule

After every move the molecule's collision policy runs. That is the only
place a molecule can change controller: an active-capable molecule that
touches a microtubule is handed over to active transport, and from then on
its policy never switches again (there is no way back to diffusion).

Controllers are pure: they read the molecule and the simulation and return a
position. Policies mutate only the molecule they are given.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from molcomsim.core.microtubule import Microtubule
    from molcomsim.core.molecules import Molecule
    from molcomsim.core.position import Position
    from molcomsim.core.simulation import Simulation


class MoleculeMovementType(Enum):
    """Kinetic class of a molecule."""

    PASSIVE = "passive"  # Diffusion only
    ACTIVE = "active"  # Starts on a track when released on one
    MIXED = "mixed"  # Starts diffusive, may be captured by a track

    @property
    def active_capable(self) -> bool:
        return self is not MoleculeMovementType.PASSIVE


class MovementController(Protocol):
    """Protocol for movement controllers."""

    def next_position(self, molecule: "Molecule", simulation: "Simulation") -> "Position":
        """
        Compute where the molecule will be after one tick.

        Must not mutate the molecule or the simulation.
        """
        ...


@dataclass(frozen=True)
class DiffusiveMovement:
    """Random walk: current position plus one random displacement."""

    def next_position(self, molecule: "Molecule", simulation: "Simulation") -> "Position":
        return molecule.position + simulation.random_move()


@dataclass(frozen=True)
class ActiveTransportMovement:
    """Motor-driven walk along a microtubule. Never consumes random numbers."""

    track: "Microtubule"

    def next_position(self, molecule: "Molecule", simulation: "Simulation") -> "Position":
        return self.track.advance(molecule.position, simulation.config.active_step_length)


class CollisionPolicy(Protocol):
    """Protocol for post-move collision handling."""

    def check(self, molecule: "Molecule", simulation: "Simulation") -> None:
        """Inspect the molecule's new position and switch its controller if needed."""
        ...


@dataclass(frozen=True)
class IgnoreTracks:
    """Policy for passive molecules: microtubules are not obstacles or rails."""

    def check(self, molecule: "Molecule", simulation: "Simulation") -> None:
        return None


@dataclass(frozen=True)
class TrackCapture:
    """
    Policy for diffusing, active-capable molecules.

    Tracks are scanned in the simulation's order; the first one that
    overlaps the molecule captures it.
    """

    def check(self, molecule: "Molecule", simulation: "Simulation") -> None:
        track = simulation.find_overlapping_track(molecule.position, molecule.radius)
        if track is not None:
            molecule.attach_to(track)


@dataclass(frozen=True)
class TrackBound:
    """Policy for a molecule riding a track. Terminal: never switches."""

    track: "Microtubule"

    def check(self, molecule: "Molecule", simulation: "Simulation") -> None:
        return None


def initial_movement(
    movement_type: MoleculeMovementType,
    position: "Position",
    radius: float,
    simulation: "Simulation",
) -> tuple[MovementController, CollisionPolicy]:
    """
    Pick the controller and policy a freshly released molecule starts with.

    ACTIVE molecules released on top of a track start bound to it;
    everything else starts diffusive.
    """
    if movement_type is MoleculeMovementType.PASSIVE:
        return DiffusiveMovement(), IgnoreTracks()

    if movement_type is MoleculeMovementType.ACTIVE:
        track = simulation.find_overlapping_track(position, radius)
        if track is not None:
            return ActiveTransportMovement(track), TrackBound(track)

    return DiffusiveMovement(), TrackCapture()
