"""
Molecules and the factories that release them.

A molecule carries exactly one message id from its source towards a fixed
list of candidate destinations. Information molecules are addressed to every
receiver in the simulation, acknowledgement molecules to every transmitter.
It is delivered to the first candidate it overlaps and then leaves the
simulation.

MoleculeCreator is the adaptivity hook of the protocol: the owning role tells
it how the last exchange went and it may release more (or fewer) molecules.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Sequence
import logging

from molcomsim.core.config import ConfigurationError, require_positive
from molcomsim.core.movement import (
    ActiveTransportMovement,
    CollisionPolicy,
    MoleculeMovementType,
    MovementController,
    TrackBound,
    initial_movement,
)
from molcomsim.core.position import Position

if TYPE_CHECKING:
    from molcomsim.core.microtubule import Microtubule
    from molcomsim.core.nanomachine import Nanomachine
    from molcomsim.core.simulation import Simulation


logger = logging.getLogger(__name__)


class MoleculeKind(Enum):
    """What a molecule carries; decides which role handles its delivery."""

    INFORMATION = "information"
    ACKNOWLEDGEMENT = "acknowledgement"


class CommunicationStatus(Enum):
    """Outcome of the last exchange, as seen by a transmitter or receiver."""

    NONE = 0
    SUCCESS = 1
    FAILURE = -1


@dataclass(eq=False)
class Molecule:
    """A mobile carrier of one message id."""

    molecule_id: int
    kind: MoleculeKind
    msg_id: int
    radius: float
    position: Position
    movement: MovementController
    collision_policy: CollisionPolicy
    destinations: tuple["Nanomachine", ...]
    movement_type: MoleculeMovementType = MoleculeMovementType.PASSIVE
    source: "Nanomachine | None" = None
    created_tick: int = 0

    def move(self, simulation: "Simulation") -> None:
        """Apply the current controller once, then the collision policy."""
        self.position = self.movement.next_position(self, simulation)
        self.collision_policy.check(self, simulation)

    def attach_to(self, track: "Microtubule") -> None:
        """Hand the molecule over to active transport along `track`."""
        self.movement = ActiveTransportMovement(track)
        self.collision_policy = TrackBound(track)
        logger.debug("Molecule %d attached to %r", self.molecule_id, track)

    @property
    def on_track(self) -> bool:
        return isinstance(self.movement, ActiveTransportMovement)

    def overlaps(self, machine: "Nanomachine") -> bool:
        """Strict overlap: touching spheres do not count."""
        return self.position.distance_to(machine.position) < self.radius + machine.radius

    def reached_destination(self) -> "Nanomachine | None":
        """
        Return the destination this molecule has arrived at, or None.

        Candidates are tried in their fixed order; the first overlap wins.
        """
        for destination in self.destinations:
            if self.overlaps(destination):
                return destination
        return None


@dataclass
class MoleculeParams:
    """Parameters for one group of molecules in a release batch."""

    count: int  # Molecules per batch before any adaptation
    movement_type: MoleculeMovementType = MoleculeMovementType.PASSIVE
    radius: float = 1.0
    adaptive_change: int = 0  # Batch size change after a failure/success

    def __post_init__(self):
        if isinstance(self.movement_type, str):
            self.movement_type = MoleculeMovementType(self.movement_type.lower())
        if int(self.count) != self.count or self.count < 0:
            raise ConfigurationError(f"Molecule count must be an integer >= 0, got {self.count!r}")
        if int(self.adaptive_change) != self.adaptive_change or self.adaptive_change < 0:
            raise ConfigurationError(
                f"adaptive_change must be an integer >= 0, got {self.adaptive_change!r}"
            )
        require_positive("molecule radius", self.radius)
        self.count = int(self.count)
        self.adaptive_change = int(self.adaptive_change)
        self.radius = float(self.radius)


@dataclass
class MoleculeCreator:
    """
    Releases batches of molecules for one transmitter or receiver role.

    Batch size adapts per parameter group:
    - FAILURE: grow by `adaptive_change`
    - SUCCESS: shrink by `adaptive_change`, never below the configured count
    - NONE: unchanged
    """

    kind: MoleculeKind
    params: Sequence[MoleculeParams]
    release_position: Position
    owner: "Nanomachine | None" = None

    _batch_sizes: list[int] = field(default=None, init=False)

    def __post_init__(self):
        if not self.release_position.is_finite():
            raise ConfigurationError("Molecule release position must be finite")
        self.params = tuple(self.params)
        self._batch_sizes = [p.count for p in self.params]

    @property
    def batch_sizes(self) -> list[int]:
        """Current batch size of each parameter group."""
        return list(self._batch_sizes)

    def _adapt(self, last_status: CommunicationStatus) -> None:
        for i, p in enumerate(self.params):
            if last_status is CommunicationStatus.FAILURE:
                self._batch_sizes[i] += p.adaptive_change
            elif last_status is CommunicationStatus.SUCCESS:
                self._batch_sizes[i] = max(p.count, self._batch_sizes[i] - p.adaptive_change)

    def _destinations(self, simulation: "Simulation") -> tuple["Nanomachine", ...]:
        if self.kind is MoleculeKind.INFORMATION:
            return tuple(simulation.receivers)
        return tuple(simulation.transmitters)

    def create_molecules(
        self,
        last_status: CommunicationStatus,
        msg_id: int,
        simulation: "Simulation",
    ) -> list[Molecule]:
        """
        Release one batch carrying `msg_id` and register it with the simulation.

        Returns:
            The molecules created (possibly empty)
        """
        self._adapt(last_status)
        destinations = self._destinations(simulation)

        created = []
        for p, size in zip(self.params, self._batch_sizes):
            for _ in range(size):
                movement, policy = initial_movement(
                    p.movement_type, self.release_position, p.radius, simulation
                )
                molecule = Molecule(
                    molecule_id=simulation.next_molecule_id(),
                    kind=self.kind,
                    msg_id=msg_id,
                    radius=p.radius,
                    position=self.release_position,
                    movement=movement,
                    collision_policy=policy,
                    destinations=destinations,
                    movement_type=p.movement_type,
                    source=self.owner,
                    created_tick=simulation.current_tick,
                )
                simulation.add_molecule(molecule)
                created.append(molecule)

        logger.debug(
            "Tick %d: released %d %s molecule(s) for message %d (status=%s)",
            simulation.current_tick, len(created), self.kind.value, msg_id, last_status.name,
        )
        return created
