"""
Nanomachines and their protocol roles.

A nanomachine is a fixed sphere in the medium. It can hold a Transmitter
role (sends information molecules, waits for acknowledgements), a Receiver
role (accepts information molecules, answers with acknowledgements), or both.
Roles are chosen at creation and never change.

The two roles implement a stop-and-wait ARQ over the molecular channel:
- Every batch arms a countdown of `retransmit_wait_time` ticks
- A countdown that runs out costs one retransmission credit and resends
- A matching reply completes the message and schedules the next one
  for the following tick ("deferred" creation)
- A non-matching reply also costs a credit and triggers an immediate resend
- Credits are reset only when a new message is started

Running out of credits is not an error: the message is simply abandoned.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Sequence
import logging

from molcomsim.core.config import ConfigurationError, require_positive
from molcomsim.core.molecules import (
    CommunicationStatus,
    MoleculeCreator,
    MoleculeKind,
    MoleculeParams,
)
from molcomsim.core.position import Position

if TYPE_CHECKING:
    from molcomsim.core.config import SimulationConfig
    from molcomsim.core.molecules import Molecule
    from molcomsim.core.simulation import Simulation


logger = logging.getLogger(__name__)


class Transmitter:
    """Sending half of a nanomachine: releases information molecules."""

    def __init__(
        self,
        nanomachine: "Nanomachine",
        release_position: Position,
        params: Sequence[MoleculeParams],
        config: "SimulationConfig",
    ):
        self.nanomachine = nanomachine
        self.release_position = release_position
        self.molecule_creator = MoleculeCreator(
            MoleculeKind.INFORMATION, params, release_position, owner=nanomachine
        )

        self.curr_msg_id = 1
        self.retransmissions_left = config.num_retransmissions
        self.countdown = 0
        self.deferred = False
        self.last_status = CommunicationStatus.NONE

        self.batches_sent = 0
        self._abandoned_msg_id: int | None = None

    def create_molecules(self, simulation: "Simulation") -> None:
        """Release a batch for the current message and re-arm the countdown."""
        self.molecule_creator.create_molecules(self.last_status, self.curr_msg_id, simulation)
        self.countdown = simulation.config.retransmit_wait_time
        self.batches_sent += 1

    def start(self, simulation: "Simulation") -> None:
        """First emission of the run."""
        self.create_molecules(simulation)

    def next_step(self, simulation: "Simulation") -> None:
        """
        Per-tick transition.

        Priority order:
        1. Deferred creation requested by a delivery last tick
        2. Countdown ran out: retry (acknowledged mode) or advance (unacknowledged)
        3. Otherwise keep waiting
        """
        if self.deferred:
            self.create_molecules(simulation)
            self.deferred = False
            return

        self.countdown = max(self.countdown - 1, 0)
        if self.countdown > 0:
            return

        config = simulation.config
        if config.use_acknowledgements:
            self.last_status = CommunicationStatus.FAILURE
            if self.retransmissions_left > 0:
                self.retransmissions_left -= 1
                logger.debug(
                    "Tick %d: machine %d retransmits message %d (%d credit(s) left)",
                    simulation.current_tick, self.nanomachine.machine_id,
                    self.curr_msg_id, self.retransmissions_left,
                )
                self.create_molecules(simulation)
            elif self._abandoned_msg_id != self.curr_msg_id:
                self._abandoned_msg_id = self.curr_msg_id
                logger.info(
                    "Tick %d: machine %d out of retransmissions, abandoning message %d",
                    simulation.current_tick, self.nanomachine.machine_id, self.curr_msg_id,
                )
        else:
            # Without acknowledgements an elapsed wait counts as delivery
            self.last_status = CommunicationStatus.SUCCESS
            if self.curr_msg_id < config.num_messages:
                self.curr_msg_id += 1
            self.create_molecules(simulation)

    def receive_molecule(self, molecule: "Molecule", simulation: "Simulation") -> None:
        """Handle an acknowledgement molecule."""
        if molecule.msg_id == self.curr_msg_id:
            self.last_status = CommunicationStatus.SUCCESS
            simulation.completed_message(self.curr_msg_id)
            self.curr_msg_id += 1
            if not simulation.is_last_message_completed():
                self.deferred = True
                self.retransmissions_left = simulation.config.num_retransmissions
        elif self.retransmissions_left > 0:
            self.retransmissions_left -= 1
            self.last_status = CommunicationStatus.FAILURE
            self.deferred = True


class Receiver:
    """Receiving half of a nanomachine: accepts information, answers with acknowledgements."""

    def __init__(
        self,
        nanomachine: "Nanomachine",
        release_position: Position,
        params: Sequence[MoleculeParams],
        config: "SimulationConfig",
    ):
        self.nanomachine = nanomachine
        self.release_position = release_position
        self.molecule_creator: MoleculeCreator | None = None
        if config.use_acknowledgements:
            self.molecule_creator = MoleculeCreator(
                MoleculeKind.ACKNOWLEDGEMENT, params, release_position, owner=nanomachine
            )

        self.curr_msg_id = 0  # Last message received in order
        self.retransmissions_left = config.num_retransmissions
        self.countdown = 0
        self.deferred = False
        self.last_status = CommunicationStatus.NONE

        self.batches_sent = 0

    def create_molecules(self, simulation: "Simulation") -> None:
        """Release an acknowledgement batch for the last good message."""
        if self.molecule_creator is None:
            return
        self.molecule_creator.create_molecules(self.last_status, self.curr_msg_id, simulation)
        self.countdown = simulation.config.retransmit_wait_time
        self.batches_sent += 1

    def next_step(self, simulation: "Simulation") -> None:
        """
        Per-tick transition.

        The timeout-driven resend only exists in acknowledged mode. The
        countdown starts out elapsed, so the first tick after the start
        already re-acknowledges message 0.
        """
        if self.deferred:
            self.create_molecules(simulation)
            self.deferred = False
            return

        if not simulation.config.use_acknowledgements:
            return

        self.countdown = max(self.countdown - 1, 0)
        if self.countdown == 0 and self.retransmissions_left > 0:
            self.retransmissions_left -= 1
            self.last_status = CommunicationStatus.FAILURE
            self.create_molecules(simulation)

    def receive_molecule(self, molecule: "Molecule", simulation: "Simulation") -> None:
        """Handle an information molecule."""
        config = simulation.config
        if molecule.msg_id == self.curr_msg_id + 1:
            self.curr_msg_id += 1
            self.last_status = CommunicationStatus.SUCCESS
            if config.use_acknowledgements:
                self.deferred = True
                self.retransmissions_left = config.num_retransmissions
            else:
                simulation.completed_message(self.curr_msg_id)
        elif config.use_acknowledgements and self.retransmissions_left > 0:
            # Duplicate or out-of-order: re-acknowledge the last good message
            self.retransmissions_left -= 1
            self.last_status = CommunicationStatus.FAILURE
            self.deferred = True


class Nanomachine:
    """A fixed endpoint that may transmit, receive, or both."""

    def __init__(self, machine_id: int, position: Position, radius: float):
        if not position.is_finite():
            raise ConfigurationError(f"Nanomachine {machine_id} position must be finite")
        require_positive("nanomachine radius", radius)

        self.machine_id = machine_id
        self.position = position
        self.radius = float(radius)
        self.transmitter: Transmitter | None = None
        self.receiver: Receiver | None = None

    @property
    def is_transmitter(self) -> bool:
        return self.transmitter is not None

    @property
    def is_receiver(self) -> bool:
        return self.receiver is not None

    def start(self, simulation: "Simulation") -> None:
        """Initial emission: only transmitters speak first."""
        if self.transmitter is not None:
            self.transmitter.start(simulation)

    def next_step(self, simulation: "Simulation") -> None:
        if self.transmitter is not None:
            self.transmitter.next_step(simulation)
        if self.receiver is not None:
            self.receiver.next_step(simulation)

    def receive_molecule(self, molecule: "Molecule", simulation: "Simulation") -> None:
        """Route a delivered molecule to the role that handles its kind."""
        if molecule.kind is MoleculeKind.INFORMATION:
            if self.receiver is not None:
                self.receiver.receive_molecule(molecule, simulation)
        elif molecule.kind is MoleculeKind.ACKNOWLEDGEMENT:
            if self.transmitter is not None:
                self.transmitter.receive_molecule(molecule, simulation)

    @property
    def transmitter_message_id(self) -> int:
        return self.transmitter.curr_msg_id if self.transmitter is not None else -1

    @property
    def receiver_message_id(self) -> int:
        return self.receiver.curr_msg_id if self.receiver is not None else -1

    def __repr__(self) -> str:
        roles = [name for name, role in (("tx", self.transmitter), ("rx", self.receiver)) if role]
        return f"Nanomachine(id={self.machine_id}, position={self.position}, roles={roles})"


def create_transmitter(
    machine_id: int,
    position: Position,
    radius: float,
    release_position: Position,
    params: Sequence[MoleculeParams],
    config: "SimulationConfig",
) -> Nanomachine:
    """Create a transmit-only nanomachine."""
    machine = Nanomachine(machine_id, position, radius)
    machine.transmitter = Transmitter(machine, release_position, params, config)
    return machine


def create_receiver(
    machine_id: int,
    position: Position,
    radius: float,
    release_position: Position,
    params: Sequence[MoleculeParams],
    config: "SimulationConfig",
) -> Nanomachine:
    """Create a receive-only nanomachine. `params` describe its acknowledgements."""
    machine = Nanomachine(machine_id, position, radius)
    machine.receiver = Receiver(machine, release_position, params, config)
    return machine


def create_intermediate_node(
    machine_id: int,
    position: Position,
    radius: float,
    info_release_position: Position,
    ack_release_position: Position,
    info_params: Sequence[MoleculeParams],
    ack_params: Sequence[MoleculeParams],
    config: "SimulationConfig",
) -> Nanomachine:
    """Create a nanomachine that both transmits and receives."""
    machine = Nanomachine(machine_id, position, radius)
    machine.receiver = Receiver(machine, ack_release_position, ack_params, config)
    machine.transmitter = Transmitter(machine, info_release_position, info_params, config)
    return machine
