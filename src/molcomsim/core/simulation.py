"""
Simulation: the clock and registry that drive a molecular network.

The Simulation object is the context handle every component receives. It
owns the run configuration, the random-move source, the nanomachine roster,
the microtubules, the live molecules and the completion feed.

Each tick runs in a fixed order:
1. Emission: transmitters/receivers release molecules (start() on tick 0)
2. Movement: every live molecule moves once
3. Delivery: molecules are tested in creation order and dispatched
4. Delivered molecules are removed
5. Molecules released this tick join the live set

Because of step 5 a molecule never moves or gets delivered in the tick it
was released.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from itertools import count
from typing import TYPE_CHECKING, Iterable, Iterator
import logging

import numpy as np

from molcomsim.core.config import ConfigurationError, SimulationConfig
from molcomsim.core.position import Position

if TYPE_CHECKING:
    from molcomsim.core.microtubule import Microtubule
    from molcomsim.core.molecules import Molecule
    from molcomsim.core.nanomachine import Nanomachine


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompletionEvent:
    """A message that got across, and the tick it happened on."""

    msg_id: int
    tick: int


@dataclass
class Simulation:
    """Discrete-time orchestrator for one run."""

    config: SimulationConfig = field(default_factory=SimulationConfig)
    microtubules: list["Microtubule"] = field(default_factory=list)

    current_tick: int = field(default=0, init=False)
    nanomachines: list["Nanomachine"] = field(default_factory=list, init=False)
    molecules: list["Molecule"] = field(default_factory=list, init=False)
    completions: list[CompletionEvent] = field(default_factory=list, init=False)
    molecules_created: int = field(default=0, init=False)
    molecules_delivered: int = field(default=0, init=False)
    rng: np.random.Generator = field(default=None, init=False)

    _pending: list["Molecule"] = field(default_factory=list, init=False)
    _completed_ids: set[int] = field(default_factory=set, init=False)
    _molecule_ids: Iterator[int] = field(default=None, init=False)

    def __post_init__(self):
        self.microtubules = list(self.microtubules)
        self.rng = np.random.default_rng(self.config.seed)
        self._molecule_ids = count()

    # ═══════════════════════════════════════════════════════════════
    # REGISTRY
    # ═══════════════════════════════════════════════════════════════

    def add_nanomachine(self, machine: "Nanomachine") -> "Nanomachine":
        """Register a nanomachine. Only allowed before the first tick."""
        if self.current_tick > 0:
            raise ConfigurationError("Nanomachines must be added before the simulation starts")
        if any(m.machine_id == machine.machine_id for m in self.nanomachines):
            raise ConfigurationError(f"Duplicate nanomachine id {machine.machine_id}")
        self.nanomachines.append(machine)
        return machine

    def add_nanomachines(self, machines: Iterable["Nanomachine"]) -> None:
        for machine in machines:
            self.add_nanomachine(machine)

    def add_microtubule(self, track: "Microtubule") -> "Microtubule":
        if self.current_tick > 0:
            raise ConfigurationError("Microtubules must be added before the simulation starts")
        self.microtubules.append(track)
        return track

    @property
    def transmitters(self) -> list["Nanomachine"]:
        return [m for m in self.nanomachines if m.transmitter is not None]

    @property
    def receivers(self) -> list["Nanomachine"]:
        return [m for m in self.nanomachines if m.receiver is not None]

    def next_molecule_id(self) -> int:
        return next(self._molecule_ids)

    def add_molecule(self, molecule: "Molecule") -> None:
        """Queue a freshly released molecule; it goes live at the end of the tick."""
        self._pending.append(molecule)
        self.molecules_created += 1

    @property
    def pending_molecules(self) -> list["Molecule"]:
        return list(self._pending)

    # ═══════════════════════════════════════════════════════════════
    # QUERIES USED BY COMPONENTS
    # ═══════════════════════════════════════════════════════════════

    def random_move(self) -> Position:
        """One diffusive displacement, drawn independently per axis."""
        scale = np.asarray(self.config.random_move, dtype=np.float64)
        return Position.from_array(self.rng.normal(0.0, 1.0, size=3) * scale)

    def find_overlapping_track(self, position: Position, radius: float) -> "Microtubule | None":
        """First microtubule (in registration order) touching the given sphere."""
        for track in self.microtubules:
            if track.overlaps(position, radius):
                return track
        return None

    # ═══════════════════════════════════════════════════════════════
    # COMPLETION FEED
    # ═══════════════════════════════════════════════════════════════

    def completed_message(self, msg_id: int) -> None:
        """Record that message `msg_id` got across on the current tick."""
        if msg_id in self._completed_ids:
            logger.debug("Tick %d: message %d already completed", self.current_tick, msg_id)
            return
        self._completed_ids.add(msg_id)
        self.completions.append(CompletionEvent(msg_id=msg_id, tick=self.current_tick))
        logger.debug("Tick %d: message %d completed", self.current_tick, msg_id)

    def is_last_message_completed(self) -> bool:
        return self.config.num_messages in self._completed_ids

    def is_finished(self) -> bool:
        return self.is_last_message_completed() or self.current_tick >= self.config.max_num_steps

    @property
    def completed_ids(self) -> list[int]:
        return sorted(self._completed_ids)

    # ═══════════════════════════════════════════════════════════════
    # STEPPING
    # ═══════════════════════════════════════════════════════════════

    def step(self) -> list[tuple["Molecule", "Nanomachine"]]:
        """
        Advance the simulation by one tick.

        Returns:
            (molecule, destination) pairs delivered this tick, in creation order
        """
        # 1. Emission
        for machine in self.nanomachines:
            if self.current_tick == 0:
                machine.start(self)
            else:
                machine.next_step(self)

        # 2. Movement
        for molecule in self.molecules:
            molecule.move(self)

        # 3. Delivery
        deliveries = []
        for molecule in self.molecules:
            destination = molecule.reached_destination()
            if destination is not None:
                destination.receive_molecule(molecule, self)
                deliveries.append((molecule, destination))

        # 4. Remove delivered molecules
        if deliveries:
            delivered = {id(m) for m, _ in deliveries}
            self.molecules = [m for m in self.molecules if id(m) not in delivered]
            self.molecules_delivered += len(deliveries)

        # 5. Released molecules go live
        self.molecules.extend(self._pending)
        self._pending.clear()

        self.current_tick += 1
        return deliveries

    def run(self, max_steps: int | None = None) -> dict:
        """
        Step until the last message completes or a step limit is hit.

        Args:
            max_steps: Extra cap on ticks for this call (config.max_num_steps always applies)

        Returns:
            Summary dict of the run
        """
        logger.info(
            "Starting run: %d message(s), %d nanomachine(s), %d microtubule(s), acks=%s",
            self.config.num_messages, len(self.nanomachines),
            len(self.microtubules), self.config.use_acknowledgements,
        )
        steps = 0
        while not self.is_finished():
            if max_steps is not None and steps >= max_steps:
                break
            self.step()
            steps += 1

        summary = self.summary()
        logger.info(
            "Run stopped at tick %d: %d/%d message(s) completed",
            self.current_tick, len(self._completed_ids), self.config.num_messages,
        )
        return summary

    def summary(self) -> dict:
        return {
            "ticks": self.current_tick,
            "num_messages": self.config.num_messages,
            "completed_messages": len(self._completed_ids),
            "last_message_completed": self.is_last_message_completed(),
            "live_molecules": len(self.molecules),
            "molecules_created": self.molecules_created,
            "molecules_delivered": self.molecules_delivered,
        }
