"""
Layouts: where the nanomachines and microtubules of an experiment live.

A Layout is plain data. build_simulation() turns a (SimulationConfig, Layout)
pair into a wired Simulation; load_experiment() reads both from JSON.

JSON format:

    {
      "simulation": {"num_messages": 5, "use_acknowledgements": true, ...},
      "layout": {
        "nanomachines": [
          {"role": "transmitter", "position": [0, 0, 0], "radius": 5,
           "information_molecules": [{"count": 20, "movement_type": "passive"}]},
          {"role": "receiver", "position": [30, 0, 0], "radius": 5,
           "acknowledgement_molecules": [{"count": 20}]}
        ],
        "microtubules": [{"start": [5, 0, 0], "end": [25, 0, 0], "radius": 1}]
      }
    }
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal
import json
import logging

from molcomsim.core.config import ConfigurationError, SimulationConfig
from molcomsim.core.microtubule import Microtubule
from molcomsim.core.molecules import MoleculeParams
from molcomsim.core.nanomachine import (
    Nanomachine,
    create_intermediate_node,
    create_receiver,
    create_transmitter,
)
from molcomsim.core.position import Position
from molcomsim.core.simulation import Simulation


logger = logging.getLogger(__name__)

Role = Literal["transmitter", "receiver", "intermediate"]
ROLES = ("transmitter", "receiver", "intermediate")


@dataclass
class NanomachineSpec:
    """Blueprint for one nanomachine."""

    role: Role
    position: Position
    radius: float
    info_release_position: Position | None = None  # Defaults to the centre
    ack_release_position: Position | None = None  # Defaults to the centre
    information_molecules: list[MoleculeParams] = field(default_factory=list)
    acknowledgement_molecules: list[MoleculeParams] = field(default_factory=list)

    def __post_init__(self):
        if self.role not in ROLES:
            raise ConfigurationError(f"Unknown nanomachine role {self.role!r}, expected one of {ROLES}")
        if self.info_release_position is None:
            self.info_release_position = self.position
        if self.ack_release_position is None:
            self.ack_release_position = self.position

    def build(self, machine_id: int, config: SimulationConfig) -> Nanomachine:
        if self.role == "transmitter":
            return create_transmitter(
                machine_id, self.position, self.radius,
                self.info_release_position, self.information_molecules, config,
            )
        if self.role == "receiver":
            return create_receiver(
                machine_id, self.position, self.radius,
                self.ack_release_position, self.acknowledgement_molecules, config,
            )
        return create_intermediate_node(
            machine_id, self.position, self.radius,
            self.info_release_position, self.ack_release_position,
            self.information_molecules, self.acknowledgement_molecules, config,
        )


@dataclass
class MicrotubuleSpec:
    """Blueprint for one microtubule."""

    start: Position
    end: Position
    radius: float = 1.0

    def build(self) -> Microtubule:
        return Microtubule(self.start, self.end, self.radius)


@dataclass
class Layout:
    """Spatial arrangement of an experiment."""

    nanomachines: list[NanomachineSpec] = field(default_factory=list)
    microtubules: list[MicrotubuleSpec] = field(default_factory=list)


def build_simulation(config: SimulationConfig, layout: Layout) -> Simulation:
    """
    Wire a Simulation from a config and a layout.

    Nanomachines get ids in layout order, starting at 0.
    """
    simulation = Simulation(config=config, microtubules=[t.build() for t in layout.microtubules])
    for machine_id, spec in enumerate(layout.nanomachines):
        simulation.add_nanomachine(spec.build(machine_id, config))

    if not simulation.transmitters:
        logger.warning("Layout has no transmitter; nothing will ever be sent")
    if not simulation.receivers:
        logger.warning("Layout has no receiver; no message can complete")
    return simulation


def _position(value: Any, name: str) -> Position:
    try:
        return Position.from_array(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid position for {name}: {value!r}") from exc


def _molecule_params(entries: list[dict[str, Any]]) -> list[MoleculeParams]:
    try:
        return [MoleculeParams(**entry) for entry in entries]
    except ConfigurationError:
        raise
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid molecule parameters: {exc}") from exc


def layout_from_dict(data: dict[str, Any]) -> Layout:
    """Build a Layout from a plain mapping (e.g. parsed JSON)."""
    machines = []
    for i, entry in enumerate(data.get("nanomachines", [])):
        name = f"nanomachine[{i}]"
        if "role" not in entry or "position" not in entry or "radius" not in entry:
            raise ConfigurationError(f"{name} needs 'role', 'position' and 'radius'")
        machines.append(NanomachineSpec(
            role=entry["role"],
            position=_position(entry["position"], name),
            radius=entry["radius"],
            info_release_position=(
                _position(entry["info_release_position"], name)
                if "info_release_position" in entry else None
            ),
            ack_release_position=(
                _position(entry["ack_release_position"], name)
                if "ack_release_position" in entry else None
            ),
            information_molecules=_molecule_params(entry.get("information_molecules", [])),
            acknowledgement_molecules=_molecule_params(entry.get("acknowledgement_molecules", [])),
        ))

    tracks = []
    for i, entry in enumerate(data.get("microtubules", [])):
        name = f"microtubule[{i}]"
        if "start" not in entry or "end" not in entry:
            raise ConfigurationError(f"{name} needs 'start' and 'end'")
        tracks.append(MicrotubuleSpec(
            start=_position(entry["start"], name),
            end=_position(entry["end"], name),
            radius=entry.get("radius", 1.0),
        ))

    return Layout(nanomachines=machines, microtubules=tracks)


def load_experiment(path: str | Path) -> tuple[SimulationConfig, Layout]:
    """
    Read a JSON experiment file.

    Args:
        path: File with "simulation" and "layout" sections

    Returns:
        (config, layout) tuple
    """
    path = Path(path)
    with open(path) as f:
        data = json.load(f)

    config = SimulationConfig.from_dict(data.get("simulation", {}))
    layout = layout_from_dict(data.get("layout", {}))
    logger.info("Loaded experiment %s: %d nanomachine(s)", path, len(layout.nanomachines))
    return config, layout


def point_to_point(
    separation: float,
    config: SimulationConfig,
    machine_radius: float = 5.0,
    info_molecules: list[MoleculeParams] | None = None,
    ack_molecules: list[MoleculeParams] | None = None,
    with_track: bool = False,
    track_radius: float = 1.0,
) -> Simulation:
    """
    Convenience factory: one transmitter and one receiver on the x axis.

    Args:
        separation: Centre-to-centre distance
        config: Run configuration
        machine_radius: Radius of both nanomachines
        info_molecules: Information batch parameters (default: 10 passive molecules)
        ack_molecules: Acknowledgement batch parameters (default: 10 passive molecules)
        with_track: Lay a microtubule from the transmitter's surface to the receiver's
        track_radius: Radius of that microtubule

    Returns:
        Wired Simulation
    """
    if info_molecules is None:
        info_molecules = [MoleculeParams(count=10)]
    if ack_molecules is None:
        ack_molecules = [MoleculeParams(count=10)]

    tx_position = Position(0.0, 0.0, 0.0)
    rx_position = Position(float(separation), 0.0, 0.0)

    layout = Layout(
        nanomachines=[
            NanomachineSpec("transmitter", tx_position, machine_radius,
                            information_molecules=info_molecules),
            NanomachineSpec("receiver", rx_position, machine_radius,
                            acknowledgement_molecules=ack_molecules),
        ],
    )
    if with_track:
        layout.microtubules.append(MicrotubuleSpec(
            start=Position(machine_radius, 0.0, 0.0),
            end=Position(separation - machine_radius, 0.0, 0.0),
            radius=track_radius,
        ))
    return build_simulation(config, layout)
