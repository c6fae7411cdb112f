"""Unit tests for layouts, experiment loading and pre-built scenarios."""

import json
from pathlib import Path

import pytest

from molcomsim.core import ConfigurationError, MoleculeMovementType, Position, SimulationConfig
from molcomsim.experiments import (
    Layout,
    MicrotubuleSpec,
    NanomachineSpec,
    build_simulation,
    layout_from_dict,
    load_experiment,
    point_to_point,
)


DEMO_EXPERIMENT = Path(__file__).parents[2] / "demo" / "experiments" / "active_transport.json"


def _experiment_dict():
    return {
        "simulation": {"num_messages": 2, "random_move": [0, 0, 0], "seed": 1},
        "layout": {
            "nanomachines": [
                {
                    "role": "transmitter",
                    "position": [0, 0, 0],
                    "radius": 5,
                    "info_release_position": [4, 0, 0],
                    "information_molecules": [{"count": 3, "movement_type": "mixed", "radius": 0.5}],
                },
                {
                    "role": "receiver",
                    "position": [8, 0],
                    "radius": 5,
                    "ack_release_position": [4, 0, 0],
                    "acknowledgement_molecules": [{"count": 1, "radius": 0.5}],
                },
            ],
            "microtubules": [{"start": [0, 0, 0], "end": [8, 0, 0]}],
        },
    }


class TestNanomachineSpec:
    """Tests for NanomachineSpec."""

    def test_release_positions_default_to_centre(self):
        spec = NanomachineSpec("transmitter", Position(1, 2, 3), 1.0)
        assert spec.info_release_position == Position(1, 2, 3)
        assert spec.ack_release_position == Position(1, 2, 3)

    def test_unknown_role(self):
        with pytest.raises(ConfigurationError):
            NanomachineSpec("relay", Position(0, 0, 0), 1.0)

    @pytest.mark.parametrize("role,tx,rx", [
        ("transmitter", True, False),
        ("receiver", False, True),
        ("intermediate", True, True),
    ])
    def test_build_roles(self, role, tx, rx):
        machine = NanomachineSpec(role, Position(0, 0, 0), 1.0).build(3, SimulationConfig())
        assert machine.machine_id == 3
        assert machine.is_transmitter is tx
        assert machine.is_receiver is rx


class TestBuildSimulation:
    """Tests for build_simulation."""

    def test_ids_follow_layout_order(self):
        layout = Layout(nanomachines=[
            NanomachineSpec("transmitter", Position(0, 0, 0), 1.0),
            NanomachineSpec("receiver", Position(10, 0, 0), 1.0),
            NanomachineSpec("receiver", Position(-10, 0, 0), 1.0),
        ])
        sim = build_simulation(SimulationConfig(), layout)
        assert [m.machine_id for m in sim.nanomachines] == [0, 1, 2]
        assert len(sim.transmitters) == 1
        assert len(sim.receivers) == 2

    def test_builds_microtubules(self):
        layout = Layout(microtubules=[MicrotubuleSpec(Position(0, 0, 0), Position(5, 0, 0), 0.5)])
        sim = build_simulation(SimulationConfig(), layout)
        assert len(sim.microtubules) == 1
        assert sim.microtubules[0].radius == 0.5

    def test_warns_without_receiver(self, caplog):
        layout = Layout(nanomachines=[NanomachineSpec("transmitter", Position(0, 0, 0), 1.0)])
        with caplog.at_level("WARNING"):
            build_simulation(SimulationConfig(), layout)
        assert "no receiver" in caplog.text


class TestLayoutFromDict:
    """Tests for dict/JSON parsing."""

    def test_parses_layout(self):
        layout = layout_from_dict(_experiment_dict()["layout"])

        tx, rx = layout.nanomachines
        assert tx.role == "transmitter"
        assert tx.info_release_position == Position(4, 0, 0)
        assert tx.information_molecules[0].movement_type is MoleculeMovementType.MIXED
        assert rx.position == Position(8, 0, 0)
        assert rx.acknowledgement_molecules[0].count == 1
        assert layout.microtubules[0].radius == 1.0

    def test_missing_fields(self):
        with pytest.raises(ConfigurationError):
            layout_from_dict({"nanomachines": [{"role": "receiver", "radius": 1}]})

    @pytest.mark.parametrize("entry", [
        {"end": [5, 0, 0]},
        {"start": [0, 0, 0]},
        {"radius": 0.5},
    ])
    def test_microtubule_missing_endpoints(self, entry):
        with pytest.raises(ConfigurationError, match="microtubule"):
            layout_from_dict({"microtubules": [entry]})

    def test_bad_position(self):
        with pytest.raises(ConfigurationError):
            layout_from_dict({"nanomachines": [{"role": "receiver", "position": [1], "radius": 1}]})

    def test_bad_molecule_params(self):
        entry = {
            "role": "transmitter", "position": [0, 0, 0], "radius": 1,
            "information_molecules": [{"count": 1, "colour": "red"}],
        }
        with pytest.raises(ConfigurationError):
            layout_from_dict({"nanomachines": [entry]})

    def test_negative_radius_rejected_at_build(self):
        layout = layout_from_dict({"nanomachines": [
            {"role": "receiver", "position": [0, 0, 0], "radius": -1},
        ]})
        with pytest.raises(ConfigurationError):
            build_simulation(SimulationConfig(), layout)


class TestLoadExperiment:
    """Tests for load_experiment."""

    def test_round_trip_through_file(self, tmp_path):
        path = tmp_path / "experiment.json"
        path.write_text(json.dumps(_experiment_dict()))

        config, layout = load_experiment(path)

        assert config.num_messages == 2
        assert len(layout.nanomachines) == 2

        sim = build_simulation(config, layout)
        sim.run()
        assert sim.is_last_message_completed()

    def test_unknown_simulation_key(self, tmp_path):
        data = _experiment_dict()
        data["simulation"]["temperature"] = 310
        path = tmp_path / "experiment.json"
        path.write_text(json.dumps(data))
        with pytest.raises(ConfigurationError):
            load_experiment(path)

    def test_demo_experiment_loads(self):
        config, layout = load_experiment(DEMO_EXPERIMENT)
        sim = build_simulation(config, layout)
        assert config.use_acknowledgements
        assert len(sim.microtubules) == 1


class TestPointToPoint:
    """Tests for the point_to_point scenario."""

    def test_layout(self):
        sim = point_to_point(separation=30.0, config=SimulationConfig())
        tx, rx = sim.nanomachines
        assert tx.is_transmitter and rx.is_receiver
        assert rx.position.distance_to(tx.position) == pytest.approx(30.0)
        assert sim.microtubules == []

    def test_with_track(self):
        sim = point_to_point(separation=30.0, config=SimulationConfig(), machine_radius=4.0, with_track=True)
        (track,) = sim.microtubules
        assert track.start == Position(4.0, 0.0, 0.0)
        assert track.end == Position(26.0, 0.0, 0.0)

    def test_runs_to_completion_when_touching(self):
        config = SimulationConfig(num_messages=3, random_move=(0.0, 0.0, 0.0))
        sim = point_to_point(separation=5.0, config=config, machine_radius=5.0)
        sim.run()
        # Each centre lies inside the other machine, so nothing can be lost
        assert sim.completed_ids == [1, 2, 3]
