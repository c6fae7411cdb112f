"""Unit tests for Molecule delivery and MoleculeCreator."""

import pytest

from molcomsim.core import (
    CommunicationStatus,
    ConfigurationError,
    MoleculeCreator,
    MoleculeKind,
    MoleculeMovementType,
    MoleculeParams,
    Nanomachine,
    Position,
    Simulation,
    create_receiver,
    create_transmitter,
)


class TestReachedDestination:
    """Tests for the overlap-based delivery test."""

    def test_overlap_delivers(self, make_molecule):
        target = Nanomachine(0, Position(2.9, 0, 0), 1.0)
        molecule = make_molecule(radius=2.0, destinations=[target])
        assert molecule.reached_destination() is target

    def test_touching_does_not_deliver(self, make_molecule):
        target = Nanomachine(0, Position(3.0, 0, 0), 1.0)
        molecule = make_molecule(radius=2.0, destinations=[target])
        assert molecule.reached_destination() is None

    def test_far_away_does_not_deliver(self, make_molecule):
        target = Nanomachine(0, Position(0, 30, 0), 1.0)
        molecule = make_molecule(radius=2.0, destinations=[target])
        assert molecule.reached_destination() is None

    def test_first_candidate_wins(self, make_molecule):
        first = Nanomachine(0, Position(1, 0, 0), 1.0)
        second = Nanomachine(1, Position(0, 1, 0), 1.0)
        molecule = make_molecule(radius=1.0, destinations=[first, second])
        assert molecule.reached_destination() is first

        molecule = make_molecule(radius=1.0, destinations=[second, first])
        assert molecule.reached_destination() is second

    def test_only_candidates_are_considered(self, make_molecule):
        other = Nanomachine(0, Position(0, 0, 0), 5.0)
        molecule = make_molecule(destinations=[])
        assert molecule.overlaps(other)
        assert molecule.reached_destination() is None


class TestMoleculeParams:
    """Tests for MoleculeParams validation."""

    def test_defaults(self):
        p = MoleculeParams(count=5)
        assert p.movement_type is MoleculeMovementType.PASSIVE
        assert p.radius == 1.0
        assert p.adaptive_change == 0

    def test_movement_type_from_string(self):
        assert MoleculeParams(count=1, movement_type="Mixed").movement_type is MoleculeMovementType.MIXED

    @pytest.mark.parametrize("kwargs", [
        {"count": -1},
        {"count": 1, "radius": 0.0},
        {"count": 1, "radius": -2.0},
        {"count": 1, "adaptive_change": -1},
    ])
    def test_rejects_bad_values(self, kwargs):
        with pytest.raises(ConfigurationError):
            MoleculeParams(**kwargs)


class TestMoleculeCreator:
    """Tests for MoleculeCreator."""

    @pytest.fixture
    def simulation(self, still_config):
        sim = Simulation(config=still_config)
        sim.add_nanomachine(create_transmitter(
            0, Position(0, 0, 0), 1.0, Position(0, 0, 0), [MoleculeParams(count=1)], still_config
        ))
        sim.add_nanomachine(create_receiver(
            1, Position(10, 0, 0), 1.0, Position(10, 0, 0), [MoleculeParams(count=1)], still_config
        ))
        return sim

    def test_batch_carries_message_and_release_point(self, simulation):
        creator = MoleculeCreator(
            MoleculeKind.INFORMATION, [MoleculeParams(count=3, radius=0.25)], Position(1, 2, 3)
        )
        batch = creator.create_molecules(CommunicationStatus.NONE, 7, simulation)

        assert len(batch) == 3
        for molecule in batch:
            assert molecule.msg_id == 7
            assert molecule.kind is MoleculeKind.INFORMATION
            assert molecule.position == Position(1, 2, 3)
            assert molecule.radius == 0.25

    def test_unique_ids(self, simulation):
        creator = MoleculeCreator(MoleculeKind.INFORMATION, [MoleculeParams(count=5)], Position(0, 0, 0))
        batch = creator.create_molecules(CommunicationStatus.NONE, 1, simulation)
        batch += creator.create_molecules(CommunicationStatus.NONE, 1, simulation)
        assert len({m.molecule_id for m in batch}) == 10

    def test_registers_with_simulation(self, simulation):
        creator = MoleculeCreator(MoleculeKind.INFORMATION, [MoleculeParams(count=2)], Position(0, 0, 0))
        batch = creator.create_molecules(CommunicationStatus.NONE, 1, simulation)
        assert simulation.pending_molecules == batch
        assert simulation.molecules_created == 2

    def test_information_goes_to_receivers(self, simulation):
        creator = MoleculeCreator(MoleculeKind.INFORMATION, [MoleculeParams(count=1)], Position(0, 0, 0))
        (molecule,) = creator.create_molecules(CommunicationStatus.NONE, 1, simulation)
        assert molecule.destinations == tuple(simulation.receivers)

    def test_acknowledgements_go_to_transmitters(self, simulation):
        creator = MoleculeCreator(MoleculeKind.ACKNOWLEDGEMENT, [MoleculeParams(count=1)], Position(0, 0, 0))
        (molecule,) = creator.create_molecules(CommunicationStatus.NONE, 1, simulation)
        assert molecule.destinations == tuple(simulation.transmitters)

    def test_adaptive_batch_size(self, simulation):
        creator = MoleculeCreator(
            MoleculeKind.INFORMATION, [MoleculeParams(count=2, adaptive_change=3)], Position(0, 0, 0)
        )
        sizes = []
        for status in [
            CommunicationStatus.NONE,
            CommunicationStatus.FAILURE,
            CommunicationStatus.FAILURE,
            CommunicationStatus.SUCCESS,
            CommunicationStatus.SUCCESS,
            CommunicationStatus.SUCCESS,
        ]:
            sizes.append(len(creator.create_molecules(status, 1, simulation)))

        assert sizes == [2, 5, 8, 5, 2, 2]

    def test_mixed_groups(self, simulation):
        creator = MoleculeCreator(
            MoleculeKind.INFORMATION,
            [
                MoleculeParams(count=2, movement_type="passive"),
                MoleculeParams(count=1, movement_type="mixed", adaptive_change=1),
            ],
            Position(0, 0, 0),
        )
        batch = creator.create_molecules(CommunicationStatus.FAILURE, 1, simulation)
        types = [m.movement_type for m in batch]
        assert types.count(MoleculeMovementType.PASSIVE) == 2
        assert types.count(MoleculeMovementType.MIXED) == 2
        assert creator.batch_sizes == [2, 2]

    def test_empty_batch(self, simulation):
        creator = MoleculeCreator(MoleculeKind.INFORMATION, [MoleculeParams(count=0)], Position(0, 0, 0))
        assert creator.create_molecules(CommunicationStatus.NONE, 1, simulation) == []
        assert simulation.molecules_created == 0
