"""
Pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def still_config():
    """Acknowledged run where diffusion is switched off (fully deterministic)."""
    from molcomsim.core import SimulationConfig
    return SimulationConfig(
        num_messages=2,
        num_retransmissions=2,
        retransmit_wait_time=10,
        random_move=(0.0, 0.0, 0.0),
        use_acknowledgements=True,
        max_num_steps=1000,
        seed=0,
    )


@pytest.fixture
def make_molecule():
    """Factory for hand-built molecules that are not tied to a creator."""
    from molcomsim.core import (
        DiffusiveMovement,
        IgnoreTracks,
        Molecule,
        MoleculeKind,
        MoleculeMovementType,
        Position,
        TrackCapture,
    )

    def _make(
        position=(0.0, 0.0, 0.0),
        radius=0.5,
        msg_id=1,
        kind=MoleculeKind.INFORMATION,
        movement_type=MoleculeMovementType.PASSIVE,
        destinations=(),
    ):
        policy = TrackCapture() if movement_type.active_capable else IgnoreTracks()
        return Molecule(
            molecule_id=0,
            kind=kind,
            msg_id=msg_id,
            radius=radius,
            position=Position(*position),
            movement=DiffusiveMovement(),
            collision_policy=policy,
            destinations=tuple(destinations),
            movement_type=movement_type,
        )

    return _make


@pytest.fixture
def rng():
    """Reproducible random number generator."""
    return np.random.default_rng(seed=42)
