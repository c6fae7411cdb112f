"""
Run configuration for the simulation engine.

Everything the protocol and movement layers need from the outside world:
message count, retry budget, timeout length, diffusive step scale and the
acknowledgement switch. Values are checked once, here, so the engine never
has to deal with a non-physical setting mid-run.
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Any

import numpy as np


class ConfigurationError(ValueError):
    """Raised when a simulation is set up with non-physical values."""


def require_positive(name: str, value: float) -> None:
    """Reject zero, negative or non-finite values."""
    if not np.isfinite(value) or value <= 0:
        raise ConfigurationError(f"{name} must be a positive finite number, got {value!r}")


def require_non_negative(name: str, value: float) -> None:
    if not np.isfinite(value) or value < 0:
        raise ConfigurationError(f"{name} must be a non-negative finite number, got {value!r}")


def require_count(name: str, value: Any, minimum: int = 1) -> int:
    """Return `value` as an int, rejecting fractions, non-numbers and values below `minimum`."""
    try:
        as_int = int(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ConfigurationError(f"{name} must be an integer >= {minimum}, got {value!r}") from exc
    if as_int != value or as_int < minimum:
        raise ConfigurationError(f"{name} must be an integer >= {minimum}, got {value!r}")
    return as_int


@dataclass
class SimulationConfig:
    """Configuration for one simulation run."""

    num_messages: int = 1  # Messages the transmitter must get across
    num_retransmissions: int = 3  # Retransmission credits per message
    retransmit_wait_time: int = 100  # Ticks before a silent batch is retried
    random_move: tuple[float, float, float] = (1.0, 1.0, 1.0)  # Diffusive step scale per axis
    use_acknowledgements: bool = True
    active_step_length: float = 1.0  # Distance travelled per tick along a microtubule
    max_num_steps: int = 100_000  # Hard stop for a run
    seed: int | None = None  # Seed for the random-move source

    def __post_init__(self):
        self.num_messages = require_count("num_messages", self.num_messages)
        self.num_retransmissions = require_count("num_retransmissions", self.num_retransmissions)
        self.retransmit_wait_time = require_count("retransmit_wait_time", self.retransmit_wait_time)
        self.max_num_steps = require_count("max_num_steps", self.max_num_steps)

        try:
            move = tuple(float(v) for v in self.random_move)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"random_move must be 3 numbers, got {self.random_move!r}"
            ) from exc
        if len(move) != 3:
            raise ConfigurationError(f"random_move needs 3 components, got {len(move)}")
        for axis, value in zip("xyz", move):
            require_non_negative(f"random_move.{axis}", value)
        self.random_move = move

        try:
            step = float(self.active_step_length)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"active_step_length must be a number, got {self.active_step_length!r}"
            ) from exc
        require_positive("active_step_length", step)
        self.active_step_length = step

        # Strings such as "false" would otherwise read as True
        if not isinstance(self.use_acknowledgements, (bool, np.bool_)):
            raise ConfigurationError(
                f"use_acknowledgements must be a boolean, got {self.use_acknowledgements!r}"
            )
        self.use_acknowledgements = bool(self.use_acknowledgements)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SimulationConfig:
        """
        Build a config from a plain mapping (e.g. parsed JSON).

        Unknown keys are rejected rather than silently ignored.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown simulation settings: {sorted(unknown)}")
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
