"""
Position: an immutable point (or displacement) in 3-D space.
"""

from __future__ import annotations
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Position:
    """A point in the simulation medium."""

    x: float
    y: float
    z: float = 0.0

    def __add__(self, other: Position) -> Position:
        return Position(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Position) -> Position:
        return Position(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scale: float) -> Position:
        return Position(self.x * scale, self.y * scale, self.z * scale)

    __rmul__ = __mul__

    def norm(self) -> float:
        """Euclidean length of this position read as a vector."""
        return float(np.sqrt(self.x**2 + self.y**2 + self.z**2))

    def distance_to(self, other: Position) -> float:
        """Euclidean distance to another position."""
        return (self - other).norm()

    def dot(self, other: Position) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.as_array())))

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, values) -> Position:
        """Build a Position from any length-2 or length-3 sequence."""
        coords = [float(v) for v in values]
        if len(coords) == 2:
            coords.append(0.0)
        if len(coords) != 3:
            raise ValueError(f"Expected 2 or 3 coordinates, got {len(coords)}")
        return cls(*coords)


ORIGIN = Position(0.0, 0.0, 0.0)


def distance(a: Position, b: Position) -> float:
    """Euclidean norm of (a - b)."""
    return a.distance_to(b)
