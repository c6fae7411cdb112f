"""
Microtubule: a fixed track that active-capable molecules can ride.

A microtubule is a line segment with thickness, running from its minus end
(`start`) to its plus end (`end`). Molecules bound to it walk towards the
plus end at a constant step length and stay there once they arrive.
"""

from __future__ import annotations

from molcomsim.core.config import ConfigurationError, require_positive
from molcomsim.core.position import Position


class Microtubule:
    """A straight transport track between two points."""

    def __init__(self, start: Position, end: Position, radius: float):
        if not (start.is_finite() and end.is_finite()):
            raise ConfigurationError("Microtubule end points must be finite")
        if start == end:
            raise ConfigurationError("Microtubule start and end must differ")
        require_positive("microtubule radius", radius)

        self.start = start
        self.end = end
        self.radius = float(radius)

        self._axis = end - start
        self.length = self._axis.norm()
        self._unit = self._axis * (1.0 / self.length)

    def project(self, position: Position) -> float:
        """Arc length of the closest point on the track, clamped to [0, length]."""
        t = (position - self.start).dot(self._unit)
        return min(max(t, 0.0), self.length)

    def point_at(self, arc_length: float) -> Position:
        return self.start + self._unit * arc_length

    def distance_to(self, position: Position) -> float:
        """Distance from a point to the track's centre line."""
        return position.distance_to(self.point_at(self.project(position)))

    def overlaps(self, position: Position, radius: float) -> bool:
        """True if a sphere at `position` touches the track (strict)."""
        return self.distance_to(position) < self.radius + radius

    def advance(self, position: Position, step: float) -> Position:
        """
        Next point along the track.

        The position is first snapped onto the centre line, then moved `step`
        towards the plus end. Positions at the plus end stay there.
        """
        return self.point_at(min(self.project(position) + step, self.length))

    def __repr__(self) -> str:
        return f"Microtubule(start={self.start}, end={self.end}, radius={self.radius})"
