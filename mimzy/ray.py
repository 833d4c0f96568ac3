"""Rays and ray hits."""

from __future__ import annotations

from dataclasses import dataclass

from mimzy.vector import Vector3


@dataclass(frozen=True)
class Hit:
    """Where a ray struck a surface, and the surface normal there."""

    position: Vector3
    normal: Vector3


@dataclass
class Ray:
    """A half-line given by an origin and a direction."""

    origin: Vector3 = Vector3(0.0, 0.0, 0.0)
    direction: Vector3 = Vector3(0.0, 0.0, 0.0)

    def __call__(self, t: float) -> Vector3:
        """The point at parameter ``t`` along the ray."""
        return self.origin + self.direction * t