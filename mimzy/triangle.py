"""Triangles and ray-triangle intersection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from mimzy.bounding_box import BoundingBox
from mimzy.ray import Ray
from mimzy.vector import EPSILON, Vector3


@dataclass(frozen=True)
class Triangle:
    """A triangle given by its three corners."""

    p0: Vector3
    p1: Vector3
    p2: Vector3

    def bounding_box(self) -> BoundingBox:
        minimum = self.p0.minimum(self.p1.minimum(self.p2))
        maximum = self.p0.maximum(self.p1.maximum(self.p2))
        return BoundingBox.from_points(minimum, maximum)

    def centroid(self) -> Vector3:
        return (self.p0 + self.p1 + self.p2) / 3

    def normal(self) -> Vector3:
        """Unit normal, oriented by the winding p0, p1, p2."""
        return (self.p1 - self.p0).cross(self.p2 - self.p0).normalized()

    def intersect(self, ray: Ray) -> Optional[float]:
        """Ray parameter of the hit point, or None if the ray's line misses.

        The parameter may be negative when the triangle lies behind the origin.
        """
        edge1 = self.p1 - self.p0
        edge2 = self.p2 - self.p0
        h = ray.direction.cross(edge2)
        a = edge1.dot(h)
        if -EPSILON < a < EPSILON:
            return None
        f = 1 / a
        s = ray.origin - self.p0
        u = f * s.dot(h)
        if u < 0 or u > 1:
            return None
        q = s.cross(edge1)
        v = f * ray.direction.dot(q)
        if v < 0 or u + v > 1:
            return None
        return f * edge2.dot(q)