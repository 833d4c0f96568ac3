"""Axis-aligned bounding boxes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple, Union

from mimzy.ray import Ray
from mimzy.vector import FLOAT_INFINITY, FLOAT_LOWEST, FLOAT_MAX, Vector3


def box_vertices(minimum: Vector3, maximum: Vector3) -> List[Vector3]:
    """The eight corners of the box spanned by two opposite corners."""
    return [
        Vector3(minimum.x, minimum.y, maximum.z),
        Vector3(maximum.x, minimum.y, maximum.z),
        Vector3(maximum.x, maximum.y, maximum.z),
        Vector3(minimum.x, maximum.y, maximum.z),
        Vector3(minimum.x, minimum.y, minimum.z),
        Vector3(maximum.x, minimum.y, minimum.z),
        Vector3(maximum.x, maximum.y, minimum.z),
        Vector3(minimum.x, maximum.y, minimum.z),
    ]


def _faces_area(extent: Vector3) -> float:
    return 2 * (extent.x * extent.y + extent.y * extent.z + extent.z * extent.x)


@dataclass
class BoundingBox:
    """An axis-aligned box; the default box is empty and grows with ``expand``."""

    minimum: Vector3 = Vector3.splat(FLOAT_MAX)
    maximum: Vector3 = Vector3.splat(FLOAT_LOWEST)

    @classmethod
    def from_points(cls, p1: Vector3, p2: Vector3) -> BoundingBox:
        """The box with ``p1`` and ``p2`` as opposite corners, in any order."""
        return cls(p1.minimum(p2), p1.maximum(p2))

    def expand(self, other: Union[Vector3, BoundingBox]) -> None:
        """Grow this box to enclose a point or another box."""
        if isinstance(other, BoundingBox):
            self.minimum = self.minimum.minimum(other.minimum)
            self.maximum = self.maximum.maximum(other.maximum)
        else:
            self.minimum = self.minimum.minimum(other)
            self.maximum = self.maximum.maximum(other)

    def extent(self) -> Vector3:
        return self.maximum - self.minimum

    def maximum_extent(self) -> int:
        """The axis along which the box is longest; ties go to the later axis."""
        extent = self.extent()
        if extent.x > extent.y and extent.x > extent.z:
            return 0
        if extent.y > extent.z:
            return 1
        return 2

    def surface_area(self) -> float:
        return _faces_area(self.extent())

    def split_surface_areas(self, offset: float, axis: int) -> Tuple[float, float]:
        """Surface areas of the two halves made by a plane at ``offset`` on ``axis``."""
        extent = self.extent()
        below = _faces_area(extent.with_component(axis, offset - self.minimum[axis]))
        above = _faces_area(extent.with_component(axis, self.maximum[axis] - offset))
        return below, above

    def volume(self) -> float:
        extent = self.extent()
        return extent.x * extent.y * extent.z

    def intersect(self, ray: Ray) -> Tuple[float, float]:
        """Entry and exit parameters of the ray, or two infinities on a miss."""
        t0 = (self.minimum - ray.origin) / ray.direction
        t1 = (self.maximum - ray.origin) / ray.direction
        near = t0.minimum(t1)
        far = t0.maximum(t1)
        t_min = max(near.x, near.y, near.z)
        t_max = min(far.x, far.y, far.z)
        if t_min > t_max or t_max < 0.0:
            return FLOAT_INFINITY, FLOAT_INFINITY
        return t_min, t_max

    def vertices(self) -> List[Vector3]:
        """The eight corners of the box."""
        return box_vertices(self.minimum, self.maximum)