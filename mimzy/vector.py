"""Three-component vectors and the floating-point limits used by the geometry code."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import Iterator, Tuple, Union

FLOAT_INFINITY = math.inf
FLOAT_MAX = sys.float_info.max
FLOAT_LOWEST = -sys.float_info.max
EPSILON = 1e-12

_Components = Tuple[float, float, float]


def ieee_divide(numerator: float, denominator: float) -> float:
    """Divide with IEEE 754 semantics: a zero denominator gives an infinity or NaN."""
    if denominator != 0 or math.isnan(denominator):
        return numerator / denominator
    if numerator == 0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


@dataclass(frozen=True)
class Vector3:
    """An immutable vector, point or normal in three dimensions."""

    x: float
    y: float
    z: float

    @classmethod
    def splat(cls, value: float) -> Vector3:
        """A vector with every component set to ``value``."""
        return cls(value, value, value)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __getitem__(self, axis: int) -> float:
        if axis == 0:
            return self.x
        if axis == 1:
            return self.y
        if axis == 2:
            return self.z
        raise IndexError(f"axis must be 0, 1 or 2, not {axis!r}")

    @staticmethod
    def _components(value: object) -> _Components | None:
        if isinstance(value, Vector3):
            return (value.x, value.y, value.z)
        if isinstance(value, (int, float)):
            return (value, value, value)
        return None

    def __add__(self, other: Union[Vector3, float]) -> Vector3:
        parts = self._components(other)
        if parts is None:
            return NotImplemented
        return Vector3(*(a + b for a, b in zip(self, parts)))

    def __radd__(self, other: float) -> Vector3:
        return self.__add__(other)

    def __sub__(self, other: Union[Vector3, float]) -> Vector3:
        parts = self._components(other)
        if parts is None:
            return NotImplemented
        return Vector3(*(a - b for a, b in zip(self, parts)))

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __mul__(self, other: Union[Vector3, float]) -> Vector3:
        parts = self._components(other)
        if parts is None:
            return NotImplemented
        return Vector3(*(a * b for a, b in zip(self, parts)))

    def __rmul__(self, other: Union[Vector3, float]) -> Vector3:
        return self.__mul__(other)

    def __truediv__(self, other: Union[Vector3, float]) -> Vector3:
        parts = self._components(other)
        if parts is None:
            return NotImplemented
        return Vector3(*(ieee_divide(a, b) for a, b in zip(self, parts)))

    def __rtruediv__(self, other: Union[Vector3, float]) -> Vector3:
        parts = self._components(other)
        if parts is None:
            return NotImplemented
        return Vector3(*(ieee_divide(a, b) for a, b in zip(parts, self)))

    def with_component(self, axis: int, value: float) -> Vector3:
        """A copy of this vector with one component replaced."""
        parts = list(self)
        if axis not in (0, 1, 2):
            raise IndexError(f"axis must be 0, 1 or 2, not {axis!r}")
        parts[axis] = value
        return Vector3(*parts)

    def dot(self, other: Vector3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def normalized(self) -> Vector3:
        """This vector scaled to unit length; a zero vector gives NaN components."""
        return self / self.length()

    def minimum(self, other: Vector3) -> Vector3:
        """Component-wise minimum."""
        return Vector3(*(min(a, b) for a, b in zip(self, other)))

    def maximum(self, other: Vector3) -> Vector3:
        """Component-wise maximum."""
        return Vector3(*(max(a, b) for a, b in zip(self, other)))