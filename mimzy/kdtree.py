"""k-d tree over triangles, split with a surface-area heuristic over sorted bound edges."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

from mimzy.bounding_box import BoundingBox
from mimzy.ray import Hit, Ray
from mimzy.triangle import Triangle
from mimzy.vector import FLOAT_INFINITY, FLOAT_MAX, Vector3

_MAXIMUM_LEAF_PRIMITIVES = 1
_MAXIMUM_BAD_REFINES = 3


@dataclass(frozen=True)
class KDOptions:
    """Cost model used when choosing split planes."""

    intersection_cost: int = 5
    traversal_cost: int = 1
    maximum_depth: int = 8


class _EdgeType(enum.IntEnum):
    BEGIN = 0
    END = 1


class _BoundEdge(NamedTuple):
    position: float
    kind: _EdgeType
    primitive: int


@dataclass
class _Node:
    # A negative axis marks a leaf.
    axis: int = -1
    split_position: float = 0.0
    above_child: int = 0
    primitives: Tuple[int, ...] = ()

    @property
    def is_leaf(self) -> bool:
        return self.axis < 0


@dataclass
class _BuildTask:
    primitives: List[int]
    bounds: BoundingBox
    depth: int
    bad_refines: int
    parent: Optional[int] = None


@dataclass
class _PendingNode:
    index: int
    t_min: float
    t_max: float


def _classify(edges: Sequence[_BoundEdge], offset: int) -> Tuple[List[int], List[int]]:
    """Primitives that start below the split edge and those that end above it."""
    below = [edge.primitive for edge in edges[:offset] if edge.kind is _EdgeType.BEGIN]
    above = [edge.primitive for edge in edges[offset + 1 :] if edge.kind is _EdgeType.END]
    return below, above


class KDTree:
    """A binary space partition for finding the nearest triangle a ray hits."""

    def __init__(
        self, primitives: Iterable[Triangle], options: Optional[KDOptions] = None
    ) -> None:
        self._primitives = list(primitives)
        self._options = options if options is not None else KDOptions()
        self._boxes = [primitive.bounding_box() for primitive in self._primitives]
        self._bounding_box = BoundingBox()
        self._nodes: List[_Node] = []

    def build(self, depth: int) -> None:
        """Build the tree down to at most ``depth`` levels; any earlier build is discarded."""
        if depth < 0:
            raise ValueError(f"depth must not be negative, not {depth!r}")

        bounds = BoundingBox()
        for box in self._boxes:
            bounds.expand(box)
        self._bounding_box = bounds
        self._nodes = []

        tasks = [_BuildTask(list(range(len(self._primitives))), bounds, depth, 0)]
        while tasks:
            task = tasks.pop()
            index = len(self._nodes)
            node = _Node()
            self._nodes.append(node)
            if task.parent is not None:
                self._nodes[task.parent].above_child = index
            children = self._split(node, index, task)
            if children is not None:
                # The below child must take the next slot, so it is processed first.
                tasks.extend(children[::-1])

    def _split(
        self, node: _Node, index: int, task: _BuildTask
    ) -> Optional[Tuple[_BuildTask, _BuildTask]]:
        primitives = task.primitives
        count = len(primitives)
        if count <= _MAXIMUM_LEAF_PRIMITIVES or task.depth == 0:
            node.primitives = tuple(primitives)
            return None

        best_axis: Optional[int] = None
        best_offset = -1
        best_cost = FLOAT_MAX
        edges: List[_BoundEdge] = []
        for axis in range(3):
            edges = self._sorted_edges(primitives, axis)
            best_cost, best_offset = self._find_best_split_plane(edges, count, axis, task.bounds)
            if best_offset >= 0:
                best_axis = axis
                break

        leaf_cost = self._options.intersection_cost * count
        bad_refines = task.bad_refines + (1 if best_cost > leaf_cost else 0)

        if (
            (best_cost > 4 * leaf_cost and count < 16)
            or best_axis is None
            or bad_refines == _MAXIMUM_BAD_REFINES
        ):
            node.primitives = tuple(primitives)
            return None

        below, above = _classify(edges, best_offset)
        split_position = edges[best_offset].position
        bounds = task.bounds
        below_bounds = BoundingBox(
            bounds.minimum, bounds.maximum.with_component(best_axis, split_position)
        )
        above_bounds = BoundingBox(
            bounds.minimum.with_component(best_axis, split_position), bounds.maximum
        )

        node.axis = best_axis
        node.split_position = split_position
        depth = task.depth - 1
        return (
            _BuildTask(below, below_bounds, depth, bad_refines),
            _BuildTask(above, above_bounds, depth, bad_refines, parent=index),
        )

    def _sorted_edges(self, primitives: Sequence[int], axis: int) -> List[_BoundEdge]:
        edges = []
        for number in primitives:
            box = self._boxes[number]
            edges.append(_BoundEdge(box.minimum[axis], _EdgeType.BEGIN, number))
            edges.append(_BoundEdge(box.maximum[axis], _EdgeType.END, number))
        edges.sort(key=lambda edge: (edge.position, edge.kind))
        return edges

    def _find_best_split_plane(
        self, edges: Sequence[_BoundEdge], count: int, axis: int, bounds: BoundingBox
    ) -> Tuple[float, int]:
        """The cheapest split cost on this axis and its edge offset, or -1 if none."""
        best_cost = FLOAT_MAX
        best_offset = -1
        below_count = 0
        above_count = count
        total_area = bounds.surface_area()
        low, high = bounds.minimum[axis], bounds.maximum[axis]

        for offset, edge in enumerate(edges):
            if edge.kind is _EdgeType.END:
                above_count -= 1
            if low < edge.position < high:
                below_area, above_area = bounds.split_surface_areas(edge.position, axis)
                cost = (
                    self._options.traversal_cost
                    + self._options.intersection_cost
                    * (below_area * below_count + above_area * above_count)
                    / total_area
                )
                if cost < best_cost:
                    best_cost = cost
                    best_offset = offset
            if edge.kind is _EdgeType.BEGIN:
                below_count += 1

        return best_cost, best_offset

    def intersect(self, ray: Ray) -> Optional[Hit]:
        """The nearest hit along the ray, or None; an unbuilt tree hits nothing."""
        if not self._nodes:
            return None

        t_min, t_max = self._bounding_box.intersect(ray)
        if t_min == FLOAT_INFINITY:
            return None

        time = FLOAT_INFINITY
        nearest = 0
        pending: List[_PendingNode] = []
        inverse_direction = Vector3.splat(1.0) / ray.direction
        index = 0

        while True:
            node = self._nodes[index]
            if not node.is_leaf:
                axis = node.axis
                origin = ray.origin[axis]
                t_split = (node.split_position - origin) * inverse_direction[axis]
                below_first = origin < node.split_position or (
                    origin == node.split_position and ray.direction[axis] <= 0
                )
                below, above = index + 1, node.above_child
                first, second = (below, above) if below_first else (above, below)

                if t_split > t_max or t_split <= 0:
                    index = first
                elif t_split < t_min:
                    index = second
                else:
                    pending.append(_PendingNode(second, t_split, t_max))
                    index = first
                    t_max = t_split
                continue

            for number in node.primitives:
                t = self._primitives[number].intersect(ray)
                if t is not None and t < time:
                    time = t
                    nearest = number

            if not pending:
                break
            visit = pending.pop()
            index, t_min, t_max = visit.index, visit.t_min, visit.t_max

        if time == FLOAT_INFINITY:
            return None
        return Hit(ray(time), self._primitives[nearest].normal())