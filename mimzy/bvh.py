"""Bounding volume hierarchy over triangles, split with a binned surface-area heuristic."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from itertools import accumulate
from typing import Iterable, List, Optional, Sequence, Tuple

from mimzy.bounding_box import BoundingBox
from mimzy.ray import Hit, Ray
from mimzy.triangle import Triangle
from mimzy.vector import FLOAT_INFINITY, FLOAT_MAX

_LEAF_SIZE = 10
_BIN_COUNT = 8


class SplitMethod(enum.Enum):
    """Strategies for choosing where a node is split."""

    SAH = enum.auto()
    HLBVH = enum.auto()
    MIDDLE = enum.auto()


@dataclass
class _Node:
    bounding_box: BoundingBox = field(default_factory=BoundingBox)
    primitive_count: int = 0
    # Index of the first primitive slot for a leaf, of the left child otherwise.
    primitive_start: int = 0

    @property
    def is_leaf(self) -> bool:
        return self.primitive_count > 0

    @property
    def slots(self) -> range:
        return range(self.primitive_start, self.primitive_start + self.primitive_count)


def _prefix_sweep(
    counts: Sequence[int], boxes: Sequence[BoundingBox]
) -> Tuple[List[int], List[float]]:
    """Running primitive counts and running surface areas over all bins but the last."""
    totals = list(accumulate(counts[:-1]))
    running = BoundingBox()
    areas = []
    for box in boxes[:-1]:
        running.expand(box)
        areas.append(running.surface_area())
    return totals, areas


class BVH:
    """A binary tree of bounding boxes for finding the nearest triangle a ray hits."""

    def __init__(self, triangles: Iterable[Triangle]) -> None:
        self._triangles = list(triangles)
        if not self._triangles:
            raise ValueError("a BVH needs at least one triangle")
        self._bin_count = _BIN_COUNT
        self._boxes = [triangle.bounding_box() for triangle in self._triangles]
        self._centroids = [triangle.centroid() for triangle in self._triangles]
        self._indices: List[int] = []
        self._nodes: List[_Node] = []

    def build(self) -> None:
        """Build the hierarchy; any earlier build is discarded."""
        self._indices = list(range(len(self._triangles)))
        root = _Node(primitive_start=0, primitive_count=len(self._triangles))
        self._nodes = [root]
        self._update_bounds(root)
        pending = [0]
        while pending:
            children = self._split(pending.pop())
            if children is not None:
                left, right = children
                pending.extend((right, left))

    def _update_bounds(self, node: _Node) -> None:
        for slot in node.slots:
            node.bounding_box.expand(self._boxes[self._indices[slot]])

    def _split(self, node_index: int) -> Optional[Tuple[int, int]]:
        node = self._nodes[node_index]
        if node.primitive_count <= _LEAF_SIZE:
            return None
        plane = self._find_best_split_plane(node)
        if plane is None:
            return None
        axis, position = plane

        start = node.primitive_start
        members = [self._indices[slot] for slot in node.slots]
        left = [i for i in members if self._centroids[i][axis] < position]
        right = [i for i in members if not self._centroids[i][axis] < position]
        if not left or not right:
            return None
        self._indices[start : start + len(members)] = left + right

        left_node = _Node(primitive_start=start, primitive_count=len(left))
        right_node = _Node(primitive_start=start + len(left), primitive_count=len(right))
        left_index = len(self._nodes)
        self._nodes.extend((left_node, right_node))

        node.primitive_start = left_index
        node.primitive_count = 0

        self._update_bounds(left_node)
        self._update_bounds(right_node)
        return left_index, left_index + 1

    def _find_best_split_plane(self, node: _Node) -> Optional[Tuple[int, float]]:
        """The axis and position of the cheapest binned split, or None if none exists."""
        members = [self._indices[slot] for slot in node.slots]
        bounds = BoundingBox()
        for i in members:
            bounds.expand(self._centroids[i])

        bins = self._bin_count
        best_cost = FLOAT_MAX
        best: Optional[Tuple[int, float]] = None

        for axis in range(3):
            low, high = bounds.minimum[axis], bounds.maximum[axis]
            if low == high:
                continue

            counts = [0] * bins
            boxes = [BoundingBox() for _ in range(bins)]
            scale = bins / (high - low)
            for i in members:
                b = min(bins - 1, int((self._centroids[i][axis] - low) * scale))
                counts[b] += 1
                boxes[b].expand(self._boxes[i])

            left_counts, left_areas = _prefix_sweep(counts, boxes)
            right_counts, right_areas = _prefix_sweep(counts[::-1], boxes[::-1])
            right_counts.reverse()
            right_areas.reverse()

            width = (high - low) / bins
            planes = zip(left_counts, left_areas, right_counts, right_areas)
            for i, (lc, la, rc, ra) in enumerate(planes):
                cost = lc * la + rc * ra
                if cost < best_cost:
                    best_cost = cost
                    best = (axis, low + width * (i + 1))
        return best

    def intersect(self, ray: Ray) -> Optional[Hit]:
        """The nearest hit along the ray, or None; an unbuilt tree hits nothing."""
        if not self._nodes:
            return None

        time = FLOAT_INFINITY
        nearest_slot = 0
        pending: List[_Node] = []
        node = self._nodes[0]

        while True:
            if node.is_leaf:
                for slot in node.slots:
                    t = self._triangles[self._indices[slot]].intersect(ray)
                    if t is not None and t < time:
                        time = t
                        nearest_slot = slot
                if not pending:
                    break
                node = pending.pop()
                continue

            near = self._nodes[node.primitive_start]
            far = self._nodes[node.primitive_start + 1]
            d_near = near.bounding_box.intersect(ray)
            d_far = far.bounding_box.intersect(ray)
            if d_near > d_far:
                near, far = far, near
                d_near, d_far = d_far, d_near

            if d_near[0] == FLOAT_INFINITY:
                if not pending:
                    break
                node = pending.pop()
            else:
                node = near
                if d_far[0] != FLOAT_INFINITY:
                    pending.append(far)

        if time == FLOAT_INFINITY:
            return None
        triangle = self._triangles[self._indices[nearest_slot]]
        return Hit(ray(time), triangle.normal())