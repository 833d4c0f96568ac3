import random

import pytest

from mimzy.bvh import BVH
from mimzy.kdtree import KDOptions, KDTree
from mimzy.ray import Ray
from mimzy.triangle import Triangle
from mimzy.vector import Vector3


def _v(x, y, z):
    return Vector3(float(x), float(y), float(z))


CENTRAL = Triangle(_v(-1, -1, 0), _v(1, -1, 0), _v(0, 1, 0))
SIDE = Triangle(_v(3, -1, 0), _v(5, -1, 0), _v(4, 1, 0))
TOP = Triangle(_v(-1, -1, 0), _v(1, -1, 0), _v(0, 1, 0))
BOTTOM = Triangle(_v(-1, -1, -1), _v(1, -1, -1), _v(0, 1, -1))


def _scene(seed, count=150):
    rng = random.Random(seed)
    triangles = []
    for _ in range(count):
        centre = Vector3(rng.uniform(-1, 1), rng.uniform(-1, 1), rng.uniform(-1, 1))
        corners = [
            centre + Vector3(rng.uniform(-0.2, 0.2), rng.uniform(-0.2, 0.2), rng.uniform(-0.2, 0.2))
            for _ in range(3)
        ]
        triangles.append(Triangle(*corners))
    return triangles


def _rays(seed, count=120):
    rng = random.Random(seed)
    rays = []
    for _ in range(count):
        origin = Vector3(rng.uniform(-1.5, 1.5), rng.uniform(-1.5, 1.5), 5.0)
        target = Vector3(rng.uniform(-1.2, 1.2), rng.uniform(-1.2, 1.2), -5.0)
        rays.append(Ray(origin, (target - origin).normalized()))
    return rays


def _nearest_position(triangles, ray):
    times = [t for t in (tri.intersect(ray) for tri in triangles) if t is not None]
    return ray(min(times)) if times else None


def _assert_same_hit(hit, expected_position):
    if expected_position is None:
        assert hit is None
    else:
        assert hit is not None
        assert tuple(hit.position) == pytest.approx(tuple(expected_position))


def test_hit_on_first_of_two_separate_triangles():
    tree = KDTree([CENTRAL, SIDE])
    tree.build(8)
    hit = tree.intersect(Ray(_v(0, 0, 5), _v(0, 0, -1)))
    assert hit is not None
    assert tuple(hit.position) == pytest.approx((0.0, 0.0, 0.0))
    assert tuple(hit.normal) == pytest.approx((0.0, 0.0, 1.0))


def test_hit_on_second_of_two_separate_triangles():
    tree = KDTree([CENTRAL, SIDE])
    tree.build(8)
    ray = Ray(_v(4, 0, 5), _v(0, 0, -1))
    hit = tree.intersect(ray)
    assert hit is not None
    assert tuple(hit.position) == pytest.approx((4.0, 0.0, 0.0))
    assert hit.normal == SIDE.normal()


def test_gap_between_triangles_is_a_miss():
    tree = KDTree([CENTRAL, SIDE])
    tree.build(8)
    assert tree.intersect(Ray(_v(2, 0, 5), _v(0, 0, -1))) is None


def test_ray_pointing_away_misses():
    tree = KDTree([CENTRAL, SIDE])
    tree.build(8)
    assert tree.intersect(Ray(_v(0, 0, 5), _v(0, 0, 1))) is None


def test_ray_parallel_outside_box_misses():
    tree = KDTree([CENTRAL, SIDE])
    tree.build(8)
    assert tree.intersect(Ray(_v(0, 0, 5), _v(1, 0, 0))) is None


def test_nearest_of_stacked_triangles_from_above():
    tree = KDTree([BOTTOM, TOP])
    tree.build(8)
    hit = tree.intersect(Ray(_v(0, 0, 5), _v(0, 0, -1)))
    assert hit is not None
    assert hit.position.z == pytest.approx(0.0)
    assert hit.normal == TOP.normal()


def test_nearest_of_stacked_triangles_from_below():
    tree = KDTree([TOP, BOTTOM])
    tree.build(8)
    hit = tree.intersect(Ray(_v(0, 0, -5), _v(0, 0, 1)))
    assert hit is not None
    assert hit.position.z == pytest.approx(-1.0)
    assert hit.normal == BOTTOM.normal()


def test_unbuilt_tree_hits_nothing():
    tree = KDTree([CENTRAL])
    assert tree.intersect(Ray(_v(0, 0, 5), _v(0, 0, -1))) is None


def test_empty_tree_hits_nothing():
    tree = KDTree([])
    tree.build(8)
    assert tree.intersect(Ray(_v(0, 0, 5), _v(0, 0, -1))) is None


def test_negative_depth_is_rejected():
    tree = KDTree([CENTRAL])
    with pytest.raises(ValueError):
        tree.build(-1)


@pytest.mark.parametrize("depth", [0, 1, 4, 8, 16])
def test_random_scene_matches_exhaustive_search(depth):
    triangles = _scene(7)
    tree = KDTree(triangles)
    tree.build(depth)
    rays = _rays(11)
    hits = 0
    for ray in rays:
        expected = _nearest_position(triangles, ray)
        hits += expected is not None
        _assert_same_hit(tree.intersect(ray), expected)
    assert hits > 0


def test_random_scene_matches_bvh():
    triangles = _scene(3, count=300)
    tree = KDTree(triangles)
    tree.build(8)
    bvh = BVH(triangles)
    bvh.build()
    for ray in _rays(5):
        expected = bvh.intersect(ray)
        _assert_same_hit(tree.intersect(ray), None if expected is None else expected.position)


def test_custom_costs_give_same_hits():
    triangles = _scene(21)
    default_tree = KDTree(triangles)
    default_tree.build(8)
    costly = KDTree(triangles, KDOptions(intersection_cost=1, traversal_cost=50))
    costly.build(8)
    for ray in _rays(22):
        first = default_tree.intersect(ray)
        second = costly.intersect(ray)
        assert (first is None) == (second is None)
        if first is not None:
            assert tuple(first.position) == pytest.approx(tuple(second.position))


def test_rebuilding_keeps_results():
    triangles = _scene(31)
    tree = KDTree(triangles)
    tree.build(8)
    rays = _rays(32)
    before = [tree.intersect(ray) for ray in rays]
    tree.build(3)
    after = [tree.intersect(ray) for ray in rays]
    for first, second in zip(before, after):
        assert (first is None) == (second is None)
        if first is not None:
            assert tuple(first.position) == pytest.approx(tuple(second.position))


def test_hit_normal_belongs_to_a_scene_triangle():
    triangles = _scene(41)
    tree = KDTree(triangles)
    tree.build(8)
    normals = {tri.normal() for tri in triangles}
    found = [tree.intersect(ray) for ray in _rays(42)]
    found = [hit for hit in found if hit is not None]
    assert found
    assert all(hit.normal in normals for hit in found)