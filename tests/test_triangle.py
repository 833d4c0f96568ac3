import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from mimzy.ray import Ray
from mimzy.triangle import Triangle
from mimzy.vector import Vector3

ints = st.integers(-50, 50)
points = st.builds(Vector3, ints, ints, ints)
non_degenerate = st.tuples(points, points, points).filter(
    lambda t: (t[1] - t[0]).cross(t[2] - t[0]) != Vector3.splat(0)
)

FLAT = Triangle(Vector3(0, 0, 0), Vector3(1, 0, 0), Vector3(0, 1, 0))


def test_centroid_of_simple_triangle():
    tri = Triangle(Vector3(0, 0, 0), Vector3(3, 0, 0), Vector3(0, 3, 6))
    assert tri.centroid() == Vector3(1, 1, 2)


@given(points, points, points, points)
def test_centroid_follows_translation(a, b, c, shift):
    moved = Triangle(a + shift, b + shift, c + shift)
    original = Triangle(a, b, c)
    assert tuple(moved.centroid()) == pytest.approx(tuple(original.centroid() + shift))


def test_bounding_box_spans_vertices():
    tri = Triangle(Vector3(3, -1, 2), Vector3(-4, 5, 0), Vector3(1, 2, -6))
    box = tri.bounding_box()
    assert box.minimum == Vector3(-4, -1, -6)
    assert box.maximum == Vector3(3, 5, 2)


@given(points, points, points)
def test_bounding_box_contains_centroid(a, b, c):
    tri = Triangle(a, b, c)
    box = tri.bounding_box()
    centroid = tri.centroid()
    for axis in range(3):
        assert box.minimum[axis] <= centroid[axis] + 1e-9
        assert centroid[axis] <= box.maximum[axis] + 1e-9


def test_counter_clockwise_normal_points_up():
    assert FLAT.normal() == Vector3(0, 0, 1)


@given(non_degenerate)
def test_normal_is_unit_and_orthogonal(vertices):
    a, b, c = vertices
    tri = Triangle(a, b, c)
    n = tri.normal()
    assert n.length() == pytest.approx(1.0)
    assert n.dot(b - a) == pytest.approx(0.0, abs=1e-9)
    assert n.dot(c - a) == pytest.approx(0.0, abs=1e-9)


def test_degenerate_triangle_normal_is_nan():
    tri = Triangle(Vector3(0, 0, 0), Vector3(1, 1, 1), Vector3(2, 2, 2))
    n = tri.normal()
    assert [math.isnan(c) for c in n] == [True, True, True]


def test_ray_hits_inside():
    ray = Ray(Vector3(0.25, 0.25, 2.0), Vector3(0.0, 0.0, -1.0))
    t = FLAT.intersect(ray)
    assert t is not None and t > 0
    assert tuple(ray(t)) == pytest.approx((0.25, 0.25, 0.0))


def test_ray_outside_misses():
    assert FLAT.intersect(Ray(Vector3(1.0, 1.0, 2.0), Vector3(0.0, 0.0, -1.0))) is None


def test_parallel_ray_misses():
    assert FLAT.intersect(Ray(Vector3(0.2, 0.2, 0.0), Vector3(1.0, 0.0, 0.0))) is None


def test_triangle_behind_origin_gives_negative_parameter():
    ray = Ray(Vector3(0.25, 0.25, -2.0), Vector3(0.0, 0.0, -1.0))
    t = FLAT.intersect(ray)
    assert t is not None and t < 0
    assert ray(t).z == pytest.approx(0.0)


def test_hit_on_edge_counts():
    ray = Ray(Vector3(0.0, 0.5, 1.0), Vector3(0.0, 0.0, -1.0))
    t = FLAT.intersect(ray)
    assert t is not None
    assert tuple(ray(t)) == pytest.approx((0.0, 0.5, 0.0))


@given(st.floats(0.01, 0.49), st.floats(0.01, 0.49), st.floats(0.5, 10.0))
def test_ray_toward_interior_point_hits_it(u, v, distance):
    tri = Triangle(Vector3(1, 2, 3), Vector3(4, 2, 5), Vector3(2, 6, 1))
    target = tri.p0 + (tri.p1 - tri.p0) * u + (tri.p2 - tri.p0) * v
    normal = tri.normal()
    ray = Ray(target + normal * distance, -normal)
    t = tri.intersect(ray)
    assert t is not None
    assert t == pytest.approx(distance)
    assert tuple(ray(t)) == pytest.approx(tuple(target))