"""Tests for ray / triangle picking."""

import math

import numpy as np
import pytest

from planetbuilder import transforms as tf
from planetbuilder.models import NoiseMode
from planetbuilder.noise import NoiseContext
from planetbuilder.picking import (barycentric_blend, hit_point,
                                   intersect_triangles, make_ray,
                                   pick_triangle, ray_to_local,
                                   ray_triangle_intersect)
from planetbuilder.sphere import create_base_sphere
from planetbuilder.terrain import generate_terrain

TRIANGLE = np.array([[-1.0, -1.0, 0.0], [1.0, -1.0, 0.0], [0.0, 1.0, 0.0]])
FACES = np.array([[0, 1, 2]])


class TestSingleTriangle:
    def test_centroid_hit(self):
        centroid = TRIANGLE.mean(axis=0)
        ray = make_ray(centroid + [0.0, 0.0, 5.0], (0.0, 0.0, -1.0))
        hit = pick_triangle(ray, TRIANGLE, FACES)
        assert hit is not None
        assert hit.triangle == 0
        assert hit.vertex_indices == (0, 1, 2)
        assert hit.t == pytest.approx(5.0)
        assert hit.u == pytest.approx(1 / 3)
        assert hit.v == pytest.approx(1 / 3)

    def test_miss_returns_none(self):
        ray = make_ray((5.0, 5.0, 5.0), (0.0, 0.0, -1.0))
        assert pick_triangle(ray, TRIANGLE, FACES) is None

    def test_triangle_behind_origin_is_ignored(self):
        ray = make_ray((0.0, 0.0, 5.0), (0.0, 0.0, 1.0))
        assert pick_triangle(ray, TRIANGLE, FACES) is None

    def test_parallel_ray_is_ignored(self):
        assert ray_triangle_intersect((-5.0, 0.0, 0.0), (1.0, 0.0, 0.0),
                                      *TRIANGLE) is None
        _, _, _, valid = intersect_triangles((-5.0, 0.0, 0.0), (1.0, 0.0, 0.0),
                                             TRIANGLE, FACES)
        assert not valid.any()

    def test_scalar_and_vectorised_agree(self):
        origin = (0.2, -0.3, 2.0)
        direction = tf.normalize((0.05, 0.1, -1.0))
        t, u, v, valid = intersect_triangles(origin, direction, TRIANGLE, FACES)
        assert valid[0]
        expected = ray_triangle_intersect(origin, direction, *TRIANGLE)
        assert (t[0], u[0], v[0]) == pytest.approx(expected)

    def test_no_faces(self):
        ray = make_ray((0.0, 0.0, 5.0), (0.0, 0.0, -1.0))
        assert pick_triangle(ray, TRIANGLE, np.zeros((0, 3), dtype=int)) is None


class TestNearestHit:
    def test_nearest_of_stacked_triangles(self):
        far = TRIANGLE
        near = TRIANGLE + [0.0, 0.0, 2.0]
        vertices = np.vstack([far, near])
        faces = np.array([[0, 1, 2], [3, 4, 5]])
        ray = make_ray((0.0, 0.0, 5.0), (0.0, 0.0, -1.0))
        hit = pick_triangle(ray, vertices, faces)
        assert hit.triangle == 1
        assert hit.t == pytest.approx(3.0)
        assert hit.buffer_offsets == (9, 12, 15)

    def test_hit_on_sphere_is_front_face(self):
        base = create_base_sphere(16)
        terrain = generate_terrain(base, NoiseContext(seed=0),
                                   NoiseMode.COHERENT, 0.0)
        ray = make_ray((0.03, 0.02, 5.0), (0.0, 0.0, -1.0))
        hit = pick_triangle(ray, terrain.vertices, terrain.faces)
        assert hit is not None
        assert 4.0 - 1e-9 <= hit.t < 4.1
        point = hit_point(ray, hit)
        assert point[2] > 0.9


class TestHelpers:
    def test_make_ray_normalizes(self):
        ray = make_ray((0.0, 0.0, 0.0), (0.0, 3.0, 4.0))
        np.testing.assert_allclose(ray.direction, [0.0, 0.6, 0.8])

    def test_barycentric_blend_at_corners(self):
        centroid = TRIANGLE.mean(axis=0)
        ray = make_ray(centroid + [0.0, 0.0, 1.0], (0.0, 0.0, -1.0))
        hit = pick_triangle(ray, TRIANGLE, FACES)
        np.testing.assert_allclose(barycentric_blend(TRIANGLE, hit), centroid,
                                   atol=1e-12)
        np.testing.assert_allclose(hit_point(ray, hit), centroid, atol=1e-12)

    def test_ray_to_local_undoes_spin(self):
        model = tf.y_rotation(math.pi / 2)
        world = make_ray((0.0, 0.0, 4.0), (0.0, 0.0, -1.0))
        local = ray_to_local(world, model)
        # spinning the planet +90 deg about Y puts world +Z over local -X
        np.testing.assert_allclose(local.origin, [-4.0, 0.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(local.direction, [1.0, 0.0, 0.0], atol=1e-12)
