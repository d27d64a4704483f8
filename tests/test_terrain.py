"""Tests for radial displacement and surface classification."""

import numpy as np
import pytest

from planetbuilder.models import NoiseMode, Terrain
from planetbuilder.noise import NoiseContext
from planetbuilder.sphere import create_base_sphere
from planetbuilder.terrain import (BEACH, LAND, SEA, build_terrain_mesh,
                                   classify_surface, generate_terrain,
                                   land_fraction, surface_colors)


class TestDisplacement:
    """Displacement along the radial direction."""

    @pytest.mark.parametrize("mode", list(NoiseMode))
    def test_radius_is_one_plus_noise_times_height(self, noise_ctx, mode):
        base = create_base_sphere(10)
        terrain = generate_terrain(base, noise_ctx, mode, 0.45)
        radius = np.linalg.norm(terrain.vertices, axis=1)
        np.testing.assert_allclose(radius, 1.0 + terrain.noise * 0.45,
                                   atol=1e-12)

    def test_normals_are_undisplaced_directions(self, noise_ctx):
        base = create_base_sphere(10)
        terrain = generate_terrain(base, noise_ctx, NoiseMode.COHERENT, 0.45)
        expected = base.vertices / np.linalg.norm(base.vertices, axis=1,
                                                  keepdims=True)
        np.testing.assert_array_equal(terrain.normals, expected)

    def test_zero_height_keeps_base_positions(self, noise_ctx):
        base = create_base_sphere(4)
        terrain = generate_terrain(base, noise_ctx, NoiseMode.UNCORRELATED, 0.0)
        np.testing.assert_array_equal(terrain.vertices, base.vertices)

    def test_negative_height_inverts_bumps(self):
        base = create_base_sphere(8)
        up = generate_terrain(base, NoiseContext(seed=4), NoiseMode.COHERENT, 0.3)
        down = generate_terrain(base, NoiseContext(seed=4), NoiseMode.COHERENT, -0.3)
        np.testing.assert_allclose(down.heights, -up.heights, atol=1e-12)

    def test_coherent_samples_at_double_frequency(self, noise_ctx):
        base = create_base_sphere(6)
        terrain = generate_terrain(base, noise_ctx, NoiseMode.COHERENT, 0.2)
        np.testing.assert_array_equal(
            terrain.noise, noise_ctx.perlin_points(base.vertices * 2.0))

    def test_uncorrelated_noise_range(self, noise_ctx):
        base = create_base_sphere(20)
        terrain = generate_terrain(base, noise_ctx, NoiseMode.UNCORRELATED, 1.0)
        assert terrain.noise.min() >= -0.35
        assert terrain.noise.max() < 0.35

    def test_faces_shared_with_base(self, terrain):
        assert terrain.triangle_count == 2 * 8 * 8
        assert terrain.vertex_count == 9 * 8


class TestBuffers:
    def test_flat_buffers(self, terrain):
        positions, normals, indices = terrain.buffers()
        assert positions.dtype == np.float32
        assert normals.dtype == np.float32
        assert indices.dtype == np.uint32
        assert len(positions) == 3 * terrain.vertex_count
        assert len(normals) == 3 * terrain.vertex_count
        assert len(indices) == 3 * terrain.triangle_count

    def test_mismatched_normals_rejected(self):
        with pytest.raises(ValueError):
            Terrain(vertices=np.zeros((3, 3)), normals=np.zeros((2, 3)),
                    faces=[[0, 1, 2]], noise=np.zeros(3))


class TestSurfaceClasses:
    def test_classification_bands(self, terrain):
        classes = classify_surface(terrain, sea_level=0.0)
        heights = terrain.heights
        assert (heights[classes == SEA] < 0.0).all()
        beach = heights[classes == BEACH]
        assert ((beach >= 0.0) & (beach < 0.05)).all()
        assert (heights[classes == LAND] >= 0.05).all()

    def test_land_fraction_extremes(self, terrain):
        assert land_fraction(terrain, -1.0) == 1.0
        assert land_fraction(terrain, 1.0) == 0.0

    def test_colors_and_mesh(self, terrain):
        colors = surface_colors(terrain, 0.0)
        assert colors.shape == (terrain.vertex_count, 4)
        assert colors.dtype == np.uint8

        mesh = build_terrain_mesh(terrain, 0.0)
        assert len(mesh.vertices) == terrain.vertex_count
        assert len(mesh.faces) == terrain.triangle_count
