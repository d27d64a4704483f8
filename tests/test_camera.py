"""Tests for the orbit camera."""

import numpy as np
import pytest

from planetbuilder.camera import Camera


class TestCamera:
    def test_center_ray_points_at_target(self):
        ray = Camera().ray_from_ndc(0.0, 0.0)
        np.testing.assert_allclose(ray.origin, [0.0, 0.0, 3.9], atol=1e-9)
        np.testing.assert_allclose(ray.direction, [0.0, 0.0, -1.0], atol=1e-9)

    def test_off_center_ray_diverges(self):
        ray = Camera().ray_from_ndc(0.5, -0.5)
        assert ray.direction[0] > 0
        assert ray.direction[1] < 0
        assert np.linalg.norm(ray.direction) == pytest.approx(1.0)

    def test_pixel_center_matches_ndc_origin(self):
        cam = Camera(aspect=2.0)
        a = cam.ray_from_pixel(400, 200, 800, 400)
        b = cam.ray_from_ndc(0.0, 0.0)
        np.testing.assert_allclose(a.direction, b.direction, atol=1e-12)

    def test_view_projection_maps_target_to_center(self):
        vp = Camera().view_projection
        clip = vp @ np.array([0.0, 0.0, 0.0, 1.0])
        ndc = clip[:3] / clip[3]
        np.testing.assert_allclose(ndc[:2], [0.0, 0.0], atol=1e-12)
        assert -1.0 < ndc[2] < 1.0

    def test_empty_viewport_rejected(self):
        cam = Camera()
        with pytest.raises(ValueError):
            cam.ray_from_pixel(10, 10, 0, 400)
        with pytest.raises(ValueError):
            cam.ray_from_pixel(10, 10, 800, 0)

    def test_wide_viewport_spreads_rays_horizontally(self):
        square = Camera().ray_from_ndc(0.5, 0.0)
        wide = Camera(aspect=2.0).ray_from_ndc(0.5, 0.0)
        assert wide.direction[0] > square.direction[0]
