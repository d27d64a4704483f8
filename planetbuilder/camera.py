"""Orbit camera and screen-to-world ray construction."""

from dataclasses import dataclass

import numpy as np

from . import transforms as tf
from .constants import (CAMERA_EYE, CAMERA_TARGET, CAMERA_UP, CAMERA_FOV_Y,
                        CAMERA_NEAR, CAMERA_FAR)
from .picking import make_ray
from .models import Ray


@dataclass
class Camera:
    eye: tuple = CAMERA_EYE
    target: tuple = CAMERA_TARGET
    up: tuple = CAMERA_UP
    fov_y: float = CAMERA_FOV_Y
    near: float = CAMERA_NEAR
    far: float = CAMERA_FAR
    aspect: float = 1.0

    @property
    def camera_matrix(self) -> np.ndarray:
        return tf.look_at(self.eye, self.target, self.up)

    @property
    def view(self) -> np.ndarray:
        return tf.inverse(self.camera_matrix)

    @property
    def projection(self) -> np.ndarray:
        return tf.perspective(self.fov_y, self.aspect, self.near, self.far)

    @property
    def view_projection(self) -> np.ndarray:
        return tf.multiply(self.projection, self.view)

    def ray_from_ndc(self, x: float, y: float) -> Ray:
        """World ray through normalized device coords (x, y) in [-1, 1]."""
        inv_vp = tf.inverse(self.view_projection)
        near_pt = tf.transform_point(inv_vp, (x, y, -1.0))
        far_pt = tf.transform_point(inv_vp, (x, y, 1.0))
        return make_ray(near_pt, far_pt - near_pt)

    def ray_from_pixel(self, px: float, py: float, width: int, height: int) -> Ray:
        """World ray through a pixel (origin top-left, y down)."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Viewport must be non-empty, got {width}x{height}")
        x = (px / width) * 2.0 - 1.0
        y = 1.0 - (py / height) * 2.0
        return self.ray_from_ndc(x, y)
