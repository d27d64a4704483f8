"""Rotation that stands a Y-up model on a surface normal."""

import math

import numpy as np

from . import transforms as tf
from .constants import NORMALIZE_EPSILON

UP = np.array([0.0, 1.0, 0.0])

# Below this |cross(up, n)| the axis cannot be normalized; treat n as parallel to up
_PARALLEL_EPSILON = NORMALIZE_EPSILON


def align_to_normal(normal) -> np.ndarray:
    """4x4 rotation mapping the +Y axis onto *normal* (normalized here).

    For ``normal ~ +Y`` the identity is returned; for ``normal ~ -Y`` a
    half turn about +X, since the cross product gives no usable axis there.
    """
    n = tf.normalize(normal)
    cos_angle = min(1.0, max(-1.0, float(np.dot(UP, n))))
    axis = np.cross(UP, n)

    if np.linalg.norm(axis) < _PARALLEL_EPSILON:
        if cos_angle > 0:
            return tf.identity()
        return tf.x_rotation(math.pi)

    return tf.axis_rotation(axis, math.acos(cos_angle))
