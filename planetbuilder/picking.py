"""Ray / triangle-mesh intersection for interactive prop placement."""

import logging
from typing import Optional

import numpy as np

from . import transforms as tf
from .constants import RAY_EPSILON
from .models import Ray, RayHit

logger = logging.getLogger(__name__)


def make_ray(origin, direction) -> Ray:
    """Ray with a normalized direction; raises DegenerateVector for zero."""
    return Ray(origin=tuple(tf.as_vector(origin)),
               direction=tuple(tf.normalize(direction)))


def ray_triangle_intersect(origin, direction, v0, v1, v2, eps=RAY_EPSILON):
    """Möller-Trumbore test against one triangle.

    Returns ``(t, u, v)`` for a hit in front of the origin, else None.
    """
    o = tf.as_vector(origin)
    d = tf.as_vector(direction)
    v0 = tf.as_vector(v0)
    e1 = tf.as_vector(v1) - v0
    e2 = tf.as_vector(v2) - v0

    h = np.cross(d, e2)
    a = np.dot(e1, h)
    if abs(a) < eps:
        return None     # parallel to the triangle plane

    f = 1.0 / a
    s = o - v0
    u = f * np.dot(s, h)
    if u < 0.0 or u > 1.0:
        return None

    q = np.cross(s, e1)
    v = f * np.dot(d, q)
    if v < 0.0 or u + v > 1.0:
        return None

    t = f * np.dot(e2, q)
    if t <= eps:
        return None
    return float(t), float(u), float(v)


def intersect_triangles(origin, direction, vertices, faces, eps=RAY_EPSILON):
    """Vectorised Möller-Trumbore over every face.

    Returns ``(t, u, v, valid)`` arrays, one entry per face.
    """
    o = tf.as_vector(origin)
    d = tf.as_vector(direction)
    vertices = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
    faces = np.asarray(faces, dtype=np.int64).reshape(-1, 3)

    v0 = vertices[faces[:, 0]]
    e1 = vertices[faces[:, 1]] - v0
    e2 = vertices[faces[:, 2]] - v0

    h = np.cross(d, e2)
    a = np.einsum('ij,ij->i', e1, h)
    valid = np.abs(a) >= eps

    with np.errstate(divide='ignore', invalid='ignore'):
        f = np.where(valid, 1.0 / np.where(valid, a, 1.0), 0.0)
        s = o - v0
        u = f * np.einsum('ij,ij->i', s, h)
        q = np.cross(s, e1)
        v = f * (q @ d)
        t = f * np.einsum('ij,ij->i', e2, q)

    valid &= (u >= 0.0) & (u <= 1.0)
    valid &= (v >= 0.0) & (u + v <= 1.0)
    valid &= t > eps
    return t, u, v, valid


def pick_triangle(ray: Ray, vertices, faces) -> Optional[RayHit]:
    """Nearest triangle hit by *ray*, or None when every face is missed.

    The ray must already be in the terrain's local (pre-rotation) space.
    Every triangle is tested; there is no acceleration structure.
    """
    faces = np.asarray(faces, dtype=np.int64).reshape(-1, 3)
    if len(faces) == 0:
        return None

    t, u, v, valid = intersect_triangles(ray.origin, ray.direction,
                                         vertices, faces)
    if not valid.any():
        logger.debug("Pick ray missed all triangles")
        return None

    candidates = np.flatnonzero(valid)
    best = int(candidates[np.argmin(t[candidates])])
    hit = RayHit(triangle=best,
                 vertex_indices=tuple(int(i) for i in faces[best]),
                 t=float(t[best]), u=float(u[best]), v=float(v[best]))
    logger.debug(f"Pick hit triangle {best} at t={hit.t:.4f}")
    return hit


def hit_point(ray: Ray, hit: RayHit) -> np.ndarray:
    return tf.as_vector(ray.origin) + tf.as_vector(ray.direction) * hit.t


def barycentric_blend(values, hit: RayHit) -> np.ndarray:
    """Interpolate per-vertex *values* at the hit's barycentric coordinates."""
    values = np.asarray(values, dtype=np.float64).reshape(-1, 3)
    i0, i1, i2 = hit.vertex_indices
    w0 = 1.0 - hit.u - hit.v
    return w0 * values[i0] + hit.u * values[i1] + hit.v * values[i2]


def ray_to_local(ray: Ray, model) -> Ray:
    """Map a world-space ray into the local space of *model*."""
    inv = tf.inverse(model)
    origin = tf.transform_point(inv, ray.origin)
    direction = tf.transform_direction(inv, ray.direction)
    return make_ray(origin, direction)
