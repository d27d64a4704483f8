"""4x4 transform algebra and small vector helpers.

Matrices are ``(4, 4)`` float64 numpy arrays acting on column vectors
(``p' = M @ p``), the same convention as ``trimesh.transformations``.
Translation therefore lives in the last column, and a model transform
built as ``multiply(T, R, S)`` scales first, then rotates, then translates.
"""

import math
import logging

import numpy as np

from .constants import NORMALIZE_EPSILON, SINGULAR_EPSILON
from .errors import InvalidTransform, DegenerateVector

logger = logging.getLogger(__name__)


# ── Vectors ──────────────────────────────────────────────────────────

def as_vector(v, size=3) -> np.ndarray:
    arr = np.asarray(v, dtype=np.float64).ravel()
    if arr.shape != (size,):
        raise ValueError(f"Expected a {size}-vector, got shape {arr.shape}")
    return arr


def length(v) -> float:
    return float(np.linalg.norm(np.asarray(v, dtype=np.float64)))


def normalize(v, eps: float = NORMALIZE_EPSILON) -> np.ndarray:
    """Unit vector along *v*; raises DegenerateVector below *eps* length.

    Works for 3- and 4-vectors alike.
    """
    arr = np.asarray(v, dtype=np.float64).ravel()
    n = np.linalg.norm(arr)
    if n < eps:
        raise DegenerateVector(f"Cannot normalize vector of length {n:.3g}")
    return arr / n


def cross(a, b) -> np.ndarray:
    return np.cross(as_vector(a), as_vector(b))


def dot(a, b) -> float:
    return float(np.dot(np.asarray(a, dtype=np.float64).ravel(),
                        np.asarray(b, dtype=np.float64).ravel()))


# ── Construction ─────────────────────────────────────────────────────

def identity() -> np.ndarray:
    return np.eye(4, dtype=np.float64)


def translation(tx, ty, tz) -> np.ndarray:
    m = identity()
    m[:3, 3] = (tx, ty, tz)
    return m


def scaling(sx, sy=None, sz=None) -> np.ndarray:
    """Scale matrix; a single argument scales uniformly."""
    if sy is None:
        sy = sx
    if sz is None:
        sz = sx
    return np.diag([float(sx), float(sy), float(sz), 1.0])


def axis_rotation(axis, angle: float) -> np.ndarray:
    """Rodrigues rotation by *angle* radians about *axis*.

    The axis is normalized here; a zero-length axis raises DegenerateVector.
    """
    x, y, z = normalize(axis)
    c = math.cos(angle)
    s = math.sin(angle)
    k = 1.0 - c

    m = identity()
    m[:3, :3] = [
        [x * x * k + c,     x * y * k - z * s, x * z * k + y * s],
        [y * x * k + z * s, y * y * k + c,     y * z * k - x * s],
        [z * x * k - y * s, z * y * k + x * s, z * z * k + c],
    ]
    return m


def x_rotation(angle: float) -> np.ndarray:
    return axis_rotation((1.0, 0.0, 0.0), angle)


def y_rotation(angle: float) -> np.ndarray:
    return axis_rotation((0.0, 1.0, 0.0), angle)


def z_rotation(angle: float) -> np.ndarray:
    return axis_rotation((0.0, 0.0, 1.0), angle)


def look_at(eye, target, up) -> np.ndarray:
    """Camera-to-world matrix placed at *eye* looking toward *target*.

    The camera looks down its local -Z axis.  Invert the result to get a
    view matrix.
    """
    eye = as_vector(eye)
    z_axis = normalize(eye - as_vector(target))
    x_axis = normalize(np.cross(as_vector(up), z_axis))
    y_axis = normalize(np.cross(z_axis, x_axis))

    m = identity()
    m[:3, 0] = x_axis
    m[:3, 1] = y_axis
    m[:3, 2] = z_axis
    m[:3, 3] = eye
    return m


def perspective(fov_y: float, aspect: float, near: float, far: float) -> np.ndarray:
    """OpenGL-style perspective projection (clip z in [-1, 1])."""
    if aspect == 0 or near == far:
        raise InvalidTransform(f"Degenerate frustum: aspect={aspect}, "
                               f"near={near}, far={far}")
    f = math.tan(math.pi * 0.5 - 0.5 * fov_y)
    range_inv = 1.0 / (near - far)

    m = np.zeros((4, 4), dtype=np.float64)
    m[0, 0] = f / aspect
    m[1, 1] = f
    m[2, 2] = (near + far) * range_inv
    m[2, 3] = near * far * range_inv * 2.0
    m[3, 2] = -1.0
    return m


def orthographic(left, right, bottom, top, near, far) -> np.ndarray:
    if left == right or bottom == top or near == far:
        raise InvalidTransform("Degenerate orthographic volume")
    m = identity()
    m[0, 0] = 2.0 / (right - left)
    m[1, 1] = 2.0 / (top - bottom)
    m[2, 2] = 2.0 / (near - far)
    m[0, 3] = (left + right) / (left - right)
    m[1, 3] = (bottom + top) / (bottom - top)
    m[2, 3] = (near + far) / (near - far)
    return m


# ── Algebra ──────────────────────────────────────────────────────────

def multiply(*matrices) -> np.ndarray:
    """Left-to-right product; ``multiply(A, B)`` applies B first."""
    if not matrices:
        return identity()
    result = np.asarray(matrices[0], dtype=np.float64)
    for m in matrices[1:]:
        result = result @ np.asarray(m, dtype=np.float64)
    return result


def transpose(m) -> np.ndarray:
    return np.asarray(m, dtype=np.float64).T.copy()


def determinant(m) -> float:
    return float(np.linalg.det(np.asarray(m, dtype=np.float64)))


def inverse(m, eps: float = SINGULAR_EPSILON) -> np.ndarray:
    """Inverse of a 4x4 matrix; raises InvalidTransform when singular."""
    m = np.asarray(m, dtype=np.float64)
    det = np.linalg.det(m)
    if not np.isfinite(det) or abs(det) < eps:
        raise InvalidTransform(f"Matrix is singular (det={det:.3g})")
    return np.linalg.inv(m)


def transform_point(m, p) -> np.ndarray:
    """Apply *m* to a point, including the projective divide."""
    x, y, z = as_vector(p)
    out = np.asarray(m, dtype=np.float64) @ np.array([x, y, z, 1.0])
    if abs(out[3]) < SINGULAR_EPSILON:
        raise InvalidTransform("Point maps to infinity (w == 0)")
    return out[:3] / out[3]


def transform_direction(m, d) -> np.ndarray:
    """Apply the linear part of *m* to a direction (w = 0)."""
    return np.asarray(m, dtype=np.float64)[:3, :3] @ as_vector(d)
