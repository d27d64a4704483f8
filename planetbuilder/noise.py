"""3-D gradient (Perlin) noise and the uncorrelated random alternative.

The permutation table lives on a ``NoiseContext`` that is built once per
session and passed to whoever needs it.  The table is shuffled from
``[0, 255]`` once, doubled to 512 entries so corner hashes never need a
wraparound check, and never mutated afterwards.
"""

import logging

import numpy as np

from .constants import PERMUTATION_SIZE, UNCORRELATED_VARIATION

logger = logging.getLogger(__name__)


def fade(t):
    """Smootherstep curve 6t^5 - 15t^4 + 10t^3."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def lerp(a, b, t):
    return a + t * (b - a)


def grad(hash_, x, y, z):
    """Dot product of (x, y, z) with one of 12 cube-edge gradients.

    The low 4 bits of the hash pick the gradient (16 cases, 4 repeated).
    """
    h = np.asarray(hash_) & 15
    u = np.where(h < 8, x, y)
    v = np.where(h < 4, y, np.where((h == 12) | (h == 14), x, z))
    return (np.where((h & 1) == 0, u, -u) +
            np.where((h & 2) == 0, v, -v))


class NoiseContext:
    """Owns the permutation table shared by every coherent-noise call."""

    def __init__(self, seed=None, rng=None):
        if rng is None:
            rng = np.random.default_rng(seed)
        self.seed = seed
        self.rng = rng
        table = rng.permutation(PERMUTATION_SIZE).astype(np.int64)
        perm = np.concatenate([table, table])
        perm.setflags(write=False)
        self._perm = perm
        logger.debug(f"Noise permutation table initialised (seed={seed})")

    @property
    def permutation(self) -> np.ndarray:
        return self._perm

    def perlin(self, x, y, z):
        """Gradient noise at (x, y, z); accepts scalars or equal-shape arrays.

        Values lie roughly in [-1, 1] and are exactly 0 on lattice points.
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        z = np.asarray(z, dtype=np.float64)
        scalar = x.ndim == 0 and y.ndim == 0 and z.ndim == 0
        x, y, z = np.broadcast_arrays(x, y, z)

        fx = np.floor(x)
        fy = np.floor(y)
        fz = np.floor(z)
        xi = fx.astype(np.int64) & 255
        yi = fy.astype(np.int64) & 255
        zi = fz.astype(np.int64) & 255

        x = x - fx
        y = y - fy
        z = z - fz

        u = fade(x)
        v = fade(y)
        w = fade(z)

        p = self._perm
        a = p[xi] + yi
        aa = p[a] + zi
        ab = p[a + 1] + zi
        b = p[xi + 1] + yi
        ba = p[b] + zi
        bb = p[b + 1] + zi

        result = lerp(
            lerp(
                lerp(grad(p[aa], x, y, z), grad(p[ba], x - 1, y, z), u),
                lerp(grad(p[ab], x, y - 1, z), grad(p[bb], x - 1, y - 1, z), u),
                v,
            ),
            lerp(
                lerp(grad(p[aa + 1], x, y, z - 1),
                     grad(p[ba + 1], x - 1, y, z - 1), u),
                lerp(grad(p[ab + 1], x, y - 1, z - 1),
                     grad(p[bb + 1], x - 1, y - 1, z - 1), u),
                v,
            ),
            w,
        )
        return float(result) if scalar else result

    def perlin_points(self, points) -> np.ndarray:
        """Gradient noise for an ``(n, 3)`` array of points."""
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        return self.perlin(pts[:, 0], pts[:, 1], pts[:, 2])

    def uncorrelated(self, count: int, variation: float = UNCORRELATED_VARIATION,
                     rng=None) -> np.ndarray:
        """Independent uniform draws in ``[-variation/2, variation/2)``."""
        rng = self.rng if rng is None else rng
        return (rng.random(int(count)) - 0.5) * variation
