"""UV-sphere tessellation on the unit sphere."""

import logging
import math

import numpy as np

from .models import BaseMesh

logger = logging.getLogger(__name__)


def create_base_sphere(resolution: int) -> BaseMesh:
    """Build a latitude/longitude sphere with ``resolution`` stacks and slices.

    Rings run from the north pole (row 0) to the south pole
    (row ``resolution``); each ring has ``resolution`` longitude samples
    and the seam wraps back to column 0.  This gives
    ``(resolution + 1) * resolution`` vertices and ``2 * resolution**2``
    triangles, every index of which refers to an existing vertex.  The
    poles are degenerate rings, not single points.

    Vertex (row, col):
        theta = row / resolution * pi
        phi   = col / resolution * 2 * pi
        (sin(theta) cos(phi), cos(theta), sin(theta) sin(phi))
    """
    resolution = int(resolution)
    if resolution < 1:
        raise ValueError(f"resolution must be >= 1, got {resolution}")

    n_rows = resolution + 1
    n_cols = resolution

    # ── Vertex positions ────────────────────────────────────────
    theta = np.arange(n_rows, dtype=np.float64) / resolution * math.pi
    phi = np.arange(n_cols, dtype=np.float64) / resolution * 2.0 * math.pi
    tt, pp = np.meshgrid(theta, phi, indexing='ij')      # both (rows, cols)

    verts = np.empty((n_rows * n_cols, 3), dtype=np.float64)
    verts[:, 0] = (np.sin(tt) * np.cos(pp)).ravel()
    verts[:, 1] = np.cos(tt).ravel()
    verts[:, 2] = (np.sin(tt) * np.sin(pp)).ravel()

    # ── Face indices: 2 triangles per grid quad ─────────────────
    row_g, col_g = np.meshgrid(
        np.arange(resolution), np.arange(n_cols), indexing='ij')
    row_f = row_g.ravel()
    col_f = col_g.ravel()
    col_next = (col_f + 1) % n_cols

    v00 = row_f * n_cols + col_f               # (row,   col)
    v01 = row_f * n_cols + col_next            # (row,   col+1)
    v10 = (row_f + 1) * n_cols + col_f         # (row+1, col)
    v11 = (row_f + 1) * n_cols + col_next      # (row+1, col+1)

    # Interleave so each quad's pair stays adjacent
    faces = np.empty((2 * len(v00), 3), dtype=np.int64)
    faces[0::2] = np.column_stack([v00, v01, v10])
    faces[1::2] = np.column_stack([v01, v11, v10])

    logger.debug(f"Base sphere r={resolution}: {len(verts)} verts, "
                 f"{len(faces)} faces")
    return BaseMesh(vertices=verts, faces=faces, resolution=resolution)
