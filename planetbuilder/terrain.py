"""Noise-driven radial displacement of the base sphere.

Provides functions for:
1. Displacing every base vertex along its radial direction by
   ``noise * displacement`` (coherent or uncorrelated noise)
2. Classifying terrain vertices as sea / beach / land for a sea level
3. Building a coloured ``trimesh.Trimesh`` of the terrain for export
"""

import logging

import numpy as np
import trimesh

from .constants import (NOISE_FREQUENCY, UNCORRELATED_VARIATION, BEACH_BAND,
                        SURFACE_COLORS)
from .models import BaseMesh, Terrain, NoiseMode

logger = logging.getLogger(__name__)

SEA, BEACH, LAND = 0, 1, 2
SURFACE_CLASSES = ("sea", "beach", "land")


def sample_noise(points, noise_ctx, noise_mode, rng=None) -> np.ndarray:
    """Raw per-vertex noise for the chosen mode.

    Coherent noise is sampled at ``NOISE_FREQUENCY * position``; the
    uncorrelated mode draws uniformly from ``[-0.35, 0.35)`` per vertex.
    """
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    mode = NoiseMode(noise_mode)
    if mode is NoiseMode.COHERENT:
        return noise_ctx.perlin_points(points * NOISE_FREQUENCY)
    return noise_ctx.uncorrelated(len(points), UNCORRELATED_VARIATION, rng=rng)


def generate_terrain(base: BaseMesh, noise_ctx, noise_mode=NoiseMode.COHERENT,
                     displacement: float = 0.0, rng=None) -> Terrain:
    """Displace *base* radially by ``noise * displacement``.

    Parameters
    ----------
    base : BaseMesh -- unit-sphere vertices and faces
    noise_ctx : NoiseContext -- permutation table and random source
    noise_mode : NoiseMode -- coherent gradient noise or uncorrelated draws
    displacement : float -- height amplitude; 0 leaves the sphere untouched,
        negative values invert the bumps
    rng : numpy Generator, optional -- overrides the context's random source
        for uncorrelated draws

    Returns
    -------
    Terrain whose vertex i sits at radius ``1 + noise_i * displacement`` and
    whose normal i is the undisplaced radial direction of base vertex i.
    """
    verts = base.vertices
    radial_len = np.linalg.norm(verts, axis=1, keepdims=True)
    directions = verts / radial_len

    noise = sample_noise(verts, noise_ctx, noise_mode, rng=rng)
    heights = noise * float(displacement)

    # Base vertices are unit length, so pushing along the radial direction
    # by the height lands on radius 1 + height and leaves them exact at h=0.
    displaced = verts + directions * heights[:, None]

    terrain = Terrain(vertices=displaced, normals=directions,
                      faces=base.faces, noise=noise,
                      displacement=float(displacement))

    if len(heights):
        logger.info(f"Terrain ({NoiseMode(noise_mode).value}, h={displacement}): "
                    f"{terrain.vertex_count} verts, height range "
                    f"[{heights.min():.3f}, {heights.max():.3f}]")
    return terrain


def classify_surface(terrain: Terrain, sea_level: float,
                     beach_band: float = BEACH_BAND) -> np.ndarray:
    """Per-vertex class: SEA below sea level, BEACH within the band, else LAND."""
    heights = terrain.heights
    classes = np.full(len(heights), LAND, dtype=np.int8)
    classes[heights < sea_level + beach_band] = BEACH
    classes[heights < sea_level] = SEA
    return classes


def land_fraction(terrain: Terrain, sea_level: float) -> float:
    """Share of vertices strictly above sea level (scatter-eligible)."""
    if terrain.vertex_count == 0:
        return 0.0
    return float(np.mean(terrain.heights > sea_level))


def surface_colors(terrain: Terrain, sea_level: float) -> np.ndarray:
    """RGBA uint8 vertex colours for the sea / beach / land classes."""
    palette = np.array(
        [[*SURFACE_COLORS[name], 1.0] for name in SURFACE_CLASSES],
        dtype=np.float64)
    rgba = palette[classify_surface(terrain, sea_level)]
    return np.round(rgba * 255).astype(np.uint8)


def build_terrain_mesh(terrain: Terrain, sea_level: float) -> trimesh.Trimesh:
    """Terrain as a trimesh with radial vertex normals and class colours."""
    mesh = trimesh.Trimesh(
        vertices=np.array(terrain.vertices),
        faces=np.array(terrain.faces),
        vertex_normals=np.array(terrain.normals),
        vertex_colors=surface_colors(terrain, sea_level),
        process=False,
    )
    return mesh
