"""Low-poly stand-in meshes for each prop category.

Real prop assets are loaded by the rendering layer; these shapes let the
GLB export and previews show something sensible.  Every model is Y-up
with its base at the origin and is sized so that the category scale in
``PROP_STYLES`` gives a plausible size on the unit planet:

    tree   ~0.9 units tall  x 0.07  -> ~0.06
    rock   ~0.1 radius      x 0.2   -> ~0.02
    grass  ~0.2 units tall  x 0.2   -> ~0.04 (sunk 0.025 into the ground)
    cloud  ~30 units across x 0.001 -> ~0.03
"""

import math
from functools import lru_cache

import numpy as np
import trimesh
from trimesh.visual.material import PBRMaterial

from .models import PropCategory

PROP_COLORS = {
    'tree_trunk':  [0.40, 0.26, 0.13, 1.0],
    'tree_canopy': [0.13, 0.45, 0.18, 1.0],
    'rock':        [0.50, 0.48, 0.45, 1.0],
    'grass':       [0.35, 0.65, 0.20, 1.0],
    'cloud':       [0.95, 0.95, 0.97, 1.0],
}


def _ring(radius, y, n, phase=0.0):
    return [[radius * math.cos(2 * math.pi * i / n + phase), y,
             radius * math.sin(2 * math.pi * i / n + phase)] for i in range(n)]


def _create_tree_mesh():
    """Hexagonal trunk + cone canopy.

    Returns dict with 'tree_trunk' and 'tree_canopy' keys, each
    containing (verts, faces).
    """
    n = 6
    trunk_r, trunk_h = 0.05, 0.3
    canopy_r, canopy_h = 0.25, 0.6

    # ── Trunk (hexagonal prism) ──
    trunk_verts = _ring(trunk_r, 0.0, n) + _ring(trunk_r, trunk_h, n)
    trunk_faces = []
    for i in range(n):
        j = (i + 1) % n
        trunk_faces.append([i, j + n, j])
        trunk_faces.append([i, i + n, j + n])
    for i in range(1, n - 1):
        trunk_faces.append([0, i, i + 1])               # bottom cap
        trunk_faces.append([n, n + i + 1, n + i])       # top cap

    # ── Canopy (cone) ──
    n_c = 8
    canopy_verts = _ring(canopy_r, trunk_h, n_c)
    apex = len(canopy_verts)
    canopy_verts.append([0.0, trunk_h + canopy_h, 0.0])
    canopy_faces = []
    for i in range(n_c):
        j = (i + 1) % n_c
        canopy_faces.append([i, apex, j])
    for i in range(1, n_c - 1):
        canopy_faces.append([0, i, i + 1])

    return {
        'tree_trunk': (trunk_verts, trunk_faces),
        'tree_canopy': (canopy_verts, canopy_faces),
    }


def _create_rock_mesh():
    """Squashed icosphere boulder."""
    sphere = trimesh.creation.icosphere(subdivisions=1, radius=0.1)
    verts = np.array(sphere.vertices)
    verts[:, 1] *= 0.6
    verts[:, 1] += 0.03
    return {'rock': (verts.tolist(), np.array(sphere.faces).tolist())}


def _create_grass_mesh():
    """Tuft of three thin blades (triangular prisms) leaning outward."""
    verts = []
    faces = []
    for k in range(3):
        base = len(verts)
        phase = 2 * math.pi * k / 3
        lean_x = 0.04 * math.cos(phase)
        lean_z = 0.04 * math.sin(phase)
        verts.extend(_ring(0.012, 0.0, 3, phase))
        verts.append([lean_x, 0.2, lean_z])
        tip = base + 3
        for i in range(3):
            j = (i + 1) % 3
            faces.append([base + i, tip, base + j])
        faces.append([base, base + 1, base + 2])
    return {'grass': (verts, faces)}


def _create_cloud_mesh():
    """Three overlapping puffs merged into one mesh."""
    puffs = [((0.0, 8.0, 0.0), 12.0), ((10.0, 6.0, 2.0), 9.0),
             ((-10.0, 5.0, -1.0), 8.0)]
    meshes = []
    for center, radius in puffs:
        puff = trimesh.creation.icosphere(subdivisions=2, radius=radius)
        puff.apply_translation(center)
        meshes.append(puff)
    merged = trimesh.util.concatenate(meshes)
    return {'cloud': (np.array(merged.vertices).tolist(),
                      np.array(merged.faces).tolist())}


_GENERATORS = {
    PropCategory.TREE: _create_tree_mesh,
    PropCategory.ROCK: _create_rock_mesh,
    PropCategory.GRASS: _create_grass_mesh,
    PropCategory.CLOUD: _create_cloud_mesh,
}


@lru_cache(maxsize=None)
def prop_parts(category) -> dict:
    """Named ``trimesh.Trimesh`` parts for *category* (cached, shared)."""
    parts = {}
    for name, (verts, faces) in _GENERATORS[PropCategory(category)]().items():
        mesh = trimesh.Trimesh(vertices=np.array(verts, dtype=np.float64),
                               faces=np.array(faces, dtype=np.int64))
        mesh.fix_normals()
        material = PBRMaterial(
            baseColorFactor=PROP_COLORS[name],
            metallicFactor=0.0,
            roughnessFactor=0.9,
            doubleSided=True,
            name=name,
        )
        mesh.visual = trimesh.visual.TextureVisuals(material=material)
        parts[name] = mesh
    return parts
