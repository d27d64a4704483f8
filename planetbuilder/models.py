"""Data classes for meshes, terrain, prop instances and settings."""

from dataclasses import dataclass, field, fields, replace as _dc_replace
from enum import Enum

import numpy as np

from .constants import (DEFAULT_RESOLUTION, DEFAULT_DISPLACEMENT, DEFAULT_NOISE_MODE,
                        DEFAULT_SEA_LEVEL, DEFAULT_COUNTS)


class NoiseMode(str, Enum):
    COHERENT = "coherent"
    UNCORRELATED = "uncorrelated"


class PropCategory(str, Enum):
    TREE = "tree"
    ROCK = "rock"
    GRASS = "grass"
    CLOUD = "cloud"


@dataclass(frozen=True)
class PropStyle:
    """Placement rule for a prop category.

    offset: distance along the surface normal from the vertex
    scale: uniform scale applied to the category's model
    sea_level_exempt: accept any vertex, above water or not
    """
    offset: float
    scale: float
    sea_level_exempt: bool = False


PROP_STYLES: dict[PropCategory, PropStyle] = {
    PropCategory.TREE:  PropStyle(offset=0.01, scale=0.07),
    PropCategory.ROCK:  PropStyle(offset=0.01, scale=0.2),
    PropCategory.GRASS: PropStyle(offset=-0.025, scale=0.2),
    PropCategory.CLOUD: PropStyle(offset=0.3, scale=0.001,
                                  sea_level_exempt=True),
}


def _frozen_array(values, dtype) -> np.ndarray:
    arr = np.array(values, dtype=dtype)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class BaseMesh:
    """Unit-sphere vertices (n, 3) and triangle vertex indices (m, 3)."""
    vertices: np.ndarray
    faces: np.ndarray
    resolution: int = 0

    def __post_init__(self):
        object.__setattr__(self, "vertices",
                           _frozen_array(self.vertices, np.float64).reshape(-1, 3))
        object.__setattr__(self, "faces",
                           _frozen_array(self.faces, np.int64).reshape(-1, 3))

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.faces)


@dataclass(frozen=True, eq=False)
class Terrain:
    """Displaced planet surface.

    ``noise`` keeps the raw per-vertex noise sample so the height field can
    be reconstructed as ``noise * displacement``.
    """
    vertices: np.ndarray
    normals: np.ndarray
    faces: np.ndarray
    noise: np.ndarray
    displacement: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "vertices",
                           _frozen_array(self.vertices, np.float64).reshape(-1, 3))
        object.__setattr__(self, "normals",
                           _frozen_array(self.normals, np.float64).reshape(-1, 3))
        object.__setattr__(self, "faces",
                           _frozen_array(self.faces, np.int64).reshape(-1, 3))
        object.__setattr__(self, "noise",
                           _frozen_array(self.noise, np.float64).ravel())
        if len(self.vertices) != len(self.normals):
            raise ValueError(f"{len(self.vertices)} vertices but "
                             f"{len(self.normals)} normals")

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.faces)

    @property
    def heights(self) -> np.ndarray:
        """Radial height of every vertex above the unit sphere."""
        return np.linalg.norm(self.vertices, axis=1) - 1.0

    def buffers(self):
        """Flat GPU-ready buffers: (positions f32, normals f32, indices u32)."""
        return (self.vertices.astype(np.float32).ravel(),
                self.normals.astype(np.float32).ravel(),
                self.faces.astype(np.uint32).ravel())


@dataclass(frozen=True, eq=False)
class PropInstance:
    category: PropCategory
    model: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "model",
                           _frozen_array(self.model, np.float64).reshape(4, 4))

    @property
    def position(self) -> np.ndarray:
        return self.model[:3, 3]

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "model": [float(v) for v in self.model.ravel()],
        }


@dataclass(frozen=True)
class Ray:
    origin: tuple
    direction: tuple


@dataclass(frozen=True)
class RayHit:
    """Nearest triangle struck by a pick ray.

    vertex_indices are the triangle's three vertex indices; multiply by 3
    for offsets into the flat position buffer.
    """
    triangle: int
    vertex_indices: tuple
    t: float
    u: float
    v: float

    @property
    def buffer_offsets(self) -> tuple:
        return tuple(3 * i for i in self.vertex_indices)


def _default_counts() -> dict:
    return {PropCategory(k): v for k, v in DEFAULT_COUNTS.items()}


@dataclass(frozen=True)
class PlanetSettings:
    """Every user-tunable generation parameter."""
    resolution: int = DEFAULT_RESOLUTION
    noise_mode: NoiseMode = NoiseMode(DEFAULT_NOISE_MODE)
    displacement: float = DEFAULT_DISPLACEMENT
    sea_level: float = DEFAULT_SEA_LEVEL
    counts: dict = field(default_factory=_default_counts)

    def __post_init__(self):
        object.__setattr__(self, "noise_mode", NoiseMode(self.noise_mode))
        object.__setattr__(self, "resolution", int(self.resolution))
        object.__setattr__(self, "displacement", float(self.displacement))
        object.__setattr__(self, "sea_level", float(self.sea_level))
        if self.resolution < 1:
            raise ValueError(f"resolution must be >= 1, got {self.resolution}")

        counts = _default_counts()
        for key, value in (self.counts or {}).items():
            counts[PropCategory(key)] = int(value)
        for category, value in counts.items():
            if value < 0:
                raise ValueError(f"{category.value} count must be >= 0, got {value}")
        object.__setattr__(self, "counts", counts)

    def replace(self, **changes) -> "PlanetSettings":
        """Return a validated copy; ``counts`` is merged, not replaced."""
        if "counts" in changes and changes["counts"] is not None:
            merged = dict(self.counts)
            merged.update({PropCategory(k): v
                           for k, v in changes["counts"].items()})
            changes["counts"] = merged
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
        return _dc_replace(self, **{k: v for k, v in changes.items()
                                    if v is not None})

    def count_for(self, category: PropCategory) -> int:
        return self.counts.get(PropCategory(category), 0)

    def to_dict(self) -> dict:
        return {
            "resolution": self.resolution,
            "noise_mode": self.noise_mode.value,
            "displacement": self.displacement,
            "sea_level": self.sea_level,
            "counts": {c.value: n for c, n in self.counts.items()},
        }


@dataclass(frozen=True, eq=False)
class PlanetSnapshot:
    """One immutable generation of the planet and its props."""
    version: int
    settings: PlanetSettings
    base: BaseMesh
    terrain: Terrain
    instances: tuple = ()
    exhausted: tuple = ()

    def instances_of(self, category: PropCategory) -> list:
        return [i for i in self.instances if i.category == PropCategory(category)]

    def counts(self) -> dict:
        out = {c.value: 0 for c in PropCategory}
        for inst in self.instances:
            out[inst.category.value] += 1
        return out

    def summary(self) -> dict:
        heights = self.terrain.heights
        return {
            "version": self.version,
            "settings": self.settings.to_dict(),
            "vertices": self.terrain.vertex_count,
            "triangles": self.terrain.triangle_count,
            "height_min": float(heights.min()) if len(heights) else 0.0,
            "height_max": float(heights.max()) if len(heights) else 0.0,
            "instances": self.counts(),
            "exhausted": [c.value for c in self.exhausted],
        }


