"""PlanetBuilder: thin orchestrator that delegates to focused modules.

Each configuration change or pick publishes a new immutable
``PlanetSnapshot`` with a bumped version; consumers only ever see
complete generations.
"""

import dataclasses
import logging
import random
import time
from typing import Optional

from . import sphere as sphere_mod
from . import terrain as terrain_mod
from . import scatter as scatter_mod
from . import picking
from . import glb as glb_mod
from . import transforms as tf
from .camera import Camera
from .constants import SESSION_SEED, MAX_SCATTER_ATTEMPTS
from .errors import NoPickHit
from .models import (PlanetSettings, PlanetSnapshot, PropCategory, Ray,
                     RayHit)
from .noise import NoiseContext

logger = logging.getLogger(__name__)

# Which stage each setting invalidates
_TESSELLATE = {"resolution"}
_DISPLACE = {"noise_mode", "displacement"}
_SCATTER = {"sea_level", "counts"}


class PlanetBuilder:
    def __init__(self, settings: Optional[PlanetSettings] = None,
                 seed=SESSION_SEED, camera: Optional[Camera] = None,
                 max_attempts: int = MAX_SCATTER_ATTEMPTS):
        """
        settings: initial generation parameters (defaults if omitted).
        seed: session seed for the noise table and scatter draws; None
            gives a fresh shuffle every session.
        camera: camera used for screen-space picks.
        max_attempts: rejection-sampling ceiling per prop instance.
        """
        self.seed = seed
        self.noise = NoiseContext(seed=seed)
        self.rng = random.Random(seed)
        self.camera = camera or Camera()
        self.max_attempts = max_attempts
        self._snapshot: Optional[PlanetSnapshot] = None
        self._publish(settings or PlanetSettings(), stages=_TESSELLATE)

    # ── Snapshots ───────────────────────────────────────────────────

    @property
    def snapshot(self) -> PlanetSnapshot:
        return self._snapshot

    @property
    def settings(self) -> PlanetSettings:
        return self._snapshot.settings

    @property
    def version(self) -> int:
        return self._snapshot.version

    def _next_version(self) -> int:
        return 1 if self._snapshot is None else self._snapshot.version + 1

    def _publish(self, settings: PlanetSettings, stages) -> PlanetSnapshot:
        t0 = time.perf_counter()
        prev = self._snapshot

        if prev is None or stages & _TESSELLATE:
            base = sphere_mod.create_base_sphere(settings.resolution)
            logger.info(f"Tessellated sphere r={settings.resolution}: "
                        f"{base.vertex_count} verts, {base.triangle_count} tris")
        else:
            base = prev.base

        if prev is None or stages & (_TESSELLATE | _DISPLACE):
            terrain = terrain_mod.generate_terrain(
                base, self.noise, settings.noise_mode, settings.displacement)
        else:
            terrain = prev.terrain

        instances, exhausted = scatter_mod.scatter_all(
            terrain, settings.counts, settings.sea_level,
            rng=self.rng, max_attempts=self.max_attempts)

        self._snapshot = PlanetSnapshot(
            version=self._next_version(),
            settings=settings,
            base=base,
            terrain=terrain,
            instances=tuple(instances),
            exhausted=tuple(exhausted),
        )
        logger.info(f"Published planet v{self._snapshot.version} "
                    f"({len(instances)} props) in "
                    f"{time.perf_counter() - t0:.2f}s")
        return self._snapshot

    def update(self, **changes) -> PlanetSnapshot:
        """Apply setting changes, rebuilding only the stages they invalidate.

        Returns the current snapshot untouched when nothing changes.
        """
        current = self.settings
        new = current.replace(**changes)
        changed = {name for name in ("resolution", "noise_mode",
                                     "displacement", "sea_level", "counts")
                   if getattr(new, name) != getattr(current, name)}
        if not changed:
            return self._snapshot
        logger.info(f"Settings changed: {', '.join(sorted(changed))}")
        return self._publish(new, stages=changed)

    def regenerate(self) -> PlanetSnapshot:
        """Re-draw terrain noise and props with the current settings."""
        return self._publish(self.settings, stages=_DISPLACE)

    def rescatter(self) -> PlanetSnapshot:
        return self._publish(self.settings, stages=_SCATTER)

    # ── Picking ─────────────────────────────────────────────────────

    @staticmethod
    def planet_model(angle: float = 0.0):
        """Model matrix of the spinning planet (rotation about +Y)."""
        return tf.y_rotation(angle)

    def pick(self, ray: Ray, angle: float = 0.0) -> Optional[RayHit]:
        """Nearest terrain triangle under a world-space *ray*, or None."""
        local = picking.ray_to_local(ray, self.planet_model(angle))
        terrain = self._snapshot.terrain
        return picking.pick_triangle(local, terrain.vertices, terrain.faces)

    def place_prop(self, ray: Ray, category=PropCategory.TREE,
                   angle: float = 0.0):
        """Append one prop where *ray* meets the terrain.

        Returns ``(hit, instance)``; raises NoPickHit when the ray misses.
        The instance list grows without rescattering.
        """
        local = picking.ray_to_local(ray, self.planet_model(angle))
        terrain = self._snapshot.terrain
        hit = picking.pick_triangle(local, terrain.vertices, terrain.faces)
        if hit is None:
            raise NoPickHit("Pick ray did not intersect the planet")

        position = picking.hit_point(local, hit)
        normal = picking.barycentric_blend(terrain.normals, hit)
        instance = scatter_mod.place_prop(category, position, normal)

        prev = self._snapshot
        self._snapshot = PlanetSnapshot(
            version=prev.version + 1,
            settings=prev.settings,
            base=prev.base,
            terrain=prev.terrain,
            instances=prev.instances + (instance,),
            exhausted=prev.exhausted,
        )
        logger.info(f"Placed {instance.category.value} on triangle "
                    f"{hit.triangle} (v{self._snapshot.version})")
        return hit, instance

    def camera_for(self, aspect: Optional[float] = None) -> Camera:
        """The builder camera projected for a viewport of width/height *aspect*."""
        if aspect is None or aspect == self.camera.aspect:
            return self.camera
        if aspect <= 0:
            raise ValueError(f"aspect must be > 0, got {aspect}")
        return dataclasses.replace(self.camera, aspect=float(aspect))

    def place_prop_at_ndc(self, x: float, y: float,
                          category=PropCategory.TREE, angle: float = 0.0,
                          aspect: Optional[float] = None):
        """Pick through normalized device coords of a viewport.

        *aspect* is the viewport width/height; the builder camera's own
        aspect is used when omitted.
        """
        ray = self.camera_for(aspect).ray_from_ndc(x, y)
        return self.place_prop(ray, category=category, angle=angle)

    # ── Export ──────────────────────────────────────────────────────

    def export_glb(self, output_path, angle: float = 0.0,
                   progress_callback=None) -> str:
        """Export the current snapshot.  Returns the absolute GLB path."""
        model = self.planet_model(angle) if angle else None
        return glb_mod.export_glb(self._snapshot, output_path,
                                  planet_model=model,
                                  progress_callback=progress_callback)
