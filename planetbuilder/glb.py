"""GLB export of a planet snapshot: terrain plus instanced props."""

import logging
import pathlib
import time

import trimesh

from .constants import OUTPUT_DIR
from .models import PlanetSnapshot, PropCategory
from .props import prop_parts
from .terrain import build_terrain_mesh

logger = logging.getLogger(__name__)


def build_scene(snapshot: PlanetSnapshot, planet_model=None) -> trimesh.Scene:
    """Assemble a scene: one terrain node and one node per prop part.

    Prop geometry is added once per category and referenced by every
    instance node, so the GLB stores each stand-in mesh a single time.
    *planet_model* (e.g. a spin rotation) is applied to the terrain and
    pre-multiplied onto every instance transform.
    """
    scene = trimesh.Scene()
    base = planet_model

    terrain_mesh = build_terrain_mesh(snapshot.terrain,
                                      snapshot.settings.sea_level)
    scene.add_geometry(terrain_mesh, geom_name='terrain', node_name='terrain',
                       transform=base)

    for category in PropCategory:
        instances = snapshot.instances_of(category)
        if not instances:
            continue
        parts = prop_parts(category)
        for part_name, mesh in parts.items():
            scene.add_geometry(mesh, geom_name=part_name,
                               node_name=f"{part_name}_0",
                               transform=_compose(base, instances[0].model))
            for i, inst in enumerate(instances[1:], start=1):
                scene.graph.update(frame_to=f"{part_name}_{i}",
                                   frame_from=scene.graph.base_frame,
                                   matrix=_compose(base, inst.model),
                                   geometry=part_name)
    return scene


def _compose(base, model):
    if base is None:
        return model.copy()
    return base @ model


def export_glb(snapshot: PlanetSnapshot, output_path, planet_model=None,
               progress_callback=None) -> str:
    """Write *snapshot* to a GLB file.  Returns the absolute path.

    Relative paths are resolved against OUTPUT_DIR.
    """
    def _progress(pct, msg):
        if progress_callback:
            progress_callback(pct, msg)

    t0 = time.perf_counter()
    path = pathlib.Path(output_path)
    if not path.is_absolute():
        path = OUTPUT_DIR / path
    path.parent.mkdir(parents=True, exist_ok=True)

    _progress(20, "Assembling scene...")
    scene = build_scene(snapshot, planet_model=planet_model)

    _progress(80, "Writing GLB...")
    scene.export(str(path), file_type='glb')

    size_kb = path.stat().st_size / 1024
    logger.info(f"GLB written: {path} ({size_kb:.0f} KB, "
                f"{len(snapshot.instances)} props, "
                f"{time.perf_counter() - t0:.2f}s)")
    _progress(100, "Export complete")
    return str(path.resolve())
