"""Rejection-sampled placement of props on the terrain surface."""

import logging
import random

import numpy as np

from . import transforms as tf
from .constants import MAX_SCATTER_ATTEMPTS
from .errors import ScatterExhausted
from .models import PropCategory, PropInstance, PROP_STYLES, Terrain
from .orientation import align_to_normal

logger = logging.getLogger(__name__)


def prop_transform(category, position, normal) -> np.ndarray:
    """Model matrix ``T * R * S`` standing a prop on *position*.

    The prop is pushed along *normal* by the category offset, rotated so
    its +Y axis follows the normal, and uniformly scaled.
    """
    style = PROP_STYLES[PropCategory(category)]
    n = tf.normalize(normal)
    p = tf.as_vector(position) + n * style.offset
    return tf.multiply(
        tf.translation(*p),
        align_to_normal(n),
        tf.scaling(style.scale),
    )


def place_prop(category, position, normal) -> PropInstance:
    category = PropCategory(category)
    return PropInstance(category=category,
                        model=prop_transform(category, position, normal))


def scatter_category(terrain: Terrain, category, count: int, sea_level: float,
                     rng=None, max_attempts: int = MAX_SCATTER_ATTEMPTS) -> list:
    """Place up to *count* instances of *category* on random vertices.

    Each instance draws uniformly random vertices until one lies above
    *sea_level* (clouds take the first draw).  If *max_attempts* draws all
    land in water, placement for this category stops at once and
    ScatterExhausted is raised carrying the instances placed so far.
    """
    category = PropCategory(category)
    style = PROP_STYLES[category]
    rng = rng or random.Random()
    n_verts = terrain.vertex_count
    placed = []
    if count <= 0:
        return placed
    if n_verts == 0:
        raise ScatterExhausted(category, count, placed, attempts=0)

    heights = terrain.heights
    while len(placed) < count:
        index = None
        for _ in range(max_attempts):
            candidate = rng.randrange(n_verts)
            if style.sea_level_exempt or heights[candidate] > sea_level:
                index = candidate
                break

        if index is None:
            raise ScatterExhausted(category, count, placed, attempts=max_attempts)

        placed.append(place_prop(category, terrain.vertices[index],
                                 terrain.normals[index]))
    return placed


def scatter_all(terrain: Terrain, counts: dict, sea_level: float, rng=None,
                max_attempts: int = MAX_SCATTER_ATTEMPTS):
    """Scatter every category from scratch.

    Returns ``(instances, exhausted)`` where *exhausted* lists categories
    that ran out of attempts; their partial placements are kept and the
    remaining categories still run.
    """
    rng = rng or random.Random()
    instances = []
    exhausted = []
    for category in PropCategory:
        count = int(counts.get(category, counts.get(category.value, 0)))
        try:
            placed = scatter_category(terrain, category, count, sea_level,
                                      rng=rng, max_attempts=max_attempts)
        except ScatterExhausted as exc:
            logger.warning(str(exc))
            placed = exc.placed
            exhausted.append(category)
        instances.extend(placed)
        if count:
            logger.info(f"Placed {len(placed)}/{count} {category.value} props")
    return instances, exhausted
