"""Tests for rejection-sampled prop placement."""

import random

import numpy as np
import pytest

from planetbuilder import transforms as tf
from planetbuilder.errors import ScatterExhausted
from planetbuilder.models import NoiseMode, PropCategory, PROP_STYLES
from planetbuilder.scatter import (place_prop, prop_transform,
                                   scatter_all, scatter_category)
from planetbuilder.sphere import create_base_sphere
from planetbuilder.terrain import generate_terrain


class TestPropTransform:
    def test_composition_order(self):
        position = np.array([0.0, 0.0, 1.2])
        normal = np.array([0.0, 0.0, 1.0])
        model = prop_transform(PropCategory.TREE, position, normal)
        style = PROP_STYLES[PropCategory.TREE]

        # Origin of the model lands on the offset surface point
        np.testing.assert_allclose(tf.transform_point(model, (0, 0, 0)),
                                   position + normal * style.offset)
        # Model +Y follows the normal and is scaled
        np.testing.assert_allclose(tf.transform_direction(model, (0, 1, 0)),
                                   normal * style.scale, atol=1e-12)

    def test_grass_sinks_below_surface(self):
        model = prop_transform(PropCategory.GRASS, (0.0, 2.0, 0.0), (0.0, 1.0, 0.0))
        assert model[1, 3] == pytest.approx(2.0 - 0.025)

    def test_instance_position(self):
        inst = place_prop("rock", (1.0, 0.0, 0.0), (2.0, 0.0, 0.0))
        assert inst.category is PropCategory.ROCK
        np.testing.assert_allclose(inst.position, [1.01, 0.0, 0.0])
        assert len(inst.to_dict()["model"]) == 16


class TestScatterCategory:
    def test_exact_count_below_everything(self, terrain, rng):
        placed = scatter_category(terrain, PropCategory.TREE, 25, -1.0, rng=rng)
        assert len(placed) == 25
        assert all(p.category is PropCategory.TREE for p in placed)

    def test_positions_sit_on_vertices(self, noise_ctx, rng):
        base = create_base_sphere(6)
        flat = generate_terrain(base, noise_ctx, NoiseMode.COHERENT, 0.0)
        placed = scatter_category(flat, PropCategory.TREE, 10, -1.0, rng=rng)
        radii = [np.linalg.norm(p.position) for p in placed]
        np.testing.assert_allclose(radii, 1.01)

    def test_only_above_sea_level(self, terrain, rng):
        placed = scatter_category(terrain, PropCategory.ROCK, 20, 0.0, rng=rng)
        offset = PROP_STYLES[PropCategory.ROCK].offset
        for p in placed:
            # back off the normal offset to recover the vertex radius
            assert np.linalg.norm(p.position) - offset > 1.0

    def test_exhaustion_raises_with_nothing_placed(self, terrain, rng):
        with pytest.raises(ScatterExhausted) as excinfo:
            scatter_category(terrain, PropCategory.TREE, 3, 1.0, rng=rng,
                             max_attempts=200)
        assert excinfo.value.placed == []
        assert excinfo.value.requested == 3
        assert excinfo.value.category is PropCategory.TREE

    def test_clouds_ignore_sea_level(self, terrain, rng):
        placed = scatter_category(terrain, PropCategory.CLOUD, 4, 1.0, rng=rng,
                                  max_attempts=1)
        assert len(placed) == 4

    def test_zero_count(self, terrain, rng):
        assert scatter_category(terrain, PropCategory.GRASS, 0, 1.0, rng=rng) == []

    def test_same_seed_same_placements(self, terrain):
        a = scatter_category(terrain, "tree", 5, 0.0, rng=random.Random(3))
        b = scatter_category(terrain, "tree", 5, 0.0, rng=random.Random(3))
        for x, y in zip(a, b):
            np.testing.assert_array_equal(x.model, y.model)


class TestScatterAll:
    def test_counts_per_category(self, terrain, rng):
        counts = {PropCategory.TREE: 3, "rock": 2, PropCategory.GRASS: 0,
                  PropCategory.CLOUD: 1}
        instances, exhausted = scatter_all(terrain, counts, -1.0, rng=rng)
        assert exhausted == []
        assert len(instances) == 6

    def test_exhausted_categories_do_not_stop_others(self, terrain, rng):
        counts = {"tree": 2, "rock": 2, "grass": 2, "cloud": 3}
        instances, exhausted = scatter_all(terrain, counts, 1.0, rng=rng,
                                           max_attempts=50)
        assert exhausted == [PropCategory.TREE, PropCategory.ROCK,
                             PropCategory.GRASS]
        assert [i.category for i in instances] == [PropCategory.CLOUD] * 3
