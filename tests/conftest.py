import random

import pytest

from planetbuilder import PlanetBuilder, PlanetSettings
from planetbuilder.models import NoiseMode
from planetbuilder.noise import NoiseContext
from planetbuilder.sphere import create_base_sphere
from planetbuilder.terrain import generate_terrain


@pytest.fixture
def noise_ctx():
    return NoiseContext(seed=1234)


@pytest.fixture
def terrain(noise_ctx):
    """Small bumpy planet (res 8, coherent noise, h=0.3)."""
    base = create_base_sphere(8)
    return generate_terrain(base, noise_ctx, NoiseMode.COHERENT, 0.3)


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def builder():
    settings = PlanetSettings(
        resolution=8,
        displacement=0.3,
        sea_level=-1.0,
        counts={"tree": 3, "rock": 2, "grass": 2, "cloud": 1},
    )
    return PlanetBuilder(settings=settings, seed=7, max_attempts=50)
