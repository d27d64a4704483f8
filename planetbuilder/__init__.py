"""PlanetBuilder package: procedural planet terrain, prop scattering and picking."""

from planetbuilder.builder import PlanetBuilder
from planetbuilder.camera import Camera
from planetbuilder.errors import (PlanetBuilderError, InvalidTransform,
                                  DegenerateVector, ScatterExhausted, NoPickHit)
from planetbuilder.models import (NoiseMode, PropCategory, PlanetSettings,
                                  PlanetSnapshot)
