"""Default generation parameters, camera setup and paths."""

import math
import os
import pathlib

BASE_DIR = pathlib.Path(__file__).resolve().parent.parent
OUTPUT_DIR = pathlib.Path(os.environ.get("PLANETBUILDER_OUTPUT_DIR",
                                         str(BASE_DIR / "output")))

# Set PLANETBUILDER_SEED for reproducible sessions; unset = fresh shuffle
_seed_env = os.environ.get("PLANETBUILDER_SEED", "").strip()
SESSION_SEED = int(_seed_env) if _seed_env else None

# ── Terrain ──────────────────────────────────────────────────────────
DEFAULT_RESOLUTION = 250
DEFAULT_DISPLACEMENT = 0.45
DEFAULT_SEA_LEVEL = 0.0
DEFAULT_NOISE_MODE = "coherent"
NOISE_FREQUENCY = 2.0           # coherent noise sampled at 2 * position
UNCORRELATED_VARIATION = 0.7    # uniform draws in [-0.35, 0.35)
PERMUTATION_SIZE = 256

# ── Scattering ───────────────────────────────────────────────────────
MAX_SCATTER_ATTEMPTS = 100_000
DEFAULT_COUNTS = {
    "tree": 10,
    "rock": 10,
    "grass": 10,
    "cloud": 5,
}

# ── Surface classification (sea / beach / land) ──────────────────────
BEACH_BAND = 0.05
SURFACE_COLORS = {
    "sea":   (0.0, 0.3, 0.7),
    "beach": (0.9, 0.8, 0.6),
    "land":  (0.1, 0.6, 0.2),
}

# ── Numeric tolerances ───────────────────────────────────────────────
NORMALIZE_EPSILON = 1e-5
SINGULAR_EPSILON = 1e-12
RAY_EPSILON = 1e-8

# ── Camera ───────────────────────────────────────────────────────────
CAMERA_EYE = (0.0, 0.0, 4.0)
CAMERA_TARGET = (0.0, 0.0, 0.0)
CAMERA_UP = (0.0, 1.0, 0.0)
CAMERA_FOV_Y = math.radians(60.0)
CAMERA_NEAR = 0.1
CAMERA_FAR = 50.0
