import os
import pathlib

from planetbuilder import constants as _engine

BASE_DIR = pathlib.Path(__file__).parent.parent.absolute()
OUTPUT_DIR = _engine.OUTPUT_DIR


def parse_origins(raw: str) -> list[str]:
    """Split a comma-separated origin list, dropping blanks."""
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


# Browser origins of the planet viewer allowed to call the API
_DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"
CORS_ORIGINS = parse_origins(
    os.environ.get("PLANETBUILDER_CORS_ORIGINS", _DEFAULT_CORS_ORIGINS))

# Resolution of the planet built when the service starts
START_RESOLUTION = int(os.environ.get("PLANETBUILDER_START_RESOLUTION",
                                      str(_engine.DEFAULT_RESOLUTION)))
SEED = _engine.SESSION_SEED
