import logging
from typing import Optional

from planetbuilder import PlanetBuilder, PlanetSettings

from backend import config

logger = logging.getLogger(__name__)


class PlanetSession:
    """The live planet shared by every request.

    The builder is created on first use so importing the app stays cheap.
    """

    def __init__(self) -> None:
        self._builder: Optional[PlanetBuilder] = None

    @property
    def builder(self) -> PlanetBuilder:
        if self._builder is None:
            self.reset()
        return self._builder

    def reset(self, settings: Optional[PlanetSettings] = None,
              seed=config.SEED) -> PlanetBuilder:
        settings = settings or PlanetSettings(resolution=config.START_RESOLUTION)
        logger.info(f"Starting planet session (r={settings.resolution}, seed={seed})")
        self._builder = PlanetBuilder(settings=settings, seed=seed)
        return self._builder


# Singleton instance used across the application
planet_session = PlanetSession()
