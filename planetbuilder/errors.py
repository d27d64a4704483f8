"""Error kinds raised by the geometry engine."""


class PlanetBuilderError(Exception):
    """Base class for all planetbuilder errors."""


class InvalidTransform(PlanetBuilderError):
    """Attempted to invert a singular or near-singular matrix."""


class DegenerateVector(PlanetBuilderError):
    """Attempted to normalize (or rotate about) a near-zero-length vector."""


class ScatterExhausted(PlanetBuilderError):
    """Rejection sampling ran out of attempts for a prop category.

    ``placed`` holds the instances accepted before the attempt ceiling was
    hit so callers can keep the partial result.
    """

    def __init__(self, category, requested: int, placed=None, attempts: int = 0):
        self.category = category
        self.requested = requested
        self.placed = list(placed or [])
        self.attempts = attempts
        super().__init__(
            f"No above-water vertex found for {getattr(category, 'value', category)} "
            f"after {attempts} attempts ({len(self.placed)}/{requested} placed)")


class NoPickHit(PlanetBuilderError):
    """A pick ray did not intersect any terrain triangle."""
