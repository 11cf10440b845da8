class FishTankError(Exception):
    """Base exception for the head-tracked projection pipeline."""
    pass


class ConfigurationError(FishTankError):
    """
    Raised for inputs that can only come from a programming or setup error,
    such as a non-positive viewport aspect ratio or a head sitting on the
    screen plane. Never recovered from inside the render loop.
    """
    pass


class TrackingUnavailableError(FishTankError):
    """Camera or face model could not be brought up. Absorbed at setup."""
    pass


class LandmarkIndexError(FishTankError):
    """The landmark set does not contain the configured reference indices."""

    def __init__(self, index: int, available: int):
        super().__init__(
            f"Landmark index {index} out of range for a set of {available} points."
        )
        self.index = index
        self.available = available
