from dataclasses import dataclass, replace
from typing import NamedTuple, Sequence


class Landmark(NamedTuple):
    """A single face landmark in normalized [0, 1] image coordinates."""
    x: float
    y: float
    z: float = 0.0


# Ordered by the landmark model's fixed anatomical point indices.
LandmarkSet = Sequence[Landmark]


@dataclass(slots=True, frozen=True)
class RawTarget:
    """Instantaneous head offset from the latest detection, in world units."""
    x: float
    y: float


@dataclass(slots=True, frozen=True)
class HeadState:
    """
    The eye position used for the projection, in world units.

    `z` is the fixed viewing distance from the screen plane; only the
    lateral offset is tracked.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 30.0

    def moved_to(self, x: float, y: float) -> "HeadState":
        return replace(self, x=x, y=y)


@dataclass(slots=True, frozen=True)
class HeadSample:
    """Per-frame head position as broadcast to telemetry subscribers."""
    timestamp_ms: int
    x: float
    y: float
    z: float
    tracked: bool
