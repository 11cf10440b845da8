from dataclasses import dataclass, field, replace
from enum import Enum, auto

from ..models import HeadState, VirtualScreen


class LoopState(Enum):
    """
    Lifecycle of the render loop.

    There is no way back to an earlier state; a stopped loop is discarded.
    """
    UNINITIALIZED = auto()  # Scene or tracker setup still in progress.
    RUNNING = auto() # Steady per-frame cycle.
    STOPPED = auto() # Stop flag observed, resources released.


@dataclass(slots=True, frozen=True)
class TrackingState:
    """
    Everything the per-frame cycle reads and writes, owned by the RenderLoop.

    Each step returns a new instance instead of mutating this one.
    """
    screen: VirtualScreen
    head: HeadState = field(default_factory=HeadState)
    last_timestamp_ms: int = -1
    # Whether the most recent processed frame contained a face.
    face_found: bool = False

    def with_screen(self, screen: VirtualScreen) -> "TrackingState":
        return replace(self, screen=screen)
