from typing import Optional, Protocol, runtime_checkable

import numpy as np

from ..models import LandmarkSet, Projection, VideoFrame, WindowEvents


@runtime_checkable
class FaceDetector(Protocol):
    """
    Anything that finds one face in a video frame.

    `detect` is synchronous and does not deduplicate: callers must not hand
    it the same timestamp twice. Returns None when no face is found.
    """
    def detect(self, image: np.ndarray, timestamp_ms: int) -> Optional[LandmarkSet]: ...

    def close(self) -> None: ...


@runtime_checkable
class FrameSource(Protocol):
    """Provides the most recent camera frame, or None if nothing is available."""
    def read(self) -> Optional[VideoFrame]: ...

    def close(self) -> None: ...


@runtime_checkable
class Scene(Protocol):
    """Scene content. The core only advances its time-driven animation."""
    def update(self, elapsed_s: float) -> None: ...


@runtime_checkable
class SceneRenderer(Protocol):
    """
    Defines the methods required for any rasterizer backend.
    Whether it's OpenGL, a software renderer or a test double, it must
    support these calls.
    """
    @property
    def viewport_size(self) -> tuple[int, int]: ...

    def render(self, scene: Scene, projection: Projection) -> None: ...

    def poll_events(self) -> WindowEvents: ...

    def close(self) -> None: ...
