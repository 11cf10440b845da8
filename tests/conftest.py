"""Shared fakes and fixtures for the fishtank tests."""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
import pytest

from fishtank.models import Landmark, Projection, VideoFrame, VirtualScreen, WindowEvents


def make_landmarks(mid_x: float, mid_y: float, spacing: float = 0.06, count: int = 478):
    """Landmark set with the outer eye corners centred on (mid_x, mid_y)."""
    points = [Landmark(0.5, 0.5)] * count
    points[33] = Landmark(mid_x - spacing / 2, mid_y)
    points[263] = Landmark(mid_x + spacing / 2, mid_y)
    points[1] = Landmark(mid_x, mid_y + 0.05)
    return tuple(points)


def make_frame(timestamp_ms: int) -> VideoFrame:
    return VideoFrame(image=np.zeros((4, 4, 3), dtype=np.uint8), timestamp_ms=timestamp_ms)


class ScriptedFrameSource:
    """Returns the queued frames in order, then None."""

    def __init__(self, frames: Optional[List[Optional[VideoFrame]]] = None):
        self.frames = list(frames or [])
        self.closed = False

    def read(self) -> Optional[VideoFrame]:
        return self.frames.pop(0) if self.frames else None

    def close(self) -> None:
        self.closed = True


class ScriptedDetector:
    """Returns the queued landmark sets (or None) in order and records calls."""

    def __init__(self, results=None):
        self.results = list(results or [])
        self.calls: list[int] = []
        self.closed = False

    def detect(self, image, timestamp_ms):
        self.calls.append(timestamp_ms)
        return self.results.pop(0) if self.results else None

    def close(self) -> None:
        self.closed = True


@dataclass
class FakeScene:
    updates: list = field(default_factory=list)

    def update(self, elapsed_s: float) -> None:
        self.updates.append(elapsed_s)


class FakeRenderer:
    """Records projections; asks to quit after `quit_after` polls."""

    def __init__(self, size=(1600, 900), quit_after: Optional[int] = None, resize_at: Optional[dict] = None):
        self.size = size
        self.quit_after = quit_after
        self.resize_at = resize_at or {}
        self.projections: list[Projection] = []
        self.polls = 0
        self.closed = False

    @property
    def viewport_size(self):
        return self.size

    def render(self, scene, projection: Projection) -> None:
        self.projections.append(projection)

    def poll_events(self) -> WindowEvents:
        self.polls += 1
        resized = self.resize_at.get(self.polls)
        if resized is not None:
            self.size = resized
        quit_requested = self.quit_after is not None and self.polls > self.quit_after
        return WindowEvents(quit_requested=quit_requested, resized_to=resized)

    def close(self) -> None:
        self.closed = True


class SteppingClock:
    """Stand-in for time.monotonic that advances only when told to."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def screen() -> VirtualScreen:
    return VirtualScreen.initialize(40.0, 16 / 9)
