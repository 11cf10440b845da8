from typing import Optional

import numpy as np

from ..models import VideoFrame
from ..utils import FrameClock


class DummyFrameSource:
    """Produces blank frames with fresh timestamps, paired with DummyFaceDetector."""

    def __init__(self, clock: FrameClock, width: int = 640, height: int = 480):
        self._clock = clock
        self._image = np.zeros((height, width, 3), dtype=np.uint8)

    def read(self) -> Optional[VideoFrame]:
        return VideoFrame(image=self._image, timestamp_ms=self._clock.timestamp_ms())

    def close(self) -> None:
        pass
