import asyncio
import logging
from typing import Optional

import cv2

from ..errors import TrackingUnavailableError
from ..models import VideoFrame
from ..utils import FrameClock, ThrottledLogger

logger = logging.getLogger(__name__)


class CameraFrameSource:
    """
    FrameSource reading from a local webcam through OpenCV.

    `read` blocks until the driver delivers the next frame, so the render
    loop runs no faster than the camera. Frames are stamped from the shared
    FrameClock at the moment they arrive.
    """

    def __init__(self, capture: cv2.VideoCapture, clock: FrameClock):
        self._capture: Optional[cv2.VideoCapture] = capture
        self._clock = clock
        self._read_failures = ThrottledLogger(logger)

    @classmethod
    async def open(
        cls,
        camera_index: int,
        clock: FrameClock,
        width: int = 640,
        height: int = 480,
    ) -> "CameraFrameSource":
        """
        Opens the camera. Device discovery and permission prompts can block
        for seconds, so this runs in a worker thread.
        """
        logger.info(f"Opening camera {camera_index}...")

        def _open() -> cv2.VideoCapture:
            capture = cv2.VideoCapture(camera_index)
            if capture.isOpened():
                capture.set(cv2.CAP_PROP_FRAME_WIDTH, width)
                capture.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
            return capture

        capture = await asyncio.to_thread(_open)
        if not capture.isOpened():
            capture.release()
            raise TrackingUnavailableError(f"Camera {camera_index} could not be opened.")

        logger.info(
            f"Camera {camera_index} opened at "
            f"{int(capture.get(cv2.CAP_PROP_FRAME_WIDTH))}x{int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT))}."
        )
        return cls(capture, clock)

    def read(self) -> Optional[VideoFrame]:
        if self._capture is None:
            return None

        ok, image = self._capture.read()
        if not ok or image is None:
            self._read_failures.warning("Camera frame read failed.")
            return None

        return VideoFrame(image=image, timestamp_ms=self._clock.timestamp_ms())

    def close(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.info("Camera released.")
