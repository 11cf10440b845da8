import logging
import math
from typing import Optional

import numpy as np

from ..models import Landmark, LandmarkSet
from .estimator import LEFT_EYE_OUTER, NOSE_TIP, RIGHT_EYE_OUTER

logger = logging.getLogger(__name__)

# FaceLandmarker output size with iris refinement
FACE_LANDMARK_COUNT = 478


class DummyFaceDetector:
    """
    A FaceDetector that simulates a viewer for development and testing.

    The head follows a circular path in the camera image, driven by the frame
    timestamp rather than by call count, so the motion speed does not depend
    on the render frame rate. Useful for running the whole pipeline without a
    camera or a landmark model.
    """

    def __init__(
        self,
        radius: float = 0.2,
        center: tuple[float, float] = (0.5, 0.5),
        speed: float = 0.1,
        eye_spacing: float = 0.06,
        miss_every: int = 0,
    ):
        """
        Args:
            radius: The radius of the circular path, in normalized image units.
            center: The (x, y) center of the circular path.
            speed: Revolutions per second.
            eye_spacing: Horizontal distance between the two outer eye corners.
            miss_every: If positive, every n-th call reports no face.
        """
        if radius < 0 or eye_spacing < 0:
            raise ValueError("radius and eye_spacing must not be negative.")
        if miss_every < 0:
            raise ValueError("miss_every must not be negative.")

        self._radius = radius
        self._center_x, self._center_y = center
        self._speed = speed
        self._eye_spacing = eye_spacing
        self._miss_every = miss_every
        self._calls = 0

        logger.info(f"DummyFaceDetector circling at {self._speed} rev/s.")

    def head_position(self, timestamp_ms: int) -> tuple[float, float]:
        angle = (timestamp_ms / 1_000) * self._speed * 2 * math.pi
        return (
            self._center_x + self._radius * math.cos(angle),
            self._center_y + self._radius * math.sin(angle),
        )

    def detect(self, image: np.ndarray, timestamp_ms: int) -> Optional[LandmarkSet]:
        self._calls += 1
        if self._miss_every and self._calls % self._miss_every == 0:
            return None

        x, y = self.head_position(timestamp_ms)
        half = self._eye_spacing * 0.5

        points = [Landmark(x, y)] * FACE_LANDMARK_COUNT
        # The subject's right eye is on the image left
        points[LEFT_EYE_OUTER] = Landmark(x - half, y)
        points[RIGHT_EYE_OUTER] = Landmark(x + half, y)
        points[NOSE_TIP] = Landmark(x, y + 0.04)
        return tuple(points)

    def close(self) -> None:
        pass
