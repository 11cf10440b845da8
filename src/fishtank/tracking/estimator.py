import logging
from typing import Literal

from ..errors import LandmarkIndexError
from ..models import LandmarkSet, RawTarget, VirtualScreen

logger = logging.getLogger(__name__)

# MediaPipe FaceMesh point ordering
LEFT_EYE_OUTER = 33
RIGHT_EYE_OUTER = 263
NOSE_TIP = 1


class HeadPositionEstimator:
    """
    Converts a face landmark set into a raw head offset in world units.

    The default anchor is the midpoint of the two outer eye corners, which
    moves much less than the nose tip when the head yaws or pitches in place.
    """

    def __init__(
        self,
        comfort_factor: float = 1.2,
        anchor: Literal["eye_midpoint", "nose_tip"] = "eye_midpoint",
        left_eye_index: int = LEFT_EYE_OUTER,
        right_eye_index: int = RIGHT_EYE_OUTER,
        nose_tip_index: int = NOSE_TIP,
    ):
        self.comfort_factor = comfort_factor
        self.anchor = anchor
        self.left_eye_index = left_eye_index
        self.right_eye_index = right_eye_index
        self.nose_tip_index = nose_tip_index

    def anchor_point(self, landmarks: LandmarkSet) -> tuple[float, float]:
        """Normalized (x, y) image position that stands in for the head."""
        if self.anchor == "nose_tip":
            nose = self._pick(landmarks, self.nose_tip_index)
            return nose.x, nose.y

        left = self._pick(landmarks, self.left_eye_index)
        right = self._pick(landmarks, self.right_eye_index)
        return (left.x + right.x) * 0.5, (left.y + right.y) * 0.5

    def estimate(self, landmarks: LandmarkSet, screen: VirtualScreen) -> RawTarget:
        mid_x, mid_y = self.anchor_point(landmarks)

        # Centered on the frame, range [-1, 1]. X is mirrored so that moving
        # the head right moves the eye right.
        raw_x = (0.5 - mid_x) * 2
        raw_y = (mid_y - 0.5) * 2

        return RawTarget(
            x=raw_x * screen.half_width * self.comfort_factor,
            y=-raw_y * screen.half_height * self.comfort_factor,
        )

    @staticmethod
    def _pick(landmarks: LandmarkSet, index: int):
        if index >= len(landmarks):
            raise LandmarkIndexError(index, len(landmarks))
        return landmarks[index]
