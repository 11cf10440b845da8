import asyncio
import logging
from pathlib import Path
from typing import Literal, Optional

import cv2
import mediapipe as mp
import numpy as np
from mediapipe.tasks.python import BaseOptions, vision

from ..errors import TrackingUnavailableError
from ..models import Landmark, LandmarkSet

logger = logging.getLogger(__name__)


class MediaPipeFaceDetector:
    """
    FaceDetector backed by the MediaPipe Tasks FaceLandmarker in VIDEO mode.

    VIDEO mode requires strictly increasing timestamps, which the render
    loop guarantees by skipping frames it has already processed.
    """

    def __init__(self, landmarker: vision.FaceLandmarker):
        self._landmarker: Optional[vision.FaceLandmarker] = landmarker

    @classmethod
    async def create(
        cls,
        model_path: Path,
        delegate: Literal["CPU", "GPU"] = "CPU",
    ) -> "MediaPipeFaceDetector":
        """
        Loads the landmark model. The load blocks for a noticeable time, so it
        runs in a worker thread to keep the event loop responsive.
        """
        if not model_path.exists():
            raise TrackingUnavailableError(f"Face landmarker model not found: {model_path}")

        options = vision.FaceLandmarkerOptions(
            base_options=BaseOptions(
                model_asset_path=str(model_path),
                delegate=BaseOptions.Delegate[delegate],
            ),
            running_mode=vision.RunningMode.VIDEO,
            num_faces=1,
            output_face_blendshapes=False,
        )

        logger.info(f"Loading face landmarker from {model_path} ({delegate})...")
        try:
            landmarker = await asyncio.to_thread(vision.FaceLandmarker.create_from_options, options)
        except (RuntimeError, ValueError) as e:
            raise TrackingUnavailableError(f"Failed to load face landmarker: {e}") from e

        logger.info("Face landmarker ready.")
        return cls(landmarker)

    def detect(self, image: np.ndarray, timestamp_ms: int) -> Optional[LandmarkSet]:
        if self._landmarker is None:
            return None

        # MediaPipe expects RGB input
        rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb)
        result = self._landmarker.detect_for_video(mp_image, timestamp_ms)

        if not result.face_landmarks:
            return None
        return tuple(Landmark(p.x, p.y, p.z) for p in result.face_landmarks[0])

    def close(self) -> None:
        if self._landmarker is not None:
            self._landmarker.close()
            self._landmarker = None
            logger.info("Face landmarker closed.")
