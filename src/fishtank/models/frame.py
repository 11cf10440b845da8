from dataclasses import dataclass

import numpy as np

@dataclass(slots=True, frozen=True)
class VideoFrame:
    """
    A single camera frame.

    `image` is an HxWx3 uint8 array in BGR channel order (OpenCV convention).
    `timestamp_ms` is monotonically increasing across frames of one source.
    """
    image: np.ndarray
    timestamp_ms: int
