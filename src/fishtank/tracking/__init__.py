from .dummy import DummyFaceDetector
from .estimator import HeadPositionEstimator, LEFT_EYE_OUTER, NOSE_TIP, RIGHT_EYE_OUTER
from .smoother import MotionSmoother

# MediaPipeFaceDetector lives in .landmarker and is imported on demand.

__all__ = [
    "DummyFaceDetector",
    "HeadPositionEstimator",
    "LEFT_EYE_OUTER",
    "MotionSmoother",
    "NOSE_TIP",
    "RIGHT_EYE_OUTER",
]
