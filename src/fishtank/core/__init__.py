from .loop import RenderLoop, track_frame
from .protocols import FaceDetector, FrameSource, Scene, SceneRenderer
from .state import LoopState, TrackingState

__all__ = [
    "FaceDetector",
    "FrameSource",
    "LoopState",
    "RenderLoop",
    "Scene",
    "SceneRenderer",
    "TrackingState",
    "track_frame",
]
