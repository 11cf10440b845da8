from .frame import VideoFrame
from .head import HeadSample, HeadState, Landmark, LandmarkSet, RawTarget
from .projection import Frustum, Projection
from .screen import VirtualScreen
from .window import WindowEvents

__all__ = [
    "Frustum",
    "HeadSample",
    "HeadState",
    "Landmark",
    "LandmarkSet",
    "Projection",
    "RawTarget",
    "VideoFrame",
    "VirtualScreen",
    "WindowEvents",
]
