from .dummy import DummyFrameSource

# CameraFrameSource lives in .camera and is imported on demand.

__all__ = ["DummyFrameSource"]
