from .clock import FrameClock
from .logging import ThrottledLogger

__all__ = ["FrameClock", "ThrottledLogger"]
