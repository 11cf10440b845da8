from .scene import RoomScene

# PygameGLRenderer lives in .renderer and is imported on demand.

__all__ = ["RoomScene"]
