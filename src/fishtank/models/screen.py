import math
from dataclasses import dataclass

from ..errors import ConfigurationError


def _require_aspect(aspect_ratio: float) -> float:
    if not math.isfinite(aspect_ratio) or aspect_ratio <= 0:
        raise ConfigurationError(f"Viewport aspect ratio must be positive, got {aspect_ratio!r}.")
    return aspect_ratio


@dataclass(slots=True, frozen=True)
class VirtualScreen:
    """
    The world-space rectangle the projection treats as a physical window.

    Centered at the world origin on the Z=0 plane. The width is fixed for the
    lifetime of the application; the height always follows the viewport
    aspect ratio. Instances are immutable: a resize produces a new screen.
    """
    width: float
    height: float

    @classmethod
    def initialize(cls, width: float, aspect_ratio: float) -> "VirtualScreen":
        if not math.isfinite(width) or width <= 0:
            raise ConfigurationError(f"Virtual screen width must be positive, got {width!r}.")
        return cls(width=width, height=width / _require_aspect(aspect_ratio))

    def on_resize(self, aspect_ratio: float) -> "VirtualScreen":
        """Recompute the height for a new viewport aspect ratio."""
        return VirtualScreen(width=self.width, height=self.width / _require_aspect(aspect_ratio))

    def on_viewport_resize(self, width_px: int, height_px: int) -> "VirtualScreen":
        """
        Same as `on_resize`, from pixel dimensions. Computed as
        width * height_px / width_px to avoid rounding the aspect ratio first.
        """
        if width_px <= 0 or height_px <= 0:
            raise ConfigurationError(f"Viewport size must be positive, got {width_px}x{height_px}.")
        return VirtualScreen(width=self.width, height=self.width * height_px / width_px)

    @property
    def half_width(self) -> float:
        return self.width * 0.5

    @property
    def half_height(self) -> float:
        return self.height * 0.5
