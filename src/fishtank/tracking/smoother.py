from ..models import HeadState, RawTarget, VirtualScreen


def smooth_axis(previous: float, target: float, alpha: float) -> float:
    return previous + (target - previous) * alpha


def clamp(value: float, bound: float) -> float:
    return max(-bound, min(value, bound))


class MotionSmoother:
    """
    Exponential low-pass filter on the head offset, followed by a clamp.

    The filter runs once per processed detection and is not scaled by the
    time between frames, so its responsiveness depends on the frame rate.

    The clamp bound is `clamp_fraction` of the full screen extent on each
    axis. With a fraction below 0.5 the eye always stays strictly inside the
    screen rectangle, which keeps the frustum non-degenerate.
    """

    def __init__(self, alpha: float = 0.15, clamp_fraction: float = 0.45):
        if not 0.0 < alpha <= 1.0:
            raise ValueError("alpha must be in (0, 1].")
        if not 0.0 < clamp_fraction < 0.5:
            raise ValueError("clamp_fraction must be in (0, 0.5).")
        self.alpha = alpha
        self.clamp_fraction = clamp_fraction

    def smooth(self, previous: HeadState, target: RawTarget) -> tuple[float, float]:
        return (
            smooth_axis(previous.x, target.x, self.alpha),
            smooth_axis(previous.y, target.y, self.alpha),
        )

    def clamp(self, x: float, y: float, screen: VirtualScreen) -> tuple[float, float]:
        return (
            clamp(x, screen.width * self.clamp_fraction),
            clamp(y, screen.height * self.clamp_fraction),
        )

    def update(self, previous: HeadState, target: RawTarget, screen: VirtualScreen) -> HeadState:
        x, y = self.smooth(previous, target)
        x, y = self.clamp(x, y, screen)
        return previous.moved_to(x, y)
