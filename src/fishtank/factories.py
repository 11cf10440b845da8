import logging
from typing import Optional

from screeninfo import get_monitors

from .capture import DummyFrameSource
from .configs import AppSettings
from .core.protocols import FaceDetector, FrameSource, SceneRenderer
from .errors import TrackingUnavailableError
from .projection import OffAxisProjector
from .rendering import RoomScene
from .telemetry import HeadPublisher
from .tracking import DummyFaceDetector, HeadPositionEstimator, MotionSmoother
from .utils import FrameClock

logger = logging.getLogger(__name__)


async def create_tracking(
    settings: AppSettings,
    clock: FrameClock,
) -> tuple[FaceDetector, FrameSource]:
    """
    Brings up the camera and the face model.
    Raises TrackingUnavailableError if either fails; nothing is left open.
    """
    if settings.use_dummy_mode:
        logger.warning("Using simulated viewer (no camera, no model).")
        return DummyFaceDetector(), DummyFrameSource(clock)

    from .capture.camera import CameraFrameSource
    from .tracking.landmarker import MediaPipeFaceDetector

    cfg = settings.tracking
    source = await CameraFrameSource.open(
        cfg.camera_index, clock, width=cfg.capture_width, height=cfg.capture_height
    )
    try:
        detector = await MediaPipeFaceDetector.create(cfg.model_path, delegate=cfg.delegate)
    except TrackingUnavailableError:
        source.close()
        raise
    return detector, source


def create_estimator(settings: AppSettings) -> HeadPositionEstimator:
    cfg = settings.tracking
    return HeadPositionEstimator(
        comfort_factor=cfg.comfort_factor,
        anchor=cfg.anchor,
        left_eye_index=cfg.left_eye_index,
        right_eye_index=cfg.right_eye_index,
        nose_tip_index=cfg.nose_tip_index,
    )


def create_smoother(settings: AppSettings) -> MotionSmoother:
    return MotionSmoother(
        alpha=settings.tracking.smoothing_alpha,
        clamp_fraction=settings.tracking.clamp_fraction,
    )


def create_projector(settings: AppSettings) -> OffAxisProjector:
    return OffAxisProjector(near=settings.projection.near, far=settings.projection.far)


def create_scene(settings: AppSettings) -> RoomScene:
    return RoomScene(rotation_speed=settings.scene.rotation_speed)


def create_renderer(settings: AppSettings) -> SceneRenderer:
    from .rendering.renderer import PygameGLRenderer

    window = settings.window
    width_px, height_px = window.width_px, window.height_px
    if window.fullscreen:
        monitor = get_monitors()[0]
        width_px, height_px = monitor.width, monitor.height

    return PygameGLRenderer(
        width_px=width_px,
        height_px=height_px,
        title=window.title,
        fullscreen=window.fullscreen,
    )


def create_publisher(settings: AppSettings) -> Optional[HeadPublisher]:
    if not settings.telemetry.enabled:
        return None
    return HeadPublisher(host=settings.telemetry.host)
