import logging
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, PositiveFloat, PositiveInt, model_validator, Field

from .utils import LoggingConfig

logger = logging.getLogger(__name__)

class ScreenSettings(BaseModel):
    """
    The virtual window the scene is viewed through.
    All measurements are in world units.
    """
    width: PositiveFloat = Field(40.0, description="Fixed width of the virtual screen. Height follows the viewport aspect ratio.")
    head_distance: PositiveFloat = Field(30.0, description="Fixed distance of the viewer's eye from the screen plane.")

class TrackingSettings(BaseModel):
    """Camera capture, face landmark model and head filtering."""
    enabled: bool = True
    camera_index: int = Field(0, ge=0)
    capture_width: PositiveInt = 640
    capture_height: PositiveInt = 480
    model_path: Path = Field(
        default_factory=lambda: Path.cwd() / "models" / "face_landmarker.task",
        description="MediaPipe FaceLandmarker task bundle."
    )
    delegate: Literal["CPU", "GPU"] = "CPU"

    # Landmark contract (MediaPipe FaceMesh point ordering)
    anchor: Literal["eye_midpoint", "nose_tip"] = "eye_midpoint"
    left_eye_index: int = Field(33, ge=0)
    right_eye_index: int = Field(263, ge=0)
    nose_tip_index: int = Field(1, ge=0)

    comfort_factor: float = Field(1.2, ge=1.0, description="Reach the screen edges without reaching the camera frame edges.")
    smoothing_alpha: float = Field(0.15, gt=0.0, le=1.0, description="Exponential smoothing factor, applied once per processed detection.")
    clamp_fraction: float = Field(0.45, gt=0.0, lt=0.5, description="Head offset bound as a fraction of the screen extent.")

class ProjectionSettings(BaseModel):
    near: PositiveFloat = 0.1
    far: PositiveFloat = 1000.0

    @model_validator(mode='after')
    def validate_clip_planes(self) -> "ProjectionSettings":
        if self.far <= self.near:
            raise ValueError('Far plane must lie beyond the near plane.')
        return self

class WindowSettings(BaseModel):
    width_px: PositiveInt = 1280
    height_px: PositiveInt = 720
    fullscreen: bool = False
    max_fps: PositiveInt = 60
    title: str = "Fish Tank View"

class SceneSettings(BaseModel):
    rotation_speed: float = Field(0.5, description="Spin of the centre object in radians per second.")

class TelemetrySettings(BaseModel):
    enabled: bool = False
    host: str = "tcp://*:5556"

class AppSettings(BaseSettings):
    """
    Main application settings, loaded from environment variables and defaults.
    """
    use_dummy_mode: bool = False

    screen: ScreenSettings = Field(default_factory=ScreenSettings)
    tracking: TrackingSettings = Field(default_factory=TrackingSettings)
    projection: ProjectionSettings = Field(default_factory=ProjectionSettings)

    # Presentation
    window: WindowSettings = Field(default_factory=WindowSettings)
    scene: SceneSettings = Field(default_factory=SceneSettings)

    # Sinks
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)

    # Logging
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="FISHTANK__",
        env_file=".env",
        env_nested_delimiter='__',
        case_sensitive=False
    )
