from .utils import LoggingConfig
from .app import (
    AppSettings,
    ProjectionSettings,
    SceneSettings,
    ScreenSettings,
    TelemetrySettings,
    TrackingSettings,
    WindowSettings,
)

__all__ = [
    "AppSettings",
    "LoggingConfig",
    "ProjectionSettings",
    "SceneSettings",
    "ScreenSettings",
    "TelemetrySettings",
    "TrackingSettings",
    "WindowSettings",
]
