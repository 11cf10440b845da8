import asyncio
import logging
import signal
from typing import Callable, Optional

import zmq

from .loop import RenderLoop
from .protocols import FaceDetector, FrameSource, SceneRenderer
from .state import TrackingState
from .. import factories
from ..configs import AppSettings
from ..errors import TrackingUnavailableError
from ..models import HeadState, VirtualScreen
from ..telemetry import HeadPublisher
from ..utils import FrameClock

logger = logging.getLogger(__name__)

class ViewerSession:
    """
    The headless core of the application.

    Performs the one-time setup (window, camera, face model, telemetry),
    hands the pieces to a RenderLoop and tears everything down afterwards.
    Tracking failures during setup are logged and absorbed: the loop then
    renders a fixed, centered viewpoint.
    """
    def __init__(
        self,
        settings: AppSettings,
        renderer_factory: Callable[[AppSettings], SceneRenderer] = factories.create_renderer,
    ):
        self.settings = settings
        self._renderer_factory = renderer_factory
        self.clock = FrameClock()

        self.renderer: Optional[SceneRenderer] = None
        self.detector: Optional[FaceDetector] = None
        self.frame_source: Optional[FrameSource] = None
        self.publisher: Optional[HeadPublisher] = None
        self.loop: Optional[RenderLoop] = None

    @property
    def is_tracking(self) -> bool:
        return self.detector is not None and self.frame_source is not None

    async def setup_tracking(self) -> bool:
        """
        Logic: Open the camera and load the face model.
        Returns: True if head tracking is available.
        """
        if not self.settings.tracking.enabled:
            logger.info("Head tracking disabled by configuration.")
            return False

        try:
            self.detector, self.frame_source = await factories.create_tracking(self.settings, self.clock)
            logger.info("Head tracking ready.")
            return True
        except TrackingUnavailableError as e:
            logger.error(f"Head tracking unavailable, continuing with a fixed viewpoint: {e}")
            self.detector, self.frame_source = None, None
            return False

    async def setup_publisher(self) -> None:
        publisher = factories.create_publisher(self.settings)
        if publisher is None:
            return
        try:
            await publisher.start()
            self.publisher = publisher
        except zmq.ZMQError:
            logger.warning("Telemetry disabled for this session.")
            await publisher.close()

    async def start(self) -> RenderLoop:
        """
        Logic: Window first, then tracking and telemetry, then the loop.
        The loop only enters its running state once all setup has finished.
        """
        if self.loop is not None:
            logger.warning("Session already running.")
            return self.loop

        self.renderer = self._renderer_factory(self.settings)
        await self.setup_tracking()
        await self.setup_publisher()

        width_px, height_px = self.renderer.viewport_size
        screen = VirtualScreen.initialize(self.settings.screen.width, width_px / height_px)
        state = TrackingState(screen=screen, head=HeadState(z=self.settings.screen.head_distance))

        self.loop = RenderLoop(
            renderer=self.renderer,
            scene=factories.create_scene(self.settings),
            projector=factories.create_projector(self.settings),
            estimator=factories.create_estimator(self.settings),
            smoother=factories.create_smoother(self.settings),
            initial_state=state,
            detector=self.detector,
            frame_source=self.frame_source,
            publisher=self.publisher,
            clock=self.clock,
            max_fps=self.settings.window.max_fps,
        )
        await self.loop.start()
        return self.loop

    async def run(self) -> None:
        """Starts the session and blocks until the window closes or a stop signal arrives."""
        try:
            loop = await self.start()
            self._install_signal_handlers()
            await loop.wait()
        finally:
            await self.shutdown()

    def request_stop(self) -> None:
        if self.loop is not None:
            self.loop.request_stop()

    async def shutdown(self) -> None:
        """
        Logic: Graceful cleanup of hardware before application exit.
        Devices are released even if stopping the loop fails.
        """
        try:
            if self.loop is not None:
                await self.loop.stop()
        finally:
            self.loop = None
            await self._release()
        logger.info("Session shut down.")

    async def _release(self) -> None:
        if self.publisher is not None:
            await self.publisher.close()
            self.publisher = None
        if self.detector is not None:
            self.detector.close()
            self.detector = None
        if self.frame_source is not None:
            self.frame_source.close()
            self.frame_source = None
        if self.renderer is not None:
            self.renderer.close()
            self.renderer = None

    def _install_signal_handlers(self) -> None:
        event_loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                event_loop.add_signal_handler(sig, self.request_stop)
            except (NotImplementedError, RuntimeError):
                # Not supported by the Windows event loop
                logger.debug(f"Signal handler for {sig.name} not installed.")
