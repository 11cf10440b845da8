import asyncio
import dataclasses
import logging
import time
from typing import Optional

from .protocols import FaceDetector, FrameSource, Scene, SceneRenderer
from .state import LoopState, TrackingState
from ..models import HeadSample, Projection, VideoFrame
from ..projection import OffAxisProjector
from ..telemetry import HeadPublisher
from ..tracking import HeadPositionEstimator, MotionSmoother
from ..utils import FrameClock, ThrottledLogger

logger = logging.getLogger(__name__)


def track_frame(
    state: TrackingState,
    frame: Optional[VideoFrame],
    detector: FaceDetector,
    estimator: HeadPositionEstimator,
    smoother: MotionSmoother,
) -> TrackingState:
    """
    One tracking step: detect -> estimate -> smooth.

    Frames whose timestamp does not advance past the last processed one are
    duplicates and leave the state untouched. When no face is found the head
    keeps its previous position; it never snaps back to the centre.
    """
    if frame is None or frame.timestamp_ms <= state.last_timestamp_ms:
        return state

    landmarks = detector.detect(frame.image, frame.timestamp_ms)
    state = dataclasses.replace(
        state,
        last_timestamp_ms=frame.timestamp_ms,
        face_found=bool(landmarks),
    )
    if not landmarks:
        return state

    target = estimator.estimate(landmarks, state.screen)
    return dataclasses.replace(state, head=smoother.update(state.head, target, state.screen))


class RenderLoop:
    """
    Orchestrates the per-frame cycle: animate -> track -> project -> render.

    Runs as a single asyncio task. A cycle always completes before the next
    is scheduled, so the tracking state needs no locking. Without a detector
    or frame source the head stays where it is and rendering continues.
    """
    def __init__(
        self,
        renderer: SceneRenderer,
        scene: Scene,
        projector: OffAxisProjector,
        estimator: HeadPositionEstimator,
        smoother: MotionSmoother,
        initial_state: TrackingState,
        detector: Optional[FaceDetector] = None,
        frame_source: Optional[FrameSource] = None,
        publisher: Optional[HeadPublisher] = None,
        clock: Optional[FrameClock] = None,
        max_fps: int = 60,
    ):
        if max_fps <= 0:
            raise ValueError("max_fps must be positive.")

        self.renderer = renderer
        self.scene = scene
        self.projector = projector
        self.estimator = estimator
        self.smoother = smoother
        self.detector = detector
        self.frame_source = frame_source
        self.publisher = publisher
        self.clock = clock or FrameClock()

        self._state = initial_state
        self._interval_s = 1.0 / max_fps
        self._stop_event = asyncio.Event()
        self._loop_task: asyncio.Task | None = None
        self._no_face_log = ThrottledLogger(logger)

        self.loop_state: LoopState = LoopState.UNINITIALIZED
        self.frame_count: int = 0

    @property
    def state(self) -> TrackingState:
        return self._state

    @property
    def is_tracking(self) -> bool:
        return self.detector is not None and self.frame_source is not None

    def on_resize(self, width_px: int, height_px: int) -> None:
        """Viewport size changed. Only the virtual screen height follows."""
        screen = self._state.screen.on_viewport_resize(width_px, height_px)
        self._state = self._state.with_screen(screen)
        logger.debug(f"Virtual screen resized to {screen.width:.2f} x {screen.height:.2f}")

    def tick(self) -> Projection:
        """Runs one full cycle synchronously and returns the projection used."""
        self.scene.update(self.clock.elapsed_s)

        if self.is_tracking:
            previous = self._state
            self._state = track_frame(
                previous,
                self.frame_source.read(),
                self.detector,
                self.estimator,
                self.smoother,
            )
            processed = self._state.last_timestamp_ms != previous.last_timestamp_ms
            if processed and not self._state.face_found:
                self._no_face_log.info("No face detected, holding last head position.")

        projection = self.projector.project(self._state.head, self._state.screen)
        self.renderer.render(self.scene, projection)
        self.frame_count += 1
        return projection

    def sample(self) -> HeadSample:
        head = self._state.head
        return HeadSample(
            timestamp_ms=int(self.clock.elapsed_s * 1_000),
            x=head.x,
            y=head.y,
            z=head.z,
            tracked=self._state.face_found,
        )

    async def start(self) -> None:
        if self.loop_state is not LoopState.UNINITIALIZED:
            return

        logger.info("Starting RenderLoop (tracking %s)...", "on" if self.is_tracking else "off")
        self.on_resize(*self.renderer.viewport_size)
        self.loop_state = LoopState.RUNNING
        self._loop_task = asyncio.create_task(self._frame_loop())

    def request_stop(self) -> None:
        """Sets the stop flag; the current cycle finishes and the task exits."""
        self._stop_event.set()

    async def stop(self) -> None:
        """
        Stops the loop and waits for the task to finish.
        A failure inside the loop is logged here, not raised; `wait` reports it.
        """
        if self._loop_task is None:
            return

        logger.info("Stopping RenderLoop...")
        self.request_stop()
        task, self._loop_task = self._loop_task, None
        try:
            await task
        except Exception as e:
            logger.error(f"RenderLoop ended with an error: {e!r}")

    async def wait(self) -> None:
        """Blocks until the loop ends, e.g. because the window was closed."""
        if self._loop_task is not None:
            await self._loop_task

    async def _frame_loop(self) -> None:
        """Hot loop."""
        try:
            while not self._stop_event.is_set():
                started = time.monotonic()

                events = self.renderer.poll_events()
                if events.quit_requested:
                    logger.info("Window close requested.")
                    self._stop_event.set()
                    break
                if events.resized_to is not None:
                    self.on_resize(*events.resized_to)

                self.tick()

                if self.publisher is not None:
                    await self.publisher.send(self.sample())

                # Yield to the event loop until the next frame is due
                sleep_duration = self._interval_s - (time.monotonic() - started)
                await asyncio.sleep(max(0.0, sleep_duration))

        except asyncio.CancelledError:
            logger.info("Render loop cancelled unexpectedly.")
        finally:
            self.loop_state = LoopState.STOPPED
            logger.info(f"RenderLoop stopped after {self.frame_count} frames.")
