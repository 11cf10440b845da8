"""Tests for the per-frame cycle and the render loop lifecycle."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import numpy as np
import pytest

from fishtank.core import LoopState, RenderLoop, TrackingState, track_frame
from fishtank.models import HeadState
from fishtank.projection import OffAxisProjector
from fishtank.tracking import HeadPositionEstimator, MotionSmoother
from fishtank.utils import FrameClock

from conftest import (
    FakeRenderer,
    FakeScene,
    ScriptedDetector,
    ScriptedFrameSource,
    SteppingClock,
    make_frame,
    make_landmarks,
)


@pytest.fixture
def estimator():
    return HeadPositionEstimator()


@pytest.fixture
def smoother():
    return MotionSmoother(alpha=0.15, clamp_fraction=0.45)


@pytest.fixture
def state(screen):
    return TrackingState(screen=screen, head=HeadState(z=30.0))


def build_loop(screen, renderer=None, detector=None, frame_source=None, publisher=None, clock=None):
    return RenderLoop(
        renderer=renderer or FakeRenderer(),
        scene=FakeScene(),
        projector=OffAxisProjector(0.1, 1000.0),
        estimator=HeadPositionEstimator(),
        smoother=MotionSmoother(),
        initial_state=TrackingState(screen=screen),
        detector=detector,
        frame_source=frame_source,
        publisher=publisher,
        clock=clock or FrameClock(SteppingClock()),
        max_fps=1000,
    )


# ── track_frame ──


class TestTrackFrame:
    def test_face_moves_head(self, state, estimator, smoother):
        detector = ScriptedDetector([make_landmarks(0.7, 0.5)])
        new = track_frame(state, make_frame(10), detector, estimator, smoother)
        assert new.head.x == pytest.approx(-9.6 * 0.15)
        assert new.last_timestamp_ms == 10
        assert new.face_found is True
        assert detector.calls == [10]

    def test_duplicate_timestamp_is_skipped(self, state, estimator, smoother):
        detector = ScriptedDetector([make_landmarks(0.7, 0.5), make_landmarks(0.7, 0.5)])
        first = track_frame(state, make_frame(10), detector, estimator, smoother)
        second = track_frame(first, make_frame(10), detector, estimator, smoother)
        assert second is first
        assert detector.calls == [10]

    def test_older_timestamp_is_skipped(self, state, estimator, smoother):
        detector = ScriptedDetector([make_landmarks(0.7, 0.5)])
        first = track_frame(state, make_frame(50), detector, estimator, smoother)
        assert track_frame(first, make_frame(20), detector, estimator, smoother) is first

    def test_no_frame(self, state, estimator, smoother):
        detector = ScriptedDetector()
        assert track_frame(state, None, detector, estimator, smoother) is state
        assert detector.calls == []

    def test_no_face_holds_position(self, screen, estimator, smoother):
        held = TrackingState(screen=screen, head=HeadState(4.0, -2.0, 30.0), last_timestamp_ms=5)
        detector = ScriptedDetector([None])
        new = track_frame(held, make_frame(6), detector, estimator, smoother)
        assert new.head == held.head
        assert new.last_timestamp_ms == 6
        assert new.face_found is False

    def test_empty_landmark_set_counts_as_no_face(self, state, estimator, smoother):
        new = track_frame(state, make_frame(1), ScriptedDetector([()]), estimator, smoother)
        assert new.head == state.head
        assert new.face_found is False

    def test_input_state_is_not_mutated(self, state, estimator, smoother):
        before = (state.head, state.last_timestamp_ms)
        track_frame(state, make_frame(3), ScriptedDetector([make_landmarks(0.2, 0.8)]), estimator, smoother)
        assert (state.head, state.last_timestamp_ms) == before


# ── RenderLoop.tick ──


class TestTick:
    def test_renders_centered_projection_without_tracking(self, screen):
        renderer = FakeRenderer()
        loop = build_loop(screen, renderer=renderer)
        projection = loop.tick()
        assert renderer.projections == [projection]
        assert projection.eye == (0.0, 0.0, 30.0)
        assert projection.frustum.left == pytest.approx(-projection.frustum.right)
        assert loop.frame_count == 1

    def test_advances_scene_animation(self, screen):
        clock_source = SteppingClock()
        loop = build_loop(screen, clock=FrameClock(clock_source))
        clock_source.advance(0.5)
        loop.tick()
        clock_source.advance(0.25)
        loop.tick()
        assert loop.scene.updates == pytest.approx([0.5, 0.75])

    def test_tracked_head_drives_projection(self, screen):
        detector = ScriptedDetector([make_landmarks(0.3, 0.5)])
        source = ScriptedFrameSource([make_frame(1)])
        loop = build_loop(screen, detector=detector, frame_source=source)
        projection = loop.tick()
        assert projection.eye[0] == pytest.approx(9.6 * 0.15)
        # Head moved right, so the window extends further to the left
        assert abs(projection.frustum.left) > abs(projection.frustum.right)

    def test_repeated_frame_does_not_change_head(self, screen):
        frame = make_frame(7)
        detector = ScriptedDetector([make_landmarks(0.3, 0.5), make_landmarks(0.0, 0.0)])
        loop = build_loop(screen, detector=detector, frame_source=ScriptedFrameSource([frame, frame]))
        loop.tick()
        head = loop.state.head
        loop.tick()
        assert loop.state.head == head
        assert detector.calls == [7]

    def test_lost_face_keeps_last_position(self, screen):
        detector = ScriptedDetector([make_landmarks(0.3, 0.5), None, None])
        source = ScriptedFrameSource([make_frame(1), make_frame(2), make_frame(3)])
        loop = build_loop(screen, detector=detector, frame_source=source)
        loop.tick()
        head = loop.state.head
        loop.tick()
        loop.tick()
        assert loop.state.head == head
        assert head.x != 0.0

    def test_inverse_recomputed_every_frame(self, screen):
        detector = ScriptedDetector([make_landmarks(0.3, 0.5), make_landmarks(0.1, 0.2)])
        source = ScriptedFrameSource([make_frame(1), make_frame(2)])
        loop = build_loop(screen, detector=detector, frame_source=source)
        first = loop.tick()
        second = loop.tick()
        assert not (first.matrix == second.matrix).all()
        for projection in (first, second):
            assert projection.inverse @ projection.matrix == pytest.approx(np.eye(4), abs=1e-9)

    def test_resize_changes_frustum_height(self, screen):
        loop = build_loop(screen)
        before = loop.tick()
        loop.on_resize(1000, 1000)
        after = loop.tick()
        assert loop.state.screen.height == pytest.approx(40.0)
        assert after.frustum.top > before.frustum.top

    def test_detector_without_source_is_not_tracking(self, screen):
        loop = build_loop(screen, detector=ScriptedDetector())
        assert loop.is_tracking is False


# ── RenderLoop lifecycle ──


class TestLifecycle:
    def test_runs_until_window_closes(self, screen):
        renderer = FakeRenderer(size=(1920, 1080), quit_after=3)
        loop = build_loop(screen, renderer=renderer)
        assert loop.loop_state is LoopState.UNINITIALIZED

        async def scenario():
            await loop.start()
            assert loop.loop_state is LoopState.RUNNING
            await loop.wait()

        asyncio.run(scenario())
        assert loop.loop_state is LoopState.STOPPED
        assert len(renderer.projections) == 3

    def test_start_applies_viewport_before_first_frame(self, screen):
        renderer = FakeRenderer(size=(1000, 500), quit_after=1)
        loop = build_loop(screen, renderer=renderer)

        async def scenario():
            await loop.start()
            await loop.wait()

        asyncio.run(scenario())
        assert renderer.projections[0].frustum.top == pytest.approx(10.0 * 0.1 / 30)

    def test_resize_event_reaches_screen(self, screen):
        renderer = FakeRenderer(size=(1600, 900), quit_after=2, resize_at={2: (800, 800)})
        loop = build_loop(screen, renderer=renderer)

        async def scenario():
            await loop.start()
            await loop.wait()

        asyncio.run(scenario())
        assert loop.state.screen.height == pytest.approx(40.0)

    def test_stop_flag_ends_loop(self, screen):
        loop = build_loop(screen, renderer=FakeRenderer())

        async def scenario():
            await loop.start()
            await asyncio.sleep(0.01)
            await loop.stop()

        asyncio.run(scenario())
        assert loop.loop_state is LoopState.STOPPED
        assert loop.frame_count > 0

    def test_start_twice_is_noop(self, screen):
        loop = build_loop(screen, renderer=FakeRenderer(quit_after=1))

        async def scenario():
            await loop.start()
            await loop.start()
            await loop.wait()

        asyncio.run(scenario())
        assert loop.frame_count == 1

    def test_stop_before_start(self, screen):
        loop = build_loop(screen)
        asyncio.run(loop.stop())
        assert loop.loop_state is LoopState.UNINITIALIZED

    def test_publishes_one_sample_per_frame(self, screen):
        publisher = MagicMock()
        publisher.send = AsyncMock()
        loop = build_loop(screen, renderer=FakeRenderer(quit_after=2), publisher=publisher)

        async def scenario():
            await loop.start()
            await loop.wait()

        asyncio.run(scenario())
        assert publisher.send.await_count == 2
        sample = publisher.send.await_args.args[0]
        assert sample.z == 30.0
        assert sample.tracked is False

    def test_invalid_frame_rate(self, screen):
        with pytest.raises(ValueError):
            RenderLoop(
                renderer=FakeRenderer(),
                scene=FakeScene(),
                projector=OffAxisProjector(),
                estimator=HeadPositionEstimator(),
                smoother=MotionSmoother(),
                initial_state=TrackingState(screen=screen),
                max_fps=0,
            )


class TestStopping:
    def test_request_stop_is_synchronous(self, screen):
        loop = build_loop(screen, renderer=FakeRenderer())

        async def scenario():
            await loop.start()
            await asyncio.sleep(0.01)
            loop.request_stop()
            await asyncio.wait_for(loop.wait(), timeout=5.0)

        asyncio.run(scenario())
        assert loop.loop_state is LoopState.STOPPED

    def test_wait_reports_failure_and_stop_absorbs_it(self, screen):
        renderer = FakeRenderer()
        renderer.render = MagicMock(side_effect=RuntimeError("boom"))
        loop = build_loop(screen, renderer=renderer)

        async def scenario():
            await loop.start()
            with pytest.raises(RuntimeError, match="boom"):
                await loop.wait()
            await loop.stop()

        asyncio.run(scenario())
        assert loop.loop_state is LoopState.STOPPED
        assert loop.frame_count == 0
