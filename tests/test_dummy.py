import numpy as np
import pytest

from fishtank.capture import DummyFrameSource
from fishtank.models import VirtualScreen
from fishtank.tracking import LEFT_EYE_OUTER, NOSE_TIP, RIGHT_EYE_OUTER, DummyFaceDetector, HeadPositionEstimator
from fishtank.utils import FrameClock

from conftest import SteppingClock

BLANK = np.zeros((2, 2, 3), dtype=np.uint8)


def test_detector_places_eyes_around_path():
    detector = DummyFaceDetector(radius=0.2, speed=0.25, eye_spacing=0.1)
    landmarks = detector.detect(BLANK, 0)

    assert len(landmarks) == 478
    assert landmarks[LEFT_EYE_OUTER].x == pytest.approx(0.65)
    assert landmarks[RIGHT_EYE_OUTER].x == pytest.approx(0.75)
    assert landmarks[LEFT_EYE_OUTER].y == pytest.approx(0.5)
    assert landmarks[NOSE_TIP].x == pytest.approx(0.7)


def test_detector_follows_timestamp_not_call_count():
    detector = DummyFaceDetector(radius=0.2, speed=0.25)
    # A quarter revolution after one second
    assert detector.head_position(1_000) == pytest.approx((0.5, 0.7))
    assert detector.head_position(1_000) == detector.head_position(1_000)


def test_detector_output_feeds_estimator():
    detector = DummyFaceDetector(radius=0.2, speed=0.25)
    screen = VirtualScreen(width=40.0, height=30.0)
    target = HeadPositionEstimator().estimate(detector.detect(BLANK, 0), screen)
    # Eye midpoint at x=0.7 is to the viewer's left of the camera centre
    assert target.x == pytest.approx(-0.4 * 20.0 * 1.2)
    assert target.y == pytest.approx(0.0)


def test_detector_misses_periodically():
    detector = DummyFaceDetector(miss_every=3)
    results = [detector.detect(BLANK, ts) for ts in range(6)]
    assert [r is None for r in results] == [False, False, True, False, False, True]


def test_detector_rejects_negative_arguments():
    with pytest.raises(ValueError):
        DummyFaceDetector(radius=-1)
    with pytest.raises(ValueError):
        DummyFaceDetector(miss_every=-2)


def test_frame_source_timestamps_strictly_increase():
    clock = FrameClock(SteppingClock())
    source = DummyFrameSource(clock, width=8, height=6)

    first, second = source.read(), source.read()
    assert first.image.shape == (6, 8, 3)
    assert second.timestamp_ms > first.timestamp_ms
