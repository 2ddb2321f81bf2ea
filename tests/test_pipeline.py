from __future__ import annotations

import threading
import time
from typing import List

import pytest
from conftest import BlockingDetector, FakeFrameSource, StaticDetector, make_frame, person

from sentinel_zone.analytics import FrameEvaluation
from sentinel_zone.pipeline import (
    FrameEvaluationLoop,
    IntervalTicker,
    LoopState,
    PipelineBuilder,
    evaluate_frame,
)
from sentinel_zone.roi import RegionOfInterest, ROIModel


def test_two_people_one_intruding_flags_frame(inside_person, outside_person) -> None:
    loop = FrameEvaluationLoop(
        frame_source=FakeFrameSource([make_frame(0)]),
        detector=StaticDetector([inside_person, outside_person]),
    )

    evaluation = loop.tick()

    assert evaluation is not None
    assert [c.intersecting for c in evaluation.classifications] == [True, False]
    assert [c.label for c in evaluation.classifications] == ["ALERT!", "Safe"]
    assert evaluation.intrusion is True
    assert loop.intrusion is True
    assert loop.state == LoopState.IDLE


def test_non_target_classes_are_ignored(inside_person) -> None:
    from sentinel_zone.geometry import DetectedObject

    car = DetectedObject(class_label="car", box=inside_person.box)
    evaluation = evaluate_frame(make_frame(0), RegionOfInterest.default(), [car])

    assert evaluation.classifications == ()
    assert evaluation.intrusion is False


def test_empty_detections_clear_intrusion(inside_person) -> None:
    detector = StaticDetector([inside_person])
    loop = FrameEvaluationLoop(
        frame_source=FakeFrameSource([make_frame(0), make_frame(1)]),
        detector=detector,
    )

    loop.tick()
    assert loop.intrusion is True

    detector.objects = []
    evaluation = loop.tick()
    assert evaluation.intrusion is False
    assert loop.intrusion is False


def test_same_triple_gives_equal_evaluations(inside_person, outside_person) -> None:
    frame = make_frame(3)
    roi = RegionOfInterest.default()
    objects = [inside_person, outside_person]

    assert evaluate_frame(frame, roi, objects) == evaluate_frame(frame, roi, objects)


def test_frame_not_ready_is_a_noop(inside_person) -> None:
    source = FakeFrameSource([make_frame(0)])
    detector = StaticDetector([inside_person])
    loop = FrameEvaluationLoop(frame_source=source, detector=detector)

    first = loop.tick()
    assert loop.tick() is None

    assert detector.calls == 1
    assert loop.intrusion is True
    assert loop.last_evaluation is first
    assert loop.get_stats().ticks_skipped == 1
    assert loop.state == LoopState.IDLE


def test_tick_skipped_while_detection_pending(inside_person) -> None:
    detector = BlockingDetector([inside_person])
    source = FakeFrameSource([make_frame(0), make_frame(1)])
    loop = FrameEvaluationLoop(frame_source=source, detector=detector)

    results: List[FrameEvaluation] = []
    worker = threading.Thread(target=lambda: results.append(loop.tick()))
    worker.start()
    assert detector.entered.wait(timeout=5.0)

    assert loop.state == LoopState.EVALUATING
    assert loop.tick() is None
    # The contended tick did not consume a frame
    assert source.reads == 1

    detector.release.set()
    worker.join(timeout=5.0)

    assert results[0].frame_id == 0
    assert loop.state == LoopState.IDLE
    assert loop.get_stats().ticks_skipped == 1
    assert loop.get_stats().frames_evaluated == 1


def test_roi_replaced_mid_detection_applies_to_next_frame(inside_person) -> None:
    detector = BlockingDetector([inside_person])
    loop = FrameEvaluationLoop(
        frame_source=FakeFrameSource([make_frame(0), make_frame(1)]),
        detector=detector,
    )
    # Far corner, away from the person at 40..50
    corner = RegionOfInterest.from_points([(0.9, 0.9), (1.0, 0.9), (1.0, 1.0), (0.9, 1.0)])

    results: List[FrameEvaluation] = []
    worker = threading.Thread(target=lambda: results.append(loop.tick()))
    worker.start()
    assert detector.entered.wait(timeout=5.0)

    loop.set_roi(corner)
    detector.release.set()
    worker.join(timeout=5.0)

    first = results[0]
    assert first.roi == RegionOfInterest.default()
    assert first.intrusion is True

    second = loop.tick()
    assert second.roi == corner
    assert second.intrusion is False


def test_detector_failure_returns_to_idle_and_keeps_state(inside_person) -> None:
    detector = StaticDetector([inside_person])
    loop = FrameEvaluationLoop(
        frame_source=FakeFrameSource([make_frame(0), make_frame(1), make_frame(2)]),
        detector=detector,
    )
    loop.tick()

    def failing(frame):
        raise RuntimeError("model crashed")

    loop.detector = failing
    with pytest.raises(RuntimeError, match="model crashed"):
        loop.tick()

    assert loop.state == LoopState.IDLE
    assert loop.intrusion is True

    loop.detector = detector
    assert loop.tick().frame_id == 2


def test_sink_failure_is_isolated(inside_person) -> None:
    received: List[int] = []

    def broken(evaluation: FrameEvaluation) -> None:
        raise ValueError("overlay failed")

    loop = (
        PipelineBuilder()
        .with_frame_source(FakeFrameSource([make_frame(0)]))
        .with_detector(StaticDetector([inside_person]))
        .add_sink(broken)
        .add_sink(lambda ev: received.append(ev.frame_id))
        .build()
    )

    assert loop.tick() is not None
    assert received == [0]


def test_unsubscribed_sink_stops_receiving(inside_person) -> None:
    received: List[int] = []
    loop = FrameEvaluationLoop(
        frame_source=FakeFrameSource([make_frame(0), make_frame(1)]),
        detector=StaticDetector([inside_person]),
    )
    unsubscribe = loop.subscribe(lambda ev: received.append(ev.frame_id))

    loop.tick()
    unsubscribe()
    loop.tick()

    assert received == [0]


def test_builder_requires_source_and_detector() -> None:
    with pytest.raises(ValueError, match="Frame source"):
        PipelineBuilder().with_detector(StaticDetector()).build()
    with pytest.raises(ValueError, match="Detector"):
        PipelineBuilder().with_frame_source(FakeFrameSource()).build()


def test_builder_applies_roi_and_target_class() -> None:
    from sentinel_zone.geometry import Box, DetectedObject

    car = DetectedObject(class_label="car", box=Box(x=5, y=5, width=2, height=2))
    loop = (
        PipelineBuilder()
        .with_frame_source(FakeFrameSource([make_frame(0)]))
        .with_detector(StaticDetector([car]))
        .with_roi([(0, 0), (0.1, 0), (0.1, 0.1), (0, 0.1)])
        .with_target_class("car")
        .build()
    )

    evaluation = loop.tick()
    assert evaluation.intrusion is True
    assert len(loop.roi_model.current) == 4


def test_roi_model_can_be_shared(inside_person) -> None:
    model = ROIModel()
    loop = FrameEvaluationLoop(
        frame_source=FakeFrameSource([make_frame(0)]),
        detector=StaticDetector([inside_person]),
        roi_model=model,
    )
    model.set_roi([(0.9, 0.9), (1.0, 0.9), (1.0, 1.0)])
    assert loop.tick().intrusion is False


def test_ticker_drives_loop_until_stopped(inside_person) -> None:
    source = FakeFrameSource([make_frame(i) for i in range(3)])
    loop = FrameEvaluationLoop(frame_source=source, detector=StaticDetector([inside_person]))
    ticker = IntervalTicker(loop, interval_s=0.01)

    ticker.start()
    deadline = time.monotonic() + 5.0
    while loop.get_stats().frames_evaluated < 3 and time.monotonic() < deadline:
        time.sleep(0.01)
    ticker.stop()

    assert loop.get_stats().frames_evaluated == 3
    assert not ticker.is_running()


def test_ticker_survives_detector_errors() -> None:
    calls = {'n': 0}

    def flaky(frame):
        calls['n'] += 1
        raise RuntimeError("boom")

    source = FakeFrameSource([make_frame(i) for i in range(50)])
    loop = FrameEvaluationLoop(frame_source=source, detector=flaky)
    ticker = IntervalTicker(loop, interval_s=0.01)

    ticker.start()
    deadline = time.monotonic() + 5.0
    while ticker.errors < 2 and time.monotonic() < deadline:
        time.sleep(0.01)
    ticker.stop()

    assert ticker.errors >= 2
    assert loop.state == LoopState.IDLE


def test_ticker_rejects_non_positive_interval() -> None:
    loop = FrameEvaluationLoop(frame_source=FakeFrameSource(), detector=StaticDetector())
    with pytest.raises(ValueError):
        IntervalTicker(loop, interval_s=0)
