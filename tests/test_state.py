from __future__ import annotations

from typing import List

from conftest import make_frame, person

from sentinel_zone.analytics import FrameEvaluation, IntrusionState, IntrusionStats
from sentinel_zone.pipeline import evaluate_frame
from sentinel_zone.roi import RegionOfInterest


def _evaluation(frame_id: int, intruding: bool) -> FrameEvaluation:
    box = person(40, 40, 10, 10) if intruding else person(0, 0, 5, 5)
    return evaluate_frame(make_frame(frame_id), RegionOfInterest.default(), [box])


def test_initial_state_is_secure() -> None:
    state = IntrusionState()
    assert state.intrusion is False
    assert state.last_evaluation is None
    assert state.get_stats() == IntrusionStats()


def test_publish_reports_transitions() -> None:
    state = IntrusionState()

    assert state.publish(_evaluation(0, False)) is False
    assert state.publish(_evaluation(1, True)) is True
    assert state.publish(_evaluation(2, True)) is False
    assert state.publish(_evaluation(3, False)) is True
    assert state.intrusion is False


def test_stats_count_frames_and_alerts() -> None:
    state = IntrusionState()
    for frame_id, intruding in enumerate([True, True, False, True]):
        state.publish(_evaluation(frame_id, intruding))
    state.record_skip()

    stats = state.get_stats()
    assert stats.frames_evaluated == 4
    assert stats.intrusion_frames == 3
    assert stats.alerts_raised == 2
    assert stats.ticks_skipped == 1
    assert stats.intrusion is True
    assert str(stats).startswith("INTRUSION")


def test_skip_preserves_flag() -> None:
    state = IntrusionState()
    state.publish(_evaluation(0, True))
    state.record_skip()
    assert state.intrusion is True
    assert state.last_evaluation.frame_id == 0


def test_subscribers_receive_every_evaluation() -> None:
    state = IntrusionState()
    received: List[int] = []
    unsubscribe = state.subscribe(lambda ev: received.append(ev.frame_id))

    state.publish(_evaluation(0, False))
    state.publish(_evaluation(1, False))
    unsubscribe()
    state.publish(_evaluation(2, False))

    assert received == [0, 1]


def test_failing_sink_does_not_block_others() -> None:
    state = IntrusionState()
    received: List[int] = []

    def broken(evaluation: FrameEvaluation) -> None:
        raise RuntimeError("render failed")

    state.subscribe(broken)
    state.subscribe(lambda ev: received.append(ev.frame_id))

    state.publish(_evaluation(7, True))

    assert received == [7]
    assert state.intrusion is True


def test_reset_clears_counters() -> None:
    state = IntrusionState()
    state.publish(_evaluation(0, True))
    state.reset()
    assert state.get_stats() == IntrusionStats()
    assert state.intrusion is False
