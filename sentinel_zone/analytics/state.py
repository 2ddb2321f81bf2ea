"""
Intrusion State Module
======================

Observable frame-level alert state.

Design:
- Mutable state (current flag, counters) behind a lock
- Immutable snapshots (IntrusionStats, FrameEvaluation)
- Subscription interface: any rendering/alerting layer registers a callback,
  no dependency on a UI reactivity model
- No memory across frames beyond the last value: no hysteresis, no debounce
"""

import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

from sentinel_zone.analytics.evaluation import FrameEvaluation
from sentinel_zone.interfaces import EvaluationSink
from sentinel_zone.logging import LogEvent, StructuredLogger


@dataclass(frozen=True)
class IntrusionStats:
    """
    Immutable statistics snapshot of the evaluation loop.

    Attributes:
        frames_evaluated: Ticks that produced an evaluation
        ticks_skipped: Ticks that were no-ops (frame not ready / detection pending)
        intrusion_frames: Evaluated frames whose flag was True
        alerts_raised: False -> True transitions
        intrusion: Current flag
    """

    frames_evaluated: int = 0
    ticks_skipped: int = 0
    intrusion_frames: int = 0
    alerts_raised: int = 0
    intrusion: bool = False

    def __str__(self) -> str:
        status = "INTRUSION" if self.intrusion else "SECURE"
        return (
            f"{status}: evaluated={self.frames_evaluated}, "
            f"skipped={self.ticks_skipped}, alerts={self.alerts_raised}"
        )


class IntrusionState:
    """
    Last-known intrusion flag plus its subscribers.

    The flag only changes when a new evaluation is published; skipped ticks
    leave it untouched, so the alert is not cleared while detection is
    pending.

    Usage:
        state = IntrusionState()
        unsubscribe = state.subscribe(lambda ev: print(ev.intrusion))
        state.publish(evaluation)
        unsubscribe()
    """

    def __init__(self, logger: Optional[StructuredLogger] = None):
        self._lock = threading.Lock()
        self._logger = logger
        self._sinks: List[EvaluationSink] = []

        self._intrusion = False
        self._last_evaluation: Optional[FrameEvaluation] = None

        self._frames_evaluated = 0
        self._ticks_skipped = 0
        self._intrusion_frames = 0
        self._alerts_raised = 0

    @property
    def intrusion(self) -> bool:
        with self._lock:
            return self._intrusion

    @property
    def last_evaluation(self) -> Optional[FrameEvaluation]:
        with self._lock:
            return self._last_evaluation

    def subscribe(self, sink: EvaluationSink) -> Callable[[], None]:
        """
        Register a consumer for every published evaluation.

        Returns:
            Callable that removes the subscription
        """
        with self._lock:
            self._sinks.append(sink)

        def unsubscribe() -> None:
            with self._lock:
                if sink in self._sinks:
                    self._sinks.remove(sink)

        return unsubscribe

    def publish(self, evaluation: FrameEvaluation) -> bool:
        """
        Install the evaluation as the current state and notify subscribers.

        Returns:
            True if the intrusion flag changed
        """
        with self._lock:
            previous = self._intrusion
            self._intrusion = evaluation.intrusion
            self._last_evaluation = evaluation
            self._frames_evaluated += 1
            if evaluation.intrusion:
                self._intrusion_frames += 1
            if evaluation.intrusion and not previous:
                self._alerts_raised += 1
            sinks = list(self._sinks)

        changed = previous != evaluation.intrusion
        if changed:
            self._log_transition(evaluation)

        for sink in sinks:
            try:
                sink(evaluation)
            except Exception as e:
                if self._logger is not None:
                    self._logger.error(
                        event=LogEvent.SINK_ERROR,
                        message="Evaluation sink failed",
                        exc_info=e,
                        metadata={
                            'frame_id': evaluation.frame_id,
                            'sink': getattr(sink, '__name__', type(sink).__name__),
                        }
                    )

        return changed

    def record_skip(self) -> None:
        """Count a no-op tick. The flag is preserved."""
        with self._lock:
            self._ticks_skipped += 1

    def get_stats(self) -> IntrusionStats:
        with self._lock:
            return IntrusionStats(
                frames_evaluated=self._frames_evaluated,
                ticks_skipped=self._ticks_skipped,
                intrusion_frames=self._intrusion_frames,
                alerts_raised=self._alerts_raised,
                intrusion=self._intrusion,
            )

    def reset(self) -> None:
        """Clear the flag and all counters. Subscriptions are kept."""
        with self._lock:
            self._intrusion = False
            self._last_evaluation = None
            self._frames_evaluated = 0
            self._ticks_skipped = 0
            self._intrusion_frames = 0
            self._alerts_raised = 0

    def _log_transition(self, evaluation: FrameEvaluation) -> None:
        if self._logger is None:
            return
        if evaluation.intrusion:
            self._logger.warning(
                event=LogEvent.INTRUSION_RAISED,
                message="Person entered restricted region",
                metadata=evaluation.summary()
            )
        else:
            self._logger.info(
                event=LogEvent.INTRUSION_CLEARED,
                message="Restricted region clear",
                metadata=evaluation.summary()
            )
