"""
Frame Evaluation Pipeline Module
================================

Bounded Context: Per-frame orchestration of detection and region checks.

Design:
- Orchestrator: frame source + detector + ROI model + intrusion state
- Scheduler-agnostic: tick() is invoked by any driver (IntervalTicker,
  a UI animation callback, or a test calling it in a loop)
- Back-pressure: at most one evaluation in flight, contending ticks are
  skipped instead of queued
- Snapshot consistency: the ROI is captured before the detector runs, so a
  replacement during inference only affects the next evaluation
- Builder pattern: fluent configuration, validated at build time

Pipeline stages (one tick):
1. Acquire the in-flight guard (or skip)
2. Read a frame (or skip if not ready)
3. Snapshot the ROI
4. Detection (may block)
5. Classification against the scaled ROI (geometry layer)
6. State update + sink notification (analytics layer)
"""

import threading
import time
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Union

from sentinel_zone.analytics.evaluation import FrameEvaluation, ObjectClassification
from sentinel_zone.analytics.state import IntrusionState, IntrusionStats
from sentinel_zone.geometry.detector import PERSON_CLASS, DetectedObject, IntrusionDetector
from sentinel_zone.interfaces import Detector, EvaluationSink, Frame, FrameSource
from sentinel_zone.logging import LogEvent, StructuredLogger, create_logger
from sentinel_zone.roi import RegionOfInterest, ROIModel

DEFAULT_TICK_INTERVAL_S = 0.1


class LoopState(str, Enum):
    IDLE = "idle"
    EVALUATING = "evaluating"


def evaluate_frame(
    frame: Frame,
    roi: RegionOfInterest,
    objects: Sequence[DetectedObject],
    target_class: str = PERSON_CLASS,
) -> FrameEvaluation:
    """
    Classify one (ROI, frame, detections) triple.

    Pure: the same triple always yields an equal FrameEvaluation.

    Args:
        frame: Frame the detections were computed on
        roi: Region snapshot in normalized coordinates
        objects: Everything the detector reported for the frame
        target_class: Class label that can trigger an intrusion

    Returns:
        FrameEvaluation with per-object classifications and the OR-ed flag
    """
    scaled_roi = roi.scale(frame.width, frame.height)
    targets, mask = IntrusionDetector.detect(scaled_roi, objects, target_class)

    classifications = tuple(
        ObjectClassification(detected_object=obj, intersecting=bool(hit))
        for obj, hit in zip(targets, mask)
    )

    return FrameEvaluation(
        frame_id=frame.frame_id,
        frame_wh=(frame.width, frame.height),
        roi=roi,
        scaled_roi=scaled_roi,
        classifications=classifications,
        intrusion=bool(mask.any()),
        timestamp=frame.timestamp,
        image=frame.image,
    )


class FrameEvaluationLoop:
    """
    Two-state machine (IDLE / EVALUATING) driving frame evaluations.

    Thread Safety:
    - tick() may be called from any number of threads; only one proceeds,
      the others return None immediately
    - ROI replacement is delegated to ROIModel (lock-protected)
    - Intrusion flag and statistics live in IntrusionState (lock-protected)

    Usage:
        loop = FrameEvaluationLoop(frame_source=source, detector=detector)
        loop.subscribe(visualizer_sink)
        evaluation = loop.tick()   # None when the tick was a no-op
    """

    def __init__(
        self,
        frame_source: FrameSource,
        detector: Detector,
        roi_model: Optional[ROIModel] = None,
        target_class: str = PERSON_CLASS,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Args:
            frame_source: Supplies frames; read() returns None when not ready
            detector: Callable Frame -> list[DetectedObject]
            roi_model: Active region holder (default: centered 60% rectangle)
            target_class: Class label that can trigger an intrusion
            logger: Structured logger (default: "evaluation_loop")
        """
        self.frame_source = frame_source
        self.detector = detector
        self.target_class = target_class
        self.logger = logger or create_logger("evaluation_loop")
        self.roi_model = roi_model or ROIModel(logger=self.logger)
        self.intrusion_state = IntrusionState(logger=self.logger)

        self._in_flight = threading.Lock()
        self._state = LoopState.IDLE

    @property
    def state(self) -> LoopState:
        return self._state

    @property
    def intrusion(self) -> bool:
        """Last-known frame-level intrusion flag."""
        return self.intrusion_state.intrusion

    @property
    def last_evaluation(self) -> Optional[FrameEvaluation]:
        return self.intrusion_state.last_evaluation

    def subscribe(self, sink: EvaluationSink) -> Callable[[], None]:
        """Register a render/alert sink. Returns an unsubscribe callable."""
        return self.intrusion_state.subscribe(sink)

    def set_roi(
        self,
        roi: Union[RegionOfInterest, Iterable[Sequence[float]]],
    ) -> RegionOfInterest:
        """Replace the active region; applies from the next evaluation."""
        return self.roi_model.set_roi(roi)

    def get_stats(self) -> IntrusionStats:
        return self.intrusion_state.get_stats()

    def tick(self) -> Optional[FrameEvaluation]:
        """
        Run one evaluation if the loop is idle and a frame is ready.

        Returns:
            The new FrameEvaluation, or None if the tick was a no-op

        Raises:
            Whatever the detector raises. The loop is back to IDLE and the
            previous intrusion state is kept; containment is up to the driver.
        """
        if not self._in_flight.acquire(blocking=False):
            self._skip("detection_pending")
            return None

        try:
            frame = self.frame_source.read()
            if frame is None:
                self._skip("frame_not_ready")
                return None

            self._state = LoopState.EVALUATING
            roi = self.roi_model.current

            objects = self.detector(frame)

            evaluation = evaluate_frame(frame, roi, objects, self.target_class)
            self.logger.debug(
                event=LogEvent.FRAME_EVALUATED,
                message=str(evaluation),
                metadata=evaluation.summary()
            )
            self.intrusion_state.publish(evaluation)
            return evaluation
        finally:
            self._state = LoopState.IDLE
            self._in_flight.release()

    def _skip(self, reason: str) -> None:
        self.intrusion_state.record_skip()
        self.logger.debug(
            event=LogEvent.TICK_SKIPPED,
            message="Tick skipped",
            metadata={'reason': reason}
        )


class IntervalTicker:
    """
    Fixed-interval driver for a FrameEvaluationLoop.

    Runs tick() on a daemon thread every interval_s seconds. A tick that
    takes longer than the interval delays the next one; ticks never overlap.
    Exceptions raised by a tick are logged and the ticker keeps running.

    Usage:
        ticker = IntervalTicker(loop, interval_s=0.1)
        ticker.start()
        ...
        ticker.stop()
    """

    def __init__(
        self,
        loop: FrameEvaluationLoop,
        interval_s: float = DEFAULT_TICK_INTERVAL_S,
        name: str = "EvaluationTicker",
    ):
        if interval_s <= 0:
            raise ValueError(f"interval_s must be > 0, got {interval_s}")

        self.loop = loop
        self.interval_s = interval_s
        self.name = name
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._errors = 0

    @property
    def errors(self) -> int:
        """Number of ticks that raised."""
        return self._errors

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running():
            return

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        self.loop.logger.info(
            event=LogEvent.LOOP_STARTED,
            message="Evaluation ticker started",
            metadata={'interval_s': self.interval_s}
        )

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
        self.loop.logger.info(
            event=LogEvent.LOOP_STOPPED,
            message="Evaluation ticker stopped",
            metadata={'errors': self._errors}
        )

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout=timeout)

    def _run(self) -> None:
        while not self._stop_event.is_set():
            started = time.monotonic()
            try:
                self.loop.tick()
            except Exception as e:
                self._errors += 1
                self.loop.logger.error(
                    event=LogEvent.DETECTOR_ERROR,
                    message="Tick failed",
                    exc_info=e,
                    metadata={'errors': self._errors}
                )

            elapsed = time.monotonic() - started
            self._stop_event.wait(max(0.0, self.interval_s - elapsed))


class PipelineBuilder:
    """
    Builder for FrameEvaluationLoop.

    Usage:
        loop = (
            PipelineBuilder()
            .with_frame_source(source)
            .with_detector(detector)
            .with_roi([(0.1, 0.1), (0.9, 0.1), (0.9, 0.9), (0.1, 0.9)])
            .add_sink(visualizer_sink)
            .build()
        )
    """

    def __init__(self):
        self._frame_source: Optional[FrameSource] = None
        self._detector: Optional[Detector] = None
        self._roi: Optional[RegionOfInterest] = None
        self._target_class: str = PERSON_CLASS
        self._logger: Optional[StructuredLogger] = None
        self._sinks: List[EvaluationSink] = []

    def with_frame_source(self, frame_source: FrameSource) -> "PipelineBuilder":
        self._frame_source = frame_source
        return self

    def with_detector(self, detector: Detector) -> "PipelineBuilder":
        self._detector = detector
        return self

    def with_roi(
        self,
        roi: Union[RegionOfInterest, Iterable[Sequence[float]]],
    ) -> "PipelineBuilder":
        """Set the initial region (normalized coordinates)."""
        if not isinstance(roi, RegionOfInterest):
            roi = RegionOfInterest.from_points(roi)
        self._roi = roi
        return self

    def with_target_class(self, target_class: str) -> "PipelineBuilder":
        self._target_class = target_class
        return self

    def with_logger(self, logger: StructuredLogger) -> "PipelineBuilder":
        self._logger = logger
        return self

    def add_sink(self, sink: EvaluationSink) -> "PipelineBuilder":
        self._sinks.append(sink)
        return self

    def build(self) -> FrameEvaluationLoop:
        """
        Raises:
            ValueError: If frame source or detector is missing
        """
        if self._frame_source is None:
            raise ValueError("Frame source is required (use .with_frame_source())")
        if self._detector is None:
            raise ValueError("Detector is required (use .with_detector())")

        logger = self._logger or create_logger("evaluation_loop")
        loop = FrameEvaluationLoop(
            frame_source=self._frame_source,
            detector=self._detector,
            roi_model=ROIModel(roi=self._roi, logger=logger),
            target_class=self._target_class,
            logger=logger,
        )
        for sink in self._sinks:
            loop.subscribe(sink)
        return loop
