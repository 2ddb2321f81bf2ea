"""
Intrusion Monitor Service - wires configuration to a running loop.

Components:
- Frame source (VideoFileSource / CameraSource)
- Detector (UltralyticsDetector)
- FrameEvaluationLoop + IntervalTicker (sentinel_zone)
- Sinks: annotated video writer (optional), MQTT alert publisher (optional)

Threading Model:
- Ticker Thread (IntervalTicker): tick() → detection → classification → sinks
- paho-mqtt network thread (AlertPublisher, when MQTT is configured)
- Caller thread: start() / wait() / stop() / set_roi()

Thread Safety:
- ROI replacement goes through ROIModel (lock-protected, snapshot per tick)
- Sinks run on the Ticker Thread, one evaluation at a time
"""

import logging
import threading
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple

import supervision as sv

from sentinel_mqtt import AlertPublisher
from sentinel_processor.config import MonitorConfig, ROIConfig
from sentinel_processor.detector import UltralyticsDetector
from sentinel_processor.sources import create_frame_source
from sentinel_zone.analytics import FrameEvaluation, IntrusionStats
from sentinel_zone.interfaces import Detector, FrameSource
from sentinel_zone.logging import create_logger
from sentinel_zone.pipeline import FrameEvaluationLoop, IntervalTicker, PipelineBuilder
from sentinel_zone.rendering import IntrusionVisualizer
from sentinel_zone.roi import RegionOfInterest

logger = logging.getLogger(__name__)


class AnnotatedVideoWriter:
    """
    Evaluation sink writing annotated frames to a video file.

    The writer is opened lazily on the first evaluation that carries pixels,
    using that frame's size. Frames of any other size (e.g. after a device
    rotation) are skipped and counted, since the container size is fixed.
    """

    def __init__(
        self,
        output_path: Path,
        visualizer: Optional[IntrusionVisualizer] = None,
        fps: int = 10,
    ):
        self.output_path = Path(output_path)
        self.visualizer = visualizer or IntrusionVisualizer()
        self.fps = fps
        self._sink: Optional[sv.VideoSink] = None
        self._frame_wh: Optional[Tuple[int, int]] = None
        self._skipped_wh: Optional[Tuple[int, int]] = None
        self._frames_written = 0
        self._frames_skipped = 0

    @property
    def frames_written(self) -> int:
        return self._frames_written

    @property
    def frames_skipped(self) -> int:
        return self._frames_skipped

    def __call__(self, evaluation: FrameEvaluation) -> None:
        if evaluation.image is None:
            return

        if self._sink is None:
            width, height = evaluation.frame_wh
            self._frame_wh = (width, height)
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            video_info = sv.VideoInfo(width=width, height=height, fps=self.fps)
            self._sink = sv.VideoSink(str(self.output_path), video_info)
            self._sink.__enter__()
            logger.info(f"Writing annotated video: {self.output_path}")

        frame_wh = tuple(evaluation.frame_wh)
        if frame_wh != self._frame_wh:
            # Warn once per new size
            if frame_wh != self._skipped_wh:
                logger.warning(
                    f"Frame size {frame_wh} differs from video size "
                    f"{self._frame_wh}, skipping frames: {self.output_path}"
                )
                self._skipped_wh = frame_wh
            self._frames_skipped += 1
            return

        self._sink.write_frame(self.visualizer.annotate(evaluation.image, evaluation))
        self._frames_written += 1

    def close(self) -> None:
        if self._sink is not None:
            self._sink.__exit__(None, None, None)
            self._sink = None
            logger.info(
                f"Annotated video closed: {self.output_path} "
                f"({self._frames_written} frames, {self._frames_skipped} skipped)"
            )


class IntrusionMonitorService:
    """
    Main monitor service.

    Usage:
        config = MonitorConfig.from_yaml("monitor.yaml")
        service = IntrusionMonitorService(config)
        service.setup()
        service.start()
        service.wait()   # blocks until stop() or the video ends
    """

    def __init__(
        self,
        config: MonitorConfig,
        frame_source: Optional[FrameSource] = None,
        detector: Optional[Detector] = None,
        alert_publisher: Optional[AlertPublisher] = None,
    ):
        """
        Args:
            config: Monitor configuration
            frame_source: Override the configured video source
            detector: Override the configured YOLO detector
            alert_publisher: Override the publisher built from config.mqtt
        """
        self.config = config
        self.frame_source = frame_source
        self.detector = detector
        self.alert_publisher = alert_publisher

        self.loop: Optional[FrameEvaluationLoop] = None
        self.ticker: Optional[IntervalTicker] = None
        self.video_writer: Optional[AnnotatedVideoWriter] = None

        self._running = False
        self._stop_event = threading.Event()

        logger.info(f"IntrusionMonitorService initialized for service_id={config.service_id}")

    def setup(self) -> None:
        """
        Build source, detector, loop and sinks. Must be called before start().
        """
        if self.frame_source is None:
            self.frame_source = create_frame_source(self.config.video_source)

        if self.detector is None:
            self.detector = UltralyticsDetector.from_config(self.config.detector)

        builder = (
            PipelineBuilder()
            .with_frame_source(self.frame_source)
            .with_detector(self.detector)
            .with_roi(self.config.roi.to_roi())
            .with_target_class(self.config.detector.target_class)
            .with_logger(create_logger(f"evaluation_loop.{self.config.service_id}"))
        )

        if self.config.output_path is not None:
            fps = max(1, round(1.0 / self.config.tick_interval_s))
            self.video_writer = AnnotatedVideoWriter(self.config.output_path, fps=fps)
            builder = builder.add_sink(self.video_writer)

        if self.alert_publisher is None and self.config.mqtt is not None:
            mqtt_config = self.config.mqtt
            self.alert_publisher = AlertPublisher(
                broker_host=mqtt_config.broker,
                broker_port=mqtt_config.port,
                topic=mqtt_config.topic_for(self.config.service_id),
                source_id=self.config.service_id,
                logger=create_logger("alert_publisher"),
                client_id=f"sentinel_{self.config.service_id}",
                username=mqtt_config.username,
                password=mqtt_config.password,
                qos=mqtt_config.qos,
                publish_on_change=mqtt_config.publish_on_change,
            )

        if self.alert_publisher is not None:
            builder = builder.add_sink(self.alert_publisher)

        self.loop = builder.build()
        self.ticker = IntervalTicker(self.loop, interval_s=self.config.tick_interval_s)

        logger.info("Monitor setup complete")

    def start(self) -> None:
        """
        Start the service (non-blocking).

        Raises:
            RuntimeError: If setup() was not called or the broker is unreachable
        """
        if self._running:
            logger.warning("Service already running")
            return
        if self.loop is None or self.ticker is None:
            raise RuntimeError("Service not set up (call setup() first)")

        if self.alert_publisher is not None and not self.alert_publisher.is_connected():
            if not self.alert_publisher.connect(timeout=5.0):
                raise RuntimeError("Failed to connect to MQTT broker (alert publisher)")

        self._stop_event.clear()
        self.ticker.start()
        self._running = True
        logger.info("✅ Intrusion monitor started")

    def wait(self, poll_interval_s: float = 0.5) -> None:
        """
        Block until stop() is called or a file source runs out of frames.
        """
        if not self._running:
            logger.warning("Service not running")
            return

        try:
            while not self._stop_event.wait(poll_interval_s):
                if getattr(self.frame_source, "exhausted", False):
                    logger.info("Frame source exhausted")
                    break
        except KeyboardInterrupt:
            logger.info("Received KeyboardInterrupt, stopping...")
        finally:
            self.stop()

    def stop(self) -> None:
        """Stop ticking and release all resources."""
        if not self._running:
            return

        logger.info("Stopping intrusion monitor")
        self._stop_event.set()

        self.ticker.stop()

        if self.video_writer is not None:
            self.video_writer.close()

        if self.alert_publisher is not None:
            self.alert_publisher.disconnect()

        release = getattr(self.frame_source, "release", None)
        if release is not None:
            release()

        self._running = False
        logger.info(f"✅ Intrusion monitor stopped ({self.get_stats()})")

    def set_roi(self, vertices: Iterable[Sequence[float]]) -> RegionOfInterest:
        """
        Hot-swap the restricted region (normalized vertices).

        Raises:
            ValueError: If the region fails configuration validation
        """
        if self.loop is None:
            raise RuntimeError("Service not set up (call setup() first)")

        roi_config = ROIConfig(vertices=[tuple(float(c) for c in v) for v in vertices])
        roi = self.loop.set_roi(roi_config.to_roi())
        logger.info(f"ROI replaced: {len(roi)} vertices")
        return roi

    def get_stats(self) -> IntrusionStats:
        if self.loop is None:
            return IntrusionStats()
        return self.loop.get_stats()
