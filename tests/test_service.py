from __future__ import annotations

import time
from pathlib import Path
from typing import List

import pytest
from conftest import FakeFrameSource, StaticDetector, make_frame, person

from sentinel_processor.config import MonitorConfig
from sentinel_processor.service import AnnotatedVideoWriter, IntrusionMonitorService
from sentinel_processor.sources import CameraSource, VideoFileSource, create_frame_source
from sentinel_zone.analytics import FrameEvaluation
from sentinel_zone.pipeline import evaluate_frame
from sentinel_zone.roi import RegionOfInterest


class ExhaustibleSource(FakeFrameSource):
    @property
    def exhausted(self) -> bool:
        return not self.frames

    def release(self) -> None:
        self.released = True


class RecordingPublisher:
    """Minimal alert sink with the publisher lifecycle."""

    def __init__(self):
        self.evaluations: List[FrameEvaluation] = []
        self.connected = False

    def is_connected(self) -> bool:
        return self.connected

    def connect(self, timeout: float = 10.0) -> bool:
        self.connected = True
        return True

    def disconnect(self) -> None:
        self.connected = False

    def __call__(self, evaluation: FrameEvaluation) -> bool:
        self.evaluations.append(evaluation)
        return True


def _config(**kwargs) -> MonitorConfig:
    return MonitorConfig(service_id="cam_test", video_source="unused.mp4", tick_interval_s=0.01, **kwargs)


def test_service_runs_until_source_exhausted() -> None:
    source = ExhaustibleSource([make_frame(i) for i in range(3)])
    publisher = RecordingPublisher()
    service = IntrusionMonitorService(
        _config(),
        frame_source=source,
        detector=StaticDetector([person(40, 40, 10, 10)]),
        alert_publisher=publisher,
    )

    service.setup()
    service.start()
    assert publisher.connected
    service.wait(poll_interval_s=0.01)

    assert [e.frame_id for e in publisher.evaluations][:3] == [0, 1, 2]
    assert service.get_stats().frames_evaluated == 3
    assert service.get_stats().intrusion is True
    assert source.released
    assert not publisher.connected


def test_start_requires_setup() -> None:
    service = IntrusionMonitorService(_config(), frame_source=FakeFrameSource(), detector=StaticDetector())
    with pytest.raises(RuntimeError):
        service.start()


def test_set_roi_is_validated_and_applied() -> None:
    service = IntrusionMonitorService(
        _config(),
        frame_source=FakeFrameSource([make_frame(0)]),
        detector=StaticDetector([person(40, 40, 10, 10)]),
    )
    service.setup()

    with pytest.raises(ValueError):
        service.set_roi([(0.0, 0.0), (2.0, 0.0), (1.0, 1.0)])

    roi = service.set_roi([(0.9, 0.9), (1.0, 0.9), (1.0, 1.0)])
    assert len(roi) == 3
    assert service.loop.tick().intrusion is False


def test_stop_without_start_is_noop() -> None:
    service = IntrusionMonitorService(_config(), frame_source=FakeFrameSource(), detector=StaticDetector())
    service.setup()
    service.stop()
    assert service.get_stats().frames_evaluated == 0


def test_video_writer_skips_frames_without_pixels(tmp_path: Path) -> None:
    writer = AnnotatedVideoWriter(tmp_path / "out.mp4")
    writer(evaluate_frame(make_frame(0), RegionOfInterest.default(), []))
    writer.close()

    assert writer.frames_written == 0
    assert not (tmp_path / "out.mp4").exists()


def test_video_writer_writes_annotated_frames(tmp_path: Path) -> None:
    output = tmp_path / "runs" / "out.mp4"
    writer = AnnotatedVideoWriter(output, fps=5)

    for frame_id in range(3):
        frame = make_frame(frame_id, width=64, height=48, with_image=True)
        writer(evaluate_frame(frame, RegionOfInterest.default(), [person(10, 10, 20, 20)]))
    writer.close()

    assert writer.frames_written == 3
    assert output.exists()


def test_create_frame_source_dispatch(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        create_frame_source(str(tmp_path / "missing.mp4"))

    camera = create_frame_source("rtsp://127.0.0.1:1/none")
    assert isinstance(camera, CameraSource)
    camera.release()


def test_video_file_source_reads_until_exhausted(tmp_path: Path) -> None:
    import numpy as np
    import supervision as sv

    path = tmp_path / "clip.mp4"
    with sv.VideoSink(str(path), sv.VideoInfo(width=32, height=24, fps=5)) as sink:
        for _ in range(4):
            sink.write_frame(np.zeros((24, 32, 3), dtype=np.uint8))

    source = VideoFileSource(path)
    frames = []
    deadline = time.monotonic() + 5.0
    while not source.exhausted and time.monotonic() < deadline:
        frame = source.read()
        if frame is not None:
            frames.append(frame)

    assert [f.frame_id for f in frames] == list(range(len(frames)))
    assert len(frames) >= 1
    assert (frames[0].width, frames[0].height) == (32, 24)
    assert source.read() is None


def test_video_writer_skips_frames_after_size_change(tmp_path: Path, caplog) -> None:
    output = tmp_path / "rotated.mp4"
    writer = AnnotatedVideoWriter(output, fps=5)
    roi = RegionOfInterest.default()

    writer(evaluate_frame(make_frame(0, width=64, height=48, with_image=True), roi, []))
    with caplog.at_level("WARNING", logger="sentinel_processor.service"):
        for frame_id in (1, 2):
            writer(evaluate_frame(make_frame(frame_id, width=48, height=64, with_image=True), roi, []))
    writer(evaluate_frame(make_frame(3, width=64, height=48, with_image=True), roi, []))
    writer.close()

    assert writer.frames_written == 2
    assert writer.frames_skipped == 2
    warnings = [r for r in caplog.records if "differs from video size" in r.getMessage()]
    assert len(warnings) == 1
