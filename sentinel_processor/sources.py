"""
Frame Sources - video file and camera adapters.

Both adapters implement the FrameSource contract: read() returns a Frame, or
None when no frame is ready. They are only read from inside a loop tick, so
they hold no locks of their own.
"""

import logging
from pathlib import Path
from typing import Iterator, Optional, Union

import cv2
import numpy as np
import supervision as sv

from sentinel_zone.interfaces import Frame

logger = logging.getLogger(__name__)


class VideoFileSource:
    """
    Frames from a video file via supervision's frame generator.

    After the last frame read() keeps returning None and exhausted is True.
    """

    def __init__(self, video_path: Union[str, Path], stride: int = 1):
        """
        Args:
            video_path: Path to the video file
            stride: Yield every N-th frame

        Raises:
            FileNotFoundError: If the file does not exist
        """
        self.video_path = str(video_path)
        if not Path(self.video_path).exists():
            raise FileNotFoundError(f"Video not found: {self.video_path}")
        if stride < 1:
            raise ValueError(f"stride must be >= 1, got {stride}")

        self.stride = stride
        self.video_info = sv.VideoInfo.from_video_path(self.video_path)
        self._frames: Iterator[np.ndarray] = sv.get_video_frames_generator(
            self.video_path, stride=stride
        )
        self._next_id = 0
        self._exhausted = False

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def read(self) -> Optional[Frame]:
        if self._exhausted:
            return None

        image = next(self._frames, None)
        if image is None:
            self._exhausted = True
            logger.info(f"Video exhausted after {self._next_id} frames: {self.video_path}")
            return None

        frame = Frame.from_image(image, frame_id=self._next_id)
        self._next_id += 1
        return frame

    def release(self) -> None:
        self._exhausted = True


class CameraSource:
    """
    Frames from a camera index or stream URL via OpenCV.

    A failed grab (camera warming up, dropped packet) is reported as "not
    ready" rather than as an error.
    """

    def __init__(self, device: Union[int, str]):
        self.device = device
        self.capture = cv2.VideoCapture(device)
        self._next_id = 0

        if not self.capture.isOpened():
            logger.warning(f"Camera not opened yet: {device}")

    @property
    def exhausted(self) -> bool:
        return False

    def read(self) -> Optional[Frame]:
        ok, image = self.capture.read()
        if not ok or image is None:
            return None

        frame = Frame.from_image(image, frame_id=self._next_id)
        self._next_id += 1
        return frame

    def release(self) -> None:
        self.capture.release()


def create_frame_source(video_source: Union[int, str]) -> Union[VideoFileSource, CameraSource]:
    """
    Pick an adapter for the configured source.

    Integers (or digit strings) are camera indices, URLs with a scheme are
    streams, anything else is a video file path.
    """
    if isinstance(video_source, int):
        return CameraSource(video_source)

    source = str(video_source)
    if source.isdigit():
        return CameraSource(int(source))
    if "://" in source:
        return CameraSource(source)
    return VideoFileSource(source)
