from __future__ import annotations

import threading
from typing import Iterable, List, Optional

import numpy as np
import pytest

from sentinel_zone.geometry import Box, DetectedObject
from sentinel_zone.interfaces import Frame


class FakeFrameSource:
    """Returns queued frames, then None (frame not ready)."""

    def __init__(self, frames: Iterable[Optional[Frame]] = ()):
        self.frames: List[Optional[Frame]] = list(frames)
        self.reads = 0

    def read(self) -> Optional[Frame]:
        self.reads += 1
        if not self.frames:
            return None
        return self.frames.pop(0)


class StaticDetector:
    """Returns the same objects for every frame."""

    def __init__(self, objects: Iterable[DetectedObject] = ()):
        self.objects = list(objects)
        self.calls = 0

    def __call__(self, frame: Frame) -> List[DetectedObject]:
        self.calls += 1
        return list(self.objects)


class BlockingDetector:
    """Blocks inside detection until released."""

    def __init__(self, objects: Iterable[DetectedObject] = ()):
        self.objects = list(objects)
        self.entered = threading.Event()
        self.release = threading.Event()

    def __call__(self, frame: Frame) -> List[DetectedObject]:
        self.entered.set()
        assert self.release.wait(timeout=5.0)
        return list(self.objects)


def make_frame(frame_id: int = 0, width: int = 100, height: int = 100, with_image: bool = False) -> Frame:
    image = np.zeros((height, width, 3), dtype=np.uint8) if with_image else None
    return Frame(image=image, width=width, height=height, frame_id=frame_id, timestamp=1000.0 + frame_id)


def person(x: float, y: float, width: float, height: float, confidence: float = 0.9) -> DetectedObject:
    return DetectedObject(class_label="person", box=Box(x=x, y=y, width=width, height=height), confidence=confidence)


@pytest.fixture
def inside_person() -> DetectedObject:
    # Default region on a 100x100 frame spans 20..80
    return person(40, 40, 10, 10)


@pytest.fixture
def outside_person() -> DetectedObject:
    return person(0, 0, 10, 10)
