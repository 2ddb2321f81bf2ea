"""
Collaborator Interfaces
=======================

Boundary contracts with the parts of the system that live outside the
geometry core: frame acquisition, the detection model and render/alert
consumers.
"""

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List, Optional, Protocol

import numpy as np

from sentinel_zone.geometry.detector import DetectedObject

if TYPE_CHECKING:
    from sentinel_zone.analytics.evaluation import FrameEvaluation


@dataclass(frozen=True)
class Frame:
    """
    Handle on one video frame.

    Attributes:
        image: Raw pixels (HxWxC), or None for synthetic frames
        width: Frame width in pixels
        height: Frame height in pixels
        frame_id: Monotonic id assigned by the source
        timestamp: Capture time (epoch seconds)
    """

    image: Optional[np.ndarray]
    width: int
    height: int
    frame_id: int = 0
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Frame dimensions must be positive, got {self.width}x{self.height}"
            )

    @classmethod
    def from_image(cls, image: np.ndarray, frame_id: int = 0, timestamp: Optional[float] = None) -> "Frame":
        """Wrap an HxWxC array, reading width/height from its shape."""
        height, width = image.shape[:2]
        return cls(
            image=image,
            width=int(width),
            height=int(height),
            frame_id=frame_id,
            timestamp=time.time() if timestamp is None else timestamp,
        )


class FrameSource(Protocol):
    """Supplies frames on demand."""

    def read(self) -> Optional[Frame]:
        """Return the current frame, or None if no frame is ready."""
        ...


class Detector(Protocol):
    """Black-box object detector. May block for the duration of inference."""

    def __call__(self, frame: Frame) -> List[DetectedObject]:
        ...


class EvaluationSink(Protocol):
    """Render/alert consumer. Receives every evaluated frame, returns nothing."""

    def __call__(self, evaluation: "FrameEvaluation") -> Any:
        ...
