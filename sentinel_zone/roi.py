"""
Region of Interest Module
=========================

Bounded Context: The restricted region, stored in normalized coordinates.

Design:
- RegionOfInterest is immutable (frozen dataclass); replacing it is the
  only way to change the region, so no reader sees a half-updated polygon
- Scaling to pixels is recomputed on every call (frame size may change
  between frames, e.g. device rotation)
- ROIModel owns the single active region behind a lock
"""

import threading
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple, Union

from sentinel_zone.geometry.shapes import Point
from sentinel_zone.logging import LogEvent, StructuredLogger

# Centered rectangle covering the middle 60% of the frame
DEFAULT_ROI_VERTICES: Tuple[Point, ...] = (
    Point(0.2, 0.2),
    Point(0.8, 0.2),
    Point(0.8, 0.8),
    Point(0.2, 0.8),
)


@dataclass(frozen=True)
class RegionOfInterest:
    """
    Restricted region as a polygon in normalized (0-1) coordinates.

    Only the structural requirement (at least 3 vertices) is enforced here.
    Range and simplicity checks belong to the configuration layer.

    Attributes:
        vertices: Ordered polygon vertices relative to frame width/height
    """

    vertices: Tuple[Point, ...]

    def __post_init__(self):
        vertices = tuple(Point(float(x), float(y)) for x, y in self.vertices)
        if len(vertices) < 3:
            raise ValueError(
                f"ROI polygon must have at least 3 vertices, got {len(vertices)}"
            )
        object.__setattr__(self, 'vertices', vertices)

    @classmethod
    def default(cls) -> "RegionOfInterest":
        """Centered rectangle from (0.2, 0.2) to (0.8, 0.8)."""
        return cls(vertices=DEFAULT_ROI_VERTICES)

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]]) -> "RegionOfInterest":
        """Build from any iterable of [x, y] pairs (lists, tuples, arrays)."""
        return cls(vertices=tuple(Point(float(p[0]), float(p[1])) for p in points))

    def scale(self, frame_width: float, frame_height: float) -> Tuple[Point, ...]:
        """Return the region in pixel coordinates for the given frame size."""
        return scale_roi(self, frame_width, frame_height)

    def __len__(self) -> int:
        return len(self.vertices)


def scale_roi(
    roi: RegionOfInterest,
    frame_width: float,
    frame_height: float,
) -> Tuple[Point, ...]:
    """
    Scale normalized ROI vertices to pixel coordinates.

    Args:
        roi: Region in normalized coordinates
        frame_width: Current frame width in pixels
        frame_height: Current frame height in pixels

    Returns:
        Tuple of pixel-space vertices (ScaledROI)
    """
    return tuple(Point(x * frame_width, y * frame_height) for x, y in roi.vertices)


class ROIModel:
    """
    Holder of the single active region.

    Thread Safety:
    - set_roi() and current are guarded by a lock
    - Readers receive the immutable RegionOfInterest itself, which acts as
      a snapshot: a later set_roi() never alters a value already handed out

    Usage:
        model = ROIModel()                    # default centered region
        model.set_roi([(0, 0), (1, 0), (1, 1)])
        roi = model.current                   # snapshot for one evaluation
        pixels = model.scale(1280, 720)
    """

    def __init__(
        self,
        roi: Optional[RegionOfInterest] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        self._roi = roi or RegionOfInterest.default()
        self._lock = threading.Lock()
        self._logger = logger
        self._version = 0

    @property
    def current(self) -> RegionOfInterest:
        """Currently active region."""
        with self._lock:
            return self._roi

    @property
    def version(self) -> int:
        """Incremented on every replacement."""
        with self._lock:
            return self._version

    def set_roi(
        self,
        roi: Union[RegionOfInterest, Iterable[Sequence[float]]],
    ) -> RegionOfInterest:
        """
        Replace the active region wholesale.

        Takes effect on the next evaluation; evaluations already in flight
        keep the region they captured at start.

        Raises:
            ValueError: If the new polygon has fewer than 3 vertices
        """
        if not isinstance(roi, RegionOfInterest):
            roi = RegionOfInterest.from_points(roi)

        with self._lock:
            self._roi = roi
            self._version += 1
            version = self._version

        if self._logger is not None:
            self._logger.info(
                event=LogEvent.ROI_REPLACED,
                message="Region of interest replaced",
                metadata={
                    'vertex_count': len(roi),
                    'version': version,
                }
            )
        return roi

    def reset(self) -> RegionOfInterest:
        """Reinstall the default centered region."""
        return self.set_roi(RegionOfInterest.default())

    def scale(self, frame_width: float, frame_height: float) -> Tuple[Point, ...]:
        """Scale the current region to pixel coordinates."""
        return scale_roi(self.current, frame_width, frame_height)
