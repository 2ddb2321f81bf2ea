"""
Frame Evaluation Snapshots
==========================

Immutable results of classifying one (ROI, frame, detections) triple.

Design:
- Frozen dataclasses (thread-safe read, safe to hand to any sink)
- Value objects: two evaluations of the same triple compare equal
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from sentinel_zone.geometry.detector import DetectedObject
from sentinel_zone.geometry.shapes import Box, Point
from sentinel_zone.roi import RegionOfInterest


@dataclass(frozen=True)
class ObjectClassification:
    """One target-class object and whether it touches the region."""

    detected_object: DetectedObject
    intersecting: bool

    @property
    def box(self) -> Box:
        return self.detected_object.box

    @property
    def label(self) -> str:
        """Display label used by render sinks."""
        return "ALERT!" if self.intersecting else "Safe"


@dataclass(frozen=True)
class FrameEvaluation:
    """
    Result of evaluating a single frame.

    Attributes:
        frame_id: Id of the frame the detections were computed on
        frame_wh: (width, height) of that frame
        roi: Region captured when the evaluation started
        scaled_roi: roi in pixel coordinates for frame_wh
        classifications: Target-class objects with their overlap decision
        intrusion: OR over all classifications
        timestamp: Capture time of the frame
        image: Pixels of that frame for render sinks (excluded from equality)
    """

    frame_id: int
    frame_wh: Tuple[int, int]
    roi: RegionOfInterest
    scaled_roi: Tuple[Point, ...]
    classifications: Tuple[ObjectClassification, ...]
    intrusion: bool
    timestamp: float = 0.0
    image: Optional[np.ndarray] = field(default=None, compare=False, repr=False)

    @property
    def pairs(self) -> List[Tuple[Box, bool]]:
        """(box, is_intersecting) pairs, in detector order."""
        return [(c.box, c.intersecting) for c in self.classifications]

    @property
    def mask(self) -> np.ndarray:
        return np.array([c.intersecting for c in self.classifications], dtype=bool)

    @property
    def intersecting_count(self) -> int:
        return sum(1 for c in self.classifications if c.intersecting)

    def __str__(self) -> str:
        status = "INTRUSION" if self.intrusion else "SECURE"
        return f"frame {self.frame_id}: {status} ({self.intersecting_count}/{len(self.classifications)})"

    def summary(self) -> Dict[str, Any]:
        """Compact metadata for structured logs."""
        return {
            'frame_id': self.frame_id,
            'frame_wh': list(self.frame_wh),
            'targets': len(self.classifications),
            'intersecting': self.intersecting_count,
            'intrusion': self.intrusion,
        }
