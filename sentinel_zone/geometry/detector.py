"""
Intrusion Detector Module
=========================

Stateless detection logic - applies region geometry to detected objects.

Design:
- Pure functions (no state)
- Returns detection masks aligned with the filtered objects
- Thread-safe (no mutations)
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from sentinel_zone.geometry.intersection import box_intersects_polygon
from sentinel_zone.geometry.shapes import Box, Polygon

PERSON_CLASS = "person"


@dataclass(frozen=True)
class DetectedObject:
    """
    One object reported by the external detector for a single frame.

    Attributes:
        class_label: Detector class name (e.g., "person")
        box: Bounding box in pixel coordinates
        confidence: Detector score, if the detector reports one
    """

    class_label: str
    box: Box
    confidence: Optional[float] = None


class IntrusionDetector:
    """
    Stateless detector for applying a region to detected objects.

    All methods are static: the region is passed in per call, so callers
    decide which ROI snapshot a batch is evaluated against.
    """

    @staticmethod
    def select_targets(
        objects: Sequence[DetectedObject],
        target_class: str = PERSON_CLASS,
    ) -> List[DetectedObject]:
        """Keep only objects of the monitored class, preserving order."""
        return [obj for obj in objects if obj.class_label == target_class]

    @staticmethod
    def detect_boxes(polygon: Polygon, boxes: Sequence[Box]) -> np.ndarray:
        """
        Detect which boxes overlap the polygon.

        Returns:
            Boolean mask of shape (N,) where True = box touches the region
        """
        if len(boxes) == 0:
            return np.array([], dtype=bool)

        return np.array(
            [box_intersects_polygon(box, polygon) for box in boxes],
            dtype=bool,
        )

    @staticmethod
    def detect(
        polygon: Polygon,
        objects: Sequence[DetectedObject],
        target_class: str = PERSON_CLASS,
    ) -> Tuple[List[DetectedObject], np.ndarray]:
        """
        Classify the target-class objects of one frame against the region.

        Args:
            polygon: Region in pixel coordinates (already scaled)
            objects: All objects reported for the frame
            target_class: Class label that can trigger an intrusion

        Returns:
            Tuple of:
            - targets: Objects of target_class, in detector order
            - mask: Boolean mask aligned with targets
        """
        targets = IntrusionDetector.select_targets(objects, target_class)
        mask = IntrusionDetector.detect_boxes(polygon, [obj.box for obj in targets])
        return targets, mask
