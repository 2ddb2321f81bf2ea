"""
Detector Adapter - YOLO inference to DetectedObject lists.

The core only knows the Detector contract (Frame -> list[DetectedObject]).
This adapter runs an ultralytics model, converts its results through
supervision, and maps class ids to names.
"""

import logging
from typing import Any, Dict, List, Optional

import supervision as sv

from sentinel_processor.config import DetectorConfig
from sentinel_zone.geometry.detector import DetectedObject
from sentinel_zone.geometry.shapes import Box
from sentinel_zone.interfaces import Frame

logger = logging.getLogger(__name__)


def detections_to_objects(
    detections: sv.Detections,
    class_names: Optional[Dict[int, str]] = None,
) -> List[DetectedObject]:
    """
    Convert supervision Detections to DetectedObject list.

    Class labels come from detections.data["class_name"] when present
    (from_ultralytics fills it), else from class_names, else "class_<id>".
    """
    if len(detections) == 0:
        return []

    names = detections.data.get("class_name") if detections.data else None

    objects = []
    for idx, (x1, y1, x2, y2) in enumerate(detections.xyxy):
        if names is not None:
            label = str(names[idx])
        elif detections.class_id is not None:
            class_id = int(detections.class_id[idx])
            label = class_names.get(class_id, f"class_{class_id}") if class_names else f"class_{class_id}"
        else:
            label = "unknown"

        confidence = (
            float(detections.confidence[idx])
            if detections.confidence is not None else None
        )

        objects.append(DetectedObject(
            class_label=label,
            box=Box.from_xyxy(float(x1), float(y1), float(x2), float(y2)),
            confidence=confidence,
        ))

    return objects


class UltralyticsDetector:
    """
    Detector backed by an ultralytics YOLO model.

    Usage:
        detector = UltralyticsDetector.from_config(DetectorConfig())
        objects = detector(frame)
    """

    def __init__(
        self,
        model: Any,
        confidence: float = 0.5,
        iou_threshold: float = 0.5,
        device: Optional[str] = None,
    ):
        """
        Args:
            model: YOLO model (or any callable returning ultralytics Results)
            confidence: Detection confidence threshold
            iou_threshold: NMS IoU threshold
            device: Inference device ("cpu", "cuda:0", ...); None = default
        """
        self.model = model
        self.confidence = confidence
        self.iou_threshold = iou_threshold
        self.device = device

    @classmethod
    def from_config(cls, config: DetectorConfig) -> "UltralyticsDetector":
        """Load the configured weights with ultralytics."""
        from ultralytics import YOLO

        logger.info(f"Loading model: {config.model_path}")
        model = YOLO(config.model_path)
        logger.info(f"Model loaded: {config.model_path}")

        return cls(
            model=model,
            confidence=config.confidence,
            iou_threshold=config.iou_threshold,
            device=config.device,
        )

    @property
    def class_names(self) -> Optional[Dict[int, str]]:
        return getattr(self.model, "names", None)

    def __call__(self, frame: Frame) -> List[DetectedObject]:
        if frame.image is None:
            return []

        kwargs = {
            "verbose": False,
            "conf": self.confidence,
            "iou": self.iou_threshold,
        }
        if self.device is not None:
            kwargs["device"] = self.device

        results = self.model(frame.image, **kwargs)[0]
        detections = sv.Detections.from_ultralytics(results)
        return detections_to_objects(detections, self.class_names)
