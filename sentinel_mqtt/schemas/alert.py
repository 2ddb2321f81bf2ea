"""
Alert Message Schema
====================

Bounded Context: Intrusion alert data structures published via MQTT.

Design:
- AlertObject: One person box and its overlap decision
- AlertMessage: Complete message with metadata
- Immutable (frozen dataclasses)
- Type-safe serialization/deserialization

Message Flow:
    FrameEvaluationLoop → FrameEvaluation → AlertMessage → AlertPublisher → MQTT
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sentinel_zone.analytics.evaluation import FrameEvaluation
from sentinel_zone.geometry.shapes import Box

SCHEMA_VERSION = "1.0"


@dataclass(frozen=True)
class AlertObject:
    """
    One target-class detection in an alert message.

    Attributes:
        class_name: Detector class (e.g., "person")
        bbox: Bounding box (absolute pixels)
        intersecting: Whether the box touches the restricted region
        confidence: Detector score, if reported
    """

    class_name: str
    bbox: Box
    intersecting: bool
    confidence: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'class': self.class_name,
            'confidence': self.confidence,
            'bbox': self.bbox.to_dict(),
            'intersecting': self.intersecting,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AlertObject':
        """
        Raises:
            ValueError: If required keys are missing or invalid
        """
        try:
            bbox = data['bbox']
            return cls(
                class_name=str(data['class']),
                bbox=Box(
                    x=float(bbox['x']),
                    y=float(bbox['y']),
                    width=float(bbox['width']),
                    height=float(bbox['height']),
                ),
                intersecting=bool(data['intersecting']),
                confidence=(
                    float(data['confidence'])
                    if data.get('confidence') is not None else None
                ),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid alert object: {e}")


@dataclass(frozen=True)
class AlertMessage:
    """
    Frame-level intrusion alert.

    Attributes:
        schema_version: Message schema version
        timestamp: ISO 8601 publication time (UTC)
        source_id: Service / camera identifier
        frame_id: Evaluated frame
        intrusion: Frame-level intrusion flag
        objects: Person detections with their decisions
        roi: Active region (normalized vertices) the frame was evaluated against
    """

    schema_version: str
    timestamp: str
    source_id: str
    frame_id: int
    intrusion: bool
    objects: Tuple[AlertObject, ...]
    roi: Tuple[Tuple[float, float], ...]

    @property
    def object_count(self) -> int:
        return len(self.objects)

    @classmethod
    def from_evaluation(cls, evaluation: FrameEvaluation, source_id: str) -> 'AlertMessage':
        objects = tuple(
            AlertObject(
                class_name=c.detected_object.class_label,
                bbox=c.box,
                intersecting=c.intersecting,
                confidence=c.detected_object.confidence,
            )
            for c in evaluation.classifications
        )
        return cls(
            schema_version=SCHEMA_VERSION,
            timestamp=datetime.now(timezone.utc).isoformat(),
            source_id=source_id,
            frame_id=evaluation.frame_id,
            intrusion=evaluation.intrusion,
            objects=objects,
            roi=tuple((p.x, p.y) for p in evaluation.roi.vertices),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'schema_version': self.schema_version,
            'timestamp': self.timestamp,
            'source_id': self.source_id,
            'frame_id': self.frame_id,
            'intrusion': self.intrusion,
            'objects': [obj.to_dict() for obj in self.objects],
            'roi': [list(vertex) for vertex in self.roi],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AlertMessage':
        """
        Raises:
            ValueError: If required keys are missing or invalid
        """
        try:
            objects: List[AlertObject] = [
                AlertObject.from_dict(obj) for obj in data.get('objects', [])
            ]
            return cls(
                schema_version=str(data['schema_version']),
                timestamp=str(data['timestamp']),
                source_id=str(data['source_id']),
                frame_id=int(data['frame_id']),
                intrusion=bool(data['intrusion']),
                objects=tuple(objects),
                roi=tuple((float(x), float(y)) for x, y in data.get('roi', [])),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid alert message: {e}")
