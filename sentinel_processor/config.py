"""
Configuration schema for the intrusion monitor service.

This module defines the configuration structure for the monitor: video
source, evaluation cadence, the restricted region, detector settings and the
optional MQTT alert channel. Everything is validated at construction so a bad
file fails at startup, not mid-stream.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

import yaml

from sentinel_zone.roi import DEFAULT_ROI_VERTICES, RegionOfInterest


@dataclass(frozen=True)
class ROIConfig:
    """Restricted region in normalized (0-1) coordinates."""

    vertices: List[Tuple[float, float]] = field(
        default_factory=lambda: [tuple(v) for v in DEFAULT_ROI_VERTICES]
    )

    def __post_init__(self):
        """Validate ROI configuration."""
        if len(self.vertices) < 3:
            raise ValueError(
                f"ROI must have at least 3 vertices, got {len(self.vertices)}"
            )

        for vertex in self.vertices:
            if len(vertex) != 2:
                raise ValueError(f"ROI vertex must be an [x, y] pair, got {vertex}")
            x, y = vertex
            if not (0.0 <= x <= 1.0 and 0.0 <= y <= 1.0):
                raise ValueError(
                    f"ROI vertex must be normalized to [0, 1], got {vertex}"
                )

    def to_roi(self) -> RegionOfInterest:
        return RegionOfInterest.from_points(self.vertices)


@dataclass(frozen=True)
class DetectorConfig:
    """YOLO detector configuration."""

    model_path: str = "yolo11n.pt"
    target_class: str = "person"
    confidence: float = 0.5
    iou_threshold: float = 0.5
    device: Optional[str] = None  # None = let ultralytics pick

    def __post_init__(self):
        """Validate detector configuration."""
        if not self.model_path:
            raise ValueError("model_path cannot be empty")

        if not self.target_class:
            raise ValueError("target_class cannot be empty")

        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(
                f"confidence must be in [0.0, 1.0], got {self.confidence}"
            )

        if not 0.0 <= self.iou_threshold <= 1.0:
            raise ValueError(
                f"iou_threshold must be in [0.0, 1.0], got {self.iou_threshold}"
            )


@dataclass(frozen=True)
class MQTTConfig:
    """MQTT broker configuration for alert publishing."""

    broker: str
    port: int = 1883
    username: Optional[str] = None
    password: Optional[str] = None
    qos: int = 0
    alert_topic: str = "sentinel/alerts/{service_id}"
    publish_on_change: bool = True

    def __post_init__(self):
        """Validate MQTT configuration."""
        if not self.broker:
            raise ValueError("MQTT broker cannot be empty")

        if not 1 <= self.port <= 65535:
            raise ValueError(
                f"MQTT port must be in [1, 65535], got {self.port}"
            )

        if self.qos not in {0, 1, 2}:
            raise ValueError(
                f"MQTT QoS must be 0, 1, or 2, got {self.qos}"
            )

    def topic_for(self, service_id: str) -> str:
        return self.alert_topic.format(service_id=service_id)


@dataclass(frozen=True)
class MonitorConfig:
    """
    Main configuration for the intrusion monitor.

    Loaded from YAML and validated at startup. Immutable after construction.
    """

    # Service identification
    service_id: str

    # Video source: camera index, stream URL or video file path
    video_source: Union[int, str]
    tick_interval_s: float = 0.1
    output_path: Optional[Path] = None

    roi: ROIConfig = field(default_factory=ROIConfig)
    detector: DetectorConfig = field(default_factory=DetectorConfig)
    mqtt: Optional[MQTTConfig] = None

    def __post_init__(self):
        """Validate monitor configuration."""
        if not self.service_id:
            raise ValueError("service_id cannot be empty")

        if self.video_source is None or self.video_source == "":
            raise ValueError("video_source cannot be empty")

        if not 0.0 < self.tick_interval_s <= 10.0:
            raise ValueError(
                f"tick_interval_s must be in (0, 10], got {self.tick_interval_s}"
            )

    @classmethod
    def from_dict(cls, data: dict) -> "MonitorConfig":
        roi_data = data.get("roi") or {}
        roi = ROIConfig(
            vertices=[tuple(float(c) for c in v) for v in roi_data["vertices"]]
        ) if "vertices" in roi_data else ROIConfig()

        detector = DetectorConfig(**(data.get("detector") or {}))

        mqtt_data = data.get("mqtt")
        mqtt = MQTTConfig(**mqtt_data) if mqtt_data else None

        output_path = data.get("output_path")

        return cls(
            service_id=data["service_id"],
            video_source=data["video_source"],
            tick_interval_s=float(data.get("tick_interval_s", 0.1)),
            output_path=Path(output_path) if output_path else None,
            roi=roi,
            detector=detector,
            mqtt=mqtt,
        )

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "MonitorConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            service_id: "cam_01"
            video_source: "rtsp://localhost:8554/camera1"   # or 0, or "video.mp4"
            tick_interval_s: 0.1
            output_path: "./runs/cam_01.mp4"                # optional

            roi:
              vertices: [[0.2, 0.2], [0.8, 0.2], [0.8, 0.8], [0.2, 0.8]]

            detector:
              model_path: "yolo11n.pt"
              target_class: "person"
              confidence: 0.5

            mqtt:                                           # optional
              broker: "localhost"
              port: 1883
              alert_topic: "sentinel/alerts/{service_id}"

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the YAML is invalid or fails validation
        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {yaml_path}: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Config root must be a mapping, got {type(data).__name__}")

        try:
            return cls.from_dict(data)
        except KeyError as e:
            raise ValueError(f"Missing required config key: {e}")
        except TypeError as e:
            raise ValueError(f"Unknown or malformed config key in {yaml_path}: {e}")
