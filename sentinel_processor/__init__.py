"""
sentinel_processor - Intrusion monitor service

Wires a frame source, a YOLO detector and the sentinel_zone evaluation loop
together, and attaches the optional sinks (annotated video, MQTT alerts).

Architecture:
- IntrusionMonitorService: Main orchestrator
- MonitorConfig: Configuration management (YAML)
- VideoFileSource / CameraSource: Frame sources
- UltralyticsDetector: YOLO detector adapter

Threading Model:
- Ticker Thread (IntervalTicker, drives tick() every 100 ms)
- MQTT network thread (paho-mqtt internal, alert publisher)
"""

from sentinel_processor.config import DetectorConfig, MonitorConfig, MQTTConfig, ROIConfig
from sentinel_processor.detector import UltralyticsDetector, detections_to_objects
from sentinel_processor.service import AnnotatedVideoWriter, IntrusionMonitorService
from sentinel_processor.sources import CameraSource, VideoFileSource, create_frame_source

__all__ = [
    "MonitorConfig",
    "ROIConfig",
    "DetectorConfig",
    "MQTTConfig",
    "UltralyticsDetector",
    "detections_to_objects",
    "VideoFileSource",
    "CameraSource",
    "create_frame_source",
    "AnnotatedVideoWriter",
    "IntrusionMonitorService",
]
