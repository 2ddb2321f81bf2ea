"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

Typed event names for structured logging.

Event Naming Convention:
    <component>.<action>

    component: tick, frame, intrusion, roi, sink, detector, mqtt, error

Example Log Query (CloudWatch Insights):
    fields @timestamp, event, metadata.frame_id
    | filter event = "intrusion.raised"
    | stats count() by bin(5m)
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - tick.* / frame.*: Frame evaluation loop
    - intrusion.*: Alert state transitions
    - roi.*: Region of interest configuration
    - mqtt.*: MQTT broker interactions
    - error.*: Error conditions
    """

    # ========== Evaluation Loop Events ==========
    TICK_SKIPPED = "tick.skipped"
    """Tick was a no-op (frame not ready or detection still in flight)."""

    FRAME_EVALUATED = "frame.evaluated"
    """One (ROI, frame, detections) triple classified."""

    LOOP_STARTED = "loop.started"
    """Interval ticker started."""

    LOOP_STOPPED = "loop.stopped"
    """Interval ticker stopped."""

    # ========== Intrusion Events ==========
    INTRUSION_RAISED = "intrusion.raised"
    """Frame-level intrusion flag went from False to True."""

    INTRUSION_CLEARED = "intrusion.cleared"
    """Frame-level intrusion flag went from True to False."""

    # ========== ROI Events ==========
    ROI_REPLACED = "roi.replaced"
    """Active region of interest replaced wholesale."""

    # ========== MQTT Events ==========
    MQTT_CONNECTED = "mqtt.connected"
    """MQTT broker connection established."""

    MQTT_DISCONNECTED = "mqtt.disconnected"
    """MQTT broker connection lost."""

    MQTT_PUBLISH_SUCCESS = "mqtt.publish.success"
    """Message successfully published to broker."""

    MQTT_PUBLISH_FAILED = "mqtt.publish.failed"
    """Message publication failed."""

    ALERT_PUBLISHED = "mqtt.alert.published"
    """Alert message published for a frame evaluation."""

    # ========== Error Events ==========
    DETECTOR_ERROR = "error.detector"
    """Detector raised during a tick."""

    SINK_ERROR = "error.sink"
    """A render/alert sink raised while consuming an evaluation."""

    SERIALIZATION_ERROR = "error.serialization"
    """Failed to serialize message to JSON."""

    MQTT_CONNECTION_ERROR = "error.mqtt_connection"
    """Failed to connect to MQTT broker."""

    MQTT_PUBLISH_ERROR = "error.mqtt_publish"
    """Error during message publication."""


# Event categories for filtering
LOOP_EVENTS = {
    LogEvent.TICK_SKIPPED,
    LogEvent.FRAME_EVALUATED,
    LogEvent.LOOP_STARTED,
    LogEvent.LOOP_STOPPED,
}

INTRUSION_EVENTS = {
    LogEvent.INTRUSION_RAISED,
    LogEvent.INTRUSION_CLEARED,
}

MQTT_EVENTS = {
    LogEvent.MQTT_CONNECTED,
    LogEvent.MQTT_DISCONNECTED,
    LogEvent.MQTT_PUBLISH_SUCCESS,
    LogEvent.MQTT_PUBLISH_FAILED,
    LogEvent.ALERT_PUBLISHED,
}

ERROR_EVENTS = {
    LogEvent.DETECTOR_ERROR,
    LogEvent.SINK_ERROR,
    LogEvent.SERIALIZATION_ERROR,
    LogEvent.MQTT_CONNECTION_ERROR,
    LogEvent.MQTT_PUBLISH_ERROR,
}
