"""
Alert Publisher
===============

Bounded Context: Intrusion alert production

An evaluation sink that publishes AlertMessage JSON to MQTT.

Design:
- Inherits from BasePublisher (connection management)
- Callable: subscribe it directly to a FrameEvaluationLoop
- publish_on_change (default): only raise/clear transitions are sent, plus
  the first evaluation so consumers learn the initial state

Message Flow:
    FrameEvaluationLoop → FrameEvaluation → AlertPublisher → MQTT Broker

Example:
    >>> publisher = AlertPublisher(
    ...     broker_host="localhost",
    ...     topic="sentinel/alerts/cam_01",
    ...     source_id="cam_01",
    ...     logger=create_logger("alert_publisher")
    ... )
    >>> publisher.connect()
    >>> loop.subscribe(publisher)
"""

import threading
from typing import Any, Dict, Optional

import paho.mqtt.client as mqtt

from sentinel_zone.analytics.evaluation import FrameEvaluation
from sentinel_zone.logging import LogEvent, StructuredLogger

from ..schemas import AlertMessage
from .base import BasePublisher


class AlertPublisher(BasePublisher):
    """
    Publisher for intrusion alert messages.

    Attributes:
        Same as BasePublisher, plus:
        source_id: Identifier written into every message
        publish_on_change: Only publish when the intrusion flag changes
    """

    def __init__(
        self,
        broker_host: str,
        topic: str,
        source_id: str,
        logger: StructuredLogger,
        broker_port: int = 1883,
        client_id: str = "sentinel_alert_publisher",
        username: Optional[str] = None,
        password: Optional[str] = None,
        qos: int = 0,
        publish_on_change: bool = True,
        client: Optional[mqtt.Client] = None
    ):
        super().__init__(
            broker_host=broker_host,
            broker_port=broker_port,
            topic=topic,
            client_id=client_id,
            logger=logger,
            username=username,
            password=password,
            qos=qos,
            client=client
        )
        self.source_id = source_id
        self.publish_on_change = publish_on_change
        self._last_published: Optional[bool] = None
        self._state_lock = threading.Lock()

    def format_message(self, alert: AlertMessage) -> Dict[str, Any]:
        """
        Raises:
            ValueError: If the message cannot be serialized
        """
        try:
            return alert.to_dict()
        except Exception as e:
            self.logger.error(
                event=LogEvent.SERIALIZATION_ERROR,
                message="Failed to serialize alert message",
                exc_info=e,
                metadata={'frame_id': getattr(alert, 'frame_id', None)}
            )
            raise ValueError(f"Failed to format alert message: {e}")

    def should_publish(self, evaluation: FrameEvaluation) -> bool:
        if not self.publish_on_change:
            return True
        with self._state_lock:
            return self._last_published != evaluation.intrusion

    def publish_alert(self, evaluation: FrameEvaluation) -> bool:
        """
        Publish the alert for one evaluation (ignores publish_on_change).

        Returns:
            True if published successfully, False otherwise
        """
        try:
            alert = AlertMessage.from_evaluation(evaluation, source_id=self.source_id)
            success = self.publish(self.format_message(alert), retain=True)
        except Exception as e:
            self.logger.error(
                event=LogEvent.MQTT_PUBLISH_ERROR,
                message="Error publishing alert message",
                exc_info=e,
                metadata={'frame_id': evaluation.frame_id, 'topic': self.topic}
            )
            return False

        if success:
            with self._state_lock:
                self._last_published = evaluation.intrusion
            self.logger.info(
                event=LogEvent.ALERT_PUBLISHED,
                message="INTRUSION" if evaluation.intrusion else "SECURE",
                metadata={
                    'frame_id': evaluation.frame_id,
                    'object_count': alert.object_count,
                    'topic': self.topic
                }
            )
        return success

    def __call__(self, evaluation: FrameEvaluation) -> bool:
        """Evaluation sink entry point."""
        if not self.should_publish(evaluation):
            return False
        return self.publish_alert(evaluation)
