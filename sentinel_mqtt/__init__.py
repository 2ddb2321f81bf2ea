"""
Sentinel MQTT
=============

Bounded Context: Alert delivery over MQTT.

Architecture:

    sentinel_mqtt/
    ├── schemas/           # AlertMessage, AlertObject (immutable, JSON)
    └── publishers/        # BasePublisher, AlertPublisher (evaluation sink)

Topic:
    sentinel/alerts/{service_id}   (retained: late subscribers get the last state)

Example:
    >>> from sentinel_mqtt import AlertPublisher
    >>> from sentinel_zone.logging import create_logger
    >>> publisher = AlertPublisher(
    ...     broker_host="localhost",
    ...     topic="sentinel/alerts/cam_01",
    ...     source_id="cam_01",
    ...     logger=create_logger("alert_publisher")
    ... )
    >>> publisher.connect()
    >>> loop.subscribe(publisher)
"""

from .schemas import AlertMessage, AlertObject, SCHEMA_VERSION
from .publishers import BasePublisher, AlertPublisher

__all__ = [
    'AlertMessage',
    'AlertObject',
    'SCHEMA_VERSION',
    'BasePublisher',
    'AlertPublisher',
]

__version__ = "1.0.0"
