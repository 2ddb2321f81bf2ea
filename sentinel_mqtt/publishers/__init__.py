"""
MQTT Publishers
===============

Public API
----------
    BasePublisher: Connection lifecycle + JSON publish
    AlertPublisher: Evaluation sink publishing intrusion alerts
"""

from .base import BasePublisher
from .alert import AlertPublisher

__all__ = [
    'BasePublisher',
    'AlertPublisher',
]
