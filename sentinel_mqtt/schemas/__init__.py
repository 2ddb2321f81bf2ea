"""
MQTT Message Schemas
====================

Public API
----------
    AlertMessage: Frame-level intrusion alert
    AlertObject: One person box with its overlap decision
"""

from .alert import AlertMessage, AlertObject, SCHEMA_VERSION

__all__ = [
    'AlertMessage',
    'AlertObject',
    'SCHEMA_VERSION',
]
