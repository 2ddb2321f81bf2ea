"""
Structured Logging for Sentinel
===============================

Bounded Context: Observability

Public API
----------
    LogEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation
    create_logger: Factory function

Example:
    >>> from sentinel_zone.logging import create_logger, LogEvent
    >>> logger = create_logger("evaluation_loop")
    >>> logger.warning(
    ...     event=LogEvent.INTRUSION_RAISED,
    ...     message="Person entered restricted region",
    ...     metadata={'frame_id': 123}
    ... )
"""

from .events import LogEvent
from .structured import StructuredLogger, create_logger

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]
