"""
Rendering Layer
===============

Bounded Context: Visualization of the region and classifications.

Responsibilities:
- Draw the region (secure / intruded style)
- Draw person boxes with ALERT! / Safe labels
- Draw the frame-level status banner

Non-responsibilities:
- Overlap decisions (handled by geometry)
- Alert state (handled by analytics)
"""

from sentinel_zone.rendering.visualizer import IntrusionVisualizer, to_detections

__all__ = [
    "IntrusionVisualizer",
    "to_detections",
]
