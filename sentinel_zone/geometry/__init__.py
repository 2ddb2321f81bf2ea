"""
Geometry Layer
==============

Bounded Context: Pure geometric shapes and spatial queries.

Responsibilities:
- Shape representation (immutable)
- Point-in-polygon and segment intersection tests
- Box-vs-polygon overlap decision
- NO state, NO alerting, NO visualization
"""

from sentinel_zone.geometry.shapes import Point, Box, Polygon
from sentinel_zone.geometry.primitives import (
    point_in_polygon,
    orientation,
    on_segment,
    segments_intersect,
    point_in_box,
)
from sentinel_zone.geometry.intersection import (
    IntersectionPath,
    intersection_path,
    box_intersects_polygon,
)
from sentinel_zone.geometry.detector import (
    DetectedObject,
    IntrusionDetector,
    PERSON_CLASS,
)

__all__ = [
    "Point",
    "Box",
    "Polygon",
    "point_in_polygon",
    "orientation",
    "on_segment",
    "segments_intersect",
    "point_in_box",
    "IntersectionPath",
    "intersection_path",
    "box_intersects_polygon",
    "DetectedObject",
    "IntrusionDetector",
    "PERSON_CLASS",
]
