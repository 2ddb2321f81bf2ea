"""
Region Intersection Engine
==========================

Box-vs-polygon overlap decision ("any part touching", not "fully inside").

Three independent sufficient conditions, checked in order:

1. A box corner lies inside the polygon (polygon engulfs the box).
2. A polygon vertex lies inside the box (box engulfs the polygon).
3. A box edge intersects a polygon edge (shapes cross with no vertex of
   either contained in the other).
"""

from enum import Enum
from typing import Optional

from sentinel_zone.geometry.primitives import point_in_polygon, segments_intersect
from sentinel_zone.geometry.shapes import Box, Polygon


class IntersectionPath(str, Enum):
    """Which condition confirmed the overlap."""

    CORNER_IN_POLYGON = "corner_in_polygon"
    VERTEX_IN_BOX = "vertex_in_box"
    EDGE_CROSSING = "edge_crossing"


def intersection_path(box: Box, polygon: Polygon) -> Optional[IntersectionPath]:
    """
    Decide whether the box overlaps the polygon, and how.

    Args:
        box: Axis-aligned box (pixel space)
        polygon: Sequence of (x, y) vertices in the same space

    Returns:
        The first condition that held, or None if the shapes are disjoint
    """
    corners = box.corners()

    for corner in corners:
        if point_in_polygon(corner, polygon):
            return IntersectionPath.CORNER_IN_POLYGON

    for vertex in polygon:
        if box.contains_point(vertex):
            return IntersectionPath.VERTEX_IN_BOX

    n = len(polygon)
    for p1, q1 in box.edges():
        for j in range(n):
            if segments_intersect(p1, q1, polygon[j], polygon[(j + 1) % n]):
                return IntersectionPath.EDGE_CROSSING

    return None


def box_intersects_polygon(box: Box, polygon: Polygon) -> bool:
    """Check if any part of the box touches the polygon."""
    return intersection_path(box, polygon) is not None
