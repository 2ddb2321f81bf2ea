"""
Geometry Primitives
===================

Point-in-polygon, orientation and segment intersection tests.

Design:
- Pure functions, no state
- Deterministic on identical input (no epsilon tuning)
- Never raise on degenerate input (horizontal / zero-length edges,
  coincident endpoints)
"""

from typing import Tuple

from sentinel_zone.geometry.shapes import Box, Polygon

COLLINEAR = 0
CLOCKWISE = 1
COUNTER_CLOCKWISE = 2


def point_in_polygon(point: Tuple[float, float], polygon: Polygon) -> bool:
    """
    Check if point is inside polygon using ray casting.

    A horizontal ray is cast from the point towards +x and edge crossings are
    counted. An edge from vertex j (the previous vertex) to vertex i crosses
    the ray when exactly one endpoint lies strictly above the point's y; this
    half-open test counts a vertex lying on the ray exactly once and skips
    horizontal edges before any division happens.

    Args:
        point: (x, y) coordinates to test
        polygon: Sequence of (x, y) vertices, implicitly closed

    Returns:
        True if point is inside polygon
    """
    px, py = point
    inside = False

    j = len(polygon) - 1
    for i in range(len(polygon)):
        xi, yi = polygon[i]
        xj, yj = polygon[j]

        if (yi > py) != (yj > py):
            x_cross = xj + (py - yj) / (yi - yj) * (xi - xj)
            if px < x_cross:
                inside = not inside
        j = i

    return inside


def orientation(
    p: Tuple[float, float],
    q: Tuple[float, float],
    r: Tuple[float, float],
) -> int:
    """
    Turn direction of the ordered triple (p, q, r).

    Returns:
        0 (COLLINEAR), 1 (CLOCKWISE) or 2 (COUNTER_CLOCKWISE)
    """
    value = (q[1] - p[1]) * (r[0] - q[0]) - (q[0] - p[0]) * (r[1] - q[1])
    if value == 0:
        return COLLINEAR
    return CLOCKWISE if value > 0 else COUNTER_CLOCKWISE


def on_segment(
    p: Tuple[float, float],
    q: Tuple[float, float],
    r: Tuple[float, float],
) -> bool:
    """Check if q lies within the bounding box of segment p-r."""
    return (
        min(p[0], r[0]) <= q[0] <= max(p[0], r[0])
        and min(p[1], r[1]) <= q[1] <= max(p[1], r[1])
    )


def segments_intersect(
    p1: Tuple[float, float],
    q1: Tuple[float, float],
    p2: Tuple[float, float],
    q2: Tuple[float, float],
) -> bool:
    """
    Check if segment p1-q1 intersects segment p2-q2.

    Touching endpoints and collinear overlaps count as intersections.
    """
    o1 = orientation(p1, q1, p2)
    o2 = orientation(p1, q1, q2)
    o3 = orientation(p2, q2, p1)
    o4 = orientation(p2, q2, q1)

    if o1 != o2 and o3 != o4:
        return True

    # Collinear cases
    if o1 == COLLINEAR and on_segment(p1, p2, q1):
        return True
    if o2 == COLLINEAR and on_segment(p1, q2, q1):
        return True
    if o3 == COLLINEAR and on_segment(p2, p1, q2):
        return True
    if o4 == COLLINEAR and on_segment(p2, q1, q2):
        return True

    return False


def point_in_box(point: Tuple[float, float], box: Box) -> bool:
    """Check if point lies within the box bounds (inclusive)."""
    return box.contains_point(point)
