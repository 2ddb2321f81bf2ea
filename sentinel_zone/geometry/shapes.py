"""
Geometric Shapes Module
========================

Pure geometric value types - NO state, NO side effects.

Design:
- Immutable shapes (NamedTuple / frozen dataclass)
- Coordinates carry no unit: normalized vs pixel is decided by context
- Thread-safe by design (immutability)
"""

from dataclasses import dataclass
from typing import Dict, NamedTuple, Sequence, Tuple


class Point(NamedTuple):
    """Immutable (x, y) pair. Plain 2-tuples are accepted wherever a Point is."""

    x: float
    y: float


# Ordered vertices, implicitly closed (last vertex connects back to first).
Polygon = Sequence[Tuple[float, float]]


@dataclass(frozen=True)
class Box:
    """
    Immutable axis-aligned rectangle.

    Origin is the top-left corner; y grows downwards as in image space.
    A zero-area box is valid and degrades to a point or a segment.

    Attributes:
        x: Left edge x-coordinate
        y: Top edge y-coordinate
        width: Box width (>= 0)
        height: Box height (>= 0)
    """

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self):
        if self.width < 0:
            raise ValueError(f"Box width must be >= 0, got {self.width}")
        if self.height < 0:
            raise ValueError(f"Box height must be >= 0, got {self.height}")

    @classmethod
    def from_xyxy(cls, x1: float, y1: float, x2: float, y2: float) -> "Box":
        """Build from corner coordinates, as produced by YOLO / supervision."""
        return cls(
            x=float(min(x1, x2)),
            y=float(min(y1, y2)),
            width=float(abs(x2 - x1)),
            height=float(abs(y2 - y1)),
        )

    @property
    def xyxy(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    @property
    def area(self) -> float:
        return self.width * self.height

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        """Top-left, top-right, bottom-right, bottom-left."""
        x2 = self.x + self.width
        y2 = self.y + self.height
        return (
            Point(self.x, self.y),
            Point(x2, self.y),
            Point(x2, y2),
            Point(self.x, y2),
        )

    def edges(self) -> Tuple[Tuple[Point, Point], ...]:
        """Consecutive corner pairs, wrapping from bottom-left to top-left."""
        corners = self.corners()
        return tuple((corners[i], corners[(i + 1) % 4]) for i in range(4))

    def contains_point(self, point: Tuple[float, float]) -> bool:
        """Inclusive on all four sides."""
        px, py = point
        return (
            self.x <= px <= self.x + self.width
            and self.y <= py <= self.y + self.height
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
        }
