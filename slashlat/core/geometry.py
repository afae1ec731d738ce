"""Small 2D helpers used by collision and trail code."""
from __future__ import annotations
from dataclasses import dataclass
import math


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned world-space rectangle with float coordinates."""
    left: float
    top: float
    width: float
    height: float

    @classmethod
    def from_center(cls, cx: float, cy: float, width: float, height: float) -> Bounds:
        """Build bounds centered on (cx, cy)."""
        return cls(cx - width / 2, cy - height / 2, width, height)

    @classmethod
    def around_segment(cls, x1: float, y1: float, x2: float, y2: float) -> Bounds:
        """Smallest bounds containing both segment endpoints."""
        left = min(x1, x2)
        top = min(y1, y2)
        return cls(left, top, max(x1, x2) - left, max(y1, y2) - top)

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center_x(self) -> float:
        return self.left + self.width / 2

    @property
    def center_y(self) -> float:
        return self.top + self.height / 2

    @property
    def center(self) -> tuple[float, float]:
        return (self.center_x, self.center_y)

    def contains(self, x: float, y: float) -> bool:
        """Check whether a point lies inside (edges inclusive)."""
        if self.width <= 0 or self.height <= 0:
            return False
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    def overlaps(self, other: Bounds) -> bool:
        """Check whether two rectangles touch or intersect."""
        return not (
            self.right < other.left or
            self.left > other.right or
            self.bottom < other.top or
            self.top > other.bottom
        )

    def inflate(self, margin: float) -> Bounds:
        """Grow the rectangle by ``margin`` on every side."""
        return Bounds(
            self.left - margin,
            self.top - margin,
            self.width + 2 * margin,
            self.height + 2 * margin,
        )


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance between two points."""
    return math.hypot(x2 - x1, y2 - y1)


def normalize(dx: float, dy: float) -> tuple[float, float] | None:
    """Unit vector along (dx, dy), or None for a zero-length vector."""
    length = math.hypot(dx, dy)
    if length == 0:
        return None
    return (dx / length, dy / length)


def segment_samples(
    x1: float, y1: float,
    x2: float, y2: float,
    step: float
) -> list[tuple[float, float]]:
    """Points along the segment spaced at most ``step`` apart.

    Returns ``ceil(d / step) + 1`` points including both endpoints. A
    zero-length segment yields the single end point.
    """
    dx = x2 - x1
    dy = y2 - y1
    steps = math.ceil(math.hypot(dx, dy) / step)

    if steps == 0:
        return [(x2, y2)]

    samples = []
    for i in range(steps + 1):
        t = i / steps
        samples.append((x1 + dx * t, y1 + dy * t))
    return samples
