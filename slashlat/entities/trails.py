"""Trail and slash data: captured points, smoothed samples, sessions and marks."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .targets import Target


@dataclass(frozen=True)
class TrailPoint:
    """A single captured pointer sample."""
    x: float
    y: float
    timestamp: float  # Game time (ms) when the point was recorded
    alpha: float = 1.0  # Render weight only, never used by collision


@dataclass(frozen=True)
class SplinePoint:
    """A smoothed sub-sample of the trail."""
    x: float
    y: float
    progress: float  # 0 at the oldest end of the trail, 1 at the newest


@dataclass(frozen=True)
class SlashMark:
    """A resolved opaque span left on a target by the blade."""
    start_x: float
    start_y: float
    end_x: float
    end_y: float
    timestamp: float

    @property
    def length(self) -> float:
        return ((self.end_x - self.start_x) ** 2 + (self.end_y - self.start_y) ** 2) ** 0.5


@dataclass
class SlashSession:
    """State for one gesture, from pointer-down to release or timeout."""
    start_time: float
    points: list[TrailPoint] = field(default_factory=list)
    accumulated_length: float = 0.0
    touched_targets: set[Target] = field(default_factory=set)
    end_time: float | None = None
    forced_end: bool = False  # Ended by the duration cap rather than the player

    @property
    def active(self) -> bool:
        return self.end_time is None

    def touch(self, target: Target) -> None:
        """Record that the blade crossed an opaque pixel of ``target``."""
        self.touched_targets.add(target)


@dataclass
class TrailFrame:
    """Geometry for one rendered frame of the blade ribbon.

    ``quads`` are (polygon, alpha) pairs ordered oldest to newest;
    ``end_cap`` is the triangle that sharpens the leading edge.
    """
    curve: list[SplinePoint]
    quads: list[tuple[list[tuple[float, float]], float]]
    end_cap: tuple[list[tuple[float, float]], float] | None
    fade_alpha: float
