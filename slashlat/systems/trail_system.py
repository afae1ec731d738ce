"""Trail tracker - captures one slash gesture and shapes the blade ribbon."""
from __future__ import annotations
import logging
import math
from typing import TYPE_CHECKING

from ..entities.trails import TrailPoint, SplinePoint, SlashSession, TrailFrame

if TYPE_CHECKING:
    from ..config import SlashConfig
    from ..core.clock import GameClock

logger = logging.getLogger(__name__)

Vec2 = tuple[float, float]


def catmull_rom(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, t: float) -> Vec2:
    """Point on the Catmull-Rom curve through p1..p2 at parameter t."""
    t2 = t * t
    t3 = t2 * t

    x = 0.5 * (
        (2 * p1[0]) +
        (-p0[0] + p2[0]) * t +
        (2 * p0[0] - 5 * p1[0] + 4 * p2[0] - p3[0]) * t2 +
        (-p0[0] + 3 * p1[0] - 3 * p2[0] + p3[0]) * t3
    )
    y = 0.5 * (
        (2 * p1[1]) +
        (-p0[1] + p2[1]) * t +
        (2 * p0[1] - 5 * p1[1] + 4 * p2[1] - p3[1]) * t2 +
        (-p0[1] + 3 * p1[1] - 3 * p2[1] + p3[1]) * t3
    )
    return (x, y)


def smooth_trail(points: list[TrailPoint], segments_per_point: int) -> list[SplinePoint]:
    """Resample a polyline into a smooth curve with linear progress values.

    End segments reuse their own endpoint as the missing neighbour, so the
    curve passes through every captured point.
    """
    if len(points) < 2:
        return []

    coords = [(p.x, p.y) for p in points]
    last_index = len(coords) - 1
    curve: list[SplinePoint] = []

    for i in range(last_index):
        p0 = coords[i - 1] if i > 0 else coords[i]
        p1 = coords[i]
        p2 = coords[i + 1]
        p3 = coords[i + 2] if i < last_index - 1 else coords[i + 1]

        for s in range(segments_per_point):
            t = s / segments_per_point
            x, y = catmull_rom(p0, p1, p2, p3, t)
            curve.append(SplinePoint(x, y, (i + t) / last_index))

    curve.append(SplinePoint(coords[-1][0], coords[-1][1], 1.0))
    return curve


class TrailTracker:
    """Owns the lifecycle of the single active slash session.

    Points are filtered by minimum spacing, capped in number (oldest
    dropped first) and the whole gesture is capped in duration. After the
    gesture ends, the points stay around until the ribbon has faded.
    """

    def __init__(self, config: SlashConfig, clock: GameClock) -> None:
        self.config = config
        self.clock = clock
        self.session: SlashSession | None = None
        self._cached_curve: list[SplinePoint] | None = None

    @property
    def points(self) -> list[TrailPoint]:
        if self.session is None:
            return []
        return self.session.points

    def is_active(self) -> bool:
        return self.session is not None and self.session.active

    def last_point(self) -> TrailPoint | None:
        points = self.points
        return points[-1] if points else None

    def start_session(self, x: float, y: float) -> SlashSession:
        """Begin a new gesture at (x, y), discarding any previous trail."""
        now = self.clock.now
        self.session = SlashSession(start_time=now)
        self.session.points.append(TrailPoint(x, y, now))
        self._cached_curve = None
        logger.debug("Slash session started at (%.1f, %.1f)", x, y)
        return self.session

    def add_point(self, x: float, y: float) -> bool:
        """Feed a pointer sample into the active gesture.

        Returns:
            False once the gesture has hit its duration cap (the session is
            ended), True otherwise, including when the sample was too close
            to the previous point to be recorded.
        """
        session = self.session
        if session is None or not session.active:
            return False

        now = self.clock.now
        if now - session.start_time >= self.config.max_session_duration:
            self.end_session(forced=True)
            return False

        if session.points:
            last = session.points[-1]
            min_dist = self.config.scaled_min_point_distance
            if (x - last.x) ** 2 + (y - last.y) ** 2 < min_dist * min_dist:
                return True

        session.points.append(TrailPoint(x, y, now))
        if len(session.points) > self.config.max_trail_points:
            session.points.pop(0)
        self._cached_curve = None
        return True

    def end_session(self, forced: bool = False) -> None:
        """Stop capturing; points remain for the fade-out."""
        session = self.session
        if session is None or not session.active:
            return
        now = self.clock.now
        if forced:
            # A timed-out gesture ends at the cap, not at the late move that noticed it
            now = min(now, session.start_time + self.config.max_session_duration)
        session.end_time = now
        session.forced_end = forced
        if forced:
            logger.debug("Slash session force-ended after %.0fms", session.end_time - session.start_time)

    def fade_alpha(self, now: float | None = None) -> float:
        """Uniform opacity of the whole ribbon at ``now``."""
        session = self.session
        if session is None or session.end_time is None:
            return 1.0

        now = self.clock.now if now is None else now
        since_end = now - session.end_time
        if since_end <= self.config.fade_delay:
            return 1.0

        fade_progress = (since_end - self.config.fade_delay) / self.config.fade_duration
        return max(0.0, 1.0 - fade_progress)

    def smoothed_curve(self) -> list[SplinePoint]:
        """The ribbon's centre line, cached until the points change."""
        if self._cached_curve is None:
            self._cached_curve = smooth_trail(self.points, self.config.segments_per_point)
        return self._cached_curve

    def advance(self) -> TrailFrame | None:
        """Per-frame tick: fade the ribbon and build its geometry.

        Returns None when there is nothing to draw. Once fully faded, the
        points are discarded and every later call is a no-op.
        """
        if self.session is None or not self.session.points:
            return None

        fade = self.fade_alpha()
        if fade <= 0:
            self.session.points.clear()
            self._cached_curve = None
            return None

        if len(self.session.points) < 2:
            return None

        curve = self.smoothed_curve()
        if len(curve) < 2:
            return None

        return TrailFrame(
            curve=curve,
            quads=self._ribbon_quads(curve, fade),
            end_cap=self._end_cap(curve, fade),
            fade_alpha=fade,
        )

    def _ribbon_quads(
        self,
        curve: list[SplinePoint],
        fade: float
    ) -> list[tuple[list[Vec2], float]]:
        """Quads whose width and opacity grow with progress squared."""
        line_width = self.config.scaled_trail_width
        quads = []

        for point, next_point in zip(curve, curve[1:]):
            angle = math.atan2(next_point.y - point.y, next_point.x - point.x)
            perp_x = math.cos(angle + math.pi / 2)
            perp_y = math.sin(angle + math.pi / 2)

            eased1 = point.progress * point.progress
            eased2 = next_point.progress * next_point.progress
            alpha = (eased1 + eased2) / 2 * fade
            if alpha <= 0:
                continue

            half1 = line_width * eased1 / 2
            half2 = line_width * eased2 / 2
            quads.append(([
                (point.x + perp_x * half1, point.y + perp_y * half1),
                (next_point.x + perp_x * half2, next_point.y + perp_y * half2),
                (next_point.x - perp_x * half2, next_point.y - perp_y * half2),
                (point.x - perp_x * half1, point.y - perp_y * half1),
            ], alpha))

        return quads

    def _end_cap(
        self,
        curve: list[SplinePoint],
        fade: float
    ) -> tuple[list[Vec2], float] | None:
        """Sharp tip extending the ribbon along its final tangent."""
        last = curve[-1]
        before = curve[-2]
        dx = last.x - before.x
        dy = last.y - before.y
        if dx == 0 and dy == 0:
            return None

        angle = math.atan2(dy, dx)
        eased = last.progress * last.progress
        half = self.config.scaled_trail_width * eased / 2
        perp_x = math.cos(angle + math.pi / 2)
        perp_y = math.sin(angle + math.pi / 2)
        tip_length = self.config.scaled_end_cap_length

        return ([
            (last.x + perp_x * half, last.y + perp_y * half),
            (last.x - perp_x * half, last.y - perp_y * half),
            (last.x + math.cos(angle) * tip_length, last.y + math.sin(angle) * tip_length),
        ], eased * fade)
