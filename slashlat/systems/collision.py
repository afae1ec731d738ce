"""Collision resolver - pixel-accurate hit testing of the blade against targets.

Each pointer move is resolved against the raw segment from the previous
captured point to the new pointer position:

1. Broad phase: only visible targets whose bounds come within a margin of
   the segment's bounding box are considered.
2. Narrow phase: the segment is sampled at a fixed step and every sample
   inside a candidate's bounds is tested against the target's alpha mask.
3. Each opaque sample is expanded into the full opaque span the blade
   crosses by stepping backward and forward along the slash direction.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable
import math

from ..config import SOUND_HIT
from ..core.events import TargetHitEvent
from ..core.geometry import Bounds, normalize, segment_samples

if TYPE_CHECKING:
    from ..config import SlashConfig
    from ..core.events import EventBus
    from ..effects.audio import AudioManager
    from ..effects.sparks import SparkEmitter
    from ..entities.targets import Target
    from ..entities.trails import SlashMark, SlashSession

Vec2 = tuple[float, float]


@dataclass(frozen=True)
class Span:
    """Contiguous opaque run crossed by the blade, in world coordinates."""
    start: Vec2
    end: Vec2


@dataclass
class MoveResult:
    """What one pointer move resolved to."""
    distance: float = 0.0
    samples: int = 0
    candidates: int = 0
    hit_targets: set[Target] = field(default_factory=set)
    marks: list[SlashMark] = field(default_factory=list)
    sound_played: bool = False

    @property
    def hit(self) -> bool:
        return bool(self.hit_targets)


def find_opaque_span(
    target: Target,
    center: Vec2,
    hit: Vec2,
    direction: Vec2,
    step: float,
    max_length: float
) -> Span | None:
    """Walk both ways from an opaque hit point to the edges of the opaque run.

    Each direction extends while samples stay opaque and stops at the first
    transparent one; samples are taken at multiples of ``step`` strictly
    below ``max_length``. Returns None when neither direction found any
    further opaque pixel.
    """
    local_x = hit[0] - center[0]
    local_y = hit[1] - center[1]
    dir_x, dir_y = direction
    steps = math.ceil(max_length / step)

    def walk(sign: int) -> Vec2 | None:
        edge = None
        for k in range(1, steps):
            dist = k * step
            if dist >= max_length:
                break
            test_x = local_x + sign * dir_x * dist
            test_y = local_y + sign * dir_y * dist
            if not target.is_pixel_opaque(test_x, test_y):
                break
            edge = (test_x + center[0], test_y + center[1])
        return edge

    start = walk(-1)
    end = walk(1)
    if start is None and end is None:
        return None
    return Span(start or hit, end or hit)


class CollisionResolver:
    """Resolves pointer moves against the live targets.

    Collaborators are injected; ``sparks`` receives marks and spark bursts,
    ``audio`` the hit sound and ``event_bus`` one ``TargetHitEvent`` per
    resolved span.
    """

    def __init__(
        self,
        config: SlashConfig,
        sparks: SparkEmitter | None = None,
        audio: AudioManager | None = None,
        event_bus: EventBus | None = None
    ) -> None:
        self.config = config
        self.sparks = sparks
        self.audio = audio
        self.event_bus = event_bus

    def visible_targets(self, targets: Iterable[Target]) -> list[Target]:
        """Targets solid enough on screen to be cut."""
        return [
            t for t in targets
            if t.visibility >= self.config.min_hittable_alpha and not t.is_dead()
        ]

    def broad_phase(
        self,
        targets: Iterable[Target],
        start: Vec2,
        end: Vec2
    ) -> list[tuple[Target, Bounds]]:
        """Visible targets near the segment, paired with their bounds for this move."""
        area = Bounds.around_segment(start[0], start[1], end[0], end[1]).inflate(
            self.config.scaled_broad_phase_margin
        )
        nearby = []
        for target in self.visible_targets(targets):
            bounds = target.bounds()
            if bounds.overlaps(area):
                nearby.append((target, bounds))
        return nearby

    def resolve_move(
        self,
        session: SlashSession,
        previous: Vec2 | None,
        current: Vec2,
        targets: Iterable[Target]
    ) -> MoveResult:
        """Hit-test one pointer move and apply its side effects.

        Args:
            session: Active gesture; its length and touched set are updated
            previous: Last captured trail point, or None on the first move
            current: New pointer position
            targets: Snapshot of the live targets
        """
        if previous is None:
            return self.resolve_point(session, current, targets)

        dx = current[0] - previous[0]
        dy = current[1] - previous[1]
        distance = math.hypot(dx, dy)
        session.accumulated_length += distance

        result = MoveResult(distance=distance)
        direction = normalize(dx, dy)
        if direction is None:
            # No movement, so no new ground covered and nothing to search along
            return result

        nearby = self.broad_phase(targets, previous, current)
        result.candidates = len(nearby)
        if not nearby:
            return result

        samples = segment_samples(
            previous[0], previous[1], current[0], current[1],
            self.config.scaled_step_size
        )
        result.samples = len(samples)
        shaken: set[Target] = set()

        for x, y in samples:
            for target, bounds in nearby:
                if not bounds.contains(x, y):
                    continue
                center = bounds.center
                if not target.is_pixel_opaque(x - center[0], y - center[1]):
                    continue

                span = find_opaque_span(
                    target, center, (x, y), direction,
                    self.config.scaled_search_step,
                    self.config.scaled_max_search_length,
                )
                if span is None:
                    # A lone opaque sample with nothing around it is not a hit
                    continue

                # One shake per target and one hit sound per move event
                if target not in shaken:
                    shaken.add(target)
                    target.shake(dx, dy)
                if not result.sound_played:
                    result.sound_played = True
                    self._play_hit()

                session.touch(target)
                result.hit_targets.add(target)

                target.draw_slash_damage((x, y), (dx, dy), span.start, span.end)
                self._emit_span(target, span, result)

        return result

    def resolve_point(
        self,
        session: SlashSession,
        point: Vec2,
        targets: Iterable[Target]
    ) -> MoveResult:
        """Direct opacity test of a single point, without span search."""
        result = MoveResult(samples=1)
        x, y = point

        for target in self.visible_targets(targets):
            bounds = target.bounds()
            if not bounds.contains(x, y):
                continue
            result.candidates += 1
            if not target.is_pixel_opaque(x - bounds.center_x, y - bounds.center_y):
                continue

            session.touch(target)
            result.hit_targets.add(target)
            if not result.sound_played:
                result.sound_played = True
                self._play_hit()
            target.draw_slash_damage(point, (0.0, 0.0))
            target.shake(0.0, 0.0)

        return result

    def _play_hit(self) -> None:
        if self.audio is not None:
            self.audio.play(SOUND_HIT)

    def _emit_span(self, target: Target, span: Span, result: MoveResult) -> None:
        if self.sparks is not None:
            self.sparks.emit_along(span.start, span.end)
            result.marks.append(self.sparks.add_mark(span.start, span.end))
        if self.event_bus is not None:
            self.event_bus.publish(TargetHitEvent(
                target_id=target.id,
                span=(span.start[0], span.start[1], span.end[0], span.end[1]),
            ))
