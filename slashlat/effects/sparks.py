"""Electric sparks along slash marks."""
from __future__ import annotations
import math
import random
from typing import TYPE_CHECKING

from ..config import COLORS
from ..entities.trails import SlashMark
from .particles import Particle, ParticleSystem

if TYPE_CHECKING:
    from ..core.clock import GameClock
    from .audio import AudioManager

Vec2 = tuple[float, float]


class SparkEmitter:
    """Emits sparks on fresh cuts and keeps the marks crackling afterwards.

    Marks persist independently of the gesture that made them; they are
    only cleared explicitly (the scene clears them whenever a target dies).
    """

    REPLAY_MIN_MS = 800.0
    REPLAY_MAX_MS = 2000.0

    def __init__(
        self,
        particles: ParticleSystem,
        clock: GameClock,
        dpr: float = 1.0,
        audio: AudioManager | None = None,
        spark_sound: str | None = None,
        rng: random.Random | None = None
    ) -> None:
        self.particles = particles
        self.clock = clock
        self.dpr = dpr
        self.audio = audio
        self.spark_sound = spark_sound
        self.marks: list[SlashMark] = []
        self._rng = rng or random.Random()
        self._next_replay = clock.now + self._replay_delay()

    def add_mark(self, start: Vec2, end: Vec2) -> SlashMark:
        """Persist a resolved span."""
        mark = SlashMark(start[0], start[1], end[0], end[1], self.clock.now)
        self.marks.append(mark)
        return mark

    def clear_marks(self) -> None:
        self.marks.clear()

    def emit_along(self, start: Vec2, end: Vec2) -> None:
        """Burst of 3-5 spark clusters at random points along the span."""
        for _ in range(self._rng.randint(3, 5)):
            self._emit_at(start, end, self._rng.randint(2, 4))

    def update(self) -> None:
        """Occasionally re-spark a random existing mark."""
        if self.clock.now < self._next_replay:
            return
        self._next_replay = self.clock.now + self._replay_delay()

        if not self.marks:
            return

        mark = self._rng.choice(self.marks)
        for _ in range(self._rng.randint(1, 2)):
            self._emit_at((mark.start_x, mark.start_y), (mark.end_x, mark.end_y), self._rng.randint(1, 2))

        if self.audio is not None and self.spark_sound:
            self.audio.play(self.spark_sound, volume=self._rng.uniform(0.3, 0.5))

    def _replay_delay(self) -> float:
        return self._rng.uniform(self.REPLAY_MIN_MS, self.REPLAY_MAX_MS)

    def _emit_at(self, start: Vec2, end: Vec2, count: int) -> None:
        t = self._rng.random()
        x = start[0] + (end[0] - start[0]) * t
        y = start[1] + (end[1] - start[1]) * t

        sparks = []
        for _ in range(count):
            speed = self._rng.uniform(50, 150) * self.dpr
            direction = self._rng.uniform(0, math.tau)
            sparks.append(Particle(
                x=x, y=y,
                vx=speed * math.cos(direction),
                vy=speed * math.sin(direction),
                lifetime=300.0,
                max_lifetime=300.0,
                color=self._rng.choice([COLORS['spark'], (255, 255, 255), COLORS['spark_hot']]),
                size=2.0 * self.dpr,
                gravity=100.0 * self.dpr,
            ))
        self.particles.add(sparks)
