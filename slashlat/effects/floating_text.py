"""Floating damage numbers."""
from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

import pygame

from ..config import COLORS

if TYPE_CHECKING:
    from ..core.clock import GameClock


@dataclass
class FloatingText:
    """A number drifting upward while it fades."""
    text: str
    x: float
    y: float
    start_time: float
    duration: float = 1500.0
    rise: float = 80.0  # px travelled over the whole duration

    def progress(self, now: float) -> float:
        return min(1.0, max(0.0, (now - self.start_time) / self.duration))

    def position(self, now: float) -> tuple[float, float]:
        t = 1 - (1 - self.progress(now)) ** 3  # Cubic ease-out
        return (self.x, self.y - self.rise * t)

    def alpha(self, now: float) -> float:
        return 1.0 - self.progress(now)


class FloatingTextLayer:
    """Spawns and draws floating numbers."""

    def __init__(self, clock: GameClock, dpr: float = 1.0) -> None:
        self.clock = clock
        self.dpr = dpr
        self.texts: list[FloatingText] = []
        self._font: pygame.font.Font | None = None

    def show(self, value: float, point: tuple[float, float]) -> FloatingText:
        """Show ``value`` rounded to an integer at ``point``."""
        text = FloatingText(
            text=str(round(value)),
            x=point[0],
            y=point[1],
            start_time=self.clock.now,
            rise=80.0 * self.dpr,
        )
        self.texts.append(text)
        return text

    def update(self) -> None:
        now = self.clock.now
        self.texts = [t for t in self.texts if t.progress(now) < 1.0]

    def draw(self, surface: pygame.Surface) -> None:
        if not self.texts:
            return
        if self._font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            self._font = pygame.font.Font(None, int(32 * self.dpr))

        now = self.clock.now
        for text in self.texts:
            x, y = text.position(now)
            alpha = int(255 * text.alpha(now))
            outline = self._font.render(text.text, True, COLORS['damage_outline'])
            label = self._font.render(text.text, True, COLORS['damage_text'])
            outline.set_alpha(alpha)
            label.set_alpha(alpha)
            rect = label.get_rect(center=(int(x), int(y)))
            for ox, oy in ((-2, 0), (2, 0), (0, -2), (0, 2)):
                surface.blit(outline, rect.move(ox, oy))
            surface.blit(label, rect)
