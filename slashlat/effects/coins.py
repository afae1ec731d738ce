"""Coin rewards with a delayed collect animation."""
from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

import pygame

from ..config import COLORS, SOUND_COIN
from ..core.events import CoinsAwardedEvent

if TYPE_CHECKING:
    from ..core.clock import GameClock
    from ..core.events import EventBus
    from .audio import AudioManager


@dataclass
class PendingCoins:
    """Coins flying from a kill site to the counter."""
    amount: int
    origin: tuple[float, float]
    start_time: float
    land_time: float


class CoinWallet:
    """Running coin total. Awards land after their collect animation finishes."""

    def __init__(
        self,
        clock: GameClock,
        counter_position: tuple[float, float],
        collect_delay: float = 400.0,
        event_bus: EventBus | None = None,
        audio: AudioManager | None = None
    ) -> None:
        self.clock = clock
        self.counter_position = counter_position
        self.collect_delay = collect_delay
        self.event_bus = event_bus
        self.audio = audio
        self.total = 0
        self.pending: list[PendingCoins] = []

    def award(self, amount: int, origin: tuple[float, float]) -> PendingCoins:
        """Start the collect animation; the total changes when it lands."""
        now = self.clock.now
        pending = PendingCoins(amount, origin, now, now + self.collect_delay)
        self.pending.append(pending)
        return pending

    def update(self) -> None:
        """Credit every award whose animation has landed."""
        now = self.clock.now
        landed = [p for p in self.pending if p.land_time <= now]
        if not landed:
            return

        self.pending = [p for p in self.pending if p.land_time > now]
        for pending in landed:
            self.total += pending.amount
            if self.audio is not None:
                self.audio.play(SOUND_COIN)
            if self.event_bus is not None:
                self.event_bus.publish(CoinsAwardedEvent(amount=pending.amount, total=self.total))

    def draw(self, surface: pygame.Surface, radius: float = 8.0) -> None:
        """Draw in-flight coins moving toward the counter."""
        now = self.clock.now
        tx, ty = self.counter_position
        for pending in self.pending:
            span = pending.land_time - pending.start_time
            t = 1.0 if span <= 0 else min(1.0, (now - pending.start_time) / span)
            t = t * t  # Accelerate into the counter
            x = pending.origin[0] + (tx - pending.origin[0]) * t
            y = pending.origin[1] + (ty - pending.origin[1]) * t
            pygame.draw.circle(surface, COLORS['coin'], (int(x), int(y)), int(radius))
