"""Spawner - owns the live-target roster and keeps the screen populated."""
from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from ..entities.targets import TargetKind

if TYPE_CHECKING:
    from ..core.clock import GameClock
    from ..entities.targets import Target

logger = logging.getLogger(__name__)

TargetFactory = Callable[[TargetKind], "Target"]


@dataclass
class SpawnSettings:
    """Continuous spawning parameters."""
    weights: dict[TargetKind, float] = field(default_factory=lambda: {
        TargetKind.ORANGE_BOT: 3.0,
        TargetKind.FLY_BOT: 2.0,
        TargetKind.LEAF_BOT: 2.0,
        TargetKind.BEE: 1.0,
        TargetKind.ROBOT: 1.0,
        TargetKind.SNAKE_BOT: 1.0,
        TargetKind.LION: 0.5,
    })
    max_concurrent: int = 3
    spawn_interval: float = 1500.0  # ms


class Spawner:
    """Live targets plus the population counter used to pace spawns.

    Targets killed by the slash pipeline move from ``targets`` to
    ``dying`` and are dropped once their death sequence completes. The
    population counter is decremented only through ``on_enemy_killed``.
    """

    def __init__(
        self,
        clock: GameClock,
        factory: TargetFactory | None = None,
        settings: SpawnSettings | None = None,
        rng: random.Random | None = None
    ) -> None:
        self.clock = clock
        self.factory = factory
        self.settings = settings or SpawnSettings()
        self.targets: list[Target] = []
        self.dying: list[Target] = []
        self.active_count = 0
        self.kills = 0
        self._rng = rng or random.Random()
        self._last_spawn: float | None = None

    def spawn(self, target: Target) -> Target:
        """Add a target to the live roster."""
        self.targets.append(target)
        self.active_count += 1
        return target

    def is_live(self, target: Target) -> bool:
        return target in self.targets

    def retire(self, target: Target) -> None:
        """Move a dead target out of the live roster until its death sequence is over."""
        if target in self.targets:
            self.targets.remove(target)
            self.dying.append(target)

    def on_enemy_killed(self) -> None:
        self.active_count = max(0, self.active_count - 1)
        self.kills += 1
        logger.debug("Enemy killed (%d active, %d total kills)", self.active_count, self.kills)

    def choose_kind(self) -> TargetKind:
        kinds = list(self.settings.weights)
        weights = [self.settings.weights[k] for k in kinds]
        return self._rng.choices(kinds, weights=weights, k=1)[0]

    def update(self) -> None:
        """Advance target animations, drop finished deaths and spawn on schedule."""
        for target in self.targets + self.dying:
            target.update()
        self.dying = [t for t in self.dying if not t.destroyed]

        if self.factory is None:
            return

        now = self.clock.now
        due = self._last_spawn is None or now - self._last_spawn >= self.settings.spawn_interval
        if due and self.active_count < self.settings.max_concurrent:
            self._last_spawn = now
            self.spawn(self.factory(self.choose_kind()))
