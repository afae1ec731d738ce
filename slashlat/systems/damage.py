"""Damage resolver - turns a finished gesture into damage and deaths."""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..config import SOUND_EXPLODE
from ..core.events import EnemyDamagedEvent, EnemyKilledEvent

if TYPE_CHECKING:
    from ..config import SlashConfig
    from ..core.events import EventBus
    from ..effects.audio import AudioManager
    from ..effects.coins import CoinWallet
    from ..effects.floating_text import FloatingTextLayer
    from ..effects.particles import ParticleSystem
    from ..effects.sparks import SparkEmitter
    from ..entities.targets import Target
    from ..entities.trails import SlashSession
    from .spawner import Spawner

logger = logging.getLogger(__name__)


@dataclass
class SlashOutcome:
    """Result of resolving one gesture."""
    damage: float
    accumulated_length: float
    damaged: list[Target] = field(default_factory=list)
    killed: list[Target] = field(default_factory=list)
    skipped: int = 0  # Touched targets no longer live at release


def slash_damage(accumulated_length: float, config: SlashConfig) -> float:
    """Damage for a gesture of the given length.

    Grows linearly from ``base_damage`` to ``base_damage + bonus_damage``
    as the length approaches the full-bonus length, then stays there.
    """
    ratio = max(0.0, accumulated_length) / config.scaled_max_length_for_full_bonus
    damage = config.base_damage + ratio * config.bonus_damage
    return min(max(damage, config.base_damage), config.max_damage)


class DamageResolver:
    """Applies a gesture's damage once to every target it touched."""

    def __init__(
        self,
        config: SlashConfig,
        spawner: Spawner,
        audio: AudioManager | None = None,
        sparks: SparkEmitter | None = None,
        floating_text: FloatingTextLayer | None = None,
        particles: ParticleSystem | None = None,
        wallet: CoinWallet | None = None,
        event_bus: EventBus | None = None
    ) -> None:
        self.config = config
        self.spawner = spawner
        self.audio = audio
        self.sparks = sparks
        self.floating_text = floating_text
        self.particles = particles
        self.wallet = wallet
        self.event_bus = event_bus

    def resolve(self, session: SlashSession) -> SlashOutcome:
        """Consume the session's touched targets.

        The touched set is emptied, so resolving the same session again
        applies nothing.
        """
        damage = slash_damage(session.accumulated_length, self.config)
        outcome = SlashOutcome(damage=damage, accumulated_length=session.accumulated_length)

        touched = list(session.touched_targets)
        session.touched_targets.clear()

        for target in touched:
            if not self.spawner.is_live(target):
                outcome.skipped += 1
                continue

            if self.floating_text is not None:
                self.floating_text.show(damage, target.center)

            target.take_damage(damage)
            outcome.damaged.append(target)
            if self.event_bus is not None:
                self.event_bus.publish(EnemyDamagedEvent(
                    target_id=target.id,
                    damage=damage,
                    remaining_hp=target.hp,
                ))

            if target.is_dead():
                self._kill(target)
                outcome.killed.append(target)

        if touched:
            logger.debug(
                "Slash resolved: length=%.1f damage=%.1f hit=%d killed=%d",
                outcome.accumulated_length, damage, len(outcome.damaged), len(outcome.killed)
            )
        return outcome

    def _kill(self, target: Target) -> None:
        """Run the death sequence for a target whose hp reached zero."""
        center = target.center

        if self.sparks is not None:
            self.sparks.clear_marks()
        target.cancel_animations()

        if self.audio is not None:
            self.audio.play(SOUND_EXPLODE)

        particles = target.explode(on_complete=target.destroy)
        if self.particles is not None:
            self.particles.add(particles)

        if self.wallet is not None:
            self.wallet.award(self.config.coins_per_kill, center)

        if self.event_bus is not None:
            self.event_bus.publish(EnemyKilledEvent(
                target_id=target.id,
                kind=target.kind.value,
                position=center,
            ))

        self.spawner.retire(target)
        self.spawner.on_enemy_killed()
