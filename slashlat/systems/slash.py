"""Slash controller - the gesture surface the scene drives from input events."""
from __future__ import annotations
import logging
from typing import TYPE_CHECKING

from ..config import SOUND_SLASH
from ..core.events import SlashStartedEvent, SlashEndedEvent
from .collision import CollisionResolver, MoveResult
from .damage import DamageResolver, SlashOutcome
from .trail_system import TrailTracker

if TYPE_CHECKING:
    from ..config import SlashConfig
    from ..core.clock import GameClock
    from ..core.events import EventBus
    from ..effects.audio import AudioManager
    from ..entities.trails import TrailFrame
    from .spawner import Spawner

logger = logging.getLogger(__name__)


class SlashController:
    """Coordinates trail capture, hit resolution and damage for one pointer.

    At most one gesture is in flight. The lock taken on ``begin_slash`` is
    released only by ``end_slash``, which the input layer calls on
    pointer-up, pointer-leave and cancel. A gesture cut short by the
    duration cap resolves its damage immediately, but the lock stays held
    until the pointer is released.
    """

    def __init__(
        self,
        config: SlashConfig,
        clock: GameClock,
        spawner: Spawner,
        trail: TrailTracker | None = None,
        collision: CollisionResolver | None = None,
        damage: DamageResolver | None = None,
        audio: AudioManager | None = None,
        event_bus: EventBus | None = None
    ) -> None:
        self.config = config
        self.clock = clock
        self.spawner = spawner
        self.trail = trail or TrailTracker(config, clock)
        self.collision = collision or CollisionResolver(config, audio=audio, event_bus=event_bus)
        self.damage = damage or DamageResolver(config, spawner, audio=audio, event_bus=event_bus)
        self.audio = audio
        self.event_bus = event_bus
        self.can_start_new_slash = True
        self._resolved = False  # Damage already applied for the current session
        self.last_outcome: SlashOutcome | None = None
        self.last_move: MoveResult | None = None

    def is_active(self) -> bool:
        return self.trail.is_active()

    @property
    def accumulated_length(self) -> float:
        session = self.trail.session
        return session.accumulated_length if session is not None else 0.0

    def begin_slash(self, x: float, y: float) -> bool:
        """Start a gesture at (x, y). Ignored while another gesture holds the lock."""
        if not self.can_start_new_slash:
            return False

        self.can_start_new_slash = False
        self._resolved = False
        self.trail.start_session(x, y)

        if self.audio is not None:
            self.audio.play(SOUND_SLASH)
        if self.event_bus is not None:
            self.event_bus.publish(SlashStartedEvent(x=x, y=y))
        return True

    def continue_slash(self, x: float, y: float) -> bool:
        """Feed a pointer move.

        Returns:
            False when no gesture is active or the gesture was just
            force-ended by the duration cap; the caller should stop feeding
            moves until the next ``begin_slash``.
        """
        if not self.trail.is_active():
            return False

        previous = self.trail.last_point()
        if not self.trail.add_point(x, y):
            self._finish(forced=True)
            return False

        session = self.trail.session
        prev_xy = (previous.x, previous.y) if previous is not None else None
        self.last_move = self.collision.resolve_move(
            session, prev_xy, (x, y), list(self.spawner.targets)
        )
        return True

    def end_slash(self) -> SlashOutcome | None:
        """Release the pointer: end the gesture and apply its damage once."""
        outcome = None
        if self.trail.is_active():
            self.trail.end_session()
            outcome = self._finish(forced=False)
        self.can_start_new_slash = True
        return outcome

    def cancel_slash(self) -> SlashOutcome | None:
        """Pointer left the surface or the gesture was cancelled; still resolves damage."""
        return self.end_slash()

    def advance(self) -> TrailFrame | None:
        """Render tick: fade and shape the trail. Performs no hit testing."""
        return self.trail.advance()

    def _finish(self, forced: bool) -> SlashOutcome | None:
        session = self.trail.session
        if session is None or self._resolved:
            return None
        self._resolved = True

        if self.event_bus is not None:
            self.event_bus.publish(SlashEndedEvent(
                accumulated_length=session.accumulated_length,
                forced=forced,
            ))

        outcome = self.damage.resolve(session)
        self.last_outcome = outcome
        if forced:
            logger.debug("Gesture hit the duration cap; resolved %d targets", len(outcome.damaged))
        return outcome
