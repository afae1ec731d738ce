"""Pointer input handling for slashing."""
from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING
import pygame

if TYPE_CHECKING:
    from ..systems.slash import SlashController


@dataclass
class PointerState:
    """Current pointer state."""
    x: float = 0.0
    y: float = 0.0
    pressed: bool = False
    finger_id: int | None = None  # Finger driving the gesture, if touch
    feeding: bool = False  # False once the controller refused further moves


class SlashInputHandler:
    """Converts pygame mouse/touch events into slash gestures.

    Only the left mouse button or the first finger down drives a gesture;
    any further fingers are ignored.
    """

    def __init__(self, controller: SlashController, screen_size: tuple[int, int]) -> None:
        self.controller = controller
        self.screen_width, self.screen_height = screen_size
        self.state = PointerState()

    def process_events(self, events: list[pygame.event.Event]) -> bool:
        """Process pygame events.

        Returns:
            False if quit was requested, True otherwise
        """
        for event in events:
            if event.type == pygame.QUIT:
                return False

            elif event.type == pygame.KEYDOWN and event.key in (pygame.K_ESCAPE, pygame.K_q):
                return False

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if getattr(event, "touch", False):
                    continue  # Emulated from a finger; handled below
                self._pointer_down(*event.pos)

            elif event.type == pygame.MOUSEMOTION:
                if getattr(event, "touch", False):
                    continue
                self._pointer_move(*event.pos)

            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                if getattr(event, "touch", False):
                    continue
                self._pointer_up()

            elif event.type == pygame.FINGERDOWN:
                if self.state.pressed:
                    continue
                self.state.finger_id = event.finger_id
                self._pointer_down(*self._finger_pos(event))

            elif event.type == pygame.FINGERMOTION:
                if event.finger_id == self.state.finger_id:
                    self._pointer_move(*self._finger_pos(event))

            elif event.type == pygame.FINGERUP:
                if event.finger_id == self.state.finger_id:
                    self._pointer_up()

            elif event.type == pygame.WINDOWLEAVE:
                self._pointer_up()

        return True

    def _finger_pos(self, event: pygame.event.Event) -> tuple[float, float]:
        """Touch coordinates are normalized to 0-1."""
        return (event.x * self.screen_width, event.y * self.screen_height)

    def _pointer_down(self, x: float, y: float) -> None:
        self.state.x, self.state.y = x, y
        self.state.pressed = True
        self.state.feeding = self.controller.begin_slash(x, y)

    def _pointer_move(self, x: float, y: float) -> None:
        self.state.x, self.state.y = x, y
        if not self.state.pressed or not self.state.feeding:
            return
        self.state.feeding = self.controller.continue_slash(x, y)

    def _pointer_up(self) -> None:
        if self.state.pressed:
            self.controller.end_slash()
        self.state.pressed = False
        self.state.feeding = False
        self.state.finger_id = None
