"""Game clock shared by every time-dependent component."""
from __future__ import annotations
from dataclasses import dataclass


@dataclass
class GameClock:
    """Tracks game time in milliseconds.

    The host loop advances it once per frame; input handlers that run
    between frames read the same value, so all work triggered by one
    event sees a consistent timestamp.
    """
    now: float = 0.0
    paused: bool = False

    def advance(self, dt: float) -> None:
        """Advance game time by dt real seconds."""
        if self.paused:
            return
        self.now += dt * 1000.0

    def set(self, now_ms: float) -> None:
        """Jump to an absolute time (tests and replays of recorded input)."""
        self.now = now_ms

    def elapsed_since(self, timestamp: float) -> float:
        """Milliseconds elapsed since ``timestamp``."""
        return self.now - timestamp

    def __str__(self) -> str:
        return f"{self.now:.0f}ms"
