"""Slashable targets: the capability interface and sprite-backed characters."""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable
from uuid import UUID, uuid4
import math
import random

import pygame

from ..config import COLORS
from ..core.geometry import Bounds, normalize
from ..effects.particles import Particle, burst

if TYPE_CHECKING:
    from ..core.clock import GameClock


# Animation timings (ms)
SHAKE_OUT_MS = 20.0
SHAKE_BACK_MS = 40.0
SHAKE_DISTANCE = 4.0  # px, scaled by dpr
DEATH_FADE_MS = 800.0
IDLE_BOB_DISTANCE = 3.0  # px, scaled by dpr
IDLE_BOB_PERIOD_MS = 1600.0

# Design size of one spawn grid cell (px, scaled by dpr)
CELL_SIZE = 180.0


class TargetKind(Enum):
    """Types of slashable characters."""
    BEE = "bee"
    LION = "lion"
    ROBOT = "robot"
    SNAKE_BOT = "snake_bot"
    FLY_BOT = "fly_bot"
    LEAF_BOT = "leaf_bot"
    ORANGE_BOT = "orange_bot"


# Per-kind configuration. ``sizes`` are (cells wide, cells high, weight);
# kinds with ``hp_per_cell`` scale hit points with their rolled size.
TARGET_CONFIGS: dict[TargetKind, dict] = {
    TargetKind.BEE: {
        "asset_key": "bee-bot",
        "sizes": [(1, 1, 1.0)],
        "max_hp": 150,  # Squishy but small
    },
    TargetKind.LION: {
        "asset_key": "lion-bot",
        "sizes": [(2, 2, 1.0)],
        "max_hp": 800,
    },
    TargetKind.ROBOT: {
        "asset_key": "robot-bot",
        "sizes": [(1, 2, 1.0)],
        "max_hp": 400,
    },
    TargetKind.SNAKE_BOT: {
        "asset_key": "snake-bot",
        "sizes": [(3, 1, 1.0)],
        "max_hp": 300,
    },
    TargetKind.FLY_BOT: {
        "asset_key": "fly-bot",
        "sizes": [(1, 1, 0.4), (2, 1, 0.4), (3, 2, 0.2)],
        "hp_per_cell": 200,
    },
    TargetKind.LEAF_BOT: {
        "asset_key": "leaf-bot-720",
        "sizes": [(1, 1, 0.4), (2, 1, 0.4), (3, 2, 0.2)],
        "hp_per_cell": 200,
    },
    TargetKind.ORANGE_BOT: {
        "asset_key": "orange-bot",
        "sizes": [(1, 1, 0.3), (2, 2, 0.3), (3, 2, 0.2), (3, 3, 0.2)],
        "hp_per_cell": 200,
    },
}


@dataclass
class Entrance:
    """Slide-in animation from an off-screen start to the resting position."""
    start_x: float
    start_y: float
    start_time: float
    duration: float

    def progress(self, now: float) -> float:
        if self.duration <= 0:
            return 1.0
        return min(1.0, max(0.0, (now - self.start_time) / self.duration))


def _ease_out_cubic(t: float) -> float:
    return 1 - (1 - t) ** 3


def _ease_out_quad(t: float) -> float:
    return 1 - (1 - t) * (1 - t)


class Target(ABC):
    """A character the blade can cut.

    The slash pipeline only relies on ``bounds``, ``is_pixel_opaque``,
    ``shake``, ``draw_slash_damage``, ``take_damage``, ``is_dead``,
    ``explode``, ``cancel_animations`` and ``visibility``; concrete kinds
    differ only in texture, size and hit points.
    """

    def __init__(
        self,
        kind: TargetKind,
        x: float,
        y: float,
        max_hp: float,
        clock: GameClock,
        dpr: float = 1.0
    ) -> None:
        self.id: UUID = uuid4()
        self.kind = kind
        self.x = x  # Resting center position
        self.y = y
        self.max_hp = max_hp
        self.hp = max_hp
        self.clock = clock
        self.dpr = dpr
        self.visibility = 1.0  # 0 = invisible, 1 = fully shown
        self.destroyed = False

        # Local-space (center origin) slash lines left by the blade
        self.slash_lines: list[tuple[float, float, float, float]] = []

        self._entrance: Entrance | None = None
        self._idle_since: float | None = None
        self._shake_start: float | None = None
        self._shake_dir: tuple[float, float] = (0.0, 0.0)
        self._death_start: float | None = None
        self._on_death_complete: Callable[[], None] | None = None

    # --- capability interface -------------------------------------------

    @property
    @abstractmethod
    def width(self) -> float:
        """Displayed width in world pixels."""

    @property
    @abstractmethod
    def height(self) -> float:
        """Displayed height in world pixels."""

    @abstractmethod
    def is_pixel_opaque(self, local_x: float, local_y: float) -> bool:
        """Check the texture alpha at a point relative to the target center."""

    def bounds(self) -> Bounds:
        """World-space bounds, including any animation offset."""
        cx, cy = self.position
        return Bounds.from_center(cx, cy, self.width, self.height)

    @property
    def center(self) -> tuple[float, float]:
        return self.bounds().center

    def take_damage(self, amount: float) -> None:
        self.hp = max(0.0, self.hp - amount)

    def is_dead(self) -> bool:
        return self.hp <= 0

    def shake(self, dx: float, dy: float) -> None:
        """Jolt the target briefly along the slash direction."""
        self._shake_start = self.clock.now
        self._shake_dir = normalize(dx, dy) or (0.0, 0.0)

    def draw_slash_damage(
        self,
        point: tuple[float, float],
        direction: tuple[float, float],
        span_start: tuple[float, float] | None = None,
        span_end: tuple[float, float] | None = None
    ) -> None:
        """Leave a cut on the texture.

        With a resolved span the cut runs between its endpoints; without one
        it is a nick at ``point``.
        """
        cx, cy = self.center
        if span_start is None or span_end is None:
            span_start = span_end = point
        self.slash_lines.append((
            span_start[0] - cx, span_start[1] - cy,
            span_end[0] - cx, span_end[1] - cy,
        ))

    def explode(self, on_complete: Callable[[], None] | None = None) -> list[Particle]:
        """Start the death sequence and return the explosion particles.

        The target fades out over ``DEATH_FADE_MS``; ``on_complete`` runs once
        from ``update`` when the fade has finished.
        """
        self._death_start = self.clock.now
        self._on_death_complete = on_complete

        cx, cy = self.center
        size = max(self.width, self.height)
        particles = burst(
            cx, cy, count=24,
            colors=[(255, 255, 255), COLORS['spark'], COLORS['spark_hot']],
            speed_min=size * 0.8, speed_max=size * 2.5,
            lifetime=600.0, size=4.0 * self.dpr,
        )
        particles += burst(
            cx, cy, count=10,
            colors=[(90, 90, 90), (60, 60, 60)],
            speed_min=size * 0.2, speed_max=size * 0.6,
            lifetime=900.0, size=6.0 * self.dpr, gravity=-40.0 * self.dpr,
        )
        return particles

    def cancel_animations(self) -> None:
        """Stop entrance and idle motion, leaving the target where it is."""
        if self._entrance is not None:
            self.x, self.y = self.position
        self._entrance = None
        self._idle_since = None
        self._shake_start = None

    def destroy(self) -> None:
        """Release the target once its death sequence is over."""
        self.destroyed = True
        self.slash_lines.clear()

    # --- animation -----------------------------------------------------

    def start_entrance(self, from_x: float, from_y: float, duration: float) -> None:
        """Slide in from (from_x, from_y) while fading in."""
        self._entrance = Entrance(from_x, from_y, self.clock.now, duration)
        self._idle_since = None
        self.visibility = 0.0

    @property
    def entering(self) -> bool:
        return self._entrance is not None

    @property
    def dying(self) -> bool:
        return self._death_start is not None

    @property
    def position(self) -> tuple[float, float]:
        """Current center including entrance, idle and shake offsets."""
        now = self.clock.now
        x, y = self.x, self.y

        if self._entrance is not None:
            t = _ease_out_cubic(self._entrance.progress(now))
            x = self._entrance.start_x + (self.x - self._entrance.start_x) * t
            y = self._entrance.start_y + (self.y - self._entrance.start_y) * t
        elif self._idle_since is not None:
            phase = (now - self._idle_since) / IDLE_BOB_PERIOD_MS * math.pi * 2
            y += math.sin(phase) * IDLE_BOB_DISTANCE * self.dpr

        if self._shake_start is not None:
            elapsed = now - self._shake_start
            if elapsed < SHAKE_OUT_MS:
                amount = _ease_out_quad(elapsed / SHAKE_OUT_MS)
            elif elapsed < SHAKE_OUT_MS + SHAKE_BACK_MS:
                amount = 1 - _ease_out_quad((elapsed - SHAKE_OUT_MS) / SHAKE_BACK_MS)
            else:
                amount = 0.0
            distance = SHAKE_DISTANCE * self.dpr * amount
            x += self._shake_dir[0] * distance
            y += self._shake_dir[1] * distance

        return (x, y)

    def update(self) -> None:
        """Advance animation state to the clock's current time."""
        now = self.clock.now

        if self._entrance is not None:
            progress = self._entrance.progress(now)
            self.visibility = progress
            if progress >= 1.0:
                self._entrance = None
                self._idle_since = now

        if self._shake_start is not None and now - self._shake_start >= SHAKE_OUT_MS + SHAKE_BACK_MS:
            self._shake_start = None

        if self._death_start is not None and not self.destroyed:
            fade = (now - self._death_start) / DEATH_FADE_MS
            self.visibility = max(0.0, 1.0 - fade)
            if fade >= 1.0:
                callback = self._on_death_complete
                self._on_death_complete = None
                if callback is not None:
                    callback()
                else:
                    self.destroy()


class SpriteTarget(Target):
    """Target whose opacity comes from the alpha channel of a pygame surface."""

    def __init__(
        self,
        kind: TargetKind,
        x: float,
        y: float,
        max_hp: float,
        clock: GameClock,
        texture: pygame.Surface,
        max_width: float,
        max_height: float,
        dpr: float = 1.0,
        opacity_threshold: int = 50
    ) -> None:
        super().__init__(kind, x, y, max_hp, clock, dpr)
        self.opacity_threshold = opacity_threshold
        self.texture = texture
        # Fit inside the allotted cells while keeping the aspect ratio
        self.scale = min(max_width / texture.get_width(), max_height / texture.get_height())
        self._mask = pygame.mask.from_surface(texture, opacity_threshold)
        self._scaled: pygame.Surface | None = None

    @property
    def width(self) -> float:
        return self.texture.get_width() * self.scale

    @property
    def height(self) -> float:
        return self.texture.get_height() * self.scale

    def set_texture(self, texture: pygame.Surface) -> None:
        """Swap the texture (animation frame) and rebuild the hit mask."""
        self.texture = texture
        self._mask = pygame.mask.from_surface(texture, self.opacity_threshold)
        self._scaled = None

    def is_pixel_opaque(self, local_x: float, local_y: float) -> bool:
        image_x = local_x + self.width / 2
        image_y = local_y + self.height / 2
        if image_x < 0 or image_y < 0 or image_x >= self.width or image_y >= self.height:
            return False

        tex_x = math.floor(image_x / self.scale)
        tex_y = math.floor(image_y / self.scale)
        mask_w, mask_h = self._mask.get_size()
        if tex_x < 0 or tex_y < 0 or tex_x >= mask_w or tex_y >= mask_h:
            return False

        return bool(self._mask.get_at((tex_x, tex_y)))

    def draw(self, surface: pygame.Surface) -> None:
        """Draw the sprite, its slash cuts and its HP bar."""
        if self.destroyed or self.visibility <= 0:
            return

        if self._scaled is None:
            size = (max(1, round(self.width)), max(1, round(self.height)))
            self._scaled = pygame.transform.smoothscale(self.texture, size)

        bounds = self.bounds()
        sprite = self._scaled.copy()
        sprite.set_alpha(int(255 * self.visibility))

        # Cuts are drawn onto the sprite so they stay inside its silhouette
        ox, oy = self.width / 2, self.height / 2
        for sx, sy, ex, ey in self.slash_lines:
            pygame.draw.line(
                sprite, COLORS['slash_damage'],
                (sx + ox, sy + oy), (ex + ox, ey + oy),
                max(1, round(1.5 * self.dpr))
            )

        surface.blit(sprite, (bounds.left, bounds.top))

        if not self.entering and not self.dying:
            self._draw_hp_bar(surface, bounds)

    def _draw_hp_bar(self, surface: pygame.Surface, bounds: Bounds) -> None:
        bar_width = bounds.width * 0.6
        bar_height = 6 * self.dpr
        bar_x = bounds.center_x - bar_width / 2
        bar_y = bounds.top - bar_height * 2

        ratio = self.hp / self.max_hp if self.max_hp > 0 else 0.0
        if ratio > 0.6:
            color = COLORS['hp_bar_high']
        elif ratio > 0.3:
            color = COLORS['hp_bar_mid']
        else:
            color = COLORS['hp_bar_low']

        pygame.draw.rect(surface, COLORS['hp_bar_bg'], (bar_x, bar_y, bar_width, bar_height))
        pygame.draw.rect(surface, color, (bar_x, bar_y, bar_width * ratio, bar_height))


def roll_size(kind: TargetKind, rng: random.Random | None = None) -> tuple[int, int]:
    """Pick a cell footprint for ``kind`` using the configured weights."""
    rng = rng or random.Random()
    sizes = TARGET_CONFIGS[kind]["sizes"]
    weights = [weight for _, _, weight in sizes]
    w, h, _ = rng.choices(sizes, weights=weights, k=1)[0]
    return (w, h)


def max_hp_for(kind: TargetKind, size: tuple[int, int]) -> float:
    """Hit points for a kind at a given footprint."""
    config = TARGET_CONFIGS[kind]
    if "hp_per_cell" in config:
        return float(config["hp_per_cell"] * size[0] * size[1])
    return float(config["max_hp"])


def create_target(
    kind: TargetKind | str,
    x: float,
    y: float,
    clock: GameClock,
    texture: pygame.Surface,
    dpr: float = 1.0,
    size: tuple[int, int] | None = None,
    opacity_threshold: int = 50,
    rng: random.Random | None = None
) -> SpriteTarget:
    """Create a sprite target of the given kind at rest position (x, y).

    Args:
        kind: Target kind or its string value
        x, y: Resting center position in world pixels
        clock: Shared game clock
        texture: Sprite surface with per-pixel alpha
        dpr: Display density
        size: Footprint in grid cells (rolled from the kind's weights if None)
        opacity_threshold: Alpha above which a pixel counts as solid
        rng: Random source for the size roll
    """
    if isinstance(kind, str):
        try:
            kind = TargetKind(kind)
        except ValueError:
            known = ", ".join(k.value for k in TargetKind)
            raise ValueError(f"Unknown target kind {kind!r} (known: {known})") from None

    if size is None:
        size = roll_size(kind, rng)

    cell = CELL_SIZE * dpr
    return SpriteTarget(
        kind, x, y,
        max_hp=max_hp_for(kind, size),
        clock=clock,
        texture=texture,
        max_width=cell * size[0],
        max_height=cell * size[1],
        dpr=dpr,
        opacity_threshold=opacity_threshold,
    )
