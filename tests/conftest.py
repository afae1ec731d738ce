"""Shared fixtures: headless textures, a manual clock and a wired pipeline."""
import random
from unittest.mock import MagicMock

import pygame
import pytest

from slashlat.config import SlashConfig
from slashlat.core.clock import GameClock
from slashlat.core.events import EventBus
from slashlat.effects.coins import CoinWallet
from slashlat.effects.floating_text import FloatingTextLayer
from slashlat.effects.particles import ParticleSystem
from slashlat.effects.sparks import SparkEmitter
from slashlat.entities.targets import SpriteTarget, TargetKind
from slashlat.systems.collision import CollisionResolver
from slashlat.systems.damage import DamageResolver
from slashlat.systems.slash import SlashController
from slashlat.systems.spawner import Spawner


def make_texture(width: int = 100, height: int = 100, opaque: tuple | None = None) -> pygame.Surface:
    """Transparent texture with an optional opaque rect (x, y, w, h) in texture pixels."""
    surface = pygame.Surface((width, height), pygame.SRCALPHA)
    surface.fill((0, 0, 0, 0))
    if opaque is not None:
        surface.fill((255, 255, 255, 255), pygame.Rect(opaque))
    return surface


def make_target(
    clock: GameClock,
    x: float = 100.0,
    y: float = 100.0,
    texture: pygame.Surface | None = None,
    max_hp: float = 200.0,
    kind: TargetKind = TargetKind.ORANGE_BOT
) -> SpriteTarget:
    """Target drawn at scale 1 so world pixels map 1:1 onto texture pixels."""
    texture = texture if texture is not None else make_texture(opaque=(0, 0, 100, 100))
    return SpriteTarget(
        kind, x, y,
        max_hp=max_hp,
        clock=clock,
        texture=texture,
        max_width=texture.get_width(),
        max_height=texture.get_height(),
    )


class Pipeline:
    """Fully wired slash pipeline with recording audio."""

    def __init__(self, config: SlashConfig | None = None) -> None:
        self.config = config or SlashConfig()
        self.clock = GameClock()
        self.event_bus = EventBus()
        self.audio = MagicMock()
        self.particles = ParticleSystem()
        self.sparks = SparkEmitter(self.particles, self.clock, rng=random.Random(7))
        self.floating_text = FloatingTextLayer(self.clock)
        self.wallet = CoinWallet(self.clock, counter_position=(500, 900), collect_delay=self.config.coin_collect_delay)
        self.spawner = Spawner(self.clock)
        self.collision = CollisionResolver(
            self.config, sparks=self.sparks, audio=self.audio, event_bus=self.event_bus
        )
        self.damage = DamageResolver(
            self.config, self.spawner,
            audio=self.audio, sparks=self.sparks, floating_text=self.floating_text,
            particles=self.particles, wallet=self.wallet, event_bus=self.event_bus,
        )
        self.controller = SlashController(
            self.config, self.clock, self.spawner,
            collision=self.collision, damage=self.damage,
            audio=self.audio, event_bus=self.event_bus,
        )

    def add_target(self, **kwargs) -> SpriteTarget:
        return self.spawner.spawn(make_target(self.clock, **kwargs))

    def sounds(self, key: str) -> int:
        return sum(1 for c in self.audio.play.call_args_list if c.args and c.args[0] == key)


@pytest.fixture
def clock():
    return GameClock()


@pytest.fixture
def config():
    return SlashConfig()


@pytest.fixture
def pipeline():
    return Pipeline()
