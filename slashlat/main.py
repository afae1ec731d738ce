"""Entry point and game loop."""
from __future__ import annotations
import logging
import math
import random
import sys

import pygame

from .assets import TextureCache
from .config import (
    GameConfig, TITLE, SOUND_SLASH, SOUND_HIT, SOUND_EXPLODE, SOUND_COIN,
)
from .core.clock import GameClock
from .core.events import EventBus, EnemyKilledEvent
from .effects import AudioManager, CoinWallet, FloatingTextLayer, ParticleSystem, SparkEmitter
from .entities.targets import TargetKind, create_target
from .systems import CollisionResolver, DamageResolver, SlashController, Spawner
from .ui import Renderer, SlashInputHandler

logger = logging.getLogger(__name__)

GRID_COLUMNS = 5
GRID_ROWS = 3


def make_target_factory(
    game_config: GameConfig,
    clock: GameClock,
    textures: TextureCache,
    opacity_threshold: int,
    rng: random.Random
):
    """Build the spawner's factory: random grid cell, random entrance direction."""
    width, height = game_config.screen_width, game_config.screen_height
    cell_w = width / GRID_COLUMNS
    cell_h = height * 0.6 / GRID_ROWS
    top = height * 0.2

    def factory(kind: TargetKind):
        column = rng.randrange(GRID_COLUMNS)
        row = rng.randrange(GRID_ROWS)
        x = cell_w * (column + 0.5)
        y = top + cell_h * (row + 0.5)

        target = create_target(
            kind, x, y, clock, textures.get(kind),
            dpr=game_config.dpr,
            opacity_threshold=opacity_threshold,
            rng=rng,
        )

        angle = rng.randrange(8) * math.pi / 4
        offset = min(width, height) * 0.5
        target.start_entrance(
            x + math.cos(angle) * offset,
            y + math.sin(angle) * offset,
            duration=rng.uniform(600, 1200),
        )
        return target

    return factory


def main(game_config: GameConfig | None = None) -> None:
    """Run the game."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )
    game_config = game_config or GameConfig()
    slash_config = game_config.slash_config()

    pygame.init()
    flags = pygame.FULLSCREEN if game_config.fullscreen else 0
    screen = pygame.display.set_mode((game_config.screen_width, game_config.screen_height), flags)
    pygame.display.set_caption(TITLE)
    frame_clock = pygame.time.Clock()

    rng = random.Random()
    clock = GameClock()
    event_bus = EventBus()

    audio = AudioManager(enabled=game_config.sound_enabled, volume=game_config.sfx_volume)
    audio.load_directory(
        f"{game_config.asset_dir}/audio",
        [SOUND_SLASH, SOUND_HIT, SOUND_EXPLODE, SOUND_COIN, "electric-spark"],
    )

    particles = ParticleSystem()
    sparks = SparkEmitter(particles, clock, dpr=game_config.dpr, audio=audio, spark_sound="electric-spark")
    floating_text = FloatingTextLayer(clock, dpr=game_config.dpr)
    wallet = CoinWallet(
        clock,
        counter_position=(game_config.screen_width - 24 * game_config.dpr, game_config.screen_height - 40 * game_config.dpr),
        collect_delay=slash_config.coin_collect_delay,
        event_bus=event_bus,
        audio=audio,
    )

    textures = TextureCache(game_config.asset_dir)
    spawner = Spawner(
        clock,
        factory=make_target_factory(game_config, clock, textures, slash_config.opacity_threshold, rng),
        rng=rng,
    )

    collision = CollisionResolver(slash_config, sparks=sparks, audio=audio, event_bus=event_bus)
    damage = DamageResolver(
        slash_config, spawner,
        audio=audio, sparks=sparks, floating_text=floating_text,
        particles=particles, wallet=wallet, event_bus=event_bus,
    )
    controller = SlashController(
        slash_config, clock, spawner,
        collision=collision, damage=damage, audio=audio, event_bus=event_bus,
    )

    input_handler = SlashInputHandler(controller, screen.get_size())
    renderer = Renderer(screen, dpr=game_config.dpr)

    event_bus.subscribe(
        EnemyKilledEvent,
        lambda e: logger.info("%s destroyed at (%.0f, %.0f)", e.kind, *e.position),
    )

    running = True
    while running:
        dt = frame_clock.tick(game_config.fps) / 1000.0
        clock.advance(dt)

        running = input_handler.process_events(pygame.event.get())

        spawner.update()
        sparks.update()
        particles.update(dt)
        floating_text.update()
        wallet.update()
        event_bus.process_queue()

        renderer.render(
            spawner.targets + spawner.dying,
            particles, floating_text, wallet,
            controller.advance(),
        )
        pygame.display.flip()

    logger.info("Session over: %d kills, %d coins", spawner.kills, wallet.total)
    audio.stop_all()
    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
