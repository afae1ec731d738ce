"""Sprite loading with procedural stand-ins for missing art."""
from __future__ import annotations
import logging
from pathlib import Path

import pygame

from .entities.targets import TARGET_CONFIGS, TargetKind

logger = logging.getLogger(__name__)

# Stand-in body colours per kind
PLACEHOLDER_COLORS: dict[TargetKind, tuple[int, int, int]] = {
    TargetKind.BEE: (250, 200, 40),
    TargetKind.LION: (220, 150, 60),
    TargetKind.ROBOT: (150, 160, 180),
    TargetKind.SNAKE_BOT: (90, 190, 90),
    TargetKind.FLY_BOT: (120, 120, 220),
    TargetKind.LEAF_BOT: (60, 170, 110),
    TargetKind.ORANGE_BOT: (255, 140, 30),
}


def load_texture(asset_dir: str | Path, key: str) -> pygame.Surface | None:
    """Load ``<asset_dir>/<key>.png`` with per-pixel alpha, or None if unavailable."""
    path = Path(asset_dir) / f"{key}.png"
    try:
        surface = pygame.image.load(str(path))
    except (pygame.error, FileNotFoundError) as e:
        logger.warning("Could not load sprite %r from %s: %s", key, path, e)
        return None

    if pygame.display.get_init() and pygame.display.get_surface() is not None:
        return surface.convert_alpha()
    return surface


def placeholder_texture(kind: TargetKind, size: int = 128) -> pygame.Surface:
    """A simple character silhouette on a transparent background."""
    surface = pygame.Surface((size, size), pygame.SRCALPHA)
    color = PLACEHOLDER_COLORS.get(kind, (200, 200, 200))
    pygame.draw.ellipse(surface, color, (size * 0.1, size * 0.2, size * 0.8, size * 0.7))
    pygame.draw.circle(surface, (255, 255, 255), (int(size * 0.38), int(size * 0.45)), size // 10)
    pygame.draw.circle(surface, (255, 255, 255), (int(size * 0.62), int(size * 0.45)), size // 10)
    pygame.draw.circle(surface, (20, 20, 20), (int(size * 0.38), int(size * 0.45)), size // 20)
    pygame.draw.circle(surface, (20, 20, 20), (int(size * 0.62), int(size * 0.45)), size // 20)
    return surface


class TextureCache:
    """One texture per target kind, loaded on first use."""

    def __init__(self, asset_dir: str | Path) -> None:
        self.asset_dir = Path(asset_dir)
        self._textures: dict[TargetKind, pygame.Surface] = {}

    def get(self, kind: TargetKind) -> pygame.Surface:
        if kind not in self._textures:
            texture = load_texture(self.asset_dir, TARGET_CONFIGS[kind]["asset_key"])
            self._textures[kind] = texture if texture is not None else placeholder_texture(kind)
        return self._textures[kind]
