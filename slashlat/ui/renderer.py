"""Drawing of the blade ribbon and the play field."""
from __future__ import annotations
from typing import TYPE_CHECKING
import pygame

from ..config import COLORS

if TYPE_CHECKING:
    from ..effects.coins import CoinWallet
    from ..effects.floating_text import FloatingTextLayer
    from ..effects.particles import ParticleSystem
    from ..entities.targets import SpriteTarget
    from ..entities.trails import TrailFrame


class TrailRenderer:
    """Draws a ``TrailFrame`` as alpha-blended polygons on an overlay."""

    def __init__(self, screen_size: tuple[int, int], color: tuple[int, int, int] = COLORS['trail']) -> None:
        self.color = color
        self.overlay = pygame.Surface(screen_size, pygame.SRCALPHA)

    def draw(self, surface: pygame.Surface, frame: TrailFrame | None) -> None:
        if frame is None:
            return

        self.overlay.fill((0, 0, 0, 0))
        for polygon, alpha in frame.quads:
            pygame.draw.polygon(self.overlay, (*self.color, self._alpha(alpha)), polygon)

        if frame.end_cap is not None:
            polygon, alpha = frame.end_cap
            pygame.draw.polygon(self.overlay, (*self.color, self._alpha(alpha)), polygon)

        surface.blit(self.overlay, (0, 0))

    @staticmethod
    def _alpha(value: float) -> int:
        return max(0, min(255, int(255 * value)))


class Renderer:
    """Draws one frame: background, targets, effects, trail and HUD."""

    def __init__(self, screen: pygame.Surface, dpr: float = 1.0) -> None:
        self.screen = screen
        self.dpr = dpr
        self.trail_renderer = TrailRenderer(screen.get_size())
        self._font: pygame.font.Font | None = None

    def render(
        self,
        targets: list[SpriteTarget],
        particles: ParticleSystem,
        floating_text: FloatingTextLayer,
        wallet: CoinWallet,
        trail_frame: TrailFrame | None
    ) -> None:
        self.screen.fill(COLORS['background'])

        for target in targets:
            target.draw(self.screen)

        particles.draw(self.screen)
        self.trail_renderer.draw(self.screen, trail_frame)
        floating_text.draw(self.screen)
        wallet.draw(self.screen, radius=8 * self.dpr)
        self._render_coin_counter(wallet)

    def _render_coin_counter(self, wallet: CoinWallet) -> None:
        if self._font is None:
            self._font = pygame.font.Font(None, int(36 * self.dpr))
        label = self._font.render(str(wallet.total), True, COLORS['coin'])
        x, y = wallet.counter_position
        self.screen.blit(label, label.get_rect(midright=(int(x), int(y))))
