"""Sound effect playback over pygame.mixer."""
from __future__ import annotations
import logging
from pathlib import Path

import pygame

logger = logging.getLogger(__name__)


class AudioManager:
    """Keyed sound effects. Playing an unknown or unloaded key is a no-op."""

    def __init__(self, enabled: bool = True, volume: float = 0.8) -> None:
        self.volume = volume
        self._sounds: dict[str, pygame.mixer.Sound] = {}
        self.enabled = enabled and self._init_mixer()

    @staticmethod
    def _init_mixer() -> bool:
        if pygame.mixer.get_init():
            return True
        try:
            pygame.mixer.init()
        except pygame.error as e:
            logger.warning("Audio disabled, mixer unavailable: %s", e)
            return False
        return True

    def load(self, key: str, path: str | Path) -> bool:
        """Load a sound file under ``key``. Missing files are skipped."""
        if not self.enabled:
            return False
        try:
            self._sounds[key] = pygame.mixer.Sound(str(path))
        except (pygame.error, FileNotFoundError) as e:
            logger.warning("Could not load sound %r from %s: %s", key, path, e)
            return False
        return True

    def load_directory(self, directory: str | Path, keys: list[str]) -> None:
        """Load ``<key>.ogg`` (or ``.wav``/``.mp3``) for each key in ``directory``."""
        directory = Path(directory)
        for key in keys:
            for suffix in (".ogg", ".wav", ".mp3"):
                path = directory / f"{key}{suffix}"
                if path.exists():
                    self.load(key, path)
                    break
            else:
                logger.warning("No sound file for %r in %s", key, directory)

    def has(self, key: str) -> bool:
        return key in self._sounds

    def play(self, key: str, volume: float | None = None) -> None:
        if not self.enabled:
            return
        sound = self._sounds.get(key)
        if sound is None:
            return
        sound.set_volume(self.volume if volume is None else volume * self.volume)
        sound.play()

    def stop_all(self) -> None:
        for sound in self._sounds.values():
            sound.stop()
