"""Game constants and configuration."""
from dataclasses import dataclass

# Display settings
SCREEN_WIDTH = 1080
SCREEN_HEIGHT = 1920
FPS = 60
TITLE = "slash.lat"

# Sound keys
SOUND_SLASH = "knife-slash"
SOUND_HIT = "knife-clank"
SOUND_EXPLODE = "explode"
SOUND_COIN = "coin-received"

# Colors
COLORS = {
    'background': (18, 18, 28),
    'trail': (255, 255, 255),
    'slash_damage': (0, 0, 0),
    'spark': (255, 255, 0),
    'spark_hot': (255, 136, 0),
    'damage_text': (255, 255, 255),
    'damage_outline': (0, 0, 0),
    'coin': (255, 210, 60),
    'hp_bar_bg': (40, 40, 40),
    'hp_bar_high': (80, 220, 80),
    'hp_bar_mid': (240, 200, 60),
    'hp_bar_low': (230, 60, 60),
}


@dataclass
class SlashConfig:
    """Tunables for the slash pipeline.

    Geometric values are in design pixels and are multiplied by ``dpr``
    through the ``scaled_*`` properties; times are in milliseconds.
    """
    dpr: float = 1.0

    # Trail capture
    max_session_duration: float = 350.0
    max_trail_points: int = 60
    min_point_distance: float = 4.0

    # Trail rendering
    fade_delay: float = 100.0
    fade_duration: float = 150.0
    segments_per_point: int = 10
    trail_width: float = 5.0
    end_cap_length: float = 30.0

    # Collision
    step_size: float = 4.0
    broad_phase_margin: float = 50.0
    search_step: float = 2.0
    max_search_length: float = 100.0
    opacity_threshold: int = 50  # Alpha must exceed this (0-255)
    min_hittable_alpha: float = 0.3  # Targets fading in/out below this are ignored

    # Damage
    base_damage: float = 50.0
    bonus_damage: float = 50.0
    max_length_for_full_bonus: float = 300.0

    # Rewards
    coins_per_kill: int = 10
    coin_collect_delay: float = 400.0

    def __post_init__(self) -> None:
        if self.dpr <= 0:
            raise ValueError(f"dpr must be positive, got {self.dpr}")
        if self.max_trail_points < 2:
            raise ValueError("max_trail_points must be at least 2")
        if self.step_size <= 0 or self.search_step <= 0:
            raise ValueError("step_size and search_step must be positive")
        if self.max_length_for_full_bonus <= 0:
            raise ValueError("max_length_for_full_bonus must be positive")
        if not 0 <= self.opacity_threshold <= 255:
            raise ValueError("opacity_threshold must be within 0-255")

    @property
    def scaled_min_point_distance(self) -> float:
        return self.min_point_distance * self.dpr

    @property
    def scaled_trail_width(self) -> float:
        return self.trail_width * self.dpr

    @property
    def scaled_end_cap_length(self) -> float:
        return self.end_cap_length * self.dpr

    @property
    def scaled_step_size(self) -> float:
        return self.step_size * self.dpr

    @property
    def scaled_broad_phase_margin(self) -> float:
        return self.broad_phase_margin * self.dpr

    @property
    def scaled_search_step(self) -> float:
        return self.search_step * self.dpr

    @property
    def scaled_max_search_length(self) -> float:
        return self.max_search_length * self.dpr

    @property
    def scaled_max_length_for_full_bonus(self) -> float:
        return self.max_length_for_full_bonus * self.dpr

    @property
    def max_damage(self) -> float:
        """Upper bound of a single slash's damage."""
        return self.base_damage + self.bonus_damage


@dataclass
class GameConfig:
    """Runtime game configuration."""
    screen_width: int = SCREEN_WIDTH
    screen_height: int = SCREEN_HEIGHT
    fps: int = FPS
    dpr: float = 1.0
    fullscreen: bool = False
    sound_enabled: bool = True
    music_volume: float = 0.7
    sfx_volume: float = 0.8
    asset_dir: str = "assets"

    def slash_config(self) -> SlashConfig:
        """Build the slash tunables for this display density."""
        return SlashConfig(dpr=self.dpr)
