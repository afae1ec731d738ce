"""Game systems package."""
from .trail_system import TrailTracker
from .collision import CollisionResolver, MoveResult, Span, find_opaque_span
from .damage import DamageResolver, SlashOutcome, slash_damage
from .spawner import Spawner, SpawnSettings
from .slash import SlashController

__all__ = [
    "TrailTracker",
    "CollisionResolver", "MoveResult", "Span", "find_opaque_span",
    "DamageResolver", "SlashOutcome", "slash_damage",
    "Spawner", "SpawnSettings",
    "SlashController",
]
