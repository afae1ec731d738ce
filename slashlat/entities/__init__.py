"""Game entities: trail data and slashable targets."""
from .trails import TrailPoint, SplinePoint, SlashMark, SlashSession, TrailFrame
from .targets import Target, SpriteTarget, TargetKind, TARGET_CONFIGS, create_target

__all__ = [
    'TrailPoint', 'SplinePoint', 'SlashMark', 'SlashSession', 'TrailFrame',
    'Target', 'SpriteTarget', 'TargetKind', 'TARGET_CONFIGS', 'create_target',
]
