"""Core game services: time, events and geometry."""
from .clock import GameClock
from .events import EventBus, Event
from .geometry import Bounds, distance, normalize, segment_samples

__all__ = [
    'GameClock', 'EventBus', 'Event',
    'Bounds', 'distance', 'normalize', 'segment_samples',
]
