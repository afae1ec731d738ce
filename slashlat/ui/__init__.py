"""User interface: input and rendering."""
from .input import SlashInputHandler, PointerState
from .renderer import Renderer, TrailRenderer

__all__ = ['SlashInputHandler', 'PointerState', 'Renderer', 'TrailRenderer']
