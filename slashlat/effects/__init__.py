"""Audio and visual collaborators driven by the slash pipeline."""
from .particles import Particle, ParticleSystem
from .audio import AudioManager
from .floating_text import FloatingText, FloatingTextLayer
from .coins import CoinWallet
from .sparks import SparkEmitter

__all__ = [
    'Particle', 'ParticleSystem',
    'AudioManager',
    'FloatingText', 'FloatingTextLayer',
    'CoinWallet',
    'SparkEmitter',
]
