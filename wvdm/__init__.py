"""
Photon path explorer: a photon circulating on a torus, an S-shaped
lemniscate or a Viviani (C-shaped) lemniscate, with its E/B field
directions, momentum split, per-lap averages and a line-of-sight
coloured trail.
"""

from .controls import Controls
from .engine import FrameState, PhotonEngine
from .params import (
    MotionParameters, ParticleType, PathMode, ShapeParameters, WindingRatio,
)

__version__ = '0.1.0'

__all__ = [
    'Controls', 'FrameState', 'PhotonEngine', 'MotionParameters',
    'ParticleType', 'PathMode', 'ShapeParameters', 'WindingRatio',
]
