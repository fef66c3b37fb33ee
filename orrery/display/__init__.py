"""
Display Module
==============

Renderer-side helpers: unit conversion, trails, scene data and the
matplotlib viewer. Nothing here feeds back into the physics.
"""

from .adapter import DisplayAdapter
from .trails import Trail, TrailSet
from .scene import BODY_INFO, format_stats, generate_starfield, tooltip_text

__all__ = [
    'DisplayAdapter',
    'Trail',
    'TrailSet',
    'BODY_INFO',
    'format_stats',
    'generate_starfield',
    'tooltip_text',
]
