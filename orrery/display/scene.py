"""
Scene Data
==========

Static presentation data: star field, tooltip facts and stats text.
"""

import numpy as np
from typing import Dict, Optional

from ..core.simulator import Telemetry

# Tooltip facts per body
BODY_INFO: Dict[str, Dict[str, str]] = {
    'Sun': {'mass': '1.989 × 10³⁰ kg', 'radius': '696,340 km'},
    'Earth': {'mass': '5.972 × 10²⁴ kg', 'radius': '6,371 km'},
    'Moon': {'mass': '7.342 × 10²² kg', 'radius': '1,737 km'},
}


def generate_starfield(count: int = 10000,
                       extent: float = 360.0,
                       seed: Optional[int] = None) -> np.ndarray:
    """
    Uniform random points in a cube of side ``extent`` centred on the origin.

    Returns:
        Array of shape (count, 3) in display units
    """
    rng = np.random.default_rng(seed)
    return (rng.random((count, 3)) - 0.5) * extent


def tooltip_text(name: str) -> str:
    """Multi-line hover text for a body, empty for unknown names."""
    info = BODY_INFO.get(name)
    if info is None:
        return ''
    return f"{name}\nMass: {info['mass']}\nRadius: {info['radius']}"


def format_stats(telemetry: Telemetry) -> Dict[str, str]:
    """Stats panel strings."""
    return {
        'distance': f"{telemetry.earth_sun_distance_million_km:.1f}M km",
        'orbital_speed': f"{telemetry.earth_speed_km_s:.2f} km/s",
        'day_of_year': str(telemetry.day_of_year),
        'moon_distance': f"{telemetry.moon_distance_km:,.0f} km",
    }
