"""
Display Adapter
===============

Converts physical positions [m] to display units. Physics never reads
anything back from here.
"""

import numpy as np

from ..core.config import DisplayParameters, BodyParameters
from ..dynamics.kepler import reference_ellipse


class DisplayAdapter:
    """
    Linear meters-to-display mapping plus the Moon's visual exaggeration.

    With default parameters 1 AU maps to 150 display units and the Moon's
    offset from Earth is drawn 20 times larger than physical.
    """

    def __init__(self, params: DisplayParameters = None):
        self.params = params or DisplayParameters()

    @property
    def scale(self) -> float:
        return self.params.meters_to_display

    def to_display(self, position_m: np.ndarray) -> np.ndarray:
        """Scale a position (or array of positions) to display units."""
        return np.asarray(position_m, dtype=float) * self.scale

    def moon_display_position(self,
                              earth_position_m: np.ndarray,
                              moon_relative_m: np.ndarray) -> np.ndarray:
        """Moon drawing position: Earth + exaggerated relative offset."""
        absolute = (np.asarray(earth_position_m, dtype=float)
                    + np.asarray(moon_relative_m, dtype=float) * self.params.moon_exaggeration)
        return self.to_display(absolute)

    def orbit_path(self, body: BodyParameters) -> np.ndarray:
        """Reference ellipse of ``body`` in display units."""
        path = reference_ellipse(body.semi_major_axis_m, body.eccentricity,
                                 self.params.orbit_path_points)
        return self.to_display(path)

    def spin_increment(self, speed_multiplier: float) -> float:
        """Cosmetic rotation applied to Earth and Moon per frame [rad]."""
        return self.params.spin_rate * speed_multiplier
