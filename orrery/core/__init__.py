"""
Simulation Core Module
======================

Configuration, body records, clock, state and the simulator.
"""

from .config import SimulationConfig, DisplayParameters, BodyParameters
from .bodies import CelestialBody
from .time_manager import SimulationClock
from .state import SimulationState, create_initial_state, moon_initial_conditions
from .simulator import Simulator, Snapshot, Telemetry

__all__ = [
    'SimulationConfig',
    'DisplayParameters',
    'BodyParameters',
    'CelestialBody',
    'SimulationClock',
    'SimulationState',
    'create_initial_state',
    'moon_initial_conditions',
    'Simulator',
    'Snapshot',
    'Telemetry',
]
