import numpy as np
import pytest

from orrery.core.config import AU, DisplayParameters, earth_parameters
from orrery.core.simulator import Telemetry
from orrery.display import (
    BODY_INFO,
    DisplayAdapter,
    Trail,
    TrailSet,
    format_stats,
    generate_starfield,
    tooltip_text,
)


def test_adapter_scales_one_au():
    adapter = DisplayAdapter()
    assert adapter.to_display(np.array([AU, 0.0, 0.0])) == pytest.approx([150.0, 0.0, 0.0])


def test_moon_offset_is_exaggerated():
    adapter = DisplayAdapter(DisplayParameters(moon_exaggeration=20.0))
    earth = np.array([AU, 0.0, 0.0])
    moon_rel = np.array([0.0, 3.0e8, 0.0])
    moon = adapter.moon_display_position(earth, moon_rel)
    expected = adapter.to_display(earth + 20.0 * moon_rel)
    assert moon == pytest.approx(expected)


def test_adapter_does_not_touch_inputs():
    adapter = DisplayAdapter()
    earth = np.array([AU, 1.0, 2.0])
    before = earth.copy()
    adapter.to_display(earth)
    adapter.moon_display_position(earth, np.array([1.0, 0.0, 0.0]))
    assert np.array_equal(earth, before)


def test_orbit_path_in_display_units():
    params = DisplayParameters(orbit_path_points=64)
    path = DisplayAdapter(params).orbit_path(earth_parameters())
    assert path.shape == (65, 3)
    radii = np.linalg.norm(path, axis=1)
    assert radii.min() == pytest.approx(150.0 * (1 - 0.0167), rel=1e-6)
    assert radii.max() == pytest.approx(150.0 * (1 + 0.0167), rel=1e-6)


def test_spin_scales_with_speed():
    adapter = DisplayAdapter()
    assert adapter.spin_increment(0.0) == 0.0
    assert adapter.spin_increment(2.0) == pytest.approx(0.04)


def test_trail_keeps_most_recent_points():
    trail = Trail(max_points=500)
    for i in range(600):
        trail.push(np.array([float(i), 0.0, 0.0]))
    points = trail.as_array()
    assert len(trail) == 500
    assert points.shape == (500, 3)
    assert points[0, 0] == 100.0
    assert points[-1, 0] == 599.0


def test_empty_trail_array():
    assert Trail().as_array().shape == (0, 3)


def test_trail_set_records_only_when_enabled():
    trails = TrailSet(max_points=10)
    trails.record({'Earth': np.ones(3), 'Moon': np.zeros(3)})
    assert len(trails['Earth']) == 0

    assert trails.toggle() is True
    trails.record({'Earth': np.ones(3), 'Moon': np.zeros(3)})
    assert len(trails['Earth']) == 1
    assert len(trails['Moon']) == 1

    # Disabling clears the history
    assert trails.toggle() is False
    assert len(trails['Earth']) == 0


def test_starfield_is_reproducible_and_bounded():
    a = generate_starfield(1000, 2000.0, seed=7)
    b = generate_starfield(1000, 2000.0, seed=7)
    assert a.shape == (1000, 3)
    assert np.array_equal(a, b)
    assert np.all(np.abs(a) <= 1000.0)


def test_tooltip_text():
    text = tooltip_text('Earth')
    assert text.splitlines() == [
        'Earth',
        f"Mass: {BODY_INFO['Earth']['mass']}",
        f"Radius: {BODY_INFO['Earth']['radius']}",
    ]
    assert tooltip_text('Pluto') == ''


def test_format_stats():
    telemetry = Telemetry(
        earth_sun_distance_m=1.471e11,
        earth_speed_m_s=30290.0,
        day_of_year=42,
        moon_distance_m=3.0752e8,
        moon_speed_m_s=1247.0,
    )
    stats = format_stats(telemetry)
    assert stats == {
        'distance': '147.1M km',
        'orbital_speed': '30.29 km/s',
        'day_of_year': '42',
        'moon_distance': '307,520 km',
    }
