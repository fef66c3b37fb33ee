import logging
import math

import numpy as np
import pytest

from orrery.core.config import EARTH_PERIOD, G, TIME_STEP, SimulationConfig
from orrery.core.simulator import Simulator
from orrery.core.state import create_initial_state, moon_initial_conditions
from orrery.dynamics.gravity import gravity_step
from orrery.dynamics.kepler import position_and_velocity_at


def test_initial_state():
    config = SimulationConfig()
    state = create_initial_state(config)

    assert np.array_equal(state.sun.position_m, np.zeros(3))
    a, e = config.earth.semi_major_axis_m, config.earth.eccentricity
    assert state.earth.position_m == pytest.approx([a * (1 - e), 0.0, 0.0])

    a_moon = config.moon.semi_major_axis_m
    r0 = 0.8 * a_moon
    assert state.moon.position_m == pytest.approx([r0, 0.0, 0.0])
    v_expected = math.sqrt(G * config.earth.mass_kg * (2 / r0 - 1 / a_moon))
    assert state.moon.velocity_m_s == pytest.approx([0.0, v_expected, 0.0])

    assert state.time_s == 0.0
    assert state.speed_multiplier == 1.0
    assert not state.paused


def test_moon_initial_velocity_perpendicular_to_position():
    config = SimulationConfig()
    r, v = moon_initial_conditions(config.moon, config.earth.mass_kg, 0.5)
    assert np.dot(r, v) == 0.0
    assert np.linalg.norm(r) == pytest.approx(0.5 * config.moon.semi_major_axis_m)


def test_state_copy_is_independent():
    state = create_initial_state()
    other = state.copy()
    other.moon.position_m[0] = 0.0
    other.clock.advance(1.0)
    assert state.moon.position_m[0] > 0
    assert state.time_s == 0.0


def test_step_advances_earth_and_moon_with_same_dt():
    sim = Simulator()
    sim.set_speed(2.0)
    config = sim.config
    moon_r0 = sim.state.moon.position_m.copy()
    moon_v0 = sim.state.moon.velocity_m_s.copy()

    snap = sim.step()

    dt = 2.0 * TIME_STEP
    assert snap.dt_s == dt
    assert snap.time_s == dt
    assert snap.step == 1

    earth_pos, earth_vel = position_and_velocity_at(
        dt, config.sun.mass_kg, config.earth.semi_major_axis_m, config.earth.eccentricity,
        period=EARTH_PERIOD,
    )
    assert np.array_equal(snap.earth_position_m, earth_pos)
    assert np.array_equal(snap.earth_velocity_m_s, earth_vel)

    moon_pos, moon_vel = gravity_step(moon_r0, moon_v0, config.earth.mass_kg, dt)
    assert np.array_equal(snap.moon_position_m, moon_pos)
    assert np.array_equal(snap.moon_velocity_m_s, moon_vel)


def test_sun_never_moves():
    sim = Simulator()
    sim.run(n_steps=100)
    assert np.array_equal(sim.state.sun.position_m, np.zeros(3))
    assert np.array_equal(sim.state.sun.velocity_m_s, np.zeros(3))


def test_one_year_closes_earth_orbit():
    sim = Simulator()
    initial = sim.snapshot().earth_position_m

    n_steps = int(round(EARTH_PERIOD / TIME_STEP))
    sim.run(n_steps=n_steps)

    assert sim.state.time_s == EARTH_PERIOD
    assert np.allclose(sim.state.earth.position_m, initial, rtol=0, atol=1.0e3)


def test_zero_speed_freezes_everything():
    sim = Simulator()
    sim.run(n_steps=10)
    before = sim.snapshot()

    sim.set_speed(0.0)
    sim.run(n_steps=50)
    after = sim.snapshot()

    assert after.time_s == before.time_s
    assert np.array_equal(after.earth_position_m, before.earth_position_m)
    assert np.array_equal(after.moon_position_m, before.moon_position_m)
    assert np.array_equal(after.moon_velocity_m_s, before.moon_velocity_m_s)


def test_pause_does_not_advance_clock():
    sim = Simulator()
    sim.run(n_steps=5)
    before = sim.snapshot()
    history_len = len(sim.history)

    assert sim.toggle_pause() is True
    snap = sim.step()

    assert snap.time_s == before.time_s
    assert snap.step == before.step
    assert np.array_equal(snap.moon_position_m, before.moon_position_m)
    assert len(sim.history) == history_len

    sim.resume()
    assert sim.step().step == before.step + 1


def test_set_speed_clamps_to_slider_range(caplog):
    sim = Simulator()
    with caplog.at_level(logging.WARNING):
        assert sim.set_speed(10.0) == 5.0
        assert sim.set_speed(-1.0) == 0.0
    assert "clamped" in caplog.text
    assert sim.set_speed(2.5) == 2.5
    assert sim.speed_multiplier == 2.5


def test_set_speed_rejects_non_finite():
    sim = Simulator()
    with pytest.raises(ValueError):
        sim.set_speed(float('nan'))
    with pytest.raises(ValueError):
        sim.set_speed(float('inf'))


def test_run_by_duration():
    sim = Simulator()
    snapshots = sim.run(duration_seconds=86400.0)
    assert len(snapshots) == 24
    assert snapshots[-1].telemetry.day_of_year == 2


def test_run_requires_steps_or_running_clock():
    sim = Simulator()
    with pytest.raises(ValueError):
        sim.run()
    sim.set_speed(0.0)
    with pytest.raises(ValueError):
        sim.run(duration_seconds=3600.0)


def test_progress_callback_reaches_one():
    sim = Simulator()
    progress = []
    sim.run(n_steps=250, progress_callback=progress.append)
    assert progress[-1] == 1.0
    assert all(0 < p <= 1 for p in progress)


def test_step_callbacks_and_history_limit():
    sim = Simulator(SimulationConfig(history_length=10))
    seen = []
    sim.add_step_callback(lambda s, snap: seen.append(snap.step))
    sim.run(n_steps=25)
    assert seen == list(range(1, 26))
    assert len(sim.history) == 10
    assert sim.history[-1].step == 25


def test_telemetry_at_start():
    sim = Simulator()
    config = sim.config
    a, e = config.earth.semi_major_axis_m, config.earth.eccentricity
    telemetry = sim.telemetry()

    assert telemetry.earth_sun_distance_million_km == pytest.approx(a * (1 - e) / 1e9)
    h = math.sqrt(G * config.sun.mass_kg * a * (1 - e * e))
    assert telemetry.earth_speed_km_s == pytest.approx(h / (a * (1 - e)) * (1 + e) / 1000)
    assert telemetry.day_of_year == 1
    assert telemetry.moon_distance_km == pytest.approx(0.8 * 384400.0)


def test_reset_restores_initial_state():
    sim = Simulator()
    initial = sim.snapshot()
    sim.run(n_steps=30)
    sim.reset()
    snap = sim.snapshot()
    assert snap.time_s == 0.0
    assert np.array_equal(snap.moon_position_m, initial.moon_position_m)
    assert len(sim.history) == 0


def test_moon_energy_bounded_over_simulation():
    sim = Simulator()
    e0 = sim.moon_energy()
    sim.run(n_steps=2000)
    assert abs((sim.moon_energy() - e0) / e0) < 0.02


@pytest.mark.parametrize("method", ["euler", "rk4"])
def test_alternative_moon_integrators(method):
    sim = Simulator(SimulationConfig(moon_integrator=method))
    sim.run(n_steps=10)
    assert np.all(np.isfinite(sim.state.moon.position_m))
    assert sim.moon_integrator.method == method
