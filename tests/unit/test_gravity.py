import numpy as np
import pytest

from orrery.core.config import G, TIME_STEP, moon_parameters
from orrery.core.state import moon_initial_conditions
from orrery.dynamics.gravity import (
    GravityIntegrator,
    gravity_step,
    orbital_elements,
    specific_energy,
    two_body_acceleration,
)

EARTH_MASS = 5.972e24


def _moon_start():
    return moon_initial_conditions(moon_parameters(), EARTH_MASS, 0.8)


def _max_energy_drift(method, n_steps=10000, dt=TIME_STEP):
    integrator = GravityIntegrator(EARTH_MASS, method=method)
    r0, v0 = _moon_start()
    positions, velocities = integrator.integrate(r0, v0, dt, n_steps)
    assert np.all(np.isfinite(positions))
    assert np.all(np.isfinite(velocities))
    e0 = specific_energy(r0, v0, EARTH_MASS)
    energies = np.array([specific_energy(r, v, EARTH_MASS) for r, v in zip(positions, velocities)])
    return np.max(np.abs((energies - e0) / e0))


def test_acceleration_points_at_primary_with_inverse_square_magnitude():
    r = np.array([3.0e8, 4.0e8, 0.0])
    a = two_body_acceleration(r, EARTH_MASS)
    assert np.linalg.norm(a) == pytest.approx(G * EARTH_MASS / 5.0e8**2)
    assert np.allclose(a / np.linalg.norm(a), -r / np.linalg.norm(r))


def test_step_updates_velocity_before_position():
    r = np.array([3.0e8, 0.0, 0.0])
    v = np.array([0.0, 1000.0, 0.0])
    dt = 3600.0

    r_new, v_new = gravity_step(r, v, EARTH_MASS, dt)

    accel = -G * EARTH_MASS / 3.0e8**2
    expected_v = np.array([accel * dt, 1000.0, 0.0])
    assert v_new == pytest.approx(expected_v)
    # Position uses the updated velocity, not the old one
    assert r_new == pytest.approx(r + expected_v * dt)
    assert r_new[0] != pytest.approx(r[0] + v[0] * dt)


def test_step_does_not_mutate_inputs():
    r = np.array([3.0e8, 1.0e7, 0.0])
    v = np.array([10.0, 1000.0, 5.0])
    r_copy, v_copy = r.copy(), v.copy()
    gravity_step(r, v, EARTH_MASS, TIME_STEP)
    assert np.array_equal(r, r_copy)
    assert np.array_equal(v, v_copy)


def test_coincident_position_returns_input_unchanged():
    r = np.zeros(3)
    v = np.array([1.0, 2.0, 3.0])
    r_new, v_new = gravity_step(r, v, EARTH_MASS, TIME_STEP)
    assert np.array_equal(r_new, r)
    assert np.array_equal(v_new, v)
    assert np.all(np.isfinite(r_new)) and np.all(np.isfinite(v_new))


@pytest.mark.parametrize("method", GravityIntegrator.METHODS)
def test_every_method_guards_the_singularity(method):
    integrator = GravityIntegrator(EARTH_MASS, method=method)
    v = np.array([1.0, 2.0, 3.0])
    r_new, v_new = integrator.step(np.zeros(3), v, TIME_STEP)
    assert np.array_equal(r_new, np.zeros(3))
    assert np.array_equal(v_new, v)


def test_zero_dt_leaves_state_unchanged():
    r, v = _moon_start()
    r_new, v_new = gravity_step(r, v, EARTH_MASS, 0.0)
    assert np.array_equal(r_new, r)
    assert np.array_equal(v_new, v)


def test_symplectic_energy_stays_bounded_over_long_run():
    assert _max_energy_drift('symplectic_euler') < 0.02


def test_plain_euler_drifts_more_than_symplectic():
    assert _max_energy_drift('euler') > _max_energy_drift('symplectic_euler')


def test_rk4_energy_drift_is_small():
    assert _max_energy_drift('rk4') < 1e-3


def test_integrator_symplectic_matches_gravity_step():
    integrator = GravityIntegrator(EARTH_MASS)
    r, v = _moon_start()
    r1, v1 = integrator.step(r, v, TIME_STEP)
    r2, v2 = gravity_step(r, v, EARTH_MASS, TIME_STEP)
    assert np.array_equal(r1, r2)
    assert np.array_equal(v1, v2)


def test_unknown_method_rejected():
    with pytest.raises(ValueError):
        GravityIntegrator(EARTH_MASS, method='leapfrog')


def test_orbital_elements_of_initial_moon_state():
    r, v = _moon_start()
    elements = orbital_elements(r, v, EARTH_MASS)
    a = moon_parameters().semi_major_axis_m
    assert elements['semi_major_axis_m'] == pytest.approx(a, rel=1e-9)
    # Perpendicular start faster than circular: start point is periapsis
    assert elements['periapsis_m'] == pytest.approx(0.8 * a, rel=1e-9)
    assert elements['eccentricity'] == pytest.approx(0.2, rel=1e-6)
    assert elements['period_s'] == pytest.approx(2 * np.pi * np.sqrt(a**3 / (G * EARTH_MASS)), rel=1e-9)


def test_orbital_elements_unbound_orbit():
    r = np.array([4.0e8, 0.0, 0.0])
    v = np.array([0.0, 5000.0, 0.0])
    elements = orbital_elements(r, v, EARTH_MASS)
    assert elements['specific_energy_J_kg'] > 0
    assert elements['period_s'] == float('inf')


def test_symplectic_method_has_no_separate_integrator():
    assert GravityIntegrator(EARTH_MASS)._integrator is None
    assert GravityIntegrator(EARTH_MASS, method='rk4')._integrator is not None
