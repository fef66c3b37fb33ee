import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pytest  # noqa: E402
from mpl_toolkits.mplot3d import proj3d  # noqa: E402

from orrery.core.config import DisplayParameters, SimulationConfig  # noqa: E402
from orrery.core.simulator import Simulator  # noqa: E402
from orrery.display.viewer import OrreryViewer  # noqa: E402


@pytest.fixture
def viewer():
    config = SimulationConfig(display=DisplayParameters(star_count=200, max_trail_points=50))
    v = OrreryViewer(Simulator(config), star_seed=1)
    yield v
    plt.close(v.fig)


def test_update_steps_simulation(viewer):
    viewer.update()
    viewer.update()
    assert viewer.simulator.state.clock.step_count == 2
    assert "Day:" in viewer.stats_text.get_text()


def test_paused_update_does_not_step(viewer):
    viewer.update()
    assert viewer.toggle_pause() is True
    assert viewer.pause_button.label.get_text() == 'Resume'
    t_before = viewer.simulator.state.time_s

    for _ in range(5):
        viewer.update()

    assert viewer.simulator.state.time_s == t_before
    assert viewer.toggle_pause() is False
    assert viewer.pause_button.label.get_text() == 'Pause'


def test_trails_follow_toggle(viewer):
    viewer.update()
    assert len(viewer.trails['Earth']) == 0

    assert viewer.toggle_trails() is True
    for _ in range(60):
        viewer.update()
    assert len(viewer.trails['Earth']) == 50
    assert viewer.earth_trail_line.get_visible()

    assert viewer.toggle_trails() is False
    assert len(viewer.trails['Moon']) == 0
    assert not viewer.moon_trail_line.get_visible()


def test_labels_toggle(viewer):
    assert not viewer.labels['Earth'].get_visible()
    assert viewer.toggle_labels() is True
    viewer.update()
    assert all(label.get_visible() for label in viewer.labels.values())


def test_slider_drives_speed(viewer):
    viewer.speed_slider.set_val(3.0)
    assert viewer.simulator.speed_multiplier == 3.0
    viewer.update()
    assert viewer.simulator.state.time_s == 3.0 * viewer.simulator.config.time_step_seconds


def test_zero_speed_update_keeps_positions(viewer):
    viewer.update()
    earth, moon = viewer.display_positions()
    viewer.speed_slider.set_val(0.0)
    viewer.update()
    earth_after, moon_after = viewer.display_positions()
    assert np.array_equal(earth, earth_after)
    assert np.array_equal(moon, moon_after)


def test_body_under_cursor_finds_sun(viewer):
    viewer.fig.canvas.draw()
    x2, y2, _ = proj3d.proj_transform(0.0, 0.0, 0.0, viewer.ax.get_proj())
    px, py = viewer.ax.transData.transform((x2, y2))

    assert viewer.body_under_cursor(px, py) == 'Sun'
    assert viewer.body_under_cursor(px + 500, py + 500) is None
