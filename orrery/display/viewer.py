#!/usr/bin/env python3
"""
Orrery Viewer
=============

Interactive matplotlib 3D view of the Sun / Earth / Moon simulation:
bodies, Earth's reference orbit, trails, labels, star field, tooltips,
a speed slider, pause / trails / labels buttons and a stats panel.

Usage:
  python -m orrery.display.viewer
  python -m orrery.display.viewer --speed 2 --trails --labels
  python -m orrery.display.viewer --frames 300 --save orrery.gif
"""

import argparse
import logging
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation, PillowWriter
from matplotlib.widgets import Button, Slider
from mpl_toolkits.mplot3d import proj3d
from typing import Optional

from ..core.simulator import Simulator
from .adapter import DisplayAdapter
from .scene import format_stats, generate_starfield, tooltip_text
from .trails import TrailSet

logger = logging.getLogger(__name__)

# Hover radius for tooltips [pixels]
TOOLTIP_RADIUS_PX = 15


class OrreryViewer:
    """
    Animated 3D view driven by a :class:`Simulator`.

    One simulation step is taken per animation frame. Physics results are
    converted to display units through :class:`DisplayAdapter`.
    """

    def __init__(self,
                 simulator: Simulator = None,
                 show_trails: bool = False,
                 show_labels: bool = False,
                 star_seed: Optional[int] = None):
        """
        Initialize viewer.

        Args:
            simulator: Simulation to display (default configuration if None)
            show_trails: Start with trails enabled
            show_labels: Start with labels visible
            star_seed: Seed for the star field
        """
        self.simulator = simulator or Simulator()
        self.params = self.simulator.config.display
        self.adapter = DisplayAdapter(self.params)
        self.trails = TrailSet(('Earth', 'Moon'), self.params.max_trail_points, enabled=show_trails)
        self.show_labels = show_labels
        self.spin_angle = 0.0
        self.animation: Optional[FuncAnimation] = None

        self.fig = plt.figure(figsize=(11, 9), facecolor='black')
        self.ax = self.fig.add_axes([0.0, 0.12, 1.0, 0.88], projection='3d')
        self._setup_axes()
        self._create_artists(star_seed)
        self._create_widgets()
        self._draw_bodies()

        self.fig.canvas.mpl_connect('motion_notify_event', self._on_mouse_move)

    # ----- construction -----

    def _setup_axes(self):
        ax = self.ax
        ax.set_facecolor('black')
        limit = self.params.display_scale * 1.2
        ax.set_xlim(-limit, limit)
        ax.set_ylim(-limit, limit)
        ax.set_zlim(-limit / 2, limit / 2)
        ax.set_axis_off()
        ax.view_init(elev=25, azim=45)

    def _create_artists(self, star_seed: Optional[int]):
        ax = self.ax

        stars = generate_starfield(self.params.star_count,
                                   self.params.star_field_extent,
                                   seed=star_seed)
        ax.scatter(stars[:, 0], stars[:, 1], stars[:, 2], s=0.2, c='white', alpha=0.6,
                   depthshade=False)

        path = self.adapter.orbit_path(self.simulator.config.earth)
        ax.plot(path[:, 0], path[:, 1], path[:, 2], color='#4488ff', alpha=0.4, linewidth=1.0)

        self.sun_marker, = ax.plot([0], [0], [0], 'o', color='#ffdd00', markersize=16)
        self.earth_marker, = ax.plot([], [], [], 'o', color='#2233ff', markersize=8)
        self.earth_meridian, = ax.plot([], [], [], '-', color='white', linewidth=1.0, alpha=0.8)
        self.moon_marker, = ax.plot([], [], [], 'o', color='white', markersize=4)

        self.earth_trail_line, = ax.plot([], [], [], color='#64b5f6', alpha=0.7, linewidth=1.2)
        self.moon_trail_line, = ax.plot([], [], [], color='#cccccc', alpha=0.5, linewidth=0.8)

        self.labels = {
            'Sun': ax.text(0, 0, 12, 'Sun', color='white', ha='center'),
            'Earth': ax.text(0, 0, 4, 'Earth', color='white', ha='center'),
            'Moon': ax.text(0, 0, 2, 'Moon', color='white', ha='center'),
        }
        for label in self.labels.values():
            label.set_visible(self.show_labels)

        self.stats_text = self.fig.text(0.02, 0.96, '', color='white', family='monospace',
                                        va='top', fontsize=9)
        self.tooltip = self.fig.text(0, 0, '', color='white', fontsize=8, visible=False,
                                     bbox=dict(facecolor='black', alpha=0.7, edgecolor='#4488ff'))

    def _create_widgets(self):
        lo, hi = self.params.speed_range
        slider_ax = self.fig.add_axes([0.35, 0.04, 0.45, 0.03], facecolor='#222222')
        self.speed_slider = Slider(slider_ax, 'Speed', lo, hi,
                                   valinit=self.simulator.speed_multiplier, valfmt='%.1fx')
        self.speed_slider.label.set_color('white')
        self.speed_slider.valtext.set_color('white')
        self.speed_slider.on_changed(self.set_speed)

        self.pause_button = Button(self.fig.add_axes([0.02, 0.03, 0.08, 0.05]), 'Pause')
        self.pause_button.on_clicked(lambda event: self.toggle_pause())

        self.trails_button = Button(self.fig.add_axes([0.11, 0.03, 0.08, 0.05]), 'Trails')
        self.trails_button.on_clicked(lambda event: self.toggle_trails())

        self.labels_button = Button(self.fig.add_axes([0.20, 0.03, 0.08, 0.05]), 'Labels')
        self.labels_button.on_clicked(lambda event: self.toggle_labels())

    # ----- controls -----

    def set_speed(self, value: float):
        self.simulator.set_speed(value)

    def toggle_pause(self) -> bool:
        paused = self.simulator.toggle_pause()
        self.pause_button.label.set_text('Resume' if paused else 'Pause')
        return paused

    def toggle_trails(self) -> bool:
        enabled = self.trails.toggle()
        self._draw_trails()
        return enabled

    def toggle_labels(self) -> bool:
        self.show_labels = not self.show_labels
        for label in self.labels.values():
            label.set_visible(self.show_labels)
        return self.show_labels

    # ----- frame update -----

    def display_positions(self):
        """Current Earth and Moon positions in display units."""
        state = self.simulator.state
        earth = self.adapter.to_display(state.earth.position_m)
        moon = self.adapter.moon_display_position(state.earth.position_m, state.moon.position_m)
        return earth, moon

    def update(self, frame=None):
        """Advance one step and redraw; no-op for physics while paused."""
        if not self.simulator.paused:
            snapshot = self.simulator.step()
            earth, moon = self.display_positions()
            self.trails.record({'Earth': earth, 'Moon': moon})
            self.spin_angle += self.adapter.spin_increment(self.simulator.speed_multiplier)

            stats = format_stats(snapshot.telemetry)
            self.stats_text.set_text(
                f"Distance:  {stats['distance']}\n"
                f"Speed:     {stats['orbital_speed']}\n"
                f"Day:       {stats['day_of_year']}\n"
                f"Moon dist: {stats['moon_distance']}"
            )

        self._draw_bodies()
        self._draw_trails()
        return self.earth_marker, self.moon_marker, self.earth_trail_line, self.moon_trail_line

    def _draw_bodies(self):
        earth, moon = self.display_positions()
        self.earth_marker.set_data_3d([earth[0]], [earth[1]], [earth[2]])
        self.moon_marker.set_data_3d([moon[0]], [moon[1]], [moon[2]])

        tip = earth + 3.0 * np.array([np.cos(self.spin_angle), np.sin(self.spin_angle), 0.0])
        self.earth_meridian.set_data_3d([earth[0], tip[0]], [earth[1], tip[1]], [earth[2], tip[2]])

        if self.show_labels:
            self.labels['Earth'].set_position_3d((earth[0], earth[1], earth[2] + 4))
            self.labels['Moon'].set_position_3d((moon[0], moon[1], moon[2] + 2))

    def _draw_trails(self):
        for line, name in ((self.earth_trail_line, 'Earth'), (self.moon_trail_line, 'Moon')):
            points = self.trails[name].as_array()
            line.set_data_3d(points[:, 0], points[:, 1], points[:, 2])
            line.set_visible(self.trails.enabled)

    # ----- tooltips -----

    def body_under_cursor(self, x_px: float, y_px: float) -> Optional[str]:
        """Name of the body drawn within TOOLTIP_RADIUS_PX of the cursor."""
        earth, moon = self.display_positions()
        candidates = {'Sun': np.zeros(3), 'Earth': earth, 'Moon': moon}
        proj = self.ax.get_proj()

        best, best_dist = None, TOOLTIP_RADIUS_PX
        for name, pos in candidates.items():
            x2, y2, _ = proj3d.proj_transform(pos[0], pos[1], pos[2], proj)
            px, py = self.ax.transData.transform((x2, y2))
            dist = np.hypot(px - x_px, py - y_px)
            if dist < best_dist:
                best, best_dist = name, dist
        return best

    def _on_mouse_move(self, event):
        if event.inaxes is not self.ax:
            self.tooltip.set_visible(False)
            return
        name = self.body_under_cursor(event.x, event.y)
        if name is None:
            self.tooltip.set_visible(False)
        else:
            fx, fy = self.fig.transFigure.inverted().transform((event.x + 10, event.y - 30))
            self.tooltip.set_position((fx, fy))
            self.tooltip.set_text(tooltip_text(name))
            self.tooltip.set_visible(True)
        self.fig.canvas.draw_idle()

    # ----- running -----

    def animate(self, frames: Optional[int] = None, interval_ms: int = 16) -> FuncAnimation:
        """Create the frame-driven animation (one step per frame)."""
        self.animation = FuncAnimation(self.fig, self.update, frames=frames,
                                       interval=interval_ms, blit=False,
                                       cache_frame_data=False)
        return self.animation

    def save(self, path: str, frames: int, fps: int = 30):
        """Render ``frames`` frames to an animated image."""
        animation = self.animate(frames=frames)
        animation.save(path, writer=PillowWriter(fps=fps))
        logger.info("Saved %d frames to %s", frames, path)

    def show(self):
        self.animate()
        plt.show()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Interactive Sun / Earth / Moon orrery")
    parser.add_argument("--speed", type=float, default=1.0, help="Initial speed multiplier (0-5)")
    parser.add_argument("--trails", action="store_true", help="Start with trails enabled")
    parser.add_argument("--labels", action="store_true", help="Start with labels visible")
    parser.add_argument("--frames", type=int, default=365, help="Frames to render with --save")
    parser.add_argument("--save", default=None, help="Write an animated GIF instead of opening a window")
    parser.add_argument("--seed", type=int, default=None, help="Star field seed")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s  %(levelname)-7s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )

    simulator = Simulator()
    simulator.set_speed(args.speed)
    viewer = OrreryViewer(simulator, show_trails=args.trails, show_labels=args.labels,
                          star_seed=args.seed)

    if args.save:
        viewer.save(args.save, frames=args.frames)
    else:
        viewer.show()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
