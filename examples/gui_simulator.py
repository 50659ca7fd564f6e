"""
Interactive ripple tank built on the solver in `ripplelab/`.

Usage:
    python examples/gui_simulator.py

Opens a Tkinter window with an embedded Matplotlib canvas. Pick a tool, click
in the tank to place sources, obstacles, probes or rulers; with the Select
tool, drag objects around (right click deselects). Sliders change wave speed,
damping and time scale while the simulation runs.

Keys: space pauses, c clears the waves.
"""

import sys
import os
import time
import tkinter as tk
from tkinter import ttk
import numpy as np
import matplotlib
# Use TkAgg backend
matplotlib.use('TkAgg')
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
import matplotlib.pyplot as plt

# Ensure the project root is on sys.path when running this script directly
root_path = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if root_path not in sys.path:
    sys.path.insert(0, root_path)

from ripplelab.colormap import ColorScheme
from ripplelab.logging_config import setup_logging
from ripplelab.scene import PointerEvent, RippleTankSession, ToolType


class RippleTankGUI:
    def __init__(self, master):
        self.master = master
        master.title('ripplelab - Ripple Tank')

        self.session = RippleTankSession()
        self.delay_ms = 16  # ~60 frames per second
        self.tool = ToolType.SELECT
        self._pressed = False
        self._last_tick = None

        # Build UI elements
        self._build_controls()
        self._build_canvas()
        master.bind('<space>', lambda e: self.toggle_run())
        master.bind('c', lambda e: self.clear_waves())

        self._update_plots()
        self.master.after(self.delay_ms, self._run_step)

    def _build_controls(self):
        frm = ttk.Frame(self.master)
        frm.pack(side=tk.TOP, fill=tk.X)

        self.btn_start = ttk.Button(frm, text='Pause', command=self.toggle_run)
        self.btn_start.grid(row=0, column=0, padx=5, pady=5)

        self.btn_step = ttk.Button(frm, text='Step', command=self.step_once)
        self.btn_step.grid(row=0, column=1, padx=5, pady=5)

        self.btn_clear = ttk.Button(frm, text='Clear', command=self.clear_waves)
        self.btn_clear.grid(row=0, column=2, padx=5, pady=5)

        ttk.Label(frm, text='Tool').grid(row=0, column=3)
        self.tool_var = tk.StringVar(value=ToolType.SELECT.value)
        tool_box = ttk.Combobox(frm, textvariable=self.tool_var, state='readonly', width=16,
                                values=[t.value for t in ToolType])
        tool_box.grid(row=0, column=4, padx=4)
        tool_box.bind('<<ComboboxSelected>>', self.on_tool_change)

        ttk.Label(frm, text='Colors').grid(row=0, column=5)
        self.scheme_var = tk.StringVar(value=self.session.config.color_scheme.value)
        scheme_box = ttk.Combobox(frm, textvariable=self.scheme_var, state='readonly', width=12,
                                  values=[s.value for s in ColorScheme])
        scheme_box.grid(row=0, column=6, padx=4)
        scheme_box.bind('<<ComboboxSelected>>', self.on_scheme_change)

        cfg = self.session.config
        self.speed_var = self._slider(frm, 1, 0, 'Wave speed', 0.1, 5.0, cfg.wave_speed)
        self.damping_var = self._slider(frm, 1, 2, 'Damping', 0.9, 1.0, cfg.damping)
        self.time_var = self._slider(frm, 1, 4, 'Time scale', 0.1, 2.0, cfg.time_scale)

    def _slider(self, frm, row, col, text, lo, hi, value):
        ttk.Label(frm, text=text).grid(row=row, column=col)
        var = tk.DoubleVar(value=value)
        ttk.Scale(frm, from_=lo, to=hi, orient=tk.HORIZONTAL, variable=var,
                  command=self.on_settings_change).grid(row=row, column=col + 1, padx=4)
        return var

    def _build_canvas(self):
        self.fig, (self.ax_field, self.ax_signal) = plt.subplots(1, 2, figsize=(10, 5))
        plt.tight_layout()
        self.canvas = FigureCanvasTkAgg(self.fig, master=self.master)
        self.canvas.get_tk_widget().pack(side=tk.TOP, fill=tk.BOTH, expand=1)

        # image extent in world units so mouse xdata/ydata are world coordinates
        hx, hy = self.session.field.half_extent
        self.im = self.ax_field.imshow(self.session.image, origin='lower',
                                       extent=(-hx, hx, -hy, hy), interpolation='nearest')
        self.ax_field.set_title('Ripple tank')
        self.markers, = self.ax_field.plot([], [], 'w+', markersize=8)

        self.ax_signal.set_title('Probes')
        self.ax_signal.set_xlabel('Frame')
        self.ax_signal.set_ylabel('Amplitude')
        self.ax_signal.grid(True)
        self.probe_lines = {}

        self.canvas.mpl_connect('button_press_event', self.on_press)
        self.canvas.mpl_connect('motion_notify_event', self.on_motion)
        self.canvas.mpl_connect('button_release_event', self.on_release)

    # --- pointer input -> abstract pointer events
    def _pointer(self, event, **flags):
        if event.inaxes is not self.ax_field or event.xdata is None:
            return
        self.session.scene.handle_pointer(
            PointerEvent(position=(event.xdata, event.ydata), **flags), self.tool)

    def on_press(self, event):
        if event.button == 3:
            self._pointer(event, right_pressed=True)
            return
        self._pressed = True
        self._pointer(event, just_pressed=True, pressed=True)

    def on_motion(self, event):
        if self._pressed:
            self._pointer(event, pressed=True)

    def on_release(self, event):
        if self._pressed:
            self._pressed = False
            self._pointer(event, just_released=True)

    # --- controls
    def on_tool_change(self, event=None):
        self.tool = ToolType(self.tool_var.get())

    def on_scheme_change(self, event=None):
        self.session.config.color_scheme = ColorScheme(self.scheme_var.get())

    def on_settings_change(self, event=None):
        self.session.tank.configure(wave_speed=float(self.speed_var.get()),
                                    damping=float(self.damping_var.get()),
                                    time_scale=float(self.time_var.get()))

    def clear_waves(self):
        self.session.clear_waves()
        self._update_plots()

    def toggle_run(self):
        paused = self.session.toggle_pause()
        self.btn_start.config(text='Start' if paused else 'Pause')

    def step_once(self, dt=1.0 / 60.0):
        cfg = self.session.config
        was_paused = cfg.paused
        cfg.paused = False
        self.session.tick(dt)
        cfg.paused = was_paused
        self._update_plots()

    def _run_step(self):
        now = time.perf_counter()
        dt = 1.0 / 60.0 if self._last_tick is None else min(now - self._last_tick, 0.1)
        self._last_tick = now
        self.session.tick(dt)
        self._update_plots()
        self.master.after(self.delay_ms, self._run_step)

    def _update_plots(self):
        self.im.set_data(self.session.image)
        positions = [o.position for o in self.session.scene.objects.values()]
        if positions:
            xs, ys = zip(*positions)
            self.markers.set_data(xs, ys)
        else:
            self.markers.set_data([], [])

        probes = self.session.scene.probes
        for probe in probes:
            line = self.probe_lines.get(probe.label)
            if line is None:
                line, = self.ax_signal.plot([], [], color=probe.color, label=probe.label)
                self.probe_lines[probe.label] = line
                self.ax_signal.legend(loc='upper left')
            sig = np.array(probe.history)
            line.set_data(np.arange(sig.size), sig)
        if probes:
            self.ax_signal.relim()
            self.ax_signal.autoscale_view()

        stats = self.session.stats
        self.ax_field.set_title(f't = {stats.simulation_time:.2f}s   '
                                f'energy = {stats.wave_energy:.2f}   fps = {stats.fps:.0f}')
        self.canvas.draw_idle()


def main():
    setup_logging()
    root = tk.Tk()
    app = RippleTankGUI(root)
    root.mainloop()


if __name__ == '__main__':
    main()
