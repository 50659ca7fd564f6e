"""
Measurement tools for the ripple tank: oscilloscope probes, rulers and
running statistics.

A probe samples the wave height under its position once per frame and keeps
a bounded history for plotting (oldest samples drop off the front).
"""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterable, List, Optional, Sequence, Tuple

import numpy as np
from scipy.fftpack import fft, fftfreq

from ripplelab.fdtd2d import WaveField

MAX_PROBE_HISTORY = 512
PHASE_WINDOW = 10
SPARK_CHARS = '▁▂▄▆█'

Vec2 = Tuple[float, float]
Color = Tuple[float, float, float]

PROBE_COLORS: Tuple[Color, Color] = ((0.2, 0.6, 1.0), (1.0, 0.4, 0.4))


@dataclass
class Probe:
    label: str
    color: Color = PROBE_COLORS[1]
    position: Vec2 = (0.0, 0.0)
    capacity: int = MAX_PROBE_HISTORY
    history: Deque[float] = field(default_factory=deque, repr=False)

    def __post_init__(self):
        self.history = deque(self.history, maxlen=self.capacity)

    def record(self, value):
        # deque(maxlen) drops from the front once full
        self.history.append(float(value))

    def sample(self, grid: WaveField):
        value = grid.sample(self.position)
        self.record(value)
        return value

    @property
    def latest(self):
        return self.history[-1] if self.history else 0.0

    @property
    def minimum(self):
        return min(self.history) if self.history else math.inf

    @property
    def maximum(self):
        return max(self.history) if self.history else -math.inf

    def sparkline(self, width=40):
        """Tiny text oscilloscope of the last `width` samples."""
        recent = list(self.history)[-width:]
        chars = []
        for v in recent:
            normalized = min(max((v + 2.0) / 4.0, 0.0), 1.0)
            chars.append(SPARK_CHARS[min(int(normalized * 4.0), 4)])
        return ''.join(chars)


@dataclass
class Ruler:
    """Measuring stick; start/end are offsets from `position` in world units."""
    position: Vec2 = (0.0, 0.0)
    start: Vec2 = (-50.0, 0.0)
    end: Vec2 = (50.0, 0.0)

    @property
    def length(self):
        return math.hypot(self.end[0] - self.start[0], self.end[1] - self.start[1])


def update_probes(grid: WaveField, probes: Iterable[Probe]) -> None:
    for probe in probes:
        probe.sample(grid)


def dominant_frequency(history: Sequence[float], dt: float) -> float:
    """Strongest non-DC frequency (Hz) in a probe history sampled every `dt` seconds."""
    sig = np.asarray(history, dtype=float)
    if sig.size < 2 or dt <= 0:
        return 0.0
    sig = sig - np.mean(sig)
    freqs = fftfreq(sig.size, d=dt)
    spectrum = np.abs(fft(sig))
    mask = freqs > 0
    if not np.any(mask) or not np.any(spectrum[mask] > 0):
        return 0.0
    return float(freqs[mask][np.argmax(spectrum[mask])])


def probe_phase_difference(probes: Sequence[Probe]) -> Optional[float]:
    """Correlation-based phase estimate between the first two probes."""
    if len(probes) < 2:
        return None
    p1, p2 = probes[0].history, probes[1].history
    if len(p1) <= PHASE_WINDOW or len(p2) <= PHASE_WINDOW:
        return None
    n = min(len(p1), len(p2))
    a = list(p1)[n - PHASE_WINDOW:n]
    b = list(p2)[n - PHASE_WINDOW:n]
    correlation = sum(x * y for x, y in zip(a, b))
    return math.atan2(correlation, 1.0)


@dataclass
class SimulationStats:
    fps: float = 0.0
    simulation_time: float = 0.0
    wave_energy: float = 0.0
    probe_phase_diff: Optional[float] = None

    def update(self, grid: WaveField, simulation_time: float, dt: float,
               probes: List[Probe]):
        self.fps = 1.0 / dt if dt > 0 else 0.0
        self.simulation_time = simulation_time
        self.wave_energy = grid.energy()
        self.probe_phase_diff = probe_phase_difference(probes)
        return self
