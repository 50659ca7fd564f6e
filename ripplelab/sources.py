"""
Wave sources and their injection into the ripple tank.

Sources do not add energy to the field, they *drive* it: every frame the
cells under an enabled source are overwritten with the source's waveform
value at the current simulation time. Interference comes from the stepper's
history, not from summing sources at injection time, so two sources landing
on the same cell simply resolve to the last one written.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import Iterable, Tuple

from ripplelab.config import (AMPLITUDE_RANGE, FREQUENCY_RANGE, PHASE_RANGE,
                              VELOCITY_RANGE, Bounded, clamp)
from ripplelab.fdtd2d import WaveField

logger = logging.getLogger(__name__)

Vec2 = Tuple[float, float]

LINE_HALF_LENGTH = 20     # cells either side of the line source centre
ARRAY_SPACING = 8         # cells between phased array elements
ARRAY_PHASE_STEP = 0.2    # radians added per phased array element
PULSE_DUTY = 0.1
WRAP_MARGIN = 10.0        # world units inside the edge a wrapped moving source reappears at


class Waveform(enum.Enum):
    SINE = 'sine'
    SQUARE = 'square'
    PULSE = 'pulse'


def waveform_value(waveform, amplitude, frequency, t, phase):
    """Value of a periodic drive signal at time t."""
    if waveform is Waveform.SINE:
        return amplitude * math.sin(2.0 * math.pi * frequency * t + phase)
    if waveform is Waveform.SQUARE:
        s = math.sin(2.0 * math.pi * frequency * t + phase)
        # sign(0) counts as positive
        return amplitude if s >= 0.0 else -amplitude
    if waveform is Waveform.PULSE:
        cycle = (frequency * t + phase / (2.0 * math.pi)) % 1.0
        return amplitude if cycle < PULSE_DUTY else 0.0
    raise ValueError(f'Unknown waveform: {waveform!r}')


@dataclass
class WaveSource(Bounded):
    """Common drive settings; use one of the concrete kinds below."""
    position: Vec2 = (0.0, 0.0)
    frequency: float = 2.0
    amplitude: float = 1.0
    phase: float = 0.0
    enabled: bool = True
    waveform: Waveform = Waveform.SINE

    RANGES = {
        'frequency': FREQUENCY_RANGE,
        'amplitude': AMPLITUDE_RANGE,
        'phase': PHASE_RANGE,
    }

    def value(self, t):
        return waveform_value(self.waveform, self.amplitude, self.frequency, t, self.phase)


@dataclass
class PointSource(WaveSource):
    pass


@dataclass
class LineSource(WaveSource):
    pass


@dataclass
class PhasedArray(WaveSource):
    """`count` sine emitters in a row, element i lagging by 0.2*i rad."""
    count: int = 5

    RANGES = {**WaveSource.RANGES, 'count': (1, 32)}

    def element_value(self, i, t):
        return self.amplitude * math.sin(
            2.0 * math.pi * self.frequency * t + self.phase + i * ARRAY_PHASE_STEP)


@dataclass
class MovingSource(WaveSource):
    """Point source drifting with a constant velocity (world units per second)."""
    velocity: Vec2 = (50.0, 0.0)

    def __post_init__(self):
        super().__post_init__()
        self._clamp_velocity()

    def update(self, **changes):
        super().update(**changes)
        self._clamp_velocity()
        return self

    def _clamp_velocity(self):
        self.velocity = (clamp(self.velocity[0], *VELOCITY_RANGE),
                         clamp(self.velocity[1], *VELOCITY_RANGE))


def _write_cell(field, x, y, value):
    if field.contains(x, y):
        field.current[field.index(x, y)] = value
        return 1
    return 0


def inject_source(field: WaveField, source: WaveSource, t: float) -> int:
    """Overwrite the cells driven by one source. Returns the number of cells written."""
    gx, gy = field.world_to_cell(source.position)

    if isinstance(source, (PointSource, MovingSource)):
        return _write_cell(field, gx, gy, source.value(t))

    if isinstance(source, LineSource):
        if not 0 <= gy < field.height:
            return 0
        x0 = max(gx - LINE_HALF_LENGTH, 0)
        x1 = min(gx + LINE_HALF_LENGTH, field.width)
        if x0 >= x1:
            return 0
        field.heights[gy, x0:x1] = source.value(t)
        return x1 - x0

    if isinstance(source, PhasedArray):
        start_x = gx - ((source.count - 1) * ARRAY_SPACING) // 2
        written = 0
        for i in range(source.count):
            written += _write_cell(field, start_x + i * ARRAY_SPACING, gy,
                                   source.element_value(i, t))
        return written

    raise ValueError(f'Unknown source kind: {type(source).__name__}')


def inject_sources(field: WaveField, sources: Iterable[WaveSource], t: float) -> int:
    """Drive the field with every enabled source, in iteration order."""
    written = 0
    for source in sources:
        if source.enabled:
            written += inject_source(field, source, t)
    return written


def advance_moving_sources(sources, dt, bounds):
    """Move every MovingSource by velocity*dt, wrapping to the far side past `bounds`.

    bounds: (half_width, half_height) of the tank in world units; each axis
    wraps at its own half extent.
    """
    bound_x, bound_y = bounds
    for source in sources:
        if not isinstance(source, MovingSource):
            continue
        x = source.position[0] + source.velocity[0] * dt
        y = source.position[1] + source.velocity[1] * dt
        if abs(x) > bound_x:
            x = -math.copysign(bound_x - WRAP_MARGIN, x)
        if abs(y) > bound_y:
            y = -math.copysign(bound_y - WRAP_MARGIN, y)
        source.position = (x, y)
