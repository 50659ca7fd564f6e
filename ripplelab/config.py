"""
Runtime configuration for the ripple tank and the particle demos.

Every numeric setting carries a declared (min, max) range. Values coming from
sliders or scripts are clamped into that range when a config is created or
updated, so the solvers never see an out-of-range parameter.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, fields
from typing import Dict, Tuple

from ripplelab.colormap import ColorScheme

logger = logging.getLogger(__name__)

Range = Tuple[float, float]

# Inspector slider ranges for placed objects
FREQUENCY_RANGE: Range = (0.5, 10.0)
AMPLITUDE_RANGE: Range = (0.1, 2.0)
PHASE_RANGE: Range = (0.0, 2.0 * math.pi)
VELOCITY_RANGE: Range = (-100.0, 100.0)
REFRACTIVE_INDEX_RANGE: Range = (1.0, 3.0)


def clamp(value, lo, hi):
    """Clamp `value` into [lo, hi]. Integer ranges yield ints (slider floats are truncated).

    NaN has no place in a range and maps to `lo`.
    """
    if math.isnan(value):
        return lo
    clamped = min(max(value, lo), hi)
    if isinstance(lo, int) and isinstance(hi, int):
        return int(clamped)
    return clamped


class Bounded:
    """Mixin for dataclasses with a `RANGES` table of clamped fields."""

    RANGES: Dict[str, Range] = {}

    def __post_init__(self):
        for name, (lo, hi) in self.RANGES.items():
            self._set_clamped(name, getattr(self, name), lo, hi)

    def _set_clamped(self, name, value, lo, hi):
        clamped = clamp(value, lo, hi)
        if clamped != value:
            logger.debug('%s.%s=%r out of range [%s, %s], clamped to %r',
                          type(self).__name__, name, value, lo, hi, clamped)
        object.__setattr__(self, name, clamped)

    def update(self, **changes):
        """Apply UI edits, clamping every bounded field."""
        known = {f.name for f in fields(self)}
        for name, value in changes.items():
            if name not in known:
                raise AttributeError(f'{type(self).__name__} has no setting {name!r}')
            if name in self.RANGES:
                lo, hi = self.RANGES[name]
                self._set_clamped(name, value, lo, hi)
            else:
                setattr(self, name, value)
        return self


@dataclass
class RippleTankConfig(Bounded):
    wave_speed: float = 1.0
    damping: float = 0.995
    time_scale: float = 1.0
    paused: bool = False
    show_grid: bool = True
    color_scheme: ColorScheme = ColorScheme.DEEP_OCEAN

    RANGES = {
        'wave_speed': (0.1, 5.0),
        'damping': (0.9, 1.0),
        'time_scale': (0.1, 2.0),
    }


@dataclass
class BinarySpiralConfig(Bounded):
    orbit_speed: float = 1.5
    emission_rate: int = 1000
    particle_speed: float = 2.0
    particle_life: int = 300
    paused: bool = False
    show_grid: bool = True
    show_orbit_ring: bool = True

    RANGES = {
        'orbit_speed': (0.1, 4.0),
        'emission_rate': (200, 2000),
        'particle_speed': (1.0, 5.0),
        'particle_life': (1, 10_000),
    }


@dataclass
class GravityConfig(Bounded):
    particle_count: int = 100_000
    gravity: float = 9.8
    bounds: float = 50.0
    speed_multiplier: float = 1.0
    paused: bool = False

    RANGES = {
        'particle_count': (100, 1_000_000),
        'gravity': (0.0, 30.0),
        'bounds': (10.0, 200.0),
        'speed_multiplier': (0.1, 5.0),
    }
