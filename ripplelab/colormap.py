"""
Colour mapping of the wave field for display.

The field is turned into an RGBA8 image (one pixel per cell, row-major) that a
host can upload as a texture or hand to `imshow`. Every scheme is a pure
per-cell function of the amplitude; blocked cells get a fixed colour.
"""

from __future__ import annotations

import enum
import math
from typing import Tuple

import numpy as np

BLOCKED_COLOR = (60, 60, 70)


class ColorScheme(enum.Enum):
    DEEP_OCEAN = 'deep_ocean'
    SCIENTIFIC = 'scientific'
    PHASE_COLOR = 'phase_color'
    GRAYSCALE = 'grayscale'


def hsl_to_rgb(h: int, s: int, l: int) -> Tuple[int, int, int]:
    """Convert hue (degrees), saturation and lightness (percent) to 8-bit RGB."""
    h = h / 360.0
    s = s / 100.0
    l = l / 100.0
    c = (1.0 - abs(2.0 * l - 1.0)) * s
    x = c * (1.0 - abs((h * 6.0) % 2.0 - 1.0))
    m = l - c / 2.0
    sector = int(h * 6.0)
    if sector == 0:
        r, g, b = c, x, 0.0
    elif sector == 1:
        r, g, b = x, c, 0.0
    elif sector == 2:
        r, g, b = 0.0, c, x
    elif sector == 3:
        r, g, b = 0.0, x, c
    elif sector == 4:
        r, g, b = x, 0.0, c
    else:
        r, g, b = c, 0.0, x
    return int((r + m) * 255.0), int((g + m) * 255.0), int((b + m) * 255.0)


def _hsl_to_rgb_array(hue, s, l):
    # vectorized twin of hsl_to_rgb, hue given as integer degrees
    h = hue / 360.0
    s = s / 100.0
    l = l / 100.0
    c = (1.0 - abs(2.0 * l - 1.0)) * s
    x = c * (1.0 - np.abs(np.mod(h * 6.0, 2.0) - 1.0))
    m = l - c / 2.0
    sector = np.minimum((h * 6.0).astype(np.int64), 5)
    zero = np.zeros_like(x)
    cc = np.full_like(x, c)
    r = np.choose(sector, [cc, x, zero, zero, x, cc])
    g = np.choose(sector, [x, cc, cc, x, zero, zero])
    b = np.choose(sector, [zero, zero, x, cc, cc, x])
    return ((r + m) * 255.0, (g + m) * 255.0, (b + m) * 255.0)


def _scheme_rgb(values, scheme):
    v = np.clip((values + 1.0) * 0.5, 0.0, 1.0)
    if scheme is ColorScheme.DEEP_OCEAN:
        return 20.0 + v * 40.0, 40.0 + v * 80.0, 80.0 + v * 175.0
    if scheme is ColorScheme.SCIENTIFIC:
        low = v < 0.5
        t_low = v * 2.0
        t_high = (v - 0.5) * 2.0
        r = np.where(low, 255.0 * (1.0 - t_low), 0.0)
        g = np.where(low, 255.0 * t_low, 255.0 * (1.0 - t_high))
        b = np.where(low, 0.0, 255.0 * t_high)
        return r, g, b
    if scheme is ColorScheme.PHASE_COLOR:
        hue = np.floor((np.arctan2(values, 0.5) + math.pi) / (2.0 * math.pi) * 360.0)
        return _hsl_to_rgb_array(hue, 80, 50)
    if scheme is ColorScheme.GRAYSCALE:
        gray = np.clip((values + 1.0) * 0.5 * 255.0, 0.0, 255.0)
        return gray, gray, gray
    raise ValueError(f'Unknown color scheme: {scheme!r}')


def colorize(values, obstacle_map, scheme=ColorScheme.DEEP_OCEAN, out=None):
    """Map amplitudes to an RGBA8 image.

    values, obstacle_map: arrays of identical shape (flat or 2-D).
    out: optional preallocated uint8 array of shape values.shape + (4,),
    reused by per-frame callers to avoid reallocating the texture.
    """
    values = np.asarray(values, dtype=np.float64)
    obstacle_map = np.asarray(obstacle_map)
    if out is None:
        out = np.empty(values.shape + (4,), dtype=np.uint8)
    r, g, b = _scheme_rgb(values, scheme)
    blocked = obstacle_map == 0.0
    # float -> u8 truncation, inputs already clipped to [0, 255]
    out[..., 0] = np.where(blocked, BLOCKED_COLOR[0], np.clip(r, 0.0, 255.0)).astype(np.uint8)
    out[..., 1] = np.where(blocked, BLOCKED_COLOR[1], np.clip(g, 0.0, 255.0)).astype(np.uint8)
    out[..., 2] = np.where(blocked, BLOCKED_COLOR[2], np.clip(b, 0.0, 255.0)).astype(np.uint8)
    out[..., 3] = 255
    return out
