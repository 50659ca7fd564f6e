"""
2D scalar wave (FDTD) solver for the ripple tank.

The tank is a fixed-size grid centred on the world origin. Each cell holds
the wave height at the current and previous time step plus a medium
coefficient (1.0 free water, 0.0 wall, in between a slower refracting
medium). The solver advances the field with the explicit second-order
leapfrog update of the wave equation on a 5-point Laplacian.

NOTES:
- Time step and grid spacing are folded into the empirical factor 0.4 on the
  wave speed; the update itself is per frame, `dt` only advances the clock
  used by the sources.
- Blow-up is contained by clamping every cell to [-5, 5], never reported.
- Boundaries: the outer ring of cells is halved after every step, a crude
  one-sided absorber (not a PML).
"""

import logging
import math

import numpy as np

from ripplelab.config import RippleTankConfig

logger = logging.getLogger(__name__)

GRID_SIZE = 256
GRID_SCALE = 2.0
SPEED_FACTOR = 0.4
AMPLITUDE_LIMIT = 5.0
EDGE_ABSORPTION = 0.5


class WaveField:
    def __init__(self, width=GRID_SIZE, height=GRID_SIZE, cell_scale=GRID_SCALE):
        """Create the three parallel buffers of the tank.

        width, height: number of cells in x/y
        cell_scale: world units per cell
        Buffers are flat and row-major: index = y * width + x.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f'grid size must be positive, got {width}x{height}')
        if cell_scale <= 0:
            raise ValueError(f'cell_scale must be positive, got {cell_scale}')
        self.width = int(width)
        self.height = int(height)
        self.cell_scale = float(cell_scale)
        size = self.width * self.height
        self.current = np.zeros(size, dtype=np.float32)    # wave height at time n
        self.previous = np.zeros(size, dtype=np.float32)   # at time n-1
        self.obstacle_map = np.ones(size, dtype=np.float32)  # medium coefficient

    @property
    def size(self):
        return self.width * self.height

    @property
    def heights(self):
        """2-D (height, width) view of `current`."""
        return self.current.reshape(self.height, self.width)

    @property
    def obstacles(self):
        """2-D (height, width) view of `obstacle_map`."""
        return self.obstacle_map.reshape(self.height, self.width)

    def clear(self):
        """Zero the wave history; obstacles are left as they are."""
        self.current.fill(0.0)
        self.previous.fill(0.0)

    def clear_obstacles(self):
        self.obstacle_map.fill(1.0)

    def index(self, x, y):
        return y * self.width + x

    def contains(self, x, y):
        return 0 <= x < self.width and 0 <= y < self.height

    def world_to_cell(self, position):
        """Map a world (x, y) position to the (possibly out of range) cell it falls in."""
        gx = math.floor(position[0] / self.cell_scale + self.width / 2.0)
        gy = math.floor(position[1] / self.cell_scale + self.height / 2.0)
        return gx, gy

    def cell_to_world(self, x, y):
        """World position of the lower-left corner of cell (x, y)."""
        return ((x - self.width / 2.0) * self.cell_scale,
                (y - self.height / 2.0) * self.cell_scale)

    @property
    def half_extent(self):
        """Half size of the tank in world units along x and y."""
        return (self.width / 2.0 * self.cell_scale, self.height / 2.0 * self.cell_scale)

    def sample(self, position):
        """Wave height under a world position, 0.0 outside the tank."""
        gx, gy = self.world_to_cell(position)
        if not self.contains(gx, gy):
            return 0.0
        return float(self.current[self.index(gx, gy)])

    def energy(self):
        """Rough field energy: kinetic (cur - prev)^2 plus potential cur^2 over all cells."""
        cur = self.current.astype(np.float64)
        prev = self.previous.astype(np.float64)
        return float(np.sum((cur - prev) ** 2 + cur ** 2))


def absorb_edges(grid, factor=EDGE_ABSORPTION):
    """Scale the four outer rows/columns of a 2-D field in place (corners twice)."""
    grid[0, :] *= factor
    grid[-1, :] *= factor
    grid[:, 0] *= factor
    grid[:, -1] *= factor
    return grid


class RippleTank:
    """Explicit FDTD stepper owning the wave field and the simulation clock."""

    def __init__(self, field=None, config=None):
        self.field = field if field is not None else WaveField()
        self.config = config if config is not None else RippleTankConfig()
        self.accumulated_time = 0.0
        # third buffer, rotated with current/previous so stepping never allocates
        self._next = np.zeros_like(self.field.current)
        self.check_stability()

    def check_stability(self):
        """Warn when the effective Courant number exceeds the 2D limit 1/sqrt(2)."""
        courant = self.config.wave_speed * SPEED_FACTOR
        stable = courant <= 1.0 / math.sqrt(2.0)
        if not stable:
            logger.warning('wave_speed %.2f gives Courant number %.2f > %.3f; '
                           'relying on amplitude clamping',
                           self.config.wave_speed, courant, 1.0 / math.sqrt(2.0))
        return stable

    def configure(self, **changes):
        """Apply (clamped) settings changes, re-checking stability if the speed moved."""
        old_speed = self.config.wave_speed
        self.config.update(**changes)
        if self.config.wave_speed != old_speed:
            self.check_stability()
        return self.config

    def reset(self):
        """Clear the waves and rewind the clock."""
        self.field.clear()
        self.accumulated_time = 0.0

    def step(self, dt):
        """Advance one frame. Returns False (and does nothing) while paused."""
        cfg = self.config
        if cfg.paused:
            return False
        self.accumulated_time += dt * cfg.time_scale

        g = self.field
        h, w = g.height, g.width
        u = g.current.reshape(h, w)
        u_prev = g.previous.reshape(h, w)
        medium = g.obstacle_map.reshape(h, w)
        u_next = self._next.reshape(h, w)

        if h > 2 and w > 2:
            c = u[1:-1, 1:-1]
            lap = u[:-2, 1:-1] + u[2:, 1:-1] + u[1:-1, :-2] + u[1:-1, 2:] - 4.0 * c
            m = medium[1:-1, 1:-1]
            c2 = (cfg.wave_speed * SPEED_FACTOR) ** 2 * m * m
            interior = cfg.damping * (2.0 * c - u_prev[1:-1, 1:-1] + c2 * lap)
            np.clip(interior, -AMPLITUDE_LIMIT, AMPLITUDE_LIMIT, out=interior)
            interior[m == 0.0] = 0.0
            u_next[1:-1, 1:-1] = interior

        # the stencil never reaches the border; the recycled buffer still holds old values there
        u_next[0, :] = 0.0
        u_next[-1, :] = 0.0
        u_next[:, 0] = 0.0
        u_next[:, -1] = 0.0
        absorb_edges(u_next)

        # rotate only once the whole next field is computed
        g.previous, g.current, self._next = g.current, self._next, g.previous
        return True

    def run(self, steps, dt, callback=None):
        """Run the stepper for given number of frames.
        callback(field, frame) called optionally every iteration.
        """
        for frame in range(steps):
            self.step(dt)
            if callback is not None:
                callback(self.field, frame)
