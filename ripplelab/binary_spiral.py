"""
Binary spiral: two orbiting stars spraying particles into a shared pool.

Each star emits `emission_rate` particles per frame in random directions.
A particle's colour leans toward cyan when it leaves along the star's
direction of motion and toward red-pink when it leaves behind it, more
strongly the faster the star moves. Seen from above the overlapping shells
form a two-armed spiral whose brightness tracks particle density.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional

import numpy as np

from ripplelab.config import BinarySpiralConfig
from ripplelab.particles import MAX_PARTICLES, ParticlePool

logger = logging.getLogger(__name__)

DEFAULT_ORBIT_RADIUS = 20.0
MIN_ORBIT_RADIUS = 5.0
DRAG_EASING = 0.2
VELOCITY_GAIN = 5.0        # position delta per frame -> reported velocity
REFERENCE_SPEED = 3.0      # speed giving full colour shift
JITTER_RADIUS = 1.5

COLOR_SOURCE_A = (0.67, 0.0, 1.0)   # purple
COLOR_SOURCE_B = (1.0, 0.67, 0.0)   # orange
COLOR_FRONT = (0.0, 1.0, 1.0)       # cyan, leading side
COLOR_BACK = (1.0, 0.0, 0.33)       # red-pink, trailing side


class OrbitalSource:
    """A star on a circular orbit in the y=0 plane."""

    def __init__(self, index, angle, base_color, radius=DEFAULT_ORBIT_RADIUS):
        self.index = index
        self.angle = angle
        self.radius = radius
        self.base_color = np.asarray(base_color, dtype=np.float32)
        self.velocity = np.zeros(3, dtype=np.float32)
        self.last_position = self.position()

    def position(self):
        return np.array([math.cos(self.angle) * self.radius,
                         0.0,
                         math.sin(self.angle) * self.radius], dtype=np.float32)

    @property
    def speed(self):
        return float(np.linalg.norm(self.velocity))

    def drag_towards(self, target):
        """Ease the orbit radius toward the horizontal distance of a drag target."""
        dist = math.hypot(target[0], target[2])
        self.radius += (dist - self.radius) * DRAG_EASING
        self.radius = max(self.radius, MIN_ORBIT_RADIUS)

    def advance(self, orbit_speed, dt):
        self.angle += orbit_speed * dt
        new_pos = self.position()
        self.velocity = (new_pos - self.last_position) * VELOCITY_GAIN
        self.last_position = new_pos
        return new_pos


class RandomDirections:
    """Precomputed unit vectors uniformly spread over the sphere."""

    def __init__(self, count=5000, rng=None):
        rng = rng if rng is not None else np.random.default_rng()
        u = rng.uniform(-1.0, 1.0, count)
        theta = rng.uniform(0.0, 2.0 * math.pi, count)
        r = np.sqrt(1.0 - u * u)
        self.directions = np.stack([r * np.cos(theta), u, r * np.sin(theta)],
                                   axis=1).astype(np.float32)

    def __len__(self):
        return len(self.directions)

    def get(self, rng, n=None):
        """One direction, or an (n, 3) batch when n is given."""
        if n is None:
            return self.directions[rng.integers(len(self.directions))]
        return self.directions[rng.integers(len(self.directions), size=n)]


def emission_colors(base_color, directions, source_velocity):
    """Lerp each particle's colour from the star colour toward the front/back colour.

    The weight is |alignment| * min(speed / 3, 1) where alignment is the dot
    product of the particle direction with the star's unit velocity.
    """
    speed = float(np.linalg.norm(source_velocity))
    vel_dir = source_velocity / speed if speed > 0.0 else np.zeros(3, dtype=np.float32)
    intensity = min(speed / REFERENCE_SPEED, 1.0)
    alignment = directions @ vel_dir
    target = np.where((alignment > 0.0)[:, None],
                      np.asarray(COLOR_FRONT, dtype=np.float32),
                      np.asarray(COLOR_BACK, dtype=np.float32))
    t = (np.abs(alignment) * intensity)[:, None]
    base = np.asarray(base_color, dtype=np.float32)
    return base + (target - base) * t


def emit_from_source(pool: ParticlePool, source: OrbitalSource, config: BinarySpiralConfig,
                     directions: RandomDirections, rng) -> int:
    n = config.emission_rate
    jitter = directions.get(rng, n) * rng.uniform(0.0, JITTER_RADIUS, n)[:, None]
    positions = source.position() + jitter
    dirs = directions.get(rng, n)
    velocities = dirs * config.particle_speed
    colors = emission_colors(source.base_color, dirs, source.velocity)
    pool.emit_many(positions, velocities, colors, config.particle_life)
    return n


class BinarySpiral:
    """Simulation session: two stars, one pool, ticked once per frame."""

    def __init__(self, config=None, capacity=MAX_PARTICLES, seed=None):
        self.config = config if config is not None else BinarySpiralConfig()
        self.pool = ParticlePool(capacity)
        self.rng = np.random.default_rng(seed)
        self.directions = RandomDirections(rng=self.rng)
        self.sources: List[OrbitalSource] = [
            OrbitalSource(0, 0.0, COLOR_SOURCE_A),
            OrbitalSource(1, math.pi, COLOR_SOURCE_B),
        ]
        self.dragging: Optional[int] = None
        self.drag_target = np.zeros(3, dtype=np.float32)
        logger.info('Binary spiral initialized with %d particle slots', capacity)

    def start_drag(self, ray_origin, ray_direction, pick_radius=8.0):
        """Pick the star closest to a view ray and ray-cast the drag target onto y=0."""
        origin = np.asarray(ray_origin, dtype=np.float32)
        direction = np.asarray(ray_direction, dtype=np.float32)
        direction = direction / np.linalg.norm(direction)
        self.update_drag_target(origin, direction)
        for source in self.sources:
            pos = source.position()
            closest = origin + direction * float(np.dot(pos - origin, direction))
            if np.linalg.norm(closest - pos) < pick_radius:
                self.dragging = source.index
                break
        return self.dragging

    def update_drag_target(self, ray_origin, ray_direction):
        if ray_direction[1] == 0.0:
            return
        t = -ray_origin[1] / ray_direction[1]
        if t > 0.0:
            self.drag_target = np.asarray(ray_origin) + np.asarray(ray_direction) * t

    def end_drag(self):
        self.dragging = None

    def tick(self, dt):
        """Orbit, emit, then age the pool. Returns False while paused."""
        cfg = self.config
        if cfg.paused:
            return False
        for source in self.sources:
            if self.dragging == source.index:
                source.drag_towards(self.drag_target)
            source.advance(cfg.orbit_speed, dt)
        for source in self.sources:
            emit_from_source(self.pool, source, cfg, self.directions, self.rng)
        self.pool.update()
        return True

    @property
    def orbit_ring_scale(self):
        return max([DEFAULT_ORBIT_RADIUS] + [s.radius for s in self.sources]) / DEFAULT_ORBIT_RADIUS
