"""
Gravity particle box: many independent particles falling under uniform
gravity and bouncing off the walls of a cube.

Every particle only reads the shared per-frame parameters (dt, gravity,
bounds) and its own state, so the update is a single set of whole-array
operations and its result does not depend on particle order.
"""

import logging

import numpy as np

from ripplelab.config import GravityConfig

logger = logging.getLogger(__name__)

RESTITUTION = 0.8


class GravityParticles:
    def __init__(self, config=None, seed=None):
        self.config = config if config is not None else GravityConfig()
        rng = np.random.default_rng(seed)
        n = self.config.particle_count
        b = self.config.bounds
        self.positions = np.column_stack([
            rng.uniform(-b, b, n),
            rng.uniform(0.0, 2.0 * b, n),
            rng.uniform(-b, b, n),
        ]).astype(np.float32)
        self.velocities = np.column_stack([
            rng.uniform(-10.0, 10.0, n),
            rng.uniform(-5.0, 15.0, n),
            rng.uniform(-10.0, 10.0, n),
        ]).astype(np.float32)
        logger.info('Spawned %d gravity particles in a %.0f-unit box', n, b)

    def __len__(self):
        return len(self.positions)

    @property
    def gravity_vector(self):
        return np.array([0.0, -self.config.gravity, 0.0], dtype=np.float32)

    def update(self, dt):
        """Semi-implicit Euler step with inelastic wall bounces. Returns False while paused."""
        cfg = self.config
        if cfg.paused:
            return False
        step = dt * cfg.speed_multiplier
        b = cfg.bounds
        pos, vel = self.positions, self.velocities

        vel += self.gravity_vector * step
        pos += vel * step

        # x and z: symmetric walls at +-b
        for axis in (0, 2):
            out = np.abs(pos[:, axis]) > b
            pos[out, axis] = np.sign(pos[out, axis]) * b
            vel[out, axis] *= -RESTITUTION
        # y: floor at -b, ceiling at +b
        low = pos[:, 1] < -b
        pos[low, 1] = -b
        vel[low, 1] *= -RESTITUTION
        high = pos[:, 1] > b
        pos[high, 1] = b
        vel[high, 1] *= -RESTITUTION
        return True
