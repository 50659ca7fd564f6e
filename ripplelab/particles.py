"""
Fixed-capacity particle pool.

Particles live in a ring buffer stored as parallel numpy arrays (one row per
slot). Emission never fails and never grows the pool: it writes the slot at
`next_index`, whether or not that slot still holds a live particle, and moves
the cursor on. Under heavy emission the oldest particles are therefore cut
short instead of new ones being dropped.

Velocities are per-tick displacements: `update()` moves every live particle
by its velocity once, independent of frame time.
"""

from __future__ import annotations

import logging

import numpy as np

logger = logging.getLogger(__name__)

MAX_PARTICLES = 200_000


class ParticlePool:
    def __init__(self, capacity=MAX_PARTICLES):
        if capacity <= 0:
            raise ValueError(f'capacity must be positive, got {capacity}')
        self.capacity = int(capacity)
        self.positions = np.zeros((self.capacity, 3), dtype=np.float32)
        self.velocities = np.zeros((self.capacity, 3), dtype=np.float32)
        self.colors = np.ones((self.capacity, 3), dtype=np.float32)
        self.life = np.zeros(self.capacity, dtype=np.uint32)
        self.active = np.zeros(self.capacity, dtype=bool)
        self.next_index = 0

    def __len__(self):
        return self.capacity

    def emit(self, position, velocity, color, life):
        """Write one particle into the next slot, overwriting whatever is there."""
        i = self.next_index
        self.positions[i] = position
        self.velocities[i] = velocity
        self.colors[i] = color
        self.life[i] = life
        self.active[i] = True
        self.next_index = (i + 1) % self.capacity

    def emit_many(self, positions, velocities, colors, life):
        """Vectorized emit of n particles, same result as n calls to `emit` in order.

        positions, velocities, colors: (n, 3) arrays; life: scalar or (n,) array.
        """
        positions = np.asarray(positions, dtype=np.float32).reshape(-1, 3)
        n = positions.shape[0]
        if n == 0:
            return
        velocities = np.asarray(velocities, dtype=np.float32).reshape(n, 3)
        colors = np.broadcast_to(np.asarray(colors, dtype=np.float32), (n, 3))
        life = np.broadcast_to(np.asarray(life, dtype=np.uint32), (n,))
        if n > self.capacity:
            # only the last `capacity` writes survive a full lap
            skipped = n - self.capacity
            self.next_index = (self.next_index + skipped) % self.capacity
            positions, velocities = positions[skipped:], velocities[skipped:]
            colors, life = colors[skipped:], life[skipped:]
            n = self.capacity
        slots = (self.next_index + np.arange(n)) % self.capacity
        self.positions[slots] = positions
        self.velocities[slots] = velocities
        self.colors[slots] = colors
        self.life[slots] = life
        self.active[slots] = True
        self.next_index = int((self.next_index + n) % self.capacity)

    def update(self):
        """Advance live particles one tick and retire the ones whose life ran out."""
        alive = self.active
        self.positions[alive] += self.velocities[alive]
        remaining = self.life[alive]
        # saturating decrement, life is unsigned
        self.life[alive] = np.where(remaining > 0, remaining - 1, 0)
        self.active &= self.life > 0

    def active_count(self):
        return int(np.count_nonzero(self.active))

    def snapshot(self):
        """Copies of the positions and colours of live particles, for point-cloud rendering."""
        return self.positions[self.active].copy(), self.colors[self.active].copy()

    def clear(self):
        self.active[:] = False
        self.life[:] = 0
        self.next_index = 0
