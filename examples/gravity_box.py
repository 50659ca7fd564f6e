"""
Example: many particles bouncing in a box under gravity.

Usage:
    python examples/gravity_box.py [particle_count]

Prints the update rate and saves a side view (x/y) of the final state.
"""

import sys
import os
import time
import logging
import matplotlib.pyplot as plt
from pathlib import Path

root_path = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if root_path not in sys.path:
    sys.path.insert(0, root_path)

from ripplelab.config import GravityConfig
from ripplelab.gravity import GravityParticles
from ripplelab.logging_config import setup_logging

OUT_DIR = Path(__file__).resolve().parent / "outputs"
OUT_DIR.mkdir(exist_ok=True)

logger = logging.getLogger('ripplelab.examples.gravity')
setup_logging()

count = int(sys.argv[1]) if len(sys.argv) > 1 else 100_000
box = GravityParticles(GravityConfig(particle_count=count), seed=1)

nsteps = 300
start = time.perf_counter()
for _ in range(nsteps):
    box.update(1.0 / 60.0)
elapsed = time.perf_counter() - start
logger.info('%d particles x %d steps in %.2fs (%.0f steps/s)', len(box), nsteps, elapsed,
            nsteps / elapsed)

plt.figure(figsize=(6, 6))
plt.scatter(box.positions[:, 0], box.positions[:, 1], s=0.2, alpha=0.3)
b = box.config.bounds
plt.xlim(-b, b)
plt.ylim(-b, b)
plt.title('Gravity box after %d frames' % nsteps)
plt.savefig(OUT_DIR / 'gravity_box.png')
logger.info('Saved side view')
