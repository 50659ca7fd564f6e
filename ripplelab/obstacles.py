"""
Obstacles of the ripple tank and their rasterization into the medium map.

Each obstacle kind is its own small dataclass carrying only the data it needs.
`rasterize_obstacles` re-derives the whole medium map from the current
obstacle list every frame; nothing about obstacles is remembered in the grid
between frames, so moving or deleting an obstacle needs no cleanup.

Coordinates: obstacle positions and sizes are in world units; the
rasterizer converts them to cells with the grid's `cell_scale`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

import numpy as np

from ripplelab.config import REFRACTIVE_INDEX_RANGE, Bounded
from ripplelab.fdtd2d import WaveField

logger = logging.getLogger(__name__)

Vec2 = Tuple[float, float]


@dataclass
class Reflector(Bounded):
    position: Vec2 = (0.0, 0.0)
    width: float = 80.0
    height: float = 8.0

    RANGES = {'width': (10.0, 200.0)}


@dataclass
class SingleSlit(Bounded):
    position: Vec2 = (0.0, 0.0)
    width: float = 120.0
    height: float = 8.0
    slit_width: float = 15.0

    RANGES = {'width': (50.0, 200.0), 'slit_width': (5.0, 50.0)}


@dataclass
class DoubleSlit(Bounded):
    position: Vec2 = (0.0, 0.0)
    width: float = 120.0
    height: float = 8.0
    slit_width: float = 10.0
    slit_separation: float = 30.0

    RANGES = {'width': (50.0, 200.0), 'slit_width': (5.0, 30.0),
              'slit_separation': (10.0, 80.0)}


@dataclass
class RefractionBlock(Bounded):
    position: Vec2 = (0.0, 0.0)
    width: float = 60.0
    height: float = 60.0
    refractive_index: float = 1.5

    RANGES = {'width': (20.0, 150.0), 'height': (20.0, 150.0),
              'refractive_index': REFRACTIVE_INDEX_RANGE}

    @property
    def speed_factor(self):
        return 1.0 / self.refractive_index


Obstacle = Union[Reflector, SingleSlit, DoubleSlit, RefractionBlock]


def _cells(length, cell_scale):
    # half extent in whole cells, truncated like an integer cast
    return int(length / cell_scale / 2.0)


def footprint(field: WaveField, obstacle: Obstacle) -> Optional[Tuple[Tuple[slice, slice], np.ndarray]]:
    """Clip the obstacle's bounding box to the grid.

    Returns ((row_slice, col_slice), dx) where dx holds the column offsets of
    the clipped box relative to the obstacle's centre column, or None when the
    box lies entirely outside the grid.
    """
    cx, cy = field.world_to_cell(obstacle.position)
    half_w = _cells(obstacle.width, field.cell_scale)
    half_h = _cells(obstacle.height, field.cell_scale)
    x0, x1 = max(cx - half_w, 0), min(cx + half_w, field.width - 1)
    y0, y1 = max(cy - half_h, 0), min(cy + half_h, field.height - 1)
    if x0 > x1 or y0 > y1:
        return None
    dx = np.arange(x0, x1 + 1) - cx
    return (slice(y0, y1 + 1), slice(x0, x1 + 1)), dx


def stamp_obstacle(field: WaveField, obstacle: Obstacle) -> None:
    """Write one obstacle's medium coefficient into `field.obstacle_map`."""
    clipped = footprint(field, obstacle)
    if clipped is None:
        return
    box, dx = clipped
    region = field.obstacles[box]

    if isinstance(obstacle, Reflector):
        region[:] = 0.0
    elif isinstance(obstacle, SingleSlit):
        slit_half = _cells(obstacle.slit_width, field.cell_scale)
        region[:, np.abs(dx) > slit_half] = 0.0
    elif isinstance(obstacle, DoubleSlit):
        slit_half = _cells(obstacle.slit_width, field.cell_scale)
        sep_half = _cells(obstacle.slit_separation, field.cell_scale)
        open_cols = (np.abs(dx - sep_half) <= slit_half) | (np.abs(dx + sep_half) <= slit_half)
        region[:, ~open_cols] = 0.0
    elif isinstance(obstacle, RefractionBlock):
        region[:] = obstacle.speed_factor
    else:
        raise ValueError(f'Unknown obstacle kind: {type(obstacle).__name__}')


def rasterize_obstacles(field: WaveField, obstacles: Iterable[Obstacle]) -> None:
    """Rebuild the medium map from scratch; later obstacles overwrite earlier ones."""
    field.clear_obstacles()
    count = 0
    for obstacle in obstacles:
        stamp_obstacle(field, obstacle)
        count += 1
    logger.debug('rasterized %d obstacles', count)
