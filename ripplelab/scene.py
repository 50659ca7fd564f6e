"""
Scene objects, placement tools and the per-frame ripple tank pipeline.

The host feeds abstract pointer events (world position plus button edges)
and a frame time; the session runs the frame in a fixed order

    moving sources -> obstacles -> sources -> FDTD step -> probes -> colours

and hands back the RGBA image, the probe histories and the statistics.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ripplelab.colormap import colorize
from ripplelab.fdtd2d import RippleTank
from ripplelab.obstacles import (DoubleSlit, Reflector, RefractionBlock, SingleSlit,
                                 rasterize_obstacles)
from ripplelab.probes import PROBE_COLORS, Probe, Ruler, SimulationStats, update_probes
from ripplelab.sources import (LineSource, MovingSource, PhasedArray, PointSource,
                               WaveSource, advance_moving_sources, inject_sources)

logger = logging.getLogger(__name__)

PICK_RADIUS = 15.0

Vec2 = Tuple[float, float]


class ToolType(enum.Enum):
    SELECT = 'select'
    POINT_SOURCE = 'point_source'
    LINE_SOURCE = 'line_source'
    PHASED_ARRAY = 'phased_array'
    MOVING_SOURCE = 'moving_source'
    REFLECTOR = 'reflector'
    SINGLE_SLIT = 'single_slit'
    DOUBLE_SLIT = 'double_slit'
    REFRACTION_BLOCK = 'refraction_block'
    PROBE = 'probe'
    RULER = 'ruler'


@dataclass
class PointerEvent:
    position: Vec2
    just_pressed: bool = False
    pressed: bool = False
    just_released: bool = False
    right_pressed: bool = False


@dataclass
class SceneObject:
    id: int
    item: Any
    locked: bool = False

    @property
    def position(self):
        return self.item.position

    @position.setter
    def position(self, value):
        self.item.position = (float(value[0]), float(value[1]))


def _make_item(tool, position, object_id):
    if tool is ToolType.POINT_SOURCE:
        return PointSource(position=position)
    if tool is ToolType.LINE_SOURCE:
        return LineSource(position=position)
    if tool is ToolType.PHASED_ARRAY:
        return PhasedArray(position=position, count=5)
    if tool is ToolType.MOVING_SOURCE:
        return MovingSource(position=position, velocity=(50.0, 0.0))
    if tool is ToolType.REFLECTOR:
        return Reflector(position=position, width=80.0, height=8.0)
    if tool is ToolType.SINGLE_SLIT:
        return SingleSlit(position=position, width=120.0, height=8.0, slit_width=15.0)
    if tool is ToolType.DOUBLE_SLIT:
        return DoubleSlit(position=position, width=120.0, height=8.0,
                          slit_width=10.0, slit_separation=30.0)
    if tool is ToolType.REFRACTION_BLOCK:
        return RefractionBlock(position=position, width=60.0, height=60.0,
                               refractive_index=1.5)
    if tool is ToolType.PROBE:
        color = PROBE_COLORS[0] if object_id % 2 == 0 else PROBE_COLORS[1]
        label = f'Probe {chr(ord("A") + (object_id - 1) % 26)}'
        return Probe(label=label, color=color, position=position)
    if tool is ToolType.RULER:
        return Ruler(position=position)
    raise ValueError(f'{tool} does not place an object')


class Scene:
    """Placed objects in insertion order, with selection and drag state."""

    def __init__(self):
        self.objects: Dict[int, SceneObject] = {}
        self._last_id = 0
        self.selected: Optional[int] = None
        self.dragging: Optional[int] = None
        self.drag_offset = (0.0, 0.0)

    @classmethod
    def default(cls):
        """Scene with the single point source at the origin a fresh tank starts with."""
        scene = cls()
        scene.add(PointSource(), object_id=0)
        return scene

    def add(self, item, object_id=None):
        if object_id is None:
            self._last_id += 1
            object_id = self._last_id
        obj = SceneObject(object_id, item)
        self.objects[object_id] = obj
        return obj

    def spawn(self, tool, position):
        self._last_id += 1
        item = _make_item(tool, (float(position[0]), float(position[1])), self._last_id)
        obj = self.add(item, object_id=self._last_id)
        logger.debug('placed %s #%d at (%.1f, %.1f)', type(item).__name__, obj.id,
                     position[0], position[1])
        return obj

    def remove(self, object_id):
        obj = self.objects.pop(object_id, None)
        if self.selected == object_id:
            self.selected = None
        if self.dragging == object_id:
            self.dragging = None
        return obj

    def _of_type(self, types):
        return [o.item for o in self.objects.values() if isinstance(o.item, types)]

    @property
    def sources(self) -> List[WaveSource]:
        return self._of_type(WaveSource)

    @property
    def obstacles(self):
        return self._of_type((Reflector, SingleSlit, DoubleSlit, RefractionBlock))

    @property
    def probes(self) -> List[Probe]:
        return self._of_type(Probe)

    @property
    def rulers(self) -> List[Ruler]:
        return self._of_type(Ruler)

    def pick(self, position, radius=PICK_RADIUS):
        """First object whose anchor lies within `radius` world units of `position`."""
        for obj in self.objects.values():
            px, py = obj.position
            if math.hypot(px - position[0], py - position[1]) < radius:
                return obj
        return None

    def handle_pointer(self, event: PointerEvent, tool: ToolType = ToolType.SELECT):
        """Apply one frame of pointer input. Returns the object placed, if any."""
        placed = None
        x, y = event.position
        if event.just_pressed:
            if tool is ToolType.SELECT:
                found = self.pick(event.position)
                self.selected = self.dragging = found.id if found is not None else None
                if found is not None:
                    fx, fy = found.position
                    self.drag_offset = (fx - x, fy - y)
            else:
                placed = self.spawn(tool, event.position)

        if event.pressed and self.dragging is not None:
            obj = self.objects.get(self.dragging)
            if obj is not None and not obj.locked:
                obj.position = (x + self.drag_offset[0], y + self.drag_offset[1])

        if event.just_released:
            self.dragging = None

        if event.right_pressed:
            self.selected = None
        return placed


class RippleTankSession:
    """Ripple tank scene plus solver, ticked once per host frame."""

    def __init__(self, tank=None, scene=None):
        self.tank = tank if tank is not None else RippleTank()
        self.scene = scene if scene is not None else Scene.default()
        self.stats = SimulationStats()
        field = self.tank.field
        self.image = np.zeros((field.height, field.width, 4), dtype=np.uint8)

    @property
    def config(self):
        return self.tank.config

    @property
    def field(self):
        return self.tank.field

    def toggle_pause(self):
        self.config.paused = not self.config.paused
        logger.info('simulation %s', 'paused' if self.config.paused else 'resumed')
        return self.config.paused

    def clear_waves(self):
        self.field.clear()
        logger.info('waves cleared')

    def tick(self, dt):
        """Run one frame and return the RGBA8 image of the tank."""
        cfg = self.config
        field = self.field
        if not cfg.paused:
            advance_moving_sources(self.scene.sources, dt * cfg.time_scale,
                                   field.half_extent)
        rasterize_obstacles(field, self.scene.obstacles)
        if not cfg.paused:
            inject_sources(field, self.scene.sources, self.tank.accumulated_time)
        self.tank.step(dt)
        probes = self.scene.probes
        update_probes(field, probes)
        colorize(field.heights, field.obstacles, cfg.color_scheme, out=self.image)
        self.stats.update(field, self.tank.accumulated_time, dt, probes)
        return self.image
