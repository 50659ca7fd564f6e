import numpy as np
import pytest

from ripplelab.fdtd2d import WaveField
from ripplelab.obstacles import (DoubleSlit, Reflector, RefractionBlock, SingleSlit, footprint,
                                 rasterize_obstacles, stamp_obstacle)


def blocked_columns(field, row):
    return np.flatnonzero(field.obstacles[row] == 0.0)


def test_reflector_blocks_its_whole_box(field):
    # 20x6 world units at scale 2 -> half extents 5 x 1 cells, inclusive box 11 x 3
    rasterize_obstacles(field, [Reflector(position=(0.0, 0.0), width=20.0, height=6.0)])
    blocked = field.obstacles == 0.0
    assert blocked.sum() == 11 * 3
    assert blocked[23:26, 27:38].all()


def test_single_slit_leaves_center_columns_open(field):
    rasterize_obstacles(field, [SingleSlit(position=(0.0, 0.0), width=60.0, height=4.0,
                                           slit_width=10.0)])
    # half_w = 15, slit_half = 2 around column 32
    cols = blocked_columns(field, 24)
    expected = [x for x in range(17, 48) if abs(x - 32) > 2]
    assert list(cols) == expected
    assert (field.obstacles[24, 30:35] == 1.0).all()


def test_double_slit_opens_two_symmetric_gaps(field):
    rasterize_obstacles(field, [DoubleSlit(position=(0.0, 0.0), width=60.0, height=4.0,
                                           slit_width=6.0, slit_separation=20.0)])
    # sep_half = 5, slit_half = 1 -> open offsets -6..-4 and 4..6
    open_offsets = [x - 32 for x in range(17, 48) if field.obstacles[24, x] == 1.0]
    assert open_offsets == [-6, -5, -4, 4, 5, 6]


def test_refraction_block_sets_speed_factor(field):
    rasterize_obstacles(field, [RefractionBlock(position=(0.0, 0.0), width=20.0, height=20.0,
                                                refractive_index=2.0)])
    assert field.obstacles[24, 32] == pytest.approx(0.5)
    assert np.isclose(field.obstacle_map, 0.5).sum() == 11 * 11
    assert (field.obstacle_map > 0.0).all()


def test_later_obstacles_overwrite_earlier_ones(field):
    block = RefractionBlock(position=(0.0, 0.0), width=20.0, height=20.0, refractive_index=1.5)
    wall = Reflector(position=(0.0, 0.0), width=20.0, height=20.0)
    rasterize_obstacles(field, [wall, block])
    assert field.obstacles[24, 32] == pytest.approx(1.0 / 1.5)
    rasterize_obstacles(field, [block, wall])
    assert field.obstacles[24, 32] == 0.0


def test_rasterization_is_stateless(field):
    obstacles = [
        SingleSlit(position=(-10.0, 5.0), width=80.0, height=6.0, slit_width=8.0),
        RefractionBlock(position=(30.0, -20.0), width=30.0, height=24.0, refractive_index=2.5),
        Reflector(position=(60.0, 40.0), width=50.0, height=8.0),
    ]
    rasterize_obstacles(field, obstacles)
    first = field.obstacle_map.copy()
    rasterize_obstacles(field, obstacles)
    np.testing.assert_array_equal(field.obstacle_map, first)


def test_moved_obstacle_leaves_no_trace(field):
    wall = Reflector(position=(0.0, 0.0), width=20.0, height=6.0)
    rasterize_obstacles(field, [wall])
    wall.position = (30.0, 20.0)
    rasterize_obstacles(field, [wall])
    assert field.obstacles[24, 32] == 1.0
    assert field.obstacles[34, 47] == 0.0


def test_obstacles_are_clipped_at_grid_edges(field):
    # centre column 2, half width 10 -> only columns 0..12 land on the grid
    wall = Reflector(position=(-60.0, 0.0), width=40.0, height=2.0)
    rasterize_obstacles(field, [wall])
    assert list(blocked_columns(field, 24)) == list(range(0, 13))


def test_obstacle_outside_grid_is_ignored(field):
    assert footprint(field, Reflector(position=(500.0, 500.0))) is None
    rasterize_obstacles(field, [Reflector(position=(500.0, 500.0))])
    assert (field.obstacle_map == 1.0).all()


def test_refractive_index_is_clamped():
    block = RefractionBlock(refractive_index=0.5)
    assert block.refractive_index == 1.0
    block.update(refractive_index=7.0)
    assert block.refractive_index == 3.0


def test_unknown_obstacle_kind_raises():
    class Blob:
        position = (0.0, 0.0)
        width = 10.0
        height = 10.0

    with pytest.raises(ValueError):
        stamp_obstacle(WaveField(16, 16), Blob())
