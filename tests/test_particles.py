import numpy as np
import pytest

from ripplelab.particles import ParticlePool


def emit_sequence(pool, lives):
    for i, life in enumerate(lives):
        pool.emit((i, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 1.0), life)


def test_emit_fills_slots_in_order():
    pool = ParticlePool(capacity=4)
    emit_sequence(pool, [5, 5])
    assert pool.next_index == 2
    assert list(pool.active) == [True, True, False, False]
    assert pool.positions[1, 0] == 1.0


def test_pool_capacity_invariant_under_overflow():
    capacity, k = 8, 5
    pool = ParticlePool(capacity=capacity)
    lives = list(range(1, capacity + k + 1))
    emit_sequence(pool, lives)
    assert len(pool) == capacity
    assert pool.next_index == k
    assert pool.active_count() == capacity
    # only the most recent `capacity` emissions remain
    assert sorted(pool.life.tolist()) == lives[-capacity:]
    # slot 0 was overwritten by emission #capacity
    assert pool.positions[0, 0] == capacity


def test_emission_overwrites_live_particles():
    pool = ParticlePool(capacity=3)
    emit_sequence(pool, [100, 100, 100])
    pool.emit((9.0, 9.0, 9.0), (0.0, 0.0, 0.0), (0.0, 0.0, 0.0), 2)
    assert pool.life[0] == 2
    assert pool.positions[0].tolist() == [9.0, 9.0, 9.0]
    assert pool.next_index == 1


def test_update_moves_by_velocity_per_tick_and_expires():
    pool = ParticlePool(capacity=4)
    pool.emit((0.0, 0.0, 0.0), (1.0, 2.0, -1.0), (1.0, 0.0, 0.0), 3)
    pool.emit((5.0, 5.0, 5.0), (1.0, 1.0, 1.0), (0.0, 1.0, 0.0), 1)
    pool.update()
    assert pool.positions[0].tolist() == [1.0, 2.0, -1.0]
    assert pool.life.tolist()[:2] == [2, 0]
    assert list(pool.active[:2]) == [True, False]
    pool.update()
    pool.update()
    assert pool.positions[0].tolist() == [3.0, 6.0, -3.0]
    assert pool.active_count() == 0
    # retired particles stay put
    pool.update()
    assert pool.positions[1].tolist() == [6.0, 6.0, 6.0]
    assert pool.life[0] == 0


def test_zero_life_particle_expires_on_next_update():
    pool = ParticlePool(capacity=2)
    pool.emit((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 1.0), 0)
    assert pool.active_count() == 1
    pool.update()
    assert pool.active_count() == 0
    assert pool.life[0] == 0


def test_emit_many_matches_sequential_emit(rng):
    n = 11
    positions = rng.normal(size=(n, 3))
    velocities = rng.normal(size=(n, 3))
    colors = rng.uniform(size=(n, 3))
    lives = rng.integers(1, 50, n)

    a = ParticlePool(capacity=7)
    a.emit(positions[0], velocities[0], colors[0], lives[0])
    for i in range(n):
        a.emit(positions[i], velocities[i], colors[i], lives[i])

    b = ParticlePool(capacity=7)
    b.emit(positions[0], velocities[0], colors[0], lives[0])
    b.emit_many(positions, velocities, colors, lives)

    assert a.next_index == b.next_index
    np.testing.assert_array_equal(a.positions, b.positions)
    np.testing.assert_array_equal(a.velocities, b.velocities)
    np.testing.assert_array_equal(a.colors, b.colors)
    np.testing.assert_array_equal(a.life, b.life)
    np.testing.assert_array_equal(a.active, b.active)


def test_emit_many_with_shared_color_and_life():
    pool = ParticlePool(capacity=10)
    pool.emit_many(np.zeros((4, 3)), np.ones((4, 3)), (0.5, 0.5, 0.5), 7)
    assert pool.active_count() == 4
    assert (pool.life[:4] == 7).all()
    assert np.allclose(pool.colors[:4], 0.5)
    pool.emit_many(np.zeros((0, 3)), np.zeros((0, 3)), (0.0, 0.0, 0.0), 1)
    assert pool.next_index == 4


def test_snapshot_only_returns_live_particles():
    pool = ParticlePool(capacity=5)
    emit_sequence(pool, [1, 3, 3])
    pool.update()
    positions, colors = pool.snapshot()
    assert positions.shape == (2, 3)
    assert colors.shape == (2, 3)
    assert positions[:, 0].tolist() == [2.0, 3.0]
    positions[:] = 0.0
    assert pool.positions[1, 0] == 2.0


def test_clear_resets_pool():
    pool = ParticlePool(capacity=3)
    emit_sequence(pool, [4, 4])
    pool.clear()
    assert pool.active_count() == 0
    assert pool.next_index == 0


def test_pool_needs_positive_capacity():
    with pytest.raises(ValueError):
        ParticlePool(capacity=0)
