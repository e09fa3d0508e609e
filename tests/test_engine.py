import math

import numpy as np
import pytest

from conftest import FixedRng
from spinwheel.engine import (
    FRICTION,
    MAX_SPIN_VELOCITY,
    MIN_SPIN_VELOCITY,
    STOP_THRESHOLD,
    SpinEngine,
    ticks_to_rest,
)
from spinwheel.errors import ConfigError

FRAME = 1 / 60


def spin_until_rest(engine, elapsed=FRAME, limit=10_000):
    ticks = 0
    while engine.is_spinning and ticks < limit:
        engine.tick(elapsed)
        ticks += 1
    return ticks


def test_initial_state(clock):
    engine = SpinEngine(3, clock=clock)
    assert engine.angle == 0.0
    assert engine.velocity == 0.0
    assert not engine.is_spinning


@pytest.mark.parametrize("count", [0, -1])
def test_needs_at_least_one_sector(count):
    with pytest.raises(ConfigError):
        SpinEngine(count)


def test_start_spin(clock, fixed_rng):
    engine = SpinEngine(4, rng=fixed_rng, clock=clock)
    engine.angle = 2.5
    clock.advance(10.0)
    engine.start_spin()

    assert engine.angle == 0.0
    assert engine.velocity == 1.0
    assert engine.is_spinning
    assert fixed_rng.calls == [(MIN_SPIN_VELOCITY, MAX_SPIN_VELOCITY)]
    assert engine.elapsed() == 0.0


def test_seeded_generator_is_reproducible():
    velocities = []
    for _ in range(2):
        engine = SpinEngine(5, rng=np.random.default_rng(1234))
        engine.start_spin()
        velocities.append(engine.velocity)
    assert velocities[0] == velocities[1]
    assert MIN_SPIN_VELOCITY <= velocities[0] <= MAX_SPIN_VELOCITY


def test_default_rng_samples_in_range():
    engine = SpinEngine(5)
    for _ in range(50):
        engine.start_spin()
        assert MIN_SPIN_VELOCITY <= engine.velocity <= MAX_SPIN_VELOCITY


def test_request_spin_ignored_while_spinning(clock):
    rng = FixedRng(1.0)
    engine = SpinEngine(2, rng=rng, clock=clock)
    assert engine.request_spin() is True
    engine.tick(0.5)
    angle, velocity = engine.angle, engine.velocity

    assert engine.request_spin() is False
    assert (engine.angle, engine.velocity) == (angle, velocity)
    assert len(rng.calls) == 1

    spin_until_rest(engine)
    assert engine.request_spin() is True
    assert len(rng.calls) == 2


def test_tick_integrates_then_applies_friction(fixed_rng):
    engine = SpinEngine(3, rng=fixed_rng)
    engine.start_spin()
    engine.tick(0.5)
    assert engine.angle == pytest.approx(0.5)
    assert engine.velocity == pytest.approx(FRICTION)
    engine.tick(0.5)
    assert engine.angle == pytest.approx(0.5 + 0.5 * FRICTION)
    assert engine.velocity == pytest.approx(FRICTION ** 2)


def test_friction_is_per_tick_not_per_second(fixed_rng):
    engine = SpinEngine(3, rng=fixed_rng)
    engine.start_spin()
    engine.tick(0.0)
    assert engine.angle == 0.0
    assert engine.velocity == pytest.approx(FRICTION)


@pytest.mark.parametrize("elapsed", [0.0, FRAME, 0.25, 3.0])
def test_velocity_never_increases(elapsed):
    engine = SpinEngine(6, rng=np.random.default_rng(7))
    engine.start_spin()
    previous = engine.velocity
    while engine.is_spinning:
        engine.tick(elapsed)
        assert engine.velocity <= previous
        previous = engine.velocity
    assert engine.velocity == 0.0


def test_ticks_to_rest_from_unit_velocity(fixed_rng):
    expected = math.ceil(math.log(STOP_THRESHOLD / 1.0) / math.log(FRICTION))
    assert ticks_to_rest(1.0) == expected == 491

    engine = SpinEngine(8, rng=fixed_rng)
    engine.start_spin()
    assert spin_until_rest(engine) == expected
    assert engine.velocity == 0.0
    assert not engine.is_spinning


@pytest.mark.parametrize("v0", [MIN_SPIN_VELOCITY, 0.77, MAX_SPIN_VELOCITY])
def test_ticks_to_rest_matches_simulation(v0):
    engine = SpinEngine(8, rng=FixedRng(v0))
    engine.start_spin()
    assert spin_until_rest(engine) == ticks_to_rest(v0)


def test_ticks_to_rest_already_stopped():
    assert ticks_to_rest(0.0) == 0


def test_resting_ticks_change_nothing(fixed_rng):
    engine = SpinEngine(5, rng=fixed_rng)
    engine.start_spin()
    spin_until_rest(engine)
    state = (engine.angle, engine.velocity, engine.is_spinning)
    for elapsed in (0.0, FRAME, 10.0):
        engine.tick(elapsed)
        assert (engine.angle, engine.velocity, engine.is_spinning) == state


def test_update_uses_time_since_spin_start(clock, fixed_rng):
    engine = SpinEngine(4, rng=fixed_rng, clock=clock)
    clock.advance(100.0)
    engine.start_spin()
    clock.advance(0.1)
    engine.update()
    assert engine.angle == pytest.approx(0.1)
    clock.advance(0.1)
    engine.update()
    assert engine.angle == pytest.approx(0.1 + FRICTION * 0.2)


@pytest.mark.parametrize("n", [1, 2, 3, 7, 24, 37])
def test_current_index_always_in_range(n):
    engine = SpinEngine(n)
    rng = np.random.default_rng(n)
    angles = list(rng.uniform(-1000.0, 1000.0, size=500))
    angles += [0.0, -0.0, math.pi, -math.pi, 2 * math.pi, -1e-20, 1e-20, 1e12, -1e12]
    angles += [k * 2 * math.pi / n for k in range(-2 * n, 2 * n + 1)]
    for angle in angles:
        engine.angle = angle
        assert 0 <= engine.current_index() < n


def test_two_choices_half_turn_boundary():
    engine = SpinEngine(2)
    engine.angle = math.pi
    assert engine.current_index() == 0


@pytest.mark.parametrize("n", [1, 2, 3, 7, 24])
def test_index_at_zero_angle(n):
    # the pointer sits on the edge between sector n-1 and sector 0;
    # the ceil in the formula resolves that tie to n-1
    engine = SpinEngine(n)
    assert engine.current_index() == n - 1


def test_index_after_start_spin_is_stable(fixed_rng):
    engine = SpinEngine(4, rng=fixed_rng)
    before = engine.current_index()
    engine.start_spin()
    assert engine.angle == 0.0
    assert engine.current_index() == before


def test_index_follows_rotation():
    # inside a sector (away from edges) each sector-width of rotation
    # moves the pointer back by one sector
    n = 6
    width = 2 * math.pi / n
    engine = SpinEngine(n)
    engine.angle = 0.5 * width
    assert engine.current_index() == n - 1
    engine.angle = 1.5 * width
    assert engine.current_index() == n - 2
    engine.angle = -0.5 * width
    assert engine.current_index() == 0


def test_index_is_periodic():
    n = 5
    engine = SpinEngine(n)
    for angle in (0.3, 1.1, 2.9, 4.4):
        engine.angle = angle
        first = engine.current_index()
        engine.angle = angle + 2 * math.pi * 3
        assert engine.current_index() == first
