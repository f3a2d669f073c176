"""Tests for ambient particles."""

import math
import random

import pytest

from engine.particles import AmbientParticle, ParticleSystem, SpawnArea
from engine.physics import Vec2


def _particle(decay, vel=None):
    return AmbientParticle(pos=Vec2(0, 0), vel=vel or Vec2(0, 0), decay=decay, rng=random.Random(0))


class TestParticleLife:
    """Test per-tick life decay."""

    @pytest.mark.parametrize("decay", [0.25, 0.2, 0.3, 0.125])
    def test_dies_after_ceil_ticks(self, decay):
        """A particle with life 1 should die after exactly ceil(1/decay) ticks."""
        pt = _particle(decay)
        ticks = 0
        while pt.alive:
            pt.advance(1 / 60)
            ticks += 1
        assert ticks == math.ceil(1 / decay)
        assert pt.ticks_to_live() == ticks

    def test_decay_ignores_dt(self):
        """Life decay should not depend on the frame delta."""
        slow, fast = _particle(0.1), _particle(0.1)
        slow.advance(0.1)
        fast.advance(0.001)
        assert slow.life == fast.life


class TestParticleMotion:
    """Test kinematic integration."""

    def test_position_integrates_velocity_by_dt(self):
        """Position should move by velocity * dt each tick."""
        pt = _particle(0.01, vel=Vec2(0, -60))
        pt.jitter = 0.0
        pt.advance(0.5)
        assert pt.pos.y == pytest.approx(-30)
        assert pt.pos.x == pytest.approx(0)

    def test_jitter_only_touches_horizontal_velocity(self):
        """Jitter should perturb vx but leave vy alone."""
        pt = _particle(0.01, vel=Vec2(0, -30))
        for _ in range(10):
            pt.advance(1 / 60)
        assert pt.vel.y == -30
        assert pt.vel.x != 0


class TestParticleSystem:
    """Test spawning and pruning."""

    def test_emit_biased_upward(self):
        """Emitted particles should always drift upward."""
        system = ParticleSystem(random.Random(3))
        for _ in range(200):
            pt = system.emit(Vec2(0, 0))
            assert pt.vel.y < 0
            assert 0.003 <= pt.decay <= 0.008
            assert 2 <= pt.sz <= 5

    def test_no_spawn_without_area(self):
        """Without a spawn area the system only ages existing particles."""
        system = ParticleSystem(random.Random(3), spawn_chance=1.0)
        for _ in range(10):
            system.update(1 / 60)
        assert system.particles == []

    def test_spawns_inside_area(self):
        """With certain spawning each tick adds one particle inside the area."""
        system = ParticleSystem(random.Random(3), spawn_chance=1.0)
        area = SpawnArea(Vec2(500, 500), 100, 50)
        system.update(0.0, area)
        assert len(system.particles) == 1
        pt = system.particles[0]
        assert 400 <= pt.pos.x <= 600
        assert 450 <= pt.pos.y <= 550

    def test_spawn_chance_is_bernoulli(self):
        """Spawn count should track the per-tick probability."""
        system = ParticleSystem(random.Random(8), spawn_chance=0.15)
        area = SpawnArea(Vec2(0, 0), 10, 10)
        for _ in range(1000):
            system.update(0.0, area)
            for pt in system.particles:
                pt.decay = 0.0
        assert 100 <= len(system.particles) <= 200

    def test_dead_particles_are_removed(self):
        """Particles should be pruned in the tick their life runs out."""
        system = ParticleSystem(random.Random(3))
        short = system.emit(Vec2(0, 0))
        long = system.emit(Vec2(0, 0))
        short.decay, long.decay = 0.5, 0.1
        system.update(1 / 60)
        assert len(system.particles) == 2
        system.update(1 / 60)
        assert system.particles == [long]

    def test_clear(self):
        """Clear should drop every particle."""
        system = ParticleSystem(random.Random(3))
        system.emit(Vec2(0, 0))
        system.clear()
        assert system.particles == []
