"""
Tests for weapon cadence and fire patterns.
"""
import random

import pytest

from game.survivor.entities import Player
from game.survivor.weapons import (
    TAU, WEAPON_SPECS, Weapon, WeaponKind, has_weapon, volley_angles,
)


class SequenceRng:
    """random.Random stand-in returning a fixed sequence from random()."""

    def __init__(self, values):
        self.values = list(values)

    def random(self):
        return self.values.pop(0)


class TestCadence:

    def test_does_not_fire_before_interval(self):
        weapon = Weapon(WeaponKind.BASIC, last_fire=0.0)
        bullets = []
        assert weapon.update(999.0, Player(0, 0), bullets, random.Random(1)) == 0
        assert bullets == []
        assert weapon.last_fire == 0.0

    def test_fires_when_interval_elapses(self):
        weapon = Weapon(WeaponKind.BASIC, last_fire=0.0)
        bullets = []
        assert weapon.update(1000.0, Player(3, 4), bullets, random.Random(1)) == 1
        assert weapon.last_fire == 1000.0
        assert (bullets[0].x, bullets[0].y) == (3, 4)

    def test_timer_restarts_from_fire_time(self):
        weapon = Weapon(WeaponKind.BASIC, last_fire=0.0)
        bullets = []
        rng = random.Random(1)
        weapon.update(1200.0, Player(0, 0), bullets, rng)
        assert weapon.update(2100.0, Player(0, 0), bullets, rng) == 0
        assert weapon.update(2200.0, Player(0, 0), bullets, rng) == 1
        assert len(bullets) == 2

    def test_shotgun_cadence_is_two_seconds(self):
        weapon = Weapon(WeaponKind.SHOTGUN, last_fire=500.0)
        assert not weapon.ready(2499.0)
        assert weapon.ready(2500.0)


class TestFirePatterns:

    def test_basic_bullet_stats(self):
        bullets = []
        Weapon(WeaponKind.BASIC).fire(Player(0, 0), bullets, SequenceRng([0.25]))
        assert len(bullets) == 1
        assert bullets[0].angle == pytest.approx(0.25 * TAU)
        assert bullets[0].damage == 10
        assert bullets[0].speed == 7
        assert bullets[0].radius == 5

    def test_shotgun_fires_a_fan(self):
        spec = WEAPON_SPECS[WeaponKind.SHOTGUN]
        angles = volley_angles(spec, SequenceRng([0.5]))
        base = 0.5 * TAU
        assert angles == pytest.approx([base - 0.4, base - 0.2, base, base + 0.2, base + 0.4])

    def test_shotgun_independent_pellets(self):
        spec = WEAPON_SPECS[WeaponKind.SHOTGUN]
        draws = [0.1, 0.2, 0.3, 0.4, 0.5]
        angles = volley_angles(spec, SequenceRng(draws), independent=True)
        expected = [d * TAU + 0.2 * i for d, i in zip(draws, range(-2, 3))]
        assert angles == pytest.approx(expected)

    def test_shotgun_pellet_damage(self):
        bullets = []
        fired = Weapon(WeaponKind.SHOTGUN).fire(Player(0, 0), bullets, random.Random(3))
        assert fired == 5
        assert all(b.damage == 8 for b in bullets)
        gaps = [b2.angle - b1.angle for b1, b2 in zip(bullets, bullets[1:])]
        assert gaps == pytest.approx([0.2] * 4)


def test_has_weapon():
    player = Player(0, 0, weapons=[Weapon(WeaponKind.BASIC)])
    assert has_weapon(player, WeaponKind.BASIC)
    assert not has_weapon(player, WeaponKind.SHOTGUN)
