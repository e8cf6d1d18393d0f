"""
Auto-firing weapons.

Weapon variants are a tag (WeaponKind) looked up in WEAPON_SPECS; the fire
pattern is fully described by its WeaponSpec row, so there is one Weapon class.
Timers run on an explicit millisecond clock supplied by the caller.
"""

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import List

from .entities import Bullet, Player
from .utils import Point

TAU = math.pi * 2


class WeaponKind(Enum):
    BASIC = "basic"
    SHOTGUN = "shotgun"


@dataclass(frozen=True)
class WeaponSpec:
    interval_ms: float
    pellets: int
    spread: float  # radians between neighbouring pellets
    damage: float
    bullet_speed: float = 7.0
    bullet_radius: float = 5.0


WEAPON_SPECS = {
    WeaponKind.BASIC: WeaponSpec(interval_ms=1000.0, pellets=1, spread=0.0, damage=10.0),
    WeaponKind.SHOTGUN: WeaponSpec(interval_ms=2000.0, pellets=5, spread=0.2, damage=8.0),
}


def volley_angles(spec: WeaponSpec, rng: random.Random, independent: bool = False) -> List[float]:
    """Angles for one volley, centred on a random base heading.

    With independent=True every pellet gets its own random base heading
    before the spread offset is applied.
    """
    half = spec.pellets // 2
    offsets = [spec.spread * i for i in range(-half, spec.pellets - half)]
    if independent:
        return [rng.random() * TAU + off for off in offsets]
    base = rng.random() * TAU
    return [base + off for off in offsets]


@dataclass(eq=False)
class Weapon:
    kind: WeaponKind
    last_fire: float = 0.0

    @property
    def spec(self) -> WeaponSpec:
        return WEAPON_SPECS[self.kind]

    def ready(self, now: float) -> bool:
        return now - self.last_fire >= self.spec.interval_ms

    def fire(self, origin: Point, bullets: List[Bullet], rng: random.Random,
             independent_pellets: bool = False) -> int:
        spec = self.spec
        angles = volley_angles(spec, rng, independent_pellets)
        for angle in angles:
            bullets.append(Bullet(
                x=origin.x,
                y=origin.y,
                angle=angle,
                damage=spec.damage,
                speed=spec.bullet_speed,
                radius=spec.bullet_radius,
            ))
        return len(angles)

    def update(self, now: float, origin: Point, bullets: List[Bullet], rng: random.Random,
               independent_pellets: bool = False) -> int:
        """Fire if the cadence has elapsed; returns the number of bullets spawned"""
        if not self.ready(now):
            return 0
        fired = self.fire(origin, bullets, rng, independent_pellets)
        self.last_fire = now
        return fired


def has_weapon(player: Player, kind: WeaponKind) -> bool:
    return any(w.kind is kind for w in player.weapons)
