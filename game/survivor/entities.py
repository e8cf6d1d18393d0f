"""
Game entity dataclasses

Entities compare by identity (eq=False) so that list membership, set lookups
and chunk ownership never confuse two enemies standing on the same spot.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .utils import Point, angle_to, within_radius

ChunkKey = Tuple[int, int]


@dataclass(eq=False)
class Player:
    """Player-controlled survivor"""
    x: float
    y: float
    radius: float = 15.0
    speed: float = 5.0
    health: float = 100.0
    max_health: float = 100.0
    level: int = 1
    exp: int = 0
    next_level_exp: int = 100
    prev_level_exp: int = 0
    weapons: list = field(default_factory=list)


@dataclass(eq=False)
class Bullet:
    """Projectile travelling in a straight line"""
    x: float
    y: float
    angle: float
    damage: float
    speed: float = 7.0
    radius: float = 5.0
    consumed: bool = False

    def advance(self):
        self.x += math.cos(self.angle) * self.speed
        self.y += math.sin(self.angle) * self.speed


@dataclass(eq=False)
class Enemy:
    """Enemy entity that chases the player"""
    x: float
    y: float
    speed: float
    health: float = 5.0
    max_health: float = 5.0
    attack: float = 10.0
    radius: float = 20.0
    alive: bool = True
    chunk_key: Optional[ChunkKey] = None

    def chase(self, target: Point):
        angle = angle_to(self, target)
        self.x += math.cos(angle) * self.speed
        self.y += math.sin(angle) * self.speed

    def take_damage(self, damage: float):
        self.health -= damage

    @property
    def health_fraction(self) -> float:
        if self.max_health <= 0:
            return 0.0
        return max(0.0, min(1.0, self.health / self.max_health))


@dataclass(eq=False)
class Jewel:
    """Experience jewel dropped by enemies or scattered through chunks"""
    x: float
    y: float
    radius: float = 8.0
    value: int = 20
    collected: bool = False
    chunk_key: Optional[ChunkKey] = None

    def attract(self, target: Point, radius: float, speed: float) -> bool:
        """Drift toward target when it is within radius; returns True if moved"""
        if not within_radius(self, target, radius):
            return False
        angle = angle_to(self, target)
        self.x += math.cos(angle) * speed
        self.y += math.sin(angle) * speed
        return True


@dataclass(eq=False)
class Tree:
    """Decorative terrain feature"""
    x: float
    y: float
    radius: float = 20.0
    chunk_key: Optional[ChunkKey] = None


@dataclass(eq=False)
class Chunk:
    """One streamed square of the infinite world and the entities it owns"""
    key: ChunkKey
    enemies: List[Enemy] = field(default_factory=list)
    jewels: List[Jewel] = field(default_factory=list)
    terrain: List[Tree] = field(default_factory=list)
