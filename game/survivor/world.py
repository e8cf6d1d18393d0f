"""
World state and enemy/jewel population.

World owns every mutable collection of a run. Two population strategies fill
it: ChunkManager streams 500px chunks around the player (infinite variant),
EdgeSpawner drops enemies on the canvas border (arena variant).
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .config import GameConfig
from .entities import Bullet, Chunk, ChunkKey, Enemy, Jewel, Player, Tree

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class World:
    """All entity collections for one run"""
    player: Player
    bullets: List[Bullet] = field(default_factory=list)
    enemies: List[Enemy] = field(default_factory=list)
    jewels: List[Jewel] = field(default_factory=list)
    terrain: List[Tree] = field(default_factory=list)
    chunks: Dict[ChunkKey, Chunk] = field(default_factory=dict)
    score: int = 0

    def add_enemy(self, enemy: Enemy):
        self.enemies.append(enemy)
        chunk = self.chunks.get(enemy.chunk_key) if enemy.chunk_key is not None else None
        if chunk is not None:
            chunk.enemies.append(enemy)

    def add_jewel(self, jewel: Jewel):
        """Track a jewel globally and, if it has a loaded owner, in its chunk"""
        self.jewels.append(jewel)
        if jewel.chunk_key is None:
            return
        chunk = self.chunks.get(jewel.chunk_key)
        if chunk is None:
            jewel.chunk_key = None
        else:
            chunk.jewels.append(jewel)

    def compact_enemies(self):
        """Drop enemies marked dead from the global list and their chunks"""
        dead = [e for e in self.enemies if not e.alive]
        if not dead:
            return
        self.enemies = [e for e in self.enemies if e.alive]
        for key, gone in _group_by_chunk(dead).items():
            chunk = self.chunks.get(key)
            if chunk is not None:
                chunk.enemies = _discard(chunk.enemies, gone)

    def compact_jewels(self):
        taken = [j for j in self.jewels if j.collected]
        if not taken:
            return
        self.jewels = [j for j in self.jewels if not j.collected]
        for key, gone in _group_by_chunk(taken).items():
            chunk = self.chunks.get(key)
            if chunk is not None:
                chunk.jewels = _discard(chunk.jewels, gone)

    def compact_bullets(self, out_of_bounds) -> int:
        before = len(self.bullets)
        self.bullets = [b for b in self.bullets if not b.consumed and not out_of_bounds(b)]
        return before - len(self.bullets)


def _group_by_chunk(items) -> Dict[ChunkKey, Set]:
    grouped: Dict[ChunkKey, Set] = {}
    for item in items:
        if item.chunk_key is not None:
            grouped.setdefault(item.chunk_key, set()).add(item)
    return grouped


def _discard(items: List, gone: Iterable) -> List:
    """Return items without the given objects; missing objects are ignored"""
    gone = gone if isinstance(gone, set) else set(gone)
    return [i for i in items if i not in gone]


def make_enemy(config: GameConfig, x: float, y: float, rng: random.Random,
               chunk_key: Optional[ChunkKey] = None) -> Enemy:
    speed = config.enemy_min_speed + rng.random() * config.enemy_speed_jitter
    return Enemy(
        x=x,
        y=y,
        speed=speed,
        health=config.enemy_health,
        max_health=config.enemy_health,
        attack=config.enemy_attack,
        radius=config.enemy_radius,
        chunk_key=chunk_key,
    )


def chunk_coord(x: float, y: float, chunk_size: int) -> ChunkKey:
    return math.floor(x / chunk_size), math.floor(y / chunk_size)


def neighbourhood(center: ChunkKey, distance: int) -> List[ChunkKey]:
    cx, cy = center
    return [
        (cx + dx, cy + dy)
        for dx in range(-distance, distance + 1)
        for dy in range(-distance, distance + 1)
    ]


class ChunkManager:
    """Generates and evicts chunks keyed to the player's chunk coordinate"""

    def __init__(self, config: GameConfig, rng: random.Random):
        self.config = config
        self.rng = rng

    def chunk_rng(self, key: ChunkKey) -> random.Random:
        if not self.config.seeded_chunks:
            return self.rng
        cx, cy = key
        # string seeds keep the sign of each coordinate
        return random.Random(f"{self.config.seed}:{cx}:{cy}")

    def stream(self, world: World) -> Tuple[List[ChunkKey], List[ChunkKey]]:
        """Make the loaded chunk set equal the neighbourhood of the player.

        Returns the keys generated and the keys unloaded this call.
        """
        size = self.config.chunk_size
        center = chunk_coord(world.player.x, world.player.y, size)
        wanted = neighbourhood(center, self.config.render_distance)

        generated = []
        for key in wanted:
            if key not in world.chunks:
                self.generate(world, key)
                generated.append(key)

        wanted_set = set(wanted)
        unloaded = [key for key in world.chunks if key not in wanted_set]
        for key in unloaded:
            self.unload(world, key)

        if generated or unloaded:
            logger.debug("chunks around %s: +%d -%d (loaded=%d)",
                         center, len(generated), len(unloaded), len(world.chunks))
        return generated, unloaded

    def generate(self, world: World, key: ChunkKey) -> Chunk:
        cfg = self.config
        rng = self.chunk_rng(key)
        cx, cy = key
        x0 = cx * cfg.chunk_size
        y0 = cy * cfg.chunk_size

        chunk = Chunk(key=key)
        world.chunks[key] = chunk

        for _ in range(cfg.enemies_per_chunk):
            x = x0 + rng.random() * cfg.chunk_size
            y = y0 + rng.random() * cfg.chunk_size
            world.add_enemy(make_enemy(cfg, x, y, rng, chunk_key=key))

        for _ in range(cfg.jewels_per_chunk):
            x = x0 + rng.random() * cfg.chunk_size
            y = y0 + rng.random() * cfg.chunk_size
            world.add_jewel(Jewel(x=x, y=y, radius=cfg.jewel_radius,
                                  value=cfg.jewel_value, chunk_key=key))

        for ox in range(0, cfg.chunk_size, cfg.tree_grid_step):
            for oy in range(0, cfg.chunk_size, cfg.tree_grid_step):
                wx = x0 + ox
                wy = y0 + oy
                if (wx + wy) % cfg.tree_modulus == 0:
                    tree = Tree(x=wx, y=wy, radius=cfg.tree_radius, chunk_key=key)
                    chunk.terrain.append(tree)
                    world.terrain.append(tree)

        return chunk

    def unload(self, world: World, key: ChunkKey) -> bool:
        """Remove a chunk and everything it owns; unknown keys are a no-op"""
        chunk = world.chunks.pop(key, None)
        if chunk is None:
            return False
        if chunk.enemies:
            world.enemies = _discard(world.enemies, chunk.enemies)
        if chunk.jewels:
            world.jewels = _discard(world.jewels, chunk.jewels)
        if chunk.terrain:
            world.terrain = _discard(world.terrain, chunk.terrain)
        return True


class EdgeSpawner:
    """Spawns enemies on a random canvas edge at a level-scaled interval"""

    def __init__(self, config: GameConfig, rng: random.Random):
        self.config = config
        self.rng = rng
        self.last_spawn = 0.0

    def reset(self, now: float):
        self.last_spawn = now

    def interval(self, level: int) -> float:
        cfg = self.config
        scaled = cfg.enemy_spawn_interval * cfg.spawn_decay ** max(0, level - 1)
        return max(cfg.min_spawn_interval, scaled)

    def update(self, world: World, now: float) -> Optional[Enemy]:
        if now - self.last_spawn < self.interval(world.player.level):
            return None
        self.last_spawn = now
        if len(world.enemies) >= self.config.max_enemies:
            return None
        return self.spawn(world)

    def spawn(self, world: World) -> Enemy:
        cfg = self.config
        margin = cfg.spawn_margin
        side = self.rng.choice(["top", "bottom", "left", "right"])

        if side == "top":
            x = self.rng.uniform(margin, cfg.width - margin)
            y = margin
        elif side == "bottom":
            x = self.rng.uniform(margin, cfg.width - margin)
            y = cfg.height - margin
        elif side == "left":
            x = margin
            y = self.rng.uniform(margin, cfg.height - margin)
        else:
            x = cfg.width - margin
            y = self.rng.uniform(margin, cfg.height - margin)

        enemy = make_enemy(cfg, x, y, self.rng)
        world.add_enemy(enemy)
        return enemy
