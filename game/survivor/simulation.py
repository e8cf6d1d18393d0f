"""
Per-frame simulation of a survivor run.

One Simulation owns one World at a time. `update(keys, now)` advances it by a
single frame in a fixed order:

    input -> (arena clamp) -> chunk streaming / edge spawning -> weapons
    -> bullets -> enemies -> player contact -> jewels -> health clamp -> HUD

Removal is mark-then-compact: entities are flagged during their pass and the
collections are rebuilt once the pass is over, so iteration order is the list
order at the start of the pass.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional

from .config import GameConfig
from .entities import Bullet, Enemy, Jewel, Player
from .utils import clamp, overlaps, within_radius
from .weapons import Weapon, WeaponKind, has_weapon
from .world import ChunkManager, EdgeSpawner, World

logger = logging.getLogger(__name__)

DIRECTION_KEYS = {
    "up": ("ArrowUp", "w"),
    "down": ("ArrowDown", "s"),
    "left": ("ArrowLeft", "a"),
    "right": ("ArrowRight", "d"),
}

EVENT_KEYS = ("shot", "hit", "kill", "jewel", "exp", "damage", "contact",
              "level_up", "chunk_in", "chunk_out")


def pressed(keys: Mapping[str, bool], direction: str) -> bool:
    return any(keys.get(k, False) for k in DIRECTION_KEYS[direction])


@dataclass(frozen=True)
class Hud:
    """Scalar fields shown to the player every frame"""
    health: float
    level: int
    score: int
    exp: int
    next_level_exp: int

    def lines(self) -> List[str]:
        return [
            f"Health: {self.health:g}",
            f"Level: {self.level}",
            f"Score: {self.score}",
            f"EXP: {self.exp} / {self.next_level_exp}",
        ]


class Simulation:
    """Survivor game state machine driven one frame at a time"""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        now: float = 0.0,
        on_game_over: Optional[Callable[[Hud], None]] = None,
    ):
        self.config = config or GameConfig()
        if seed is None:
            seed = self.config.seed
        self.rng = random.Random(seed)
        self.on_game_over = on_game_over
        self.chunk_manager = ChunkManager(self.config, self.rng)
        self.spawner = EdgeSpawner(self.config, self.rng)

        self.world: World = None  # type: ignore
        self.hud: Hud = None  # type: ignore
        self.runs = 0
        self.frame = 0
        self._now = now
        self.events: Dict[str, float] = {}

        self.reset_game(now)

    # ----------------------------
    # Lifecycle
    # ----------------------------

    def reset_game(self, now: float = 0.0):
        cfg = self.config
        if cfg.is_infinite:
            x, y = 0.0, 0.0
        else:
            x, y = cfg.width * 0.5, cfg.height * 0.5

        player = Player(
            x=x,
            y=y,
            radius=cfg.player_radius,
            speed=cfg.player_speed,
            health=cfg.player_max_health,
            max_health=cfg.player_max_health,
            next_level_exp=cfg.first_level_exp,
            weapons=[Weapon(WeaponKind.BASIC, last_fire=now)],
        )
        self.world = World(player=player)
        self.spawner.reset(now)
        self.frame = 0
        self._now = now
        self.events = {k: 0.0 for k in EVENT_KEYS}
        self._publish_hud()

    @property
    def is_over(self) -> bool:
        return self.world.player.health <= 0

    def game_over(self, now: float = 0.0):
        """End the current run: notify, then start over from scratch"""
        hud = self.hud
        logger.info("game over after %d frames: score=%d level=%d",
                    self.frame, hud.score, hud.level)
        if self.on_game_over is not None:
            self.on_game_over(hud)
        self.runs += 1
        self.reset_game(now)

    # ----------------------------
    # Frame update
    # ----------------------------

    def update(self, keys: Mapping[str, bool], now: float) -> Dict[str, float]:
        """Advance one frame; returns the event counters for this frame"""
        self._now = now
        self.events = {k: 0.0 for k in EVENT_KEYS}

        self._move_player(keys)
        self._populate(now)
        self._update_weapons(now)
        self._update_bullets()
        self._update_enemies()
        self._resolve_contacts()
        self.world.compact_enemies()
        self._update_jewels()
        self.world.compact_jewels()

        player = self.world.player
        player.health = clamp(player.health, 0.0, player.max_health)

        self.frame += 1
        self._publish_hud()
        return self.events

    def _move_player(self, keys: Mapping[str, bool]):
        player = self.world.player
        if pressed(keys, "up"):
            player.y -= player.speed
        if pressed(keys, "down"):
            player.y += player.speed
        if pressed(keys, "left"):
            player.x -= player.speed
        if pressed(keys, "right"):
            player.x += player.speed

        if not self.config.is_infinite:
            r = player.radius
            player.x = clamp(player.x, r, self.config.width - r)
            player.y = clamp(player.y, r, self.config.height - r)

    def _populate(self, now: float):
        if self.config.is_infinite:
            generated, unloaded = self.chunk_manager.stream(self.world)
            self.events["chunk_in"] += len(generated)
            self.events["chunk_out"] += len(unloaded)
        else:
            self.spawner.update(self.world, now)

    def _update_weapons(self, now: float):
        world = self.world
        for weapon in world.player.weapons:
            self.events["shot"] += weapon.update(
                now, world.player, world.bullets, self.rng,
                independent_pellets=self.config.shotgun_independent_pellets,
            )

    def _update_bullets(self):
        enemies = self.world.enemies
        for bullet in self.world.bullets:
            bullet.advance()
            for enemy in enemies:
                if not enemy.alive or enemy.health <= 0:
                    continue
                if overlaps(bullet, enemy):
                    enemy.take_damage(bullet.damage)
                    bullet.consumed = True
                    self.events["hit"] += 1
                    break

        self.world.compact_bullets(self.bullet_out_of_bounds)

    def bullet_out_of_bounds(self, bullet: Bullet) -> bool:
        cfg = self.config
        if cfg.is_infinite:
            return not within_radius(bullet, self.world.player, cfg.bullet_max_distance)
        return bullet.x < 0 or bullet.x > cfg.width or bullet.y < 0 or bullet.y > cfg.height

    def _is_active(self, entity) -> bool:
        if not self.config.is_infinite:
            return True
        return within_radius(entity, self.world.player, self.config.active_radius)

    def _update_enemies(self):
        world = self.world
        for enemy in world.enemies:
            if not enemy.alive or not self._is_active(enemy):
                continue
            enemy.chase(world.player)
            if enemy.health <= 0:
                self._kill(enemy)

    def _kill(self, enemy: Enemy):
        cfg = self.config
        enemy.alive = False
        self.world.add_jewel(Jewel(
            x=enemy.x,
            y=enemy.y,
            radius=cfg.jewel_radius,
            value=cfg.jewel_value,
            chunk_key=enemy.chunk_key,
        ))
        self.world.score += cfg.kill_score
        self.events["kill"] += 1

    def _resolve_contacts(self):
        player = self.world.player
        for enemy in self.world.enemies:
            if not enemy.alive or not self._is_active(enemy):
                continue
            if overlaps(player, enemy):
                player.health -= enemy.attack
                enemy.alive = False
                self.events["damage"] += enemy.attack
                self.events["contact"] += 1

    def _update_jewels(self):
        cfg = self.config
        player = self.world.player
        for jewel in self.world.jewels:
            if jewel.collected or not self._is_active(jewel):
                continue
            jewel.attract(player, cfg.jewel_attract_radius, cfg.jewel_attract_speed)
            if overlaps(player, jewel):
                self.collect(jewel)

    # ----------------------------
    # Progression
    # ----------------------------

    def collect(self, jewel: Jewel) -> bool:
        """Credit a jewel to the player; returns True if it caused a level-up"""
        if jewel.collected:
            return False
        jewel.collected = True
        self.world.player.exp += jewel.value
        self.events["jewel"] += 1
        self.events["exp"] += jewel.value
        return self.check_level_up()

    def check_level_up(self) -> bool:
        """Advance at most one level per call, even if exp clears two thresholds"""
        cfg = self.config
        player = self.world.player
        if player.exp < player.next_level_exp:
            return False

        player.level += 1
        player.prev_level_exp = player.next_level_exp
        player.next_level_exp = math.floor(player.next_level_exp * cfg.level_exp_factor)
        player.health = player.max_health
        player.speed += cfg.level_speed_bonus

        if player.level == cfg.shotgun_level and not has_weapon(player, WeaponKind.SHOTGUN):
            player.weapons.append(Weapon(WeaponKind.SHOTGUN, last_fire=self._now))

        self.events["level_up"] += 1
        logger.info("level up -> %d (next at %d exp)", player.level, player.next_level_exp)
        return True

    def _publish_hud(self):
        player = self.world.player
        self.hud = Hud(
            health=player.health,
            level=player.level,
            score=self.world.score,
            exp=player.exp,
            next_level_exp=player.next_level_exp,
        )
