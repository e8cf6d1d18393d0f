"""
Tunable constants for both world variants.

The arena variant is a fixed canvas-sized rectangle with enemies spawning on
its edges. The infinite variant streams 500px chunks around the player and
draws everything relative to a camera centred on the player.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

VARIANTS = ("arena", "infinite")


@dataclass(frozen=True)
class GameConfig:
    variant: str = "infinite"

    # Canvas
    width: int = 800
    height: int = 600
    grid_size: int = 50

    # Player
    player_radius: float = 15.0
    player_speed: float = 5.0
    player_max_health: float = 100.0
    first_level_exp: int = 100
    level_exp_factor: float = 1.5
    level_speed_bonus: float = 0.5
    shotgun_level: int = 3

    # Bullets
    bullet_max_distance: float = 1000.0
    shotgun_independent_pellets: bool = False  # True = per-pellet random base angle

    # Enemies
    enemy_radius: float = 20.0
    enemy_min_speed: float = 1.0
    enemy_speed_jitter: float = 0.5
    enemy_health: float = 5.0
    enemy_attack: float = 10.0
    kill_score: int = 10

    # Jewels
    jewel_radius: float = 8.0
    jewel_value: int = 20
    jewel_attract_radius: float = 100.0
    jewel_attract_speed: float = 2.0

    # Infinite world
    chunk_size: int = 500
    render_distance: int = 1
    enemies_per_chunk: int = 5
    jewels_per_chunk: int = 3
    tree_grid_step: int = 50
    tree_modulus: int = 200
    tree_radius: float = 20.0
    active_radius_factor: float = 1.5
    seeded_chunks: bool = False
    seed: Optional[int] = None

    # Arena edge spawning (ms)
    enemy_spawn_interval: float = 1000.0
    min_spawn_interval: float = 250.0
    spawn_decay: float = 0.85
    max_enemies: int = 50
    spawn_margin: float = 20.0

    def __post_init__(self):
        if self.variant not in VARIANTS:
            raise ValueError(f"Unknown variant {self.variant!r}, expected one of {VARIANTS}")
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if self.render_distance < 0:
            raise ValueError("render_distance must be >= 0")

    @property
    def is_infinite(self) -> bool:
        return self.variant == "infinite"

    @property
    def active_radius(self) -> float:
        """Distance from the player within which enemies and jewels are simulated"""
        return self.chunk_size * self.active_radius_factor

    @classmethod
    def arena(cls, **overrides) -> "GameConfig":
        return cls(variant="arena", **overrides)

    @classmethod
    def infinite(cls, **overrides) -> "GameConfig":
        return cls(variant="infinite", **overrides)

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "GameConfig":
        """Build a config from a plain dict, rejecting unknown keys"""
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**values)
