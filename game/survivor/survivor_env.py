"""
SurvivorEnv - Gymnasium wrapper around the survivor simulation
--------------------------------------------------------------
- Same Simulation the playable window runs, one env step = one frame
- Simulated millisecond clock (dt per step), so weapon cadence is reproducible
- Discrete MultiDiscrete action space: [horizontal(3), vertical(3)]
- Vector observation: player state + top-K nearest enemies + top-M nearest jewels
- Arcade window opened lazily for render_mode="human" / "rgb_array"

Quick test:
    python -m game.survivor.survivor_env
"""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .config import GameConfig
from .loop import GameLoop
from .simulation import Simulation
from .utils import clamp, dist_sq, seed_everything
from .weapons import WeaponKind, has_weapon

DEFAULT_REWARD = {
    "R_JEWEL": 0.5,      # per jewel collected
    "R_HIT": 0.1,        # per bullet that connects
    "R_KILL": 1.0,       # per enemy killed by bullets
    "R_LEVEL": 2.0,      # per level gained
    "R_DAMAGE": 2.0,     # multiplied by damage as a fraction of max health
    "R_TIME": 0.001,     # survival bonus per frame
    "R_DEATH": 5.0,      # on the frame health reaches zero
}

# horizontal: 0 none, 1 left, 2 right; vertical: 0 none, 1 up, 2 down
_HORIZONTAL = (None, "ArrowLeft", "ArrowRight")
_VERTICAL = (None, "ArrowUp", "ArrowDown")


def action_to_keys(action) -> Dict[str, bool]:
    """Translate a MultiDiscrete action into a pressed-key map"""
    h, v = int(action[0]), int(action[1])
    keys = {k: False for k in _HORIZONTAL[1:] + _VERTICAL[1:]}
    if _HORIZONTAL[h % 3]:
        keys[_HORIZONTAL[h % 3]] = True
    if _VERTICAL[v % 3]:
        keys[_VERTICAL[v % 3]] = True
    return keys


class SurvivorEnv(gym.Env):
    """Survivor arcade game as a single-agent environment"""

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        variant: str = "infinite",
        dt: float = 1 / 60,
        max_steps: int = 3600,  # 60s at 60 FPS
        k_enemies: int = 5,
        m_jewels: int = 3,
        reward_config: Optional[Dict[str, float]] = None,
        game_overrides: Optional[Dict[str, Any]] = None,
    ):
        super().__init__()

        assert render_mode is None or render_mode in self.metadata["render_modes"]
        assert dt > 0, "dt must be positive"
        self.render_mode = render_mode

        self.config = GameConfig(variant=variant, **(game_overrides or {}))
        self.dt = dt
        self.max_steps = max_steps
        self.k_enemies = k_enemies
        self.m_jewels = m_jewels

        self.reward_config = dict(DEFAULT_REWARD)
        if reward_config:
            self.reward_config.update({k: v for k, v in reward_config.items() if k.startswith("R_")})

        self.action_space = spaces.MultiDiscrete([3, 3])

        # Player: health(1) exp progress(1) basic cooldown(1) shotgun owned(1)
        # Each enemy: rel pos(2) health(1)
        # Each jewel: rel pos(2)
        obs_dim = 4 + (self.k_enemies * 3) + (self.m_jewels * 2)
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        self.sim = Simulation(self.config)
        self._loop: Optional[GameLoop] = None
        self._window = None

        self._now = 0.0
        self._step_count = 0
        self._totals: Dict[str, float] = {}

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        seed_everything(seed)
        if seed is not None:
            self.sim.rng.seed(seed)
            self.action_space.seed(seed)

        self._now = 0.0
        self._step_count = 0
        self._totals = {"jewel": 0.0, "kill": 0.0, "damage": 0.0, "level_up": 0.0}
        self.sim.reset_game(self._now)

        return self._get_obs(), self._get_info()

    def step(self, action):
        self._now += self.dt * 1000.0
        events = self.sim.update(action_to_keys(action), self._now)
        for key in self._totals:
            self._totals[key] += events.get(key, 0.0)

        reward = self._compute_reward(events)

        terminated = self.sim.is_over
        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        obs = self._get_obs()
        info = self._get_info()

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # ----------------------------
    # Observation / reward / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        world = self.sim.world
        player = world.player
        half_w = self.config.width / 2
        half_h = self.config.height / 2

        span = max(1, player.next_level_exp - player.prev_level_exp)
        progress = clamp((player.exp - player.prev_level_exp) / span, 0.0, 1.0)

        basic = next((w for w in player.weapons if w.kind is WeaponKind.BASIC), None)
        cooldown = 0.0
        if basic is not None:
            cooldown = clamp((self._now - basic.last_fire) / basic.spec.interval_ms, 0.0, 1.0)

        obs_parts: List[float] = [
            (player.health / player.max_health) * 2 - 1,
            progress * 2 - 1,
            cooldown * 2 - 1,
            1.0 if has_weapon(player, WeaponKind.SHOTGUN) else -1.0,
        ]

        # Enemies: top-K nearest
        enemies_sorted = sorted(world.enemies, key=lambda e: dist_sq(e, player))
        for i in range(self.k_enemies):
            if i < len(enemies_sorted):
                e = enemies_sorted[i]
                obs_parts += [
                    clamp((e.x - player.x) / half_w, -1, 1),
                    clamp((e.y - player.y) / half_h, -1, 1),
                    e.health_fraction * 2 - 1,
                ]
            else:
                obs_parts += [0.0, 0.0, 0.0]

        # Jewels: top-M nearest
        jewels_sorted = sorted(world.jewels, key=lambda j: dist_sq(j, player))
        for i in range(self.m_jewels):
            if i < len(jewels_sorted):
                j = jewels_sorted[i]
                obs_parts += [
                    clamp((j.x - player.x) / half_w, -1, 1),
                    clamp((j.y - player.y) / half_h, -1, 1),
                ]
            else:
                obs_parts += [0.0, 0.0]

        return np.array(obs_parts, dtype=np.float32)

    def _compute_reward(self, events: Dict[str, float]) -> float:
        rc = self.reward_config
        max_health = self.sim.world.player.max_health

        reward = 0.0
        reward += rc["R_JEWEL"] * events.get("jewel", 0.0)
        reward += rc["R_HIT"] * events.get("hit", 0.0)
        reward += rc["R_KILL"] * events.get("kill", 0.0)
        reward += rc["R_LEVEL"] * events.get("level_up", 0.0)
        reward -= rc["R_DAMAGE"] * events.get("damage", 0.0) / max_health
        reward += rc["R_TIME"]

        if self.sim.is_over:
            reward -= rc["R_DEATH"]

        return float(reward)

    def _get_info(self) -> Dict[str, Any]:
        world = self.sim.world
        return {
            "health": world.player.health,
            "level": world.player.level,
            "score": world.score,
            "exp": world.player.exp,
            "num_enemies": len(world.enemies),
            "num_jewels": len(world.jewels),
            "num_bullets": len(world.bullets),
            "num_chunks": len(world.chunks),
            "jewels_collected": self._totals.get("jewel", 0.0),
            "enemies_killed": self._totals.get("kill", 0.0),
            "damage_taken": self._totals.get("damage", 0.0),
            "step": self._step_count,
        }

    # ----------------------------
    # Rendering with Arcade
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None

        if self._window is None:
            from .window import SurvivorWindow

            self._loop = GameLoop(self.sim)
            self._window = SurvivorWindow(
                self._loop, title="SurvivorEnv - Arcade",
                visible=self.render_mode == "human",
            )

        self._window.frame = self._loop.draw()
        self._window.dispatch_events()
        self._window.on_draw()

        if self.render_mode == "human":
            self._window.flip()
            return None
        return self._render_rgb_array()

    def _render_rgb_array(self) -> np.ndarray:
        import arcade

        image = arcade.get_image(0, 0, self.config.width, self.config.height)
        return np.asarray(image.convert("RGB"), dtype=np.uint8)

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None
            self._loop = None


# ----------------------------
# Quick sanity test
# ----------------------------

def run_random_episode(render: bool = True, variant: str = "infinite", seed: int = 42):
    """Run a random episode for testing"""
    env = SurvivorEnv(render_mode="human" if render else None, variant=variant)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0

    print("Running episode...")
    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward
        if render:
            time.sleep(env.dt)

    print(f"Random episode return: {total:.2f}  "
          f"(score={info['score']}, level={info['level']}, steps={info['step']})")
    env.close()
    return total, info


if __name__ == "__main__":
    run_random_episode(render=True)
