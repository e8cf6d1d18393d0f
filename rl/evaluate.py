"""
Evaluation script for scripted survivor policies
Records per-episode reward, score, level, jewels, kills and damage to CSV.
"""

import argparse
import csv
import os
from typing import Callable, Dict, List, Optional

import numpy as np

from game.survivor import SurvivorEnv
from game.survivor.utils import dist_sq
from rl.configs.survivor_config import ENV_CONFIG, get_game_config, get_reward_config

CSV_FIELDS = [
    "policy", "episode", "seed", "reward", "length",
    "score", "level", "jewels", "kills", "damage", "survived",
]

KITE_DISTANCE = 200.0


def _axis(delta: float, deadzone: float = 2.0) -> int:
    """Map a signed delta onto the (none, negative, positive) action index"""
    if abs(delta) < deadzone:
        return 0
    return 2 if delta > 0 else 1


def idle_policy(env: SurvivorEnv) -> np.ndarray:
    return np.array([0, 0], dtype=np.int64)


def random_policy(env: SurvivorEnv) -> np.ndarray:
    return env.action_space.sample()


def kite_policy(env: SurvivorEnv) -> np.ndarray:
    """Back away from the nearest close enemy, otherwise walk to the nearest jewel"""
    world = env.sim.world
    player = world.player

    if world.enemies:
        nearest = min(world.enemies, key=lambda e: dist_sq(e, player))
        if dist_sq(nearest, player) <= KITE_DISTANCE * KITE_DISTANCE:
            return np.array([_axis(player.x - nearest.x), _axis(player.y - nearest.y)], dtype=np.int64)

    if world.jewels:
        target = min(world.jewels, key=lambda j: dist_sq(j, player))
        return np.array([_axis(target.x - player.x), _axis(target.y - player.y)], dtype=np.int64)

    return idle_policy(env)


POLICIES: Dict[str, Callable[[SurvivorEnv], np.ndarray]] = {
    "idle": idle_policy,
    "random": random_policy,
    "kite": kite_policy,
}


def make_env(game: str = "infinite", reward: str = "baseline", render: bool = False,
             **env_overrides) -> SurvivorEnv:
    """Factory function to create the environment from named configs"""
    game_cfg = get_game_config(game)
    variant = game_cfg.pop("variant")
    env_kwargs = dict(ENV_CONFIG)
    env_kwargs.update(env_overrides)
    return SurvivorEnv(
        render_mode="human" if render else None,
        variant=variant,
        reward_config=get_reward_config(reward),
        game_overrides=game_cfg,
        **env_kwargs,
    )


def evaluate_policy(
    policy: str = "kite",
    n_episodes: int = 5,
    seed: Optional[int] = 42,
    game: str = "infinite",
    reward: str = "baseline",
    render: bool = False,
    csv_path: Optional[str] = None,
    **env_overrides,
):
    """
    Evaluate a scripted policy

    Args:
        policy: One of POLICIES
        n_episodes: Number of episodes to evaluate
        seed: Base seed; episode i uses seed + i
        game: Name of a GAME_CONFIGS entry
        reward: Name of a REWARD_CONFIGS entry
        render: Whether to open the arcade window
        csv_path: Optional CSV file for per-episode metrics
    """
    if policy not in POLICIES:
        raise ValueError(f"Unknown policy: {policy}")
    act = POLICIES[policy]
    env = make_env(game=game, reward=reward, render=render, **env_overrides)

    rows: List[dict] = []
    for episode in range(n_episodes):
        ep_seed = seed + episode if seed is not None else None
        obs, info = env.reset(seed=ep_seed)

        terminated = False
        truncated = False
        total_reward = 0.0
        steps = 0

        while not (terminated or truncated):
            obs, reward_, terminated, truncated, info = env.step(act(env))
            total_reward += reward_
            steps += 1

        rows.append({
            "policy": policy,
            "episode": episode,
            "seed": ep_seed,
            "reward": total_reward,
            "length": steps,
            "score": info["score"],
            "level": info["level"],
            "jewels": info["jewels_collected"],
            "kills": info["enemies_killed"],
            "damage": info["damage_taken"],
            "survived": int(not terminated),
        })

        print(f"Episode {episode + 1}/{n_episodes}: "
              f"Reward = {total_reward:.2f}, Length = {steps}, "
              f"Score = {info['score']}, Level = {info['level']}")

    env.close()

    if csv_path:
        write_csv(csv_path, rows)

    episode_rewards = [r["reward"] for r in rows]
    episode_lengths = [r["length"] for r in rows]
    results = {
        "mean_reward": float(np.mean(episode_rewards)),
        "std_reward": float(np.std(episode_rewards)),
        "mean_length": float(np.mean(episode_lengths)),
        "mean_score": float(np.mean([r["score"] for r in rows])),
        "survival_rate": float(np.mean([r["survived"] for r in rows])),
        "episodes": rows,
    }

    print("\n" + "=" * 50)
    print(f"Evaluation Results ({policy}, {n_episodes} episodes):")
    print(f"Mean Reward: {results['mean_reward']:.2f} ± {results['std_reward']:.2f}")
    print(f"Mean Episode Length: {results['mean_length']:.1f}")
    print(f"Mean Score: {results['mean_score']:.1f}")
    print(f"Survival Rate: {results['survival_rate']:.0%}")
    print("=" * 50)

    return results


def write_csv(path: str, rows: List[dict]):
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
    print(f"[evaluate] Metrics written to {path}")


def main():
    parser = argparse.ArgumentParser(description="Evaluate scripted survivor policies")
    parser.add_argument(
        "--policy",
        type=str,
        default="kite",
        choices=sorted(POLICIES),
        help="Policy to evaluate (default: kite)",
    )
    parser.add_argument(
        "--game",
        type=str,
        default="infinite",
        help="Game config name (default: infinite)",
    )
    parser.add_argument(
        "--reward",
        type=str,
        default="baseline",
        help="Reward config name (default: baseline)",
    )
    parser.add_argument(
        "--n-episodes",
        type=int,
        default=5,
        help="Number of evaluation episodes (default: 5)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed (default: 42)",
    )
    parser.add_argument(
        "--render",
        action="store_true",
        help="Open the arcade window while evaluating",
    )
    parser.add_argument(
        "--csv",
        type=str,
        default=None,
        help="Write per-episode metrics to this CSV file",
    )
    parser.add_argument(
        "--compare-random",
        action="store_true",
        help="Also evaluate the random policy for comparison",
    )

    args = parser.parse_args()

    results = evaluate_policy(
        policy=args.policy,
        n_episodes=args.n_episodes,
        seed=args.seed,
        game=args.game,
        reward=args.reward,
        render=args.render,
        csv_path=args.csv,
    )

    if args.compare_random and args.policy != "random":
        print("\n")
        random_results = evaluate_policy(
            policy="random",
            n_episodes=args.n_episodes,
            seed=args.seed,
            game=args.game,
            reward=args.reward,
        )
        improvement = results["mean_reward"] - random_results["mean_reward"]
        print(f"\nImprovement over random: {improvement:.2f}")


if __name__ == "__main__":
    main()
