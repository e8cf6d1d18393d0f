"""
Configuration for the survivor game and its evaluation runs
"""

# ==============================================================================
# GAME VARIANTS
# Overrides passed to GameConfig; anything omitted keeps its default
# ==============================================================================

GAME_CONFIGS = {
    "arena": {
        "variant": "arena",
        "width": 800,
        "height": 600,
        "enemy_spawn_interval": 1000.0,  # ms between edge spawns at level 1
        "min_spawn_interval": 250.0,
        "spawn_decay": 0.85,             # interval multiplier per level
        "max_enemies": 50,
    },
    "infinite": {
        "variant": "infinite",
        "chunk_size": 500,
        "render_distance": 1,            # 3x3 chunks around the player
        "enemies_per_chunk": 5,
        "jewels_per_chunk": 3,
        "seeded_chunks": False,
    },
    "infinite_seeded": {
        "variant": "infinite",
        "seeded_chunks": True,
        "seed": 1234,
    },
}

# Environment parameters
ENV_CONFIG = {
    "dt": 1 / 60,
    "max_steps": 3600,  # 60 seconds at 60 FPS
    "k_enemies": 5,
    "m_jewels": 3,
}

# ==============================================================================
# REWARD SHAPING CONFIGURATIONS
# ==============================================================================

REWARD_CONFIG_BASELINE = {
    "name": "baseline",
    "description": "Balanced collecting and survival",
    "R_JEWEL": 0.5,
    "R_HIT": 0.1,
    "R_KILL": 1.0,
    "R_LEVEL": 2.0,
    "R_DAMAGE": 2.0,
    "R_TIME": 0.001,
    "R_DEATH": 5.0,
}

REWARD_CONFIG_SURVIVAL = {
    "name": "survival",
    "description": "Heavier damage and death penalties, reward staying alive",
    "R_JEWEL": 0.2,
    "R_HIT": 0.05,
    "R_KILL": 0.5,
    "R_LEVEL": 1.0,
    "R_DAMAGE": 5.0,
    "R_TIME": 0.005,
    "R_DEATH": 10.0,
}

REWARD_CONFIG_GREEDY = {
    "name": "greedy",
    "description": "Chase jewels and levels, accept contact damage",
    "R_JEWEL": 1.5,
    "R_HIT": 0.1,
    "R_KILL": 1.0,
    "R_LEVEL": 5.0,
    "R_DAMAGE": 0.5,
    "R_TIME": 0.0,
    "R_DEATH": 3.0,
}

REWARD_CONFIGS = {
    "baseline": REWARD_CONFIG_BASELINE,
    "survival": REWARD_CONFIG_SURVIVAL,
    "greedy": REWARD_CONFIG_GREEDY,
}

# ==============================================================================
# EVALUATION SETTINGS
# ==============================================================================

EVAL_CONFIG = {
    "seeds": [42, 123, 456],
    "n_episodes": 5,
    "policies": ["idle", "random", "kite"],
    "log_dir": "./logs",
}


def get_game_config(name: str) -> dict:
    """Return a copy of a named game variant"""
    if name not in GAME_CONFIGS:
        raise ValueError(f"Unknown game config: {name} (expected one of {sorted(GAME_CONFIGS)})")
    return dict(GAME_CONFIGS[name])


def get_reward_config(name: str) -> dict:
    if name not in REWARD_CONFIGS:
        raise ValueError(f"Unknown reward config: {name} (expected one of {sorted(REWARD_CONFIGS)})")
    return dict(REWARD_CONFIGS[name])
