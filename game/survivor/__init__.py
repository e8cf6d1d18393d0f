"""Survivor module - top-down auto-shooter with arena and infinite-world variants"""

from .config import GameConfig
from .simulation import Simulation, Hud
from .loop import GameLoop
from .survivor_env import SurvivorEnv, run_random_episode

__all__ = ['GameConfig', 'Simulation', 'Hud', 'GameLoop', 'SurvivorEnv', 'run_random_episode']
