"""
Game-loop driver: one simulation update then one draw per tick, restarting the
run when the player dies.
"""

from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from .config import GameConfig
from .render import DrawCall, build_draw_list, grid_lines, camera_offset
from .simulation import Hud, Simulation


@dataclass
class Frame:
    """What the presentation layer needs for one tick"""
    calls: List[DrawCall]
    grid: list
    hud: Hud
    events: dict = field(default_factory=dict)
    ended: bool = False


class GameLoop:
    def __init__(self, simulation: Optional[Simulation] = None, config: Optional[GameConfig] = None):
        self.sim = simulation or Simulation(config)
        self.final_huds: List[Hud] = []

    @property
    def config(self) -> GameConfig:
        return self.sim.config

    def tick(self, keys: Mapping[str, bool], now: float) -> Frame:
        """Update, then draw; a finished run is reported once and reset"""
        events = self.sim.update(keys, now)
        frame = self.draw()
        frame.events = events

        if self.sim.is_over:
            frame.ended = True
            self.final_huds.append(self.sim.hud)
            self.sim.game_over(now)
        return frame

    def draw(self) -> Frame:
        world = self.sim.world
        cfg = self.sim.config
        offset = camera_offset(world, cfg)
        return Frame(
            calls=build_draw_list(world, cfg),
            grid=grid_lines(offset, cfg.width, cfg.height, cfg.grid_size),
            hud=self.sim.hud,
        )
