"""
Arcade window for playing the survivor game

Keyboard events are folded into a pressed-state map keyed by the same ids the
simulation reads (arrow keys and WASD). Drawing consumes GameLoop frames and
flips y, since arcade puts the origin in the bottom-left corner.

Run:
    python -m game.survivor.window --variant infinite
"""

from __future__ import annotations

import argparse
import logging
import time
from typing import Dict, Optional

import arcade

from .config import GameConfig
from .loop import Frame, GameLoop
from .render import ROLE_COLORS
from .simulation import Hud, Simulation

KEY_IDS = {
    arcade.key.UP: "ArrowUp",
    arcade.key.DOWN: "ArrowDown",
    arcade.key.LEFT: "ArrowLeft",
    arcade.key.RIGHT: "ArrowRight",
    arcade.key.W: "w",
    arcade.key.S: "s",
    arcade.key.A: "a",
    arcade.key.D: "d",
}


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class SurvivorWindow(arcade.Window):
    """Drives a GameLoop at the display refresh rate"""

    def __init__(self, loop: GameLoop, title: str = "Jewel Survivor", **kwargs):
        cfg = loop.config
        super().__init__(cfg.width, cfg.height, title, **kwargs)
        self.loop = loop
        self.keys: Dict[str, bool] = {}
        self.BG = (18, 18, 22)
        self.HUD_C = (220, 220, 220)
        self.frame: Optional[Frame] = loop.draw()
        arcade.set_background_color(self.BG)

    def on_key_press(self, symbol: int, modifiers: int):
        key_id = KEY_IDS.get(symbol)
        if key_id is not None:
            self.keys[key_id] = True
        elif symbol == arcade.key.ESCAPE:
            self.close()

    def on_key_release(self, symbol: int, modifiers: int):
        key_id = KEY_IDS.get(symbol)
        if key_id is not None:
            self.keys[key_id] = False

    def on_update(self, delta_time: float):
        self.frame = self.loop.tick(self.keys, monotonic_ms())
        if self.frame.ended:
            self.keys.clear()

    def _sy(self, y: float) -> float:
        return self.height - y

    def on_draw(self):
        self.clear()
        frame = self.frame
        if frame is None:
            return

        for x1, y1, x2, y2 in frame.grid:
            arcade.draw_line(x1, self._sy(y1), x2, self._sy(y2), ROLE_COLORS["grid"], 1)

        for call in frame.calls:
            if call.shape == "circle":
                arcade.draw_circle_filled(call.x, self._sy(call.y), call.radius, call.color)
            elif call.width > 0:
                arcade.draw_lrbt_rectangle_filled(
                    call.x, call.x + call.width,
                    self._sy(call.y + call.height), self._sy(call.y),
                    call.color,
                )

        for i, line in enumerate(frame.hud.lines()):
            arcade.draw_text(line, 12, self.height - 24 - i * 20, self.HUD_C, 14)


def announce_game_over(hud: Hud):
    print(f"Game Over! Score: {hud.score}  Level: {hud.level}")


def main():
    parser = argparse.ArgumentParser(description="Play Jewel Survivor")
    parser.add_argument(
        "--variant",
        type=str,
        default="infinite",
        choices=["arena", "infinite"],
        help="World layout (default: infinite)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (default: unseeded)",
    )
    parser.add_argument(
        "--seeded-chunks",
        action="store_true",
        help="Regenerate the same content when a chunk is revisited",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (default: INFO)",
    )
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")

    config = GameConfig(variant=args.variant, seed=args.seed, seeded_chunks=args.seeded_chunks)
    sim = Simulation(config, now=monotonic_ms(), on_game_over=announce_game_over)
    SurvivorWindow(GameLoop(sim))
    arcade.run()


if __name__ == "__main__":
    main()
