"""
Read-only translation of a World into draw calls.

Coordinates are screen space with y growing downward, the same convention the
simulation uses. Rectangles are anchored at their top-left corner. The window
layer flips y for arcade.
"""

from dataclasses import dataclass
from typing import List, Tuple

from .config import GameConfig
from .world import World

Color = Tuple[int, int, int]

ROLE_COLORS = {
    "player": (255, 255, 255),
    "enemy": (255, 0, 0),
    "health_back": (0, 0, 0),
    "health_fill": (0, 128, 0),
    "bullet": (255, 255, 0),
    "jewel": (0, 0, 255),
    "tree": (0, 128, 0),
    "grid": (51, 51, 51),
}

HEALTH_BAR_HEIGHT = 5
HEALTH_BAR_GAP = 10


@dataclass(frozen=True)
class DrawCall:
    shape: str  # "circle" or "rect"
    role: str
    x: float
    y: float
    radius: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def color(self) -> Color:
        return ROLE_COLORS[self.role]


def camera_offset(world: World, config: GameConfig) -> Tuple[float, float]:
    """Offset that puts the player in the middle of the canvas (infinite only)"""
    if not config.is_infinite:
        return 0.0, 0.0
    return config.width / 2 - world.player.x, config.height / 2 - world.player.y


def grid_lines(offset: Tuple[float, float], width: int, height: int,
               grid_size: int) -> List[Tuple[float, float, float, float]]:
    """Background grid segments (x1, y1, x2, y2) anchored to world coordinates"""
    ox, oy = offset
    lines = []
    x = ox % grid_size
    while x < width:
        lines.append((x, 0.0, x, float(height)))
        x += grid_size
    y = oy % grid_size
    while y < height:
        lines.append((0.0, y, float(width), y))
        y += grid_size
    return lines


def build_draw_list(world: World, config: GameConfig) -> List[DrawCall]:
    """Everything to draw this frame, back to front"""
    ox, oy = camera_offset(world, config)
    calls: List[DrawCall] = []

    for tree in world.terrain:
        calls.append(DrawCall("circle", "tree", tree.x + ox, tree.y + oy, radius=tree.radius))

    for jewel in world.jewels:
        calls.append(DrawCall("circle", "jewel", jewel.x + ox, jewel.y + oy, radius=jewel.radius))

    for enemy in world.enemies:
        ex, ey, r = enemy.x + ox, enemy.y + oy, enemy.radius
        calls.append(DrawCall("circle", "enemy", ex, ey, radius=r))
        bar_y = ey - r - HEALTH_BAR_GAP
        calls.append(DrawCall("rect", "health_back", ex - r, bar_y,
                              width=r * 2, height=HEALTH_BAR_HEIGHT))
        calls.append(DrawCall("rect", "health_fill", ex - r, bar_y,
                              width=r * 2 * enemy.health_fraction, height=HEALTH_BAR_HEIGHT))

    for bullet in world.bullets:
        calls.append(DrawCall("circle", "bullet", bullet.x + ox, bullet.y + oy, radius=bullet.radius))

    player = world.player
    calls.append(DrawCall("circle", "player", player.x + ox, player.y + oy, radius=player.radius))
    return calls
