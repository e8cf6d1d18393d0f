"""
Geometry and collision helpers for game mechanics
"""

from __future__ import annotations
import math
import random
from typing import Optional, Protocol
import numpy as np


class Circle(Protocol):
    x: float
    y: float
    radius: float


class Point(Protocol):
    x: float
    y: float


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds"""
    return lo if x < lo else hi if x > hi else x


def overlaps(a: Circle, b: Circle) -> bool:
    """True when the centre distance is strictly below the sum of radii"""
    return math.hypot(a.x - b.x, a.y - b.y) < a.radius + b.radius


def within_radius(a: Point, b: Point, r: float) -> bool:
    """Squared-distance test, inclusive of the boundary"""
    dx = a.x - b.x
    dy = a.y - b.y
    return dx * dx + dy * dy <= r * r


def angle_to(src: Point, dst: Point) -> float:
    """Heading from src to dst in radians; 0.0 for coincident points"""
    dx = dst.x - src.x
    dy = dst.y - src.y
    if dx == 0 and dy == 0:
        return 0.0
    return math.atan2(dy, dx)


def dist_sq(a: Point, b: Point) -> float:
    dx = a.x - b.x
    dy = a.y - b.y
    return dx * dx + dy * dy


def seed_everything(py_seed: Optional[int]):
    """Seed all random number generators"""
    if py_seed is None:
        return
    random.seed(py_seed)
    np.random.seed(py_seed)
