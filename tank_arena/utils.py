"""
Utility functions for game mechanics
"""

from __future__ import annotations
import math
import random
from typing import Tuple, Optional
import numpy as np


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds"""
    return lo if x < lo else hi if x > hi else x


def normalize(x: float, y: float, eps: float = 1e-8) -> Tuple[float, float]:
    """Normalize a vector to unit length"""
    l = math.hypot(x, y)
    if l < eps:
        return 0.0, 0.0
    return x / l, y / l


def circle_rect_intersects(cx: float, cy: float, radius: float,
                           rx: float, ry: float, rw: float, rh: float) -> bool:
    """
    Check if a circle overlaps a rectangle given by its center and full size.

    Every comparison is inclusive, so a circle touching an edge collides.
    """
    dist_x = abs(cx - rx)
    dist_y = abs(cy - ry)
    half_w = rw / 2
    half_h = rh / 2

    if dist_x > half_w + radius:
        return False
    if dist_y > half_h + radius:
        return False

    if dist_x <= half_w:
        return True
    if dist_y <= half_h:
        return True

    # corner region
    dx = dist_x - half_w
    dy = dist_y - half_h
    return (dx * dx + dy * dy) <= (radius * radius)


def seed_everything(py_seed: Optional[int]):
    """Seed all random number generators"""
    if py_seed is None:
        return
    random.seed(py_seed)
    np.random.seed(py_seed)
