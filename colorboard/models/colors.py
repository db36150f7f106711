"""
Colour Classes – hue sextant lookup
===================================

The hue circle is cut into six 60°-wide arcs offset by 31.66°.  Each arc
maps to a 3-bit {red, green, blue} indicator:

    (348.33, 360) ∪ [0, 31.66]  → red       (1, 0, 0)
    (31.66,  95]                → yellow    (1, 1, 0)
    (95,     158.33]            → green     (0, 1, 0)
    (158.33, 221.66]            → cyan      (0, 1, 1)
    (221.66, 285]               → blue      (0, 0, 1)
    (285,    348.33]            → magenta   (1, 0, 1)

Upper bounds are inclusive.  The table is plain data; swapping in another
colour model only means replacing ``HUE_SEXTANTS``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class ColorClass:
    """A discrete colour class and its RGB indicator bits."""
    name: str
    red: int
    green: int
    blue: int

    @property
    def bits(self) -> Tuple[int, int, int]:
        return self.red, self.green, self.blue


RED = ColorClass("red", 1, 0, 0)
YELLOW = ColorClass("yellow", 1, 1, 0)
GREEN = ColorClass("green", 0, 1, 0)
CYAN = ColorClass("cyan", 0, 1, 1)
BLUE = ColorClass("blue", 0, 0, 1)
MAGENTA = ColorClass("magenta", 1, 0, 1)
NO_COLOR = ColorClass("none", 0, 0, 0)

# ── Canonical class list (index ↔ class mapping) ──────────────────────

COLOR_CLASSES: Tuple[ColorClass, ...] = (RED, YELLOW, GREEN, CYAN, BLUE, MAGENTA)

CLASS_NAMES: Tuple[str, ...] = tuple(c.name for c in COLOR_CLASSES)

NAME_TO_CLASS: Dict[str, ColorClass] = {c.name: c for c in COLOR_CLASSES}

# (lower exclusive, upper inclusive, class); red wraps through 0°
HUE_SEXTANTS: Tuple[Tuple[float, float, ColorClass], ...] = (
    (31.66, 95.0, YELLOW),
    (95.0, 158.33, GREEN),
    (158.33, 221.66, CYAN),
    (221.66, 285.0, BLUE),
    (285.0, 348.33, MAGENTA),
    (348.33, 360.0, RED),
)

# Representative hue of each class, used by visualisation and tests
CLASS_HUES: Dict[str, float] = {
    "red": 0.0,
    "yellow": 63.33,
    "green": 126.66,
    "cyan": 190.0,
    "blue": 253.33,
    "magenta": 316.66,
}


def hue_to_class(hue: float) -> ColorClass:
    """Map a hue angle in degrees to its sextant class.

    Raises
    ------
    ValueError
        If *hue* is not a finite value in ``[0, 360)``.
    """
    if not math.isfinite(hue) or not 0.0 <= hue < 360.0:
        raise ValueError(f"Hue must be in [0, 360), got {hue}")

    for lower, upper, color in HUE_SEXTANTS:
        if lower < hue <= upper:
            return color
    return RED  # [0, 31.66]


def class_to_bits(index: Optional[int]) -> Tuple[int, int, int]:
    """RGB bits for a class index; unknown indices give ``(0, 0, 0)``."""
    if index is None or not 0 <= index < len(COLOR_CLASSES):
        return NO_COLOR.bits
    return COLOR_CLASSES[index].bits


def class_index(color: ColorClass) -> int:
    return COLOR_CLASSES.index(color)


def hue_distance(a: float, b: float) -> float:
    """Shortest angular distance between two hues, in degrees."""
    d = abs(a - b) % 360.0
    return min(d, 360.0 - d)
