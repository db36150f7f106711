"""Pytest configuration and shared fixtures for the board labelling tests.

Synthetic boards are built directly as hue planes: a 6×5 corner grid
with 20 px cells whose coloured squares are painted with known hues.
"""
import sys
from pathlib import Path

import numpy as np
import pytest

# Add the project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

BOARD_SIZE = (6, 5)
CELL_PX = 20
ORIGIN = (10, 10)
PLANE_SHAPE = (120, 140)

# Hue painted into each coloured square, in square order.  Square 0 is the
# marker sample, 1-5 are exemplars, 6-9 are data squares.
SQUARE_HUES = [200.0, 0.0, 63.0, 316.0, 10.0, 70.0, 5.0, 60.0, 300.0, 350.0]


def grid_corners(width, height, cell=CELL_PX, origin=ORIGIN):
    """Row-major corner grid of an axis-aligned board."""
    ox, oy = origin
    return np.array(
        [(ox + c * cell, oy + r * cell) for r in range(height) for c in range(width)],
        dtype=np.float32,
    )


def paint_board(hues, width=BOARD_SIZE[0], height=BOARD_SIZE[1],
                cell=CELL_PX, origin=ORIGIN, shape=PLANE_SHAPE):
    """Hue plane whose coloured squares carry *hues* in square order."""
    plane = np.full(shape, 180.0, dtype=np.float32)
    ox, oy = origin
    index = 0
    for r in range(height - 1):
        for c in range(width - 1):
            if (r + c) % 2 == 0:
                continue
            x0, y0 = ox + c * cell, oy + r * cell
            # A square's scan covers its bottom corner row as well
            plane[y0:y0 + cell + 1, x0:x0 + cell] = hues[index]
            index += 1
    return plane


@pytest.fixture
def corners():
    return grid_corners(*BOARD_SIZE)


@pytest.fixture
def plane():
    return paint_board(SQUARE_HUES)


@pytest.fixture
def board(plane, corners):
    from colorboard.inference.board import Board
    return Board.from_corners(plane, corners, BOARD_SIZE)


@pytest.fixture
def unit_square():
    from colorboard.geometry.quadrilateral import Quadrilateral
    return Quadrilateral([(0, 0), (10, 0), (10, 10), (0, 10)])


@pytest.fixture
def skewed_quad():
    from colorboard.geometry.quadrilateral import Quadrilateral
    return Quadrilateral([(2, 0), (12, 3), (10, 14), (0, 9)])
