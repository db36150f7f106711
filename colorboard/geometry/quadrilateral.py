"""
Quadrilateral Model – one grid cell as a closed 4-cycle
=======================================================

A cell is four vertices and four edges arranged in a circular adjacency:
edge ``i`` runs from vertex ``i`` to vertex ``i + 1 (mod 4)``.  Neighbours
are resolved by index arithmetic rather than cross references, so the
quadrilateral exclusively owns its two fixed-size tuples.

The model answers one question for the hue scanner: *which two edges
bound a given pixel row, and at which columns do they cross it?*

Design notes:
  • Vertex coordinates are floored into the cell's own crop, whose origin
    is the floored minimum of the four corner points.
  • ``edge_for_row`` caches the last pair it returned.  A top-to-bottom
    scan therefore only searches when it crosses a vertex row, which keeps
    the lookup O(1) amortised.
  • Horizontal edges never bound a row: their column is undefined, and the
    two edges adjacent to them always cover the same row.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from colorboard.errors import GeometryError

Point2D = Tuple[float, float]

# Diagonal edge pairs used as coarse bounds when no adjacent pair fits
_DIAGONAL_PAIRS: Tuple[Tuple[int, int], ...] = ((0, 2), (1, 3))


# ── Line descriptor ────────────────────────────────────────────────────

@dataclass(frozen=True)
class Line:
    """Straight segment resolved by linear interpolation."""
    x1: float
    y1: float
    x2: float
    y2: float
    horizontal: bool = False
    vertical: bool = False
    slope: Optional[float] = None

    @classmethod
    def from_points(cls, p1: Point2D, p2: Point2D) -> "Line":
        x1, y1 = float(p1[0]), float(p1[1])
        x2, y2 = float(p2[0]), float(p2[1])
        if y2 - y1 == 0:
            return cls(x1, y1, x2, y2, horizontal=True)
        if x2 - x1 == 0:
            return cls(x1, y1, x2, y2, vertical=True)
        return cls(x1, y1, x2, y2, slope=(y2 - y1) / (x2 - x1))

    @property
    def span(self) -> Tuple[float, float]:
        """Vertical extent ``(min y, max y)``."""
        return min(self.y1, self.y2), max(self.y1, self.y2)

    def column_at(self, row: float) -> int:
        """Column where this line crosses *row*.

        Raises
        ------
        GeometryError
            If the line is horizontal (the column is undefined).
        """
        if self.horizontal:
            raise GeometryError("Cannot resolve a column on a horizontal line")
        if self.vertical:
            return int(self.x1)
        return int(math.floor((row - self.y1) / self.slope + self.x1))

    def row_at(self, column: float) -> int:
        """Row where this line crosses *column*."""
        if self.vertical:
            raise GeometryError("Cannot resolve a row on a vertical line")
        if self.horizontal:
            return int(self.y1)
        return int(math.floor(self.slope * (column - self.x1) + self.y1))


# ── Cycle elements ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class Vertex:
    """Corner ``index`` of the cycle."""
    index: int
    point: Point2D

    @property
    def previous(self) -> int:
        return (self.index - 1) % 4

    @property
    def next(self) -> int:
        return (self.index + 1) % 4

    @property
    def edges(self) -> Tuple[int, int]:
        """Incoming and outgoing edge indices."""
        return (self.index - 1) % 4, self.index


@dataclass(frozen=True)
class Edge:
    """Edge ``index`` from vertex ``index`` to vertex ``index + 1``."""
    index: int
    line: Line

    @property
    def vertices(self) -> Tuple[int, int]:
        return self.index, (self.index + 1) % 4

    @property
    def neighbours(self) -> Tuple[int, int]:
        return (self.index - 1) % 4, (self.index + 1) % 4

    @property
    def horizontal(self) -> bool:
        return self.line.horizontal


# ── Crop helpers ───────────────────────────────────────────────────────

def bounding_rect(points: Sequence[Point2D]) -> Tuple[int, int, int, int]:
    """Tight axis-aligned ``(x, y, width, height)`` box around *points*.

    The box is inclusive of the floored maximum so that every floored
    vertex lies inside it.
    """
    pts = np.asarray(points, dtype=np.float64)
    x0 = int(math.floor(pts[:, 0].min()))
    y0 = int(math.floor(pts[:, 1].min()))
    x1 = int(math.floor(pts[:, 0].max()))
    y1 = int(math.floor(pts[:, 1].max()))
    return x0, y0, x1 - x0 + 1, y1 - y0 + 1


def _shoelace(points: Sequence[Point2D]) -> float:
    area = 0.0
    for i in range(len(points)):
        x1, y1 = points[i]
        x2, y2 = points[(i + 1) % len(points)]
        area += x1 * y2 - x2 * y1
    return area / 2.0


# ── Quadrilateral ──────────────────────────────────────────────────────

class Quadrilateral:
    """Geometric model of one grid cell.

    Parameters
    ----------
    points : sequence of (x, y)
        Exactly four corners in upper-left, upper-right, lower-right,
        lower-left order, already relative to the cell crop.

    Raises
    ------
    GeometryError
        If the floored corners are collinear or coincident.
    """

    def __init__(self, points: Sequence[Point2D]) -> None:
        pts = np.asarray(points, dtype=np.float64)
        if pts.shape != (4, 2):
            raise ValueError(f"Expected 4 points, got array of shape {pts.shape}")

        local = [(float(math.floor(x)), float(math.floor(y))) for x, y in pts]
        if _shoelace(local) == 0:
            raise GeometryError(f"Degenerate cell, corners are collinear: {local}")

        self.vertices: Tuple[Vertex, ...] = tuple(
            Vertex(i, local[i]) for i in range(4)
        )
        self.edges: Tuple[Edge, ...] = tuple(
            Edge(i, Line.from_points(local[i], local[(i + 1) % 4]))
            for i in range(4)
        )
        self.width = int(max(x for x, _ in local))
        self.height = int(max(y for _, y in local))
        self._cached: Tuple[int, int] = (0, 1)

    @classmethod
    def from_corners(
        cls, corners: Sequence[Point2D],
    ) -> Tuple["Quadrilateral", Tuple[int, int, int, int]]:
        """Build a model from image-space corners.

        Returns the model and the crop rectangle ``(x, y, w, h)`` it is
        relative to.
        """
        rect = bounding_rect(corners)
        x0, y0 = rect[0], rect[1]
        local = [(float(x) - x0, float(y) - y0) for x, y in corners]
        return cls(local), rect

    def _bounds(self, row: float, i: int, j: int) -> bool:
        """True if edges *i* and *j* both span *row* and can be resolved."""
        a, b = self.edges[i], self.edges[j]
        if a.horizontal or b.horizontal:
            return False
        a_lo, a_hi = a.line.span
        b_lo, b_hi = b.line.span
        return max(a_lo, b_lo) <= row <= min(a_hi, b_hi)

    def edge_for_row(self, row: float) -> Tuple[Edge, Edge]:
        """Return the two edges bounding *row*.

        The previously returned pair is reused while it still bounds the
        row.  Otherwise adjacent pairs are searched in cycle order, then the
        diagonals ``(0, 2)`` and ``(1, 3)`` act as coarse bounds.
        """
        if not 0 <= row <= self.height:
            raise GeometryError(f"Row {row} outside cell height {self.height}")

        i, j = self._cached
        if self._bounds(row, i, j):
            return self.edges[i], self.edges[j]

        for i in range(4):
            j = (i + 1) % 4
            if self._bounds(row, i, j):
                self._cached = (i, j)
                return self.edges[i], self.edges[j]

        first, second = _DIAGONAL_PAIRS
        if self._bounds(row, *first):
            self._cached = first
        elif not (self.edges[1].horizontal or self.edges[3].horizontal):
            self._cached = second
        else:
            raise GeometryError(f"No edge pair bounds row {row}")
        return self.edges[self._cached[0]], self.edges[self._cached[1]]

    def column_at(self, edge: Edge, row: float) -> int:
        return edge.line.column_at(row)

    @property
    def points(self) -> Tuple[Point2D, ...]:
        return tuple(v.point for v in self.vertices)

    def __repr__(self) -> str:
        return f"Quadrilateral({list(self.points)})"
