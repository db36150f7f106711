"""
Hue Scanner – mean hue inside one cell
======================================

Every pixel row of the cell crop is bounded left and right by the two
quadrilateral edges that cross it.  The enclosed samples, across all rows,
are folded into one streaming mean:

    mean' = (sample + i * mean) / (i + 1)

where ``i`` counts samples over the whole scan.  This equals the
arithmetic mean of every enclosed pixel without storing them.  Rows are
folded as blocks (``RunningMean.extend``), which is the same recurrence
applied ``k`` times.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np

from colorboard.errors import GeometryError
from colorboard.geometry.quadrilateral import Quadrilateral


class RunningMean:
    """Incremental arithmetic mean."""

    def __init__(self) -> None:
        self.count = 0
        self.mean = 0.0

    def add(self, sample: float) -> None:
        self.mean = (float(sample) + self.count * self.mean) / (self.count + 1)
        self.count += 1

    def extend(self, samples: np.ndarray) -> None:
        k = len(samples)
        if k == 0:
            return
        total = float(np.sum(samples, dtype=np.float64))
        self.mean = (total + self.count * self.mean) / (self.count + k)
        self.count += k


def streaming_mean(samples: Iterable[float]) -> float:
    """Mean of *samples* computed one value at a time."""
    acc = RunningMean()
    for s in samples:
        acc.add(s)
    if acc.count == 0:
        raise ValueError("Mean of an empty sequence is undefined")
    return acc.mean


def scan_hue(quad: Quadrilateral, plane: np.ndarray) -> float:
    """Mean hue of the pixels enclosed by *quad*.

    Parameters
    ----------
    quad : Quadrilateral
        Cell model, relative to the crop.
    plane : np.ndarray
        2-D hue crop in degrees; row 0 / column 0 is the crop origin.

    Returns
    -------
    float
        Mean hue in ``[0, 360)``.

    Raises
    ------
    GeometryError
        If no pixel falls inside the cell.
    """
    if plane.ndim != 2:
        raise ValueError(f"Expected a single-channel plane, got shape {plane.shape}")

    rows, cols = plane.shape
    acc = RunningMean()
    for row in range(min(quad.height, rows - 1) + 1):
        first, second = quad.edge_for_row(row)
        c1 = quad.column_at(first, row)
        c2 = quad.column_at(second, row)
        left = max(min(c1, c2), 0)
        right = min(max(c1, c2), cols)
        if left < right:
            acc.extend(plane[row, left:right])

    if acc.count == 0:
        raise GeometryError(f"Cell {quad!r} encloses no pixels")
    return acc.mean
