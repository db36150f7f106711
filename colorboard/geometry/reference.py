"""
Reference-Point Orderer
=======================

The board centre and three sphere-marker centres arrive as an unordered
set.  A perspective correction needs them as a simple, convex
quadrilateral, so three candidate cyclic orderings are tried in priority
order and the first convex one wins:

    (1, 2, 3, 4)   identity
    (1, 3, 2, 4)   swap positions 2 and 3
    (1, 2, 4, 3)   swap positions 3 and 4

With the first point fixed these are the only three distinct cycles of
four points, so a convex ordering is always found unless the points are
degenerate (collinear triples) or one lies inside the triangle of the
other three.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from colorboard.errors import DetectionError, OrderingError
from colorboard.geometry.quadrilateral import Point2D

log = logging.getLogger(__name__)

CANDIDATE_ORDERS: Tuple[Tuple[int, int, int, int], ...] = (
    (0, 1, 2, 3),
    (0, 2, 1, 3),
    (0, 1, 3, 2),
)

MARKER_COUNT: int = 3


@dataclass(frozen=True)
class ReferenceQuad:
    """Board centre plus three markers in a convex cyclic order."""
    points: Tuple[Point2D, Point2D, Point2D, Point2D]   # ordered
    order: Tuple[int, int, int, int]                    # indices into the input

    def as_array(self) -> np.ndarray:
        """4×2 float32 array suitable for ``cv2.getPerspectiveTransform``."""
        return np.array(self.points, dtype=np.float32)


def _distance(a: Point2D, b: Point2D) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def _cross(o: Point2D, a: Point2D, b: Point2D) -> float:
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def is_convex(points: Sequence[Point2D]) -> bool:
    """True if every turn of the closed polygon has the same nonzero sign."""
    n = len(points)
    turns = [
        _cross(points[i - 1], points[i], points[(i + 1) % n])
        for i in range(n)
    ]
    return all(t > 0 for t in turns) or all(t < 0 for t in turns)


def interior_angles(points: Sequence[Point2D]) -> List[float]:
    """Interior angle in degrees at each vertex of a closed quadrilateral.

    Each angle comes from the law of cosines over the two adjacent sides
    and the diagonal joining their far ends.  Vertices that turn against
    the polygon's orientation are reflex and reported as ``360 - θ``.
    """
    n = len(points)
    area2 = sum(
        points[i][0] * points[(i + 1) % n][1] - points[(i + 1) % n][0] * points[i][1]
        for i in range(n)
    )
    angles: List[float] = []
    for i in range(n):
        prev, cur, nxt = points[i - 1], points[i], points[(i + 1) % n]
        a = _distance(cur, prev)
        b = _distance(cur, nxt)
        c = _distance(prev, nxt)
        if a == 0 or b == 0:
            angles.append(0.0)
            continue
        cos_theta = (a ** 2 + b ** 2 - c ** 2) / (2 * a * b)
        theta = math.degrees(math.acos(max(-1.0, min(1.0, cos_theta))))
        turn = _cross(prev, cur, nxt)
        if area2 != 0 and turn != 0 and (turn > 0) != (area2 > 0):
            theta = 360.0 - theta
        angles.append(theta)
    return angles


def order_reference_points(
    center: Point2D,
    markers: Sequence[Point2D],
) -> ReferenceQuad:
    """Order the board centre and marker centres into a convex quad.

    Parameters
    ----------
    center : (x, y)
        Board centre; always the first point.
    markers : sequence of (x, y)
        Detected marker centres.  Only the first three are used.

    Raises
    ------
    DetectionError
        Fewer than three markers.
    OrderingError
        None of the candidate orderings is convex.
    """
    markers = list(markers)
    if len(markers) < MARKER_COUNT:
        raise DetectionError(
            f"Insufficient markers: need {MARKER_COUNT}, found {len(markers)}"
        )
    if len(markers) > MARKER_COUNT:
        log.warning("Found %d markers, keeping the first %d",
                    len(markers), MARKER_COUNT)
        markers = markers[:MARKER_COUNT]

    pts = [(float(center[0]), float(center[1]))]
    pts += [(float(x), float(y)) for x, y in markers]

    for order in CANDIDATE_ORDERS:
        candidate = [pts[i] for i in order]
        if is_convex(candidate) and all(a < 180.0 for a in interior_angles(candidate)):
            log.debug("Reference order %s angles=%s",
                      order, [round(a, 2) for a in interior_angles(candidate)])
            return ReferenceQuad(points=tuple(candidate), order=order)

    raise OrderingError(f"Could not determine a convex quadrilateral from {pts}")
