"""
Board – classifiable cells of a detected corner grid
====================================================

The corner grid of a ``width × height`` board yields ``(width-1) ×
(height-1)`` cells.  Cells alternate black / coloured in a checkerboard
pattern; only the coloured ones become ``Square`` objects, in row-major
order.

The first ``sample_count`` squares are samples with a-priori known
colours (one of them locates the sphere markers); the rest are data
squares whose class is inferred from the samples.

Lifecycle:
  1. ``Board.from_corners`` scans every square's mean hue.  Squares are
     independent, so this step can run on a thread pool.
  2. ``Board.classify`` labels the data squares against the samples.  It
     needs every hue first and is the only mutation after construction.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from colorboard.errors import BoundsError, ClassificationError, GeometryError
from colorboard.geometry.quadrilateral import Point2D, Quadrilateral
from colorboard.inference.scanner import scan_hue
from colorboard.models.colors import ColorClass, hue_to_class
from colorboard.models.detector import check_board_size
from colorboard.models.exemplar import ClassificationMethod, get_classifier

log = logging.getLogger(__name__)

SAMPLE_COUNT: int = 6            # Leading squares with known colours
MARKER_SAMPLE_INDEX: int = 0     # Sample square that locates the markers
MARKER_SEARCH_SCALE: float = 3.0  # Marker search box relative to the grid box


# ── Square ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Square:
    """One classifiable grid cell."""
    index: int                             # Position among the board's squares
    row: int                               # Grid cell row
    col: int                               # Grid cell column
    corners: Tuple[Point2D, ...]           # UL, UR, LR, LL in image space
    rect: Tuple[int, int, int, int]        # Crop (x, y, w, h) in image space
    hue: float                             # Mean hue in degrees
    color: ColorClass                      # Sextant of ``hue``
    quad: Quadrilateral = field(compare=False, repr=False)

    @classmethod
    def from_corners(
        cls,
        index: int,
        row: int,
        col: int,
        corners: Sequence[Point2D],
        plane: np.ndarray,
    ) -> "Square":
        """Model the cell, crop its hue region and scan it."""
        corners = tuple((float(x), float(y)) for x, y in corners)
        quad, rect = Quadrilateral.from_corners(corners)
        x, y, w, h = rect
        if x < 0 or y < 0 or x + w > plane.shape[1] or y + h > plane.shape[0]:
            raise GeometryError(
                f"Cell ({row}, {col}) crop {rect} exceeds plane {plane.shape[:2]}"
            )

        hue = scan_hue(quad, plane[y:y + h, x:x + w])
        return cls(
            index=index, row=row, col=col, corners=corners, rect=rect,
            hue=hue, color=hue_to_class(hue), quad=quad,
        )

    @property
    def bits(self) -> Tuple[int, int, int]:
        return self.color.bits


# ── Board ──────────────────────────────────────────────────────────────

class Board:
    """Ordered squares of one detected board.

    Use ``Board.from_corners`` rather than the constructor.
    """

    def __init__(
        self,
        size: Tuple[int, int],
        corners: np.ndarray,
        squares: Sequence[Square],
        sample_count: int,
        image_shape: Tuple[int, int],
    ) -> None:
        if len(squares) <= sample_count:
            raise ValueError(
                f"Board has {len(squares)} squares, needs more than "
                f"{sample_count} samples"
            )
        self.size = size
        self._corners = np.asarray(corners, dtype=np.float32)
        self._squares: Tuple[Square, ...] = tuple(squares)
        self._sample_count = sample_count
        self.image_shape = image_shape
        self._classification: Optional[Tuple[ColorClass, ...]] = None

    @classmethod
    def from_corners(
        cls,
        plane: np.ndarray,
        corners: Union[np.ndarray, Sequence[Point2D]],
        board_size: Tuple[int, int],
        sample_count: int = SAMPLE_COUNT,
        max_workers: Optional[int] = None,
    ) -> "Board":
        """Build the board from a hue plane and its detected corners.

        Parameters
        ----------
        plane : np.ndarray
            Full-image hue plane in degrees.
        corners : array-like
            ``width*height`` corner points in row-major order.
        board_size : (width, height)
            Corner-grid size; normalised by ``check_board_size``.  For a
            portrait size the corner grid is transposed to landscape, so
            squares are then ordered column by column in the image.
        sample_count : int
            Number of leading sample squares.
        max_workers : int, optional
            Scan squares on a thread pool of this size.
        """
        width, height = check_board_size(*board_size)
        pts = np.asarray(corners, dtype=np.float64).reshape(-1, 2)
        if len(pts) != width * height:
            raise ValueError(
                f"Expected {width * height} corners for a {width}×{height} "
                f"board, got {len(pts)}"
            )
        if (width, height) != tuple(int(n) for n in board_size):
            # Detected rows of ``height`` corners become columns
            pts = pts.reshape(width, height, 2).transpose(1, 0, 2).reshape(-1, 2)
            log.debug("Transposed %d×%d corner grid to landscape", height, width)

        cells: List[Tuple[int, int, List[Point2D]]] = []
        for r in range(height - 1):
            for c in range(width - 1):
                if (r + c) % 2 == 0:  # black
                    continue
                i = r * width + c
                quad = [pts[i], pts[i + 1], pts[i + width + 1], pts[i + width]]
                cells.append((r, c, [(float(x), float(y)) for x, y in quad]))

        def build(item: Tuple[int, Tuple[int, int, List[Point2D]]]) -> Square:
            index, (r, c, quad) = item
            return Square.from_corners(index, r, c, quad, plane)

        if max_workers and max_workers > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                squares = list(pool.map(build, enumerate(cells)))
        else:
            squares = [build(item) for item in enumerate(cells)]

        for sq in squares:
            log.debug("Square %d (%d, %d) hue=%.2f class=%s",
                      sq.index, sq.row, sq.col, sq.hue, sq.color.name)
        log.info("Board %d×%d built: %d squares (%d samples)",
                 width, height, len(squares), sample_count)

        return cls(
            size=(width, height),
            corners=pts,
            squares=squares,
            sample_count=sample_count,
            image_shape=tuple(plane.shape[:2]),
        )

    # ── Accessors ──────────────────────────────────────────────────────

    @property
    def cell_count(self) -> int:
        return len(self._squares)

    @property
    def sample_count(self) -> int:
        return self._sample_count

    @property
    def data_count(self) -> int:
        return len(self._squares) - self._sample_count

    @property
    def squares(self) -> Tuple[Square, ...]:
        return self._squares

    @property
    def samples(self) -> Tuple[Square, ...]:
        return self._squares[:self._sample_count]

    @property
    def data(self) -> Tuple[Square, ...]:
        return self._squares[self._sample_count:]

    @staticmethod
    def _at(items: Sequence[Square], offset: int, kind: str) -> Square:
        if not 0 <= offset < len(items):
            raise BoundsError(
                f"{kind} offset {offset} out of range [0, {len(items)})"
            )
        return items[offset]

    def square(self, offset: int) -> Square:
        return self._at(self._squares, offset, "Square")

    def sample_square(self, offset: int) -> Square:
        return self._at(self.samples, offset, "Sample square")

    def data_square(self, offset: int) -> Square:
        return self._at(self.data, offset, "Data square")

    @property
    def marker_square(self) -> Square:
        return self.sample_square(MARKER_SAMPLE_INDEX)

    @property
    def corners(self) -> np.ndarray:
        return self._corners.copy()

    @property
    def center(self) -> Point2D:
        cx, cy = self._corners.mean(axis=0)
        return float(cx), float(cy)

    def marker_search_rect(
        self, scale: float = MARKER_SEARCH_SCALE,
    ) -> Tuple[int, int, int, int]:
        """Corner bounding box scaled about its centre, clamped to the image.

        Returns ``(x, y, w, h)``.
        """
        img_h, img_w = self.image_shape
        x_min, y_min = self._corners.min(axis=0)
        x_max, y_max = self._corners.max(axis=0)
        cx, cy = (x_min + x_max) / 2, (y_min + y_max) / 2
        half_w = (x_max - x_min) * scale / 2
        half_h = (y_max - y_min) * scale / 2

        x0 = max(0, int(np.floor(cx - half_w)))
        y0 = max(0, int(np.floor(cy - half_h)))
        x1 = min(img_w, int(np.ceil(cx + half_w)))
        y1 = min(img_h, int(np.ceil(cy + half_h)))
        return x0, y0, x1 - x0, y1 - y0

    # ── Classification ─────────────────────────────────────────────────

    @property
    def classification(self) -> Optional[Tuple[ColorClass, ...]]:
        return self._classification

    def attach_classification(self, labels: Sequence[ColorClass]) -> None:
        """Store the data-square classes.  Allowed exactly once."""
        if self._classification is not None:
            raise ClassificationError("Board is already classified")
        if len(labels) != self.data_count:
            raise ValueError(
                f"Expected {self.data_count} labels, got {len(labels)}"
            )
        self._classification = tuple(labels)

    def classify(
        self,
        method: Union[str, ClassificationMethod] = ClassificationMethod.MEDIAN,
        sample_classes: Optional[Sequence[ColorClass]] = None,
    ) -> Tuple[ColorClass, ...]:
        """Label every data square against the exemplar samples.

        Parameters
        ----------
        method : str | ClassificationMethod
            Classification methodology.
        sample_classes : sequence of ColorClass, optional
            Known colours of the non-marker samples, in order.  Defaults to
            each sample's own measured sextant.
        """
        exemplars = [
            sq for i, sq in enumerate(self.samples) if i != MARKER_SAMPLE_INDEX
        ]
        if sample_classes is None:
            sample_classes = [sq.color for sq in exemplars]
        elif len(sample_classes) != len(exemplars):
            raise ValueError(
                f"Expected {len(exemplars)} sample classes, got {len(sample_classes)}"
            )

        classifier = get_classifier(method)
        labels = classifier.classify(
            [sq.hue for sq in exemplars],
            list(sample_classes),
            [sq.hue for sq in self.data],
        )
        self.attach_classification(labels)
        log.info("Classified %d data squares (%s)",
                 len(labels), classifier.method.value)
        return self._classification

    def class_bits(self) -> List[Tuple[int, int, int]]:
        """RGB bits of every data square, in order."""
        if self._classification is None:
            raise ClassificationError("Board has not been classified")
        return [c.bits for c in self._classification]

    def __repr__(self) -> str:
        return (f"Board(size={self.size}, squares={self.cell_count}, "
                f"samples={self.sample_count})")
