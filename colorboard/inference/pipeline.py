"""
Labelling Pipeline – Image → Identifier
=======================================

Single-call entry point for labelling a board image.

Pipeline stages:
  1. Corner detection   – chessboard corners + sub-pixel refinement
  2. Hue plane          – BGR → hue in degrees
  3. Board              – coloured squares, mean hue per square
  4. Classification     – data squares vs. exemplar samples (barrier)
  5. Identifier         – 2 bits per data square, packed into words

Optional extras:
  • Reference quad      – board centre + three sphere markers, convexly
                          ordered for a perspective correction
  • Affine normalisation of the image to the corner grid
  • Debug visualisation overlay
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import cv2
import numpy as np

from colorboard.geometry.reference import ReferenceQuad, order_reference_points
from colorboard.inference.board import SAMPLE_COUNT, Board
from colorboard.inference.identifier import WORD_WIDTH, Identifier, encode_identifier
from colorboard.models.colors import ColorClass
from colorboard.models.detector import (
    check_board_size,
    detect_grid_corners,
    detect_marker_centers,
    hue_plane,
)
from colorboard.models.exemplar import ClassificationMethod, get_classifier

log = logging.getLogger(__name__)

SQUARE_SIZE_PX: int = 80  # Side of one board square after normalisation


# ── Result dataclass ──────────────────────────────────────────────────

@dataclass
class LabelResult:
    """Full output of the labelling pipeline."""
    identifier: Identifier                      # Packed data-square classes
    board: Board                                # Squares, hues, corners
    classes: Tuple[ColorClass, ...]             # Class of every data square
    reference: Optional[ReferenceQuad] = None   # Only when markers are located


# ── Pipeline class ─────────────────────────────────────────────────────

class BoardLabelPipeline:
    """End-to-end board image → identifier pipeline.

    Parameters
    ----------
    board_size : (int, int)
        Inner corners per row and per column; parities must differ.
    sample_count : int
        Leading squares with known colours.
    word_width : int
        Bits per identifier word.
    method : str | ClassificationMethod
        Data-square classification methodology.
    sample_classes : sequence of ColorClass, optional
        Known colours of the non-marker samples.  Measured when omitted.
    max_workers : int, optional
        Thread pool size for per-square hue scans.
    """

    def __init__(
        self,
        board_size: Tuple[int, int],
        sample_count: int = SAMPLE_COUNT,
        word_width: int = WORD_WIDTH,
        method: Union[str, ClassificationMethod] = ClassificationMethod.MEDIAN,
        sample_classes: Optional[Sequence[ColorClass]] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        self.board_size = check_board_size(*board_size)
        self.sample_count = sample_count
        self.word_width = word_width
        self.method = get_classifier(method).method
        self.sample_classes = list(sample_classes) if sample_classes else None
        self.max_workers = max_workers

        log.info(
            "Pipeline ready  board=%dx%d  samples=%d  method=%s  word=%d",
            self.board_size[0], self.board_size[1],
            self.sample_count, self.method.value, self.word_width,
        )

    # ── Public API ─────────────────────────────────────────────────────

    def build_board(self, image: np.ndarray) -> Board:
        """Detect the corner grid and scan every coloured square."""
        corners = detect_grid_corners(image, self.board_size)
        plane = hue_plane(image)
        return Board.from_corners(
            plane, corners, self.board_size,
            sample_count=self.sample_count,
            max_workers=self.max_workers,
        )

    def label(self, image: np.ndarray, locate_markers: bool = False) -> LabelResult:
        """Run the full pipeline on a BGR image.

        Parameters
        ----------
        image : np.ndarray
            BGR image (OpenCV convention).
        locate_markers : bool
            Also detect the sphere markers and order the reference quad.

        Returns
        -------
        LabelResult
        """
        board = self.build_board(image)
        classes = board.classify(self.method, self.sample_classes)
        identifier = encode_identifier(board.class_bits(), self.word_width)
        log.info("Identifier %s (%d squares)", identifier.to_hex(), identifier.cell_count)

        reference = self.locate_reference(image, board) if locate_markers else None
        return LabelResult(
            identifier=identifier,
            board=board,
            classes=classes,
            reference=reference,
        )

    def locate_reference(self, image: np.ndarray, board: Board) -> ReferenceQuad:
        """Order the board centre and the detected sphere markers."""
        rect = board.marker_search_rect()
        markers = detect_marker_centers(image, rect)
        return order_reference_points(board.center, markers)

    # ── Normalisation ──────────────────────────────────────────────────

    def normalize(
        self,
        image: np.ndarray,
        board: Board,
        square_px: int = SQUARE_SIZE_PX,
    ) -> np.ndarray:
        """Affine-map the corner grid onto an axis-aligned grid.

        The lower-left, upper-left and upper-right grid corners are sent
        to a rectangle of ``width*square_px × height*square_px`` anchored
        at the bottom-left of a canvas the size of *image*.
        """
        width, height = board.size
        corners = board.corners
        img_h, img_w = image.shape[:2]

        src = np.array([
            corners[width * (height - 1)],
            corners[0],
            corners[width - 1],
        ], dtype=np.float32)
        dst = np.array([
            [0, img_h],
            [0, img_h - height * square_px],
            [width * square_px, img_h - height * square_px],
        ], dtype=np.float32)

        matrix = cv2.getAffineTransform(src, dst)
        return cv2.warpAffine(image, matrix, (img_w, img_h))

    def correct_perspective(
        self,
        image: np.ndarray,
        reference: ReferenceQuad,
        destination: Sequence[Tuple[float, float]],
        size: Optional[Tuple[int, int]] = None,
    ) -> np.ndarray:
        """Warp *image* so that the reference quad lands on *destination*."""
        dst = np.asarray(destination, dtype=np.float32)
        if dst.shape != (4, 2):
            raise ValueError(f"Expected 4 destination points, got shape {dst.shape}")
        if size is None:
            size = (image.shape[1], image.shape[0])

        matrix = cv2.getPerspectiveTransform(reference.as_array(), dst)
        return cv2.warpPerspective(image, matrix, size)

    # ── Debug visualisation ────────────────────────────────────────────

    def visualize(
        self,
        image: np.ndarray,
        result: LabelResult,
        show: bool = False,
        save_path: Optional[str] = None,
    ) -> np.ndarray:
        """Outline every square in its class colour and print the identifier.

        Samples are drawn thin in their measured colour, data squares thick
        in the class they were encoded with.  Returns the annotated BGR
        image.
        """
        vis = image.copy()
        board = result.board

        for sq in board.squares:
            if sq.index < board.sample_count:
                r, g, b = sq.bits
            else:
                r, g, b = result.classes[sq.index - board.sample_count].bits
            color = (255 * b, 255 * g, 255 * r)
            thickness = 1 if sq.index < board.sample_count else 3
            pts = np.array(sq.corners, dtype=np.int32).reshape(-1, 1, 2)
            cv2.polylines(vis, [pts], True, color, thickness)

        if result.reference is not None:
            pts = result.reference.as_array().astype(np.int32).reshape(-1, 1, 2)
            cv2.polylines(vis, [pts], True, (255, 255, 255), 2)

        cv2.putText(
            vis, f"ID: {result.identifier.to_hex()}",
            (10, vis.shape[0] - 10),
            cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 2,
        )

        if save_path:
            cv2.imwrite(save_path, vis)
            log.info("Saved debug image to %s", save_path)

        if show:
            cv2.imshow("Board Label", vis)
            cv2.waitKey(0)
            cv2.destroyAllWindows()

        return vis
