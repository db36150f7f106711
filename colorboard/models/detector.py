"""
Detection Adapters – OpenCV collaborators
=========================================

Thin wrappers that turn an image into the inputs the labelling core
consumes:

  • ``detect_grid_corners`` – ordered chessboard corner points
    (adaptive-threshold search + sub-pixel refinement).
  • ``hue_plane``           – single-channel hue in degrees, ``[0, 360)``.
  • ``detect_marker_centers`` – sphere-marker centres inside a region
    (Hough circle transform).

Any OpenCV failure is surfaced as ``DetectionError`` so that callers only
ever handle the board error hierarchy.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

import cv2
import numpy as np

from colorboard.errors import DetectionError, SymmetricBoardError
from colorboard.geometry.quadrilateral import Point2D

log = logging.getLogger(__name__)

# Sub-pixel half window; the search window is 2*n+1 = 11 px.  Larger
# windows drift on small boards.
SUBPIX_WINDOW: Tuple[int, int] = (5, 5)
SUBPIX_CRITERIA = (cv2.TERM_CRITERIA_EPS + cv2.TERM_CRITERIA_MAX_ITER, 30, 0.1)


def check_board_size(width: int, height: int) -> Tuple[int, int]:
    """Normalise a corner-grid size to landscape and validate its parity.

    The board must have exactly one symmetry axis, so width and height
    must differ in parity (e.g. 6×5).

    Returns
    -------
    (width, height) with ``width >= height``.

    Raises
    ------
    SymmetricBoardError
        If both dimensions share parity.
    """
    width, height = int(width), int(height)
    if width < 2 or height < 2:
        raise ValueError(f"Board needs at least 2×2 corners, got {width}×{height}")
    if height > width:
        width, height = height, width
    if width % 2 == height % 2:
        raise SymmetricBoardError(
            f"Board {width}×{height} is symmetric; width and height parity must differ"
        )
    return width, height


def _to_gray(image: np.ndarray) -> np.ndarray:
    if image.ndim == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    return image


def detect_grid_corners(
    image: np.ndarray,
    board_size: Tuple[int, int],
) -> np.ndarray:
    """Locate the inner chessboard corners.

    Parameters
    ----------
    image : np.ndarray
        BGR or grayscale image.
    board_size : (width, height)
        Corners per row and per column.

    Returns
    -------
    np.ndarray
        ``(width*height, 2)`` float32 array in row-major order.

    Raises
    ------
    DetectionError
        If no board is found.
    """
    gray = _to_gray(image)
    try:
        found, corners = cv2.findChessboardCorners(
            gray, tuple(board_size), flags=cv2.CALIB_CB_ADAPTIVE_THRESH,
        )
        if not found:
            raise DetectionError(f"No {board_size[0]}×{board_size[1]} board found")
        corners = cv2.cornerSubPix(
            gray, corners, SUBPIX_WINDOW, (-1, -1), SUBPIX_CRITERIA,
        )
    except cv2.error as exc:
        raise DetectionError(f"Corner detection failed: {exc}") from exc

    log.info("Detected %d board corners", len(corners))
    return corners.reshape(-1, 2).astype(np.float32)


def hue_plane(image: np.ndarray) -> np.ndarray:
    """Hue channel of a BGR image in degrees.

    The image is converted as float in ``[0, 1]`` so that OpenCV returns
    hue on the full 0–360° scale instead of the 8-bit 0–180 encoding.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected a BGR image, got shape {image.shape}")
    bgr = image.astype(np.float32) / 255.0
    hsv = cv2.cvtColor(bgr, cv2.COLOR_BGR2HSV)
    hue = hsv[:, :, 0]
    hue[hue >= 360.0] = 0.0
    return hue


def detect_marker_centers(
    image: np.ndarray,
    rect: Tuple[int, int, int, int],
    min_radius: int = 5,
    max_radius: int = 0,
) -> List[Point2D]:
    """Find circular marker centres inside *rect* ``(x, y, w, h)``.

    Returned coordinates are in full-image space, strongest circle first.
    """
    x, y, w, h = rect
    roi = image[y:y + h, x:x + w]
    if roi.size == 0:
        return []
    roi = cv2.medianBlur(_to_gray(roi), 5)

    circles = cv2.HoughCircles(
        roi, cv2.HOUGH_GRADIENT, dp=1.2,
        minDist=max(10, min(w, h) // 8),
        param1=100, param2=30,
        minRadius=min_radius, maxRadius=max_radius,
    )
    if circles is None:
        log.info("No marker circles found in %s", rect)
        return []

    centers = [(float(cx) + x, float(cy) + y) for cx, cy, _ in circles[0]]
    log.info("Found %d marker candidates", len(centers))
    return centers
