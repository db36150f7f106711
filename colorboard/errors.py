"""
Error Hierarchy
===============

Every failure raised by the labelling core derives from ``BoardError``.
None of them are retried automatically; the ``retryable`` attribute tells
a caller whether a new capture of the same board could succeed (``True``)
or whether the configuration itself is wrong (``False``).
"""

from __future__ import annotations


class BoardError(Exception):
    """Base error for board labelling."""
    retryable: bool = True


class GeometryError(BoardError):
    """Degenerate cell geometry, line misuse or an empty cell scan."""


class DetectionError(BoardError):
    """Corner / marker detection failed or the board size is unusable."""


class SymmetricBoardError(DetectionError):
    """Board width and height share parity, so the origin is ambiguous."""
    retryable = False


class ClassificationError(BoardError):
    """A cell could not be classified or carries an invalid class."""
    retryable = False


class UnsupportedMethodError(ClassificationError, NotImplementedError):
    """The requested classification methodology is not implemented."""


class BoundsError(BoardError, IndexError):
    """A cell accessor was indexed outside its collection."""
    retryable = False


class OrderingError(BoardError):
    """No convex ordering exists for the reference points."""
