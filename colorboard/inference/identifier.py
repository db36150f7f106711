"""
Identifier Encoding – class bits → packed words
===============================================

Each data square contributes two bits, green then blue.  The red bit is
not stored: it must be 1 for every square, and a square without it was not
classified into a usable colour.

Packing, for word width ``W``:
  • every ``W / 2`` squares a new word starts at zero;
  • for each square ``word = (word << 2) | (green << 1) | blue``.

A trailing partial word is left unpadded.  Decoding therefore needs the
square count and ``W`` alongside the words.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from colorboard.errors import ClassificationError

WORD_WIDTH: int = 16

Bits = Tuple[int, int, int]


@dataclass(frozen=True)
class Identifier:
    """Packed identifier of a board."""
    words: Tuple[int, ...]
    cell_count: int
    word_width: int = WORD_WIDTH

    def to_hex(self) -> str:
        """Words as fixed-width hex, joined by ``-``."""
        digits = (self.word_width + 3) // 4
        return "-".join(f"{w:0{digits}x}" for w in self.words)

    def decode(self) -> List[Bits]:
        return decode_identifier(self.words, self.cell_count, self.word_width)

    def __str__(self) -> str:
        return self.to_hex()


def _check_width(word_width: int) -> int:
    if word_width <= 0 or word_width % 2:
        raise ValueError(f"Word width must be a positive even number, got {word_width}")
    return word_width // 2


def encode_identifier(
    bits: Sequence[Bits],
    word_width: int = WORD_WIDTH,
) -> Identifier:
    """Pack per-square ``(r, g, b)`` triples into words.

    Parameters
    ----------
    bits : sequence of (r, g, b)
        Data-square classes in board order.
    word_width : int
        Bits per word; must be even.

    Returns
    -------
    Identifier

    Raises
    ------
    ClassificationError
        If any square lacks the red indicator or has a green or blue
        bit outside ``{0, 1}``.
    """
    per_word = _check_width(word_width)

    words: List[int] = []
    word = 0
    for i, (r, g, b) in enumerate(bits):
        if r != 1:
            raise ClassificationError(
                f"Square {i} has no red indicator: {(r, g, b)}"
            )
        if g not in (0, 1) or b not in (0, 1):
            raise ClassificationError(f"Square {i} has non-binary bits: {(r, g, b)}")
        if i and i % per_word == 0:
            words.append(word)
            word = 0
        word = (word << 2) | (int(g) << 1) | int(b)
    if len(bits):
        words.append(word)

    return Identifier(words=tuple(words), cell_count=len(bits), word_width=word_width)


def decode_identifier(
    words: Sequence[int],
    cell_count: int,
    word_width: int = WORD_WIDTH,
) -> List[Bits]:
    """Inverse of ``encode_identifier``."""
    per_word = _check_width(word_width)
    expected = -(-cell_count // per_word)
    if len(words) != expected:
        raise ValueError(
            f"{cell_count} squares need {expected} words, got {len(words)}"
        )

    bits: List[Bits] = []
    remaining = cell_count
    for word in words:
        n = min(per_word, remaining)
        for shift in range(n - 1, -1, -1):
            pair = (word >> (2 * shift)) & 0b11
            bits.append((1, pair >> 1, pair & 1))
        remaining -= n
    return bits
