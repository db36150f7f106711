"""
Colour Board Labeller – Main Entry Point
========================================

Commands:

  1. **Label**      – Detect the board in an image, classify its data
                      squares and print the identifier.
  2. **Normalize**  – Affine-map the image onto the detected corner grid
                      and write the result.

Usage examples
--------------

**Labelling**::

    python -m colorboard.main label \\
        --image plant.jpg \\
        --size 6 5 \\
        --markers \\
        --save-debug debug.png

**Normalisation**::

    python -m colorboard.main normalize \\
        --image plant.jpg \\
        --size 6 5 \\
        --output plant_norm.png \\
        --square-px 80
"""

from __future__ import annotations

import argparse
import logging
import sys

import cv2
import numpy as np

from colorboard.errors import BoardError

log = logging.getLogger("colorboard")


def _load_image(path: str) -> np.ndarray:
    image = cv2.imread(path)
    if image is None:
        log.error("Could not read image: %s", path)
        sys.exit(1)
    return image


def _build_pipeline(args: argparse.Namespace):
    from colorboard.inference.pipeline import BoardLabelPipeline

    return BoardLabelPipeline(
        board_size=tuple(args.size),
        sample_count=args.samples,
        word_width=args.word_width,
        method=args.method,
        max_workers=args.workers,
    )


# ═══════════════════════════════════════════════════════════════════════
# Label
# ═══════════════════════════════════════════════════════════════════════

def cmd_label(args: argparse.Namespace) -> None:
    """Run the labelling pipeline on an image."""
    image = _load_image(args.image)
    pipeline = _build_pipeline(args)
    result = pipeline.label(image, locate_markers=args.markers)

    print("\n" + "=" * 60)
    print("  BOARD LABEL")
    print("=" * 60)
    print(f"  Identifier     : {result.identifier.to_hex()}")
    print(f"  Words          : {list(result.identifier.words)}")
    print(f"  Data squares   : {result.board.data_count}")
    print(f"  Classes        : {' '.join(c.name for c in result.classes)}")
    if result.reference is not None:
        pts = ", ".join(f"({x:.1f}, {y:.1f})" for x, y in result.reference.points)
        print(f"  Reference quad : {pts}")
    print("=" * 60 + "\n")

    if args.save_debug:
        pipeline.visualize(image, result, show=False, save_path=args.save_debug)


# ═══════════════════════════════════════════════════════════════════════
# Normalize
# ═══════════════════════════════════════════════════════════════════════

def cmd_normalize(args: argparse.Namespace) -> None:
    """Write the affine-normalised image."""
    image = _load_image(args.image)
    pipeline = _build_pipeline(args)
    board = pipeline.build_board(image)
    normalized = pipeline.normalize(image, board, square_px=args.square_px)
    cv2.imwrite(args.output, normalized)
    log.info("Normalised image saved to %s", args.output)


# ═══════════════════════════════════════════════════════════════════════
# CLI
# ═══════════════════════════════════════════════════════════════════════

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="colorboard",
        description="Colour calibration board labelling.",
    )
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Debug logging")
    sub = parser.add_subparsers(dest="command", help="Available commands")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--image", required=True, help="Path to board image")
    common.add_argument("--size", type=int, nargs=2, required=True,
                        metavar=("WIDTH", "HEIGHT"),
                        help="Inner corners per row and column, e.g. 6 5")
    common.add_argument("--samples", type=int, default=6,
                        help="Leading sample squares")
    common.add_argument("--word-width", type=int, default=16)
    common.add_argument("--method", default="median",
                        choices=["median", "maxlikelihood"])
    common.add_argument("--workers", type=int, default=None,
                        help="Thread pool size for square scans")

    # ── label ──
    p_label = sub.add_parser("label", parents=[common], help="Label an image")
    p_label.add_argument("--markers", action="store_true",
                         help="Locate sphere markers and order the reference quad")
    p_label.add_argument("--save-debug", default=None,
                         help="Save debug image to path")

    # ── normalize ──
    p_norm = sub.add_parser("normalize", parents=[common],
                            help="Normalise an image to the board grid")
    p_norm.add_argument("--output", required=True)
    p_norm.add_argument("--square-px", type=int, default=80)

    return parser


def main(argv=None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    dispatch = {
        "label": cmd_label,
        "normalize": cmd_normalize,
    }

    try:
        dispatch[args.command](args)
    except BoardError as exc:
        log.error("%s: %s", type(exc).__name__, exc)
        sys.exit(1 if exc.retryable else 2)


if __name__ == "__main__":
    main()
