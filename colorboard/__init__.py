"""
Colour Board Labelling
======================

Labels a colour calibration board so that images captured with it can be
normalised and tagged with a reproducible, decodable identifier.

Architecture:
    1. Quadrilateral Model – each grid cell as a closed 4-cycle
    2. Hue Scanner         – streaming mean hue inside each cell
    3. Colour Classifier   – hue sextants + exemplar classification
    4. Identifier Encoder  – 2 bits per data cell, packed into words
    5. Reference Orderer   – board centre + 3 markers as a convex quad
"""

__version__ = "1.0.0"
