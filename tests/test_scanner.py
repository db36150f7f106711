"""Tests for the streaming mean and the per-cell hue scan."""
import random

import numpy as np
import pytest

from colorboard.errors import GeometryError
from colorboard.inference.scanner import RunningMean, scan_hue, streaming_mean


class TestStreamingMean:
    """Incremental mean must equal the arithmetic mean."""

    def test_single_sample(self):
        assert streaming_mean([42.0]) == 42.0

    def test_two_samples(self):
        assert streaming_mean([10.0, 20.0]) == pytest.approx(15.0)

    def test_many_samples(self):
        rng = random.Random(7)
        seq = [rng.uniform(0, 360) for _ in range(1000)]
        assert streaming_mean(seq) == pytest.approx(sum(seq) / len(seq))

    def test_empty_sequence(self):
        with pytest.raises(ValueError):
            streaming_mean([])

    def test_block_extend_matches_single_adds(self):
        samples = np.array([3.0, 9.0, 27.0, 81.0, 243.0])
        single = RunningMean()
        for s in samples:
            single.add(s)
        block = RunningMean()
        block.extend(samples[:2])
        block.extend(samples[2:2])
        block.extend(samples[2:])
        assert block.count == single.count == 5
        assert block.mean == pytest.approx(single.mean)


class TestScanHue:
    """Test suite for scanning a cell's hue."""

    def test_constant_plane(self, unit_square):
        plane = np.full((11, 11), 123.0, dtype=np.float32)
        assert scan_hue(unit_square, plane) == pytest.approx(123.0)

    def test_half_and_half(self, unit_square):
        plane = np.zeros((11, 11), dtype=np.float32)
        plane[:, 5:] = 100.0
        # Columns 0-9 are scanned on every row: five at 0, five at 100
        assert scan_hue(unit_square, plane) == pytest.approx(50.0)

    def test_pixels_outside_cell_are_excluded(self):
        from colorboard.geometry.quadrilateral import Quadrilateral

        # Diamond: the crop corners lie outside the cell
        quad = Quadrilateral([(10, 0), (20, 10), (10, 20), (0, 10)])
        plane = np.full((21, 21), 300.0, dtype=np.float32)
        for row in range(21):
            half = 10 - abs(10 - row)
            plane[row, 10 - half:10 + half] = 60.0
        assert scan_hue(quad, plane) == pytest.approx(60.0)

    def test_empty_scan_is_a_geometry_error(self, unit_square):
        plane = np.zeros((11, 0), dtype=np.float32)
        with pytest.raises(GeometryError):
            scan_hue(unit_square, plane)

    def test_rejects_multichannel(self, unit_square):
        with pytest.raises(ValueError):
            scan_hue(unit_square, np.zeros((11, 11, 3), dtype=np.float32))
