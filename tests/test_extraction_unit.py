"""
Unit tests for the synchronous palette extraction core.

Exercises the whole chain from pixel grid to ranked palette:
- entry count and count totals
- determinism
- degenerate inputs
"""

import numpy as np
import pytest

from colorpeek.services.colors.extraction import extract_palette, run_extraction
from colorpeek.services.colors.sampling import PixelGrid, sample_points
from conftest import make_grid


def block_grid(colors, repeat):
    """Grid with each color repeated `repeat` times in a row-major run."""
    return make_grid([c for c in colors for _ in range(repeat)], width=repeat)


class TestExtractPalette:

    def test_four_color_example(self):
        colors = [(255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 0)]
        # 400 pixels per color with step 10 samples 40 points per color
        grid = block_grid(colors, 400)
        palette = extract_palette(grid, k=4)

        assert [entry.count for entry in palette] == [40, 40, 40, 40]
        assert [entry.color_key for entry in palette] == [
            "255-0-0", "0-255-0", "0-0-255", "255-255-0"
        ]
        assert [entry.color for entry in palette] == colors

    def test_default_k_is_three(self):
        grid = block_grid([(10, 10, 10), (200, 30, 30), (30, 200, 30), (30, 30, 200)], 50)
        assert len(extract_palette(grid)) == 3

    def test_dominant_color_first(self):
        pixels = [(250, 250, 250)] * 700 + [(20, 40, 160)] * 300
        palette = extract_palette(make_grid(pixels, width=100), k=2)
        assert palette[0].color == (250, 250, 250)
        assert palette[0].count == 70
        assert palette[1].color == (20, 40, 160)
        assert palette[1].count == 30

    @pytest.mark.parametrize("k", [1, 2, 3, 5, 8])
    def test_returns_k_entries_with_counts_summing_to_samples(self, k):
        rng = np.random.default_rng(k)
        rgba = rng.integers(0, 256, size=(60, 80, 4), dtype=np.uint8)
        grid = PixelGrid.from_array(rgba)
        palette = extract_palette(grid, k=k)

        assert len(palette) == k
        assert all(entry.count >= 0 for entry in palette)
        assert sum(entry.count for entry in palette) == len(sample_points(grid))
        counts = [entry.count for entry in palette]
        assert counts == sorted(counts, reverse=True)

    def test_deterministic(self):
        rng = np.random.default_rng(42)
        grid = PixelGrid.from_array(rng.integers(0, 256, size=(100, 100, 4), dtype=np.uint8))
        first = extract_palette(grid, k=5)
        second = extract_palette(grid, k=5)
        assert first == second

    def test_alpha_does_not_affect_palette(self):
        rng = np.random.default_rng(8)
        rgba = rng.integers(0, 256, size=(40, 40, 4), dtype=np.uint8)
        opaque = rgba.copy()
        opaque[:, :, 3] = 255
        assert extract_palette(PixelGrid.from_array(rgba), k=3) == \
            extract_palette(PixelGrid.from_array(opaque), k=3)

    def test_empty_grid_returns_no_entries(self):
        grid = PixelGrid(width=0, height=0, data=np.zeros(0, dtype=np.uint8))
        assert extract_palette(grid, k=3) == []

    def test_fewer_distinct_points_than_k(self):
        grid = make_grid([(5, 5, 5), (250, 250, 250)], width=2)
        result = run_extraction(grid, k=5, step=1)
        palette = result.palette

        assert len(palette) == 5
        assert [entry.count for entry in palette] == [1, 1, 0, 0, 0]
        assert [entry.color_key for entry in palette[2:]] == ["5-5-5"] * 3

    def test_invalid_k(self):
        with pytest.raises(ValueError):
            extract_palette(make_grid([(1, 1, 1)]), k=0)


class TestRunExtraction:

    def test_diagnostics(self):
        grid = block_grid([(255, 0, 0), (0, 0, 255)], 100)
        result = run_extraction(grid, k=2)
        assert result.sampled_points == 20
        assert result.converged
        assert 1 <= result.iterations <= 20

    def test_custom_step(self):
        grid = block_grid([(255, 0, 0), (0, 0, 255)], 100)
        result = run_extraction(grid, k=2, step=1)
        assert result.sampled_points == 200
        assert sum(entry.count for entry in result.palette) == 200

    def test_iteration_cap_is_respected(self):
        rng = np.random.default_rng(17)
        grid = PixelGrid.from_array(rng.integers(0, 256, size=(100, 100, 4), dtype=np.uint8))
        result = run_extraction(grid, k=10, max_iterations=3)
        assert result.iterations <= 3
        assert len(result.palette) == 10
