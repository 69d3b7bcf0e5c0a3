"""
Palette extraction core.

Synchronous pipeline from an RGBA pixel grid to a ranked palette:
sampling, farthest-point seeding, K-Means refinement and ranking. No I/O
happens here; acquisition and decoding live in the services around it.
"""

import time
from dataclasses import dataclass
from typing import List

from .sampling import PixelGrid, sample_points, DEFAULT_STEP
from .clustering import kmeans, MAX_ITERATIONS
from .ranking import PaletteEntry, rank_palette
from colorpeek.utils.logging import get_logger

DEFAULT_K = 3

log = get_logger()


@dataclass(frozen=True)
class ExtractionResult:
    """Ranked palette plus diagnostics from the clustering run."""
    palette: List[PaletteEntry]
    sampled_points: int
    iterations: int
    converged: bool


def run_extraction(grid: PixelGrid, k: int = DEFAULT_K, step: int = DEFAULT_STEP,
                   max_iterations: int = MAX_ITERATIONS) -> ExtractionResult:
    """
    Extract k dominant colors from a pixel grid.

    Args:
        grid: RGBA pixel grid, already downscaled
        k: Number of palette entries
        step: Pixel sampling stride
        max_iterations: K-Means iteration cap

    Returns:
        ExtractionResult whose palette holds k entries ordered by count,
        or no entries when the grid yields no sample points

    Raises:
        ValueError: If k < 1 or step < 1
    """
    if k < 1:
        raise ValueError(f"k must be >= 1, got {k}")

    start_time = time.time()
    points = sample_points(grid, step=step)

    if len(points) == 0:
        log.warning("No pixels sampled, returning empty palette",
                    extra={"width": grid.width, "height": grid.height})
        return ExtractionResult(palette=[], sampled_points=0, iterations=0, converged=True)

    result = kmeans(points, k, max_iterations=max_iterations)
    palette = rank_palette(result.centroids, result.counts)

    log.debug("Palette extraction complete", extra={
        "k": k,
        "sampled_points": len(points),
        "iterations": result.iterations,
        "converged": result.converged,
        "ms_extract": (time.time() - start_time) * 1000
    })

    return ExtractionResult(
        palette=palette,
        sampled_points=len(points),
        iterations=result.iterations,
        converged=result.converged
    )


def extract_palette(grid: PixelGrid, k: int = DEFAULT_K) -> List[PaletteEntry]:
    """Ranked palette of k dominant colors for a pixel grid."""
    return run_extraction(grid, k=k).palette
