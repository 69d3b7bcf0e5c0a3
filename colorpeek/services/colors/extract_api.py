"""
Palette Extraction Orchestrator

Async facade over the synchronous palette core. Coordinates the pipeline from
image acquisition through downscaling to clustering and ranking, with request
logging and metrics around it.
"""

import time
from typing import List, Optional, Tuple

from PIL import Image

from .extraction import ExtractionResult, run_extraction, DEFAULT_K
from .ranking import PaletteEntry
from .sampling import PixelGrid
from colorpeek.config import config
from colorpeek.services.acquisition import AcquisitionError, ImageAcquirer, get_acquirer
from colorpeek.services.imaging import prepare_pixel_grid
from colorpeek.utils.ids import generate_request_id
from colorpeek.utils.logging import get_logger
from colorpeek.utils.metrics import get_metrics

log = get_logger()


def extract_from_image(image: Image.Image, k: int = DEFAULT_K,
                       max_edge: Optional[int] = None,
                       step: Optional[int] = None,
                       request_id: Optional[str] = None) -> Tuple[PixelGrid, ExtractionResult]:
    """
    Downscale a decoded image and run the palette core on it.

    Returns:
        Tuple of (pixel grid actually sampled, extraction result)
    """
    if request_id is None:
        request_id = generate_request_id()
    if step is None:
        step = config.SAMPLE_STEP

    metrics = get_metrics()
    start_time = time.time()

    grid = prepare_pixel_grid(image, max_edge=max_edge)
    result = run_extraction(grid, k=k, step=step, max_iterations=config.MAX_ITERATIONS)

    total_time = time.time() - start_time
    metrics.record_timing("extraction", total_time * 1000)

    log.bind(request_id=request_id).info("Palette extraction completed", extra={
        "dims": f"{grid.width}x{grid.height}",
        "k": k,
        "sampled_points": result.sampled_points,
        "iterations": result.iterations,
        "converged": result.converged,
        "ms_total": total_time * 1000
    })
    return grid, result


async def get_color_palette(src: Optional[str] = None,
                            image: Optional[Image.Image] = None,
                            k: int = DEFAULT_K,
                            acquirer: Optional[ImageAcquirer] = None) -> List[PaletteEntry]:
    """
    Resolve an image reference and extract its ranked palette.

    Args:
        src: http(s) URL or local path
        image: Already decoded image handle
        k: Number of palette entries
        acquirer: Image acquirer (defaults to the shared one)

    Returns:
        Palette entries ordered by descending count

    Raises:
        SourceMissingError: If neither src nor image is given
        LoadFailureError: If the image cannot be loaded
        ValueError: If k < 1
    """
    if acquirer is None:
        acquirer = get_acquirer()

    request_id = generate_request_id()
    metrics = get_metrics()
    metrics.increment_request_count()

    req_log = log.bind(request_id=request_id)
    req_log.info("Starting palette extraction", extra={"src": src, "k": k})

    try:
        loaded = await acquirer.aload(src=src, image=image)
        _, result = extract_from_image(loaded, k=k, request_id=request_id)
    except (AcquisitionError, ValueError) as e:
        req_log.error(f"Palette extraction failed: {str(e)}", extra={
            "error_type": type(e).__name__
        })
        metrics.increment_failure_count(type(e).__name__.lower())
        raise

    return result.palette
