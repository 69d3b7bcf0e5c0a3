"""
colorpeek v1 API Routes
Palette extraction endpoints for uploaded images and image URLs.
"""
import time
from typing import Any, Dict

from fastapi import APIRouter, File, HTTPException, Query, UploadFile

from colorpeek.config import config
from colorpeek.schemas import ErrorResponse, PaletteEntrySchema, PaletteResponse, PaletteUrlRequest
from colorpeek.services.acquisition import LoadFailureError, SourceMissingError, get_acquirer, is_remote
from colorpeek.services.colors.extract_api import extract_from_image
from colorpeek.services.colors.extraction import ExtractionResult
from colorpeek.services.colors.ranking import rgb_to_hex
from colorpeek.services.colors.sampling import PixelGrid
from colorpeek.services.imaging import read_image, validate_file_upload
from colorpeek.utils.ids import generate_request_id
from colorpeek.utils.logging import get_logger
from colorpeek.utils.metrics import get_metrics

router = APIRouter(prefix="/v1", tags=["Palette Extraction"])
log = get_logger()


def build_palette_response(request_id: str, k: int, grid: PixelGrid,
                           result: ExtractionResult) -> PaletteResponse:
    """Convert an extraction result into the API response model."""
    total = max(1, result.sampled_points)
    palette = [
        PaletteEntrySchema(
            color_key=entry.color_key,
            color=list(entry.color),
            hex=rgb_to_hex(entry.color),
            count=entry.count,
            ratio=entry.count / total
        )
        for entry in result.palette
    ]
    return PaletteResponse(
        request_id=request_id,
        k=k,
        width=grid.width,
        height=grid.height,
        sampled_points=result.sampled_points,
        iterations=result.iterations,
        converged=result.converged,
        palette=palette
    )


@router.post("/palette",
             response_model=PaletteResponse,
             responses={
                 400: {"model": ErrorResponse, "description": "Invalid or undecodable image"},
                 415: {"model": ErrorResponse, "description": "Unsupported media type"}
             },
             summary="Palette from Upload",
             description="Extract the dominant colors of an uploaded image")
async def palette_from_upload(
    file: UploadFile = File(..., description="JPG, PNG, WebP or GIF image"),
    k: int = Query(config.DEFAULT_K, ge=1, le=config.MAX_K, description="Number of palette colors"),
    max_edge: int = Query(config.MAX_EDGE, ge=1, le=config.MAX_EDGE, description="Longest edge after downscaling"),
    step: int = Query(config.SAMPLE_STEP, ge=1, le=1000, description="Pixel sampling stride")
) -> PaletteResponse:
    """
    Extract a ranked palette from an uploaded image.

    - **file**: image to analyse
    - **k**: number of colors (1-MAX_K)
    - **max_edge**: the image is downscaled so its longer edge fits this bound
    - **step**: every step-th pixel of the downscaled grid is sampled
    """
    request_id = generate_request_id()
    metrics = get_metrics()
    metrics.increment_request_count()

    validate_file_upload(file)
    image = await read_image(file)

    grid, result = extract_from_image(image, k=k, max_edge=max_edge, step=step,
                                      request_id=request_id)
    return build_palette_response(request_id, k, grid, result)


@router.post("/palette/url",
             response_model=PaletteResponse,
             responses={
                 400: {"model": ErrorResponse, "description": "Missing or non-http(s) URL"},
                 502: {"model": ErrorResponse, "description": "Image could not be loaded"}
             },
             summary="Palette from URL",
             description="Fetch an image (with CORS proxy fallback) and extract its dominant colors")
async def palette_from_url(body: PaletteUrlRequest) -> PaletteResponse:
    """Extract a ranked palette from an image URL."""
    request_id = generate_request_id()
    metrics = get_metrics()
    metrics.increment_request_count()

    # Local paths are only resolvable in-process, never on behalf of a client
    if body.url and not is_remote(body.url):
        metrics.increment_failure_count("invalid_url")
        raise HTTPException(status_code=400, detail="Only http(s) image URLs are accepted")

    try:
        image = await get_acquirer().aload(src=body.url)
    except SourceMissingError as e:
        metrics.increment_failure_count("source_missing")
        raise HTTPException(status_code=400, detail=str(e))
    except LoadFailureError as e:
        metrics.increment_failure_count("load_failure")
        log.bind(request_id=request_id).error("Palette URL load failed", extra={"url": body.url})
        raise HTTPException(status_code=502, detail=str(e))

    grid, result = extract_from_image(image, k=body.k, request_id=request_id)
    return build_palette_response(request_id, body.k, grid, result)


@router.get("/healthz",
            summary="Health Check",
            description="Liveness probe for the palette service")
async def health_check() -> Dict[str, Any]:
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "colorpeek",
        "version": "v1",
        "timestamp": int(time.time())
    }


@router.get("/metrics",
            summary="Service Metrics",
            description="In-process counters and timing statistics")
async def service_metrics() -> Dict[str, Any]:
    """Get palette service metrics."""
    return get_metrics().get_summary()
