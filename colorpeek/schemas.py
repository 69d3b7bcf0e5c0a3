"""
colorpeek API Schemas
Pydantic models for palette extraction request/response validation.
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from colorpeek.config import config


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("colorpeek", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")


class PaletteEntrySchema(BaseModel):
    """Single ranked palette bucket."""
    color_key: str = Field(
        ...,
        pattern=r"^\d{1,3}-\d{1,3}-\d{1,3}$",
        description="Canonical key: channel values joined by dashes, e.g. 255-0-0"
    )
    color: List[int] = Field(
        ...,
        min_length=3,
        max_length=3,
        description="Centroid as [R, G, B], each 0-255"
    )
    hex: str = Field(
        ...,
        pattern=r"^#[0-9A-Fa-f]{6}$",
        description="Hex color code in format #RRGGBB"
    )
    count: int = Field(..., ge=0, description="Sampled points assigned to this color")
    ratio: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Share of sampled points (0.0-1.0)"
    )


class PaletteUrlRequest(BaseModel):
    """Palette request for an image reachable by URL."""
    url: Optional[str] = Field(None, description="http(s) URL of the image")
    k: int = Field(config.DEFAULT_K, ge=1, le=config.MAX_K, description="Number of palette colors")


class PaletteResponse(BaseModel):
    """Main palette extraction response."""
    request_id: str = Field(..., description="Request identifier for tracing")
    k: int = Field(..., description="Number of color clusters requested")
    width: int = Field(..., description="Width of the downscaled pixel grid")
    height: int = Field(..., description="Height of the downscaled pixel grid")
    sampled_points: int = Field(..., description="Number of pixels sampled for clustering")
    iterations: int = Field(..., description="K-Means iterations performed")
    converged: bool = Field(..., description="Whether centroids stopped moving before the cap")
    palette: List[PaletteEntrySchema] = Field(
        ...,
        description="Palette ordered by count (most to least populous)"
    )
