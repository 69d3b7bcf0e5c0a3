"""
colorpeek Imaging Utilities
Handles image decoding, upload validation and the downscale to a pixel grid.
"""
import io
from typing import Tuple

import numpy as np
from fastapi import HTTPException, UploadFile
from PIL import Image, UnidentifiedImageError

from colorpeek.config import config
from colorpeek.services.colors.sampling import PixelGrid


def validate_file_upload(file: UploadFile) -> None:
    """
    Validate uploaded file for size and format compliance.

    Args:
        file: FastAPI UploadFile object

    Raises:
        HTTPException: 400 for invalid files, 415 for unsupported formats
    """
    # Check file size (file.size might be None for some clients)
    if file.size and file.size > config.MAX_FILE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    if file.content_type not in config.SUPPORTED_MIME_TYPES:
        raise HTTPException(
            status_code=415,
            detail=f"Unsupported media type. Supported: {', '.join(config.SUPPORTED_MIME_TYPES)}"
        )

    if file.filename and '.' in file.filename:
        ext = file.filename.lower().rsplit('.', 1)[-1]
        if f".{ext}" not in config.SUPPORTED_EXTENSIONS:
            raise HTTPException(
                status_code=415,
                detail=f"Unsupported file extension. Supported: {', '.join(sorted(config.SUPPORTED_EXTENSIONS))}"
            )


def validate_magic_bytes(file_bytes: bytes) -> str:
    """
    Validate file magic bytes to ensure it's actually an image.

    Returns:
        Detected MIME type

    Raises:
        HTTPException: 400 for invalid/corrupt files
    """
    if len(file_bytes) < 12:
        raise HTTPException(status_code=400, detail="File too small or corrupt")

    if file_bytes.startswith(b'\xff\xd8\xff'):
        return "image/jpeg"
    elif file_bytes.startswith(b'\x89PNG\r\n\x1a\n'):
        return "image/png"
    elif file_bytes[:4] == b'RIFF' and file_bytes[8:12] == b'WEBP':
        return "image/webp"
    elif file_bytes[:6] in (b'GIF87a', b'GIF89a'):
        return "image/gif"
    else:
        raise HTTPException(
            status_code=400,
            detail="Invalid image file. Magic bytes don't match supported formats."
        )


def decode_image_bytes(data: bytes) -> Image.Image:
    """
    Decode raw image bytes into a fully loaded PIL image.

    Raises:
        ValueError: If the bytes are not a decodable image
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ValueError(f"Failed to decode image: {str(e)}") from e
    return image


async def read_image(file: UploadFile) -> Image.Image:
    """
    Safely read and decode an uploaded image.

    Raises:
        HTTPException: 400 for read/decode errors or oversized files
    """
    try:
        file_bytes = await file.read()
    except OSError as e:
        raise HTTPException(status_code=400, detail=f"Failed to read file: {str(e)}")

    if len(file_bytes) > config.MAX_FILE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    validate_magic_bytes(file_bytes)

    try:
        return decode_image_bytes(file_bytes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def fit_within(width: int, height: int, max_edge: int = None) -> Tuple[int, int]:
    """
    Target size with the longer edge clamped to max_edge, aspect preserved.

    Landscape images clamp the width; square and portrait images clamp the
    height. Sizes already within bounds are returned unchanged.
    """
    if max_edge is None:
        max_edge = config.MAX_EDGE

    new_width, new_height = float(width), float(height)
    if width > height:
        if width > max_edge:
            new_height = height * max_edge / width
            new_width = max_edge
    else:
        if height > max_edge:
            new_width = width * max_edge / height
            new_height = max_edge

    return max(1, int(round(new_width))), max(1, int(round(new_height)))


def prepare_pixel_grid(image: Image.Image, max_edge: int = None) -> PixelGrid:
    """
    Downscale an image into a fresh RGBA pixel grid.

    Args:
        image: Decoded PIL image of any mode
        max_edge: Longest allowed edge (default from config)

    Returns:
        PixelGrid owning its own buffer
    """
    rgba = image.convert("RGBA")
    width, height = rgba.size
    if width == 0 or height == 0:
        return PixelGrid(width=0, height=0, data=np.zeros(0, dtype=np.uint8))

    target = fit_within(width, height, max_edge)
    if target != (width, height):
        rgba = rgba.resize(target, Image.BILINEAR)

    return PixelGrid.from_array(np.array(rgba, dtype=np.uint8))
