"""
Unit tests for image decoding, upload validation and downscaling.
"""

import io

import numpy as np
import pytest
from fastapi import HTTPException
from PIL import Image

from colorpeek.services.imaging import (
    decode_image_bytes, fit_within, prepare_pixel_grid, validate_magic_bytes
)


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


class TestFitWithin:
    """Test the aspect-preserving size bound"""

    def test_landscape_clamps_width(self):
        assert fit_within(400, 200, 100) == (100, 50)

    def test_portrait_clamps_height(self):
        assert fit_within(300, 900, 100) == (33, 100)

    def test_square_clamps_both(self):
        assert fit_within(1000, 1000, 100) == (100, 100)

    def test_small_image_unchanged(self):
        assert fit_within(64, 48, 100) == (64, 48)

    def test_shorter_edge_at_least_one_pixel(self):
        assert fit_within(5000, 10, 100) == (100, 1)
        assert fit_within(3, 4000, 100) == (1, 100)

    def test_default_bound_from_config(self):
        assert fit_within(1000, 500) == (100, 50)


class TestPreparePixelGrid:

    def test_large_image_downscaled(self):
        image = Image.new("RGB", (640, 480), (12, 200, 34))
        grid = prepare_pixel_grid(image, max_edge=100)
        assert (grid.width, grid.height) == (100, 75)
        assert grid.data.size == 100 * 75 * 4
        pixels = grid.data.reshape(-1, 4)
        assert np.all(pixels[:, :3] == (12, 200, 34))
        assert np.all(pixels[:, 3] == 255)

    def test_small_image_kept(self):
        image = Image.new("RGBA", (20, 10), (1, 2, 3, 4))
        grid = prepare_pixel_grid(image, max_edge=100)
        assert (grid.width, grid.height) == (20, 10)
        assert grid.data[:4].tolist() == [1, 2, 3, 4]

    def test_grayscale_converted_to_rgba(self):
        image = Image.new("L", (8, 8), 128)
        grid = prepare_pixel_grid(image)
        assert grid.data[:4].tolist() == [128, 128, 128, 255]

    def test_grid_owns_its_buffer(self):
        image = Image.new("RGBA", (4, 4), (9, 9, 9, 255))
        first = prepare_pixel_grid(image)
        second = prepare_pixel_grid(image)
        first.data[0] = 0
        assert second.data[0] == 9
        assert image.getpixel((0, 0)) == (9, 9, 9, 255)


class TestDecodeImageBytes:

    def test_decode_png(self):
        data = encode_png(Image.new("RGB", (16, 8), (100, 150, 200)))
        image = decode_image_bytes(data)
        assert image.size == (16, 8)
        assert image.convert("RGB").getpixel((0, 0)) == (100, 150, 200)

    def test_decode_invalid(self):
        with pytest.raises(ValueError):
            decode_image_bytes(b"not an image at all")

    def test_decompression_bomb_is_value_error(self, monkeypatch):
        data = encode_png(Image.new("RGB", (20, 20), (1, 2, 3)))
        # 400 pixels is over twice the limit, so Pillow raises instead of warning
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
        with pytest.raises(ValueError):
            decode_image_bytes(data)


class TestValidateMagicBytes:

    def test_png(self):
        data = encode_png(Image.new("RGB", (2, 2)))
        assert validate_magic_bytes(data) == "image/png"

    def test_webp_signature(self):
        assert validate_magic_bytes(b"RIFF\x00\x00\x00\x00WEBPVP8 ") == "image/webp"

    def test_gif_signature(self):
        assert validate_magic_bytes(b"GIF89a\x01\x00\x01\x00\x00\x00") == "image/gif"

    def test_rejects_unknown(self):
        with pytest.raises(HTTPException) as exc_info:
            validate_magic_bytes(b"%PDF-1.7 not an image")
        assert exc_info.value.status_code == 400

    def test_rejects_tiny(self):
        with pytest.raises(HTTPException):
            validate_magic_bytes(b"\x89PNG")
