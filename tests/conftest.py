"""
Test configuration and fixtures for colorpeek tests.
"""
from typing import Sequence, Tuple

import numpy as np
import pytest
from fastapi.testclient import TestClient

from main import app
from colorpeek.services.colors.sampling import PixelGrid


def make_grid(colors: Sequence[Tuple[int, int, int]], width: int = None) -> PixelGrid:
    """Build an opaque RGBA grid whose pixels take the given colors in scan order."""
    count = len(colors)
    if width is None:
        width = count
    height = count // width if width else 0
    rgba = np.zeros((count, 4), dtype=np.uint8)
    if count:
        rgba[:, :3] = np.array(colors, dtype=np.uint8)
        rgba[:, 3] = 255
    return PixelGrid(width=width, height=height, data=rgba.reshape(-1))


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from colorpeek.utils.metrics import reset_metrics
    reset_metrics()


@pytest.fixture
def four_color_points():
    """40 points each of red, green, blue and yellow, in that scan order."""
    colors = [(255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 0)]
    return np.array([c for c in colors for _ in range(40)], dtype=np.int64)
