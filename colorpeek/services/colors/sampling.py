"""
Pixel sampling for palette extraction.

Turns a downscaled RGBA pixel grid into a sparse point set of RGB triples
in scan order. Duplicates are kept; they carry the density signal the
clustering relies on.
"""

from dataclasses import dataclass

import numpy as np

CHANNELS = 4  # R, G, B, A interleaved
DEFAULT_STEP = 10


@dataclass(frozen=True, eq=False)
class PixelGrid:
    """Decoded RGBA pixels: width x height x 4 bytes, row-major."""
    width: int
    height: int
    data: np.ndarray

    def __post_init__(self):
        if isinstance(self.data, (bytes, bytearray, memoryview)):
            data = np.frombuffer(self.data, dtype=np.uint8).copy()
        else:
            data = np.asarray(self.data, dtype=np.uint8).reshape(-1)
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Invalid grid dimensions: {self.width}x{self.height}")
        expected = self.width * self.height * CHANNELS
        if data.size != expected:
            raise ValueError(
                f"Pixel buffer size mismatch: expected {expected} channel bytes "
                f"for {self.width}x{self.height}, got {data.size}"
            )
        object.__setattr__(self, "data", data)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @classmethod
    def from_array(cls, rgba: np.ndarray) -> "PixelGrid":
        """Build a grid from an (H, W, 4) uint8 array."""
        if rgba.ndim != 3 or rgba.shape[2] != CHANNELS:
            raise ValueError(f"Expected an (H, W, 4) RGBA array, got shape {rgba.shape}")
        height, width = rgba.shape[:2]
        return cls(width=width, height=height, data=rgba.reshape(-1))


def sample_points(grid: PixelGrid, step: int = DEFAULT_STEP) -> np.ndarray:
    """
    Take every `step`-th pixel of the grid, keeping RGB and dropping alpha.

    Args:
        grid: RGBA pixel grid
        step: Pixel stride over the flattened grid

    Returns:
        (N, 3) int64 array of color points in scan order
    """
    if step < 1:
        raise ValueError(f"Sampling step must be >= 1, got {step}")

    pixels = grid.data.reshape(-1, CHANNELS)
    return pixels[::step, :3].astype(np.int64)
