"""
Palette ranking: order clusters by population and format output buckets.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class PaletteEntry:
    """One ranked palette bucket."""
    color_key: str
    color: Tuple[int, int, int]
    count: int


def to_color_key(color: Sequence[int]) -> str:
    """Canonical "R-G-B" key for a color."""
    return "-".join(str(int(channel)) for channel in color)


def rgb_to_hex(color: Sequence[int]) -> str:
    """Convert an RGB triple to a hex color string."""
    r, g, b = [int(x) for x in color]
    return f"#{r:02X}{g:02X}{b:02X}"


def rank_palette(centroids: np.ndarray, counts: Sequence[int]) -> List[PaletteEntry]:
    """
    Sort clusters by member count, most populous first.

    The sort is stable: clusters with equal counts keep centroid order.
    """
    order = sorted(range(len(centroids)), key=lambda i: -int(counts[i]))

    palette = []
    for i in order:
        color = tuple(int(channel) for channel in centroids[i])
        palette.append(PaletteEntry(
            color_key=to_color_key(color),
            color=color,
            count=int(counts[i])
        ))
    return palette
