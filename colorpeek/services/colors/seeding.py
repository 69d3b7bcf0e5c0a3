"""
Deterministic centroid seeding (max-min / farthest-point).

The first sampled point is always the first seed. Every following seed is
the point farthest from its nearest already-chosen seed, so the same image
always starts from the same centroids.
"""

import numpy as np


def squared_distances(points: np.ndarray, color: np.ndarray) -> np.ndarray:
    """Squared Euclidean distance from every point to a single color."""
    diff = points - color
    return np.einsum("ij,ij->i", diff, diff)


def seed_centroids(points: np.ndarray, k: int) -> np.ndarray:
    """
    Pick k initial centroids from the point set.

    Args:
        points: (N, 3) integer color points in scan order
        k: Number of centroids, k >= 1

    Returns:
        (k, 3) int64 array, or (0, 3) when there are no points

    Raises:
        ValueError: If k < 1
    """
    if k < 1:
        raise ValueError(f"k must be >= 1, got {k}")

    points = np.asarray(points, dtype=np.int64)
    if len(points) == 0:
        return np.empty((0, 3), dtype=np.int64)

    chosen = [0]
    nearest = squared_distances(points, points[0])

    for _ in range(1, k):
        # argmax keeps the first maximum, so ties resolve in scan order.
        # Once every point coincides with a seed this falls back to points[0].
        best = int(np.argmax(nearest))
        chosen.append(best)
        nearest = np.minimum(nearest, squared_distances(points, points[best]))

    return points[chosen].copy()
