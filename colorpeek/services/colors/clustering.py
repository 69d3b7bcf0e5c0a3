"""
K-Means refinement over integer RGB points.

Lloyd-style iteration: assign every point to its nearest centroid, move each
centroid to the rounded mean of its members, and stop once the centroids no
longer change or the iteration cap is hit. Centroids are kept on the integer
grid so the equality test terminates.
"""

from dataclasses import dataclass

import numpy as np

from .seeding import seed_centroids
from colorpeek.utils.logging import get_logger

MAX_ITERATIONS = 20

log = get_logger()


@dataclass(frozen=True, eq=False)
class ClusteringResult:
    """Final centroids and the membership sizes of the last assignment."""
    centroids: np.ndarray
    counts: np.ndarray
    iterations: int
    converged: bool

    def __len__(self) -> int:
        return len(self.centroids)


def assign_points(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Label each point with the index of its nearest centroid.

    Squared distances order the same way as rooted ones, and argmin keeps the
    lowest centroid index on ties. The expansion |p|^2 - 2 p.c + |c|^2 stays
    exact in int64 and only materialises an (N, k) matrix.
    """
    points = np.asarray(points, dtype=np.int64)
    centroids = np.asarray(centroids, dtype=np.int64)
    distances = (
        np.einsum("ij,ij->i", points, points)[:, None]
        - 2 * (points @ centroids.T)
        + np.einsum("ij,ij->i", centroids, centroids)[None, :]
    )
    return np.argmin(distances, axis=1)


def update_centroids(points: np.ndarray, labels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Recompute centroids as the member mean of each cluster, rounded half up.

    Clusters with no members keep their previous centroid.
    """
    k = len(centroids)
    counts = np.bincount(labels, minlength=k)
    sums = np.zeros((k, 3), dtype=np.int64)
    np.add.at(sums, labels, points)

    updated = centroids.copy()
    filled = counts > 0
    n = counts[filled][:, None]
    # floor(sum / n + 0.5) in exact integer arithmetic
    updated[filled] = (2 * sums[filled] + n) // (2 * n)
    return updated


def cluster_points(points: np.ndarray, centroids: np.ndarray,
                   max_iterations: int = MAX_ITERATIONS) -> ClusteringResult:
    """
    Refine initial centroids until they stop moving or the cap is reached.

    Args:
        points: (N, 3) integer color points
        centroids: (k, 3) initial centroids
        max_iterations: Upper bound on assignment/update cycles

    Returns:
        ClusteringResult with k centroids and k member counts
    """
    points = np.asarray(points, dtype=np.int64)
    centroids = np.asarray(centroids, dtype=np.int64).copy()
    k = len(centroids)

    if len(points) == 0 or k == 0:
        return ClusteringResult(
            centroids=centroids,
            counts=np.zeros(k, dtype=np.int64),
            iterations=0,
            converged=True
        )

    labels = np.zeros(len(points), dtype=np.int64)
    iterations = 0
    converged = False

    while not converged and iterations < max_iterations:
        labels = assign_points(points, centroids)
        updated = update_centroids(points, labels, centroids)
        converged = np.array_equal(updated, centroids)
        centroids = updated
        iterations += 1

    if not converged:
        log.debug("K-means hit iteration cap",
                  extra={"iterations": iterations, "k": k, "points": len(points)})

    return ClusteringResult(
        centroids=centroids,
        counts=np.bincount(labels, minlength=k),
        iterations=iterations,
        converged=converged
    )


def kmeans(points: np.ndarray, k: int, max_iterations: int = MAX_ITERATIONS) -> ClusteringResult:
    """Seed with farthest-point centroids, then refine."""
    centroids = seed_centroids(points, k)
    return cluster_points(points, centroids, max_iterations=max_iterations)
