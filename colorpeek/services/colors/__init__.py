"""
colorpeek Colors Module

Provides pixel sampling, deterministic centroid seeding, K-Means clustering
and palette ranking over raw RGB channel triples.
"""

__version__ = "0.2.0"
