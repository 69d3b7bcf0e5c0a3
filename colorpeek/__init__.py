"""
colorpeek

Deterministic dominant-color palette extraction: pixel sampling, farthest-point
seeding and K-Means refinement, with image acquisition and an HTTP API around
the synchronous core.
"""

__version__ = "0.2.0"
