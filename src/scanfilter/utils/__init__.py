"""
Utility modules for scanfilter.

This module provides:
- ScanMetadataCache: Bounded insertion-order cache of per-scan metadata
"""

from .cache import DEFAULT_CACHE_SIZE, ScanMetadataCache

__all__ = [
    "ScanMetadataCache",
    "DEFAULT_CACHE_SIZE",
]
