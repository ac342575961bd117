"""
Options for ScanInfoReader.
"""

from dataclasses import dataclass

from ..core.lineage import DEFAULT_PARENT_MZ_TOLERANCE
from ..utils.cache import DEFAULT_CACHE_SIZE


@dataclass
class ReaderOptions:
    """Options controlling scan metadata derivation and caching."""

    # Maximum number of cached ScanInfo records; 0 disables caching
    cache_size: int = DEFAULT_CACHE_SIZE

    # Lineage
    resolve_parent_scans: bool = True
    resolve_dependent_scans: bool = True
    parent_mz_tolerance: float = DEFAULT_PARENT_MZ_TOLERANCE  # m/z units

    # Log per-scan progress at debug level
    trace_mode: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.cache_size, bool) or not isinstance(self.cache_size, int):
            raise TypeError(f"cache_size must be an int, got {type(self.cache_size).__name__}")
        if self.parent_mz_tolerance <= 0:
            raise ValueError(f"parent_mz_tolerance must be > 0, got {self.parent_mz_tolerance}")
