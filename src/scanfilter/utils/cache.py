"""
Bounded cache of per-scan metadata.

Entries are evicted oldest-inserted first. Reads do not refresh an entry;
storing a scan again moves it to the newest end.
"""

from collections import OrderedDict
from typing import Optional

from ..core.scan_metadata import ScanInfo

DEFAULT_CACHE_SIZE = 50000


class ScanMetadataCache:
    """
    Insertion-order bounded mapping of scan number to ScanInfo.

    A capacity of 0 (or less) disables caching: puts are ignored and the
    cache stays empty. The cache has no internal locking.

    Example:
        >>> cache = ScanMetadataCache(capacity=2)
        >>> for scan in (1, 2, 3):
        ...     cache.put(scan, ScanInfo(scan_number=scan))
        >>> 1 in cache, 3 in cache
        (False, True)
    """

    def __init__(self, capacity: int = DEFAULT_CACHE_SIZE):
        self._entries: OrderedDict[int, ScanInfo] = OrderedDict()
        self._capacity = 0
        self.set_capacity(capacity)

    @property
    def capacity(self) -> int:
        """Maximum number of cached scans (0 = caching disabled)."""
        return self._capacity

    @capacity.setter
    def capacity(self, value: int) -> None:
        self.set_capacity(value)

    def set_capacity(self, capacity: int) -> None:
        """
        Change the capacity, evicting the oldest entries if needed.

        Args:
            capacity: New capacity; values <= 0 disable and clear the cache.
        """
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise TypeError(f"capacity must be an int, got {type(capacity).__name__}")

        self._capacity = max(capacity, 0)
        if self._capacity == 0:
            self._entries.clear()
        else:
            self._evict(self._capacity)

    def get(self, scan: int) -> Optional[ScanInfo]:
        """Return the cached ScanInfo for a scan, or None."""
        return self._entries.get(scan)

    def put(self, scan: int, info: ScanInfo) -> None:
        """Store ScanInfo for a scan as the newest entry."""
        if self._capacity == 0:
            return

        self._entries.pop(scan, None)
        self._evict(self._capacity - 1)
        self._entries[scan] = info

    def clear(self) -> None:
        """Remove all entries."""
        self._entries.clear()

    def _evict(self, limit: int) -> None:
        while len(self._entries) > limit:
            self._entries.popitem(last=False)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, scan: object) -> bool:
        return scan in self._entries

    def __repr__(self) -> str:
        return f"ScanMetadataCache({len(self)}/{self._capacity} scans)"
