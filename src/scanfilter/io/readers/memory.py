"""
In-memory instrument data source.

Holds per-scan records that were already read from a vendor reader (or
built by hand), and serves them through the InstrumentDataSource interface.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from ..base import InstrumentDataSource, ScanHeader


@dataclass(slots=True)
class ScanRecord:
    """
    Raw values of one scan.

    Attributes:
        scan_number: Scan number.
        filter_text: Scan filter text.
        scan_events: Ordered (name, value) scan event pairs.
        dependent_indices: Dependent scan indices as reported by the instrument.
        mz: m/z array.
        intensity: Intensity array.
        header: Retention time, TIC and base peak.
    """
    scan_number: int
    filter_text: str = ""
    scan_events: list[tuple[str, str]] = field(default_factory=list)
    dependent_indices: list[int] = field(default_factory=list)
    mz: NDArray[np.float64] = field(default_factory=lambda: np.empty(0))
    intensity: NDArray[np.float64] = field(default_factory=lambda: np.empty(0))
    header: ScanHeader = field(default_factory=ScanHeader)


class MemoryDataSource(InstrumentDataSource):
    """
    Data source over a collection of ScanRecord objects.

    Example:
        >>> source = MemoryDataSource([
        ...     ScanRecord(1, "FTMS + p NSI Full ms [400.00-2000.00]"),
        ...     ScanRecord(2, "ITMS + c NSI d Full ms2 756.98@cid35.00 [195.00-2000.00]",
        ...                scan_events=[("Master Scan Number:", "1")]),
        ... ])
        >>> source.first_scan, source.last_scan
        (1, 2)
    """

    def __init__(self, records: Iterable[ScanRecord] = ()):
        self._records: dict[int, ScanRecord] = {}
        for record in records:
            self.add(record)

    def add(self, record: ScanRecord) -> None:
        """Add or replace the record of a scan."""
        self._records[record.scan_number] = record

    def record(self, scan: int) -> ScanRecord:
        """Return the record of a scan; raises KeyError for unknown scans."""
        try:
            return self._records[scan]
        except KeyError:
            raise KeyError(f"Scan number {scan} not found") from None

    @property
    def first_scan(self) -> int:
        return min(self._records) if self._records else 0

    @property
    def last_scan(self) -> int:
        return max(self._records) if self._records else 0

    def scan_count(self) -> int:
        return len(self._records)

    def scan_filter_text(self, scan: int) -> str:
        return self.record(scan).filter_text

    def scan_events(self, scan: int) -> list[tuple[str, str]]:
        return list(self.record(scan).scan_events)

    def raw_dependent_indices(self, scan: int) -> list[int]:
        return list(self.record(scan).dependent_indices)

    def scan_data(self, scan: int) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        record = self.record(scan)
        return record.mz, record.intensity

    def scan_header(self, scan: int) -> ScanHeader:
        return self.record(scan).header

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, scan: object) -> bool:
        return scan in self._records
