"""Shared fixtures for scanfilter tests."""

import numpy as np
import pytest

from scanfilter.io.base import ScanHeader
from scanfilter.io.readers.memory import MemoryDataSource, ScanRecord

MS1_FILTER = "FTMS + p NSI Full ms [400.00-2000.00]"


def _ms2_filter(mz: float) -> str:
    return f"ITMS + c NSI d Full ms2 {mz:.2f}@cid35.00 [195.00-2000.00]"


@pytest.fixture
def dda_source() -> MemoryDataSource:
    """
    A small data-dependent run: MS1 scan 1 with dependents 2-3, MS1 scan 4
    with dependent 5 and an MS3 scan 6 triggered by scan 5.

    MS1 scans list their dependents by scan number. MSn scans carry
    "Master Scan Number" events, except scan 6.
    """
    records = [
        ScanRecord(
            1, MS1_FILTER,
            scan_events=[("Scan Event:", "1"), ("Ion Injection Time (ms):", "12.5")],
            dependent_indices=[2, 3],
            mz=np.array([400.5, 500.25, 756.98]),
            intensity=np.array([100.0, 3000.0, 2000.0]),
            header=ScanHeader(retention_time=0.5, total_ion_current=5100.0,
                              base_peak_mz=500.25, base_peak_intensity=3000.0),
        ),
        ScanRecord(
            2, _ms2_filter(756.98),
            scan_events=[("Scan Event:", "2"), ("Master Scan Number:", "1"),
                         ("Charge State:", "2"), ("MS2 Isolation Width:", "2.00")],
        ),
        ScanRecord(
            3, _ms2_filter(500.25),
            scan_events=[("Scan Event:", "3"), ("Master Scan Number:", "1")],
        ),
        ScanRecord(4, MS1_FILTER, scan_events=[("Scan Event:", "1")], dependent_indices=[5]),
        ScanRecord(
            5, _ms2_filter(612.30),
            scan_events=[("Scan Event:", "2"), ("Master Scan Number:", "4")],
        ),
        ScanRecord(
            6, "ITMS + c NSI d Full ms3 612.30@cid35.00 420.10@cid35.00 [115.00-1250.00]",
            scan_events=[("Scan Event:", "3")],
        ),
    ]
    return MemoryDataSource(records)
