"""
Instrument data sources.

This module provides concrete InstrumentDataSource implementations:

- MemoryDataSource: Scan records already held in memory
- MzMLDataSource: mzML and mzXML files exported by vendor converters (pyteomics)
"""

from .memory import MemoryDataSource, ScanRecord
from .mzml import MzMLDataSource

__all__ = [
    # Data sources
    "MemoryDataSource",
    "MzMLDataSource",
    # Records
    "ScanRecord",
]
