"""
I/O module for reading scan metadata from instrument data.

This module provides:

Reader:
- ScanInfoReader: Derives cached ScanInfo records from a data source
- ReaderOptions: Caching and lineage options

Data sources:
- MemoryDataSource: In-memory scan records
- MzMLDataSource: mzML/mzXML files (filter strings kept by the converter)

Base classes:
- InstrumentDataSource: Abstract base class for all data sources
- FileDataSource: Base class for file-backed data sources
- ScanHeader: Retention time, TIC and base peak of a scan
"""

from .base import FileDataSource, InstrumentDataSource, ScanHeader
from .options import ReaderOptions
from .readers import MemoryDataSource, MzMLDataSource, ScanRecord
from .scan_reader import ScanInfoReader

__all__ = [
    # Base
    "InstrumentDataSource",
    "FileDataSource",
    "ScanHeader",
    # Data sources
    "MemoryDataSource",
    "MzMLDataSource",
    "ScanRecord",
    # Reader
    "ScanInfoReader",
    "ReaderOptions",
]
