"""
mzML/mzXML instrument data source.

Thermo converters (msconvert, ThermoRawFileParser) keep the scan filter
string of every spectrum ("filter string" cvParam in mzML, filterLine in
mzXML), so filter-based scan metadata can be derived from converted files
as well. Precursor references become "Master Scan Number" scan events and
are inverted into dependent scan lists.
"""

import logging
import re
from pathlib import Path
from typing import ClassVar, Optional

import numpy as np
from numpy.typing import NDArray

from ..base import FileDataSource, ScanHeader
from .memory import MemoryDataSource, ScanRecord

logger = logging.getLogger(__name__)


def _extract_scan_number(native_id: str, index: int) -> int:
    """
    Extract scan number from native ID string.

    Common formats:
    - "controllerType=0 controllerNumber=1 scan=123"
    - "scan=123"
    - "spectrum=123"
    - "index=123"
    - Just a number

    Falls back to index + 1 if parsing fails.
    """
    if not native_id:
        return index + 1

    # Try various patterns
    patterns = [
        r'scan=(\d+)',
        r'spectrum=(\d+)',
        r'index=(\d+)',
        r'^(\d+)$',
    ]

    for pattern in patterns:
        match = re.search(pattern, str(native_id))
        if match:
            return int(match.group(1))

    return index + 1


def _get_cv_value(spectrum_data: dict, *cv_names: str, default=None):
    """
    Get a value from CV term names in spectrum data.

    Tries multiple possible CV term names and returns the first match.
    """
    for name in cv_names:
        if name in spectrum_data:
            return spectrum_data[name]
    return default


def _first(value):
    """First element of a pyteomics list value, or the value itself."""
    if isinstance(value, list):
        return value[0] if value else {}
    return value


def _to_minutes(value) -> float:
    """Convert a pyteomics retention time (unitfloat) to minutes."""
    if value is None:
        return 0.0
    unit = getattr(value, 'unit_info', None)
    if unit in ('second', 's', 'UO:0000010'):
        return float(value) / 60.0
    return float(value)


def _as_array(values) -> NDArray[np.float64]:
    if values is None:
        return np.empty(0, dtype=np.float64)
    return np.asarray(values, dtype=np.float64)


class MzMLDataSource(FileDataSource):
    """
    Data source for mzML and mzXML files using pyteomics.

    The whole file is read when the context manager is entered, since
    lineage resolution needs random access to every scan.

    Example:
        >>> with MzMLDataSource("sample.mzML") as source:
        ...     reader = ScanInfoReader(source)
        ...     for info in reader.iter_scan_info():
        ...         print(info.scan_number, info.classification.scan_type_name)
    """

    vendor: ClassVar[str] = "Open Format"
    supported_extensions: ClassVar[list[str]] = ['.mzml', '.mzxml']

    def __init__(self, path: Path | str):
        """
        Initialize the mzML data source.

        Args:
            path: Path to mzML or mzXML file.
        """
        super().__init__(path)
        self._is_mzxml = self.path.suffix.lower() == '.mzxml'
        self._scans: Optional[MemoryDataSource] = None

    @classmethod
    def is_available(cls) -> bool:
        """Check if pyteomics is installed."""
        try:
            import pyteomics.mzml
            import pyteomics.mzxml
            return True
        except ImportError:
            return False

    @classmethod
    def get_installation_instructions(cls) -> str:
        """Return installation instructions for pyteomics."""
        return (
            "Install pyteomics:\n"
            "  pip install pyteomics\n"
            "  # or with lxml for better performance:\n"
            "  pip install pyteomics lxml"
        )

    def __enter__(self) -> 'MzMLDataSource':
        """Read every spectrum of the file."""
        if self._is_mzxml:
            from pyteomics import mzxml
            reader = mzxml.MzXML(str(self.path))
            parse = self._parse_mzxml_spectrum
        else:
            from pyteomics import mzml
            reader = mzml.MzML(str(self.path))
            parse = self._parse_mzml_spectrum

        scans = MemoryDataSource()
        with reader:
            for idx, spectrum_data in enumerate(reader):
                scans.add(parse(spectrum_data, idx))

        self._link_dependents(scans)
        self._scans = scans
        logger.info(f"Loaded {scans.scan_count()} scans from {self.path.name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Release the loaded scans."""
        self._scans = None

    def _loaded(self) -> MemoryDataSource:
        if self._scans is None:
            raise RuntimeError("Data source not opened. Use 'with' context manager.")
        return self._scans

    @staticmethod
    def _link_dependents(scans: MemoryDataSource) -> None:
        """
        Store each scan's children as dependent indices of its parent.

        The child scan number itself is stored; the dependents resolver
        checks the scan at the raw index first, which is then the child.
        """
        for scan in scans.scan_numbers():
            if scan not in scans:
                continue
            record = scans.record(scan)
            for name, value in record.scan_events:
                if not name.lower().startswith("master scan number"):
                    continue
                parent = int(value)
                if parent in scans:
                    scans.record(parent).dependent_indices.append(scan)
                break

    def _parse_mzml_spectrum(self, spectrum_data: dict, index: int) -> ScanRecord:
        """
        Parse a pyteomics mzML spectrum dictionary into a ScanRecord.

        Args:
            spectrum_data: Dictionary from pyteomics.
            index: Position in file (0-based).
        """
        native_id = spectrum_data.get('id', '')
        scan_number = _extract_scan_number(native_id, index)

        scan_info = _first(spectrum_data.get('scanList', {}).get('scan', []))
        filter_text = _get_cv_value(scan_info, 'filter string', default='')
        if not filter_text:
            filter_text = _get_cv_value(spectrum_data, 'filter string', default='')

        scan_events: list[tuple[str, str]] = []

        injection_time = _get_cv_value(scan_info, 'ion injection time')
        if injection_time is not None:
            scan_events.append(("Ion Injection Time (ms):", str(float(injection_time))))

        precursor = _first(spectrum_data.get('precursorList', {}).get('precursor', []))
        if precursor:
            spec_ref = precursor.get('spectrumRef', '')
            if spec_ref:
                parent_scan = _extract_scan_number(spec_ref, -1)
                if parent_scan > 0:
                    scan_events.append(("Master Scan Number:", str(parent_scan)))

            ion = _first(precursor.get('selectedIonList', {}).get('selectedIon', []))
            if ion and ion.get('charge state') is not None:
                scan_events.append(("Charge State:", str(int(ion['charge state']))))

            isolation = precursor.get('isolationWindow', {})
            lower = isolation.get('isolation window lower offset')
            upper = isolation.get('isolation window upper offset')
            if lower is not None and upper is not None:
                scan_events.append(("MS2 Isolation Width:", str(float(lower) + float(upper))))

        header = ScanHeader(
            retention_time=_to_minutes(_get_cv_value(scan_info, 'scan start time')),
            total_ion_current=float(_get_cv_value(spectrum_data, 'total ion current', default=0.0)),
            base_peak_mz=float(_get_cv_value(spectrum_data, 'base peak m/z', default=0.0)),
            base_peak_intensity=float(_get_cv_value(spectrum_data, 'base peak intensity', default=0.0)),
        )

        return ScanRecord(
            scan_number=scan_number,
            filter_text=str(filter_text),
            scan_events=scan_events,
            mz=_as_array(spectrum_data.get('m/z array')),
            intensity=_as_array(spectrum_data.get('intensity array')),
            header=header,
        )

    def _parse_mzxml_spectrum(self, spectrum_data: dict, index: int) -> ScanRecord:
        """Parse a pyteomics mzXML scan dictionary into a ScanRecord."""
        scan_number = _extract_scan_number(spectrum_data.get('num', ''), index)

        scan_events: list[tuple[str, str]] = []
        precursor = _first(spectrum_data.get('precursorMz', []))
        if precursor and precursor.get('precursorScanNum'):
            scan_events.append(("Master Scan Number:", str(int(precursor['precursorScanNum']))))
        if precursor and precursor.get('precursorCharge'):
            scan_events.append(("Charge State:", str(int(precursor['precursorCharge']))))

        header = ScanHeader(
            retention_time=_to_minutes(spectrum_data.get('retentionTime')),
            total_ion_current=float(spectrum_data.get('totIonCurrent', 0.0)),
            base_peak_mz=float(spectrum_data.get('basePeakMz', 0.0)),
            base_peak_intensity=float(spectrum_data.get('basePeakIntensity', 0.0)),
        )

        return ScanRecord(
            scan_number=scan_number,
            filter_text=str(spectrum_data.get('filterLine', '')),
            scan_events=scan_events,
            mz=_as_array(spectrum_data.get('m/z array')),
            intensity=_as_array(spectrum_data.get('intensity array')),
            header=header,
        )

    # ----- InstrumentDataSource implementation -----

    @property
    def first_scan(self) -> int:
        return self._loaded().first_scan

    @property
    def last_scan(self) -> int:
        return self._loaded().last_scan

    def scan_count(self) -> int:
        return self._loaded().scan_count()

    def scan_filter_text(self, scan: int) -> str:
        return self._loaded().scan_filter_text(scan)

    def scan_events(self, scan: int) -> list[tuple[str, str]]:
        return self._loaded().scan_events(scan)

    def raw_dependent_indices(self, scan: int) -> list[int]:
        return self._loaded().raw_dependent_indices(scan)

    def scan_data(self, scan: int) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        return self._loaded().scan_data(scan)

    def scan_header(self, scan: int) -> ScanHeader:
        return self._loaded().scan_header(scan)
