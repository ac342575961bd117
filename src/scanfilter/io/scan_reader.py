"""
Per-scan metadata reader.

ScanInfoReader combines the filter text parsers, the lineage resolvers and
the metadata cache over an InstrumentDataSource. Data source failures are
logged and reported as None rather than raised, so a single unreadable scan
does not stop iteration over a run.
"""

import logging
from collections.abc import Iterator
from dataclasses import replace
from typing import Optional

from ..core.lineage import resolve_dependent_scans, resolve_parent_scan
from ..core.scan_metadata import (
    ActivationType,
    MRMInfo,
    MRMScanType,
    ScanClassification,
    ScanInfo,
)
from ..core.spectrum import Spectrum
from ..filters.grammar import determine_ion_mode, extract_mrm_masses, extract_ms_level, try_float
from ..filters.mrm import classify_mrm, validate_ms1_scan
from ..filters.naming import classify_scan, is_high_resolution
from ..filters.parent_ions import activation_type_from_mode, collision_energies, extract_parent_ions
from ..utils.cache import ScanMetadataCache
from .base import InstrumentDataSource
from .options import ReaderOptions

logger = logging.getLogger(__name__)

SCAN_EVENT_NAME = "scan event"
ION_INJECTION_TIME_NAME = "ion injection time (ms)"

# Filter text is sometimes missing for MSn scans; those are reported as CID
_MISSING_FILTER_COLLISION_MODE = "cid"


def clean_scan_events(events) -> tuple[tuple[str, str], ...]:
    """
    Normalize raw (name, value) scan event pairs.

    Pairs with an empty name (or the "\\u0001" placeholder) are dropped; tabs
    in values become spaces and trailing spaces are removed.
    """
    cleaned = []
    for name, value in events:
        if not name or not name.strip() or name == "\u0001":
            continue
        cleaned.append((name, str(value).replace("\t", " ").rstrip(" ")))
    return tuple(cleaned)


def _find_event(events: tuple[tuple[str, str], ...], prefix: str) -> Optional[str]:
    for name, value in events:
        if name.lower().startswith(prefix):
            return value
    return None


class ScanInfoReader:
    """
    Derive ScanInfo records from an instrument data source.

    Args:
        source: The instrument data source.
        options: Reader options (defaults used if None).

    Example:
        >>> reader = ScanInfoReader(source)
        >>> info = reader.get_scan_info(2)
        >>> info.ms_level, info.parent_scan, info.classification.scan_type_name
        (2, 1, 'CID-MSn')
    """

    def __init__(self, source: InstrumentDataSource, options: Optional[ReaderOptions] = None):
        self.source = source
        self.options = options or ReaderOptions()
        self._cache = ScanMetadataCache(self.options.cache_size)

    def __enter__(self) -> 'ScanInfoReader':
        self.source.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._cache.clear()
        self.source.__exit__(exc_type, exc_val, exc_tb)

    @property
    def cache(self) -> ScanMetadataCache:
        """The per-scan metadata cache."""
        return self._cache

    # ----- Scan metadata -----

    def get_scan_info(self, scan: int) -> Optional[ScanInfo]:
        """
        Get metadata for a scan.

        Scan numbers outside the run are clamped to the first/last scan.

        Args:
            scan: Scan number.

        Returns:
            ScanInfo, or None if the scan could not be read or its filter
            text has an unknown format.
        """
        return self._get_scan_info(
            scan,
            resolve_parent=self.options.resolve_parent_scans,
            resolve_dependents=self.options.resolve_dependent_scans,
        )

    def _get_scan_info(
        self,
        scan: int,
        resolve_parent: bool,
        resolve_dependents: bool,
    ) -> Optional[ScanInfo]:
        try:
            if self.source.scan_count() == 0:
                logger.warning("Data source has no scans")
                return None
            scan = min(max(scan, self.source.first_scan), self.source.last_scan)
        except Exception as e:
            logger.warning(f"Could not read scan {scan}: {e}")
            return None

        cached = self._cache.get(scan)
        if cached is not None:
            return cached

        try:
            filter_text = self.source.scan_filter_text(scan) or ""
            events = clean_scan_events(self.source.scan_events(scan))
            header = self.source.scan_header(scan)
        except Exception as e:
            logger.warning(f"Could not read scan {scan}: {e}")
            return None

        if not filter_text.strip():
            filter_text = ""

        if self.options.trace_mode:
            logger.debug(f"Scan {scan}: {filter_text}")

        event_number = 1
        event_value = _find_event(events, SCAN_EVENT_NAME)
        if event_value is not None:
            try:
                event_number = int(event_value)
            except ValueError:
                logger.debug(f"Scan {scan}: non-numeric scan event '{event_value}'")

        injection_time = try_float(_find_event(events, ION_INJECTION_TIME_NAME) or "") or 0.0

        if event_number <= 1:
            # Instruments sometimes label MSn scans as event 1
            level_result = extract_ms_level(filter_text)
            if level_result.found:
                event_number = level_result.ms_level

        fields: dict = dict(
            scan_number=scan,
            filter_text=filter_text,
            event_number=event_number,
            scan_events=events,
            retention_time=header.retention_time,
            total_ion_current=header.total_ion_current,
            base_peak_mz=header.base_peak_mz,
            base_peak_intensity=header.base_peak_intensity,
            ion_injection_time=injection_time,
            is_high_resolution=is_high_resolution(filter_text) if filter_text else False,
        )

        needs_parent_scan = False

        if event_number > 1:
            fields['ms_level'] = 2
            if not filter_text:
                fields['collision_mode'] = _MISSING_FILTER_COLLISION_MODE
                fields['activation_type'] = ActivationType.CID
            else:
                parent_result = extract_parent_ions(filter_text)
                if parent_result.success:
                    fields['parent_ion_mz'] = parent_result.parent_ion_mz
                    fields['collision_mode'] = parent_result.collision_mode
                    fields['activation_type'] = activation_type_from_mode(parent_result.collision_mode)
                    if parent_result.ms_level > 2:
                        fields['ms_level'] = parent_result.ms_level
                    fields['mrm_scan_type'] = classify_mrm(filter_text)
                    fields['parent_ions'] = parent_result.parent_ions
                    needs_parent_scan = resolve_parent
                elif not self._apply_ms1_validation(fields, filter_text):
                    return None
        elif filter_text and not self._apply_ms1_validation(fields, filter_text):
            return None

        fields['ion_mode'] = determine_ion_mode(filter_text)

        mrm_scan_type = fields.get('mrm_scan_type', MRMScanType.NOT_MRM)
        if mrm_scan_type != MRMScanType.NOT_MRM:
            fields['mrm_info'] = extract_mrm_masses(filter_text, mrm_scan_type)
        else:
            fields['mrm_info'] = MRMInfo()

        info = ScanInfo(**fields)

        if needs_parent_scan:
            parent_result = resolve_parent_scan(
                info,
                lambda s: self._get_scan_info(s, resolve_parent=False, resolve_dependents=False),
                tolerance=self.options.parent_mz_tolerance,
                first_scan=self.source.first_scan,
            )
            if parent_result.found:
                info = replace(info, parent_scan=parent_result.parent_scan)

        if resolve_dependents:
            dependents = resolve_dependent_scans(
                info,
                self.source.raw_dependent_indices,
                lambda s: self._get_scan_info(s, resolve_parent=True, resolve_dependents=False),
                first_scan=self.source.first_scan,
            )
            if dependents:
                info = replace(info, dependent_scans=tuple(dependents))

        if (resolve_parent == self.options.resolve_parent_scans
                and resolve_dependents == self.options.resolve_dependent_scans):
            self._cache.put(scan, info)

        return info

    @staticmethod
    def _apply_ms1_validation(fields: dict, filter_text: str) -> bool:
        validation = validate_ms1_scan(filter_text)
        if not validation.is_valid:
            logger.error(f"Unknown format for scan filter: {filter_text}")
            return False
        fields['ms_level'] = validation.ms_level
        fields['is_sim'] = validation.is_sim
        fields['mrm_scan_type'] = validation.mrm_scan_type
        fields['is_zoom'] = validation.is_zoom
        return True

    def iter_scan_info(self) -> Iterator[ScanInfo]:
        """Iterate over the metadata of every readable scan."""
        for scan in self.source.scan_numbers():
            info = self.get_scan_info(scan)
            if info is not None:
                yield info

    # ----- Convenience accessors -----

    def get_parent_scan(self, scan: int) -> int:
        """Parent scan number of a scan (0 if none or unknown)."""
        info = self.get_scan_info(scan)
        return info.parent_scan if info is not None else 0

    def get_dependent_scans(self, scan: int) -> list[int]:
        """Scans triggered by a scan."""
        info = self.get_scan_info(scan)
        return list(info.dependent_scans) if info is not None else []

    def get_ms_level(self, scan: int) -> Optional[int]:
        """MS level of a scan, or None if the scan could not be read."""
        info = self.get_scan_info(scan)
        return info.ms_level if info is not None else None

    def get_collision_energies(self, scan: int) -> list[float]:
        """Collision energies of a scan's parent ions (empty for MS1 scans)."""
        info = self.get_scan_info(scan)
        if info is None:
            return []
        return collision_energies(info.parent_ions)

    def classify(self, scan: int) -> Optional[ScanClassification]:
        """Scan type name and generic filter text of a scan."""
        info = self.get_scan_info(scan)
        if info is None:
            return None
        return classify_scan(info.filter_text)

    def get_scan_data(self, scan: int, max_peaks: int = 0) -> Optional[Spectrum]:
        """
        Get the m/z and intensity data of a scan.

        Args:
            scan: Scan number.
            max_peaks: Keep only this many of the most intense points;
                0 (or negative) returns all data.

        Returns:
            Spectrum sorted by m/z, or None if the data could not be read.
        """
        try:
            mz, intensity = self.source.scan_data(scan)
        except Exception as e:
            logger.warning(f"Could not read data of scan {scan}: {e}")
            return None

        spectrum = Spectrum(mz=mz, intensity=intensity, scan_number=scan)
        if max_peaks > 0:
            spectrum = spectrum.top_peaks(max_peaks)
        return spectrum
