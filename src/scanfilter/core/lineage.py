"""
Scan lineage: which scan triggered a given MSn scan, and which scans a given
scan triggered.

Both resolvers work over lookup callables so they stay independent of the
data source. A lookup returns None when the scan cannot be read; exceptions
raised by a lookup are logged and treated the same way.
"""

import logging
from typing import Callable, Iterable, Optional

from .scan_metadata import ParentScanResult, ScanInfo

logger = logging.getLogger(__name__)

MASTER_SCAN_EVENT = "Master Scan Number"
DEFAULT_PARENT_MZ_TOLERANCE = 0.001

ScanLookup = Callable[[int], Optional[ScanInfo]]
DependentsLookup = Callable[[int], Optional[Iterable[int]]]


def _lookup(scan_lookup: ScanLookup, scan: int) -> Optional[ScanInfo]:
    try:
        return scan_lookup(scan)
    except Exception as e:
        logger.warning(f"Could not read scan {scan}: {e}")
        return None


def resolve_parent_scan(
    scan_info: ScanInfo,
    scan_lookup: ScanLookup,
    tolerance: float = DEFAULT_PARENT_MZ_TOLERANCE,
    first_scan: int = 1,
) -> ParentScanResult:
    """
    Determine the scan that triggered an MSn scan.

    The "Master Scan Number" scan event is used when present. Older files
    lack it; for those, earlier scans are walked backwards collecting
    candidates one MS level below the current scan, stopping at the first
    MS1 scan (or any scan more than one level below). A single candidate is
    the parent. With several, the nearest candidate whose parent ion m/z
    matches one of this scan's parent ions (tried in order) is chosen.

    Args:
        scan_info: Scan whose parent is wanted.
        scan_lookup: Returns ScanInfo for a scan number (parent and
            dependents need not be resolved), or None.
        tolerance: Maximum m/z difference for a parent ion match.
        first_scan: Lowest scan number to walk back to.

    Returns:
        ParentScanResult; parent_scan is 0 when the parent is unknown.
    """
    master_scan = scan_info.scan_event(MASTER_SCAN_EVENT, prefix=True)
    if master_scan is not None:
        try:
            return ParentScanResult(found=True, parent_scan=int(master_scan.strip()))
        except ValueError:
            logger.debug(f"Scan {scan_info.scan_number}: non-numeric master scan '{master_scan}'")

    if scan_info.ms_level <= 1:
        return ParentScanResult(found=False)

    parent_level = scan_info.ms_level - 1
    candidates: list[ScanInfo] = []

    previous_scan = scan_info.scan_number - 1
    while previous_scan >= first_scan:
        previous = _lookup(scan_lookup, previous_scan)
        if previous is not None:
            if previous.ms_level == parent_level:
                candidates.append(previous)
            if previous.ms_level <= 1 or previous.ms_level < parent_level:
                break
        previous_scan -= 1

    if not candidates:
        return ParentScanResult(found=False)

    if len(candidates) == 1:
        return ParentScanResult(found=True, parent_scan=candidates[0].scan_number)

    for parent_ion in scan_info.parent_ions:
        for candidate in candidates:
            if abs(candidate.parent_ion_mz - parent_ion.mz) < tolerance:
                return ParentScanResult(found=True, parent_scan=candidate.scan_number)

    logger.debug(
        f"Scan {scan_info.scan_number}: {len(candidates)} candidate parents, "
        f"none matching a parent ion"
    )
    return ParentScanResult(found=False)


def resolve_dependent_scans(
    scan_info: ScanInfo,
    dependents_lookup: DependentsLookup,
    scan_lookup: ScanLookup,
    first_scan: int = 1,
) -> list[int]:
    """
    Determine the scans triggered by a scan.

    The instrument reports dependents as scan indices, which do not reliably
    equal ``scan_number - first_scan``. When index and scan number coincide
    the scan is accepted directly; otherwise the scan at the index, then the
    scan at ``index + first_scan``, is accepted if its parent scan is
    ``scan_info``.

    Args:
        scan_info: Scan whose dependents are wanted.
        dependents_lookup: Returns the raw dependent indices of a scan number.
        scan_lookup: Returns ScanInfo with the parent scan resolved (dependents
            need not be), or None.
        first_scan: First scan number of the run.

    Returns:
        Dependent scan numbers, in the order reported by the instrument.
    """
    try:
        raw_indices = dependents_lookup(scan_info.scan_number)
    except Exception as e:
        logger.warning(f"Could not read dependents of scan {scan_info.scan_number}: {e}")
        return []

    if not raw_indices:
        return []

    dependent_scans: list[int] = []
    for scan_index in raw_indices:
        scan_number = scan_index + first_scan

        if scan_index == scan_number:
            dependent_scans.append(scan_number)
            continue

        for candidate_scan in (scan_index, scan_number):
            candidate = _lookup(scan_lookup, candidate_scan)
            if candidate is not None and candidate.parent_scan == scan_info.scan_number:
                dependent_scans.append(candidate.scan_number)
                break

    return dependent_scans
