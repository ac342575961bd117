"""
Low-level scan filter grammar: MS level marker, polarity and mass lists.

Filter text examples this module understands:

    FTMS + p NSI Full ms [400.00-2000.00]
    ITMS + c NSI d Full ms2 756.98@cid35.00 [195.00-2000.00]
    + c NSI SRM ms2 501.560@cid15.00 [507.259-507.261, 635-319-635.32]
    + p NSI Q1MS [179.652-184.582, 505.778-510.708, 994.968-999.898]
"""

import logging
from typing import Optional

from ..core.scan_metadata import (
    IonMode,
    MRMInfo,
    MRMMassRange,
    MRMScanType,
    MSLevelResult,
)
from .patterns import (
    ION_MODE_PATTERN,
    MASS_LIST_PATTERN,
    MASS_RANGE_PATTERN,
    MS_LEVEL_PATTERN,
)

logger = logging.getLogger(__name__)

# Scan types whose bracketed mass list describes monitored windows
_MASS_LIST_SCAN_TYPES = (MRMScanType.SIM, MRMScanType.MRM_QMS, MRMScanType.SRM)


def contains_text(text: str, tag: str, start: int = 0) -> bool:
    """
    Check whether the first case-insensitive occurrence of ``tag`` in
    ``text`` (with a space appended) begins at or after ``start``.

    Many tags end in a space; appending one lets them match at the end of
    the filter text.
    """
    return (text + " ").lower().find(tag.lower()) >= start


def contains_any(text: str, tags, start: int = 0) -> bool:
    """True if any of ``tags`` satisfies :func:`contains_text`."""
    return any(contains_text(text, tag, start) for tag in tags)


def try_float(text: str) -> Optional[float]:
    """Parse a float, returning None instead of raising."""
    try:
        return float(text)
    except (TypeError, ValueError):
        return None


def extract_ms_level(filter_text: str) -> MSLevelResult:
    """
    Locate the MS level marker (e.g. "Full ms2 ", " p ms3 ", "SRM ms2 ").

    Args:
        filter_text: Scan filter text.

    Returns:
        MSLevelResult with the level and the stripped text after the marker.
        When no marker is present (MS1 scans such as
        "FTMS + p NSI Full ms [400.00-2000.00]") the result has found=False,
        ms_level=1 and an empty remainder.

    Example:
        >>> extract_ms_level("+ p ms2 777.00@cid30.00 [210.00-1200.00]")
        MSLevelResult(found=True, ms_level=2, remainder='777.00@cid30.00 [210.00-1200.00]')
    """
    if not filter_text:
        return MSLevelResult(found=False)

    match = MS_LEVEL_PATTERN.search(filter_text)
    if match is None:
        return MSLevelResult(found=False)

    return MSLevelResult(
        found=True,
        ms_level=int(match.group("ms_level")),
        remainder=filter_text[match.end():].strip(),
    )


def determine_ion_mode(filter_text: str) -> IonMode:
    """
    Determine polarity from the first + or - sign before any mass list.

    Returns:
        IonMode.POSITIVE, IonMode.NEGATIVE or IonMode.UNKNOWN (blank text or
        no sign).
    """
    if not filter_text or not filter_text.strip():
        return IonMode.UNKNOWN

    bracket_index = filter_text.find("[")
    searched = filter_text[:bracket_index] if bracket_index > 0 else filter_text

    match = ION_MODE_PATTERN.search(searched)
    if match is None:
        return IonMode.UNKNOWN
    return IonMode.POSITIVE if match.group() == "+" else IonMode.NEGATIVE


def extract_mrm_masses(filter_text: str, mrm_scan_type: MRMScanType) -> MRMInfo:
    """
    Parse the monitored mass ranges of a SIM, MRM_QMS or SRM scan.

    Neutral loss scans and non-MRM scans yield an empty MRMInfo, as does
    text without a bracketed mass list. A range whose end precedes its start
    is kept as written; a range that is not numeric is skipped.

    Args:
        filter_text: Scan filter text.
        mrm_scan_type: Monitoring mode of the scan.

    Returns:
        MRMInfo with the ranges in the order listed.
    """
    if not filter_text or not filter_text.strip():
        return MRMInfo()
    if mrm_scan_type not in _MASS_LIST_SCAN_TYPES:
        return MRMInfo()

    mass_list = MASS_LIST_PATTERN.search(filter_text)
    if mass_list is None:
        return MRMInfo()

    ranges = []
    for match in MASS_RANGE_PATTERN.finditer(mass_list.group()):
        start_mass = try_float(match.group("start_mass"))
        end_mass = try_float(match.group("end_mass"))
        if start_mass is None or end_mass is None:
            logger.warning(f"Skipping unparsable mass range '{match.group()}' in '{filter_text}'")
            continue

        mass_range = MRMMassRange(start_mass=start_mass, end_mass=end_mass)
        if mass_range.is_reversed:
            logger.warning(f"Mass range '{match.group()}' ends before it starts in '{filter_text}'")
        ranges.append(mass_range)

    return MRMInfo(mass_ranges=tuple(ranges))
