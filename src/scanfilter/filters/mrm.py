"""
Monitoring mode detection (SIM, MRM, SRM, neutral loss) and MS1 validation.
"""

from ..core.scan_metadata import MRMScanType, MS1ScanValidation
from .grammar import contains_any, contains_text, extract_ms_level
from .patterns import (
    MRM_FULL_NL_TEXT,
    MRM_Q1MS_TEXT,
    MRM_Q3MS_TEXT,
    MRM_SIM_MSX_TEXT,
    MRM_SIM_PR_TEXT,
    MRM_SRM_TEXT,
    MS1_TAGS,
    MS_ONLY_DZ_MS2_TEXT,
    SIM_MS_TEXT,
    ZOOM_TAGS,
)

# Tests applied in order; the first tag found (at index >= 1) decides the type
_MRM_TAG_ORDER: tuple[tuple[tuple[str, ...], MRMScanType], ...] = (
    ((MRM_Q1MS_TEXT, MRM_Q3MS_TEXT), MRMScanType.MRM_QMS),
    ((MRM_SRM_TEXT,), MRMScanType.SRM),
    # SIM pr is not strictly SRM, but its data looks the same
    ((MRM_SIM_PR_TEXT,), MRMScanType.SRM),
    ((MRM_SIM_MSX_TEXT,), MRMScanType.SIM),
    ((MRM_FULL_NL_TEXT,), MRMScanType.FULL_NL),
    ((SIM_MS_TEXT,), MRMScanType.SIM),
)


def classify_mrm(filter_text: str) -> MRMScanType:
    """
    Determine the monitoring mode of a scan from its filter text.

    Args:
        filter_text: Scan filter text.

    Returns:
        The MRMScanType; NOT_MRM for blank text or text without MRM tags.

    Example:
        >>> classify_mrm("+ p NSI Q1MS [179.652-184.582, 505.778-510.708]")
        <MRMScanType.MRM_QMS: 3>
    """
    if not filter_text or not filter_text.strip():
        return MRMScanType.NOT_MRM

    for tags, scan_type in _MRM_TAG_ORDER:
        if contains_any(filter_text, tags, 1):
            return scan_type
    return MRMScanType.NOT_MRM


def validate_ms1_scan(filter_text: str) -> MS1ScanValidation:
    """
    Check whether filter text describes a supported MS1-family scan.

    Full MS, lock mass and zoom scans are MS1. SIM and Q1MS/Q3MS scans are
    MS1 SIM scans. SRM and neutral loss scans are valid with MS level 2.
    Anything else (regular MSn scans included) is invalid, with the level
    taken from the MS level marker.

    Args:
        filter_text: Scan filter text.

    Returns:
        MS1ScanValidation describing the scan.
    """
    if not filter_text:
        return MS1ScanValidation(is_valid=False)

    if contains_any(filter_text, MS1_TAGS, 1):
        return MS1ScanValidation(is_valid=True, ms_level=1)

    if contains_any(filter_text, ZOOM_TAGS, 1):
        return MS1ScanValidation(is_valid=True, ms_level=1, is_zoom=True)

    if contains_text(filter_text, MS_ONLY_DZ_MS2_TEXT, 1):
        # Dependent MS2 zoom scans are reported as MS1
        return MS1ScanValidation(is_valid=True, ms_level=1, is_zoom=True)

    mrm_scan_type = classify_mrm(filter_text)
    if mrm_scan_type in (MRMScanType.SIM, MRMScanType.MRM_QMS):
        return MS1ScanValidation(
            is_valid=True, ms_level=1, is_sim=True, mrm_scan_type=mrm_scan_type
        )
    if mrm_scan_type in (MRMScanType.SRM, MRMScanType.FULL_NL):
        return MS1ScanValidation(is_valid=True, ms_level=2, mrm_scan_type=mrm_scan_type)

    return MS1ScanValidation(
        is_valid=False,
        ms_level=extract_ms_level(filter_text).ms_level,
        mrm_scan_type=mrm_scan_type,
    )
