"""
Scan type names and generic filter text.

Scan type names are short labels used to group scans in reports:

    ITMS + c ESI Full ms [300.00-2000.00]                         MS
    FTMS + p NSI Full ms [400.00-2000.00]                         HMS
    ITMS + p ESI d Z ms [579.00-589.00]                           Zoom-MS
    ITMS + c ESI d Full ms2 583.26@cid35.00 [150.00-1180.00]      CID-MSn
    FTMS + c NSI d Full ms2 516.03@hcd40.00 [100.00-2000.00]      HCD-HMSn
    ITMS + c NSI d sa Full ms2 516.03@etd100.00 [50.00-2000.00]   SA_ETD-MSn
    FTMS + c NSI r d sa Full ms2 1073.48@etd120.55@hcd30.00       EThcD-HMSn
    + c NSI SRM ms2 501.560@cid15.00 [507.259-507.261]            CID-SRM
    + p NSI Q1MS [179.652-184.582, 505.778-510.708]               Q1MS
    c NSI Full cnl 162.053 [300.000-1200.000]                     MRM_Full_NL

Generic filter text removes scan-specific numbers so that scans acquired
with the same method compare equal:

    ITMS + c ESI d Full ms2 583.26@cid35.00 [150.00-1180.00]      ITMS + c ESI d Full ms2 0@cid35.00
    + c NSI SRM ms2 748.371 [701.368-701.370]                     + c NSI SRM ms2
    c NSI Full cnl 162.053 [300.000-1200.000]                     c NSI Full cnl
"""

from ..core.scan_metadata import MRMScanType, ScanClassification
from .grammar import contains_text, extract_ms_level
from .mrm import classify_mrm, validate_ms1_scan
from .parent_ions import extract_parent_ions
from .patterns import (
    COLLISION_SPEC_PATTERN,
    COLLISION_SPEC_REPLACEMENT,
    COMPOUND_COLLISION_MODES,
    HIGH_RES_TEXT,
    MRM_FULL_NL_TEXT,
    MRM_Q1MS_TEXT,
    MRM_Q3MS_TEXT,
    MZ_WITHOUT_COLLISION_ENERGY_PATTERN,
    SIM_MS_TEXT,
)

DEFAULT_SCAN_TYPE_NAME = "MS"
DEFAULT_GENERIC_FILTER = "MS"


def is_high_resolution(filter_text: str) -> bool:
    """True for FTMS (Orbitrap / FT-ICR) scans."""
    return contains_text(filter_text, HIGH_RES_TEXT)


def _capitalize_collision_mode(collision_mode: str) -> str:
    for compound in COMPOUND_COLLISION_MODES:
        if collision_mode.lower() == compound.lower():
            return compound
    return collision_mode.upper()


def scan_type_name(filter_text: str) -> str:
    """
    Short scan type label for filter text, e.g. "HMS", "CID-MSn", "Q1MS".

    Args:
        filter_text: Scan filter text.

    Returns:
        The scan type name, or "MS" for blank or unrecognized text.
    """
    if not filter_text or not filter_text.strip():
        return DEFAULT_SCAN_TYPE_NAME

    collision_mode = ""
    is_sim = False
    is_zoom = False

    ms_level = extract_ms_level(filter_text).ms_level

    if ms_level > 1:
        parent_result = extract_parent_ions(filter_text)
        if parent_result.success:
            ms_level = parent_result.ms_level
            collision_mode = parent_result.collision_mode
            mrm_scan_type = classify_mrm(filter_text)
        else:
            # Scans are sometimes labelled MSn when they are really MS1
            validation = validate_ms1_scan(filter_text)
            if not validation.is_valid:
                return DEFAULT_SCAN_TYPE_NAME
            ms_level = validation.ms_level
            is_sim = validation.is_sim
            is_zoom = validation.is_zoom
            mrm_scan_type = validation.mrm_scan_type
    else:
        validation = validate_ms1_scan(filter_text)
        if not validation.is_valid:
            return DEFAULT_SCAN_TYPE_NAME
        ms_level = validation.ms_level
        is_sim = validation.is_sim
        is_zoom = validation.is_zoom
        mrm_scan_type = validation.mrm_scan_type

    if mrm_scan_type in (MRMScanType.NOT_MRM, MRMScanType.SIM):
        if is_sim:
            return SIM_MS_TEXT.strip()
        if is_zoom:
            return "Zoom-MS"

        name = "MSn" if ms_level > 1 else "MS"
        if is_high_resolution(filter_text):
            name = "H" + name

        if ms_level > 1 and collision_mode:
            return f"{_capitalize_collision_mode(collision_mode)}-{name}"
        return name

    if mrm_scan_type == MRMScanType.MRM_QMS:
        if contains_text(filter_text, MRM_Q1MS_TEXT, 1):
            return MRM_Q1MS_TEXT.strip()
        if contains_text(filter_text, MRM_Q3MS_TEXT, 1):
            return MRM_Q3MS_TEXT.strip()
        return "MRM QMS"

    if mrm_scan_type == MRMScanType.SRM:
        if collision_mode:
            return f"{collision_mode.upper()}-SRM"
        return "CID-SRM"

    if mrm_scan_type == MRMScanType.FULL_NL:
        return "MRM_Full_NL"

    return "MRM"


def generic_filter(filter_text: str) -> str:
    """
    Generic version of filter text with scan-specific values removed.

    Drops the bracketed mass list, truncates neutral loss filters after
    "Full cnl", and replaces parent ion m/z values with 0. Applying the
    function to its own output returns the same text.

    Args:
        filter_text: Scan filter text.

    Returns:
        Generic filter text, or "MS" for blank text.
    """
    if not filter_text or not filter_text.strip():
        return DEFAULT_GENERIC_FILTER

    bracket_index = filter_text.find("[")
    if bracket_index > 0:
        generic = filter_text[:bracket_index].rstrip(" ")
    else:
        generic = filter_text.rstrip(" ")

    has_collision_spec = generic.find("@") > 0
    if has_collision_spec:
        generic = COLLISION_SPEC_PATTERN.sub(COLLISION_SPEC_REPLACEMENT, generic)

    full_cnl_index = generic.lower().find(MRM_FULL_NL_TEXT.lower())
    if full_cnl_index > 0:
        return generic[:full_cnl_index + len(MRM_FULL_NL_TEXT)].strip()

    if has_collision_spec:
        return generic

    # SRM precursor without a collision energy, e.g. "ms2 748.371"
    match = MZ_WITHOUT_COLLISION_ENERGY_PATTERN.search(generic)
    if match is not None:
        return generic[:match.start("mz_value")]

    return generic


def classify_scan(filter_text: str) -> ScanClassification:
    """Scan type name and generic filter text in a single record."""
    return ScanClassification(
        scan_type_name=scan_type_name(filter_text),
        generic_filter_text=generic_filter(filter_text),
    )
