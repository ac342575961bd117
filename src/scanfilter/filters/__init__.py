"""
Scan filter text parsing.

Thermo-style scan filter strings such as
"ITMS + c NSI d Full ms2 756.98@cid35.00 [195.00-2000.00]" encode the
analyzer, polarity, MS level, parent ions and monitored mass ranges of a
scan. This package turns them into structured records:

- grammar: MS level marker, ion polarity, MRM mass lists
- parent_ions: parent ion list, best parent ion, collision energies
- mrm: monitoring mode (SIM/MRM/SRM/neutral loss), MS1 validation
- naming: scan type names and generic filter text

All functions are pure and never raise on malformed text.
"""

from .grammar import determine_ion_mode, extract_mrm_masses, extract_ms_level
from .mrm import classify_mrm, validate_ms1_scan
from .naming import classify_scan, generic_filter, is_high_resolution, scan_type_name
from .parent_ions import (
    activation_type_from_mode,
    collision_energies,
    extract_parent_ion_mz,
    extract_parent_ions,
)

__all__ = [
    # Grammar
    "extract_ms_level",
    "determine_ion_mode",
    "extract_mrm_masses",
    # Parent ions
    "extract_parent_ions",
    "extract_parent_ion_mz",
    "collision_energies",
    "activation_type_from_mode",
    # Monitoring mode
    "classify_mrm",
    "validate_ms1_scan",
    # Naming
    "scan_type_name",
    "generic_filter",
    "classify_scan",
    "is_high_resolution",
]
