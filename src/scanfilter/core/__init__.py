"""
Core data structures for scanfilter.

This module provides the data types describing a scan and its lineage:

- ScanInfo: Comprehensive metadata for a scan
- ParentIon: A precursor listed in MSn filter text
- MRMInfo / MRMMassRange: Monitored mass windows of SIM/MRM/SRM scans
- Spectrum: m/z-intensity data of a scan
- resolve_parent_scan / resolve_dependent_scans: Scan lineage

Result records of the filter text parsers:
- MSLevelResult, ParentIonResult, MS1ScanValidation, ScanClassification
- ParentScanResult, ScanLineage

Enums for categorical metadata:
- IonMode: Ion polarity (positive/negative)
- MRMScanType: Monitoring mode
- ActivationType: Fragmentation method
"""

from .scan_metadata import (
    ActivationType,
    IonMode,
    MRMInfo,
    MRMMassRange,
    MRMScanType,
    MS1ScanValidation,
    MSLevelResult,
    ParentIon,
    ParentIonResult,
    ParentScanResult,
    ScanClassification,
    ScanInfo,
    ScanLineage,
)
from .spectrum import Spectrum
from .lineage import resolve_dependent_scans, resolve_parent_scan

__all__ = [
    # Main classes
    "ScanInfo",
    "ParentIon",
    "MRMInfo",
    "MRMMassRange",
    "Spectrum",
    # Result records
    "MSLevelResult",
    "ParentIonResult",
    "MS1ScanValidation",
    "ScanClassification",
    "ParentScanResult",
    "ScanLineage",
    # Lineage
    "resolve_parent_scan",
    "resolve_dependent_scans",
    # Enums
    "IonMode",
    "MRMScanType",
    "ActivationType",
]
