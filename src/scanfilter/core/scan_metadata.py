"""
Scan metadata derived from instrument scan filter text.

This module defines the immutable records produced while parsing a scan
filter string (MS level, parent ions, MRM mass ranges, classification) and
the ScanInfo dataclass that aggregates everything known about a single scan,
including its position in the acquisition lineage.
"""

import math
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional


class IonMode(Enum):
    """Ion polarity mode, taken from the first +/- sign in the filter text."""
    UNKNOWN = auto()
    POSITIVE = auto()
    NEGATIVE = auto()


class MRMScanType(Enum):
    """Monitoring mode of a scan."""
    NOT_MRM = auto()
    SIM = auto()       # Selected ion monitoring (narrow MS1 window)
    MRM_QMS = auto()   # Q1MS / Q3MS quadrupole scans
    SRM = auto()       # Selected reaction monitoring (also SIM pr)
    FULL_NL = auto()   # Full neutral loss (Full cnl)


class ActivationType(Enum):
    """Fragmentation/activation method for MS2+ scans."""
    CID = auto()      # Collision-Induced Dissociation
    MPD = auto()      # Multi-Photon Dissociation
    ECD = auto()      # Electron Capture Dissociation
    PQD = auto()      # Pulsed Q Dissociation
    ETD = auto()      # Electron Transfer Dissociation
    HCD = auto()      # Higher-energy Collisional Dissociation
    ANY = auto()
    SA = auto()       # Supplemental activation
    PTR = auto()      # Proton Transfer Reaction
    NETD = auto()     # Negative ETD
    NPTR = auto()     # Negative PTR
    UVPD = auto()     # Ultraviolet Photodissociation
    IRMPD = auto()    # Infrared Multiphoton Dissociation
    UNKNOWN = auto()


@dataclass(frozen=True, slots=True)
class MSLevelResult:
    """
    Outcome of locating the "ms level" marker in filter text.

    Attributes:
        found: True if a marker such as "Full ms2 " was found.
        ms_level: MS level (1 when no marker was found).
        remainder: Text following the marker, stripped; empty if not found.
    """
    found: bool
    ms_level: int = 1
    remainder: str = ""


@dataclass(frozen=True, slots=True)
class ParentIon:
    """
    One fragmentation stage listed in the filter text.

    Attributes:
        ms_level: MS level of the scan the ion was listed in.
        mz: Parent ion m/z.
        collision_mode: Collision mode, e.g. "cid", "sa_etd", "EThcD" (may be empty).
        collision_mode2: Secondary collision mode for ETciD/EThcD style scans.
        collision_energy: Primary collision energy.
        collision_energy2: Secondary collision energy (0 if absent).
        activation_type: Activation method inferred from the collision mode.
    """
    ms_level: int
    mz: float
    collision_mode: str = ""
    collision_mode2: str = ""
    collision_energy: float = 0.0
    collision_energy2: float = 0.0
    activation_type: ActivationType = ActivationType.UNKNOWN

    def __str__(self) -> str:
        if not self.collision_mode.strip():
            return f"ms{self.ms_level} {self.mz:.2f}"
        return f"ms{self.ms_level} {self.mz:.2f}@{self.collision_mode}{self.collision_energy:.2f}"


@dataclass(frozen=True, slots=True)
class ParentIonResult:
    """
    Parent ion extraction result.

    The scalar fields describe the "best" parent ion: the last ion listed,
    or the first one for multiplexed (msx) scans.
    """
    success: bool
    parent_ion_mz: float = 0.0
    ms_level: int = 1
    collision_mode: str = ""
    parent_ions: tuple[ParentIon, ...] = ()


@dataclass(frozen=True, slots=True)
class MRMMassRange:
    """A monitored m/z window of a SIM, MRM or SRM scan."""
    start_mass: float
    end_mass: float
    central_mass: float = field(init=False)

    def __post_init__(self) -> None:
        central = self.start_mass + (self.end_mass - self.start_mass) / 2
        object.__setattr__(self, 'central_mass', round(central, 6))

    @property
    def is_reversed(self) -> bool:
        """True if the end mass precedes the start mass (garbled filter text)."""
        return self.end_mass < self.start_mass

    def __str__(self) -> str:
        return f"{self.start_mass:.3f}-{self.end_mass:.3f}"


@dataclass(frozen=True, slots=True)
class MRMInfo:
    """Mass ranges monitored by an MRM-family scan."""
    mass_ranges: tuple[MRMMassRange, ...] = ()

    def __len__(self) -> int:
        return len(self.mass_ranges)

    def __iter__(self):
        return iter(self.mass_ranges)


@dataclass(frozen=True, slots=True)
class MS1ScanValidation:
    """
    Result of checking whether filter text describes an MS1-family scan.

    Attributes:
        is_valid: True for Full MS, zoom, SIM, Q1MS/Q3MS, SRM and neutral loss scans.
        ms_level: 1 for MS1/SIM/zoom scans, 2 for SRM and neutral loss scans,
            otherwise the level from the ms marker.
        is_sim: True for SIM and MRM_QMS scans.
        mrm_scan_type: Monitoring mode.
        is_zoom: True for zoom scans.
    """
    is_valid: bool
    ms_level: int = 1
    is_sim: bool = False
    mrm_scan_type: MRMScanType = MRMScanType.NOT_MRM
    is_zoom: bool = False


@dataclass(frozen=True, slots=True)
class ScanClassification:
    """Scan type label and generic (grouping) filter text."""
    scan_type_name: str
    generic_filter_text: str


@dataclass(frozen=True, slots=True)
class ParentScanResult:
    """Parent scan lookup result; parent_scan is 0 when not found."""
    found: bool
    parent_scan: int = 0


@dataclass(frozen=True, slots=True)
class ScanLineage:
    """Parent scan (0 = none) and dependent scans of a scan."""
    parent_scan: int = 0
    dependent_scans: tuple[int, ...] = ()


@dataclass(frozen=True, slots=True)
class ScanInfo:
    """
    Comprehensive metadata for a single scan, derived from its filter text
    and scan events.

    Attributes:
        scan_number: Vendor-assigned scan number.
        filter_text: Raw scan filter text (empty if the instrument stored none).
        ms_level: MS level (1 for MS1, 2 for MS2, etc.).
        event_number: Scan event number reported by the instrument.

        # Scan type
        is_sim: Selected ion monitoring scan.
        is_zoom: Zoom scan.
        mrm_scan_type: Monitoring mode.
        mrm_info: Monitored mass ranges (MRM-family scans only).
        ion_mode: Polarity from the filter text.
        is_high_resolution: True for FTMS (Orbitrap/FT-ICR) scans.

        # Precursor information (for MS2+ only)
        collision_mode: Collision mode of the best parent ion.
        activation_type: Activation method of the best parent ion.
        parent_ion_mz: m/z of the best parent ion.
        parent_ions: Every parent ion listed in the filter text.

        # Lineage
        parent_scan: Scan that triggered this one (0 = none or unknown).
        dependent_scans: Scans triggered by this one.

        # Scan header values supplied by the data source
        retention_time: Retention time in minutes.
        total_ion_current: Total ion current.
        base_peak_mz: m/z of the base peak.
        base_peak_intensity: Intensity of the base peak.
        ion_injection_time: Ion injection time in milliseconds.

        scan_events: Ordered (name, value) pairs from the instrument.
    """
    scan_number: int
    filter_text: str = ""
    ms_level: int = 1
    event_number: int = 1

    is_sim: bool = False
    is_zoom: bool = False
    mrm_scan_type: MRMScanType = MRMScanType.NOT_MRM
    mrm_info: MRMInfo = field(default_factory=MRMInfo)
    ion_mode: IonMode = IonMode.UNKNOWN
    is_high_resolution: bool = False

    collision_mode: str = ""
    activation_type: ActivationType = ActivationType.UNKNOWN
    parent_ion_mz: float = 0.0
    parent_ions: tuple[ParentIon, ...] = ()

    parent_scan: int = 0
    dependent_scans: tuple[int, ...] = ()

    retention_time: float = 0.0  # minutes
    total_ion_current: float = 0.0
    base_peak_mz: float = 0.0
    base_peak_intensity: float = 0.0
    ion_injection_time: float = 0.0  # milliseconds

    scan_events: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        """Validate metadata consistency."""
        if self.scan_number < 0:
            raise ValueError(f"scan_number must be >= 0, got {self.scan_number}")
        if self.ms_level < 1:
            raise ValueError(f"ms_level must be >= 1, got {self.ms_level}")

    def scan_event(self, name: str, prefix: bool = False) -> Optional[str]:
        """
        Look up a scan event value by name (case-insensitive).

        Args:
            name: Event name, e.g. "Charge State:".
            prefix: Match names that start with ``name``.

        Returns:
            The first matching value, or None.
        """
        wanted = name.lower()
        for key, value in self.scan_events:
            key_lower = key.lower()
            if key_lower == wanted or (prefix and key_lower.startswith(wanted)):
                return value
        return None

    def _scan_event_float(self, name: str) -> Optional[float]:
        value = self.scan_event(name)
        if value is None:
            return None
        try:
            number = float(value)
        except ValueError:
            return None
        return number if math.isfinite(number) else None

    @property
    def is_ms1(self) -> bool:
        """Check if this is an MS1 scan."""
        return self.ms_level == 1

    @property
    def is_msn(self) -> bool:
        """Check if this is an MSn (n > 1) scan."""
        return self.ms_level > 1

    @property
    def monoisotopic_mz(self) -> Optional[float]:
        """Monoisotopic precursor m/z reported by the instrument."""
        return self._scan_event_float("Monoisotopic M/Z:")

    @property
    def isolation_window_width(self) -> Optional[float]:
        """MS2 isolation window width in Da."""
        return self._scan_event_float("MS2 Isolation Width:")

    @property
    def charge_state(self) -> Optional[int]:
        """Precursor charge state reported by the instrument."""
        value = self._scan_event_float("Charge State:")
        return int(value) if value is not None else None

    @property
    def classification(self) -> ScanClassification:
        """Scan type name and generic filter text for this scan's filter."""
        from ..filters.naming import classify_scan
        return classify_scan(self.filter_text)

    @property
    def lineage(self) -> ScanLineage:
        """Parent and dependent scans as a single record."""
        return ScanLineage(parent_scan=self.parent_scan, dependent_scans=self.dependent_scans)

    def __str__(self) -> str:
        if not self.filter_text.strip():
            return f"Scan {self.scan_number}: Generic ScanHeaderInfo"
        return f"Scan {self.scan_number}: {self.filter_text}"
