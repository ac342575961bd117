from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True, slots=True)
class ScanHeader:
    """Per-scan header values reported by the instrument."""
    retention_time: float = 0.0  # minutes
    total_ion_current: float = 0.0
    base_peak_mz: float = 0.0
    base_peak_intensity: float = 0.0


class InstrumentDataSource(ABC):
    """
    Abstract base class for instrument data sources.

    A data source supplies the raw per-scan values that scan metadata is
    derived from: filter text, scan events, dependent scan indices and
    mass/intensity arrays. Methods raise KeyError for scans the source
    does not hold.
    """

    def __enter__(self) -> 'InstrumentDataSource':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        return None

    @property
    @abstractmethod
    def first_scan(self) -> int:
        """First scan number of the run."""
        ...

    @property
    @abstractmethod
    def last_scan(self) -> int:
        """Last scan number of the run."""
        ...

    @abstractmethod
    def scan_count(self) -> int:
        """Total number of scans."""
        ...

    @abstractmethod
    def scan_filter_text(self, scan: int) -> str:
        """Filter text of a scan (empty if the instrument stored none)."""
        ...

    @abstractmethod
    def scan_events(self, scan: int) -> list[tuple[str, str]]:
        """Ordered (name, value) scan event pairs, e.g. ("Scan Event:", "2")."""
        ...

    @abstractmethod
    def raw_dependent_indices(self, scan: int) -> list[int]:
        """Scan indices the instrument lists as dependents of a scan."""
        ...

    @abstractmethod
    def scan_data(self, scan: int) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Return (mz, intensity) arrays of a scan."""
        ...

    def scan_header(self, scan: int) -> ScanHeader:
        """Retention time, TIC and base peak of a scan."""
        return ScanHeader()

    def scan_numbers(self) -> range:
        """All scan numbers of the run."""
        if self.scan_count() == 0:
            return range(0)
        return range(self.first_scan, self.last_scan + 1)


class FileDataSource(InstrumentDataSource):
    """
    Base class for data sources backed by a file.

    Subclasses are opened with a context manager.
    """

    # Class-level attributes
    vendor: ClassVar[str]  # e.g., "Thermo", "Open Format"
    supported_extensions: ClassVar[list[str]]  # e.g., [".mzml"]

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._validate_path()

    def _validate_path(self) -> None:
        """Validate file exists and has correct extension."""
        if not self.path.exists():
            raise FileNotFoundError(f"File not found: {self.path}")

        suffix = self.path.suffix.lower()
        if suffix not in self.supported_extensions:
            raise ValueError(
                f"Unsupported extension {suffix} for {self.vendor} data source. "
                f"Expected: {self.supported_extensions}"
            )

    @classmethod
    @abstractmethod
    def is_available(cls) -> bool:
        """
        Check if this source's dependencies are available.

        Returns False if required libraries are not installed.
        """
        ...

    @classmethod
    def get_installation_instructions(cls) -> str:
        """Return instructions for installing this source's dependencies."""
        return "See documentation for installation instructions."

    @abstractmethod
    def __enter__(self) -> 'FileDataSource':
        ...

    @abstractmethod
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        ...
