"""
Mass/intensity data of a single scan.

This module defines the Spectrum class returned by ScanInfoReader.get_scan_data.
Spectra consist of m/z-intensity pairs sorted by m/z.
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray


@dataclass(slots=True)
class Spectrum:
    """
    m/z and intensity arrays of a scan.

    The arrays are stored as float64 NumPy arrays. For profile mode data they
    represent the continuous signal; for centroid data, discrete peaks.

    Attributes:
        mz: Array of m/z values (sorted in ascending order).
        intensity: Array of intensity values corresponding to mz.
        scan_number: Scan the data was read from.

    Example:
        >>> import numpy as np
        >>> spectrum = Spectrum(
        ...     mz=np.array([100.0, 150.0, 200.0]),
        ...     intensity=np.array([1000.0, 5000.0, 2500.0]),
        ...     scan_number=1,
        ... )
        >>> spectrum.n_points
        3
        >>> spectrum.top_peaks(2).mz.tolist()
        [150.0, 200.0]
    """
    mz: NDArray[np.float64]
    intensity: NDArray[np.float64]
    scan_number: int = 0

    def __post_init__(self) -> None:
        """Validate spectrum data consistency."""
        self.mz = np.asarray(self.mz)
        self.intensity = np.asarray(self.intensity)
        if self.mz.ndim != 1:
            raise ValueError(f"mz must be 1-dimensional, got shape {self.mz.shape}")
        if self.intensity.ndim != 1:
            raise ValueError(f"intensity must be 1-dimensional, got shape {self.intensity.shape}")
        if len(self.mz) != len(self.intensity):
            raise ValueError(
                f"mz and intensity must have same length, "
                f"got {len(self.mz)} and {len(self.intensity)}"
            )
        # Ensure arrays are the correct dtype
        if self.mz.dtype != np.float64:
            self.mz = self.mz.astype(np.float64)
        if self.intensity.dtype != np.float64:
            self.intensity = self.intensity.astype(np.float64)

    @classmethod
    def empty(cls, scan_number: int = 0) -> 'Spectrum':
        """Spectrum without data points."""
        return cls(mz=np.empty(0), intensity=np.empty(0), scan_number=scan_number)

    @property
    def n_points(self) -> int:
        """Number of data points in the spectrum."""
        return len(self.mz)

    @property
    def is_empty(self) -> bool:
        """Check if spectrum has no data points."""
        return self.n_points == 0

    @property
    def mz_range(self) -> tuple[float, float]:
        """
        Return (min_mz, max_mz) tuple.

        Raises:
            ValueError: If spectrum is empty.
        """
        if self.is_empty:
            raise ValueError("Cannot get mz_range of empty spectrum")
        return float(self.mz[0]), float(self.mz[-1])

    @property
    def total_intensity(self) -> float:
        """Sum of all intensities (equivalent to TIC if complete)."""
        return float(np.sum(self.intensity))

    @property
    def base_peak_index(self) -> int:
        """Index of the most intense peak."""
        if self.is_empty:
            raise ValueError("Cannot get base_peak_index of empty spectrum")
        return int(np.argmax(self.intensity))

    @property
    def base_peak_mz(self) -> float:
        """m/z of the most intense peak."""
        return float(self.mz[self.base_peak_index])

    @property
    def base_peak_intensity(self) -> float:
        """Intensity of the most intense peak."""
        return float(self.intensity[self.base_peak_index])

    def copy(self) -> 'Spectrum':
        """Create a deep copy of this spectrum."""
        return Spectrum(
            mz=self.mz.copy(),
            intensity=self.intensity.copy(),
            scan_number=self.scan_number,
        )

    def slice_mz(self, mz_min: float, mz_max: float) -> 'Spectrum':
        """
        Return a new spectrum containing only peaks within the m/z range.

        Args:
            mz_min: Minimum m/z value (inclusive).
            mz_max: Maximum m/z value (inclusive).

        Returns:
            New Spectrum with filtered data.
        """
        mask = (self.mz >= mz_min) & (self.mz <= mz_max)
        return Spectrum(
            mz=self.mz[mask].copy(),
            intensity=self.intensity[mask].copy(),
            scan_number=self.scan_number,
        )

    def top_peaks(self, max_peaks: int) -> 'Spectrum':
        """
        Keep only the most intense data points.

        Args:
            max_peaks: Number of points to keep; 0 or less keeps all.

        Returns:
            New Spectrum with at most ``max_peaks`` points, sorted by m/z.
        """
        if max_peaks <= 0 or max_peaks >= self.n_points:
            return self.copy()

        # Stable sorts so equal intensities keep their original order
        order = np.argsort(-self.intensity, kind='stable')[:max_peaks]
        order = order[np.argsort(self.mz[order], kind='stable')]
        return Spectrum(
            mz=self.mz[order].copy(),
            intensity=self.intensity[order].copy(),
            scan_number=self.scan_number,
        )

    def __len__(self) -> int:
        """Return number of data points."""
        return self.n_points

    def __repr__(self) -> str:
        """String representation."""
        if self.is_empty:
            mz_range_str = "empty"
        else:
            mz_min, mz_max = self.mz_range
            mz_range_str = f"m/z {mz_min:.2f}-{mz_max:.2f}"

        return (
            f"Spectrum(scan={self.scan_number}, "
            f"{self.n_points} points, "
            f"{mz_range_str})"
        )
