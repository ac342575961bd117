"""Tests for the Spectrum class."""

import numpy as np
import pytest

from scanfilter.core.spectrum import Spectrum


@pytest.fixture
def spectrum() -> Spectrum:
    return Spectrum(
        mz=np.array([100.0, 150.0, 200.0, 250.0, 300.0]),
        intensity=np.array([10.0, 500.0, 50.0, 500.0, 200.0]),
        scan_number=7,
    )


class TestSpectrum:
    """Tests for Spectrum construction and accessors."""

    def test_converts_to_float64(self) -> None:
        spectrum = Spectrum(mz=[100, 200], intensity=[1, 2])
        assert spectrum.mz.dtype == np.float64
        assert spectrum.intensity.dtype == np.float64

    def test_length_mismatch(self) -> None:
        with pytest.raises(ValueError, match="same length"):
            Spectrum(mz=np.array([1.0, 2.0]), intensity=np.array([1.0]))

    def test_requires_1d(self) -> None:
        with pytest.raises(ValueError, match="1-dimensional"):
            Spectrum(mz=np.zeros((2, 2)), intensity=np.zeros(4))

    def test_empty(self) -> None:
        empty = Spectrum.empty(scan_number=3)
        assert empty.is_empty
        assert len(empty) == 0
        assert empty.scan_number == 3
        with pytest.raises(ValueError):
            _ = empty.mz_range

    def test_accessors(self, spectrum: Spectrum) -> None:
        assert spectrum.n_points == 5
        assert spectrum.mz_range == (100.0, 300.0)
        assert spectrum.total_intensity == pytest.approx(1260.0)
        assert spectrum.base_peak_mz == 150.0
        assert spectrum.base_peak_intensity == 500.0

    def test_slice_mz(self, spectrum: Spectrum) -> None:
        sliced = spectrum.slice_mz(150.0, 250.0)
        assert sliced.mz.tolist() == [150.0, 200.0, 250.0]
        assert sliced.scan_number == 7

    def test_copy_is_independent(self, spectrum: Spectrum) -> None:
        copied = spectrum.copy()
        copied.intensity[0] = 0.0
        assert spectrum.intensity[0] == 10.0


class TestTopPeaks:
    """Tests for Spectrum.top_peaks."""

    def test_keeps_most_intense_sorted_by_mz(self, spectrum: Spectrum) -> None:
        top = spectrum.top_peaks(3)
        assert top.mz.tolist() == [150.0, 250.0, 300.0]
        assert top.intensity.tolist() == [500.0, 500.0, 200.0]

    def test_ties_keep_lower_mz(self, spectrum: Spectrum) -> None:
        assert spectrum.top_peaks(1).mz.tolist() == [150.0]

    @pytest.mark.parametrize("max_peaks", [0, -3, 5, 10])
    def test_returns_all_points(self, spectrum: Spectrum, max_peaks: int) -> None:
        top = spectrum.top_peaks(max_peaks)
        assert top.mz.tolist() == spectrum.mz.tolist()
        assert top is not spectrum

    def test_result_sorted_when_intensity_order_differs(self) -> None:
        spectrum = Spectrum(
            mz=np.array([100.0, 200.02, 200.01, 300.0]),
            intensity=np.array([1.0, 50.0, 60.0, 40.0]),
        )
        top = spectrum.top_peaks(3)
        assert top.mz.tolist() == [200.01, 200.02, 300.0]
        assert top.intensity.tolist() == [60.0, 50.0, 40.0]
