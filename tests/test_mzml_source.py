"""Tests for MzMLDataSource."""

import base64

import numpy as np
import pytest

from scanfilter.io.readers.mzml import MzMLDataSource, _extract_scan_number
from scanfilter.io.scan_reader import ScanInfoReader

MS1_FILTER = "FTMS + p NSI Full ms [400.00-2000.00]"
MS2_FILTER = "ITMS + c NSI d Full ms2 756.98@cid35.00 [195.00-2000.00]"


def _binary_array(values: list[float], name: str, accession: str) -> str:
    encoded = base64.b64encode(np.asarray(values, dtype="<f8").tobytes()).decode("ascii")
    return f"""
          <binaryDataArray encodedLength="{len(encoded)}">
            <cvParam cvRef="MS" accession="MS:1000523" name="64-bit float" value=""/>
            <cvParam cvRef="MS" accession="MS:1000576" name="no compression" value=""/>
            <cvParam cvRef="MS" accession="{accession}" name="{name}" value=""/>
            <binary>{encoded}</binary>
          </binaryDataArray>"""


def _spectrum(index: int, scan: int, filter_text: str, ms_level: int, rt: float,
              mz: list[float], intensity: list[float], precursor: str = "") -> str:
    return f"""
      <spectrum index="{index}" id="controllerType=0 controllerNumber=1 scan={scan}" defaultArrayLength="{len(mz)}">
        <cvParam cvRef="MS" accession="MS:1000511" name="ms level" value="{ms_level}"/>
        <cvParam cvRef="MS" accession="MS:1000285" name="total ion current" value="{sum(intensity)}"/>
        <scanList count="1">
          <cvParam cvRef="MS" accession="MS:1000795" name="no combination" value=""/>
          <scan>
            <cvParam cvRef="MS" accession="MS:1000016" name="scan start time" value="{rt}" unitCvRef="UO" unitAccession="UO:0000031" unitName="minute"/>
            <cvParam cvRef="MS" accession="MS:1000512" name="filter string" value="{filter_text}"/>
            <cvParam cvRef="MS" accession="MS:1000927" name="ion injection time" value="25.0" unitCvRef="UO" unitAccession="UO:0000028" unitName="millisecond"/>
          </scan>
        </scanList>{precursor}
        <binaryDataArrayList count="2">{_binary_array(mz, "m/z array", "MS:1000514")}{_binary_array(intensity, "intensity array", "MS:1000515")}
        </binaryDataArrayList>
      </spectrum>"""


def _precursor(parent_scan: int, mz: float, charge: int) -> str:
    return f"""
        <precursorList count="1">
          <precursor spectrumRef="controllerType=0 controllerNumber=1 scan={parent_scan}">
            <isolationWindow>
              <cvParam cvRef="MS" accession="MS:1000827" name="isolation window target m/z" value="{mz}"/>
              <cvParam cvRef="MS" accession="MS:1000828" name="isolation window lower offset" value="1.0"/>
              <cvParam cvRef="MS" accession="MS:1000829" name="isolation window upper offset" value="1.0"/>
            </isolationWindow>
            <selectedIonList count="1">
              <selectedIon>
                <cvParam cvRef="MS" accession="MS:1000744" name="selected ion m/z" value="{mz}"/>
                <cvParam cvRef="MS" accession="MS:1000041" name="charge state" value="{charge}"/>
              </selectedIon>
            </selectedIonList>
            <activation>
              <cvParam cvRef="MS" accession="MS:1000133" name="collision-induced dissociation" value=""/>
            </activation>
          </precursor>
        </precursorList>"""


@pytest.fixture
def mzml_path(tmp_path):
    spectra = [
        _spectrum(0, 1, MS1_FILTER, 1, 0.5, [400.5, 500.25, 756.98], [100.0, 3000.0, 2000.0]),
        _spectrum(1, 2, MS2_FILTER, 2, 0.51, [210.1, 355.2], [40.0, 80.0],
                  _precursor(1, 756.98, 2)),
        _spectrum(2, 3, MS1_FILTER, 1, 0.6, [401.0], [10.0]),
    ]
    content = f"""<?xml version="1.0" encoding="utf-8"?>
<mzML xmlns="http://psi.hupo.org/ms/mzml" version="1.1.0">
  <cvList count="2">
    <cv id="MS" fullName="Proteomics Standards Initiative Mass Spectrometry Ontology" URI="https://raw.githubusercontent.com/HUPO-PSI/psi-ms-CV/master/psi-ms.obo"/>
    <cv id="UO" fullName="Unit Ontology" URI="https://raw.githubusercontent.com/bio-ontology-research-group/unit-ontology/master/unit.obo"/>
  </cvList>
  <run id="test_run">
    <spectrumList count="{len(spectra)}">{"".join(spectra)}
    </spectrumList>
  </run>
</mzML>
"""
    path = tmp_path / "sample.mzML"
    path.write_text(content, encoding="utf-8")
    return path


class TestExtractScanNumber:
    """Tests for native ID parsing."""

    @pytest.mark.parametrize("native_id,index,expected", [
        ("controllerType=0 controllerNumber=1 scan=123", 0, 123),
        ("scan=7", 0, 7),
        ("index=4", 0, 4),
        ("42", 0, 42),
        ("", 9, 10),
        ("unparsable", 2, 3),
    ])
    def test_extract(self, native_id: str, index: int, expected: int) -> None:
        assert _extract_scan_number(native_id, index) == expected


class TestMzMLDataSource:
    """Tests for reading scans from mzML files."""

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            MzMLDataSource(tmp_path / "missing.mzML")

    def test_unsupported_extension(self, tmp_path) -> None:
        path = tmp_path / "sample.raw"
        path.write_bytes(b"")
        with pytest.raises(ValueError, match="Unsupported extension"):
            MzMLDataSource(path)

    def test_requires_context_manager(self, mzml_path) -> None:
        with pytest.raises(RuntimeError):
            MzMLDataSource(mzml_path).scan_count()

    def test_reads_scans(self, mzml_path) -> None:
        pytest.importorskip("pyteomics")
        with MzMLDataSource(mzml_path) as source:
            assert source.scan_count() == 3
            assert (source.first_scan, source.last_scan) == (1, 3)
            assert source.scan_filter_text(2) == MS2_FILTER
            mz, intensity = source.scan_data(1)
            assert mz.tolist() == [400.5, 500.25, 756.98]
            assert intensity.tolist() == [100.0, 3000.0, 2000.0]
            header = source.scan_header(1)
            assert header.retention_time == pytest.approx(0.5)
            assert header.total_ion_current == pytest.approx(5100.0)

    def test_precursor_becomes_scan_events(self, mzml_path) -> None:
        pytest.importorskip("pyteomics")
        with MzMLDataSource(mzml_path) as source:
            events = dict(source.scan_events(2))
            assert events["Master Scan Number:"] == "1"
            assert events["Charge State:"] == "2"
            assert float(events["MS2 Isolation Width:"]) == pytest.approx(2.0)
            assert float(events["Ion Injection Time (ms):"]) == pytest.approx(25.0)
            assert source.raw_dependent_indices(1) == [2]
            assert source.raw_dependent_indices(3) == []

    def test_scan_info_reader(self, mzml_path) -> None:
        pytest.importorskip("pyteomics")
        with MzMLDataSource(mzml_path) as source:
            reader = ScanInfoReader(source)
            ms1 = reader.get_scan_info(1)
            ms2 = reader.get_scan_info(2)

        assert ms1.ms_level == 1
        assert ms1.dependent_scans == (2,)
        assert ms1.classification.scan_type_name == "HMS"
        assert ms2.ms_level == 2
        assert ms2.parent_scan == 1
        assert ms2.parent_ion_mz == pytest.approx(756.98)
        assert ms2.charge_state == 2
        assert ms2.retention_time == pytest.approx(0.51)

    def test_released_on_exit(self, mzml_path) -> None:
        pytest.importorskip("pyteomics")
        source = MzMLDataSource(mzml_path)
        with source:
            assert source.scan_count() == 3
        with pytest.raises(RuntimeError):
            source.scan_count()
