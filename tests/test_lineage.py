"""Tests for parent and dependent scan resolution."""

from typing import Optional

import pytest

from scanfilter.core.lineage import resolve_dependent_scans, resolve_parent_scan
from scanfilter.core.scan_metadata import ParentIon, ScanInfo


def _ms1(scan: int) -> ScanInfo:
    return ScanInfo(scan_number=scan, ms_level=1)


def _msn(scan: int, ms_level: int, *parent_mzs: float, **kwargs) -> ScanInfo:
    ions = tuple(ParentIon(ms_level=ms_level, mz=mz, collision_mode="cid") for mz in parent_mzs)
    return ScanInfo(
        scan_number=scan,
        ms_level=ms_level,
        parent_ions=ions,
        parent_ion_mz=parent_mzs[-1] if parent_mzs else 0.0,
        **kwargs,
    )


def _lookup_from(scans: list[ScanInfo]):
    by_number = {info.scan_number: info for info in scans}

    def lookup(scan: int) -> Optional[ScanInfo]:
        return by_number.get(scan)

    return lookup


class TestResolveParentScan:
    """Tests for resolve_parent_scan."""

    def test_master_scan_event(self) -> None:
        info = _msn(10, 2, 500.0, scan_events=(("Master Scan Number:", "7"),))
        result = resolve_parent_scan(info, _lookup_from([]))
        assert result.found
        assert result.parent_scan == 7

    def test_non_numeric_master_scan_falls_back_to_walk(self) -> None:
        scans = [_ms1(1), _msn(2, 2, 500.0, scan_events=(("Master Scan Number:", "n/a"),))]
        result = resolve_parent_scan(scans[1], _lookup_from(scans))
        assert result.found
        assert result.parent_scan == 1

    def test_ms1_has_no_parent(self) -> None:
        result = resolve_parent_scan(_ms1(5), _lookup_from([_ms1(4)]))
        assert not result.found
        assert result.parent_scan == 0

    def test_ms2_walks_back_to_ms1(self) -> None:
        scans = [_ms1(1), _msn(2, 2, 500.0), _msn(3, 2, 600.0), _msn(4, 2, 700.0)]
        result = resolve_parent_scan(scans[3], _lookup_from(scans))
        assert result.parent_scan == 1

    def test_ms3_single_candidate(self) -> None:
        scans = [_ms1(1), _msn(2, 2, 612.3), _msn(3, 3, 612.3, 420.1)]
        result = resolve_parent_scan(scans[2], _lookup_from(scans))
        assert result.found
        assert result.parent_scan == 2

    def test_ms3_matches_parent_ion(self) -> None:
        scans = [
            _ms1(1),
            _msn(2, 2, 500.0),
            _msn(3, 2, 612.3),
            _msn(4, 2, 700.0),
            _msn(5, 3, 612.3, 420.1),
        ]
        result = resolve_parent_scan(scans[4], _lookup_from(scans))
        assert result.found
        assert result.parent_scan == 3

    def test_ms3_matching_uses_tolerance(self) -> None:
        scans = [_ms1(1), _msn(2, 2, 612.3), _msn(3, 2, 700.0), _msn(4, 3, 612.3005, 420.1)]
        assert resolve_parent_scan(scans[3], _lookup_from(scans)).parent_scan == 2
        assert not resolve_parent_scan(scans[3], _lookup_from(scans), tolerance=0.0001).found

    def test_ms3_ambiguous_candidates(self) -> None:
        scans = [_ms1(1), _msn(2, 2, 500.0), _msn(3, 2, 600.0), _msn(4, 3, 612.3, 420.1)]
        result = resolve_parent_scan(scans[3], _lookup_from(scans))
        assert not result.found
        assert result.parent_scan == 0

    def test_walk_stops_at_first_scan(self) -> None:
        scans = [_ms1(1), _msn(5, 2, 500.0), _msn(6, 3, 500.0, 300.0)]
        result = resolve_parent_scan(scans[2], _lookup_from(scans), first_scan=5)
        assert result.parent_scan == 5

    def test_unreadable_scans_are_skipped(self) -> None:
        def lookup(scan: int) -> Optional[ScanInfo]:
            if scan == 3:
                raise KeyError(scan)
            return {1: _ms1(1), 2: _msn(2, 2, 500.0)}.get(scan)

        result = resolve_parent_scan(_msn(4, 3, 500.0, 300.0), lookup)
        assert result.parent_scan == 2


class TestResolveDependentScans:
    """Tests for resolve_dependent_scans."""

    def test_no_dependents(self) -> None:
        assert resolve_dependent_scans(_ms1(1), lambda scan: [], _lookup_from([])) == []
        assert resolve_dependent_scans(_ms1(1), lambda scan: None, _lookup_from([])) == []

    def test_index_equal_to_scan_number(self) -> None:
        assert resolve_dependent_scans(
            _ms1(1), lambda scan: [2, 3], _lookup_from([]), first_scan=0
        ) == [2, 3]

    def test_scan_at_index(self) -> None:
        scans = [_ms1(1), _msn(2, 2, 500.0, parent_scan=1), _msn(3, 2, 600.0, parent_scan=1)]
        assert resolve_dependent_scans(scans[0], lambda scan: [2, 3], _lookup_from(scans)) == [2, 3]

    def test_scan_at_index_plus_first_scan(self) -> None:
        scans = [
            _ms1(10),
            _msn(11, 2, 500.0, parent_scan=10),
            _msn(12, 2, 600.0, parent_scan=10),
        ]
        # Indices relative to the first scan; scans 1 and 2 do not exist
        result = resolve_dependent_scans(
            scans[0], lambda scan: [1, 2], _lookup_from(scans), first_scan=10
        )
        assert result == [11, 12]

    def test_rejects_scans_with_other_parent(self) -> None:
        scans = [_ms1(1), _msn(2, 2, 500.0, parent_scan=7)]
        assert resolve_dependent_scans(scans[0], lambda scan: [2], _lookup_from(scans)) == []

    def test_dependents_lookup_failure(self) -> None:
        def failing(scan: int):
            raise KeyError(scan)

        assert resolve_dependent_scans(_ms1(1), failing, _lookup_from([])) == []


@pytest.mark.parametrize("event_name", ["Master Scan Number:", "master scan number"])
def test_master_scan_event_name_is_case_insensitive_prefix(event_name: str) -> None:
    info = _msn(3, 2, 500.0, scan_events=((event_name, "1"),))
    assert resolve_parent_scan(info, _lookup_from([])).parent_scan == 1
