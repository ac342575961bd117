"""
Parent (precursor) ion extraction from scan filter text.

MSn filter text lists one parent ion per fragmentation stage:

    + c d Full ms3 1312.95@45.00 873.85@45.00 [350.00-2000.00]
    ITMS + c NSI r d sa Full ms2 1073.4800@etd120.55@cid20.00 [120.0000-2000.0000]
    FTMS + p NSI d Full msx ms2 712.85@hcd28.00 407.92@hcd28.00  [100.00-1475.00]
    + c NSI SRM ms2 748.371 [701.368-701.370, 773.402-773.404]

For regular MSn scans the last ion listed is the "best" parent ion (for MS3
the last m/z is the ion isolated from the MS2 spectrum). For multiplexed
(msx) scans all ions were isolated together and the first one is used.
"""

import logging
from typing import Iterable, Optional

from ..core.scan_metadata import ActivationType, ParentIon, ParentIonResult
from .grammar import extract_ms_level, try_float
from .patterns import (
    LEADING_NUMBER_PATTERN,
    MULTIPLEXED_MSN_PATTERN,
    PARENT_ION_PATTERN,
    PARENT_MZ_ONLY_MSX_PATTERN,
    PARENT_MZ_ONLY_PATTERN,
    SUPPLEMENTAL_ACTIVATION_PATTERN,
)

logger = logging.getLogger(__name__)

SUPPLEMENTAL_ACTIVATION_PREFIX = "sa_"

# Collision mode (lower case, without the sa_ prefix) to ActivationType
_ACTIVATION_MAP: dict[str, ActivationType] = {
    'cid': ActivationType.CID,
    'mpd': ActivationType.MPD,
    'ecd': ActivationType.ECD,
    'pqd': ActivationType.PQD,
    'etd': ActivationType.ETD,
    'etcid': ActivationType.ETD,
    'ethcd': ActivationType.ETD,
    'hcd': ActivationType.HCD,
    'ptr': ActivationType.PTR,
    'netd': ActivationType.NETD,
    'nptr': ActivationType.NPTR,
    'uvpd': ActivationType.UVPD,
    'irmpd': ActivationType.IRMPD,
}

# Secondary activation after ETD that yields a compound mode name
_COMPOUND_MODES: dict[str, str] = {
    'cid': 'ETciD',
    'hcd': 'EThcD',
}


def activation_type_from_mode(collision_mode: str) -> ActivationType:
    """
    Infer the activation method from a collision mode string.

    "sa_etd" maps to ETD, "EThcD" and "ETciD" map to ETD (the primary
    activation). Unrecognized or empty modes map to UNKNOWN.
    """
    mode = collision_mode.strip().lower()
    if mode.startswith(SUPPLEMENTAL_ACTIVATION_PREFIX):
        mode = mode[len(SUPPLEMENTAL_ACTIVATION_PREFIX):]
    return _ACTIVATION_MAP.get(mode, ActivationType.UNKNOWN)


def _collision_mode_name(mode1: str, mode2: str, supplemental_activation: bool) -> str:
    if mode1.lower() == 'etd' and mode2:
        compound = _COMPOUND_MODES.get(mode2.lower())
        if compound is not None:
            return compound
    if supplemental_activation and mode1:
        return SUPPLEMENTAL_ACTIVATION_PREFIX + mode1
    return mode1


def extract_parent_ions(filter_text: str) -> ParentIonResult:
    """
    Parse every parent ion listed in MSn filter text.

    Args:
        filter_text: Scan filter text.

    Returns:
        ParentIonResult. On success, ``parent_ions`` is non-empty and the
        scalar fields describe the best parent ion. The result is a failure
        when the text has no MS level marker (MS1 scans) or no parent m/z
        can be found after the marker.

    Example:
        >>> result = extract_parent_ions("+ c d Full ms3 1312.95@45.00 873.85@45.00 [350.00-2000.00]")
        >>> result.parent_ion_mz, result.ms_level
        (873.85, 3)
    """
    if not filter_text:
        return ParentIonResult(success=False)

    supplemental_activation = SUPPLEMENTAL_ACTIVATION_PATTERN.search(filter_text) is not None
    multiplexed = MULTIPLEXED_MSN_PATTERN.search(filter_text) is not None

    level_result = extract_ms_level(filter_text)
    if not level_result.found:
        return ParentIonResult(success=False, ms_level=level_result.ms_level)

    ms_level = level_result.ms_level
    mz_text = level_result.remainder

    bracket_index = mz_text.find("[")
    if bracket_index > 0:
        mz_text = mz_text[:bracket_index]

    parent_ions: list[ParentIon] = []
    best_ion: Optional[ParentIon] = None

    for match in PARENT_ION_PATTERN.finditer(mz_text):
        mz = try_float(match.group("parent_mz"))
        if mz is None:
            logger.debug(f"Ignoring non-numeric parent ion '{match.group()}' in '{filter_text}'")
            continue

        mode1 = match.group("collision_mode1") or ""
        mode2 = match.group("collision_mode2") or ""
        energy1 = try_float(match.group("collision_energy1")) or 0.0
        energy2 = (try_float(match.group("collision_energy2") or "") or 0.0) if mode2 else 0.0

        collision_mode = _collision_mode_name(mode1, mode2, supplemental_activation)
        parent_ion = ParentIon(
            ms_level=ms_level,
            mz=mz,
            collision_mode=collision_mode,
            collision_mode2=mode2,
            collision_energy=energy1,
            collision_energy2=energy2,
            activation_type=activation_type_from_mode(collision_mode),
        )
        parent_ions.append(parent_ion)

        if not multiplexed or len(parent_ions) == 1:
            best_ion = parent_ion

    if best_ion is not None:
        return ParentIonResult(
            success=True,
            parent_ion_mz=best_ion.mz,
            ms_level=best_ion.ms_level,
            collision_mode=best_ion.collision_mode,
            parent_ions=tuple(parent_ions),
        )

    mz = _fallback_parent_mz(mz_text)
    if mz is None:
        logger.debug(f"No parent ion m/z found in '{filter_text}'")
        return ParentIonResult(success=False, ms_level=ms_level)

    return ParentIonResult(
        success=True,
        parent_ion_mz=mz,
        ms_level=ms_level,
        parent_ions=(ParentIon(ms_level=ms_level, mz=mz),),
    )


def _fallback_parent_mz(mz_text: str) -> Optional[float]:
    """
    Parse a parent m/z that is not written as <mz>@<mode><energy>.

    Uses the number directly before the last '@' when there is one,
    otherwise the longest numeric run at the start of the text.
    """
    at_index = mz_text.rfind("@")
    if at_index > 0:
        before_at = mz_text[:at_index]
        space_index = before_at.rfind(" ")
        if space_index > 0:
            before_at = before_at[space_index + 1:]
        return try_float(before_at)

    if not mz_text:
        return None

    match = LEADING_NUMBER_PATTERN.match(mz_text)
    if match is None:
        return None
    return try_float(match.group())


def extract_parent_ion_mz(filter_text: str) -> Optional[float]:
    """
    Extract only the parent ion m/z from filter text.

    A lighter alternative to :func:`extract_parent_ions` for callers that
    need nothing else. Returns the first ion for msx scans and the last ion
    otherwise, or None if no parent ion is present.
    """
    if not filter_text:
        return None

    if "msx" in filter_text.lower():
        pattern = PARENT_MZ_ONLY_MSX_PATTERN
    else:
        pattern = PARENT_MZ_ONLY_PATTERN

    match = pattern.search(filter_text)
    if match is None:
        return None
    return try_float(match.group("parent_mz"))


def collision_energies(parent_ions: Iterable[ParentIon]) -> list[float]:
    """
    Collision energies of the given parent ions, in order.

    The secondary energy of an ion (e.g. the cid20.00 in
    1143.72@etd120.55@cid20.00) follows its primary energy when positive.
    """
    energies: list[float] = []
    for parent_ion in parent_ions:
        energies.append(parent_ion.collision_energy)
        if parent_ion.collision_energy2 > 0:
            energies.append(parent_ion.collision_energy2)
    return energies
