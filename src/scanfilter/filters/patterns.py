"""
Compiled patterns and tag constants for the scan filter grammar.

Tags are matched case-insensitively against the filter text with a space
appended, so a tag ending in a space also matches at the end of the text.
"""

import re

# ----- MS level and parent ions -----

# "Full ms2 ", " p ms3 ", "SRM ms2 ", "Full msx ms2 " ...; the trailing space is required
MS_LEVEL_PATTERN = re.compile(
    r"(?P<scan_mode> p|Full|SRM|CRM|Full msx|Full lock|Z) ms(?P<ms_level>[2-9]|[1-9][0-9]) ",
    re.IGNORECASE,
)

# 1312.95@45.00, 756.98@cid35.00, 1073.48@etd120.55@cid20.00
PARENT_ION_PATTERN = re.compile(
    r"(?P<parent_mz>[0-9.]+)@(?P<collision_mode1>[a-z]*)(?P<collision_energy1>[0-9.]+)"
    r"(@(?P<collision_mode2>[a-z]+)(?P<collision_energy2>[0-9.]+))?",
    re.IGNORECASE,
)

# Precursor-only extraction: last ion for regular scans, first ion for msx scans
PARENT_MZ_ONLY_PATTERN = re.compile(
    r"[Mm][Ss]\d*[^\[\r\n]* (?P<parent_mz>[0-9.]+)@?[A-Za-z]*\d*\.?\d*(\[[^\]\r\n]\])?",
    re.IGNORECASE,
)
PARENT_MZ_ONLY_MSX_PATTERN = re.compile(
    r"[Mm][Ss]\d* (?P<parent_mz>[0-9.]+)@?[A-Za-z]*\d*\.?\d*[^\[\r\n]*(\[[^\]\r\n]+\])?",
    re.IGNORECASE,
)

LEADING_NUMBER_PATTERN = re.compile(r"[0-9.]+")

SUPPLEMENTAL_ACTIVATION_PATTERN = re.compile(r" sa Full ms", re.IGNORECASE)
MULTIPLEXED_MSN_PATTERN = re.compile(r" Full msx ", re.IGNORECASE)

# ----- Mass lists -----

# [330.00-380.00] or [179.652-184.582, 505.778-510.708]
MASS_LIST_PATTERN = re.compile(r"\[[0-9.]+-[0-9.]+.*\]")
MASS_RANGE_PATTERN = re.compile(r"(?P<start_mass>[0-9.]+)-(?P<end_mass>[0-9.]+)")

# ----- Polarity and generic filters -----

ION_MODE_PATTERN = re.compile(r"[+-]")

# " 1312.95@" becomes " 0@"
COLLISION_SPEC_PATTERN = re.compile(r"(?P<mz_value> [0-9.]+)@")
COLLISION_SPEC_REPLACEMENT = " 0@"

# "+ c NSI Full ms2 1083.000" (SRM-style precursor without a collision energy)
MZ_WITHOUT_COLLISION_ENERGY_PATTERN = re.compile(r"ms[2-9](?P<mz_value> [0-9.]+)$")

# ----- Scan type tags -----

MS_ONLY_C_TEXT = " c ms "
MS_ONLY_P_TEXT = " p ms "
MS_ONLY_P_NSI_TEXT = " p NSI ms "
MS_ONLY_PZ_TEXT = " p Z ms "         # zoom scan
MS_ONLY_DZ_TEXT = " d Z ms "         # dependent zoom scan
MS_ONLY_DZ_MS2_TEXT = " d Z ms2 "    # dependent MS2 zoom scan
MS_ONLY_Z_TEXT = " NSI Z ms "        # zoom scan

FULL_MS_TEXT = "Full ms "
FULL_PR_TEXT = "Full pr "            # TSQ full parent scan, product mass
SIM_MS_TEXT = "SIM ms "
FULL_LOCK_MS_TEXT = "Full lock ms "  # lock mass scan

MRM_Q1MS_TEXT = "Q1MS "
MRM_Q3MS_TEXT = "Q3MS "
MRM_SRM_TEXT = "SRM ms2"
MRM_FULL_NL_TEXT = "Full cnl "       # neutral loss
MRM_SIM_PR_TEXT = "SIM pr "          # TSQ isolated parent, multiple product ranges
MRM_SIM_MSX_TEXT = "SIM msx "        # Q-Exactive multiplexed SIM

HIGH_RES_TEXT = "FTMS"

MS1_TAGS = (
    FULL_MS_TEXT,
    MS_ONLY_C_TEXT,
    MS_ONLY_P_TEXT,
    MS_ONLY_P_NSI_TEXT,
    FULL_PR_TEXT,
    FULL_LOCK_MS_TEXT,
)

ZOOM_TAGS = (
    MS_ONLY_Z_TEXT,
    MS_ONLY_PZ_TEXT,
    MS_ONLY_DZ_TEXT,
)

# Collision modes whose mixed case is kept in scan type names
COMPOUND_COLLISION_MODES = ("EThcD", "ETciD")
