"""Static configuration for parsing and selections."""

from __future__ import annotations

ATOM_SITE_PREFIX = "_atom_site."
RECORD_MARKERS = ("ATOM", "HETATM")
CIF_NULL_TOKENS = frozenset({".", "?"})

# Memory guard
MEMORY_CHECK_INTERVAL = 1000
DEFAULT_MEMORY_AVAILABLE = 0.5

DEFAULT_TEMPERATURE_FACTOR = 0.0
DEFAULT_OCCUPANCY = 1.0
DEFAULT_MODEL_NUMBER = 1
DEFAULT_SEGMENT_NAME = ""

WATER_RESIDUES = frozenset(
    {
        "HOH",
        "OH2",
        "TIP3",
        "TIP3P",
        "TIP4P",
        "TIP5P",
        "TIP7P",
        "SPC",
        "SPCE",
    }
)

BACKBONE_ATOMS = frozenset({"N", "CA", "C", "O"})
NOT_SIDECHAIN_ATOMS = frozenset(
    {"N", "CA", "C", "O", "HN", "H", "HA", "HT1", "HT2", "HT3"}
)

TWO_LETTER_ELEMENTS = frozenset(
    {
        "CL",
        "BR",
        "NA",
        "MG",
        "ZN",
        "FE",
        "LI",
        "SI",
        "AL",
        "CU",
        "MN",
        "CO",
        "NI",
        "CD",
        "HG",
        "PB",
        "AG",
        "AU",
    }
)
