"""Read atoms from mmCIF files and filter them with selection strings."""

from atomsel.errors import (
    AtomselError,
    MmcifFormatError,
    NoMatchingAtomsError,
    ResidueRangeError,
    SelectionSyntaxError,
)
from atomsel.model import (
    Atom,
    Residue,
    coordinates,
    each_residue,
    parse_query,
    select,
    select_indices,
)
from atomsel.services.mmcif import read_mmcif

__version__ = "0.1.0"

__all__ = [
    "Atom",
    "AtomselError",
    "MmcifFormatError",
    "NoMatchingAtomsError",
    "Residue",
    "ResidueRangeError",
    "SelectionSyntaxError",
    "coordinates",
    "each_residue",
    "parse_query",
    "read_mmcif",
    "select",
    "select_indices",
]
