"""Residue chemistry table, residue-name resolution and chemistry predicates."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from atomsel import config


class ResidueCategory(str, Enum):
    """Side-chain category of a protein residue."""

    ALIPHATIC = "Aliphatic"
    AROMATIC = "Aromatic"
    BASIC = "Basic"
    ACIDIC = "Acidic"
    AMIDE = "Amide"
    SULFURIC = "Sulfuric"
    HYDROXYLIC = "Hydroxylic"
    CYCLIC = "Cyclic"


@dataclass(frozen=True)
class ProteinResidue:
    """Chemistry data for one protein residue.

    Attributes
    ----------
    name
        Full residue name.
    three_letter_code
        Canonical three-letter code.
    one_letter_code
        One-letter code.
    category
        Side-chain category.
    polar
        Whether the side chain is polar.
    hydrophobic
        Whether the side chain is hydrophobic.
    mono_isotopic_mass
        Mono-isotopic residue mass.
    mass
        Average residue mass.
    charge
        Net charge at neutral pH.
    """

    name: str
    three_letter_code: str
    one_letter_code: str
    category: ResidueCategory
    polar: bool
    hydrophobic: bool
    mono_isotopic_mass: float
    mass: float
    charge: int


_C = ResidueCategory

# Canonical residues first: one-letter lookups resolve to the first match.
PROTEIN_RESIDUES: Mapping[str, ProteinResidue] = MappingProxyType(
    {
        "ALA": ProteinResidue("Alanine", "ALA", "A", _C.ALIPHATIC, False, False, 71.037114, 71.0779, 0),
        "ARG": ProteinResidue("Arginine", "ARG", "R", _C.BASIC, True, False, 156.101111, 156.1857, 1),
        "ASN": ProteinResidue("Asparagine", "ASN", "N", _C.AMIDE, True, False, 114.042927, 114.1026, 0),
        "ASP": ProteinResidue("Aspartic acid", "ASP", "D", _C.ACIDIC, True, False, 115.026943, 115.0874, -1),
        "CYS": ProteinResidue("Cysteine", "CYS", "C", _C.SULFURIC, False, False, 103.009185, 103.1429, 0),
        "GLN": ProteinResidue("Glutamine", "GLN", "Q", _C.AMIDE, True, False, 128.058578, 128.1292, 0),
        "GLU": ProteinResidue("Glutamic acid", "GLU", "E", _C.ACIDIC, True, False, 129.042593, 129.1140, -1),
        "GLY": ProteinResidue("Glycine", "GLY", "G", _C.ALIPHATIC, False, False, 57.021464, 57.0513, 0),
        "HIS": ProteinResidue("Histidine", "HIS", "H", _C.AROMATIC, True, False, 137.058912, 137.1393, 0),
        "ILE": ProteinResidue("Isoleucine", "ILE", "I", _C.ALIPHATIC, False, True, 113.084064, 113.1576, 0),
        "LEU": ProteinResidue("Leucine", "LEU", "L", _C.ALIPHATIC, False, True, 113.084064, 113.1576, 0),
        "LYS": ProteinResidue("Lysine", "LYS", "K", _C.BASIC, True, False, 128.094963, 128.1723, 1),
        "MET": ProteinResidue("Methionine", "MET", "M", _C.SULFURIC, False, False, 131.040485, 131.1961, 0),
        "PHE": ProteinResidue("Phenylalanine", "PHE", "F", _C.AROMATIC, False, True, 147.068414, 147.1739, 0),
        "PRO": ProteinResidue("Proline", "PRO", "P", _C.CYCLIC, False, False, 97.052764, 97.1152, 0),
        "SER": ProteinResidue("Serine", "SER", "S", _C.HYDROXYLIC, True, False, 87.032028, 87.07730, 0),
        "THR": ProteinResidue("Threonine", "THR", "T", _C.HYDROXYLIC, True, False, 101.047679, 101.1039, 0),
        "TRP": ProteinResidue("Tryptophan", "TRP", "W", _C.AROMATIC, False, True, 186.079313, 186.2099, 0),
        "TYR": ProteinResidue("Tyrosine", "TYR", "Y", _C.AROMATIC, True, False, 163.063320, 163.1733, 0),
        "VAL": ProteinResidue("Valine", "VAL", "V", _C.ALIPHATIC, False, True, 99.068414, 99.1311, 0),
        # CHARMM and AMBER protonation states
        "ASPP": ProteinResidue("Aspartic acid (protonated)", "ASP", "D", _C.ACIDIC, True, False, 115.026943, 115.0874, 0),
        "GLUP": ProteinResidue("Glutamic acid (protonated)", "GLU", "E", _C.ACIDIC, True, False, 129.042593, 129.1140, 0),
        "HSD": ProteinResidue("Histidine (D)", "HIS", "H", _C.AROMATIC, True, False, 137.058912, 137.1393, 0),
        "HSE": ProteinResidue("Histidine (E)", "HIS", "H", _C.AROMATIC, True, False, 137.058912, 137.1393, 0),
        "HSP": ProteinResidue("Histidine (doubly protonated)", "HIS", "H", _C.AROMATIC, True, False, 137.058912, 137.1393, 1),
        "HID": ProteinResidue("Histidine (D)", "HIS", "H", _C.AROMATIC, True, False, 137.058912, 137.1393, 0),
        "HIE": ProteinResidue("Histidine (E)", "HIS", "H", _C.AROMATIC, True, False, 137.058912, 137.1393, 0),
        "HIP": ProteinResidue("Histidine (doubly protonated)", "HIS", "H", _C.AROMATIC, True, False, 137.058912, 137.1393, 1),
    }
)


def resolve_residue_name(code: str) -> Optional[str]:
    """Return the table key for a residue code, one-letter code or full name.

    Force-field names are kept as they are (``GLUP`` stays ``GLUP``). The
    lookup is case-insensitive; exact keys win over one-letter codes, which
    win over full names.

    Parameters
    ----------
    code
        Residue code or name.

    Returns
    -------
    str or None
        Table key, or None if the residue is unknown.
    """

    code = str(code).strip().upper()
    if code in PROTEIN_RESIDUES:
        return code
    if len(code) == 1:
        for key, residue in PROTEIN_RESIDUES.items():
            if residue.one_letter_code == code:
                return key
        return None
    for key, residue in PROTEIN_RESIDUES.items():
        if residue.name.upper() == code:
            return key
    return None


def three_letter_code(code: str) -> Optional[str]:
    """Return the canonical three-letter code (``HSP`` -> ``HIS``)."""
    key = resolve_residue_name(code)
    return PROTEIN_RESIDUES[key].three_letter_code if key else None


def one_letter_code(code: str) -> Optional[str]:
    key = resolve_residue_name(code)
    return PROTEIN_RESIDUES[key].one_letter_code if key else None


def residue_full_name(code: str) -> Optional[str]:
    key = resolve_residue_name(code)
    return PROTEIN_RESIDUES[key].name if key else None


def _entry(item: object) -> Optional[ProteinResidue]:
    return PROTEIN_RESIDUES.get(item.residue_name.upper())


def is_protein(item: object) -> bool:
    """Return True if the residue name of an atom or residue is a protein residue."""
    return _entry(item) is not None


def _has_category(item: object, category: ResidueCategory) -> bool:
    entry = _entry(item)
    return entry is not None and entry.category is category


def is_acidic(item: object) -> bool:
    return _has_category(item, ResidueCategory.ACIDIC)


def is_aliphatic(item: object) -> bool:
    return _has_category(item, ResidueCategory.ALIPHATIC)


def is_aromatic(item: object) -> bool:
    return _has_category(item, ResidueCategory.AROMATIC)


def is_basic(item: object) -> bool:
    return _has_category(item, ResidueCategory.BASIC)


def is_charged(item: object) -> bool:
    entry = _entry(item)
    return entry is not None and entry.charge != 0


def is_neutral(item: object) -> bool:
    entry = _entry(item)
    return entry is not None and entry.charge == 0


def is_hydrophobic(item: object) -> bool:
    entry = _entry(item)
    return entry is not None and entry.hydrophobic


def is_polar(item: object) -> bool:
    entry = _entry(item)
    return entry is not None and entry.polar


def is_nonpolar(item: object) -> bool:
    entry = _entry(item)
    return entry is not None and not entry.polar


def is_water(item: object) -> bool:
    """Return True if the residue name is one of the known water names.

    Water is classified from a fixed name list, not from the protein table.
    """
    return item.residue_name in config.WATER_RESIDUES


def is_backbone(atom: object) -> bool:
    return is_protein(atom) and atom.name in config.BACKBONE_ATOMS


def is_sidechain(atom: object) -> bool:
    return is_protein(atom) and atom.name not in config.NOT_SIDECHAIN_ATOMS
