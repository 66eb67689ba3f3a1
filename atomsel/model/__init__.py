"""Model package exports."""

from atomsel.model.chemistry import PROTEIN_RESIDUES, ProteinResidue, ResidueCategory
from atomsel.model.query import parse_query, select, select_indices
from atomsel.model.residue import EachResidue, Residue, each_residue
from atomsel.model.state import Atom, coordinates, same_residue

__all__ = [
    "PROTEIN_RESIDUES",
    "Atom",
    "EachResidue",
    "ProteinResidue",
    "Residue",
    "ResidueCategory",
    "coordinates",
    "each_residue",
    "parse_query",
    "same_residue",
    "select",
    "select_indices",
]
