"""Atom records and helpers shared by the parser and the selection engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union

import numpy as np

from atomsel import config


@dataclass(frozen=True)
class Atom:
    """One decoded atom record.

    Attributes
    ----------
    index
        1-based position in the (filtered) output sequence.
    index_in_source
        1-based position among all records decoded from the source.
    name
        Atom name.
    residue_name
        Residue name.
    chain_id
        Chain identifier.
    residue_sequence_number
        Author-facing residue number; may repeat across chains and models.
    residue_group_id
        Parser-assigned residue identity, the residue grouping key.
    x, y, z
        Cartesian coordinates.
    temperature_factor
        Isotropic B-factor.
    occupancy
        Occupancy.
    model_number
        1-based model number.
    segment_name
        Segment name.
    formal_charge
        Formal charge as written in the source, if any.
    element
        Element symbol.
    """

    index: int = 1
    index_in_source: int = 1
    name: str = ""
    residue_name: str = ""
    chain_id: str = ""
    residue_sequence_number: int = 0
    residue_group_id: int = 0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    temperature_factor: float = config.DEFAULT_TEMPERATURE_FACTOR
    occupancy: float = config.DEFAULT_OCCUPANCY
    model_number: int = config.DEFAULT_MODEL_NUMBER
    segment_name: str = config.DEFAULT_SEGMENT_NAME
    formal_charge: Optional[str] = None
    element: str = ""

    @property
    def coords(self) -> tuple:
        return (self.x, self.y, self.z)


def same_residue(first: Atom, second: Atom) -> bool:
    """Return True when two atoms belong to the same residue.

    Residues are told apart by name, sequence number, chain and model.
    """

    return (
        first.residue_name == second.residue_name
        and first.residue_sequence_number == second.residue_sequence_number
        and first.chain_id == second.chain_id
        and first.model_number == second.model_number
    )


def guess_element(atom_name: str) -> str:
    """Guess an element symbol from an atom name.

    Leading digits are skipped; two-letter symbols are only recognized from a
    fixed list, so ``CA`` is carbon, not calcium.
    """

    name = (atom_name or "").strip()
    i = 0
    while i < len(name) and name[i].isdigit():
        i += 1
    name = name[i:]
    if not name:
        return ""
    upper = name[:2].upper()
    if upper in config.TWO_LETTER_ELEMENTS:
        return upper[0] + upper[1].lower()
    if len(name) > 1 and name[1].islower():
        return name[0].upper() + name[1].lower()
    return name[0].upper()


def coordinates(
    atoms: Sequence[Atom],
    selection: Union[str, Callable[[Atom], bool], None] = None,
) -> np.ndarray:
    """Return atom coordinates as an ``(N, 3)`` array.

    Parameters
    ----------
    atoms
        Atom sequence.
    selection
        Optional selection string or predicate restricting the atoms.

    Returns
    -------
    numpy.ndarray
        Float array of coordinates in sequence order.
    """

    if selection is not None:
        # Imported lazily: the query module depends on this one.
        from atomsel.model.query import select

        atoms = select(atoms, selection)
    if not atoms:
        return np.zeros((0, 3), dtype=float)
    return np.array([(atom.x, atom.y, atom.z) for atom in atoms], dtype=float)
