"""Residue views over atom sequences and the residue iterator."""

from __future__ import annotations

import logging
from typing import Iterator, Optional, Sequence

from atomsel.errors import ResidueRangeError
from atomsel.model.state import Atom

logger = logging.getLogger(__name__)


class Residue:
    """Read-only window over the atoms of one residue.

    The view keeps a reference to the atom sequence and an inclusive
    ``[start, end]`` range of 0-based positions; atoms are never copied.
    Residue metadata is taken from the first atom of the range; ``name`` is
    the residue name, so atom-name predicates such as ``is_backbone`` are
    False on a view.

    Parameters
    ----------
    atoms
        Atom sequence the view borrows from.
    start
        First position of the residue (default 0).
    end
        Last position of the residue, inclusive (default: last atom).

    Raises
    ------
    ResidueRangeError
        If the range is empty, out of bounds, or spans atoms with different
        ``residue_group_id`` values.
    """

    __slots__ = (
        "_atoms",
        "_start",
        "_end",
        "name",
        "residue_name",
        "chain_id",
        "residue_sequence_number",
        "residue_group_id",
        "model_number",
        "segment_name",
    )

    def __init__(
        self, atoms: Sequence[Atom], start: int = 0, end: Optional[int] = None
    ) -> None:
        if end is None:
            end = len(atoms) - 1
        if start < 0 or end < start or end >= len(atoms):
            raise ResidueRangeError(
                "residue_range",
                f"Range [{start}, {end}] is not a valid range of a sequence "
                f"with {len(atoms)} atoms.",
                (start, end),
            )
        first = atoms[start]
        for position in range(start + 1, end + 1):
            if atoms[position].residue_group_id != first.residue_group_id:
                raise ResidueRangeError(
                    "residue_range",
                    f"Range [{start}, {end}] does not correspond to a single "
                    "residue or molecule.",
                    (start, end),
                )
        self._atoms = atoms
        self._start = start
        self._end = end
        self.residue_name = first.residue_name
        self.name = first.residue_name
        self.chain_id = first.chain_id
        self.residue_sequence_number = first.residue_sequence_number
        self.residue_group_id = first.residue_group_id
        self.model_number = first.model_number
        self.segment_name = first.segment_name

    @property
    def atoms(self) -> Sequence[Atom]:
        """The underlying atom sequence (not only this residue's atoms)."""
        return self._atoms

    @property
    def start(self) -> int:
        return self._start

    @property
    def end(self) -> int:
        return self._end

    @property
    def range(self) -> range:
        return range(self._start, self._end + 1)

    def __len__(self) -> int:
        return self._end - self._start + 1

    def __getitem__(self, i: int) -> Atom:
        if not isinstance(i, int):
            raise TypeError("Residue indices must be integers")
        length = len(self)
        if i < 0:
            i += length
        if not 0 <= i < length:
            raise IndexError(f"Residue has {length} atoms, tried to fetch index {i}.")
        return self._atoms[self._start + i]

    def __iter__(self) -> Iterator[Atom]:
        for position in range(self._start, self._end + 1):
            yield self._atoms[position]

    def __repr__(self) -> str:
        return (
            f"Residue(residue_name={self.residue_name!r}, chain_id={self.chain_id!r}, "
            f"residue_sequence_number={self.residue_sequence_number}, "
            f"atoms={len(self)})"
        )


class EachResidue:
    """Lazy iterator over the residues of an atom sequence.

    Consecutive atoms sharing a ``residue_group_id`` form one residue. The
    iterator has no random access; use ``list(each_residue(atoms))`` to get
    an indexable list.
    """

    def __init__(self, atoms: Sequence[Atom]) -> None:
        self.atoms = atoms

    def __iter__(self) -> Iterator[Residue]:
        atoms = self.atoms
        natoms = len(atoms)
        window_start = 0
        while window_start < natoms:
            group_id = atoms[window_start].residue_group_id
            cursor = window_start + 1
            while cursor < natoms and atoms[cursor].residue_group_id == group_id:
                cursor += 1
            yield Residue(atoms, window_start, cursor - 1)
            window_start = cursor

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __getitem__(self, item: object) -> Residue:
        raise TypeError(
            "The residue iterator does not support indexing. "
            "Use list(each_residue(atoms)) to get an indexable list of residues."
        )

    def __repr__(self) -> str:
        return f"EachResidue(atoms={len(self.atoms)})"


def each_residue(atoms: Sequence[Atom]) -> EachResidue:
    """Return a lazy iterator over the residues of ``atoms``."""

    logger.debug("Iterating residues over %d atoms", len(atoms))
    return EachResidue(atoms)
