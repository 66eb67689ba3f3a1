"""Streaming reader for the ``_atom_site`` loop of mmCIF files."""

from __future__ import annotations

import logging
import mmap
import os
from dataclasses import replace
from typing import (
    IO,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)

import psutil

from atomsel import config
from atomsel.errors import AtomselError, MmcifFormatError, NoMatchingAtomsError
from atomsel.model.query import parse_query
from atomsel.model.state import Atom, guess_element, same_residue

logger = logging.getLogger(__name__)

Source = Union[str, "os.PathLike[str]", IO[str], IO[bytes]]

# mmCIF column -> (type, Atom attribute). When several columns feed one
# attribute, the first non-null value on the line wins.
CIF_FIELDS: Mapping[str, Tuple[type, str]] = {
    "label_atom_id": (str, "name"),
    "label_comp_id": (str, "residue_name"),
    "label_asym_id": (str, "chain_id"),
    "label_seq_id": (int, "residue_sequence_number"),
    "auth_seq_id": (int, "residue_sequence_number"),
    "Cartn_x": (float, "x"),
    "Cartn_y": (float, "y"),
    "Cartn_z": (float, "z"),
    "occupancy": (float, "occupancy"),
    "B_iso_or_equiv": (float, "temperature_factor"),
    "pdbx_formal_charge": (str, "formal_charge"),
    "pdbx_PDB_model_num": (int, "model_number"),
    "type_symbol": (str, "element"),
}

ColumnMap = Tuple[Tuple[int, type, str], ...]


def build_column_map(
    header: List[str], field_map: Mapping[str, Tuple[type, str]] = CIF_FIELDS
) -> ColumnMap:
    """Resolve declared header columns into ``(position, type, attribute)`` triples.

    Parameters
    ----------
    header
        Column names in declaration order.
    field_map
        Mapping of column name to target type and Atom attribute.

    Returns
    -------
    tuple
        One entry per recognized column; 0-based token positions.
    """

    columns = []
    for position, name in enumerate(header):
        target = field_map.get(name)
        if target is None:
            continue
        value_type, attribute = target
        columns.append((position, value_type, attribute))
    return tuple(columns)


def decode_atom_record(
    line: str, columns: ColumnMap, ncolumns: int, line_number: int = 0
) -> Dict[str, object]:
    """Decode one ``ATOM``/``HETATM`` line into Atom keyword arguments.

    mmCIF null markers (``.`` and ``?``) leave the attribute unset and quoted
    text values are unquoted.

    Raises
    ------
    MmcifFormatError
        If the line has fewer values than declared columns or a numeric value
        cannot be parsed.
    """

    tokens = line.split()
    if len(tokens) < ncolumns:
        raise MmcifFormatError(
            "mmcif_format",
            f"Line {line_number} has {len(tokens)} values, expected {ncolumns}",
            line,
        )
    values: Dict[str, object] = {}
    for position, value_type, attribute in columns:
        raw = tokens[position]
        if raw in config.CIF_NULL_TOKENS or attribute in values:
            continue
        if value_type is str and len(raw) > 1 and raw[0] == raw[-1] and raw[0] in "\"'":
            raw = raw[1:-1]
        try:
            values[attribute] = value_type(raw)
        except ValueError as exc:
            raise MmcifFormatError(
                "mmcif_format",
                f"Line {line_number}: invalid value {raw!r} for {attribute}",
                line,
            ) from exc
    return values


def _memory_exhausted(memory_available: float) -> bool:
    memory = psutil.virtual_memory()
    return memory.available < (1.0 - memory_available) * memory.total


def parse_mmcif(
    lines: Iterable[str],
    selection: Optional[str] = None,
    *,
    only: Optional[Callable[[Atom], bool]] = None,
    stop_at: Optional[int] = None,
    memory_available: float = config.DEFAULT_MEMORY_AVAILABLE,
    field_map: Mapping[str, Tuple[type, str]] = CIF_FIELDS,
) -> List[Atom]:
    """Decode the atoms of an mmCIF ``_atom_site`` loop in a single pass.

    Parameters
    ----------
    lines
        Iterable of text lines.
    selection
        Optional selection string; only matching atoms are kept.
    only
        Optional predicate; only atoms for which it returns True are kept.
    stop_at
        Stop reading once this many atoms have been kept.
    memory_available
        Fraction of the total memory the parse may leave in use. Every
        ``config.MEMORY_CHECK_INTERVAL`` lines, if available memory has
        dropped below ``(1 - memory_available)`` of the total, reading stops
        and the atoms read so far are returned.
    field_map
        Mapping of column name to target type and Atom attribute.

    Returns
    -------
    list
        Kept atoms. ``index`` counts kept atoms, ``index_in_source`` counts
        all decoded records.

    Raises
    ------
    SelectionSyntaxError
        If ``selection`` is invalid.
    MmcifFormatError
        If a data line cannot be decoded or no preceding header declares the
        atom name column.
    NoMatchingAtomsError
        If no atom was kept.
    """

    predicates: List[Callable[[Atom], bool]] = []
    if selection is not None:
        predicates.append(parse_query(selection))
    if only is not None:
        predicates.append(only)

    header: List[str] = []
    columns: Optional[ColumnMap] = None
    atoms: List[Atom] = []
    ndecoded = 0
    residue_group_id = 0
    last_atom: Optional[Atom] = None

    for line_number, line in enumerate(lines, start=1):
        if line.startswith(config.ATOM_SITE_PREFIX):
            if columns is not None:
                header = []
                columns = None
            parts = line[len(config.ATOM_SITE_PREFIX) :].split()
            header.append(parts[0] if parts else "")
        elif line.startswith(config.RECORD_MARKERS):
            if stop_at is not None and len(atoms) >= stop_at:
                logger.debug("Stopped after %d atoms", len(atoms))
                break
            if columns is None:
                columns = build_column_map(header, field_map)
                if not any(attribute == "name" for _, _, attribute in columns):
                    raise MmcifFormatError(
                        "mmcif_format",
                        f"Line {line_number}: atom record without an _atom_site "
                        "header declaring atom names",
                        line,
                    )
                logger.debug(
                    "Resolved %d of %d _atom_site columns", len(columns), len(header)
                )
            values = decode_atom_record(line, columns, len(header), line_number)
            ndecoded += 1
            if "element" not in values:
                values["element"] = guess_element(values.get("name", ""))
            atom = Atom(
                index=len(atoms) + 1,
                index_in_source=ndecoded,
                residue_group_id=residue_group_id,
                **values,
            )
            if last_atom is None or not same_residue(atom, last_atom):
                residue_group_id += 1
                atom = replace(atom, residue_group_id=residue_group_id)
            last_atom = atom
            if all(predicate(atom) for predicate in predicates):
                atoms.append(atom)
        if line_number % config.MEMORY_CHECK_INTERVAL == 0 and _memory_exhausted(
            memory_available
        ):
            logger.warning(
                "Memory limit reached. %d atoms read so far will be returned.",
                len(atoms),
            )
            return atoms

    if not atoms:
        raise NoMatchingAtomsError(
            "no_matching_atoms",
            "Could not find any atom in mmCIF file matching the selection.",
            selection,
        )
    logger.debug("Read %d atoms (%d decoded)", len(atoms), ndecoded)
    return atoms


def _iter_mmap_lines(path: str) -> Iterator[str]:
    with open(path, "rb") as handle:
        if os.fstat(handle.fileno()).st_size == 0:
            return
        with mmap.mmap(handle.fileno(), 0, access=mmap.ACCESS_READ) as mm:
            for raw in iter(mm.readline, b""):
                yield raw.decode("utf-8", errors="replace").rstrip("\r\n")


def _iter_buffer_lines(buffer: Union[IO[str], IO[bytes]]) -> Iterator[str]:
    for raw in buffer:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        yield raw.rstrip("\r\n")


def read_mmcif(
    source: Source,
    selection: Optional[str] = None,
    *,
    only: Optional[Callable[[Atom], bool]] = None,
    stop_at: Optional[int] = None,
    memory_available: float = config.DEFAULT_MEMORY_AVAILABLE,
    field_map: Mapping[str, Tuple[type, str]] = CIF_FIELDS,
) -> List[Atom]:
    """Read the atoms of an mmCIF file or buffer.

    Parameters
    ----------
    source
        Path to an mmCIF file, or a readable text or binary buffer.
    selection
        Optional selection string, e.g. ``"protein and name CA"``.
    only
        Optional atom predicate.
    stop_at
        Maximum number of atoms to keep.
    memory_available
        Memory headroom fraction; see :func:`parse_mmcif`.
    field_map
        Mapping of column name to target type and Atom attribute.

    Returns
    -------
    list
        Atoms read from the source.

    Raises
    ------
    AtomselError
        If ``source`` is a path that does not exist.
    """

    kwargs = dict(
        only=only,
        stop_at=stop_at,
        memory_available=memory_available,
        field_map=field_map,
    )
    if hasattr(source, "read"):
        logger.debug("Reading mmCIF atoms from buffer")
        atoms = parse_mmcif(_iter_buffer_lines(source), selection, **kwargs)
        if hasattr(source, "seek"):
            source.seek(0)
        return atoms
    path = os.path.expanduser(os.fspath(source))
    if not os.path.exists(path):
        raise AtomselError("file_not_found", "mmCIF file not found", path)
    logger.debug("Reading mmCIF atoms from %s", path)
    lines = _iter_mmap_lines(path)
    try:
        return parse_mmcif(lines, selection, **kwargs)
    finally:
        lines.close()
