"""Selection query compiler and evaluator.

Selections are flat boolean expressions over atom fields and residue
chemistry, e.g. ``"resname ALA and name CA"`` or ``"protein and not
backbone"``. Parentheses are not supported. A selection is split on the first
``or``, otherwise on the first ``and``, otherwise a leading ``not`` is
stripped, otherwise it must be a single keyword clause. Mixed selections such
as ``A and B or C`` are therefore grouped as ``(A and B) or C``.
"""

from __future__ import annotations

import logging
import operator
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from atomsel.errors import NoMatchingAtomsError, SelectionSyntaxError
from atomsel.model import chemistry
from atomsel.model.state import Atom

logger = logging.getLogger(__name__)

Predicate = Callable[[Atom], bool]

OPERATORS: Dict[str, Callable[[object, object], bool]] = {
    "=": operator.eq,
    "<": operator.lt,
    ">": operator.gt,
    "<=": operator.le,
    ">=": operator.ge,
}

_OPERATOR_RE = re.compile(r"(<=|>=|=|<|>)")
_STRING_VALUE_RE = re.compile(r"^\w[\w']*$")


@dataclass(frozen=True)
class Keyword:
    """A selection keyword.

    Attributes
    ----------
    syntax_names
        Names accepted in selection strings.
    attribute
        Atom attribute compared by the keyword (or the internal name of a
        special keyword).
    kind
        ``"numeric"``, ``"string"`` or ``"special"``.
    value_type
        Type of the literal for numeric keywords.
    predicate
        Predicate of a special keyword.
    """

    syntax_names: Tuple[str, ...]
    attribute: str
    kind: str
    value_type: type = str
    predicate: Optional[Predicate] = None


def _always(atom: Atom) -> bool:
    return True


DEFAULT_KEYWORDS: Tuple[Keyword, ...] = (
    Keyword(("index",), "index", "numeric", int),
    Keyword(("index_in_source", "index_pdb"), "index_in_source", "numeric", int),
    Keyword(("resnum", "residue_sequence_number"), "residue_sequence_number", "numeric", int),
    Keyword(("residue", "residue_group_id"), "residue_group_id", "numeric", int),
    Keyword(("beta", "temperature_factor"), "temperature_factor", "numeric", float),
    Keyword(("occup", "occupancy"), "occupancy", "numeric", float),
    Keyword(("model", "model_number"), "model_number", "numeric", int),
    Keyword(("name",), "name", "string"),
    Keyword(("segname", "segment_name"), "segment_name", "string"),
    Keyword(("resname", "residue_name"), "residue_name", "string"),
    Keyword(("chain", "chain_id"), "chain_id", "string"),
    Keyword(("element",), "element", "string"),
    Keyword(("water",), "water", "special", predicate=chemistry.is_water),
    Keyword(("protein",), "protein", "special", predicate=chemistry.is_protein),
    Keyword(("polar",), "polar", "special", predicate=chemistry.is_polar),
    Keyword(("nonpolar",), "nonpolar", "special", predicate=chemistry.is_nonpolar),
    Keyword(("basic",), "basic", "special", predicate=chemistry.is_basic),
    Keyword(("acidic",), "acidic", "special", predicate=chemistry.is_acidic),
    Keyword(("charged",), "charged", "special", predicate=chemistry.is_charged),
    Keyword(("aliphatic",), "aliphatic", "special", predicate=chemistry.is_aliphatic),
    Keyword(("aromatic",), "aromatic", "special", predicate=chemistry.is_aromatic),
    Keyword(("hydrophobic",), "hydrophobic", "special", predicate=chemistry.is_hydrophobic),
    Keyword(("neutral",), "neutral", "special", predicate=chemistry.is_neutral),
    Keyword(("backbone",), "backbone", "special", predicate=chemistry.is_backbone),
    Keyword(("sidechain",), "sidechain", "special", predicate=chemistry.is_sidechain),
    Keyword(("all",), "all", "special", predicate=_always),
)

_BOOLEAN_WORDS = frozenset({"and", "or", "not"})


@dataclass(frozen=True)
class Comparison:
    """Leaf query comparing an atom attribute with a literal."""

    attribute: str
    op: str
    value: object
    _getter: Callable[[Atom], object] = field(repr=False, compare=False, default=None)
    _compare: Callable[[object, object], bool] = field(repr=False, compare=False, default=None)

    def __call__(self, atom: Atom) -> bool:
        return self._compare(self._getter(atom), self.value)


@dataclass(frozen=True)
class Special:
    """Leaf query calling a fixed predicate."""

    keyword: str
    predicate: Predicate = field(repr=False, compare=False, default=_always)

    def __call__(self, atom: Atom) -> bool:
        return bool(self.predicate(atom))


@dataclass(frozen=True)
class And:
    left: "Query"
    right: "Query"

    def __call__(self, atom: Atom) -> bool:
        return self.left(atom) and self.right(atom)


@dataclass(frozen=True)
class Or:
    left: "Query"
    right: "Query"

    def __call__(self, atom: Atom) -> bool:
        return self.left(atom) or self.right(atom)


@dataclass(frozen=True)
class Not:
    operand: "Query"

    def __call__(self, atom: Atom) -> bool:
        return not self.operand(atom)


Query = Union[Comparison, Special, And, Or, Not]


def _keyword_index(keywords: Sequence[Keyword]) -> Dict[str, Keyword]:
    by_attribute: Dict[str, Keyword] = {}
    for keyword in keywords:
        by_attribute.setdefault(keyword.attribute, keyword)
    return by_attribute


def normalize_selection(
    selection: str, keywords: Sequence[Keyword] = DEFAULT_KEYWORDS
) -> List[str]:
    """Split a selection into tokens with keywords replaced by attribute names.

    Operators are separated from their operands and boolean words are
    lower-cased. A token in keyword position (the first token, or one that
    follows ``and``, ``or`` or ``not``) is matched case-insensitively as a
    whole token against the syntax names, first keyword in table order wins,
    and replaced by the keyword's attribute name. Values keep their case, even
    when they spell a keyword.

    Parameters
    ----------
    selection
        Selection string.
    keywords
        Keyword table.

    Returns
    -------
    list
        Normalized tokens.
    """

    attributes: Dict[str, str] = {}
    for keyword in keywords:
        for syntax_name in keyword.syntax_names:
            attributes.setdefault(syntax_name, keyword.attribute)

    normalized: List[str] = []
    for token in _OPERATOR_RE.sub(r" \1 ", selection).split():
        lowered = token.lower()
        if lowered in _BOOLEAN_WORDS:
            normalized.append(lowered)
        elif not normalized or normalized[-1] in _BOOLEAN_WORDS:
            normalized.append(attributes.get(lowered, token))
        else:
            normalized.append(token)
    return normalized


def parse_query(
    selection: str, keywords: Sequence[Keyword] = DEFAULT_KEYWORDS
) -> Query:
    """Compile a selection string into a query.

    Parameters
    ----------
    selection
        Selection string, e.g. ``"resname ALA and name CA"``. String values
        are literal words; there are no wildcards.
    keywords
        Keyword table.

    Returns
    -------
    Query
        Compiled query; call it with an atom to evaluate it.

    Raises
    ------
    SelectionSyntaxError
        If the selection cannot be parsed. No partial query is returned.
    """

    if not isinstance(selection, str) or "(" in selection or ")" in selection:
        raise SelectionSyntaxError(str(selection))
    tokens = normalize_selection(selection, keywords)
    try:
        query = _parse_tokens(tokens, _keyword_index(keywords))
    except (ValueError, TypeError) as exc:
        raise SelectionSyntaxError(selection) from exc
    logger.debug("Compiled selection %r into %r", selection, query)
    return query


def _parse_tokens(tokens: List[str], keywords: Dict[str, Keyword]) -> Query:
    if not tokens:
        raise ValueError("empty selection")
    for word, node in (("or", Or), ("and", And)):
        if word in tokens:
            split = tokens.index(word)
            return node(
                _parse_tokens(tokens[:split], keywords),
                _parse_tokens(tokens[split + 1 :], keywords),
            )
    if tokens[0] == "not":
        return Not(_parse_tokens(tokens[1:], keywords))
    return _parse_clause(tokens, keywords)


def _parse_clause(tokens: List[str], keywords: Dict[str, Keyword]) -> Query:
    keyword = keywords.get(tokens[0])
    if keyword is None:
        raise ValueError(f"unknown keyword {tokens[0]!r}")
    if keyword.kind == "special":
        if len(tokens) != 1:
            raise ValueError(f"{keyword.attribute} takes no argument")
        return Special(keyword.attribute, keyword.predicate)
    return _parse_comparison(keyword, tokens[1:])


def _parse_comparison(keyword: Keyword, rest: List[str]) -> Comparison:
    if len(rest) == 1:
        op, raw = "=", rest[0]
    elif len(rest) == 2 and rest[0] in OPERATORS:
        op, raw = rest
    else:
        raise ValueError(f"invalid clause for {keyword.attribute}")
    if keyword.kind == "numeric":
        value: object = keyword.value_type(raw)
    elif _STRING_VALUE_RE.match(raw):
        value = raw
    else:
        raise ValueError(f"invalid value {raw!r}")
    return Comparison(
        keyword.attribute,
        op,
        value,
        _getter=operator.attrgetter(keyword.attribute),
        _compare=OPERATORS[op],
    )


def apply_query(query: Query, atom: Atom) -> bool:
    """Evaluate a compiled query on one atom."""
    return bool(query(atom))


def _as_predicate(selection: Union[str, Predicate]) -> Predicate:
    if isinstance(selection, str):
        return parse_query(selection)
    return selection


def select(atoms: Sequence[Atom], selection: Union[str, Predicate]) -> List[Atom]:
    """Return the atoms matching a selection string or predicate.

    Parameters
    ----------
    atoms
        Atom sequence.
    selection
        Selection string or callable taking an atom.

    Returns
    -------
    list
        Matching atoms, in input order.

    Raises
    ------
    SelectionSyntaxError
        If the selection string is invalid.
    NoMatchingAtomsError
        If no atom matches.
    """

    predicate = _as_predicate(selection)
    selected = [atom for atom in atoms if predicate(atom)]
    if not selected:
        raise NoMatchingAtomsError(
            "no_matching_atoms", "No atom matches the selection.", str(selection)
        )
    logger.debug("Selected %d of %d atoms", len(selected), len(atoms))
    return selected


def select_indices(atoms: Sequence[Atom], selection: Union[str, Predicate]) -> List[int]:
    """Return the ``index`` of every atom matching a selection."""
    return [atom.index for atom in select(atoms, selection)]
