import pytest

from atomsel.errors import NoMatchingAtomsError, SelectionSyntaxError
from atomsel.model.query import (
    And,
    Comparison,
    Not,
    Or,
    Special,
    apply_query,
    normalize_selection,
    parse_query,
    select,
    select_indices,
)
from atomsel.model.state import Atom


def _make_atoms() -> list:
    rows = [
        ("N", "ALA", 1, 1),
        ("CA", "ALA", 1, 1),
        ("C", "ALA", 1, 1),
        ("N", "GLU", 2, 2),
        ("CA", "GLU", 2, 2),
        ("CB", "GLU", 2, 2),
        ("O", "HOH", 101, 3),
    ]
    return [
        Atom(
            index=i,
            index_in_source=i,
            name=name,
            residue_name=resname,
            chain_id="A" if resname != "HOH" else "W",
            residue_sequence_number=resnum,
            residue_group_id=group,
            temperature_factor=10.0 * i,
            element=name[0],
        )
        for i, (name, resname, resnum, group) in enumerate(rows, start=1)
    ]


def _names(atoms) -> list:
    return [(atom.residue_name, atom.name) for atom in atoms]


def test_resname_and_name_selects_single_atom() -> None:
    atoms = _make_atoms()[:3]
    selected = select(atoms, "resname ALA and name CA")
    assert _names(selected) == [("ALA", "CA")]


def test_name_does_not_collide_with_resname() -> None:
    query = parse_query("resname ALA")
    assert query == Comparison("residue_name", "=", "ALA")


def test_spacing_is_irrelevant() -> None:
    assert parse_query("name = CA") == parse_query("name=CA")
    assert parse_query("name CA") == parse_query("  name   =CA ")
    assert parse_query("resnum<=2") == parse_query("resnum <= 2")


def test_numeric_comparisons_use_integer_ordering() -> None:
    atoms = _make_atoms()
    assert select_indices(atoms, "resnum > 1") == [4, 5, 6, 7]
    assert select_indices(atoms, "resnum >= 2") == [4, 5, 6, 7]
    assert select_indices(atoms, "resnum < 2") == [1, 2, 3]
    assert select_indices(atoms, "resnum <= 101 and resnum > 2") == [7]
    assert select_indices(atoms, "index = 3") == [3]
    assert select_indices(atoms, "residue 2") == [4, 5, 6]


def test_long_attribute_names_are_keywords() -> None:
    atoms = _make_atoms()
    assert select_indices(atoms, "residue_sequence_number = 2") == [4, 5, 6]
    assert select_indices(atoms, "residue_name GLU and index_in_source 6") == [6]
    assert select_indices(atoms, "index_pdb < 2") == [1]


def test_float_fields_accept_decimal_literals() -> None:
    atoms = _make_atoms()
    assert select_indices(atoms, "beta >= 65.5") == [7]
    assert select_indices(atoms, "occup = 1") == [1, 2, 3, 4, 5, 6, 7]


def test_special_keywords() -> None:
    atoms = _make_atoms()
    assert select_indices(atoms, "water") == [7]
    assert select_indices(atoms, "protein") == [1, 2, 3, 4, 5, 6]
    assert select_indices(atoms, "acidic") == [4, 5, 6]
    assert select_indices(atoms, "backbone") == [1, 2, 3, 4, 5]
    assert select_indices(atoms, "sidechain") == [6]
    assert select_indices(atoms, "all") == [1, 2, 3, 4, 5, 6, 7]


def test_acidic_on_glu_and_phe() -> None:
    query = parse_query("acidic")
    assert apply_query(query, Atom(residue_name="GLU"))
    assert not apply_query(query, Atom(residue_name="PHE"))


def test_not_and_or() -> None:
    atoms = _make_atoms()
    assert select_indices(atoms, "not protein") == [7]
    assert select_indices(atoms, "protein and not backbone") == [6]
    assert select_indices(atoms, "name CA or water") == [2, 5, 7]
    assert select_indices(atoms, "chain W or resname ALA or name CB") == [1, 2, 3, 6, 7]


def test_or_is_split_before_and() -> None:
    query = parse_query("resname ALA and name CA or water")
    assert isinstance(query, Or)
    assert isinstance(query.left, And)
    assert query.right == Special("water")
    atoms = _make_atoms()
    assert select_indices(atoms, "resname ALA and name CA or water") == [2, 7]


def test_not_binds_to_its_clause_inside_and() -> None:
    query = parse_query("not water and name O")
    assert query == And(Not(Special("water")), Comparison("name", "=", "O"))


def test_keywords_and_boolean_words_are_case_insensitive() -> None:
    assert parse_query("RESNAME ALA AND Name CA") == parse_query("resname ALA and name CA")


def test_values_are_case_sensitive() -> None:
    atoms = _make_atoms()
    with pytest.raises(NoMatchingAtomsError):
        select(atoms, "resname ala")


def test_values_spelling_keywords_keep_their_case() -> None:
    query = parse_query("segname WATER")
    assert query.attribute == "segment_name"
    assert query.value == "WATER"
    assert parse_query("resname ALL")(Atom(residue_name="ALL"))
    assert not parse_query("resname ALL")(Atom(residue_name="ALA"))
    assert normalize_selection("name Name and resname Resname") == [
        "name",
        "Name",
        "and",
        "residue_name",
        "Resname",
    ]


def test_string_ordering_operators() -> None:
    atoms = _make_atoms()
    assert select_indices(atoms, "resname < GLU") == [1, 2, 3]
    assert select_indices(atoms, "element = O") == [7]


def test_evaluation_is_pure() -> None:
    atoms = _make_atoms()
    for selection in ("name CA", "not water and resnum > 1", "acidic or basic", "all"):
        query = parse_query(selection)
        for atom in atoms:
            assert query(atom) == query(atom) == apply_query(query, atom)


def test_normalize_selection_substitutes_whole_tokens() -> None:
    assert normalize_selection("resname ALA and name CA") == [
        "residue_name",
        "ALA",
        "and",
        "name",
        "CA",
    ]
    assert normalize_selection("resnum>=10") == ["residue_sequence_number", ">=", "10"]


@pytest.mark.parametrize(
    "selection",
    [
        "",
        "   ",
        "(resname ALA)",
        "resname ALA and (name CA or name CB)",
        "foo",
        "resname",
        "resname ALA GLY",
        "resnum ALA",
        "resnum > 1.5",
        "index = ",
        "and name CA",
        "name CA or",
        "name CA not water",
        "water CA",
        "name 'CA'",
        'name "CA"',
        "name => CA",
        "name C*",
    ],
)
def test_invalid_selections_raise_syntax_error(selection: str) -> None:
    with pytest.raises(SelectionSyntaxError) as excinfo:
        parse_query(selection)
    assert excinfo.value.code == "selection_syntax"


def test_select_with_callable() -> None:
    atoms = _make_atoms()
    selected = select(atoms, lambda atom: atom.residue_sequence_number == 2)
    assert [atom.index for atom in selected] == [4, 5, 6]
    assert selected[0] is atoms[3]


def test_empty_selection_result_is_an_error() -> None:
    atoms = _make_atoms()
    with pytest.raises(NoMatchingAtomsError) as excinfo:
        select(atoms, "resname TRP")
    assert excinfo.value.code == "no_matching_atoms"
    with pytest.raises(NoMatchingAtomsError):
        select_indices(atoms, lambda atom: False)
