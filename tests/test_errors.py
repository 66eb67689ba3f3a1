from atomsel.errors import (
    AtomselError,
    NoMatchingAtomsError,
    SelectionSyntaxError,
    error_result,
)


def test_selection_syntax_error_payload() -> None:
    exc = SelectionSyntaxError("name (CA)")
    assert isinstance(exc, AtomselError)
    result = exc.to_result()
    assert result["ok"] is False
    assert result["error"]["code"] == "selection_syntax"
    assert result["error"]["details"] == "name (CA)"
    assert "parentheses are not supported" in str(exc)


def test_error_result() -> None:
    exc = NoMatchingAtomsError("no_matching_atoms", "nothing", "resname XXX")
    assert exc.to_result() == error_result("no_matching_atoms", "nothing", "resname XXX")
