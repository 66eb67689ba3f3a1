"""Error types and error payload helpers."""

from __future__ import annotations

from typing import Dict, Optional


class AtomselError(Exception):
    """Base exception type for atomsel.

    Attributes
    ----------
    code
        Stable error identifier.
    message
        Human-readable error message.
    details
        Optional detail payload for debugging.
    """

    def __init__(self, code: str, message: str, details: Optional[object] = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    def to_result(self) -> Dict[str, object]:
        """Return a JSON-ready error payload.

        Returns
        -------
        dict
            JSON-ready error payload.
        """
        return error_result(self.code, self.message, self.details)


class SelectionSyntaxError(AtomselError):
    """Raised when a selection string cannot be compiled.

    The whole selection is rejected; no partial query is ever returned.
    """

    def __init__(self, selection: str) -> None:
        super().__init__(
            "selection_syntax",
            f"Error parsing selection {selection!r}. "
            "Use spaces between keywords, parentheses are not supported.",
            selection,
        )


class NoMatchingAtomsError(AtomselError):
    """Raised when a parse or a selection yields zero atoms."""


class ResidueRangeError(AtomselError):
    """Raised when a residue view is built over a range that is not one residue.

    Attributes
    ----------
    code
        Stable error identifier.
    message
        Human-readable error message.
    details
        The offending ``(start, end)`` range.
    """


class MmcifFormatError(AtomselError):
    """Errors raised when decoding mmCIF atom records."""


def error_result(code: str, message: str, details: Optional[object] = None) -> Dict[str, object]:
    """Build an error payload.

    Parameters
    ----------
    code
        Stable error identifier.
    message
        Human-readable summary.
    details
        Optional detail payload for logging or debugging.

    Returns
    -------
    dict
        JSON-ready error payload.
    """

    return {"ok": False, "error": {"code": code, "message": message, "details": details}}
