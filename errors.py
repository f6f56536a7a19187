"""
errors.py
---------
Failure taxonomy shared by every layer.

Each error carries a stable ``kind`` so the presentation layer can render a
structured failure instead of a driver traceback.
"""

from typing import Optional


class RecordsError(Exception):
    """Base class for all failures surfaced to callers."""

    kind = "error"

    def to_result(self) -> dict:
        """Structured failure result, distinguishable by kind."""
        return {"success": False, "kind": self.kind, "message": str(self)}


class BackendUnavailable(RecordsError):
    """The datastore could not be reached (network or connection-class failure)."""

    kind = "backend_unavailable"


class QueryRejected(RecordsError):
    """The datastore was reached but refused the statement."""

    kind = "query_rejected"

    def __init__(self, message: str, sqlstate: Optional[str] = None):
        super().__init__(message)
        self.sqlstate = sqlstate


class InvalidInput(RecordsError):
    """The caller supplied unusable data."""

    kind = "invalid_input"


class InvalidScope(InvalidInput):
    """Identifier allocation was requested for a station that does not exist."""

    kind = "invalid_scope"


class DuplicateIdentifier(RecordsError):
    """A FIR number is already taken; the caller may retry with a fresh attempt."""

    kind = "duplicate_identifier"

    def __init__(self, identifier: str):
        super().__init__(f"FIR number {identifier} already exists. Please try again.")
        self.identifier = identifier


class Forbidden(RecordsError):
    """The caller's role does not allow the requested action."""

    kind = "forbidden"

    def __init__(self, role: str, action: str):
        super().__init__(f"Role '{role}' is not permitted to perform '{action}'.")
        self.role = role
        self.action = action
