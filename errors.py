"""Typed failures raised by the document core and the file service."""


class EditorError(Exception):
    """Base class for every failure the editor session reports."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ParseFailure(EditorError):
    """Ingested text could not be classified or produced no rows."""


class MinimumCardinality(EditorError):
    """Attempt to delete the last remaining row or column."""


class InvariantViolation(EditorError):
    """A structural edit would break the row/header length invariant."""


class PathNotFound(EditorError):
    """A tree path segment does not resolve in the working copy."""

    def __init__(self, path, segment=None):
        self.path = tuple(path)
        self.segment = segment
        where = "/".join(str(p) for p in self.path) or "<root>"
        super().__init__(f"Path not found: {where}")


class TreeOperationError(EditorError):
    """The path resolves but the operation does not apply to that node."""


class ExternalIOFailure(EditorError):
    """Load, save, export or clipboard access failed."""
