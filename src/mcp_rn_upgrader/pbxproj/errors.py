"""Exceptions raised by the project manifest editor."""


class ManifestError(Exception):
    """Base exception for manifest editing errors."""


class StructureError(ManifestError):
    """Manifest text is malformed or lacks a required table.

    Raised by the parser before any mutation is attempted.
    """


class NotFoundError(ManifestError):
    """A path given for removal does not resolve to any file record."""

    def __init__(self, path: str, candidates: list[str], total: int) -> None:
        """Initialize with the unresolved path and a sample of known paths."""
        self.path = path
        self.candidates = candidates
        self.total = total
        super().__init__(f"File not found in project: {path}")


class UnsupportedOperationError(ManifestError):
    """Operation name is not one of 'add' or 'remove'."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Unknown operation '{operation}'. Use 'add' or 'remove'.")


class DuplicateFileError(ManifestError):
    """A file record with the same path is already in the project."""

    def __init__(self, path: str, file_id: str) -> None:
        self.path = path
        self.file_id = file_id
        super().__init__(f"File already in project: {path} ({file_id})")
