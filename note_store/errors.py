"""Exceptions raised by the note store.

Each one maps to a single HTTP status in ``note_store.main``:

    NoteStoreError
    ├── ValidationError  → 400
    ├── NotFoundError    → 404
    └── StorageError     → 500
"""

from __future__ import annotations


class NoteStoreError(Exception):
    """Base class for all note store errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(NoteStoreError):
    """Title and/or content missing or blank."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        verb = "is" if len(fields) == 1 else "are"
        super().__init__(f"{' and '.join(fields)} {verb} required")


class NotFoundError(NoteStoreError):
    """No note with the requested id exists."""

    def __init__(self, note_id: str) -> None:
        self.note_id = note_id
        super().__init__(f"Note '{note_id}' not found")


class StorageError(NoteStoreError):
    """Reading or writing the backing file failed."""
