"""JSON file-based storage for notes.

The backing file is the whole database: a pretty-printed JSON array of
notes. Nothing is cached between calls. Every operation re-reads the file
and every mutation rewrites it in full (read-modify-write).

Mutations on one ``NoteStorage`` are serialized with a lock. Separate
instances or processes pointed at the same file are not coordinated, so
the later writer wins.
"""

from __future__ import annotations

import json
import logging
import secrets
import threading
import time
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Collection, Iterator

from pydantic import ValidationError as SchemaError

from note_store.errors import NotFoundError, StorageError, ValidationError
from note_store.metrics import STORE_OPERATIONS, STORED_NOTES
from note_store.models import Note, NoteList

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_PATH = Path("notes.json")

SAMPLE_NOTES: list[tuple[str, str, str]] = [
    (
        "sample-1",
        "Welcome to Notes App",
        "This is a simple notes application. You can create, edit, and delete notes.",
    ),
    (
        "sample-2",
        "Getting Started",
        "Click on 'New Note' to create your first note. "
        "Use the edit and delete buttons to manage your notes.",
    ),
]

_id_lock = threading.Lock()
_last_id_stamp = 0


def utc_now() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate_id(existing: Collection[str] = ()) -> str:
    """Return a new note id of the form ``<epoch-ns>-<0000..9999>``.

    The timestamp part never goes backwards within the process, and a
    candidate already present in ``existing`` is drawn again.
    """
    global _last_id_stamp
    while True:
        with _id_lock:
            _last_id_stamp = max(time.time_ns(), _last_id_stamp)
            stamp = _last_id_stamp
        candidate = f"{stamp}-{secrets.randbelow(10_000):04d}"
        if candidate not in existing:
            return candidate


def _not_before(previous: str) -> str:
    """Current time, or ``previous`` if the clock has moved behind it."""
    now = utc_now()
    try:
        if datetime.fromisoformat(previous) > datetime.fromisoformat(now):
            return previous
    except (TypeError, ValueError):
        pass
    return now


def _validate(title: object, content: object) -> None:
    """Raise ValidationError listing every blank or missing field."""
    missing = [
        name
        for name, value in (("title", title), ("content", content))
        if not isinstance(value, str) or not value.strip()
    ]
    if missing:
        raise ValidationError(missing)


def _index_of(notes: list[Note], note_id: str) -> int:
    for idx, note in enumerate(notes):
        if note.id == note_id:
            return idx
    raise NotFoundError(note_id)


@contextmanager
def _track(operation: str) -> Iterator[None]:
    """Count a store operation by outcome."""
    try:
        yield
    except ValidationError:
        STORE_OPERATIONS.labels(operation=operation, status="invalid").inc()
        raise
    except NotFoundError:
        STORE_OPERATIONS.labels(operation=operation, status="not_found").inc()
        raise
    except StorageError:
        STORE_OPERATIONS.labels(operation=operation, status="error").inc()
        raise
    STORE_OPERATIONS.labels(operation=operation, status="success").inc()


class NoteStorage:
    """Create, read, update and delete notes in a single JSON file."""

    def __init__(self, storage_path: Path = DEFAULT_STORAGE_PATH) -> None:
        self._path = Path(storage_path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        """Location of the backing file."""
        return self._path

    # ------------------------------------------------------------------
    # File I/O
    # ------------------------------------------------------------------

    def _read(self, strict: bool) -> list[Note]:
        """Load the full collection from disk.

        A missing file or content that is not a valid note array loads as an
        empty list. Other read failures raise StorageError when ``strict``,
        otherwise they are logged and also load as an empty list.
        """
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as exc:
            if strict:
                logger.error("Failed to read %s: %s", self._path, exc)
                raise StorageError("Failed to read notes") from exc
            logger.warning("Cannot read %s, returning no notes: %s", self._path, exc)
            return []

        try:
            notes = NoteList.validate_json(raw)
        except SchemaError as exc:
            logger.warning(
                "%s is not a valid note list, treating as empty: %d error(s)",
                self._path,
                exc.error_count(),
            )
            return []

        STORED_NOTES.set(len(notes))
        return notes

    def _write(self, notes: list[Note]) -> None:
        """Replace the file content with the given collection."""
        payload = json.dumps(
            [n.to_json_dict() for n in notes], indent=2, ensure_ascii=False
        )
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(payload + "\n", encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to write %s: %s", self._path, exc)
            raise StorageError("Failed to save notes") from exc
        STORED_NOTES.set(len(notes))

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def bootstrap(self) -> bool:
        """Create the file with the sample notes if it does not exist.

        Returns True when the file was created.
        """
        with self._lock:
            if self._path.exists():
                logger.info(
                    "Loaded %d notes from %s", len(self._read(strict=False)), self._path
                )
                return False
            now = utc_now()
            self._write(
                [
                    Note(id=note_id, title=title, content=content, created_at=now, updated_at=now)
                    for note_id, title, content in SAMPLE_NOTES
                ]
            )
        logger.info("Created %s with %d sample notes", self._path, len(SAMPLE_NOTES))
        return True

    def list(self) -> list[Note]:
        """Return every stored note in insertion order. Never raises."""
        with _track("list"), self._lock:
            return self._read(strict=False)

    def get(self, note_id: str) -> Note:
        """Return the note with the given id."""
        with _track("get"), self._lock:
            notes = self._read(strict=False)
            return notes[_index_of(notes, note_id)]

    def create(self, title: str, content: str) -> Note:
        """Create and persist a new note."""
        with _track("create"):
            _validate(title, content)
            with self._lock:
                notes = self._read(strict=True)
                now = utc_now()
                note = Note(
                    id=generate_id({n.id for n in notes}),
                    title=title,
                    content=content,
                    created_at=now,
                    updated_at=now,
                )
                notes.append(note)
                self._write(notes)
        logger.info("Created note %s '%s'", note.id, note.title)
        return note

    def update(self, note_id: str, title: str, content: str) -> Note:
        """Replace title and content of an existing note."""
        with _track("update"):
            _validate(title, content)
            with self._lock:
                notes = self._read(strict=True)
                idx = _index_of(notes, note_id)
                current = notes[idx]
                note = current.model_copy(
                    update={
                        "title": title,
                        "content": content,
                        "updated_at": _not_before(current.updated_at),
                    }
                )
                notes[idx] = note
                self._write(notes)
        logger.info("Updated note %s", note.id)
        return note

    def delete(self, note_id: str) -> Note:
        """Remove a note and return it."""
        with _track("delete"), self._lock:
            notes = self._read(strict=True)
            removed = notes.pop(_index_of(notes, note_id))
            self._write(notes)
        logger.info("Deleted note %s", removed.id)
        return removed

    @property
    def count(self) -> int:
        """Number of stored notes."""
        return len(self.list())
