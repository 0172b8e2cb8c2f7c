"""Client-side state for the notes page.

The controller keeps the last list fetched from the server and never
edits it in place. After every successful create, update or delete it
fetches the whole list again, so what is displayed is always the last
state read from the store. A failed call leaves the list untouched.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from ui import api

logger = logging.getLogger(__name__)

LOAD_ERROR = "Could not load notes. Is the backend running?"
EMPTY_FIELDS = "Title and content cannot be empty"


class NotesController:
    """Holds the displayed notes and routes every mutation through the API."""

    def __init__(self) -> None:
        self.notes: list[dict[str, Any]] = []
        self.error: Optional[str] = None
        self.notice: Optional[str] = None

    def refresh(self) -> bool:
        """Replace the local list with a fresh copy from the server."""
        self.error = None
        try:
            self.notes = api.list_notes()
        except requests.RequestException as e:
            logger.warning("Failed to load notes: %s", e)
            self.error = LOAD_ERROR
            return False
        return True

    def create(self, title: str, content: str) -> bool:
        """Create a note, then re-fetch."""
        title, content = title.strip(), content.strip()
        if not title or not content:
            self.notice = EMPTY_FIELDS
            return False
        return self._mutate("create", lambda: api.create_note(title, content))

    def update(self, note_id: str, title: str, content: str) -> bool:
        """Update a note, then re-fetch."""
        title, content = title.strip(), content.strip()
        if not title or not content:
            self.notice = EMPTY_FIELDS
            return False
        return self._mutate("update", lambda: api.update_note(note_id, title, content))

    def delete(self, note_id: str) -> bool:
        """Delete a note, then re-fetch."""
        return self._mutate("delete", lambda: api.delete_note(note_id))

    def sorted_notes(self) -> list[dict[str, Any]]:
        """Notes for display, most recently updated first."""
        return sorted(self.notes, key=lambda n: n.get("updatedAt", ""), reverse=True)

    def _mutate(self, verb: str, call) -> bool:
        self.notice = None
        try:
            call()
        except requests.RequestException as e:
            logger.warning("Failed to %s note: %s", verb, e)
            self.notice = f"Failed to {verb} note: {e}"
            return False
        self.refresh()
        return True
