"""Thin HTTP client for the notes API.

All functions return parsed JSON (dicts/lists) or raise on failure.
Uses requests (synchronous) since Streamlit reruns are synchronous.
"""

from __future__ import annotations

import os
from typing import Any

import requests

BASE_URL = os.getenv("NOTES_API_URL", "http://localhost:5000")
_TIMEOUT = 10  # seconds


def _error_message(resp: requests.Response) -> str:
    """Best human-readable reason for a failed response."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return resp.text or f"HTTP error {resp.status_code}"


def _check(resp: requests.Response) -> requests.Response:
    """Raise HTTPError carrying the server's error message on non-2xx."""
    if not resp.ok:
        raise requests.HTTPError(_error_message(resp), response=resp)
    return resp


def list_notes() -> list[dict[str, Any]]:
    """GET /api/notes - all notes in insertion order."""
    resp = requests.get(f"{BASE_URL}/api/notes", timeout=_TIMEOUT)
    return _check(resp).json()


def get_note(note_id: str) -> dict[str, Any]:
    """GET /api/notes/{id} - a single note."""
    resp = requests.get(f"{BASE_URL}/api/notes/{note_id}", timeout=_TIMEOUT)
    return _check(resp).json()


def create_note(title: str, content: str) -> dict[str, Any]:
    """POST /api/notes - create a note, returns it with id and timestamps."""
    resp = requests.post(
        f"{BASE_URL}/api/notes",
        json={"title": title, "content": content},
        timeout=_TIMEOUT,
    )
    return _check(resp).json()


def update_note(note_id: str, title: str, content: str) -> dict[str, Any]:
    """PUT /api/notes/{id} - replace title and content."""
    resp = requests.put(
        f"{BASE_URL}/api/notes/{note_id}",
        json={"title": title, "content": content},
        timeout=_TIMEOUT,
    )
    return _check(resp).json()


def delete_note(note_id: str) -> dict[str, Any]:
    """DELETE /api/notes/{id} - returns {success, removed}."""
    resp = requests.delete(f"{BASE_URL}/api/notes/{note_id}", timeout=_TIMEOUT)
    return _check(resp).json()


def get_health() -> dict[str, Any]:
    """GET /health - store status and note count."""
    resp = requests.get(f"{BASE_URL}/health", timeout=_TIMEOUT)
    return _check(resp).json()
