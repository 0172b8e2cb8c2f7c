"""Unit tests for ui.controller - refetch-after-mutation client state."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from ui.controller import EMPTY_FIELDS, LOAD_ERROR, NotesController


def _note(note_id: str, updated_at: str) -> dict:
    return {
        "id": note_id,
        "title": note_id,
        "content": "c",
        "createdAt": "2024-01-01T00:00:00.000Z",
        "updatedAt": updated_at,
    }


OLD = _note("old", "2024-01-01T00:00:00.000Z")
NEW = _note("new", "2024-06-01T00:00:00.000Z")


@pytest.fixture()
def mock_api():
    """Patch the api module used by the controller."""
    with patch("ui.controller.api") as api:
        api.list_notes = MagicMock(return_value=[OLD, NEW])
        yield api


@pytest.fixture()
def controller(mock_api) -> NotesController:
    c = NotesController()
    c.refresh()
    mock_api.list_notes.reset_mock()
    return c


class TestRefresh:
    def test_loads_notes(self, controller: NotesController) -> None:
        assert controller.notes == [OLD, NEW]
        assert controller.error is None

    def test_failure_keeps_previous_list(self, controller: NotesController, mock_api) -> None:
        mock_api.list_notes.side_effect = requests.ConnectionError("refused")
        assert controller.refresh() is False
        assert controller.notes == [OLD, NEW]
        assert controller.error == LOAD_ERROR

    def test_sorted_notes_newest_first(self, controller: NotesController) -> None:
        assert [n["id"] for n in controller.sorted_notes()] == ["new", "old"]
        # display order does not reorder the stored copy
        assert controller.notes == [OLD, NEW]


class TestMutations:
    def test_create_refetches(self, controller: NotesController, mock_api) -> None:
        mock_api.list_notes.return_value = [OLD, NEW, _note("x", "2024-07-01T00:00:00.000Z")]
        assert controller.create("  Title ", " Body ") is True
        mock_api.create_note.assert_called_once_with("Title", "Body")
        mock_api.list_notes.assert_called_once()
        assert len(controller.notes) == 3

    def test_update_refetches(self, controller: NotesController, mock_api) -> None:
        assert controller.update("old", "T", "C") is True
        mock_api.update_note.assert_called_once_with("old", "T", "C")
        mock_api.list_notes.assert_called_once()

    def test_delete_refetches(self, controller: NotesController, mock_api) -> None:
        mock_api.list_notes.return_value = [NEW]
        assert controller.delete("old") is True
        mock_api.delete_note.assert_called_once_with("old")
        assert controller.notes == [NEW]

    def test_empty_fields_rejected_locally(self, controller: NotesController, mock_api) -> None:
        assert controller.create("   ", "body") is False
        assert controller.update("old", "title", "") is False
        assert controller.notice == EMPTY_FIELDS
        mock_api.create_note.assert_not_called()
        mock_api.update_note.assert_not_called()

    @pytest.mark.parametrize(
        ("method", "args", "verb"),
        [
            ("create", ("T", "C"), "create"),
            ("update", ("old", "T", "C"), "update"),
            ("delete", ("old",), "delete"),
        ],
    )
    def test_failure_leaves_list_unchanged(
        self, controller: NotesController, mock_api, method, args, verb
    ) -> None:
        failure = requests.HTTPError("Note not found")
        getattr(mock_api, f"{verb}_note").side_effect = failure
        assert getattr(controller, method)(*args) is False
        assert controller.notes == [OLD, NEW]
        assert controller.notice == f"Failed to {verb} note: Note not found"
        mock_api.list_notes.assert_not_called()
