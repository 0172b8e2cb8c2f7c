"""Unit tests for ui.api - the requests-based notes client."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from ui import api


def _response(status_code: int, body=None, text: str = "") -> MagicMock:
    """Build a mock requests.Response."""
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status_code
    resp.ok = status_code < 400
    resp.text = text
    if body is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = body
    return resp


NOTE = {
    "id": "1-0001",
    "title": "A",
    "content": "a",
    "createdAt": "2024-01-01T00:00:00.000Z",
    "updatedAt": "2024-01-01T00:00:00.000Z",
}


class TestRequests:
    def test_list_notes(self) -> None:
        with patch("ui.api.requests.get", return_value=_response(200, [NOTE])) as get:
            assert api.list_notes() == [NOTE]
        get.assert_called_once_with(f"{api.BASE_URL}/api/notes", timeout=api._TIMEOUT)

    def test_create_note(self) -> None:
        with patch("ui.api.requests.post", return_value=_response(201, NOTE)) as post:
            assert api.create_note("A", "a") == NOTE
        post.assert_called_once_with(
            f"{api.BASE_URL}/api/notes",
            json={"title": "A", "content": "a"},
            timeout=api._TIMEOUT,
        )

    def test_update_note(self) -> None:
        with patch("ui.api.requests.put", return_value=_response(200, NOTE)) as put:
            api.update_note("1-0001", "A", "a")
        assert put.call_args.args[0] == f"{api.BASE_URL}/api/notes/1-0001"

    def test_delete_note(self) -> None:
        body = {"success": True, "removed": NOTE}
        with patch("ui.api.requests.delete", return_value=_response(200, body)):
            assert api.delete_note("1-0001") == body

    def test_get_note(self) -> None:
        with patch("ui.api.requests.get", return_value=_response(200, NOTE)) as get:
            assert api.get_note("1-0001") == NOTE
        assert get.call_args.args[0] == f"{api.BASE_URL}/api/notes/1-0001"


class TestErrors:
    def test_error_field_becomes_message(self) -> None:
        resp = _response(404, {"error": "Note not found"})
        with patch("ui.api.requests.delete", return_value=resp):
            with pytest.raises(requests.HTTPError, match="Note not found") as exc_info:
                api.delete_note("missing")
        assert exc_info.value.response is resp

    def test_plain_text_body(self) -> None:
        with patch("ui.api.requests.get", return_value=_response(502, text="Bad Gateway")):
            with pytest.raises(requests.HTTPError, match="Bad Gateway"):
                api.list_notes()

    def test_empty_body(self) -> None:
        with patch("ui.api.requests.get", return_value=_response(500)):
            with pytest.raises(requests.HTTPError, match="HTTP error 500"):
                api.get_health()

    def test_connection_error_propagates(self) -> None:
        with patch("ui.api.requests.get", side_effect=requests.ConnectionError("refused")):
            with pytest.raises(requests.ConnectionError):
                api.list_notes()
