"""Notes App - Streamlit interface.

Run with:
    streamlit run ui/app.py
"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

# Ensure the project root is on sys.path so `ui.*` imports resolve
# regardless of the working directory Streamlit uses.
_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import streamlit as st  # noqa: E402

st.set_page_config(page_title="Notes App", page_icon="📝", layout="centered")

from ui.controller import NotesController  # noqa: E402


def _ensure_session() -> NotesController:
    """Create the controller and load notes on first run."""
    if "controller" not in st.session_state:
        controller = NotesController()
        controller.refresh()
        st.session_state.controller = controller
        st.session_state.show_create = False
        st.session_state.editing = None
    return st.session_state.controller


def _format_time(value: str) -> str:
    try:
        return datetime.fromisoformat(value).astimezone().strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return value


def _render_form(key: str, initial: dict | None = None) -> tuple[str, str] | None:
    """Title/content form. Returns the submitted values, or None."""
    initial = initial or {}
    with st.form(key, clear_on_submit=False):
        title = st.text_input("Title", value=initial.get("title", ""))
        content = st.text_area("Content", value=initial.get("content", ""), height=150)
        cols = st.columns(2)
        saved = cols[0].form_submit_button("Save", type="primary")
        cancelled = cols[1].form_submit_button("Cancel")
    if cancelled:
        st.session_state.show_create = False
        st.session_state.editing = None
        st.rerun()
    return (title, content) if saved else None


def _show_notice(controller: NotesController) -> None:
    """Show and clear the last failed operation."""
    if controller.notice:
        st.error(controller.notice)
        controller.notice = None


def _render_note(controller: NotesController, note: dict) -> None:
    with st.container(border=True):
        st.subheader(note["title"])
        st.write(note["content"])
        st.caption(f"Updated: {_format_time(note['updatedAt'])}")
        cols = st.columns([1, 1, 2])
        if cols[0].button("Edit", key=f"edit_{note['id']}"):
            st.session_state.editing = note
            st.session_state.show_create = False
            st.rerun()
        confirm = cols[2].checkbox("Confirm delete", key=f"confirm_{note['id']}")
        if cols[1].button("Delete", key=f"delete_{note['id']}", disabled=not confirm):
            controller.delete(note["id"])
            st.rerun()


def render() -> None:
    """Render the notes page."""
    controller = _ensure_session()

    st.title("📝 Notes App")
    st.caption("Create, edit, and delete notes - stored in a JSON file on the server.")

    cols = st.columns([1, 1, 4])
    if cols[0].button("Close" if st.session_state.show_create else "New Note", type="primary"):
        st.session_state.show_create = not st.session_state.show_create
        st.session_state.editing = None
        st.rerun()
    if cols[1].button("Refresh"):
        with st.spinner("Refreshing..."):
            controller.refresh()

    if controller.error:
        st.error(controller.error)
    _show_notice(controller)

    if st.session_state.show_create:
        st.header("Create Note")
        values = _render_form("create_form")
        if values:
            if controller.create(*values):
                st.session_state.show_create = False
                st.rerun()
            _show_notice(controller)

    editing = st.session_state.editing
    if editing:
        st.header("Edit Note")
        values = _render_form(f"edit_form_{editing['id']}", editing)
        if values:
            if controller.update(editing["id"], *values):
                st.session_state.editing = None
                st.rerun()
            _show_notice(controller)

    st.header("All Notes")
    notes = controller.sorted_notes()
    if not notes:
        st.info('No notes yet. Click "New Note" to add one.')
    for note in notes:
        _render_note(controller, note)


render()
