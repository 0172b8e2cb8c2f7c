"""Pydantic models for notes and the HTTP payloads that carry them."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class Note(BaseModel):
    """A single note with creation and update timestamps.

    Serialized with camelCase keys (``createdAt``/``updatedAt``), both on
    the wire and in the backing file.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, description="Note title")
    content: str = Field(..., min_length=1, description="Note content")
    created_at: str = Field(..., description="ISO-8601 creation timestamp")
    updated_at: str = Field(..., description="ISO-8601 last update timestamp")

    def to_json_dict(self) -> dict:
        """Dump with camelCase keys, as stored on disk."""
        return self.model_dump(by_alias=True)


# Validates the whole persisted collection in one pass.
NoteList = TypeAdapter(list[Note])


class NoteInput(BaseModel):
    """Request body for create and update.

    Both fields are optional here so that missing values reach the store and
    fail with its own validation error instead of a schema error.
    """

    title: Optional[str] = None
    content: Optional[str] = None


class DeleteResponse(BaseModel):
    """Response body for DELETE /api/notes/{id}."""

    success: bool = True
    removed: Note


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response."""

    error: str
