"""FastAPI application for the notes store.

Endpoints:
  GET    /api/notes        - List all notes in insertion order
  GET    /api/notes/{id}   - Fetch a single note
  POST   /api/notes        - Create a note from {title, content}
  PUT    /api/notes/{id}   - Replace title and content of a note
  DELETE /api/notes/{id}   - Delete a note
  GET    /health           - Store status and note count
  GET    /metrics          - Prometheus metrics
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any, Optional

from fastapi import Body, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware

from note_store.config import settings
from note_store.errors import NotFoundError, StorageError, ValidationError
from note_store.metrics import HTTP_DURATION, HTTP_REQUESTS
from note_store.models import DeleteResponse, ErrorResponse, Note, NoteInput
from note_store.storage import NoteStorage

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "title and content are required"
NOT_FOUND_MESSAGE = "Note not found"

# --- Global instances ---
storage = NoteStorage(settings.notes_file)

# Endpoints excluded from HTTP metrics
_METRICS_EXCLUDE = {"/metrics", "/openapi.json", "/docs", "/redoc"}


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record HTTP request count and duration for Prometheus."""

    async def dispatch(self, request: Request, call_next):
        """Wrap each request with timing and counting."""
        if request.url.path in _METRICS_EXCLUDE:
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start

        # Route template keeps note ids out of the label values
        route = request.scope.get("route")
        endpoint = getattr(route, "path", "unmatched")
        HTTP_REQUESTS.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()
        HTTP_DURATION.labels(endpoint=endpoint).observe(elapsed)
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: seed the notes file with sample data when it is missing."""
    if settings.seed_sample_notes:
        storage.bootstrap()
    logger.info("Notes API serving %s", storage.path)
    yield
    logger.info("Notes API shut down.")


app = FastAPI(title="Notes API", version="1.0.0", lifespan=lifespan)

app.add_middleware(MetricsMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error handlers ---


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Blank or missing title/content → 400."""
    return JSONResponse(status_code=400, content={"error": MISSING_FIELDS_MESSAGE})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies (not an object, non-string fields) → 400."""
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": MISSING_FIELDS_MESSAGE})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Unknown note id → 404."""
    return JSONResponse(status_code=404, content={"error": NOT_FOUND_MESSAGE})


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    """File read/write failure → 500. The process keeps serving."""
    logger.error(
        "Storage failure on %s %s: %s",
        request.method,
        request.url.path,
        exc.message,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"error": exc.message})


_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


# --- Endpoints ---


@app.get("/api/notes", response_model=list[Note])
def list_notes() -> list[Note]:
    """Return all notes, re-read from disk."""
    return storage.list()


@app.get("/api/notes/{note_id}", response_model=Note, responses=_ERROR_RESPONSES)
def get_note(note_id: str) -> Note:
    """Return one note."""
    return storage.get(note_id)


@app.post(
    "/api/notes", response_model=Note, status_code=201, responses=_ERROR_RESPONSES
)
def create_note(payload: Optional[NoteInput] = Body(default=None)) -> Note:
    """Create a note. The server assigns id and timestamps."""
    payload = payload or NoteInput()
    return storage.create(payload.title, payload.content)


@app.put("/api/notes/{note_id}", response_model=Note, responses=_ERROR_RESPONSES)
def update_note(note_id: str, payload: Optional[NoteInput] = Body(default=None)) -> Note:
    """Replace title and content of an existing note."""
    payload = payload or NoteInput()
    return storage.update(note_id, payload.title, payload.content)


@app.delete(
    "/api/notes/{note_id}", response_model=DeleteResponse, responses=_ERROR_RESPONSES
)
def delete_note(note_id: str) -> DeleteResponse:
    """Delete a note and echo it back."""
    return DeleteResponse(removed=storage.delete(note_id))


@app.get("/health")
def health() -> dict[str, Any]:
    """Report store status and note count."""
    return {
        "status": "healthy",
        "total_notes": storage.count,
        "notes_file": str(storage.path),
        "timestamp": datetime.now(UTC).isoformat(),
    }


@app.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
