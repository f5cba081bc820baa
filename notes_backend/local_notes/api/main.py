import logging
import os
from typing import Any, Dict, List

from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from local_notes.db import SessionLocal, create_tables, engine
from local_notes.errors import NoteNotFound, PersistenceFailure, ValidationFailure
from local_notes.schemas import DraftPatch, Note, NoteDraft, WorkspaceState
from local_notes.storage import NOTES_KEY
from local_notes.workspace import Workspace

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Service health and readiness endpoints."},
    {"name": "Notes", "description": "Note lifecycle: list, select, create, edit, delete."},
    {"name": "Mode", "description": "Browsing / creating / editing state and the draft."},
]

app = FastAPI(
    title="Local Notes",
    description="Local bridge between the notes UI and the note lifecycle core.",
    version="1.0.0",
    openapi_tags=openapi_tags,
)


def _parse_allowed_origins() -> List[str]:
    """
    Parse comma-separated ALLOWED_ORIGINS from env.

    Falls back to localhost dev origins when not set.
    """
    raw = (os.getenv("ALLOWED_ORIGINS") or "").strip()
    if not raw:
        return ["http://localhost:3000", "http://127.0.0.1:3000"]

    origins = [o.strip() for o in raw.split(",")]
    return [o for o in origins if o]


def _parse_allowed_origin_regex() -> str | None:
    """Return ALLOWED_ORIGIN_REGEX if set; the bridge is local-only otherwise."""
    raw = (os.getenv("ALLOWED_ORIGIN_REGEX") or "").strip()
    return raw or None


app.add_middleware(
    CORSMiddleware,
    allow_origins=_parse_allowed_origins(),
    allow_origin_regex=_parse_allowed_origin_regex(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationFailure)
async def _validation_failure_handler(request: Request, exc: ValidationFailure) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": "Validation failed", "errors": exc.messages},
    )


@app.exception_handler(NoteNotFound)
async def _not_found_handler(request: Request, exc: NoteNotFound) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "Note not found"})


@app.exception_handler(PersistenceFailure)
async def _persistence_failure_handler(request: Request, exc: PersistenceFailure) -> JSONResponse:
    logger.error("Storage unavailable on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Local storage unavailable"},
    )


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return JSON for unexpected errors so the UI never sees a non-JSON body."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


@app.on_event("startup")
def _startup_workspace() -> None:
    """Create the storage table and load the notes collection once for this process."""
    create_tables(engine)
    workspace = Workspace.from_session_factory(SessionLocal, key=os.getenv("NOTES_STORAGE_KEY") or NOTES_KEY)
    workspace.initialize()
    app.state.workspace = workspace


@app.on_event("shutdown")
def _shutdown_workspace() -> None:
    workspace = getattr(app.state, "workspace", None)
    if workspace is not None:
        workspace.close()


# PUBLIC_INTERFACE
def get_workspace(request: Request) -> Workspace:
    """FastAPI dependency returning the process-wide workspace."""
    return request.app.state.workspace


# PUBLIC_INTERFACE
@app.get("/", tags=["Health"], summary="Health check", description="Returns a simple health payload.")
def health_check() -> Dict[str, str]:
    """Health check endpoint."""
    return {"message": "Healthy"}


# PUBLIC_INTERFACE
@app.get(
    "/health/db",
    tags=["Health"],
    summary="Storage health check",
    description="Runs SELECT 1 against the local storage database.",
)
def health_check_db() -> Dict[str, Any]:
    """Storage readiness endpoint."""
    try:
        with SessionLocal() as db:
            value = db.execute(text("SELECT 1")).scalar_one()
        return {"status": "up", "query": "SELECT 1", "result": int(value)}
    except Exception as exc:
        return {"status": "down", "error": str(exc)}


# PUBLIC_INTERFACE
@app.get(
    "/notes",
    response_model=List[Note],
    tags=["Notes"],
    summary="List notes",
    description="Return all notes in insertion order.",
)
def list_notes(workspace: Workspace = Depends(get_workspace)) -> List[Note]:
    """List all notes."""
    return workspace.get_all()


# PUBLIC_INTERFACE
@app.get("/state", response_model=WorkspaceState, tags=["Mode"], summary="Current mode, selection, draft and alerts")
def get_state(workspace: Workspace = Depends(get_workspace)) -> WorkspaceState:
    """Everything the UI needs to render the preview pane."""
    return workspace.snapshot()


# PUBLIC_INTERFACE
@app.post("/notes/{note_id}/select", response_model=WorkspaceState, tags=["Notes"], summary="Select note")
def select_note(note_id: str, workspace: Workspace = Depends(get_workspace)) -> WorkspaceState:
    """Select a note for viewing."""
    workspace.select(note_id)
    return workspace.snapshot()


# PUBLIC_INTERFACE
@app.post("/mode/create", response_model=WorkspaceState, tags=["Mode"], summary="Switch to creating")
def start_create(workspace: Workspace = Depends(get_workspace)) -> WorkspaceState:
    """Open an empty draft for a new note."""
    workspace.start_create()
    return workspace.snapshot()


# PUBLIC_INTERFACE
@app.post("/mode/edit", response_model=WorkspaceState, tags=["Mode"], summary="Switch to editing")
def start_edit(workspace: Workspace = Depends(get_workspace)) -> WorkspaceState:
    """Edit the selected note; without a selection the state is returned unchanged."""
    workspace.start_edit()
    return workspace.snapshot()


# PUBLIC_INTERFACE
@app.post("/mode/cancel", response_model=WorkspaceState, tags=["Mode"], summary="Back to browsing")
def cancel(workspace: Workspace = Depends(get_workspace)) -> WorkspaceState:
    """Discard the draft and return to browsing."""
    workspace.cancel()
    return workspace.snapshot()


# PUBLIC_INTERFACE
@app.patch("/draft", response_model=NoteDraft, tags=["Mode"], summary="Change draft fields")
def patch_draft(payload: DraftPatch, workspace: Workspace = Depends(get_workspace)) -> NoteDraft:
    """Update the draft title and/or content while typing."""
    return workspace.set_draft(title=payload.title, content=payload.content)


# PUBLIC_INTERFACE
@app.post(
    "/notes",
    response_model=Note,
    status_code=status.HTTP_201_CREATED,
    tags=["Notes"],
    summary="Create note",
    description="Commit a new note from the request body and select it.",
)
def create_note(payload: NoteDraft, workspace: Workspace = Depends(get_workspace)) -> Note:
    """Create a note."""
    return workspace.commit_create(payload)


# PUBLIC_INTERFACE
@app.put(
    "/notes/selected",
    response_model=Note,
    tags=["Notes"],
    summary="Update selected note",
    description="Commit the edit of the selected note. Requires editing mode.",
)
def update_selected_note(payload: NoteDraft, workspace: Workspace = Depends(get_workspace)) -> Note:
    """Update the note being edited."""
    try:
        return workspace.commit_update(payload)
    except RuntimeError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


# PUBLIC_INTERFACE
@app.delete(
    "/notes/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Notes"],
    summary="Delete note",
    description="Delete a note by ID; clears the selection if it was selected.",
)
def delete_note(note_id: str, workspace: Workspace = Depends(get_workspace)) -> Response:
    """Delete a note by id."""
    workspace.delete(note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# PUBLIC_INTERFACE
@app.get("/alerts", response_model=List[str], tags=["Mode"], summary="Pending validation messages")
def get_alerts(workspace: Workspace = Depends(get_workspace)) -> List[str]:
    """Validation messages still on display."""
    return workspace.get_pending_errors()
