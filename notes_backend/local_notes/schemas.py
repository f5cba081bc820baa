from typing import List

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class Note(BaseModel):
    """A committed note. Instances are immutable; edits produce a new Note with the same id."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Opaque identifier issued by the note store.")
    title: str = Field(..., description="Short note title.")
    content: str = Field(..., description="Full note content.")


class NoteDraft(BaseModel):
    """Title/content pair being composed before a create or update commit."""
    title: str = Field("", description="Draft title (may be blank until committed).")
    content: str = Field("", description="Draft content (may be blank until committed).")


class DraftPatch(BaseModel):
    """Partial draft change sent while the user types."""
    title: str | None = Field(None, description="New draft title, if changed.")
    content: str | None = Field(None, description="New draft content, if changed.")


class WorkspaceState(BaseModel):
    """Everything the presentation layer needs to decide what to render."""
    mode: str = Field(..., description="browsing, creating or editing.")
    selected: Note | None = Field(None, description="Currently selected note, if any.")
    draft: NoteDraft = Field(..., description="Current draft fields.")
    errors: List[str] = Field(default_factory=list, description="Pending validation messages.")
    placeholder: str | None = Field(None, description="Preview message to show instead of a note.")


# Serialized layout of the "notes" slot: a JSON array of {id, title, content}.
NoteList = TypeAdapter(List[Note])
