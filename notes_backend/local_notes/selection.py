from enum import Enum
from typing import Optional

from local_notes.schemas import Note, NoteDraft


class Mode(str, Enum):
    """Which form the presentation layer shows and which commit applies."""
    BROWSING = "browsing"
    CREATING = "creating"
    EDITING = "editing"


class SelectionController:
    """
    Tracks the selected note id, the active mode and the draft being composed.

    Notes are referenced by id only; callers look the note up in the store when
    they need its current fields.
    """

    def __init__(self):
        self.selected_id: Optional[str] = None
        self.mode = Mode.BROWSING
        self.draft = NoteDraft()

    def select(self, note_id: str) -> None:
        self.selected_id = note_id
        self.mode = Mode.BROWSING
        self.draft = NoteDraft()

    def start_create(self) -> None:
        self.selected_id = None
        self.mode = Mode.CREATING
        self.draft = NoteDraft()

    def start_edit(self, note: Note) -> None:
        """Enter editing for ``note``, seeding the draft from its current fields."""
        self.selected_id = note.id
        self.mode = Mode.EDITING
        self.draft = NoteDraft(title=note.title, content=note.content)

    def set_draft(self, title: Optional[str] = None, content: Optional[str] = None) -> NoteDraft:
        """Change one or both draft fields; None leaves a field as is."""
        self.draft = NoteDraft(
            title=self.draft.title if title is None else title,
            content=self.draft.content if content is None else content,
        )
        return self.draft

    def cancel(self) -> None:
        """Leave creating/editing; the selection (if any) is kept."""
        self.mode = Mode.BROWSING
        self.draft = NoteDraft()

    def clear(self) -> None:
        """Drop the selection entirely, e.g. after the selected note was deleted."""
        self.selected_id = None
        self.mode = Mode.BROWSING
        self.draft = NoteDraft()
