"""
Workspace: the process-scoped object the presentation layer talks to.

It wires the note store, selection controller and alert queue together and
serializes every operation with one lock, so the HTTP bridge's worker threads
never interleave mutations.
"""
import logging
import threading
from typing import List, Optional

from local_notes.alerts import AlertQueue
from local_notes.errors import NoteNotFound, ValidationFailure
from local_notes.schemas import Note, NoteDraft, WorkspaceState
from local_notes.selection import Mode, SelectionController
from local_notes.storage import NOTES_KEY, LocalStorage, NotesPersistence
from local_notes.store import NoteStore

logger = logging.getLogger(__name__)

NO_NOTES_MESSAGE = "no notes yet"
SELECT_NOTE_MESSAGE = "select a note"


class Workspace:
    """Presentation-facing API over the note lifecycle core."""

    def __init__(
        self,
        store: NoteStore,
        selection: Optional[SelectionController] = None,
        alerts: Optional[AlertQueue] = None,
    ):
        self.store = store
        self.selection = selection or SelectionController()
        self.alerts = alerts or AlertQueue()
        self._lock = threading.RLock()

    @classmethod
    def from_session_factory(cls, session_factory, key: str = NOTES_KEY, alerts: Optional[AlertQueue] = None):
        """Build a workspace whose notes live under ``key`` in the given database."""
        persistence = NotesPersistence(LocalStorage(session_factory))
        return cls(NoteStore(persistence, key=key), alerts=alerts)

    def initialize(self) -> List[Note]:
        with self._lock:
            return self.store.initialize()

    def close(self) -> None:
        self.alerts.close()

    # Reads

    def get_all(self) -> List[Note]:
        with self._lock:
            return self.store.all()

    def get_selected(self) -> Optional[Note]:
        with self._lock:
            if self.selection.selected_id is None:
                return None
            return self.store.get(self.selection.selected_id)

    def get_mode(self) -> Mode:
        return self.selection.mode

    def get_draft(self) -> NoteDraft:
        return self.selection.draft

    def get_pending_errors(self) -> List[str]:
        return self.alerts.messages

    def snapshot(self) -> WorkspaceState:
        """Mode, selection, draft, alerts and placeholder read under one lock hold."""
        with self._lock:
            return WorkspaceState(
                mode=self.selection.mode.value,
                selected=self.get_selected(),
                draft=self.selection.draft,
                errors=self.alerts.messages,
                placeholder=self.placeholder(),
            )

    def is_selected(self, note_id: str) -> bool:
        return self.selection.selected_id == note_id

    def placeholder(self) -> Optional[str]:
        """Message to show in the preview pane instead of a note, if any."""
        with self._lock:
            if self.selection.mode == Mode.CREATING:
                return None
            if not self.store.all():
                return NO_NOTES_MESSAGE
            if self.get_selected() is None:
                return SELECT_NOTE_MESSAGE
            return None

    # Mode changes

    def select(self, note_id: str) -> Note:
        with self._lock:
            note = self.store.get(note_id)
            if note is None:
                raise NoteNotFound(note_id)
            self.selection.select(note_id)
            return note

    def start_create(self) -> None:
        with self._lock:
            self.selection.start_create()

    def start_edit(self) -> Optional[Note]:
        """Enter editing for the selected note. Without a selection this does nothing."""
        with self._lock:
            note = self.get_selected()
            if note is None:
                logger.warning("Ignoring start_edit without a selected note")
                return None
            self.selection.start_edit(note)
            return note

    def set_draft(self, title: Optional[str] = None, content: Optional[str] = None) -> NoteDraft:
        with self._lock:
            return self.selection.set_draft(title=title, content=content)

    def cancel(self) -> None:
        with self._lock:
            self.selection.cancel()

    # Commits

    def commit_create(self, draft: Optional[NoteDraft] = None) -> Note:
        """Create a note from ``draft`` (default: the current draft) and select it."""
        with self._lock:
            draft = draft if draft is not None else self.selection.draft
            try:
                note = self.store.create(draft)
            except ValidationFailure as exc:
                self.alerts.publish(exc.messages)
                raise
            self.alerts.clear()
            self.selection.select(note.id)
            return note

    def commit_update(self, draft: Optional[NoteDraft] = None) -> Note:
        """Apply ``draft`` (default: the current draft) to the selected note."""
        with self._lock:
            note_id = self.selection.selected_id
            if self.selection.mode != Mode.EDITING or note_id is None:
                raise RuntimeError("commit_update requires editing mode with a selected note")
            draft = draft if draft is not None else self.selection.draft
            try:
                note = self.store.update(note_id, draft)
            except ValidationFailure as exc:
                self.alerts.publish(exc.messages)
                raise
            self.alerts.clear()
            self.selection.cancel()
            return note

    def delete(self, note_id: str) -> None:
        with self._lock:
            self.store.delete(note_id)
            if self.selection.selected_id == note_id:
                self.selection.clear()
