"""
Note store: the authoritative in-memory collection, mirrored to storage on every mutation.

Each mutation builds the next collection, persists it in full, and only then swaps it
in, so a failed write leaves memory and storage agreeing on the previous state.
"""
import logging
import uuid
from typing import List, Optional

from local_notes.errors import NoteNotFound, ValidationFailure
from local_notes.schemas import Note, NoteDraft
from local_notes.storage import NOTES_KEY, NotesPersistence
from local_notes.validation import validate

logger = logging.getLogger(__name__)


def _new_note_id() -> str:
    return uuid.uuid4().hex


class NoteStore:
    """Owns the ordered notes collection; the only writer to the notes slot."""

    def __init__(self, persistence: NotesPersistence, key: str = NOTES_KEY):
        self._persistence = persistence
        self._key = key
        self._notes: Optional[List[Note]] = None

    @property
    def initialized(self) -> bool:
        return self._notes is not None

    def initialize(self) -> List[Note]:
        """Load the collection from storage, creating an empty one if the key is absent."""
        if self._notes is not None:
            logger.debug("Note store already initialized; keeping %d notes", len(self._notes))
            return list(self._notes)
        self._persistence.ensure(self._key)
        self._notes = self._persistence.load(self._key)
        logger.info("Loaded %d notes from %r", len(self._notes), self._key)
        return list(self._notes)

    def _current(self) -> List[Note]:
        if self._notes is None:
            raise RuntimeError("NoteStore.initialize() must be called first")
        return self._notes

    def _index_of(self, note_id: str) -> int:
        for index, note in enumerate(self._current()):
            if note.id == note_id:
                return index
        raise NoteNotFound(note_id)

    def _commit(self, notes: List[Note]) -> None:
        self._persistence.save(self._key, notes)
        self._notes = notes

    def all(self) -> List[Note]:
        return list(self._current())

    def get(self, note_id: str) -> Optional[Note]:
        try:
            return self._current()[self._index_of(note_id)]
        except NoteNotFound:
            return None

    def create(self, draft: NoteDraft) -> Note:
        """Validate ``draft`` and append it as a new note with a freshly issued id."""
        errors = validate(draft)
        if errors:
            raise ValidationFailure(errors)

        existing = {note.id for note in self._current()}
        note_id = _new_note_id()
        while note_id in existing:
            note_id = _new_note_id()

        note = Note(id=note_id, title=draft.title, content=draft.content)
        self._commit(self._current() + [note])
        logger.info("Created note %s title_len=%s content_len=%s", note.id, len(note.title), len(note.content))
        return note

    def update(self, note_id: str, draft: NoteDraft) -> Note:
        """Replace title/content of ``note_id`` in place; id and position are kept."""
        index = self._index_of(note_id)
        errors = validate(draft)
        if errors:
            raise ValidationFailure(errors)

        note = Note(id=note_id, title=draft.title, content=draft.content)
        notes = list(self._current())
        notes[index] = note
        self._commit(notes)
        logger.info("Updated note %s title_len=%s content_len=%s", note.id, len(note.title), len(note.content))
        return note

    def delete(self, note_id: str) -> None:
        index = self._index_of(note_id)
        notes = list(self._current())
        del notes[index]
        self._commit(notes)
        logger.info("Deleted note %s (%d remaining)", note_id, len(notes))
