from typing import List, Sequence


class NotesError(Exception):
    """Base class for errors raised by the note lifecycle core."""


class ValidationFailure(NotesError):
    """A draft failed validation. Nothing was mutated."""

    def __init__(self, messages: Sequence[str]):
        self.messages: List[str] = list(messages)
        super().__init__("; ".join(self.messages))


class NoteNotFound(NotesError):
    """An operation referenced an id with no matching note."""

    def __init__(self, note_id: str):
        self.note_id = note_id
        super().__init__(f"Note not found: {note_id!r}")


class PersistenceFailure(NotesError):
    """Reading or writing the local storage slot failed."""
