"""
Persistence adapter: synchronous get/set of serialized values in local key-value storage.

The medium is the ``local_storage`` table. Notes live under a single key as a JSON
array of ``{id, title, content}`` objects in insertion order.
"""
import logging
from typing import List, Optional, Sequence

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from local_notes.errors import PersistenceFailure
from local_notes.models import StoredValue
from local_notes.schemas import Note, NoteList

logger = logging.getLogger(__name__)

NOTES_KEY = "notes"


class LocalStorage:
    """String slots keyed by name, one row per key."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def get_item(self, key: str) -> Optional[str]:
        """Return the raw value stored under ``key``, or None if the key is absent."""
        try:
            with self._session_factory() as db:
                row = db.get(StoredValue, key)
                return row.value if row is not None else None
        except SQLAlchemyError as exc:
            logger.exception("Failed reading storage key %r", key)
            raise PersistenceFailure(f"Could not read {key!r}") from exc

    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        try:
            with self._session_factory() as db:
                db.merge(StoredValue(key=key, value=value))
                db.commit()
        except SQLAlchemyError as exc:
            logger.exception("Failed writing storage key %r", key)
            raise PersistenceFailure(f"Could not write {key!r}") from exc


class NotesPersistence:
    """Loads and saves a whole notes collection under one storage key."""

    def __init__(self, storage: LocalStorage):
        self.storage = storage

    def ensure(self, key: str = NOTES_KEY) -> bool:
        """Initialize ``key`` to an empty collection if it is absent. Returns True if it wrote."""
        if self.storage.get_item(key) is not None:
            return False
        self.save(key, [])
        logger.info("Initialized empty notes collection under %r", key)
        return True

    def load(self, key: str = NOTES_KEY) -> List[Note]:
        """Return the stored collection; empty when the key is absent or malformed."""
        raw = self.storage.get_item(key)
        if raw is None:
            return []
        try:
            return NoteList.validate_json(raw)
        except ValidationError:
            logger.warning("Ignoring malformed notes value under %r", key)
            return []

    def save(self, key: str, notes: Sequence[Note]) -> None:
        """Write the full collection. Raises PersistenceFailure if the medium is unavailable."""
        self.storage.set_item(key, NoteList.dump_json(list(notes)).decode("utf-8"))
