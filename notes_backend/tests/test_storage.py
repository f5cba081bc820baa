import json

import pytest

from local_notes.db import Base
from local_notes.errors import PersistenceFailure
from local_notes.schemas import Note
from local_notes.storage import NOTES_KEY


def test_ensure_initializes_absent_key(persistence):
    assert persistence.storage.get_item(NOTES_KEY) is None
    assert persistence.ensure() is True
    assert json.loads(persistence.storage.get_item(NOTES_KEY)) == []
    # second call leaves the slot alone
    assert persistence.ensure() is False


def test_load_absent_key_is_empty(persistence):
    assert persistence.load("missing") == []


def test_load_malformed_value_is_empty_and_untouched(persistence):
    persistence.storage.set_item(NOTES_KEY, "{not json")
    assert persistence.load() == []
    assert persistence.storage.get_item(NOTES_KEY) == "{not json"
    assert persistence.ensure() is False


@pytest.mark.parametrize("notes", [
    [],
    [Note(id="a", title="A", content="B")],
    [Note(id="2", title="second", content="x"), Note(id="1", title="first", content="ملاحظة")],
])
def test_save_then_load_round_trips(persistence, notes):
    persistence.save(NOTES_KEY, notes)
    assert persistence.load(NOTES_KEY) == notes


def test_stored_layout_is_plain_json_array(persistence):
    persistence.save(NOTES_KEY, [Note(id="n1", title="T", content="C")])
    assert json.loads(persistence.storage.get_item(NOTES_KEY)) == [{"id": "n1", "title": "T", "content": "C"}]


def test_legacy_timestamp_ids_load(persistence):
    legacy = '[{"id": "2021-03-04T10:11:12.000Z", "title": "old", "content": "note"}]'
    persistence.storage.set_item(NOTES_KEY, legacy)
    assert persistence.load() == [Note(id="2021-03-04T10:11:12.000Z", title="old", content="note")]


def test_unavailable_medium_raises_persistence_failure(persistence, session_factory):
    Base.metadata.drop_all(bind=session_factory.kw["bind"])
    with pytest.raises(PersistenceFailure):
        persistence.save(NOTES_KEY, [])
    with pytest.raises(PersistenceFailure):
        persistence.load()
